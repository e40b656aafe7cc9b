"""Find the repeated restaurant cards on a rendered results page."""

from dataclasses import dataclass
from typing import Any, List, Protocol, Sequence, Tuple
from urllib.parse import urlsplit

from delivery_scraper.core.logger import logger
from delivery_scraper.services.site_selectors import get_selectors


class Selectable(Protocol):
    """Anything that can be queried with CSS selectors (a BeautifulSoup ``Tag``, for one)."""

    def select(self, selector: str) -> Sequence[Any]: ...


@dataclass(frozen=True)
class CardStrategy:
    """One way of finding cards: a selector plus how to turn matches into cards."""

    name: str
    selector: str
    use_parent: bool = False
    outermost_only: bool = False

    def find(self, document: Selectable) -> List[Any]:
        matches = list(document.select(self.selector))
        if self.use_parent:
            # A matched link stands for the block that wraps it
            matches = [match.parent if getattr(match, "parent", None) is not None else match for match in matches]
        matches = _unique(matches)
        if self.outermost_only:
            matches = _outermost([m for m in matches if not _holds_several_cards(m)])
        return matches


def _unique(elements: Sequence[Any]) -> List[Any]:
    seen = set()
    unique = []
    for element in elements:
        if id(element) in seen:
            continue
        seen.add(id(element))
        unique.append(element)
    return unique


def _link_path(href: Any) -> str:
    if not href:
        return ""
    return urlsplit(str(href).strip()).path.rstrip("/")


def _holds_several_cards(element: Any) -> bool:
    """
    True for list wrappers, which link to several unrelated destinations.

    A card may also link below its own page (reviews, menu), so paths that
    extend another linked path count as the same destination.
    """
    paths = sorted({path for path in (_link_path(link.get("href")) for link in element.select("a[href]")) if path})
    roots: List[str] = []
    for path in paths:
        # Sorted, so a path always comes after its prefixes
        if not any(path == root or path.startswith(root + "/") for root in roots):
            roots.append(path)
    return len(roots) > 1


def _outermost(elements: List[Any]) -> List[Any]:
    """Drop matches nested inside another match so a card is never counted twice."""
    ids = {id(element) for element in elements}
    outer = []
    for element in elements:
        parent = getattr(element, "parent", None)
        while parent is not None and id(parent) not in ids:
            parent = getattr(parent, "parent", None)
        if parent is None:
            outer.append(element)
    return outer


CARD_STRATEGIES: List[CardStrategy] = [
    CardStrategy(
        name,
        selector,
        use_parent=name == "restaurant_link",
        outermost_only=name in ("restaurant_link", "generic"),
    )
    for name, selector in get_selectors("restaurant_card")
]


def locate_cards(
    document: Selectable,
    scan_limit: int,
    strategies: Sequence[CardStrategy] = CARD_STRATEGIES,
) -> Tuple[str, List[Any]]:
    """
    Return the cards found by the first strategy with at least one match.

    Args:
        document: Parsed page (or any element) to search
        scan_limit: Maximum number of cards returned
        strategies: Ordered strategies, most specific first

    Returns:
        (strategy name, cards), or ("none", []) when nothing matched
    """
    for strategy in strategies:
        cards = strategy.find(document)
        if not cards:
            continue
        logger.debug(
            f"Card strategy '{strategy.name}' matched {len(cards)} elements",
            extra={"strategy": strategy.name, "count": len(cards)}
        )
        return strategy.name, cards[:scan_limit]

    return "none", []
