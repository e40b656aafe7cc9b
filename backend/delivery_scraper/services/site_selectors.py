"""Selector mappings for the delivery-aggregator's restaurant pages.

Each list is tried in order, most specific first. The site's markup changes
without notice, so every list ends with a generic fallback.
"""

SITE_SELECTORS = {
    "search_input": [
        "input[data-testid='search-input']",
        "input[data-test='search-input']",
        "input[name='search']",
        "input[type='search']",
        "input[placeholder*='Search' i]",
        "input[aria-label*='Search' i]",
        "[role='searchbox']"
    ],
    "restaurant_card": [
        ("testid", "[data-testid='RESTAURANT_CARD'], [data-testid='restaurant-card']"),
        ("data_attribute", "[data-test*='restaurant-card'], [data-restaurant-id]"),
        ("class", ".restaurant-card, .vendor-card"),
        ("restaurant_link", "li a[href*='/restaurant/'], div[role='listitem'] a[href*='/restaurant/']"),
        ("generic", "[class*='restaurant']")
    ],
    "restaurant_name": [
        "[data-testid='RESTAURANT_NAME']",
        "[data-testid='restaurant-name']",
        "[class*='name']",
        "h3",
        "h4",
        "h2"
    ],
    "restaurant_item": [
        "[data-testid='RESTAURANT_CUISINES']",
        "[class*='cuisine']",
        "[class*='tagline']",
        "[class*='description']"
    ],
    "restaurant_price": [
        "[data-testid='RESTAURANT_PRICE']",
        "[class*='min-order']",
        "[class*='price']"
    ],
    "restaurant_rating": [
        "[data-testid='RESTAURANT_RATING']",
        "[aria-label*='rating' i]",
        "[class*='rating']"
    ],
    "restaurant_link": [
        "a[href*='/restaurant/']",
        "a[href]"
    ]
}

def get_selectors(kind: str) -> list:
    """Get the ordered selector list for one kind of element."""
    return SITE_SELECTORS.get(kind, [])
