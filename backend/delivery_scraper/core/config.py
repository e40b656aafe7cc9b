from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8080
    cors_allow_origins: List[str] = ["*"]
    rate_limit_window_seconds: float = 15.0

    # Target Site Configuration
    platform: str = "talabat"
    base_url: str = "https://www.talabat.com"
    region: str = "uae"
    default_location: str = "Dubai"

    # Browser Configuration
    headless: bool = True
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    locale: str = "en-US"
    default_timeout_ms: int = 10000
    navigation_timeout_ms: int = 15000

    # Scrape Pipeline Configuration
    scrape_deadline_seconds: float = 28.0  # leaves a buffer under the HTTP layer's 30s
    search_probe_timeout_ms: int = 3000
    network_idle_timeout_ms: int = 5000
    settle_delay_ms: int = 2000
    card_scan_limit: int = 120
    default_max_results: int = 5
    max_results_limit: int = 50
    max_delivery_fee: float = 10.0

    # Logging Configuration
    log_level: str = "INFO"
    log_file: str = ""  # e.g. logs/app.log; console only when empty

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def restaurants_url(self) -> str:
        """Landing page listing restaurants for the configured region."""
        return f"{self.base_url.rstrip('/')}/{self.region}/restaurants"

settings = Settings()
