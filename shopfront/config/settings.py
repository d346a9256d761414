# shopfront/config/settings.py

"""Central configuration for the shopfront client."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the shopfront client."""

    # --- Remote API ---
    API_BASE_URL: str = os.getenv(
        "SHOPFRONT_API_URL", "https://dummyjson.com"
    ).rstrip("/")
    CONNECT_TIMEOUT: float = 5.0        # Seconds to establish a connection
    RESPONSE_TIMEOUT: float = 15.0      # Seconds to wait for a response
    TOKEN_EXPIRES_MINS: int = 60        # Requested access token lifetime
    CATALOG_PAGE_LIMIT: int = 30        # Products per /products call

    # --- Health ---
    HEALTH_SLOW_MS: float = 3000.0      # Latency above this is "slow"

    # --- Transport ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("SHOPFRONT_DATA_DIR", str(BASE_DIR / "data"))
    )
    LOGS_DIR: Path = BASE_DIR / "logs"
    TOKEN_STORE_PATH: Path = DATA_DIR / "session.json"

    # --- Persistence keys ---
    TOKEN_KEY: str = "auth_token"
    REFRESH_TOKEN_KEY: str = "refresh_token"
