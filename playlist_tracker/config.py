import os

from dotenv import load_dotenv


class Config:
    def __init__(self, env_file=None):
        """
        Initialize configuration by loading environment variables and setting default attributes.

        Loads environment variables from the provided .env file path when `env_file` is given; otherwise loads from the default environment. After loading, sets the YouTube credentials, catalog proxy settings, tracking timings, storage location and web app settings using environment values with sensible defaults.
        Parameters:
            env_file (str | None): Optional path to a .env file to load environment variables from. If omitted, the default environment or default .env discovery is used.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        # YouTube Data API v3 key; checked when a playlist is fetched, not at startup
        self.YOUTUBE_API_KEY = os.getenv("YOUTUBE_API_KEY", "")

        # Optional catalog proxy (POST {"playlistId"} -> catalog payload)
        proxy_url = os.getenv("CATALOG_PROXY_URL", "")
        if proxy_url and not proxy_url.lower().startswith(("http://", "https://")):
            raise ValueError(
                f"CATALOG_PROXY_URL must start with http:// or https://, got: {proxy_url}"
            )
        self.CATALOG_PROXY_URL = proxy_url
        self.CATALOG_PROXY_TIMEOUT = float(os.getenv("CATALOG_PROXY_TIMEOUT", "30"))

        # Progress tracking
        self.PROGRESS_POLL_INTERVAL = float(os.getenv("PROGRESS_POLL_INTERVAL", "1.0"))
        self.AUTO_ADVANCE_DELAY = float(os.getenv("AUTO_ADVANCE_DELAY", "1.0"))
        # Fraction of a video that must be watched before it counts as done
        self.COMPLETION_THRESHOLD = float(os.getenv("COMPLETION_THRESHOLD", "0.9"))
        if not 0 < self.COMPLETION_THRESHOLD <= 1:
            raise ValueError(
                f"COMPLETION_THRESHOLD must be in (0, 1], got {self.COMPLETION_THRESHOLD}"
            )
        self.HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "5"))
        if self.HISTORY_LIMIT < 1:
            raise ValueError(f"HISTORY_LIMIT must be at least 1, got {self.HISTORY_LIMIT}")

        # Nav bar hides after this many seconds without user activity
        self.NAV_HIDE_DELAY = float(os.getenv("NAV_HIDE_DELAY", "4.0"))

        # Database configuration (progress and history records)
        self.DATABASE_URL = os.getenv(
            "DATABASE_URL", "sqlite:///./playlist_tracker.db"
        )
        self.DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "3"))
        self.DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "2"))
        self.DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

        # Web application configuration
        self.WEB_ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*")
        self.WEB_PORT = int(os.getenv("PORT", "8080"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def uses_proxy(self) -> bool:
        '''Whether catalogs are fetched through the catalog proxy.'''
        return bool(self.CATALOG_PROXY_URL)

    def allowed_origins(self):
        '''CORS origins as a list.'''
        if self.WEB_ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.WEB_ALLOWED_ORIGINS.split(",") if origin.strip()]
