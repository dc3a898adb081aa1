import os
from dotenv import load_dotenv


class Settings:
    def __init__(self) -> None:
        # Load variables from .env into environment
        load_dotenv()
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "changeme")
        self.JWT_EXPIRES_DAYS: int = int(os.getenv("JWT_EXPIRES_DAYS", "30"))
        self.MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
        self.MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME", "sitepunch")
        self.MONGODB_TIMEOUT_MS: int = int(os.getenv("MONGODB_TIMEOUT_MS", "10000"))
        # Trailing pay period window, not calendar aligned
        self.PAY_PERIOD_DAYS: int = int(os.getenv("PAY_PERIOD_DAYS", "14"))
        self.OVERTIME_THRESHOLD_HOURS: float = float(os.getenv("OVERTIME_THRESHOLD_HOURS", "40"))
        self.OVERTIME_WARNING_MARGIN_HOURS: float = float(os.getenv("OVERTIME_WARNING_MARGIN_HOURS", "5"))
        self.ENTRIES_DEFAULT_LIMIT: int = int(os.getenv("ENTRIES_DEFAULT_LIMIT", "50"))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
        # Optional comma-separated list of allowed origins for CORS
        self.ALLOWED_ORIGINS: list[str] = [
            o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()
        ]


settings = Settings()
