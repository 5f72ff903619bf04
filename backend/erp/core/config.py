"""Application configuration loaded from environment variables."""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings:
    # SQLite DB URL
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL", f"sqlite:///{BASE_DIR / 'erp.db'}"
    )

    # API server
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "logs/app.log")

    # CORS
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv(
            "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
        ).split(",")
    ]

    # System ledgers the posting rules credit/debit, resolved by name
    SALES_ACCOUNT_NAME: str = os.getenv("SALES_ACCOUNT_NAME", "Sales Account")
    PURCHASE_ACCOUNT_NAME: str = os.getenv("PURCHASE_ACCOUNT_NAME", "Purchase Account")
    OUTPUT_GST_ACCOUNT_NAME: str = os.getenv("OUTPUT_GST_ACCOUNT_NAME", "Output GST")
    INPUT_GST_ACCOUNT_NAME: str = os.getenv("INPUT_GST_ACCOUNT_NAME", "Input GST")

    # Create the default chart of accounts when the app starts
    SEED_ON_STARTUP: bool = os.getenv("SEED_ON_STARTUP", "false").lower() == "true"


settings = Settings()
