from dataclasses import dataclass
import os
from dotenv import load_dotenv
from typing import Optional

load_dotenv()


@dataclass
class Settings:
    data_dir: str = os.getenv("DENTSCAN_DATA_DIR", ".cache/scans")
    store_backend: str = os.getenv("DENTSCAN_STORE", "json").lower()

    classifier_url: Optional[str] = os.getenv("CLASSIFIER_URL") or None
    classifier_timeout: float = float(os.getenv("CLASSIFIER_TIMEOUT", "30"))

    timezone: str = os.getenv("DENTSCAN_TIMEZONE", "UTC")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
