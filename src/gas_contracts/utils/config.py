# src/gas_contracts/utils/config.py
"""
Application settings, read from the environment and the project .env file.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from project root
BASE_DIR = Path(__file__).resolve().parents[3]
load_dotenv(BASE_DIR / ".env")


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_ignore_empty=True, extra="ignore")

    # CSV exports of the application tables (units, contracts, entries...)
    data_dir: Path = Path("data")
    output_dir: Path = Path("output/reports")

    # Day boundaries are computed in the organization's local time
    organization_timezone: str = "America/Sao_Paulo"

    # Dashboard indicator turns yellow inside the last 5% of a tolerance band
    tolerance_proximity_ratio: float = 0.05

    # Used by scheduling accuracy when a unit has no contract tolerance
    accuracy_default_tolerance_percent: float = 10.0

    # QDP vs QDR deviation (absolute %) above which an alert is raised
    deviation_alert_threshold_percent: float = 10.0

    # Logging
    log_dir: Path = Path("logs")
    log_file: Optional[Path] = None     # None = <log_dir>/gas_contracts.log
    log_level: str = "INFO"
    console_log_level: str = "WARNING"

    @property
    def log_path(self) -> Path:
        return self.log_file or self.log_dir / "gas_contracts.log"

    def __repr__(self):
        return f"<AppConfig data_dir={self.data_dir} tz={self.organization_timezone}>"


# Singleton
config = AppConfig()
