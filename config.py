"""environment-driven settings for the dashboard"""
from dataclasses import dataclass
from typing import Optional
import logging
import os
from dotenv import load_dotenv

DEFAULT_PATIENT_COUNT = 50
DEFAULT_ALERT_COUNT = 15


def _get_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


@dataclass
class DashboardConfig:
    patient_count: int = DEFAULT_PATIENT_COUNT
    alert_count: int = DEFAULT_ALERT_COUNT
    seed: Optional[int] = None  # None -> fresh fixture every start
    auth_provider: str = "mock"
    host: str = "0.0.0.0"
    port: int = 5001
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "DashboardConfig":
        """read DASHBOARD_* variables (and a .env file if present)"""
        if dotenv:
            load_dotenv()
        return cls(
            patient_count=_get_int("DASHBOARD_PATIENT_COUNT", DEFAULT_PATIENT_COUNT),
            alert_count=_get_int("DASHBOARD_ALERT_COUNT", DEFAULT_ALERT_COUNT),
            seed=_get_int("DASHBOARD_SEED", None),
            auth_provider=os.getenv("DASHBOARD_AUTH_PROVIDER", "mock").lower(),
            host=os.getenv("DASHBOARD_HOST", "0.0.0.0"),
            port=_get_int("DASHBOARD_PORT", 5001),
            debug=_get_bool("DASHBOARD_DEBUG", False),
            log_level=os.getenv("DASHBOARD_LOG_LEVEL", "INFO").upper()
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
