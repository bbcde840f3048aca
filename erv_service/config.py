"""
Configuration settings for the ERV calculation engine
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Configuration class for the calculation engine"""

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Lookup policy: strict rejects unknown ERV models, unit models and locations
    STRICT_MODE: bool = _env_flag("ERV_STRICT_MODE", "False")
    DEFAULT_ERV_MODEL: str = os.getenv("ERV_DEFAULT_MODEL", "ERC-4132C-4M")

    # Outdoor airflow validation window (CFM)
    ENFORCE_CFM_RANGE: bool = _env_flag("ERV_ENFORCE_CFM_RANGE", "True")
    MIN_CFM: float = float(os.getenv("ERV_MIN_CFM", "500"))
    MAX_CFM: float = float(os.getenv("ERV_MAX_CFM", "10000"))

    # Drive sizing
    DYNAMIC_DRIVE_SIZING: bool = _env_flag("ERV_DYNAMIC_DRIVE_SIZING", "False")
    MOTOR_RPM: float = float(os.getenv("ERV_MOTOR_RPM", "1725"))
    DRIVE_CENTER_DISTANCE_IN: float = float(os.getenv("ERV_DRIVE_CENTER_DISTANCE_IN", "6.5"))

    @classmethod
    def validate(cls) -> bool:
        """Validate configuration"""
        ok = True
        if cls.MIN_CFM <= 0 or cls.MAX_CFM <= cls.MIN_CFM:
            logger.warning("ERV_MIN_CFM/ERV_MAX_CFM window is invalid: %s..%s", cls.MIN_CFM, cls.MAX_CFM)
            ok = False
        if cls.MOTOR_RPM <= 0:
            logger.warning("ERV_MOTOR_RPM must be positive, got %s", cls.MOTOR_RPM)
            ok = False
        if cls.DRIVE_CENTER_DISTANCE_IN <= 0:
            logger.warning("ERV_DRIVE_CENTER_DISTANCE_IN must be positive, got %s", cls.DRIVE_CENTER_DISTANCE_IN)
            ok = False
        return ok


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging for hosts embedding the engine."""
    logging.basicConfig(level=(level or Config.LOG_LEVEL).upper(), format=LOG_FORMAT)


# Validate configuration on import
config = Config()
config.validate()
