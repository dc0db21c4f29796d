"""Application configuration using pydantic-settings."""

import logging
import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from simple_handshake.exceptions import KeyConfigError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    prefixed with HANDSHAKE_ (e.g., HANDSHAKE_SERIAL_PORT).
    """

    serial_port: str = "/dev/ttyUSB0"
    serial_baud: int = 115200
    serial_timeout: float = 1.0
    response_timeout: float = 5.0
    keys_file: str = "keys.json"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="HANDSHAKE_")

    @property
    def keys_path(self) -> Path:
        """Path to the JSON file holding the XOR key pair."""
        return Path(self.keys_file)


class XorKeys(BaseModel):
    """XOR key pair as stored in the key file."""

    xor1: int = Field(..., alias="XOR1", ge=0, le=255, description="First key byte")
    xor2: int = Field(..., alias="XOR2", ge=0, le=255, description="Second key byte")

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        json_schema_extra={"example": {"XOR1": 90, "XOR2": 165}},
    )


def load_xor_keys(path: str | Path) -> XorKeys:
    """
    Load the XOR key pair from a JSON file.

    The file holds a single object with integer fields ``XOR1`` and ``XOR2``.

    Args:
        path: Key file location

    Returns:
        Parsed key pair

    Raises:
        KeyConfigError: If the file cannot be read or does not hold two key bytes
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise KeyConfigError(f"Cannot read key file {path}: {e}") from e

    try:
        keys = XorKeys.model_validate_json(raw)
    except ValidationError as e:
        raise KeyConfigError(f"Invalid key file {path}: {e}") from e

    logger.debug("Loaded XOR keys from %s", path)
    return keys


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
