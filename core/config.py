"""
Configuration Management Module

This module handles loading, validating, and providing access to the
sampler configuration:

- Runtime settings from environment variables (.env file), via
  Pydantic Settings for validation and type conversion.
- The static exchange descriptor file (ws_details.json): exactly three
  ExchangeConfig records in fixed order (Binance, Coinbase, OKX).

Usage:
    from core.config import settings, load_exchange_configs

    print(settings.sample_interval_seconds)
    configs = load_exchange_configs(settings.ws_details_path)
"""

import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError
from core.schemas import ExchangeConfig


class Settings(BaseSettings):
    """
    Application Settings

    Values are automatically loaded from environment variables or .env file.

    Attributes:
        ws_details_path: Path of the exchange configuration JSON file
        snapshot_path: Where the finalized snapshot is written (and read back)
        sample_interval_seconds: Timer period; the window closes on the second tick
        ws_heartbeat_seconds: aiohttp ping interval (None disables heartbeats)
        log_level: Logging level
    """

    # ============================================
    # Files
    # ============================================

    ws_details_path: str = Field(
        default="ws_details.json",
        description="Exchange configuration file (list of name/ws_base_url/req_param)"
    )

    snapshot_path: str = Field(
        default="exchanges.json",
        description="Output file for the aggregated snapshot"
    )

    # ============================================
    # Sampling
    # ============================================

    sample_interval_seconds: float = Field(
        default=10.0,
        description="Timer period in seconds"
    )

    ws_heartbeat_seconds: Optional[float] = Field(
        default=None,
        description="WebSocket ping interval in seconds (unset = no heartbeat)"
    )

    # ============================================
    # Logging
    # ============================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False
    )


# ============================================
# Global Settings Instance
# ============================================

settings = Settings()


VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_configuration(config: Optional[Settings] = None) -> None:
    """
    Validate settings before a run starts.

    Args:
        config: Settings to check (defaults to the global instance)

    Raises:
        ConfigurationError: If a value is out of range
    """
    # logging.py imports config.py, so we can't import at module level
    from core.logging import logger

    config = config or settings

    if config.sample_interval_seconds <= 0:
        raise ConfigurationError(
            f"Invalid SAMPLE_INTERVAL_SECONDS: {config.sample_interval_seconds}. Must be positive"
        )

    if config.ws_heartbeat_seconds is not None and config.ws_heartbeat_seconds <= 0:
        raise ConfigurationError(
            f"Invalid WS_HEARTBEAT_SECONDS: {config.ws_heartbeat_seconds}. Must be positive"
        )

    if config.log_level.upper() not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid LOG_LEVEL: '{config.log_level}'. "
            f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    logger.info("Configuration validated successfully")
    logger.info(f"Exchange config: {config.ws_details_path}")
    logger.info(f"Snapshot file: {config.snapshot_path}")
    logger.info(f"Sample interval: {config.sample_interval_seconds}s")


# ============================================
# Exchange Configuration File
# ============================================

_exchange_configs_adapter = TypeAdapter(List[ExchangeConfig])


def load_exchange_configs(path: Union[str, Path]) -> List[ExchangeConfig]:
    """
    Read the exchange configuration file.

    Args:
        path: JSON file holding a list of {name, ws_base_url, req_param}

    Returns:
        List[ExchangeConfig]: Records in file order

    Raises:
        ConfigurationError: If the file is missing, not JSON, or not the expected shape

    Example:
        >>> configs = load_exchange_configs("ws_details.json")
        >>> [c.name for c in configs]
        ['binance', 'coinbase', 'okx']
    """
    path = Path(path)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"Exchange config file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Exchange config file is not valid JSON: {path}: {e}") from e

    try:
        return _exchange_configs_adapter.validate_python(raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Exchange config file has an invalid shape: {path}",
            context={"errors": e.errors()}
        ) from e
