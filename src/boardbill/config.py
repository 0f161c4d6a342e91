"""Configuration management for boardbill."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.invoice import Rates

logger = logging.getLogger(__name__)

BOARDBILL_HOME = Path(os.environ.get("BOARDBILL_HOME", Path.home() / "boardbill"))
CONFIG_FILE = BOARDBILL_HOME / "config" / "boardbill.conf"


@dataclass
class Config:
    """boardbill configuration."""

    trello_api_key: str = ""
    trello_token: str = ""
    request_timeout: float = 30.0
    default_rates: dict[str, float] = field(
        default_factory=lambda: {"t1": 0.0, "t2": 0.0, "t3": 0.0, "t4": 0.0, "t5": 0.0}
    )

    @property
    def has_credentials(self) -> bool:
        return bool(self.trello_api_key and self.trello_token)

    def rates(self) -> Rates:
        """Default rates as a Rates value."""
        return Rates(**self.default_rates)


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from unquoted values."""
    if value.startswith('"'):
        end_quote = value.find('"', 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if value.startswith("'"):
        end_quote = value.find("'", 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _parse_float(key: str, value: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring {key.upper()}: not a number ({value!r})")
        return None


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from boardbill.conf, then apply environment overrides."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                logger.warning(f"Ignoring config line without '=': {line!r}")
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "trello_api_key":
                    config.trello_api_key = value
                case "trello_token":
                    config.trello_token = value
                case "request_timeout":
                    timeout = _parse_float(key, value)
                    if timeout is not None and timeout > 0:
                        config.request_timeout = timeout
                case "default_rate_t1" | "default_rate_t2" | "default_rate_t3" | "default_rate_t4" | "default_rate_t5":
                    rate = _parse_float(key, value)
                    if rate is not None:
                        config.default_rates[key.removeprefix("default_rate_")] = rate
                case _:
                    logger.debug(f"Unknown config key: {key}")

    # Environment wins over the file
    config.trello_api_key = os.environ.get("TRELLO_API_KEY", config.trello_api_key)
    config.trello_token = os.environ.get("TRELLO_TOKEN", config.trello_token)

    return config
