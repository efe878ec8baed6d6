# =============================================================================
# core/config.py  —  Runtime Settings
# =============================================================================
#
# Settings come from environment variables (main.py calls load_dotenv()
# first, so a local .env file works too).
#
# API KEYS ARE NOT SETTINGS:
#   GOOGLE_API_KEY and PERPLEXITY_API_KEY are read by the provider adapters
#   at call time.  They are never defaulted, cached, or printed here.
# =============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.errors import ConfigurationError
from core.models import ProviderConfig
from core.profiles import GEMINI_DEFAULT_MODEL, PERPLEXITY_TIMEOUT_SECONDS, gemini_config, perplexity_config


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 3000
    path: str = "/stream"
    log_level: str = "INFO"
    gemini_model: str = GEMINI_DEFAULT_MODEL
    gemini_timeout_seconds: Optional[float] = None
    perplexity_timeout_seconds: Optional[float] = PERPLEXITY_TIMEOUT_SECONDS

    def gemini(self) -> ProviderConfig:
        return gemini_config(model=self.gemini_model, timeout_seconds=self.gemini_timeout_seconds)

    def perplexity(self) -> ProviderConfig:
        return perplexity_config(timeout_seconds=self.perplexity_timeout_seconds)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``environ`` (defaults to ``os.environ``).

    Raises:
        ConfigurationError: if a variable is present but cannot be parsed.
    """
    env = os.environ if environ is None else environ
    defaults = Settings()
    return Settings(
        host=env.get("DEEP_RESEARCH_HOST", defaults.host),
        port=_parse_int(env, "DEEP_RESEARCH_PORT", defaults.port),
        path=env.get("DEEP_RESEARCH_PATH", defaults.path),
        log_level=_parse_log_level(env, "LOG_LEVEL", defaults.log_level),
        gemini_model=env.get("GEMINI_MODEL") or defaults.gemini_model,
        gemini_timeout_seconds=_parse_seconds(env, "GEMINI_TIMEOUT_SECONDS", defaults.gemini_timeout_seconds),
        perplexity_timeout_seconds=_parse_seconds(
            env, "PERPLEXITY_TIMEOUT_SECONDS", defaults.perplexity_timeout_seconds
        ),
    )


def _parse_log_level(env: Mapping[str, str], name: str, default: str) -> str:
    level = (env.get(name) or default).strip().upper()
    # getLevelName maps known names to ints and echoes unknown ones back.
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"{name} must be a logging level name, got {level!r}")
    return level


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _parse_seconds(env: Mapping[str, str], name: str, default: Optional[float]) -> Optional[float]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        seconds = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from None
    if seconds <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return seconds
