"""Backend application factory.

Returns a small dependency container (a dict) that the Streamlit UI pulls
its AI client and predictor from.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from loguru import logger

from .ai.demo import demo_responder
from .ai.openai_client import DEFAULT_BASE_URL, DEFAULT_CHAT_MODEL, OpenAIClient
from .ai.predictor import MoviePredictor
from .errors import ConfigurationError

# Ensure local `.env` values are available when running via Streamlit/CLI.
load_dotenv(Path(__file__).resolve().parents[2] / ".env", override=False)

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

_logging_configured = False


def _read_env(*names: str) -> str | None:
    """Return the first non-blank value among `names`."""
    for name in names:
        value = os.getenv(name)
        if value is None:
            continue
        value = value.strip()
        if value:
            return value
    return None


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_CHAT_MODEL
    temperature: float | None = None
    log_level: str = "INFO"


def load_settings() -> Settings:
    log_level = (_read_env("PREMO_LOG_LEVEL") or "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(f"PREMO_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

    raw_temperature = _read_env("PREMO_TEMPERATURE")
    temperature = None
    if raw_temperature is not None:
        try:
            temperature = float(raw_temperature)
        except ValueError as exc:
            raise ConfigurationError(f"PREMO_TEMPERATURE is not a number: {raw_temperature!r}") from exc

    return Settings(
        api_key=_read_env("PREMO_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY"),
        base_url=_read_env("PREMO_BASE_URL", "OPENAI_BASE_URL") or DEFAULT_BASE_URL,
        model=_read_env("PREMO_MODEL") or DEFAULT_CHAT_MODEL,
        temperature=temperature,
        log_level=log_level,
    )


def configure_logging(level: str) -> None:
    global _logging_configured
    if _logging_configured:
        return
    logger.remove()
    logger.add(sys.stderr, level=level, format="{time:HH:mm:ss} | {level: <8} | {name}:{line} - {message}")
    _logging_configured = True


def create_app(settings: Settings | None = None) -> Dict[str, Any]:
    """Create the backend dependency container."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    ai_client = OpenAIClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        default_chat_model=settings.model,
        demo_responder=demo_responder,
    )
    if ai_client.demo_mode:
        logger.warning("No PREMO_API_KEY set - forecasts run in offline demo mode")
    else:
        logger.info("Forecasts use {} at {}", ai_client.default_chat_model, ai_client.base_url)

    return {
        "settings": settings,
        "ai_client": ai_client,
        "predictor": MoviePredictor(ai_client, temperature=settings.temperature),
    }
