"""Shared test fixtures."""

import json

import pytest

from premo.models import PredictionResult

CONFIG_ENV = [
    "PREMO_API_KEY",
    "PREMO_BASE_URL",
    "PREMO_MODEL",
    "PREMO_TEMPERATURE",
    "PREMO_LOG_LEVEL",
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
]

HIT_PAYLOAD = {
    "successScore": 72,
    "successLevel": "Hit",
    "reasoning": "Solid genre hook with a bankable lead.",
    "strengths": ["a", "b"],
    "weaknesses": ["c"],
    "estimatedBoxOffice": "$10M-$20M",
    "targetAudience": "Teens",
    "comparableMovies": ["X", "Y"],
}


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clean_env(monkeypatch):
    for name in CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def hit_result():
    return PredictionResult.model_validate_json(json.dumps(HIT_PAYLOAD))
