"""Box-office forecast requests against the configured chat model."""

from __future__ import annotations

import json
import textwrap
from typing import Any, Dict, List

from loguru import logger
from pydantic import ValidationError

from ..errors import PredictionError
from ..models import MovieInput, PredictionResult, SuccessLevel
from .openai_client import OpenAIClient, extract_content

SYSTEM_INSTRUCTION = (
    "You are a veteran Hollywood box office analyst and AI script consultant. "
    "You provide critical, data-driven, and slightly cynical predictions about movie success."
)

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "successScore": {
            "type": "integer",
            "description": "A score from 0 to 100 representing probability of commercial success.",
        },
        "successLevel": {
            "type": "string",
            "enum": SuccessLevel.labels(),
        },
        "reasoning": {
            "type": "string",
            "description": "A detailed paragraph explaining why this prediction was made.",
        },
        "strengths": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of 3-5 key selling points.",
        },
        "weaknesses": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of 3-5 potential pitfalls.",
        },
        "estimatedBoxOffice": {
            "type": "string",
            "description": "A predicted range for global box office gross (e.g. '$50M - $80M').",
        },
        "targetAudience": {
            "type": "string",
            "description": "Description of the primary demographic.",
        },
        "comparableMovies": {
            "type": "array",
            "items": {"type": "string"},
            "description": "List of 3 similar movies for comparison.",
        },
    },
    "required": [
        "successScore",
        "successLevel",
        "reasoning",
        "strengths",
        "weaknesses",
        "estimatedBoxOffice",
        "targetAudience",
        "comparableMovies",
    ],
    "additionalProperties": False,
}

RESPONSE_FORMAT: Dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": "movie_success_prediction",
        "strict": True,
        "schema": RESPONSE_SCHEMA,
    },
}


PROMPT_TEMPLATE = textwrap.dedent(
    """
    Analyze the potential success of the following movie project based on historical trends, star power, genre popularity, and premise.

    Movie Title: {title}
    Director: {director}
    Main Cast: {actors}
    Genre: {genre}
    Estimated Budget: {budget}
    Synopsis/Premise: {synopsis}

    Predict the success level, provide a score from 0-100 (where 100 is a guaranteed global phenomenon), list strengths and weaknesses, estimate box office potential (imaginative but grounded), and identify the target audience.
    """
).strip()


def build_prompt(movie: MovieInput) -> str:
    return PROMPT_TEMPLATE.format(**movie.to_dict())


def build_messages(movie: MovieInput) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_INSTRUCTION},
        {"role": "user", "content": build_prompt(movie)},
    ]


def parse_prediction(text: str) -> PredictionResult:
    """Decode the service reply into a PredictionResult.

    Raises ValueError for empty bodies, malformed JSON and non-object
    payloads, and pydantic's ValidationError for shape mismatches.
    """
    if not text or not text.strip():
        raise ValueError("No response text from prediction service.")
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}.")
    return PredictionResult.model_validate_json(text)


class MoviePredictor:
    """Sends one forecast request per call. No retries."""

    def __init__(self, ai_client: OpenAIClient, model: str | None = None, temperature: float | None = None):
        self._ai_client = ai_client
        self._model = model
        self._temperature = temperature

    @property
    def demo_mode(self) -> bool:
        return self._ai_client.demo_mode

    def predict(self, movie: MovieInput) -> PredictionResult:
        kwargs: Dict[str, Any] = {"response_format": RESPONSE_FORMAT}
        if self._temperature is not None:
            kwargs["temperature"] = self._temperature

        try:
            resp = self._ai_client.chat(build_messages(movie), model=self._model, **kwargs)
            result = parse_prediction(extract_content(resp))
        except json.JSONDecodeError as exc:
            logger.error("Prediction response was not valid JSON: {}", exc)
            raise PredictionError() from exc
        except ValidationError as exc:
            logger.error("Prediction response did not match schema: {}", exc)
            raise PredictionError() from exc
        except Exception as exc:
            logger.error("Prediction request failed: {}", exc)
            raise PredictionError() from exc

        logger.info(
            "Forecast for '{}': {} ({})", movie.title, result.success_score, result.success_level.value
        )
        return result
