"""Offline forecast used when no API key is configured.

The demo client answers chat requests with a deterministic JSON forecast
built from the prompt, so the normal parse path runs unchanged.
"""

from __future__ import annotations

import json
import random
import re
import zlib
from typing import Dict, List

from ..models import SuccessLevel

_FIELD_LABELS = {
    "title": "Movie Title",
    "director": "Director",
    "actors": "Main Cast",
    "genre": "Genre",
    "budget": "Estimated Budget",
    "synopsis": "Synopsis/Premise",
}

STRENGTH_POOL = [
    "Clear, marketable premise that trailers can sell in one beat",
    "Genre with a dependable overseas audience",
    "Cast recognition gives the campaign a face",
    "Director with a distinctive visual signature",
    "Strong word-of-mouth potential if the third act lands",
    "Franchise or sequel hooks for the studio",
]
WEAKNESS_POOL = [
    "Crowded release window against tentpole competition",
    "Budget leaves little margin if opening weekend underperforms",
    "Premise risks feeling derivative of recent hits",
    "Tone may split critics and general audiences",
    "Thin star power outside the domestic market",
    "Synopsis lacks a clear emotional hook",
]
COMPARABLE_POOL = [
    "Inception",
    "Mad Max: Fury Road",
    "Get Out",
    "La La Land",
    "Knives Out",
    "Arrival",
    "John Wick",
    "Everything Everywhere All at Once",
]
AUDIENCES = [
    "Adults 18-34 who track genre releases and opening-weekend buzz",
    "Broad four-quadrant family audience",
    "Older arthouse and awards-season moviegoers",
    "Teen and young-adult streaming-first viewers",
]


def _seed_for(*parts: str) -> int:
    key = "|".join(parts).strip().lower()
    return zlib.crc32(key.encode("utf-8"))


def _parse_fields(prompt: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for name, label in _FIELD_LABELS.items():
        match = re.search(rf"^\s*{re.escape(label)}:[ \t]*(.*)$", prompt, re.MULTILINE)
        values[name] = match.group(1).strip() if match else ""
    return values


def _budget_millions(budget: str) -> float | None:
    match = re.search(r"(\d+(?:\.\d+)?)\s*([mMbBkK]?)", budget.replace(",", ""))
    if not match:
        return None
    amount = float(match.group(1))
    unit = match.group(2).lower()
    if unit == "b":
        return amount * 1000
    if unit == "k":
        return amount / 1000
    if unit == "m" or amount < 10_000:
        return amount
    return amount / 1_000_000


def level_for_score(score: int) -> SuccessLevel:
    if score >= 80:
        return SuccessLevel.BLOCKBUSTER
    if score >= 60:
        return SuccessLevel.HIT
    if score >= 40:
        return SuccessLevel.MODERATE
    return SuccessLevel.FLOP


def demo_forecast(fields: Dict[str, str]) -> Dict[str, object]:
    rng = random.Random(_seed_for(*(fields.get(name, "") for name in _FIELD_LABELS)))

    score = rng.randint(30, 78)
    if fields.get("actors"):
        score += 6
    if len(fields.get("synopsis", "")) > 120:
        score += 4
    score = max(0, min(100, score))

    budget = _budget_millions(fields.get("budget", "")) or float(rng.choice([15, 40, 90]))
    multiplier = 0.6 + score / 40
    low = max(1, int(budget * multiplier * 0.8))
    high = max(low + 1, int(budget * multiplier * 1.3))

    title = fields.get("title") or "This project"
    genre = (fields.get("genre") or "genre").lower()
    return {
        "successScore": score,
        "successLevel": level_for_score(score).value,
        "reasoning": (
            f"{title} is an offline estimate, not a live model read. As a {genre} release "
            f"it lands at {score}/100: the premise is workable, but box-office outcomes here "
            "hinge on execution, release timing, and how hard the campaign can push the cast."
        ),
        "strengths": rng.sample(STRENGTH_POOL, 3),
        "weaknesses": rng.sample(WEAKNESS_POOL, 3),
        "estimatedBoxOffice": f"${low}M - ${high}M",
        "targetAudience": rng.choice(AUDIENCES),
        "comparableMovies": rng.sample(COMPARABLE_POOL, 3),
    }


def demo_responder(messages: List[Dict[str, str]]) -> str:
    prompt = next(
        (message.get("content", "") for message in reversed(messages) if message.get("role") == "user"),
        "",
    )
    return json.dumps(demo_forecast(_parse_fields(prompt)))
