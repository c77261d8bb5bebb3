"""Markdown and JSON exports of a forecast."""

from __future__ import annotations

import json
import re
from typing import Sequence

from .models import MovieInput, PredictionResult


def _bullets(items: Sequence[str]) -> list[str]:
    if not items:
        return ["- (none)"]
    return [f"- {item}" for item in items]


def report_slug(title: str, projection_id: str | None = None) -> str:
    slug = re.sub(r"[^a-z0-9]+", "_", title.lower()).strip("_") or "project"
    if projection_id:
        slug = f"{slug}_{projection_id.lower()}"
    return slug


def prediction_markdown(
    movie: MovieInput,
    result: PredictionResult,
    projection_id: str | None = None,
) -> str:
    lines = [
        f"# {movie.title or 'Untitled Project'}: Success Forecast",
    ]
    if projection_id:
        lines.append(f"Projection ID: `{projection_id}`")
    lines += [
        "",
        "## Project",
        f"- Director: {movie.director or 'n/a'}",
        f"- Key Cast: {movie.actors or 'n/a'}",
        f"- Genre: {movie.genre or 'n/a'}",
        f"- Est. Budget: {movie.budget or 'n/a'}",
        "",
        "### Synopsis",
        movie.synopsis,
        "",
        "## Verdict",
        f"- Success Probability: {result.success_score}%",
        f"- Success Level: {result.success_level.value}",
        f"- Est. Box Office: {result.estimated_box_office}",
        f"- Target Audience: {result.target_audience}",
        "",
        "### Analysis",
        result.reasoning,
        "",
        "### Market Strengths",
        *_bullets(result.strengths),
        "",
        "### Risk Factors",
        *_bullets(result.weaknesses),
        "",
        "### Comparable Titles",
        *_bullets(result.comparable_movies),
    ]
    return "\n".join(lines) + "\n"


def prediction_json(
    movie: MovieInput,
    result: PredictionResult,
    projection_id: str | None = None,
) -> str:
    payload = {
        "projectionId": projection_id,
        "input": movie.to_dict(),
        "prediction": result.to_wire(),
    }
    return json.dumps(payload, indent=2)
