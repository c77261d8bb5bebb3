"""Form input and forecast data shapes."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class MovieInput:
    """The movie-project form. All fields are free text."""

    title: str = ""
    director: str = ""
    actors: str = ""
    genre: str = ""
    budget: str = ""
    synopsis: str = ""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_changes(self, **changes: str) -> "MovieInput":
        unknown = set(changes) - set(self.field_names())
        if unknown:
            raise ValueError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def missing_required(self) -> List[str]:
        """Return names of required fields that are blank."""
        return [name for name in ("title", "synopsis") if not getattr(self, name).strip()]

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class SuccessLevel(str, Enum):
    BLOCKBUSTER = "Blockbuster"
    HIT = "Hit"
    MODERATE = "Moderate"
    FLOP = "Flop"

    @classmethod
    def labels(cls) -> List[str]:
        return [level.value for level in cls]


class PredictionResult(BaseModel):
    """Structured forecast returned by the prediction service.

    Wire names are camelCase; attributes are snake_case. Types are checked strictly
    (no string or float scores); the score range is whatever the service sends.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True, strict=True)

    success_score: int = Field(alias="successScore")
    success_level: SuccessLevel = Field(alias="successLevel")
    reasoning: str
    strengths: List[str]
    weaknesses: List[str]
    estimated_box_office: str = Field(alias="estimatedBoxOffice")
    target_audience: str = Field(alias="targetAudience")
    comparable_movies: List[str] = Field(alias="comparableMovies")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
