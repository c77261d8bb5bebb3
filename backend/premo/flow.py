"""Project form and forecast lifecycle."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional, Protocol

from loguru import logger

from .errors import PredictionError
from .models import MovieInput, PredictionResult
from .tokens import RequestToken, RequestTokens

MISSING_FIELDS_MESSAGE = "Missing critical data points. Title and Synopsis required."

_PREDICTION = "prediction"


class Predictor(Protocol):
    def predict(self, movie: MovieInput) -> PredictionResult: ...


class FlowState(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    SHOWING_RESULT = "showing_result"


def new_projection_id() -> str:
    return uuid.uuid4().hex[:9].upper()


class ProjectFlow:
    """Form-to-dashboard state machine.

    EDITING -> SUBMITTING -> SHOWING_RESULT on success, or back to EDITING
    with `error` set on failure. `reset()` returns to an empty EDITING form
    and drops any in-flight request.
    """

    def __init__(self) -> None:
        self.form = MovieInput()
        self.state = FlowState.EDITING
        self.result: Optional[PredictionResult] = None
        self.error: Optional[str] = None
        self.projection_id: Optional[str] = None
        # Bumped whenever the form is cleared so widgets keyed on it start empty.
        self.form_epoch = 0
        self._tokens = RequestTokens()

    @property
    def is_busy(self) -> bool:
        return self.state is FlowState.SUBMITTING

    @property
    def has_result(self) -> bool:
        return self.result is not None

    def edit(self, **fields: str) -> None:
        self.form = self.form.with_changes(**fields)

    def begin_submit(self) -> Optional[RequestToken]:
        if self.is_busy:
            return None
        if self.form.missing_required():
            self.error = MISSING_FIELDS_MESSAGE
            return None
        self.error = None
        self.state = FlowState.SUBMITTING
        return self._tokens.issue(_PREDICTION)

    def resolve(self, token: RequestToken, result: PredictionResult) -> bool:
        if not self._tokens.finish(token):
            logger.debug("Dropping stale forecast for token {}", token.serial)
            return False
        self.result = result
        self.projection_id = new_projection_id()
        self.error = None
        self.state = FlowState.SHOWING_RESULT
        return True

    def reject(self, token: RequestToken, message: str) -> bool:
        if not self._tokens.finish(token):
            return False
        self.error = message or PredictionError.DEFAULT_MESSAGE
        self.state = FlowState.EDITING
        return True

    def run(self, token: RequestToken, predictor: Predictor) -> bool:
        """Send the request `token` was issued for. Stale tokens never reach the predictor."""
        if not self._tokens.is_current(token):
            logger.debug("Skipping stale submission {}", token.serial)
            return False
        try:
            result = predictor.predict(self.form)
        except PredictionError as exc:
            self.reject(token, str(exc))
            return False
        return self.resolve(token, result)

    def submit(self, predictor: Predictor) -> bool:
        """Run one submission end to end. Returns True when a result is stored."""
        token = self.begin_submit()
        if token is None:
            return False
        return self.run(token, predictor)

    def abandon(self) -> None:
        """Drop an in-flight submission whose run was interrupted. Form is kept."""
        if self.is_busy:
            self._tokens.invalidate(_PREDICTION)
            self.state = FlowState.EDITING

    def reset(self) -> None:
        self._tokens.invalidate()
        self.form = MovieInput()
        self.result = None
        self.projection_id = None
        self.error = None
        self.state = FlowState.EDITING
        self.form_epoch += 1

    def clear(self) -> None:
        self.reset()
