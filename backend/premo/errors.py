"""Exceptions raised by the PREMO backend."""

from __future__ import annotations


class PremoError(Exception):
    """Base exception for all application errors."""


class ConfigurationError(PremoError):
    """Invalid or missing configuration."""


class PredictionError(PremoError):
    """The prediction service could not produce a usable forecast.

    Every transport, parsing and validation failure surfaces as this one
    error. The original exception is chained as ``__cause__``.
    """

    DEFAULT_MESSAGE = "Failed to analyze movie data. Please try again."

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)
