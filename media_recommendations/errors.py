from __future__ import annotations

from typing import Optional


class RecommendationError(Exception):
    """Base error for a recommendation run; `stage` names where it failed."""

    stage = "recommendation"

    def __init__(self, message: str, *, stage: Optional[str] = None) -> None:
        super().__init__(message)
        if stage:
            self.stage = stage

    def __str__(self) -> str:
        msg = super().__str__()
        cause = self.__cause__
        if cause is not None:
            return f"{msg}: {cause}"
        return msg


class LoadError(RecommendationError):
    stage = "load_parameters"


class SchemaConversionError(RecommendationError):
    stage = "build_request"


class ExtractionError(RecommendationError):
    stage = "extract_fields"


class RemoteCallError(RecommendationError):
    stage = "remote_call"
