"""Domain errors raised while loading and querying a topic graph."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class TopicGraphError(Exception):
    """Base class for topic graph errors."""

    def __init__(
        self,
        error: str,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.message = message
        self.detail = detail or {}


class ValidationErrorKind(str, Enum):
    """Why a manifest was rejected."""

    MALFORMED = "malformed"
    DUPLICATE_NAME = "duplicate_name"
    DUPLICATE_FILE = "duplicate_file"
    DANGLING_REFERENCE = "dangling_reference"
    INVALID_DIFFICULTY = "invalid_difficulty"
    CYCLE = "cycle"


class ValidationError(TopicGraphError):
    """Raised by the loader only; the manifest is rejected as a whole."""

    def __init__(
        self,
        kind: ValidationErrorKind,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(kind.value, message, detail=detail)
        self.kind = kind


class MalformedManifestError(ValidationError):
    """Unparseable input, missing fields or wrong field types."""

    def __init__(self, message: str, *, problems: Sequence[str] = ()) -> None:
        super().__init__(
            ValidationErrorKind.MALFORMED,
            message,
            detail={"problems": list(problems)},
        )
        self.problems = list(problems)


class DuplicateTopicError(ValidationError):
    """Two topics share a name or a file."""

    def __init__(self, field: str, value: str) -> None:
        kind = (
            ValidationErrorKind.DUPLICATE_NAME
            if field == "name"
            else ValidationErrorKind.DUPLICATE_FILE
        )
        super().__init__(
            kind,
            f"Duplicate topic {field}: {value!r}",
            detail={"field": field, "value": value},
        )
        self.field = field
        self.value = value


class DanglingReferenceError(ValidationError):
    """An edge points at a topic name that is not in the manifest."""

    def __init__(self, source: str, edge: str, target: str) -> None:
        super().__init__(
            ValidationErrorKind.DANGLING_REFERENCE,
            f"Topic {source!r} lists unknown topic {target!r} in {edge}",
            detail={"source": source, "edge": edge, "target": target},
        )
        self.source = source
        self.edge = edge
        self.target = target


class InvalidDifficultyError(ValidationError):
    """A topic's difficulty is not one of the allowed levels."""

    def __init__(self, topic_index: int, value: Any, allowed: Sequence[str]) -> None:
        super().__init__(
            ValidationErrorKind.INVALID_DIFFICULTY,
            f"Topic #{topic_index} has invalid difficulty {value!r} "
            f"(expected one of: {', '.join(allowed)})",
            detail={"topic_index": topic_index, "value": value, "allowed": list(allowed)},
        )
        self.topic_index = topic_index
        self.value = value


class CycleError(ValidationError):
    """The prerequisite / leads-to graph contains a cycle."""

    def __init__(self, cycle: List[str]) -> None:
        super().__init__(
            ValidationErrorKind.CYCLE,
            "Prerequisite cycle detected: " + " -> ".join(cycle),
            detail={"cycle": list(cycle)},
        )
        self.cycle = list(cycle)


class NotFoundError(TopicGraphError):
    """A lookup key is absent from the loaded graph."""

    def __init__(self, key: str, lookup: str = "name") -> None:
        super().__init__(
            "not_found",
            f"No topic with {lookup} {key!r}",
            detail={"key": key, "lookup": lookup},
        )
        self.key = key
        self.lookup = lookup


__all__ = [
    "TopicGraphError",
    "ValidationErrorKind",
    "ValidationError",
    "MalformedManifestError",
    "DuplicateTopicError",
    "DanglingReferenceError",
    "InvalidDifficultyError",
    "CycleError",
    "NotFoundError",
]
