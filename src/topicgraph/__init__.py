"""Validated, read-only topic graph over a documentation manifest."""

from .models import Difficulty, Manifest, Topic
from .services import (
    DocumentStore,
    NotFoundError,
    TopicGraph,
    ValidationError,
    ValidationErrorKind,
    load,
    load_manifest,
)

__version__ = "0.1.0"

__all__ = [
    "Difficulty",
    "Manifest",
    "Topic",
    "TopicGraph",
    "DocumentStore",
    "load",
    "load_manifest",
    "ValidationError",
    "ValidationErrorKind",
    "NotFoundError",
]
