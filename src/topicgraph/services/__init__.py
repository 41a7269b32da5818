"""Service layer: manifest loading, graph queries and document access."""

from .documents import DocumentStore, count_fenced_blocks, validate_document_path
from .errors import (
    CycleError,
    DanglingReferenceError,
    DuplicateTopicError,
    InvalidDifficultyError,
    MalformedManifestError,
    NotFoundError,
    TopicGraphError,
    ValidationError,
    ValidationErrorKind,
)
from .graph import (
    TopicGraph,
    all_of,
    difficulty_is,
    get_topic_graph,
    has_tag,
    has_use_case,
    load,
    reload_topic_graph,
)
from .loader import find_cycle, load_manifest, mirror_mismatches

__all__ = [
    "TopicGraph",
    "load",
    "load_manifest",
    "get_topic_graph",
    "reload_topic_graph",
    "difficulty_is",
    "has_tag",
    "has_use_case",
    "all_of",
    "find_cycle",
    "mirror_mismatches",
    "DocumentStore",
    "validate_document_path",
    "count_fenced_blocks",
    "TopicGraphError",
    "ValidationError",
    "ValidationErrorKind",
    "MalformedManifestError",
    "DuplicateTopicError",
    "DanglingReferenceError",
    "InvalidDifficultyError",
    "CycleError",
    "NotFoundError",
]
