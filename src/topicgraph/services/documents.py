"""Filesystem access to topic documentation bodies.

Bodies are opaque: they are returned verbatim and never parsed, except for
counting fenced code blocks when a caller asks for a snippet tally.
"""

from __future__ import annotations

import logging
from pathlib import Path
import re
from typing import List, Tuple

from ..config import Settings, get_config
from ..models import Topic
from .graph import TopicGraph

logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})")


def validate_document_path(file: str) -> Tuple[bool, str]:
    """
    Validate a topic's relative document path.

    Returns (is_valid, message). Message is empty when valid.
    """
    if not file:
        return False, "Path must not be empty"
    if "\\" in file:
        return False, "Path must use Unix separators (/)"
    if file.startswith("/"):
        return False, "Path must be relative (no leading /)"
    if ".." in Path(file).parts:
        return False, "Path must not contain '..'"
    return True, ""


def count_fenced_blocks(text: str) -> int:
    """Count fenced code blocks; an unclosed trailing fence still counts."""
    count = 0
    open_fence: str | None = None
    for line in text.splitlines():
        match = FENCE_PATTERN.match(line)
        if not match:
            continue
        marker = match.group(1)
        if open_fence is None:
            open_fence = marker
            count += 1
        elif marker[0] == open_fence[0] and len(marker) >= len(open_fence):
            open_fence = None
    return count


class DocumentStore:
    """Resolve and read the markdown files referenced by topics."""

    def __init__(self, docs_root: Path | None = None, config: Settings | None = None) -> None:
        if docs_root is None:
            docs_root = (config or get_config()).get_docs_root()
        self.docs_root = Path(docs_root).resolve()

    def resolve(self, topic: Topic) -> Path:
        """
        Resolve a topic's file inside the docs root.

        Raises ValueError for invalid paths or paths escaping the root.
        """
        is_valid, message = validate_document_path(topic.file)
        if not is_valid:
            raise ValueError(f"{message}: {topic.file}")
        full_path = (self.docs_root / topic.file).resolve()
        if not full_path.is_relative_to(self.docs_root):
            raise ValueError(f"Path escapes docs root: {topic.file}")
        return full_path

    def read_body(self, topic: Topic) -> str:
        """Return the raw document text for a topic."""
        path = self.resolve(topic)
        if not path.is_file():
            raise FileNotFoundError(f"Document not found for {topic.name!r}: {topic.file}")
        return path.read_bytes().decode("utf-8")

    def missing_documents(self, graph: TopicGraph) -> List[Topic]:
        """Topics whose document file does not exist, in manifest order."""
        return [topic for topic in graph if not self.resolve(topic).is_file()]

    def count_snippets(self, topic: Topic) -> int:
        return count_fenced_blocks(self.read_body(topic))

    def snippet_total(self, graph: TopicGraph) -> int:
        """Sum of fenced code blocks across every topic with an existing file."""
        total = 0
        for topic in graph:
            try:
                total += self.count_snippets(topic)
            except FileNotFoundError:
                logger.debug("Skipping missing document", extra={"topic": topic.name})
        return total


__all__ = ["DocumentStore", "validate_document_path", "count_fenced_blocks", "FENCE_PATTERN"]
