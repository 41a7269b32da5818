"""Manifest loading and eager validation.

Loading is all-or-nothing: the caller either receives a fully validated
``Manifest`` or a ``ValidationError``. Checks run in a fixed order:

1. structure (JSON, required fields, types, difficulty values)
2. uniqueness of topic names and files
3. referential integrity of ``related`` / ``prerequisites`` / ``leads_to``
4. acyclicity of the combined prerequisite and leads-to graph
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from ..models import Difficulty, Manifest
from .errors import (
    CycleError,
    DanglingReferenceError,
    DuplicateTopicError,
    InvalidDifficultyError,
    MalformedManifestError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ManifestSource = Union[str, bytes, os.PathLike, Mapping[str, Any]]

EDGE_FIELDS = ("related", "prerequisites", "leads_to")

_UNVISITED, _IN_PROGRESS, _DONE = 0, 1, 2


def load_manifest(source: ManifestSource) -> Manifest:
    """Parse and validate a manifest.

    ``source`` may be a filesystem path, JSON text, or a decoded mapping.

    Raises:
        ValidationError: If any check fails. Nothing is returned in that case.
        OSError: If ``source`` is a path that cannot be read.
    """
    try:
        manifest = _parse(source)
        _check_unique(manifest)
        _check_references(manifest)
        _check_acyclic(manifest)
    except ValidationError as exc:
        logger.warning(
            "Rejected manifest",
            extra={"kind": exc.kind.value, "error": exc.message},
        )
        raise

    for warning in mirror_mismatches(manifest):
        logger.warning(warning)

    logger.debug(
        "Loaded manifest",
        extra={"manifest": manifest.name, "topic_count": len(manifest.topics)},
    )
    return manifest


def _parse(source: ManifestSource) -> Manifest:
    if isinstance(source, os.PathLike):
        source = Path(source).read_bytes()

    try:
        if isinstance(source, (str, bytes)):
            return Manifest.model_validate_json(source)
        if isinstance(source, Mapping):
            return Manifest.model_validate(dict(source))
    except PydanticValidationError as exc:
        raise _translate(exc) from exc

    raise MalformedManifestError(
        f"Unsupported manifest source type: {type(source).__name__}"
    )


def _translate(exc: PydanticValidationError) -> ValidationError:
    """Map pydantic errors onto the manifest error taxonomy."""
    errors = exc.errors()
    for error in errors:
        loc = error.get("loc", ())
        if error.get("type") == "enum" and loc[-1:] == ("difficulty",):
            index = loc[1] if len(loc) > 2 and isinstance(loc[1], int) else -1
            return InvalidDifficultyError(
                index,
                error.get("input"),
                [level.value for level in Difficulty],
            )

    problems = [
        f"{'.'.join(str(part) for part in error.get('loc', ())) or '<root>'}: {error.get('msg')}"
        for error in errors
    ]
    return MalformedManifestError("Manifest is malformed", problems=problems)


def _check_unique(manifest: Manifest) -> None:
    seen_names: set[str] = set()
    seen_files: set[str] = set()
    for topic in manifest.topics:
        if topic.name in seen_names:
            raise DuplicateTopicError("name", topic.name)
        if topic.file in seen_files:
            raise DuplicateTopicError("file", topic.file)
        seen_names.add(topic.name)
        seen_files.add(topic.file)


def _check_references(manifest: Manifest) -> None:
    names = {topic.name for topic in manifest.topics}
    for topic in manifest.topics:
        for edge in EDGE_FIELDS:
            for target in getattr(topic, edge):
                if target not in names:
                    raise DanglingReferenceError(topic.name, edge, target)


def ordering_edges(manifest: Manifest) -> Dict[str, List[str]]:
    """Successor lists: prerequisite -> topic and topic -> leads_to target."""
    successors: Dict[str, List[str]] = {topic.name: [] for topic in manifest.topics}
    for topic in manifest.topics:
        for prerequisite in topic.prerequisites:
            successors[prerequisite].append(topic.name)
        successors[topic.name].extend(topic.leads_to)
    return successors


def find_cycle(successors: Mapping[str, List[str]]) -> List[str] | None:
    """Return the first cycle found as ``[a, b, ..., a]``, or ``None``.

    Three-colour DFS, iterative so deep chains do not hit the recursion limit.
    """
    colour = {node: _UNVISITED for node in successors}

    for root in successors:
        if colour[root] != _UNVISITED:
            continue
        colour[root] = _IN_PROGRESS
        path = [root]
        stack: List[Tuple[str, int]] = [(root, 0)]
        while stack:
            node, index = stack[-1]
            children = successors[node]
            if index == len(children):
                stack.pop()
                path.pop()
                colour[node] = _DONE
                continue
            stack[-1] = (node, index + 1)
            child = children[index]
            if colour[child] == _IN_PROGRESS:
                return path[path.index(child):] + [child]
            if colour[child] == _UNVISITED:
                colour[child] = _IN_PROGRESS
                path.append(child)
                stack.append((child, 0))
    return None


def _check_acyclic(manifest: Manifest) -> None:
    cycle = find_cycle(ordering_edges(manifest))
    if cycle is not None:
        raise CycleError(cycle)


def mirror_mismatches(manifest: Manifest) -> List[str]:
    """Describe ``leads_to`` edges without a matching prerequisite, and vice versa.

    These are advisory only; ``related`` is deliberately not compared.
    """
    by_name = {topic.name: topic for topic in manifest.topics}
    messages: List[str] = []
    for topic in manifest.topics:
        for target in topic.leads_to:
            if topic.name not in by_name[target].prerequisites:
                messages.append(
                    f"{topic.name!r} leads to {target!r}, "
                    f"but {target!r} does not list it as a prerequisite"
                )
        for prerequisite in topic.prerequisites:
            if topic.name not in by_name[prerequisite].leads_to:
                messages.append(
                    f"{topic.name!r} requires {prerequisite!r}, "
                    f"but {prerequisite!r} does not lead to it"
                )
    return messages


__all__ = [
    "ManifestSource",
    "EDGE_FIELDS",
    "load_manifest",
    "ordering_edges",
    "find_cycle",
    "mirror_mismatches",
]
