"""Read-only topic graph built from a validated manifest."""

from __future__ import annotations

from functools import lru_cache
import logging
from typing import Callable, Dict, Iterator, List, Set, Tuple

from ..config import get_config
from ..models import Difficulty, Manifest, Topic
from .errors import NotFoundError
from .loader import ManifestSource, load_manifest

logger = logging.getLogger(__name__)

TopicPredicate = Callable[[Topic], bool]


class TopicGraph:
    """Lookup, traversal and filtering over a manifest's topics.

    Instances never change after construction, so they can be shared between
    threads without locking.

    Example:
        >>> graph = load(Path("data/manifest.json"))
        >>> [t.name for t in graph.recommended_path("apex dml")]
        ['apex core concepts', 'apex data types', 'apex dml']
    """

    def __init__(self, manifest: Manifest) -> None:
        self.manifest = manifest
        self._by_name: Dict[str, Topic] = {topic.name: topic for topic in manifest.topics}
        self._by_file: Dict[str, Topic] = {topic.file: topic for topic in manifest.topics}

    def __len__(self) -> int:
        return len(self.manifest.topics)

    def __iter__(self) -> Iterator[Topic]:
        return iter(self.manifest.topics)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get_by_name(self, name: str) -> Topic:
        try:
            return self._by_name[name]
        except KeyError:
            raise NotFoundError(name, "name") from None

    def get_by_file(self, path: str) -> Topic:
        try:
            return self._by_file[path]
        except KeyError:
            raise NotFoundError(path, "file") from None

    def list_all(self) -> List[Topic]:
        """All topics in manifest order."""
        return list(self.manifest.topics)

    def prerequisites_closure(self, name: str) -> List[Topic]:
        """Transitive prerequisites of ``name``, dependencies first.

        Depth-first post-order over ``prerequisites`` in declaration order,
        deduplicated, excluding the topic itself. Load-time validation
        guarantees the prerequisite graph is acyclic.
        """
        topic = self.get_by_name(name)
        visited: Set[str] = {topic.name}
        ordered: List[Topic] = []
        # (topic, index of the next prerequisite to visit)
        stack: List[Tuple[Topic, int]] = [(topic, 0)]

        while stack:
            current, index = stack[-1]
            if index < len(current.prerequisites):
                stack[-1] = (current, index + 1)
                prerequisite = current.prerequisites[index]
                if prerequisite not in visited:
                    visited.add(prerequisite)
                    stack.append((self._by_name[prerequisite], 0))
                continue
            stack.pop()
            if stack:
                ordered.append(current)

        return ordered

    def recommended_path(self, name: str) -> List[Topic]:
        """A learning order that ends at ``name``."""
        return self.prerequisites_closure(name) + [self.get_by_name(name)]

    def filter(self, predicate: TopicPredicate) -> List[Topic]:
        return [topic for topic in self.manifest.topics if predicate(topic)]

    def related(self, name: str) -> List[Topic]:
        """Resolve ``related`` as declared; the reverse edge is not implied."""
        return [self._by_name[other] for other in self.get_by_name(name).related]

    def next_topics(self, name: str) -> List[Topic]:
        return [self._by_name[other] for other in self.get_by_name(name).leads_to]

    def dependents(self, name: str) -> List[Topic]:
        """Topics that list ``name`` as a direct prerequisite."""
        topic = self.get_by_name(name)
        return [other for other in self.manifest.topics if topic.name in other.prerequisites]


def load(source: ManifestSource) -> TopicGraph:
    """Load, validate and wrap a manifest. See :func:`load_manifest`."""
    return TopicGraph(load_manifest(source))


# Predicate builders for TopicGraph.filter


def difficulty_is(level: Difficulty | str) -> TopicPredicate:
    wanted = Difficulty(level)
    return lambda topic: topic.difficulty is wanted


def has_tag(tag: str) -> TopicPredicate:
    return lambda topic: tag in topic.tags


def has_use_case(label: str) -> TopicPredicate:
    return lambda topic: label in topic.use_cases


def all_of(*predicates: TopicPredicate) -> TopicPredicate:
    """Combine predicates; with none given every topic matches."""
    return lambda topic: all(predicate(topic) for predicate in predicates)


@lru_cache(maxsize=1)
def get_topic_graph() -> TopicGraph:
    """Load the configured manifest once per process."""
    config = get_config()
    logger.info("Loading topic graph", extra={"manifest_path": str(config.manifest_path)})
    return load(config.manifest_path)


def reload_topic_graph() -> TopicGraph:
    """Clear the cached graph (useful for tests) and reload."""
    get_topic_graph.cache_clear()
    return get_topic_graph()


__all__ = [
    "TopicGraph",
    "TopicPredicate",
    "load",
    "difficulty_is",
    "has_tag",
    "has_use_case",
    "all_of",
    "get_topic_graph",
    "reload_topic_graph",
]
