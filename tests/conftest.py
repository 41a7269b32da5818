import copy
import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from topicgraph import config as config_module
from topicgraph.services import graph as graph_module

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
SAMPLE_MANIFEST = DATA_DIR / "manifest.json"


@pytest.fixture(autouse=True)
def restore_caches(monkeypatch):
    """
    Keep settings and the process-wide graph isolated between tests.
    """
    for key in ("TOPICGRAPH_MANIFEST_PATH", "TOPICGRAPH_DOCS_ROOT", "TOPICGRAPH_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    config_module.get_config.cache_clear()
    graph_module.get_topic_graph.cache_clear()
    yield
    config_module.get_config.cache_clear()
    graph_module.get_topic_graph.cache_clear()


@pytest.fixture
def sample_manifest_path() -> Path:
    return SAMPLE_MANIFEST


@pytest.fixture
def sample_data() -> Dict[str, Any]:
    """A fresh, mutable copy of the sample manifest."""
    return copy.deepcopy(json.loads(SAMPLE_MANIFEST.read_text(encoding="utf-8")))


@pytest.fixture
def topic_record() -> Callable[..., Dict[str, Any]]:
    """Build a minimal topic record; keyword arguments override fields."""

    def _make(name: str, **fields: Any) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "name": name,
            "file": f"topics/{name.replace(' ', '-')}.md",
            "related": [],
            "prerequisites": [],
            "leads_to": [],
            "tags": [],
            "difficulty": "beginner",
            "use_cases": [],
        }
        record.update(fields)
        return record

    return _make


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """Write a manifest dict to tmp_path/manifest.json and return its path."""

    def _write(data: Dict[str, Any]) -> Path:
        path = tmp_path / "manifest.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
