from pathlib import Path

import pytest

from topicgraph.config import Settings
from topicgraph.models import Topic
from topicgraph.services.documents import (
    DocumentStore,
    count_fenced_blocks,
    validate_document_path,
)
from topicgraph.services.graph import load


def _topic(file: str) -> Topic:
    return Topic(name="t", file=file, difficulty="beginner")


@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    (root / "topics").mkdir(parents=True)
    return root


@pytest.fixture
def sample_store(sample_manifest_path: Path) -> DocumentStore:
    return DocumentStore(sample_manifest_path.parent)


def test_validate_document_path() -> None:
    assert validate_document_path("topics/dml.md") == (True, "")
    assert validate_document_path("")[0] is False
    assert validate_document_path("/etc/passwd")[0] is False
    assert validate_document_path("topics\\dml.md")[0] is False
    assert validate_document_path("../secrets.md")[0] is False
    # dots inside a name are not a parent reference
    assert validate_document_path("topics/v1..2.md") == (True, "")


def test_resolve_blocks_escape(docs_root: Path) -> None:
    store = DocumentStore(docs_root)

    with pytest.raises(ValueError):
        store.resolve(_topic("topics/../../outside.md"))
    with pytest.raises(ValueError):
        store.resolve(_topic("/abs.md"))


def test_resolve_inside_root(docs_root: Path) -> None:
    store = DocumentStore(docs_root)

    path = store.resolve(_topic("topics/a.md"))

    assert path == (docs_root / "topics" / "a.md").resolve()
    assert path.is_absolute()


def test_read_body_is_verbatim(docs_root: Path) -> None:
    text = "---\ntitle: kept\n---\n# Heading\r\n\n```apex\nSystem.debug('x');\n```\n"
    (docs_root / "topics" / "a.md").write_bytes(text.encode("utf-8"))
    store = DocumentStore(docs_root)

    body = store.read_body(_topic("topics/a.md"))

    assert body == text


def test_read_body_missing_file(docs_root: Path) -> None:
    store = DocumentStore(docs_root)

    with pytest.raises(FileNotFoundError):
        store.read_body(_topic("topics/missing.md"))


def test_sample_bodies_exist(sample_manifest_path: Path, sample_store: DocumentStore) -> None:
    graph = load(sample_manifest_path)

    assert sample_store.missing_documents(graph) == []
    assert sample_store.read_body(graph.get_by_name("batch")).startswith("# Batch Apex")


def test_missing_documents_reported_in_order(docs_root: Path, topic_record) -> None:
    (docs_root / "topics" / "b.md").write_text("# b\n", encoding="utf-8")
    graph = load(
        {
            "name": "m",
            "version": "1",
            "topics": [
                topic_record("a", file="topics/a.md"),
                topic_record("b", file="topics/b.md"),
                topic_record("c", file="topics/c.md"),
            ],
        }
    )

    missing = DocumentStore(docs_root).missing_documents(graph)

    assert [t.name for t in missing] == ["a", "c"]


def test_default_root_comes_from_config(tmp_path: Path, sample_manifest_path: Path) -> None:
    config = Settings(manifest_path=sample_manifest_path)
    assert DocumentStore(config=config).docs_root == sample_manifest_path.parent.resolve()

    override = Settings(manifest_path=sample_manifest_path, docs_root=tmp_path)
    assert DocumentStore(config=override).docs_root == tmp_path.resolve()


class TestSnippetCounting:
    def test_count_fenced_blocks(self) -> None:
        text = "intro\n```apex\na\n```\ntext\n~~~\nb\n~~~\n"

        assert count_fenced_blocks(text) == 2

    def test_shorter_inner_fence_is_content(self) -> None:
        text = "````md\n```apex\ninner\n```\n````\n"

        assert count_fenced_blocks(text) == 1

    def test_unclosed_fence_counts_once(self) -> None:
        assert count_fenced_blocks("```\nnever closed\n") == 1

    def test_no_fences(self) -> None:
        assert count_fenced_blocks("plain `inline` code only") == 0

    def test_sample_total_matches_manifest(
        self, sample_manifest_path: Path, sample_store: DocumentStore
    ) -> None:
        graph = load(sample_manifest_path)

        assert sample_store.snippet_total(graph) == graph.manifest.total_snippets
        assert sample_store.count_snippets(graph.get_by_name("soql")) == 2

    def test_snippet_total_skips_missing_files(self, docs_root: Path, topic_record) -> None:
        (docs_root / "topics" / "a.md").write_text("```\nx\n```\n", encoding="utf-8")
        graph = load(
            {
                "name": "m",
                "version": "1",
                "topics": [
                    topic_record("a", file="topics/a.md"),
                    topic_record("b", file="topics/b.md"),
                ],
            }
        )

        assert DocumentStore(docs_root).snippet_total(graph) == 1
