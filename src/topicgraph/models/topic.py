"""Topic and manifest Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Difficulty(str, Enum):
    """Learning difficulty of a topic."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Topic(BaseModel):
    """A single documentation unit and its outgoing edges."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "apex dml",
                "file": "topics/dml.md",
                "related": ["soql", "batch"],
                "prerequisites": ["apex core concepts", "apex data types"],
                "leads_to": ["batch"],
                "tags": ["dml", "bulkify"],
                "difficulty": "intermediate",
                "use_cases": ["Inserting records in bulk"],
            }
        },
    )

    name: str = Field(..., min_length=1, description="Unique, case-sensitive topic name")
    file: str = Field(..., min_length=1, description="Documentation body path, relative to the docs root")
    related: Tuple[str, ...] = Field(default=(), description="Advisory related topics (directed)")
    prerequisites: Tuple[str, ...] = Field(default=(), description="Topics to understand first")
    leads_to: Tuple[str, ...] = Field(default=(), description="Suggested next topics")
    tags: Tuple[str, ...] = Field(default=(), description="Free-text labels")
    difficulty: Difficulty
    use_cases: Tuple[str, ...] = Field(default=(), description="Scenario labels")

    @field_validator("related", "prerequisites", "leads_to", "tags", "use_cases")
    @classmethod
    def _dedupe(cls, values: Tuple[str, ...]) -> Tuple[str, ...]:
        """Repeated entries collapse to the first occurrence."""
        return tuple(dict.fromkeys(values))


class Manifest(BaseModel):
    """Aggregate root: manifest metadata plus topics in declaration order."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = Field(..., min_length=1)
    description: str = ""
    version: str = Field(..., min_length=1)
    default_doc: Optional[str] = None
    topics: Tuple[Topic, ...]
    total_snippets: int = Field(
        default=0,
        ge=0,
        alias="totalSnippets",
        description="Informational snippet count; not checked at load time",
    )


__all__ = ["Difficulty", "Topic", "Manifest"]
