"""Pydantic models for the topic manifest."""

from .topic import Difficulty, Manifest, Topic

__all__ = [
    "Difficulty",
    "Manifest",
    "Topic",
]
