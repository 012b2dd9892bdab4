"""Test helper utilities for Auto Search tests."""

from .factories import (
    NOW,
    FakeEmbeddingProvider,
    InMemoryCandidates,
    InMemoryIndex,
    InMemoryJobs,
    ScriptedChatClient,
    make_job,
    make_match,
    make_preferences,
    make_profile,
)

__all__ = [
    "NOW",
    "FakeEmbeddingProvider",
    "InMemoryCandidates",
    "InMemoryIndex",
    "InMemoryJobs",
    "ScriptedChatClient",
    "make_job",
    "make_match",
    "make_preferences",
    "make_profile",
]
