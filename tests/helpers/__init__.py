"""Test helper utilities for Community OS tests."""

from .profiles import (
    FakeEmbeddingProvider,
    FakeExplainer,
    FakeVectorStore,
    make_match,
    make_profile,
)

__all__ = [
    "FakeEmbeddingProvider",
    "FakeExplainer",
    "FakeVectorStore",
    "make_match",
    "make_profile",
]
