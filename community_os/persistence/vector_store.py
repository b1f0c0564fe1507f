"""Similarity retrieval over embeddings held in the profile store.

Similarity is computed in-process, so any SQLAlchemy backend works. The
store is small (one community), so each query scores every stored embedding
in a single vectorized pass.
"""

from typing import Callable, ContextManager, List, NamedTuple, Optional, Sequence

import numpy as np
from sqlalchemy.orm import Session

from community_os.domain.models import Profile
from community_os.logging import get_logger

from .database import get_session
from .repositories import ProfileRepository

logger = get_logger(__name__, component="vector_store")

# Score for vectors that cannot be compared; below any valid cosine value
NO_SIMILARITY = -1.0

SessionFactory = Callable[[], ContextManager[Session]]


class RetrievedProfile(NamedTuple):
    profile: Profile
    similarity: float


def batch_cosine_similarity(
    query: Sequence[float], embeddings: Sequence[Optional[Sequence[float]]]
) -> np.ndarray:
    """Cosine similarity of ``query`` against each embedding.

    Embeddings that are missing, of a different dimension, or zero-norm
    (as is a zero-norm query) score NO_SIMILARITY instead of raising.

    Args:
        query: Query vector (D,)
        embeddings: Stored vectors, any of which may be None

    Returns:
        Array of similarities (N,)
    """
    scores = np.full(len(embeddings), NO_SIMILARITY, dtype=float)
    query_vec = np.asarray(query if query else [], dtype=float)
    if query_vec.size == 0:
        return scores

    rows = [
        index
        for index, embedding in enumerate(embeddings)
        if embedding and len(embedding) == query_vec.size
    ]
    if not rows:
        return scores

    matrix = np.asarray([embeddings[index] for index in rows], dtype=float)
    query_norm = np.linalg.norm(query_vec)
    row_norms = np.linalg.norm(matrix, axis=1)

    valid = (row_norms > 0) & (query_norm > 0)
    safe_norms = np.where(valid, row_norms * query_norm, 1.0)
    similarity = np.where(valid, matrix @ query_vec / safe_norms, NO_SIMILARITY)

    scores[rows] = similarity
    return scores


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """Cosine similarity of two vectors, NO_SIMILARITY when incomparable."""
    if not a:
        return NO_SIMILARITY
    return float(batch_cosine_similarity(a, [b])[0])


class SQLVectorStore:
    """Vector retrieval backed by ProfileRepository.

    Args:
        session_factory: Context manager factory yielding a Session; defaults to
            the module-level get_session()
    """

    def __init__(self, session_factory: SessionFactory = get_session):
        self.session_factory = session_factory

    def has_embeddings(self) -> bool:
        with self.session_factory() as session:
            return ProfileRepository(session).has_embeddings()

    def retrieve(
        self,
        vector: Sequence[float],
        limit: int,
        threshold: float,
    ) -> List[RetrievedProfile]:
        """Return up to ``limit`` profiles whose similarity is at least ``threshold``.

        Results are ordered by similarity descending, then profile id ascending.
        """
        with self.session_factory() as session:
            profiles = ProfileRepository(session).list_with_embeddings()

        similarities = batch_cosine_similarity(vector, [profile.embedding for profile in profiles])
        scored = [
            RetrievedProfile(profile, float(similarity))
            for profile, similarity in zip(profiles, similarities)
        ]
        skipped = sum(1 for item in scored if item.similarity == NO_SIMILARITY)
        if skipped:
            logger.warning(
                f"{skipped} embeddings could not be compared with the query vector",
                extra={
                    "event": "vector_store.incomparable_embeddings",
                    "count": skipped,
                    "query_dimensions": len(vector),
                },
            )

        matches = [item for item in scored if item.similarity >= threshold]
        matches.sort(key=lambda item: (-item.similarity, item.profile.id))

        logger.debug(
            "Vector retrieval complete",
            extra={
                "event": "vector_store.retrieved",
                "scanned": len(scored),
                "matched": len(matches),
                "threshold": threshold,
                "limit": limit,
            },
        )
        return matches[:limit]
