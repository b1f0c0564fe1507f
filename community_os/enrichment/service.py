"""Out-of-band embedding generation for stored profiles.

Search needs every profile embedded with the same model as the query; this
service fills in missing embeddings (or regenerates all of them).
"""

import time
from dataclasses import dataclass, field
from typing import Callable, ContextManager, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from community_os.domain.mapping import build_searchable_text
from community_os.domain.models import Profile
from community_os.logging import get_logger
from community_os.logging.context import log_context, new_request_id
from community_os.persistence.database import get_session
from community_os.persistence.repositories import ProfileRepository

logger = get_logger(__name__, component="enrichment")


@dataclass
class EnrichmentResult:
    """Outcome of one enrichment run.

    Attributes:
        processed: Profiles that received a new embedding
        skipped: Profiles left alone (already embedded, or nothing to embed)
        failed: Profiles whose embedding or update failed
        errors: Failure message per profile id
    """

    processed: int = 0
    skipped: int = 0
    failed: int = 0
    errors: Dict[int, str] = field(default_factory=dict)
    duration_ms: int = 0

    @property
    def had_errors(self) -> bool:
        return self.failed > 0


class EmbeddingEnricher:
    """Embeds profiles through ``provider.embed(text)``.

    Each profile is written in its own session, so one failure never rolls
    back embeddings already stored in the same run.
    """

    def __init__(
        self,
        provider,
        session_factory: Callable[[], ContextManager[Session]] = get_session,
    ):
        self.provider = provider
        self.session_factory = session_factory

    def run(
        self,
        force: bool = False,
        profile_ids: Optional[Sequence[int]] = None,
    ) -> EnrichmentResult:
        """Embed profiles.

        Args:
            force: Regenerate embeddings that already exist
            profile_ids: Restrict the run to these ids; unknown ids are ignored

        Returns:
            EnrichmentResult with per-profile failures collected, never raised
        """
        start = time.perf_counter()
        result = EnrichmentResult()

        with log_context(run_id=new_request_id()):
            profiles = self._select(force, profile_ids)
            logger.info(
                f"Enriching {len(profiles)} profiles",
                extra={
                    "event": "enrichment.run.started",
                    "candidates": len(profiles),
                    "force": force,
                },
            )

            for profile in profiles:
                if profile.has_embedding and not force:
                    result.skipped += 1
                    continue

                text = build_searchable_text(profile)
                if not text.strip():
                    logger.warning(
                        "Profile has no searchable text",
                        extra={"event": "enrichment.profile.skipped", "profile_id": profile.id},
                    )
                    result.skipped += 1
                    continue

                try:
                    embedding = self.provider.embed(text)
                    with self.session_factory() as session:
                        ProfileRepository(session).update_embedding(profile.id, embedding.vector)
                except Exception as e:
                    logger.error(
                        f"Failed to enrich profile {profile.id}: {e}",
                        extra={
                            "event": "enrichment.profile.failed",
                            "profile_id": profile.id,
                            "error_type": type(e).__name__,
                        },
                    )
                    result.failed += 1
                    result.errors[profile.id] = str(e) or type(e).__name__
                    continue

                result.processed += 1
                logger.debug(
                    "Profile enriched",
                    extra={"event": "enrichment.profile.completed", "profile_id": profile.id},
                )

            result.duration_ms = int((time.perf_counter() - start) * 1000)
            logger.info(
                "Enrichment run completed",
                extra={
                    "event": "enrichment.run.completed",
                    "processed": result.processed,
                    "skipped": result.skipped,
                    "failed": result.failed,
                    "duration_ms": result.duration_ms,
                },
            )

        return result

    def _select(self, force: bool, profile_ids: Optional[Sequence[int]]) -> List[Profile]:
        with self.session_factory() as session:
            repo = ProfileRepository(session)
            if profile_ids:
                return repo.list_by_ids(profile_ids)
            if force:
                return repo.list_all()
            return repo.list_missing_embeddings()
