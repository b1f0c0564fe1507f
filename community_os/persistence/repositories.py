"""Data access for participant profiles.

ProfileRepository wraps one SQLAlchemy session and always returns domain
Profile objects, never ORM rows.
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from community_os.domain.models import Profile, StatusTag, normalize_status
from community_os.logging import get_logger

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import ProfileModel

logger = get_logger(__name__, component="database")


class ProfileRepository:
    """Repository for profile reads and writes."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        """Retrieve a profile by id.

        Returns:
            Profile if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(ProfileModel, profile_id)
            return model.to_domain() if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving profile {profile_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve profile: {e}") from e

    def list_profiles(
        self,
        search: Optional[str] = None,
        skill: Optional[str] = None,
        limit: int = 50,
    ) -> List[Profile]:
        """Browse profiles, newest first.

        Args:
            search: Case-insensitive substring of the participant's name
            skill: Exact skill that must appear in the primary skills list
            limit: Maximum number of profiles returned

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(ProfileModel).order_by(
                ProfileModel.created_at.desc(), ProfileModel.id.asc()
            )
            if search:
                stmt = stmt.where(func.lower(ProfileModel.name).contains(search.lower()))

            profiles = [model.to_domain() for model in self.session.execute(stmt).scalars()]

            # JSON containment is not portable across backends, so skills filter in Python
            if skill:
                profiles = [p for p in profiles if skill in p.skills]

            return profiles[:limit]

        except SQLAlchemyError as e:
            logger.error(f"Error listing profiles: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list profiles: {e}") from e

    def list_all(self) -> List[Profile]:
        """Every stored profile, ordered by id."""
        return self._query(select(ProfileModel).order_by(ProfileModel.id), "list all profiles")

    def list_by_ids(self, profile_ids: Sequence[int]) -> List[Profile]:
        if not profile_ids:
            return []
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.id.in_(list(profile_ids)))
            .order_by(ProfileModel.id)
        )
        return self._query(stmt, "list profiles by id")

    def list_missing_embeddings(self) -> List[Profile]:
        """Profiles that still need an embedding, ordered by id."""
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.embedding.is_(None))
            .order_by(ProfileModel.id)
        )
        return self._query(stmt, "list profiles without embeddings")

    def list_with_embeddings(self) -> List[Profile]:
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.embedding.is_not(None))
            .order_by(ProfileModel.id)
        )
        return self._query(stmt, "list profiles with embeddings")

    def has_embeddings(self) -> bool:
        """Whether at least one profile has been embedded."""
        try:
            stmt = select(ProfileModel.id).where(ProfileModel.embedding.is_not(None)).limit(1)
            return self.session.execute(stmt).first() is not None
        except SQLAlchemyError as e:
            logger.error(f"Error probing for embeddings: {e}", exc_info=True)
            raise PersistenceError(f"Failed to check embeddings: {e}") from e

    def upsert(self, profile: Profile) -> Profile:
        """Insert a new profile or overwrite the stored one with the same id.

        Raises:
            DataIntegrityError: On constraint violation (e.g. duplicate email)
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(ProfileModel, profile.id)

            if existing:
                existing.apply(profile)
                self.session.flush()
                return existing.to_domain()

            model = ProfileModel.from_domain(profile)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting profile {profile.id}: {e}", exc_info=True)
            raise DataIntegrityError(
                f"Failed to upsert profile due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting profile {profile.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert profile: {e}") from e

    def update_status(
        self,
        profile_id: int,
        status: str,
        availability_text: Optional[str] = None,
    ) -> Profile:
        """Set the traffic-light status (and optionally the availability text).

        The tag is stored normalized. Passing availability_text=None leaves the
        stored text untouched.

        Raises:
            ValueError: If status is not one of green, yellow or red
            RecordNotFoundError: If the profile does not exist
            PersistenceError: If database error occurs
        """
        tag = normalize_status(status)
        if tag is StatusTag.UNKNOWN:
            raise ValueError(f"Unrecognized status '{status}'; expected green, yellow or red")

        model = self._require(profile_id)
        try:
            model.custom_5 = tag.value
            if availability_text is not None:
                model.custom_6 = availability_text
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error updating status for profile {profile_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update status: {e}") from e

        logger.info(
            "Profile status updated",
            extra={
                "event": "profile.status.updated",
                "profile_id": profile_id,
                "status": tag.value,
            },
        )
        return model.to_domain()

    def update_embedding(self, profile_id: int, vector: Sequence[float]) -> None:
        """Store a freshly generated embedding.

        Raises:
            RecordNotFoundError: If the profile does not exist
            PersistenceError: If database error occurs
        """
        model = self._require(profile_id)
        try:
            model.embedding = [float(x) for x in vector]
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error storing embedding for profile {profile_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update embedding: {e}") from e

    def list_all_skills(self) -> List[str]:
        """Distinct primary skills across all profiles, trimmed and sorted."""
        skills = set()
        for profile in self.list_all():
            skills.update(s.strip() for s in profile.skills if s.strip())
        return sorted(skills)

    def get_status_counts(self) -> Dict[str, int]:
        """Number of profiles per normalized status tag (every tag present)."""
        counts = {tag.value: 0 for tag in StatusTag}
        try:
            rows = self.session.execute(select(ProfileModel.custom_5)).scalars()
            for raw in rows:
                counts[normalize_status(raw).value] += 1
        except SQLAlchemyError as e:
            logger.error(f"Error counting statuses: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count statuses: {e}") from e
        return counts

    def get_top_skills(self, n: int = 10) -> List[Tuple[str, int]]:
        """Most common primary skills as (skill, count), ties broken alphabetically."""
        counter: Counter = Counter()
        for profile in self.list_all():
            counter.update({s.strip() for s in profile.skills if s.strip()})
        ranked = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:n]

    def count(self) -> int:
        try:
            return self.session.execute(select(func.count(ProfileModel.id))).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting profiles: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count profiles: {e}") from e

    def _require(self, profile_id: int) -> ProfileModel:
        try:
            model = self.session.get(ProfileModel, profile_id)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving profile {profile_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve profile: {e}") from e

        if model is None:
            raise RecordNotFoundError(f"Profile with id {profile_id} not found")
        return model

    def _query(self, stmt, action: str) -> List[Profile]:
        try:
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to {action}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to {action}: {e}") from e
