"""Local persistence for the current plan, the goal draft and the challenge archive.

Rows hold the JSON documents produced by ``to_dict``. A document written by a
different schema version, or one that no longer decodes, is deleted on load
and treated as absent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, sessionmaker

from fit14.db import session_scope
from fit14.errors import InvalidInput
from fit14.logging_config import log_context
from fit14.models import SCHEMA_VERSION, GoalDraft, StoredChallenge, StoredPlan
from fit14.services.archive import CompletedChallenge, archive
from fit14.services.badges import Badge, newly_earned_badges
from fit14.services.goal_data import GoalDataAggregate
from fit14.services.workout_plan import WorkoutPlan

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DRAFT_ID = 1


@dataclass(frozen=True)
class ArchiveResult:
    challenge: CompletedChallenge
    new_badges: tuple[Badge, ...] = ()


class PlanStore:
    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory

    def _session(self):
        return session_scope(self._session_factory)

    def _decode(self, session: Session, row, kind: str, decode: Callable[[dict], T]) -> Optional[T]:
        if row.schema_version != SCHEMA_VERSION:
            logger.warning(
                "Discarding stored %s with schema version %s", kind, row.schema_version,
                extra={"ctx_expected_version": SCHEMA_VERSION},
            )
            session.delete(row)
            return None
        try:
            return decode(row.document)
        except (AttributeError, KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable stored %s", kind, exc_info=True)
            session.delete(row)
            return None

    # -- Current plan --

    def save_plan(self, plan: WorkoutPlan) -> None:
        """Store ``plan`` as the single current plan, replacing any other."""
        with self._session() as session:
            session.execute(delete(StoredPlan).where(StoredPlan.id != str(plan.id)))
            session.merge(
                StoredPlan(
                    id=str(plan.id),
                    status=plan.status.value,
                    schema_version=SCHEMA_VERSION,
                    document=plan.to_dict(),
                )
            )
        logger.debug("Saved plan", extra={"ctx_plan_id": str(plan.id), "ctx_status": plan.status.value})

    def load_current_plan(self) -> Optional[WorkoutPlan]:
        with self._session() as session:
            row = session.scalars(select(StoredPlan).order_by(StoredPlan.updated_at.desc())).first()
            if row is None:
                return None
            return self._decode(session, row, "plan", WorkoutPlan.from_dict)

    def clear_current_plan(self) -> None:
        with self._session() as session:
            session.execute(delete(StoredPlan))

    # -- Goal draft --

    def save_goal_data(self, aggregate: GoalDataAggregate) -> None:
        with self._session() as session:
            session.merge(
                GoalDraft(id=_DRAFT_ID, schema_version=SCHEMA_VERSION, document=aggregate.to_dict())
            )

    def load_goal_data(self) -> Optional[GoalDataAggregate]:
        with self._session() as session:
            row = session.get(GoalDraft, _DRAFT_ID)
            if row is None:
                return None
            return self._decode(session, row, "goal draft", GoalDataAggregate.from_dict)

    def clear_goal_data(self) -> None:
        with self._session() as session:
            session.execute(delete(GoalDraft))

    # -- Archive --

    def archive_current_plan(self, completion_date: Optional[date] = None) -> ArchiveResult:
        """Move the current plan into the archive and clear it.

        The result carries the badges this completion unlocked, if any.
        """
        plan = self.load_current_plan()
        if plan is None:
            raise InvalidInput("There is no current plan to archive")

        previous_count = self.completion_count()
        challenge = archive(plan, completion_date)
        with self._session() as session:
            session.add(
                StoredChallenge(
                    id=str(challenge.id),
                    original_plan_id=str(challenge.original_plan_id),
                    title=challenge.challenge_title,
                    completion_date=challenge.completion_date,
                    schema_version=SCHEMA_VERSION,
                    document=challenge.to_dict(),
                )
            )
            session.execute(delete(StoredPlan))

        with log_context(plan_id=str(plan.id), challenge_id=str(challenge.id)):
            logger.info(
                "Archived plan", extra={"ctx_success_rate": round(challenge.success_rate, 1)}
            )
            new_badges = newly_earned_badges(previous_count, previous_count + 1)
        return ArchiveResult(challenge, tuple(new_badges))

    def list_challenges(self) -> list[CompletedChallenge]:
        """All readable archived challenges, newest first."""
        with self._session() as session:
            rows = session.scalars(
                select(StoredChallenge).order_by(
                    StoredChallenge.completion_date.desc(), StoredChallenge.created_at.desc()
                )
            ).all()
            challenges = []
            for row in rows:
                challenge = self._decode(session, row, "challenge", CompletedChallenge.from_dict)
                if challenge is not None:
                    challenges.append(challenge)
            return challenges

    def get_challenge(self, challenge_id: UUID) -> Optional[CompletedChallenge]:
        with self._session() as session:
            row = session.get(StoredChallenge, str(challenge_id))
            if row is None:
                return None
            return self._decode(session, row, "challenge", CompletedChallenge.from_dict)

    def delete_challenge(self, challenge_id: UUID) -> bool:
        with self._session() as session:
            result = session.execute(delete(StoredChallenge).where(StoredChallenge.id == str(challenge_id)))
            return result.rowcount > 0

    def completion_count(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(StoredChallenge)) or 0
