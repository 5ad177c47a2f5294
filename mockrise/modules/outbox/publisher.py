"""Best-effort publishing of interview lifecycle events."""

from __future__ import annotations

import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from mockrise.modules.outbox.models import OutboxEvent

logger = logging.getLogger(__name__)


class OutboxWriter(Protocol):
    async def create_outbox_event(
        self,
        aggregate_type: str,
        aggregate_id: str,
        event_type: str,
        payload: dict,
    ) -> OutboxEvent: ...


class InterviewEventPublisher:
    """Enqueue interview events next to the booking write.

    Each event goes into its own savepoint. A failed enqueue is logged and
    dropped so the booking operation itself still commits.
    """

    aggregate_type = "interview"

    def __init__(self, repository: OutboxWriter) -> None:
        self.repository = repository

    async def publish(self, event_type: str, interview_id: UUID, payload: dict) -> bool:
        try:
            await self.repository.create_outbox_event(
                aggregate_type=self.aggregate_type,
                aggregate_id=str(interview_id),
                event_type=event_type,
                payload={"interview_id": str(interview_id), **payload},
            )
        except SQLAlchemyError:
            logger.exception("Failed to enqueue %s for interview %s", event_type, interview_id)
            return False
        return True
