"""Outbox consumer that materializes interview events into notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from uuid import UUID

from mockrise.core.enums import NotificationTypeEnum, RoleEnum
from mockrise.modules.booking.events import (
    INTERVIEW_CANCELLED,
    INTERVIEW_RESCHEDULED,
    INTERVIEW_SCHEDULED,
    INTERVIEW_STATUS_UPDATED,
    INTERVIEW_UPDATED,
)
from mockrise.modules.identity.repository import IdentityRepository
from mockrise.modules.notifications.repository import NotificationsRepository
from mockrise.modules.outbox.models import OutboxEvent
from mockrise.modules.outbox.repository import OutboxRepository
from mockrise.shared.utils import utc_now

logger = logging.getLogger(__name__)

MODE_TITLES = {
    "live": "Live Mock Interview",
    "peer": "Peer-to-Peer",
    "family": "Family & Friends",
    "ai": "AI-Powered Interview",
}


@dataclass(slots=True)
class NotificationMessage:
    user_id: UUID
    title: str
    message: str
    type: NotificationTypeEnum = NotificationTypeEnum.INFO
    details: dict = field(default_factory=dict)


def _format_day(raw: str | None) -> str:
    if not raw:
        return "Not specified"
    day = date.fromisoformat(raw)
    return f"{day:%B} {day.day}, {day.year}"


class NotificationsOutboxWorker:
    """Process pending outbox events and create inbox notifications."""

    def __init__(
        self,
        outbox_repository: OutboxRepository,
        notifications_repository: NotificationsRepository,
        identity_repository: IdentityRepository,
        *,
        batch_size: int = 100,
        max_retries: int = 5,
        base_backoff_seconds: int = 30,
        max_backoff_seconds: int = 300,
        now_provider=utc_now,
    ) -> None:
        self.outbox_repository = outbox_repository
        self.notifications_repository = notifications_repository
        self.identity_repository = identity_repository
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.base_backoff_seconds = base_backoff_seconds
        self.max_backoff_seconds = max_backoff_seconds
        self.now_provider = now_provider

    async def run_once(self) -> dict[str, int]:
        """Run one processing cycle."""
        stats = {"requeued": 0, "processed": 0, "failed": 0, "dispatched": 0}
        stats["requeued"] = await self._requeue_retryable_failed_events()

        events = await self.outbox_repository.list_pending(limit=self.batch_size)
        for event in events:
            try:
                # All notifications of an event land together or not at all.
                async with self.notifications_repository.savepoint():
                    messages = await self._build_messages(event)
                    for message in messages:
                        await self.notifications_repository.create_notification(
                            user_id=message.user_id,
                            title=message.title,
                            message=message.message,
                            type_=message.type,
                            details={"interviewId": event.aggregate_id, **message.details},
                        )
                stats["dispatched"] += len(messages)

                await self.outbox_repository.mark_processed(event, self.now_provider())
                stats["processed"] += 1
            except Exception as exc:
                logger.warning("Outbox event %s (%s) failed: %s", event.id, event.event_type, exc)
                await self.outbox_repository.mark_failed(event, str(exc))
                stats["failed"] += 1
        return stats

    async def _requeue_retryable_failed_events(self) -> int:
        now = self.now_provider()
        failed_events = await self.outbox_repository.list_retryable_failed(
            limit=self.batch_size,
            max_retries=self.max_retries,
        )
        requeued = 0
        for event in failed_events:
            if self._is_backoff_elapsed(event, now):
                await self.outbox_repository.mark_pending(event)
                requeued += 1
        return requeued

    def _is_backoff_elapsed(self, event: OutboxEvent, now: datetime) -> bool:
        retries = max(event.retries, 1)
        backoff_seconds = min(self.max_backoff_seconds, self.base_backoff_seconds * (2 ** (retries - 1)))
        last_attempt_at = event.updated_at or event.occurred_at
        return now >= last_attempt_at + timedelta(seconds=backoff_seconds)

    async def _build_messages(self, event: OutboxEvent) -> list[NotificationMessage]:
        payload = event.payload or {}
        event_type = event.event_type

        trainee_id = self._required_uuid(payload, "trainee_id")
        interviewer_id = self._optional_uuid(payload, "interviewer_id")
        trainee_name = payload.get("trainee_name") or "A trainee"
        mode_title = MODE_TITLES.get(payload.get("mode", ""), "Interview")
        when = f"{_format_day(payload.get('scheduled_date'))} at {payload.get('time_slot') or 'Not specified'}"
        language = str(payload.get("language") or "Not specified").capitalize()
        details = {
            "mode": payload.get("mode"),
            "scheduledDate": payload.get("scheduled_date"),
            "timeSlot": payload.get("time_slot"),
        }

        if event_type == INTERVIEW_SCHEDULED:
            interviewer_note = ""
            if payload.get("interviewer_name"):
                interviewer_note = f" Interviewer: {payload['interviewer_name']}"
            admin_ids = await self.identity_repository.list_user_ids_by_role(RoleEnum.ADMIN)
            messages = [
                NotificationMessage(
                    user_id=admin_id,
                    title="New Interview Scheduled",
                    message=(
                        f"{trainee_name} has scheduled a {mode_title} interview on {when}. "
                        f"Language: {language}.{interviewer_note}"
                    ),
                    details={**details, "type": "interview_scheduled", "traineeId": str(trainee_id)},
                )
                for admin_id in admin_ids
            ]
            if interviewer_id is not None and payload.get("mode") == "live":
                messages.append(
                    NotificationMessage(
                        user_id=interviewer_id,
                        title="New Interview Assigned",
                        message=(
                            f"You have been assigned a new {mode_title} interview with {trainee_name} "
                            f"on {when}. Language: {language}."
                        ),
                        details={**details, "type": "interview_assigned", "traineeId": str(trainee_id)},
                    ),
                )
            return messages

        if event_type == INTERVIEW_RESCHEDULED:
            previous_when = (
                f"{_format_day(payload.get('previous_scheduled_date'))} "
                f"at {payload.get('previous_time_slot') or 'Not specified'}"
            )
            admin_ids = await self.identity_repository.list_user_ids_by_role(RoleEnum.ADMIN)
            recipients = self._unique_recipients(
                *admin_ids,
                interviewer_id,
                self._optional_uuid(payload, "previous_interviewer_id"),
            )
            return [
                NotificationMessage(
                    user_id=user_id,
                    title="Interview Rescheduled",
                    message=f"{trainee_name}'s {mode_title} interview moved from {previous_when} to {when}.",
                    details={**details, "type": "interview_rescheduled"},
                )
                for user_id in recipients
            ]

        if event_type == INTERVIEW_UPDATED:
            change_message = ". ".join(payload.get("changes") or [])
            messages = [
                NotificationMessage(
                    user_id=trainee_id,
                    title="Interview Updated",
                    message=f"Your interview has been updated. {change_message}. Scheduled for: {when}.",
                    details={**details, "type": "interview_updated", "changes": payload.get("changes") or []},
                ),
            ]
            if interviewer_id is not None:
                messages.append(
                    NotificationMessage(
                        user_id=interviewer_id,
                        title="Interview Updated",
                        message=(
                            f"An interview you're assigned to has been updated. {change_message}. "
                            f"Scheduled for: {when}."
                        ),
                        details={**details, "type": "interview_updated", "changes": payload.get("changes") or []},
                    ),
                )
            return messages

        if event_type == INTERVIEW_CANCELLED:
            reason = payload.get("reason")
            suffix = f" Reason: {reason}" if reason else ""
            cancel_details = {**details, "type": "interview_cancelled", "reason": reason or "No reason provided"}
            messages = [
                NotificationMessage(
                    user_id=trainee_id,
                    title="Interview Cancelled",
                    message=f"Your interview scheduled for {when} has been cancelled.{suffix}",
                    type=NotificationTypeEnum.WARNING,
                    details=cancel_details,
                ),
            ]
            if interviewer_id is not None:
                messages.append(
                    NotificationMessage(
                        user_id=interviewer_id,
                        title="Interview Cancelled",
                        message=(
                            f"An interview you were assigned to (scheduled for {when}) has been cancelled.{suffix}"
                        ),
                        type=NotificationTypeEnum.WARNING,
                        details=cancel_details,
                    ),
                )
            return messages

        if event_type == INTERVIEW_STATUS_UPDATED:
            status = str(payload.get("status", "unknown")).replace("_", " ")
            return [
                NotificationMessage(
                    user_id=trainee_id,
                    title="Interview Status Updated",
                    message=f"Your {mode_title} interview on {when} is now {status}.",
                    details={**details, "type": "interview_status_updated", "status": payload.get("status")},
                ),
            ]

        return []

    @staticmethod
    def _required_uuid(payload: dict, key: str) -> UUID:
        value = payload.get(key)
        if value is None:
            raise ValueError(f"Missing required key: {key}")
        return UUID(str(value))

    @staticmethod
    def _optional_uuid(payload: dict, key: str) -> UUID | None:
        value = payload.get(key)
        if value is None:
            return None
        return UUID(str(value))

    @staticmethod
    def _unique_recipients(*recipients: UUID | None) -> list[UUID]:
        unique: list[UUID] = []
        seen: set[UUID] = set()
        for recipient in recipients:
            if recipient is not None and recipient not in seen:
                unique.append(recipient)
                seen.add(recipient)
        return unique
