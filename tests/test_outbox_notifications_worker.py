from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from mockrise.core.enums import NotificationTypeEnum, OutboxStatusEnum, RoleEnum
from mockrise.modules.notifications.outbox_worker import NotificationsOutboxWorker
from tests.fakes import FakeIdentityRepository, make_user

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@dataclass
class FakeOutboxEvent:
    id: UUID
    event_type: str
    payload: dict
    aggregate_id: str = field(default_factory=lambda: str(uuid4()))
    status: OutboxStatusEnum = OutboxStatusEnum.PENDING
    retries: int = 0
    occurred_at: datetime = field(default_factory=lambda: NOW)
    updated_at: datetime = field(default_factory=lambda: NOW)
    processed_at: datetime | None = None
    error_message: str | None = None


@dataclass
class FakeNotification:
    user_id: UUID
    title: str
    message: str
    type: NotificationTypeEnum
    details: dict


class FakeOutboxRepository:
    def __init__(self, events: list[FakeOutboxEvent]) -> None:
        self.events = events

    async def list_pending(self, limit: int) -> list[FakeOutboxEvent]:
        return [event for event in self.events if event.status == OutboxStatusEnum.PENDING][:limit]

    async def list_retryable_failed(self, limit: int, max_retries: int) -> list[FakeOutboxEvent]:
        return [
            event
            for event in self.events
            if event.status == OutboxStatusEnum.FAILED and event.retries < max_retries
        ][:limit]

    async def mark_pending(self, event: FakeOutboxEvent) -> FakeOutboxEvent:
        event.status = OutboxStatusEnum.PENDING
        event.error_message = None
        return event

    async def mark_processed(self, event: FakeOutboxEvent, processed_at: datetime) -> FakeOutboxEvent:
        event.status = OutboxStatusEnum.PROCESSED
        event.processed_at = processed_at
        return event

    async def mark_failed(self, event: FakeOutboxEvent, error_message: str) -> FakeOutboxEvent:
        event.status = OutboxStatusEnum.FAILED
        event.retries += 1
        event.error_message = error_message
        return event


class FakeNotificationsRepository:
    def __init__(self) -> None:
        self.notifications: list[FakeNotification] = []
        self.fail_on_call: int | None = None
        self.calls = 0

    @asynccontextmanager
    async def savepoint(self):
        mark = len(self.notifications)
        try:
            yield
        except Exception:
            del self.notifications[mark:]
            raise

    async def create_notification(
        self,
        user_id: UUID,
        title: str,
        message: str,
        type_: NotificationTypeEnum = NotificationTypeEnum.INFO,
        details: dict | None = None,
    ) -> FakeNotification:
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise RuntimeError("notification insert failed")
        notification = FakeNotification(user_id, title, message, type_, details or {})
        self.notifications.append(notification)
        return notification

    def for_user(self, user_id: UUID) -> list[FakeNotification]:
        return [item for item in self.notifications if item.user_id == user_id]


def make_worker(events: list[FakeOutboxEvent], *, users=(), now: datetime = NOW):
    notifications_repo = FakeNotificationsRepository()
    worker = NotificationsOutboxWorker(
        outbox_repository=FakeOutboxRepository(events),  # type: ignore[arg-type]
        notifications_repository=notifications_repo,  # type: ignore[arg-type]
        identity_repository=FakeIdentityRepository(list(users)),  # type: ignore[arg-type]
        now_provider=lambda: now,
    )
    return worker, notifications_repo


def snapshot(trainee, interviewer=None, **extra) -> dict:
    return {
        "mode": "live" if interviewer else "ai",
        "status": "scheduled",
        "trainee_id": str(trainee.id),
        "trainee_name": trainee.name,
        "interviewer_id": str(interviewer.id) if interviewer else None,
        "interviewer_name": interviewer.name if interviewer else None,
        "scheduled_date": "2026-03-11",
        "time_slot": "10:00 AM",
        "language": "english",
        **extra,
    }


@pytest.mark.asyncio
async def test_scheduled_live_event_notifies_admins_and_interviewer() -> None:
    admins = [make_user(RoleEnum.ADMIN), make_user(RoleEnum.ADMIN)]
    trainee = make_user(RoleEnum.TRAINEE, name="Sam")
    interviewer = make_user(RoleEnum.INTERVIEWER, name="Dana")
    event = FakeOutboxEvent(id=uuid4(), event_type="interview.scheduled", payload=snapshot(trainee, interviewer))
    worker, notifications_repo = make_worker([event], users=[*admins, trainee, interviewer])

    stats = await worker.run_once()

    assert stats == {"requeued": 0, "processed": 1, "failed": 0, "dispatched": 3}
    assert event.status == OutboxStatusEnum.PROCESSED
    for admin in admins:
        [note] = notifications_repo.for_user(admin.id)
        assert note.title == "New Interview Scheduled"
        assert "Sam has scheduled a Live Mock Interview interview on March 11, 2026 at 10:00 AM" in note.message
    [assigned] = notifications_repo.for_user(interviewer.id)
    assert assigned.title == "New Interview Assigned"
    assert assigned.details["interviewId"] == event.aggregate_id
    assert notifications_repo.for_user(trainee.id) == []


@pytest.mark.asyncio
async def test_rescheduled_event_reaches_previous_and_new_interviewers_once() -> None:
    admin = make_user(RoleEnum.ADMIN)
    trainee = make_user(RoleEnum.TRAINEE)
    previous = make_user(RoleEnum.INTERVIEWER)
    current = make_user(RoleEnum.INTERVIEWER)
    event = FakeOutboxEvent(
        id=uuid4(),
        event_type="interview.rescheduled",
        payload=snapshot(
            trainee,
            current,
            previous_scheduled_date="2026-03-11",
            previous_time_slot="09:00 AM",
            previous_interviewer_id=str(previous.id),
        ),
    )
    worker, notifications_repo = make_worker([event], users=[admin, trainee, previous, current])

    stats = await worker.run_once()

    assert stats["dispatched"] == 3
    assert {note.user_id for note in notifications_repo.notifications} == {admin.id, previous.id, current.id}
    assert "from March 11, 2026 at 09:00 AM to March 11, 2026 at 10:00 AM" in notifications_repo.notifications[0].message


@pytest.mark.asyncio
async def test_cancelled_event_warns_trainee_and_interviewer_with_reason() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    interviewer = make_user(RoleEnum.INTERVIEWER)
    event = FakeOutboxEvent(
        id=uuid4(),
        event_type="interview.cancelled",
        payload=snapshot(trainee, interviewer, reason="Room unavailable"),
    )
    worker, notifications_repo = make_worker([event], users=[trainee, interviewer])

    await worker.run_once()

    [trainee_note] = notifications_repo.for_user(trainee.id)
    [interviewer_note] = notifications_repo.for_user(interviewer.id)
    assert trainee_note.type == NotificationTypeEnum.WARNING
    assert trainee_note.message.endswith("Reason: Room unavailable")
    assert interviewer_note.details["reason"] == "Room unavailable"


@pytest.mark.asyncio
async def test_updated_event_lists_changes_for_trainee() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    event = FakeOutboxEvent(
        id=uuid4(),
        event_type="interview.updated",
        payload=snapshot(trainee, changes=["Date changed from 2026-03-11 to 2026-03-12"]),
    )
    worker, notifications_repo = make_worker([event], users=[trainee])

    await worker.run_once()

    [note] = notifications_repo.notifications
    assert note.user_id == trainee.id
    assert note.title == "Interview Updated"
    assert "Date changed from 2026-03-11 to 2026-03-12" in note.message


@pytest.mark.asyncio
async def test_status_event_notifies_trainee_only() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    interviewer = make_user(RoleEnum.INTERVIEWER)
    event = FakeOutboxEvent(
        id=uuid4(),
        event_type="interview.status.updated",
        payload=snapshot(trainee, interviewer, status="in_progress", previous_status="scheduled"),
    )
    worker, notifications_repo = make_worker([event], users=[trainee, interviewer])

    await worker.run_once()

    [note] = notifications_repo.notifications
    assert note.user_id == trainee.id
    assert note.message.endswith("is now in progress.")


@pytest.mark.asyncio
async def test_unknown_event_is_processed_without_dispatch() -> None:
    event = FakeOutboxEvent(id=uuid4(), event_type="unknown.event", payload={"trainee_id": str(uuid4())})
    worker, notifications_repo = make_worker([event])

    stats = await worker.run_once()

    assert stats == {"requeued": 0, "processed": 1, "failed": 0, "dispatched": 0}
    assert notifications_repo.notifications == []


@pytest.mark.asyncio
async def test_malformed_event_is_marked_failed() -> None:
    event = FakeOutboxEvent(id=uuid4(), event_type="interview.cancelled", payload={"reason": "x"})
    worker, _ = make_worker([event])

    stats = await worker.run_once()

    assert stats["failed"] == 1
    assert event.status == OutboxStatusEnum.FAILED
    assert event.retries == 1
    assert "trainee_id" in (event.error_message or "")


@pytest.mark.asyncio
async def test_failed_event_is_requeued_only_after_backoff() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    waiting = FakeOutboxEvent(
        id=uuid4(),
        event_type="interview.status.updated",
        payload=snapshot(trainee, status="completed"),
        status=OutboxStatusEnum.FAILED,
        retries=2,
        updated_at=NOW - timedelta(seconds=59),
    )
    ready = FakeOutboxEvent(
        id=uuid4(),
        event_type="interview.status.updated",
        payload=snapshot(trainee, status="completed"),
        status=OutboxStatusEnum.FAILED,
        retries=1,
        updated_at=NOW - timedelta(seconds=30),
    )
    exhausted = FakeOutboxEvent(
        id=uuid4(),
        event_type="interview.status.updated",
        payload=snapshot(trainee, status="completed"),
        status=OutboxStatusEnum.FAILED,
        retries=5,
        updated_at=NOW - timedelta(days=1),
    )
    worker, notifications_repo = make_worker([waiting, ready, exhausted], users=[trainee])

    stats = await worker.run_once()

    assert stats == {"requeued": 1, "processed": 1, "failed": 0, "dispatched": 1}
    assert ready.status == OutboxStatusEnum.PROCESSED
    assert waiting.status == OutboxStatusEnum.FAILED
    assert exhausted.status == OutboxStatusEnum.FAILED
    assert len(notifications_repo.notifications) == 1


@pytest.mark.asyncio
async def test_partial_dispatch_is_discarded_and_retry_does_not_duplicate() -> None:
    admin = make_user(RoleEnum.ADMIN)
    trainee = make_user(RoleEnum.TRAINEE)
    interviewer = make_user(RoleEnum.INTERVIEWER)
    event = FakeOutboxEvent(id=uuid4(), event_type="interview.scheduled", payload=snapshot(trainee, interviewer))
    worker, notifications_repo = make_worker([event], users=[admin, trainee, interviewer])
    notifications_repo.fail_on_call = 2

    stats = await worker.run_once()

    assert stats == {"requeued": 0, "processed": 0, "failed": 1, "dispatched": 0}
    assert event.status == OutboxStatusEnum.FAILED
    assert notifications_repo.notifications == []

    retry_worker = NotificationsOutboxWorker(
        outbox_repository=worker.outbox_repository,
        notifications_repository=notifications_repo,  # type: ignore[arg-type]
        identity_repository=worker.identity_repository,
        now_provider=lambda: NOW + timedelta(minutes=5),
    )
    stats = await retry_worker.run_once()

    assert stats == {"requeued": 1, "processed": 1, "failed": 0, "dispatched": 2}
    assert event.status == OutboxStatusEnum.PROCESSED
    assert len(notifications_repo.for_user(admin.id)) == 1
    assert len(notifications_repo.for_user(interviewer.id)) == 1
