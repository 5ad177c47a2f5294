from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

import pytest

import mockrise.modules.interviewer.service as interviewer_service_module
from mockrise.core.enums import InterviewModeEnum, InterviewStatusEnum, RoleEnum
from mockrise.modules.booking.lifecycle import apply_status
from mockrise.modules.booking.slots import LiveSlotAllocator
from mockrise.modules.interviewer.service import InterviewerService
from mockrise.modules.outbox.publisher import InterviewEventPublisher
from mockrise.modules.booking.metadata import linked_slot_id
from mockrise.modules.booking.slots import SLOT_TAKEN_MESSAGE
from mockrise.shared.exceptions import BadRequestException, ForbiddenException, NotFoundException
from mockrise.shared.timeslots import parse_time_label
from tests.fakes import (
    FakeAvailabilityRepository,
    FakeBookingRepository,
    FakeIdentityRepository,
    FakeInterview,
    FakeOutboxWriter,
    make_live_interview,
    make_slot,
    make_user,
)

FIXED_NOW = datetime(2026, 3, 11, 10, 5, tzinfo=UTC)
DAY = date(2026, 3, 11)


@pytest.fixture(autouse=True)
def _frozen_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(interviewer_service_module, "utc_now", lambda: FIXED_NOW)


def make_service(*, users=(), slots=(), interviews=()):
    booking_repo = FakeBookingRepository(list(interviews))
    availability_repo = FakeAvailabilityRepository(list(slots))
    outbox = FakeOutboxWriter()
    service = InterviewerService(
        booking_repository=booking_repo,  # type: ignore[arg-type]
        slots=LiveSlotAllocator(availability_repo, FakeIdentityRepository(list(users))),  # type: ignore[arg-type]
        publisher=InterviewEventPublisher(outbox),
    )
    return service, outbox


@pytest.mark.asyncio
async def test_assigned_list_contains_only_own_live_interviews_in_time_order() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    interviewer = make_user(RoleEnum.INTERVIEWER)
    colleague = make_user(RoleEnum.INTERVIEWER)
    late = make_live_interview(trainee, make_slot(interviewer, DAY, parse_time_label("03:00 PM")))
    early = make_live_interview(trainee, make_slot(interviewer, DAY, parse_time_label("09:00 AM")))
    foreign = make_live_interview(trainee, make_slot(colleague, DAY, parse_time_label("11:00 AM")))
    service, _ = make_service(users=[trainee, interviewer, colleague], interviews=[late, early, foreign])

    items = await service.list_assigned(interviewer, None)

    assert [item.id for item in items] == [early.id, late.id]


@pytest.mark.asyncio
async def test_interview_of_another_interviewer_is_forbidden() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    interviewer = make_user(RoleEnum.INTERVIEWER)
    colleague = make_user(RoleEnum.INTERVIEWER)
    interview = make_live_interview(trainee, make_slot(colleague, DAY, parse_time_label("11:00 AM")))
    service, _ = make_service(users=[trainee, interviewer, colleague], interviews=[interview])

    with pytest.raises(ForbiddenException):
        await service.get_assigned(interview.id, interviewer)
    with pytest.raises(NotFoundException):
        await service.get_assigned(uuid4(), interviewer)


@pytest.mark.asyncio
async def test_starting_and_completing_stamp_timestamps() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    interviewer = make_user(RoleEnum.INTERVIEWER)
    interview = make_live_interview(trainee, make_slot(interviewer, DAY, parse_time_label("10:00 AM")))
    service, outbox = make_service(users=[trainee, interviewer], interviews=[interview])

    await service.update_status(interview.id, InterviewStatusEnum.IN_PROGRESS, interviewer)
    assert interview.started_at == FIXED_NOW
    assert interview.completed_at is None

    await service.update_status(interview.id, InterviewStatusEnum.COMPLETED, interviewer)
    assert interview.status == InterviewStatusEnum.COMPLETED
    assert interview.started_at == FIXED_NOW
    assert interview.completed_at == FIXED_NOW

    assert outbox.event_types() == ["interview.status.updated", "interview.status.updated"]
    assert outbox.events[1]["payload"]["previous_status"] == "in_progress"
    assert outbox.events[1]["payload"]["status"] == "completed"


@pytest.mark.asyncio
async def test_interviewer_cancel_releases_the_slot_once() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    interviewer = make_user(RoleEnum.INTERVIEWER)
    slot = make_slot(interviewer, DAY, parse_time_label("10:00 AM"))
    interview = make_live_interview(trainee, slot)
    service, _ = make_service(users=[trainee, interviewer], slots=[slot], interviews=[interview])

    await service.update_status(interview.id, InterviewStatusEnum.CANCELLED, interviewer)
    assert slot.is_booked is False
    assert interview.cancelled_at == FIXED_NOW
    version = slot.version

    await service.update_status(interview.id, InterviewStatusEnum.CANCELLED, interviewer)
    assert slot.version == version


@pytest.mark.asyncio
async def test_reopening_after_cancel_reclaims_the_free_slot() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    interviewer = make_user(RoleEnum.INTERVIEWER)
    slot = make_slot(interviewer, DAY, parse_time_label("10:00 AM"))
    interview = make_live_interview(trainee, slot)
    service, outbox = make_service(users=[trainee, interviewer], slots=[slot], interviews=[interview])

    await service.update_status(interview.id, InterviewStatusEnum.CANCELLED, interviewer)
    assert slot.is_booked is False

    await service.update_status(interview.id, InterviewStatusEnum.SCHEDULED, interviewer)

    assert interview.status == InterviewStatusEnum.SCHEDULED
    assert slot.is_booked is True
    assert slot.interview_id == interview.id
    assert linked_slot_id(interview.details) == slot.id
    assert outbox.events[-1]["payload"]["previous_status"] == "cancelled"


@pytest.mark.asyncio
async def test_reopening_is_rejected_when_the_slot_was_rebooked() -> None:
    trainee = make_user(RoleEnum.TRAINEE)
    rival_trainee = make_user(RoleEnum.TRAINEE)
    interviewer = make_user(RoleEnum.INTERVIEWER)
    slot = make_slot(interviewer, DAY, parse_time_label("10:00 AM"))
    interview = make_live_interview(trainee, slot)
    service, outbox = make_service(
        users=[trainee, rival_trainee, interviewer],
        slots=[slot],
        interviews=[interview],
    )

    await service.update_status(interview.id, InterviewStatusEnum.CANCELLED, interviewer)
    rival = make_live_interview(rival_trainee, slot)

    with pytest.raises(BadRequestException) as exc:
        await service.update_status(interview.id, InterviewStatusEnum.SCHEDULED, interviewer)

    assert exc.value.message == SLOT_TAKEN_MESSAGE
    active = [item for item in (interview, rival) if item.status != InterviewStatusEnum.CANCELLED]
    assert active == [rival]
    assert slot.interview_id == rival.id
    assert len(outbox.events) == 1


def test_apply_status_keeps_first_timestamps() -> None:
    started = datetime(2026, 3, 11, 9, 0, tzinfo=UTC)
    interview = FakeInterview(
        id=uuid4(),
        mode=InterviewModeEnum.LIVE,
        user_id=uuid4(),
        scheduled_date=DAY,
        time_slot=540,
        status=InterviewStatusEnum.IN_PROGRESS,
        started_at=started,
    )

    entering_cancelled = apply_status(interview, InterviewStatusEnum.COMPLETED, started + timedelta(hours=1))

    assert entering_cancelled is False
    assert interview.started_at == started
    assert interview.completed_at == started + timedelta(hours=1)
    assert apply_status(interview, InterviewStatusEnum.CANCELLED, started) is True
    assert apply_status(interview, InterviewStatusEnum.CANCELLED, started) is False
