"""Seed idempotent demo users and interviewer availability for local environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass, field
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

import mockrise.modules  # noqa: F401
from mockrise.core.config import get_settings
from mockrise.core.database import close_engine, session_scope
from mockrise.core.enums import InterviewModeEnum, RoleEnum, UserStatusEnum
from mockrise.core.security import create_access_token
from mockrise.modules.availability.repository import AvailabilityRepository
from mockrise.modules.identity.models import User
from mockrise.modules.identity.repository import IdentityRepository
from mockrise.shared.timeslots import parse_time_label
from mockrise.shared.utils import utc_now

DEMO_USERS = (
    ("demo-admin@mockrise.dev", "Demo Admin", RoleEnum.ADMIN),
    ("demo-interviewer@mockrise.dev", "Demo Interviewer", RoleEnum.INTERVIEWER),
    ("demo-trainee@mockrise.dev", "Demo Trainee", RoleEnum.TRAINEE),
)

DEMO_SLOT_DAY_OFFSETS = (1, 2, 3, 4, 5)
DEMO_SLOT_LABELS = ("10:00 AM", "02:00 PM", "04:00 PM")


@dataclass(slots=True)
class SeedStats:
    users_created: int = 0
    users_updated: int = 0
    slots_created: int = 0
    tokens: dict[str, str] = field(default_factory=dict)


async def _ensure_user(
    repository: IdentityRepository,
    *,
    email: str,
    name: str,
    role: RoleEnum,
) -> tuple[User, bool]:
    user = await repository.get_user_by_email(email)
    if user is None:
        return await repository.create_user(email=email, name=name, role=role), True

    user.name = name
    user.role = role
    user.status = UserStatusEnum.APPROVED
    return user, False


async def _ensure_demo_slots(session: AsyncSession, interviewer: User) -> int:
    repository = AvailabilityRepository(session)
    today = utc_now().date()
    created = 0
    for day_offset in DEMO_SLOT_DAY_OFFSETS:
        day = today + timedelta(days=day_offset)
        for label in DEMO_SLOT_LABELS:
            minutes = parse_time_label(label)
            existing = await repository.find_slot(day=day, time=minutes, interviewer_id=interviewer.id)
            if existing is not None:
                continue
            await repository.create_slot(
                interviewer_id=interviewer.id,
                day=day,
                time=minutes,
                mode=InterviewModeEnum.LIVE,
            )
            created += 1
    return created


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()
    async with session_scope() as session:
        identity_repository = IdentityRepository(session)
        users: dict[RoleEnum, User] = {}
        for email, name, role in DEMO_USERS:
            user, created = await _ensure_user(identity_repository, email=email, name=name, role=role)
            users[role] = user
            if created:
                stats.users_created += 1
            else:
                stats.users_updated += 1
        await session.flush()

        stats.slots_created = await _ensure_demo_slots(session, users[RoleEnum.INTERVIEWER])
        stats.tokens = {
            str(role): create_access_token(subject=str(user.id), role=str(role))
            for role, user in users.items()
        }
    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed idempotent demo data for MockRise (users and open live slots).",
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Users created: {stats.users_created}")
    print(f"- Users updated: {stats.users_updated}")
    print(f"- Slots created: {stats.slots_created}")
    print(f"- Slot times: {', '.join(DEMO_SLOT_LABELS)}")
    print("")
    print("Demo access tokens (non-production only):")
    for role, token in stats.tokens.items():
        print(f"- {role}: {token}")


async def _seed_and_close(*, allow_production: bool) -> SeedStats:
    try:
        return await _run_seed(allow_production=allow_production)
    finally:
        await close_engine()


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_seed_and_close(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
