"""Executable worker that turns outbox events into inbox notifications."""

from __future__ import annotations

import asyncio
import logging

from mockrise.core.config import get_settings
from mockrise.core.database import session_scope
from mockrise.modules.identity.repository import IdentityRepository
from mockrise.modules.notifications.outbox_worker import NotificationsOutboxWorker
from mockrise.modules.notifications.repository import NotificationsRepository
from mockrise.modules.outbox.repository import OutboxRepository

logger = logging.getLogger(__name__)


async def run_cycle() -> dict[str, int]:
    """Run a single outbox processing cycle in one DB transaction."""
    settings = get_settings()
    async with session_scope() as session:
        worker = NotificationsOutboxWorker(
            outbox_repository=OutboxRepository(session),
            notifications_repository=NotificationsRepository(session),
            identity_repository=IdentityRepository(session),
            batch_size=settings.outbox_worker_batch_size,
            max_retries=settings.outbox_worker_max_retries,
            base_backoff_seconds=settings.outbox_worker_base_backoff_seconds,
            max_backoff_seconds=settings.outbox_worker_max_backoff_seconds,
        )
        return await worker.run_once()


async def main() -> None:
    """Run once or keep polling according to worker mode."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if settings.outbox_worker_mode == "once":
        stats = await run_cycle()
        logger.info("Outbox notifications worker stats: %s", stats)
        return

    while True:
        try:
            stats = await run_cycle()
            logger.info("Outbox notifications worker stats: %s", stats)
        except Exception:
            logger.exception("Outbox notifications worker cycle failed")
        await asyncio.sleep(settings.outbox_worker_poll_seconds)


if __name__ == "__main__":
    asyncio.run(main())
