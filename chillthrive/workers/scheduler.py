import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..config import get_settings
from ..db.session import SessionLocal
from ..services.notification_service import Notifier, dispatch_pending, get_notifier

logger = logging.getLogger(__name__)


def dispatch_outbox(notifier: Notifier | None = None, session_factory=SessionLocal) -> int:
    notifier = notifier or get_notifier()
    with session_factory() as db:
        sent = dispatch_pending(db, notifier)
    if sent:
        logger.info("Dispatched notifications", extra={"sent": sent})
    return sent


def get_scheduler() -> AsyncIOScheduler:
    settings = get_settings()
    notifier = get_notifier(settings)
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        dispatch_outbox,
        "interval",
        seconds=settings.outbox_dispatch_interval_sec,
        kwargs={"notifier": notifier},
        max_instances=1,
        coalesce=True,
    )
    return scheduler
