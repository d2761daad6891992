# rfidcart/tasks/release.py
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from rfidcart.celery_worker import celery_app
from rfidcart.data.database import SessionLocal
from rfidcart.domain.enums import CartStatus
from rfidcart.domain.errors import CartEngineError
from rfidcart.repos.cart_repo import CartRepo
from rfidcart.services.cart_engine import CartEngine
from rfidcart.services.lock_service import LockService
from rfidcart.utils.logging import get_logger
from rfidcart.utils.settings import CART_IDLE_SECONDS

logger = get_logger(__name__)


def release_abandoned_carts(
    db: Session,
    lock_service: LockService,
    idle_seconds: int = CART_IDLE_SECONDS,
    now: datetime | None = None,
) -> list[int]:
    """Zwalnia aktywne koszyki z towarem, nieruszane dluzej niz idle_seconds."""
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=idle_seconds)
    carts = CartRepo(db).list_idle_carts(CartStatus.ACTIVE.value, cutoff)
    cart_ids = [cart.id for cart in carts]

    logger.info(f"Found {len(cart_ids)} abandoned carts")

    engine = CartEngine(db, lock_service)
    released = []
    for cart_id in cart_ids:
        try:
            if engine.release_cart(cart_id, idle_before=cutoff)["released"]:
                released.append(cart_id)
        except CartEngineError as e:
            #np. klient wlasnie zrobil checkout albo lock zajety - nastepny przebieg
            logger.warning(f"Failed to release cart {cart_id}: {e}")
    return released


@celery_app.task(name="rfidcart.tasks.release.release_abandoned_carts_task")
def release_abandoned_carts_task():
    logger.info("Release abandoned carts task started")

    db = SessionLocal()
    try:
        released = release_abandoned_carts(db, LockService())
        return {"released": released}
    finally:
        db.close()
