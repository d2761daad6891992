# rfidcart/services/notification_service.py
from rfidcart.celery_worker import celery_app
from rfidcart.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadamia wyswietlacze o nowym stanie koszyka.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def cart_updated(cart_id: int, event: str, **payload):
        broadcast_cart_state_task.delay(cart_id, event, payload)


@celery_app.task(name="rfidcart.services.notification_service.broadcast_cart_state_task")
def broadcast_cart_state_task(cart_id: int, event: str, payload: dict):
    """
    Celery task - stan jest juz zapisany i mozna go odpytac,
    samo rozgloszenie do wyswietlaczy tylko logujemy.
    """
    logger.info(f"[LIVE VIEW] Cart {cart_id}: {event} {payload}")

    return {"cart_id": cart_id, "event": event, "status": "sent"}
