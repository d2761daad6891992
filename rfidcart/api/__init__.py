# rfidcart/api/__init__.py
from functools import lru_cache

from rfidcart.services.lock_service import LockService
from rfidcart.services.notification_service import NotificationService


@lru_cache
def get_lock_service() -> LockService:
    #jeden klient redis (pula polaczen) na proces
    return LockService()


def get_notifier() -> NotificationService:
    return NotificationService()
