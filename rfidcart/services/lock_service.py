# rfidcart/services/lock_service.py
import uuid
from contextlib import contextmanager
from typing import Iterator

import redis

from rfidcart.domain.errors import LockTimeout, StorageError
from rfidcart.utils.logging import get_logger
from rfidcart.utils.retry import poll_until_true, redis_retry
from rfidcart.utils.settings import (
    LOCK_POLL_SECONDS,
    LOCK_TTL_SECONDS,
    LOCK_WAIT_SECONDS,
    REDIS_URL,
)

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje atomowo przez lua, skrypt dziala jako jedna nieprzerywalna operacja
#nie mozna wcisnac sie miedzy GET a DEL, wiec tu jest get + porownanie + del wszystko naraz


def cart_key(cart_id: int) -> str:
    return f"cart:{cart_id}:lock"


def product_key(product_id: int) -> str:
    return f"product:{product_id}:lock"


class LockService:
    """
    -wylaczny zakres per klucz (koszyk, produkt)
    -zwalnianie tylko przez wlasciciela (token)
    -atomowosc przy pomocy lua
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl: int = LOCK_TTL_SECONDS,
        wait_timeout: float = LOCK_WAIT_SECONDS,
        poll_interval: float = LOCK_POLL_SECONDS,
    ):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.wait_timeout = wait_timeout
        self.poll_interval = poll_interval

    @redis_retry()
    def try_acquire(self, key: str, token: str, ttl: int | None = None) -> bool:
        #SET cart:1:lock "<token>" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True, #jesli klucz istnieje to nic nie rob i zwroc None
                ex=ttl or self.ttl, #wygasa sam, gdyby proces padl trzymajac locka
            )
        )

    def acquire(self, key: str, token: str) -> None:
        try:
            acquired = poll_until_true(self.wait_timeout, self.poll_interval)(
                self.try_acquire, key, token
            )
        except redis.RedisError as e:
            raise StorageError(f"Lock backend unavailable: {e}") from e
        if not acquired:
            logger.warning(f"Timed out waiting for lock {key}")
            raise LockTimeout(f"Timed out waiting for lock {key}")

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def hold(self, *keys: str) -> Iterator[str]:
        """
        Bierze locki w podanej kolejnosci, zwalnia w odwrotnej.
        Kolejnosc wywolujacych: koszyk, potem produkty rosnaco po id.
        """
        token = uuid.uuid4().hex
        held: list[str] = []
        try:
            for key in keys:
                self.acquire(key, token)
                held.append(key)
            yield token
        finally:
            for key in reversed(held):
                try:
                    if not self.release(key, token):
                        logger.warning(f"Lock {key} expired before release")
                except redis.RedisError as e:
                    logger.warning(f"Failed to release lock {key}: {e}")
