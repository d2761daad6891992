import pytest

from rfidcart.domain.errors import LockTimeout
from rfidcart.services.lock_service import LockService, cart_key, product_key


def test_keys():
    assert cart_key(7) == "cart:7:lock"
    assert product_key(3) == "product:3:lock"


def test_hold_acquires_and_releases(lock_service, redis_client):
    with lock_service.hold(cart_key(1), product_key(2)) as token:
        assert redis_client.get(cart_key(1)) == token
        assert redis_client.get(product_key(2)) == token
        assert redis_client.ttl(cart_key(1)) > 0

    assert redis_client.get(cart_key(1)) is None
    assert redis_client.get(product_key(2)) is None


def test_hold_releases_on_error(lock_service, redis_client):
    with pytest.raises(RuntimeError):
        with lock_service.hold(cart_key(1)):
            raise RuntimeError("boom")

    assert redis_client.get(cart_key(1)) is None


def test_contended_lock_times_out(redis_client):
    impatient = LockService(client=redis_client, ttl=10, wait_timeout=0.1, poll_interval=0.02)

    with impatient.hold(cart_key(5)):
        with pytest.raises(LockTimeout):
            with impatient.hold(cart_key(5)):
                pass

    #lock trzymany przez pierwszy hold zostal zwolniony normalnie
    assert redis_client.get(cart_key(5)) is None


def test_partial_acquire_is_rolled_back(redis_client):
    impatient = LockService(client=redis_client, ttl=10, wait_timeout=0.1, poll_interval=0.02)
    redis_client.set(product_key(9), "someone-else")

    with pytest.raises(LockTimeout):
        with impatient.hold(cart_key(1), product_key(9)):
            pass

    assert redis_client.get(cart_key(1)) is None
    assert redis_client.get(product_key(9)) == "someone-else"


def test_release_requires_owner_token(lock_service, redis_client):
    assert lock_service.try_acquire(cart_key(1), "owner")

    assert lock_service.release(cart_key(1), "intruder") is False
    assert redis_client.get(cart_key(1)) == "owner"
    assert lock_service.release(cart_key(1), "owner") is True
    assert redis_client.get(cart_key(1)) is None
