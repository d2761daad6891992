# rfidcart/utils/retry.py
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from tenacity import (
    Retrying,
    retry,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
    wait_fixed,
)


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(RedisError),
    )


def db_retry(attempts: int, max_wait: float):
    #bounded backoff dla zapisow, ktorych nie mozna zgubic (deaktywacja koszyka po sprzedazy)
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.1, min=0, max=max_wait),
        retry=retry_if_exception_type(SQLAlchemyError),
    )


def poll_until_true(timeout: float, interval: float) -> Retrying:
    """
    Powtarza wywolanie dopoki nie zwroci True albo nie minie timeout.
    Po przekroczeniu czasu zwraca False zamiast rzucac RetryError.
    """
    return Retrying(
        stop=stop_after_delay(timeout),
        wait=wait_fixed(interval),
        retry=retry_if_result(lambda ok: not ok),
        retry_error_callback=lambda state: False,
    )
