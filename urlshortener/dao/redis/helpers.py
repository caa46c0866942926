import functools

import redis

from urlshortener.dao.exceptions import DataStoreError


__all__ = []


# Error replies meaning the server cannot accept writes right now, also when
# they surface wrapped in a Lua script error
UNAVAILABLE_REPLY_MARKERS = ('READONLY', 'OOM command not allowed', 'MASTERDOWN')


def _redis_location(dao) -> str:
    info = dao.redis.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def _is_unavailable_reply(error: redis.exceptions.ResponseError) -> bool:
    if isinstance(error, redis.exceptions.ReadOnlyError):
        return True
    return any(marker in str(error) for marker in UNAVAILABLE_REPLY_MARKERS)


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Connection errors, timeouts and error replies of a server that refuses
    writes (read-only replica after a failover, maxmemory reached) all mean
    the store is unavailable and become DataStoreError. Other error replies
    are programming errors and pass through untouched.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            redis.exceptions.ConnectionError, redis.exceptions.TimeoutError
            or redis.exceptions.ResponseError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def get_count(self):
        ...     return self.redis.get('count')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.TimeoutError as e:
            raise DataStoreError(f'Timed out waiting for Redis at {_redis_location(self)}.') from e
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {_redis_location(self)}.") from e
        except redis.exceptions.ResponseError as e:
            if not _is_unavailable_reply(e):
                raise
            raise DataStoreError(f'Redis at {_redis_location(self)} refused the command: {e}') from e

    return wrapper
