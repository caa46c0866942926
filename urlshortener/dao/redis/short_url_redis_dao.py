"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for
the mapping store primitives operating on ShortURLModel instances.

Responsibilities:
    - Insert short URLs only if their shortcode is free (atomic, Lua);
    - Retrieve short URLs, hiding expired ones;
    - Count link hits atomically;
    - Delete links and sweep expired ones;
    - Maintain the target index and the global counter;
    - Raise DataStoreError on connectivity issues with Redis.

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from urlshortener.models import ShortURLModel
    >>> from urlshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")

    >>> short_url = ShortURLModel(target="https://example.com/page", shortcode="abc1234")
    >>> dao.insert_if_absent(short_url)
    True
    >>> dao.get("abc1234").target
    'https://example.com/page'
    >>> dao.increment_hits("abc1234")
    True
    >>> dao.get("abc1234").hits
    1
"""

import logging
from datetime import datetime, UTC

from beartype import beartype

from urlshortener.models import ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.redis.mixins import RedisClientMixin
from urlshortener.dao.redis.helpers import handle_redis_connection_error
from urlshortener.dao.redis.scripts import INSERT_IF_ABSENT_LUA, INCREMENT_HITS_LUA, DELETE_IF_EXPIRED_LUA, DELETE_LINK_LUA
from urlshortener.utils.helpers import to_epoch_ms, from_epoch_ms


logger = logging.getLogger(__name__)

SCAN_BATCH_SIZE = 500


def _text(value: str | bytes | None) -> str | None:
    return value.decode('utf-8') if isinstance(value, bytes) else value


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.
    Each link is a hash (target, created_at, hits, expires_at) stored under
    RedisKeySchema.link_key(). Links with an expiry carry a matching PEXPIREAT,
    so Redis removes them physically on its own; get() and increment_hits()
    additionally treat them as absent the moment they expire.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert_if_absent(short_url: ShortURLModel, **kwargs) -> bool
        get(shortcode: str, **kwargs) -> ShortURLModel | None
        increment_hits(shortcode: str, **kwargs) -> bool
        delete(shortcode: str, **kwargs) -> bool
        sweep_expired(**kwargs) -> int
        find_by_target(target: str, **kwargs) -> ShortURLModel | None
        count(increment: bool = False, **kwargs) -> int

        All of them raise DataStoreError on connectivity issues with Redis.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._insert_if_absent = self.redis.register_script(INSERT_IF_ABSENT_LUA)
        self._increment_hits = self.redis.register_script(INCREMENT_HITS_LUA)
        self._delete_if_expired = self.redis.register_script(DELETE_IF_EXPIRED_LUA)
        self._delete_link = self.redis.register_script(DELETE_LINK_LUA)

    @handle_redis_connection_error
    @beartype
    def insert_if_absent(self, short_url: ShortURLModel, **kwargs) -> bool:
        """Insert a short URL mapping into Redis unless its shortcode is taken

        The existence check, the write of all link fields, the expiry and the
        target index update run as a single Lua script, so two concurrent
        callers targeting the same shortcode get exactly one winner.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            bool: True if committed, False if a live link owns the shortcode.

        Raises:
            DataStoreError:
                If a Redis connection issue occurs.

        Example:
            >>> dao.insert_if_absent(ShortURLModel(target='https://example.com', shortcode='abc1234'))
            True
        """
        expires_at = '' if short_url.expires_at is None else to_epoch_ms(short_url.expires_at)
        committed = self._insert_if_absent(
            keys=[self.keys.link_key(short_url.shortcode), self.keys.target_index_key(short_url.target)],
            args=[
                short_url.target,
                to_epoch_ms(short_url.created_at),
                expires_at,
                to_epoch_ms(datetime.now(UTC)),
                short_url.shortcode,
            ],
        )
        return bool(int(committed))

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        """Retrieve a stored short URL mapping by shortcode

        A single HGETALL reads all link fields, so the result never mixes
        committed and uncommitted state.

        Args:
            shortcode (str):
                The shortcode identifier for the shortened URL.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel | None:
                The mapping if present and live, None otherwise.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc1234')
            ShortURLModel(target='https://example.com', shortcode='abc1234', ...)
        """
        fields = self.redis.hgetall(self.keys.link_key(shortcode))
        if not fields:
            return None

        fields = {_text(k): _text(v) for k, v in fields.items()}
        expires_at = fields.get('expires_at')
        short_url = ShortURLModel(
            target=fields['target'],
            shortcode=shortcode,
            created_at=from_epoch_ms(fields['created_at']),
            hits=int(fields.get('hits') or 0),
            expires_at=from_epoch_ms(expires_at) if expires_at else None,
        )

        if short_url.is_expired():
            logger.debug('Short URL %s is expired and pending removal.', shortcode, extra={'shortcode': shortcode})
            return None
        return short_url

    @handle_redis_connection_error
    @beartype
    def increment_hits(self, shortcode: str, **kwargs) -> bool:
        """Atomically increment the hit counter of a live link

        Returns:
            bool: True if incremented, False if the link is absent or expired.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        incremented = self._increment_hits(
            keys=[self.keys.link_key(shortcode)],
            args=[to_epoch_ms(datetime.now(UTC))],
        )
        return bool(int(incremented))

    @handle_redis_connection_error
    @beartype
    def delete(self, shortcode: str, **kwargs) -> bool:
        """Remove a link together with its target index entry

        The index entry is only dropped while it still names this shortcode,
        a newer link for the same target keeps its entry.
        """
        link_key = self.keys.link_key(shortcode)
        target = _text(self.redis.hget(link_key, 'target'))
        if target is None:
            return False
        removed = self._delete_link(keys=[link_key, self.keys.target_index_key(target)], args=[shortcode])
        return bool(int(removed))

    @handle_redis_connection_error
    def sweep_expired(self, **kwargs) -> int:
        """Remove expired links still physically present in Redis

        Keys are visited with SCAN (non-blocking for the server); each one is
        checked and deleted by a Lua script, so a link re-created under the
        same shortcode in between is never removed.

        Returns:
            int: number of removed links.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        now = to_epoch_ms(datetime.now(UTC))
        removed = 0
        for key in self.redis.scan_iter(match=self.keys.link_key('*'), count=SCAN_BATCH_SIZE):
            removed += int(self._delete_if_expired(keys=[key], args=[now]))

        logger.debug('Swept %s expired short URLs.', removed, extra={'removed': removed})
        return removed

    @handle_redis_connection_error
    @beartype
    def find_by_target(self, target: str, **kwargs) -> ShortURLModel | None:
        """Return the latest live link created for target, if any

        The target index may point at a link that was deleted or replaced
        since, so the link itself is read and compared before it is returned.
        """
        shortcode = _text(self.redis.get(self.keys.target_index_key(target)))
        if shortcode is None:
            return None

        short_url = self.get(shortcode)
        if short_url is None or short_url.target != target:
            return None
        return short_url

    @handle_redis_connection_error
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve global short URL counter

        Args:
            increment (bool):
                If True, increments the counter. Otherwise, retrieves its value.
            **kwargs:
                Optional keyword arguments.

        Returns:
            int:
                The updated or current global counter value.

        Example:
            >>> dao.count(increment=False)
            123
            >>> dao.count(increment=True)
            124
        """
        if increment:
            return int(self.redis.incr(self.keys.counter_key()))
        return int(self.redis.get(self.keys.counter_key()) or 0)
