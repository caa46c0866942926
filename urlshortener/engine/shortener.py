"""URLShortener: the boundary the transport layer calls into.

Two operations form the public contract:

    shorten(target) -> shortcode
    resolve(shortcode) -> Resolution(target, found)

Everything else (stats, delete, sweep) supports operating the store.

Example:
    >>> from urlshortener import URLShortener
    >>> from urlshortener.dao.memory import ShortURLMemoryDAO
    >>> shortener = URLShortener(ShortURLMemoryDAO())
    >>> code = shortener.shorten('https://example.com')
    >>> shortener.resolve(code)
    Resolution(target='https://example.com', found=True)
    >>> shortener.resolve('doesNotExist')
    Resolution(target='', found=False)
"""

import functools
import logging
from concurrent.futures import Executor
from datetime import datetime

import redis

from urlshortener.constants import Backend, DedupPolicy, GeneratorKind, Shortcode
from urlshortener.models import ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.engine.allocator import CodeAllocator
from urlshortener.engine.generators import CodeGenerator, CounterCodeGenerator, RandomCodeGenerator
from urlshortener.engine.resolution import Resolution, ResolutionService
from urlshortener.exceptions import InvalidShortcodeError
from urlshortener.utils.config import ShortenerSettings, app_prefix
from urlshortener.utils.helpers import expiry_from_ttl
from urlshortener.utils.validators import validate_target_url, validate_ttl


logger = logging.getLogger(__name__)


def _reusable_expiry(existing: datetime | None, requested: datetime | None) -> bool:
    """A permanent code only serves permanent requests, an expiring one only requests it outlives."""
    if existing is None or requested is None:
        return existing is requested
    return existing >= requested


class URLShortener:
    """Short-code generation and resolution engine.

    Args:
        dao (ShortURLBaseDAO):
            Mapping store shared by every caller.
        generator (CodeGenerator | None):
            Candidate source. Defaults to RandomCodeGenerator().
        max_attempts (int):
            Collision retry bound of the allocator.
        default_ttl_seconds (int | None):
            TTL applied when shorten() receives none. None disables expiry.
        dedup_policy (DedupPolicy):
            ALWAYS_NEW mints a code per call. REUSE_EXISTING returns the
            latest live code already pointing at the same target when its expiry
            fits the request, see _reusable_expiry().
        hit_executor (Executor | None):
            Runs hit counting off the resolving thread when given.

    Thread-safe as long as the DAO is: the engine keeps no mutable state of its own.
    """

    def __init__(
        self,
        dao: ShortURLBaseDAO,
        generator: CodeGenerator | None = None,
        max_attempts: int = Shortcode.DEFAULT_MAX_ATTEMPTS,
        default_ttl_seconds: int | None = None,
        dedup_policy: DedupPolicy = DedupPolicy.ALWAYS_NEW,
        hit_executor: Executor | None = None,
    ):
        self.dao = dao
        self.generator = generator or RandomCodeGenerator()
        self.default_ttl_seconds = validate_ttl(default_ttl_seconds)
        self.dedup_policy = DedupPolicy(dedup_policy)
        self.allocator = CodeAllocator(dao, self.generator, max_attempts=max_attempts)
        self.resolver = ResolutionService(dao, self.generator, executor=hit_executor)

    @classmethod
    def from_settings(
        cls,
        settings: ShortenerSettings,
        redis_client: redis.Redis | None = None,
        hit_executor: Executor | None = None,
    ) -> 'URLShortener':
        """Build the engine (store, generator, policies) from configuration.

        Example:
            >>> shortener = URLShortener.from_settings(ShortenerSettings.from_env())
        """
        if settings.backend == Backend.MEMORY:
            from urlshortener.dao.memory import ShortURLMemoryDAO

            dao = ShortURLMemoryDAO()
        else:
            from urlshortener.dao.redis import ShortURLRedisDAO

            redis_config = {f'redis_{k}': v for k, v in settings.redis.items()}
            dao = ShortURLRedisDAO(**redis_config, redis_client=redis_client, prefix=app_prefix())

        if settings.generator == GeneratorKind.COUNTER:
            generator = CounterCodeGenerator(functools.partial(dao.count, increment=True), salt=settings.salt, length=settings.code_length)
        else:
            generator = RandomCodeGenerator(length=settings.code_length)

        return cls(
            dao,
            generator=generator,
            max_attempts=settings.max_attempts,
            default_ttl_seconds=settings.default_ttl_seconds,
            dedup_policy=settings.dedup_policy,
            hit_executor=hit_executor,
        )

    def shorten(self, target: str, ttl_seconds: int | None = None) -> str:
        """Allocate a shortcode for target and persist the mapping.

        Args:
            target (str): absolute http(s) URL.
            ttl_seconds (int | None): lifetime of the mapping, overrides the default TTL.

        Returns:
            str: the shortcode.

        Raises:
            InvalidURLError: if target fails validation.
            InvalidTTLError: if ttl_seconds is not a positive integer.
            AllocationExhaustedError: if no unique shortcode could be secured (retryable).
            DataStoreError: if the mapping store is unavailable (retryable).
        """
        target = validate_target_url(target)
        ttl_seconds = validate_ttl(ttl_seconds)
        if ttl_seconds is None:
            ttl_seconds = self.default_ttl_seconds

        expires_at = expiry_from_ttl(ttl_seconds)
        if self.dedup_policy == DedupPolicy.REUSE_EXISTING:
            existing = self.dao.find_by_target(target)
            if existing is not None and _reusable_expiry(existing.expires_at, expires_at):
                logger.info('Reused existing shortcode for target.', extra={'shortcode': existing.shortcode})
                return existing.shortcode

        short_url = self.allocator.allocate(target, expires_at=expires_at)
        logger.info(
            'Shortened target URL.',
            extra={'shortcode': short_url.shortcode, 'expires_at': short_url.expires_at},
        )
        return short_url.shortcode

    def resolve(self, shortcode: str) -> Resolution:
        """Return Resolution(target, True) for a live shortcode, Resolution('', False) otherwise.

        Raises:
            DataStoreError: if the mapping store is unavailable.
        """
        return self.resolver.resolve(shortcode)

    def stats(self, shortcode: str) -> ShortURLModel | None:
        """Read a live mapping (including its hit count) without recording a hit.

        Raises:
            InvalidShortcodeError: if shortcode does not match the code policy.
            DataStoreError: if the mapping store is unavailable.
        """
        self._require_valid(shortcode)
        return self.dao.get(shortcode)

    def delete(self, shortcode: str) -> bool:
        self._require_valid(shortcode)
        deleted = self.dao.delete(shortcode)
        if deleted:
            logger.info('Deleted short URL.', extra={'shortcode': shortcode})
        return deleted

    def sweep(self) -> int:
        """Remove expired mappings from the store and return how many were removed."""
        removed = self.dao.sweep_expired()
        logger.info('Swept expired short URLs.', extra={'removed': removed})
        return removed

    def _require_valid(self, shortcode: str) -> None:
        if not self.generator.is_valid(shortcode):
            raise InvalidShortcodeError(f'Shortcode {shortcode!r} does not match the configured code policy.')
