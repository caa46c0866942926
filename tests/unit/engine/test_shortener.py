"""Unit tests for the URLShortener facade.

Test coverage includes:

1. Shorten and resolve round trip
   - A shortened URL resolves to its target; unknown codes do not.
   - Distinct shorten() calls yield distinct codes.

2. Input validation
   - Invalid targets and TTLs are rejected before any store access.

3. Expiry
   - Per-call and default TTLs expire mappings.

4. Dedup policy
   - ALWAYS_NEW mints a code per call, REUSE_EXISTING reuses live codes.
   - Reused codes never expire earlier than requested, nor outlive a TTL request forever.

5. Concurrency
   - Parallel shortening yields distinct, resolvable codes.

6. Stats, delete and sweep

7. Construction from settings
"""

import functools
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock, patch

import pytest
from freezegun import freeze_time

from urlshortener import URLShortener, Resolution, DedupPolicy
from urlshortener.constants import Backend, GeneratorKind
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.exceptions import DataStoreError
from urlshortener.dao.memory import ShortURLMemoryDAO
from urlshortener.engine import CodeGenerator, RandomCodeGenerator, CounterCodeGenerator
from urlshortener.exceptions import AllocationExhaustedError, InvalidURLError, InvalidTTLError, InvalidShortcodeError
from urlshortener.utils.config import ShortenerSettings


NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=UTC)


class ConstantGenerator(CodeGenerator):
    """Always propose the same candidate."""

    def __init__(self, code, length=7):
        super().__init__(length)
        self.code = code

    def generate(self, target, attempt):
        return self.code


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao():
    return ShortURLMemoryDAO()


@pytest.fixture
def shortener(dao):
    return URLShortener(dao)


# -------------------------------
# 1. Shorten and resolve round trip
# -------------------------------


def test_shorten_then_resolve(shortener):
    code = shortener.shorten('https://example.com/some/long/path?q=1')

    assert shortener.generator.is_valid(code)
    assert shortener.resolve(code) == Resolution(target='https://example.com/some/long/path?q=1', found=True)


def test_resolve_unknown_code(shortener):
    assert shortener.resolve('zzz9999') == Resolution(target='', found=False)


def test_forced_code_scenario(dao):
    """A length-6 generator forced to 'aZ3kT1' round trips, a malformed code does not."""
    shortener = URLShortener(dao, generator=ConstantGenerator('aZ3kT1', length=6))

    assert shortener.shorten('https://example.com') == 'aZ3kT1'
    assert shortener.resolve('aZ3kT1') == Resolution(target='https://example.com', found=True)
    assert shortener.resolve('doesNotExist') == Resolution(target='', found=False)


def test_shorten_yields_distinct_codes(shortener):
    codes = [shortener.shorten('https://example.com') for _ in range(200)]
    assert len(set(codes)) == 200


def test_resolve_is_repeatable(shortener):
    code = shortener.shorten('https://example.com')
    assert shortener.resolve(code) == shortener.resolve(code)


def test_default_generator():
    assert isinstance(URLShortener(ShortURLMemoryDAO()).generator, RandomCodeGenerator)


def test_shorten_with_colliding_generator(dao):
    shortener = URLShortener(dao, generator=ConstantGenerator('abc1234'), max_attempts=3)
    shortener.shorten('https://example.com/first')

    with pytest.raises(AllocationExhaustedError):
        shortener.shorten('https://example.com/second')

    assert shortener.resolve('abc1234').target == 'https://example.com/first'


# -------------------------------
# 2. Input validation
# -------------------------------


@pytest.mark.parametrize('target', ['', 'not a url', 'ftp://example.com/file', 'https://', None])
def test_shorten_rejects_invalid_target(target):
    dao = MagicMock(spec=ShortURLBaseDAO)

    with pytest.raises(InvalidURLError):
        URLShortener(dao).shorten(target)

    dao.insert_if_absent.assert_not_called()


@pytest.mark.parametrize('ttl', [0, -5, 1.5, '60', True])
def test_shorten_rejects_invalid_ttl(ttl):
    dao = MagicMock(spec=ShortURLBaseDAO)

    with pytest.raises(InvalidTTLError):
        URLShortener(dao).shorten('https://example.com', ttl_seconds=ttl)

    dao.insert_if_absent.assert_not_called()


def test_invalid_default_ttl():
    with pytest.raises(InvalidTTLError):
        URLShortener(ShortURLMemoryDAO(), default_ttl_seconds=0)


def test_shorten_propagates_store_errors():
    dao = MagicMock(spec=ShortURLBaseDAO)
    dao.insert_if_absent.side_effect = DataStoreError('redis unavailable')

    with pytest.raises(DataStoreError):
        URLShortener(dao).shorten('https://example.com')


# -------------------------------
# 3. Expiry
# -------------------------------


def test_shorten_with_ttl(shortener):
    with freeze_time(NOW):
        code = shortener.shorten('https://example.com', ttl_seconds=60)
        assert shortener.stats(code).expires_at == NOW + timedelta(seconds=60)

    with freeze_time(NOW + timedelta(seconds=59)):
        assert shortener.resolve(code).found

    with freeze_time(NOW + timedelta(seconds=60)):
        assert shortener.resolve(code) == Resolution(target='', found=False)


def test_default_ttl_applies(dao):
    shortener = URLShortener(dao, default_ttl_seconds=3600)

    with freeze_time(NOW):
        code = shortener.shorten('https://example.com')
        longer = shortener.shorten('https://example.com', ttl_seconds=7200)

    with freeze_time(NOW + timedelta(hours=1)):
        assert not shortener.resolve(code).found
        assert shortener.resolve(longer).found


def test_no_expiry_by_default(shortener):
    code = shortener.shorten('https://example.com')
    assert shortener.stats(code).expires_at is None


# -------------------------------
# 4. Dedup policy
# -------------------------------


def test_always_new_mints_per_call(shortener):
    assert shortener.shorten('https://example.com') != shortener.shorten('https://example.com')


def test_reuse_existing_returns_live_code(dao):
    shortener = URLShortener(dao, dedup_policy=DedupPolicy.REUSE_EXISTING)

    first = shortener.shorten('https://example.com')

    assert shortener.shorten('https://example.com') == first
    assert shortener.shorten('https://example.org') != first


def test_reuse_existing_skips_expired_code(dao):
    shortener = URLShortener(dao, dedup_policy='reuse_existing')

    with freeze_time(NOW):
        first = shortener.shorten('https://example.com', ttl_seconds=10)

    with freeze_time(NOW + timedelta(seconds=10)):
        assert shortener.shorten('https://example.com') != first


@freeze_time(NOW)
def test_reuse_existing_requires_matching_expiry(dao):
    """Ensure a permanent code and an expiring one never stand in for each other."""
    shortener = URLShortener(dao, dedup_policy=DedupPolicy.REUSE_EXISTING)

    permanent = shortener.shorten('https://example.com')
    expiring = shortener.shorten('https://example.com', ttl_seconds=60)

    assert expiring != permanent
    assert shortener.stats(expiring).expires_at == NOW + timedelta(seconds=60)
    assert shortener.shorten('https://example.com') not in (permanent, expiring)


def test_reuse_existing_requires_longer_lifetime(dao):
    shortener = URLShortener(dao, dedup_policy=DedupPolicy.REUSE_EXISTING)

    with freeze_time(NOW):
        long_lived = shortener.shorten('https://example.com', ttl_seconds=3600)

    with freeze_time(NOW + timedelta(seconds=60)):
        assert shortener.shorten('https://example.com', ttl_seconds=60) == long_lived
        longer = shortener.shorten('https://example.com', ttl_seconds=7200)

        assert longer != long_lived
        assert shortener.stats(longer).expires_at == NOW + timedelta(seconds=7260)


# -------------------------------
# 5. Concurrency
# -------------------------------


def test_concurrent_shortening_yields_distinct_resolvable_codes(shortener):
    targets = [f'https://example.com/page/{i}' for i in range(200)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        codes = list(pool.map(shortener.shorten, targets))

    assert len(set(codes)) == len(targets)
    for code, target in zip(codes, targets):
        assert shortener.resolve(code) == Resolution(target=target, found=True)


def test_concurrent_resolution_counts_every_hit(shortener):
    code = shortener.shorten('https://example.com')

    with ThreadPoolExecutor(max_workers=16) as pool:
        resolutions = list(pool.map(lambda _: shortener.resolve(code), range(300)))

    assert all(resolution.found for resolution in resolutions)
    assert shortener.stats(code).hits == 300


def test_concurrent_shortening_with_small_code_space(dao):
    """Ensure colliding racers never overwrite each other's mappings."""
    shortener = URLShortener(dao, generator=RandomCodeGenerator(length=6), max_attempts=16)
    targets = [f'https://example.com/{i}' for i in range(100)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        codes = list(pool.map(shortener.shorten, targets))

    assert {shortener.resolve(code).target for code in codes} == set(targets)


# -------------------------------
# 6. Stats, delete and sweep
# -------------------------------


def test_stats_reports_hits_without_counting(shortener):
    code = shortener.shorten('https://example.com')
    shortener.resolve(code)
    shortener.resolve(code)

    assert shortener.stats(code).hits == 2
    assert shortener.stats(code).hits == 2


def test_stats_of_unknown_code(shortener):
    assert shortener.stats('zzz9999') is None


def test_delete(shortener):
    code = shortener.shorten('https://example.com')

    assert shortener.delete(code) is True
    assert shortener.delete(code) is False
    assert shortener.resolve(code) == Resolution(target='', found=False)


@pytest.mark.parametrize('method', ['stats', 'delete'])
def test_malformed_code_is_rejected(shortener, method):
    with pytest.raises(InvalidShortcodeError):
        getattr(shortener, method)('doesNotExist')


def test_sweep(shortener):
    with freeze_time(NOW):
        shortener.shorten('https://example.com/a', ttl_seconds=10)
        shortener.shorten('https://example.com/b', ttl_seconds=10)
        kept = shortener.shorten('https://example.com/c')

    with freeze_time(NOW + timedelta(seconds=10)):
        assert shortener.sweep() == 2

    assert shortener.resolve(kept).found


# -------------------------------
# 7. Construction from settings
# -------------------------------


def test_from_settings_memory_backend():
    settings = ShortenerSettings(backend=Backend.MEMORY, code_length=9, max_attempts=3, default_ttl_seconds=60)

    shortener = URLShortener.from_settings(settings)

    assert isinstance(shortener.dao, ShortURLMemoryDAO)
    assert isinstance(shortener.generator, RandomCodeGenerator)
    assert shortener.generator.length == 9
    assert shortener.allocator.max_attempts == 3
    assert shortener.default_ttl_seconds == 60


def test_from_settings_counter_generator():
    settings = ShortenerSettings(backend=Backend.MEMORY, generator=GeneratorKind.COUNTER, salt='my_secret')

    shortener = URLShortener.from_settings(settings)

    assert isinstance(shortener.generator, CounterCodeGenerator)
    assert isinstance(shortener.generator.counter, functools.partial)
    codes = {shortener.shorten('https://example.com') for _ in range(10)}
    assert len(codes) == 10
    assert shortener.dao.count() == 10


def test_from_settings_redis_backend(monkeypatch):
    monkeypatch.setenv('APP_NAME', 'testapp')
    monkeypatch.setenv('APP_ENV', 'test')
    settings = ShortenerSettings(backend=Backend.REDIS, redis={'host': 'redis', 'port': 6379, 'db': 2})
    redis_client = MagicMock()

    with patch('urlshortener.dao.redis.ShortURLRedisDAO') as dao_class:
        shortener = URLShortener.from_settings(settings, redis_client=redis_client)

    dao_class.assert_called_once_with(redis_host='redis', redis_port=6379, redis_db=2, redis_client=redis_client, prefix='testapp:test')
    assert shortener.dao is dao_class.return_value
