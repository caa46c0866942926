"""In-process implementation of ShortURLBaseDAO.

Keeps every mapping in a dict guarded by a single lock, so each primitive is
indivisible across threads of one process. Suitable for local runs, tests
and single-process deployments; state is lost when the process exits.

Example:
    >>> dao = ShortURLMemoryDAO()
    >>> dao.insert_if_absent(ShortURLModel(target='https://example.com', shortcode='abc1234'))
    True
    >>> dao.insert_if_absent(ShortURLModel(target='https://example.org', shortcode='abc1234'))
    False
"""

import logging
import threading
import dataclasses
from datetime import datetime, UTC

from beartype import beartype

from urlshortener.models import ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO


logger = logging.getLogger(__name__)


class ShortURLMemoryDAO(ShortURLBaseDAO):
    """Thread-safe dict-backed DAO for short URL mappings

    Expired mappings stay in memory until get() meets them (lazy removal)
    or sweep_expired() runs.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._links: dict[str, ShortURLModel] = {}
        self._targets: dict[str, str] = {}
        self._counter = 0

    @beartype
    def insert_if_absent(self, short_url: ShortURLModel, **kwargs) -> bool:
        now = datetime.now(UTC)
        with self._lock:
            existing = self._links.get(short_url.shortcode)
            if existing is not None:
                if existing.is_live(now):
                    return False
                self._unlink(short_url.shortcode)
            self._links[short_url.shortcode] = short_url
            self._targets[short_url.target] = short_url.shortcode
            return True

    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        with self._lock:
            short_url = self._links.get(shortcode)
            if short_url is None:
                return None
            if short_url.is_expired():
                self._unlink(shortcode)
                logger.debug('Removed expired short URL %s on read.', shortcode, extra={'shortcode': shortcode})
                return None
            return short_url

    @beartype
    def increment_hits(self, shortcode: str, **kwargs) -> bool:
        with self._lock:
            short_url = self._links.get(shortcode)
            if short_url is None or short_url.is_expired():
                return False
            self._links[shortcode] = dataclasses.replace(short_url, hits=short_url.hits + 1)
            return True

    @beartype
    def delete(self, shortcode: str, **kwargs) -> bool:
        with self._lock:
            return self._unlink(shortcode) is not None

    def sweep_expired(self, **kwargs) -> int:
        now = datetime.now(UTC)
        with self._lock:
            expired = [shortcode for shortcode, short_url in self._links.items() if short_url.is_expired(now)]
            for shortcode in expired:
                self._unlink(shortcode)
        logger.debug('Swept %s expired short URLs.', len(expired), extra={'removed': len(expired)})
        return len(expired)

    @beartype
    def find_by_target(self, target: str, **kwargs) -> ShortURLModel | None:
        with self._lock:
            shortcode = self._targets.get(target)
            short_url = self._links.get(shortcode) if shortcode is not None else None
            if short_url is None or short_url.target != target or short_url.is_expired():
                return None
            return short_url

    def count(self, increment: bool = False, **kwargs) -> int:
        with self._lock:
            if increment:
                self._counter += 1
            return self._counter

    def _unlink(self, shortcode: str) -> ShortURLModel | None:
        """Drop a link and its target index entry if the entry still points at it. Caller holds the lock."""
        short_url = self._links.pop(shortcode, None)
        if short_url is not None and self._targets.get(short_url.target) == shortcode:
            del self._targets[short_url.target]
        return short_url
