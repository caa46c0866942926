"""Shortcode resolution with best-effort hit counting.

Resolution correctness never depends on bookkeeping: once a live mapping is
found its target is returned, whatever happens to the hit counter update.
"""

import logging
from concurrent.futures import Executor
from typing import NamedTuple

from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.exceptions import DAOError
from urlshortener.engine.generators import CodeGenerator


logger = logging.getLogger(__name__)


class Resolution(NamedTuple):
    """Outcome of a lookup. Unpacks as `target, found = resolution`."""

    target: str
    found: bool


NOT_FOUND = Resolution(target='', found=False)


class ResolutionService:
    """Resolve shortcodes to their target URL.

    Args:
        dao (ShortURLBaseDAO): mapping store.
        generator (CodeGenerator): provides the syntactic code policy.
        executor (Executor | None): if given, hit counting is submitted to it
            instead of running inline.
    """

    def __init__(self, dao: ShortURLBaseDAO, generator: CodeGenerator, executor: Executor | None = None):
        self.dao = dao
        self.generator = generator
        self.executor = executor

    def resolve(self, shortcode: str) -> Resolution:
        """Look up a shortcode.

        Malformed codes short-circuit to NOT_FOUND without a store round trip.
        Absent and expired codes are NOT_FOUND as well.

        Raises:
            DataStoreError: if the lookup itself cannot reach the store.
        """
        if not self.generator.is_valid(shortcode):
            logger.debug('Rejected malformed shortcode.', extra={'shortcode': repr(shortcode)[:64]})
            return NOT_FOUND

        short_url = self.dao.get(shortcode)
        if short_url is None or short_url.is_expired():
            logger.debug('Shortcode not found.', extra={'shortcode': shortcode})
            return NOT_FOUND

        if self.executor is None:
            self.record_hit(shortcode)
        else:
            try:
                self.executor.submit(self.record_hit, shortcode)
            except RuntimeError:
                logger.warning('Hit executor is shut down, hit not recorded.', extra={'shortcode': shortcode})
        return Resolution(target=short_url.target, found=True)

    def record_hit(self, shortcode: str) -> bool:
        """Increment the hit counter, logging and swallowing any failure.

        Hit counting is bookkeeping: whatever the store raises here (also
        errors it does not translate into DAOError) never reaches the caller
        of resolve() nor dies unobserved inside an executor future.
        """
        try:
            counted = self.dao.increment_hits(shortcode)
        except DAOError:
            logger.warning('Failed to record hit.', exc_info=True, extra={'shortcode': shortcode})
            return False
        except Exception:
            logger.exception('Unexpected error while recording hit.', extra={'shortcode': shortcode})
            return False

        if not counted:
            logger.debug('Hit not recorded, mapping vanished after lookup.', extra={'shortcode': shortcode})
        return counted
