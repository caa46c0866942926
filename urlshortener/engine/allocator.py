"""Collision-resolving shortcode allocation.

The allocator turns generator candidates into a committed mapping. Each
candidate is offered to the store's atomic insert_if_absent(); a refusal is
a collision, an ordinary event that is retried with the next candidate.
The number of candidates is bounded, so allocation latency is bounded too.
"""

import logging
from datetime import datetime, UTC

from urlshortener.constants import Shortcode
from urlshortener.models import ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.engine.generators import CodeGenerator
from urlshortener.exceptions import AllocationExhaustedError


logger = logging.getLogger(__name__)


class CodeAllocator:
    """Allocate a unique shortcode for a target URL.

    Attributes:
        dao (ShortURLBaseDAO): mapping store committing candidates.
        generator (CodeGenerator): source of candidate shortcodes.
        max_attempts (int): number of candidates tried before giving up.
    """

    def __init__(self, dao: ShortURLBaseDAO, generator: CodeGenerator, max_attempts: int = Shortcode.DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError(f'Max attempts must be at least 1 (given value: {max_attempts}).')
        self.dao = dao
        self.generator = generator
        self.max_attempts = max_attempts

    def allocate(self, target: str, expires_at: datetime | None = None) -> ShortURLModel:
        """Commit a mapping for target under a fresh shortcode.

        Args:
            target (str): validated target URL.
            expires_at (datetime | None): expiry moment in UTC, None for never.

        Returns:
            ShortURLModel: the committed mapping.

        Raises:
            AllocationExhaustedError:
                If every one of max_attempts candidates collided.
            DataStoreError:
                If the mapping store is unavailable.
        """
        created_at = datetime.now(UTC)
        for attempt in range(self.max_attempts):
            shortcode = self.generator.generate(target, attempt)
            short_url = ShortURLModel(target=target, shortcode=shortcode, created_at=created_at, expires_at=expires_at)

            if self.dao.insert_if_absent(short_url):
                if attempt:
                    logger.info('Allocated shortcode after %s collisions.', attempt, extra={'shortcode': shortcode, 'attempts': attempt + 1})
                return short_url

            logger.debug('Shortcode collision, retrying.', extra={'shortcode': shortcode, 'attempt': attempt})

        logger.error(
            'Could not allocate a unique shortcode.',
            extra={'attempts': self.max_attempts, 'generator': repr(self.generator)},
        )
        raise AllocationExhaustedError(f'No unique shortcode found after {self.max_attempts} attempts.', attempts=self.max_attempts)
