from urlshortener.engine import URLShortener, Resolution
from urlshortener.constants import DedupPolicy
from urlshortener.exceptions import (
    URLShortenerError,
    InvalidInputError,
    InvalidURLError,
    InvalidShortcodeError,
    InvalidTTLError,
    AllocationExhaustedError,
)
from urlshortener.dao.exceptions import DataStoreError


__all__ = [
    'URLShortener',
    'Resolution',
    'DedupPolicy',
    'URLShortenerError',
    'InvalidInputError',
    'InvalidURLError',
    'InvalidShortcodeError',
    'InvalidTTLError',
    'AllocationExhaustedError',
    'DataStoreError',
]
