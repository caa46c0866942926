"""Validation of caller input at the engine boundary.

Functions:
    validate_target_url(target) -> str
        Return the target URL if it is acceptable, raise InvalidURLError otherwise.
    validate_ttl(ttl_seconds) -> int | None
        Return the TTL if it is a positive integer (or None), raise InvalidTTLError otherwise.
"""

import urllib.parse

from urlshortener.constants import Target
from urlshortener.exceptions import InvalidURLError, InvalidTTLError


def validate_target_url(target: object) -> str:
    """Validate a long URL before it is accepted for shortening.

    Accepts absolute http(s) URLs with a host and no whitespace, up to
    Target.MAX_LENGTH characters.

    Raises:
        InvalidURLError: with a message naming the failed rule.

    Example:
        >>> validate_target_url('https://example.com/x?y=1')
        'https://example.com/x?y=1'
        >>> validate_target_url('ftp://example.com')
        InvalidURLError: Bad scheme 'ftp' (allowed: http, https)
    """
    if not isinstance(target, str):
        raise InvalidURLError(f'Target URL must be of type string (given type: {type(target)}).')
    if not target:
        raise InvalidURLError('Target URL must be a non-empty string.')
    if len(target) > Target.MAX_LENGTH:
        raise InvalidURLError(f'Target URL exceeds {Target.MAX_LENGTH} characters (given length: {len(target)}).')
    if any(c.isspace() for c in target):
        raise InvalidURLError('Target URL must not contain whitespace.')

    try:
        components = urllib.parse.urlparse(target)
        port = components.port
    except ValueError as e:
        raise InvalidURLError(f'Malformed target URL {target!r}.') from e

    if components.scheme.lower() not in Target.ALLOWED_SCHEMES:
        allowed = ', '.join(sorted(Target.ALLOWED_SCHEMES))
        raise InvalidURLError(f'Bad scheme {components.scheme!r} (allowed: {allowed})')
    if not components.hostname:
        raise InvalidURLError(f'Missing host in target URL {target!r}.')
    if port == 0:
        raise InvalidURLError(f'Bad port in target URL {target!r}.')
    return target


def validate_ttl(ttl_seconds: object) -> int | None:
    if ttl_seconds is None:
        return None
    if not isinstance(ttl_seconds, int) or isinstance(ttl_seconds, bool):
        raise InvalidTTLError(f'TTL must be of type integer (given type: {type(ttl_seconds)}).')
    if ttl_seconds <= 0:
        raise InvalidTTLError(f'TTL must be a positive number of seconds (given value: {ttl_seconds}).')
    return ttl_seconds
