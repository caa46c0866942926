"""Helper utilities shared by the engine and the data access layer.

Functions:
    get_short_url(shortcode, base_url) -> str
        Get string representation of short URL for a given shortcode
    to_epoch_ms(moment) -> int
        Convert an aware datetime into integer milliseconds since the epoch
    from_epoch_ms(value) -> datetime
        Convert milliseconds since the epoch into an aware UTC datetime
    expiry_from_ttl(ttl_seconds, now) -> datetime | None
        Compute the expiry moment for a TTL in seconds
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present

Example:
    >>> from urlshortener.utils.helpers import get_short_url
    >>> get_short_url('aZ3kT1x', 'https://sho.rt/')
    'https://sho.rt/aZ3kT1x'
"""

import os
import functools
from datetime import datetime, timedelta, UTC
from collections.abc import Callable

from urlshortener.exceptions import MissingEnvironmentVariableError


def get_short_url(shortcode: str, base_url: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        base_url (str): public base URL of the redirect service

    Returns:
        str: short url string representation
    """
    return f'{base_url.rstrip("/")}/{shortcode}'


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def from_epoch_ms(value: int | str) -> datetime:
    return datetime.fromtimestamp(int(value) / 1000, tz=UTC)


def expiry_from_ttl(ttl_seconds: int | None, now: datetime | None = None) -> datetime | None:
    """Compute the expiry moment of a mapping created now.

    Args:
        ttl_seconds (int | None):
            Time-To-Live in seconds. None disables expiry.
        now (datetime | None):
            Reference moment. Defaults to the current time in UTC.

    Returns:
        datetime | None: expiry moment in UTC, or None if the mapping never expires.
    """
    if ttl_seconds is None:
        return None
    return (now or datetime.now(UTC)) + timedelta(seconds=ttl_seconds)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator
