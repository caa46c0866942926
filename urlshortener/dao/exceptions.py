"""Exceptions related to Data Access Objects (DAO) operations.

"Not found" and "already taken" are ordinary outcomes of the mapping store
(None / False return values), never exceptions.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    DataStoreError:
        Raised when the data store cannot be reached or cannot guarantee an
        atomic primitive (connection issues, timeouts, OOM, etc.).

Example:
    >>> from urlshortener.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis at localhost:6379/0.")
    Traceback (most recent call last):
        ...
    urlshortener.dao.exceptions.DataStoreError: Can't connect to Redis at localhost:6379/0.
"""

from urlshortener.exceptions import URLShortenerError


class DAOError(URLShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    Fatal for the current request, eligible for an external retry.
    """

    error_code = 'dao:data_store_error'
