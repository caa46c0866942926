"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all mapping store
implementations, regardless of the underlying storage mechanism (e.g.,
Redis, in-process memory, PostgreSQL).

Responsibilities:
    - Atomically insert a mapping only if its shortcode is not taken by a live mapping.
    - Retrieve committed mappings, hiding the ones that expired.
    - Atomically count successful resolutions.
    - Remove mappings on request and sweep the expired ones.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlshortener.models import ShortURLModel
        >>> from urlshortener.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)

        >>> short_url = ShortURLModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="a1b2c3d",
        ... )
        >>> dao.insert_if_absent(short_url)
        True
        >>> dao.insert_if_absent(short_url)
        False

        >>> dao.get("a1b2c3d").target
        'https://example.com/blog/article-123'
        >>> dao.get("zzzzzzz") is None
        True
"""

from abc import ABC, abstractmethod

from urlshortener.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    All mutation goes through insert_if_absent(), increment_hits(), delete()
    and sweep_expired(). Each of them is indivisible with respect to a
    single shortcode, so callers never perform read-then-write sequences.

    Every method raises DataStoreError when the underlying persistence is
    unavailable. Absent or expired mappings are reported through return
    values, never through exceptions.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLRedisDAO or
        ShortURLMemoryDAO) must extend this class and implement all
        abstract methods.
    """

    @abstractmethod
    def insert_if_absent(self, short_url: ShortURLModel, **kwargs) -> bool:
        """Insert a new mapping unless a live mapping already owns its shortcode.

        An expired mapping still physically present under the same shortcode
        is replaced.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            bool: True if the mapping was committed, False on conflict (no state changed).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        """Retrieve a committed, live mapping by its shortcode.

        Args:
            shortcode (str):
                The shortcode of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel | None: The mapping if found and not expired, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def increment_hits(self, shortcode: str, **kwargs) -> bool:
        """Atomically increment the hit counter of a live mapping.

        Returns:
            bool: True if incremented, False if the mapping is absent or expired.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, shortcode: str, **kwargs) -> bool:
        """Remove a mapping.

        Returns:
            bool: True if a mapping was removed, False if none existed.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def sweep_expired(self, **kwargs) -> int:
        """Remove every mapping whose expiry moment has passed.

        Returns:
            int: number of removed mappings.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_target(self, target: str, **kwargs) -> ShortURLModel | None:
        """Return the most recently created live mapping pointing at target, if any.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve the current counter value from the data store.

        Args:
            increment (bool):
                If True, atomically increment the counter by 1 and return the new value.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The current counter value.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
