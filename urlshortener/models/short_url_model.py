from dataclasses import dataclass, field
from datetime import datetime, UTC


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL mapping.

    Attributes:
        target (str):
            The original long URL that the shortcode redirects to.
        shortcode (str):
            The unique short identifier representing the shortened URL.
        created_at (datetime):
            Moment of creation in UTC.
        hits (int):
            Number of successful resolutions recorded for this link.
        expires_at (Optional[datetime]):
            Moment in UTC after which the mapping is logically deleted.
            None means the mapping never expires.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> url = ShortURLModel(
        ...     target="https://example.com/article/123",
        ...     shortcode="abc1234",
        ...     expires_at=datetime.now(UTC) + timedelta(days=365)
        ... )
        >>> url.hits
        0
        >>> url.is_live()
        True
    """

    target: str
    shortcode: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    hits: int = 0
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) >= self.expires_at

    def is_live(self, now: datetime | None = None) -> bool:
        return not self.is_expired(now)
