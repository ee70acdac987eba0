"""Cache invalidator interface."""

from typing import Protocol


class IInvalidator(Protocol):
    """Contract for removing entries from the named caches of a client."""

    def invalidate_cache(
        self,
        store_view: str | None = None,
        cache_names: list[str] | None = None,
        patterns: list[str | None] | None = None,
    ) -> None:
        """Invalidate cache entries.

        Args:
            store_view: Restrict removal to entries sent with this ``Store`` header.
            cache_names: Restrict removal to these caches.
            patterns: Regular expressions searched in the serialized responses.

        Raises:
            re.error: If a pattern is not a valid regular expression.
        """
        ...
