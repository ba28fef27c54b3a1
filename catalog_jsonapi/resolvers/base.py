"""Resolver capability consumed by relationship inclusion."""

from typing import Any


class Resolver:
    """Turn a ``(type, id)`` pair into a resource object.

    ``resolve`` returns ``None`` when the resource does not exist and must not
    raise for that case. Any exception it raises is treated as a fault of the
    backing store. Implementations must be safe to call concurrently.
    """

    async def resolve(self, resource_type: str, resource_id: str) -> dict[str, Any] | None:
        """Return the resource object, or ``None`` when it is not found."""
        raise NotImplementedError
