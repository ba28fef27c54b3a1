"""Identity-derived meta block."""

from typing import Any

from .context import Identity


def build_meta(identity: Identity) -> dict[str, Any]:
    """Return ``{"channel": ..., "platform": ...}`` from the request identity."""
    return {"channel": identity.channel_id, "platform": identity.platform_type}
