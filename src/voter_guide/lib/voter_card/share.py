"""Share URL and identifier generation for finalized voter cards."""

import secrets
import time

CARD_TEMPLATES: tuple[str, ...] = ("minimal", "bold", "professional")


def build_share_url(host: str, card_id: str) -> str:
    """Build the public share URL for a card on the given host.

    Local development hosts are served over plain HTTP.

    Args:
        host: Serving host, optionally with a port (e.g. ``example.org``).
        card_id: The card identifier.

    Returns:
        ``https://{host}/card/{card_id}`` (``http`` for localhost).
    """
    scheme = "http" if "localhost" in host or host.startswith("127.0.0.1") else "https"
    return f"{scheme}://{host}/card/{card_id}"


def generate_card_id() -> str:
    """Generate a new opaque card identifier (``card_<ms>_<random>``)."""
    return f"card_{int(time.time() * 1000)}_{secrets.token_hex(5)}"
