"""External locators for issued tickets."""

from __future__ import annotations

import uuid
from typing import Union
from urllib.parse import quote, urljoin


def ticket_locator(base_url: str, ticket_id: Union[uuid.UUID, str]) -> str:
    """Return the public URL of a ticket page, e.g. for QR rendering.

    >>> ticket_locator("https://lotto.example", "3f1c...")
    'https://lotto.example/ticket/3f1c...'
    """

    if not base_url:
        raise ValueError("base_url must not be empty")
    return urljoin(base_url.rstrip("/") + "/", f"ticket/{quote(str(ticket_id))}")


__all__ = ["ticket_locator"]
