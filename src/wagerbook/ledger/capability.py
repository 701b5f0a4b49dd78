"""Administrator capability - an opaque credential minted once per market."""

from __future__ import annotations

import secrets
from typing import Any


class AdminCapability:
    """Unforgeable admin credential. Compared by identity; cannot be copied or pickled."""

    __slots__ = ("_token", "market_id")

    def __init__(self, market_id: str) -> None:
        self.market_id = market_id
        self._token = secrets.token_hex(16)

    def __copy__(self) -> AdminCapability:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> AdminCapability:
        return self

    def __reduce__(self) -> Any:
        raise TypeError("AdminCapability cannot be serialized")

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"AdminCapability(market_id={self.market_id!r}, token={self._token[:6]}...)"


def authorize(capability: object, required: AdminCapability) -> bool:
    """Return True only when capability is the issued credential itself."""
    return isinstance(capability, AdminCapability) and capability is required
