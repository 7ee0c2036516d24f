# src/pm_pricing/domain/repository.py
"""State-source Protocol — dependency inversion for testability.

Unit tests inject a fake or AsyncMock that conforms to this Protocol.
Infrastructure layer provides the Sui JSON-RPC implementation.
"""

from typing import Any, Protocol


class MarketStateSourceProtocol(Protocol):
    async def get_object(self, object_id: str) -> dict[str, Any] | None:
        """Move struct fields of an object, or None if it does not exist."""
        ...

    async def get_dynamic_field(
        self, parent_id: str, name_type: str, name_value: str
    ) -> dict[str, Any] | None:
        """Fields of a dynamic-field entry (e.g. a Table row), or None if absent."""
        ...
