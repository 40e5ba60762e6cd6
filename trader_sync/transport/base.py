"""Abstract transport: JSON GET/POST against the remote trading service."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional


class Transport(ABC):
    """Issues authenticated requests. Raises TransportError on failure."""

    @abstractmethod
    def get_json(self, path: str) -> Any:
        """GET path and return decoded JSON ({} when the body is not JSON)."""
        pass

    @abstractmethod
    def post_json(self, path: str, body: Optional[dict] = None) -> Any:
        """POST a JSON body and return decoded JSON ({} when the body is not JSON)."""
        pass

    def close(self) -> None:
        """Release pooled connections. Default no-op."""
        return None
