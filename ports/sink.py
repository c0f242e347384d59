from __future__ import annotations

from typing import Any, Dict, Protocol


class MutationSinkPort(Protocol):
    """External endpoint that writes a single cell of the document."""

    def send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Deliver one write request; return the sink's parsed reply or raise on failure."""
        ...
