"""Types shared between models and index management."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass
class IndexModel:
    """An index definition: the keys to index and the options to create it with."""

    keys: Mapping[str, Any]
    options: Mapping[str, Any] | None = None

    def to_command_document(self) -> dict[str, Any]:
        """Build the entry used in a ``createIndexes`` command."""
        document: dict[str, Any] = {"key": dict(self.keys)}
        if self.options is not None:
            document.update(self.options)
        return document