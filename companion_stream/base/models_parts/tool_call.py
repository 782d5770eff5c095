"""Tool-call fragments and their reassembly.

Backends stream tool calls in pieces: the event-stream dialect sends the
function arguments as string fragments keyed by an ``index``, while the
newline-delimited dialect sends each call whole in a single frame.
:class:`ToolCallAccumulator` normalizes both into complete :class:`ToolCall`
values in index order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class ToolCallFragment:
    """A fragment of a tool call decoded from one frame."""

    index: int
    call_id: Optional[str] = None
    name: Optional[str] = None
    arguments_delta: Optional[str] = None


@dataclass
class ToolCall:
    """A resolved tool call attached to the final assistant message."""

    id: str = ""
    name: str = ""
    arguments: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


class ToolCallAccumulator:
    """Assembles complete tool calls from streaming fragments."""

    def __init__(self) -> None:
        self._pending: Dict[int, ToolCall] = {}

    def feed(self, fragment: ToolCallFragment) -> None:
        tc = self._pending.setdefault(fragment.index, ToolCall())
        if fragment.call_id is not None:
            tc.id = fragment.call_id
        if fragment.name is not None:
            tc.name = fragment.name
        if fragment.arguments_delta is not None:
            tc.arguments += fragment.arguments_delta

    def __len__(self) -> int:
        return len(self._pending)

    def finalize(self) -> List[ToolCall]:
        """Return completed tool calls in index order."""
        return [self._pending[i] for i in sorted(self._pending)]


__all__ = ["ToolCallFragment", "ToolCall", "ToolCallAccumulator"]
