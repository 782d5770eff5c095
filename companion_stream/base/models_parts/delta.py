"""Delta DTO: one incremental fragment decoded from a frame."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .tool_call import ToolCallFragment


@dataclass(frozen=True)
class Delta:
    """Ephemeral piece of model output carried by a single frame.

    A delta lives only while its frame is processed; the aggregator copies
    its text into the running buffer and never retains the object itself.
    """

    text: str = ""
    tool_calls: List[ToolCallFragment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the delta carries neither text nor tool-call fragments."""
        return not self.text and not self.tool_calls


EMPTY_DELTA = Delta()

__all__ = ["Delta", "EMPTY_DELTA"]
