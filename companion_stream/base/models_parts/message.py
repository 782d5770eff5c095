"""
Message DTO exchanged with backends.

Defines the `Message` dataclass and the `Role` literal representing the sender
role. A message optionally carries base64-encoded images (for multimodal
models) and the tool calls assembled from a streamed reply.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from .tool_call import ToolCall


# Message roles used in a conversation.
Role = Literal["system", "user", "assistant"]


@dataclass
class Message:
    """A chat message in a conversation.

    Attributes:
        role: The role of the message author (``"system"``, ``"user"`` or
            ``"assistant"``).
        content: Plain text content. For a streamed delta this is only the
            fragment carried by one frame, never the cumulative text.
        images: Optional ordered list of base64-encoded image blobs.
        tool_calls: Optional ordered list of assembled tool calls.
    """

    role: Role
    content: str
    images: Optional[List[str]] = None
    tool_calls: Optional[List[ToolCall]] = field(default=None)

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON-ready mapping sent in a request's ``messages`` list.

        Optional keys are only present when set so backends that reject
        unknown or empty fields accept the payload unchanged.
        """
        payload: Dict[str, Any] = {"role": self.role, "content": self.content}
        if self.images:
            payload["images"] = list(self.images)
        if self.tool_calls:
            payload["tool_calls"] = [tc.to_payload() for tc in self.tool_calls]
        return payload


__all__ = [
    "Message",
    "Role",
]
