"""Models package.

One class per module; ``companion_stream.base.models`` re-exports them.
"""

from .delta import EMPTY_DELTA, Delta
from .message import Message, Role
from .model_info import ModelInfo
from .tool_call import ToolCall, ToolCallAccumulator, ToolCallFragment

__all__ = [
    "Delta",
    "EMPTY_DELTA",
    "Message",
    "ModelInfo",
    "Role",
    "ToolCall",
    "ToolCallAccumulator",
    "ToolCallFragment",
]
