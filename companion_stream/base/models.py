"""Conversation DTOs (public API facade).

Re-exports the dataclasses under ``companion_stream.base.models_parts`` to keep
a stable import path for backends, the CLI and tests.
"""

from .models_parts import (
    EMPTY_DELTA,
    Delta,
    Message,
    ModelInfo,
    Role,
    ToolCall,
    ToolCallAccumulator,
    ToolCallFragment,
)

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
