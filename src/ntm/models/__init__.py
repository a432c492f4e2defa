"""Data models for ntm."""

from ntm.models.session_models import (
    AgentCounts,
    AgentTag,
    AgentType,
    CaptureResult,
    CaptureStatus,
    DestroyResult,
    Pane,
    PaneStatus,
    SaveResult,
    SendResult,
    SessionSummary,
    StatusReport,
    WindowRef,
)

__all__ = [
    "AgentCounts",
    "AgentTag",
    "AgentType",
    "CaptureResult",
    "CaptureStatus",
    "DestroyResult",
    "Pane",
    "PaneStatus",
    "SaveResult",
    "SendResult",
    "SessionSummary",
    "StatusReport",
    "WindowRef",
]
