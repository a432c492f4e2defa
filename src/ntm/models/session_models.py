"""
Session Data Models

Shared dataclasses for sessions, windows, panes and agent tags.

Philosophy:
- Single responsibility: Session data structures only
- Zero dependencies: No imports from other ntm modules
- Tags are structured values; the pane title is only their wire format
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class AgentType(Enum):
    """Known agent kinds, in their fixed assignment order."""

    CC = "cc"
    COD = "cod"
    GMI = "gmi"

    @property
    def tag_marker(self) -> str:
        """Substring that marks a pane title as belonging to this agent type."""
        return f"__{self.value}"

    @classmethod
    def ordered(cls) -> list["AgentType"]:
        """Return agent types in assignment order (cc, cod, gmi)."""
        return [cls.CC, cls.COD, cls.GMI]


@dataclass(frozen=True)
class AgentTag:
    """Structured agent label stored in a pane title.

    Wire format:
        {session}__{type}_{ordinal}          # panes assigned by spawn
        {session}__{type}_added_{ordinal}    # panes appended by add

    Attributes:
        session: Session the agent was launched for
        agent_type: Kind of agent
        ordinal: Per-session, per-type sequence number (1-based)
        added: Whether the pane was appended to an existing session
    """

    session: str
    agent_type: AgentType
    ordinal: int
    added: bool = False

    _PATTERN = re.compile(
        r"^(?P<session>.+?)__(?P<type>cc|cod|gmi)_(?P<added>added_)?(?P<ordinal>\d+)$"
    )

    def to_title(self) -> str:
        """Serialize to a pane title."""
        added = "added_" if self.added else ""
        return f"{self.session}__{self.agent_type.value}_{added}{self.ordinal}"

    @classmethod
    def parse(cls, title: str) -> "AgentTag | None":
        """Parse a pane title, returning None for untagged titles."""
        match = cls._PATTERN.match(title or "")
        if not match:
            return None
        return cls(
            session=match.group("session"),
            agent_type=AgentType(match.group("type")),
            ordinal=int(match.group("ordinal")),
            added=match.group("added") is not None,
        )

    def __str__(self) -> str:
        return self.to_title()


@dataclass
class AgentCounts:
    """Requested number of agents per type."""

    cc: int = 0
    cod: int = 0
    gmi: int = 0

    def __post_init__(self) -> None:
        for agent_type, count in self.items():
            if count < 0:
                raise ValueError(f"{agent_type.value} count must be non-negative, got {count}")

    def get(self, agent_type: AgentType) -> int:
        return getattr(self, agent_type.value)

    def items(self) -> Iterator[tuple[AgentType, int]]:
        """Yield (type, count) pairs in fixed cc, cod, gmi order."""
        for agent_type in AgentType.ordered():
            yield agent_type, self.get(agent_type)

    @property
    def total(self) -> int:
        return self.cc + self.cod + self.gmi

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def describe(self) -> str:
        return f"{self.cc}x cc, {self.cod}x cod, {self.gmi}x gmi"


@dataclass
class SessionSummary:
    """Information about a tmux session.

    Attributes:
        name: Session name
        windows: Number of windows in session
        created_time: Creation timestamp as reported by tmux
        attached: Whether a client is attached
        path: Session working directory
    """

    name: str
    windows: int
    created_time: str
    attached: bool = False
    path: str = ""


@dataclass
class WindowRef:
    """A window within a session."""

    session: str
    index: int
    zoomed: bool = False

    @property
    def target(self) -> str:
        """tmux target string with exact session matching."""
        return f"={self.session}:{self.index}"


@dataclass
class Pane:
    """A pane as listed by tmux.

    The id (``%N``) is stable for the pane's lifetime; the index is its
    position within the window and may be renumbered by tmux.
    """

    pane_id: str
    index: int
    window_index: int
    title: str = ""
    current_command: str = ""
    width: int = 0
    height: int = 0

    @property
    def tag(self) -> AgentTag | None:
        return AgentTag.parse(self.title)

    def has_marker(self, agent_type: AgentType) -> bool:
        return agent_type.tag_marker in self.title

    def is_agent(self) -> bool:
        return any(self.has_marker(agent_type) for agent_type in AgentType.ordered())


@dataclass
class DestroyResult:
    """Outcome of a session destroy request."""

    session: str
    destroyed: bool
    pane_count: int = 0


@dataclass
class SendResult:
    """Outcome of routing text or a signal to panes."""

    session: str
    pane_ids: list[str] = field(default_factory=list)

    @property
    def matched(self) -> int:
        return len(self.pane_ids)

    @property
    def no_match(self) -> bool:
        return not self.pane_ids


class CaptureStatus(Enum):
    """Outcome of a single pane capture."""

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class CaptureResult:
    """Captured scrollback of a pane."""

    pane_id: str
    status: CaptureStatus
    text: str = ""
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


@dataclass
class SaveResult:
    """Results from saving all pane outputs of a session."""

    session: str
    directory: Path
    files: list[Path] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)  # (pane_id, error)

    @property
    def attempted(self) -> int:
        """Number of panes attempted, including failed captures."""
        return len(self.files)


@dataclass
class PaneStatus:
    """One row of a status report."""

    index: int
    title: str
    current_command: str
    width: int
    height: int
    pane_id: str = ""
    window_index: int = 0


@dataclass
class StatusReport:
    """Structured status of a session."""

    session: str
    working_directory: str
    panes: list[PaneStatus] = field(default_factory=list)
    agent_counts: dict[AgentType, int] = field(default_factory=dict)

    @property
    def pane_count(self) -> int:
        return len(self.panes)

    def count(self, agent_type: AgentType) -> int:
        return self.agent_counts.get(agent_type, 0)


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
