"""ntm - Named tmux manager for pools of AI coding agents

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- tmux is an external service reached through one narrow client
- Fail fast with helpful guidance

The ntm CLI creates named tmux sessions per project, fills them with panes,
launches Claude Code (cc), Codex (cod) and Gemini (gmi) agents into those panes,
and routes commands, interrupts and output capture to them by tag.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
