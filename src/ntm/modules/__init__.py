"""ntm modules - Self-contained bricks

Each module is a self-contained component with a clear contract:
- Prerequisites Checker: Verify tmux and the agent CLIs
- tmux Installer: Offer a platform-appropriate tmux install
- Interaction Handler: Injected confirmation prompts
- Clipboard: Deliver captured text to the system clipboard
"""
