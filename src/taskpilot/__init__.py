"""
taskpilot: a personal task manager for the terminal.

Packages:
- tasks: task model, validation, JSON persistence and the TaskManager
- core: application state and ports
- cli / connectors: slash commands, rendering and the console REPL
"""

__version__ = "1.0.0"
