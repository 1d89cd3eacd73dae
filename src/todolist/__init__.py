"""todolist - local task-list manager with filtering, sorting, stats and persistence."""

__version__ = "0.1.0"
