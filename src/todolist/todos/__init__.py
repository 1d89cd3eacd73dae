"""
Todo subsystem.

Components:
- todo_models.py: data structures (Todo, TodoOptions, TodoStats, enums, errors)
- todo_ops.py: pure record operations (ids, validation, filter/sort, stats)
- todo_store.py: key-value store backends (memory, JSON files, SQLite)
- todo_collection.py: TodoCollection, the owner of the list + persistence sync
"""
