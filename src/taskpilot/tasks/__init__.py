"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskKind, Priority) + record conversion
- validation.py: stateless field checks used before mutation
- file_handler.py: JSON file storage with a single backup generation
- task_manager.py: in-memory collection with CRUD, queries, sorting and stats
"""
