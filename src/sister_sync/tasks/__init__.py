"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, SaveStatus, ...)
- ids.py: collision-resistant id generation
- migrate.py: normalization of records of unknown shape
- sync_codec.py: sync code export/import
- persistence.py: debounced writes to durable storage
- task_store.py: the in-memory task list and its operations
"""
