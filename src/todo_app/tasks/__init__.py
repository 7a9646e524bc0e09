"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskIdGenerator, errors)
- task_store.py: SQLite-backed storage of the todo_tasks table
- memory_store.py: process-scoped in-memory storage with the same interface
- task_repository.py: async repository with live (reactive) queries
- task_form.py: add/edit form validation
- task_api.py: small high-level helpers used by the rest of the app
"""
