"""
Task subsystem.

Components:
- task_models.py: data structures (Task, SubTask, Comment, FileUpload, Priority)
- task_store.py: in-memory snapshot store + mutators
- task_order.py: display ordering
- templates.py: built-in task templates (wedding, conference, project)
- task_api.py: small high-level helpers that also touch other stores
"""
