"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, RunReport)
- errors.py: registration and run errors
- task_registry.py: named tasks with declared dependencies
- task_runner.py: dependency-ordered, at-most-once execution of a target
- task_api.py: action builders and the lock tasks
"""
