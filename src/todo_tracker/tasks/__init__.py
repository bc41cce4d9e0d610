"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskPhase) and their persisted shape
- task_manager.py: the state manager (active list, history, id counter, listeners)
"""
