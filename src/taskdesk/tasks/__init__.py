"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, FilterOption, SortOption)
- task_view.py: pure search/filter/sort derivation for display
- task_api.py: task operations on AppState (load, save, toggle, delete)
"""
