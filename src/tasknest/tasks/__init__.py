"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, FilterSpec, SortSpec, ...)
- errors.py: validation / not-found / transport errors
- task_store.py: async client-side collection with per-operation state
- task_filters.py + collation.py: filtering and locale-aware stable sorting
- task_board.py: status-grouped board projection
- task_calendar.py: month grid projection and month navigation
- task_transitions.py: status state machine (toggle / forward / back)
- task_api.py: small high-level helpers used by the UI
"""
