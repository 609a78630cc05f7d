"""
tasknest: task state and view-projection engine.

The store owns the task collection; list, board and calendar views are pure
projections recomputed from its snapshot.
"""

__version__ = "0.1.0"
