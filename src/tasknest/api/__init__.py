"""
Task backends.

- client.py: REST API over httpx
- offline.py: in-memory backend for demos and tests
- codec.py: JSON wire shape of a task
"""
