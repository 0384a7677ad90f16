"""
Task tracker package.

Contains the FastAPI task service (``task_tracker.main``), its storage
backends, and the optimistic-update client under ``task_tracker.client``.
"""

__version__ = "0.1.0"
