# src/mstodo_sync/__init__.py

"""Sync Microsoft To Do lists, tasks and checklist items into a local view."""

__version__ = "0.1.0"
