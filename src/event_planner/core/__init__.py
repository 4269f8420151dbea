"""
Core primitives shared by all stores.

Components:
- state.py: AppState (the composition of stores)
- ports.py: Protocols used between stores and storage
- result.py: OpResult returned by every mutator
- timeutil.py: ISO-8601 timestamps, ids and percentage helpers
"""
