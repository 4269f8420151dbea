"""
Event planner.

Local-first planning tool for events (weddings, conferences, ...):
tasks with sub-tasks and comments, vendors, budgets and derived dashboard metrics.
"""

__version__ = "0.1.0"
