"""
Event subsystem: events, their budgets and the active-event selection.
"""
