"""
Vendor subsystem: vendors, assignment lookups and performance.
"""
