"""
Persistence: JSON codec, key-value storage and seed data.
"""
