"""Features module for canopy.

Each feature keeps its entities, repositories and services together:
content (block hierarchy and link graph), permissions (role catalog) and
access (tiered resolution over both).
"""
