"""Duo directory sync.

Connects to the Duo Admin API with signed requests, pages through accounts,
users, groups and administrators, and materializes them as a directory graph
of resources, entitlements and grants.
"""
