"""
Corporations module - Corporation directory.

This module handles:
- Corporation aggregate and its profile
- Client attachments owned by a corporation
- Entitlement period storage and continuity lookups
- Client token storage
"""
