"""
Integrations module - Registered applications and API sessions.

This module handles:
- Registered applications allowed to call the administrative API
- App key verification (only SHA-256 hashes are stored)
- Signed session tokens for authenticated apps
"""
