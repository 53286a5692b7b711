"""
Licenses module - License key inventory.

This module handles:
- LicenseKey entity and key generation
- Atomic acquisition of free or specific keys
- Releasing keys back to the free pool
"""
