"""
Clients module - Client attachment registry and token issuer.

This module handles:
- Demo grants and paid links of consumers to corporations
- Unlinking and releasing license keys
- Entitlement period policy, including continuity on relink
- Short-lived client tokens
"""
