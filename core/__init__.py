"""
Core module for shared domain infrastructure.

This module contains:
- Domain events, exceptions and value objects
- Event bus, cache and storage helpers
- Authentication, observability and metrics middleware
- Health check views
"""
