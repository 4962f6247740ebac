"""
Utility Package.

Shared helpers for console output and logging.
"""
