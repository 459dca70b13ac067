"""
Utility modules for the scheduling backend.

This package contains shared helpers used across the application,
including wall-clock datetime utilities and schedule field validators.
"""
