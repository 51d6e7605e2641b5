"""
Event Publisher CLI package.

Provides command-line interface for submitting events.
"""
