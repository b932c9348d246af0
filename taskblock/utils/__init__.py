"""
Shared helpers: logging and environment-driven configuration.
"""
