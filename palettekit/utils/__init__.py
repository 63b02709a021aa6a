"""
Shared helpers: logging setup and identifier generation.
"""
