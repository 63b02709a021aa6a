"""
PaletteKit services: color engine and observability.
"""
