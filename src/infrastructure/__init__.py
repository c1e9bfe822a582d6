"""Infrastructure Layer.

Adapters that perform I/O and translate external formats into domain objects.
"""
