"""Infrastructure adapters for the grid bounded context.

This module provides the infrastructure layer implementations for grid
operations, including reading and writing Surfer 6 binary grid files.

Adapter and stream codec exported for simplified imports.
"""

from .surfer6_adapter import (
    Surfer6GridAdapter,
    decode,
    encode,
    from_bytes,
    to_bytes,
)

__all__ = ["Surfer6GridAdapter", "decode", "encode", "from_bytes", "to_bytes"]
