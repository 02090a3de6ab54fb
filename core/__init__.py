"""
Core mathematical primitives for lattice-based threshold encryption

This package contains:
- modular: arithmetic in Z_q (floor-modulo, signal band, vectors, A·s)
- randomness: system CSPRNG and deterministic test sources
- errors: protocol error taxonomy
"""

__version__ = "1.0.0"
