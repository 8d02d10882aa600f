"""Materials module: surface parameters and patterns.

Components:
    material: Phong, reflection and refraction parameters
    pattern: Stripe, gradient, ring and checkers patterns
    phong: Per-slot material storage and the Phong lighting model
        (declares Taichi fields, import it directly)
"""

from .material import Material
from .pattern import (
    CheckersPattern,
    GradientPattern,
    Pattern,
    PatternKind,
    RingPattern,
    StripePattern,
)

__all__ = [
    "Material",
    "Pattern",
    "PatternKind",
    "StripePattern",
    "GradientPattern",
    "RingPattern",
    "CheckersPattern",
]
