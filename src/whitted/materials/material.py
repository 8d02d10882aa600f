"""Surface material parameters for the Phong model.

Example:
    >>> from whitted.core.color import Color
    >>> mirror = Material(color=Color(0.1, 0.1, 0.1), reflective=1.0)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from whitted.core.color import Color
from whitted.materials.pattern import Pattern, pattern_from_dict


@dataclass
class Material:
    """Phong coefficients plus reflection and refraction controls.

    Attributes:
        color: Base surface color, used when there is no pattern.
        ambient: Ambient coefficient (>= 0).
        diffuse: Diffuse coefficient (>= 0).
        specular: Specular coefficient (>= 0).
        shininess: Specular exponent (> 0).
        reflective: Mirror weight in [0, 1].
        transparency: Transmission weight in [0, 1].
        refractive_index: Index of refraction (>= 1.0). Vacuum is 1.0,
            water 1.333, glass 1.52, diamond 2.417.
        pattern: Optional pattern replacing ``color``.

    Raises:
        ValueError: If any parameter is out of range.
    """

    color: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0))
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0
    transparency: float = 0.0
    refractive_index: float = 1.0
    pattern: Pattern | None = None

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular"):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.shininess <= 0.0:
            raise ValueError(f"shininess must be positive, got {self.shininess}")
        for name in ("reflective", "transparency"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.refractive_index < 1.0:
            raise ValueError(f"refractive_index must be >= 1.0, got {self.refractive_index}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "color": list(self.color.as_tuple()),
            "ambient": self.ambient,
            "diffuse": self.diffuse,
            "specular": self.specular,
            "shininess": self.shininess,
            "reflective": self.reflective,
            "transparency": self.transparency,
            "refractive_index": self.refractive_index,
        }
        if self.pattern is not None:
            data["pattern"] = self.pattern.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Material:
        """Build a material from a dictionary; missing keys take defaults."""
        kwargs = {k: float(v) for k, v in data.items() if k not in ("color", "pattern")}
        if "color" in data:
            kwargs["color"] = Color.from_sequence(data["color"])
        if data.get("pattern") is not None:
            kwargs["pattern"] = pattern_from_dict(data["pattern"])
        return cls(**kwargs)
