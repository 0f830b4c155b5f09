"""
Recolor : reskin deux couleurs d'un fond.

  gradient : stops[0] → color_a, stops[-1] → color_b (stops intermédiaires et positions intacts)
  overlays : colorA/colorB remplacés, le reste (kind, opacity, density…) intact
  solid / image : base inchangée
"""
from typing import Any, Union

from .migration import migrate
from .model import BackgroundV1, GradientBase


def recolor(bg: Union[BackgroundV1, dict, Any], color_a: str, color_b: str) -> BackgroundV1:
    """Retourne un nouveau fond ; l'entrée n'est jamais modifiée."""
    src = migrate(bg)
    out = src.model_copy(deep=True)

    if isinstance(out.base, GradientBase):
        stops = [s.model_copy() for s in out.base.stops]
        stops[0] = stops[0].model_copy(update={"color": color_a})
        stops[-1] = stops[-1].model_copy(update={"color": color_b})
        out.base = out.base.model_copy(update={"stops": stops})

    out.overlays = [ov.model_copy(update={"color_a": color_a, "color_b": color_b}) for ov in out.overlays]
    return out
