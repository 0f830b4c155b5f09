"""
Renderer CSS : PaintStack → propriétés CSS par calque + feuille de style.

Chaque calque devient un élément absolu empilé dans l'ordre de la pile ; l'opacité
globale est appliquée une seule fois, sur le conteneur.

  render_layers(stack)              →  [{"background-image": …, "mix-blend-mode": …}, …]
  generate_background_css(bg, sel)  →  "sel { … } sel > .bg-layer-0 { … } …"
"""
from typing import Any, Dict, List

from ..background import (
    ImageLayer, LinearGradientLayer, PaintStack, PatternLayer, RadialGradientLayer,
    SolidLayer, compose,
)

CLEAR_WHITE = "rgba(255,255,255,0)"
CLEAR_BLACK = "rgba(0,0,0,0)"


def _n(v: float) -> str:
    return f"{round(v, 3):g}"


def _px(v: float) -> str:
    return f"{_n(v)}px"


def _stops(stops) -> str:
    return ", ".join(f"{s.color} {_n(s.pos)}%" for s in stops)


# ── Patterns ──────────────────────────────────────────────────────────────────

def _pattern_css(layer: PatternLayer) -> Dict[str, str]:
    g = layer.geometry
    o = layer.opacity
    a, b = g.ink_a, g.ink_b

    if layer.kind == "dots":
        image = f"radial-gradient(circle, {a} {_px(g.mark_px)}, {CLEAR_WHITE} {_px(g.mark_px + 0.8)})"
    elif layer.kind == "grid":
        image = (f"linear-gradient({a} {_px(g.mark_px)}, {CLEAR_WHITE} {_px(g.mark_px)}), "
                 f"linear-gradient(90deg, {a} {_px(g.mark_px)}, {CLEAR_WHITE} {_px(g.mark_px)})")
    elif layer.kind == "diagonal":
        image = (f"repeating-linear-gradient({_n(g.angle)}deg, {a} 0px, {a} {_px(g.mark_px)}, "
                 f"{CLEAR_WHITE} {_px(g.mark_px)}, {CLEAR_WHITE} {_px(g.spacing_px)})")
    elif layer.kind == "silk":
        light = f"rgba(255,255,255,{_n(0.20 * o)})"
        dark = f"rgba(0,0,0,{_n(0.12 * o)})"
        image = (f"repeating-linear-gradient({_n(g.angle)}deg, {light} 0px, {light} {_px(g.mark_px)}, "
                 f"{CLEAR_WHITE} {_px(g.mark_px)}, {CLEAR_WHITE} {_px(g.spacing_px)}), "
                 f"repeating-linear-gradient({_n(g.secondary_angle)}deg, {dark} 0px, {dark} {_px(g.mark_px)}, "
                 f"{CLEAR_BLACK} {_px(g.mark_px)}, {CLEAR_BLACK} {_px(g.spacing_px * 1.2)})")
    elif layer.kind == "noise":
        image = (f"radial-gradient(circle at 20% 30%, rgba(255,255,255,{_n(0.10 * o)}) 0 1px, {CLEAR_WHITE} 2px), "
                 f"radial-gradient(circle at 80% 40%, rgba(0,0,0,{_n(0.10 * o)}) 0 1px, {CLEAR_BLACK} 2px), "
                 f"radial-gradient(circle at 40% 80%, rgba(255,255,255,{_n(0.08 * o)}) 0 1px, {CLEAR_WHITE} 2px)")
    else:  # marble
        image = (f"radial-gradient(circle at 15% 25%, rgba(255,255,255,{_n(0.22 * o)}) 0%, {CLEAR_WHITE} 55%), "
                 f"radial-gradient(circle at 70% 30%, rgba(0,0,0,{_n(0.18 * o)}) 0%, {CLEAR_BLACK} 60%), "
                 f"radial-gradient(circle at 50% 85%, rgba(255,255,255,{_n(0.16 * o)}) 0%, {CLEAR_WHITE} 62%), "
                 f"linear-gradient({_n(g.angle)}deg, rgba(255,255,255,{_n(0.06 * o)}), rgba(0,0,0,{_n(0.06 * o)}))")

    css = {
        "background-image": image,
        "background-repeat": "repeat" if g.repeat else "no-repeat",
        "mix-blend-mode": layer.blend_mode,
    }
    if g.tile_px is not None:
        css["background-size"] = f"{_px(g.tile_px)} {_px(g.tile_px)}"
    # l'encre porte déjà l'opacité du pattern
    return css


# ── Calques ───────────────────────────────────────────────────────────────────

def layer_css(layer: Any) -> Dict[str, str]:
    """Propriétés CSS d'un calque (hors positionnement absolu commun)."""
    if isinstance(layer, PatternLayer):
        return _pattern_css(layer)

    if isinstance(layer, SolidLayer):
        css = {"background-color": layer.color}
    elif isinstance(layer, LinearGradientLayer):
        css = {"background-image": f"linear-gradient({_n(layer.angle)}deg, {_stops(layer.stops)})"}
        if layer.height_px is not None:
            css["top"] = "auto"
            css["height"] = _px(layer.height_px)
    elif isinstance(layer, RadialGradientLayer):
        css = {"background-image": f"radial-gradient(circle at center, {_stops(layer.stops)})"}
    elif isinstance(layer, ImageLayer):
        css = {
            "background-image": f"url('{layer.url}')",
            "background-size": layer.size,
            "background-repeat": "repeat" if layer.repeat else "no-repeat",
            "background-position": layer.position,
            "background-attachment": layer.attachment,
        }
        if layer.blur:
            css["filter"] = f"blur({_px(layer.blur)})"
        if layer.offset_x or layer.offset_y or (layer.zoom != 1 and layer.fit != "tile"):
            scale = layer.zoom if layer.fit != "tile" else 1
            css["transform"] = (f"translate({_px(layer.offset_x)}, {_px(layer.offset_y)}) "
                                f"scale({_n(scale)})")
    else:
        raise TypeError(f"Calque inconnu : {type(layer).__name__}")

    if layer.opacity != 1:
        css["opacity"] = _n(layer.opacity)
    if layer.blend_mode != "normal":
        css["mix-blend-mode"] = layer.blend_mode
    return css


def render_layers(stack: PaintStack) -> List[Dict[str, str]]:
    return [layer_css(layer) for layer in stack]


def _rule(selector: str, props: Dict[str, str]) -> str:
    body = "; ".join(f"{k}: {v}" for k, v in props.items())
    return f"{selector} {{ {body}; }}"


class CssBackgroundRenderer:
    """Peint une PaintStack sous forme de règles CSS pour `selector`."""

    def __init__(self, selector: str = ".card-bg"):
        self.selector = selector

    def render_stack(self, stack: PaintStack) -> str:
        rules = [_rule(self.selector, {
            "position": "absolute", "inset": "0", "overflow": "hidden",
            "opacity": _n(stack.opacity),
        })]
        for i, props in enumerate(render_layers(stack)):
            rules.append(_rule(f"{self.selector} > .bg-layer-{i}", {
                "position": "absolute", "inset": "0", **props,
            }))
        return "\n".join(rules)


def generate_background_css(bg: Any, selector: str = ".card-bg") -> str:
    """CSS complet du fond d'une carte (legacy accepté)."""
    return CssBackgroundRenderer(selector).render_stack(compose(bg))
