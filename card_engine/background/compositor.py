"""
Compositeur : BackgroundV1 → pile ordonnée de calques de peinture.

Ordre (du bas vers le haut) :
  1. base      : solid | linear-gradient (stops triés par pos) | image (+ bande de fondu si top-fade)
  2. darken    : si base image et imageOverlay.enabled (aplat ou dégradé transparent → couleur)
  3. pattern   : un calque par overlay actif (kind != none), dans l'ordre de la liste
  4. opacity   : multiplicateur global porté par la pile, jamais appliqué calque par calque

Fonction pure : aucun accès DOM / pixels, même entrée → même sortie.
"""
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .migration import migrate
from .model import BackgroundV1, GradientBase, ImageBase, ImageOverlay, SolidBase
from .patterns import PatternGeometry, pattern_geometry

LayerRole = Literal["base", "fade", "darken", "pattern"]

TRANSPARENT = "transparent"
DEFAULT_FADE_COLOR = "#ffffff"
DEFAULT_FADE_HEIGHT = 120


class GradientStop(BaseModel):
    color: str
    pos: float


class SolidLayer(BaseModel):
    type: Literal["solid"] = "solid"
    role: LayerRole = "base"
    color: str
    opacity: float = 1.0
    blend_mode: str = "normal"


class LinearGradientLayer(BaseModel):
    type: Literal["linear-gradient"] = "linear-gradient"
    role: LayerRole = "base"
    angle: float
    stops: List[GradientStop]
    opacity: float = 1.0
    blend_mode: str = "normal"
    height_px: Optional[float] = None   # bande de fondu (top-fade), None = plein cadre


class RadialGradientLayer(BaseModel):
    type: Literal["radial-gradient"] = "radial-gradient"
    role: LayerRole = "darken"
    stops: List[GradientStop]
    opacity: float = 1.0
    blend_mode: str = "normal"


class ImageLayer(BaseModel):
    type: Literal["image"] = "image"
    role: LayerRole = "base"
    url: str
    fit: str
    size: str                 # cover | auto | "<zoom>%"
    repeat: bool = False
    attachment: Literal["scroll", "fixed"] = "scroll"
    position: str = "center"
    zoom: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    blur: float = 0.0
    opacity: float = 1.0
    blend_mode: str = "normal"


class PatternLayer(BaseModel):
    type: Literal["pattern"] = "pattern"
    role: LayerRole = "pattern"
    kind: str
    opacity: float
    blend_mode: str
    density: float
    scale: float
    softness: float
    color_a: Optional[str] = None
    color_b: Optional[str] = None
    geometry: PatternGeometry


PaintLayer = Annotated[
    Union[SolidLayer, LinearGradientLayer, RadialGradientLayer, ImageLayer, PatternLayer],
    Field(discriminator="type"),
]


class PaintStack(list):
    """
    Liste de calques + opacité globale de la pile.
    Se compare comme une liste, l'opacité en plus entre deux PaintStack.
    """

    def __init__(self, layers=(), opacity: float = 1.0):
        super().__init__(layers)
        self.opacity = opacity

    def __eq__(self, other):
        if isinstance(other, PaintStack) and self.opacity != other.opacity:
            return False
        return list.__eq__(self, other)

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"PaintStack(opacity={self.opacity}, layers={list.__repr__(self)})"

    def to_dict(self) -> dict:
        return {"opacity": self.opacity, "layers": [layer.model_dump(mode="json") for layer in self]}


# ── Base ──────────────────────────────────────────────────────────────────────

def _sorted_stops(base: GradientBase) -> List[GradientStop]:
    # sorted() est stable : deux stops à la même position gardent leur ordre
    return [GradientStop(color=s.color, pos=s.pos) for s in sorted(base.stops, key=lambda s: s.pos)]


def _image_layers(base: ImageBase) -> list:
    size = "cover"
    repeat = False
    attachment = "scroll"
    position = base.position

    if base.fit == "tile":
        size = f"{round(base.zoom * 100, 2)}%"
        repeat = True
    elif base.fit == "fixed":
        attachment = "fixed"
    elif base.fit == "top-fade":
        size = "100% auto"
        position = "top"

    layers: list = [ImageLayer(
        url=base.url, fit=base.fit, size=size, repeat=repeat, attachment=attachment,
        position=position, zoom=base.zoom, offset_x=base.offset_x, offset_y=base.offset_y,
        blur=base.blur,
    )]

    if base.fit == "top-fade":
        layers.append(LinearGradientLayer(
            role="fade",
            angle=180,
            stops=[
                GradientStop(color=TRANSPARENT, pos=0),
                GradientStop(color=base.fade_to_color or DEFAULT_FADE_COLOR, pos=100),
            ],
            height_px=base.fade_height if base.fade_height is not None else DEFAULT_FADE_HEIGHT,
        ))
    return layers


def _base_layers(bg: BackgroundV1) -> list:
    base = bg.base
    if isinstance(base, SolidBase):
        return [SolidLayer(color=base.color)]
    if isinstance(base, GradientBase):
        return [LinearGradientLayer(angle=base.angle, stops=_sorted_stops(base))]
    return _image_layers(base)


# ── Voile image ──────────────────────────────────────────────────────────────

def _darken_layer(io: ImageOverlay):
    if not io.gradient:
        return SolidLayer(role="darken", color=io.color, opacity=io.opacity)

    stops = [GradientStop(color=TRANSPARENT, pos=0), GradientStop(color=io.color, pos=100)]
    if io.gradient_direction == "radial":
        return RadialGradientLayer(stops=stops, opacity=io.opacity)
    angle = 0 if io.gradient_direction == "to-top" else 180
    return LinearGradientLayer(role="darken", angle=angle, stops=stops, opacity=io.opacity)


# ── API ──────────────────────────────────────────────────────────────────────

def compose(bg: Union[BackgroundV1, dict, Any]) -> PaintStack:
    """Pile de calques prête à être peinte dans l'ordre par un renderer."""
    v1 = migrate(bg)
    layers = _base_layers(v1)

    if isinstance(v1.base, ImageBase) and v1.image_overlay is not None and v1.image_overlay.enabled:
        layers.append(_darken_layer(v1.image_overlay))

    for ov in v1.overlays:
        geometry = pattern_geometry(ov)
        if geometry is None:
            continue
        layers.append(PatternLayer(
            kind=ov.kind, opacity=ov.opacity, blend_mode=ov.blend_mode,
            density=ov.density, scale=ov.scale, softness=ov.softness,
            color_a=ov.color_a, color_b=ov.color_b, geometry=geometry,
        ))

    return PaintStack(layers, opacity=v1.opacity)


def _fmt(n: float) -> str:
    return f"{n:g}"


def css_background_string(bg: Any) -> Optional[str]:
    """
    Valeur CSS `background` unique (base seule) pour frames / metadata.
    None si aucun fond ou base image sans url.
    """
    if not bg:
        return None
    v1 = migrate(bg)
    base = v1.base
    if isinstance(base, SolidBase):
        return base.color
    if isinstance(base, GradientBase):
        parts = ", ".join(f"{s.color} {_fmt(s.pos)}%" for s in _sorted_stops(base))
        return f"linear-gradient({_fmt(base.angle)}deg, {parts})"
    return f"url('{base.url}')" if base.url else None
