"""
Modèle de fond de carte v1 : base (solid | gradient | image) + overlays + imageOverlay.

Forme JSON persistée en camelCase (clé `theme.background` de la carte) :
{
  "version": 1,
  "opacity": 0.8,
  "base": {"kind": "gradient", "angle": 135, "stops": [{"color": "#fff", "pos": 0}, ...]},
  "imageOverlay": {"enabled": true, "color": "#000000", "opacity": 0.4, ...},
  "overlays": [{"kind": "silk", "opacity": 0.4, "blendMode": "soft-light", ...}],
  "browserBarColor": "#000000"
}
Les attributs Python sont en snake_case (alias camelCase générés).
"""
import logging
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

log = logging.getLogger(__name__)

PatternKind = Literal["dots", "noise", "diagonal", "grid", "silk", "marble", "none"]
PATTERN_KINDS = ("dots", "noise", "diagonal", "grid", "silk", "marble", "none")

ImageFit = Literal["cover", "fixed", "tile", "top-fade"]
GradientDirection = Literal["to-bottom", "to-top", "radial"]

DEFAULT_GRADIENT_FROM = "#ffffff"
DEFAULT_GRADIENT_TO   = "#f3f4f6"


def clamp(n: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, n))


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColorStop(_CamelModel):
    color: str
    pos: float = 0.0

    @field_validator("pos")
    @classmethod
    def _clamp_pos(cls, v: float) -> float:
        return clamp(v, 0.0, 100.0)


def _default_stops() -> List[ColorStop]:
    return [ColorStop(color=DEFAULT_GRADIENT_FROM, pos=0), ColorStop(color=DEFAULT_GRADIENT_TO, pos=100)]


class SolidBase(_CamelModel):
    kind: Literal["solid"] = "solid"
    color: str = "#ffffff"


class GradientBase(_CamelModel):
    kind: Literal["gradient"] = "gradient"
    angle: float = 180
    stops: List[ColorStop] = Field(default_factory=_default_stops, min_length=2)


class ImageBase(_CamelModel):
    kind: Literal["image"] = "image"
    url: str = ""
    fit: ImageFit = "cover"
    position: str = "center"       # center | top | bottom
    zoom: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    blur: float = 0.0              # px
    fade_to_color: Optional[str] = None
    fade_height: Optional[float] = None   # px, utilisé par fit="top-fade"

    @field_validator("zoom")
    @classmethod
    def _clamp_zoom(cls, v: float) -> float:
        return clamp(v, 0.5, 2.0)

    @field_validator("blur")
    @classmethod
    def _clamp_blur(cls, v: float) -> float:
        return clamp(v, 0.0, 20.0)


# Union discriminée par `kind`
Base = Annotated[Union[SolidBase, GradientBase, ImageBase], Field(discriminator="kind")]


class ImageOverlay(_CamelModel):
    """Voile d'assombrissement posé sur une base image."""
    enabled: bool = False
    color: str = "#000000"
    opacity: float = 0.4
    gradient: bool = False
    gradient_direction: GradientDirection = "to-bottom"

    @field_validator("opacity")
    @classmethod
    def _clamp_opacity(cls, v: float) -> float:
        return clamp(v, 0.0, 0.9)


class PatternOverlay(_CamelModel):
    """Effet procédural (dots, noise, diagonal, grid, silk, marble)."""
    kind: PatternKind = "none"
    opacity: float = 0.25
    density: float = 0.55
    scale: float = 1.0
    softness: float = 0.5
    angle: Optional[float] = None       # None → angle par défaut du pattern
    blend_mode: str = "soft-light"
    color_a: Optional[str] = None
    color_b: Optional[str] = None

    @field_validator("kind", mode="before")
    @classmethod
    def _known_kind(cls, v):
        if v not in PATTERN_KINDS:
            log.warning("Pattern inconnu %r → none", v)
            return "none"
        return v

    @field_validator("opacity")
    @classmethod
    def _clamp_opacity(cls, v: float) -> float:
        return clamp(v, 0.0, 0.8)

    @field_validator("density", "softness")
    @classmethod
    def _clamp_unit(cls, v: float) -> float:
        return clamp(v)

    @field_validator("scale")
    @classmethod
    def _clamp_scale(cls, v: float) -> float:
        return clamp(v, 0.5, 2.0)


class BackgroundV1(_CamelModel):
    version: Literal[1] = 1
    opacity: float = 1.0
    base: Base = Field(default_factory=SolidBase)
    image_overlay: Optional[ImageOverlay] = None
    overlays: List[PatternOverlay] = Field(default_factory=list)
    browser_bar_color: Optional[str] = None

    @field_validator("opacity")
    @classmethod
    def _clamp_opacity(cls, v: float) -> float:
        return clamp(v)

    @property
    def active_overlays(self) -> List[PatternOverlay]:
        return [ov for ov in self.overlays if ov.kind != "none"]

    def to_json(self) -> dict:
        """Forme persistée (camelCase, champs None omis)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def default_background() -> BackgroundV1:
    return BackgroundV1(opacity=1, base=SolidBase(color="#ffffff"), overlays=[])


def default_image_overlay() -> ImageOverlay:
    """Voile posé par défaut quand on passe la base en image."""
    return ImageOverlay(enabled=True, color="#000000", opacity=0.4, gradient=True, gradient_direction="to-bottom")


def with_base(bg: BackgroundV1, base: Union[SolidBase, GradientBase, ImageBase]) -> BackgroundV1:
    """
    Remplace la base. Un changement de `kind` supprime l'imageOverlay ;
    le passage à une base image installe le voile par défaut.
    """
    update: dict = {"base": base.model_copy(deep=True)}
    if base.kind != bg.base.kind:
        update["image_overlay"] = default_image_overlay() if base.kind == "image" else None
    return bg.model_copy(update=update, deep=True)
