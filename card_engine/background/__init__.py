"""Fond de carte : modèle v1, migration, patterns, presets, recolor, compositeur."""
from .model import (
    BackgroundV1, SolidBase, GradientBase, ImageBase, ColorStop,
    ImageOverlay, PatternOverlay, PATTERN_KINDS,
    default_background, default_image_overlay, with_base,
)
from .migration import migrate, is_v1, normalize_stops
from .patterns import PATTERN_CATALOG, BLEND_MODES, PatternGeometry, default_overlay, pattern_geometry
from .presets import BgPreset, CARD_BG_PRESETS, get_bg_preset, list_bg_presets
from .recolor import recolor
from .compositor import (
    PaintStack, PaintLayer, SolidLayer, LinearGradientLayer, RadialGradientLayer,
    ImageLayer, PatternLayer, GradientStop, compose, css_background_string,
)

__all__ = [
    "BackgroundV1", "SolidBase", "GradientBase", "ImageBase", "ColorStop",
    "ImageOverlay", "PatternOverlay", "PATTERN_KINDS",
    "default_background", "default_image_overlay", "with_base",
    "migrate", "is_v1", "normalize_stops",
    "PATTERN_CATALOG", "BLEND_MODES", "PatternGeometry", "default_overlay", "pattern_geometry",
    "BgPreset", "CARD_BG_PRESETS", "get_bg_preset", "list_bg_presets",
    "recolor",
    "PaintStack", "PaintLayer", "SolidLayer", "LinearGradientLayer", "RadialGradientLayer",
    "ImageLayer", "PatternLayer", "GradientStop", "compose", "css_background_string",
]
