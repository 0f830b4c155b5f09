from .base import BackgroundRenderer
from .css import CssBackgroundRenderer, generate_background_css, layer_css, render_layers

__all__ = ["BackgroundRenderer", "CssBackgroundRenderer", "generate_background_css", "layer_css", "render_layers"]
