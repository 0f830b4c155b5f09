"""
Protocol BackgroundRenderer : interface pluggable pour peindre une PaintStack (CSS, image…).
"""
from typing import Protocol, runtime_checkable

from ..background import PaintStack


@runtime_checkable
class BackgroundRenderer(Protocol):
    def render_stack(self, stack: PaintStack) -> str: ...
