"""
Fond de carte : migration, composition, recolor, catalogues.

Routes :
  POST /api/background/migrate    → fond (legacy ou v1) normalisé en v1
  POST /api/background/compose    → pile de calques + CSS par calque
  POST /api/background/recolor    → fond recoloré (couleurs A/B)
  GET  /api/background/presets    → presets curés
  GET  /api/background/patterns   → catalogue des effets + blend modes
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body

from ...background import (
    BLEND_MODES, PATTERN_CATALOG, compose, css_background_string, list_bg_presets, migrate, recolor,
)
from ...models import RecolorRequest
from ...renderer import render_layers

router = APIRouter(prefix="/api/background")


@router.post("/migrate")
def migrate_background(bg: Optional[Dict[str, Any]] = Body(default=None)):
    return migrate(bg).to_json()


@router.post("/compose")
def compose_background(bg: Optional[Dict[str, Any]] = Body(default=None)):
    stack = compose(bg)
    return {
        **stack.to_dict(),
        "css": render_layers(stack),
        "css_string": css_background_string(bg),
    }


@router.post("/recolor")
def recolor_background(req: RecolorRequest):
    return recolor(req.background, req.color_a, req.color_b).to_json()


@router.get("/presets")
def get_presets():
    return [
        {"id": p.id, "name": p.name, "background": p.background.to_json()}
        for p in list_bg_presets()
    ]


@router.get("/patterns")
def get_patterns():
    return {"patterns": PATTERN_CATALOG, "blend_modes": BLEND_MODES}
