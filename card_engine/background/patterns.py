"""
Pattern Library : catalogue des effets procéduraux et géométrie dérivée.

La géométrie est indépendante du moteur de rendu : le compositeur l'embarque
dans un PatternLayer, le renderer CSS (ou un autre) la traduit.

  density  ↑ → motifs plus serrés (gap / spacing ↓)
  scale      → multiplie toutes les tailles
  softness ↑ → traits plus épais (diagonal, silk)
"""
from typing import Dict, List, Optional

from pydantic import BaseModel

from .model import PatternKind, PatternOverlay

# Catégories affichées dans l'éditeur (sélecteur d'effet)
PATTERN_CATALOG: List[Dict[str, str]] = [
    {"value": "none",     "label": "Aucun",            "category": "none"},
    {"value": "dots",     "label": "Points",           "category": "geometric"},
    {"value": "grid",     "label": "Grille",           "category": "geometric"},
    {"value": "diagonal", "label": "Lignes diagonales", "category": "geometric"},
    {"value": "noise",    "label": "Grain",            "category": "organic"},
    {"value": "marble",   "label": "Marbre",           "category": "organic"},
    {"value": "silk",     "label": "Soie",             "category": "organic"},
]

BLEND_MODES = [
    "soft-light", "overlay", "multiply", "screen", "color-dodge",
    "color-burn", "hard-light", "difference", "exclusion", "normal",
]

# Angle par défaut quand overlay.angle est absent (ou 0)
_DEFAULT_ANGLES: Dict[str, float] = {"diagonal": 45, "silk": 20, "marble": 35}


class PatternGeometry(BaseModel):
    """Paramètres de tuilage d'un pattern, en px."""
    tile_px: Optional[float] = None     # taille de la tuile répétée (carrée)
    mark_px: Optional[float] = None     # rayon du point / épaisseur du trait
    spacing_px: Optional[float] = None  # période des lignes répétées
    angle: Optional[float] = None
    secondary_angle: Optional[float] = None
    repeat: bool = True
    ink_a: str
    ink_b: str


def default_overlay(kind: PatternKind) -> PatternOverlay:
    """Overlay créé quand on active un effet sans réglage préalable."""
    return PatternOverlay(
        kind=kind, opacity=0.25, density=0.6, scale=1, softness=0.5, angle=45,
        blend_mode="soft-light", color_a="#ffffff", color_b="#000000",
    )


def _inks(ov: PatternOverlay) -> tuple:
    ink_a = ov.color_a or f"rgba(255,255,255,{round(0.9 * ov.opacity, 3)})"
    ink_b = ov.color_b or f"rgba(0,0,0,{round(0.35 * ov.opacity, 3)})"
    return ink_a, ink_b


def pattern_geometry(ov: PatternOverlay) -> Optional[PatternGeometry]:
    """Géométrie du pattern, None pour kind="none"."""
    if ov.kind == "none":
        return None

    ink_a, ink_b = _inks(ov)
    sparse = 1 - ov.density
    s = ov.scale
    angle = ov.angle or _DEFAULT_ANGLES.get(ov.kind)

    if ov.kind == "dots":
        return PatternGeometry(
            tile_px=round((12 + sparse * 20) * s, 2),
            mark_px=round((1 + sparse * 2) * s, 2),
            ink_a=ink_a, ink_b=ink_b,
        )
    if ov.kind == "grid":
        return PatternGeometry(
            tile_px=round((18 + sparse * 24) * s, 2),
            mark_px=round(1 * s, 2),
            ink_a=ink_a, ink_b=ink_b,
        )
    if ov.kind == "diagonal":
        return PatternGeometry(
            mark_px=round((1 + ov.softness * 1.2) * s, 2),
            spacing_px=round((12 + sparse * 26) * s, 2),
            angle=angle, ink_a=ink_a, ink_b=ink_b,
        )
    if ov.kind == "silk":
        return PatternGeometry(
            mark_px=round((0.8 + ov.softness * 1.6) * s, 2),
            spacing_px=round((10 + sparse * 30) * s, 2),
            angle=angle, secondary_angle=angle + 12,
            ink_a=ink_a, ink_b=ink_b,
        )
    if ov.kind == "noise":
        return PatternGeometry(tile_px=round(140 * s, 2), ink_a=ink_a, ink_b=ink_b)
    # marble
    return PatternGeometry(angle=angle, repeat=False, ink_a=ink_a, ink_b=ink_b)
