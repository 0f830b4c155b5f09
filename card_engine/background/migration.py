"""
Migration legacy → v1 du fond de carte.

  {mode: "solid", color, opacity?}              → base solid
  {mode: "gradient", from, to, angle?, opacity?} → base gradient (2 stops 0/100)
  {version: 1, ...}                              → normalisé, inchangé s'il est déjà propre

migrate() est totale (ne lève jamais) et idempotente : migrate(migrate(x)) == migrate(x).
Une valeur v1 n'est jamais rétrogradée.
"""
import logging
from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .model import (
    BackgroundV1, ColorStop, GradientBase, ImageBase, ImageOverlay, PatternOverlay, SolidBase,
    DEFAULT_GRADIENT_FROM, DEFAULT_GRADIENT_TO, default_background,
)

log = logging.getLogger(__name__)


def is_v1(bg: Any) -> bool:
    if isinstance(bg, BackgroundV1):
        return True
    return isinstance(bg, dict) and bg.get("version") == 1


def _num(v: Any, default: float) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return default
    return float(v)


def _color(v: Any, default: str, field: str) -> str:
    if isinstance(v, str) and v:
        return v
    if v is not None:
        log.warning("Couleur %s invalide (%r) → %s", field, v, default)
    return default


def normalize_stops(stops: Any) -> List[ColorStop]:
    """
    Stops sans `pos` : répartis uniformément si aucun n'en a,
    sinon 0 pour ceux qui manquent. Moins de 2 stops → complétés.
    """
    raw = [s for s in (stops or []) if isinstance(s, dict) and isinstance(s.get("color"), str)]
    if not raw:
        return [ColorStop(color=DEFAULT_GRADIENT_FROM, pos=0), ColorStop(color=DEFAULT_GRADIENT_TO, pos=100)]
    if len(raw) == 1:
        raw = [raw[0], {"color": raw[0]["color"], "pos": 100}]

    has_pos = any(isinstance(s.get("pos"), (int, float)) for s in raw)
    if has_pos:
        return [ColorStop(color=s["color"], pos=_num(s.get("pos"), 0.0)) for s in raw]
    step = 100 / max(1, len(raw) - 1)
    return [ColorStop(color=s["color"], pos=i * step) for i, s in enumerate(raw)]


def _normalize_base(raw: Any):
    if not isinstance(raw, dict):
        log.warning("Base de fond absente ou invalide → solid par défaut")
        return SolidBase()

    # Correctif : certains thèmes ont été sauvés avec base.base
    if "kind" not in raw and isinstance(raw.get("base"), dict):
        raw = raw["base"]

    kind = raw.get("kind")
    try:
        if kind == "solid":
            return SolidBase(color=_color(raw.get("color"), "#ffffff", "color"))
        if kind == "gradient":
            return GradientBase(angle=_num(raw.get("angle"), 180), stops=normalize_stops(raw.get("stops")))
        if kind == "image":
            fields = {k: v for k, v in raw.items() if v is not None}
            return ImageBase.model_validate(fields)
    except PydanticValidationError as e:
        log.warning("Base %r invalide (%s) → solid par défaut", kind, e.error_count())
        return SolidBase()

    log.warning("Type de base inconnu %r → solid par défaut", kind)
    return SolidBase()


def _normalize_overlays(raw: Any) -> List[PatternOverlay]:
    out: List[PatternOverlay] = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict):
            continue
        try:
            out.append(PatternOverlay.model_validate({k: v for k, v in item.items() if v is not None}))
        except PydanticValidationError as e:
            log.warning("Overlay ignoré (%s erreur(s)) : %r", e.error_count(), item.get("kind"))
    return out


def _normalize_image_overlay(raw: Any) -> Optional[ImageOverlay]:
    if not isinstance(raw, dict):
        return None
    try:
        return ImageOverlay.model_validate({k: v for k, v in raw.items() if v is not None})
    except PydanticValidationError:
        log.warning("imageOverlay invalide → ignoré")
        return None


def _from_v1(raw: dict) -> BackgroundV1:
    bar = raw.get("browserBarColor", raw.get("browser_bar_color"))
    return BackgroundV1(
        opacity=_num(raw.get("opacity"), 1.0),
        base=_normalize_base(raw.get("base")),
        image_overlay=_normalize_image_overlay(raw.get("imageOverlay", raw.get("image_overlay"))),
        overlays=_normalize_overlays(raw.get("overlays")),
        browser_bar_color=bar if isinstance(bar, str) else None,
    )


def _from_legacy(raw: dict) -> BackgroundV1:
    opacity = _num(raw.get("opacity"), 1.0)
    if raw.get("mode") == "gradient":
        return BackgroundV1(
            opacity=opacity,
            base=GradientBase(
                angle=_num(raw.get("angle"), 180),
                stops=[
                    ColorStop(color=_color(raw.get("from"), DEFAULT_GRADIENT_FROM, "from"), pos=0),
                    ColorStop(color=_color(raw.get("to"), DEFAULT_GRADIENT_TO, "to"), pos=100),
                ],
            ),
            overlays=[],
        )
    base = SolidBase(color=_color(raw.get("color"), "#ffffff", "color"))
    return BackgroundV1(opacity=opacity, base=base, overlays=[])


def migrate(bg: Any) -> BackgroundV1:
    """Convertit n'importe quelle valeur de fond (legacy, v1, None) en BackgroundV1."""
    if isinstance(bg, BackgroundV1):
        return bg
    if not isinstance(bg, dict) or not bg:
        return default_background()

    if bg.get("version") == 1 or ("base" in bg and "mode" not in bg):
        return _from_v1(bg)
    if bg.get("mode") in ("solid", "gradient"):
        return _from_legacy(bg)

    log.warning("Fond non reconnu (clés %s) → défaut", sorted(bg))
    return default_background()
