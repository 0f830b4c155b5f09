"""
Blocs de carte : CardBlock (ligne card_blocks) + bases des settings/style typés.

`settings` et `style` sont conservés tels quels (dict) pour être réécrits
verbatim ; la vue typée par type de bloc est obtenue via typed_settings().
"""
import copy
import logging
import uuid
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

log = logging.getLogger(__name__)


def _row_order(v: Any) -> int:
    """Entier, flottant entier ou chaîne numérique ; 0 sinon."""
    if isinstance(v, bool):
        return 0
    if isinstance(v, str):
        try:
            v = float(v)
        except ValueError:
            return 0
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    return 0


BlockType = Literal[
    "header", "profile", "bio", "contact", "social", "gallery", "video",
    "info_utilities", "lead_form", "embed", "services", "decorations",
    "business_hours", "free_text", "cta_buttons", "booking",
]

Align = Literal["left", "center", "right"]


class BlockSettings(BaseModel):
    """Contenu d'un bloc (textes, items, urls). Clés JSON en camelCase, champs inconnus conservés."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class BlockStyle(BaseModel):
    """Apparence d'un bloc (couleurs, container, typo)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    offset_y: Optional[float] = None


class ContainerStyle(BaseModel):
    """Encadré commun à la plupart des blocs."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    enabled: Optional[bool] = None
    bg_color: Optional[str] = None
    radius: Optional[float] = None
    padding: Optional[float] = None
    shadow: Optional[bool] = None
    border_width: Optional[float] = None
    border_color: Optional[str] = None


class CardBlock(BaseModel):
    """
    Bloc d'une carte. `id` est la seule identité stable ; `order` ne sert qu'au tri.
    Gelé : toute modification passe par model_copy (le type n'est jamais réécrit).
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: str
    enabled: bool = True
    order: int = 0
    settings: Dict[str, Any] = Field(default_factory=dict)
    style: Dict[str, Any] = Field(default_factory=dict)
    title: Optional[str] = None

    @classmethod
    def from_row(cls, row: Any) -> "CardBlock":
        """Construit un bloc depuis une ligne brute ; ne lève jamais (valeurs par défaut)."""
        if isinstance(row, CardBlock):
            return row
        if not isinstance(row, dict):
            row = {}

        block_type = row.get("type")
        if not isinstance(block_type, str) or not block_type:
            log.warning("Bloc %s sans type → free_text", row.get("id"))
            block_type = "free_text"

        enabled = row.get("enabled")
        order = row.get("order")
        settings = row.get("settings")
        style = row.get("style")
        title = row.get("title")

        fields: Dict[str, Any] = {
            "type": block_type,
            "enabled": enabled if isinstance(enabled, bool) else True,
            "order": _row_order(order),
            "settings": copy.deepcopy(settings) if isinstance(settings, dict) else {},
            "style": copy.deepcopy(style) if isinstance(style, dict) else {},
            "title": title if isinstance(title, str) else None,
        }
        if row.get("id"):
            fields["id"] = str(row["id"])
        return cls(**fields)

    def to_row(self) -> dict:
        return copy.deepcopy(self.model_dump())

    def persisted_fields(self) -> dict:
        """Champs écrits à chaque sauvegarde (clé : id)."""
        return {
            "settings": copy.deepcopy(self.settings),
            "style": copy.deepcopy(self.style),
            "enabled": self.enabled,
            "order": self.order,
        }

    def structural(self) -> dict:
        """Copie sans id, pour les snapshots de template."""
        return {
            "type": self.type,
            "order": self.order,
            "title": self.title,
            "enabled": self.enabled,
            "settings": copy.deepcopy(self.settings),
            "style": copy.deepcopy(self.style),
        }

    def typed_settings(self) -> BlockSettings:
        from . import parse_settings
        return parse_settings(self.type, self.settings)

    def typed_style(self) -> BlockStyle:
        from . import parse_style
        return parse_style(self.type, self.style)
