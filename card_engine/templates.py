"""
Templates : snapshot structurel d'une carte (blocs sans id + fond) et blocs de base.

Le snapshot est versionné indépendamment de la carte : le store incrémente
`version` à chaque écriture.
"""
import copy
import uuid
from typing import Any, Dict, Iterable, List

from pydantic import BaseModel, Field

from .background import BackgroundV1, migrate
from .blocks import BlockGraph, CardBlock


class TemplateSnapshot(BaseModel):
    blocks: List[Dict[str, Any]] = Field(default_factory=list)
    background: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def capture(cls, blocks: Iterable[CardBlock], background: Any) -> "TemplateSnapshot":
        bg = background if isinstance(background, BackgroundV1) else migrate(background)
        return cls(
            blocks=[b.structural() for b in blocks],
            background=bg.to_json(),
        )

    def theme_json(self) -> dict:
        return {"background": copy.deepcopy(self.background)}

    def preview_json(self) -> dict:
        """Aperçu stocké avec le template (galerie de templates)."""
        return {"theme": self.theme_json(), "blocks": copy.deepcopy(self.blocks)}


def base_template_blocks() -> List[dict]:
    """Blocs d'une nouvelle carte : identité + contact actifs, le reste désactivé."""
    return [
        {
            "type": "header", "order": 0, "title": "Header", "enabled": True,
            "settings": {
                "layout": {"avatarDock": "inline"},
                "avatar": {
                    "enabled": True, "size": 80, "shape": "circle", "offset": 0,
                    "border": {"enabled": False, "width": 0, "color": "#000000"},
                },
            },
            "style": {"headingAlign": "center"},
        },
        {
            "type": "profile", "order": 1, "title": "Profile", "enabled": True,
            "settings": {"verticalOffset": 0, "uploadedImageUrl": None, "showName": True, "showTitle": True},
            "style": {"headingAlign": "center"},
        },
        {"type": "social", "order": 2, "title": "Social", "enabled": True,
         "settings": {"items": []}, "style": {"headingAlign": "center"}},
        {"type": "contact", "order": 3, "title": "Contact", "enabled": True,
         "settings": {"items": {}}, "style": {"headingAlign": "center"}},
        # désactivés par défaut
        {"type": "gallery", "order": 4, "title": "Gallery", "enabled": False,
         "settings": {"items": []}, "style": {}},
        {"type": "services", "order": 5, "title": "Services", "enabled": False,
         "settings": {"items": []}, "style": {}},
        {"type": "bio", "order": 6, "title": "Bio", "enabled": False,
         "settings": {"text": ""}, "style": {}},
        {
            "type": "lead_form", "order": 7, "title": "Lead Form", "enabled": False,
            "settings": {
                "title": "", "description": "",
                "fields": {"name": True, "email": True, "phone": False, "message": False},
            },
            "style": {},
        },
        {"type": "business_hours", "order": 8, "title": "Business Hours", "enabled": False,
         "settings": {"items": []}, "style": {}},
        {"type": "cta_buttons", "order": 9, "title": "CTA Buttons", "enabled": False,
         "settings": {"items": []}, "style": {}},
        {"type": "free_text", "order": 10, "title": "Free Text", "enabled": False,
         "settings": {"text": ""}, "style": {}},
        {"type": "info_utilities", "order": 11, "title": "Info Utilities", "enabled": False,
         "settings": {"type": "restaurant", "items": []}, "style": {}},
        {"type": "decorations", "order": 12, "title": "Decorations", "enabled": False,
         "settings": {"decorations": []}, "style": {}},
    ]


def blocks_from_template(rows: Iterable[dict]) -> BlockGraph:
    """Instancie les blocs d'un template pour une nouvelle carte (ids neufs)."""
    fresh = []
    for row in rows:
        row = copy.deepcopy(row) if isinstance(row, dict) else {}
        row["id"] = str(uuid.uuid4())
        fresh.append(row)
    return BlockGraph.from_rows(fresh)
