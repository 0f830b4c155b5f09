"""
Protocol CardStore : interface de persistance utilisée par l'éditeur et le SaveCoordinator.

Implémentations : InMemoryCardStore (tests, aperçus) et SqlCardStore (database.py).
Toutes les méthodes sont async ; une erreur est signalée par une exception quelconque,
le coordinateur l'enveloppe en PersistenceError.
insert_block est un upsert (ligne complète) ; delete_block sur une ligne absente ne fait rien.
"""
import copy
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from ..templates import TemplateSnapshot


@runtime_checkable
class CardStore(Protocol):
    async def load_card(self, card_id: str) -> Optional[dict]: ...
    async def load_blocks(self, card_id: str) -> List[dict]: ...
    async def update_block(self, block_id: str, fields: dict) -> None: ...
    async def insert_block(self, card_id: str, row: dict) -> None: ...
    async def delete_block(self, block_id: str) -> None: ...
    async def get_card_theme(self, card_id: str) -> dict: ...
    async def update_card_theme(self, card_id: str, theme: dict) -> None: ...
    async def write_template_snapshot(self, template_id: str, snapshot: TemplateSnapshot) -> int: ...


class InMemoryCardStore:
    """Store en mémoire. `calls` garde la trace des écritures dans l'ordre."""

    def __init__(self):
        self.cards: Dict[str, dict] = {}
        self.blocks: Dict[str, dict] = {}
        self.templates: Dict[str, dict] = {}
        self.calls: List[Tuple[str, str]] = []

    # ── Seed ──────────────────────────────────────────────────────────────────

    def add_card(self, card: dict, blocks: Optional[List[dict]] = None) -> None:
        card_id = str(card["id"])
        self.cards[card_id] = copy.deepcopy(card)
        for b in blocks or []:
            row = copy.deepcopy(b)
            row["card_id"] = card_id
            self.blocks[str(row["id"])] = row

    def add_template(self, template_id: str) -> None:
        self.templates[template_id] = {"id": template_id, "version": 0, "blocks": [], "background": {}}

    # ── CardStore ─────────────────────────────────────────────────────────────

    async def load_card(self, card_id: str) -> Optional[dict]:
        card = self.cards.get(card_id)
        return copy.deepcopy(card) if card is not None else None

    async def load_blocks(self, card_id: str) -> List[dict]:
        rows = [b for b in self.blocks.values() if b.get("card_id") == card_id]
        return copy.deepcopy(sorted(rows, key=lambda b: b.get("order", 0)))

    async def update_block(self, block_id: str, fields: dict) -> None:
        self.calls.append(("update_block", block_id))
        if block_id not in self.blocks:
            raise KeyError(f"block {block_id} not found")
        self.blocks[block_id].update(copy.deepcopy(fields))

    async def insert_block(self, card_id: str, row: dict) -> None:
        block_id = str(row["id"])
        self.calls.append(("insert_block", block_id))
        if card_id not in self.cards:
            raise KeyError(f"card {card_id} not found")
        stored = copy.deepcopy(row)
        stored["card_id"] = card_id
        self.blocks[block_id] = stored

    async def delete_block(self, block_id: str) -> None:
        self.calls.append(("delete_block", block_id))
        self.blocks.pop(block_id, None)

    async def get_card_theme(self, card_id: str) -> dict:
        self.calls.append(("get_card_theme", card_id))
        if card_id not in self.cards:
            raise KeyError(f"card {card_id} not found")
        return copy.deepcopy(self.cards[card_id].get("theme") or {})

    async def update_card_theme(self, card_id: str, theme: dict) -> None:
        self.calls.append(("update_card_theme", card_id))
        if card_id not in self.cards:
            raise KeyError(f"card {card_id} not found")
        self.cards[card_id]["theme"] = copy.deepcopy(theme)

    async def write_template_snapshot(self, template_id: str, snapshot: TemplateSnapshot) -> int:
        self.calls.append(("write_template_snapshot", template_id))
        if template_id not in self.templates:
            raise KeyError(f"template {template_id} not found")
        tpl = self.templates[template_id]
        tpl["blocks"] = copy.deepcopy(snapshot.blocks)
        tpl["background"] = copy.deepcopy(snapshot.background)
        tpl["version"] += 1
        return tpl["version"]
