"""
EditorSession : état d'édition d'une carte (fond, blocs, sélection, statut de sauvegarde).

Toute mutation passe par _commit() : révision +1, statut `mutate`, notification
des abonnés. La persistance est faite par SaveCoordinator (sync/coordinator.py)
qui encadre l'écriture par begin_save() / finish_save().

Blocs ajoutés (new_block_ids) et retirés (removed_block_ids) depuis la dernière
sauvegarde réussie : insérés / supprimés côté store par le coordinateur.
"""
import asyncio
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from ..background import (
    BackgroundV1, PaintStack, PatternOverlay, compose, default_overlay,
    get_bg_preset, migrate, recolor, with_base,
)
from ..blocks import BlockGraph, CardBlock
from ..errors import PersistenceError, ValidationError
from .status import SaveEvent, SaveStatus, can_transition, next_status

log = logging.getLogger(__name__)

SAVED_RESET_DELAY = float(os.getenv("CARD_SAVED_RESET_DELAY", "1.2"))

Listener = Callable[["EditorSession"], None]


class EditorSession:

    def __init__(
        self,
        card_id: str,
        background: Any = None,
        blocks: Optional[BlockGraph] = None,
        theme: Optional[dict] = None,
        template_id: Optional[str] = None,
    ):
        self.card_id = card_id
        self.theme: Dict[str, Any] = dict(theme or {})
        self.template_id = template_id
        self.background: BackgroundV1 = migrate(background)
        self.blocks: BlockGraph = blocks if blocks is not None else BlockGraph()

        self.active_block_id: Optional[str] = None
        self.active_decoration_id: Optional[str] = None

        self.status: SaveStatus = SaveStatus.IDLE
        self.last_error: Optional[PersistenceError] = None

        self.revision = 0
        self.saved_revision = 0
        self._saving_revision = 0
        self.new_block_ids: Set[str] = set()
        self.removed_block_ids: Set[str] = set()
        self._saving_new: Set[str] = set()
        self._saving_removed: Set[str] = set()
        self._listeners: List[Listener] = []
        self._settle_handle: Optional[asyncio.TimerHandle] = None

    @classmethod
    def from_rows(cls, card: dict, block_rows: Optional[Iterable[Any]] = None) -> "EditorSession":
        """Session à partir des lignes `cards` / `card_blocks` ; le fond est migré en v1."""
        theme = card.get("theme") if isinstance(card.get("theme"), dict) else {}
        return cls(
            card_id=str(card.get("id")),
            background=theme.get("background"),
            blocks=BlockGraph.from_rows(block_rows),
            theme=theme,
            template_id=card.get("template_id") or None,
        )

    # ── Abonnements ───────────────────────────────────────────────────────────

    def subscribe(self, fn: Listener) -> Callable[[], None]:
        self._listeners.append(fn)

        def unsubscribe() -> None:
            if fn in self._listeners:
                self._listeners.remove(fn)

        return unsubscribe

    def _notify(self) -> None:
        for fn in list(self._listeners):
            fn(self)

    # ── Lecture ───────────────────────────────────────────────────────────────

    @property
    def pending(self) -> bool:
        """Mutations non encore persistées."""
        return self.revision > self.saved_revision

    @property
    def can_save(self) -> bool:
        return can_transition(self.status, SaveEvent.SAVE, self.pending)

    @property
    def active_block(self) -> Optional[CardBlock]:
        return self.blocks.get(self.active_block_id)

    def compose(self) -> PaintStack:
        return compose(self.background)

    def snapshot(self) -> dict:
        return {
            "card_id": self.card_id,
            "template_id": self.template_id,
            "status": self.status.value,
            "pending": self.pending,
            "active_block_id": self.active_block_id,
            "active_decoration_id": self.active_decoration_id,
            "background": self.background.to_json(),
            "blocks": self.blocks.to_rows(),
            "error": self.last_error.to_dict() if self.last_error else None,
        }

    # ── Sélection (pas une mutation) ──────────────────────────────────────────

    def select_block(self, block_id: Optional[str]) -> None:
        self.active_block_id = block_id
        block = self.blocks.get(block_id)
        if block is None or block.type != "decorations":
            self.active_decoration_id = None
        self._notify()

    def select_decoration(self, decoration_id: Optional[str]) -> None:
        self.active_decoration_id = decoration_id
        self._notify()

    # ── Mutations ─────────────────────────────────────────────────────────────

    def _commit(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self.revision += 1
        previous = self.status
        self.status = next_status(self.status, SaveEvent.MUTATE)
        if previous is SaveStatus.SAVED:
            self._cancel_settle()
        self._notify()

    def toggle_block(self, block_id: str, enabled: bool) -> None:
        self._commit(blocks=self.blocks.toggle(block_id, enabled))

    def enable_block(self, block_id: str) -> None:
        """Active le bloc et le sélectionne (ajout depuis le rail)."""
        self.toggle_block(block_id, True)
        self.select_block(block_id)

    def reorder_blocks(self, next_list: Iterable[Any]) -> None:
        self._commit(blocks=self.blocks.reorder(next_list))

    def move_block(self, block_id: str, to_index: int) -> None:
        self.reorder_blocks(self.blocks.moved(block_id, to_index))

    def update_block_settings(self, block_id: str, settings: dict) -> None:
        self._commit(blocks=self.blocks.patch_settings(block_id, settings))

    def update_block_style(self, block_id: str, style: dict) -> None:
        self._commit(blocks=self.blocks.patch_style(block_id, style))

    def update_active_settings(self, settings: dict) -> None:
        if self.active_block_id:
            self.update_block_settings(self.active_block_id, settings)

    def update_active_style(self, style: dict) -> None:
        if self.active_block_id:
            self.update_block_style(self.active_block_id, style)

    def add_block(self, block: Any) -> CardBlock:
        graph = self.blocks.add(block)
        added = graph.blocks[-1]
        self.new_block_ids.add(added.id)
        self._commit(blocks=graph)
        return added

    def remove_block(self, block_id: str) -> None:
        """Retire le bloc ; la ligne est supprimée du store à la prochaine sauvegarde."""
        if block_id in self.blocks:
            if block_id in self.new_block_ids and block_id not in self._saving_new:
                self.new_block_ids.discard(block_id)
            else:
                self.removed_block_ids.add(block_id)
        changes: Dict[str, Any] = {"blocks": self.blocks.remove(block_id)}
        if self.active_block_id == block_id:
            changes["active_block_id"] = None
            changes["active_decoration_id"] = None
        self._commit(**changes)

    def set_background(self, bg: Any) -> None:
        """Remplace le fond entier (copie profonde, entrée legacy acceptée)."""
        bg = bg.model_copy(deep=True) if isinstance(bg, BackgroundV1) else migrate(bg)
        self._commit(background=bg)

    def set_base(self, base: Any) -> None:
        if isinstance(base, dict):
            base = migrate({"version": 1, "base": base}).base
        self._commit(background=with_base(self.background, base))

    def set_effect(self, kind: str) -> None:
        """Un seul effet actif : remplace les overlays (couleurs courantes conservées)."""
        if kind == "none":
            self._commit(background=self.background.model_copy(update={"overlays": []}, deep=True))
            return
        overlay = default_overlay(kind)
        current = self.background.active_overlays
        if current:
            overlay = overlay.model_copy(update={
                "color_a": current[0].color_a or overlay.color_a,
                "color_b": current[0].color_b or overlay.color_b,
            })
        self._commit(background=self.background.model_copy(update={"overlays": [overlay]}, deep=True))

    def patch_effect(self, **fields) -> None:
        """Modifie l'effet actif (opacity, density, scale…) ; valeurs bornées par le modèle."""
        overlays = list(self.background.overlays)
        if not overlays:
            log.debug("patch_effect sans effet actif : ignoré")
            return
        overlays[0] = PatternOverlay.model_validate({**overlays[0].model_dump(), **fields})
        self._commit(background=self.background.model_copy(update={"overlays": overlays}, deep=True))

    def apply_preset(self, preset_id: str) -> None:
        bg = get_bg_preset(preset_id)
        if bg is None:
            raise ValidationError(f"Preset inconnu : {preset_id}")
        self._commit(background=bg)

    def recolor_background(self, color_a: str, color_b: str) -> None:
        self._commit(background=recolor(self.background, color_a, color_b))

    # ── Sauvegarde ────────────────────────────────────────────────────────────

    def begin_save(self) -> bool:
        """Passe en `saving` si une sauvegarde est permise ; False = no-op."""
        if not self.can_save:
            return False
        self._cancel_settle()
        self._saving_revision = self.revision
        self._saving_new = set(self.new_block_ids)
        self._saving_removed = set(self.removed_block_ids)
        self.status =next_status(self.status, SaveEvent.SAVE, self.pending)
        self.last_error = None
        self._notify()
        return True

    def finish_save(self, error: Optional[PersistenceError] = None) -> None:
        if self.status is not SaveStatus.SAVING:
            return
        if error is not None:
            self.status = next_status(self.status, SaveEvent.FAIL)
            self.last_error = error
        else:
            self.saved_revision = self._saving_revision
            self.new_block_ids -= self._saving_new
            self.removed_block_ids -= self._saving_removed
            self._saving_new, self._saving_removed = set(), set()
            self.status = next_status(self.status, SaveEvent.SUCCEED)
            self._schedule_settle()
        self._notify()

    def settle(self) -> None:
        """saved → idle (appelé après SAVED_RESET_DELAY)."""
        self._settle_handle = None
        status = next_status(self.status, SaveEvent.SETTLE)
        if status is not self.status:
            self.status = status
            self._notify()

    def _schedule_settle(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.debug("Pas de boucle asyncio : statut saved conservé")
            return
        self._settle_handle = loop.call_later(SAVED_RESET_DELAY, self.settle)

    def _cancel_settle(self) -> None:
        if self._settle_handle is not None:
            self._settle_handle.cancel()
            self._settle_handle = None
