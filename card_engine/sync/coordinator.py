"""
SaveCoordinator : sauvegarde séquentielle d'une session d'édition.

  1. blocs retirés                     → delete_block(id)
     blocs, dans l'ordre de la liste  → insert_block(card_id, ligne) si ajouté depuis la dernière
                                        sauvegarde, sinon update_block(id, {settings, style, enabled, order})
  2. thème carte                       → lecture, merge {"background": …} au 1er niveau, écriture
  3. template lié (optionnel)          → snapshot structurel ; un échec ne fait pas échouer la sauvegarde

Pas de retry, pas d'écriture parallèle. Le premier échec des étapes 1-2 arrête tout.
"""
import logging
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from ..editor.session import EditorSession
from ..errors import PartialSyncWarning, PersistenceError
from ..templates import TemplateSnapshot
from .store import CardStore

log = logging.getLogger(__name__)

THEME_BACKGROUND_KEY = "background"


class SaveResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: Literal["saved", "failed", "skipped"]
    error: Optional[PersistenceError] = None
    warning: Optional[PartialSyncWarning] = None
    blocks_saved: int = 0
    template_version: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == "saved"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "ok": self.ok,
            "blocks_saved": self.blocks_saved,
            "template_version": self.template_version,
            "error": self.error.to_dict() if self.error else None,
            "warning": self.warning.to_dict() if self.warning else None,
        }


class SaveCoordinator:

    def __init__(self, store: CardStore):
        self.store = store

    async def save(self, session: EditorSession) -> SaveResult:
        if not session.begin_save():
            log.debug("Sauvegarde ignorée (statut %s, pending=%s)", session.status.value, session.pending)
            return SaveResult(status="skipped")

        blocks = session.blocks.blocks
        new_ids = set(session.new_block_ids)
        removed_ids = sorted(session.removed_block_ids)
        background = session.background.model_copy(deep=True)
        saved = 0

        # 1. Blocs
        for block_id in removed_ids:
            try:
                await self.store.delete_block(block_id)
            except Exception as e:
                log.error("Échec suppression bloc %s (carte %s) : %s", block_id, session.card_id, e)
                err = PersistenceError("blocks", block_id, str(e))
                session.finish_save(err)
                return SaveResult(status="failed", error=err)

        for block in blocks:
            try:
                if block.id in new_ids:
                    await self.store.insert_block(session.card_id, block.to_row())
                else:
                    await self.store.update_block(block.id, block.persisted_fields())
            except Exception as e:
                log.error("Échec sauvegarde bloc %s (carte %s) : %s", block.id, session.card_id, e)
                err = PersistenceError("blocks", block.id, str(e))
                session.finish_save(err)
                return SaveResult(status="failed", error=err, blocks_saved=saved)
            saved += 1

        # 2. Thème carte
        try:
            theme = await self.store.get_card_theme(session.card_id)
            theme = dict(theme or {})
            theme[THEME_BACKGROUND_KEY] = background.to_json()
            await self.store.update_card_theme(session.card_id, theme)
        except Exception as e:
            log.error("Échec sauvegarde thème carte %s : %s", session.card_id, e)
            err = PersistenceError("theme", session.card_id, str(e))
            session.finish_save(err)
            return SaveResult(status="failed", error=err, blocks_saved=saved)
        session.theme = theme

        # 3. Template lié
        warning = None
        version = None
        if session.template_id:
            snapshot = TemplateSnapshot.capture(blocks, background)
            try:
                version = await self.store.write_template_snapshot(session.template_id, snapshot)
            except Exception as e:
                log.warning("Template %s non synchronisé (carte %s sauvée) : %s",
                            session.template_id, session.card_id, e)
                warning = PartialSyncWarning(session.template_id, str(e))

        session.finish_save()
        log.info("Carte %s sauvée : %d blocs%s", session.card_id, saved,
                 f", template v{version}" if version is not None else "")
        return SaveResult(status="saved", warning=warning, blocks_saved=saved, template_version=version)
