"""
Éditeur de carte : ouverture de session et sauvegarde d'un brouillon.

Routes :
  GET /api/cards/{card_id}/editor  → snapshot de session + calques du fond
  PUT /api/cards/{card_id}/editor  → applique le brouillon (blocs + fond) puis sauvegarde
                                     404 carte inconnue, 422 blocs invalides, 409 échec de sauvegarde
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from ...database import SqlCardStore
from ...editor import open_editor_session
from ...errors import CardNotFound, ValidationError
from ...models import EditorDraft
from ...sync import CardStore, SaveCoordinator

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cards")

_store = SqlCardStore()


def get_store() -> CardStore:
    return _store


async def _open(store: CardStore, card_id: str):
    try:
        return await open_editor_session(store, card_id)
    except CardNotFound as e:
        raise HTTPException(404, str(e))


# ── GET /api/cards/{card_id}/editor ───────────────────────────────────────────

@router.get("/{card_id}/editor")
async def get_editor(card_id: str, store: CardStore = Depends(get_store)):
    session = await _open(store, card_id)
    return {**session.snapshot(), "layers": session.compose().to_dict()}


# ── PUT /api/cards/{card_id}/editor ───────────────────────────────────────────

@router.put("/{card_id}/editor")
async def save_editor(card_id: str, draft: EditorDraft, store: CardStore = Depends(get_store)):
    session = await _open(store, card_id)

    try:
        if draft.blocks is not None:
            session.reorder_blocks(draft.blocks)
        if draft.background is not None:
            session.set_background(draft.background)
    except ValidationError as e:
        raise HTTPException(422, str(e))

    result = await SaveCoordinator(store).save(session)
    body = {"result": result.to_dict(), "session": session.snapshot()}
    if result.status == "failed":
        log.warning("Sauvegarde carte %s échouée : %s", card_id, result.error)
        return JSONResponse(body, status_code=409)
    return body
