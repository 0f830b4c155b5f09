import logging

from ..errors import CardNotFound
from .session import EditorSession

log = logging.getLogger(__name__)


async def open_editor_session(store, card_id: str) -> EditorSession:
    """Charge carte + blocs depuis le store. Lève CardNotFound si la carte n'existe pas."""
    card = await store.load_card(card_id)
    if card is None:
        raise CardNotFound(card_id)
    rows = await store.load_blocks(card_id)
    log.info("Éditeur ouvert : carte %s (%d blocs)", card_id, len(rows))
    return EditorSession.from_rows(card, rows)
