"""Éditeur de carte : session, statut de sauvegarde, ouverture depuis un store."""
from .session import SAVED_RESET_DELAY, EditorSession
from .status import SaveEvent, SaveStatus, can_transition, next_status
from .loader import open_editor_session

__all__ = [
    "EditorSession", "SAVED_RESET_DELAY",
    "SaveEvent", "SaveStatus", "can_transition", "next_status",
    "open_editor_session",
]
