"""
card_engine : moteur de thème et de composition des cartes de visite digitales.

  background  → modèle v1, migration legacy, patterns, presets, recolor, compositeur
  blocks      → blocs typés + BlockGraph
  editor      → EditorSession + statut de sauvegarde
  sync        → CardStore + SaveCoordinator
"""
__version__ = "1.0.0"

from .background import BackgroundV1, compose, get_bg_preset, list_bg_presets, migrate, recolor
from .blocks import BlockGraph, CardBlock
from .editor import EditorSession, SaveStatus, open_editor_session
from .errors import CardEngineError, CardNotFound, PartialSyncWarning, PersistenceError, ValidationError
from .sync import CardStore, InMemoryCardStore, SaveCoordinator, SaveResult

__all__ = [
    "__version__",
    "BackgroundV1", "compose", "get_bg_preset", "list_bg_presets", "migrate", "recolor",
    "BlockGraph", "CardBlock",
    "EditorSession", "SaveStatus", "open_editor_session",
    "CardEngineError", "CardNotFound", "PartialSyncWarning", "PersistenceError", "ValidationError",
    "CardStore", "InMemoryCardStore", "SaveCoordinator", "SaveResult",
]
