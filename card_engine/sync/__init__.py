from .store import CardStore, InMemoryCardStore
from .coordinator import SaveCoordinator, SaveResult, THEME_BACKGROUND_KEY

__all__ = ["CardStore", "InMemoryCardStore", "SaveCoordinator", "SaveResult", "THEME_BACKGROUND_KEY"]
