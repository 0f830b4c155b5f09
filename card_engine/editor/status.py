"""
Statut de sauvegarde de l'éditeur : transitions pures.

  idle ──mutate──▶ dirty ──save──▶ saving ──succeed──▶ saved ──settle──▶ idle
                                      └────fail─────▶ error ──save──▶ saving
"""
from enum import Enum
from typing import Dict


class SaveStatus(str, Enum):
    IDLE   = "idle"
    DIRTY  = "dirty"
    SAVING = "saving"
    SAVED  = "saved"
    ERROR  = "error"


class SaveEvent(str, Enum):
    MUTATE  = "mutate"
    SAVE    = "save"
    SUCCEED = "succeed"
    FAIL    = "fail"
    SETTLE  = "settle"


_TRANSITIONS: Dict[SaveStatus, Dict[SaveEvent, SaveStatus]] = {
    SaveStatus.IDLE: {
        SaveEvent.MUTATE: SaveStatus.DIRTY,
        SaveEvent.SAVE:   SaveStatus.SAVING,   # seulement si mutations en attente
    },
    SaveStatus.DIRTY: {
        SaveEvent.MUTATE: SaveStatus.DIRTY,
        SaveEvent.SAVE:   SaveStatus.SAVING,
    },
    SaveStatus.SAVING: {
        SaveEvent.MUTATE:  SaveStatus.SAVING,
        SaveEvent.SUCCEED: SaveStatus.SAVED,
        SaveEvent.FAIL:    SaveStatus.ERROR,
    },
    SaveStatus.SAVED: {
        SaveEvent.MUTATE: SaveStatus.DIRTY,
        SaveEvent.SAVE:   SaveStatus.SAVING,   # seulement si mutations en attente
        SaveEvent.SETTLE: SaveStatus.IDLE,
    },
    SaveStatus.ERROR: {
        SaveEvent.MUTATE: SaveStatus.DIRTY,
        SaveEvent.SAVE:   SaveStatus.SAVING,
    },
}

_SAVE_NEEDS_PENDING = (SaveStatus.IDLE, SaveStatus.SAVED)


def can_transition(current: SaveStatus, event: SaveEvent, pending: bool = False) -> bool:
    current, event = SaveStatus(current), SaveEvent(event)
    if event is SaveEvent.SAVE and current in _SAVE_NEEDS_PENDING and not pending:
        return False
    return event in _TRANSITIONS.get(current, {})


def next_status(current: SaveStatus, event: SaveEvent, pending: bool = False) -> SaveStatus:
    """Statut suivant ; un événement non applicable laisse le statut inchangé."""
    current, event = SaveStatus(current), SaveEvent(event)
    if not can_transition(current, event, pending):
        return current
    return _TRANSITIONS[current][event]
