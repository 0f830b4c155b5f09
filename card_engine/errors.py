"""
Erreurs du moteur de carte.

  ValidationError     → erreur structurelle côté appelant (id dupliqué, type modifié)
  PersistenceError    → une étape de la sauvegarde a échoué (stage + entity_id)
  PartialSyncWarning  → le miroir template a échoué, la carte elle-même est sauvée
  CardNotFound        → carte absente du store

Les fonctions de normalisation (migrate, CardBlock.from_row…) ne lèvent jamais :
elles appliquent des valeurs par défaut et loggent.
"""
from typing import Optional


class CardEngineError(Exception):
    """Base de toutes les erreurs du moteur."""


class ValidationError(CardEngineError):
    """Forme invalide fournie par l'appelant (jamais levée par la normalisation)."""


class CardNotFound(CardEngineError, LookupError):
    def __init__(self, card_id: str):
        super().__init__(f"Carte introuvable : {card_id!r}")
        self.card_id = card_id


class PersistenceError(CardEngineError):
    """Échec d'une étape de persistance. `stage` ∈ blocks | theme | template."""

    def __init__(self, stage: str, entity_id: Optional[str], message: str = ""):
        self.stage = stage
        self.entity_id = entity_id
        self.message = message or "échec de persistance"
        super().__init__(f"[{stage}] {entity_id}: {self.message}")

    def to_dict(self) -> dict:
        return {"stage": self.stage, "entity_id": self.entity_id, "message": self.message}


class PartialSyncWarning(UserWarning):
    """Le template lié n'a pas pu être mis à jour ; la sauvegarde carte reste valide."""

    def __init__(self, template_id: str, message: str = ""):
        self.template_id = template_id
        self.message = message or "échec de synchronisation du template"
        super().__init__(f"[template] {template_id}: {self.message}")

    def to_dict(self) -> dict:
        return {"stage": "template", "entity_id": self.template_id, "message": self.message}
