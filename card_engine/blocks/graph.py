"""
BlockGraph : collection ordonnée de blocs, indexée par id.

Immuable : chaque opération renvoie un nouveau graphe. L'ordre de la liste est
celui de l'édition (et de la sauvegarde) ; `order` ne sert qu'au tri d'affichage.
"""
import copy
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from ..errors import ValidationError
from .base import CardBlock

log = logging.getLogger(__name__)


class BlockGraph:

    __slots__ = ("_blocks",)

    def __init__(self, blocks: Iterable[CardBlock] = ()):
        self._blocks: List[CardBlock] = list(blocks)
        _check_unique(self._blocks)

    @classmethod
    def from_rows(cls, rows: Optional[Iterable[Any]]) -> "BlockGraph":
        return cls(CardBlock.from_row(r) for r in (rows or []))

    # ── Lecture ───────────────────────────────────────────────────────────────

    def __iter__(self) -> Iterator[CardBlock]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, block_id: object) -> bool:
        return any(b.id == block_id for b in self._blocks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlockGraph):
            return NotImplemented
        return self._blocks == other._blocks

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BlockGraph({[b.type for b in self._blocks]})"

    def get(self, block_id: Optional[str]) -> Optional[CardBlock]:
        if not block_id:
            return None
        return next((b for b in self._blocks if b.id == block_id), None)

    @property
    def blocks(self) -> List[CardBlock]:
        return list(self._blocks)

    def all_sorted(self) -> List[CardBlock]:
        # sorted() est stable : à order égal, l'ordre de la liste est conservé
        return sorted(self._blocks, key=lambda b: b.order)

    def enabled_sorted(self) -> List[CardBlock]:
        return [b for b in self.all_sorted() if b.enabled]

    def to_rows(self) -> List[dict]:
        return [b.to_row() for b in self._blocks]

    # ── Écriture ──────────────────────────────────────────────────────────────

    def _replace(self, block_id: str, **update) -> "BlockGraph":
        if self.get(block_id) is None:
            log.debug("Bloc %s introuvable : ignoré", block_id)
            return self
        return BlockGraph(
            b.model_copy(update=update, deep=True) if b.id == block_id else b
            for b in self._blocks
        )

    def toggle(self, block_id: str, enabled: bool) -> "BlockGraph":
        return self._replace(block_id, enabled=bool(enabled))

    def patch_settings(self, block_id: str, settings: Dict[str, Any]) -> "BlockGraph":
        return self._replace(block_id, settings=copy.deepcopy(settings or {}))

    def patch_style(self, block_id: str, style: Dict[str, Any]) -> "BlockGraph":
        return self._replace(block_id, style=copy.deepcopy(style or {}))

    def reorder(self, next_list: Iterable[Any]) -> "BlockGraph":
        """
        Remplace la liste telle quelle (drag & drop). Les `order` ne sont pas recalculés.
        Lève ValidationError si un bloc existant change de type ou si un id est dupliqué.
        """
        blocks = [CardBlock.from_row(b) for b in next_list]
        _check_unique(blocks)
        for b in blocks:
            current = self.get(b.id)
            if current is not None and current.type != b.type:
                raise ValidationError(
                    f"Bloc {b.id} : changement de type interdit ({current.type} → {b.type})"
                )
        return BlockGraph(blocks)

    def moved(self, block_id: str, to_index: int) -> List[CardBlock]:
        """Liste suivante après un glisser-déposer, order renuméroté = index."""
        blocks = list(self._blocks)
        src = next((i for i, b in enumerate(blocks) if b.id == block_id), None)
        if src is None:
            return blocks
        to_index = max(0, min(int(to_index), len(blocks) - 1))
        block = blocks.pop(src)
        blocks.insert(to_index, block)
        return [b.model_copy(update={"order": i}) for i, b in enumerate(blocks)]

    def add(self, block: Any) -> "BlockGraph":
        block = CardBlock.from_row(block)
        if block.id in self:
            raise ValidationError(f"Bloc {block.id} déjà présent")
        return BlockGraph([*self._blocks, block])

    def remove(self, block_id: str) -> "BlockGraph":
        if block_id not in self:
            return self
        return BlockGraph(b for b in self._blocks if b.id != block_id)


def _check_unique(blocks: List[CardBlock]) -> None:
    seen = set()
    for b in blocks:
        if b.id in seen:
            raise ValidationError(f"Id de bloc dupliqué : {b.id}")
        seen.add(b.id)
