"""
Blocs de carte : registre type → (Settings, Style) + BlockGraph.

Un type inconnu ou des settings invalides ne font jamais échouer le chargement :
on retombe sur les modèles génériques (champs conservés tels quels).
"""
import logging
from typing import Dict, Tuple, Type

from pydantic import ValidationError as PydanticValidationError

from .base import Align, BlockSettings, BlockStyle, BlockType, CardBlock, ContainerStyle
from .contact import (
    ContactSettings, ContactStyle, CTAButtonsSettings, CTAButtonsStyle, CtaButton,
    LeadFormSettings, LeadFormStyle, SocialItem, SocialSettings, SocialStyle,
)
from .identity import BioSettings, BioStyle, HeaderSettings, HeaderStyle, ProfileSettings, ProfileStyle
from .info import (
    BookingSettings, BookingStyle, BusinessHoursSettings, BusinessHoursStyle,
    DecorationItem, DecorationsSettings, DecorationsStyle, FreeTextSettings, FreeTextStyle,
    InfoItem, InfoUtilitiesSettings, InfoUtilitiesStyle, ServiceItem, ServicesSettings, ServicesStyle,
)
from .media import EmbedSettings, EmbedStyle, GalleryItem, GallerySettings, GalleryStyle, VideoSettings, VideoStyle

log = logging.getLogger(__name__)

BLOCK_MODELS: Dict[str, Tuple[Type[BlockSettings], Type[BlockStyle]]] = {
    "header":         (HeaderSettings, HeaderStyle),
    "profile":        (ProfileSettings, ProfileStyle),
    "bio":            (BioSettings, BioStyle),
    "contact":        (ContactSettings, ContactStyle),
    "social":         (SocialSettings, SocialStyle),
    "gallery":        (GallerySettings, GalleryStyle),
    "video":          (VideoSettings, VideoStyle),
    "info_utilities": (InfoUtilitiesSettings, InfoUtilitiesStyle),
    "lead_form":      (LeadFormSettings, LeadFormStyle),
    "embed":          (EmbedSettings, EmbedStyle),
    "services":       (ServicesSettings, ServicesStyle),
    "decorations":    (DecorationsSettings, DecorationsStyle),
    "business_hours": (BusinessHoursSettings, BusinessHoursStyle),
    "free_text":      (FreeTextSettings, FreeTextStyle),
    "cta_buttons":    (CTAButtonsSettings, CTAButtonsStyle),
    "booking":        (BookingSettings, BookingStyle),
}


def parse_settings(block_type: str, data: dict) -> BlockSettings:
    """Vue typée des settings d'un bloc ; générique si type inconnu ou données invalides."""
    data = data if isinstance(data, dict) else {}
    models = BLOCK_MODELS.get(block_type)
    if models is None:
        return BlockSettings.model_validate(data)
    try:
        return models[0].model_validate(data)
    except PydanticValidationError as e:
        log.warning("Settings %s invalides (%d erreurs) → vue générique", block_type, e.error_count())
        return BlockSettings.model_validate(data)


def parse_style(block_type: str, data: dict) -> BlockStyle:
    data = data if isinstance(data, dict) else {}
    models = BLOCK_MODELS.get(block_type)
    if models is None:
        return BlockStyle.model_validate(data)
    try:
        return models[1].model_validate(data)
    except PydanticValidationError as e:
        log.warning("Style %s invalide (%d erreurs) → vue générique", block_type, e.error_count())
        try:
            return BlockStyle.model_validate(data)
        except PydanticValidationError:
            return BlockStyle()


from .graph import BlockGraph  # noqa: E402

__all__ = [
    "Align", "BlockSettings", "BlockStyle", "BlockType", "CardBlock", "ContainerStyle",
    "BLOCK_MODELS", "parse_settings", "parse_style", "BlockGraph",
    "HeaderSettings", "ProfileSettings", "BioSettings", "ContactSettings", "SocialSettings",
    "SocialItem", "CTAButtonsSettings", "CtaButton", "LeadFormSettings", "GallerySettings",
    "GalleryItem", "VideoSettings", "EmbedSettings", "InfoUtilitiesSettings", "InfoItem",
    "ServicesSettings", "ServiceItem", "BusinessHoursSettings", "FreeTextSettings",
    "DecorationsSettings", "DecorationItem", "BookingSettings",
]
