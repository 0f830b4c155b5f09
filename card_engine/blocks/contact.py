"""Blocs de contact : contact, social, cta_buttons, lead_form."""
from typing import Any, Dict, List, Literal, Optional

from .base import Align, BlockSettings, BlockStyle, ContainerStyle


class ContactItem(BlockSettings):
    enabled: Optional[bool] = None
    label: Optional[str] = None
    value: Optional[str] = None


class ContactSettings(BlockSettings):
    heading: Optional[str] = None
    layout: Dict[str, Any] = {}
    # clé = canal (phone, email, whatsapp, …)
    items: Dict[str, ContactItem] = {}


class ContactStyle(BlockStyle):
    show_label: Optional[bool] = None
    uniform_buttons: Optional[bool] = None
    uniform_width_px: Optional[float] = None
    button: Dict[str, Any] = {}


class SocialItem(BlockSettings):
    uid: str
    id: Optional[str] = None
    enabled: Optional[bool] = None
    url: str = ""
    label: Optional[str] = None
    icon_color: Optional[str] = None


class SocialSettings(BlockSettings):
    items: List[SocialItem] = []
    layout: Dict[str, Any] = {}
    show_label: Optional[bool] = None


class SocialStyle(BlockStyle):
    icon_size_px: Optional[float] = None
    container: Optional[ContainerStyle] = None
    button: Dict[str, Any] = {}


class CtaButton(BlockSettings):
    id: str
    label: str = ""
    url: str = ""
    open_in_new_tab: Optional[bool] = None
    icon: Dict[str, Any] = {}


class CTAButtonsSettings(BlockSettings):
    # la ligne de template de base stocke `items`, l'éditeur `buttons`
    buttons: List[CtaButton] = []
    items: List[Dict[str, Any]] = []
    layout: Optional[Literal["stack", "row"]] = None
    align: Optional[Align] = None
    gap_px: Optional[float] = None


class CTAButtonsStyle(BlockStyle):
    button: Dict[str, Any] = {}
    container: Optional[ContainerStyle] = None


class LeadFormFields(BlockSettings):
    name: bool = True
    email: bool = True
    phone: bool = False
    message: bool = False


class LeadFormSettings(BlockSettings):
    title: Optional[str] = None
    description: Optional[str] = None
    fields: LeadFormFields = LeadFormFields()
    button_label: Optional[str] = None


class LeadFormStyle(BlockStyle):
    container: Optional[ContainerStyle] = None
