"""Blocs d'information : info_utilities, services, business_hours, free_text, decorations, booking."""
from typing import Any, Dict, List, Literal, Optional

from .base import Align, BlockSettings, BlockStyle, ContainerStyle

DayKey = Literal["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


class InfoItem(BlockSettings):
    id: str
    type: Literal["address", "wifi", "image_button", "link", "hours_text", "reviews_embed"]
    enabled: bool = True
    label: Optional[str] = None
    value: Optional[str] = None
    url: Optional[str] = None


class InfoUtilitiesSettings(BlockSettings):
    heading: Optional[str] = None
    layout: Optional[Literal["grid", "list"]] = None
    # la ligne de template stocke aussi le profil métier (restaurant, …)
    type: Optional[str] = None
    items: List[InfoItem] = []


class InfoUtilitiesStyle(BlockStyle):
    container: Optional[ContainerStyle] = None


class ServiceItem(BlockSettings):
    id: str
    enabled: bool = True
    title: str = ""
    price: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    action_type: Literal["link", "modal", "none"] = "none"
    action_url: Optional[str] = None
    features: List[str] = []


class ServicesSettings(BlockSettings):
    heading: Optional[str] = None
    layout: Optional[Literal["grid", "list", "carousel"]] = None
    carousel: Dict[str, Any] = {}
    items: List[ServiceItem] = []


class ServicesStyle(BlockStyle):
    heading_color: Optional[str] = None
    heading_align: Optional[Align] = None
    container: Optional[ContainerStyle] = None


class HoursDay(BlockSettings):
    closed: Optional[bool] = None
    open: Optional[str] = None
    close: Optional[str] = None


class BusinessHoursSettings(BlockSettings):
    heading: Optional[str] = None
    format: Optional[Literal["seg-dom", "seg-sex", "custom"]] = None
    days: Dict[DayKey, HoursDay] = {}
    items: List[Dict[str, Any]] = []


class BusinessHoursStyle(BlockStyle):
    container: Optional[ContainerStyle] = None
    heading_align: Optional[Align] = None
    text_color: Optional[str] = None
    time_format: Optional[Literal["24h", "12h"]] = None


class FreeTextSettings(BlockSettings):
    title: Optional[str] = None
    text: str = ""


class FreeTextStyle(BlockStyle):
    title_color: Optional[str] = None
    text_color: Optional[str] = None
    align: Optional[Align] = None
    compact: Optional[bool] = None
    container: Optional[ContainerStyle] = None


class DecorationItem(BlockSettings):
    id: str
    src: str = ""
    x: float = 50          # %
    y: float = 50          # %
    scale: Optional[float] = None
    rotate: Optional[float] = None
    opacity: Optional[float] = None
    z_index: Optional[int] = None


class DecorationsSettings(BlockSettings):
    enabled: Optional[bool] = None
    items: List[DecorationItem] = []
    decorations: List[Dict[str, Any]] = []


class DecorationsStyle(BlockStyle):
    pass


class BookingSettings(BlockSettings):
    title: Optional[str] = None
    url: Optional[str] = None


class BookingStyle(BlockStyle):
    container: Optional[ContainerStyle] = None
