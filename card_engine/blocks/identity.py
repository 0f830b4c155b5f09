"""Blocs d'identité : header (cover + badge), profile (avatar + lignes de texte), bio."""
from typing import Any, Dict, Literal, Optional

from .base import Align, BlockSettings, BlockStyle, ContainerStyle


class HeaderSettings(BlockSettings):
    cover_image: Optional[str] = None
    badge_image: Optional[str] = None
    # showCover, height, coverMode (full|tile|auto), coverFade*, badge{…}, avatarDock…
    layout: Dict[str, Any] = {}


class HeaderStyle(BlockStyle):
    heading_align: Optional[Align] = None


class ProfileTextLine(BlockSettings):
    enabled: bool = True
    text: str = ""
    size: Optional[Literal["sm", "md", "lg"]] = None
    color: Optional[str] = None


class ProfileSettings(BlockSettings):
    enabled: bool = True
    avatar: Dict[str, Any] = {}
    name: Optional[ProfileTextLine] = None
    profession: Optional[ProfileTextLine] = None
    company: Optional[ProfileTextLine] = None
    vertical_offset: Optional[float] = None
    uploaded_image_url: Optional[str] = None
    show_name: Optional[bool] = None
    show_title: Optional[bool] = None


class ProfileStyle(BlockStyle):
    heading_align: Optional[Align] = None


class BioSettings(BlockSettings):
    text: str = ""


class BioStyle(BlockStyle):
    text_color: Optional[str] = None
    font_family: Optional[str] = None
    bold: Optional[bool] = None
    font_size: Optional[float] = None
    line_height: Optional[float] = None
    align: Optional[Align] = None
    container: Optional[ContainerStyle] = None
