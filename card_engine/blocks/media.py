"""Blocs média : gallery, video, embed."""
from typing import Any, Dict, List, Literal, Optional

from .base import Align, BlockSettings, BlockStyle, ContainerStyle


class GalleryItem(BlockSettings):
    uid: str
    url: str = ""
    caption: Optional[str] = None
    enabled: Optional[bool] = None


class GallerySettings(BlockSettings):
    items: List[GalleryItem] = []
    # containerMode, gapPx, itemWidthPx, objectFit, autoplay…
    layout: Dict[str, Any] = {}


class GalleryStyle(BlockStyle):
    container: Optional[ContainerStyle] = None


class VideoSettings(BlockSettings):
    url: str = ""
    title: Optional[str] = None
    thumbnail_url: Optional[str] = None


class VideoStyle(BlockStyle):
    aspect_ratio: Optional[Literal["16:9", "9:16", "4:3", "1:1"]] = None
    border_radius: Optional[float] = None
    shadow: Optional[bool] = None
    container: Optional[ContainerStyle] = None
    title_color: Optional[str] = None
    title_align: Optional[Align] = None
    show_title: Optional[bool] = None


class EmbedSettings(BlockSettings):
    url: Optional[str] = None
    html: Optional[str] = None
    height_px: Optional[float] = None


class EmbedStyle(BlockStyle):
    container: Optional[ContainerStyle] = None
