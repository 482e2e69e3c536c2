# models/site.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class NavItem:
    """
    A navigation entry from the site configuration.

    Top-level pages either carry a `path` or a `menu` of child items.
    Side navigation (subPages) nests through `pages`.
    """
    title: str
    path: Optional[str] = None
    hidden: bool = False
    selected: bool = False
    header: bool = False
    menu: List["NavItem"] = field(default_factory=list)
    pages: List["NavItem"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "NavItem":
        return cls(
            title=str(data.get('title', '')),
            path=data.get('path'),
            hidden=bool(data.get('hidden', False)),
            selected=bool(data.get('selected', False)),
            header=bool(data.get('header', False)),
            menu=[cls.from_dict(item) for item in _as_list(data.get('menu'))],
            pages=[cls.from_dict(item) for item in _as_list(data.get('pages'))],
        )


@dataclass
class SiteConfig:
    """The parsed site configuration: URL prefix plus site metadata."""
    path_prefix: str
    title: Optional[str] = None
    home: Optional[NavItem] = None
    versions: List[NavItem] = field(default_factory=list)
    pages: List[NavItem] = field(default_factory=list)
    sub_pages: List[NavItem] = field(default_factory=list)
    site_wide_banner: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: dict) -> "SiteConfig":
        metadata = data.get('siteMetadata') or {}
        home = metadata.get('home')
        return cls(
            path_prefix=data['pathPrefix'],
            title=metadata.get('title'),
            home=NavItem.from_dict(home) if home else None,
            versions=[NavItem.from_dict(v) for v in _as_list(metadata.get('versions'))],
            pages=[NavItem.from_dict(p) for p in _as_list(metadata.get('pages'))],
            sub_pages=[NavItem.from_dict(p) for p in _as_list(metadata.get('subPages'))],
            site_wide_banner=metadata.get('siteWideBanner'),
        )


def _as_list(value) -> list:
    """Nav collections may be written as a list or as a keyed mapping."""
    if not value:
        return []
    if isinstance(value, dict):
        return list(value.values())
    return list(value)
