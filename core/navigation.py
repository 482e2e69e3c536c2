# core/navigation.py

from typing import List, Optional

from core.file_system import FileIndex
from core.path_resolver import resolve_link
from models.site import NavItem, SiteConfig

INDENT = '    '


def resolve_nav_path(path: Optional[str], file_index: Optional[FileIndex]) -> str:
    """
    Resolves a configured nav path from the content root. Anything that does
    not resolve to a file (or a sanctioned forward reference) is kept as written.
    """
    if not path:
        return path or ''
    if file_index is None:
        return path
    resolved = resolve_link(path, '', file_index)
    if not resolved.produces_mapping():
        return path
    anchor = f"#{resolved.anchor}" if resolved.anchor is not None else ''
    return f"{resolved.candidate}{anchor}"


def _link(item: NavItem, file_index: Optional[FileIndex]) -> str:
    return f"[{item.title}]({resolve_nav_path(item.path, file_index)})"


def _with_marker(line: str, marker: bool, name: str) -> str:
    return f"{line} {name}" if marker else line


def build_side_nav(items: List[NavItem], depth: int, file_index: Optional[FileIndex] = None) -> str:
    """One bullet per item, children one level (4 spaces) deeper."""
    markdown = ''
    for item in items:
        line = f"{INDENT * depth}- {_link(item, file_index)}"
        markdown += _with_marker(line, item.header, 'header') + '\n'
        if item.pages:
            markdown += build_side_nav(item.pages, depth + 1, file_index)
    return markdown


def build_navigation_markdown(site_config: SiteConfig, file_index: Optional[FileIndex] = None) -> str:
    """Renders the site config as the navigation markdown consumed by the site."""
    markdown = '- pathPrefix:\n'
    markdown += f"{INDENT}- {site_config.path_prefix}\n"

    home = site_config.home
    if home:
        markdown += '\n- home:\n'
        markdown += f"{INDENT}- {_link(home, file_index)}\n"
        if home.hidden:
            markdown += f"{INDENT}- hidden\n"

    if site_config.versions:
        markdown += '\n- versions:\n'
        for version in site_config.versions:
            # Versions live in other deployments, so their paths are never resolved here.
            line = f"{INDENT}- [{version.title}]({version.path or '/'})"
            markdown += _with_marker(line, version.selected, 'selected') + '\n'

    if site_config.pages:
        markdown += '\n- pages:\n'
        for page in site_config.pages:
            if page.path:
                markdown += f"{INDENT}- {_link(page, file_index)}\n"
            else:
                markdown += f"{INDENT}- {page.title}\n"
                for menu_item in page.menu:
                    markdown += f"{INDENT * 2}- {_link(menu_item, file_index)}\n"

    if site_config.sub_pages:
        markdown += '\n- subPages:\n'
        markdown += build_side_nav(site_config.sub_pages, 1, file_index)

    return markdown
