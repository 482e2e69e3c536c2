# core/renamer.py

import posixpath
import re
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List

from core.path_resolver import relative_path, remove_file_extension

KEBAB_TOKEN_PATTERN = re.compile(r'[A-Z]{2,}(?=[A-Z][a-z]+[0-9]*|\b)|[A-Z]?[a-z]+[0-9]*|[A-Z]|[0-9]+')
VALID_SEGMENT_PATTERN = re.compile(r'^[a-z0-9-]*$')
SCREAMING_SNAKE_PATTERN = re.compile(r'^[A-Z0-9_]*$')


class RenameError(Exception):
    """Raised when a rename plan cannot be carried out safely."""


def to_kebab_case(name: str) -> str:
    """'MyPage_Name' -> 'my-page-name', 'README_FIRST' -> 'readme-first'."""
    if SCREAMING_SNAKE_PATTERN.match(name):
        name = name.lower()
    return '-'.join(token.lower() for token in KEBAB_TOKEN_PATTERN.findall(name))


def to_site_case(segment: str) -> str:
    if VALID_SEGMENT_PATTERN.match(segment):
        return segment
    # A segment with no letters or digits at all is left alone rather than erased.
    return to_kebab_case(segment) or segment


def to_site_path(file: str) -> str:
    """Kebab-cases every segment of a path, keeping the file extension."""
    _, extension = posixpath.splitext(file)
    segments = remove_file_extension(file).split('/')
    return '/'.join(to_site_case(segment) for segment in segments) + extension


def build_file_map(files: Iterable[str]) -> Dict[str, str]:
    """Old path -> new path for every file whose name needs to change."""
    file_map = {}
    for file in sorted(files):
        renamed = to_site_path(file)
        if renamed != file:
            file_map[file] = renamed
    return file_map


def find_collisions(file_map: Dict[str, str], files: Iterable[str]) -> List[str]:
    """Targets that would be produced twice or would overwrite a file that stays put."""
    files = set(files)
    counts = Counter(file_map.values())
    staying = files - set(file_map)
    return sorted(target for target in counts if counts[target] > 1 or target in staying)


def build_relative_link_map(file_map: Dict[str, str], relative_to_dir: str) -> Dict[str, str]:
    """The file map re-expressed as links written from inside `relative_to_dir`."""
    return {relative_path(old, relative_to_dir): relative_path(new, relative_to_dir)
            for old, new in file_map.items()}


def delete_empty_directory_upwards(start_dir: Path, stop_dir: Path) -> int:
    """Removes start_dir and its parents while they are empty; never stop_dir itself."""
    removed = 0
    current = Path(start_dir)
    stop_dir = Path(stop_dir)
    while current != stop_dir and stop_dir in current.parents and current.is_dir() and not any(current.iterdir()):
        current.rmdir()
        removed += 1
        current = current.parent
    return removed


def rename_files(file_map: Dict[str, str], root: Path, trace=print) -> int:
    """
    Moves files under `root` according to the map, creating target
    directories first and cleaning up directories left empty afterwards.
    """
    root = Path(root)

    for new in file_map.values():
        target_dir = (root / new).parent
        if not target_dir.exists():
            target_dir.mkdir(parents=True, exist_ok=True)
            trace(f"  Created directory: {target_dir}")

    renamed = 0
    for old, new in file_map.items():
        (root / old).rename(root / new)
        trace(f"  Renamed: \"{old}\" -> \"{new}\"")
        renamed += 1

    for old in file_map:
        old_dir = (root / old).parent
        if old_dir.exists() and delete_empty_directory_upwards(old_dir, root):
            trace(f"  Cleaned up directory: {old_dir}")

    return renamed
