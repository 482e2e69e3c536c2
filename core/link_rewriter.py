# core/link_rewriter.py

import re
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from core.file_system import FileIndex, read_text_file, write_text_file
from core.link_syntax import LinkSyntax, MARKDOWN_LINK
from core.path_resolver import resolve_link, root_relative
from models.link import LinkReference, ResolutionStatus, ResolvedTarget

# Original link text -> rewritten link text, in insertion order.
LinkMap = Dict[str, str]


def find_links(text: str, syntax: LinkSyntax = MARKDOWN_LINK) -> List[LinkReference]:
    """Finds every link occurrence of the given syntax in a block of text."""
    links = []
    for match in syntax.scanner().finditer(text):
        target = match.group('target')
        prefix = ''
        for marker in ('./', '/'):
            if target.startswith(marker):
                prefix, target = marker, target[len(marker):]
                break
        anchor = match.group('anchor')
        links.append(LinkReference(
            raw=match.group(0),
            prefix=prefix,
            path=target,
            anchor=anchor[1:] if anchor else None,
        ))
    return links


def build_link_map(links: Iterable[LinkReference], current_dir: str, file_index: FileIndex,
                   allow_forward: bool = True) -> Tuple[LinkMap, List[ResolvedTarget]]:
    """
    Resolves each link and collects the ones that need rewriting.
    Returns the map plus every resolution pointing at a missing file:
    unresolved, ambiguous and already-canonical targets (left untouched in
    the text) and forward references (rewritten when allowed, but still
    reported). Files outside the index that exist on disk are not problems.
    """
    link_map: LinkMap = {}
    problems: List[ResolvedTarget] = []
    seen = set()

    for link in links:
        if link.is_anchor_only:
            continue
        original = f"{link.prefix}{link.path}"
        if original in seen:
            continue
        seen.add(original)

        resolved = resolve_link(original, current_dir, file_index)
        if resolved.changed and resolved.produces_mapping(allow_forward):
            link_map[original] = resolved.candidate
        if resolved.is_broken and not _untracked_file_exists(resolved, current_dir, file_index):
            problems.append(resolved)

    return link_map, problems


def _untracked_file_exists(resolved: ResolvedTarget, current_dir: str, file_index: FileIndex) -> bool:
    if resolved.status not in (ResolutionStatus.UNCHANGED, ResolutionStatus.UNRESOLVED) or not resolved.candidate:
        return False
    return file_index.exists_on_disk(root_relative(resolved.candidate, current_dir))


def replace_links_in_string(text: str, link_map: LinkMap, syntax: LinkSyntax = MARKDOWN_LINK) -> Tuple[str, List[str]]:
    """
    Applies the whole map in a single substitution pass: one alternation over
    every key, each match looked up by the key it hit. A span is rewritten at
    most once, so a replacement can never be picked up by a later key.
    Returns the new text and the keys that fired, in map order.
    """
    if not link_map:
        return text, []

    pattern = syntax.compile(link_map.keys())
    fired = set()

    def replacer(match: re.Match) -> str:
        key = match.group('target')
        fired.add(key)
        return syntax.replacement(match, link_map[key])

    new_text = pattern.sub(replacer, text)
    return new_text, [key for key in link_map if key in fired]


def replace_links_in_file(filepath: Path, link_map: LinkMap, syntax: LinkSyntax = MARKDOWN_LINK,
                          dry_run: bool = False) -> List[str]:
    """
    Whole-file read, transform, whole-file write. The file is only written
    when something changed, and never in a dry run.
    """
    if not link_map:
        return []
    content = read_text_file(filepath)
    new_content, applied = replace_links_in_string(content, link_map, syntax)
    if new_content != content and not dry_run:
        write_text_file(filepath, new_content)
    return applied
