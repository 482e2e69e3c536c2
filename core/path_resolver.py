# core/path_resolver.py

"""
Resolution of link targets against the file index.

Every path handled here is a posix path relative to the content root
(the directory of the referencing file is passed as `current_dir`, '' for
the root itself). Nothing in this module touches the filesystem.

The resolution order is fixed, each step changes which of the later ones fire:

    1. split off the '#anchor'; anchor-only links stop here
    2. rebase '/'-prefixed paths from the content root onto current_dir
    3. trailing slash -> '<dir>/index.md' if it exists, else '<dir>.md'
    4. collapse '.' and '..' into the simplest relative form
    5. complete a missing extension: '<path>.md', then '<path>/index.md',
       refusing to pick between several files sharing the stem
    6. compare with the original text and the index to classify the result
"""

import posixpath
import re
from typing import List, Optional, Tuple

from core.file_system import FileIndex
from models.link import ResolutionStatus, ResolvedTarget

EXTERNAL_LINK_PATTERN = re.compile(r'^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)')
INDEX_FILENAME = 'index.md'
MARKDOWN_EXTENSION = '.md'


def split_anchor(link: str) -> Tuple[str, Optional[str]]:
    """Splits on the first '#'. The anchor is None when there is no '#'."""
    path, sep, anchor = link.partition('#')
    return path, (anchor if sep else None)


def is_external(link: str) -> bool:
    return bool(EXTERNAL_LINK_PATTERN.match(link))


def remove_file_extension(path: str) -> str:
    """Strips the extension of the last segment only: 'a.b/c.md' -> 'a.b/c'."""
    head, tail = posixpath.split(path)
    stem, _ = posixpath.splitext(tail)
    return posixpath.join(head, stem) if head else stem


def _parts(path: str) -> List[str]:
    normalized = posixpath.normpath(path) if path else '.'
    return [] if normalized == '.' else normalized.split('/')


def relative_path(target: str, start: str = '') -> str:
    """
    Relative path from directory `start` to `target`, both content-root
    relative. Pure string work, the current working directory plays no part.
    """
    target_parts = _parts(target)
    start_parts = _parts(start)

    common = 0
    while (common < len(target_parts) and common < len(start_parts)
           and target_parts[common] == start_parts[common]
           and start_parts[common] != '..'):
        common += 1

    parts = ['..'] * (len(start_parts) - common) + target_parts[common:]
    return '/'.join(parts) or '.'


def root_relative(path: str, current_dir: str = '') -> str:
    """Turns a path relative to current_dir into a normalized content-root-relative one."""
    if path.startswith('/'):
        return posixpath.normpath(path.lstrip('/') or '.')
    return posixpath.normpath(posixpath.join(current_dir, path) if current_dir else path or '.')


def rebase_root_link(path: str, current_dir: str = '') -> str:
    """'/guide/intro' seen from 'guide/deep' -> '../intro'. Keeps a trailing slash."""
    rebased = relative_path(path.lstrip('/') or '.', current_dir)
    if path.endswith('/') and not rebased.endswith('/'):
        rebased += '/'
    return rebased


def resolve_link(link: str, current_dir: str, file_index: FileIndex) -> ResolvedTarget:
    """
    Resolves one link target found in a file living in `current_dir`.

    The returned ResolvedTarget carries the path portion of the link as
    `original` (the anchor is kept apart, it never takes part in rewriting)
    and the canonical form as `candidate`.
    """
    path, anchor = split_anchor(link)

    if not path:
        if anchor is not None:
            return ResolvedTarget(original='', candidate='', status=ResolutionStatus.ANCHOR, anchor=anchor)
        return ResolvedTarget(original='', candidate='', status=ResolutionStatus.UNRESOLVED,
                              reason='empty link target')

    if is_external(path):
        return ResolvedTarget(original=path, candidate=path, status=ResolutionStatus.EXTERNAL, anchor=anchor)

    candidate = path
    forward_reference = False

    # Root-relative links use a different base, so rebase before anything else.
    if candidate.startswith('/'):
        candidate = rebase_root_link(candidate, current_dir)

    keep_trailing_slash = False
    if candidate.endswith('/'):
        index_candidate = candidate + INDEX_FILENAME
        if file_index.exists(root_relative(index_candidate, current_dir)):
            candidate = index_candidate
        else:
            stripped = candidate[:-1]
            if posixpath.basename(stripped) in ('', '.', '..'):
                # './' or '../' without an index: there is no sibling file to name
                keep_trailing_slash = True
            else:
                candidate = stripped + '.md'
                forward_reference = True

    target = root_relative(candidate, current_dir)

    if not keep_trailing_slash and not posixpath.splitext(posixpath.basename(target))[1]:
        if file_index.candidate_count(target) > 1:
            return ResolvedTarget(original=path, candidate=path, status=ResolutionStatus.AMBIGUOUS,
                                  anchor=anchor, reason=f"several files share the name '{target}'")
        if file_index.exists(target + MARKDOWN_EXTENSION):
            target += MARKDOWN_EXTENSION
        elif file_index.exists(posixpath.join(target, INDEX_FILENAME)):
            target = posixpath.normpath(posixpath.join(target, INDEX_FILENAME))

    candidate = relative_path(target, current_dir)
    if keep_trailing_slash:
        candidate += '/'

    exists = file_index.exists(target)

    if candidate == path:
        status = ResolutionStatus.UNCHANGED
        reason = '' if exists else 'target not found'
    elif exists:
        status, reason = ResolutionStatus.RESOLVED, ''
    elif forward_reference:
        status, reason = ResolutionStatus.FORWARD, 'target does not exist yet'
    else:
        status, reason = ResolutionStatus.UNRESOLVED, 'target not found'

    return ResolvedTarget(original=path, candidate=candidate, status=status,
                          exists=exists, anchor=anchor, reason=reason)
