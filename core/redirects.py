# core/redirects.py

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from core.link_rewriter import replace_links_in_string
from core.link_syntax import REDIRECT_URL
from core.path_resolver import remove_file_extension
from models.redirect import RedirectEntry

ADDED, DUPLICATE, CONFLICT, SELF_REDIRECT = 'added', 'duplicate', 'conflict', 'self-redirect'


class RedirectTableError(ValueError):
    """Raised when a redirect table file does not have the expected shape."""


def to_url(path: str) -> str:
    """
    Site URL of a content file: extension dropped, '/index' collapsed to '/'.
    'guide/Intro.md' -> '/guide/Intro', 'guide/index.md' -> '/guide/'.
    """
    url = '/' + remove_file_extension(path).lstrip('/')
    if url.endswith('/index'):
        url = url[:-len('index')]
    return url


def remove_trailing_slash(url: str) -> str:
    return url[:-1] if url.endswith('/') else url


def with_prefix(path_prefix: str, url: str) -> str:
    return f"{(path_prefix or '').rstrip('/')}{url}"


class RedirectTable:
    """
    The persisted redirect list plus its envelope (total/offset/limit/...).
    Sources are kept unique: an entry whose source is already present is
    dropped, and reported as a conflict when its destination differs.
    An entry pointing at its own source would loop, it is dropped and kept
    in `self_redirects`.
    """

    def __init__(self, entries: Iterable[RedirectEntry] = (), envelope: Optional[dict] = None):
        self.envelope = dict(envelope or {})
        self.entries: List[RedirectEntry] = []
        self._by_source: Dict[str, RedirectEntry] = {}
        self.conflicts: List[Tuple[RedirectEntry, RedirectEntry]] = []
        self.self_redirects: List[RedirectEntry] = []
        for entry in entries:
            self.add(entry)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def get(self, source: str) -> Optional[RedirectEntry]:
        return self._by_source.get(source)

    def add(self, entry: RedirectEntry) -> str:
        if entry.source == entry.destination:
            self.self_redirects.append(entry)
            return SELF_REDIRECT
        existing = self._by_source.get(entry.source)
        if existing is None:
            self.entries.append(entry)
            self._by_source[entry.source] = entry
            return ADDED
        if existing.destination == entry.destination:
            return DUPLICATE
        self.conflicts.append((existing, entry))
        return CONFLICT

    # --- Persistence ---

    @classmethod
    def load(cls, filepath: Path) -> "RedirectTable":
        """Reads `{ data: [{source, destination}, ...], total, offset, limit }`."""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RedirectTableError(f"Invalid JSON in redirects file '{filepath}': {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get('data'), list):
            raise RedirectTableError(f"Invalid redirects file '{filepath}'. Expected {{ data: [...] }}")

        entries = []
        for row in document['data']:
            entry = RedirectEntry.from_dict(row) if isinstance(row, dict) else None
            if entry is None or not isinstance(entry.source, str) or not isinstance(entry.destination, str) \
                    or not entry.source or not entry.destination:
                raise RedirectTableError(f"Each redirect must have non-empty string source and destination: {row!r}")
            entries.append(entry)

        envelope = {k: v for k, v in document.items() if k != 'data'}
        return cls(entries, envelope=envelope)

    def to_document(self) -> dict:
        document = {
            'total': len(self.entries),
            'offset': self.envelope.get('offset', 0),
            'limit': len(self.entries),
            'data': [entry.to_dict() for entry in self.entries],
        }
        for key, value in self.envelope.items():
            document.setdefault(key, value)
        document.setdefault(':type', 'sheet')
        return document

    def save(self, filepath: Path):
        """
        Replaces the table file in one step: the document goes to a temporary
        file next to the target which is then moved over it.
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{filepath.name}.", dir=filepath.parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self.to_document(), f, indent=2)
                f.write('\n')
            os.replace(tmp_name, filepath)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


def _url_variants(path_prefix: str):
    """
    The four spellings a redirect URL for a page can have accumulated:
    canonical, trailing slash dropped, '/index' suffixed, trailing slash added.
    """
    return [
        lambda f: with_prefix(path_prefix, to_url(f)),
        lambda f: with_prefix(path_prefix, remove_trailing_slash(to_url(f))),
        lambda f: with_prefix(path_prefix, remove_trailing_slash(to_url(f)) + '/index'),
        lambda f: with_prefix(path_prefix, to_url(f) + '/'),
    ]


def rename_url(url: str, file_map: Dict[str, str], path_prefix: str) -> Optional[str]:
    """
    Returns the URL rewritten for the renamed files, or None when the URL
    does not refer to any of them. A '#fragment' is carried over.
    """
    for variant in _url_variants(path_prefix):
        url_map = {}
        for old_file, new_file in file_map.items():
            old_url, new_url = variant(old_file), variant(new_file)
            if old_url != new_url:
                url_map.setdefault(old_url, new_url)
        new_value, applied = replace_links_in_string(url, url_map, REDIRECT_URL)
        if applied:
            return new_value
    return None


def apply_renames(table: RedirectTable, file_map: Dict[str, str], path_prefix: str) -> RedirectTable:
    """
    Builds the redirect table that goes with a set of file renames
    (content-root-relative old path -> new path).

    - neither side refers to a renamed file: entry kept
    - destination does: destination rewritten in place
    - source does: entry kept, plus {new source, destination}
    - both do: entry kept with the new destination, plus {new source, new destination}

    Finally every renamed file gets {old URL, new URL} so the old address keeps working.
    """
    renamed = RedirectTable(envelope=table.envelope)

    for entry in table:
        new_source = rename_url(entry.source, file_map, path_prefix)
        new_destination = rename_url(entry.destination, file_map, path_prefix)

        if not new_source and not new_destination:
            renamed.add(entry)
        elif not new_source:
            renamed.add(RedirectEntry(entry.source, new_destination))
        elif not new_destination:
            renamed.add(entry)
            renamed.add(RedirectEntry(new_source, entry.destination))
        else:
            renamed.add(RedirectEntry(entry.source, new_destination))
            renamed.add(RedirectEntry(new_source, new_destination))

    for old_file, new_file in file_map.items():
        renamed.add(RedirectEntry(with_prefix(path_prefix, to_url(old_file)),
                                  with_prefix(path_prefix, to_url(new_file))))

    return renamed


def build_directory_redirects(markdown_files: Iterable[str], path_prefix: str,
                              skip: Iterable[str] = ('config.md',)) -> List[RedirectEntry]:
    """
    Trailing-slash redirects for every page:
    'dir/index.md' -> {P/dir, P/dir/} and {P/dir/index, P/dir/};
    any other page -> {P/page/, P/page}.
    """
    skip = set(skip)
    entries = []
    for file in sorted(markdown_files):
        if not file.endswith('.md'):
            continue
        if file == 'index.md' or file.endswith('/index.md'):
            directory_url = remove_trailing_slash(with_prefix(path_prefix, to_url(file)))
            if not directory_url:
                continue
            entries.append(RedirectEntry(directory_url, directory_url + '/'))
            entries.append(RedirectEntry(directory_url + '/index', directory_url + '/'))
        elif file.rsplit('/', 1)[-1] not in skip:
            page_url = with_prefix(path_prefix, to_url(file))
            entries.append(RedirectEntry(page_url + '/', page_url))
    return entries
