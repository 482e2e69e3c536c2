# core/file_system.py

import posixpath
from collections import defaultdict
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional

from config import DEPLOYABLE_EXTENSIONS


def build_file_set(root_dir: Path, extensions: Iterable[str] = DEPLOYABLE_EXTENSIONS) -> FrozenSet[str]:
    """
    Recursively collects the deployable files under root_dir.
    Paths come back relative to root_dir with '/' separators on every OS.
    A missing root is not an error, it just yields an empty set.
    """
    root_dir = Path(root_dir)
    if not root_dir.is_dir():
        return frozenset()

    extensions = tuple(extensions)
    files = set()
    for path in root_dir.rglob('*'):
        if not path.is_file() or path.suffix not in extensions:
            continue
        files.add(path.relative_to(root_dir).as_posix())
    return frozenset(files)


class FileIndex:
    """
    A per-run snapshot of the deployable files under the content root.
    All queries take content-root-relative posix paths and are case-sensitive.
    """

    def __init__(self, root: Path, files: Iterable[str]):
        self.root = Path(root)
        self.files = frozenset(files)
        self._extensions_by_stem = defaultdict(list)
        for file in self.files:
            stem, ext = posixpath.splitext(file)
            if ext:
                self._extensions_by_stem[stem].append(ext)

    @classmethod
    def build(cls, root: Path, extensions: Iterable[str] = DEPLOYABLE_EXTENSIONS) -> "FileIndex":
        return cls(root, build_file_set(root, extensions))

    def __contains__(self, path: str) -> bool:
        return path in self.files

    def __iter__(self):
        return iter(sorted(self.files))

    def __len__(self) -> int:
        return len(self.files)

    def exists(self, path: str) -> bool:
        return path in self.files

    def resolve_extension(self, path_without_extension: str) -> Optional[str]:
        """
        Returns the extension of the one file whose extension-less path equals
        the input. Zero or several candidates give None: we never guess.
        """
        candidates = self._extensions_by_stem.get(path_without_extension, [])
        if len(candidates) != 1:
            return None
        return candidates[0]

    def candidate_count(self, path_without_extension: str) -> int:
        return len(self._extensions_by_stem.get(path_without_extension, []))

    def markdown_files(self) -> List[str]:
        return sorted(f for f in self.files if f.endswith('.md'))

    def absolute(self, path: str) -> Path:
        return self.root / Path(*path.split('/'))

    def exists_on_disk(self, path: str) -> bool:
        """Images, directories and other files the index does not track."""
        return self.absolute(path).exists()


def read_text_file(filepath: Path) -> str:
    """
    Reads a whole file as UTF-8. Bytes that do not decode are carried as
    surrogates and written back unchanged by write_text_file.
    """
    with open(filepath, 'r', encoding='utf-8', errors='surrogateescape', newline='') as f:
        return f.read()


def write_text_file(filepath: Path, content: str):
    """
    Writes a whole file in one go. Errors propagate: a failed write is fatal
    for the operation that asked for it.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, 'w', encoding='utf-8', errors='surrogateescape', newline='') as f:
        f.write(content)
