from pathlib import Path

import pytest

from core.context import RunContext
from core.file_system import FileIndex


def write_tree(root: Path, files: dict) -> Path:
    """Creates `files` (relative path -> text) under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
    return root


@pytest.fixture
def content_root(tmp_path):
    return tmp_path / 'src' / 'pages'


@pytest.fixture
def site(tmp_path, content_root):
    """Writes content files and returns a RunContext for the project in tmp_path."""
    def build(files=None, dry_run=False, **extra):
        write_tree(content_root, files or {})
        write_tree(tmp_path, extra.pop('project_files', {}))
        return RunContext.for_project(tmp_path, dry_run=dry_run, **extra)
    return build


@pytest.fixture
def index_of():
    """A FileIndex over an in-memory file list; nothing is read from disk."""
    def build(*files):
        return FileIndex(Path('/content'), files)
    return build


@pytest.fixture
def make_tree():
    return write_tree
