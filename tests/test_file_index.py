from core.file_system import FileIndex, build_file_set, read_text_file, write_text_file


def test_build_file_set_collects_deployable_files_with_posix_paths(tmp_path, make_tree):
    make_tree(tmp_path, {
        'index.md': '# Home',
        'guide/setup.md': '# Setup',
        'guide/data/config.json': '{}',
        'guide/notes.txt': 'ignored',
        'images/logo.png': 'ignored',
    })

    files = build_file_set(tmp_path)

    assert files == {'index.md', 'guide/setup.md', 'guide/data/config.json'}


def test_missing_root_gives_empty_set(tmp_path):
    assert build_file_set(tmp_path / 'does-not-exist') == frozenset()
    assert len(FileIndex.build(tmp_path / 'does-not-exist')) == 0


def test_exists_is_case_sensitive(index_of):
    index = index_of('Guide/Intro.md')

    assert index.exists('Guide/Intro.md')
    assert not index.exists('guide/intro.md')
    assert 'Guide/Intro.md' in index


def test_resolve_extension_needs_a_unique_candidate(index_of):
    index = index_of('guide/intro.md', 'guide/data.json', 'guide/both.md', 'guide/both.json')

    assert index.resolve_extension('guide/intro') == '.md'
    assert index.resolve_extension('guide/data') == '.json'
    assert index.resolve_extension('guide/both') is None
    assert index.resolve_extension('guide/missing') is None
    assert index.candidate_count('guide/both') == 2


def test_markdown_files_are_sorted(index_of):
    index = index_of('b.md', 'a/z.md', 'a/config.json', 'a.md')

    assert index.markdown_files() == ['a.md', 'a/z.md', 'b.md']
    assert list(index) == ['a.md', 'a/config.json', 'a/z.md', 'b.md']


def test_write_text_file_keeps_line_endings(tmp_path):
    target = tmp_path / 'nested' / 'file.md'

    write_text_file(target, 'one\r\ntwo\n')

    assert target.read_bytes() == b'one\r\ntwo\n'
    assert read_text_file(target) == 'one\r\ntwo\n'
