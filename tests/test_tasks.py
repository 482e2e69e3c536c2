import json

import pytest

from core.renamer import RenameError
from tasks.build_banner import run_build_banner
from tasks.build_navigation import run_build_navigation
from tasks.build_redirections import run_build_redirections
from tasks.check_links import run_check_links
from tasks.lint import run_lint
from tasks.normalize_links import run_normalize_links
from tasks.rename_files import run_rename_files

SITE_CONFIG = """\
pathPrefix: /docs
siteMetadata:
  home:
    title: Home
    path: /
  pages:
    - title: Start
      path: /Guides/Getting_Started.md
    - title: Start again
      path: Guides/Getting_Started
  siteWideBanner:
    text: Maintenance tonight
"""


def snapshot(root):
    return {p.relative_to(root).as_posix(): p.read_bytes() for p in sorted(root.rglob('*')) if p.is_file()}


# --- normalize-links ---

NORMALIZE_FILES = {
    'index.md': '[Guide](guide/)\n[Setup](guide/setup)\n[Top](#top)\n[Gone](missing.md)\n[New](newpage/)\n',
    'guide/index.md': '[Home](/index)\n[Setup](./setup)\n',
    'guide/setup.md': '# Setup\n',
}


def test_normalize_links_rewrites_to_canonical_targets(site, content_root):
    ctx = site(NORMALIZE_FILES)

    assert run_normalize_links(ctx) == 0

    assert (content_root / 'index.md').read_text(encoding='utf-8') == (
        '[Guide](guide/index.md)\n[Setup](guide/setup.md)\n[Top](#top)\n[Gone](missing.md)\n[New](newpage.md)\n')
    assert (content_root / 'guide/index.md').read_text(encoding='utf-8') == '[Home](../index.md)\n[Setup](setup.md)\n'


def test_normalize_links_is_idempotent(site, content_root):
    ctx = site(NORMALIZE_FILES)
    run_normalize_links(ctx)
    first = snapshot(content_root)

    run_normalize_links(ctx)

    assert snapshot(content_root) == first


def test_normalize_links_can_refuse_forward_references(site, content_root):
    ctx = site(NORMALIZE_FILES)

    run_normalize_links(ctx, allow_forward=False)

    assert '[New](newpage/)' in (content_root / 'index.md').read_text(encoding='utf-8')


def test_normalize_links_dry_run_writes_nothing(site, content_root):
    ctx = site(NORMALIZE_FILES, dry_run=True)
    before = snapshot(content_root)

    run_normalize_links(ctx)

    assert snapshot(content_root) == before


def test_broken_link_is_reported_and_file_left_alone(site, content_root, capsys):
    ctx = site({'index.md': '[Gone](deep/../missing.md)\n'})
    before = (content_root / 'index.md').read_bytes()

    run_normalize_links(ctx)

    assert (content_root / 'index.md').read_bytes() == before
    assert 'deep/../missing.md' in capsys.readouterr().out
    assert run_check_links(ctx, check_external=False) == 1


def test_canonical_link_to_missing_file_is_reported(site, capsys):
    ctx = site({'index.md': '[Gone](missing.md)\n[Bare](nothing)\n'})

    run_normalize_links(ctx)

    out = capsys.readouterr().out
    assert 'index.md: link target not found: missing.md' in out
    assert 'index.md: link target not found: nothing' in out
    assert '2 links could not be resolved' in out


def test_existing_non_deployable_files_are_not_reported(site, content_root, capsys):
    ctx = site({'index.md': '[Logo](./images/logo.png)\n[Images](./images)\n', 'images/logo.png': 'png'})
    before = (content_root / 'index.md').read_bytes()

    run_normalize_links(ctx)

    assert '⚠️' not in capsys.readouterr().out
    assert (content_root / 'index.md').read_bytes() == before


def test_undecodable_bytes_survive_a_rewrite(site, content_root):
    ctx = site({'other.md': '# Other\n'})
    (content_root / 'bad.md').write_bytes(b'caf\xe9 [x](other)\n')

    assert run_normalize_links(ctx) == 0

    assert (content_root / 'bad.md').read_bytes() == b'caf\xe9 [x](other.md)\n'
    assert run_check_links(ctx, check_external=False) == 0
    assert run_lint(ctx) == 0


# --- rename-files ---

RENAME_FILES = {
    'index.md': '[Start](Guides/Getting_Started.md)\n[Abs](/Guides/Getting_Started.md)\n',
    'Guides/Getting_Started.md': '# Start\n[Home](../index.md)\n',
}

REDIRECTS = {
    'total': 1, 'offset': 0, 'limit': 1,
    'data': [{'source': '/docs/ancient', 'destination': '/docs/Guides/Getting_Started'}],
}


def test_rename_files_end_to_end(site, tmp_path, content_root):
    ctx = site(RENAME_FILES, project_files={
        'site-config.yaml': SITE_CONFIG,
        'redirects.json': json.dumps(REDIRECTS),
    })

    assert run_rename_files(ctx) == 0

    assert not (content_root / 'Guides').exists()
    assert (content_root / 'guides/getting-started.md').read_text(encoding='utf-8') == '# Start\n[Home](../index.md)\n'
    assert (content_root / 'index.md').read_text(encoding='utf-8') == (
        '[Start](guides/getting-started.md)\n[Abs](/guides/getting-started.md)\n')

    site_config = (tmp_path / 'site-config.yaml').read_text(encoding='utf-8')
    assert 'path: /guides/getting-started.md\n' in site_config
    assert 'path: guides/getting-started\n' in site_config

    redirects = json.loads((tmp_path / 'redirects.json').read_text(encoding='utf-8'))
    assert redirects['total'] == 2
    assert redirects['data'] == [
        {'source': '/docs/ancient', 'destination': '/docs/guides/getting-started'},
        {'source': '/docs/Guides/Getting_Started', 'destination': '/docs/guides/getting-started'},
    ]


def test_rename_files_dry_run_changes_nothing(site, tmp_path):
    ctx = site(RENAME_FILES, dry_run=True, project_files={
        'site-config.yaml': SITE_CONFIG,
        'redirects.json': json.dumps(REDIRECTS),
    })
    before = snapshot(tmp_path)

    assert run_rename_files(ctx) == 0

    assert snapshot(tmp_path) == before


def test_rename_files_refuses_collisions(site, content_root):
    ctx = site({'Page.md': 'a', 'page.md': 'b'})

    with pytest.raises(RenameError):
        run_rename_files(ctx)

    assert (content_root / 'Page.md').exists()


# --- builders ---

def test_build_navigation_writes_config_md(site, content_root):
    ctx = site({'index.md': '# Home\n', 'Guides/Getting_Started.md': '# Start\n'},
               project_files={'site-config.yaml': SITE_CONFIG})

    assert run_build_navigation(ctx) == 0

    navigation = (content_root / 'config.md').read_text(encoding='utf-8')
    assert navigation.startswith('- pathPrefix:\n    - /docs\n')
    assert '    - [Home](index.md)\n' in navigation
    assert '    - [Start](Guides/Getting_Started.md)\n' in navigation


def test_build_redirections_merges_into_existing_table(site, tmp_path):
    existing = {'data': [{'source': '/docs/guide/page/', 'destination': '/docs/elsewhere'}]}
    ctx = site({'index.md': '', 'guide/index.md': '', 'guide/page.md': '', 'config.md': ''},
               project_files={'site-config.yaml': SITE_CONFIG, 'redirects.json': json.dumps(existing)})

    assert run_build_redirections(ctx) == 0

    document = json.loads((tmp_path / 'redirects.json').read_text(encoding='utf-8'))
    assert document['total'] == 5
    assert document['data'][0] == {'source': '/docs/guide/page/', 'destination': '/docs/elsewhere'}
    sources = [row['source'] for row in document['data']]
    assert len(sources) == len(set(sources))


def test_build_redirections_needs_path_prefix(site):
    from core.site_config import ConfigError

    ctx = site({'index.md': ''}, project_files={'site-config.yaml': 'siteMetadata: {}\n'})

    with pytest.raises(ConfigError):
        run_build_redirections(ctx)


def test_build_banner(site, content_root):
    ctx = site({}, project_files={'site-config.yaml': SITE_CONFIG})

    assert run_build_banner(ctx) == 0

    assert json.loads((content_root / 'sitewidebanner.json').read_text(encoding='utf-8')) == {
        'text': 'Maintenance tonight'}


def test_build_banner_without_banner_writes_empty_file(site, content_root):
    ctx = site({}, project_files={'site-config.yaml': 'pathPrefix: /docs\n'})

    run_build_banner(ctx)

    assert (content_root / 'sitewidebanner.json').read_text(encoding='utf-8') == ''


# --- checks ---

def test_check_links_passes_on_clean_tree(site):
    ctx = site({'index.md': '[Setup](setup.md)\n', 'setup.md': '# Setup\n'})

    assert run_check_links(ctx, check_external=False) == 0


def test_check_links_writes_report(site, tmp_path):
    ctx = site({'index.md': '[Gone](gone.md)\n'})

    assert run_check_links(ctx, check_external=False, report=True) == 1

    report = (tmp_path / 'html' / 'link_check_report.html').read_text(encoding='utf-8')
    assert 'gone.md' in report


def test_lint_fails_only_on_errors(site, tmp_path):
    warnings_only = site({'page.md': '# One\n# Two\n'})
    assert run_lint(warnings_only) == 0

    with_errors = site({'Bad_Name.md': '---\ntitle: a\ndescription: b\nkeywords: c\n---\n<span>x</span>\n'})
    assert run_lint(with_errors, report=True) == 1
    assert (tmp_path / 'html' / 'lint_report.html').exists()
