import pytest

from core.link_rewriter import build_link_map, find_links, replace_links_in_file, replace_links_in_string
from core.link_syntax import PATH_FIELD, REDIRECT_URL
from models.link import ResolutionStatus


@pytest.fixture
def index(index_of):
    return index_of('index.md', 'intro.md', 'guide/index.md', 'guide/setup.md',
                    'ambiguous/thing.md', 'ambiguous/thing.json')


def test_find_links_splits_prefix_and_anchor():
    text = '[a](./setup#install) [b](/intro) [c](#top) ![logo](img/logo.png) [d](https://example.com)'

    links = find_links(text)

    assert [(l.prefix, l.path, l.anchor) for l in links] == [
        ('./', 'setup', 'install'),
        ('/', 'intro', None),
        ('', '', 'top'),
        ('', 'img/logo.png', None),
        ('', 'https://example.com', None),
    ]
    assert links[2].is_anchor_only
    assert links[0].target == './setup#install'


def test_build_link_map_skips_anchors_and_reports_problems(index):
    text = ('[s](setup) [again](setup) [i](/intro) [t](#top) [m](../nowhere/../missing.md) '
            '[amb](../ambiguous/thing) [n](newpage/)')

    link_map, problems = build_link_map(find_links(text), 'guide', index)

    assert link_map == {
        'setup': 'setup.md',
        '/intro': '../intro.md',
        'newpage/': 'newpage.md',
    }
    assert '#top' not in link_map and '' not in link_map
    assert {(p.original, p.status) for p in problems} == {
        ('../nowhere/../missing.md', ResolutionStatus.UNRESOLVED),
        ('../ambiguous/thing', ResolutionStatus.AMBIGUOUS),
        ('newpage/', ResolutionStatus.FORWARD),
    }


def test_forward_references_can_be_refused(index):
    link_map, problems = build_link_map(find_links('[n](newpage/)'), '', index, allow_forward=False)

    assert link_map == {}
    assert [p.status for p in problems] == [ResolutionStatus.FORWARD]


def test_replace_links_in_string_keeps_anchor_and_prefix():
    text = '[a](setup#install) [b](./setup) ![c](setup) [d](setup-guide)'

    new_text, applied = replace_links_in_string(text, {'setup': 'setup.md'})

    assert new_text == '[a](setup.md#install) [b](./setup.md) ![c](setup.md) [d](setup-guide)'
    assert applied == ['setup']


def test_replacements_are_never_substituted_twice():
    text = '[x](a) [y](b)'

    new_text, applied = replace_links_in_string(text, {'a': 'b', 'b': 'c'})

    assert new_text == '[x](b) [y](c)'
    assert applied == ['a', 'b']


def test_longer_key_wins_over_its_prefix():
    text = '[g](guide/) [s](guide/setup)'

    new_text, _ = replace_links_in_string(text, {'guide/': 'guide/index.md', 'guide/setup': 'guide/setup.md'})

    assert new_text == '[g](guide/index.md) [s](guide/setup.md)'


def test_root_relative_spelling_is_not_matched_by_bare_key():
    new_text, applied = replace_links_in_string('[a](/setup)', {'setup': 'setup.md'})

    assert new_text == '[a](/setup)'
    assert applied == []


def test_unmatched_keys_do_not_fire():
    new_text, applied = replace_links_in_string('[a](intro)', {'intro': 'intro.md', 'other': 'other.md'})

    assert new_text == '[a](intro.md)'
    assert applied == ['intro']
    assert replace_links_in_string('text', {}) == ('text', [])


def test_path_field_syntax():
    text = ("pages:\n"
            "  - title: Guide\n"
            "    path: /Guides/Start.md\n"
            "  - { title: 'Other', path: 'Guides/Start.md#top' }\n"
            "    path: Guides/Start.md.bak\n")

    new_text, applied = replace_links_in_string(text, {'Guides/Start.md': 'guides/start.md'}, PATH_FIELD)

    assert new_text == ("pages:\n"
                        "  - title: Guide\n"
                        "    path: /guides/start.md\n"
                        "  - { title: 'Other', path: 'guides/start.md#top' }\n"
                        "    path: Guides/Start.md.bak\n")
    assert applied == ['Guides/Start.md']


def test_redirect_url_syntax_matches_whole_value():
    url_map = {'/docs/old': '/docs/new'}

    assert replace_links_in_string('/docs/old#part', url_map, REDIRECT_URL) == ('/docs/new#part', ['/docs/old'])
    assert replace_links_in_string('/docs/old/more', url_map, REDIRECT_URL) == ('/docs/old/more', [])


def test_replace_links_in_file_writes_only_on_change(tmp_path):
    page = tmp_path / 'page.md'
    page.write_bytes(b'[a](intro)\r\n[b](missing)\r\n')

    applied = replace_links_in_file(page, {'intro': 'intro.md'})

    assert applied == ['intro']
    assert page.read_bytes() == b'[a](intro.md)\r\n[b](missing)\r\n'


def test_replace_links_in_file_dry_run_leaves_file_alone(tmp_path):
    page = tmp_path / 'page.md'
    page.write_text('[a](intro)\n', encoding='utf-8')

    applied = replace_links_in_file(page, {'intro': 'intro.md'}, dry_run=True)

    assert applied == ['intro']
    assert page.read_text(encoding='utf-8') == '[a](intro)\n'
