import pytest

from core.site_config import ConfigError, get_path_prefix, load_site_config, read_path_prefix_from_nav

SITE_CONFIG = """\
pathPrefix: /docs
siteMetadata:
  title: Docs
  home:
    title: Home
    path: /
  subPages:
    intro:
      title: Intro
      path: /intro
      pages:
        - title: Setup
          path: /intro/setup
  siteWideBanner:
    text: Hello
"""


def test_load_site_config(tmp_path):
    path = tmp_path / 'site-config.yaml'
    path.write_text(SITE_CONFIG, encoding='utf-8')

    site_config = load_site_config(path)

    assert site_config.path_prefix == '/docs'
    assert site_config.title == 'Docs'
    assert site_config.home.path == '/'
    assert [p.title for p in site_config.sub_pages] == ['Intro']
    assert site_config.sub_pages[0].pages[0].path == '/intro/setup'
    assert site_config.site_wide_banner == {'text': 'Hello'}
    assert site_config.pages == []


@pytest.mark.parametrize('content', [
    'siteMetadata: {}\n',
    '- just\n- a list\n',
    'pathPrefix: [unclosed\n',
])
def test_unusable_site_config_is_fatal(tmp_path, content):
    path = tmp_path / 'site-config.yaml'
    path.write_text(content, encoding='utf-8')

    with pytest.raises(ConfigError):
        load_site_config(path)


def test_missing_site_config_is_fatal(tmp_path):
    with pytest.raises(ConfigError):
        load_site_config(tmp_path / 'site-config.yaml')


def test_path_prefix_from_navigation_file(tmp_path):
    nav = tmp_path / 'config.md'
    nav.write_text('- pathPrefix:\n    - /from-nav\n\n- home:\n    - [Home](index.md)\n', encoding='utf-8')

    assert read_path_prefix_from_nav(nav) == '/from-nav'
    assert get_path_prefix(nav, tmp_path / 'missing.yaml') == '/from-nav'


def test_path_prefix_falls_back_to_site_config(tmp_path):
    config_file = tmp_path / 'site-config.yaml'
    config_file.write_text(SITE_CONFIG, encoding='utf-8')

    assert read_path_prefix_from_nav(tmp_path / 'config.md') is None
    assert get_path_prefix(tmp_path / 'config.md', config_file) == '/docs'
