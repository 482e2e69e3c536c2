import yaml
from pathlib import Path

# --- Core Configuration Loading ---

CONFIG_DIR = Path(__file__).parent

def load_yaml_config(filename):
    """Loads a YAML file from the config directory."""
    with open(CONFIG_DIR / filename, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}

SETTINGS = load_yaml_config('settings.yaml')

# --- CORE FILE SYSTEM PATHS ---
# Relative to the project root; RunContext turns them into real paths.
CONTENT_DIR = Path(SETTINGS.get('CONTENT_DIR', 'src/pages'))
REPORT_DIR = Path(SETTINGS.get('REPORT_DIR', 'html'))

# Files the build pipeline publishes.
DEPLOYABLE_EXTENSIONS = tuple(SETTINGS.get('DEPLOYABLE_EXTENSIONS', ['.md', '.json']))

# --- WELL-KNOWN FILES ---
REDIRECTS_FILENAME = SETTINGS.get('REDIRECTS_FILENAME', 'redirects.json')
SITE_CONFIG_FILENAME = SETTINGS.get('SITE_CONFIG_FILENAME', 'site-config.yaml')
NAV_CONFIG_FILENAME = SETTINGS.get('NAV_CONFIG_FILENAME', 'config.md')
BANNER_FILENAME = SETTINGS.get('BANNER_FILENAME', 'sitewidebanner.json')

# --- REPORTING ---
LINK_CHECK_REPORT_FILENAME = "link_check_report.html"
LINT_REPORT_FILENAME = "lint_report.html"

# --- LINK CHECKING ---
_link_check = SETTINGS.get('LINK_CHECK', {})
LINK_CHECK_BATCH_SIZE = _link_check.get('batch_size', 10)
HEAD_TIMEOUT = _link_check.get('head_timeout', 8)
GET_TIMEOUT = _link_check.get('get_timeout', 5)
LINK_CHECK_USER_AGENT = _link_check.get('user_agent', 'PagesToolkitLinkChecker/1.0')

# --- LINTING ---
_lint = SETTINGS.get('LINT', {})
MAX_ALT_TEXT_LENGTH = _lint.get('max_alt_text_length', 100)
REQUIRED_FRONTMATTER_FIELDS = _lint.get('required_frontmatter_fields', ['title', 'description', 'keywords'])
ALLOWED_HTML_TAGS = frozenset(tag.lower() for tag in _lint.get('allowed_html_tags', []))
SELF_CLOSING_COMPONENTS = tuple(_lint.get('self_closing_components', []))
TABLE_CONTENT_MARKERS = tuple(_lint.get('table_content_markers', []))
