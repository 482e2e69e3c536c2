# core/site_config.py

import re
from pathlib import Path
from typing import Optional

import yaml

from models.site import SiteConfig


class ConfigError(Exception):
    """Raised when required site configuration is missing or unusable."""


def load_site_config(path: Path) -> SiteConfig:
    """
    Loads the site configuration YAML (pathPrefix + siteMetadata).
    A missing file, a parse failure or a missing pathPrefix is fatal.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Site configuration not found at '{path}'.")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not parse '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Site configuration '{path}' must be a mapping.")
    if not data.get('pathPrefix'):
        raise ConfigError(f"pathPrefix not found in '{path}'.")

    return SiteConfig.from_dict(data)


def read_path_prefix_from_nav(nav_file: Path) -> Optional[str]:
    """
    Pulls the path prefix out of a generated navigation file:
    the first list item following the `- pathPrefix:` key.
    """
    nav_file = Path(nav_file)
    if not nav_file.is_file():
        return None

    lines = nav_file.read_text(encoding='utf-8', errors='replace').split('\n')
    key_index = next((i for i, line in enumerate(lines) if re.match(r'\s*-\s*pathPrefix:', line)), None)
    if key_index is None:
        return None

    value_line = next((line for line in lines[key_index + 1:] if re.match(r'\s*-', line)), None)
    if value_line is None:
        return None

    match = re.match(r'(\s*-\s*)(\S*)', value_line)
    return match.group(2) if match and match.group(2) else None


def get_path_prefix(nav_file: Path, site_config_file: Path) -> str:
    """Navigation file first, then the site configuration."""
    prefix = read_path_prefix_from_nav(nav_file)
    if prefix:
        return prefix
    return load_site_config(site_config_file).path_prefix
