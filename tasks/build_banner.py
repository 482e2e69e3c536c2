# tasks/build_banner.py

import json

import config
from core.context import RunContext
from core.file_system import write_text_file
from core.site_config import load_site_config


def banner_json(site_wide_banner) -> str:
    """The banner as compact JSON, or an empty string when there is none."""
    if not site_wide_banner:
        return ''
    return json.dumps(site_wide_banner, separators=(',', ':'), ensure_ascii=False)


def run_build_banner(ctx: RunContext) -> int:
    site_config = load_site_config(ctx.site_config_file)
    output_path = ctx.content_root / config.BANNER_FILENAME
    content = banner_json(site_config.site_wide_banner)

    if ctx.dry_run:
        print(f"  -> DRY RUN: would write {output_path}: {content or '(empty)'}")
        return 0

    write_text_file(output_path, content)
    print(f"✅ Generated file: {output_path}")
    return 0
