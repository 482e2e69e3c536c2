# tasks/build_navigation.py

from core.context import RunContext
from core.file_system import FileIndex, write_text_file
from core.navigation import build_navigation_markdown
from core.site_config import load_site_config


def run_build_navigation(ctx: RunContext) -> int:
    """Renders the site configuration into the navigation file under the content root."""
    print("🚀 Building site navigation...")

    ctx.step("Loading site configuration", str(ctx.site_config_file))
    site_config = load_site_config(ctx.site_config_file)
    ctx.trace(f"Path prefix: {site_config.path_prefix}")

    ctx.step("Indexing content", str(ctx.content_root))
    file_index = FileIndex.build(ctx.content_root)

    markdown = build_navigation_markdown(site_config, file_index)

    if ctx.dry_run:
        print("  -> DRY RUN: navigation not written. Generated content:\n")
        print(markdown)
        return 0

    write_text_file(ctx.nav_config_file, markdown)
    print(f"✅ Generated file: {ctx.nav_config_file}")
    return 0
