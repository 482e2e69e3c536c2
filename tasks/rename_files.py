# tasks/rename_files.py

import posixpath
from typing import Dict

from core.context import RunContext
from core.file_system import FileIndex
from core.link_rewriter import LinkMap, replace_links_in_file
from core.link_syntax import MARKDOWN_LINK, PATH_FIELD
from core.path_resolver import relative_path, remove_file_extension
from core.redirects import RedirectTable, apply_renames, to_url
from core.renamer import RenameError, build_file_map, build_relative_link_map, find_collisions, rename_files
from core.site_config import get_path_prefix


def markdown_link_map(file_map: Dict[str, str], current_dir: str) -> LinkMap:
    """Relative spellings of every renamed file, plus their '/'-rooted spellings."""
    link_map = build_relative_link_map(file_map, current_dir)
    for old, new in file_map.items():
        link_map.setdefault(f"/{old}", f"/{new}")
    return link_map


def site_config_link_map(file_map: Dict[str, str]) -> LinkMap:
    """
    Keys for `path:` fields of the site configuration, which may name a page
    by file path, by extension-less path or by its URL form.
    """
    link_map: LinkMap = {}
    for old, new in file_map.items():
        spellings = [
            (relative_path(old), relative_path(new)),
            (remove_file_extension(old), remove_file_extension(new)),
            (to_url(old).lstrip('/'), to_url(new).lstrip('/')),
        ]
        for old_spelling, new_spelling in spellings:
            if old_spelling and old_spelling != new_spelling:
                link_map.setdefault(old_spelling, new_spelling)
    return link_map


def update_redirects(ctx: RunContext, file_map: Dict[str, str]):
    redirects_file = ctx.redirects_file
    if not redirects_file.is_file():
        ctx.trace("No redirects file found, skipping")
        return

    path_prefix = ctx.path_prefix or get_path_prefix(ctx.nav_config_file, ctx.site_config_file)
    ctx.trace(f"Path prefix: {path_prefix}")

    table = RedirectTable.load(redirects_file)
    renamed = apply_renames(table, file_map, path_prefix)
    for kept, dropped in renamed.conflicts:
        print(f"  ⚠️  Redirect conflict for {dropped.source}: keeping -> {kept.destination}, "
              f"dropping -> {dropped.destination}")
    for entry in renamed.self_redirects:
        print(f"  ⚠️  Dropping redirect from {entry.source} to itself")

    print(f"  -> Redirect table: {len(table)} entries before, {len(renamed)} after.")
    if not ctx.dry_run:
        renamed.save(redirects_file)


def run_rename_files(ctx: RunContext) -> int:
    """
    Renames every deployable file to kebab-case and updates everything that
    points at the old names: markdown links, site configuration paths and
    the redirect table. Files are moved last.
    """
    print("🚀 Starting file rename process...")
    if ctx.dry_run:
        print("  -> DRY RUN: nothing will be renamed or written.")

    ctx.step("Getting deployable files")
    file_index = FileIndex.build(ctx.content_root)
    ctx.trace(f"Found {len(file_index)} deployable files")

    ctx.step("Creating file map")
    file_map = build_file_map(file_index)
    if not file_map:
        print("✅ All file names are already valid. Nothing to rename.")
        return 0

    collisions = find_collisions(file_map, file_index)
    if collisions:
        listed = ', '.join(collisions)
        raise RenameError(f"Renaming would produce the same path more than once: {listed}")

    for old, new in file_map.items():
        print(f"  -> \"{old}\" => \"{new}\"")

    ctx.section("Processing markdown files")
    markdown_files = file_index.markdown_files()
    links_updated = 0
    for i, file in enumerate(markdown_files):
        ctx.trace(f"[{i+1}/{len(markdown_files)}] Processing: {file}")
        link_map = markdown_link_map(file_map, posixpath.dirname(file))
        applied = replace_links_in_file(file_index.absolute(file), link_map, MARKDOWN_LINK, dry_run=ctx.dry_run)
        if applied:
            ctx.trace(f"  Updated {len(applied)} links")
            links_updated += len(applied)

    ctx.section("Processing site configuration")
    if ctx.site_config_file.is_file():
        applied = replace_links_in_file(ctx.site_config_file, site_config_link_map(file_map), PATH_FIELD,
                                        dry_run=ctx.dry_run)
        ctx.trace(f"  Updated {len(applied)} paths in {ctx.site_config_file.name}")
    else:
        ctx.trace("No site configuration found, skipping")

    ctx.section("Processing redirects file")
    update_redirects(ctx, file_map)

    if ctx.dry_run:
        print(f"\n✨ Dry run complete. {len(file_map)} files would be renamed, "
              f"{links_updated} link targets updated.")
        return 0

    ctx.section("Executing file renames")
    renamed = rename_files(file_map, ctx.content_root, trace=ctx.trace)

    print(f"\n✨ Success! Renamed {renamed} files and updated {links_updated} link targets.")
    return 0
