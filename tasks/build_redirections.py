# tasks/build_redirections.py

from core.context import RunContext
from core.file_system import FileIndex
from core.redirects import ADDED, CONFLICT, RedirectTable, build_directory_redirects
from core.site_config import load_site_config


def run_build_redirections(ctx: RunContext) -> int:
    """
    Adds the trailing-slash and '/index' redirects every page needs to the
    redirect table. Entries whose source is already in the table are kept
    as they are.
    """
    print("🚀 Starting redirections build...")

    path_prefix = ctx.path_prefix or load_site_config(ctx.site_config_file).path_prefix
    ctx.trace(f"Path prefix: {path_prefix}")

    ctx.step("Finding markdown files")
    file_index = FileIndex.build(ctx.content_root, extensions=('.md',))
    markdown_files = file_index.markdown_files()
    ctx.trace(f"Found {len(markdown_files)} markdown files")

    if ctx.redirects_file.is_file():
        table = RedirectTable.load(ctx.redirects_file)
    else:
        ctx.trace("No redirects file found, starting a new one")
        table = RedirectTable()
    before = len(table)

    ctx.step("Processing markdown files for redirections")
    added = conflicts = 0
    for entry in build_directory_redirects(markdown_files, path_prefix):
        status = table.add(entry)
        if status == ADDED:
            added += 1
            ctx.trace(f"  Added redirect: {entry.source} -> {entry.destination}")
        elif status == CONFLICT:
            conflicts += 1
            existing = table.get(entry.source)
            print(f"  ⚠️  {entry.source} already redirects to {existing.destination}; "
                  f"not adding -> {entry.destination}")

    print(f"  -> {added} new redirects ({before} before, {len(table)} after).")
    if conflicts:
        print(f"  -> {conflicts} conflicting redirects were left as they are.")

    if ctx.dry_run:
        print("  -> DRY RUN: redirects file not written.")
        return 0

    table.save(ctx.redirects_file)
    print(f"✅ Redirects saved to: {ctx.redirects_file}")
    return 0
