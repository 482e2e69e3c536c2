# tasks/normalize_links.py

import posixpath

from core.context import RunContext
from core.file_system import FileIndex, read_text_file
from core.link_rewriter import build_link_map, find_links, replace_links_in_file
from models.link import ResolutionStatus


def normalize_file(ctx: RunContext, file_index: FileIndex, file: str, allow_forward: bool = True):
    """Rewrites the links of one markdown file. Returns (applied changes, problem resolutions)."""
    filepath = file_index.absolute(file)
    content = read_text_file(filepath)
    links = find_links(content)
    ctx.trace(f"  Found {len(links)} links")

    link_map, problems = build_link_map(links, posixpath.dirname(file), file_index, allow_forward)
    applied = replace_links_in_file(filepath, link_map, dry_run=ctx.dry_run)
    return [(key, link_map[key]) for key in applied], problems


def run_normalize_links(ctx: RunContext, allow_forward: bool = True) -> int:
    """
    Resolves every markdown link under the content root and rewrites it to
    the file it actually points at. Links that cannot be resolved are
    reported and left untouched.
    """
    print("🚀 Starting link normalization...")
    if ctx.dry_run:
        print("  -> DRY RUN: no files will be written.")

    ctx.section("Indexing content")
    file_index = FileIndex.build(ctx.content_root)
    markdown_files = file_index.markdown_files()
    ctx.step("Index built", f"{len(file_index)} deployable files, {len(markdown_files)} markdown")

    files_changed = 0
    links_changed = 0
    unresolved = 0

    ctx.section("Rewriting links")
    for i, file in enumerate(markdown_files):
        ctx.trace(f"[{i+1}/{len(markdown_files)}] Processing: {file}")
        applied, problems = normalize_file(ctx, file_index, file, allow_forward)

        if applied:
            files_changed += 1
            links_changed += len(applied)
            print(f"\n{file}")
            for old, new in applied:
                print(f"  -> {old} => {new}")

        for problem in problems:
            if problem.status == ResolutionStatus.FORWARD:
                if allow_forward:
                    print(f"  ⚠️  {file}: forward reference {problem.original} => {problem.candidate} (file does not exist yet)")
                else:
                    unresolved += 1
                    print(f"  ⚠️  {file}: link target not found: {problem.original}")
            elif problem.status == ResolutionStatus.AMBIGUOUS:
                unresolved += 1
                print(f"  ⚠️  {file}: ambiguous link {problem.original} ({problem.reason})")
            else:
                unresolved += 1
                print(f"  ⚠️  {file}: link target not found: {problem.original}")

    verb = "Would update" if ctx.dry_run else "Updated"
    print(f"\n✨ Done. {verb} {links_changed} links in {files_changed} of {len(markdown_files)} files.")
    if unresolved:
        print(f"⚠️  {unresolved} links could not be resolved and were left as they are.")
    return 0
