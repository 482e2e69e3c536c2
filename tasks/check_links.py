# tasks/check_links.py

from collections import Counter
from typing import List

import config
from core.context import RunContext
from core.file_system import FileIndex
from core.link_checker import ANCHOR, EXTERNAL, LOCAL, BrokenLink, LinkChecker
from .reporting import generate_html_report, render_table

KIND_LABELS = {
    LOCAL: "Local link",
    ANCHOR: "Anchor link",
    EXTERNAL: "External link",
}


def _write_report(ctx: RunContext, broken: List[BrokenLink], files_checked: int):
    counts = Counter(link.kind for link in broken)
    summary = {
        "Markdown Files Checked": files_checked,
        "Broken Local Links": counts[LOCAL],
        "Broken Anchor Links": counts[ANCHOR],
        "Dead External Links": counts[EXTERNAL],
    }
    sections = []
    for kind, label in KIND_LABELS.items():
        rows = [[link.file, link.url, link.error] for link in broken if link.kind == kind]
        sections.append({
            'title': f"{label}s",
            'content': render_table(["File", "Link", "Problem"], rows),
        })
    generate_html_report("Link Check Report", summary, sections, config.LINK_CHECK_REPORT_FILENAME, ctx.report_dir)


def run_check_links(ctx: RunContext, check_external: bool = True, report: bool = False) -> int:
    """
    Checks every link of every markdown file. All broken links are collected
    first and reported together; the exit code is 1 if there were any.
    """
    print("🚀 Checking links...")
    file_index = FileIndex.build(ctx.content_root)
    checker = LinkChecker(file_index, check_external=check_external)
    broken = checker.run(trace=ctx.trace)

    if report:
        _write_report(ctx, broken, len(file_index.markdown_files()))

    if not broken:
        print("\n✅ All links are valid.")
        return 0

    print(f"\n❌ Found {len(broken)} broken links:")
    for link in broken:
        print(f"  {KIND_LABELS[link.kind]} in {link.file}:  \"{link.url}\" - {link.error}")
    return 1
