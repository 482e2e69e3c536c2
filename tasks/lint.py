# tasks/lint.py

import config
from core.context import RunContext
from core.file_system import FileIndex, read_text_file
from core.lint_rules import lint_text
from .reporting import generate_html_report, render_table


def run_lint(ctx: RunContext, report: bool = False) -> int:
    """Runs the markdown lint rules over the content root. Only errors fail the run."""
    file_index = FileIndex.build(ctx.content_root, extensions=('.md',))
    markdown_files = file_index.markdown_files()
    print(f"🚀 Linting {len(markdown_files)} markdown files...")

    all_warnings, all_errors = [], []
    for file in markdown_files:
        ctx.trace(f"  Linting: {file}")
        result = lint_text(file, read_text_file(file_index.absolute(file)))
        if not result.warnings and not result.errors:
            continue

        print(f"\n{file}:")
        for warning in result.warnings:
            print(f"  ⚠️  WARNING: {warning}")
            all_warnings.append((file, warning))
        for error in result.errors:
            print(f"  ❌ ERROR: {error}")
            all_errors.append((file, error))

    if report:
        summary = {
            "Markdown Files Linted": len(markdown_files),
            "Warnings": len(all_warnings),
            "Errors": len(all_errors),
        }
        sections = [
            {'title': "Errors", 'content': render_table(["File", "Error"], [list(e) for e in all_errors])},
            {'title': "Warnings", 'content': render_table(["File", "Warning"], [list(w) for w in all_warnings])},
        ]
        generate_html_report("Markdown Lint Report", summary, sections, config.LINT_REPORT_FILENAME, ctx.report_dir)

    if not all_warnings and not all_errors:
        print("\n✅ No violations found.")
        return 0

    print("\n📊 Summary:")
    print(f"  Warnings: {len(all_warnings)}")
    print(f"  Errors: {len(all_errors)}")

    if all_errors:
        print(f"\n🚫 Linting failed with {len(all_errors)} error(s). Please fix these issues.")
        return 1

    print(f"\n⚠️  Linting completed with {len(all_warnings)} warning(s). These are recommendations but won't block deployment.")
    return 0
