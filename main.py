import argparse
import sys

from core.context import RunContext
from core.redirects import RedirectTableError
from core.renamer import RenameError
from core.site_config import ConfigError
from tasks.build_banner import run_build_banner
from tasks.build_navigation import run_build_navigation
from tasks.build_redirections import run_build_redirections
from tasks.check_links import run_check_links
from tasks.lint import run_lint
from tasks.normalize_links import run_normalize_links
from tasks.rename_files import run_rename_files


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Content maintenance tools for a markdown documentation site: links, renames, redirects and navigation."
    )
    parser.add_argument(
        '--project-root',
        default='.',
        help="Root of the site project (holds the site configuration and redirects.json). Default: current directory."
    )
    parser.add_argument(
        '--content-dir',
        default=None,
        help="Content directory relative to the project root. Default: the CONTENT_DIR setting."
    )
    parser.add_argument(
        '--path-prefix',
        default=None,
        help="URL path prefix of the site. Default: read from the navigation file or site configuration."
    )
    parser.add_argument(
        '-d', '--dry-run',
        action='store_true',
        help="Resolve and report everything, but write nothing."
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help="Print step-level tracing."
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    normalize_parser = subparsers.add_parser(
        "normalize-links",
        help="Rewrite every markdown link to the file it actually points at."
    )
    normalize_parser.add_argument(
        '--no-forward-refs',
        dest='allow_forward',
        action='store_false',
        help="Leave 'dir/' links alone when neither 'dir/index.md' nor 'dir.md' exists."
    )
    normalize_parser.set_defaults(handler=lambda ctx, args: run_normalize_links(ctx, allow_forward=args.allow_forward))

    rename_parser = subparsers.add_parser(
        "rename-files",
        help="Rename files to kebab-case and update links, site configuration and redirects."
    )
    rename_parser.set_defaults(handler=lambda ctx, args: run_rename_files(ctx))

    navigation_parser = subparsers.add_parser(
        "build-navigation",
        help="Generate the navigation file from the site configuration."
    )
    navigation_parser.set_defaults(handler=lambda ctx, args: run_build_navigation(ctx))

    redirections_parser = subparsers.add_parser(
        "build-redirections",
        help="Add trailing-slash and '/index' redirects for every page to the redirect table."
    )
    redirections_parser.set_defaults(handler=lambda ctx, args: run_build_redirections(ctx))

    banner_parser = subparsers.add_parser(
        "build-banner",
        help="Write the site-wide banner from the site configuration as JSON."
    )
    banner_parser.set_defaults(handler=lambda ctx, args: run_build_banner(ctx))

    check_parser = subparsers.add_parser(
        "check-links",
        help="Report broken local links, missing anchors and dead external links."
    )
    check_parser.add_argument(
        '--no-external',
        dest='check_external',
        action='store_false',
        help="Skip checking external URLs."
    )
    check_parser.add_argument(
        '--report',
        action='store_true',
        help="Also write an HTML report into the report directory."
    )
    check_parser.set_defaults(handler=lambda ctx, args: run_check_links(
        ctx, check_external=args.check_external, report=args.report))

    lint_parser = subparsers.add_parser(
        "lint",
        help="Run the markdown lint rules over the content directory."
    )
    lint_parser.add_argument(
        '--report',
        action='store_true',
        help="Also write an HTML report into the report directory."
    )
    lint_parser.set_defaults(handler=lambda ctx, args: run_lint(ctx, report=args.report))

    return parser


def main(argv=None) -> int:
    """
    The main entry point for the command-line interface.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    ctx = RunContext.for_project(
        args.project_root,
        content_dir=args.content_dir,
        path_prefix=args.path_prefix,
        dry_run=args.dry_run,
        verbose=args.verbose,
    )
    ctx.trace(f"Project root: {ctx.project_root.resolve()}")
    ctx.trace(f"Content root: {ctx.content_root}")

    try:
        return args.handler(ctx, args)
    except ConfigError as e:
        print(f"❌ Configuration error: {e}")
        return 1
    except (RedirectTableError, RenameError) as e:
        print(f"❌ {e}")
        return 1
    except OSError as e:
        print(f"❌ {args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
