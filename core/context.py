# core/context.py

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import config


@dataclass
class RunContext:
    """
    Everything a task needs to know about the current invocation.
    Built once in main.py and passed down; nothing below reads the working
    directory or the environment on its own.
    """
    project_root: Path
    content_root: Path
    path_prefix: Optional[str] = None
    dry_run: bool = False
    verbose: bool = False

    @classmethod
    def for_project(cls, project_root, content_dir=None, path_prefix=None, dry_run=False, verbose=False) -> "RunContext":
        project_root = Path(project_root)
        content_root = project_root / (content_dir or config.CONTENT_DIR)
        return cls(project_root=project_root, content_root=content_root, path_prefix=path_prefix,
                   dry_run=dry_run, verbose=verbose)

    @property
    def redirects_file(self) -> Path:
        return self.project_root / config.REDIRECTS_FILENAME

    @property
    def site_config_file(self) -> Path:
        return self.project_root / config.SITE_CONFIG_FILENAME

    @property
    def nav_config_file(self) -> Path:
        return self.content_root / config.NAV_CONFIG_FILENAME

    @property
    def report_dir(self) -> Path:
        return self.project_root / config.REPORT_DIR

    # --- Step-level tracing, only shown with --verbose ---

    def trace(self, message: str):
        if self.verbose:
            print(message)

    def step(self, step: str, details: str = ""):
        if self.verbose:
            print(f"STEP: {step}{f' - {details}' if details else ''}")

    def section(self, title: str):
        if self.verbose:
            print("=" * 50)
            print(f"SECTION: {title}")
            print("=" * 50)
