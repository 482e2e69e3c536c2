# models/link.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResolutionStatus(str, Enum):
    """How a link target came out of path resolution."""
    ANCHOR = "anchor"          # same-file heading, never path-resolved
    EXTERNAL = "external"      # has a URL scheme (http:, mailto:, ...)
    UNCHANGED = "unchanged"    # already in canonical form
    RESOLVED = "resolved"      # rewritten to a file that exists
    FORWARD = "forward"        # rewritten to a not-yet-existing file by convention
    UNRESOLVED = "unresolved"  # candidate differs but does not exist
    AMBIGUOUS = "ambiguous"    # several files share the extension-less stem


@dataclass(frozen=True)
class LinkReference:
    """
    A single link occurrence found in a source file.

    `prefix` is '/' for content-root-relative links, './' for explicitly
    relative ones and '' for bare paths. `raw` is the complete matched text,
    `target` is prefix + path + optional '#anchor'.
    """
    raw: str
    prefix: str
    path: str
    anchor: Optional[str] = None

    @property
    def target(self) -> str:
        anchor = f"#{self.anchor}" if self.anchor is not None else ""
        return f"{self.prefix}{self.path}{anchor}"

    @property
    def is_anchor_only(self) -> bool:
        return not self.prefix and not self.path and self.anchor is not None


@dataclass(frozen=True)
class ResolvedTarget:
    """The outcome of resolving one link target against the file index."""
    original: str
    candidate: str
    status: ResolutionStatus
    exists: bool = False
    anchor: Optional[str] = None
    reason: str = ""

    @property
    def changed(self) -> bool:
        return self.candidate != self.original

    def produces_mapping(self, allow_forward: bool = True) -> bool:
        """True when the original link text should be rewritten to the candidate."""
        if self.status is ResolutionStatus.RESOLVED:
            return True
        return allow_forward and self.status is ResolutionStatus.FORWARD

    @property
    def is_broken(self) -> bool:
        """A local path target that does not point at an existing file."""
        if self.status in (ResolutionStatus.ANCHOR, ResolutionStatus.EXTERNAL):
            return False
        return not self.exists
