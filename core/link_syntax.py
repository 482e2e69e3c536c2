# core/link_syntax.py

import re
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class LinkSyntax:
    """
    One textual context a link target can sit in.

    `template` is a regex with a `{targets}` placeholder and the named groups
    open, prefix, target, anchor and close. The rewriter fills `{targets}`
    with an alternation of literal keys, and rebuilds a match as
    open + prefix + <new target> + anchor + close.
    """
    name: str
    template: str
    flags: int = 0

    def compile(self, targets: Iterable[str]) -> re.Pattern:
        # Longest first so a key never stops short inside a longer one.
        keys = sorted(set(targets), key=len, reverse=True)
        alternation = '|'.join(re.escape(key) for key in keys)
        return re.compile(self.template.format(targets=alternation), self.flags)

    def scanner(self) -> re.Pattern:
        """A pattern matching any target in this syntax."""
        return re.compile(self.template.format(targets=self.any_target), self.flags)

    @property
    def any_target(self) -> str:
        return _ANY_TARGET[self.name]

    def replacement(self, match: re.Match, new_target: str) -> str:
        return (f"{match.group('open')}{match.group('prefix') or ''}{new_target}"
                f"{match.group('anchor') or ''}{match.group('close')}")


# [text](target) and ![alt](target). A bare key also matches its './' spelling;
# the lazy prefix lets a key that itself starts with './' win when present.
MARKDOWN_LINK = LinkSyntax(
    name='markdown_link',
    template=r"(?P<open>\[[^\]]*\]\()(?P<prefix>\./)??(?P<target>{targets})(?P<anchor>#[^()]*)?(?P<close>\))",
)

# `path: "target"` fields in the site configuration (YAML or JS object literals).
# These are always content-root relative, so a leading "/" is only a spelling.
PATH_FIELD = LinkSyntax(
    name='path_field',
    template=(r"(?P<open>['\"]?path['\"]?[ \t]*:[ \t]*['\"]?)(?P<prefix>/|\./)??(?P<target>{targets})"
              r"(?P<anchor>#[^'\"\s]*)?(?P<close>['\"]|[ \t]*(?=\r?$))"),
    flags=re.MULTILINE,
)

# A whole redirect source/destination URL, optionally followed by '#fragment'.
REDIRECT_URL = LinkSyntax(
    name='redirect_url',
    template=r"^(?P<open>)(?P<prefix>)(?P<target>{targets})(?P<anchor>#.*)?(?P<close>)$",
)

_ANY_TARGET = {
    'markdown_link': r"[^)#\s]*",
    'path_field': r"[^'\"#\s]*",
    'redirect_url': r"[^#]*",
}

LINK_SYNTAXES = {syntax.name: syntax for syntax in (MARKDOWN_LINK, PATH_FIELD, REDIRECT_URL)}
