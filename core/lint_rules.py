# core/lint_rules.py

import posixpath
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import frontmatter
import yaml

import config

HTML_TAG_PATTERN = re.compile(r'<(/?[a-zA-Z][a-zA-Z0-9]*)(?:\s+[^>]*)?/?>')
TAG_NAME_PATTERN = re.compile(r'</?([a-zA-Z][a-zA-Z0-9]*)')
ANGLE_BRACKET_PATTERN = re.compile(r'<([^>]+)>')
URL_PATTERN = re.compile(r'^(https?://|www\.|mailto:)')
MEDIA_TAG_PATTERN = re.compile(r'<(img|video)[^>]*>', re.IGNORECASE)
ALT_ATTRIBUTE_PATTERN = re.compile(r'alt\s*=\s*["\']([^"\']*)["\']', re.IGNORECASE)
MARKDOWN_IMAGE_PATTERN = re.compile(r'!\[([^\]]*)\]\([^)]*\)')
VALID_FILENAME_PATTERN = re.compile(r'^[a-z0-9-]+$')
SEPARATOR_ROW_PATTERN = re.compile(r'^[\s|:-]+$')
UNESCAPED_PIPE_PATTERN = re.compile(r'(?<!\\)\|')


@dataclass
class LintResult:
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def extend(self, other: "LintResult"):
        self.warnings.extend(other.warnings)
        self.errors.extend(other.errors)


def lines_outside_code(text: str) -> Iterator[Tuple[int, str]]:
    """Yields (line number, stripped line), skipping fenced code blocks and their fences."""
    in_code_block = False
    for line_number, line in enumerate(text.split('\n'), start=1):
        stripped = line.strip()
        if stripped.startswith('```'):
            in_code_block = not in_code_block
            continue
        if not in_code_block:
            yield line_number, stripped


def _inside_inline_code(line: str, index: int) -> bool:
    return line[:index].count('`') % 2 == 1


def check_multiple_h1(path: str, text: str) -> LintResult:
    result = LintResult()
    h1_headings = [(n, re.sub(r'^#\s+', '', line)) for n, line in lines_outside_code(text) if re.match(r'^#\s+', line)]
    for position, (line_number, heading) in enumerate(h1_headings[1:], start=2):
        result.warnings.append(f"Line {line_number}: custom-multiple-h1 - Multiple h1 headings found. "
                               f"This is h1 heading number {position}: \"{heading}\"")
    return result


def check_angle_bracket_links(path: str, text: str) -> LintResult:
    result = LintResult()
    for line_number, line in enumerate(text.split('\n'), start=1):
        for match in ANGLE_BRACKET_PATTERN.finditer(line.strip()):
            if URL_PATTERN.match(match.group(1)):
                result.errors.append(f"Line {line_number}: custom-link-brackets - Link \"{match.group(0)}\" uses angle "
                                     f"brackets <>. Use square brackets [] instead for better markdown compatibility.")
    return result


def check_html_tags(path: str, text: str) -> LintResult:
    result = LintResult()
    for line_number, line in lines_outside_code(text):
        for match in HTML_TAG_PATTERN.finditer(line):
            if _inside_inline_code(line, match.start()):
                continue
            tag_name = TAG_NAME_PATTERN.match(match.group(0)).group(1).lower()
            if tag_name not in config.ALLOWED_HTML_TAGS:
                result.errors.append(f"Line {line_number}: custom-html-tags - HTML tag \"{match.group(0)}\" should be "
                                     f"avoided in markdown. Use markdown syntax instead.")
    return result


def check_html_comments(path: str, text: str) -> LintResult:
    result = LintResult()
    for line_number, line in lines_outside_code(text):
        if '<!--' in line or '-->' in line:
            result.errors.append(f"Line {line_number}: custom-html-comments - HTML comments (<!-- -->) should not be "
                                 f"used in markdown. Use markdown syntax instead.")
    return result


def check_media_alt_text(path: str, text: str) -> LintResult:
    result = LintResult()
    limit = config.MAX_ALT_TEXT_LENGTH
    for line_number, line in lines_outside_code(text):
        alt_texts = []
        for match in MEDIA_TAG_PATTERN.finditer(line):
            alt = ALT_ATTRIBUTE_PATTERN.search(match.group(0))
            kind = match.group(1).capitalize()
            if not alt:
                result.warnings.append(f"Line {line_number}: custom-media-alt-text - {kind} tag missing alt text: {match.group(0)}")
            else:
                alt_texts.append((kind, alt.group(1), match.group(0)))
        for match in MARKDOWN_IMAGE_PATTERN.finditer(line):
            alt_texts.append(('Image', match.group(1), match.group(0)))

        for kind, alt_text, source in alt_texts:
            if not alt_text:
                result.warnings.append(f"Line {line_number}: custom-media-alt-text - {kind} has empty alt text: {source}")
            elif len(alt_text) > limit:
                result.warnings.append(f"Line {line_number}: custom-media-alt-text - {kind} alt text exceeds {limit} "
                                       f"characters ({len(alt_text)} chars): \"{alt_text}\"")
    return result


def check_filename_characters(path: str, text: str) -> LintResult:
    result = LintResult()
    filename = posixpath.basename(path)
    name = re.sub(r'\.md$', '', filename)
    if '_' in name:
        result.errors.append(f"custom-filename-characters - Filename \"{filename}\" contains underscore (_). Use hyphens (-) instead.")
    if '.' in name:
        result.errors.append(f"custom-filename-characters - Filename \"{filename}\" contains dots (.) in the name. Use hyphens (-) instead.")
    if not VALID_FILENAME_PATTERN.match(name):
        invalid = sorted(set(re.findall(r'[^a-z0-9-]', name)) - {'_', '.'})
        if invalid:
            listed = ', '.join(f'"{c}"' for c in invalid)
            result.errors.append(f"custom-filename-characters - Filename \"{filename}\" contains invalid character(s): "
                                 f"{listed}. Only lowercase letters, numbers and hyphens are allowed.")
    return result


def _component_tag_patterns(component: str) -> Tuple[re.Pattern, re.Pattern]:
    name = re.escape(component)
    return (re.compile(rf'<{name}(?:\s+[^>]*)?>', re.IGNORECASE),
            re.compile(rf'</{name}>', re.IGNORECASE))


COMPONENT_TAG_PATTERNS = {component: _component_tag_patterns(component)
                          for component in config.SELF_CLOSING_COMPONENTS}


def _closed_later(lines: List[str], line_number: int, opening: re.Pattern, closing: re.Pattern) -> bool:
    """Looks for the closing tag from the opening line on, stopping at the next opening tag."""
    for offset, line in enumerate(lines[line_number - 1:]):
        if line.strip().startswith('```'):
            continue
        if closing.search(line):
            return True
        if offset and opening.search(line):
            return False
    return False


def check_custom_component_self_closing(path: str, text: str) -> LintResult:
    result = LintResult()
    lines = text.split('\n')
    for line_number, line in lines_outside_code(text):
        for component, (opening, closing) in COMPONENT_TAG_PATTERNS.items():
            if not any(not match.group(0).endswith('/>') for match in opening.finditer(line)):
                continue
            if _closed_later(lines, line_number, opening, closing):
                result.errors.append(f"Line {line_number}: custom-component-self-closing - Custom component \"{component}\" "
                                     f"should be self-closing (use <{component} /> instead of "
                                     f"<{component}>...</{component}>).")
    return result


def _is_table_row(line: str) -> bool:
    return line.startswith('|') and line.endswith('|')


def table_blocks(text: str) -> List[List[Tuple[int, str]]]:
    """
    Groups the table rows of a document, code blocks excluded. A table is a
    run of consecutive lines that start and end with '|' (a bare '---|---'
    separator may continue one). Any other line ends it.
    """
    tables, current = [], []
    for line_number, line in lines_outside_code(text):
        continues = bool(current) and line_number == current[-1][0] + 1
        if _is_table_row(line) or (continues and SEPARATOR_ROW_PATTERN.match(line)):
            if current and not continues:
                tables.append(current)
                current = []
            current.append((line_number, line))
        elif current:
            tables.append(current)
            current = []
    if current:
        tables.append(current)
    return tables


def _column_count(row: str) -> int:
    return len(UNESCAPED_PIPE_PATTERN.findall(row)) - 1


def check_table_column_count(path: str, text: str) -> LintResult:
    result = LintResult()
    for table in table_blocks(text):
        expected = _column_count(table[0][1])
        for line_number, row in table[1:]:
            if not _is_table_row(row):
                continue
            columns = _column_count(row)
            if columns != expected:
                result.errors.append(f"Line {line_number}: custom-table-columns - Table row has {columns} columns, "
                                     f"expected {expected}. All table rows must have the same number of columns.")
    return result


def _table_row_problem(row: str) -> Optional[str]:
    if '```' in row:
        return "Code blocks cannot be contained within tables. Move code blocks outside the table."
    if '<' in row and '>' in row:
        return "HTML tags cannot be contained within tables. Move HTML content outside the table."
    if ('{' in row and '}' in row) or ('"' in row and ('{' in row or '}' in row)):
        return "Code-like content (JSON, objects) cannot be contained within tables. Move this content outside the table."
    if any(marker in row for marker in config.TABLE_CONTENT_MARKERS):
        return ("Multi-line content indicators cannot be contained within tables. "
                "Move this content outside the table.")
    if len([cell for cell in row.split('|') if cell.strip()]) < 2:
        return "Malformed table row. Table rows must have at least 2 cells separated by pipes."
    return None


def check_table_content(path: str, text: str) -> LintResult:
    """Reports the first row of each table that holds nested or complex content."""
    result = LintResult()
    for table in table_blocks(text):
        if len(table) < 2:
            continue
        for line_number, row in table:
            if SEPARATOR_ROW_PATTERN.match(row):
                continue
            problem = _table_row_problem(row)
            if problem:
                result.errors.append(f"Line {line_number}: custom-table-content - {problem}")
                break
    return result


FRONTMATTER_BLOCK_PATTERN = re.compile(r'^---[ \t]*\r?\n.*?\r?\n---[ \t]*(\r?\n|$)', re.DOTALL)


def check_frontmatter(path: str, text: str) -> LintResult:
    result = LintResult()
    text = text.lstrip('\ufeff')
    if not text.startswith('---'):
        result.warnings.append("Line 1: custom-frontmatter - File must start with frontmatter (---)")
        return result
    if not FRONTMATTER_BLOCK_PATTERN.match(text):
        line_count = len(text.split('\n'))
        result.warnings.append(f"Line {line_count}: custom-frontmatter - Frontmatter not properly closed with ---")
        return result
    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as e:
        result.warnings.append(f"Line 1: custom-frontmatter - Frontmatter could not be parsed: {e}")
        return result
    for field_name in config.REQUIRED_FRONTMATTER_FIELDS:
        value = post.metadata.get(field_name)
        if value is None or (isinstance(value, str) and not value.strip()):
            result.warnings.append(f"Line 1: custom-frontmatter - Missing required '{field_name}' field in frontmatter")
    return result


RULES = [
    check_multiple_h1,
    check_angle_bracket_links,
    check_html_tags,
    check_custom_component_self_closing,
    check_media_alt_text,
    check_frontmatter,
    check_filename_characters,
    check_table_content,
    check_table_column_count,
    check_html_comments,
]


def lint_text(path: str, text: str) -> LintResult:
    """Runs every rule against one file's text."""
    result = LintResult()
    for rule in RULES:
        result.extend(rule(path, text))
    return result
