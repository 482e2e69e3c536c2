# core/link_checker.py

import re
import socket
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from http.client import HTTPException
from typing import Callable, Dict, List, Optional, Set, Tuple
from urllib.error import URLError
from urllib.request import Request, urlopen

import frontmatter
import yaml

import config
from core.file_system import FileIndex, read_text_file
from core.path_resolver import is_external, resolve_link, root_relative, split_anchor

LINK_PATTERN = re.compile(r'\[.*?\]\(([^)"\'\s]+)(?:\s+"[^"]*")?\)')
HEADING_PATTERN = re.compile(r'^#{1,6}\s+(.+)$', re.MULTILINE)

LOCAL, ANCHOR, EXTERNAL = 'local', 'anchor', 'external'


@dataclass(frozen=True)
class BrokenLink:
    file: str
    url: str
    kind: str
    error: str


def heading_id(heading: str) -> str:
    """'Install & Run!' -> 'install-run', matching the site's generated ids."""
    slug = re.sub(r'[^\w\s-]', '', heading.lower())
    return re.sub(r'\s+', '-', slug)


def get_headings(content: str) -> Set[str]:
    """Heading ids of a markdown document, ignoring its frontmatter block."""
    try:
        body = frontmatter.loads(content).content
    except yaml.YAMLError:
        body = content
    return {heading_id(match.group(1).strip()) for match in HEADING_PATTERN.finditer(body)}


def _is_timeout(error: Exception) -> bool:
    if isinstance(error, (socket.timeout, TimeoutError)):
        return True
    return isinstance(error, URLError) and isinstance(error.reason, (socket.timeout, TimeoutError))


def _request_ok(url: str, method: str, timeout: float, user_agent: str) -> bool:
    request = Request(url, method=method, headers={'User-Agent': user_agent, 'Connection': 'keep-alive'})
    with urlopen(request, timeout=timeout) as response:
        return 200 <= response.status < 300


def check_external_link(url: str, head_timeout: float = config.HEAD_TIMEOUT,
                        get_timeout: float = config.GET_TIMEOUT,
                        user_agent: str = config.LINK_CHECK_USER_AGENT) -> bool:
    """
    HEAD first; if that times out, one GET with a shorter timeout.
    Any other failure (HTTP error, DNS, refused connection, a malformed
    response) means dead.
    """
    try:
        return _request_ok(url, 'HEAD', head_timeout, user_agent)
    except (URLError, HTTPException, OSError, ValueError) as e:
        if not _is_timeout(e):
            return False
    try:
        return _request_ok(url, 'GET', get_timeout, user_agent)
    except (URLError, HTTPException, OSError, ValueError):
        return False


class LinkChecker:
    """
    Walks every markdown file of the index and collects broken links.
    Nothing is raised for a broken link; everything is gathered and
    returned at the end so one bad link never hides the rest.
    """

    def __init__(self, file_index: FileIndex, check_external: bool = True,
                 batch_size: int = config.LINK_CHECK_BATCH_SIZE,
                 url_checker: Optional[Callable[[str], bool]] = None):
        self.file_index = file_index
        self.check_external = check_external
        self.batch_size = max(1, batch_size)
        self.url_checker = url_checker or check_external_link
        self._headings_cache: Dict[str, Set[str]] = {}

    def headings_for(self, file: str) -> Set[str]:
        if file not in self._headings_cache:
            content = read_text_file(self.file_index.absolute(file))
            self._headings_cache[file] = get_headings(content)
        return self._headings_cache[file]

    def check_local_link(self, file: str, url: str) -> Optional[BrokenLink]:
        current_dir = file.rsplit('/', 1)[0] if '/' in file else ''
        path, anchor = split_anchor(url)

        if not path:
            if anchor and anchor not in self.headings_for(file):
                return BrokenLink(file, url, ANCHOR, f'Heading "{anchor}" not found in file')
            return None

        resolved = resolve_link(url, current_dir, self.file_index)
        if resolved.exists:
            target = root_relative(resolved.candidate, current_dir)
        else:
            # Images, directories and other non-deployable files only exist on disk.
            target = root_relative(path, current_dir)
            if not self.file_index.exists_on_disk(target):
                return BrokenLink(file, url, LOCAL, 'File not found')
            return None

        if anchor and target.endswith('.md') and anchor not in self.headings_for(target):
            return BrokenLink(file, url, ANCHOR, f'Heading "{anchor}" not found in target file')
        return None

    def scan_file(self, file: str) -> Tuple[List[BrokenLink], List[str]]:
        content = read_text_file(self.file_index.absolute(file))
        broken, external = [], []
        for match in LINK_PATTERN.finditer(content):
            url = match.group(1)
            if not url or url.startswith('mailto:'):
                continue
            if is_external(url):
                if url.startswith(('http://', 'https://')):
                    external.append(url)
                continue
            problem = self.check_local_link(file, url)
            if problem:
                broken.append(problem)
        return broken, external

    def check_external_links(self, urls: Dict[str, str]) -> List[BrokenLink]:
        """Checks url -> referencing file pairs in bounded batches."""
        items = list(urls.items())
        broken = []
        with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
            for start in range(0, len(items), self.batch_size):
                batch = items[start:start + self.batch_size]
                results = pool.map(self.url_checker, [url for url, _ in batch])
                for (url, file), ok in zip(batch, results):
                    if not ok:
                        broken.append(BrokenLink(file, url, EXTERNAL, 'Link appears to be dead'))
        return broken

    def run(self, trace=lambda message: None) -> List[BrokenLink]:
        broken: List[BrokenLink] = []
        external: Dict[str, str] = {}

        markdown_files = self.file_index.markdown_files()
        for i, file in enumerate(markdown_files):
            trace(f"[{i+1}/{len(markdown_files)}] Checking: {file}")
            file_broken, file_external = self.scan_file(file)
            broken.extend(file_broken)
            for url in file_external:
                external.setdefault(url, file)

        if self.check_external and external:
            print(f"\nChecking {len(external)} external links...")
            broken.extend(self.check_external_links(external))

        return broken
