"""Summary: Content sources that expose recent chat text blocks.

Importance: Isolates page scraping from classification and persistence.
Alternatives: Read page text directly inside the context monitor.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from bs4 import BeautifulSoup


logger = logging.getLogger(__name__)

MAX_BLOCKS = 10


@dataclass(frozen=True)
class SiteProfile:
    """Summary: Describes a recognized AI-chat host and its selectors.

    Importance: Keeps the host whitelist and scraping rules in one table.
    Alternatives: Hardcode selectors in each source implementation.
    """

    name: str
    hosts: tuple[str, ...]
    selector: str
    fallback_selector: str

    def matches(self, hostname: str) -> bool:
        host = hostname.lower()
        return any(marker in host for marker in self.hosts)


SITES: tuple[SiteProfile, ...] = (
    SiteProfile(
        name="ChatGPT",
        hosts=("chatgpt.com", "openai.com", "chat.com"),
        selector='[data-message-author-role="user"], .text-message',
        fallback_selector=".text-base, .markdown, .whitespace-pre-wrap",
    ),
    SiteProfile(
        name="Claude",
        hosts=("claude.ai",),
        selector=".font-user-message",
        fallback_selector="p, .prose",
    ),
    SiteProfile(
        name="Gemini",
        hosts=("gemini.google.com",),
        selector=".user-query, [data-user-query]",
        fallback_selector="p, .prose",
    ),
)


def detect_site(hostname: str | None) -> SiteProfile | None:
    """Summary: Resolve the site profile for a hostname.

    Importance: Unrecognized hosts leave the monitor idle.
    Alternatives: Scrape every page with generic selectors.
    """

    if not hostname:
        return None
    for site in SITES:
        if site.matches(hostname):
            return site
    return None


def window_text(blocks: Sequence[str], max_blocks: int = MAX_BLOCKS) -> str:
    """Summary: Join the most recent blocks into one lower-cased string.

    Importance: Bounds classification to the latest part of a conversation.
    Alternatives: Classify the full transcript every time.
    """

    if max_blocks <= 0:
        return ""
    recent = list(blocks)[-max_blocks:]
    return " ".join(recent).lower()


class ContentSource(ABC):
    """Summary: Abstract provider of visible chat text blocks.

    Importance: Allows static, HTML, and file-based sources behind one contract.
    Alternatives: Pass raw strings into the monitor.
    """

    site: SiteProfile | None = None

    @abstractmethod
    def recent_blocks(self) -> list[str]:
        """Summary: Return the current content blocks as plain text.

        Importance: Empty results mean the monitor skips the cycle.
        Alternatives: Return a single pre-joined string.
        """


class StaticContentSource(ContentSource):
    """Summary: In-memory content source.

    Importance: Lets tests and API clients push blocks directly.
    Alternatives: Write fixtures to disk for every test.
    """

    def __init__(self, blocks: Iterable[str] = (), site: SiteProfile | None = SITES[0]) -> None:
        self._blocks = list(blocks)
        self.site = site

    def replace(self, blocks: Iterable[str]) -> None:
        self._blocks = list(blocks)

    def append(self, block: str) -> None:
        self._blocks.append(block)

    def recent_blocks(self) -> list[str]:
        return [block for block in self._blocks if block.strip()]


class HtmlPageSource(ContentSource):
    """Summary: Extracts chat messages from a saved HTML page snapshot.

    Importance: Applies the per-site selectors to real page markup.
    Alternatives: Drive a headless browser against the live page.
    """

    def __init__(self, page_path: Path, hostname: str) -> None:
        """Summary: Initialize the source for a page and host.

        Importance: The hostname decides whether the page is scraped at all.
        Alternatives: Infer the host from the page's canonical link.
        """

        self._page_path = page_path
        self.site = detect_site(hostname)

    def recent_blocks(self) -> list[str]:
        if not self.site or not self._page_path.exists():
            return []
        # Raw bytes let BeautifulSoup detect the page encoding.
        soup = BeautifulSoup(self._page_path.read_bytes(), "html.parser")
        elements = soup.select(self.site.selector)
        if not elements:
            logger.warning("Primary selectors failed for %s. Trying fallbacks.", self.site.name)
            elements = soup.select(self.site.fallback_selector)
        texts = [element.get_text(" ", strip=True) for element in elements]
        return [text for text in texts if text]


class TranscriptFileSource(ContentSource):
    """Summary: Reads a plain-text transcript with blank-line separated blocks.

    Importance: Supports monitoring exported conversations from the CLI.
    Alternatives: Require HTML snapshots for every source.
    """

    def __init__(self, path: Path, site: SiteProfile | None = SITES[0]) -> None:
        self._path = path
        self.site = site

    def recent_blocks(self) -> list[str]:
        if not self._path.exists():
            return []
        content = self._path.read_text(encoding="utf-8", errors="replace")
        blocks = [" ".join(chunk.split()) for chunk in content.split("\n\n")]
        return [block for block in blocks if block]
