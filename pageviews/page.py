"""Page-side glue: the page context, display targets and the page-ready hook."""

import asyncio
import logging
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel

from pageviews.schemas.counter import PageViews
from pageviews.services.visit_counter import VisitCounterService

logger = logging.getLogger(__name__)

SITE_VISITS_SELECTOR = "#visits .count"
PAGE_VIEWS_SELECTOR = "#pageviews .count"


class PageContext(BaseModel):
    host: str = ""
    path: str = ""

    @classmethod
    def from_url(cls, url: str) -> "PageContext":
        """Split a full URL into the host (with port, without userinfo) and the path"""
        parts = urlsplit(url)
        host = parts.hostname or ""
        if ":" in host:
            host = f"[{host}]"
        if parts.port is not None:
            host = f"{host}:{parts.port}"
        return cls(host=host, path=parts.path or "/")


class TextElement:
    def __init__(self, text: str = ""):
        self.text = text

    def __repr__(self) -> str:
        return f"TextElement({self.text!r})"


class Selection(list):
    """Elements matched by a selector; may be empty."""

    def html(self, text: str) -> None:
        for element in self:
            element.text = text


class Display:
    def __init__(self):
        self._elements: Dict[str, List[TextElement]] = {}

    def add(self, selector: str, element: Optional[TextElement] = None) -> TextElement:
        element = element if element is not None else TextElement()
        self._elements.setdefault(selector, []).append(element)
        return element

    def select(self, selector: str) -> Selection:
        return Selection(self._elements.get(selector, []))


async def on_page_ready(page: PageContext, display: Display, counter: VisitCounterService) -> PageViews:
    """Run the site-wide and per-page counters for a loaded page.

    The per-page counter is skipped when the current URL is empty or "_".
    Both counters run concurrently.
    """
    site_url = page.host
    current_url = page.host + page.path

    site = counter.record_visit(site_url, display.select(SITE_VISITS_SELECTOR))
    if current_url and current_url != "_":
        page_record = counter.record_visit("page/" + current_url, display.select(PAGE_VIEWS_SELECTOR))
        site_record, page_record = await asyncio.gather(site, page_record)
    else:
        logger.debug(f"Skipping per-page counter for {current_url!r}")
        site_record, page_record = await site, None

    return PageViews(
        visits=site_record.count if site_record is not None else None,
        pageviews=page_record.count if page_record is not None else None,
    )
