from pageviews.config import StoreConfig
from pageviews.keys import sanitize_key
from pageviews.page import Display, PageContext, on_page_ready
from pageviews.schemas.counter import PageViews, VisitRecord
from pageviews.services.store import close_store, get_store, initialize
from pageviews.services.visit_counter import VisitCounterService

__all__ = [
    "Display",
    "PageContext",
    "PageViews",
    "StoreConfig",
    "VisitCounterService",
    "VisitRecord",
    "close_store",
    "get_store",
    "initialize",
    "on_page_ready",
    "sanitize_key",
]
