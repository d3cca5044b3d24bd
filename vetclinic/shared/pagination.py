"""
Search / filter / pagination flow used by the list endpoints and the admin pages.

The client side (static/js/search-bar.js) writes ``search`` and ``page`` into
the query string; the loaders here read ``search``, ``page`` and ``limit``,
build a case-insensitive filter and fetch one page plus the total count.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session
from starlette.concurrency import run_in_threadpool

from ..database import new_session

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 1000


def _parse_positive_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed >= 1 else default


@dataclass(frozen=True)
class PageParams:
    search: str = ""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_query(
        cls, search: Optional[str] = None, page: Any = None, limit: Any = None
    ) -> "PageParams":
        """Lenient parsing: missing, non-numeric or non-positive values fall back to defaults"""
        return cls(
            search=search or "",
            page=_parse_positive_int(page, DEFAULT_PAGE),
            limit=min(_parse_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def cache_key_parts(self) -> dict:
        return {"search": self.search, "page": self.page, "limit": self.limit}


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int

    @classmethod
    def build(cls, total: int, params: PageParams) -> "Pagination":
        return cls(
            total=total,
            page=params.page,
            limit=params.limit,
            totalPages=math.ceil(total / params.limit),
        )


def search_applies(term: Optional[str]) -> bool:
    """A search term filters only once it has at least two characters"""
    return bool(term) and len(term) >= MIN_SEARCH_LENGTH


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_search_filter(term: Optional[str], *columns):
    """
    Case-insensitive substring match OR-ed over ``columns``.

    Returns None (no filtering) when the term is shorter than MIN_SEARCH_LENGTH.
    """
    if not search_applies(term) or not columns:
        return None
    pattern = f"%{_escape_like(term)}%"
    return or_(*(column.ilike(pattern, escape="\\") for column in columns))


async def fetch_page(
    build_query: Callable[[Session], Query],
    params: PageParams,
    serialize: Callable[[Any], Any],
) -> tuple[list, Pagination]:
    """
    Run the count query and the page query concurrently and wait for both.

    Each query runs in a threadpool worker with its own session; rows are
    serialized before their session closes. A page past the end yields an
    empty list.
    """

    def count_rows() -> int:
        with new_session() as db:
            return build_query(db).order_by(None).count()

    def load_rows() -> list:
        with new_session() as db:
            rows = build_query(db).offset(params.offset).limit(params.limit).all()
            return [serialize(row) for row in rows]

    total, items = await asyncio.gather(run_in_threadpool(count_rows), run_in_threadpool(load_rows))
    logger.debug(f"📄 Loaded page {params.page} ({len(items)}/{total} rows, search={params.search!r})")
    return items, Pagination.build(total, params)
