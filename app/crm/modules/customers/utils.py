from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from app.crm.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_SEARCH_LENGTH
from app.crm.errors import InvalidArgument

# Same shape browsers accept for <input type="email">; deliverability is not checked.
EMAIL_RE = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$")

# Wire name -> Customer column name. Anything else is rejected.
SORTABLE_FIELDS = {
    "createdAt": "created_at",
    "name": "name",
    "email": "email",
    "revenue": "revenue",
    "orderCount": "order_count",
    "lastOrderDate": "last_order_date",
}

# OFFSET is bound as a signed 64-bit integer by SQLite and Postgres.
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class ListParams:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = "created_at"
    order: str = "desc"
    search: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: str | None) -> bool:
    e = (email or "").strip()
    return bool(e) and len(e) <= 320 and EMAIL_RE.match(e) is not None


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so a search for '50%' matches the literal text."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_int(args: Mapping[str, str], key: str, default: int, errs: dict[str, str]) -> int:
    raw = (args.get(key) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        errs[key] = "must be an integer"
        return default


def parse_list_params(args: Mapping[str, str]) -> ListParams:
    """
    Parse ?page&limit&sortBy&order&search for the customer list.
    page < 1 becomes 1; limit is clamped to [1, MAX_PAGE_SIZE].
    """
    errs: dict[str, str] = {}

    page = max(_parse_int(args, "page", 1, errs), 1)
    limit = min(max(_parse_int(args, "limit", DEFAULT_PAGE_SIZE, errs), 1), MAX_PAGE_SIZE)
    if (page - 1) * limit > MAX_OFFSET:
        errs["page"] = "is out of range"
        page = 1

    sort_raw = (args.get("sortBy") or "").strip() or "createdAt"
    if sort_raw in SORTABLE_FIELDS:
        sort_by = SORTABLE_FIELDS[sort_raw]
    elif sort_raw in SORTABLE_FIELDS.values():
        sort_by = sort_raw
    else:
        sort_by = "created_at"
        errs["sortBy"] = f"must be one of: {', '.join(SORTABLE_FIELDS)}"

    order = (args.get("order") or "").strip().lower() or "desc"
    if order not in ("asc", "desc"):
        errs["order"] = "must be 'asc' or 'desc'"

    search = (args.get("search") or "").strip() or None
    if search and len(search) > MAX_SEARCH_LENGTH:
        errs["search"] = f"must be at most {MAX_SEARCH_LENGTH} characters"

    if errs:
        raise InvalidArgument("Invalid query parameters.", fields=errs)
    return ListParams(page=page, limit=limit, sort_by=sort_by, order=order, search=search)
