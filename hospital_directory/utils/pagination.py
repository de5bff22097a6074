from typing import Any, Dict, List, Sequence


def paginate(items: Sequence[Any], page: int, page_size: int) -> Dict[str, Any]:
    """Slice an in-memory result list; ``page`` is zero-based."""
    page = max(page, 0)
    total_items = len(items)
    start = page * page_size
    page_items: List[Any] = list(items[start:start + page_size])

    return {
        "items": page_items,
        "total": total_items,
        "page": page,
        "page_size": page_size,
        "has_more": start + page_size < total_items,
    }


def empty_page(page: int, page_size: int) -> Dict[str, Any]:
    return {"items": [], "total": 0, "page": page, "page_size": page_size, "has_more": False}
