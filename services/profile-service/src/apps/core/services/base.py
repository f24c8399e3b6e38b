# services/profile-service/src/apps/core/services/base.py
"""
Helpers shared by the service classes.
"""

from dataclasses import dataclass
from typing import Any, Callable, List

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.paginator import EmptyPage, Paginator
from django.db.models import QuerySet

from common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from apps.core.exceptions import ValidationError


def validated(validator: Callable, value: Any, field: str, **kwargs) -> Any:
    """Run a shared validator, reporting failures as a service ValidationError."""
    try:
        return validator(value, field_name=field, **kwargs)
    except DjangoValidationError as e:
        raise ValidationError(e.messages[0], field=field)


@dataclass
class PageResult:
    items: List[Any]
    count: int
    pages: int
    current_page: int


def paginate(queryset: QuerySet, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> PageResult:
    """Page of ``queryset``; a page past the end is empty."""
    page = max(1, int(page or 1))
    limit = max(1, min(int(limit or DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE))
    paginator = Paginator(queryset, limit)

    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []

    return PageResult(
        items=items,
        count=paginator.count,
        pages=paginator.num_pages if paginator.count else 0,
        current_page=page,
    )
