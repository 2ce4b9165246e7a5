"""
Пагинация: арифметика страниц и конверт для JSON API.

Формат ответа списков:
    {<items_key>: [...], "currentPage": n, "totalPages": n, <total_key>: n}
"""

import math
from dataclasses import dataclass, field

from django.conf import settings
from rest_framework.pagination import BasePagination
from rest_framework.response import Response


def parse_positive_int(value, default):
    """int(value), если это целое >= 1; иначе default."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


@dataclass
class Page:
    items: list = field(default_factory=list)
    number: int = 1
    limit: int = 10
    total: int = 0

    @classmethod
    def empty(cls, limit):
        return cls(items=[], number=1, limit=limit, total=0)

    @property
    def total_pages(self):
        if not self.total:
            return 0
        return math.ceil(self.total / self.limit)

    @property
    def has_previous(self):
        return self.number > 1

    @property
    def has_next(self):
        return self.number < self.total_pages

    @property
    def previous_number(self):
        return self.number - 1

    @property
    def next_number(self):
        return self.number + 1

    @property
    def page_range(self):
        return range(1, self.total_pages + 1)

    def to_payload(self, items, items_key, total_key):
        return {
            items_key: items,
            'currentPage': self.number,
            'totalPages': self.total_pages,
            total_key: self.total,
        }


def paginate(queryset, page=None, limit=None, default_limit=None):
    """
    Режет queryset на страницу.

    page/limit приходят строками из query params; мусор и значения < 1
    заменяются на 1 и default_limit. Страница за концом списка даёт
    пустой items при корректном total.
    """
    default_limit = default_limit or settings.BACKOFFICE_PAGE_SIZE
    number = parse_positive_int(page, 1)
    size = min(parse_positive_int(limit, default_limit), settings.MAX_PAGE_SIZE)
    total = queryset.count()
    offset = (number - 1) * size
    items = list(queryset[offset:offset + size]) if offset < total else []
    return Page(items=items, number=number, limit=size, total=total)


class EnvelopePagination(BasePagination):
    """DRF-пагинатор поверх paginate() с именованными ключами конверта."""
    items_key = 'results'
    total_key = 'total'
    default_limit_setting = 'BACKOFFICE_PAGE_SIZE'

    def paginate_queryset(self, queryset, request, view=None):
        self.page = paginate(
            queryset,
            request.query_params.get('page'),
            request.query_params.get('limit'),
            getattr(settings, self.default_limit_setting),
        )
        return self.page.items

    def get_paginated_response(self, data):
        return Response(self.page.to_payload(data, self.items_key, self.total_key))

    def empty_response(self):
        page = Page.empty(getattr(settings, self.default_limit_setting))
        return Response(page.to_payload([], self.items_key, self.total_key))
