"""
Page builder services.

Все операции ограничены page_identifier: блок другой страницы для них
не существует (404 при update/delete, игнорируется при reorder).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from storefront.models import Product
from storekit.errors import NotFoundError, ValidationFailed

from .element_types import PRODUCT_CAROUSEL, get_element_type, validate_config
from .models import PageElement

logger = logging.getLogger(__name__)
reorder_logger = logging.getLogger('pages.reorder')

_MISSING = object()

# Диапазоны колонок: IntegerField order и BigAutoField id
MIN_ORDER = -2147483648
MAX_ORDER = 2147483647
MAX_ELEMENT_ID = 9223372036854775807


def parse_order(raw, label='Order'):
    """
    order: целое число. JSON-числа с дробной частью .0 допустимы,
    bool и нечисловые строки нет.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValidationFailed(f'{label} must be a number.')
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            raise ValidationFailed(f'{label} must be a whole number.')
        value = int(raw)
    elif isinstance(raw, str):
        try:
            value = int(raw.strip())
        except ValueError:
            raise ValidationFailed(f'{label} must be a number.')
    else:
        raise ValidationFailed(f'{label} must be a number.')
    if not MIN_ORDER <= value <= MAX_ORDER:
        raise ValidationFailed(f'{label} is out of range.')
    return value


def list_elements(page_identifier):
    return PageElement.objects.filter(page_identifier=page_identifier).order_by('order', 'id')


def get_element(page_identifier, element_id) -> PageElement:
    try:
        pk = int(element_id)
    except (TypeError, ValueError):
        raise ValidationFailed('Invalid element ID')
    if pk < 1 or pk > MAX_ELEMENT_ID:
        raise ValidationFailed('Invalid element ID')
    try:
        return PageElement.objects.get(pk=pk, page_identifier=page_identifier)
    except PageElement.DoesNotExist:
        raise NotFoundError('Element not found on this page')


def next_order(page_identifier) -> int:
    current = list_elements(page_identifier).aggregate(max_order=Max('order'))['max_order']
    if current is None:
        return 0
    if current >= MAX_ORDER:
        raise ValidationFailed('Order is out of range.')
    return current + 1


def create_element(page_identifier, element_type, config, order=None) -> PageElement:
    """
    Новый блок. Без order встаёт в конец страницы (max + 1, на пустой 0).
    """
    definition = get_element_type(element_type)
    clean_config = validate_config(definition, config)
    clean_order = next_order(page_identifier) if order is None else parse_order(order)

    element = PageElement.objects.create(
        page_identifier=page_identifier,
        element_type=definition.name,
        config=clean_config,
        order=clean_order,
    )
    logger.info('Page element created: page=%s id=%s type=%s order=%s',
                page_identifier, element.pk, element.element_type, element.order)
    return element


def update_element(page_identifier, element_id, data) -> PageElement:
    """
    Меняет element_type / config / order. Хотя бы одно поле обязательно;
    config проверяется по итоговому типу.
    """
    element = get_element(page_identifier, element_id)

    raw_type = data.get('element_type', _MISSING) if data is not None else _MISSING
    raw_config = data.get('config', _MISSING) if data is not None else _MISSING
    raw_order = data.get('order', _MISSING) if data is not None else _MISSING
    if raw_type is _MISSING and raw_config is _MISSING and raw_order is _MISSING:
        raise ValidationFailed('No valid fields provided for update (element_type, config, order).')

    update_fields = ['updated_at']
    if raw_type is not _MISSING or raw_config is not _MISSING:
        definition = get_element_type(element.element_type if raw_type is _MISSING else raw_type)
        config = element.config if raw_config is _MISSING else raw_config
        element.element_type = definition.name
        element.config = validate_config(definition, config)
        update_fields += ['element_type', 'config']
    if raw_order is not _MISSING:
        element.order = parse_order(raw_order)
        update_fields.append('order')

    element.save(update_fields=update_fields)
    logger.info('Page element updated: page=%s id=%s fields=%s', page_identifier, element.pk, update_fields[1:])
    return element


def delete_element(page_identifier, element_id) -> None:
    element = get_element(page_identifier, element_id)
    pk = element.pk
    element.delete()
    logger.info('Page element deleted: page=%s id=%s', page_identifier, pk)


def _parse_reorder_items(items) -> Dict[int, int]:
    if not isinstance(items, (list, tuple)):
        raise ValidationFailed('Invalid request body. Expected an array of elements to reorder.')
    if not items:
        raise ValidationFailed('No elements provided for reordering.')

    pairs: Dict[int, int] = {}
    for index, item in enumerate(items):
        raw_id = item.get('id') if isinstance(item, dict) else None
        try:
            if isinstance(raw_id, bool):
                raise ValueError
            element_id = int(raw_id)
            if not 1 <= element_id <= MAX_ELEMENT_ID or str(element_id) != str(raw_id).strip():
                raise ValueError
        except (TypeError, ValueError):
            raise ValidationFailed(
                f'Invalid data for element ID {raw_id!r} (index {index}): ID must be valid.'
            )
        try:
            order = parse_order(item.get('order'))
        except ValidationFailed as exc:
            raise ValidationFailed(
                f'Invalid data for element ID {raw_id!r} (index {index}): {exc.message}'
            )
        pairs[element_id] = order
    return pairs


def reorder_elements(page_identifier, items) -> int:
    """
    Массовая смена порядка после drag-and-drop.

    items: [{id, order}, ...]. Обновление одной транзакцией и только для
    блоков этой страницы; чужие id молча пропускаются.

    Returns:
        int: сколько блоков реально поменяли order
    """
    pairs = _parse_reorder_items(items)

    with transaction.atomic():
        elements = (
            PageElement.objects.select_for_update()
            .filter(page_identifier=page_identifier, pk__in=list(pairs))
        )
        now = timezone.now()
        changed: List[PageElement] = []
        for element in elements:
            new_order = pairs[element.pk]
            if element.order != new_order:
                element.order = new_order
                element.updated_at = now
                changed.append(element)
        if changed:
            PageElement.objects.bulk_update(changed, ['order', 'updated_at'])

    reorder_logger.info('Reordered page=%s requested=%s modified=%s', page_identifier, len(pairs), len(changed))
    return len(changed)


def move_element(page_identifier, element_id, direction) -> bool:
    """
    Сдвиг на одну позицию вверх/вниз с перенумерацией страницы 0..n-1.

    Returns:
        False, если блок уже крайний в этом направлении.
    """
    if direction not in ('up', 'down'):
        raise ValidationFailed('Direction must be "up" or "down".')
    element = get_element(page_identifier, element_id)

    ids = list(list_elements(page_identifier).values_list('pk', flat=True))
    index = ids.index(element.pk)
    target = index - 1 if direction == 'up' else index + 1
    if target < 0 or target >= len(ids):
        return False

    ids[index], ids[target] = ids[target], ids[index]
    reorder_elements(page_identifier, [{'id': pk, 'order': position} for position, pk in enumerate(ids)])
    return True


# ==================== PUBLIC RESOLUTION ====================


@dataclass
class ResolvedElement:
    """Блок для витрины: config плюс товары карусели в порядке productIds."""
    element: PageElement
    config: Dict[str, Any]
    products: List[Product] = field(default_factory=list)
    template: Optional[str] = None

    @property
    def element_type(self):
        return self.element.element_type


def _carousel_ids(config) -> List[int]:
    ids = []
    for raw in (config or {}).get('productIds') or []:
        if raw in (None, ''):
            continue
        try:
            value = int(raw)
        except (TypeError, ValueError):
            continue
        if 1 <= value <= MAX_ELEMENT_ID:
            ids.append(value)
    return ids


def resolve_page(page_identifier) -> List[ResolvedElement]:
    """
    Блоки страницы по order. Для ProductCarousel подтягивает товары одним
    запросом; пустые и неизвестные id пропускаются, порядок как в productIds.
    """
    elements = list(list_elements(page_identifier))

    wanted = set()
    for element in elements:
        if element.element_type == PRODUCT_CAROUSEL:
            wanted.update(_carousel_ids(element.config))
    products = Product.objects.prefetch_related('images').in_bulk(list(wanted)) if wanted else {}

    resolved = []
    for element in elements:
        try:
            template = get_element_type(element.element_type).template
        except ValidationFailed:
            # тип мог исчезнуть из реестра; такой блок не рисуем
            logger.warning('Skipping element id=%s with unknown type %s', element.pk, element.element_type)
            continue
        item = ResolvedElement(element=element, config=dict(element.config or {}), template=template)
        if element.element_type == PRODUCT_CAROUSEL:
            item.products = [products[pk] for pk in _carousel_ids(element.config) if pk in products]
        resolved.append(item)
    return resolved
