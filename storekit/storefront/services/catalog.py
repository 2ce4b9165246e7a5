"""
Catalog services: категории, теги, атрибуты и товары.

Один путь валидации для API и для HTML back-office. Входные данные могут
прийти из JSON (списки, числа) или из multipart-формы (QueryDict, строки,
списки через запятую), поэтому всё читается через read_value/read_list.

Ошибки: ValidationFailed (400), NotFoundError (404), ConflictError (409).
"""
from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

from django.db import transaction
from django.db.models import Max, Q

from storekit.errors import ConflictError, NotFoundError, ValidationFailed

from ..models import AttributeDefinition, Category, Product, ProductAttribute, ProductImage, Tag

logger = logging.getLogger(__name__)

_MISSING = object()

PRODUCT_SORTS = {
    'newest': ('-created_at', '-id'),
    'price_asc': ('price', '-id'),
    'price_desc': ('-price', '-id'),
    'name_asc': ('name', 'id'),
    'name_desc': ('-name', '-id'),
}
DEFAULT_PRODUCT_SORT = 'newest'

# Границы колонок: DecimalField(max_digits=10, decimal_places=2), целые поля БД
MAX_PRICE = Decimal(10) ** 8
MAX_STOCK = 2147483647
MAX_ID = 9223372036854775807


# ==================== INPUT HELPERS ====================


def read_value(data, key, default=_MISSING):
    """Значение поля или default (_MISSING, если ключа нет)."""
    if data is None or key not in data:
        return default
    if hasattr(data, 'getlist'):
        values = data.getlist(key)
        if len(values) > 1:
            return values
        return values[0] if values else None
    return data[key]


def coerce_list(value) -> list:
    """
    Приводит значение к списку.

    [1, 2] -> [1, 2]; '1,2' -> ['1', '2']; '[1, 2]' -> [1, 2]; '' / None -> [].
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith('['):
            try:
                parsed = json.loads(text)
            except ValueError:
                raise ValidationFailed('Malformed list value')
            if not isinstance(parsed, list):
                raise ValidationFailed('Malformed list value')
            return parsed
        return [part.strip() for part in text.split(',') if part.strip()]
    return [value]


def read_list(data, key):
    """Список из поля или None, если поле не передано."""
    value = read_value(data, key)
    if value is _MISSING:
        return None
    return coerce_list(value)


def parse_id(raw, label='ID'):
    if isinstance(raw, bool):
        raise ValidationFailed(f'Invalid {label}')
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationFailed(f'Invalid {label}')
    if value < 1 or value > MAX_ID:
        raise ValidationFailed(f'Invalid {label}')
    return value


def parse_ids(values: Iterable[Any], label='ID') -> List[int]:
    return [parse_id(value, label) for value in values]


def parse_price(raw) -> Decimal:
    try:
        price = Decimal(str(raw).strip())
        if not price.is_finite():
            raise ValueError
        if price >= MAX_PRICE:
            raise ValidationFailed('Price is too large')
        price = price.quantize(Decimal('0.01'))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationFailed('Price must be a valid number')
    if price < 0:
        raise ValidationFailed('Price cannot be negative')
    return price


def parse_stock(raw) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return 0
    try:
        stock = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationFailed('Stock quantity must be a valid integer')
    if stock < 0:
        raise ValidationFailed('Stock quantity cannot be negative')
    if stock > MAX_STOCK:
        raise ValidationFailed('Stock quantity is too large')
    return stock


def require_name(raw, label='Name'):
    name = '' if raw is None else str(raw).strip()
    if not name:
        raise ValidationFailed(f'{label} is required')
    return name


# ==================== CATEGORIES ====================


def resolve_category(raw) -> Optional[Category]:
    """'' / None -> без категории; мусор -> 400; нет такой -> 404."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    category_id = parse_id(raw, 'category ID')
    try:
        return Category.objects.get(pk=category_id)
    except Category.DoesNotExist:
        raise NotFoundError('Category not found')


def _resolve_parent(category: Optional[Category], raw) -> Optional[Category]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    parent_id = parse_id(raw, 'parent category ID')
    if category is not None and category.pk is not None:
        if parent_id == category.pk:
            raise ValidationFailed('A category cannot be its own parent')
        if parent_id in category.descendant_ids():
            raise ValidationFailed('A category cannot be nested under its own subcategory')
    try:
        return Category.objects.get(pk=parent_id)
    except Category.DoesNotExist:
        raise NotFoundError('Parent category not found')


def save_category(data, instance: Optional[Category] = None) -> Category:
    """Создание (instance=None) или частичное обновление категории."""
    category = instance or Category()
    raw_name = read_value(data, 'name')
    if instance is None or raw_name is not _MISSING:
        category.name = require_name(None if raw_name is _MISSING else raw_name)

    raw_parent = read_value(data, 'parent')
    if raw_parent is not _MISSING:
        category.parent = _resolve_parent(category, raw_parent)

    category.save()
    logger.info('Category %s: id=%s slug=%s', 'created' if instance is None else 'updated',
                category.pk, category.slug)
    return category


def delete_category(category: Category) -> None:
    if category.children.exists():
        raise ValidationFailed(
            'Cannot delete category: it has subcategories. Reassign or delete them first.'
        )
    pk = category.pk
    category.delete()
    logger.info('Category deleted: id=%s', pk)


# ==================== TAGS ====================


def save_tag(data, instance: Optional[Tag] = None) -> Tag:
    tag = instance or Tag()
    raw_name = read_value(data, 'name')
    if instance is None or raw_name is not _MISSING:
        tag.name = require_name(None if raw_name is _MISSING else raw_name)
    tag.save()
    logger.info('Tag %s: id=%s slug=%s', 'created' if instance is None else 'updated', tag.pk, tag.slug)
    return tag


def resolve_tags(raw_values: Iterable[Any]) -> List[Tag]:
    ids = list(dict.fromkeys(parse_ids(raw_values, 'tag ID')))
    tags = list(Tag.objects.filter(pk__in=ids))
    if len(tags) != len(ids):
        raise ValidationFailed('One or more tags not found')
    return tags


# ==================== ATTRIBUTES ====================


def save_attribute(data, instance: Optional[AttributeDefinition] = None) -> AttributeDefinition:
    """
    name обязателен и уникален (409 при дубле), possible_values принимает
    строку через запятую или список.
    """
    definition = instance or AttributeDefinition()

    raw_name = read_value(data, 'name')
    if instance is None or raw_name is not _MISSING:
        name = require_name(None if raw_name is _MISSING else raw_name, 'Attribute name')
        duplicates = AttributeDefinition.objects.filter(name__iexact=name)
        if definition.pk is not None:
            duplicates = duplicates.exclude(pk=definition.pk)
        if duplicates.exists():
            raise ConflictError(f'Attribute definition with name "{name}" already exists')
        definition.name = name

    raw_values = read_value(data, 'possible_values')
    if raw_values is not _MISSING:
        if hasattr(data, 'getlist') and isinstance(raw_values, list):
            raw_values = ','.join(raw_values)
        definition.possible_values = AttributeDefinition.parse_possible_values(raw_values)

    definition.save()
    logger.info('Attribute %s: id=%s name=%s', 'created' if instance is None else 'updated',
                definition.pk, definition.name)
    return definition


def _parse_attribute_items(raw_items) -> list:
    """
    [{definition, value}] -> [(AttributeDefinition, value)].

    Пустые значения пропускаются; значение обязано входить в possible_values,
    если они заданы.
    """
    items = coerce_list(raw_items)
    cleaned = []
    seen = set()
    for item in items:
        if isinstance(item, str):
            try:
                item = json.loads(item)
            except ValueError:
                raise ValidationFailed('Malformed custom attribute')
        if not isinstance(item, dict):
            raise ValidationFailed('Each custom attribute must be an object with definition and value')
        value = item.get('value')
        value = '' if value is None else str(value).strip()
        if not value:
            continue
        definition_id = parse_id(item.get('definition'), 'attribute definition ID')
        if definition_id in seen:
            raise ValidationFailed('Duplicate custom attribute definition')
        seen.add(definition_id)
        cleaned.append((definition_id, value))

    definitions = AttributeDefinition.objects.in_bulk([pk for pk, _ in cleaned])
    result = []
    for definition_id, value in cleaned:
        definition = definitions.get(definition_id)
        if definition is None:
            raise ValidationFailed(f'Attribute definition {definition_id} not found')
        if not definition.accepts(value):
            raise ValidationFailed(
                f'Invalid value "{value}" for attribute "{definition.name}"',
                errors={'custom_attributes': [f'Allowed values: {", ".join(definition.possible_values)}']},
            )
        result.append((definition, value))
    return result


# ==================== PRODUCTS ====================


def _clean_product_data(data, partial: bool) -> dict:
    cleaned = {}

    raw_name = read_value(data, 'name')
    if raw_name is not _MISSING or not partial:
        cleaned['name'] = require_name(None if raw_name is _MISSING else raw_name)

    raw_description = read_value(data, 'description')
    if raw_description is not _MISSING:
        cleaned['description'] = (raw_description or '').strip()

    raw_price = read_value(data, 'price')
    if raw_price is not _MISSING or not partial:
        if raw_price is _MISSING or raw_price is None or raw_price == '':
            raise ValidationFailed('Price is required')
        cleaned['price'] = parse_price(raw_price)

    raw_stock = read_value(data, 'stock_quantity')
    if raw_stock is not _MISSING:
        cleaned['stock_quantity'] = parse_stock(raw_stock)

    raw_category = read_value(data, 'category')
    if raw_category is not _MISSING:
        cleaned['category'] = resolve_category(raw_category)

    raw_tags = read_list(data, 'tags')
    if raw_tags is not None:
        cleaned['tags'] = resolve_tags(raw_tags)

    raw_attributes = read_value(data, 'custom_attributes')
    if raw_attributes is not _MISSING:
        cleaned['custom_attributes'] = _parse_attribute_items(raw_attributes)

    keep_images = read_list(data, 'keep_images')
    if keep_images is not None:
        cleaned['keep_images'] = set(parse_ids(keep_images, 'image ID'))

    return cleaned


def _apply_relations(product: Product, cleaned: dict) -> None:
    if 'tags' in cleaned:
        product.tags.set(cleaned['tags'])
    if 'custom_attributes' in cleaned:
        product.custom_attributes.all().delete()
        ProductAttribute.objects.bulk_create([
            ProductAttribute(product=product, definition=definition, value=value)
            for definition, value in cleaned['custom_attributes']
        ])


def _drop_images(images) -> int:
    count = 0
    for image in images:
        image.image.delete(save=False)
        image.delete()
        count += 1
    return count


def _append_images(product: Product, uploads) -> int:
    uploads = [upload for upload in (uploads or []) if upload]
    if not uploads:
        return 0
    max_order = product.images.aggregate(max_order=Max('order'))['max_order']
    start = 0 if max_order is None else max_order + 1
    for offset, upload in enumerate(uploads):
        ProductImage.objects.create(product=product, image=upload, order=start + offset)
    return len(uploads)


def create_product(data, images=None) -> Product:
    cleaned = _clean_product_data(data, partial=False)
    with transaction.atomic():
        product = Product(
            name=cleaned['name'],
            description=cleaned.get('description', ''),
            price=cleaned['price'],
            stock_quantity=cleaned.get('stock_quantity', 0),
            category=cleaned.get('category'),
        )
        product.save()
        _apply_relations(product, cleaned)
        added = _append_images(product, images)

    logger.info('Product created: id=%s slug=%s images=%s', product.pk, product.slug, added)
    return product


def update_product(product: Product, data, images=None) -> Product:
    """
    Частичное обновление: меняются только переданные поля.

    category='' снимает категорию, tags=[] очищает теги; keep_images
    (список id) удаляет все остальные изображения, новые загрузки
    добавляются в конец.
    """
    cleaned = _clean_product_data(data, partial=True)
    with transaction.atomic():
        for field in ('name', 'description', 'price', 'stock_quantity', 'category'):
            if field in cleaned:
                setattr(product, field, cleaned[field])
        product.save()
        _apply_relations(product, cleaned)

        removed = 0
        if 'keep_images' in cleaned:
            removed = _drop_images(product.images.exclude(pk__in=cleaned['keep_images']))
        added = _append_images(product, images)

    logger.info('Product updated: id=%s fields=%s images +%s -%s',
                product.pk, sorted(k for k in cleaned if k != 'keep_images'), added, removed)
    return product


def delete_product(product: Product) -> None:
    pk = product.pk
    with transaction.atomic():
        _drop_images(product.images.all())
        product.delete()
    logger.info('Product deleted: id=%s', pk)


def product_queryset():
    return (
        Product.objects.select_related('category')
        .prefetch_related('tags', 'images', 'custom_attributes__definition')
    )


def public_product_queryset(params):
    """
    Публичный список товаров с фильтрами.

    Query params:
        - category: slug категории
        - tag: slug тега
        - q: подстрока названия (без учёта регистра)
        - sort: newest | price_asc | price_desc | name_asc | name_desc

    Returns:
        QuerySet или None, если category/tag с таким slug нет
        (ответ тогда пустая страница, а не 404).
    """
    queryset = product_queryset()

    category_slug = (params.get('category') or '').strip()
    if category_slug:
        category = Category.objects.filter(slug=category_slug).first()
        if category is None:
            return None
        queryset = queryset.filter(category=category)

    tag_slug = (params.get('tag') or '').strip()
    if tag_slug:
        tag = Tag.objects.filter(slug=tag_slug).first()
        if tag is None:
            return None
        queryset = queryset.filter(tags=tag)

    query = (params.get('q') or '').strip()
    if query:
        queryset = queryset.filter(Q(name__icontains=query))

    sort = params.get('sort') or DEFAULT_PRODUCT_SORT
    ordering = PRODUCT_SORTS.get(sort, PRODUCT_SORTS[DEFAULT_PRODUCT_SORT])
    return queryset.order_by(*ordering)
