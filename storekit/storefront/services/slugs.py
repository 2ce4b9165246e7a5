import re

_NON_SLUG_CHARS = re.compile(r'[^a-z0-9]+')


def make_slug(value):
    """
    Slug из произвольной строки.

    Нижний регистр, любые серии символов вне [a-z0-9] схлопываются в '-',
    дефисы по краям убираются.

    Example:
        >>> make_slug('  Red T-Shirt (XL) ')
        'red-t-shirt-xl'
    """
    return _NON_SLUG_CHARS.sub('-', (value or '').lower()).strip('-')


def unique_slugify(model, base_slug, exclude_pk=None):
    """
    Створює унікальний slug на основі base_slug для заданої моделі.

    Якщо slug вже існує, додає числовий суфікс (-2, -3, і т.д.)
    до тих пір, поки не знайде унікальне значення. Запис exclude_pk
    (той, що зберігається) не вважається колізією.

    Example:
        >>> unique_slugify(Product, 'my-product')
        'my-product'
        >>> unique_slugify(Product, 'my-product')  # якщо вже існує
        'my-product-2'
    """
    slug = (base_slug or '').strip('-') or 'item'

    queryset = model._default_manager.all()
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)

    uniq = slug
    i = 2
    while queryset.filter(slug=uniq).exists():
        uniq = f"{slug}-{i}"
        i += 1

    return uniq
