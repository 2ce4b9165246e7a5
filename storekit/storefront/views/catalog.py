"""
Catalog views - Каталог товаров и главная страница.

Содержит views для:
- Главной страницы (home) из блоков конструктора pages
- Каталога товаров с фильтрами, сортировкой и пагинацией
- Детальной страницы товара
"""

from django.conf import settings
from django.shortcuts import get_object_or_404, render

from pages.models import HOMEPAGE
from pages.services import resolve_page

from ..models import Category, Tag
from ..services import catalog
from ..services.cart import SessionCart
from storekit.pagination import Page, paginate


# ==================== CATALOG VIEWS ====================


def home(request):
    """
    Главная страница сайта.

    Context:
        elements: блоки главной по порядку (ResolvedElement), у каруселей
            уже подставлены товары
    """
    return render(request, 'storefront/home.html', {
        'elements': resolve_page(HOMEPAGE),
    })


def product_list(request):
    """
    Каталог товаров.

    Query Parameters:
        - category / tag: slug фильтра
        - q: поиск по названию
        - sort: newest | price_asc | price_desc | name_asc | name_desc
        - page
    """
    queryset = catalog.public_product_queryset(request.GET)
    if queryset is None:
        page = Page.empty(settings.STOREFRONT_PAGE_SIZE)
    else:
        page = paginate(queryset, request.GET.get('page'), None, settings.STOREFRONT_PAGE_SIZE)

    # query string без page для ссылок пагинации
    params = request.GET.copy()
    params.pop('page', None)

    return render(request, 'storefront/product_list.html', {
        'page': page,
        'products': page.items,
        'categories': Category.objects.order_by('name'),
        'tags': Tag.objects.order_by('name'),
        'current_category': request.GET.get('category', ''),
        'current_tag': request.GET.get('tag', ''),
        'current_sort': request.GET.get('sort') or catalog.DEFAULT_PRODUCT_SORT,
        'query': request.GET.get('q', ''),
        'sort_options': list(catalog.PRODUCT_SORTS),
        'querystring': params.urlencode(),
    })


def product_detail(request, slug):
    """
    Детальная страница товара.

    Context:
        product: товар с категорией, тегами, атрибутами и изображениями
        in_cart: сколько штук уже в корзине
    """
    product = get_object_or_404(catalog.product_queryset(), slug=slug)
    return render(request, 'storefront/product_detail.html', {
        'product': product,
        'images': product.images.all(),
        'attributes': product.custom_attributes.all(),
        'in_cart': SessionCart(request.session).quantity_of(product.pk),
    })
