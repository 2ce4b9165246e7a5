"""
Admin views - back-office каталога.

Содержит views для:
- Дашборда (счётчики, товары с низким остатком)
- Товаров: список, создание, редактирование, удаление
- Категорий, тегов и атрибутов: список, создание, редактирование, удаление

Все изменения идут через storefront.services.catalog, как и в API.
"""

import logging
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.models import User
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from accounts.permissions import admin_required
from pages.models import HOMEPAGE, PageElement
from storekit.errors import ServiceError
from storekit.pagination import paginate

from ..forms import AttributeDefinitionForm, CategoryForm, ProductForm, TagForm
from ..models import AttributeDefinition, Category, Product, Tag
from ..services import catalog

logger = logging.getLogger(__name__)


def _save_form(request, form, save, success_message, success_url):
    """
    Общий шаг POST: форма -> сервис. Ошибка сервиса уходит в non-field errors.

    Returns:
        redirect при успехе, иначе None (нужно отрисовать форму снова)
    """
    if not form.is_valid():
        return None
    try:
        save(form.to_service_data())
    except ServiceError as exc:
        form.add_error(None, exc.message)
        return None
    messages.success(request, success_message)
    return redirect(success_url)


# ==================== DASHBOARD ====================


@admin_required
def dashboard(request):
    low_stock = (
        Product.objects.filter(stock_quantity__lte=settings.LOW_STOCK_THRESHOLD)
        .order_by('stock_quantity', 'name')[:10]
    )
    return render(request, 'backoffice/dashboard.html', {
        'stats': {
            'products': Product.objects.count(),
            'categories': Category.objects.count(),
            'tags': Tag.objects.count(),
            'attributes': AttributeDefinition.objects.count(),
            'users': User.objects.count(),
            'homepage_elements': PageElement.objects.filter(page_identifier=HOMEPAGE).count(),
        },
        'low_stock': low_stock,
        'low_stock_threshold': settings.LOW_STOCK_THRESHOLD,
    })


# ==================== PRODUCTS ====================


@admin_required
def products(request):
    """
    Список товаров (новые первыми).

    Query params:
        q: поиск по названию
        page
    """
    queryset = catalog.product_queryset().order_by('-created_at', '-id')
    search = (request.GET.get('q') or '').strip()
    if search:
        queryset = queryset.filter(name__icontains=search)
    page = paginate(queryset, request.GET.get('page'))
    return render(request, 'backoffice/products.html', {
        'page': page,
        'query': search,
        'querystring': urlencode({'q': search}) if search else '',
    })


@admin_required
def product_create(request):
    form = ProductForm(request.POST or None, request.FILES or None)
    if request.method == 'POST':
        response = _save_form(
            request, form,
            lambda data: catalog.create_product(data, form.cleaned_data.get('extra_images')),
            'Товар створено', 'admin_products',
        )
        if response:
            return response
    return render(request, 'backoffice/product_form.html', {'form': form, 'product': None})


@admin_required
def product_edit(request, pk):
    product = get_object_or_404(Product, pk=pk)
    form = ProductForm(request.POST or None, request.FILES or None, instance=product)
    if request.method == 'POST':
        response = _save_form(
            request, form,
            lambda data: catalog.update_product(product, data, form.cleaned_data.get('extra_images')),
            'Товар оновлено', 'admin_products',
        )
        if response:
            return response
    return render(request, 'backoffice/product_form.html', {'form': form, 'product': product})


@admin_required
@require_POST
def product_delete(request, pk):
    product = get_object_or_404(Product, pk=pk)
    catalog.delete_product(product)
    messages.success(request, 'Товар видалено')
    return redirect('admin_products')


# ==================== CATEGORIES ====================


@admin_required
def categories(request):
    return render(request, 'backoffice/categories.html', {
        'categories': Category.objects.select_related('parent').order_by('name'),
    })


@admin_required
def category_form(request, pk=None):
    category = get_object_or_404(Category, pk=pk) if pk else None
    form = CategoryForm(request.POST or None, instance=category)
    if request.method == 'POST':
        response = _save_form(
            request, form,
            lambda data: catalog.save_category(data, category),
            'Категорію збережено', 'admin_categories',
        )
        if response:
            return response
    return render(request, 'backoffice/simple_form.html', {
        'form': form,
        'object': category,
        'title': 'Категорія',
        'back_url': 'admin_categories',
    })


@admin_required
@require_POST
def category_delete(request, pk):
    category = get_object_or_404(Category, pk=pk)
    try:
        catalog.delete_category(category)
    except ServiceError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, 'Категорію видалено')
    return redirect('admin_categories')


# ==================== TAGS ====================


@admin_required
def tags(request):
    return render(request, 'backoffice/tags.html', {'tags': Tag.objects.order_by('name')})


@admin_required
def tag_form(request, pk=None):
    tag = get_object_or_404(Tag, pk=pk) if pk else None
    initial = {'name': tag.name} if tag else None
    form = TagForm(request.POST or None, initial=initial)
    if request.method == 'POST':
        response = _save_form(
            request, form,
            lambda data: catalog.save_tag(data, tag),
            'Тег збережено', 'admin_tags',
        )
        if response:
            return response
    return render(request, 'backoffice/simple_form.html', {
        'form': form,
        'object': tag,
        'title': 'Тег',
        'back_url': 'admin_tags',
    })


@admin_required
@require_POST
def tag_delete(request, pk):
    tag = get_object_or_404(Tag, pk=pk)
    tag.delete()
    logger.info('Tag deleted: id=%s', pk)
    messages.success(request, 'Тег видалено')
    return redirect('admin_tags')


# ==================== ATTRIBUTES ====================


@admin_required
def attributes(request):
    return render(request, 'backoffice/attributes.html', {
        'attributes': AttributeDefinition.objects.order_by('-created_at', '-id'),
    })


@admin_required
def attribute_form(request, pk=None):
    definition = get_object_or_404(AttributeDefinition, pk=pk) if pk else None
    form = AttributeDefinitionForm(request.POST or None, instance=definition)
    if request.method == 'POST':
        response = _save_form(
            request, form,
            lambda data: catalog.save_attribute(data, definition),
            'Атрибут збережено', 'admin_attributes',
        )
        if response:
            return response
    return render(request, 'backoffice/simple_form.html', {
        'form': form,
        'object': definition,
        'title': 'Атрибут',
        'back_url': 'admin_attributes',
    })


@admin_required
@require_POST
def attribute_delete(request, pk):
    definition = get_object_or_404(AttributeDefinition, pk=pk)
    definition.delete()
    logger.info('Attribute definition deleted: id=%s', pk)
    messages.success(request, 'Атрибут видалено')
    return redirect('admin_attributes')
