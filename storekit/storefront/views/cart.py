"""
Cart views - Корзина покупок.

Содержит views для:
- Просмотра корзины
- Добавления товаров
- Обновления количества
- Удаления товаров
- Очистки корзины
- Счётчика для мини-корзины (JSON)
"""

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_POST

from storekit.errors import ServiceError

from ..services.cart import SessionCart


def _back(request, fallback='cart'):
    next_url = request.POST.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return redirect(next_url)
    return redirect(fallback)


# ==================== CART VIEWS ====================


@never_cache
def view_cart(request):
    """
    Страница просмотра корзины.

    Context:
        lines: строки корзины (CartLine) с актуальными ценами
        total_items: количество единиц товара
        subtotal: сумма
    """
    cart = SessionCart(request.session)
    lines = cart.lines()
    return render(request, 'storefront/cart.html', {
        'lines': lines,
        'total_items': cart.total_items(lines),
        'subtotal': cart.subtotal(lines),
    })


@require_POST
def add_to_cart(request):
    try:
        line = SessionCart(request.session).add(
            request.POST.get('product_id'), request.POST.get('quantity', 1)
        )
    except ServiceError as exc:
        messages.error(request, exc.message)
    else:
        messages.success(request, f'«{line.product.name}» додано до кошика')
    return _back(request)


@require_POST
def update_cart(request):
    try:
        SessionCart(request.session).update(
            request.POST.get('product_id'), request.POST.get('quantity')
        )
    except ServiceError as exc:
        messages.error(request, exc.message)
    return redirect('cart')


@require_POST
def remove_from_cart(request):
    SessionCart(request.session).remove(request.POST.get('product_id'))
    return redirect('cart')


@require_POST
def clear_cart(request):
    SessionCart(request.session).clear()
    messages.info(request, 'Кошик очищено')
    return redirect('cart')


@never_cache
def cart_count(request):
    """Мини-корзина: {count, subtotal}."""
    cart = SessionCart(request.session)
    lines = cart.lines()
    return JsonResponse({
        'count': cart.total_items(lines),
        'subtotal': str(cart.subtotal(lines)),
    })
