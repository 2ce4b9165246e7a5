"""
Checkout view - заглушка оформления заказа.

Показывает итог корзины и неактивную форму доставки/оплаты. Заказ не создаётся.
"""

from django.shortcuts import render
from django.views.decorators.cache import never_cache

from ..services.cart import SessionCart


@never_cache
def checkout(request):
    cart = SessionCart(request.session)
    lines = cart.lines()
    return render(request, 'storefront/checkout.html', {
        'lines': lines,
        'total_items': cart.total_items(lines),
        'subtotal': cart.subtotal(lines),
    })
