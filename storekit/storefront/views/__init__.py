"""
Storefront views package.

Структура:
- catalog.py - главная, каталог, карточка товара
- cart.py - корзина
- checkout.py - заглушка оформления заказа
- admin.py - back-office каталога
"""

from .catalog import home, product_list, product_detail
from .cart import (
    view_cart,
    add_to_cart,
    update_cart,
    remove_from_cart,
    clear_cart,
    cart_count,
)
from .checkout import checkout

__all__ = [
    'home',
    'product_list',
    'product_detail',
    'view_cart',
    'add_to_cart',
    'update_cart',
    'remove_from_cart',
    'clear_cart',
    'cart_count',
    'checkout',
]
