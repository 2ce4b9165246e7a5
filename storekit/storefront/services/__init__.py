"""
Storefront services.

    - slugs: генерация уникальных slug
    - catalog: категории, теги, атрибуты, товары
    - cart: корзина в сессии
"""
