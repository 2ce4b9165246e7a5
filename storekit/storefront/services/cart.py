"""
Session cart.

Корзина хранится в сессии под ключом 'cart' как {product_id: {'qty': n}}.
Цена, название и изображение ВСЕГДА берутся из Product при чтении, а не
из сессии. Строки удалённых товаров выбрасываются при чтении.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from storekit.errors import NotFoundError, ValidationFailed

from ..models import Product

cart_logger = logging.getLogger('storefront.cart')

SESSION_KEY = 'cart'


def get_cart_from_session(session) -> dict:
    """Копия корзины из сессии (мутации только через save_cart_to_session)."""
    return dict(session.get(SESSION_KEY, {}))


def save_cart_to_session(session, cart: dict) -> None:
    session[SESSION_KEY] = cart
    session.modified = True


def _parse_quantity(raw, default=1) -> int:
    if raw is None or raw == '':
        return default
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationFailed('Quantity must be a valid integer')


@dataclass
class CartLine:
    product: Product
    qty: int

    @property
    def unit_price(self) -> Decimal:
        return self.product.price

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.qty

    def to_payload(self, request=None):
        image = self.product.main_image
        image_url = image.image.url if image else ''
        if image_url and request is not None:
            image_url = request.build_absolute_uri(image_url)
        return {
            'product_id': self.product.pk,
            'name': self.product.name,
            'slug': self.product.slug,
            'price': str(self.unit_price),
            'image': image_url,
            'qty': self.qty,
            'stock_quantity': self.product.stock_quantity,
            'line_total': str(self.line_total),
        }


class SessionCart:
    """
    Операции с корзиной поверх request.session.

    Usage:
        cart = SessionCart(request.session)
        cart.add(product_id, 2)
        cart.lines(), cart.total_items(), cart.subtotal()
    """

    def __init__(self, session):
        self.session = session

    # ---- чтение ----

    def _raw(self) -> dict:
        return get_cart_from_session(self.session)

    def lines(self) -> List[CartLine]:
        cart = self._raw()
        if not cart:
            return []
        ids = []
        for key in cart:
            try:
                ids.append(int(key))
            except (TypeError, ValueError):
                continue
        products = Product.objects.prefetch_related('images').in_bulk(ids)

        lines = []
        stale = []
        for key, item in cart.items():
            try:
                product = products.get(int(key))
            except (TypeError, ValueError):
                product = None
            if product is None:
                stale.append(key)
                continue
            try:
                qty = int(item.get('qty', 0))
            except (AttributeError, TypeError, ValueError):
                qty = 0
            if qty < 1:
                stale.append(key)
                continue
            lines.append(CartLine(product=product, qty=qty))

        if stale:
            for key in stale:
                cart.pop(key, None)
            save_cart_to_session(self.session, cart)
            cart_logger.info('Dropped stale cart lines: %s', stale)
        return lines

    def quantity_of(self, product_id) -> int:
        item = self._raw().get(str(product_id))
        return int(item.get('qty', 0)) if item else 0

    def total_items(self, lines: Optional[List[CartLine]] = None) -> int:
        lines = self.lines() if lines is None else lines
        return sum(line.qty for line in lines)

    def subtotal(self, lines: Optional[List[CartLine]] = None) -> Decimal:
        lines = self.lines() if lines is None else lines
        return sum((line.line_total for line in lines), Decimal('0'))

    def summary(self, request=None) -> dict:
        lines = self.lines()
        return {
            'items': [line.to_payload(request) for line in lines],
            'total_items': self.total_items(lines),
            'subtotal': str(self.subtotal(lines)),
        }

    # ---- изменения ----

    def _get_product(self, product_id) -> Product:
        try:
            pk = int(str(product_id).strip())
        except (TypeError, ValueError):
            raise ValidationFailed('Invalid product ID')
        try:
            return Product.objects.get(pk=pk)
        except Product.DoesNotExist:
            raise NotFoundError('Product not found')

    def _check_stock(self, product: Product, qty: int) -> None:
        if qty > product.stock_quantity:
            cart_logger.warning('Not enough stock for product id=%s: requested=%s available=%s',
                                product.pk, qty, product.stock_quantity)
            raise ValidationFailed(
                'Not enough stock',
                errors={'quantity': [f'Only {product.stock_quantity} left in stock']},
            )

    def add(self, product_id, quantity=1) -> CartLine:
        """Добавляет товар; повторное добавление увеличивает количество."""
        product = self._get_product(product_id)
        qty = max(_parse_quantity(quantity), 1)

        cart = self._raw()
        key = str(product.pk)
        new_qty = int(cart.get(key, {}).get('qty', 0)) + qty
        self._check_stock(product, new_qty)

        cart[key] = {'qty': new_qty}
        save_cart_to_session(self.session, cart)
        cart_logger.info('Cart add: product=%s qty=%s -> %s', product.pk, qty, new_qty)
        return CartLine(product=product, qty=new_qty)

    def update(self, product_id, quantity) -> Optional[CartLine]:
        """Устанавливает количество; quantity <= 0 удаляет строку."""
        qty = _parse_quantity(quantity, default=None)
        if qty is None:
            raise ValidationFailed('Quantity is required')

        cart = self._raw()
        key = str(product_id).strip()
        if key not in cart:
            raise NotFoundError('Product is not in the cart')

        if qty <= 0:
            self.remove(product_id)
            return None

        product = self._get_product(product_id)
        self._check_stock(product, qty)
        cart[key] = {'qty': qty}
        save_cart_to_session(self.session, cart)
        cart_logger.info('Cart update: product=%s qty=%s', product.pk, qty)
        return CartLine(product=product, qty=qty)

    def remove(self, product_id) -> bool:
        cart = self._raw()
        removed = cart.pop(str(product_id).strip(), None) is not None
        if removed:
            save_cart_to_session(self.session, cart)
            cart_logger.info('Cart remove: product=%s', product_id)
        return removed

    def clear(self) -> None:
        save_cart_to_session(self.session, {})
        cart_logger.info('Cart cleared')
