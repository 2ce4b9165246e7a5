from .services.cart import SessionCart


def cart_summary(request):
    """
    Контекстный процессор: количество товаров в корзине для шапки сайта.
    Строки удалённых товаров отбрасываются так же, как на странице корзины.
    """
    session = getattr(request, 'session', None)
    if session is None:
        return {'cart_total_items': 0}
    return {'cart_total_items': SessionCart(session).total_items()}
