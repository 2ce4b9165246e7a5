"""
Django REST Framework ViewSets for Storefront API.

Публичные (AllowAny):
    - ProductViewSet, CategoryViewSet, TagViewSet, CartViewSet
Администрирование (IsAdminRole):
    - AdminProductViewSet, AdminCategoryViewSet, AdminTagViewSet,
      AdminAttributeViewSet

Запись выполняют сервисы из storefront.services.catalog; ошибки сервисов
превращаются в JSON в storekit.api_errors.
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from accounts.permissions import IsAdminRole
from storekit.pagination import EnvelopePagination

from .models import AttributeDefinition, Category, Tag
from .serializers import (
    AttributeDefinitionSerializer,
    CategorySerializer,
    ProductSerializer,
    TagSerializer,
)
from .services import catalog
from .services.cart import SessionCart


class ProductPagination(EnvelopePagination):
    items_key = 'products'
    total_key = 'totalProducts'
    default_limit_setting = 'BACKOFFICE_PAGE_SIZE'


class StorefrontProductPagination(ProductPagination):
    default_limit_setting = 'STOREFRONT_PAGE_SIZE'


# ==================== PUBLIC API ====================


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Публичный каталог товаров.

    Предоставляет:
        - list: GET /api/products/?category=&tag=&q=&sort=&page=&limit=
        - retrieve: GET /api/products/{slug}/

    Неизвестный slug категории/тега даёт пустую страницу, а не 404.
    """
    serializer_class = ProductSerializer
    permission_classes = [AllowAny]
    pagination_class = StorefrontProductPagination
    lookup_field = 'slug'

    def get_queryset(self):
        if self.action == 'list':
            return catalog.public_product_queryset(self.request.query_params)
        return catalog.product_queryset()

    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        if queryset is None:
            return self.paginator.empty_response()
        return super().list(request, *args, **kwargs)


class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Категории: GET /api/categories/, GET /api/categories/{slug}/
    """
    serializer_class = CategorySerializer
    permission_classes = [AllowAny]
    lookup_field = 'slug'
    queryset = Category.objects.select_related('parent').order_by('name')


class TagViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = TagSerializer
    permission_classes = [AllowAny]
    lookup_field = 'slug'
    queryset = Tag.objects.order_by('name')


class CartViewSet(viewsets.ViewSet):
    """
    ViewSet для операций с корзиной в сессии.

    Предоставляет:
        - list: GET /api/cart/ - содержимое корзины
        - add: POST /api/cart/add/ {product_id, quantity?}
        - update: POST /api/cart/update/ {product_id, quantity} (<= 0 удаляет)
        - remove: POST /api/cart/remove/ {product_id}
        - clear: POST /api/cart/clear/

    Ответ всегда: {items: [...], total_items, subtotal}
    """
    permission_classes = [AllowAny]

    def _summary(self, request, status_code=status.HTTP_200_OK):
        return Response(SessionCart(request.session).summary(request), status=status_code)

    def list(self, request):
        return self._summary(request)

    @action(detail=False, methods=['post'])
    def add(self, request):
        SessionCart(request.session).add(request.data.get('product_id'), request.data.get('quantity', 1))
        return self._summary(request)

    @action(detail=False, methods=['post'], url_path='update')
    def update_item(self, request):
        SessionCart(request.session).update(request.data.get('product_id'), request.data.get('quantity'))
        return self._summary(request)

    @action(detail=False, methods=['post'])
    def remove(self, request):
        SessionCart(request.session).remove(request.data.get('product_id'))
        return self._summary(request)

    @action(detail=False, methods=['post'])
    def clear(self, request):
        SessionCart(request.session).clear()
        return self._summary(request)


# ==================== ADMIN API ====================


class AdminCatalogViewSet(viewsets.ModelViewSet):
    """Общая основа admin-ViewSet'ов: права и удаление с сообщением."""
    permission_classes = [IsAdminRole]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    deleted_message = 'Deleted successfully'

    def destroy(self, request, *args, **kwargs):
        self.perform_destroy(self.get_object())
        return Response({'message': self.deleted_message}, status=status.HTTP_200_OK)

    def _respond(self, instance, status_code=status.HTTP_200_OK):
        instance = self.get_queryset().get(pk=instance.pk)
        return Response(self.get_serializer(instance).data, status=status_code)


class AdminProductViewSet(AdminCatalogViewSet):
    """
    Товары в back-office.

    Предоставляет:
        - list: GET /api/admin/products/?page=&limit= (новые первыми, limit 10)
        - create: POST /api/admin/products/ (JSON или multipart, files: images)
        - retrieve/update/partial_update/destroy: /api/admin/products/{id}/
    """
    serializer_class = ProductSerializer
    pagination_class = ProductPagination
    deleted_message = 'Product deleted successfully'

    def get_queryset(self):
        return catalog.product_queryset().order_by('-created_at', '-id')

    def create(self, request, *args, **kwargs):
        product = catalog.create_product(request.data, request.FILES.getlist('images'))
        return self._respond(product, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        product = catalog.update_product(self.get_object(), request.data, request.FILES.getlist('images'))
        return self._respond(product)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        catalog.delete_product(instance)


class AdminCategoryViewSet(AdminCatalogViewSet):
    """Категории: имя обязательно, parent может быть пустым; удаление запрещено при наличии детей."""
    serializer_class = CategorySerializer
    deleted_message = 'Category deleted successfully'

    def get_queryset(self):
        return Category.objects.select_related('parent').order_by('name')

    def create(self, request, *args, **kwargs):
        return self._respond(catalog.save_category(request.data), status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        return self._respond(catalog.save_category(request.data, self.get_object()))

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        catalog.delete_category(instance)


class AdminTagViewSet(AdminCatalogViewSet):
    serializer_class = TagSerializer
    deleted_message = 'Tag deleted successfully'

    def get_queryset(self):
        return Tag.objects.order_by('name')

    def create(self, request, *args, **kwargs):
        return self._respond(catalog.save_tag(request.data), status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        return self._respond(catalog.save_tag(request.data, self.get_object()))

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)


class AdminAttributeViewSet(AdminCatalogViewSet):
    """Определения атрибутов: новые первыми, дубль имени -> 409."""
    serializer_class = AttributeDefinitionSerializer
    deleted_message = 'Attribute definition deleted successfully'

    def get_queryset(self):
        return AttributeDefinition.objects.order_by('-created_at', '-id')

    def create(self, request, *args, **kwargs):
        return self._respond(catalog.save_attribute(request.data), status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        return self._respond(catalog.save_attribute(request.data, self.get_object()))

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)
