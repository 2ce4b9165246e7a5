"""
Django REST Framework Serializers for Storefront API.

Сериализаторы только на чтение: запись идёт через storefront.services.catalog,
чтобы у API и back-office была одна валидация.
"""

from rest_framework import serializers

from .models import AttributeDefinition, Category, Product, ProductAttribute, ProductImage, Tag


class CategorySerializer(serializers.ModelSerializer):
    """
    Fields:
        - id, name, slug
        - parent: id родительской категории или null
        - parent_name: название родителя (read-only)
    """
    parent_name = serializers.CharField(source='parent.name', read_only=True, default=None)

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'parent', 'parent_name', 'created_at', 'updated_at']
        read_only_fields = fields


class CategoryBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'slug']
        read_only_fields = fields


class TagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ['id', 'name', 'slug', 'created_at', 'updated_at']
        read_only_fields = fields


class AttributeDefinitionSerializer(serializers.ModelSerializer):
    class Meta:
        model = AttributeDefinition
        fields = ['id', 'name', 'possible_values', 'created_at', 'updated_at']
        read_only_fields = fields


class ProductImageSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = ProductImage
        fields = ['id', 'url', 'order']

    def get_url(self, obj):
        if not obj.image:
            return ''
        request = self.context.get('request')
        url = obj.image.url
        return request.build_absolute_uri(url) if request else url


class ProductAttributeSerializer(serializers.ModelSerializer):
    """Значение атрибута вместе с именем и допустимыми значениями определения."""
    definition = AttributeDefinitionSerializer(read_only=True)

    class Meta:
        model = ProductAttribute
        fields = ['definition', 'value']


class ProductCardSerializer(serializers.ModelSerializer):
    """
    Короткая карточка товара: для каруселей на главной.
    """
    image = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'name', 'slug', 'price', 'stock_quantity', 'image']
        read_only_fields = fields

    def get_image(self, obj):
        main = obj.main_image
        if not main:
            return ''
        request = self.context.get('request')
        return request.build_absolute_uri(main.image.url) if request else main.image.url


class ProductSerializer(serializers.ModelSerializer):
    """
    Полное представление товара: категория, теги, атрибуты и изображения.
    """
    category = CategoryBriefSerializer(read_only=True)
    tags = TagSerializer(many=True, read_only=True)
    custom_attributes = ProductAttributeSerializer(many=True, read_only=True)
    images = ProductImageSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'description', 'price', 'stock_quantity',
            'category', 'tags', 'custom_attributes', 'images',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields
