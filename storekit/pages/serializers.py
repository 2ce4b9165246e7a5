from rest_framework import serializers

from storefront.serializers import ProductCardSerializer

from .element_types import PRODUCT_CAROUSEL
from .models import PageElement


class PageElementSerializer(serializers.ModelSerializer):
    class Meta:
        model = PageElement
        fields = ['id', 'page_identifier', 'element_type', 'order', 'config', 'created_at', 'updated_at']
        read_only_fields = fields


def resolved_element_payload(item, context=None):
    """
    ResolvedElement -> JSON для публичного API. У карусели в config
    добавляется resolvedProducts.
    """
    data = PageElementSerializer(item.element, context=context).data
    config = dict(item.config)
    if item.element_type == PRODUCT_CAROUSEL:
        config['resolvedProducts'] = ProductCardSerializer(item.products, many=True, context=context).data
    data['config'] = config
    return data
