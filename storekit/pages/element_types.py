"""
Реестр типов блоков главной страницы.

Для каждого типа: сериализатор config (валидация JSON API и форм),
форма редактора и шаблон отрисовки на витрине.

    HeroBanner      {title*, subtitle, imageUrl, buttonText, buttonLink}
    ProductCarousel {title*, productIds: [id, ...]}
    TextBlock       {content*}
"""

from dataclasses import dataclass

from rest_framework import serializers

from storekit.errors import ValidationFailed

from .forms import HeroBannerForm, ProductCarouselForm, TextBlockForm


class HeroBannerConfigSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    subtitle = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')
    imageUrl = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    buttonText = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    buttonLink = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class ProductCarouselConfigSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    productIds = serializers.ListField(
        child=serializers.IntegerField(min_value=1, max_value=9223372036854775807),
        required=False,
        default=list,
    )


class TextBlockConfigSerializer(serializers.Serializer):
    content = serializers.CharField(trim_whitespace=False)


@dataclass(frozen=True)
class ElementType:
    name: str
    label: str
    config_serializer: type
    form_class: type
    template: str


HERO_BANNER = 'HeroBanner'
PRODUCT_CAROUSEL = 'ProductCarousel'
TEXT_BLOCK = 'TextBlock'

ELEMENT_TYPES = {
    element_type.name: element_type
    for element_type in (
        ElementType(HERO_BANNER, 'Банер', HeroBannerConfigSerializer, HeroBannerForm,
                    'pages/elements/hero_banner.html'),
        ElementType(PRODUCT_CAROUSEL, 'Карусель товарів', ProductCarouselConfigSerializer, ProductCarouselForm,
                    'pages/elements/product_carousel.html'),
        ElementType(TEXT_BLOCK, 'Текстовий блок', TextBlockConfigSerializer, TextBlockForm,
                    'pages/elements/text_block.html'),
    )
}


def get_element_type(name):
    if not isinstance(name, str) or not name.strip():
        raise ValidationFailed('Element type is required and must be a string.')
    try:
        return ELEMENT_TYPES[name.strip()]
    except KeyError:
        raise ValidationFailed(
            f'Unknown element type "{name}"',
            errors={'element_type': [f'Expected one of: {", ".join(ELEMENT_TYPES)}']},
        )


def validate_config(element_type, config):
    """Проверяет config по сериализатору типа; неизвестные ключи отбрасываются."""
    if not isinstance(config, dict):
        raise ValidationFailed('Config is required and must be an object.')
    serializer = element_type.config_serializer(data=config)
    if not serializer.is_valid():
        raise ValidationFailed(
            f'Invalid config for {element_type.name}',
            errors={'config': serializer.errors},
        )
    return dict(serializer.validated_data)
