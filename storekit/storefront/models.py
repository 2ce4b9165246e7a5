from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from .services.slugs import make_slug, unique_slugify


class SluggedModel(models.Model):
    """
    Базовая модель с name/slug и отметками времени.

    slug пересчитывается из name при создании, при смене name и если slug
    пустой; коллизии решаются суффиксом -2, -3...
    """
    name = models.CharField(max_length=200, verbose_name='Назва')
    slug = models.SlugField(max_length=220, unique=True, blank=True, verbose_name='URL slug')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Створено')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Оновлено')

    class Meta:
        abstract = True

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_name = instance.__dict__.get('name')
        return instance

    def save(self, *args, **kwargs):
        self.name = (self.name or '').strip()
        if not self.slug or self.name != getattr(self, '_loaded_name', None):
            self.slug = unique_slugify(type(self), make_slug(self.name), exclude_pk=self.pk)
            update_fields = kwargs.get('update_fields')
            if update_fields is not None and 'slug' not in update_fields:
                kwargs['update_fields'] = list(update_fields) + ['slug']
        super().save(*args, **kwargs)
        self._loaded_name = self.name

    def __str__(self):
        return self.name


class Category(SluggedModel):
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='children',
        verbose_name='Батьківська категорія',
    )

    class Meta:
        verbose_name = 'Категорія'
        verbose_name_plural = 'Категорії'
        ordering = ['name']

    def descendant_ids(self):
        """id всех потомков (без самой категории)."""
        found = set()
        frontier = [self.pk]
        while frontier:
            children = list(
                Category.objects.filter(parent_id__in=frontier).values_list('pk', flat=True)
            )
            frontier = [pk for pk in children if pk not in found]
            found.update(frontier)
        return found


class Tag(SluggedModel):

    class Meta:
        verbose_name = 'Тег'
        verbose_name_plural = 'Теги'
        ordering = ['name']


class AttributeDefinition(models.Model):
    """Определение кастомного атрибута товара (например, «Матеріал»)."""
    name = models.CharField(max_length=100, unique=True, verbose_name='Назва атрибута')
    possible_values = models.JSONField(default=list, blank=True, verbose_name='Можливі значення')
    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Створено')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Оновлено')

    class Meta:
        verbose_name = 'Атрибут'
        verbose_name_plural = 'Атрибути'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.name

    @staticmethod
    def parse_possible_values(raw):
        """
        'S, M ,L' или ['S', ' M', ''] -> ['S', 'M', 'L'].
        Пустые значения отбрасываются.
        """
        if raw is None:
            return []
        if isinstance(raw, str):
            items = raw.split(',')
        elif isinstance(raw, (list, tuple)):
            items = raw
        else:
            items = [raw]
        return [str(item).strip() for item in items if str(item).strip()]

    def accepts(self, value):
        return not self.possible_values or value in self.possible_values


class Product(SluggedModel):
    description = models.TextField(blank=True, verbose_name='Опис')
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name='Ціна',
    )
    stock_quantity = models.PositiveIntegerField(default=0, verbose_name='Залишок')
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products',
        verbose_name='Категорія',
    )
    tags = models.ManyToManyField(Tag, blank=True, related_name='products', verbose_name='Теги')

    class Meta:
        verbose_name = 'Товар'
        verbose_name_plural = 'Товари'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['price'], name='idx_product_price'),
            models.Index(fields=['name'], name='idx_product_name'),
        ]

    @property
    def main_image(self):
        images = list(self.images.all())
        return images[0] if images else None

    @property
    def in_stock(self):
        return self.stock_quantity > 0


class ProductAttribute(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='custom_attributes')
    definition = models.ForeignKey(AttributeDefinition, on_delete=models.CASCADE, related_name='product_values')
    value = models.CharField(max_length=255, verbose_name='Значення')

    class Meta:
        verbose_name = 'Значення атрибута'
        verbose_name_plural = 'Значення атрибутів'
        ordering = ['id']

    def __str__(self):
        return f'{self.definition.name}: {self.value}'


class ProductImage(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='images')
    image = models.ImageField(upload_to='products/', verbose_name='Зображення')
    order = models.PositiveIntegerField(default=0, verbose_name='Порядок')

    class Meta:
        verbose_name = 'Зображення товару'
        verbose_name_plural = 'Зображення товарів'
        ordering = ['order', 'id']

    def __str__(self):
        return f'{self.product.name} #{self.order}'
