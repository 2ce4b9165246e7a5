"""Общие фабрики для тестов storefront."""

from decimal import Decimal
from io import BytesIO

from django.contrib.auth.models import User
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from storefront.models import Category, Product, Tag


def make_admin(email='admin@example.com'):
    return User.objects.create_user(username=email, email=email, password='secret1', is_staff=True)


def make_customer(email='customer@example.com'):
    return User.objects.create_user(username=email, email=email, password='secret1')


def make_product(name='Test Product', price='100.00', stock=10, category=None, tags=()):
    product = Product.objects.create(
        name=name,
        price=Decimal(price),
        stock_quantity=stock,
        category=category,
    )
    if tags:
        product.tags.set(tags)
    return product


def make_category(name, parent=None):
    return Category.objects.create(name=name, parent=parent)


def make_tag(name):
    return Tag.objects.create(name=name)


def image_upload(name='photo.png', color=(200, 30, 30)):
    buffer = BytesIO()
    Image.new('RGB', (4, 4), color).save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')
