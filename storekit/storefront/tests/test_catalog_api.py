"""Tests for public catalog API and /api/admin/ catalog endpoints."""

from django.test import TestCase
from rest_framework.test import APIClient

from storefront.models import AttributeDefinition, Category, Product, Tag

from .helpers import image_upload, make_admin, make_category, make_customer, make_product, make_tag


class PublicCatalogApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.category = make_category('Shirts')
        self.tag = make_tag('New')
        for index in range(15):
            make_product(f'Shirt {index}', price=str(10 + index), category=self.category)
        make_product('Tagged Mug', tags=[self.tag])

    def test_list_envelope_uses_storefront_page_size(self):
        data = self.client.get('/api/products/').json()

        self.assertEqual(data['totalProducts'], 16)
        self.assertEqual(data['currentPage'], 1)
        self.assertEqual(data['totalPages'], 2)
        self.assertEqual(len(data['products']), 12)

    def test_filters_and_sort(self):
        data = self.client.get('/api/products/', {'category': 'shirts', 'sort': 'price_asc', 'limit': 3}).json()
        self.assertEqual([item['name'] for item in data['products']], ['Shirt 0', 'Shirt 1', 'Shirt 2'])
        self.assertEqual(data['totalProducts'], 15)

        data = self.client.get('/api/products/', {'tag': 'new'}).json()
        self.assertEqual([item['name'] for item in data['products']], ['Tagged Mug'])

    def test_unknown_category_is_empty_page(self):
        response = self.client.get('/api/products/', {'category': 'missing'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'products': [], 'currentPage': 1, 'totalPages': 0, 'totalProducts': 0})

    def test_detail_by_slug(self):
        data = self.client.get('/api/products/shirt-3/').json()
        self.assertEqual(data['name'], 'Shirt 3')
        self.assertEqual(data['category']['slug'], 'shirts')
        self.assertEqual(self.client.get('/api/products/nope/').status_code, 404)

    def test_categories_and_tags(self):
        self.assertEqual(self.client.get('/api/categories/').json()[0]['slug'], 'shirts')
        self.assertEqual(self.client.get('/api/tags/new/').json()['name'], 'New')


class AdminCatalogApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.client.force_authenticate(self.admin)

    def test_permissions(self):
        anonymous = APIClient()
        self.assertEqual(anonymous.get('/api/admin/products/').status_code, 401)

        customer = APIClient()
        customer.force_authenticate(make_customer())
        self.assertEqual(customer.post('/api/admin/tags/', {'name': 'X'}, format='json').status_code, 403)

    def test_create_product_json(self):
        category = make_category('Caps')
        response = self.client.post('/api/admin/products/', {
            'name': 'Snapback',
            'price': '350',
            'stock_quantity': 4,
            'category': category.pk,
        }, format='json')

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['slug'], 'snapback')
        self.assertEqual(data['price'], '350.00')
        self.assertEqual(data['category']['id'], category.pk)

    def test_create_product_multipart_with_images(self):
        tag = make_tag('Hit')
        response = self.client.post('/api/admin/products/', {
            'name': 'Poster',
            'price': '99.99',
            'tags': str(tag.pk),
            'images': [image_upload('one.png'), image_upload('two.png')],
        }, format='multipart')

        self.assertEqual(response.status_code, 201, response.content)
        data = response.json()
        self.assertEqual(len(data['images']), 2)
        self.assertEqual(data['tags'][0]['id'], tag.pk)

    def test_create_product_validation(self):
        response = self.client.post('/api/admin/products/', {'name': 'X', 'price': '-5'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Price cannot be negative')

        response = self.client.post('/api/admin/products/', {'name': 'X', 'price': '1e1000000'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Price is too large')

        response = self.client.post('/api/admin/products/', {'name': 'Y', 'price': '123456789012.5'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Price is too large')

        response = self.client.post(
            '/api/admin/products/', {'name': 'Z', 'price': '1', 'stock_quantity': 10 ** 12}, format='json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Stock quantity is too large')
        self.assertFalse(Product.objects.exists())

    def test_update_and_delete_product(self):
        product = make_product('Old', price='10')

        response = self.client.patch(f'/api/admin/products/{product.pk}/', {'name': 'New'}, format='json')
        self.assertEqual(response.json()['slug'], 'new')

        response = self.client.delete(f'/api/admin/products/{product.pk}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['message'], 'Product deleted successfully')
        self.assertFalse(Product.objects.exists())

    def test_admin_products_list_default_limit(self):
        for index in range(12):
            make_product(f'P{index}')
        data = self.client.get('/api/admin/products/').json()
        self.assertEqual(len(data['products']), 10)
        self.assertEqual(data['products'][0]['name'], 'P11')

    def test_category_crud(self):
        response = self.client.post('/api/admin/categories/', {'name': 'Root'}, format='json')
        self.assertEqual(response.status_code, 201)
        root_id = response.json()['id']

        response = self.client.post('/api/admin/categories/', {'name': 'Leaf', 'parent': root_id}, format='json')
        self.assertEqual(response.json()['parent_name'], 'Root')

        response = self.client.put(f'/api/admin/categories/{root_id}/', {'parent': root_id}, format='json')
        self.assertEqual(response.status_code, 400)

        response = self.client.delete(f'/api/admin/categories/{root_id}/')
        self.assertEqual(response.status_code, 400)
        self.assertTrue(Category.objects.filter(pk=root_id).exists())

    def test_tag_crud(self):
        tag_id = self.client.post('/api/admin/tags/', {'name': 'Winter Sale'}, format='json').json()['id']
        response = self.client.put(f'/api/admin/tags/{tag_id}/', {'name': 'Spring Sale'}, format='json')
        self.assertEqual(response.json()['slug'], 'spring-sale')
        self.assertEqual(self.client.delete(f'/api/admin/tags/{tag_id}/').status_code, 200)
        self.assertFalse(Tag.objects.exists())

    def test_attribute_duplicate_is_409(self):
        response = self.client.post('/api/admin/attributes/', {'name': 'Size', 'possible_values': 'S,M'}, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['possible_values'], ['S', 'M'])

        response = self.client.post('/api/admin/attributes/', {'name': 'SIZE'}, format='json')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(AttributeDefinition.objects.count(), 1)
