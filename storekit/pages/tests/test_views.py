from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse

from pages import services
from pages.models import HOMEPAGE, PageElement
from storefront.models import Product


class HomepageEditorTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user('admin@example.com', 'admin@example.com', 'secret1', is_staff=True)
        self.client.force_login(self.admin)

    def test_customer_forbidden(self):
        customer = User.objects.create_user('c@example.com', 'c@example.com', 'secret1')
        self.client.force_login(customer)
        self.assertEqual(self.client.get(reverse('homepage_editor')).status_code, 403)

    def test_editor_lists_elements(self):
        services.create_element(HOMEPAGE, 'TextBlock', {'content': 'Intro'})
        response = self.client.get(reverse('homepage_editor'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context['elements']), 1)
        self.assertContains(response, 'data-reorder-url="/api/admin/page-elements/homepage/"')

    def test_create_carousel_via_form(self):
        product = Product.objects.create(name='Pick', price=5)

        response = self.client.post(reverse('homepage_element_create', args=['ProductCarousel']), {
            'title': 'Best sellers',
            'product_ids': f'{product.pk}, 77',
            'order': '',
        })

        self.assertRedirects(response, reverse('homepage_editor'))
        element = PageElement.objects.get()
        self.assertEqual(element.config, {'title': 'Best sellers', 'productIds': [product.pk, 77]})
        self.assertEqual(element.order, 0)

    def test_create_rejects_bad_ids(self):
        response = self.client.post(reverse('homepage_element_create', args=['ProductCarousel']), {
            'title': 'Bad', 'product_ids': 'abc',
        })
        self.assertEqual(response.status_code, 200)
        self.assertFalse(PageElement.objects.exists())

    def test_unknown_type_is_404(self):
        self.assertEqual(self.client.get(reverse('homepage_element_create', args=['Marquee'])).status_code, 404)

    def test_out_of_range_element_id_is_404(self):
        huge = 10 ** 20
        self.assertEqual(self.client.get(reverse('homepage_element_edit', args=[huge])).status_code, 404)
        self.assertEqual(self.client.post(reverse('homepage_element_delete', args=[huge])).status_code, 404)

    def test_edit_prefills_and_saves(self):
        element = services.create_element(HOMEPAGE, 'HeroBanner', {'title': 'Old', 'buttonText': 'Buy'})
        url = reverse('homepage_element_edit', args=[element.pk])

        response = self.client.get(url)
        self.assertEqual(response.context['form'].initial['button_text'], 'Buy')

        response = self.client.post(url, {'title': 'New', 'button_text': 'Shop', 'button_link': '/catalog/'})
        self.assertRedirects(response, reverse('homepage_editor'))
        element.refresh_from_db()
        self.assertEqual(element.config['title'], 'New')
        self.assertEqual(element.config['buttonLink'], '/catalog/')

    def test_move_and_delete(self):
        first = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'first'})
        second = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'second'})

        self.client.post(reverse('homepage_element_move', args=[second.pk, 'up']))
        self.assertEqual(list(services.list_elements(HOMEPAGE).values_list('pk', flat=True)), [second.pk, first.pk])

        self.client.post(reverse('homepage_element_delete', args=[first.pk]))
        self.assertFalse(PageElement.objects.filter(pk=first.pk).exists())


class HomeRenderingTests(TestCase):
    def test_home_renders_blocks_in_order(self):
        product = Product.objects.create(name='Carousel Item', price=10, stock_quantity=1)
        services.create_element(HOMEPAGE, 'TextBlock', {'content': 'Second block'}, order=1)
        services.create_element(HOMEPAGE, 'HeroBanner', {'title': 'Big Banner'}, order=0)
        services.create_element(HOMEPAGE, 'ProductCarousel', {'title': 'Picks', 'productIds': [product.pk]}, order=2)

        response = self.client.get(reverse('home'))

        content = response.content.decode()
        self.assertLess(content.index('Big Banner'), content.index('Second block'))
        self.assertIn('Carousel Item', content)
