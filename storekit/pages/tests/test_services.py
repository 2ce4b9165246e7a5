from django.test import TestCase

from pages import services
from pages.models import HOMEPAGE, PageElement
from storefront.models import Product
from storekit.errors import NotFoundError, ValidationFailed


def hero(title='Welcome'):
    return {'title': title, 'subtitle': 'Sub', 'imageUrl': '', 'buttonText': 'Go', 'buttonLink': '/catalog/'}


class ElementCrudTests(TestCase):
    def test_create_appends_to_end(self):
        first = services.create_element(HOMEPAGE, 'HeroBanner', hero())
        second = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'Hello'})
        third = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'Explicit'}, order=10)
        fourth = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'After'})

        self.assertEqual([first.order, second.order, third.order, fourth.order], [0, 1, 10, 11])

    def test_order_is_per_page(self):
        services.create_element('about', 'TextBlock', {'content': 'Other page'}, order=5)
        element = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'Home'})
        self.assertEqual(element.order, 0)

    def test_unknown_type_and_bad_config(self):
        with self.assertRaises(ValidationFailed):
            services.create_element(HOMEPAGE, 'Marquee', {'title': 'x'})
        with self.assertRaises(ValidationFailed):
            services.create_element(HOMEPAGE, 'HeroBanner', {'subtitle': 'no title'})
        with self.assertRaises(ValidationFailed):
            services.create_element(HOMEPAGE, 'TextBlock', 'not an object')
        with self.assertRaises(ValidationFailed):
            services.create_element(HOMEPAGE, 'ProductCarousel', {'title': 'x', 'productIds': ['a']})
        self.assertFalse(PageElement.objects.exists())

    def test_config_drops_unknown_keys(self):
        element = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'Hi', 'color': 'red'})
        self.assertEqual(element.config, {'content': 'Hi'})

    def test_order_parsing(self):
        self.assertEqual(services.create_element(HOMEPAGE, 'TextBlock', {'content': 'a'}, order='3').order, 3)
        self.assertEqual(services.create_element(HOMEPAGE, 'TextBlock', {'content': 'b'}, order=4.0).order, 4)
        for bad in ('x', 1.5, True, 2 ** 31, -2 ** 31 - 1, str(10 ** 30)):
            with self.subTest(order=bad):
                with self.assertRaises(ValidationFailed):
                    services.create_element(HOMEPAGE, 'TextBlock', {'content': 'c'}, order=bad)

    def test_order_range_limits(self):
        top = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'top'}, order=2147483647)
        self.assertEqual(top.order, 2147483647)
        with self.assertRaisesMessage(ValidationFailed, 'Order is out of range.'):
            services.create_element(HOMEPAGE, 'TextBlock', {'content': 'next'})

    def test_update_requires_a_field(self):
        element = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'a'})
        with self.assertRaises(ValidationFailed):
            services.update_element(HOMEPAGE, element.pk, {})

    def test_update_type_revalidates_existing_config(self):
        element = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'a'})
        with self.assertRaises(ValidationFailed):
            services.update_element(HOMEPAGE, element.pk, {'element_type': 'HeroBanner'})

        updated = services.update_element(HOMEPAGE, element.pk, {
            'element_type': 'HeroBanner',
            'config': hero('Now a banner'),
            'order': 7,
        })
        self.assertEqual(updated.element_type, 'HeroBanner')
        self.assertEqual(updated.config['title'], 'Now a banner')
        self.assertEqual(updated.order, 7)

    def test_other_page_elements_are_invisible(self):
        foreign = services.create_element('about', 'TextBlock', {'content': 'about'})

        with self.assertRaises(NotFoundError):
            services.update_element(HOMEPAGE, foreign.pk, {'order': 1})
        with self.assertRaises(NotFoundError):
            services.delete_element(HOMEPAGE, foreign.pk)
        self.assertTrue(PageElement.objects.filter(pk=foreign.pk).exists())


class ReorderTests(TestCase):
    def setUp(self):
        self.a = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'a'})
        self.b = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'b'})
        self.c = services.create_element(HOMEPAGE, 'TextBlock', {'content': 'c'})

    def orders(self):
        return list(services.list_elements(HOMEPAGE).values_list('pk', flat=True))

    def test_reorder_counts_changed_rows(self):
        modified = services.reorder_elements(HOMEPAGE, [
            {'id': self.a.pk, 'order': 2},
            {'id': self.b.pk, 'order': 1},
            {'id': self.c.pk, 'order': 0},
        ])
        self.assertEqual(modified, 2)
        self.assertEqual(self.orders(), [self.c.pk, self.b.pk, self.a.pk])

    def test_reorder_ignores_other_pages_and_unknown_ids(self):
        foreign = services.create_element('about', 'TextBlock', {'content': 'x'}, order=0)
        modified = services.reorder_elements(HOMEPAGE, [
            {'id': foreign.pk, 'order': 99},
            {'id': 99999, 'order': 5},
            {'id': self.a.pk, 'order': 9},
        ])
        self.assertEqual(modified, 1)
        foreign.refresh_from_db()
        self.assertEqual(foreign.order, 0)

    def test_reorder_payload_validation(self):
        for payload in (None, {}, [], [{'order': 1}], [{'id': 'abc', 'order': 1}],
                        [{'id': self.a.pk, 'order': 'x'}], ['junk']):
            with self.subTest(payload=payload):
                with self.assertRaises(ValidationFailed):
                    services.reorder_elements(HOMEPAGE, payload)

    def test_invalid_item_rolls_back_nothing_applied(self):
        with self.assertRaises(ValidationFailed):
            services.reorder_elements(HOMEPAGE, [
                {'id': self.a.pk, 'order': 5},
                {'id': self.b.pk, 'order': None},
            ])
        self.a.refresh_from_db()
        self.assertEqual(self.a.order, 0)

    def test_move(self):
        self.assertTrue(services.move_element(HOMEPAGE, self.c.pk, 'up'))
        self.assertEqual(self.orders(), [self.a.pk, self.c.pk, self.b.pk])

        self.assertFalse(services.move_element(HOMEPAGE, self.a.pk, 'up'))
        self.assertFalse(services.move_element(HOMEPAGE, self.b.pk, 'down'))
        with self.assertRaises(ValidationFailed):
            services.move_element(HOMEPAGE, self.a.pk, 'left')


class ResolvePageTests(TestCase):
    def test_carousel_products_follow_config_order(self):
        first = Product.objects.create(name='First', price=1)
        second = Product.objects.create(name='Second', price=2)
        services.create_element(HOMEPAGE, 'HeroBanner', hero())
        services.create_element(HOMEPAGE, 'ProductCarousel', {
            'title': 'Picks',
            'productIds': [second.pk, 99999, first.pk],
        })

        resolved = services.resolve_page(HOMEPAGE)

        self.assertEqual([item.element_type for item in resolved], ['HeroBanner', 'ProductCarousel'])
        self.assertEqual(resolved[0].template, 'pages/elements/hero_banner.html')
        self.assertEqual(resolved[1].products, [second, first])

    def test_unknown_stored_type_is_skipped(self):
        PageElement.objects.create(page_identifier=HOMEPAGE, element_type='Legacy', config={}, order=0)
        services.create_element(HOMEPAGE, 'TextBlock', {'content': 'kept'})

        resolved = services.resolve_page(HOMEPAGE)

        self.assertEqual([item.config['content'] for item in resolved], ['kept'])

    def test_carousel_ids_out_of_range(self):
        product = Product.objects.create(name='Real', price='5.00')
        with self.assertRaises(ValidationFailed):
            services.create_element(HOMEPAGE, 'ProductCarousel', {'title': 'x', 'productIds': [10 ** 30]})

        PageElement.objects.create(
            page_identifier=HOMEPAGE,
            element_type='ProductCarousel',
            config={'title': 'Stored', 'productIds': [10 ** 30, product.pk]},
        )
        resolved = services.resolve_page(HOMEPAGE)
        self.assertEqual(resolved[0].products, [product])
