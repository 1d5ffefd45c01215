"""
Tests for the shared query, pagination and notification engine.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth import get_user_model
from django.http import QueryDict
from django.test import SimpleTestCase, TestCase
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from blogs.models import Post
from listings.models import Listing
from .consumers import ChangeFeedConsumer
from .exceptions import InvalidFilterParameter
from .notifier import notify_change
from .pagination import PageQuerySerializer, assemble_response, execute_page
from .querying import build_filter, get_filter_table
from .utils import clean_string_list, estimate_read_time, slugify_title


def make_listing(**overrides):
    fields = {
        'title': 'Listing',
        'description': 'A listing used in engine tests.',
        'address': '1 Test St',
        'city': 'Austin',
        'state': 'TX',
        'zip_code': '73301',
        'price': Decimal('250000'),
        'property_type': 'residential',
        'area': Decimal('1000'),
    }
    fields.update(overrides)
    return Listing.objects.create(**fields)


class UtilsTests(SimpleTestCase):

    def test_slugify_title(self):
        self.assertEqual(slugify_title('Modern 3BR Condo!!'), 'modern-3br-condo')
        self.assertEqual(slugify_title('  --Hello,   World--  '), 'hello-world')

    def test_read_time(self):
        self.assertEqual(estimate_read_time('word ' * 400), 2)
        self.assertEqual(estimate_read_time('word ' * 401), 3)
        self.assertEqual(estimate_read_time(''), 1)

    def test_clean_string_list(self):
        self.assertEqual(clean_string_list([' A ', '', None, 'b'], lowercase=True), ['a', 'b'])


class FilterBuilderTests(SimpleTestCase):
    """Building a filter never touches the database."""

    def test_absent_and_empty_params_add_nothing(self):
        q = build_filter('listing', {'status': '', 'city': '   ', 'unknown': 'x'})
        self.assertEqual(str(q), str(build_filter('listing', {})))
        self.assertEqual(len(q.children), 0)

    def test_idempotent(self):
        params = {'status': 'available', 'minPrice': '100', 'featured': 'true'}
        self.assertEqual(build_filter('listing', params), build_filter('listing', params))

    def test_featured_semantics(self):
        self.assertEqual(build_filter('listing', {'featured': 'true'}).children, [('featured', True)])
        self.assertEqual(build_filter('listing', {'featured': 'yes'}).children, [('featured', False)])

    def test_price_bounds(self):
        q = build_filter('listing', {'minPrice': '150000', 'maxPrice': '400000'})
        self.assertIn(('price__gte', Decimal('150000')), q.children)
        self.assertIn(('price__lte', Decimal('400000')), q.children)

    def test_non_numeric_price_rejected(self):
        for bad in ('abc', 'NaN', 'Infinity'):
            with self.assertRaises(InvalidFilterParameter):
                build_filter('listing', {'minPrice': bad})

    def test_non_numeric_bedrooms_rejected(self):
        with self.assertRaises(InvalidFilterParameter):
            build_filter('listing', {'bedrooms': 'three'})

    def test_tags_split_and_trimmed(self):
        q = build_filter('post', {'tags': ' mortgage, ,rates '})
        self.assertEqual(q.children, [('tags__name__in', ['mortgage', 'rates'])])

    def test_tags_lowercased(self):
        q = build_filter('post', {'tags': 'Mortgage,RATES'})
        self.assertEqual(q.children, [('tags__name__in', ['mortgage', 'rates'])])

    def test_querydict_params(self):
        q = build_filter('account', QueryDict('role=admin&search='))
        self.assertEqual(q.children, [('role', 'admin')])

    def test_unknown_kind(self):
        with self.assertRaises(LookupError):
            get_filter_table('invoice')

    def test_sort_translation(self):
        table = get_filter_table('listing')
        self.assertEqual(table.order_field('-createdAt'), '-created_at')
        self.assertEqual(table.order_field('price'), 'price')
        with self.assertRaises(InvalidFilterParameter):
            table.order_field('password')


class PageQueryTests(SimpleTestCase):

    def validate(self, data):
        serializer = PageQuerySerializer(data=data, context={'table': get_filter_table('listing')})
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def test_defaults(self):
        self.assertEqual(self.validate({}), {'page': 1, 'limit': 10, 'sort': '-createdAt'})

    def test_limit_bounds(self):
        with self.assertRaises(ValidationError):
            self.validate({'limit': 101})
        with self.assertRaises(ValidationError):
            self.validate({'limit': 0})

    def test_page_must_be_positive(self):
        with self.assertRaises(ValidationError):
            self.validate({'page': 0})


class AssembleResponseTests(SimpleTestCase):

    def test_empty(self):
        result = assemble_response([], 0, 1, 10, key='projects')
        self.assertEqual(result['projects'], [])
        self.assertEqual(result['pagination'], {
            'currentPage': 1,
            'totalPages': 0,
            'totalRecords': 0,
            'hasNextPage': False,
            'hasPrevPage': False,
        })

    def test_last_page(self):
        result = assemble_response(['x'] * 5, 15, 2, 10)
        self.assertEqual(result['pagination']['totalPages'], 2)
        self.assertFalse(result['pagination']['hasNextPage'])
        self.assertTrue(result['pagination']['hasPrevPage'])

    def test_middle_page(self):
        result = assemble_response(['x'] * 10, 25, 2, 10)
        self.assertEqual(result['pagination']['totalPages'], 3)
        self.assertTrue(result['pagination']['hasNextPage'])


class ExecutePageTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.listings = [
            make_listing(title=f'Listing {i}', price=Decimal(100000 + i * 10000), featured=i % 2 == 0)
            for i in range(15)
        ]

    def test_exact_slices(self):
        predicate = build_filter('listing', {})
        queryset = Listing.objects.all()
        seen = []
        for page in (1, 2):
            records, total = execute_page(queryset, predicate, page, 10, 'price')
            self.assertEqual(total, 15)
            seen.extend(r.pk for r in records)
        expected = [l.pk for l in sorted(self.listings, key=lambda l: l.price)]
        self.assertEqual(seen, expected)

    def test_page_past_end(self):
        records, total = execute_page(Listing.objects.all(), build_filter('listing', {}), 5, 10, '-created_at')
        self.assertEqual(records, [])
        self.assertEqual(total, 15)

    def test_ties_broken_by_primary_key(self):
        ids = [l.pk for l in self.listings]
        Listing.objects.update(views=7)
        records, _ = execute_page(Listing.objects.all(), build_filter('listing', {}), 1, 15, '-views')
        self.assertEqual([r.pk for r in records], sorted(ids, reverse=True))

    def test_superset_never_grows(self):
        broad = {'featured': 'true'}
        narrow = {'featured': 'true', 'maxPrice': '200000'}
        _, broad_total = execute_page(Listing.objects.all(), build_filter('listing', broad), 1, 100, 'pk')
        _, narrow_total = execute_page(Listing.objects.all(), build_filter('listing', narrow), 1, 100, 'pk')
        self.assertEqual(broad_total, 8)
        self.assertLessEqual(narrow_total, broad_total)
        self.assertEqual(narrow_total, 6)

    def test_price_range(self):
        Listing.objects.all().delete()
        make_listing(price=Decimal('100000'))
        target = make_listing(price=Decimal('250000'))
        make_listing(price=Decimal('500000'))
        records, total = execute_page(
            Listing.objects.all(),
            build_filter('listing', {'minPrice': '150000', 'maxPrice': '400000'}),
            1, 10, '-created_at'
        )
        self.assertEqual(total, 1)
        self.assertEqual(records[0].pk, target.pk)


class NotifierTests(TestCase):

    def test_sends_to_topic_and_global_after_commit(self):
        layer = MagicMock()
        layer.group_send = AsyncMock()
        with patch('common.notifier.get_channel_layer', return_value=layer):
            with self.captureOnCommitCallbacks(execute=True):
                notify_change('projects', 'project_created', {'project': {'price': Decimal('10.50')}})

        groups = [call.args[0] for call in layer.group_send.await_args_list]
        self.assertEqual(groups, ['global', 'projects'])
        message = layer.group_send.await_args_list[0].args[1]
        self.assertEqual(message['type'], 'record.changed')
        self.assertEqual(message['event'], 'project_created')
        self.assertEqual(message['payload'], {'project': {'price': '10.50'}})

    def test_nothing_sent_before_commit(self):
        layer = MagicMock()
        layer.group_send = AsyncMock()
        with patch('common.notifier.get_channel_layer', return_value=layer):
            with self.captureOnCommitCallbacks(execute=False) as callbacks:
                notify_change('blogs', 'blog_deleted', {'blogId': 1})
        self.assertEqual(len(callbacks), 1)
        layer.group_send.assert_not_awaited()

    def test_layer_failure_is_swallowed(self):
        with patch('common.notifier.get_channel_layer', side_effect=RuntimeError('redis down')):
            with self.assertLogs('common.notifier', level='WARNING'):
                with self.captureOnCommitCallbacks(execute=True):
                    notify_change('jobs', 'job_created', {'job': {}})

    def test_mutation_succeeds_when_layer_fails(self):
        admin = get_user_model().objects.create_user(
            email='admin@example.com', password='Secret123', username='notify_admin', role='admin'
        )
        post = Post.objects.create(
            title='Resilient', excerpt='x', content='y', author='z', category='news'
        )
        client = APIClient()
        client.force_authenticate(admin)
        with patch('common.notifier.get_channel_layer', side_effect=RuntimeError('redis down')):
            with self.captureOnCommitCallbacks(execute=True):
                response = client.patch(f'/api/blogs/{post.id}/', {'status': 'published'}, format='json')
        self.assertEqual(response.status_code, 200)
        post.refresh_from_db()
        self.assertEqual(post.status, 'published')


class ChangeFeedConsumerTests(SimpleTestCase):
    databases = {'default'}

    async def test_join_room_and_receive_change(self):
        communicator = WebsocketCommunicator(ChangeFeedConsumer.as_asgi(), '/ws/changes/')
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        await communicator.send_json_to({'action': 'join', 'room': 'projects'})
        self.assertEqual(await communicator.receive_json_from(), {'action': 'join', 'room': 'projects'})

        await get_channel_layer().group_send('projects', {
            'type': 'record.changed',
            'topic': 'projects',
            'event': 'project_updated',
            'payload': {'projectId': 3},
        })
        self.assertEqual(await communicator.receive_json_from(), {
            'event': 'project_updated',
            'topic': 'projects',
            'data': {'projectId': 3},
        })
        await communicator.disconnect()

    async def test_unknown_room(self):
        communicator = WebsocketCommunicator(ChangeFeedConsumer.as_asgi(), '/ws/changes/')
        await communicator.connect()
        await communicator.send_json_to({'action': 'join', 'room': 'invoices'})
        response = await communicator.receive_json_from()
        self.assertIn('error', response)
        await communicator.disconnect()
