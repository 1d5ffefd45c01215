"""
Tests for the property listing (projects) API.
"""

from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from common.counters import increment_counter
from .models import Listing
from .serializers import ListingSerializer

User = get_user_model()


def make_listing(**overrides):
    fields = {
        'title': 'Modern 3BR Condo',
        'description': 'Bright corner unit with a view of the river.',
        'address': '12 River Rd',
        'city': 'Austin',
        'state': 'TX',
        'zip_code': '73301',
        'price': Decimal('250000'),
        'property_type': 'residential',
        'status': 'available',
        'area': Decimal('1200'),
        'bedrooms': 3,
        'bathrooms': 2,
    }
    fields.update(overrides)
    return Listing.objects.create(**fields)


def listing_payload(**overrides):
    payload = {
        'title': 'Downtown Loft',
        'description': 'Open plan loft close to everything.',
        'location': {
            'address': '400 Main St',
            'city': 'Denver',
            'state': 'CO',
            'zip_code': '80202',
        },
        'price': 410000,
        'property_type': 'residential',
        'features': [' Balcony ', '', 'Gym'],
        'specifications': {'area': 950, 'bedrooms': 1, 'bathrooms': 1},
        'agent': {'name': 'Ann Lee', 'email': 'ann@example.com'},
    }
    payload.update(overrides)
    return payload


class ListingSerializerTests(TestCase):
    """Tests for the nested wire shape."""

    def test_valid_payload_flattens_nested_blocks(self):
        serializer = ListingSerializer(data=listing_payload())
        self.assertTrue(serializer.is_valid(), serializer.errors)
        listing = serializer.save()
        self.assertEqual(listing.city, 'Denver')
        self.assertEqual(listing.agent_name, 'Ann Lee')
        self.assertEqual(listing.features, ['Balcony', 'Gym'])

    def test_year_built_out_of_range(self):
        payload = listing_payload(specifications={'area': 950, 'year_built': 1700})
        serializer = ListingSerializer(data=payload)
        self.assertFalse(serializer.is_valid())
        self.assertIn('specifications', serializer.errors)

    def test_negative_price_rejected(self):
        serializer = ListingSerializer(data=listing_payload(price=-1))
        self.assertFalse(serializer.is_valid())

    def test_price_per_sq_ft(self):
        listing = make_listing(price=Decimal('240000'), area=Decimal('1200'))
        self.assertEqual(ListingSerializer(listing).data['price_per_sq_ft'], 200)


class ListingPublicApiTests(APITestCase):
    """Tests for the public read endpoints."""

    def setUp(self):
        self.cheap = make_listing(title='Starter Home', price=Decimal('100000'))
        self.mid = make_listing(title='Family Home', price=Decimal('250000'), featured=True)
        self.pricey = make_listing(title='Hilltop Villa', price=Decimal('500000'), city='Dallas')

    def test_list_returns_envelope(self):
        response = self.client.get('/api/projects/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(len(response.data['data']['projects']), 3)
        self.assertEqual(response.data['data']['pagination']['totalRecords'], 3)

    def test_price_range_filter(self):
        response = self.client.get('/api/projects/', {'minPrice': '150000', 'maxPrice': '400000'})
        ids = [p['id'] for p in response.data['data']['projects']]
        self.assertEqual(ids, [self.mid.id])

    def test_non_numeric_price_is_rejected(self):
        response = self.client.get('/api/projects/', {'minPrice': 'cheap'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_city_filter_is_case_insensitive(self):
        response = self.client.get('/api/projects/', {'city': 'dAL'})
        ids = [p['id'] for p in response.data['data']['projects']]
        self.assertEqual(ids, [self.pricey.id])

    def test_sort_by_price(self):
        response = self.client.get('/api/projects/', {'sort': 'price'})
        ids = [p['id'] for p in response.data['data']['projects']]
        self.assertEqual(ids, [self.cheap.id, self.mid.id, self.pricey.id])

    def test_invalid_sort_rejected(self):
        response = self.client.get('/api/projects/', {'sort': 'password'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_featured_only_available(self):
        make_listing(title='Sold Out', featured=True, status='sold')
        response = self.client.get('/api/projects/featured/')
        ids = [p['id'] for p in response.data['data']['projects']]
        self.assertEqual(ids, [self.mid.id])

    def test_detail_increments_views(self):
        self.client.get(f'/api/projects/{self.mid.id}/')
        response = self.client.get(f'/api/projects/{self.mid.id}/')
        self.assertEqual(response.data['data']['project']['views'], 2)

    def test_detail_missing(self):
        response = self.client.get('/api/projects/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_anonymous_cannot_create(self):
        response = self.client.post('/api/projects/', listing_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ListingAdminApiTests(APITestCase):
    """Tests for admin writes."""

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@example.com', password='Secret123', username='admin_user', role='admin'
        )
        self.member = User.objects.create_user(
            email='member@example.com', password='Secret123', username='member_user'
        )
        self.client.force_authenticate(self.admin)

    def test_create_listing(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post('/api/projects/', listing_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        project = response.data['data']['project']
        self.assertEqual(project['location']['city'], 'Denver')
        self.assertEqual(project['status'], 'available')
        self.assertEqual(project['views'], 0)

    def test_regular_user_forbidden(self):
        self.client.force_authenticate(self.member)
        response = self.client.post('/api/projects/', listing_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_validation_error_envelope(self):
        response = self.client.post('/api/projects/', {'title': 'ab'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Validation failed')
        self.assertIn('title', response.data['errors'])

    @patch('common.media.cloudinary.uploader.destroy')
    @patch('common.media.cloudinary.uploader.upload')
    def test_update_replaces_images(self, mock_upload, mock_destroy):
        listing = make_listing(images=['https://res.cloudinary.com/demo/image/upload/v1/realestate/projects/old.jpg'])
        mock_upload.return_value = {
            'secure_url': 'https://res.cloudinary.com/demo/image/upload/v2/realestate/projects/new.jpg'
        }
        image = SimpleUploadedFile('new.jpg', b'fake-image-bytes', content_type='image/jpeg')

        response = self.client.patch(
            f'/api/projects/{listing.id}/', {'title': 'Renamed Condo', 'images': image}, format='multipart'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        listing.refresh_from_db()
        self.assertEqual(listing.title, 'Renamed Condo')
        self.assertEqual(listing.images, [mock_upload.return_value['secure_url']])
        mock_destroy.assert_called_once_with('realestate/projects/old', resource_type='image')

    def test_non_image_upload_rejected(self):
        listing = make_listing()
        text = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        response = self.client.patch(f'/api/projects/{listing.id}/', {'images': text}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Only image files are allowed!')

    @patch('common.media.cloudinary.uploader.destroy')
    def test_delete_listing(self, mock_destroy):
        listing = make_listing()
        response = self.client.delete(f'/api/projects/{listing.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Listing.objects.filter(id=listing.id).exists())

    def test_stats(self):
        make_listing(price=Decimal('100000'))
        make_listing(price=Decimal('300000'), status='sold', property_type='land')
        response = self.client.get('/api/projects/admin/stats/')
        overview = response.data['data']['overview']
        self.assertEqual(overview['totalProjects'], 2)
        self.assertEqual(overview['soldProjects'], 1)
        self.assertEqual(Decimal(str(overview['averagePrice'])), Decimal('200000'))
        self.assertEqual(len(response.data['data']['propertyTypes']), 2)


class ViewCounterTests(TestCase):

    def test_increments_are_not_lost_with_stale_instances(self):
        listing = make_listing(views=10)
        stale = Listing.objects.get(pk=listing.pk)
        increment_counter(Listing, listing.pk, 'views')
        increment_counter(Listing, stale.pk, 'views')
        listing.refresh_from_db()
        self.assertEqual(listing.views, 12)

    def test_missing_row_returns_none(self):
        self.assertIsNone(increment_counter(Listing, 424242, 'views'))


class ListingRoundTripTests(APITestCase):

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@example.com', password='Secret123', username='admin_user', role='admin'
        )
        self.client.force_authenticate(self.admin)

    def test_create_then_fetch_round_trip(self):
        payload = listing_payload(
            location={
                'address': '400 Main St',
                'city': 'Denver',
                'state': 'CO',
                'zip_code': '80202',
                'latitude': 39.7392,
                'longitude': -104.9903,
            },
            status='pending',
            amenities=['Pool', 'Sauna'],
            featured=True,
            specifications={'area': 950, 'bedrooms': 1, 'bathrooms': 1, 'parking': 2, 'year_built': 2015},
            agent={'name': 'Ann Lee', 'email': 'ann@example.com', 'phone': '555-0100'},
        )
        created = self.client.post('/api/projects/', payload, format='json').data['data']['project']

        response = self.client.get(f"/api/projects/{created['id']}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        fetched = response.data['data']['project']

        self.assertEqual(fetched['title'], 'Downtown Loft')
        self.assertEqual(fetched['description'], 'Open plan loft close to everything.')
        self.assertEqual(dict(fetched['location']), payload['location'])
        self.assertEqual(fetched['price'], Decimal('410000'))
        self.assertEqual(fetched['property_type'], 'residential')
        self.assertEqual(fetched['status'], 'pending')
        self.assertEqual(fetched['features'], ['Balcony', 'Gym'])
        self.assertEqual(fetched['amenities'], ['Pool', 'Sauna'])
        self.assertTrue(fetched['featured'])
        self.assertEqual(dict(fetched['specifications']), {
            'area': Decimal('950'), 'bedrooms': 1, 'bathrooms': 1, 'parking': 2, 'year_built': 2015,
        })
        self.assertEqual(dict(fetched['agent']), {
            'name': 'Ann Lee', 'email': 'ann@example.com', 'phone': '555-0100',
        })
        self.assertEqual(fetched['views'], 1)

        for key in ('views', 'updated_at'):
            created.pop(key)
            fetched.pop(key)
        self.assertEqual(created, fetched)

    @patch('listings.views.increment_counter', return_value=1)
    def test_row_deleted_after_counting_is_not_found(self, mock_increment):
        response = self.client.get('/api/projects/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])
