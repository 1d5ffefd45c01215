"""
Tests for the blog API.
"""

from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from .models import Post, Tag
from .serializers import PostSerializer

User = get_user_model()


def make_post(tags=(), **overrides):
    fields = {
        'title': 'Buying Your First Home',
        'excerpt': 'What to check before you sign.',
        'content': 'word ' * 50,
        'author': 'Jane Smith',
        'category': 'buying-guide',
        'status': 'published',
    }
    fields.update(overrides)
    post = Post.objects.create(**fields)
    if tags:
        post.tags.set(Tag.for_names(tags))
    return post


class PostModelTests(TestCase):
    """Tests for slug and read time derivation."""

    def test_slug_from_title(self):
        post = make_post(title='Modern 3BR Condo!!')
        self.assertEqual(post.slug, 'modern-3br-condo')

    def test_read_time_from_content(self):
        post = make_post(content='word ' * 400)
        self.assertEqual(post.read_time, 2)

    def test_slug_changes_only_with_title(self):
        post = make_post(title='First Title')
        post = Post.objects.get(pk=post.pk)
        post.slug = 'hand-picked'
        post.excerpt = 'Edited excerpt'
        post.save()
        self.assertEqual(post.slug, 'hand-picked')

        post.title = 'Second Title'
        post.save()
        self.assertEqual(post.slug, 'second-title')

    def test_title_without_ascii_gets_fallback_slug(self):
        first = make_post(title='!!!')
        second = make_post(title='日本の家')
        self.assertTrue(first.slug.startswith('post-'))
        self.assertTrue(second.slug.startswith('post-'))
        self.assertNotEqual(first.slug, second.slug)
        self.assertEqual(Post.objects.filter(slug__startswith='post-').count(), 2)

    def test_fallback_slug_kept_while_title_unchanged(self):
        post = make_post(title='???')
        slug = post.slug
        post = Post.objects.get(pk=post.pk)
        post.excerpt = 'Edited excerpt'
        post.save()
        self.assertEqual(post.slug, slug)

    def test_read_time_kept_when_content_unchanged(self):
        post = make_post(content='word ' * 400)
        post = Post.objects.get(pk=post.pk)
        post.read_time = 9
        post.title = 'Another Title'
        post.save()
        self.assertEqual(post.read_time, 9)

    def test_serializer_lowercases_tags(self):
        serializer = PostSerializer(data={
            'title': 'Market Update',
            'excerpt': 'Rates are moving.',
            'content': 'Some content here.',
            'author': 'Sam',
            'category': 'news',
            'tags': ['Mortgage', ' RATES ', ''],
        })
        self.assertTrue(serializer.is_valid(), serializer.errors)
        post = serializer.save()
        self.assertEqual(sorted(t.name for t in post.tags.all()), ['mortgage', 'rates'])


class PublicPostApiTests(APITestCase):
    """Tests for the public blog endpoints."""

    def setUp(self):
        self.published = make_post(title='Published One', tags=['mortgage', 'rates'], meta_title='SEO title')
        self.draft = make_post(title='Draft One', status='draft')

    def test_published_forces_status(self):
        response = self.client.get('/api/blogs/published/', {'status': 'draft'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [b['id'] for b in response.data['data']['blogs']]
        self.assertEqual(ids, [self.published.id])

    def test_published_omits_seo(self):
        response = self.client.get('/api/blogs/published/')
        self.assertNotIn('seo', response.data['data']['blogs'][0])

    def test_tags_filter_any_of(self):
        make_post(title='Other Topic', tags=['lifestyle'])
        response = self.client.get('/api/blogs/published/', {'tags': 'rates, gardening'})
        ids = [b['id'] for b in response.data['data']['blogs']]
        self.assertEqual(ids, [self.published.id])

    def test_tags_filter_ignores_case(self):
        response = self.client.get('/api/blogs/published/', {'tags': 'Rates'})
        ids = [b['id'] for b in response.data['data']['blogs']]
        self.assertEqual(ids, [self.published.id])

    def test_search_on_tags_does_not_repeat_rows(self):
        response = self.client.get('/api/blogs/published/', {'search': 'r'})
        ids = [b['id'] for b in response.data['data']['blogs']]
        self.assertEqual(ids.count(self.published.id), 1)

    def test_pagination_second_page(self):
        for i in range(14):
            make_post(title=f'Bulk Post {i}')
        response = self.client.get('/api/blogs/published/', {'page': 2, 'limit': 10})
        data = response.data['data']
        self.assertEqual(len(data['blogs']), 5)
        self.assertEqual(data['pagination'], {
            'currentPage': 2,
            'totalPages': 2,
            'totalRecords': 15,
            'hasNextPage': False,
            'hasPrevPage': True,
        })

    def test_featured_published_only(self):
        featured = make_post(title='Featured Post', featured=True)
        make_post(title='Featured Draft', featured=True, status='draft')
        response = self.client.get('/api/blogs/featured/')
        ids = [b['id'] for b in response.data['data']['blogs']]
        self.assertEqual(ids, [featured.id])

    def test_slug_lookup_counts_view(self):
        response = self.client.get(f'/api/blogs/slug/{self.published.slug}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['blog']['views'], 1)

    def test_slug_lookup_hides_drafts(self):
        response = self.client.get(f'/api/blogs/slug/{self.draft.slug}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_like(self):
        self.client.post(f'/api/blogs/{self.published.id}/like/')
        response = self.client.post(f'/api/blogs/{self.published.id}/like/')
        self.assertEqual(response.data['data']['likes'], 2)

    def test_like_missing_post(self):
        response = self.client.post('/api/blogs/999999/like/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_list_requires_admin(self):
        response = self.client.get('/api/blogs/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AdminPostApiTests(APITestCase):
    """Tests for admin writes."""

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@example.com', password='Secret123', username='blog_admin', role='admin'
        )
        self.client.force_authenticate(self.admin)

    def payload(self, **overrides):
        data = {
            'title': 'Selling In Winter',
            'excerpt': 'Yes, it can work.',
            'content': 'word ' * 10,
            'author': 'Jane Smith',
            'category': 'selling-tips',
            'tags': ['Seasonal'],
            'seo': {'meta_title': 'Winter selling', 'keywords': ['winter']},
        }
        data.update(overrides)
        return data

    def test_create_and_fetch(self):
        response = self.client.post('/api/blogs/', self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        blog = response.data['data']['blog']
        self.assertEqual(blog['slug'], 'selling-in-winter')
        self.assertEqual(blog['status'], 'draft')
        self.assertEqual(blog['tags'], ['seasonal'])
        self.assertEqual(blog['seo']['keywords'], ['winter'])

        fetched = self.client.get(f"/api/blogs/{blog['id']}/").data['data']['blog']
        self.assertEqual(fetched['title'], blog['title'])
        self.assertEqual(fetched['views'], 1)

    def test_create_then_fetch_round_trip(self):
        payload = self.payload(
            content='Price it right and keep the walkways clear.',
            status='published',
            featured=True,
            tags=['Seasonal', 'Pricing'],
            seo={
                'meta_title': 'Winter selling',
                'meta_description': 'How to list a home in the cold months.',
                'keywords': ['winter', 'listing'],
            },
        )
        created = self.client.post('/api/blogs/', payload, format='json').data['data']['blog']

        response = self.client.get(f"/api/blogs/{created['id']}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        fetched = response.data['data']['blog']

        for field in ('title', 'excerpt', 'content', 'author', 'category', 'status', 'featured'):
            self.assertEqual(fetched[field], payload[field], field)
        self.assertEqual(fetched['tags'], ['pricing', 'seasonal'])
        self.assertEqual(dict(fetched['seo']), payload['seo'])
        self.assertEqual(fetched['slug'], 'selling-in-winter')
        self.assertEqual(fetched['read_time'], 1)

        for key in ('views', 'updated_at'):
            created.pop(key)
            fetched.pop(key)
        self.assertEqual(created, fetched)

    @patch('blogs.views.increment_counter', return_value=1)
    def test_row_deleted_after_counting_is_not_found(self, mock_increment):
        response = self.client.get('/api/blogs/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])

    def test_duplicate_title_conflict(self):
        self.client.post('/api/blogs/', self.payload(), format='json')
        response = self.client.post('/api/blogs/', self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(response.data['success'])

    def test_invalid_category(self):
        response = self.client.post('/api/blogs/', self.payload(category='gossip'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category', response.data['errors'])

    def test_admin_list_includes_drafts(self):
        make_post(title='Hidden Draft', status='draft')
        response = self.client.get('/api/blogs/', {'status': 'draft'})
        self.assertEqual(response.data['data']['pagination']['totalRecords'], 1)

    def test_update_title_regenerates_slug(self):
        post = make_post(title='Old Name')
        response = self.client.patch(f'/api/blogs/{post.id}/', {'title': 'New Name'}, format='json')
        self.assertEqual(response.data['data']['blog']['slug'], 'new-name')

    @patch('common.media.cloudinary.uploader.upload')
    def test_featured_image_upload(self, mock_upload):
        mock_upload.return_value = {
            'secure_url': 'https://res.cloudinary.com/demo/image/upload/v1/realestate/blogs/cover.jpg'
        }
        data = self.payload()
        data.pop('seo')
        data['featured_image'] = SimpleUploadedFile('cover.jpg', b'fake-image-bytes', content_type='image/jpeg')
        response = self.client.post('/api/blogs/', data, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['blog']['featured_image'], mock_upload.return_value['secure_url'])

    @patch('common.media.cloudinary.uploader.destroy')
    def test_delete_removes_featured_image(self, mock_destroy):
        post = make_post(featured_image='https://res.cloudinary.com/demo/image/upload/v1/realestate/blogs/cover.jpg')
        response = self.client.delete(f'/api/blogs/{post.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mock_destroy.assert_called_once_with('realestate/blogs/cover', resource_type='image')

    def test_stats(self):
        make_post(views=5, likes=2)
        make_post(title='A Draft', status='draft')
        response = self.client.get('/api/blogs/admin/stats/')
        overview = response.data['data']['overview']
        self.assertEqual(overview['totalBlogs'], 2)
        self.assertEqual(overview['publishedBlogs'], 1)
        self.assertEqual(overview['totalViews'], 5)
        self.assertEqual(response.data['data']['categories'][0]['category'], 'buying-guide')
