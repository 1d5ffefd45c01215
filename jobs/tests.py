"""
Tests for the job posting API.
"""

from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from .models import JobPosting
from .serializers import JobPostingSerializer

User = get_user_model()


def make_job(**overrides):
    fields = {
        'title': 'Sales Associate',
        'description': 'Help buyers find the right home.',
        'city': 'Austin',
        'state': 'TX',
        'department': 'sales',
        'employment_type': 'full-time',
        'experience_level': 'entry-level',
        'contact_email': 'jobs@example.com',
        'skills': ['negotiation', 'crm'],
    }
    fields.update(overrides)
    return JobPosting.objects.create(**fields)


class JobPostingModelTests(TestCase):

    def test_salary_range(self):
        job = make_job(salary_min=Decimal('50000'), salary_max=Decimal('70000'), salary_currency='usd')
        self.assertEqual(job.salary_range, 'USD 50,000 - 70,000 per yearly')

    def test_salary_not_specified(self):
        self.assertEqual(make_job().salary_range, 'Salary not specified')

    def test_slug(self):
        self.assertEqual(make_job(title='Senior Data / BI Analyst').slug, 'senior-data-bi-analyst')

    def test_serializer_rejects_inverted_salary(self):
        serializer = JobPostingSerializer(data={
            'title': 'Analyst',
            'description': 'Numbers.',
            'location': {'city': 'Austin', 'state': 'TX'},
            'department': 'finance',
            'employment_type': 'contract',
            'experience_level': 'mid-level',
            'contact_email': 'hr@example.com',
            'salary': {'min': 90000, 'max': 10000},
        })
        self.assertFalse(serializer.is_valid())
        self.assertIn('salary', serializer.errors)


class PublicJobApiTests(APITestCase):

    def setUp(self):
        self.active = make_job(title='Field Agent', remote=True, featured=True)
        self.closed = make_job(title='Old Role', status='closed', city='Houston')

    def test_active_forces_status(self):
        response = self.client.get('/api/jobs/active/', {'status': 'closed'})
        ids = [j['id'] for j in response.data['data']['jobs']]
        self.assertEqual(ids, [self.active.id])

    def test_location_matches_city_or_state(self):
        make_job(title='Remote Ops', city='Boise', state='ID', department='operations')
        response = self.client.get('/api/jobs/active/', {'location': 'id'})
        titles = [j['title'] for j in response.data['data']['jobs']]
        self.assertEqual(titles, ['Remote Ops'])

    def test_remote_flag(self):
        make_job(title='Office Role')
        response = self.client.get('/api/jobs/active/', {'remote': 'true'})
        ids = [j['id'] for j in response.data['data']['jobs']]
        self.assertEqual(ids, [self.active.id])

        response = self.client.get('/api/jobs/active/', {'remote': 'yes'})
        titles = [j['title'] for j in response.data['data']['jobs']]
        self.assertEqual(titles, ['Office Role'])

    def test_search_skills(self):
        make_job(title='Designer', skills=['figma'], department='marketing')
        response = self.client.get('/api/jobs/active/', {'search': 'FIGMA'})
        titles = [j['title'] for j in response.data['data']['jobs']]
        self.assertEqual(titles, ['Designer'])

    def test_featured(self):
        response = self.client.get('/api/jobs/featured/')
        self.assertEqual(len(response.data['data']['jobs']), 1)

    def test_slug_only_active(self):
        self.assertEqual(self.client.get(f'/api/jobs/slug/{self.active.slug}/').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(f'/api/jobs/slug/{self.closed.slug}/').status_code, status.HTTP_404_NOT_FOUND)

    def test_detail_increments_views(self):
        response = self.client.get(f'/api/jobs/{self.closed.id}/')
        self.assertEqual(response.data['data']['job']['views'], 1)

    def test_apply_active(self):
        response = self.client.post(f'/api/jobs/{self.active.id}/apply/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['applications'], 1)

    def test_apply_closed_rejected(self):
        response = self.client.post(f'/api/jobs/{self.closed.id}/apply/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.closed.refresh_from_db()
        self.assertEqual(self.closed.applications, 0)

    def test_apply_missing(self):
        response = self.client.post('/api/jobs/999999/apply/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class AdminJobApiTests(APITestCase):

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@example.com', password='Secret123', username='jobs_admin', role='admin'
        )
        self.client.force_authenticate(self.admin)

    def test_create(self):
        response = self.client.post('/api/jobs/', {
            'title': 'Marketing Lead',
            'description': 'Own our brand.',
            'location': {'city': 'Denver', 'state': 'CO', 'remote': True},
            'department': 'marketing',
            'employment_type': 'full-time',
            'experience_level': 'senior-level',
            'contact_email': 'hr@example.com',
            'salary': {'min': 80000, 'max': 120000, 'currency': 'eur'},
            'skills': ['SEO', 'Copywriting'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        job = response.data['data']['job']
        self.assertEqual(job['slug'], 'marketing-lead')
        self.assertEqual(job['status'], 'active')
        self.assertEqual(job['skills'], ['seo', 'copywriting'])
        self.assertEqual(job['salary']['currency'], 'EUR')
        self.assertEqual(job['salary_range'], 'EUR 80,000 - 120,000 per yearly')
        self.assertTrue(job['location']['remote'])

    def test_create_then_fetch_round_trip(self):
        payload = {
            'title': 'Closing Coordinator',
            'description': 'Keep every deal on schedule.',
            'location': {'city': 'Denver', 'state': 'CO', 'remote': False},
            'department': 'operations',
            'employment_type': 'part-time',
            'experience_level': 'mid-level',
            'salary': {'min': 25, 'max': 40, 'currency': 'usd', 'period': 'hourly'},
            'requirements': ['Two years in escrow', 'Attention to detail'],
            'responsibilities': ['Track deadlines'],
            'benefits': ['Health plan', 'Remote Fridays'],
            'skills': ['Docusign', 'Excel'],
            'featured': True,
            'contact_email': 'closings@example.com',
        }
        created = self.client.post('/api/jobs/', payload, format='json').data['data']['job']

        response = self.client.get(f"/api/jobs/{created['id']}/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        fetched = response.data['data']['job']

        for field in ('title', 'description', 'department', 'employment_type', 'experience_level',
                      'requirements', 'responsibilities', 'benefits', 'featured', 'contact_email'):
            self.assertEqual(fetched[field], payload[field], field)
        self.assertEqual(dict(fetched['location']), payload['location'])
        self.assertEqual(dict(fetched['salary']), {
            'min': Decimal('25'), 'max': Decimal('40'), 'currency': 'USD', 'period': 'hourly',
        })
        self.assertEqual(fetched['skills'], ['docusign', 'excel'])
        self.assertEqual(fetched['status'], 'active')

        for key in ('views', 'updated_at'):
            created.pop(key)
            fetched.pop(key)
        self.assertEqual(created, fetched)

    @patch('jobs.views.increment_counter', return_value=1)
    def test_row_deleted_after_counting_is_not_found(self, mock_increment):
        response = self.client.get('/api/jobs/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])

    def test_update_status(self):
        job = make_job()
        response = self.client.patch(f'/api/jobs/{job.id}/', {'status': 'paused'}, format='json')
        self.assertEqual(response.data['data']['job']['status'], 'paused')

    def test_delete(self):
        job = make_job()
        response = self.client.delete(f'/api/jobs/{job.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(JobPosting.objects.filter(id=job.id).exists())

    def test_list_requires_admin(self):
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get('/api/jobs/').status_code, status.HTTP_401_UNAUTHORIZED)

    def test_stats(self):
        make_job(applications=3)
        make_job(title='Paused Role', status='paused')
        response = self.client.get('/api/jobs/admin/stats/')
        data = response.data['data']
        self.assertEqual(data['overview']['totalJobs'], 2)
        self.assertEqual(data['overview']['pausedJobs'], 1)
        self.assertEqual(data['overview']['totalApplications'], 3)
        self.assertEqual(data['departments'], [{'department': 'sales', 'count': 1, 'totalApplications': 3}])
