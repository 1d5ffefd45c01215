# jobs/views.py

import logging

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from common.counters import increment_counter
from common.notifier import notify_change
from common.pagination import paginated_list
from common.permissions import IsAdminRole, IsAdminRoleOrReadOnly
from .filters import POSTING_FILTERS
from .models import JobPosting
from .serializers import JobPostingSerializer

logger = logging.getLogger(__name__)

TOPIC = 'jobs'


def _not_found():
    return Response({"success": False, "message": "Job posting not found"}, status=status.HTTP_404_NOT_FOUND)


@api_view(['GET'])
@permission_classes([AllowAny])
def active_jobs(request):
    """Paginated open positions; the `status` parameter is always 'active'."""
    params = request.query_params.copy()
    params['status'] = 'active'
    data = paginated_list(request, JobPosting.objects.all(), POSTING_FILTERS, JobPostingSerializer,
                          key='jobs', params=params)
    return Response({"success": True, "data": data})


@api_view(['GET'])
@permission_classes([AllowAny])
def featured_jobs(request):
    try:
        limit = max(1, min(int(request.query_params.get('limit', 5)), 100))
    except ValueError:
        limit = 5
    jobs = JobPosting.objects.filter(featured=True, status='active').order_by('-created_at', '-pk')[:limit]
    return Response({
        "success": True,
        "data": {"jobs": JobPostingSerializer(jobs, many=True).data},
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def job_by_slug(request, slug):
    job_id = JobPosting.objects.filter(slug=slug, status='active').values_list('pk', flat=True).first()
    if job_id is None or increment_counter(JobPosting, job_id, 'views') is None:
        return _not_found()
    job = get_object_or_404(JobPosting, pk=job_id)
    return Response({"success": True, "data": {"job": JobPostingSerializer(job).data}})


@api_view(['POST'])
@permission_classes([AllowAny])
def apply_to_job(request, job_id):
    """Count an application; only active postings accept them."""
    applications = increment_counter(JobPosting, job_id, 'applications', status='active')
    if applications is None:
        if not JobPosting.objects.filter(pk=job_id).exists():
            return _not_found()
        return Response({
            "success": False,
            "message": "This job posting is no longer accepting applications"
        }, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        "success": True,
        "message": "Application submitted successfully",
        "data": {"applications": applications},
    })


@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def job_collection(request):
    if request.method == 'GET':
        data = paginated_list(request, JobPosting.objects.all(), POSTING_FILTERS, JobPostingSerializer, key='jobs')
        return Response({"success": True, "data": data})

    serializer = JobPostingSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    with transaction.atomic():
        job = serializer.save()
        payload = JobPostingSerializer(job).data
        notify_change(TOPIC, 'job_created', {"job": payload, "message": "New job posting created"})

    logger.info(f"Job posting {job.pk} created")
    return Response({
        "success": True,
        "message": "Job posting created successfully",
        "data": {"job": payload},
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRoleOrReadOnly])
def job_detail(request, job_id):
    if request.method == 'GET':
        if increment_counter(JobPosting, job_id, 'views') is None:
            return _not_found()
        job = get_object_or_404(JobPosting, pk=job_id)
        return Response({"success": True, "data": {"job": JobPostingSerializer(job).data}})

    job = get_object_or_404(JobPosting, id=job_id)

    if request.method == 'DELETE':
        with transaction.atomic():
            job.delete()
            notify_change(TOPIC, 'job_deleted', {"jobId": job_id, "message": "Job posting deleted"})
        logger.info(f"Job posting {job_id} deleted")
        return Response({"success": True, "message": "Job posting deleted successfully"})

    serializer = JobPostingSerializer(job, data=request.data, partial=request.method == 'PATCH')
    serializer.is_valid(raise_exception=True)
    with transaction.atomic():
        job = serializer.save()
        payload = JobPostingSerializer(job).data
        notify_change(TOPIC, 'job_updated', {"job": payload, "message": "Job posting updated"})

    return Response({
        "success": True,
        "message": "Job posting updated successfully",
        "data": {"job": payload},
    })


@api_view(['GET'])
@permission_classes([IsAdminRole])
def job_stats(request):
    overview = JobPosting.objects.aggregate(
        totalJobs=Count('id'),
        activeJobs=Count('id', filter=Q(status='active')),
        pausedJobs=Count('id', filter=Q(status='paused')),
        closedJobs=Count('id', filter=Q(status='closed')),
        totalViews=Sum('views'),
        totalApplications=Sum('applications'),
    )
    overview['totalViews'] = overview['totalViews'] or 0
    overview['totalApplications'] = overview['totalApplications'] or 0

    active = JobPosting.objects.filter(status='active')
    departments = list(
        active.values('department')
        .annotate(count=Count('id'), totalApplications=Sum('applications'))
        .order_by('department')
    )
    employment_types = list(
        active.values('employment_type')
        .annotate(count=Count('id'))
        .order_by('employment_type')
    )
    return Response({
        "success": True,
        "data": {
            "overview": overview,
            "departments": departments,
            "employmentTypes": employment_types,
        },
    })
