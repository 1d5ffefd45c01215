# listings/views.py

import logging

from django.db import transaction
from django.db.models import Avg, Count, Q, Sum
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from common.counters import increment_counter
from common.media import MAX_IMAGES, delete_images, upload_images, validate_image
from common.notifier import notify_change
from common.pagination import paginated_list
from common.permissions import IsAdminRole, IsAdminRoleOrReadOnly
from .filters import LISTING_FILTERS
from .models import Listing
from .serializers import ListingSerializer

logger = logging.getLogger(__name__)

TOPIC = 'projects'
IMAGE_FOLDER = 'projects'


def _uploaded_images(request):
    """Validate the multipart `images` files. Returns (files, error_response)."""
    files = request.FILES.getlist('images')
    if len(files) > MAX_IMAGES:
        return None, Response({
            "success": False,
            "message": f"Too many files. Maximum {MAX_IMAGES} files allowed."
        }, status=status.HTTP_400_BAD_REQUEST)
    for file in files:
        error = validate_image(file)
        if error:
            return None, Response({"success": False, "message": error}, status=status.HTTP_400_BAD_REQUEST)
    return files, None


@api_view(['GET', 'POST'])
@permission_classes([IsAdminRoleOrReadOnly])
def listing_collection(request):
    """
    GET: public, filtered and paginated listings.
    POST: create a listing (admin), with optional multipart `images`.
    """
    if request.method == 'GET':
        data = paginated_list(request, Listing.objects.all(), LISTING_FILTERS, ListingSerializer, key='projects')
        return Response({"success": True, "data": data})

    files, error = _uploaded_images(request)
    if error:
        return error

    serializer = ListingSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    image_urls = upload_images(files, IMAGE_FOLDER) if files else []
    try:
        with transaction.atomic():
            listing = serializer.save(images=image_urls)
            payload = ListingSerializer(listing).data
            notify_change(TOPIC, 'project_created', {"project": payload, "message": "New project added"})
    except Exception:
        delete_images(image_urls)
        raise

    logger.info(f"Listing {listing.pk} created")
    return Response({
        "success": True,
        "message": "Project created successfully",
        "data": {"project": payload},
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([AllowAny])
def featured_listings(request):
    """Featured listings that are still available, newest first."""
    try:
        limit = max(1, min(int(request.query_params.get('limit', 6)), 100))
    except ValueError:
        limit = 6
    listings = Listing.objects.filter(featured=True, status='available').order_by('-created_at', '-pk')[:limit]
    return Response({
        "success": True,
        "data": {"projects": ListingSerializer(listings, many=True).data},
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRoleOrReadOnly])
def listing_detail(request, listing_id):
    if request.method == 'GET':
        if increment_counter(Listing, listing_id, 'views') is None:
            return Response({"success": False, "message": "Project not found"}, status=status.HTTP_404_NOT_FOUND)
        listing = get_object_or_404(Listing, pk=listing_id)
        return Response({"success": True, "data": {"project": ListingSerializer(listing).data}})

    listing = get_object_or_404(Listing, id=listing_id)

    if request.method == 'DELETE':
        old_images = list(listing.images or [])
        with transaction.atomic():
            listing.delete()
            notify_change(TOPIC, 'project_deleted', {"projectId": listing_id, "message": "Project deleted"})
        delete_images(old_images)
        logger.info(f"Listing {listing_id} deleted")
        return Response({"success": True, "message": "Project deleted successfully"})

    files, error = _uploaded_images(request)
    if error:
        return error

    serializer = ListingSerializer(listing, data=request.data, partial=request.method == 'PATCH')
    serializer.is_valid(raise_exception=True)

    old_images = list(listing.images or [])
    extra = {}
    if files:
        extra['images'] = upload_images(files, IMAGE_FOLDER)
    try:
        with transaction.atomic():
            listing = serializer.save(**extra)
            payload = ListingSerializer(listing).data
            notify_change(TOPIC, 'project_updated', {"project": payload, "message": "Project updated"})
    except Exception:
        delete_images(extra.get('images'))
        raise

    # New uploads replace the previous set
    if files:
        delete_images(old_images)

    return Response({
        "success": True,
        "message": "Project updated successfully",
        "data": {"project": payload},
    })


@api_view(['GET'])
@permission_classes([IsAdminRole])
def listing_stats(request):
    overview = Listing.objects.aggregate(
        totalProjects=Count('id'),
        availableProjects=Count('id', filter=Q(status='available')),
        soldProjects=Count('id', filter=Q(status='sold')),
        pendingProjects=Count('id', filter=Q(status='pending')),
        averagePrice=Avg('price'),
        totalViews=Sum('views'),
    )
    overview['averagePrice'] = overview['averagePrice'] or 0
    overview['totalViews'] = overview['totalViews'] or 0

    property_types = list(
        Listing.objects.values('property_type')
        .annotate(count=Count('id'), averagePrice=Avg('price'))
        .order_by('property_type')
    )
    return Response({
        "success": True,
        "data": {"overview": overview, "propertyTypes": property_types},
    })
