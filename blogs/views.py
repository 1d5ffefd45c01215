# blogs/views.py

import logging

from django.db import transaction
from django.db.models import Avg, Count, Q, Sum
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from common.counters import increment_counter
from common.media import delete_image, upload_image, validate_image
from common.notifier import notify_change
from common.pagination import paginated_list
from common.permissions import IsAdminRole, IsAdminRoleOrReadOnly
from .filters import POST_FILTERS
from .models import Post
from .serializers import PostSerializer, PublicPostSerializer

logger = logging.getLogger(__name__)

TOPIC = 'blogs'
IMAGE_FOLDER = 'blogs'


def _posts():
    return Post.objects.prefetch_related('tags')


def _not_found():
    return Response({"success": False, "message": "Blog post not found"}, status=status.HTTP_404_NOT_FOUND)


def _featured_image(request):
    """Validate an optional `featured_image` upload. Returns (file, error_response)."""
    file = request.FILES.get('featured_image')
    if file is None:
        return None, None
    error = validate_image(file)
    if error:
        return None, Response({"success": False, "message": error}, status=status.HTTP_400_BAD_REQUEST)
    return file, None


# ============================================================================
# Public Endpoints
# ============================================================================

@api_view(['GET'])
@permission_classes([AllowAny])
def published_posts(request):
    """Paginated published posts; any `status` the client sends is overridden."""
    params = request.query_params.copy()
    params['status'] = 'published'
    data = paginated_list(request, _posts(), POST_FILTERS, PublicPostSerializer, key='blogs', params=params)
    return Response({"success": True, "data": data})


@api_view(['GET'])
@permission_classes([AllowAny])
def featured_posts(request):
    try:
        limit = max(1, min(int(request.query_params.get('limit', 3)), 100))
    except ValueError:
        limit = 3
    posts = _posts().filter(featured=True, status='published').order_by('-created_at', '-pk')[:limit]
    return Response({
        "success": True,
        "data": {"blogs": PublicPostSerializer(posts, many=True).data},
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def post_by_slug(request, slug):
    """Published posts only; counts as a view."""
    post_id = Post.objects.filter(slug=slug, status='published').values_list('pk', flat=True).first()
    if post_id is None or increment_counter(Post, post_id, 'views') is None:
        return _not_found()
    post = get_object_or_404(_posts(), pk=post_id)
    return Response({"success": True, "data": {"blog": PostSerializer(post).data}})


@api_view(['POST'])
@permission_classes([AllowAny])
def like_post(request, post_id):
    likes = increment_counter(Post, post_id, 'likes')
    if likes is None:
        return _not_found()
    return Response({
        "success": True,
        "message": "Blog post liked",
        "data": {"likes": likes},
    })


# ============================================================================
# Admin Endpoints
# ============================================================================

@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def post_collection(request):
    """
    GET: every post regardless of status, filtered and paginated.
    POST: create a post, with an optional multipart `featured_image`.
    """
    if request.method == 'GET':
        data = paginated_list(request, _posts(), POST_FILTERS, PostSerializer, key='blogs')
        return Response({"success": True, "data": data})

    file, error = _featured_image(request)
    if error:
        return error

    serializer = PostSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    extra = {}
    if file is not None:
        extra['featured_image'] = upload_image(file, IMAGE_FOLDER)
    try:
        with transaction.atomic():
            post = serializer.save(**extra)
            payload = PostSerializer(post).data
            notify_change(TOPIC, 'blog_created', {"blog": payload, "message": "New blog post created"})
    except Exception:
        delete_image(extra.get('featured_image'))
        raise

    logger.info(f"Post {post.pk} created")
    return Response({
        "success": True,
        "message": "Blog post created successfully",
        "data": {"blog": payload},
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRoleOrReadOnly])
def post_detail(request, post_id):
    if request.method == 'GET':
        if increment_counter(Post, post_id, 'views') is None:
            return _not_found()
        post = get_object_or_404(_posts(), pk=post_id)
        return Response({"success": True, "data": {"blog": PostSerializer(post).data}})

    post = get_object_or_404(_posts(), id=post_id)

    if request.method == 'DELETE':
        old_image = post.featured_image
        with transaction.atomic():
            post.delete()
            notify_change(TOPIC, 'blog_deleted', {"blogId": post_id, "message": "Blog post deleted"})
        delete_image(old_image)
        logger.info(f"Post {post_id} deleted")
        return Response({"success": True, "message": "Blog post deleted successfully"})

    file, error = _featured_image(request)
    if error:
        return error

    serializer = PostSerializer(post, data=request.data, partial=request.method == 'PATCH')
    serializer.is_valid(raise_exception=True)

    old_image = post.featured_image
    extra = {}
    if file is not None:
        extra['featured_image'] = upload_image(file, IMAGE_FOLDER)
    try:
        with transaction.atomic():
            post = serializer.save(**extra)
            payload = PostSerializer(post).data
            notify_change(TOPIC, 'blog_updated', {"blog": payload, "message": "Blog post updated"})
    except Exception:
        delete_image(extra.get('featured_image'))
        raise

    if file is not None:
        delete_image(old_image)

    return Response({
        "success": True,
        "message": "Blog post updated successfully",
        "data": {"blog": payload},
    })


@api_view(['GET'])
@permission_classes([IsAdminRole])
def post_stats(request):
    overview = Post.objects.aggregate(
        totalBlogs=Count('id'),
        publishedBlogs=Count('id', filter=Q(status='published')),
        draftBlogs=Count('id', filter=Q(status='draft')),
        totalViews=Sum('views'),
        totalLikes=Sum('likes'),
        averageReadTime=Avg('read_time'),
    )
    for key in ('totalViews', 'totalLikes', 'averageReadTime'):
        overview[key] = overview[key] or 0

    categories = list(
        Post.objects.filter(status='published')
        .values('category')
        .annotate(count=Count('id'), totalViews=Sum('views'))
        .order_by('category')
    )
    return Response({
        "success": True,
        "data": {"overview": overview, "categories": categories},
    })
