# blogs/urls.py

from django.urls import path
from . import views

urlpatterns = [
    # Public
    path('published/', views.published_posts, name='blog-published'),
    path('featured/', views.featured_posts, name='blog-featured'),
    path('slug/<slug:slug>/', views.post_by_slug, name='blog-by-slug'),
    path('<int:post_id>/', views.post_detail, name='blog-detail'),
    path('<int:post_id>/like/', views.like_post, name='blog-like'),

    # Admin only
    path('', views.post_collection, name='blog-list'),
    path('admin/stats/', views.post_stats, name='blog-stats'),
]
