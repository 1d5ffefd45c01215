# listings/urls.py

from django.urls import path
from . import views

urlpatterns = [
    # Public
    path('', views.listing_collection, name='project-list'),
    path('featured/', views.featured_listings, name='project-featured'),
    path('<int:listing_id>/', views.listing_detail, name='project-detail'),

    # Admin only
    path('admin/stats/', views.listing_stats, name='project-stats'),
]
