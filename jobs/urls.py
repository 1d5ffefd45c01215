# jobs/urls.py

from django.urls import path
from . import views

urlpatterns = [
    # Public
    path('active/', views.active_jobs, name='job-active'),
    path('featured/', views.featured_jobs, name='job-featured'),
    path('slug/<slug:slug>/', views.job_by_slug, name='job-by-slug'),
    path('<int:job_id>/', views.job_detail, name='job-detail'),
    path('<int:job_id>/apply/', views.apply_to_job, name='job-apply'),

    # Admin only
    path('', views.job_collection, name='job-list'),
    path('admin/stats/', views.job_stats, name='job-stats'),
]
