"""
URL configuration for the real estate content API.

The `urlpatterns` list routes URLs to views.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def home(request):
    return JsonResponse({"success": True, "message": "Real estate API is running"})


def route_not_found(request, exception=None):
    return JsonResponse({"success": False, "message": "Route not found"}, status=404)


urlpatterns = [
    # Root/Homepage
    path('', home, name='home'),

    # Admin Interface
    path('admin/', admin.site.urls),

    # Auth (register, login, profile, password, token refresh)
    path('api/auth/', include('accounts.urls')),

    # Account management (admin only)
    path('api/users/', include('accounts.admin_urls')),

    path('api/projects/', include('listings.urls')),

    path('api/blogs/', include('blogs.urls')),

    path('api/jobs/', include('jobs.urls')),
]

handler404 = route_not_found
