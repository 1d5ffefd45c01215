# accounts/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('register/', views.register, name='api_register'),
    path('login/', views.login, name='api_login'),
    path('profile/', views.profile, name='api_profile'),
    path('change-password/', views.change_password, name='change-password'),
    path('refresh-token/', views.refresh_token, name='refresh-token'),
]
