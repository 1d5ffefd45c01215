# accounts/admin_urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('', views.user_list, name='user-list'),
    path('admin/stats/', views.user_stats, name='user-stats'),
    path('<int:user_id>/', views.user_detail, name='user-detail'),
    path('<int:user_id>/role/', views.user_role, name='user-role'),
]
