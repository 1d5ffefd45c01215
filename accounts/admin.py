# accounts/admin.py

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin

User = get_user_model()


@admin.register(User)
class AccountAdmin(UserAdmin):
    list_display = ("email", "username", "role", "is_active", "date_joined")
    list_filter = ("role", "is_active", "date_joined")
    search_fields = ("email", "username")
    ordering = ("-date_joined",)
    readonly_fields = ("date_joined", "updated_at", "last_login")

    fieldsets = (
        (None, {"fields": ("email", "username", "password")}),
        ("Access", {"fields": ("role", "is_active", "is_staff", "is_superuser")}),
        ("Dates", {"fields": ("last_login", "date_joined", "updated_at")}),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "username", "role", "password1", "password2"),
        }),
    )

    actions = ["grant_admin_role", "revoke_admin_role"]

    def grant_admin_role(self, request, queryset):
        updated = queryset.update(role="admin")
        self.message_user(request, f"Granted admin role to {updated} account(s).")
    grant_admin_role.short_description = "Grant admin role"

    def revoke_admin_role(self, request, queryset):
        updated = queryset.exclude(pk=request.user.pk).update(role="user")
        self.message_user(request, f"Revoked admin role from {updated} account(s).")
    revoke_admin_role.short_description = "Revoke admin role"
