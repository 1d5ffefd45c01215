# jobs/admin.py

from django.contrib import admin
from .models import JobPosting


@admin.register(JobPosting)
class JobPostingAdmin(admin.ModelAdmin):
    list_display = (
        'title',
        'department',
        'employment_type',
        'experience_level',
        'city',
        'remote',
        'status',
        'featured',
        'views',
        'applications',
        'application_deadline',
    )
    list_filter = ('status', 'department', 'employment_type', 'experience_level', 'remote', 'featured')
    search_fields = ('title', 'description', 'city', 'state', 'contact_email')
    readonly_fields = ('slug', 'salary_range', 'views', 'applications', 'created_at', 'updated_at')
    date_hierarchy = 'created_at'

    fieldsets = (
        ("Position", {
            "fields": ("title", "slug", "description", "department", "employment_type", "experience_level"),
        }),
        ("Location", {
            "fields": ("city", "state", "remote"),
        }),
        ("Salary", {
            "fields": ("salary_min", "salary_max", "salary_currency", "salary_period", "salary_range"),
        }),
        ("Details", {
            "fields": ("requirements", "responsibilities", "benefits", "skills"),
            "classes": ("collapse",),
        }),
        ("Publishing", {
            "fields": ("status", "featured", "application_deadline", "contact_email"),
        }),
        ("Metadata", {
            "fields": ("views", "applications", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ['close_postings']

    def close_postings(self, request, queryset):
        updated = queryset.update(status='closed')
        self.message_user(request, f"Closed {updated} job posting(s).")
    close_postings.short_description = "Close selected job postings"
