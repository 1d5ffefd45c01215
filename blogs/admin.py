# blogs/admin.py

from django.contrib import admin
from .models import Post, Tag


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    search_fields = ('name',)


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):

    def tag_list(self, obj):
        return ", ".join(tag.name for tag in obj.tags.all())
    tag_list.short_description = "Tags"

    list_display = ('title', 'author', 'category', 'status', 'featured', 'views', 'likes', 'read_time', 'created_at')
    list_filter = ('status', 'category', 'featured', 'created_at')
    search_fields = ('title', 'excerpt', 'content', 'author', 'tags__name')
    readonly_fields = ('slug', 'views', 'likes', 'read_time', 'created_at', 'updated_at')
    filter_horizontal = ('tags',)
    date_hierarchy = 'created_at'

    fieldsets = (
        ("Post", {
            "fields": ("title", "slug", "excerpt", "content", "author", "featured_image"),
        }),
        ("Classification", {
            "fields": ("category", "tags", "status", "featured"),
        }),
        ("SEO", {
            "fields": ("meta_title", "meta_description", "seo_keywords"),
            "classes": ("collapse",),
        }),
        ("Metadata", {
            "fields": ("views", "likes", "read_time", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related('tags')
