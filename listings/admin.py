# listings/admin.py

from django.contrib import admin
from django.utils.html import format_html
from .models import Listing


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):

    def image_thumbnail(self, obj):
        if not obj.images:
            return "No"
        return format_html(
            '<img src="{}" style="width: 80px; height: 60px; object-fit: cover; border-radius: 4px;" />',
            obj.images[0]
        )
    image_thumbnail.short_description = "Image"

    def formatted_price(self, obj):
        return f"${obj.price:,.0f}"
    formatted_price.short_description = "Price"
    formatted_price.admin_order_field = 'price'

    list_display = (
        'title',
        'city',
        'state',
        'property_type',
        'status',
        'formatted_price',
        'featured',
        'views',
        'image_thumbnail',
        'created_at',
    )
    list_filter = ('property_type', 'status', 'featured', 'created_at')
    search_fields = ('title', 'description', 'city', 'state', 'address', 'agent_name', 'agent_email')
    readonly_fields = ('views', 'created_at', 'updated_at')
    date_hierarchy = 'created_at'

    fieldsets = (
        ("Listing Overview", {
            "fields": ("title", "description", "property_type", "status", "price", "featured"),
        }),
        ("Location", {
            "fields": ("address", "city", "state", "zip_code", "latitude", "longitude"),
        }),
        ("Specifications", {
            "fields": ("area", "bedrooms", "bathrooms", "parking", "year_built", "features", "amenities"),
        }),
        ("Images", {
            "fields": ("images",),
            "classes": ("collapse",),
        }),
        ("Agent", {
            "fields": ("agent_name", "agent_email", "agent_phone"),
        }),
        ("Metadata", {
            "fields": ("views", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ['mark_featured', 'clear_featured']

    def mark_featured(self, request, queryset):
        updated = queryset.update(featured=True)
        self.message_user(request, f"Marked {updated} listing(s) as featured.")
    mark_featured.short_description = "Mark selected listings as featured"

    def clear_featured(self, request, queryset):
        updated = queryset.update(featured=False)
        self.message_user(request, f"Removed {updated} listing(s) from featured.")
    clear_featured.short_description = "Remove selected listings from featured"
