# listings/models.py
import datetime

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from common.models import TimeStampedModel

# Property type choices
PROPERTY_TYPE_CHOICES = [
    ('residential', 'Residential'),
    ('commercial', 'Commercial'),
    ('industrial', 'Industrial'),
    ('land', 'Land'),
]

# Listing status choices
STATUS_CHOICES = [
    ('available', 'Available'),
    ('sold', 'Sold'),
    ('pending', 'Pending'),
    ('under-construction', 'Under Construction'),
]

MIN_YEAR_BUILT = 1800


def max_year_built():
    return datetime.date.today().year + 5


def validate_year_built(value):
    if value is None:
        return
    if value < MIN_YEAR_BUILT:
        raise ValidationError('Year built seems too old')
    if value > max_year_built():
        raise ValidationError('Year built cannot be too far in the future')


class Listing(TimeStampedModel):
    title = models.CharField(max_length=100)
    description = models.TextField(max_length=2000)
    images = models.JSONField(default=list, blank=True)  # Cloudinary image URLs

    # Location
    address = models.CharField(max_length=500)
    city = models.CharField(max_length=100, db_index=True)
    state = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20)
    latitude = models.FloatField(blank=True, null=True)
    longitude = models.FloatField(blank=True, null=True)

    price = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(0)], db_index=True)
    property_type = models.CharField(max_length=20, choices=PROPERTY_TYPE_CHOICES, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='available', db_index=True)
    features = models.JSONField(default=list, blank=True)
    amenities = models.JSONField(default=list, blank=True)

    # Specifications
    area = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    bedrooms = models.PositiveIntegerField(blank=True, null=True)
    bathrooms = models.PositiveIntegerField(blank=True, null=True)
    parking = models.PositiveIntegerField(default=0)
    year_built = models.PositiveIntegerField(blank=True, null=True, validators=[validate_year_built])

    featured = models.BooleanField(default=False)
    views = models.PositiveIntegerField(default=0)

    # Agent contact
    agent_name = models.CharField(max_length=200, blank=True)
    agent_email = models.EmailField(blank=True)
    agent_phone = models.CharField(max_length=30, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-featured', '-created_at'], name='listing_featured_recent_idx'),
        ]

    def __str__(self):
        return f"{self.title} [{self.get_status_display()}]"

    @property
    def price_per_sq_ft(self):
        if self.area:
            return round(self.price / self.area)
        return None
