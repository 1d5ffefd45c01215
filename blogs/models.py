# blogs/models.py

from django.db import models

from common.models import SluggedModel
from common.utils import estimate_read_time

CATEGORY_CHOICES = [
    ('market-trends', 'Market Trends'),
    ('buying-guide', 'Buying Guide'),
    ('selling-tips', 'Selling Tips'),
    ('investment', 'Investment'),
    ('news', 'News'),
    ('lifestyle', 'Lifestyle'),
]

STATUS_CHOICES = [
    ('draft', 'Draft'),
    ('published', 'Published'),
    ('archived', 'Archived'),
]


class Tag(models.Model):
    name = models.CharField(max_length=50, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    @classmethod
    def for_names(cls, names):
        """Existing or newly created tags for `names` (already cleaned), in order."""
        return [cls.objects.get_or_create(name=name)[0] for name in dict.fromkeys(names)]


class Post(SluggedModel):
    tracked_fields = ('title', 'content')

    title = models.CharField(max_length=200)
    excerpt = models.CharField(max_length=300)
    content = models.TextField()
    author = models.CharField(max_length=100)
    featured_image = models.URLField(max_length=500, blank=True)  # Cloudinary URL
    tags = models.ManyToManyField(Tag, related_name='posts', blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, db_index=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='draft')
    featured = models.BooleanField(default=False)
    views = models.PositiveIntegerField(default=0)
    likes = models.PositiveIntegerField(default=0)
    read_time = models.PositiveIntegerField(default=1)  # minutes

    # SEO
    meta_title = models.CharField(max_length=60, blank=True)
    meta_description = models.CharField(max_length=160, blank=True)
    seo_keywords = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at'], name='post_status_recent_idx'),
            models.Index(fields=['-featured', '-created_at'], name='post_featured_recent_idx'),
        ]

    def __str__(self):
        return self.title

    def apply_derived_fields(self):
        super().apply_derived_fields()
        if self.has_changed('content'):
            self.read_time = estimate_read_time(self.content)
