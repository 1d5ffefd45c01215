# jobs/models.py

from django.core.validators import MinValueValidator
from django.db import models

from common.models import SluggedModel

DEPARTMENT_CHOICES = [
    ('sales', 'Sales'),
    ('marketing', 'Marketing'),
    ('operations', 'Operations'),
    ('finance', 'Finance'),
    ('hr', 'HR'),
    ('it', 'IT'),
    ('legal', 'Legal'),
    ('administration', 'Administration'),
]

EMPLOYMENT_TYPE_CHOICES = [
    ('full-time', 'Full Time'),
    ('part-time', 'Part Time'),
    ('contract', 'Contract'),
    ('internship', 'Internship'),
    ('temporary', 'Temporary'),
]

EXPERIENCE_LEVEL_CHOICES = [
    ('entry-level', 'Entry Level'),
    ('mid-level', 'Mid Level'),
    ('senior-level', 'Senior Level'),
    ('executive', 'Executive'),
]

SALARY_PERIOD_CHOICES = [
    ('hourly', 'Hourly'),
    ('monthly', 'Monthly'),
    ('yearly', 'Yearly'),
]

STATUS_CHOICES = [
    ('active', 'Active'),
    ('paused', 'Paused'),
    ('closed', 'Closed'),
    ('draft', 'Draft'),
]


class JobPosting(SluggedModel):
    title = models.CharField(max_length=100)
    description = models.TextField(max_length=5000)

    # Location
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    remote = models.BooleanField(default=False)

    department = models.CharField(max_length=20, choices=DEPARTMENT_CHOICES, db_index=True)
    employment_type = models.CharField(max_length=20, choices=EMPLOYMENT_TYPE_CHOICES, db_index=True)
    experience_level = models.CharField(max_length=20, choices=EXPERIENCE_LEVEL_CHOICES, db_index=True)

    # Salary
    salary_min = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True, validators=[MinValueValidator(0)])
    salary_max = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True, validators=[MinValueValidator(0)])
    salary_currency = models.CharField(max_length=3, default='USD')
    salary_period = models.CharField(max_length=10, choices=SALARY_PERIOD_CHOICES, default='yearly')

    requirements = models.JSONField(default=list, blank=True)
    responsibilities = models.JSONField(default=list, blank=True)
    benefits = models.JSONField(default=list, blank=True)
    skills = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')
    featured = models.BooleanField(default=False)
    application_deadline = models.DateTimeField(blank=True, null=True)
    contact_email = models.EmailField()
    views = models.PositiveIntegerField(default=0)
    applications = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at'], name='job_status_recent_idx'),
            models.Index(fields=['-featured', '-created_at'], name='job_featured_recent_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.get_status_display()})"

    def save(self, *args, **kwargs):
        self.salary_currency = (self.salary_currency or 'USD').upper()
        super().save(*args, **kwargs)

    @property
    def salary_range(self):
        if self.salary_min and self.salary_max:
            return f"{self.salary_currency} {self.salary_min:,.0f} - {self.salary_max:,.0f} per {self.salary_period}"
        return "Salary not specified"
