# jobs/serializers.py

from rest_framework import serializers

from common.serializers import StringListField
from .models import JobPosting, SALARY_PERIOD_CHOICES


class JobLocationSerializer(serializers.Serializer):
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    remote = serializers.BooleanField(required=False, default=False)


class JobSalarySerializer(serializers.Serializer):
    min = serializers.DecimalField(source='salary_min', max_digits=12, decimal_places=2, min_value=0,
                                   required=False, allow_null=True)
    max = serializers.DecimalField(source='salary_max', max_digits=12, decimal_places=2, min_value=0,
                                   required=False, allow_null=True)
    currency = serializers.CharField(source='salary_currency', max_length=3, required=False)
    period = serializers.ChoiceField(source='salary_period', choices=SALARY_PERIOD_CHOICES, required=False)

    def validate_currency(self, value):
        return value.upper()

    def validate(self, attrs):
        low, high = attrs.get('salary_min'), attrs.get('salary_max')
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError('Minimum salary cannot exceed maximum salary')
        return attrs


class JobPostingSerializer(serializers.ModelSerializer):
    location = JobLocationSerializer(source='*')
    salary = JobSalarySerializer(source='*', required=False)
    requirements = StringListField()
    responsibilities = StringListField()
    benefits = StringListField()
    skills = StringListField(lowercase=True)
    salary_range = serializers.CharField(read_only=True)

    class Meta:
        model = JobPosting
        fields = [
            'id',
            'title',
            'slug',
            'description',
            'location',
            'department',
            'employment_type',
            'experience_level',
            'salary',
            'salary_range',
            'requirements',
            'responsibilities',
            'benefits',
            'skills',
            'status',
            'featured',
            'application_deadline',
            'contact_email',
            'views',
            'applications',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['slug', 'views', 'applications', 'created_at', 'updated_at']
