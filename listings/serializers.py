# listings/serializers.py

from rest_framework import serializers

from common.serializers import StringListField
from .models import Listing, MIN_YEAR_BUILT, max_year_built


class ListingLocationSerializer(serializers.Serializer):
    address = serializers.CharField(max_length=500)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    zip_code = serializers.CharField(max_length=20)
    latitude = serializers.FloatField(required=False, allow_null=True)
    longitude = serializers.FloatField(required=False, allow_null=True)


class ListingSpecificationsSerializer(serializers.Serializer):
    area = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    bedrooms = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    bathrooms = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    parking = serializers.IntegerField(min_value=0, required=False, default=0)
    year_built = serializers.IntegerField(required=False, allow_null=True)

    def validate_year_built(self, value):
        if value is None:
            return value
        if value < MIN_YEAR_BUILT:
            raise serializers.ValidationError('Year built seems too old')
        if value > max_year_built():
            raise serializers.ValidationError('Year built cannot be too far in the future')
        return value


class ListingAgentSerializer(serializers.Serializer):
    name = serializers.CharField(source='agent_name', required=False, allow_blank=True)
    email = serializers.EmailField(source='agent_email', required=False, allow_blank=True)
    phone = serializers.CharField(source='agent_phone', required=False, allow_blank=True)


class ListingSerializer(serializers.ModelSerializer):
    """
    Flat columns on the model, nested `location`, `specifications` and
    `agent` blocks on the wire.
    """
    location = ListingLocationSerializer(source='*')
    specifications = ListingSpecificationsSerializer(source='*')
    agent = ListingAgentSerializer(source='*', required=False)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    features = StringListField()
    amenities = StringListField()
    images = serializers.ListField(child=serializers.URLField(), read_only=True)
    price_per_sq_ft = serializers.IntegerField(read_only=True)

    class Meta:
        model = Listing
        fields = [
            'id',
            'title',
            'description',
            'images',
            'location',
            'price',
            'property_type',
            'status',
            'features',
            'specifications',
            'amenities',
            'featured',
            'views',
            'agent',
            'price_per_sq_ft',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['views', 'created_at', 'updated_at']
        extra_kwargs = {
            'title': {'min_length': 3},
            'description': {'min_length': 10},
        }
