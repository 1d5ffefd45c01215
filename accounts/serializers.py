# accounts/serializers.py
import re

from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from .models import ROLE_CHOICES, normalize_account_email, username_validator

User = get_user_model()

_PASSWORD_STRENGTH = re.compile(r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)')


def validate_password_strength(value):
    if len(value) < 6:
        raise serializers.ValidationError('Password must be at least 6 characters long')
    if not _PASSWORD_STRENGTH.match(value):
        raise serializers.ValidationError(
            'Password must contain at least one lowercase letter, one uppercase letter, and one number'
        )
    return value


class UserSerializer(serializers.ModelSerializer):
    """Outward representation of an account. The password is never included."""
    created_at = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'role', 'created_at', 'updated_at')
        read_only_fields = fields


class AccountWriteSerializer(serializers.ModelSerializer):
    """
    Shared create/update logic for accounts: email normalization, uniqueness
    (case-insensitive on email) and password hashing.
    """
    username = serializers.CharField(
        min_length=3,
        max_length=30,
        validators=[
            username_validator,
            UniqueValidator(queryset=User.objects.all(), message='Username already taken'),
        ],
    )
    email = serializers.EmailField(
        validators=[
            UniqueValidator(queryset=User.objects.all(), lookup='iexact', message='Email already registered'),
        ],
    )
    password = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'},
        validators=[validate_password_strength],
    )

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'password', 'role')

    def validate_username(self, value):
        return value.strip()

    def validate_email(self, value):
        return normalize_account_email(value)

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        """
        Override update to handle password hashing if password is provided.
        """
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)

        if password:
            instance.set_password(password)

        instance.save()
        return instance

    def to_representation(self, instance):
        return UserSerializer(instance, context=self.context).data


class RegisterSerializer(AccountWriteSerializer):
    class Meta(AccountWriteSerializer.Meta):
        fields = ('id', 'username', 'email', 'password')


class AdminUserSerializer(AccountWriteSerializer):
    """Used by admins; password is optional on update and the role is writable."""
    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance is not None:
            self.fields['password'].required = False


class ProfileSerializer(AccountWriteSerializer):
    class Meta(AccountWriteSerializer.Meta):
        fields = ('id', 'username', 'email')


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(style={'input_type': 'password'})

    def validate_email(self, value):
        return normalize_account_email(value)


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField()
    new_password = serializers.CharField(validators=[validate_password_strength])


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=ROLE_CHOICES)
