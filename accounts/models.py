from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models

ROLE_CHOICES = [
    ('admin', 'Admin'),
    ('user', 'User'),
]

username_validator = RegexValidator(
    r'^[A-Za-z0-9_]+$',
    'Username can only contain letters, numbers, and underscores'
)


def normalize_account_email(email):
    return (email or '').strip().lower()


class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('The Email field must be set')
        email = normalize_account_email(email)
        # Fall back to a username derived from the email local part
        if not extra_fields.get('username'):
            base_username = ''.join(
                ch if (ch.isascii() and ch.isalnum()) or ch == '_' else '_'
                for ch in email.split('@')[0]
            )[:26]
            # Usernames are at least 3 characters long
            if len(base_username) < 3:
                base_username = f"{base_username}_user" if base_username else 'user'
            username = base_username
            counter = 1
            while self.model.objects.filter(username=username).exists():
                username = f"{base_username}_{counter}"[:30]
                counter += 1
            extra_fields['username'] = username
        extra_fields.setdefault('role', 'user')
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', 'admin')

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    username = models.CharField(
        max_length=30,
        unique=True,
        validators=[MinLengthValidator(3), username_validator],
    )
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='user', db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    objects = UserManager()

    class Meta:
        ordering = ['-date_joined']

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        return self.role == 'admin'

    def save(self, *args, **kwargs):
        self.email = normalize_account_email(self.email)
        super().save(*args, **kwargs)
