# common/models.py

import string

from django.db import models
from django.utils.crypto import get_random_string

from .utils import slugify_title


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class TrackedFieldsModel(TimeStampedModel):
    """
    Remembers the database value of the fields named in `tracked_fields` so
    `save()` can tell whether a source field really changed before
    recomputing whatever is derived from it.
    """
    tracked_fields = ()

    class Meta:
        abstract = True

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_values = {
            name: value for name, value in zip(field_names, values)
            if name in cls.tracked_fields
        }
        return instance

    def has_changed(self, field_name):
        loaded = getattr(self, '_loaded_values', None)
        if self._state.adding or loaded is None or field_name not in loaded:
            return True
        return loaded[field_name] != getattr(self, field_name)

    def refresh_tracked_values(self):
        self._loaded_values = {name: getattr(self, name) for name in self.tracked_fields}


class SluggedModel(TrackedFieldsModel):
    """Title-bearing record whose slug is rebuilt whenever the title changes."""
    tracked_fields = ('title',)

    slug = models.SlugField(max_length=220, unique=True, blank=True)

    class Meta:
        abstract = True

    def apply_derived_fields(self):
        if self.has_changed('title') or not self.slug:
            # Titles without ASCII letters or digits slugify to nothing
            self.slug = slugify_title(self.title) or self.fallback_slug()

    def fallback_slug(self):
        suffix = get_random_string(8, allowed_chars=string.ascii_lowercase + string.digits)
        return f"{self._meta.model_name}-{suffix}"

    def save(self, *args, **kwargs):
        self.apply_derived_fields()
        super().save(*args, **kwargs)
        self.refresh_tracked_values()
