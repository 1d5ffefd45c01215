# common/serializers.py

import json

from rest_framework import serializers

from .utils import clean_string_list


class StringListField(serializers.ListField):
    """
    List of trimmed strings. Multipart forms send these either as a JSON
    string, repeated keys, or a single plain value.
    """
    child = serializers.CharField(allow_blank=True)

    def __init__(self, *args, lowercase=False, **kwargs):
        self.lowercase = lowercase
        kwargs.setdefault('required', False)
        super().__init__(*args, **kwargs)

    def get_value(self, dictionary):
        if hasattr(dictionary, 'getlist') and self.field_name in dictionary:
            values = dictionary.getlist(self.field_name)
            if len(values) == 1:
                return values[0]
            return values
        return super().get_value(dictionary)

    def to_internal_value(self, data):
        if isinstance(data, str):
            try:
                parsed = json.loads(data)
            except ValueError:
                parsed = [data]
            data = parsed if isinstance(parsed, list) else [parsed]
        return clean_string_list(super().to_internal_value(data), lowercase=self.lowercase)
