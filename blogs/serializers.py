# blogs/serializers.py

from rest_framework import serializers

from common.serializers import StringListField
from .models import Post, Tag


class TagListField(StringListField):
    """Tag names in, tag names out; the rows themselves are handled on save."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('lowercase', True)
        super().__init__(*args, **kwargs)

    def get_attribute(self, instance):
        return [tag.name for tag in instance.tags.all()]


class PostSeoSerializer(serializers.Serializer):
    meta_title = serializers.CharField(max_length=60, required=False, allow_blank=True)
    meta_description = serializers.CharField(max_length=160, required=False, allow_blank=True)
    keywords = StringListField(source='seo_keywords')


class PostSerializer(serializers.ModelSerializer):
    seo = PostSeoSerializer(source='*', required=False)
    tags = TagListField()
    featured_image = serializers.URLField(read_only=True)

    class Meta:
        model = Post
        fields = [
            'id',
            'title',
            'slug',
            'excerpt',
            'content',
            'author',
            'featured_image',
            'tags',
            'category',
            'status',
            'featured',
            'views',
            'likes',
            'read_time',
            'seo',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['slug', 'views', 'likes', 'read_time', 'created_at', 'updated_at']

    def create(self, validated_data):
        tags = validated_data.pop('tags', None)
        post = super().create(validated_data)
        if tags is not None:
            post.tags.set(Tag.for_names(tags))
        return post

    def update(self, instance, validated_data):
        tags = validated_data.pop('tags', None)
        post = super().update(instance, validated_data)
        if tags is not None:
            post.tags.set(Tag.for_names(tags))
        return post


class PublicPostSerializer(PostSerializer):
    """Public listings leave out the SEO block."""
    seo = None

    class Meta(PostSerializer.Meta):
        fields = [name for name in PostSerializer.Meta.fields if name != 'seo']
