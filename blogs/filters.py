# blogs/filters.py

from common.querying import (
    BooleanFlag,
    ContainsInsensitive,
    Equals,
    FilterTable,
    FullTextSearch,
    SetMembership,
    register_filters,
)

# `tags` and `search` cross the tag relation, hence distinct
POST_FILTERS = register_filters(FilterTable(
    'post',
    clauses=[
        FullTextSearch('title', 'content', 'tags__name'),
        Equals('category'),
        Equals('status'),
        BooleanFlag('featured'),
        ContainsInsensitive('author'),
        SetMembership('tags', 'tags__name', lowercase=True),
    ],
    sort_fields={
        'createdAt': 'created_at',
        'title': 'title',
        'views': 'views',
        'likes': 'likes',
    },
    distinct=True,
))
