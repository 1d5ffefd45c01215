# listings/filters.py

from common.querying import (
    BooleanFlag,
    ContainsInsensitive,
    Equals,
    FilterTable,
    FullTextSearch,
    Range,
    register_filters,
)

LISTING_FILTERS = register_filters(FilterTable(
    'listing',
    clauses=[
        FullTextSearch('title', 'description', 'city'),
        Equals('propertyType', 'property_type'),
        Equals('status'),
        Range('price', 'minPrice', 'maxPrice'),
        ContainsInsensitive('city'),
        ContainsInsensitive('state'),
        Equals('bedrooms', cast=int),
        Equals('bathrooms', cast=int),
        BooleanFlag('featured'),
    ],
    sort_fields={
        'createdAt': 'created_at',
        'title': 'title',
        'price': 'price',
        'views': 'views',
    },
))
