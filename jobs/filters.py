# jobs/filters.py

from common.querying import (
    BooleanFlag,
    ContainsInsensitive,
    Equals,
    FilterTable,
    FullTextSearch,
    register_filters,
)

POSTING_FILTERS = register_filters(FilterTable(
    'posting',
    clauses=[
        # skills is a JSON list; icontains matches against its serialized text
        FullTextSearch('title', 'description', 'skills'),
        Equals('department'),
        Equals('employmentType', 'employment_type'),
        Equals('experienceLevel', 'experience_level'),
        Equals('status'),
        ContainsInsensitive('location', 'city', 'state'),
        BooleanFlag('remote'),
        BooleanFlag('featured'),
    ],
    sort_fields={
        'createdAt': 'created_at',
        'title': 'title',
        'views': 'views',
        'applications': 'applications',
        'applicationDeadline': 'application_deadline',
    },
))
