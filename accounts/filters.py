# accounts/filters.py

from common.querying import Equals, FilterTable, FullTextSearch, register_filters

ACCOUNT_FILTERS = register_filters(FilterTable(
    'account',
    clauses=[
        FullTextSearch('username', 'email'),
        Equals('role'),
    ],
    sort_fields={
        'createdAt': 'date_joined',
        'username': 'username',
        'email': 'email',
    },
))
