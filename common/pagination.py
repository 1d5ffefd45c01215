# common/pagination.py

import math

from django.conf import settings
from rest_framework import serializers


def _page_size_default():
    return getattr(settings, 'DEFAULT_PAGE_SIZE', 10)


def _page_size_max():
    return getattr(settings, 'MAX_PAGE_SIZE', 100)


class PageQuerySerializer(serializers.Serializer):
    """
    Validates `page`, `limit` and `sort` before they reach the executor.

    Pass the record kind's `FilterTable` as `context['table']` so the allowed
    sort keys and the default sort come from it.
    """
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, required=False)
    sort = serializers.CharField(required=False, allow_blank=True)

    def validate_limit(self, value):
        maximum = _page_size_max()
        if value > maximum:
            raise serializers.ValidationError(f"Limit must be between 1 and {maximum}")
        return value

    def validate_sort(self, value):
        table = self.context.get('table')
        if not value or table is None:
            return value
        if value not in table.sort_choices:
            raise serializers.ValidationError('Invalid sort field')
        return value

    def validate(self, attrs):
        table = self.context.get('table')
        attrs.setdefault('limit', _page_size_default())
        if not attrs.get('sort'):
            attrs['sort'] = table.default_sort if table is not None else '-createdAt'
        return attrs


def execute_page(queryset, predicate, page, limit, sort):
    """
    Run `predicate` against `queryset` and return `(records, total)`.

    `sort` is a model ordering (`'-created_at'`, `'price'`). The primary key,
    in the same direction, is appended so rows that tie on the sort key keep
    a stable position across pages. `total` counts every match, ignoring the
    page bounds. A page past the end yields an empty list.
    """
    filtered = queryset.filter(predicate)
    tie_break = '-pk' if sort.startswith('-') else 'pk'
    offset = (page - 1) * limit
    records = list(filtered.order_by(sort, tie_break)[offset:offset + limit])
    total = filtered.count()
    return records, total


def assemble_response(records, total, page, limit, key='records'):
    """Combine one page of records with the metadata needed to render "page N of M"."""
    total_pages = math.ceil(total / limit) if total else 0
    return {
        key: records,
        'pagination': {
            'currentPage': page,
            'totalPages': total_pages,
            'totalRecords': total,
            'hasNextPage': page < total_pages,
            'hasPrevPage': page > 1,
        }
    }


def paginated_list(request, queryset, table, serializer_class, key, params=None, serializer_context=None):
    """
    The whole list pipeline shared by every list endpoint: validate paging,
    build the filter, run the page query, serialize and assemble.
    """
    params = params if params is not None else request.query_params
    paging = PageQuerySerializer(data=params, context={'table': table})
    paging.is_valid(raise_exception=True)
    page = paging.validated_data['page']
    limit = paging.validated_data['limit']

    predicate = table.build(params)
    if table.distinct:
        queryset = queryset.distinct()
    records, total = execute_page(
        queryset, predicate, page, limit, table.order_field(paging.validated_data['sort'])
    )
    context = {'request': request}
    context.update(serializer_context or {})
    data = serializer_class(records, many=True, context=context).data
    return assemble_response(data, total, page, limit, key=key)
