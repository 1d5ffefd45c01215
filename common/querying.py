# common/querying.py
"""
Filter building for list endpoints.

Each record kind registers one static `FilterTable` describing which query
parameters it understands and how each one maps onto a clause. Building a
filter never touches the database: it turns a flat mapping of request
parameters into a single `Q` object (the conjunction of every clause whose
parameter is present and non-empty).
"""

from decimal import Decimal, InvalidOperation

from django.db.models import Q

from .exceptions import InvalidFilterParameter


def _param(params, name):
    """Return the stripped value of `name`, or None when absent or empty."""
    value = params.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class Clause:
    """One query parameter (or pair of parameters) mapped onto a lookup."""

    def __init__(self, param, field=None):
        self.param = param
        self.field = field or param

    @property
    def params(self):
        return (self.param,)

    def build(self, params):
        value = _param(params, self.param)
        if value is None:
            return None
        return self.to_q(value)

    def to_q(self, value):
        raise NotImplementedError


class Equals(Clause):
    """Case-sensitive equality (enum and status fields)."""

    def __init__(self, param, field=None, cast=None):
        super().__init__(param, field)
        self.cast = cast

    def to_q(self, value):
        if self.cast is not None:
            try:
                value = self.cast(value)
            except (TypeError, ValueError):
                raise InvalidFilterParameter(f"'{self.param}' must be a number.")
        return Q(**{self.field: value})


class ContainsInsensitive(Clause):
    """Anchor-free, case-insensitive match against one or more fields (OR-ed)."""

    def __init__(self, param, *fields):
        super().__init__(param, fields[0] if fields else None)
        self.fields = fields or (param,)

    def to_q(self, value):
        q = Q()
        for field in self.fields:
            q |= Q(**{f'{field}__icontains': value})
        return q


class FullTextSearch(ContainsInsensitive):
    """The `search` parameter: existence match across the kind's text fields."""

    def __init__(self, *fields, param='search'):
        super().__init__(param, *fields)


class BooleanFlag(Clause):
    """The literal "true" means True; any other non-empty value means False."""

    def to_q(self, value):
        return Q(**{self.field: value == 'true'})


class SetMembership(Clause):
    """
    Comma-separated values matched with "contains any of" semantics.

    Pass `lowercase=True` when the stored values are always lowercased, so
    "Rates" still matches "rates".
    """

    def __init__(self, param, field=None, lowercase=False):
        super().__init__(param, field)
        self.lowercase = lowercase

    def to_q(self, value):
        wanted = [part.strip() for part in value.split(',') if part.strip()]
        if self.lowercase:
            wanted = [part.lower() for part in wanted]
        if not wanted:
            return None
        return Q(**{f'{self.field}__in': wanted})


class Range(Clause):
    """Inclusive lower and/or upper bound taken from two parameters."""

    def __init__(self, field, min_param, max_param):
        super().__init__(min_param, field)
        self.min_param = min_param
        self.max_param = max_param

    @property
    def params(self):
        return (self.min_param, self.max_param)

    def _number(self, name, raw):
        try:
            number = Decimal(raw)
        except InvalidOperation:
            raise InvalidFilterParameter(f"'{name}' must be a number.")
        if not number.is_finite():
            raise InvalidFilterParameter(f"'{name}' must be a finite number.")
        return number

    def build(self, params):
        low = _param(params, self.min_param)
        high = _param(params, self.max_param)
        if low is None and high is None:
            return None
        lookups = {}
        if low is not None:
            lookups[f'{self.field}__gte'] = self._number(self.min_param, low)
        if high is not None:
            lookups[f'{self.field}__lte'] = self._number(self.max_param, high)
        return Q(**lookups)


class FilterTable:
    """
    Static description of how one record kind is filtered and sorted.

    `sort_fields` maps the public sort key (as sent in `?sort=`) to a model
    field name. `distinct` is set when a clause crosses a to-many relation and
    could otherwise repeat rows.
    """

    def __init__(self, kind, clauses, sort_fields, default_sort='-createdAt', distinct=False):
        self.kind = kind
        self.clauses = tuple(clauses)
        self.sort_fields = dict(sort_fields)
        self.default_sort = default_sort
        self.distinct = distinct

    @property
    def params(self):
        names = []
        for clause in self.clauses:
            names.extend(clause.params)
        return names

    @property
    def sort_choices(self):
        choices = []
        for key in self.sort_fields:
            choices.extend([key, f'-{key}'])
        return choices

    def build(self, params):
        predicate = Q()
        for clause in self.clauses:
            q = clause.build(params)
            if q is not None:
                predicate &= q
        return predicate

    def order_field(self, sort):
        """Translate `-createdAt` style keys into `-created_at` model lookups."""
        sort = sort or self.default_sort
        descending = sort.startswith('-')
        key = sort.lstrip('-')
        if key not in self.sort_fields:
            raise InvalidFilterParameter(f"Invalid sort field '{key}'.")
        field = self.sort_fields[key]
        return f'-{field}' if descending else field


_registry = {}


def register_filters(table):
    _registry[table.kind] = table
    return table


def get_filter_table(record_kind):
    try:
        return _registry[record_kind]
    except KeyError:
        raise LookupError(f"No filter table registered for '{record_kind}'")


def build_filter(record_kind, params):
    """Build the `Q` predicate for `record_kind` from request query parameters."""
    return get_filter_table(record_kind).build(params)
