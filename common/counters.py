# common/counters.py

from django.db.models import F


def increment_counter(model, pk, field, amount=1, **conditions):
    """
    Add `amount` to `field` of one row with a single UPDATE statement, so
    concurrent increments never overwrite each other. Returns the new value,
    or None when no row matched `pk` (and `conditions`).
    """
    updated = model.objects.filter(pk=pk, **conditions).update(**{field: F(field) + amount})
    if not updated:
        return None
    return model.objects.filter(pk=pk).values_list(field, flat=True).first()
