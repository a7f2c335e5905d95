from collections import Counter

from ..exceptions import (CounterpartyNotFoundError, DuplicateEntriesError,
                          DuplicateNumberError, ErrorCode, ValidationError)
from ..models.item_entry import MAX_AMOUNT


# ------------------------------------
# Shared validation gates
# ------------------------------------
def validate_number_unique(queryset, field, number, code, exclude_id=None):
    """
    Make sure `number` isn't used by another document of the tenant.
    `queryset` must already be scoped to the tenant;
    `exclude_id` skips the document being edited.
    """
    found = queryset.filter(**{field: number})
    if exclude_id is not None:
        found = found.exclude(pk=exclude_id)
    if found.exists():
        raise DuplicateNumberError(code, {field: number})


def get_counterparty_or_raise(queryset, counterparty_id, code):
    """Retrieve the customer/vendor of the tenant or throw not found."""
    counterparty = queryset.filter(pk=counterparty_id).first()
    if counterparty is None:
        raise CounterpartyNotFoundError(code, {"id": counterparty_id})
    return counterparty


def validate_entries_ids_unique(entries):
    # One DTO entry per stored entry, otherwise two lines update the same row
    counts = Counter(entry["id"] for entry in entries if entry.get("id"))
    repeated = {entry_id for entry_id, count in counts.items() if count > 1}
    if repeated:
        raise DuplicateEntriesError(ids=repeated)


def validate_amount_range(amount):
    """The document total must fit its amount column."""
    if amount > MAX_AMOUNT:
        raise ValidationError(
            ErrorCode.VALIDATION_ERROR,
            {"errors": {"amount": [
                {"message": f"Amount can't exceed {MAX_AMOUNT}.",
                 "code": "max_value"},
            ]}},
        )
