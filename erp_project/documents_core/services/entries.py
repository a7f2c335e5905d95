import logging
from collections import defaultdict
from decimal import Decimal

from ..exceptions import (EntriesNotFoundError, ErrorCode, ItemsNotFoundError,
                          NonEligibleItemError)
from ..models import ItemEntry

logger = logging.getLogger(__name__)

# Item flag each document type requires → error raised when missing
ELIGIBILITY = {
    "sellable": ErrorCode.NOT_SELLABLE_ITEMS,
    "purchasable": ErrorCode.NOT_PURCHASABLE_ITEMS,
}


def sync_entries(queryset, entries, fill):
    """
    Replace the entries in `queryset` with `entries`:
    - rows whose id is not in `entries` are deleted
    - rows whose id is in `entries` are updated
    - entries without an id are inserted
    `fill(instance, entry)` copies one DTO entry onto a model instance.
    Must run inside the caller's transaction.
    """
    keep_ids = {entry["id"] for entry in entries if entry.get("id")}
    queryset.exclude(pk__in=keep_ids).delete()
    existing = queryset.in_bulk(keep_ids)

    saved = []
    for entry in entries:
        instance = existing.get(entry.get("id")) or queryset.model()
        fill(instance, entry)
        instance.save()
        saved.append(instance)
    return saved


# ----------------------------
# Item entries workflows
# ----------------------------
class ItemEntriesService:
    """Validation and persistence of item entries of one document."""

    @staticmethod
    def entries_amount(entries):
        return sum(
            (
                ItemEntry.calc_amount(e["quantity"], e["rate"], e.get("discount"))
                for e in entries
            ),
            Decimal("0.00"),
        )

    def validate_items_ids_existance(self, models, entries):
        """Every entry must point to an item of the tenant."""
        items_ids = {entry["item_id"] for entry in entries}
        found_ids = set(
            models.items.filter(pk__in=items_ids).values_list("pk", flat=True)
        )
        missing = items_ids - found_ids
        if missing:
            raise ItemsNotFoundError(ids=missing)

    def validate_eligible_entries_items(self, models, entries, flag):
        """Every entry item must carry `flag` (sellable / purchasable)."""
        items_ids = {entry["item_id"] for entry in entries}
        ineligible = set(
            models.items.filter(pk__in=items_ids, **{flag: False})
            .values_list("pk", flat=True)
        )
        if ineligible:
            raise NonEligibleItemError(ELIGIBILITY[flag], ids=ineligible)

    def validate_entries_ids_existance(self, models, reference_type, reference_id, entries):
        """Entry ids sent on edit must belong to this very document."""
        entries_ids = {entry["id"] for entry in entries if entry.get("id")}
        if not entries_ids:
            return
        found_ids = set(
            models.item_entries.for_reference(reference_type, reference_id)
            .filter(pk__in=entries_ids)
            .values_list("pk", flat=True)
        )
        missing = entries_ids - found_ids
        if missing:
            raise EntriesNotFoundError(ids=missing)

    def save_entries(self, models, reference_type, reference_id, entries):
        """Full replace of the document entries. Amounts are recomputed."""
        def fill(instance, entry):
            instance.company = models.company
            instance.reference_type = reference_type
            instance.reference_id = reference_id
            instance.index = entry["index"]
            instance.item_id = entry["item_id"]
            instance.description = entry.get("description") or ""
            instance.quantity = entry["quantity"]
            instance.rate = entry["rate"]
            instance.discount = entry.get("discount") or Decimal("0")

        return sync_entries(
            models.item_entries.for_reference(reference_type, reference_id),
            entries,
            fill,
        )

    def delete_entries(self, models, reference_type, reference_id):
        deleted, _ = (
            models.item_entries.for_reference(reference_type, reference_id).delete()
        )
        logger.debug(
            "[item_entries] entries deleted.",
            extra={"reference_type": reference_type,
                   "reference_id": reference_id, "count": deleted},
        )
        return deleted

    def attach_entries(self, models, reference_type, documents):
        """Set `document.entries` (ordered by index) on every document."""
        grouped = defaultdict(list)
        entries = (
            models.item_entries
            .for_reference(reference_type, [doc.pk for doc in documents])
            .select_related("item")
            .order_by("reference_id", "index", "id")
        )
        for entry in entries:
            grouped[entry.reference_id].append(entry)
        for document in documents:
            document.entries = grouped.get(document.pk, [])
        return documents
