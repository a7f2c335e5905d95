import logging

from django.db import transaction

from ..dynamic_list import ListField
from ..events import OPENED
from ..exceptions import ErrorCode, InvalidStateError
from ..forms import BillForm
from ..models import Bill
from .base import ItemEntryDocumentService

logger = logging.getLogger(__name__)


class BillService(ItemEntryDocumentService):
    """Vendor bills (Accounts Payable)."""

    model = Bill
    resource = "bill"
    form_class = BillForm

    number_field = "bill_number"
    number_prefix = "BILL-"
    number_exists_code = ErrorCode.BILL_NUMBER_EXISTS
    not_found_code = ErrorCode.BILL_NOT_FOUND

    counterparty_field = "vendor"
    counterparty_code = ErrorCode.VENDOR_NOT_FOUND
    # Bills can only purchase purchasable items
    item_flag = "purchasable"

    header_fields = (
        "reference_no",
        "bill_date",
        "due_date",
        "note",
    )

    list_fields = (
        ListField("bill_number", "bill_number"),
        ListField("reference_no", "reference_no"),
        ListField("bill_date", "bill_date", "date"),
        ListField("due_date", "due_date", "date"),
        ListField("status", "status"),
        ListField("amount", "amount", "number"),
        ListField("payment_amount", "payment_amount", "number"),
        ListField("vendor_id", "vendor_id", "number"),
        ListField("vendor", "vendor__name"),
        ListField("created_at", "created_at", "date"),
    )
    default_sort = "bill_date"

    def validate_document(self, models, dto, amount, document=None):
        if document is not None and amount < document.payment_amount:
            raise InvalidStateError(
                ErrorCode.BILL_AMOUNT_SMALLER_THAN_PAID_AMOUNT,
                {"amount": str(amount),
                 "payment_amount": str(document.payment_amount)},
            )

    def validate_delete(self, models, document):
        # Void or credit a paid bill, instead of deleting it outright
        if document.payment_amount > 0:
            raise InvalidStateError(ErrorCode.BILL_HAS_PAYMENTS, {"id": document.pk})

    def before_save(self, models, document, dto, old_document=None):
        # open bills never go back to draft
        if dto.get("open"):
            document.status = "open"

    def open(self, tenant_id, bill_id):
        """Move bill from draft → open."""
        models = self.tenancy.models(tenant_id)
        bill = self._load(models, bill_id)
        if bill.status == "open":
            raise InvalidStateError(ErrorCode.BILL_ALREADY_OPEN, {"id": bill.pk})
        with transaction.atomic():
            bill.status = "open"
            bill.save(update_fields=["status"])

        logger.info(
            "[bill] opened successfully.",
            extra={"tenant_id": tenant_id, "id": bill_id},
        )
        self.notify(OPENED, tenant_id=tenant_id, id=bill.pk, document=bill)
        return bill
