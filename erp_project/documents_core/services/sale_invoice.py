import logging

from django.db import transaction

from ..dynamic_list import ListField
from ..events import DELIVERED
from ..exceptions import ErrorCode, InvalidStateError
from ..forms import SaleInvoiceForm
from ..models import SaleInvoice
from .base import ItemEntryDocumentService

logger = logging.getLogger(__name__)


class SaleInvoiceService(ItemEntryDocumentService):
    model = SaleInvoice
    resource = "sale_invoice"
    form_class = SaleInvoiceForm

    number_field = "invoice_no"
    number_prefix = "INV-"
    number_exists_code = ErrorCode.SALE_INVOICE_NUMBER_EXISTANCE
    not_found_code = ErrorCode.SALE_INVOICE_NOT_FOUND

    counterparty_field = "customer"
    counterparty_code = ErrorCode.CUSTOMER_NOT_FOUND
    item_flag = "sellable"

    header_fields = (
        "reference_no",
        "invoice_date",
        "due_date",
        "invoice_message",
        "terms_conditions",
    )

    list_fields = (
        ListField("invoice_no", "invoice_no"),
        ListField("reference_no", "reference_no"),
        ListField("invoice_date", "invoice_date", "date"),
        ListField("due_date", "due_date", "date"),
        ListField("status", "status"),
        ListField("amount", "amount", "number"),
        ListField("payment_amount", "payment_amount", "number"),
        ListField("customer_id", "customer_id", "number"),
        ListField("customer", "customer__name"),
        ListField("created_at", "created_at", "date"),
    )
    default_sort = "invoice_date"

    def validate_document(self, models, dto, amount, document=None):
        # Payments already received can't exceed the new invoice amount
        if document is not None and amount < document.payment_amount:
            raise InvalidStateError(
                ErrorCode.INVOICE_AMOUNT_SMALLER_THAN_PAYMENT_AMOUNT,
                {"amount": str(amount),
                 "payment_amount": str(document.payment_amount)},
            )

    def validate_delete(self, models, document):
        if document.payment_amount > 0:
            raise InvalidStateError(
                ErrorCode.SALE_INVOICE_HAS_PAYMENTS, {"id": document.pk}
            )

    def before_save(self, models, document, dto, old_document=None):
        # delivered invoices never go back to draft
        if dto.get("delivered"):
            document.status = "delivered"

    def deliver(self, tenant_id, invoice_id):
        """Mark the given draft invoice as delivered."""
        models = self.tenancy.models(tenant_id)
        invoice = self._load(models, invoice_id)
        if invoice.is_delivered:
            raise InvalidStateError(
                ErrorCode.SALE_INVOICE_ALREADY_DELIVERED, {"id": invoice.pk}
            )
        with transaction.atomic():
            invoice.status = "delivered"
            invoice.save(update_fields=["status"])

        logger.info(
            "[sale_invoice] delivered successfully.",
            extra={"tenant_id": tenant_id, "id": invoice_id},
        )
        self.notify(DELIVERED, tenant_id=tenant_id, id=invoice.pk, document=invoice)
        return invoice
