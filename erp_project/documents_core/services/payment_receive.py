import logging
from collections import defaultdict
from decimal import Decimal

from django.db.models import F

from ..dynamic_list import ListField
from ..exceptions import (DepositAccountNotFoundError, EntriesNotFoundError,
                          ErrorCode, IneligibleInvoiceError,
                          InvalidPaymentAmountError, InvoicesNotFoundError)
from ..forms import PaymentReceiveForm
from ..models import PaymentReceive
from .base import DocumentService
from .entries import sync_entries

logger = logging.getLogger(__name__)


def _payments_by_invoice(entries):
    totals = defaultdict(lambda: Decimal("0.00"))
    for entry in entries:
        invoice_id = entry["invoice_id"] if isinstance(entry, dict) else entry.invoice_id
        amount = (
            entry["payment_amount"] if isinstance(entry, dict) else entry.payment_amount
        )
        totals[invoice_id] += amount
    return totals


class PaymentReceiveService(DocumentService):
    """
    Payments received from customers.
    Each entry settles part of one delivered invoice of the same
    customer; the invoices `payment_amount` moves with the entries.
    """

    model = PaymentReceive
    resource = "payment_receive"
    form_class = PaymentReceiveForm

    number_field = "payment_receive_no"
    number_prefix = "PR-"
    number_exists_code = ErrorCode.PAYMENT_RECEIVE_NO_EXISTS
    not_found_code = ErrorCode.PAYMENT_RECEIVE_NOT_FOUND

    counterparty_field = "customer"
    counterparty_code = ErrorCode.CUSTOMER_NOT_FOUND

    header_fields = (
        "reference_no",
        "payment_date",
        "description",
        "deposit_account_id",
    )

    list_fields = (
        ListField("payment_receive_no", "payment_receive_no"),
        ListField("reference_no", "reference_no"),
        ListField("payment_date", "payment_date", "date"),
        ListField("amount", "amount", "number"),
        ListField("customer_id", "customer_id", "number"),
        ListField("customer", "customer__name"),
        ListField("deposit_account_id", "deposit_account_id", "number"),
        ListField("created_at", "created_at", "date"),
    )
    default_sort = "payment_date"

    def queryset(self, models):
        return super().queryset(models).select_related("deposit_account")

    # ---------- validation ----------

    def entries_amount(self, entries):
        return sum((entry["payment_amount"] for entry in entries), Decimal("0.00"))

    def validate_document(self, models, dto, amount, document=None):
        # Validate the deposit account existance on the storage.
        if not models.accounts.filter(pk=dto["deposit_account_id"]).exists():
            raise DepositAccountNotFoundError(
                payload={"id": dto["deposit_account_id"]}
            )

    def validate_entries(self, models, dto, document=None):
        entries = dto["entries"]

        # Entry ids sent on edit must belong to this payment.
        entries_ids = {entry["id"] for entry in entries if entry.get("id")}
        if entries_ids:
            found_ids = set()
            if document is not None:
                found_ids = set(
                    models.payment_receive_entries
                    .filter(payment_receive_id=document.pk, pk__in=entries_ids)
                    .values_list("pk", flat=True)
                )
            if entries_ids - found_ids:
                raise EntriesNotFoundError(ids=entries_ids - found_ids)

        # Validate invoices IDs existance on the storage.
        invoices_ids = {entry["invoice_id"] for entry in entries}
        invoices = models.sale_invoices.in_bulk(invoices_ids)
        missing = invoices_ids - set(invoices)
        if missing:
            raise InvoicesNotFoundError(ids=missing)

        # Invoices must be of the payment customer.
        not_of_customer = {
            pk for pk, invoice in invoices.items()
            if invoice.customer_id != dto["customer_id"]
        }
        if not_of_customer:
            raise IneligibleInvoiceError(
                ErrorCode.INVOICES_NOT_OF_CUSTOMER, ids=not_of_customer
            )

        # Draft invoices can't receive payments.
        not_delivered = {
            pk for pk, invoice in invoices.items() if not invoice.is_delivered
        }
        if not_delivered:
            raise IneligibleInvoiceError(
                ErrorCode.INVOICES_NOT_DELIVERED_YET, ids=not_delivered
            )

        # Payment can't exceed the invoice due amount; on edit the amount
        # this payment already applied is available again.
        previous = _payments_by_invoice(document.entries if document else [])
        overpaid = {
            invoice_id
            for invoice_id, amount in _payments_by_invoice(entries).items()
            if amount > invoices[invoice_id].due_amount + previous[invoice_id]
        }
        if overpaid:
            raise InvalidPaymentAmountError(payload={"ids": sorted(overpaid)})

    # ---------- persistence ----------

    def save_entries(self, models, document, entries):
        def fill(instance, entry):
            instance.company = models.company
            instance.payment_receive_id = document.pk
            instance.invoice_id = entry["invoice_id"]
            instance.index = entry["index"]
            instance.payment_amount = entry["payment_amount"]

        return sync_entries(
            models.payment_receive_entries.filter(payment_receive_id=document.pk),
            entries,
            fill,
        )

    def _apply_invoice_payments(self, models, deltas):
        for invoice_id, delta in deltas.items():
            if delta:
                models.sale_invoices.filter(pk=invoice_id).update(
                    payment_amount=F("payment_amount") + delta
                )

    def after_save(self, models, document, dto, old_document=None):
        # Net change of every touched invoice: new payments less old ones
        deltas = _payments_by_invoice(dto["entries"])
        if old_document is not None:
            for invoice_id, amount in _payments_by_invoice(old_document.entries).items():
                deltas[invoice_id] -= amount
        self._apply_invoice_payments(models, deltas)
        logger.debug(
            "[payment_receive] invoices payment amount updated.",
            extra={"id": document.pk, "invoices": sorted(deltas)},
        )

    def before_delete(self, models, document):
        deltas = {
            invoice_id: -amount
            for invoice_id, amount in _payments_by_invoice(document.entries).items()
        }
        self._apply_invoice_payments(models, deltas)

    def delete_entries(self, models, document):
        return models.payment_receive_entries.filter(
            payment_receive_id=document.pk).delete()

    def attach_entries(self, models, documents):
        grouped = defaultdict(list)
        entries = (
            models.payment_receive_entries
            .filter(payment_receive_id__in=[doc.pk for doc in documents])
            .select_related("invoice")
            .order_by("payment_receive_id", "index", "id")
        )
        for entry in entries:
            grouped[entry.payment_receive_id].append(entry)
        for document in documents:
            document.entries = grouped.get(document.pk, [])
        return documents
