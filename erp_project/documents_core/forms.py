from decimal import Decimal

from django import forms
from django.conf import settings

from .exceptions import ErrorCode, ValidationError
from .models.item_entry import MAX_AMOUNT, ItemEntry

# -----------------------------
# Inbound DTO forms
# ----------------------------
# Each document DTO is a plain dict:
#   {<header fields>, "entries": [{<entry fields>}, ...]}
# The header is validated by the document form itself, every entry by
# its own entry form. Dates come out as datetime.date, money as Decimal.


class ItemEntryForm(forms.Form):
    # Only meaningful on edit: the id of an entry already on the document
    id = forms.IntegerField(required=False, min_value=1)
    item_id = forms.IntegerField(min_value=1)
    description = forms.CharField(required=False)
    quantity = forms.DecimalField(
        min_value=Decimal("0"), max_digits=14, decimal_places=4
    )
    rate = forms.DecimalField(
        min_value=Decimal("0"), max_digits=18, decimal_places=4
    )
    # percentage
    discount = forms.DecimalField(
        required=False,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        max_digits=5,
        decimal_places=2,
    )

    def clean_discount(self):
        return self.cleaned_data.get("discount") or Decimal("0")

    def clean(self):
        cleaned_data = super().clean()
        quantity = cleaned_data.get("quantity")
        rate = cleaned_data.get("rate")
        # The line amount must fit the amount column
        if quantity is not None and rate is not None:
            amount = ItemEntry.calc_amount(
                quantity, rate, cleaned_data.get("discount")
            )
            if amount > MAX_AMOUNT:
                raise forms.ValidationError(
                    f"Entry amount can't exceed {MAX_AMOUNT}.", code="max_value"
                )
        return cleaned_data


class PaymentReceiveEntryForm(forms.Form):
    id = forms.IntegerField(required=False, min_value=1)
    invoice_id = forms.IntegerField(min_value=1)
    payment_amount = forms.DecimalField(
        min_value=Decimal("0.01"), max_digits=18, decimal_places=2
    )


class DocumentForm(forms.Form):
    """
    Base form for a document DTO and its entries.
    Client-sent `amount`/`total` keys are never declared, so they are
    dropped with every other unknown key.
    """

    entry_form_class = ItemEntryForm

    def __init__(self, data=None, *args, **kwargs):
        super().__init__(data, *args, **kwargs)
        self.raw_entries = (data or {}).get("entries")
        self.entry_forms = []
        if isinstance(self.raw_entries, (list, tuple)):
            self.entry_forms = [
                self.entry_form_class(data=entry if isinstance(entry, dict) else {})
                for entry in self.raw_entries
            ]

    def entries_errors(self):
        if not isinstance(self.raw_entries, (list, tuple)) or not self.raw_entries:
            return ["At least one entry is required."]
        return []

    def is_valid(self):
        header_valid = super().is_valid()
        # validate every entry, so all errors are reported at once
        entries_valid = all([form.is_valid() for form in self.entry_forms])
        return header_valid and entries_valid and not self.entries_errors()

    @property
    def entries(self):
        entries = []
        for index, form in enumerate(self.entry_forms, start=1):
            entries.append(dict(form.cleaned_data, index=index))
        return entries

    def error_payload(self):
        errors = self.errors.get_json_data()
        entry_errors = {
            index: form.errors.get_json_data()
            for index, form in enumerate(self.entry_forms)
            if form.errors
        }
        if entry_errors:
            errors["entries"] = entry_errors
        elif self.entries_errors():
            errors["entries"] = [
                {"message": message, "code": "required"}
                for message in self.entries_errors()
            ]
        return {"errors": errors}

    def clean_dto(self):
        """Return the normalized DTO or raise the service ValidationError."""
        if not self.is_valid():
            raise ValidationError(ErrorCode.VALIDATION_ERROR, self.error_payload())
        return dict(self.cleaned_data, entries=self.entries)


class SaleEstimateForm(DocumentForm):
    estimate_number = forms.CharField(required=False, max_length=64, empty_value=None)
    reference = forms.CharField(required=False, max_length=64)
    estimate_date = forms.DateField()
    expiration_date = forms.DateField(required=False)
    customer_id = forms.IntegerField(min_value=1)
    note = forms.CharField(required=False)
    terms_conditions = forms.CharField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        estimate_date = cleaned_data.get("estimate_date")
        expiration_date = cleaned_data.get("expiration_date")
        if estimate_date and expiration_date and expiration_date < estimate_date:
            self.add_error(
                "expiration_date", "Expiration date can't be before the estimate date."
            )
        return cleaned_data


class SaleInvoiceForm(DocumentForm):
    invoice_no = forms.CharField(required=False, max_length=64, empty_value=None)
    reference_no = forms.CharField(required=False, max_length=64)
    invoice_date = forms.DateField()
    due_date = forms.DateField(required=False)
    customer_id = forms.IntegerField(min_value=1)
    # Deliver the invoice right away
    delivered = forms.BooleanField(required=False)
    invoice_message = forms.CharField(required=False)
    terms_conditions = forms.CharField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        invoice_date = cleaned_data.get("invoice_date")
        due_date = cleaned_data.get("due_date")
        if invoice_date and due_date and due_date < invoice_date:
            self.add_error("due_date", "Due date can't be before the invoice date.")
        return cleaned_data


class BillForm(DocumentForm):
    bill_number = forms.CharField(required=False, max_length=64, empty_value=None)
    reference_no = forms.CharField(required=False, max_length=64)
    bill_date = forms.DateField()
    due_date = forms.DateField(required=False)
    vendor_id = forms.IntegerField(min_value=1)
    note = forms.CharField(required=False)
    # Open the bill right away
    open = forms.BooleanField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        bill_date = cleaned_data.get("bill_date")
        due_date = cleaned_data.get("due_date")
        if bill_date and due_date and due_date < bill_date:
            self.add_error("due_date", "Due date can't be before the bill date.")
        return cleaned_data


class PaymentReceiveForm(DocumentForm):
    entry_form_class = PaymentReceiveEntryForm

    payment_receive_no = forms.CharField(
        required=False, max_length=64, empty_value=None
    )
    reference_no = forms.CharField(required=False, max_length=64)
    payment_date = forms.DateField()
    customer_id = forms.IntegerField(min_value=1)
    deposit_account_id = forms.IntegerField(min_value=1)
    description = forms.CharField(required=False)


# -----------------------------
# List filter
# ----------------------------
SORT_ORDER_CHOICES = [("asc", "Ascending"), ("desc", "Descending")]


class ListFilterForm(forms.Form):
    page = forms.IntegerField(required=False, min_value=1)
    page_size = forms.IntegerField(required=False, min_value=1)
    column_sort_by = forms.CharField(required=False, empty_value=None)
    sort_order = forms.ChoiceField(required=False, choices=SORT_ORDER_CHOICES)

    def clean_page(self):
        return self.cleaned_data.get("page") or 1

    def clean_page_size(self):
        page_size = (
            self.cleaned_data.get("page_size")
            or settings.DOCUMENTS_DEFAULT_PAGE_SIZE
        )
        return min(page_size, settings.DOCUMENTS_MAX_PAGE_SIZE)

    def clean_sort_order(self):
        return self.cleaned_data.get("sort_order") or "desc"

    def cleaned_filter(self):
        if not self.is_valid():
            raise ValidationError(
                ErrorCode.VALIDATION_ERROR,
                {"errors": self.errors.get_json_data()},
            )
        return self.cleaned_data
