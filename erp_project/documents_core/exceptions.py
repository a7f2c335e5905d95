from enum import Enum


class ErrorCode(str, Enum):
    """Stable codes carried by every service error."""

    TENANT_NOT_FOUND = "TENANT_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Counterparties / accounts
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    VENDOR_NOT_FOUND = "VENDOR_NOT_FOUND"
    DEPOSIT_ACCOUNT_NOT_FOUND = "DEPOSIT_ACCOUNT_NOT_FOUND"

    # Entries
    ITEMS_IDS_NOT_EXISTS = "ITEMS_IDS_NOT_EXISTS"
    NOT_SELLABLE_ITEMS = "NOT_SELLABLE_ITEMS"
    NOT_PURCHASABLE_ITEMS = "NOT_PURCHASABLE_ITEMS"
    ENTRIES_IDS_NOT_FOUND = "ENTRIES_IDS_NOT_FOUND"
    ENTRIES_IDS_DUPLICATED = "ENTRIES_IDS_DUPLICATED"

    # Sale estimates
    SALE_ESTIMATE_NOT_FOUND = "SALE_ESTIMATE_NOT_FOUND"
    SALE_ESTIMATE_NUMBER_EXISTANCE = "SALE_ESTIMATE_NUMBER_EXISTANCE"

    # Sale invoices
    SALE_INVOICE_NOT_FOUND = "SALE_INVOICE_NOT_FOUND"
    SALE_INVOICE_NUMBER_EXISTANCE = "SALE_INVOICE_NUMBER_EXISTANCE"
    SALE_INVOICE_ALREADY_DELIVERED = "SALE_INVOICE_ALREADY_DELIVERED"
    SALE_INVOICE_HAS_PAYMENTS = "SALE_INVOICE_HAS_PAYMENTS"
    INVOICE_AMOUNT_SMALLER_THAN_PAYMENT_AMOUNT = (
        "INVOICE_AMOUNT_SMALLER_THAN_PAYMENT_AMOUNT"
    )

    # Bills
    BILL_NOT_FOUND = "BILL_NOT_FOUND"
    BILL_NUMBER_EXISTS = "BILL_NUMBER_EXISTS"
    BILL_ALREADY_OPEN = "BILL_ALREADY_OPEN"
    BILL_HAS_PAYMENTS = "BILL_HAS_PAYMENTS"
    BILL_AMOUNT_SMALLER_THAN_PAID_AMOUNT = "BILL_AMOUNT_SMALLER_THAN_PAID_AMOUNT"

    # Payment receipts
    PAYMENT_RECEIVE_NOT_FOUND = "PAYMENT_RECEIVE_NOT_FOUND"
    PAYMENT_RECEIVE_NO_EXISTS = "PAYMENT_RECEIVE_NO_EXISTS"
    INVOICES_IDS_NOT_FOUND = "INVOICES_IDS_NOT_FOUND"
    INVOICES_NOT_OF_CUSTOMER = "INVOICES_NOT_OF_CUSTOMER"
    INVOICES_NOT_DELIVERED_YET = "INVOICES_NOT_DELIVERED_YET"
    INVALID_PAYMENT_AMOUNT = "INVALID_PAYMENT_AMOUNT"

    # Dynamic listing
    FILTER_ROLES_FIELDS_NOT_FOUND = "FILTER_ROLES_FIELDS_NOT_FOUND"
    FILTER_ROLES_COMPARATOR_INVALID = "FILTER_ROLES_COMPARATOR_INVALID"
    FILTER_ROLES_VALUE_INVALID = "FILTER_ROLES_VALUE_INVALID"
    SORT_COLUMN_NOT_FOUND = "SORT_COLUMN_NOT_FOUND"


class ServiceError(Exception):
    """
    Raised by the document services when a validation gate fails.
    Carries a stable `code` and an optional structured `payload`
    (e.g. the offending ids), so callers can map it to a response.
    """

    default_code = ErrorCode.VALIDATION_ERROR
    http_status = 400

    def __init__(self, code=None, payload=None, message=None):
        self.code = ErrorCode(code or self.default_code)
        self.payload = payload or {}
        self.message = message or self.code.value
        super().__init__(self.message)

    def as_dict(self):
        return {"code": self.code.value, "payload": self.payload}

    def __repr__(self):
        return f"{type(self).__name__}({self.code.value!r}, {self.payload!r})"


# ---------- Taxonomy ----------

class NotFoundError(ServiceError):
    """Document, tenant or counterparty does not exist in the tenant."""
    http_status = 404


class DuplicateKeyError(ServiceError):
    """Natural key (document number) already used within the tenant."""


class ReferencedEntityNotFoundError(ServiceError):
    """Entries reference rows that do not exist."""

    def __init__(self, code=None, ids=(), message=None):
        self.ids = sorted(ids)
        super().__init__(code, {"ids": self.ids}, message)


class IneligibleEntityError(ServiceError):
    """Entries reference rows that can't be used on this document type."""

    def __init__(self, code=None, ids=(), message=None):
        self.ids = sorted(ids)
        super().__init__(code, {"ids": self.ids}, message)


class ValidationError(ServiceError):
    """Malformed DTO or list filter."""


class InvalidStateError(ServiceError):
    """Operation not allowed in the document's current status."""


# ---------- Concrete errors ----------

class TenantNotFoundError(NotFoundError):
    default_code = ErrorCode.TENANT_NOT_FOUND


class CounterpartyNotFoundError(NotFoundError):
    default_code = ErrorCode.CUSTOMER_NOT_FOUND


class DepositAccountNotFoundError(NotFoundError):
    default_code = ErrorCode.DEPOSIT_ACCOUNT_NOT_FOUND


class DuplicateNumberError(DuplicateKeyError):
    pass


class ItemsNotFoundError(ReferencedEntityNotFoundError):
    default_code = ErrorCode.ITEMS_IDS_NOT_EXISTS


class EntriesNotFoundError(ReferencedEntityNotFoundError):
    default_code = ErrorCode.ENTRIES_IDS_NOT_FOUND


class InvoicesNotFoundError(ReferencedEntityNotFoundError):
    default_code = ErrorCode.INVOICES_IDS_NOT_FOUND


class NonEligibleItemError(IneligibleEntityError):
    default_code = ErrorCode.NOT_SELLABLE_ITEMS


class IneligibleInvoiceError(IneligibleEntityError):
    default_code = ErrorCode.INVOICES_NOT_OF_CUSTOMER


class InvalidPaymentAmountError(ValidationError):
    default_code = ErrorCode.INVALID_PAYMENT_AMOUNT


class DuplicateEntriesError(ValidationError):
    """The same entry id was sent more than once."""

    default_code = ErrorCode.ENTRIES_IDS_DUPLICATED

    def __init__(self, code=None, ids=(), message=None):
        self.ids = sorted(ids)
        super().__init__(code, {"ids": self.ids}, message)
