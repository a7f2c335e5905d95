from ..dynamic_list import ListField
from ..exceptions import ErrorCode
from ..forms import SaleEstimateForm
from ..models import SaleEstimate
from .base import ItemEntryDocumentService


class SaleEstimateService(ItemEntryDocumentService):
    """Sale estimates (quotes) sent to customers."""

    model = SaleEstimate
    resource = "sale_estimate"
    form_class = SaleEstimateForm

    number_field = "estimate_number"
    number_prefix = "EST-"
    number_exists_code = ErrorCode.SALE_ESTIMATE_NUMBER_EXISTANCE
    not_found_code = ErrorCode.SALE_ESTIMATE_NOT_FOUND

    counterparty_field = "customer"
    counterparty_code = ErrorCode.CUSTOMER_NOT_FOUND
    item_flag = "sellable"

    header_fields = (
        "reference",
        "estimate_date",
        "expiration_date",
        "note",
        "terms_conditions",
    )

    list_fields = (
        ListField("estimate_number", "estimate_number"),
        ListField("reference", "reference"),
        ListField("estimate_date", "estimate_date", "date"),
        ListField("expiration_date", "expiration_date", "date"),
        ListField("amount", "amount", "number"),
        ListField("customer_id", "customer_id", "number"),
        ListField("customer", "customer__name"),
        ListField("created_at", "created_at", "date"),
    )
    default_sort = "estimate_date"
