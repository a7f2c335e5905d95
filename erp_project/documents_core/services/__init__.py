from .base import DocumentService, ItemEntryDocumentService
from .bill import BillService
from .entries import ItemEntriesService
from .payment_receive import PaymentReceiveService
from .sale_estimate import SaleEstimateService
from .sale_invoice import SaleInvoiceService
