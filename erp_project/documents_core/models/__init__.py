from .account import Account
from .auditlog import AuditLog
from .bill import Bill
from .company import Company
from .customer import Customer
from .item import Item
from .item_entry import ItemEntry
from .number_series import NumberSeries
from .payment_receive import PaymentReceive, PaymentReceiveEntry
from .sale_estimate import SaleEstimate
from .sale_invoice import SaleInvoice
from .vendor import Vendor
