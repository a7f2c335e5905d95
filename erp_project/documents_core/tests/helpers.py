import datetime
from decimal import Decimal

from ..events import RecordingEventPublisher
from ..models import Account, Company, Customer, Item, Vendor

TODAY = datetime.date(2025, 9, 18)


class DocumentsFixtures:
    """
    Shared setUp for the document service tests.
    Two tenants: `company` with a full set of rows and `other_company`
    with its own customer and item, used to check tenant isolation.
    """

    def setUp(self):
        self.company = Company.objects.create(name="Test Co", slug="test-co")
        self.other_company = Company.objects.create(name="Other Co", slug="other-co")

        self.customer = Customer.objects.create(company=self.company, name="Acme")
        self.other_customer = Customer.objects.create(
            company=self.company, name="Globex"
        )
        self.vendor = Vendor.objects.create(company=self.company, name="Supplies Ltd")
        self.bank = Account.objects.create(
            company=self.company, code="1110", name="Bank Account"
        )

        # sellable + purchasable
        self.widget = Item.objects.create(
            company=self.company, sku="SKU-1", name="Widget",
            sell_price=Decimal("10.00"),
        )
        # service: sellable only
        self.consulting = Item.objects.create(
            company=self.company, sku="SKU-2", name="Consulting",
            purchasable=False,
        )
        # raw material: purchasable only
        self.steel = Item.objects.create(
            company=self.company, sku="SKU-3", name="Steel", sellable=False,
        )

        # rows of the other tenant
        self.foreign_customer = Customer.objects.create(
            company=self.other_company, name="Acme"
        )
        self.foreign_item = Item.objects.create(
            company=self.other_company, sku="SKU-1", name="Widget"
        )

        self.publisher = RecordingEventPublisher()

    # ---------- DTO builders ----------

    def entry(self, item=None, quantity="1", rate="10.00", **extra):
        entry = {
            "item_id": (item or self.widget).pk,
            "quantity": quantity,
            "rate": rate,
        }
        entry.update(extra)
        return entry

    def estimate_dto(self, entries=None, **extra):
        dto = {
            "estimate_date": TODAY,
            "customer_id": self.customer.pk,
            "entries": entries if entries is not None else [self.entry()],
        }
        dto.update(extra)
        return dto

    def invoice_dto(self, entries=None, **extra):
        dto = {
            "invoice_date": TODAY,
            "customer_id": self.customer.pk,
            "entries": entries if entries is not None else [self.entry()],
        }
        dto.update(extra)
        return dto

    def bill_dto(self, entries=None, **extra):
        dto = {
            "bill_date": TODAY,
            "vendor_id": self.vendor.pk,
            "entries": entries if entries is not None else [self.entry()],
        }
        dto.update(extra)
        return dto

    def payment_dto(self, entries, **extra):
        dto = {
            "payment_date": TODAY,
            "customer_id": self.customer.pk,
            "deposit_account_id": self.bank.pk,
            "entries": entries,
        }
        dto.update(extra)
        return dto
