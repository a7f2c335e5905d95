"""
Tenant resolution.

Every service operation starts by turning a tenant id into a
`TenantModels` handle. The handle only hands out querysets that are
already filtered by the tenant's company, so nothing downstream can
read or write another tenant's rows by accident.
"""
import logging

from .exceptions import TenantNotFoundError
from .models import (Account, Bill, Company, Customer, Item, ItemEntry,
                     PaymentReceive, PaymentReceiveEntry, SaleEstimate,
                     SaleInvoice, Vendor)

logger = logging.getLogger(__name__)


class TenantModels:
    """Tenant-scoped data-access handles for one company."""

    def __init__(self, company):
        self.company = company

    @property
    def tenant_id(self):
        return self.company.pk

    def scoped(self, model):
        # Every tenant-owned model uses TenantManager
        return model.objects.for_company(self.company)

    @property
    def customers(self):
        return self.scoped(Customer)

    @property
    def vendors(self):
        return self.scoped(Vendor)

    @property
    def accounts(self):
        return self.scoped(Account)

    @property
    def items(self):
        return self.scoped(Item)

    @property
    def item_entries(self):
        return self.scoped(ItemEntry)

    @property
    def sale_estimates(self):
        return self.scoped(SaleEstimate)

    @property
    def sale_invoices(self):
        return self.scoped(SaleInvoice)

    @property
    def bills(self):
        return self.scoped(Bill)

    @property
    def payment_receives(self):
        return self.scoped(PaymentReceive)

    @property
    def payment_receive_entries(self):
        return self.scoped(PaymentReceiveEntry)

    def __repr__(self):
        return f"TenantModels(tenant_id={self.tenant_id})"


class TenancyService:
    def models(self, tenant_id):
        """
        Retrieve the data-access handles of the given tenant.
        Raises TenantNotFoundError if no such company exists.
        """
        company = Company.objects.filter(pk=tenant_id).first()
        if company is None:
            logger.warning("[tenancy] tenant not found.", extra={"tenant_id": tenant_id})
            raise TenantNotFoundError(payload={"tenant_id": tenant_id})
        return TenantModels(company)
