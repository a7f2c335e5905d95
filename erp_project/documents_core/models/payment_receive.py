from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .account import Account
from .company import Company
from .customer import Customer
from .sale_invoice import SaleInvoice


# ---------- Payment receipts ----------
# Money received from a customer, split across one or more invoices
class PaymentReceive(models.Model):
    REFERENCE_TYPE = "PaymentReceive"

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="payment_receives",
    )
    # Cash/bank account the money was deposited into
    deposit_account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="payment_receives",
    )

    payment_receive_no = models.CharField(max_length=64, null=True, blank=True)
    reference_no = models.CharField(max_length=64, blank=True, default="")
    payment_date = models.DateField()
    description = models.TextField(blank=True, default="")

    # Sum of all entries payment amounts
    amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(
                fields=["company", "payment_receive_no"],
                name="payment_company_number_idx",
            ),
            models.Index(
                fields=["company", "customer"],
                name="payment_company_customer_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "payment_receive_no"],
                name="uq_payment_receive_company_number",
            )
        ]

    def __str__(self):
        return f"Payment: {self.payment_receive_no or self.pk}"

    def clean(self):
        # Customer and deposit account must live in the same company
        if self.company_id:
            if self.customer_id and self.customer.company_id != self.company_id:
                raise ValidationError("Customer must belong to the same company.")
            if (
                self.deposit_account_id
                and self.deposit_account.company_id != self.company_id
            ):
                raise ValidationError(
                    "Deposit account must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()  # will trigger clean()
        return super().save(*args, **kwargs)


class PaymentReceiveEntry(models.Model):
    """How much of a payment receipt settles one invoice."""

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    payment_receive = models.ForeignKey(
        PaymentReceive,
        # entries are removed explicitly by the payment service
        on_delete=models.PROTECT,
        related_name="payment_entries",
    )
    invoice = models.ForeignKey(
        SaleInvoice,
        # Prevent deleting an invoice that has received payments
        on_delete=models.PROTECT,
        related_name="payment_entries",
    )
    index = models.PositiveIntegerField(default=1)
    payment_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(
                fields=["company", "payment_receive"], name="pre_company_payment_idx"
            )
        ]
        ordering = ["payment_receive_id", "index", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(payment_amount__gt=0),
                name="pre_positive_payment_amount",
            ),
        ]

    def __str__(self):
        return f"{self.payment_receive_id} → {self.invoice_id}: {self.payment_amount}"

    def clean(self):
        if self.company_id and self.invoice_id:
            if self.invoice.company_id != self.company_id:
                raise ValidationError(
                    "PaymentReceiveEntry.company must match Invoice.company")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
