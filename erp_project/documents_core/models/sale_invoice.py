from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company
from .customer import Customer

INV_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("delivered", "Delivered"),
]


class SaleInvoice(models.Model):  # Represents a customer invoice
    REFERENCE_TYPE = "SaleInvoice"

    # Invoice belongs to one company (multi-tenant)
    company = models.ForeignKey(Company, on_delete=models.CASCADE)

    customer = models.ForeignKey(
        Customer,
        # prevent deleting customer who has an invoice
        on_delete=models.PROTECT,
        related_name="invoices",
    )

    # Identifiers and key dates
    # human-readable (e.g. "INV-00001")
    invoice_no = models.CharField(max_length=64, null=True, blank=True)
    reference_no = models.CharField(max_length=64, blank=True, default="")
    invoice_date = models.DateField()  # issue date
    due_date = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=10, choices=INV_STATUS_CHOICES, default="draft"
    )
    """ Workflow:
        draft = not yet sent, can't receive payments.
        delivered = sent to the customer, open for payments. """

    invoice_message = models.TextField(blank=True, default="")
    terms_conditions = models.TextField(blank=True, default="")

    # Sum of all entry amounts
    amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # Sum of all payment receipts applied to this invoice
    payment_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # Optimize for fast lookups by invoice number or customer
        indexes = [
            models.Index(
                fields=["company", "invoice_no"],
                name="invoice_company_number_idx",
            ),
            models.Index(
                fields=["company", "customer"],
                name="invoice_company_customer_idx",
            ),
        ]

        constraints = [
            # Within one company, each invoice number must be unique
            models.UniqueConstraint(
                fields=["company", "invoice_no"],
                name="uq_sale_invoice_company_number"
            ),
            # Applied payments never go below zero
            models.CheckConstraint(
                condition=models.Q(payment_amount__gte=0),
                name="si_non_negative_payment",
            ),
        ]

    def __str__(self):
        # If no invoice number, fall back to database ID
        return f"Inv {self.invoice_no or self.pk}"

    @property
    def due_amount(self):
        # Unpaid amount after payments are applied
        return max(self.amount - self.payment_amount, Decimal("0.00"))

    @property
    def is_delivered(self):
        return self.status == "delivered"

    def clean(self):
        # Ensure customer chosen belongs to the same company
        if self.customer_id and self.company_id:
            if self.customer.company_id != self.company_id:
                raise ValidationError("Customer must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()  # will trigger clean()
        return super().save(*args, **kwargs)
