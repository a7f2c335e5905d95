from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company
from .vendor import Vendor

BILL_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("open", "Open"),
]

# ---------- Bills ----------

# Header represents vendor bill (Accounts Payable document)


class Bill(models.Model):
    REFERENCE_TYPE = "Bill"

    # Bill belongs to a company (multi-tenant)
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # Linked to a Vendor
    vendor = models.ForeignKey(
        Vendor,
        # prevent deleting vendor who has a bill
        on_delete=models.PROTECT,
        related_name="bills",
    )
    # Vendor’s bill/invoice number (e.g. "INV-4567")
    bill_number = models.CharField(max_length=64, null=True, blank=True)
    reference_no = models.CharField(max_length=64, blank=True, default="")
    bill_date = models.DateField()
    # when payment is expected
    due_date = models.DateField(null=True, blank=True)

    # Track workflow
    status = models.CharField(
        max_length=20, choices=BILL_STATUS_CHOICES, default="draft"
    )  # draft, open

    note = models.TextField(blank=True, default="")

    # Sum of all bill entries
    amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    # How much has been paid to the vendor
    payment_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # Optimize queries for “lookup by bill number”
        # or “all bills for this vendor.”
        indexes = [
            models.Index(
                fields=["company", "bill_number"], name="bill_company_number_idx"
            ),
            models.Index(fields=["company", "vendor"], name="bill_company_vendor_idx"),
        ]

        constraints = [
            # Within one company, each bill number must be unique
            # Across companies, duplicates are allowed
            models.UniqueConstraint(
                fields=["company", "bill_number"],
                name="uq_bill_company_number"
            )
        ]

    def __str__(self):
        # If no bill number, fall back to database ID
        return f"Bill: {self.bill_number or self.pk}"

    @property
    def due_amount(self):
        return max(self.amount - self.payment_amount, Decimal("0.00"))

    def clean(self):
        # Ensure vendor chosen belongs to the same company
        if self.vendor_id and self.company_id:
            if self.vendor.company_id != self.company_id:
                raise ValidationError("Vendor must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()  # will trigger clean()
        return super().save(*args, **kwargs)
