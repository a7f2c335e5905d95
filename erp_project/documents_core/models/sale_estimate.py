from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company
from .customer import Customer


# ---------- Sale estimates (quotes) ----------
class SaleEstimate(models.Model):
    # Item entries point back here with this reference type
    REFERENCE_TYPE = "SaleEstimate"

    # Estimate belongs to a company (multi-tenant)
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    customer = models.ForeignKey(
        Customer,
        # prevent deleting customer who has an estimate
        on_delete=models.PROTECT,
        related_name="estimates",
    )

    # Human-readable number (e.g. "EST-00001"), unique per company
    estimate_number = models.CharField(max_length=64, null=True, blank=True)
    reference = models.CharField(max_length=64, blank=True, default="")
    estimate_date = models.DateField()
    # Until when the quote is valid
    expiration_date = models.DateField(null=True, blank=True)

    note = models.TextField(blank=True, default="")
    terms_conditions = models.TextField(blank=True, default="")

    # Sum of all entry amounts
    amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(
                fields=["company", "estimate_number"],
                name="estimate_company_number_idx",
            ),
            models.Index(
                fields=["company", "customer"],
                name="estimate_company_customer_idx",
            ),
        ]
        constraints = [
            # Within one company, each estimate number must be unique
            # Across companies, duplicates are allowed
            models.UniqueConstraint(
                fields=["company", "estimate_number"],
                name="uq_estimate_company_number",
            )
        ]

    def __str__(self):
        return f"Estimate: {self.estimate_number or self.pk}"

    def clean(self):
        # Ensure customer chosen belongs to the same company
        if self.customer_id and self.company_id:
            if self.customer.company_id != self.company_id:
                raise ValidationError("Customer must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()  # will trigger clean()
        return super().save(*args, **kwargs)
