from django.db import models

from ..managers import TenantManager
from .company import Company


# ---------- Vendor ----------
# Supplier who sends bills (AP side)
class Vendor(models.Model):
    # Multi-tenant: every vendor belongs to a single company
    company = models.ForeignKey(Company, on_delete=models.CASCADE)

    name = models.CharField(max_length=200)
    email = models.EmailField(null=True, blank=True)

    # Standard credit terms
    payment_terms_days = models.IntegerField(default=30)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "name"], name="vendor_company_name_idx")
        ]

        # Same vendor name may exist in different companies
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_vendor_name"
            ),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
