from django.db import \
    models  # ORM base classes to define database tables as Python classes

from ..managers import TenantManager
from .company import Company


# ---------- Customer ----------
# Represents client who receives estimates, invoices and pays them (AR side)
class Customer(models.Model):
    # Multi-tenant: every customer belongs to a single company.
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    """ Example:
        Company A can have its own customers separate from Company B.
    """

    # The customer’s legal or trade name
    name = models.CharField(max_length=200)

    # Optional contact for billing/communication
    email = models.EmailField(null=True, blank=True)

    # Standard credit terms
    payment_terms_days = models.IntegerField(default=30)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:

        indexes = [
            models.Index(fields=["company", "name"], name="customer_company_name_idx"),
        ]

        # Enforce uniqueness per tenant
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_customer_name"
            ),
        ]

    # Display customer name in admin/UI
    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
