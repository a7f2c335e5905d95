from django.db import models
from ..managers import TenantManager
from .company import Company

# Choice Lists
AC_TYPES = [
    # Used in Account model to classify general ledger accounts
    ("asset", "Asset"),
    ("liability", "Liability"),
    ("equity", "Equity"),
    ("income", "Income"),
    ("expense", "Expense"),
]


class Account(models.Model):
    """
    Ledger account in the Chart of Accounts.
    - code should be unique per company
    - payment receipts deposit into one of these (cash/bank)
    """

    company = models.ForeignKey(  # Each account belongs to one company
        Company,  # All reports must filter by company_id to prevent data leaks
        on_delete=models.CASCADE,
    )
    # Every account has a code
    code = models.CharField(max_length=32)
    # Human-readable name → "Cash on Hand", "Bank Account".
    name = models.CharField(max_length=200)

    # Classify account into one of the 5 basic accounting types
    ac_type = models.CharField(
        max_length=10,
        choices=AC_TYPES,
        default="asset",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "code"], name="account_company_code_idx")
        ]

        """ Each company defines its own chart of accounts.
               Codes repeat across companies but must be unique within one. """
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_account_code"
            )
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
