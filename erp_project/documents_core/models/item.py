from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Items (product/service) ----------
class Item(models.Model):  # Represents something a company sells & purchases

    # Multi-tenant: each item belongs to a company
    company = models.ForeignKey(
        Company,
        # If the company is deleted, its items are deleted too (CASCADE)
        on_delete=models.CASCADE,
    )
    # Stock Keeping Unit (optional unique code per item)
    sku = models.CharField(
        max_length=80,
        null=True,
        blank=True,
    )

    # Required human-readable name of the item
    name = models.CharField(max_length=200)

    # Only sellable items may appear on estimates and invoices
    sellable = models.BooleanField(default=True)
    # Only purchasable items may appear on bills
    purchasable = models.BooleanField(default=True)

    # store standard prices per product
    sell_price = models.DecimalField(
        max_digits=18, decimal_places=4, null=True, blank=True
    )
    cost_price = models.DecimalField(
        max_digits=18, decimal_places=4, null=True, blank=True
    )

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # for fast lookups
        indexes = [
            models.Index(fields=["company", "name"], name="item_company_name_idx")
        ]

        # Ensure each SKU is unique within a company
        constraints = [
            models.UniqueConstraint(
                fields=["company", "sku"], name="uq_company_item_sku"
            )
        ]

    def __str__(self):
        return self.name

    def clean(self):
        # Prices can never be negative
        for field in ("sell_price", "cost_price"):
            value = getattr(self, field)
            if value is not None and value < Decimal("0"):
                raise ValidationError(f"{field} must be >= 0")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
