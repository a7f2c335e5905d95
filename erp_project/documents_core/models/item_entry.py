from decimal import ROUND_HALF_UP, Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import ItemEntryManager
from .company import Company
from .item import Item

CENT = Decimal("0.01")
# Largest value an amount column (max_digits=18, decimal_places=2) can hold
MAX_AMOUNT = Decimal("9999999999999999.99")

# Document types an item entry can belong to
REFERENCE_TYPES = [
    ("SaleEstimate", "Sale estimate"),
    ("SaleInvoice", "Sale invoice"),
    ("Bill", "Bill"),
]


# ---------- Item entries (document line items) ----------
class ItemEntry(models.Model):
    """
    Line item shared by estimates, invoices and bills.
    The parent document is referenced through
    (reference_type, reference_id), not through a foreign key,
    so the parent's write operations own the entry lifecycle.
    """

    # Belongs to the same company as its parent document
    company = models.ForeignKey(Company, on_delete=models.CASCADE)

    # Weak back-reference to the parent document
    reference_type = models.CharField(max_length=32, choices=REFERENCE_TYPES)
    reference_id = models.PositiveBigIntegerField()

    # Position of the line inside its document (1-based)
    index = models.PositiveIntegerField(default=1)

    item = models.ForeignKey(
        Item,
        # Prevent deleting item which has been used on a document
        on_delete=models.PROTECT,
        related_name="entries",
    )
    description = models.TextField(blank=True, default="")

    # Pricing fields: quantity × rate − discount% = amount
    quantity = models.DecimalField(
        max_digits=14, decimal_places=4, default=Decimal("1")
    )
    rate = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0.00")
    )
    discount = models.DecimalField(  # percentage, 0..100
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    # Enforce tenant scoping
    objects = ItemEntryManager()

    class Meta:
        # For fast lookups of all entries on a given document
        indexes = [
            models.Index(
                fields=["company", "reference_type", "reference_id"],
                name="ie_company_reference_idx",
            ),
        ]
        ordering = ["reference_id", "index", "id"]

        # Ensure quantity, rate & discount are never out of range
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0) & models.Q(rate__gte=0),
                name="ie_non_negative_amounts",
            ),
            models.CheckConstraint(
                condition=models.Q(discount__gte=0) & models.Q(discount__lte=100),
                name="ie_discount_percentage",
            ),
        ]

    def __str__(self):
        return f"{self.reference_type}#{self.reference_id} [{self.index}] {self.item_id}"

    @staticmethod
    def calc_amount(quantity, rate, discount=None):
        """quantity × rate, less the discount percentage, rounded to cents."""
        total = Decimal(quantity or 0) * Decimal(rate or 0)
        if discount:
            total -= total * Decimal(discount) / Decimal("100")
        return total.quantize(CENT, rounding=ROUND_HALF_UP)

    def clean(self):
        # Tenant safety check
        itemId = getattr(self, "item_id", None)
        comId = getattr(self, "company_id", None)
        if itemId and comId:
            item_company_id = (
                Item.objects.only("company_id").get(pk=itemId).company_id
            )
            if item_company_id != comId:
                raise ValidationError("ItemEntry.company must match Item.company")

    """ Ensure no inconsistent entry can ever be persisted """

    def save(self, *args, **kwargs):
        # Force amount to be recomputed before save, regardless of input
        self.amount = self.calc_amount(self.quantity, self.rate, self.discount)
        self.full_clean()  # Run all validations in clean() again
        return super().save(*args, **kwargs)  # Then finally save
