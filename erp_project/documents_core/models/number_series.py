from django.db import models, transaction
from .company import Company


class NumberSeries(models.Model):
    """
    Per-company counter used to number documents
    when the caller doesn't supply a number.
    The row is locked (select_for_update) while a number is allocated,
    so two requests never read the same next_number.
    """

    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="number_series"
    )
    # Document type, e.g. "SaleEstimate"
    code = models.CharField(max_length=50)
    prefix = models.CharField(max_length=50, blank=True, default="")
    next_number = models.PositiveIntegerField(default=1)
    # Zero padding → "EST-00001"
    min_width = models.PositiveSmallIntegerField(default=5)

    class Meta:
        ordering = ["code"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_number_series"
            )
        ]

    def __str__(self):
        return f"{self.company} {self.code}"

    @classmethod
    def for_document(cls, company, code, prefix=""):
        series, _ = cls.objects.get_or_create(
            company=company, code=code, defaults={"prefix": prefix}
        )
        return series

    def format(self, number):
        return f"{self.prefix}{str(number).zfill(self.min_width)}"

    @transaction.atomic
    def allocate(self, is_taken=None):
        """
        Allocate the next free number.
        `is_taken(number)` lets the caller skip numbers
        that were already typed in by hand.
        """
        series = type(self).objects.select_for_update().get(pk=self.pk)

        current = series.next_number
        number = series.format(current)
        while is_taken is not None and is_taken(number):
            current += 1
            number = series.format(current)

        series.next_number = current + 1
        series.save(update_fields=["next_number"])
        self.next_number = series.next_number
        return number
