from django.db import models

# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
# Define subclass of Django’s QuerySet
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):         # Add queryset helper
        return self.filter(company=company) # Apply filter

    # Enables query:
    # SaleEstimate.objects.for_company(company)


# Attach TenantQuerySet to .objects
class TenantManager(models.Manager):

    def get_queryset(self): # ensure every model gets TenantQuerySet(so .for_company() is always available)
        return TenantQuerySet(self.model, using=self._db)

    def for_company(self, company): # can call for_company() directly on objects
        return self.get_queryset().for_company(company)


# -----------------------------------------
# Item entries point back to their parent
# document through (reference_type, reference_id)
# -----------------------------------------
class ItemEntryQuerySet(TenantQuerySet):
    def for_reference(self, reference_type, reference_ids):
        # Accept a single id or a list of ids
        if isinstance(reference_ids, int):
            reference_ids = [reference_ids]
        return self.filter(
            reference_type=reference_type,
            reference_id__in=list(reference_ids),
        )


class ItemEntryManager(TenantManager):
    def get_queryset(self):
        return ItemEntryQuerySet(self.model, using=self._db)

    def for_reference(self, reference_type, reference_ids):
        return self.get_queryset().for_reference(reference_type, reference_ids)
