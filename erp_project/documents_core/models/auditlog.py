from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Audit log ----------
# One row per document lifecycle event (written by signals.audit_document_event)
class AuditLog(models.Model):
    # Tenant of the document; kept nullable so logs survive a deleted company
    company = models.ForeignKey(
        Company,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    # created, edited, deleted, delivered, opened
    action = models.CharField(max_length=50)
    # Model name of the document, e.g. "SaleEstimate", "PaymentReceive"
    object_type = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)

    # Snapshot on created/deleted, {field: [old, new]} on edited
    changes = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(
                fields=["company", "created_at"], name="auditlog_company_created_idx"
            ),
            # "history of one document"
            models.Index(fields=["object_type", "object_id"], name="auditlog_object_idx"),
        ]

    def __str__(self):
        return f"{self.action} {self.object_type}({self.object_id})"
