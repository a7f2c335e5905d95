from ..models import AuditLog

# Fields copied into audit changes, per document type
AUDITED_FIELDS = (
    "estimate_number",
    "invoice_no",
    "bill_number",
    "payment_receive_no",
    "status",
    "amount",
    "payment_amount",
)


def log_action(
    *,
    action: str,
    object_type: str,
    object_id,
    company_id=None,
    changes: dict | None = None,
):
    """
    Central audit logger.
    Safe to call multiple times (caller ensures idempotency).
    """
    return AuditLog.objects.create(
        company_id=company_id,
        action=action,
        object_type=object_type,
        object_id=str(object_id),
        changes=changes,
    )


def document_snapshot(document):
    """JSON-friendly view of the audited fields of a document."""
    if document is None:
        return {}
    snapshot = {}
    for field in AUDITED_FIELDS:
        if hasattr(document, field):
            value = getattr(document, field)
            snapshot[field] = None if value is None else str(value)
    snapshot["entries"] = len(getattr(document, "entries", None) or [])
    return snapshot


def document_changes(old_document, document):
    """{field: [old, new]} for every audited field that changed."""
    before = document_snapshot(old_document)
    after = document_snapshot(document)
    return {
        field: [before.get(field), after.get(field)]
        for field in sorted(set(before) | set(after))
        if before.get(field) != after.get(field)
    }
