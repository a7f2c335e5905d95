"""Write an audit log row for every document lifecycle event."""
import logging

from django.conf import settings
from django.dispatch import receiver

from .events import DELETED, EDITED, document_event
from .services.audit_helper import document_changes, document_snapshot
from .tasks import record_audit_log

logger = logging.getLogger(__name__)


@receiver(document_event)
def audit_document_event(sender, event_name, **payload):
    action = event_name.rsplit(".", 1)[-1]
    document = payload.get("document")
    old_document = payload.get("old_document")

    if action == EDITED:
        changes = document_changes(old_document, document)
    elif action == DELETED:
        changes = document_snapshot(old_document or document)
    else:
        changes = document_snapshot(document)

    subject = document if document is not None else old_document
    kwargs = {
        "company_id": payload.get("tenant_id"),
        "action": action,
        "object_type": type(subject).__name__,
        "object_id": payload.get("id"),
        "changes": changes,
    }
    # Celery worker when configured, inline otherwise
    if settings.DOCUMENTS_AUDIT_ASYNC:
        record_audit_log.delay(**kwargs)
    else:
        record_audit_log(**kwargs)
    logger.debug("[audit] %s recorded.", event_name, extra={"id": payload.get("id")})
