from celery import shared_task


@shared_task  # register this function as a Celery task
def record_audit_log(company_id, action, object_type, object_id, changes=None):
    # import lazily to avoid circular imports at module import time
    from .services.audit_helper import log_action

    entry = log_action(
        action=action,
        object_type=object_type,
        object_id=object_id,
        company_id=company_id,
        changes=changes,
    )
    return entry.pk
