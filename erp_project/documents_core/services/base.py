import logging
from functools import partial

from django.db import transaction

from ..dynamic_list import DynamicListService
from ..events import CREATED, DELETED, EDITED, SignalEventPublisher, event_name
from ..exceptions import ErrorCode, NotFoundError
from ..models import NumberSeries
from ..tenancy import TenancyService
from .entries import ItemEntriesService
from .validation import (get_counterparty_or_raise, validate_amount_range,
                         validate_entries_ids_unique, validate_number_unique)

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Lifecycle of one document type (create, edit, delete, get, list).

    Subclasses describe the document (model, form, number field,
    counterparty, error codes) and implement the entry hooks.
    Every gate runs before the write starts; the write itself runs in
    one transaction; events are published once that transaction commits.
    """

    model = None
    # log tag and event prefix, e.g. "sale_estimate"
    resource = None
    form_class = None

    # natural key
    number_field = None
    number_prefix = ""
    number_exists_code = None
    not_found_code = None

    counterparty_field = "customer"
    counterparty_code = ErrorCode.CUSTOMER_NOT_FOUND

    # cleaned DTO keys copied onto the document as they are
    header_fields = ()

    # dynamic list columns
    list_fields = ()
    default_sort = None

    def __init__(self, tenancy=None, publisher=None, dynamic_list=None):
        self.tenancy = tenancy or TenancyService()
        self.publisher = publisher or SignalEventPublisher()
        self.dynamic_list_service = dynamic_list or DynamicListService()

    # ---------- entry hooks ----------

    def entries_amount(self, entries):
        raise NotImplementedError

    def validate_entries(self, models, dto, document=None):
        raise NotImplementedError

    def save_entries(self, models, document, entries):
        raise NotImplementedError

    def delete_entries(self, models, document):
        raise NotImplementedError

    def attach_entries(self, models, documents):
        raise NotImplementedError

    # ---------- optional hooks ----------

    def validate_document(self, models, dto, amount, document=None):
        """Extra header gates of the document type."""

    def validate_delete(self, models, document):
        """Gates that may forbid deleting the document."""

    def before_save(self, models, document, dto, old_document=None):
        """Runs inside the write transaction, before the document is saved."""

    def after_save(self, models, document, dto, old_document=None):
        """Runs inside the write transaction, after the entries are saved."""

    def before_delete(self, models, document):
        """Runs inside the delete transaction, before entries are deleted."""

    # ---------- lookups ----------

    def queryset(self, models):
        return models.scoped(self.model).select_related(self.counterparty_field)

    def _get_or_raise(self, models, document_id):
        document = models.scoped(self.model).filter(pk=document_id).first()
        if document is None:
            raise NotFoundError(self.not_found_code, {"id": document_id})
        return document

    def _load(self, models, document_id):
        document = self.queryset(models).filter(pk=document_id).first()
        if document is None:
            raise NotFoundError(self.not_found_code, {"id": document_id})
        self.attach_entries(models, [document])
        return document

    def get_or_raise(self, tenant_id, document_id):
        """
        Retrieve the document (without relations) or throw not found.
        @param tenant_id - The tenant id.
        @param document_id - The document id.
        """
        models = self.tenancy.models(tenant_id)
        return self._get_or_raise(models, document_id)

    # ---------- validation ----------

    def clean_dto(self, dto):
        return self.form_class(data=dict(dto or {})).clean_dto()

    def document_values(self, dto):
        return {field: dto[field] for field in self.header_fields if field in dto}

    def get_counterparty(self, models, dto):
        counterparty_model = self.model._meta.get_field(
            self.counterparty_field).related_model
        return get_counterparty_or_raise(
            models.scoped(counterparty_model),
            dto[f"{self.counterparty_field}_id"],
            self.counterparty_code,
        )

    def validate_number(self, models, dto, document=None):
        """Validate the document number uniqueness on the storage."""
        number = dto.get(self.number_field)
        if not number:
            return
        validate_number_unique(
            models.scoped(self.model),
            self.number_field,
            number,
            self.number_exists_code,
            exclude_id=document.pk if document is not None else None,
        )

    def next_number(self, models):
        series = NumberSeries.for_document(
            models.company, self.model.REFERENCE_TYPE, self.number_prefix
        )
        scoped = models.scoped(self.model)
        return series.allocate(
            is_taken=lambda number: scoped.filter(
                **{self.number_field: number}).exists()
        )

    # ---------- events ----------

    def notify(self, action, **payload):
        """Publish the lifecycle event once the current transaction commits."""
        name = event_name(self.resource, action)
        transaction.on_commit(partial(self._publish, name, payload), robust=True)

    def _publish(self, name, payload):
        # Events are best-effort, a failed delivery never fails the write
        try:
            self.publisher.publish(name, payload)
        except Exception:
            logger.exception(
                "[%s] event delivery failed.", self.resource,
                extra={"event_name": name, "id": payload.get("id")},
            )

    # ---------- lifecycle ----------

    def create(self, tenant_id, dto):
        """
        Creates a new document with associated entries.
        @param tenant_id - The tenant id.
        @param dto - Document DTO (header fields + entries).
        @return the persisted document with entries and counterparty.
        """
        models = self.tenancy.models(tenant_id)
        dto = self.clean_dto(dto)
        # ids are assigned by the storage
        for entry in dto["entries"]:
            entry["id"] = None

        amount = self.entries_amount(dto["entries"])
        validate_amount_range(amount)

        # Validate the number uniquiness on the storage.
        self.validate_number(models, dto)

        # Retrieve the given counterparty or throw not found service error.
        counterparty = self.get_counterparty(models, dto)

        self.validate_document(models, dto, amount)

        # Validate entries (referenced rows existance and eligibility).
        self.validate_entries(models, dto)

        logger.info("[%s] inserting %s to the storage.", self.resource, self.resource)
        with transaction.atomic():
            document = self.model(
                company=models.company, amount=amount, **self.document_values(dto)
            )
            setattr(document, self.counterparty_field, counterparty)
            setattr(
                document,
                self.number_field,
                dto.get(self.number_field) or self.next_number(models),
            )
            self.before_save(models, document, dto)
            document.save()
            self.save_entries(models, document, dto["entries"])
            self.after_save(models, document, dto)
            document = self._load(models, document.pk)

        logger.info(
            "[%s] insert %s success.", self.resource, self.resource,
            extra={"tenant_id": tenant_id, "id": document.pk},
        )
        self.notify(CREATED, tenant_id=tenant_id, id=document.pk, document=document)
        return document

    def edit(self, tenant_id, document_id, dto):
        """
        Edit details of the given document with associated entries.
        Entries missing from the DTO are deleted, the others are
        updated or inserted.
        """
        models = self.tenancy.models(tenant_id)
        old_document = self._load(models, document_id)
        dto = self.clean_dto(dto)

        amount = self.entries_amount(dto["entries"])
        validate_amount_range(amount)
        # Every entry id may appear once in the DTO.
        validate_entries_ids_unique(dto["entries"])

        # Validate the number uniquiness, excluding the document itself.
        self.validate_number(models, dto, old_document)

        counterparty = self.get_counterparty(models, dto)

        self.validate_document(models, dto, amount, old_document)

        self.validate_entries(models, dto, old_document)

        logger.info("[%s] editing %s on the storage.", self.resource, self.resource)
        with transaction.atomic():
            document = self._get_or_raise(models, document_id)
            for field, value in self.document_values(dto).items():
                setattr(document, field, value)
            document.amount = amount
            setattr(document, self.counterparty_field, counterparty)
            # An omitted number keeps the stored one
            if dto.get(self.number_field):
                setattr(document, self.number_field, dto[self.number_field])
            self.before_save(models, document, dto, old_document)
            document.save()
            self.save_entries(models, document, dto["entries"])
            self.after_save(models, document, dto, old_document)
            document = self._load(models, document.pk)

        logger.info(
            "[%s] edited successfully", self.resource,
            extra={"tenant_id": tenant_id, "id": document_id},
        )
        self.notify(
            EDITED,
            tenant_id=tenant_id,
            id=document.pk,
            document=document,
            old_document=old_document,
        )
        return document

    def delete(self, tenant_id, document_id):
        """Deletes the given document with associated entries."""
        models = self.tenancy.models(tenant_id)

        # Retrieve the document or throw not found service error.
        old_document = self._load(models, document_id)
        self.validate_delete(models, old_document)

        logger.info(
            "[%s] delete %s and associated entries from the storage.",
            self.resource, self.resource,
        )
        with transaction.atomic():
            self.before_delete(models, old_document)
            self.delete_entries(models, old_document)
            models.scoped(self.model).filter(pk=old_document.pk).delete()

        logger.info(
            "[%s] deleted successfully.", self.resource,
            extra={"tenant_id": tenant_id, "id": document_id},
        )
        self.notify(
            DELETED, tenant_id=tenant_id, id=old_document.pk, old_document=old_document
        )

    def get(self, tenant_id, document_id):
        """Retrieve the document details with entries and counterparty."""
        models = self.tenancy.models(tenant_id)
        return self._load(models, document_id)

    def list(self, tenant_id, list_filter=None):
        """
        Retrieve the filterable, paginated documents list.
        @return {"results", "pagination", "filter_meta"}
        """
        models = self.tenancy.models(tenant_id)
        # The tenant scope is applied here, user filter roles on top of it
        result = self.dynamic_list_service.paginated_list(
            self.queryset(models),
            self.list_fields,
            list_filter,
            default_sort=self.default_sort,
        )
        self.attach_entries(models, result["results"])
        return result


class ItemEntryDocumentService(DocumentService):
    """Documents whose entries are item lines (estimates, invoices, bills)."""

    # item flag every entry item must have
    item_flag = "sellable"

    def __init__(self, tenancy=None, publisher=None, dynamic_list=None,
                 entries_service=None):
        super().__init__(tenancy, publisher, dynamic_list)
        self.item_entries = entries_service or ItemEntriesService()

    def entries_amount(self, entries):
        return self.item_entries.entries_amount(entries)

    def validate_entries(self, models, dto, document=None):
        entries = dto["entries"]
        if document is not None:
            # Validate entries ids existance on this document.
            self.item_entries.validate_entries_ids_existance(
                models, self.model.REFERENCE_TYPE, document.pk, entries
            )
        # Validate items IDs existance on the storage.
        self.item_entries.validate_items_ids_existance(models, entries)
        # Validate non-sellable / non-purchasable items.
        self.item_entries.validate_eligible_entries_items(
            models, entries, self.item_flag
        )

    def save_entries(self, models, document, entries):
        return self.item_entries.save_entries(
            models, self.model.REFERENCE_TYPE, document.pk, entries
        )

    def delete_entries(self, models, document):
        return self.item_entries.delete_entries(
            models, self.model.REFERENCE_TYPE, document.pk
        )

    def attach_entries(self, models, documents):
        return self.item_entries.attach_entries(
            models, self.model.REFERENCE_TYPE, documents
        )
