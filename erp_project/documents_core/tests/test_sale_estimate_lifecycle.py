from decimal import Decimal

from django.test import TestCase

from ..exceptions import (CounterpartyNotFoundError, DuplicateEntriesError,
                          DuplicateNumberError, EntriesNotFoundError,
                          ErrorCode, ItemsNotFoundError, NonEligibleItemError,
                          NotFoundError, TenantNotFoundError, ValidationError)
from ..models import ItemEntry, SaleEstimate
from ..services import SaleEstimateService
from .helpers import DocumentsFixtures


class SaleEstimateCreateTests(DocumentsFixtures, TestCase):
    def setUp(self):
        super().setUp()
        self.service = SaleEstimateService(publisher=self.publisher)

    def test_create_computes_amount_from_entries(self):
        estimate = self.service.create(
            self.company.pk,
            self.estimate_dto(
                [
                    self.entry(quantity="2", rate="10.00"),
                    self.entry(self.consulting, quantity="3", rate="5.00"),
                ],
                estimate_number="EST-1",
            ),
        )

        # 2 × 10 + 3 × 5
        self.assertEqual(estimate.amount, Decimal("35.00"))
        self.assertEqual(estimate.estimate_number, "EST-1")
        self.assertEqual(estimate.customer, self.customer)
        self.assertEqual(len(estimate.entries), 2)
        # entries are persisted with their position in the DTO
        self.assertEqual([e.index for e in estimate.entries], [1, 2])
        self.assertEqual(
            [e.amount for e in estimate.entries],
            [Decimal("20.00"), Decimal("15.00")],
        )

    def test_client_amount_is_ignored(self):
        estimate = self.service.create(
            self.company.pk,
            self.estimate_dto(
                [self.entry(quantity="1", rate="10.00", amount="999.00")],
                amount="999.00",
            ),
        )
        self.assertEqual(estimate.amount, Decimal("10.00"))
        self.assertEqual(estimate.entries[0].amount, Decimal("10.00"))

    def test_discount_is_applied_to_entry_amount(self):
        estimate = self.service.create(
            self.company.pk,
            self.estimate_dto([self.entry(quantity="4", rate="25.00", discount="10")]),
        )
        self.assertEqual(estimate.amount, Decimal("90.00"))

    def test_number_is_assigned_when_omitted(self):
        first = self.service.create(self.company.pk, self.estimate_dto())
        second = self.service.create(self.company.pk, self.estimate_dto())

        self.assertEqual(first.estimate_number, "EST-00001")
        self.assertEqual(second.estimate_number, "EST-00002")

    def test_assigned_number_skips_numbers_typed_by_hand(self):
        self.service.create(
            self.company.pk, self.estimate_dto(estimate_number="EST-00001")
        )
        estimate = self.service.create(self.company.pk, self.estimate_dto())
        self.assertEqual(estimate.estimate_number, "EST-00002")

    def test_duplicate_number_in_same_tenant_raises(self):
        self.service.create(self.company.pk, self.estimate_dto(estimate_number="E-1"))

        with self.assertRaises(DuplicateNumberError) as ctx:
            self.service.create(
                self.company.pk, self.estimate_dto(estimate_number="E-1")
            )
        self.assertEqual(ctx.exception.code, ErrorCode.SALE_ESTIMATE_NUMBER_EXISTANCE)
        self.assertEqual(SaleEstimate.objects.count(), 1)

    def test_same_number_in_other_tenant_is_allowed(self):
        self.service.create(self.company.pk, self.estimate_dto(estimate_number="E-1"))
        other = self.service.create(
            self.other_company.pk,
            {
                "estimate_date": "2025-09-18",
                "estimate_number": "E-1",
                "customer_id": self.foreign_customer.pk,
                "entries": [self.entry(self.foreign_item)],
            },
        )
        self.assertEqual(other.company, self.other_company)

    def test_unknown_items_raise_with_ids_and_nothing_is_persisted(self):
        with self.assertRaises(ItemsNotFoundError) as ctx:
            self.service.create(
                self.company.pk,
                self.estimate_dto(
                    [
                        self.entry(),
                        {"item_id": 9999, "quantity": "1", "rate": "1"},
                        {"item_id": 9998, "quantity": "1", "rate": "1"},
                    ]
                ),
            )

        self.assertEqual(ctx.exception.code, ErrorCode.ITEMS_IDS_NOT_EXISTS)
        self.assertEqual(ctx.exception.payload, {"ids": [9998, 9999]})
        self.assertFalse(SaleEstimate.objects.exists())
        self.assertFalse(ItemEntry.objects.exists())
        self.assertEqual(self.publisher.events, [])

    def test_item_of_other_tenant_counts_as_unknown(self):
        with self.assertRaises(ItemsNotFoundError) as ctx:
            self.service.create(
                self.company.pk, self.estimate_dto([self.entry(self.foreign_item)])
            )
        self.assertEqual(ctx.exception.ids, [self.foreign_item.pk])

    def test_non_sellable_item_raises(self):
        with self.assertRaises(NonEligibleItemError) as ctx:
            self.service.create(
                self.company.pk, self.estimate_dto([self.entry(self.steel)])
            )
        self.assertEqual(ctx.exception.code, ErrorCode.NOT_SELLABLE_ITEMS)
        self.assertEqual(ctx.exception.ids, [self.steel.pk])

    def test_unknown_customer_raises(self):
        with self.assertRaises(CounterpartyNotFoundError) as ctx:
            self.service.create(
                self.company.pk,
                self.estimate_dto(customer_id=self.foreign_customer.pk),
            )
        self.assertEqual(ctx.exception.code, ErrorCode.CUSTOMER_NOT_FOUND)

    def test_unknown_tenant_raises(self):
        with self.assertRaises(TenantNotFoundError):
            self.service.create(9999, self.estimate_dto())

    def test_empty_entries_raise_validation_error(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.create(self.company.pk, self.estimate_dto([]))
        self.assertEqual(ctx.exception.code, ErrorCode.VALIDATION_ERROR)
        self.assertIn("entries", ctx.exception.payload["errors"])

    def test_malformed_entry_reports_its_position(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.create(
                self.company.pk,
                self.estimate_dto([self.entry(), self.entry(quantity="-1")]),
            )
        self.assertIn(1, ctx.exception.payload["errors"]["entries"])

    def test_create_publishes_created_event_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True):
            estimate = self.service.create(self.company.pk, self.estimate_dto())

        self.assertEqual(self.publisher.names(), ["sale_estimate.created"])
        _, payload = self.publisher.events[0]
        self.assertEqual(payload["tenant_id"], self.company.pk)
        self.assertEqual(payload["id"], estimate.pk)
        self.assertEqual(payload["document"].pk, estimate.pk)


class SaleEstimateEditDeleteTests(DocumentsFixtures, TestCase):
    def setUp(self):
        super().setUp()
        self.service = SaleEstimateService(publisher=self.publisher)
        self.estimate = self.service.create(
            self.company.pk,
            self.estimate_dto(
                [
                    self.entry(quantity="1", rate="10.00"),
                    self.entry(self.consulting, quantity="2", rate="50.00"),
                ],
                estimate_number="EST-1",
            ),
        )
        self.first, self.second = self.estimate.entries

    def test_edit_keeps_its_own_number(self):
        estimate = self.service.edit(
            self.company.pk,
            self.estimate.pk,
            self.estimate_dto(
                [self.entry(id=self.first.pk, quantity="3", rate="10.00")],
                estimate_number="EST-1",
            ),
        )
        self.assertEqual(estimate.estimate_number, "EST-1")
        self.assertEqual(estimate.amount, Decimal("30.00"))

    def test_edit_to_number_of_other_estimate_raises(self):
        self.service.create(self.company.pk, self.estimate_dto(estimate_number="EST-2"))

        with self.assertRaises(DuplicateNumberError):
            self.service.edit(
                self.company.pk,
                self.estimate.pk,
                self.estimate_dto(estimate_number="EST-2"),
            )

    def test_omitted_entry_is_deleted_and_kept_entry_updated(self):
        estimate = self.service.edit(
            self.company.pk,
            self.estimate.pk,
            self.estimate_dto(
                [
                    self.entry(id=self.second.pk, quantity="1", rate="50.00"),
                    self.entry(quantity="5", rate="2.00"),
                ]
            ),
        )

        self.assertFalse(ItemEntry.objects.filter(pk=self.first.pk).exists())
        self.assertEqual(estimate.entries[0].pk, self.second.pk)
        self.assertEqual(estimate.entries[0].amount, Decimal("50.00"))
        # new line inserted with a fresh id
        self.assertNotIn(estimate.entries[1].pk, (self.first.pk, self.second.pk))
        self.assertEqual(estimate.amount, Decimal("60.00"))
        self.assertEqual(
            ItemEntry.objects.for_reference("SaleEstimate", self.estimate.pk).count(), 2
        )

    def test_entry_id_of_other_document_raises(self):
        other = self.service.create(self.company.pk, self.estimate_dto())

        with self.assertRaises(EntriesNotFoundError) as ctx:
            self.service.edit(
                self.company.pk,
                self.estimate.pk,
                self.estimate_dto([self.entry(id=other.entries[0].pk)]),
            )
        self.assertEqual(ctx.exception.code, ErrorCode.ENTRIES_IDS_NOT_FOUND)
        self.assertEqual(ctx.exception.ids, [other.entries[0].pk])

    def test_edit_publishes_old_and_new_document(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.service.edit(
                self.company.pk,
                self.estimate.pk,
                self.estimate_dto([self.entry(id=self.first.pk)]),
            )

        name, payload = self.publisher.events[-1]
        self.assertEqual(name, "sale_estimate.edited")
        self.assertEqual(payload["old_document"].amount, Decimal("110.00"))
        self.assertEqual(payload["document"].amount, Decimal("10.00"))

    def test_edit_unknown_estimate_raises_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.edit(self.company.pk, 9999, self.estimate_dto())
        self.assertEqual(ctx.exception.code, ErrorCode.SALE_ESTIMATE_NOT_FOUND)

    def test_delete_removes_estimate_and_entries(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.service.delete(self.company.pk, self.estimate.pk)

        self.assertFalse(SaleEstimate.objects.filter(pk=self.estimate.pk).exists())
        self.assertFalse(
            ItemEntry.objects.for_reference("SaleEstimate", self.estimate.pk).exists()
        )
        name, payload = self.publisher.events[-1]
        self.assertEqual(name, "sale_estimate.deleted")
        self.assertEqual(payload["old_document"].pk, self.estimate.pk)

        # a second delete finds nothing
        with self.assertRaises(NotFoundError):
            self.service.delete(self.company.pk, self.estimate.pk)

    def test_get_returns_entries_in_order(self):
        estimate = self.service.get(self.company.pk, self.estimate.pk)
        self.assertEqual([e.pk for e in estimate.entries], [self.first.pk, self.second.pk])
        self.assertEqual(estimate.entries[1].item, self.consulting)

    def test_get_or_raise_returns_plain_document(self):
        estimate = self.service.get_or_raise(self.company.pk, self.estimate.pk)
        self.assertEqual(estimate.pk, self.estimate.pk)
        # no entries attached on the plain lookup
        self.assertFalse(hasattr(estimate, "entries"))

        with self.assertRaises(NotFoundError):
            self.service.get_or_raise(self.other_company.pk, self.estimate.pk)

    def test_repeated_entry_id_raises_and_keeps_estimate(self):
        with self.assertRaises(DuplicateEntriesError) as ctx:
            self.service.edit(
                self.company.pk,
                self.estimate.pk,
                self.estimate_dto(
                    [
                        self.entry(id=self.first.pk, rate="10.00"),
                        self.entry(id=self.first.pk, rate="20.00"),
                    ]
                ),
            )
        self.assertEqual(ctx.exception.code, ErrorCode.ENTRIES_IDS_DUPLICATED)
        self.assertEqual(ctx.exception.payload, {"ids": [self.first.pk]})

        # amount still equals the sum of the stored entries
        estimate = self.service.get(self.company.pk, self.estimate.pk)
        self.assertEqual(estimate.amount, Decimal("110.00"))
        self.assertEqual(sum(e.amount for e in estimate.entries), estimate.amount)


class SaleEstimateAmountRangeTests(DocumentsFixtures, TestCase):
    def setUp(self):
        super().setUp()
        self.service = SaleEstimateService(publisher=self.publisher)

    def test_entry_amount_too_large_raises_coded_error(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.create(
                self.company.pk,
                self.estimate_dto(
                    [self.entry(quantity="1000000", rate="10000000000")]
                ),
            )
        self.assertEqual(ctx.exception.code, ErrorCode.VALIDATION_ERROR)
        self.assertIn("__all__", ctx.exception.payload["errors"]["entries"][0])
        self.assertFalse(SaleEstimate.objects.exists())
        self.assertFalse(ItemEntry.objects.exists())

    def test_total_too_large_raises_coded_error(self):
        # each line fits, their sum doesn't
        big_line = self.entry(quantity="1000000", rate="9000000000")
        with self.assertRaises(ValidationError) as ctx:
            self.service.create(
                self.company.pk, self.estimate_dto([big_line, dict(big_line)])
            )
        self.assertEqual(ctx.exception.code, ErrorCode.VALIDATION_ERROR)
        self.assertIn("amount", ctx.exception.payload["errors"])
        self.assertFalse(SaleEstimate.objects.exists())
