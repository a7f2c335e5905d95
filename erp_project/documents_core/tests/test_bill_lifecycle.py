from decimal import Decimal

from django.test import TestCase

from ..exceptions import (CounterpartyNotFoundError, ErrorCode,
                          InvalidStateError, NonEligibleItemError)
from ..models import Bill, ItemEntry
from ..services import BillService
from .helpers import DocumentsFixtures


class BillLifecycleTests(DocumentsFixtures, TestCase):
    def setUp(self):
        super().setUp()
        self.service = BillService(publisher=self.publisher)

    def make_bill(self, entries=None, **extra):
        return self.service.create(
            self.company.pk,
            self.bill_dto(entries or [self.entry(self.steel, "10", "7.50")], **extra),
        )

    def test_create_bill_with_purchasable_items(self):
        bill = self.make_bill(bill_number="V-100")

        self.assertEqual(bill.bill_number, "V-100")
        self.assertEqual(bill.vendor, self.vendor)
        self.assertEqual(bill.amount, Decimal("75.00"))
        self.assertEqual(bill.status, "draft")
        self.assertEqual(
            ItemEntry.objects.for_reference("Bill", bill.pk).count(), 1
        )

    def test_bill_number_is_assigned_when_omitted(self):
        self.assertEqual(self.make_bill().bill_number, "BILL-00001")

    def test_non_purchasable_item_raises(self):
        with self.assertRaises(NonEligibleItemError) as ctx:
            self.make_bill([self.entry(self.consulting)])
        self.assertEqual(ctx.exception.code, ErrorCode.NOT_PURCHASABLE_ITEMS)
        self.assertEqual(ctx.exception.ids, [self.consulting.pk])

    def test_unknown_vendor_raises(self):
        with self.assertRaises(CounterpartyNotFoundError) as ctx:
            self.make_bill(vendor_id=9999)
        self.assertEqual(ctx.exception.code, ErrorCode.VENDOR_NOT_FOUND)

    def test_open_bill(self):
        bill = self.make_bill()

        with self.captureOnCommitCallbacks(execute=True):
            self.service.open(self.company.pk, bill.pk)

        bill.refresh_from_db()
        self.assertEqual(bill.status, "open")
        self.assertEqual(self.publisher.names(), ["bill.opened"])

        with self.assertRaises(InvalidStateError) as ctx:
            self.service.open(self.company.pk, bill.pk)
        self.assertEqual(ctx.exception.code, ErrorCode.BILL_ALREADY_OPEN)

    def test_edit_below_paid_amount_raises(self):
        bill = self.make_bill(open=True)
        Bill.objects.filter(pk=bill.pk).update(payment_amount=Decimal("70.00"))

        with self.assertRaises(InvalidStateError) as ctx:
            self.service.edit(
                self.company.pk, bill.pk, self.bill_dto([self.entry(self.steel)])
            )
        self.assertEqual(
            ctx.exception.code, ErrorCode.BILL_AMOUNT_SMALLER_THAN_PAID_AMOUNT
        )

    def test_delete_paid_bill_raises(self):
        bill = self.make_bill(open=True)
        Bill.objects.filter(pk=bill.pk).update(payment_amount=Decimal("1.00"))

        with self.assertRaises(InvalidStateError) as ctx:
            self.service.delete(self.company.pk, bill.pk)
        self.assertEqual(ctx.exception.code, ErrorCode.BILL_HAS_PAYMENTS)

    def test_delete_bill(self):
        bill = self.make_bill()
        self.service.delete(self.company.pk, bill.pk)

        self.assertFalse(Bill.objects.filter(pk=bill.pk).exists())
        self.assertFalse(ItemEntry.objects.for_reference("Bill", bill.pk).exists())
