from decimal import Decimal

from django.test import TestCase

from ..exceptions import (DuplicateNumberError, ErrorCode, InvalidStateError,
                          NonEligibleItemError, NotFoundError)
from ..models import ItemEntry, SaleInvoice
from ..services import SaleInvoiceService
from .helpers import DocumentsFixtures


class SaleInvoiceLifecycleTests(DocumentsFixtures, TestCase):
    def setUp(self):
        super().setUp()
        self.service = SaleInvoiceService(publisher=self.publisher)

    def make_invoice(self, **extra):
        # One line of 2 × 50
        return self.service.create(
            self.company.pk,
            self.invoice_dto([self.entry(quantity="2", rate="50.00")], **extra),
        )

    def test_new_invoice_is_draft_with_amount(self):
        invoice = self.make_invoice()

        self.assertEqual(invoice.status, "draft")
        self.assertEqual(invoice.amount, Decimal("100.00"))
        self.assertEqual(invoice.payment_amount, Decimal("0.00"))
        self.assertEqual(invoice.invoice_no, "INV-00001")

    def test_create_delivered_invoice(self):
        invoice = self.make_invoice(delivered=True)
        self.assertTrue(invoice.is_delivered)

    def test_duplicate_invoice_number_raises(self):
        self.make_invoice(invoice_no="INV-7")
        with self.assertRaises(DuplicateNumberError) as ctx:
            self.make_invoice(invoice_no="INV-7")
        self.assertEqual(ctx.exception.code, ErrorCode.SALE_INVOICE_NUMBER_EXISTANCE)

    def test_non_sellable_item_raises(self):
        with self.assertRaises(NonEligibleItemError):
            self.service.create(
                self.company.pk, self.invoice_dto([self.entry(self.steel)])
            )
        self.assertFalse(SaleInvoice.objects.exists())

    def test_deliver_moves_draft_to_delivered(self):
        invoice = self.make_invoice()

        with self.captureOnCommitCallbacks(execute=True):
            self.service.deliver(self.company.pk, invoice.pk)

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, "delivered")
        self.assertEqual(self.publisher.names(), ["sale_invoice.delivered"])

    def test_deliver_twice_raises(self):
        invoice = self.make_invoice(delivered=True)
        with self.assertRaises(InvalidStateError) as ctx:
            self.service.deliver(self.company.pk, invoice.pk)
        self.assertEqual(ctx.exception.code, ErrorCode.SALE_INVOICE_ALREADY_DELIVERED)

    def test_edit_does_not_undeliver(self):
        invoice = self.make_invoice(delivered=True)
        edited = self.service.edit(
            self.company.pk,
            invoice.pk,
            self.invoice_dto([self.entry(id=invoice.entries[0].pk, quantity="3")]),
        )
        self.assertTrue(edited.is_delivered)
        self.assertEqual(edited.amount, Decimal("30.00"))

    def test_edit_below_received_payments_raises(self):
        invoice = self.make_invoice(delivered=True)
        SaleInvoice.objects.filter(pk=invoice.pk).update(
            payment_amount=Decimal("80.00")
        )

        with self.assertRaises(InvalidStateError) as ctx:
            self.service.edit(
                self.company.pk,
                invoice.pk,
                self.invoice_dto([self.entry(quantity="1", rate="50.00")]),
            )
        self.assertEqual(
            ctx.exception.code, ErrorCode.INVOICE_AMOUNT_SMALLER_THAN_PAYMENT_AMOUNT
        )
        # nothing changed
        invoice.refresh_from_db()
        self.assertEqual(invoice.amount, Decimal("100.00"))

    def test_delete_invoice_with_payments_raises(self):
        invoice = self.make_invoice(delivered=True)
        SaleInvoice.objects.filter(pk=invoice.pk).update(
            payment_amount=Decimal("10.00")
        )

        with self.assertRaises(InvalidStateError) as ctx:
            self.service.delete(self.company.pk, invoice.pk)
        self.assertEqual(ctx.exception.code, ErrorCode.SALE_INVOICE_HAS_PAYMENTS)
        self.assertTrue(SaleInvoice.objects.filter(pk=invoice.pk).exists())

    def test_delete_removes_invoice_entries(self):
        invoice = self.make_invoice()
        self.service.delete(self.company.pk, invoice.pk)

        self.assertFalse(
            ItemEntry.objects.for_reference("SaleInvoice", invoice.pk).exists()
        )
        with self.assertRaises(NotFoundError) as ctx:
            self.service.get(self.company.pk, invoice.pk)
        self.assertEqual(ctx.exception.code, ErrorCode.SALE_INVOICE_NOT_FOUND)
