import pytest

from ..models import Company, NumberSeries


@pytest.fixture
def company(db):
    return Company.objects.create(name="Test Co", slug="test-co")


def test_allocate_pads_and_increments(company):
    series = NumberSeries.for_document(company, "SaleInvoice", "INV-")

    assert series.allocate() == "INV-00001"
    assert series.allocate() == "INV-00002"
    series.refresh_from_db()
    assert series.next_number == 3


def test_allocate_skips_taken_numbers(company):
    series = NumberSeries.for_document(company, "Bill", "BILL-")
    taken = {"BILL-00001", "BILL-00002"}

    assert series.allocate(is_taken=taken.__contains__) == "BILL-00003"
    assert series.next_number == 4


def test_series_are_per_company_and_code(company):
    other = Company.objects.create(name="Other Co", slug="other-co")

    first = NumberSeries.for_document(company, "SaleEstimate", "EST-")
    assert NumberSeries.for_document(company, "SaleEstimate", "EST-") == first
    assert NumberSeries.for_document(other, "SaleEstimate", "EST-") != first
    assert NumberSeries.for_document(company, "Bill", "BILL-") != first
