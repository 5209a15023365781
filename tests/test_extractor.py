"""Tests for the dealings panel extractor."""
from decimal import Decimal

import pytest
from bs4 import BeautifulSoup

from dealings_ingest.config import Selectors
from dealings_ingest.exceptions import ExtractError
from dealings_ingest.extractor import ColumnMapping, RecordExtractor
from dealings_ingest.models import DirectorDealing
from dealings_ingest.parsing import parse_int, parse_text
from tests.conftest import LABEL_ROW, TITLE_ROW, make_page, make_row


@pytest.fixture
def extractor():
    return RecordExtractor("SSW")


class TestRowSkipping:
    @pytest.mark.parametrize("row_count", [0, 1, 2, 3, 4, 7])
    def test_first_two_rows_are_never_emitted(self, extractor, row_count):
        page = make_page([make_row(date=f"0{i} Jan 2024") for i in range(row_count)])

        results = list(extractor.extract(page))

        assert len(results) == max(row_count - 2, 0)
        assert [r.date for r in results] == [f"0{i} Jan 2024" for i in range(2, row_count)]

    def test_header_rows_are_skipped_by_position_not_content(self, extractor):
        # Header-looking text beyond position 1 is still treated as data.
        page = make_page([TITLE_ROW, make_row(), LABEL_ROW])

        results = list(extractor.extract(page))

        assert len(results) == 1
        assert isinstance(results[0], ExtractError)
        assert (results[0].row, results[0].field) == (2, "value")


def test_missing_panel_yields_nothing(extractor):
    page = make_page([TITLE_ROW, LABEL_ROW, make_row()], container_id="other-page")

    assert list(extractor.extract(page)) == []


def test_rows_outside_the_panel_are_ignored(extractor, dealings_page):
    results = list(extractor.extract(dealings_page))

    assert [r.beneficiary for r in results] == ["J. Smith", "A. Jones"]


def test_extracts_records_in_document_order(extractor, dealings_page, expected_dealings):
    assert list(extractor.extract(dealings_page)) == expected_dealings


def test_accepts_parsed_documents(extractor, dealings_page, expected_dealings):
    soup = BeautifulSoup(dealings_page, "html.parser")

    assert list(extractor.extract(soup)) == expected_dealings


def test_extraction_can_be_repeated(extractor, dealings_page):
    assert list(extractor.extract(dealings_page)) == list(extractor.extract(dealings_page))


def test_cell_text_is_trimmed(extractor):
    page = make_page([TITLE_ROW, LABEL_ROW, make_row(date="\n  01 Jan 2024  ", beneficiary=" J. Smith ")])

    (record,) = extractor.extract(page)

    assert record.date == "01 Jan 2024"
    assert record.beneficiary == "J. Smith"


class TestRowErrors:
    def test_unparseable_value_fails_only_that_row(self, extractor):
        page = make_page([TITLE_ROW, LABEL_ROW, make_row(value="N/A"), make_row(date="02 Jan 2024")])

        error, record = extractor.extract(page)

        assert isinstance(error, ExtractError)
        assert (error.row, error.field, error.raw) == (2, "value", "N/A")
        assert isinstance(record, DirectorDealing)
        assert record.date == "02 Jan 2024"

    def test_unparseable_volume(self, extractor):
        page = make_page([TITLE_ROW, LABEL_ROW, make_row(volume="1.5")])

        (error,) = extractor.extract(page)

        assert error.field == "volume"
        assert "Row 2" in str(error)

    def test_unparseable_price(self, extractor):
        page = make_page([TITLE_ROW, LABEL_ROW, make_row(price="R20")])

        (error,) = extractor.extract(page)

        assert (error.field, error.raw) == ("price", "R20")

    def test_missing_price_cell_is_an_error(self, extractor):
        page = make_page([TITLE_ROW, LABEL_ROW, make_row(price=None)])

        (error,) = extractor.extract(page)

        assert (error.field, error.raw) == ("price", "")


class TestPartialRows:
    def test_missing_beneficiary_becomes_empty_string(self, extractor):
        page = make_page([TITLE_ROW, LABEL_ROW, make_row(beneficiary=None)])

        (record,) = extractor.extract(page)

        assert record.beneficiary == ""
        assert (record.date, record.deal_type, record.value, record.volume) == (
            "01 Jan 2024",
            "Purchase",
            10000,
            500,
        )

    def test_short_rows_leave_trailing_fields_unset(self, extractor):
        page = make_page([TITLE_ROW, LABEL_ROW, make_row(value=None, volume=None)])

        (record,) = extractor.extract(page)

        assert record.value is None
        assert record.volume is None
        assert record.missing_fields == ("value", "volume")

    def test_cells_beyond_the_mapping_are_ignored(self, extractor):
        page = make_page([TITLE_ROW, LABEL_ROW, make_row(extra_cells=("not a number", "x"))])

        (record,) = extractor.extract(page)

        assert record.is_complete


def test_selectors_and_columns_are_configurable():
    page = (
        '<table class="dealings">'
        "<tr class='d'><td>title</td></tr>"
        "<tr class='d'><td>labels</td></tr>"
        "<tr class='d'><td class='c'>7</td><td class='c'>03 Mar 2024</td>"
        "<td class='c'>Sale</td><td class='c'>1,000</td><td class='who'>B. Khumalo</td>"
        "<td class='p'>1,234.5</td></tr>"
        "</table>"
    )
    selectors = Selectors(container="table.dealings", row="tr.d", cell="td.c", beneficiary="td.who", price="td.p")
    columns = (
        ColumnMapping(0, "volume", parse_int),
        ColumnMapping(1, "date", parse_text),
        ColumnMapping(2, "deal_type", parse_text),
        ColumnMapping(3, "value", parse_int),
    )

    (record,) = RecordExtractor("ABC", selectors, columns).extract(page)

    assert record == DirectorDealing(
        stock_code="ABC",
        date="03 Mar 2024",
        beneficiary="B. Khumalo",
        deal_type="Sale",
        value=1000,
        volume=7,
        price=Decimal("1234.5"),
    )
