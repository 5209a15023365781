"""Shared fixtures for the dealings ingestion tests."""
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import create_engine

from dealings_ingest.config import Settings
from dealings_ingest.db import ensure_schema
from dealings_ingest.models import DirectorDealing
from dealings_ingest.sinks import RecordSink

TITLE_ROW = '<div class="sens-row cac"><h3>Directors Dealings</h3></div>'

LABEL_ROW = (
    '<div class="sens-row cac">'
    '<div class="col-lg-2 col-md-2">DATE</div>'
    '<div class="col-lg-3 col-md-3">BENEFICIARY</div>'
    '<div class="col-lg-2 col-md-2">DEAL TYPE</div>'
    '<div class="col-lg-2 col-md-2">VALUE</div>'
    '<div class="col-lg-2 col-md-2">VOLUME</div>'
    '<div class="col-lg-1 col-md-1 clear-padding">PRICE</div>'
    "</div>"
)


def make_row(
    date: str | None = "01 Jan 2024",
    deal_type: str | None = "Purchase",
    value: str | None = "10,000",
    volume: str | None = "500",
    beneficiary: str | None = "J. Smith",
    price: str | None = "20.00",
    extra_cells: tuple[str, ...] = (),
) -> str:
    """Build one dealings row. Passing ``None`` leaves the cell out."""

    positional = [text for text in (date, deal_type, value, volume) if text is not None]
    positional.extend(extra_cells)
    cells = [f'<div class="col-lg-2 col-md-2">{text}</div>' for text in positional]
    if beneficiary is not None:
        cells.insert(1, f'<div class="col-lg-3 col-md-3">{beneficiary}</div>')
    if price is not None:
        cells.append(f'<div class="col-lg-1 col-md-1 clear-padding">{price}</div>')
    return '<div class="sens-row cac">' + "".join(cells) + "</div>"


def make_page(rows: list[str], container_id: str = "cac-page") -> str:
    """Wrap rows in the dealings panel of an otherwise ordinary page."""

    return (
        "<html><head><title>Click a company</title></head><body>"
        '<div class="sens-row cac">outside the panel</div>'
        f'<div id="{container_id}">' + "".join(rows) + "</div>"
        "</body></html>"
    )


@pytest.fixture
def dealings_page() -> str:
    """Two header rows followed by two dealings."""

    return make_page(
        [
            TITLE_ROW,
            LABEL_ROW,
            make_row(),
            make_row(
                date="02 Jan 2024",
                deal_type="Sale",
                value="5,000",
                volume="250",
                beneficiary="A. Jones",
                price="19.75",
            ),
        ]
    )


@pytest.fixture
def expected_dealings() -> list[DirectorDealing]:
    return [
        DirectorDealing(
            stock_code="SSW",
            date="01 Jan 2024",
            beneficiary="J. Smith",
            deal_type="Purchase",
            value=10000,
            volume=500,
            price=Decimal("20.00"),
        ),
        DirectorDealing(
            stock_code="SSW",
            date="02 Jan 2024",
            beneficiary="A. Jones",
            deal_type="Sale",
            value=5000,
            volume=250,
            price=Decimal("19.75"),
        ),
    ]


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", future=True)
    ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def settings() -> Settings:
    return Settings(console_output=False)


class RecordingSink(RecordSink):
    """Keeps every record it receives."""

    def __init__(self, name: str = "recording") -> None:
        self.name = name
        self.records: list[DirectorDealing] = []
        self.opened = False
        self.closed = False

    def open(self) -> None:
        self.opened = True

    def write(self, record: DirectorDealing) -> None:
        self.records.append(record)

    def close(self) -> None:
        self.closed = True


class FailingSink(RecordSink):
    """Rejects every record."""

    def __init__(self, name: str = "failing") -> None:
        self.name = name
        self.attempts = 0

    def write(self, record: DirectorDealing) -> None:
        self.attempts += 1
        raise ConnectionError("store unavailable")
