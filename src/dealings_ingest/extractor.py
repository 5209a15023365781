"""Extraction of dealing records from the dealings panel markup."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence, Union

from bs4 import BeautifulSoup, Tag

from .config import Selectors
from .exceptions import ExtractError
from .models import DirectorDealing
from .parsing import parse_int, parse_price, parse_text

LOGGER = logging.getLogger(__name__)

# Rows 0 and 1 of the panel hold the panel title and the column labels.
HEADER_ROWS = 2

RowResult = Union[DirectorDealing, ExtractError]


@dataclass(frozen=True)
class ColumnMapping:
    """Assigns the cell at ``position`` within a row to a record field."""

    position: int
    field: str
    parser: Callable[[str], Any]


DEFAULT_COLUMNS: tuple[ColumnMapping, ...] = (
    ColumnMapping(0, "date", parse_text),
    ColumnMapping(1, "deal_type", parse_text),
    ColumnMapping(2, "value", parse_int),
    ColumnMapping(3, "volume", parse_int),
)


def _cell_text(cell: Tag | None) -> str:
    return cell.get_text() if cell is not None else ""


class RecordExtractor:
    """Walks the dealings panel and builds one result per data row."""

    def __init__(
        self,
        stock_code: str,
        selectors: Selectors | None = None,
        columns: Sequence[ColumnMapping] = DEFAULT_COLUMNS,
    ) -> None:
        self.stock_code = stock_code
        self.selectors = selectors or Selectors()
        self.columns = {mapping.position: mapping for mapping in columns}

    def extract(self, document: str | BeautifulSoup) -> Iterator[RowResult]:
        """Yield a record or an :class:`ExtractError` for every data row."""

        soup = document if isinstance(document, BeautifulSoup) else BeautifulSoup(document, "html.parser")
        container = soup.select_one(self.selectors.container)
        if container is None:
            LOGGER.info("No dealings panel matched %r", self.selectors.container)
            return

        for index, row in enumerate(container.select(self.selectors.row)):
            if index < HEADER_ROWS:
                continue
            yield self._extract_row(index, row)

    def _extract_row(self, index: int, row: Tag) -> RowResult:
        fields: dict[str, Any] = {"stock_code": self.stock_code}

        for position, cell in enumerate(row.select(self.selectors.cell)):
            mapping = self.columns.get(position)
            if mapping is None:
                continue
            raw = _cell_text(cell)
            try:
                fields[mapping.field] = mapping.parser(raw)
            except ValueError as exc:
                return ExtractError(index, mapping.field, raw, exc)

        fields["beneficiary"] = parse_text(_cell_text(row.select_one(self.selectors.beneficiary)))

        raw_price = _cell_text(row.select_one(self.selectors.price))
        try:
            fields["price"] = parse_price(raw_price)
        except ValueError as exc:
            return ExtractError(index, "price", raw_price, exc)

        record = DirectorDealing(**fields)
        if not record.is_complete:
            LOGGER.warning("Row %d is missing %s", index, ", ".join(record.missing_fields))
        return record


__all__ = ["RecordExtractor", "ColumnMapping", "DEFAULT_COLUMNS", "HEADER_ROWS", "RowResult"]
