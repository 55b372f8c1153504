"""Mini README: CSV export of ledger, settlement and profit data.

The ``csv_exporter`` module renders BOM-prefixed UTF-8 CSV text and can write
it to the configured export directory.
"""

from .csv_exporter import (
    BOM,
    LEDGER_HEADER,
    PROFIT_HEADER,
    CsvExporter,
    ExportDocument,
    format_amount,
    render_csv,
)

__all__ = [
    "BOM",
    "LEDGER_HEADER",
    "PROFIT_HEADER",
    "CsvExporter",
    "ExportDocument",
    "format_amount",
    "render_csv",
]
