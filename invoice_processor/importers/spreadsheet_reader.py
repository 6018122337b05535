"""
Spreadsheet readers - first sheet, first row as headers

One pandas engine per workbook format:
    .xlsx / .xlsm -> openpyxl
    .xls          -> xlrd (Excel 97-2003)
    .ods          -> odf (OpenDocument)
"""
from pathlib import Path

import pandas as pd

from .base import RowReader


class SpreadsheetReader(RowReader):

    extensions = (".xlsx", ".xlsm")
    engine = "openpyxl"

    def load_frame(self, path: Path) -> pd.DataFrame:
        # Cached values for formula cells, like opening the file in Excel
        return pd.read_excel(path, sheet_name=0, header=0, engine=self.engine)


class LegacyExcelReader(SpreadsheetReader):

    extensions = (".xls",)
    engine = "xlrd"


class OpenDocumentReader(SpreadsheetReader):

    extensions = (".ods",)
    engine = "odf"
