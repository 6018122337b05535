"""
CSV reader - UTF-8 (BOM tolerated), first line as headers

Every cell is read as text; ImportRow does the numeric/date coercion so
invoice keys like "001" keep their leading zeros.
"""
from pathlib import Path

import pandas as pd

from .base import RowReader


class CsvReader(RowReader):

    extensions = (".csv",)

    def load_frame(self, path: Path) -> pd.DataFrame:
        return pd.read_csv(path, dtype=str, encoding="utf-8-sig", skipinitialspace=True)
