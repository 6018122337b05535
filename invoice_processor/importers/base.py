"""
Import reader base class

A reader turns one file into raw row mappings (original headers, blank
cells as None). Normalization into ImportRow happens in the import
pipeline, so a bad cell fails the invoice group it belongs to rather
than the whole read.

Author: TM3
Date: 2025-11-21
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import pandas as pd

from invoice_processor.core.exceptions import SpreadsheetReadError
from invoice_processor.domain.imports import REQUIRED_HEADERS, canonical_key

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class RowReader(ABC):
    """Pluggable import source selected by file extension"""

    extensions: Tuple[str, ...] = ()

    def can_handle(self, path: PathLike) -> bool:
        return Path(path).suffix.lower() in self.extensions

    @abstractmethod
    def load_frame(self, path: Path) -> pd.DataFrame:
        """Load the file into a DataFrame with the header row as columns"""

    def read(self, path: PathLike) -> List[Dict[str, Any]]:
        """
        Read every non-empty data row of a file

        Raises:
            SpreadsheetReadError: Missing file, unreadable content or
                missing required headers
        """
        path = Path(path)
        if not path.is_file():
            raise SpreadsheetReadError(f"File not found: {path}")

        try:
            df = self.load_frame(path)
        except SpreadsheetReadError:
            raise
        except Exception as e:
            raise SpreadsheetReadError(f"Error reading {path.name}: {str(e)}") from e

        check_headers(df.columns, path.name)

        # Skip rows where every cell is blank
        df = df.dropna(how="all")

        records = []
        for _, row in df.iterrows():
            records.append({
                str(column): (value if pd.notna(value) else None)
                for column, value in row.items()
            })

        logger.info(f"Read {len(records)} rows from {path.name}")
        return records


def check_headers(columns, source: str = "file") -> None:
    """Raise SpreadsheetReadError when a required header is missing"""
    available = [str(column) for column in columns]
    present = {canonical_key(column) for column in available}
    missing = [header for header in REQUIRED_HEADERS if header not in present]

    if missing:
        raise SpreadsheetReadError(
            f"Missing required columns in {source}: {', '.join(missing)}. "
            f"Columns: {available}"
        )
