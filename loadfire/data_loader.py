import csv
import logging
import os
from typing import Dict, List

import pandas as pd

from loadfire.errors import DataLoadError

logger = logging.getLogger(__name__)

DataRow = Dict[str, str]


def load_data(file_path: str) -> List[DataRow]:
    """
    Loads request parameters from a CSV or Excel file.

    :param file_path: Path to a .csv, .xls or .xlsx file. The first row holds the column names.
    :return: One dictionary per data row, keyed by column name.
    """
    extension = os.path.splitext(file_path)[1].lstrip(".").lower()
    if extension == "csv":
        rows = load_csv_data(file_path)
    elif extension in ("xls", "xlsx"):
        rows = load_excel_data(file_path)
    else:
        raise DataLoadError(f"Unsupported file format: {file_path}")
    logger.info("Loaded %d data rows from %s", len(rows), file_path)
    return rows


def load_csv_data(file_path: str) -> List[DataRow]:
    """
    Reads a CSV file into a list of dictionaries.

    Cells beyond the header width are dropped and missing trailing cells are left out of the row.
    """
    try:
        with open(file_path, mode='r', encoding='utf-8', newline='') as csvfile:
            reader = csv.DictReader(csvfile)
            return [
                {key: value for key, value in row.items() if key is not None and value is not None}
                for row in reader
            ]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise DataLoadError(f"Cannot read CSV file {file_path}: {e}") from e


def load_excel_data(file_path: str) -> List[DataRow]:
    """
    Reads the first worksheet of an Excel workbook into a list of dictionaries.

    Every value is returned as a string. Cells outside the header columns are dropped and
    empty cells are left out of the row, the same way the CSV reader treats ragged rows.
    """
    try:
        frame = pd.read_excel(file_path, sheet_name=0, header=None, dtype=str,
                              keep_default_na=False, na_values=[""])
    except Exception as e:
        # pandas surfaces engine specific errors (openpyxl, xlrd, zipfile)
        raise DataLoadError(f"Cannot read Excel file {file_path}: {e}") from e
    if frame.empty:
        return []

    headers = frame.iloc[0].tolist()
    return [
        {header: value for header, value in zip(headers, values)
         if isinstance(header, str) and isinstance(value, str)}
        for values in frame.iloc[1:].itertuples(index=False)
    ]
