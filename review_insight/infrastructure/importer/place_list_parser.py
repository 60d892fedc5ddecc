"""
Place List Parser - Excel/CSV Import for Batch Runs
====================================================

Parses an Excel or CSV file and auto-detects the place id column
(and an optional store name column).
Supports .xlsx, .xls, and .csv formats.
"""

import logging
from pathlib import Path
from typing import List, Dict, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

# Common column name variations for auto-detection, most specific first
PLACE_ID_PATTERNS = ['place_id', 'placeid', 'google_place_id', 'place id', 'gmb_id']
NAME_PATTERNS = ['store_name', 'business_name', 'name', 'store', 'business', 'shop', 'restaurant']


class PlaceListParser:
    """
    Excel/CSV parser with auto-detection of place columns.

    Usage:
        parser = PlaceListParser()
        places, columns = parser.parse("places.xlsx")
        # places: [{"place_id": "ChIJ...", "name": "Blue Bottle"}, ...]
    """

    def __init__(self):
        self.detected_columns: Dict[str, Optional[str]] = {}

    def parse(self, file_path: str, sheet_name: Optional[str] = None) -> Tuple[List[Dict], Dict[str, Optional[str]]]:
        """
        Parse Excel/CSV file and return place rows.

        Args:
            file_path: Path to the file (.xlsx, .xls, .csv)
            sheet_name: Optional sheet name for Excel files

        Returns:
            Tuple of (places list, detected column mapping)
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        ext = path.suffix.lower()

        if ext == '.csv':
            df = pd.read_csv(file_path, dtype=str)
        elif ext in ['.xlsx', '.xls']:
            df = pd.read_excel(file_path, sheet_name=sheet_name or 0, dtype=str)
        else:
            raise ValueError(f"Unsupported file format: {ext}. Use .xlsx, .xls, or .csv")

        df.columns = df.columns.str.strip().str.lower()

        place_col = self._find_column(df.columns, PLACE_ID_PATTERNS)
        name_col = self._find_column(df.columns, NAME_PATTERNS, exclude={place_col})

        self.detected_columns = {
            'place_id': place_col,
            'name': name_col,
        }

        logger.info(f"Detected columns: {self.detected_columns}")

        if not place_col:
            raise ValueError("Could not detect 'Place ID' column. Please ensure your file has a place_id column.")

        places = []
        seen = set()

        for _, row in df.iterrows():
            place_id = self._clean(row.get(place_col))
            name = self._clean(row.get(name_col)) if name_col else ''

            # Skip empty rows and repeats
            if not place_id or place_id in seen:
                continue
            seen.add(place_id)

            places.append({'place_id': place_id, 'name': name})

        logger.info(f"Parsed {len(places)} places from {file_path}")
        return places, self.detected_columns

    def _find_column(self, columns: pd.Index, patterns: List[str], exclude: Optional[set] = None) -> Optional[str]:
        """First column matching a pattern, trying patterns in priority order."""
        exclude = exclude or set()
        for pattern in patterns:
            for col in columns:
                if col in exclude:
                    continue
                if pattern == col or pattern in col:
                    return col
        return None

    def _clean(self, value) -> str:
        if value is None or pd.isna(value):
            return ''
        return str(value).strip()


def parse_place_list(file_path: str, sheet_name: Optional[str] = None) -> List[Dict]:
    """
    Convenience function to parse a place list file.

    Returns:
        List of {"place_id", "name"} dictionaries
    """
    parser = PlaceListParser()
    places, _ = parser.parse(file_path, sheet_name)
    return places
