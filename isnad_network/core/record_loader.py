"""CSV loading and field normalization for hadith and narrator records."""

import re
import logging
from typing import Dict, List, Optional, Tuple
import pandas as pd

from .models import HadithRecord, NarratorRecord, RecordLoadError

logger = logging.getLogger(__name__)


class RecordLoader:
    """Loads the hadith and narrator tables into typed records."""

    INTEGER_PATTERN = re.compile(r'^\s*([+-]?\d+)')
    REPLACEMENT_CHARACTER = "\ufffd"

    HADITH_REQUIRED_COLUMNS = ["chain_indx"]
    HADITH_COLUMNS = [
        "id", "hadith_id", "source", "chapter", "chapter_no", "hadith_no",
        "text_ar", "text_en", "chain_indx",
    ]

    NARRATOR_REQUIRED_COLUMNS = ["scholar_indx"]
    NARRATOR_COLUMNS = [
        "scholar_indx", "name", "grade", "birth_date_place", "death_date_place",
        "birth_place", "birth_date", "death_date", "area_of_interest",
        "teachers", "students",
    ]

    def load_all(self, hadiths_path: str,
                 narrators_path: str) -> Tuple[List[HadithRecord], List[NarratorRecord]]:
        """Load both datasets; either failing aborts the whole load."""
        hadiths = self.load_hadiths(hadiths_path)
        narrators = self.load_narrators(narrators_path)
        logger.info(f"Loaded {len(hadiths)} hadiths and {len(narrators)} narrators")
        return hadiths, narrators

    def load_hadiths(self, path: str) -> List[HadithRecord]:
        """Load hadith records from a CSV file."""
        frame = self._read_table(path, "hadiths", self.HADITH_REQUIRED_COLUMNS)
        columns = self._present_columns(frame, self.HADITH_COLUMNS)

        records = []
        for row_number, row in enumerate(frame.to_dict(orient="records"), start=1):
            records.append(self._to_hadith(row, columns, row_number))
        return records

    def load_narrators(self, path: str) -> List[NarratorRecord]:
        """Load narrator records from a CSV file."""
        frame = self._read_table(path, "narrators", self.NARRATOR_REQUIRED_COLUMNS)
        columns = self._present_columns(frame, self.NARRATOR_COLUMNS)

        records = []
        for row_number, row in enumerate(frame.to_dict(orient="records"), start=1):
            records.append(self._to_narrator(row, columns, row_number))
        return records

    def _read_table(self, path: str, dataset: str, required: List[str]) -> pd.DataFrame:
        """Read a CSV with every column as text and check required columns."""
        logger.debug(f"Reading {dataset} from {path}")
        try:
            frame = pd.read_csv(path, dtype=str, keep_default_na=False,
                                encoding="utf-8", encoding_errors="replace")
        except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise RecordLoadError(dataset, str(path), str(e)) from e

        missing = [column for column in required if column not in frame.columns]
        if missing:
            raise RecordLoadError(dataset, str(path), f"missing required columns: {missing}")

        self._warn_undecodable_rows(frame, dataset)
        return frame

    def _warn_undecodable_rows(self, frame: pd.DataFrame, dataset: str) -> None:
        """Log rows where invalid UTF-8 bytes were replaced during decoding."""
        if frame.empty:
            return

        damaged = frame.apply(
            lambda column: column.str.contains(self.REPLACEMENT_CHARACTER, regex=False)
        ).any(axis=1)
        damaged_rows = [position + 1 for position, flag in enumerate(damaged) if flag]
        if damaged_rows:
            logger.warning(f"Replaced undecodable bytes in {len(damaged_rows)} {dataset} rows: "
                           f"{damaged_rows[:20]}")

    def _present_columns(self, frame: pd.DataFrame, expected: List[str]) -> List[str]:
        absent = [column for column in expected if column not in frame.columns]
        if absent:
            logger.debug(f"Optional columns not present, defaulting to empty: {absent}")
        return [column for column in expected if column in frame.columns]

    def _to_hadith(self, row: Dict[str, str], columns: List[str], row_number: int) -> HadithRecord:
        text = {column: self._text(row.get(column)) if column in columns else "" for column in self.HADITH_COLUMNS}
        return HadithRecord(
            id=self.parse_int(text["id"], field_name="id", row_number=row_number),
            hadith_id=self.parse_int(text["hadith_id"], field_name="hadith_id", row_number=row_number),
            source=text["source"],
            chapter=text["chapter"],
            chapter_no=text["chapter_no"],
            hadith_no=text["hadith_no"],
            text_ar=text["text_ar"],
            text_en=text["text_en"],
            chain=self.parse_chain(text["chain_indx"], row_number=row_number),
        )

    def _to_narrator(self, row: Dict[str, str], columns: List[str], row_number: int) -> NarratorRecord:
        text = {column: self._text(row.get(column)) if column in columns else "" for column in self.NARRATOR_COLUMNS}
        return NarratorRecord(
            scholar_indx=self.parse_int(text["scholar_indx"], field_name="scholar_indx",
                                        row_number=row_number),
            name=text["name"],
            grade=text["grade"],
            birth_date_place=text["birth_date_place"],
            death_date_place=text["death_date_place"],
            birth_place=text["birth_place"],
            birth_date=text["birth_date"],
            death_date=text["death_date"],
            area_of_interest=text["area_of_interest"],
            teachers=text["teachers"],
            students=text["students"],
        )

    @staticmethod
    def _text(value) -> str:
        if value is None:
            return ""
        return str(value)

    @classmethod
    def parse_int(cls, value: str, field_name: str = "value",
                  row_number: Optional[int] = None) -> Optional[int]:
        """Parse the leading integer of a field; None when there is none."""
        if value is None or not value.strip():
            return None

        match = cls.INTEGER_PATTERN.match(value)
        if not match:
            logger.warning(f"Malformed {field_name} {value!r} at row {row_number}; using sentinel")
            return None

        return int(match.group(1))

    @classmethod
    def parse_chain(cls, chain_text: str, row_number: Optional[int] = None) -> Tuple[int, ...]:
        """Parse a comma-separated chain of narrator ids.

        Empty and unparseable tokens are skipped, so fully malformed
        input yields an empty chain.
        """
        if not chain_text or not chain_text.strip():
            return ()

        chain = []
        for token in chain_text.split(","):
            if not token.strip():
                continue
            match = cls.INTEGER_PATTERN.match(token)
            if not match:
                logger.warning(f"Skipping malformed chain entry {token.strip()!r} at row {row_number}")
                continue
            chain.append(int(match.group(1)))

        return tuple(chain)

    @staticmethod
    def build_narrator_lookup(narrators: List[NarratorRecord]) -> Dict[int, NarratorRecord]:
        """Index narrators by scholar id; later duplicates replace earlier ones."""
        lookup = {}
        skipped = 0

        for narrator in narrators:
            if narrator.scholar_indx is None:
                skipped += 1
                continue
            lookup[narrator.scholar_indx] = narrator

        if skipped:
            logger.warning(f"{skipped} narrators without a usable scholar_indx left out of the lookup")
        logger.debug(f"Built narrator lookup with {len(lookup)} entries")
        return lookup
