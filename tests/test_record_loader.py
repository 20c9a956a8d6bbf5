"""Tests for record loading and field parsing."""

from pathlib import Path

import pytest

from isnad_network.core.models import NarratorRecord, RecordLoadError
from isnad_network.core.record_loader import RecordLoader


def test_load_hadiths(hadiths_path: Path):
    """Every row becomes a typed record, including ones with short chains."""
    hadiths = RecordLoader().load_hadiths(str(hadiths_path))

    assert len(hadiths) == 4
    assert hadiths[0].id == 1
    assert hadiths[0].hadith_id == 101
    assert hadiths[0].source == "Sahih Bukhari"
    assert hadiths[0].chain == (1, 2, 3)
    assert hadiths[0].text_ar == "نص"
    assert hadiths[2].chain == (4,)
    assert hadiths[3].chain == ()


def test_load_narrators(narrators_path: Path):
    narrators = RecordLoader().load_narrators(str(narrators_path))

    assert len(narrators) == 4
    assert narrators[1].scholar_indx == 2
    assert narrators[1].grade == "Comp.(RA)"
    assert narrators[1].death_date == "644"
    assert narrators[1].birth_date == ""
    # Optional columns absent from the file default to empty text
    assert narrators[0].teachers == ""


def test_load_all_missing_hadiths_names_dataset(narrators_path: Path, tmp_path: Path):
    with pytest.raises(RecordLoadError) as excinfo:
        RecordLoader().load_all(str(tmp_path / "missing.csv"), str(narrators_path))

    assert excinfo.value.dataset == "hadiths"


def test_load_all_missing_narrators_names_dataset(hadiths_path: Path, tmp_path: Path):
    with pytest.raises(RecordLoadError) as excinfo:
        RecordLoader().load_all(str(hadiths_path), str(tmp_path / "missing.csv"))

    assert excinfo.value.dataset == "narrators"


def test_missing_required_column_is_unreadable(tmp_path: Path):
    path = tmp_path / "hadiths.csv"
    path.write_text("id,source\n1,Bukhari\n", encoding="utf-8")

    with pytest.raises(RecordLoadError, match="chain_indx"):
        RecordLoader().load_hadiths(str(path))


def test_malformed_numeric_field_uses_sentinel(tmp_path: Path):
    path = tmp_path / "hadiths.csv"
    path.write_text("id,hadith_id,chain_indx\nabc,12x,\"1,2\"\n", encoding="utf-8")

    hadiths = RecordLoader().load_hadiths(str(path))

    assert len(hadiths) == 1
    assert hadiths[0].id is None
    assert hadiths[0].hadith_id == 12
    assert hadiths[0].chain == (1, 2)


def test_undecodable_bytes_keep_other_rows(tmp_path: Path, caplog):
    """A row with invalid UTF-8 is decoded with replacements instead of failing the load."""
    path = tmp_path / "hadiths.csv"
    path.write_bytes(
        b"id,hadith_id,chain_indx,text_en\n"
        b"1,1,\"1,2\",ok\n"
        b"2,2,\"3,4\",ok\n"
        b"3,3,\"5,6\",caf\xe9 \xff\xfe bad\n"
        b"4,4,\"\xff7,8\",ok\n"
    )

    with caplog.at_level("WARNING"):
        hadiths = RecordLoader().load_hadiths(str(path))

    assert len(hadiths) == 4
    assert hadiths[0].chain == (1, 2)
    assert hadiths[1].chain == (3, 4)
    assert hadiths[2].chain == (5, 6)
    assert "\ufffd" in hadiths[2].text_en
    # The damaged leading token is skipped, the rest of the chain survives
    assert hadiths[3].chain == (8,)
    assert "Replaced undecodable bytes in 2 hadiths rows" in caplog.text


@pytest.mark.parametrize("text,expected", [
    ("1, 2, 3", (1, 2, 3)),
    ("", ()),
    ("   ", ()),
    ("abc", ()),
    ("1,,2", (1, 2)),
    ("1, x, 3", (1, 3)),
    ("7", (7,)),
])
def test_parse_chain(text, expected):
    assert RecordLoader.parse_chain(text) == expected


def test_parse_int():
    assert RecordLoader.parse_int("42") == 42
    assert RecordLoader.parse_int(" 42 ") == 42
    assert RecordLoader.parse_int("") is None
    assert RecordLoader.parse_int("n/a") is None


def test_build_narrator_lookup_skips_sentinels_and_keeps_last():
    narrators = [
        NarratorRecord(scholar_indx=1, name="First"),
        NarratorRecord(scholar_indx=None, name="Broken"),
        NarratorRecord(scholar_indx=1, name="Second"),
    ]

    lookup = RecordLoader.build_narrator_lookup(narrators)

    assert list(lookup) == [1]
    assert lookup[1].name == "Second"
