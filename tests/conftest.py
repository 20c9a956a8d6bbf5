"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from isnad_network.core.models import HadithRecord, NarratorRecord
from isnad_network.core.network_builder import NetworkBuilder

HADITHS_CSV = """id,hadith_id,source,chapter,chapter_no,hadith_no,text_ar,text_en,chain_indx
1,101,Sahih Bukhari,Revelation,1,1,نص,Actions are by intentions,"1, 2, 3"
2,102,Sahih Bukhari,Revelation,1,2,نص,Second text,"1, 2"
3,103,Sahih Muslim,Faith,2,7,نص,Single narrator,"4"
4,104,Sahih Muslim,Faith,2,8,نص,No chain,
"""

NARRATORS_CSV = """scholar_indx,name,grade,birth_date_place,death_date_place,birth_place,birth_date,death_date,area_of_interest
1,Muhammad,Rasool Allah,Makkah 570,Madinah 632,Makkah,570,632,Revelation
2,Umar ibn al-Khattab,Comp.(RA),,,Makkah,,644,Fiqh
3,Alqama ibn Waqqas,Thiqah,,Kufa 62,,,,
4,Some Narrator,Daif,,,,,,
"""


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory with small hadith and narrator CSV files."""
    (tmp_path / "hadiths.csv").write_text(HADITHS_CSV, encoding="utf-8")
    (tmp_path / "narrators.csv").write_text(NARRATORS_CSV, encoding="utf-8")
    return tmp_path


@pytest.fixture
def hadiths_path(data_dir: Path) -> Path:
    return data_dir / "hadiths.csv"


@pytest.fixture
def narrators_path(data_dir: Path) -> Path:
    return data_dir / "narrators.csv"


def _hadiths_from_chains(*chains):
    return [HadithRecord(id=i, hadith_id=100 + i, chain=tuple(chain))
            for i, chain in enumerate(chains, start=1)]


@pytest.fixture
def make_hadiths():
    """Factory for hadith records with the given chains and sequential ids."""
    return _hadiths_from_chains


@pytest.fixture
def narrator_lookup():
    return {
        1: NarratorRecord(scholar_indx=1, name="Muhammad", grade="Rasool Allah"),
        2: NarratorRecord(scholar_indx=2, name="Umar", grade="Comp.(RA)",
                          birth_date_place="Makkah", death_date="644"),
        3: NarratorRecord(scholar_indx=3, name="Alqama", grade="Thiqah"),
    }


@pytest.fixture
def example_graph(narrator_lookup):
    """Graph built from chains [[1, 2, 3], [1, 2], []]."""
    return NetworkBuilder().build_network(_hadiths_from_chains([1, 2, 3], [1, 2], []), narrator_lookup)
