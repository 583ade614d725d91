"""Era helpers (Saka and Vikram samvat) used by the Panchang formatter."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Union

SAMVATSARA_NAMES = [
    "Prabhava",
    "Vibhava",
    "Shukla",
    "Pramoda",
    "Prajapati",
    "Angirasa",
    "Shrimukha",
    "Bhava",
    "Yuva",
    "Dhatri",
    "Ishvara",
    "Bahudhanya",
    "Pramathi",
    "Vikrama",
    "Vrisha",
    "Chitrabhanu",
    "Svabhanu",
    "Tarana",
    "Parthiva",
    "Vyaya",
    "Sarvajit",
    "Sarvadhari",
    "Virodhi",
    "Vikriti",
    "Khara",
    "Nandana",
    "Vijaya",
    "Jaya",
    "Manmatha",
    "Durmukhi",
    "Hevilambi",
    "Vilambi",
    "Vikari",
    "Sharvari",
    "Plava",
    "Shubhakrit",
    "Shobhakrit",
    "Krodhi",
    "Vishvavasu",
    "Parabhava",
    "Plavanga",
    "Kilaka",
    "Saumya",
    "Sadharana",
    "Virodhikrit",
    "Paridhavi",
    "Pramadicha",
    "Ananda",
    "Rakshasa",
    "Nala",
    "Pingala",
    "Kalayukti",
    "Siddharthi",
    "Raudra",
    "Durmati",
    "Dundubhi",
    "Rudhirodgari",
    "Raktakshi",
    "Krodhana",
    "Akshaya",
]

# Offsets that place Saka / Vikram years on the 60-year cycle.
SAKA_CYCLE_OFFSET = 11
VIKRAM_CYCLE_OFFSET = 10

# Margashirsha (amanta index 8) through Phalguna can fall in January to
# April while still preceding the Chaitra new year.
_FIRST_PRE_NEW_YEAR_MONTH = 8


def _year_shift(date_local: datetime, lunar_month_index: int) -> int:
    if date_local.month <= 4 and lunar_month_index >= _FIRST_PRE_NEW_YEAR_MONTH:
        return 1
    return 0


def shaka_samvat(date_local: datetime, lunar_month_index: int = 0) -> int:
    return date_local.year - 78 - _year_shift(date_local, lunar_month_index)


def vikram_samvat(date_local: datetime, lunar_month_index: int = 0) -> int:
    return date_local.year + 57 - _year_shift(date_local, lunar_month_index)


def samvatsara(year: int, offset: int) -> tuple[int, str]:
    """Return the 1-based cycle position and name for an era year."""

    index = (year + offset) % 60
    return index + 1, SAMVATSARA_NAMES[index]


def build_year_info(date_local: datetime, lunar_month_index: int) -> Dict[str, Union[int, str]]:
    saka = shaka_samvat(date_local, lunar_month_index)
    vikram = vikram_samvat(date_local, lunar_month_index)
    saka_no, saka_name = samvatsara(saka, SAKA_CYCLE_OFFSET)
    vikram_no, vikram_name = samvatsara(vikram, VIKRAM_CYCLE_OFFSET)
    return {
        "saka_salivahana_number": saka,
        "saka_salivahana_name_number": saka_no,
        "saka_salivahana_year_name": saka_name,
        "vikram_chaitradi_number": vikram,
        "vikram_chaitradi_name_number": vikram_no,
        "vikram_chaitradi_year_name": vikram_name,
    }
