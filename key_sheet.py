# key_sheet.py
"""Daily key lists.

A key sheet is a JSON file holding one entry per day of the month::

    {"days": [
      {"day": 31,
       "wheels": "I V III",
       "rings": "14 09 24",
       "reflector": "AD CN ET FL GI JV KZ PU QY WX RB MH",
       "plugboard": "SZ GT DV KU FO MY EW JN IX LQ",
       "indicators": "wny dgy ncd rzf"},
      ...
    ]}

Wheels, rings and pairs may also be given as JSON lists. Rings accept
numbers (1–26) or letters.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Sequence, Tuple

from enigma import EXTENDED_PLUG_COUNT, PAIR_COUNT
from utilities import string_to_index

REQUIRED = {"day", "wheels", "rings", "reflector", "plugboard"}


def _split(value: str | Sequence[str]) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(value.split())
    return tuple(str(v).strip() for v in value)


@dataclass(frozen=True, slots=True)
class KeySheetEntry:
    day: int
    wheels: Tuple[str, ...]           # left, middle, right
    rings: Tuple[int, ...]            # indices 0–25
    reflector: Tuple[str, ...]        # 12 connections
    plugboard: Tuple[str, ...]        # usually 10 cables
    indicators: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "KeySheetEntry":
        missing = REQUIRED - data.keys()
        if missing:
            raise ValueError(f"Missing keys in key sheet entry: {', '.join(sorted(missing))}")

        day = int(data["day"])
        if not 1 <= day <= 31:
            raise ValueError(f"Day {day} out of range 1–31")

        wheels = _split(data["wheels"])
        rings = tuple(string_to_index(r) for r in _split(data["rings"]))
        if len(wheels) != 3 or len(rings) != 3:
            raise ValueError(f"Day {day}: need three wheels and three ring settings")

        reflector = tuple(p.upper() for p in _split(data["reflector"]))
        plugboard = tuple(p.upper() for p in _split(data["plugboard"]))
        if len(reflector) != PAIR_COUNT:
            raise ValueError(f"Day {day}: need {PAIR_COUNT} reflector pairs, got {len(reflector)}")
        if len(plugboard) > EXTENDED_PLUG_COUNT:
            raise ValueError(f"Day {day}: at most {EXTENDED_PLUG_COUNT} plug pairs, got {len(plugboard)}")
        bad = [p for p in reflector + plugboard if len(p) != 2]
        if bad:
            raise ValueError(f"Day {day}: malformed pairs {' '.join(bad)}")

        return cls(
            day=day,
            wheels=wheels,
            rings=rings,
            reflector=reflector,
            plugboard=plugboard,
            indicators=str(data.get("indicators", "")),
        )

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "wheels": " ".join(self.wheels),
            "rings": " ".join(f"{r + 1:02d}" for r in self.rings),
            "reflector": " ".join(self.reflector),
            "plugboard": " ".join(self.plugboard),
            "indicators": self.indicators,
        }


def parse_key_sheet(data: dict | list) -> Dict[int, KeySheetEntry]:
    rows = data.get("days", []) if isinstance(data, dict) else data
    sheet: Dict[int, KeySheetEntry] = {}
    for row in rows:
        entry = KeySheetEntry.from_dict(row)
        sheet[entry.day] = entry
    return sheet


def load_key_sheet(path: str | Path) -> Dict[int, KeySheetEntry]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_key_sheet(data)


def dump_key_sheet(sheet: Dict[int, KeySheetEntry]) -> str:
    payload = {"days": [sheet[day].to_dict() for day in sorted(sheet)]}
    return json.dumps(payload, indent=2)
