# wheel_catalog.py
"""Historical wheel and reflector wirings.

The tables are fixed data: a malformed entry is a programming error and
fails at import time. Turnover letters are the window letters at which a
wheel has just carried its left-hand neighbour; the notch sits one letter
earlier. The turnover points of the commercial, Rocket and Swiss K wheels
are guesses.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from utilities import ALPHABET, SIZE


@dataclass(frozen=True, slots=True)
class RotorWiring:
    id: str
    cipher: str
    date: str = ""
    name: str = ""
    turnovers: str = ""

    def __post_init__(self) -> None:
        if len(self.cipher) != SIZE or sorted(self.cipher) != sorted(ALPHABET):
            raise ValueError(f"{self.id}: wiring must be a permutation of A–Z")
        if len(self.turnovers) > 2 or not set(self.turnovers) <= set(ALPHABET):
            raise ValueError(f"{self.id}: turnovers must be 0–2 letters A–Z")

    @property
    def reflector(self) -> bool:
        """True when the wiring is a fixed-point-free involution."""
        for i, ch in enumerate(self.cipher):
            j = ALPHABET.index(ch)
            if i == j or self.cipher[j] != ALPHABET[i]:
                return False
        return True

    def turnover_points(self) -> frozenset[int]:
        return frozenset(ALPHABET.index(ch) for ch in self.turnovers)

    def is_turnover_point(self, offset: int) -> bool:
        return offset % SIZE in self.turnover_points()

    def is_notch_point(self, offset: int) -> bool:
        return (offset + 1) % SIZE in self.turnover_points()


# ────────────────────────────────────────────────────────────────────────
#  Wheel database
# ────────────────────────────────────────────────────────────────────────

COMMERCIAL = (
    RotorWiring("IC",    "DMTWSILRUYQNKFEJCAZBPGXOHV", "1924", "Commercial Enigma A, B", "R"),
    RotorWiring("IIC",   "HQZGPJTMOBLNCIFDYAWVEUSRKX", "1924", "Commercial Enigma A, B", "F"),
    RotorWiring("IIIC",  "UQNTLSZFMREHDPXKIBVYGJCWOA", "1924", "Commercial Enigma A, B", "W"),
)

ROCKET = (
    RotorWiring("I-R",   "JGDQOXUSCAMIFRVTPNEWKBLZYH", "7 February 1941", "German Railway (Rocket)", "R"),
    RotorWiring("II-R",  "NTZPSFBOKMWRCJDIVLAEYUXHGQ", "7 February 1941", "German Railway (Rocket)", "F"),
    RotorWiring("III-R", "JVIUBHTCDYAKEQZPOSGXNRMWFL", "7 February 1941", "German Railway (Rocket)", "W"),
    RotorWiring("UKW-R", "QYHOGNECVPUZTFDJAXWMKISRBL", "7 February 1941", "German Railway (Rocket)"),
    RotorWiring("ETW-R", "QWERTZUIOASDFGHJKPYXCVBNML", "7 February 1941", "German Railway (Rocket)"),
)

SWISS_K = (
    RotorWiring("I-K",   "PEZUOHXSCVFMTBGLRINQJWAYDK", "February 1939", "Swiss K", "R"),
    RotorWiring("II-K",  "ZOUESYDKFWPCIQXHMVBLGNJRAT", "February 1939", "Swiss K", "F"),
    RotorWiring("III-K", "EHRVXGAOBQUSIMZFLYNWKTPDJC", "February 1939", "Swiss K", "W"),
    RotorWiring("UKW-K", "IMETCGFRAYSQBZXWLHKDVUPOJN", "February 1939", "Swiss K"),
    RotorWiring("ETW-K", "QWERTZUIOASDFGHJKPYXCVBNML", "February 1939", "Swiss K"),
)

M3 = (
    RotorWiring("I",     "EKMFLGDQVZNTOWYHXUSPAIBRCJ", "1930", "Enigma I", "R"),
    RotorWiring("II",    "AJDKSIRUXBLHWTMCQGZNPYFVOE", "1930", "Enigma I", "F"),
    RotorWiring("III",   "BDFHJLCPRTXVZNYEIWGAKMUSQO", "1930", "Enigma I", "W"),
    RotorWiring("IV",    "ESOVPZJAYQUIRHXLNFTGKDCMWB", "December 1938", "M3 Army", "K"),
    RotorWiring("V",     "VZBRGITYUPSDNHLXAWMJQOFECK", "December 1938", "M3 Army", "A"),
    RotorWiring("VI",    "JPGVOUMFYQBENHZRDKASXLICTW", "1939", "M3 & M4 Naval (FEB 1942)", "AN"),
    RotorWiring("VII",   "NZJHGRCXMYSWBOUFAIVLPEKQDT", "1939", "M3 & M4 Naval (FEB 1942)", "AN"),
    RotorWiring("VIII",  "FKQHTLXOCBJSPDZRAMEWNIUYGV", "1939", "M3 & M4 Naval (FEB 1942)", "AN"),
)

M4 = (
    RotorWiring("Beta",             "LEYJVCNIXWPBQMDRTAKZGFUHOS", "Spring 1941", "M4 R2"),
    RotorWiring("Gamma",            "FSOKANUERHMBTIYCWLQPZXVGJD", "Spring 1942", "M4 R2"),
    RotorWiring("Reflector A",      "EJMZALYXVBWFCRQUONTSPIKHGD"),
    RotorWiring("Reflector B",      "YRUHQSLDPXNGOKMIEBFZCWVJAT"),
    RotorWiring("Reflector C",      "FVPJIAOYEDRZXWGCTKUQSBNMHL"),
    RotorWiring("Reflector B Thin", "ENKQAUYWJICOPBLMDXZVFTHRGS", "1940", "M4 R1 (M3 + Thin)"),
    RotorWiring("Reflector C Thin", "RDOBJNTKVEHMLFCWZAXGYIPSUQ", "1940", "M4 R1 (M3 + Thin)"),
    RotorWiring("ETW",              "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "", "Enigma I"),
)

FAMILIES: Dict[str, Tuple[RotorWiring, ...]] = {
    "M3": M3,
    "M4": M4,
    "Rocket": ROCKET,
    "Swiss K": SWISS_K,
    "Commercial": COMMERCIAL,
}

# Build the lookup tables ------------------------------------------------

WHEELS: Tuple[RotorWiring, ...] = tuple(
    w for family in FAMILIES.values() for w in family if not w.reflector
)
REFLECTORS: Tuple[RotorWiring, ...] = tuple(
    w for family in FAMILIES.values() for w in family if w.reflector
)

_by_id: Dict[str, RotorWiring] = {w.id: w for w in WHEELS + REFLECTORS}


def get_wiring(wiring_id: str) -> RotorWiring:
    try:
        return _by_id[wiring_id]
    except KeyError:
        raise KeyError(f"Unknown wheel or reflector {wiring_id!r}") from None


def wheel_ids() -> list[str]:
    return [w.id for w in WHEELS]


def reflector_ids() -> list[str]:
    return [w.id for w in REFLECTORS]


def is_wheel(wiring_id: str) -> bool:
    return wiring_id in _by_id and not _by_id[wiring_id].reflector


def is_reflector(wiring_id: str) -> bool:
    return wiring_id in _by_id and _by_id[wiring_id].reflector


__all__ = [
    "RotorWiring",
    "FAMILIES",
    "WHEELS",
    "REFLECTORS",
    "get_wiring",
    "wheel_ids",
    "reflector_ids",
    "is_wheel",
    "is_reflector",
]
