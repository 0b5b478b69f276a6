# settings_generator.py
from __future__ import annotations

import argparse
from pathlib import Path
from random import Random, SystemRandom
from typing import Dict, List

from key_sheet import KeySheetEntry, dump_key_sheet
from utilities import ALPHABET

# ── key sheet layout ──────────────────────────────────────────────
WHEELS = ["I", "II", "III", "IV", "V"]
N_ROT = 3
REFLECTOR_PAIRS = 12
PLUG_PAIRS = 10
INDICATORS = 4
DAYS = range(1, 32)

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint letter pairs."""
    k = min(k, len(ALPHABET) // 2)
    pool = list(ALPHABET)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def choose_indicators(rng: Random | SystemRandom) -> str:
    groups = ("".join(rng.choices(ALPHABET, k=3)).lower() for _ in range(INDICATORS))
    return " ".join(groups)


def make_entry(day: int, rng: Random | SystemRandom) -> KeySheetEntry:
    return KeySheetEntry(
        day=day,
        wheels=tuple(rng.sample(WHEELS, N_ROT)),
        rings=tuple(rng.randrange(len(ALPHABET)) for _ in range(N_ROT)),
        reflector=tuple(choose_pairs(REFLECTOR_PAIRS, rng)),
        plugboard=tuple(choose_pairs(PLUG_PAIRS, rng)),
        indicators=choose_indicators(rng),
    )


def make_sheet(rng: Random | SystemRandom) -> Dict[int, KeySheetEntry]:
    # the sheet is printed last day first
    return {day: make_entry(day, rng) for day in reversed(DAYS)}


def parse_cli(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a monthly Enigma key sheet")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument(
        "--outfile",
        type=Path,
        default=Path("key_sheet.json"),
        help="Destination JSON file (default: key_sheet.json)",
    )
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_cli(argv)
    sheet = make_sheet(build_rng(args.seed))

    args.outfile.write_text(dump_key_sheet(sheet), encoding="utf-8")
    first = sheet[1]
    print(f"✅  Wrote {args.outfile}\n"
        f"   days        : {len(sheet)}\n"
        f"   day 1 wheels: {' '.join(first.wheels)}\n"
        f"   day 1 plugs : {' '.join(first.plugboard)}")


if __name__ == "__main__":
    main()
