# main.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from debug import COMPONENTS, Debug, configure_logging
from enigma import LEFT, MIDDLE, RIGHT, SLOW, Enigma, EngineConfig
from key_sheet import load_key_sheet
from settings_store import DEFAULT_SETTINGS_FILE, load_settings, save_settings
from utilities import group_blocks

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


BLOCK = 5                       # display block size


# ────────────────────────────────────────────────────────────────────────
#  1. Settings helpers
# ────────────────────────────────────────────────────────────────────────


def load_config(args: argparse.Namespace) -> EngineConfig:
    """Pick the settings source: --settings FILE, the default file, or defaults."""
    if args.settings:
        return load_settings(args.settings)

    if DEFAULT_SETTINGS_FILE.exists() and not args.defaults:
        ans = input(f"Found '{DEFAULT_SETTINGS_FILE}'.  Load it? (Y/n) ").strip().lower()
        if ans in {"", "y", "yes"}:
            return load_settings(DEFAULT_SETTINGS_FILE)

    return EngineConfig()


def apply_start(machine: Enigma, start: List[str]) -> None:
    """Dial the message key into the wheel windows, left wheel first."""
    slots = [SLOW, LEFT, MIDDLE, RIGHT] if machine.is_fourth_wheel() else [LEFT, MIDDLE, RIGHT]
    if len(start) != len(slots):
        raise SystemExit(f"❌  Need exactly {len(slots)} start positions.")
    for pos, value in zip(slots, start):
        machine.set_rotor_offset(pos, value)


def explain_invalid(machine: Enigma) -> str:
    cfg = machine.config
    problems = []
    if not cfg.is_plugboard_valid():
        bad = [cfg.plugboard.get_text(i) for i in range(cfg.plugboard.size())
               if not cfg.plugboard.is_valid(i)]
        problems.append(f"plugboard ({' '.join(bad) or 'letter used twice'})")
    if not cfg.is_reflector_valid():
        problems.append("reflector")
    if not cfg.are_rotors_valid():
        problems.append("wheel selection")
    return ", ".join(problems)


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encipher or decipher with an Enigma machine")
    p.add_argument("-m", "--message", metavar="TEXT", help="Text to encipher. If omitted, an interactive REPL starts.")
    p.add_argument("--settings", metavar="FILE", help="Load machine settings from JSON.")
    p.add_argument("--defaults", action="store_true", help=f"Ignore '{DEFAULT_SETTINGS_FILE}' and start from the default settings.")
    p.add_argument("--key-sheet", dest="key_sheet", metavar="FILE", help="Daily key list (JSON) to take the settings from.")
    p.add_argument("--day", type=int, help="Day of the month to use from --key-sheet.")
    p.add_argument("--start", nargs="+", metavar="POS", help="Start positions, left wheel first (letters or 1-26).")
    p.add_argument("--show", action="store_true", help="Trace each letter through the machine.")
    p.add_argument("--save", nargs="?", const=str(DEFAULT_SETTINGS_FILE), metavar="FILE", help="Save the settings (with the final wheel positions) afterwards.")
    p.add_argument("--debug", action="append", choices=[*COMPONENTS, "all"], default=[], help="Enable debug output for a component (repeatable).")
    return p.parse_args(argv)


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)

    configure_logging(level=logging.DEBUG if args.debug else logging.INFO)
    Debug.apply(args.debug)

    machine = Enigma(load_config(args))

    if args.key_sheet:
        if args.day is None:
            raise SystemExit("❌  --key-sheet needs --day.")
        sheet = load_key_sheet(args.key_sheet)
        if args.day not in sheet:
            raise SystemExit(f"❌  No entry for day {args.day} in {args.key_sheet}.")
        machine.apply_preset(sheet[args.day])

    if args.start:
        apply_start(machine, args.start)
    if args.show:
        machine.set_show(True)

    if not machine.lock():
        raise SystemExit(f"❌  Invalid settings: {explain_invalid(machine)}.")

    # one‑shot mode ------------------------------------------------------
    if args.message is not None:
        cipher = machine.encipher(args.message)
        print("Output:", "  ".join(group_blocks(cipher, BLOCK)))
    else:
        # interactive REPL -----------------------------------------------
        print(f"\nWindows: {machine.window()}   Type blank line to quit.\n")
        while True:
            txt = input("\nText > ")
            if not txt.strip():
                break
            cipher = machine.encipher(txt)
            print("\nOutput:", "  ".join(group_blocks(cipher, BLOCK)))
            print(f"Windows: {machine.window()}")

    machine.unlock()
    if args.save:
        path = save_settings(machine.config, Path(args.save))
        print(f"✅  Wrote {path}")


if __name__ == "__main__":
    main()
