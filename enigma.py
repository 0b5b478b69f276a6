# enigma.py  ───────────────────────────────────────────────────────
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Tuple

from debug import Debug
from keyboard_and_plugboard import Keyboard, PairSet
from pipeline import LEFT, MIDDLE, POSITIONS, RIGHT, SLOW, SignalPipeline, lockdown
from utilities import SIZE, index_to_string, is_letter, preprocess_message, string_to_index
from wheel_catalog import get_wiring, is_reflector, is_wheel

if TYPE_CHECKING:
    from key_sheet import KeySheetEntry

debug = Debug("stepping")

PAIR_COUNT = 12         # reconfigurable reflector connections
PLUG_COUNT = 10         # standard plugboard cables
EXTENDED_PLUG_COUNT = 13


# ────────────────────────────────────────────────────────────────────────
#  0. Configuration
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class RotorSetting:
    """Wheel choice, ring setting and window position of one slot."""

    wheel: str
    ring: int = 0
    offset: int = 0


def _default_rotors() -> List[RotorSetting]:
    return [RotorSetting("Beta"), RotorSetting("I"), RotorSetting("II"), RotorSetting("III")]


def _plugboard_slots() -> PairSet:
    plugs = PairSet(EXTENDED_PLUG_COUNT, allow_empty=True)
    for i in range(PLUG_COUNT, EXTENDED_PLUG_COUNT):
        plugs.set_enabled(i, False)
    return plugs


@dataclass(slots=True)
class EngineConfig:
    """Every operator setting of the machine, indexed by SLOW/LEFT/MIDDLE/RIGHT."""

    reflector_choice: str = "Reflector B"
    reconfigurable: bool = False
    reflector_pairs: PairSet = field(default_factory=lambda: PairSet(PAIR_COUNT, allow_empty=False))
    rotors: List[RotorSetting] = field(default_factory=_default_rotors)
    fourth_wheel: bool = False
    extended_plugboard: bool = False
    plugboard: PairSet = field(default_factory=_plugboard_slots)
    use_letters: bool = True
    show: bool = False
    window_position: Tuple[float, float] | None = None

    def set_extended_plugboard(self, state: bool) -> None:
        self.extended_plugboard = state
        for i in range(PLUG_COUNT, EXTENDED_PLUG_COUNT):
            self.plugboard.set_enabled(i, state)

    # ── validation ───────────────────────────────────────────────
    def is_reflector_valid(self) -> bool:
        if self.reconfigurable:
            return self.reflector_pairs.is_valid()
        return is_reflector(self.reflector_choice)

    def is_plugboard_valid(self) -> bool:
        return self.plugboard.is_valid()

    def are_rotors_valid(self) -> bool:
        in_use = POSITIONS if self.fourth_wheel else (LEFT, MIDDLE, RIGHT)
        return all(
            is_wheel(self.rotors[pos].wheel)
            and 0 <= self.rotors[pos].ring < SIZE
            and 0 <= self.rotors[pos].offset < SIZE
            for pos in in_use
        )

    def validate(self) -> bool:
        return self.is_plugboard_valid() and self.is_reflector_valid() and self.are_rotors_valid()


# ────────────────────────────────────────────────────────────────────────
#  1. The machine
# ────────────────────────────────────────────────────────────────────────


class Enigma:
    """One operator session: edit settings, lock them down, press keys."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self.keyboard = Keyboard()
        self.pipeline: SignalPipeline | None = None

    # ── lockdown ─────────────────────────────────────────────────
    @property
    def locked(self) -> bool:
        return self.pipeline is not None

    def is_config_valid(self) -> bool:
        return self.config.validate()

    def lock(self) -> bool:
        """Start translation; refused (False) while the settings are invalid."""
        if not self.is_config_valid():
            debug.log("lockdown", "settings invalid, staying unlocked")
            return False
        self.pipeline = lockdown(self.config)
        self.keyboard.reset()
        return True

    def unlock(self) -> None:
        """Back to editing; the live wheels are thrown away."""
        self.pipeline = None
        self.keyboard.reset()

    def reset(self) -> None:
        """Return every setting to its default value."""
        self._require_unlocked()
        self.config = EngineConfig()

    def _require_unlocked(self) -> None:
        if self.locked:
            raise RuntimeError("Settings are locked; unlock before changing them")

    # ── reflector set-up ─────────────────────────────────────────
    def set_reflector_choice(self, choice: str) -> None:
        self._require_unlocked()
        self.config.reflector_choice = choice

    def get_reflector_choice(self) -> str:
        return self.config.reflector_choice

    def set_reconfigurable(self, state: bool) -> None:
        self._require_unlocked()
        self.config.reconfigurable = state

    def is_reconfigurable(self) -> bool:
        return self.config.reconfigurable

    def set_pair_text(self, index: int, text: str) -> None:
        self._require_unlocked()
        self.config.reflector_pairs.set_text(index, text)

    def get_pair_text(self, index: int) -> str:
        return self.config.reflector_pairs.get_text(index)

    def is_pair_valid(self, index: int) -> bool:
        return self.config.reflector_pairs.is_valid(index)

    def is_reflector_valid(self) -> bool:
        return self.config.is_reflector_valid()

    # ── rotor set-up ─────────────────────────────────────────────
    def set_wheel_choice(self, pos: int, wheel: str) -> None:
        self._require_unlocked()
        self.config.rotors[pos].wheel = wheel

    def get_wheel_choice(self, pos: int) -> str:
        return self.config.rotors[pos].wheel

    def set_ring_setting(self, pos: int, value: int | str) -> None:
        self._require_unlocked()
        self.config.rotors[pos].ring = self._to_index(value)

    def get_ring_setting(self, pos: int) -> int:
        return self.config.rotors[pos].ring

    def set_rotor_offset(self, pos: int, value: int | str) -> None:
        # the start position may be dialled in while locked
        self.config.rotors[pos].offset = self._to_index(value)

    def get_rotor_offset(self, pos: int) -> int:
        return self.config.rotors[pos].offset

    def set_fourth_wheel(self, state: bool) -> None:
        self._require_unlocked()
        self.config.fourth_wheel = state

    def is_fourth_wheel(self) -> bool:
        return self.config.fourth_wheel

    def set_use_letters(self, state: bool) -> None:
        self.config.use_letters = state

    def is_use_letters(self) -> bool:
        return self.config.use_letters

    def set_show(self, state: bool) -> None:
        self.config.show = state

    def is_show(self) -> bool:
        return self.config.show

    def label(self, index: int) -> str:
        """Ring / offset label in the operator's chosen form."""
        return index_to_string(index, self.config.use_letters)

    def window(self) -> str:
        """The letters (or numbers) showing in the wheel windows, left to right."""
        in_use = POSITIONS if self.config.fourth_wheel else (LEFT, MIDDLE, RIGHT)
        return " ".join(self.label(self.config.rotors[pos].offset) for pos in in_use)

    @staticmethod
    def _to_index(value: int | str) -> int:
        if isinstance(value, str):
            return string_to_index(value)
        return value % SIZE

    # ── plugboard ────────────────────────────────────────────────
    def set_plug_text(self, index: int, text: str) -> None:
        self._require_unlocked()
        self.config.plugboard.set_text(index, text)

    def get_plug_text(self, index: int) -> str:
        return self.config.plugboard.get_text(index)

    def is_plug_valid(self, index: int) -> bool:
        return self.config.plugboard.is_valid(index)

    def is_plugboard_valid(self) -> bool:
        return self.config.is_plugboard_valid()

    def set_extended_plugboard(self, state: bool) -> None:
        self._require_unlocked()
        self.config.set_extended_plugboard(state)

    def is_extended_plugboard(self) -> bool:
        return self.config.extended_plugboard

    # ── daily key list ───────────────────────────────────────────
    def apply_preset(self, entry: "KeySheetEntry") -> None:
        """Load the wheels, rings, reflector and plugs of one key sheet day.

        The entry is checked first; a rejected entry leaves the settings alone.
        """
        self._require_unlocked()
        if len(entry.wheels) != 3 or len(entry.rings) != 3:
            raise ValueError(f"Day {entry.day}: need three wheels and three ring settings")
        if len(entry.reflector) != PAIR_COUNT:
            raise ValueError(f"Day {entry.day}: need {PAIR_COUNT} reflector pairs")
        if len(entry.plugboard) > EXTENDED_PLUG_COUNT:
            raise ValueError(f"Day {entry.day}: at most {EXTENDED_PLUG_COUNT} plug pairs")

        for pos, wheel, ring in zip((LEFT, MIDDLE, RIGHT), entry.wheels, entry.rings):
            self.config.rotors[pos].wheel = wheel
            self.config.rotors[pos].ring = ring
        self.config.fourth_wheel = False

        self.config.reconfigurable = True
        self.config.reflector_pairs.set_links(entry.reflector)

        self.config.set_extended_plugboard(len(entry.plugboard) > PLUG_COUNT)
        self.config.plugboard.set_links(entry.plugboard)

    # ── stepping logic ───────────────────────────────────────────
    def _step_rotors(self) -> None:
        """Advance the window positions for one key press.

        The middle wheel's notch is checked before the right wheel's
        turnover; when it is engaged the middle wheel steps again together
        with the left wheel (the double step). The fourth wheel never moves.
        """
        rotors = self.config.rotors
        middle = get_wiring(rotors[MIDDLE].wheel)
        right = get_wiring(rotors[RIGHT].wheel)

        rotors[RIGHT].offset = (rotors[RIGHT].offset + 1) % SIZE

        if middle.is_notch_point(rotors[MIDDLE].offset):
            rotors[MIDDLE].offset = (rotors[MIDDLE].offset + 1) % SIZE
            rotors[LEFT].offset = (rotors[LEFT].offset + 1) % SIZE

        if right.is_turnover_point(rotors[RIGHT].offset):
            rotors[MIDDLE].offset = (rotors[MIDDLE].offset + 1) % SIZE

        debug.log("stepping", f"window {self.window()}")

    def offsets(self) -> Dict[int, int]:
        return {pos: setting.offset for pos, setting in enumerate(self.config.rotors)}

    # ── encipher ─────────────────────────────────────────────────
    def translate(self, index: int) -> int:
        """Step the wheels, then run one index through the locked pipeline."""
        if self.pipeline is None:
            raise RuntimeError("Settings must be locked before translating")
        self._step_rotors()
        self.pipeline.update_offsets(self.offsets())
        return self.pipeline.translate(index, self.config.show)

    def key_down(self, letter: str) -> str | None:
        """Return the lit lamp, or None if unlocked, another key is held or there is no such key."""
        if not self.locked or not is_letter(letter.upper()):
            return None
        index = self.keyboard.press(letter)
        if index is None:
            return None
        return self.keyboard.backward(self.translate(index))

    def key_up(self, letter: str) -> None:
        if self.locked:
            self.keyboard.release(letter)

    def encipher(self, text: str) -> str:
        """Type *text* key by key; characters without a key are dropped."""
        out = []
        for ch in preprocess_message(text):
            lamp = self.key_down(ch)
            self.key_up(ch)
            if lamp is not None:
                out.append(lamp)
        return "".join(out)

    def __repr__(self) -> str:
        state = "locked" if self.locked else "editing"
        return f"<Enigma {state} window={self.window()}>"


__all__ = [
    "EngineConfig",
    "RotorSetting",
    "Enigma",
    "SLOW",
    "LEFT",
    "MIDDLE",
    "RIGHT",
    "PAIR_COUNT",
    "PLUG_COUNT",
    "EXTENDED_PLUG_COUNT",
]
