# rotor_and_reflector.py
from __future__ import annotations

from typing import Sequence

from debug import Debug
from utilities import ALPHABET, SIZE, index_to_letter
from wheel_catalog import RotorWiring

debug = Debug("rotor")

# Signal direction through a wheel. The signal enters from the keyboard on
# the right, travels to the reflector on the left and comes back again.
RIGHT_TO_LEFT = 1
LEFT_TO_RIGHT = 2


class Mapper:
    """A fixed 26-letter substitution (plugboard, reflector or bare wiring).

    ``map`` is the right-to-left direction; ``inverse_map`` is derived once.
    """

    def __init__(self, id: str, wiring: str | Sequence[int]) -> None:
        if isinstance(wiring, str):
            if len(wiring) != SIZE or sorted(wiring) != sorted(ALPHABET):
                raise ValueError(f"{id}: wiring must be a permutation of A–Z")
            table = [ALPHABET.index(c) for c in wiring]
        else:
            table = list(wiring)
            if sorted(table) != list(range(SIZE)):
                raise ValueError(f"{id}: map must be a permutation of 0–25")

        self.id = id
        self.map: tuple[int, ...] = tuple(table)

        inverse = [0] * SIZE
        for i, c in enumerate(self.map):
            inverse[c] = i
        self.inverse_map: tuple[int, ...] = tuple(inverse)

        self.is_involution = all(
            c != i and self.map[c] == i for i, c in enumerate(self.map)
        )

    def swap(self, direction: int, index: int) -> int:
        if direction == RIGHT_TO_LEFT:
            return self.map[index]
        return self.inverse_map[index]

    def describe(self, index: int, output: int) -> str:
        return f"{self.id}({index_to_letter(index)}->{index_to_letter(output)})"

    def cipher(self) -> str:
        return "".join(index_to_letter(i) for i in self.map)

    def __repr__(self) -> str:
        return f"<Mapper {self.id} {self.cipher()} reflect={self.is_involution}>"


class Rotor:
    """A wheel: wiring plus ring setting (fixed per session) and offset.

    The ring setting turns the wiring core against the letter ring, so the
    ring-adjusted maps are recomputed only when it changes. The offset is
    the window position and changes on every key press.
    """

    def __init__(self, wiring: RotorWiring, ring_setting: int = 0) -> None:
        self.wiring = wiring
        self.mapper = Mapper(wiring.id, wiring.cipher)
        self.offset = 0
        self.right_map: list[int] = [0] * SIZE
        self.left_map: list[int] = [0] * SIZE
        self.set_ring_setting(ring_setting)

    @property
    def id(self) -> str:
        return self.wiring.id

    # ── ring & offset ────────────────────────────────────────────
    def set_ring_setting(self, ring: int) -> "Rotor":
        ring %= SIZE
        self.ring_setting = ring

        for i, c in enumerate(self.mapper.map):
            self.right_map[(i + ring) % SIZE] = (c + ring) % SIZE

        for i, c in enumerate(self.right_map):
            self.left_map[c] = i

        debug.log("rotor", f"{self.id} ring={index_to_letter(ring)} right={self._dump(self.right_map)}")
        return self

    def set_offset(self, offset: int) -> None:
        self.offset = offset % SIZE

    # ── notch helpers ────────────────────────────────────────────
    def is_notch_point(self, offset: int) -> bool:
        return self.wiring.is_notch_point(offset)

    def is_turnover_point(self, offset: int) -> bool:
        return self.wiring.is_turnover_point(offset)

    # ── signal path ──────────────────────────────────────────────
    def swap(self, direction: int, index: int) -> int:
        shift = (index + self.offset) % SIZE
        table = self.right_map if direction == RIGHT_TO_LEFT else self.left_map
        return (table[shift] - self.offset) % SIZE

    def describe(self, index: int, output: int) -> str:
        return (
            f"{self.id}[{index_to_letter(self.offset)}]"
            f"({index_to_letter(index)}->{index_to_letter(output)})"
        )

    # ── niceties ─────────────────────────────────────────────────
    @staticmethod
    def _dump(table: Sequence[int]) -> str:
        return "".join(index_to_letter(i) for i in table)

    def __repr__(self) -> str:
        return (
            f"<Rotor {self.id} ring={index_to_letter(self.ring_setting)}"
            f" pos={index_to_letter(self.offset)}>"
        )
