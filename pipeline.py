# pipeline.py  ─────────────────────────────────────────────────────
"""Lockdown: turn an EngineConfig into the live mappers and their order.

Everything here is built once when translation starts and is not mutated
afterwards, apart from the rotor offsets pushed in before every key press.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Mapping, Tuple, Union

from debug import Debug
from rotor_and_reflector import LEFT_TO_RIGHT, RIGHT_TO_LEFT, Mapper, Rotor
from utilities import index_to_letter
from wheel_catalog import get_wiring

if TYPE_CHECKING:
    from enigma import EngineConfig

debug = Debug("pipeline")

# Wheel positions, left-most (the optional fourth wheel) first.
OTHER = -1
SLOW = 0
LEFT = 1
MIDDLE = 2
RIGHT = 3
POSITIONS = (SLOW, LEFT, MIDDLE, RIGHT)
POSITION_NAMES = {SLOW: "slow", LEFT: "left", MIDDLE: "middle", RIGHT: "right"}

RECONFIGURABLE_ID = "Reflector D"


# ────────────────────────────────────────────────────────────────────────
#  1. Builders
# ────────────────────────────────────────────────────────────────────────


def build_plugboard(config: "EngineConfig") -> Mapper:
    """Only called once config.plugboard.is_valid() holds."""
    return Mapper("Plugboard", config.plugboard.get_map())


def build_reflector(config: "EngineConfig") -> Mapper:
    if config.reconfigurable:
        mapper = Mapper(RECONFIGURABLE_ID, config.reflector_pairs.get_map())
    else:
        wiring = get_wiring(config.reflector_choice)
        mapper = Mapper(wiring.id, wiring.cipher)

    if not mapper.is_involution:
        raise ValueError(f"{mapper.id}: not a reflector wiring")
    debug.log("reflector", f"{mapper.id} {mapper.cipher()}")
    return mapper


def build_rotors(config: "EngineConfig") -> Dict[int, Rotor]:
    rotors = {}
    for pos in POSITIONS:
        if pos == SLOW and not config.fourth_wheel:
            continue
        setting = config.rotors[pos]
        rotors[pos] = Rotor(get_wiring(setting.wheel), setting.ring)
    return rotors


# ────────────────────────────────────────────────────────────────────────
#  2. Pipeline
# ────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Stage:
    """One pass of the signal through a mapper in a fixed direction.

    *position* says which wheel's offset drives a Rotor stage; plugboard
    and reflector stages carry OTHER.
    """

    position: int
    mapper: Union[Mapper, Rotor]
    direction: int

    def translate(self, index: int) -> int:
        return self.mapper.swap(self.direction, index)


class SignalPipeline:
    def __init__(
        self,
        plugboard: Mapper,
        reflector: Mapper,
        rotors: Mapping[int, Rotor],
    ) -> None:
        self.plugboard = plugboard
        self.reflector = reflector
        self.rotors: Dict[int, Rotor] = dict(rotors)
        self.stages: Tuple[Stage, ...] = self._build_stages()
        self.last_trace: str = ""

    def _build_stages(self) -> Tuple[Stage, ...]:
        inbound = [pos for pos in (RIGHT, MIDDLE, LEFT, SLOW) if pos in self.rotors]

        stages = [Stage(OTHER, self.plugboard, RIGHT_TO_LEFT)]
        stages += [Stage(pos, self.rotors[pos], RIGHT_TO_LEFT) for pos in inbound]
        stages.append(Stage(OTHER, self.reflector, RIGHT_TO_LEFT))
        stages += [Stage(pos, self.rotors[pos], LEFT_TO_RIGHT) for pos in reversed(inbound)]
        stages.append(Stage(OTHER, self.plugboard, LEFT_TO_RIGHT))
        return tuple(stages)

    def update_offsets(self, offsets: Mapping[int, int]) -> None:
        """Push the window positions into the wheels before a key press."""
        for pos, rotor in self.rotors.items():
            rotor.set_offset(offsets[pos])

    def translate(self, index: int, show: bool = False) -> int:
        key = index
        steps = []
        for stage in self.stages:
            output = stage.translate(index)
            if show:
                steps.append(stage.mapper.describe(index, output))
            index = output

        if show:
            self.last_trace = f"Key: {index_to_letter(key)}  " + "  ".join(steps) + f"  Lamp: {index_to_letter(index)}"
            debug.trace(self.last_trace)
        return index

    def maps(self) -> Dict[str, Tuple[int, ...]]:
        """Snapshot of every effective map, keyed by mapper and position."""
        snapshot = {
            "plugboard": self.plugboard.map,
            "reflector": self.reflector.map,
        }
        for pos, rotor in self.rotors.items():
            snapshot[POSITION_NAMES[pos]] = tuple(rotor.right_map)
        return snapshot

    def __repr__(self) -> str:
        order = " ".join(stage.mapper.id for stage in self.stages)
        return f"<SignalPipeline {order}>"


def lockdown(config: "EngineConfig") -> SignalPipeline:
    """Materialize the mappers for a validated configuration."""
    pipeline = SignalPipeline(
        build_plugboard(config),
        build_reflector(config),
        build_rotors(config),
    )
    debug.log("lockdown", repr(pipeline))
    return pipeline
