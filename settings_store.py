# settings_store.py
"""Save and restore an EngineConfig as JSON.

The machine itself never touches the file system; the CLI calls these.
"""
from __future__ import annotations

import json
from pathlib import Path

from enigma import EngineConfig, RotorSetting
from keyboard_and_plugboard import PairSet

DEFAULT_SETTINGS_FILE = Path("enigma_settings.json")

REQUIRED = {"reflector", "reconfigurable", "pairs", "rotors", "fourth_wheel", "plugs"}


def config_to_dict(cfg: EngineConfig) -> dict:
    return {
        "reflector": cfg.reflector_choice,
        "reconfigurable": cfg.reconfigurable,
        "pairs": cfg.reflector_pairs.get_links(),
        "rotors": [
            {"wheel": r.wheel, "ring": r.ring, "offset": r.offset} for r in cfg.rotors
        ],
        "fourth_wheel": cfg.fourth_wheel,
        "extended_plugboard": cfg.extended_plugboard,
        "plugs": cfg.plugboard.get_links(),
        "use_letters": cfg.use_letters,
        "show": cfg.show,
        "window_position": list(cfg.window_position) if cfg.window_position else None,
    }


def config_from_dict(data: dict) -> EngineConfig:
    missing = REQUIRED - data.keys()
    if missing:
        raise ValueError(f"Missing keys in settings: {', '.join(sorted(missing))}")

    for slot, r in enumerate(data["rotors"]):
        if "wheel" not in r:
            raise ValueError(f"Missing keys in settings: rotors[{slot}].wheel")
    rotors = [
        RotorSetting(str(r["wheel"]), int(r.get("ring", 0)), int(r.get("offset", 0)))
        for r in data["rotors"]
    ]
    if len(rotors) != 4:
        raise ValueError("Settings must describe four wheel slots (slow, left, middle, right)")

    position = data.get("window_position")

    cfg = EngineConfig(
        reflector_choice=data["reflector"],
        reconfigurable=bool(data["reconfigurable"]),
        rotors=rotors,
        fourth_wheel=bool(data["fourth_wheel"]),
        use_letters=bool(data.get("use_letters", True)),
        show=bool(data.get("show", False)),
        window_position=tuple(position) if position else None,
    )
    # enable the extra slots before loading plug texts into them
    cfg.set_extended_plugboard(bool(data.get("extended_plugboard", False)))
    _fill(cfg.reflector_pairs, data["pairs"])
    _fill(cfg.plugboard, data["plugs"])
    return cfg


def _fill(pairs: PairSet, texts: list) -> None:
    """Restore pair texts slot by slot, partial entries included."""
    if len(texts) > pairs.size():
        raise ValueError(f"At most {pairs.size()} pairs expected, got {len(texts)}")
    for i, text in enumerate(texts):
        pairs.set_text(i, str(text))


def load_settings(path: str | Path = DEFAULT_SETTINGS_FILE) -> EngineConfig:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return config_from_dict(data)


def save_settings(cfg: EngineConfig, path: str | Path = DEFAULT_SETTINGS_FILE) -> Path:
    path = Path(path)
    path.write_text(json.dumps(config_to_dict(cfg), indent=2), encoding="utf-8")
    return path
