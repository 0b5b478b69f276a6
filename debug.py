# debug.py
from __future__ import annotations
import logging
from typing import Dict, Iterable

COMPONENTS = (
    "keyboard",
    "plugboard",
    "reflector",
    "rotor",
    "stepping",
    "pipeline",
    "lockdown",
)


def configure_logging(*, level: int = logging.INFO, log_to: str | None = None) -> None:
    """Configure the root handlers once; later calls only adjust the level."""
    if Debug._root_configured:
        logging.getLogger("ENIGMA").setLevel(level)
        return

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_to:
        handlers.append(logging.FileHandler(log_to, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )
    logging.getLogger("ENIGMA").setLevel(level)
    Debug._root_configured = True


class Debug:
    """Component-switchable debug output.

    Switches are shared by every instance, so a module-level ``debug`` in
    rotor_and_reflector.py can be turned on from the command line without
    holding a reference to it.
    """

    _root_configured: bool = False          # class-level guard
    _switches: Dict[str, bool] = {name: False for name in COMPONENTS}
    enabled: bool = True                    # global switch

    def __init__(self, component: str | None = None) -> None:
        if component is not None:
            self._require(component)
        self.component = component
        self.logger = logging.getLogger("ENIGMA")

    # ── logging API ──────────────────────────────────────────────
    def is_enabled(self, component: str | None = None) -> bool:
        name = component or self.component
        return Debug.enabled and Debug._switches.get(name, False)

    def log(self, component: str, message: str) -> None:
        if self.is_enabled(component):
            self.logger.getChild(component).debug(message)

    def trace(self, message: str) -> None:
        """Signal path trace requested by the operator ("show" setting)."""
        self.logger.getChild("trace").info(message)

    # ── component toggles ────────────────────────────────────────
    @classmethod
    def enable(cls, *components: str) -> None:
        for c in components:
            cls._require(c)
            cls._switches[c] = True

    @classmethod
    def disable(cls, *components: str) -> None:
        for c in components:
            cls._require(c)
            cls._switches[c] = False

    @classmethod
    def toggle(cls, component: str) -> None:
        cls._require(component)
        cls._switches[component] = not cls._switches[component]

    @classmethod
    def toggle_global(cls, state: bool) -> None:
        """Switch every component on/off at once."""
        cls.enabled = state

    @classmethod
    def apply(cls, components: Iterable[str]) -> None:
        """Enable exactly *components*; "all" enables everything."""
        wanted = set(components)
        if "all" in wanted:
            wanted = set(COMPONENTS)
        for c in wanted:
            cls._require(c)
        for c in COMPONENTS:
            cls._switches[c] = c in wanted

    @classmethod
    def status(cls) -> Dict[str, bool]:
        """Return a *copy* of the current component map."""
        return cls._switches.copy()

    # ── helpers ──────────────────────────────────────────────────
    @staticmethod
    def _require(component: str) -> None:
        if component not in COMPONENTS:
            raise ValueError(f"No such component: {component!r}")

    def __repr__(self) -> str:
        active = [k for k, v in Debug._switches.items() if v]
        return f"<Debug component={self.component} enabled={Debug.enabled} active={active}>"
