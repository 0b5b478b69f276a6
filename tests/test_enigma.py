"""Tests for stepping, lockdown and key-by-key translation"""

import logging

import pytest

from enigma import LEFT, MIDDLE, RIGHT, SLOW, Enigma, EngineConfig
from key_sheet import KeySheetEntry
from utilities import letter_to_index as idx

B_PAIRS = ["AY", "BR", "CU", "DH", "EQ", "FS", "GL", "IP", "JX", "KN", "MO", "TZ"]


@pytest.fixture
def machine():
    """Enigma I: wheels I II III, reflector B, rings and windows at A"""
    return Enigma()


def set_window(machine, left, middle, right):
    machine.set_rotor_offset(LEFT, left)
    machine.set_rotor_offset(MIDDLE, middle)
    machine.set_rotor_offset(RIGHT, right)


class TestKnownAnswers:
    """Test against published Enigma I results"""

    def test_aaaaa_rings_aaa(self, machine):
        """AAAAA enciphers to BDZGO from window AAA with rings AAA"""
        assert machine.lock()
        assert machine.encipher("AAAAA") == "BDZGO"

    def test_aaaaa_rings_bbb(self, machine):
        """AAAAA enciphers to EWTYX from window AAA with rings BBB"""
        for pos in (LEFT, MIDDLE, RIGHT):
            machine.set_ring_setting(pos, "B")
        assert machine.lock()
        assert machine.encipher("AAAAA") == "EWTYX"

    def test_ring_settings_as_numbers(self, machine):
        """Ring settings may be given as 1-26 labels"""
        for pos in (LEFT, MIDDLE, RIGHT):
            machine.set_ring_setting(pos, "2")
        assert machine.lock()
        assert machine.encipher("AAAAA") == "EWTYX"

    def test_reciprocal(self, machine):
        """Enciphering the ciphertext from the same start gives the plaintext"""
        assert machine.lock()
        assert machine.encipher("BDZGO") == "AAAAA"

    def test_m4_thin_reflector_matches_three_wheel(self, machine):
        """Beta at A with the thin B reflector behaves like reflector B"""
        machine.set_fourth_wheel(True)
        machine.set_reflector_choice("Reflector B Thin")
        assert machine.lock()
        assert machine.encipher("AAAAA") == "BDZGO"

    def test_reconfigurable_reflector(self, machine):
        """Reflector B rebuilt from 12 connections gives the same result"""
        machine.set_reconfigurable(True)
        for i, text in enumerate(B_PAIRS):
            machine.set_pair_text(i, text)
        assert machine.is_reflector_valid()
        assert machine.lock()
        assert machine.encipher("AAAAA") == "BDZGO"


class TestStepping:
    """Test the odometer and the double step"""

    def test_right_wheel_always_steps(self, machine):
        """Each key press moves the right wheel once"""
        machine.lock()
        machine.encipher("AAAAA")
        assert machine.window() == "A A F"

    def test_double_step_sequence(self, machine):
        """ADU -> ADV -> AEW -> BFX"""
        set_window(machine, "A", "D", "U")
        machine.lock()
        windows = []
        for _ in range(3):
            machine.key_down("A")
            machine.key_up("A")
            windows.append(machine.window())
        assert windows == ["A D V", "A E W", "B F X"]

    def test_double_step_offsets(self, machine):
        """Two presses before the notch move middle by 2, left by 1, right by 2"""
        set_window(machine, "A", "D", "V")
        machine.lock()
        machine.encipher("AA")
        assert machine.get_rotor_offset(LEFT) == idx("B")
        assert machine.get_rotor_offset(MIDDLE) == idx("F")
        assert machine.get_rotor_offset(RIGHT) == idx("X")

    def test_right_wheel_wraps(self, machine):
        """Z rolls over to A"""
        set_window(machine, "A", "A", "Z")
        machine.lock()
        machine.encipher("A")
        assert machine.get_rotor_offset(RIGHT) == 0

    def test_fourth_wheel_never_steps(self, machine):
        """The slow wheel stays put even when the left wheel moves"""
        machine.set_fourth_wheel(True)
        machine.set_reflector_choice("Reflector B Thin")
        machine.set_rotor_offset(SLOW, "C")
        set_window(machine, "A", "D", "U")
        machine.lock()
        machine.encipher("A" * 30)
        assert machine.get_rotor_offset(SLOW) == idx("C")
        assert machine.window().startswith("C ")


class TestLockdown:
    """Test the editing / translating mode switch"""

    def test_invalid_plugboard_refused(self, machine):
        """An invalid plugboard keeps the machine unlocked"""
        machine.set_plug_text(0, "AB")
        machine.set_plug_text(1, "BC")
        assert not machine.is_plugboard_valid()
        assert machine.lock() is False
        assert not machine.locked
        assert machine.key_down("A") is None

    def test_invalid_reflector_refused(self, machine):
        """An incomplete reconfigurable reflector keeps the machine unlocked"""
        machine.set_reconfigurable(True)
        machine.set_pair_text(0, "AB")
        assert machine.lock() is False

    def test_unknown_wheel_refused(self, machine):
        """A wheel name missing from the catalog is invalid"""
        machine.set_wheel_choice(LEFT, "IX")
        assert machine.lock() is False

    def test_reflector_as_wheel_refused(self, machine):
        """A reflector cannot be selected as a wheel"""
        machine.set_wheel_choice(MIDDLE, "Reflector B")
        assert machine.lock() is False

    def test_unused_slow_wheel_not_checked(self, machine):
        """The slow slot only matters with the fourth wheel enabled"""
        machine.set_wheel_choice(SLOW, "nonsense")
        assert machine.lock() is True

    def test_settings_frozen_while_locked(self, machine):
        """Selections cannot change during translation"""
        machine.lock()
        with pytest.raises(RuntimeError):
            machine.set_wheel_choice(LEFT, "IV")
        with pytest.raises(RuntimeError):
            machine.set_plug_text(0, "AB")
        with pytest.raises(RuntimeError):
            machine.set_ring_setting(LEFT, 3)
        with pytest.raises(RuntimeError):
            machine.reset()

    def test_unlock_discards_pipeline(self, machine):
        """Unlocking throws the live wheels away"""
        machine.lock()
        machine.unlock()
        assert machine.pipeline is None
        machine.set_wheel_choice(LEFT, "IV")
        assert machine.get_wheel_choice(LEFT) == "IV"

    def test_relock_is_idempotent(self, machine):
        """Locking again without edits rebuilds identical maps"""
        machine.set_plug_text(0, "QW")
        for pos in (LEFT, MIDDLE, RIGHT):
            machine.set_ring_setting(pos, 7)
        machine.lock()
        first = machine.pipeline.maps()
        machine.lock()
        assert machine.pipeline.maps() == first
        machine.unlock()
        machine.lock()
        assert machine.pipeline.maps() == first

    def test_translate_requires_lock(self, machine):
        """translate() outside lockdown is a programming error"""
        with pytest.raises(RuntimeError):
            machine.translate(0)

    def test_reset(self, machine):
        """reset() restores the defaults"""
        machine.set_wheel_choice(LEFT, "V")
        machine.set_show(True)
        machine.reset()
        assert machine.get_wheel_choice(LEFT) == "I"
        assert machine.get_reflector_choice() == EngineConfig().reflector_choice
        assert machine.is_show() is False


class TestKeyEvents:
    """Test key down / key up handling"""

    def test_key_down_lights_lamp(self, machine):
        """A press returns the lamp letter"""
        machine.lock()
        assert machine.key_down("a") == "B"

    def test_held_key_blocks_repeat(self, machine):
        """Auto-repeat of a held key does not step the wheels"""
        machine.lock()
        machine.key_down("A")
        assert machine.key_down("A") is None
        assert machine.key_down("B") is None
        assert machine.window() == "A A B"

    def test_release_other_key_keeps_latch(self, machine):
        """Only releasing the held key frees the keyboard"""
        machine.lock()
        machine.key_down("A")
        machine.key_up("B")
        assert machine.key_down("C") is None
        machine.key_up("A")
        assert machine.key_down("A") == "D"

    def test_key_up_without_key_ignored(self, machine):
        """Releasing a character the keyboard has no key for does nothing"""
        machine.lock()
        machine.key_down("A")
        machine.key_up("1")
        assert machine.key_down("B") is None
        machine.key_up("A")
        machine.key_up("?")
        assert machine.key_down("A") == "D"

    def test_key_down_without_key_ignored(self, machine):
        """A character with no key lights nothing and leaves the wheels"""
        machine.lock()
        assert machine.key_down("7") is None
        assert machine.window() == "A A A"
        assert machine.key_down("A") == "B"

    def test_key_down_ignored_when_unlocked(self, machine):
        """Keys do nothing while settings are being edited"""
        assert machine.key_down("A") is None
        assert machine.window() == "A A A"

    def test_encipher_drops_non_letters(self, machine):
        """Spaces, digits and punctuation have no key"""
        machine.lock()
        assert machine.encipher("a a, 1a!") == "BDZ"


class TestPlugboard:
    """Test the plugboard inside the machine"""

    def test_plugboard_reciprocal(self, machine):
        """With cables fitted the machine still deciphers its own output"""
        for i, text in enumerate(["AV", "BS", "CG", "DL", "FU", "HZ", "IN", "KM", "OW", "RX"]):
            machine.set_plug_text(i, text)
        machine.lock()
        cipher = machine.encipher("WETTERVORHERSAGEBISKAYA")
        machine.unlock()
        set_window(machine, "A", "A", "A")
        machine.lock()
        assert machine.encipher(cipher) == "WETTERVORHERSAGEBISKAYA"

    def test_no_letter_maps_to_itself(self, machine):
        """The reflector guarantees a letter never enciphers to itself"""
        machine.set_plug_text(0, "AZ")
        machine.lock()
        plain = "ABCDEFGHIJKLMNOPQRSTUVWXYZ" * 3
        cipher = machine.encipher(plain)
        assert all(p != c for p, c in zip(plain, cipher))

    def test_extended_plugboard(self, machine):
        """Slots 11-13 only count in extended mode"""
        machine.set_plug_text(10, "AB")
        machine.set_plug_text(11, "AC")
        assert machine.is_plugboard_valid()
        machine.set_extended_plugboard(True)
        assert not machine.is_plugboard_valid()
        machine.set_plug_text(11, "DC")
        assert machine.is_plugboard_valid()
        machine.lock()
        assert machine.pipeline.plugboard.map[idx("A")] == idx("B")


class TestTrace:
    """Test the diagnostic signal trace"""

    def test_trace_line(self, machine):
        """Each stage reports its id, window and letters"""
        machine.set_show(True)
        machine.lock()
        machine.key_down("A")
        trace = machine.pipeline.last_trace
        assert trace.startswith("Key: A  Plugboard(A->A)  III[B](A->")
        assert "Reflector B(" in trace
        assert trace.endswith("Lamp: B")

    def test_trace_logged(self, machine, caplog):
        """The trace goes to the ENIGMA logger"""
        caplog.set_level(logging.INFO, logger="ENIGMA")
        machine.set_show(True)
        machine.lock()
        machine.key_down("A")
        assert any(r.name == "ENIGMA.trace" and "Lamp: B" in r.getMessage() for r in caplog.records)

    def test_no_trace_by_default(self, machine):
        """Without show the trace is not built"""
        machine.lock()
        machine.key_down("A")
        assert machine.pipeline.last_trace == ""

    def test_trace_does_not_change_result(self, machine):
        """Show is purely observational"""
        machine.set_show(True)
        machine.lock()
        assert machine.encipher("AAAAA") == "BDZGO"


class TestPreset:
    """Test loading a key sheet day"""

    ENTRY = KeySheetEntry(
        day=31,
        wheels=("I", "V", "III"),
        rings=(13, 8, 23),
        reflector=("AD", "CN", "ET", "FL", "GI", "JV", "KZ", "PU", "QY", "WX", "RB", "MH"),
        plugboard=("SZ", "GT", "DV", "KU", "FO", "MY", "EW", "JN", "IX", "LQ"),
        indicators="wny dgy ncd rzf",
    )

    def test_apply_preset(self, machine):
        """Wheels, rings, reflector and plugs all come from the entry"""
        machine.set_fourth_wheel(True)
        machine.apply_preset(self.ENTRY)
        assert [machine.get_wheel_choice(p) for p in (LEFT, MIDDLE, RIGHT)] == ["I", "V", "III"]
        assert [machine.get_ring_setting(p) for p in (LEFT, MIDDLE, RIGHT)] == [13, 8, 23]
        assert machine.is_reconfigurable()
        assert not machine.is_fourth_wheel()
        assert machine.get_plug_text(0) == "SZ"
        assert machine.is_config_valid()

    def test_preset_reflector_spare_pair(self, machine):
        """The letters missing from the sheet (O and S) are wired together"""
        machine.apply_preset(self.ENTRY)
        assert machine.lock()
        assert machine.pipeline.reflector.map[idx("O")] == idx("S")
        assert machine.pipeline.reflector.is_involution

    def test_preset_replaces_old_plugs(self, machine):
        """Cables from before the preset are removed"""
        machine.set_plug_text(12, "AB")
        machine.set_extended_plugboard(True)
        machine.apply_preset(self.ENTRY)
        assert not machine.is_extended_plugboard()
        assert machine.config.plugboard.get_links()[10:] == ["", "", ""]

    def test_preset_refused_while_locked(self, machine):
        """Presets are settings too"""
        machine.lock()
        with pytest.raises(RuntimeError):
            machine.apply_preset(self.ENTRY)

    def test_bad_preset_leaves_settings_alone(self, machine):
        """An entry with too many plug pairs is refused before anything changes"""
        machine.set_plug_text(0, "QW")
        plugs = tuple(a + b for a, b in zip("ACEGIKMOQSUWY", "BDFHJLNPRTVXZ")) + ("AZ",)
        entry = KeySheetEntry(
            day=1,
            wheels=("IV", "V", "III"),
            rings=(0, 0, 0),
            reflector=self.ENTRY.reflector,
            plugboard=plugs,
        )
        with pytest.raises(ValueError):
            machine.apply_preset(entry)
        assert machine.get_wheel_choice(LEFT) == "I"
        assert not machine.is_reconfigurable()
        assert not machine.is_extended_plugboard()
        assert machine.get_plug_text(0) == "QW"

    def test_short_reflector_preset_refused(self, machine):
        """Eleven reflector pairs are not a reflector"""
        entry = KeySheetEntry(
            day=1,
            wheels=("IV", "V", "III"),
            rings=(0, 0, 0),
            reflector=self.ENTRY.reflector[:11],
            plugboard=(),
        )
        with pytest.raises(ValueError):
            machine.apply_preset(entry)
        assert machine.get_wheel_choice(LEFT) == "I"
