# keyboard_and_plugboard.py
from __future__ import annotations

from collections.abc import Iterable

from debug import Debug
from utilities import ALPHABET, SIZE, is_letter, letter_to_index

debug = Debug("keyboard")


# ── Keyboard ──────────────────────────────────────────────────────
class Keyboard:
    """Letter keys and lamps, plus the latch for the key held down.

    A held key has to be released before any key is accepted again, so
    auto-repeat cannot step the wheels more than once per press.
    """

    def __init__(self) -> None:
        self.alpha_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(ALPHABET)
        }
        self.current_key: int | None = None

    # letter → integer signal
    def forward(self, letter: str) -> int:
        try:
            return self.alpha_to_index[letter.upper()]
        except KeyError:
            raise ValueError(f"Invalid character {letter!r}: no such key.")

    # integer signal → lamp letter
    def backward(self, signal: int) -> str:
        if not (0 <= signal < SIZE):
            raise ValueError(f"Signal {signal} out of range 0–{SIZE - 1}")
        return ALPHABET[signal]

    # ── latch ────────────────────────────────────────────────────
    def press(self, letter: str) -> int | None:
        """Return the key index if the press is accepted, else None."""
        if self.current_key is not None:
            debug.log("keyboard", f"{letter} ignored, {ALPHABET[self.current_key]} still held")
            return None
        self.current_key = self.forward(letter)
        return self.current_key

    def release(self, letter: str) -> None:
        """Clear the latch when *letter* is the held key; anything else is ignored."""
        if self.alpha_to_index.get(letter.upper()) == self.current_key:
            self.current_key = None

    def reset(self) -> None:
        self.current_key = None


# ── Pair ──────────────────────────────────────────────────────────
class Pair:
    """The raw text of one plug cable or one reflector connection."""

    def __init__(self, text: str = "") -> None:
        self.letters = ""
        self.enabled = True
        self.set(text)

    def set(self, text: str) -> None:
        self.letters = text.strip().upper()

    def clear(self) -> None:
        self.letters = ""

    def get(self) -> str:
        return self.letters

    def count(self) -> int:
        return len(self.letters) if self.enabled else 0

    def is_empty(self) -> bool:
        return self.count() == 0

    def is_valid(self) -> bool:
        if self.count() != 2:
            return False
        a, b = self.letters
        return is_letter(a) and is_letter(b) and a != b

    def first(self) -> int:
        return letter_to_index(self.letters[0])

    def second(self) -> int:
        return letter_to_index(self.letters[1])

    def __repr__(self) -> str:
        state = "" if self.enabled else " disabled"
        return f"<Pair {self.letters!r}{state}>"


# ── PairSet ───────────────────────────────────────────────────────
class PairSet:
    """A fixed number of Pair slots with letter usage bookkeeping.

    Lenient sets (``allow_empty=True``) model the plugboard: slots may stay
    empty and each letter may be used at most once. Strict sets model the
    reconfigurable reflector: every slot must hold a pair, every used letter
    appears exactly once and exactly 24 letters are used. The two letters
    left over are wired to each other by get_map().
    """

    def __init__(self, size: int, *, allow_empty: bool, links: Iterable[str] = ()) -> None:
        self.allow_empty = allow_empty
        self.pairs: list[Pair] = [Pair() for _ in range(size)]
        self.letter_counts: list[int] = [0] * SIZE
        self.letter_count = 0
        self.multi_use_error = False
        self.set_links(links)

    # ── editing ──────────────────────────────────────────────────
    def set_text(self, index: int, text: str) -> None:
        self.pairs[index].set(text)
        self.count_letter_usage()

    def get_text(self, index: int) -> str:
        return self.pairs[index].get()

    def set_enabled(self, index: int, state: bool) -> None:
        self.pairs[index].enabled = state
        self.count_letter_usage()

    def is_enabled(self, index: int) -> bool:
        return self.pairs[index].enabled

    def size(self) -> int:
        return len(self.pairs)

    def clear(self) -> None:
        for pair in self.pairs:
            pair.clear()
        self.count_letter_usage()

    def get_links(self) -> list[str]:
        return [pair.get() for pair in self.pairs]

    def set_links(self, links: Iterable[str]) -> None:
        """Load pair texts in slot order; anything not two characters long is skipped."""
        for pair in self.pairs:
            pair.clear()
        slots = iter(self.pairs)
        for text in links:
            text = text.strip()
            if len(text) != 2:
                continue
            try:
                next(slots).set(text)
            except StopIteration:
                raise ValueError(f"More than {self.size()} pairs given") from None
        self.count_letter_usage()

    # ── bookkeeping ──────────────────────────────────────────────
    def count_letter_usage(self) -> None:
        """Rescan every slot, rebuilding the per-letter counts."""
        self.letter_counts = [0] * SIZE
        self.multi_use_error = False

        for pair in self.pairs:
            if pair.is_empty():
                continue
            for ch in pair.get():
                if is_letter(ch):
                    self.letter_counts[letter_to_index(ch)] += 1

        self.letter_count = sum(1 for n in self.letter_counts if n)
        self.multi_use_error = any(n > 1 for n in self.letter_counts)
        debug.log("plugboard", f"{self.letter_count} letters used, multi-use={self.multi_use_error}")

    def unused_letters(self) -> list[int]:
        return [i for i, n in enumerate(self.letter_counts) if n == 0]

    # ── validation ───────────────────────────────────────────────
    def is_pair_valid(self, index: int) -> bool:
        pair = self.pairs[index]

        if self.allow_empty and pair.is_empty():
            return True

        if not pair.is_valid():
            return False

        ends = (self.letter_counts[pair.first()], self.letter_counts[pair.second()])
        if self.allow_empty:
            return all(n <= 1 for n in ends)
        return all(n == 1 for n in ends)

    def is_valid(self, index: int | None = None) -> bool:
        """Validity of one slot, or of the whole set when *index* is None."""
        if index is not None:
            return self.is_pair_valid(index)

        if self.multi_use_error:
            return False

        if self.allow_empty:
            return all(pair.is_empty() or pair.is_valid() for pair in self.pairs)

        # exactly one unconfigured pair left over
        if self.letter_count != SIZE - 2:
            return False
        return all(pair.is_valid() for pair in self.pairs)

    # ── mapping ──────────────────────────────────────────────────
    def get_map(self) -> list[int]:
        """Only meaningful when is_valid() is True."""
        table = list(range(SIZE))

        for pair in self.pairs:
            if pair.is_empty():
                continue
            a, b = pair.first(), pair.second()
            table[a], table[b] = b, a

        if not self.allow_empty:
            # wire up the unconfigured pair
            spare = self.unused_letters()
            if len(spare) >= 2:
                x, y = spare[0], spare[1]
                table[x], table[y] = y, x

        return table

    def __repr__(self) -> str:
        links = " ".join(p.get() for p in self.pairs if not p.is_empty())
        return f"<PairSet {links}>"
