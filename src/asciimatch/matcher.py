import bisect
import logging
from collections.abc import Callable, Iterable, Iterator

from asciimatch.errors import EmptyCharacterSetError
from asciimatch.glyphs import glyph_brightness

logger = logging.getLogger(__name__)

EMPTY_CHARSET_MESSAGE = "Did not execute. Charset is empty."


class CharacterBrightnessIndex:
    """Dynamic set of characters searchable by normalized brightness.

    Raw glyph brightness is the source of truth. The ordered index holds the
    same characters keyed by ``(raw - min_raw) / (max_raw - min_raw)``, with
    characters sharing a key kept sorted by code point. Any change to the
    extremes rebuilds the ordered index from the raw values.
    """

    def __init__(self, chars: Iterable[str] = (), brightness: Callable[[str], float] | None = None):
        self._brightness = brightness if brightness is not None else glyph_brightness
        self._raw: dict[str, float] = {}
        self._min: float | None = None
        self._max: float | None = None
        self._keys: list[float] = []
        self._buckets: dict[float, list[str]] = {}
        self.update(chars)

    @property
    def min_raw(self) -> float | None:
        return self._min

    @property
    def max_raw(self) -> float | None:
        return self._max

    @property
    def buckets(self) -> dict[float, tuple[str, ...]]:
        """Ordered view of the normalized index: key -> characters, both ascending."""
        return {key: tuple(self._buckets[key]) for key in self._keys}

    def raw_brightness(self, char: str) -> float:
        return self._raw[char]

    def normalized(self, char: str) -> float:
        return self._normalize(self._raw[char])

    def __contains__(self, char: object) -> bool:
        return char in self._raw

    def __len__(self) -> int:
        return len(self._raw)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._raw))

    def add(self, char: str) -> None:
        if char in self._raw:
            return
        value = self._measure(char)
        self._raw[char] = value
        if self._min is None or value < self._min or value > self._max:
            self._min = value if self._min is None else min(self._min, value)
            self._max = value if self._max is None else max(self._max, value)
            self._rebuild()
        else:
            self._insert(char, value)

    def update(self, chars: Iterable[str]) -> None:
        """Add many characters, rebuilding the ordered index at most once."""
        new: dict[str, float] = {}
        for char in chars:
            if char not in self._raw and char not in new:
                new[char] = self._measure(char)
        if not new:
            return

        low = min(new.values())
        high = max(new.values())
        self._raw.update(new)
        if self._min is None or low < self._min or high > self._max:
            self._min = low if self._min is None else min(self._min, low)
            self._max = high if self._max is None else max(self._max, high)
            self._rebuild()
        else:
            for char, value in new.items():
                self._insert(char, value)

    def remove(self, char: str) -> None:
        if char not in self._raw:
            return
        value = self._raw.pop(char)
        if not self._raw:
            self.clear()
            return

        # Extremes come from the remaining raw values, never from stale normalized keys
        if value in (self._min, self._max) and value not in self._raw.values():
            self._min = min(self._raw.values())
            self._max = max(self._raw.values())
            self._rebuild()
        else:
            self._discard(char, value)

    def clear(self) -> None:
        self._raw.clear()
        self._keys.clear()
        self._buckets.clear()
        self._min = None
        self._max = None

    def query(self, target: float) -> str:
        """Character whose normalized brightness is nearest to ``target``.

        Equidistant neighbours are resolved toward the bucket holding the
        smaller code point; within a bucket the smallest code point wins.
        """
        if not self._keys:
            raise EmptyCharacterSetError(EMPTY_CHARSET_MESSAGE)

        i = bisect.bisect_left(self._keys, target)
        if i < len(self._keys) and self._keys[i] == target:
            return self._buckets[self._keys[i]][0]

        lower = self._keys[i - 1] if i > 0 else None
        upper = self._keys[i] if i < len(self._keys) else None
        if lower is None:
            key = upper
        elif upper is None:
            key = lower
        else:
            to_lower = abs(target - lower)
            to_upper = abs(target - upper)
            if to_lower < to_upper:
                key = lower
            elif to_upper < to_lower:
                key = upper
            else:
                key = lower if self._buckets[lower][0] < self._buckets[upper][0] else upper
        return self._buckets[key][0]

    def _measure(self, char: str) -> float:
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}")
        return self._brightness(char)

    def _normalize(self, value: float) -> float:
        if self._max == self._min:
            return 0.0
        return (value - self._min) / (self._max - self._min)

    def _insert(self, char: str, value: float) -> None:
        key = self._normalize(value)
        bucket = self._buckets.get(key)
        if bucket is None:
            bisect.insort(self._keys, key)
            self._buckets[key] = [char]
        else:
            bisect.insort(bucket, char)

    def _discard(self, char: str, value: float) -> None:
        key = self._normalize(value)
        bucket = self._buckets[key]
        bucket.remove(char)
        if not bucket:
            del self._buckets[key]
            del self._keys[bisect.bisect_left(self._keys, key)]

    def _rebuild(self) -> None:
        buckets: dict[float, list[str]] = {}
        for char, value in self._raw.items():
            buckets.setdefault(self._normalize(value), []).append(char)
        for bucket in buckets.values():
            bucket.sort()
        self._buckets = buckets
        self._keys = sorted(buckets)
        logger.debug(
            "Rebuilt brightness index: %d chars, %d keys, raw range [%s, %s]",
            len(self._raw),
            len(self._keys),
            self._min,
            self._max,
        )
