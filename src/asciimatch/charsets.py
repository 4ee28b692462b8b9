import logging
import re
from collections.abc import Callable

from asciimatch.errors import EmptyCharacterSetError, InvalidCharacterSpecError
from asciimatch.matcher import EMPTY_CHARSET_MESSAGE, CharacterBrightnessIndex

logger = logging.getLogger(__name__)

ASCII_PRINTABLE = "".join(chr(i) for i in range(32, 127))

DEFAULT_CHARS = "0123456789"

SPACE_KEYWORD = "space"
ALL_KEYWORD = "all"

_RANGE = re.compile(r"^(.)-(.)\Z")


def parse_spec(spec: str, verb: str = "add") -> str | None:
    """Expand a character spec into the characters it names.

    Accepts a single character, ``space``, an inclusive range ``a-p`` (either
    order) or ``all``. ``all`` returns None, meaning every printable ASCII
    character on add and every active character on remove.
    """
    if len(spec) == 1:
        return spec
    if spec == SPACE_KEYWORD:
        return " "
    if spec == ALL_KEYWORD:
        return None
    match = _RANGE.match(spec)
    if match:
        start, end = sorted(map(ord, match.groups()))
        return "".join(chr(i) for i in range(start, end + 1))
    raise InvalidCharacterSpecError(f"Did not {verb} due to incorrect format.")


class CharacterSet:
    """The active character set and the brightness index built over it."""

    def __init__(self, chars: str = DEFAULT_CHARS, brightness: Callable[[str], float] | None = None):
        self.index = CharacterBrightnessIndex(chars, brightness=brightness)

    @property
    def chars(self) -> list[str]:
        return list(self.index)

    def __len__(self) -> int:
        return len(self.index)

    def add(self, spec: str) -> None:
        chars = parse_spec(spec, "add")
        self.index.update(ASCII_PRINTABLE if chars is None else chars)
        logger.debug("add %r -> %d chars", spec, len(self.index))

    def remove(self, spec: str) -> None:
        chars = parse_spec(spec, "remove")
        if chars is None:
            self.index.clear()
        else:
            for char in chars:
                self.index.remove(char)
        logger.debug("remove %r -> %d chars", spec, len(self.index))

    def validate(self) -> None:
        if not len(self.index):
            raise EmptyCharacterSetError(EMPTY_CHARSET_MESSAGE)

    def __str__(self) -> str:
        return " ".join(self.chars)
