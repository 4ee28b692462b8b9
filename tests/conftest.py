import shutil
import subprocess

import pytest

from asciimatch.charsets import CharacterSet
from asciimatch.matcher import CharacterBrightnessIndex

_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu-sans-mono-fonts/DejaVuSansMono.ttf",
]


def _find_monospace_font():
    """Find a monospace font on the system."""
    for path in _FONT_CANDIDATES:
        if shutil.os.path.exists(path):
            return path
    result = shutil.which("fc-match")
    if result:
        out = subprocess.run(["fc-match", "-f", "%{file}", "monospace"], capture_output=True, text=True)
        if out.returncode == 0 and out.stdout.strip():
            return out.stdout.strip()
    return None


FONT_PATH = _find_monospace_font()
needs_font = pytest.mark.skipif(FONT_PATH is None, reason="No monospace font found on system")


class FakeGlyphs:
    """Brightness lookup with known values that records which characters were measured."""

    def __init__(self, values):
        self.values = dict(values)
        self.calls = []

    def __call__(self, char):
        self.calls.append(char)
        return self.values[char]


@pytest.fixture
def glyphs():
    # Brightness rises with code point, so ranges produce predictable extremes
    return FakeGlyphs({chr(i): (i - 32) / 100.0 for i in range(32, 127)})


@pytest.fixture
def make_index(glyphs):
    def _make(chars="", values=None):
        brightness = FakeGlyphs(values) if values is not None else glyphs
        return CharacterBrightnessIndex(chars, brightness=brightness)

    return _make


@pytest.fixture
def make_charset(glyphs):
    def _make(chars="0123456789"):
        return CharacterSet(chars, brightness=glyphs)

    return _make
