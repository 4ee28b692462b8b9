import argparse
import logging
import sys
from pathlib import Path

from asciimatch.charsets import DEFAULT_CHARS, CharacterSet
from asciimatch.converter import image_to_ascii
from asciimatch.errors import AsciiMatchError
from asciimatch.glyphs import GlyphRasterizer
from asciimatch.session import DEFAULT_RESOLUTION, ImageSession


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render an image as ASCII art by glyph brightness")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument(
        "-r",
        "--resolution",
        type=int,
        default=None,
        help=f"Characters per row, a power of two (default: {DEFAULT_RESOLUTION} or the image width if smaller)",
    )
    parser.add_argument(
        "-a",
        "--add",
        action="append",
        default=[],
        metavar="SPEC",
        help="Add characters: a single char, 'space', a range like 'a-z', or 'all'. Repeatable.",
    )
    parser.add_argument(
        "-x",
        "--remove",
        action="append",
        default=[],
        metavar="SPEC",
        help="Remove characters, same forms as --add. Applied after --add.",
    )
    parser.add_argument(
        "--font", default=None, help="TrueType font used to measure glyph brightness (default: Pillow built-in)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        sys.exit(1)

    try:
        rasterizer = GlyphRasterizer(args.font) if args.font else None
    except OSError as e:
        print(f"Cannot load font {args.font}: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        charset = CharacterSet(DEFAULT_CHARS, brightness=rasterizer)
        for spec in args.add:
            charset.add(spec)
        for spec in args.remove:
            charset.remove(spec)
        session = ImageSession.open(image_path)
        if args.resolution is not None:
            session.set_resolution(args.resolution)
        print(image_to_ascii(session, charset))
    except AsciiMatchError as e:
        print(e, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
