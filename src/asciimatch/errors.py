class AsciiMatchError(Exception):
    """Recoverable, user-facing failure. State is left unchanged when raised."""


class EmptyCharacterSetError(AsciiMatchError):
    pass


class ResolutionOutOfBoundsError(AsciiMatchError):
    pass


class ImageLoadError(AsciiMatchError):
    pass


class InvalidCharacterSpecError(AsciiMatchError):
    pass
