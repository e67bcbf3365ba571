"""Exception classes for ZTGFX decoding."""


class ZtGfxError(Exception):
    """Base exception for ZTGFX errors."""

    pass


class FormatError(ZtGfxError):
    """Raised when a container or palette stream is malformed."""

    pass


class TruncatedError(FormatError):
    """Raised when the stream ends before a required field is complete."""

    def __init__(self, message: str, offset: int | None = None):
        super().__init__(message)
        self.offset = offset


class InvalidLengthError(FormatError):
    """Raised when a length or count field declares a negative size."""

    def __init__(self, field: str, value: int):
        super().__init__(f"Invalid {field}: {value}")
        self.field = field
        self.value = value


class PaletteError(ZtGfxError):
    """Base exception for palette resolution errors."""

    pass


class PaletteNotFoundError(PaletteError):
    """Raised when the palette file referenced by a container cannot be opened."""

    def __init__(self, path):
        super().__init__(f"Palette file not found: {path}")
        self.path = path


class PaletteIndexError(PaletteError):
    """Raised when a pixel run references an index outside the palette."""

    def __init__(self, index: int, color_count: int):
        super().__init__(
            f"Palette index {index} out of range for palette with {color_count} colors"
        )
        self.index = index
        self.color_count = color_count


class UnrecognizedFileError(ZtGfxError):
    """User-facing load failure wrapping the specific cause."""

    def __init__(self, cause: ZtGfxError):
        super().__init__("The file format is not recognized or is corrupt.")
        self.cause = cause


class DecodeCancelledError(Exception):
    """Raised when the host aborts a decode in progress."""

    pass
