"""Exception hierarchy for Typeport.

Configuration errors are raised before any output is produced. Runtime errors
are scoped to a single font, artifact, page or exporter.
"""


class TypeportError(Exception):
    """Base exception for all Typeport errors."""

    pass


class ConfigurationError(TypeportError):
    """Invalid caller-supplied configuration."""

    pass


class UnknownFormatError(ConfigurationError):
    """Requested export format is not part of the format vocabulary."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"unknown format: {tag}")


class FontDescriptorError(ConfigurationError):
    """Errors related to host-supplied font descriptors."""

    pass


class MissingFamilyError(FontDescriptorError):
    """Neither family nor full name yields a usable family."""

    def __init__(self) -> None:
        super().__init__("empty family (cannot infer from font.family and font.fullName)")


class MissingReferenceError(FontDescriptorError):
    """Descriptor carries no host font handle."""

    def __init__(self, family: str) -> None:
        self.family = family
        super().__init__(f"Could not find font reference for {family}")


class MissingLoaderError(FontDescriptorError):
    """Descriptor carries no byte accessor."""

    def __init__(self, family: str) -> None:
        self.family = family
        super().__init__(f"Could not find font blob loader for {family}")


class MalformedDescriptorError(FontDescriptorError):
    """Descriptor has an unknown key or a value of the wrong type."""

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class FontLoadError(TypeportError):
    """A font face could not be decoded."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load font '{source}': {reason}")


class DecodeError(TypeportError):
    """Raw bytes could not be decoded into an artifact."""

    def __init__(self, encoding: str, reason: str) -> None:
        self.encoding = encoding
        self.reason = reason
        super().__init__(f"Failed to decode {encoding} artifact: {reason}")


class ColorParseError(TypeportError):
    """Fill color string is not a valid hexadecimal RGB(A) color."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid color '{value}': {reason}")


class UserVisibleError(TypeportError):
    """Error meant to be shown verbatim to the end user."""

    pass


class ExportError(TypeportError):
    """A single exporter failed to produce its output."""

    def __init__(self, exporter: str, reason: str) -> None:
        self.exporter = exporter
        self.reason = reason
        super().__init__(f"Exporter '{exporter}' failed: {reason}")
