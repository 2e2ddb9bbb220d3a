class IconRenderError(Exception):
    """Base class for every fatal error of an icon render run."""


class InvalidArgumentError(IconRenderError, ValueError):
    """A configuration value is malformed or out of range."""


class MissingRequiredArgumentError(IconRenderError):
    """Input or output path was not supplied."""


class InputReadError(IconRenderError, FileNotFoundError):
    """Source or auxiliary image cannot be read or decoded."""


class BufferAllocationError(IconRenderError):
    """A pixel or mask buffer cannot be created."""


class OutputWriteError(IconRenderError):
    """The encoded icon cannot be written to its destination."""
