from pathlib import Path
from typing import Union


class PHPCityError(Exception):
    """Base class for errors raised by the extractor and its collaborators."""


class InvalidInputError(PHPCityError):
    """The project directory is missing or cannot be read."""


class ParseFailure(PHPCityError):
    """A single source file could not be turned into a syntax tree."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason


class OutputWriteError(PHPCityError):
    """Writing the JSON output failed."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Failed to write JSON file to '{path}': {reason}")
        self.path = Path(path)
