from enum import StrEnum


class LatheMeshError(Exception):
    """Base class for conversion failures reported to the user."""


class FileOpenFailure(LatheMeshError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot open {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseStage(StrEnum):
    DISKS = "disks"
    BODY = "body"
    DISK_INFO = "disk_info"


class ParseFailure(LatheMeshError):
    """A structural recognizer could not consume its section of the token list.

    ``line`` is the 1-based token position at which the stage gave up.
    """

    def __init__(self, stage: ParseStage, line: int) -> None:
        super().__init__(f"Parse failure: {stage} (line {line})")
        self.stage = stage
        self.line = line


class BodyCycleError(RuntimeError):
    """A body-segment row was reached twice while rebuilding the tree."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Cycle detected in body at segment {index}")
        self.index = index


class ConfigError(LatheMeshError):
    def __init__(self, variable: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid {variable}={value!r}: {reason}")
        self.variable = variable
        self.value = value
