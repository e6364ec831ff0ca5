class CavesError(Exception):
    """Base exception for the caves dungeon generator."""


class InvalidMapKey(CavesError, ValueError):
    """Raised when a map key string cannot be parsed."""


class InvalidLength(InvalidMapKey):
    """Raised when a map key decodes to the wrong number of seed bytes."""


class DecodeError(InvalidMapKey):
    """Raised when a map key is not valid url-safe, unpadded base64."""


class ConfigError(CavesError, ValueError):
    """Raised when generation settings fail validation."""


class UnsatisfiableConfig(CavesError):
    """Raised when every batch attempt ran out of attempts for a configuration.

    This almost always means the settings ask for more than the grid can hold
    (e.g. too many rooms for too small a map).
    """

    def __init__(self, key: object, batches: int) -> None:
        super().__init__(
            f"Never succeeded in generating a map with key `{key}` after {batches} attempts; "
            "the generation settings are most likely unsatisfiable"
        )
        self.key = key
        self.batches = batches


class GeneratorBug(CavesError, RuntimeError):
    """Raised when an internal invariant of the generator is violated."""


class LevelOutOfRange(CavesError, IndexError):
    """Raised when moving the level cursor past the first or last level."""
