from __future__ import annotations

import base64
import binascii
import random
import re
import secrets

from ..exceptions import DecodeError, InvalidLength

SEED_SIZE = 32

_URLSAFE_ALPHABET = re.compile(r"^[A-Za-z0-9_-]*$")


class MapKey:
    """The seed that reproduces an entire dungeon.

    Printed as url-safe base64 without padding (43 characters), which makes it
    suitable for save files or for sharing a layout with someone else.
    """

    __slots__ = ("_seed",)

    def __init__(self, seed: bytes) -> None:
        if len(seed) != SEED_SIZE:
            raise InvalidLength(f"map key must be {SEED_SIZE} bytes, got {len(seed)}")
        self._seed = bytes(seed)

    @classmethod
    def random(cls) -> "MapKey":
        return cls(secrets.token_bytes(SEED_SIZE))

    @classmethod
    def parse(cls, text: str) -> "MapKey":
        """Parse a printed key.

        Raises DecodeError for anything that is not the canonical unpadded
        url-safe base64 spelling of a seed, and InvalidLength when the decoded
        seed has the wrong size.
        """
        text = text.strip()
        if not _URLSAFE_ALPHABET.match(text):
            raise DecodeError(f"invalid map key {text!r}: expected unpadded url-safe base64")
        if len(text) % 4 == 1:
            raise DecodeError(f"invalid map key {text!r}: impossible base64 length {len(text)}")
        padded = text + "=" * (-len(text) % 4)
        try:
            seed = base64.b64decode(padded, altchars=b"-_", validate=True)
        except binascii.Error as e:
            raise DecodeError(f"invalid map key {text!r}: {e}") from e
        if len(seed) != SEED_SIZE:
            raise InvalidLength(f"map key must decode to {SEED_SIZE} bytes, got {len(seed)}")
        key = cls(seed)
        # Unused low bits of the last character must be zero
        if str(key) != text:
            raise DecodeError(f"invalid map key {text!r}: not the canonical encoding {key}")
        return key

    @property
    def seed(self) -> bytes:
        return self._seed

    def to_rng(self) -> random.Random:
        return random.Random(int.from_bytes(self._seed, "big"))

    def __str__(self) -> str:
        return base64.urlsafe_b64encode(self._seed).decode("ascii").rstrip("=")

    def __repr__(self) -> str:
        return f'MapKey("{self}")'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapKey):
            return NotImplemented
        return self._seed == other._seed

    def __hash__(self) -> int:
        return hash(self._seed)

    def __reduce__(self):
        return (MapKey, (self._seed,))


__all__ = ["MapKey", "SEED_SIZE"]
