import re
import secrets
import time
from typing import Callable, Protocol

from ..core.ports import IdGenerator

# Crockford base32: no I, L, O, U
ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
TIME_LEN = 10
RANDOM_LEN = 16
RANDOM_BITS = 80
ULID_LEN = TIME_LEN + RANDOM_LEN

_LOOSE_ULID = re.compile(r"^[0-9A-Za-z]{26}$")
_MIGRATED = re.compile(r"^[0-9A-Za-z]{26}--.+$")


class RandomSource(Protocol):
    def getrandbits(self, k: int) -> int:
        pass


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _encode(value: int, length: int) -> str:
    chars = []
    for _ in range(length):
        chars.append(ALPHABET[value & 0x1F])
        value >>= 5
    return "".join(reversed(chars))


class UlidGenerator(IdGenerator):
    """
    26-char ULIDs: 48-bit millisecond timestamp + 80 random bits.

    Ids from one generator are strictly increasing. When the clock has not
    moved past the previous timestamp, the previous random part is bumped
    by one instead of drawing a new one. Nothing is coordinated across
    processes.
    """

    def __init__(
        self,
        clock: Callable[[], int] | None = None,
        rng: RandomSource | None = None,
    ):
        self.clock = clock or _now_ms
        self.rng = rng or secrets.SystemRandom()
        self._last_ms = -1
        self._last_rand = 0

    def new_id(self) -> str:
        now = self.clock()
        if now > self._last_ms:
            self._last_ms = now
            self._last_rand = self.rng.getrandbits(RANDOM_BITS)
        else:
            self._last_rand += 1
            if self._last_rand >= 1 << RANDOM_BITS:
                raise OverflowError("ULID random component exhausted for this millisecond")
        if self._last_ms >= 1 << 48:
            raise OverflowError(f"Timestamp out of ULID range: {self._last_ms}")
        return _encode(self._last_ms, TIME_LEN) + _encode(self._last_rand, RANDOM_LEN)


def is_ulid(name: str) -> bool:
    """26 alphanumeric characters (the loose check legacy folders are held to)."""
    return bool(_LOOSE_ULID.match(name))


def is_migrated_dirname(name: str) -> bool:
    """`<ULID>--<slug>` folder names produced by structural migration."""
    return bool(_MIGRATED.match(name))


def split_migrated_dirname(name: str) -> tuple[str, str]:
    identifier, _, slug = name.partition("--")
    return identifier, slug
