"""Seeded pseudo-random numbers shared by every race format.

Race results are published and re-computed by anyone holding the disclosed
seed material, so the seed -> float mapping is a versioned contract rather
than "whatever the runtime provides".

Algorithm ``arc4-seedrandom-3``:

1. Key: the seed string's UTF-16 code units, mixed into a 256-entry key with
   ``key[j & 255] = (smear ^= key[j & 255] * 19) + code`` (for seeds of at most
   256 characters the key is simply the character codes).
2. State: the RC4 key schedule over that key, then the first 256 keystream
   bytes are dropped.
3. Float: 6 keystream bytes form a 48-bit integer; more bytes are pulled until
   52 bits of significance are reached, the value is normalized below 2**53 and
   divided by the accumulated denominator. The result lies in [0, 1).

This is bit-compatible with the ``seedrandom`` ARC4 generator used by the
reference deployment. Golden vectors live in ``tests/test_seeded_rng.py``.
"""
import hashlib
from typing import List

SEED_ALGORITHM_VERSION = "arc4-seedrandom-3"

WIDTH = 256
MASK = WIDTH - 1
CHUNKS = 6
START_DENOM = WIDTH**CHUNKS
SIGNIFICANCE = 2**52
OVERFLOW = SIGNIFICANCE * 2


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _char_codes(seed: str) -> List[int]:
    raw = seed.encode("utf-16-le")
    return [raw[i] | (raw[i + 1] << 8) for i in range(0, len(raw), 2)]


def mix_key(seed: str) -> List[int]:
    """Fold the seed's character codes into an RC4 key (at most 256 entries)."""
    key: List[int] = []
    smear = 0
    for j, code in enumerate(_char_codes(seed)):
        index = MASK & j
        if index < len(key):
            smear ^= key[index] * 19
            key[index] = MASK & (smear + code)
        else:
            key.append(MASK & (smear + code))
    return key


class Arc4:
    """RC4 keystream with the first 256 bytes discarded."""

    def __init__(self, key: List[int]):
        if not key:
            key = [0]
        keylen = len(key)
        s = list(range(WIDTH))
        j = 0
        for i in range(WIDTH):
            t = s[i]
            j = MASK & (j + key[i % keylen] + t)
            s[i] = s[j]
            s[j] = t
        self.i = 0
        self.j = 0
        self.s = s
        self.next_bytes(WIDTH)

    def next_bytes(self, count: int) -> int:
        """Return the next ``count`` keystream bytes as one big-endian integer."""
        r = 0
        i, j, s = self.i, self.j, self.s
        for _ in range(count):
            i = MASK & (i + 1)
            t = s[i]
            j = MASK & (j + t)
            s[i] = s[j]
            s[j] = t
            r = r * WIDTH + s[MASK & (s[i] + t)]
        self.i, self.j = i, j
        return r


class SeedRandom:
    """Deterministic uniform floats in [0, 1) from a seed string.

    Instances are callable, so ``rng = SeedRandom(seed); rng()`` draws the next
    value of the stream.
    """

    def __init__(self, seed: str):
        self.seed = seed
        self._arc4 = Arc4(mix_key(seed))

    def __call__(self) -> float:
        n = self._arc4.next_bytes(CHUNKS)
        d = START_DENOM
        x = 0
        while n < SIGNIFICANCE:
            n = (n + x) * WIDTH
            d *= WIDTH
            x = self._arc4.next_bytes(1)
        # n is a multiple of 256 here, so halving stays exact.
        while n >= OVERFLOW:
            n //= 2
            d //= 2
            x >>= 1
        return (n + x) / d

    def random(self) -> float:
        return self()


def seed_to_unit_float(seed: str) -> float:
    """First draw of the stream for ``seed``, in [0, 1)."""
    return SeedRandom(seed)()


def seed_to_signed_float(seed: str) -> float:
    """First draw of the stream for ``seed`` mapped onto [-1, 1)."""
    return SeedRandom(seed)() * 2 - 1
