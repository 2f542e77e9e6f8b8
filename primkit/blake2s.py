"""BLAKE2s evaluated over a little-endian bit string.

The input is a sequence of bits whose length is a multiple of eight; bits
are taken little-endian within each byte, as produced by
:func:`bytes_to_bits_le`. The result is the eight 32-bit state words.
:func:`words_to_bytes` turns them into the usual 32-byte digest.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from primkit.prf import PrfError

__all__ = [
    "bytes_to_bits_le",
    "words_to_bytes",
    "evaluate_blake2s",
    "evaluate_blake2s_with_parameters",
    "blake2s_prf",
]

_MASK = 0xFFFFFFFF

_R1, _R2, _R3, _R4 = 16, 12, 8, 7

_IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

_SIGMA = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
    (11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4),
    (7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8),
    (9, 0, 5, 7, 2, 4, 10, 15, 14, 1, 11, 12, 6, 8, 3, 13),
    (2, 12, 6, 10, 0, 11, 8, 3, 4, 13, 7, 5, 15, 14, 1, 9),
    (12, 5, 1, 15, 14, 13, 4, 10, 0, 7, 6, 3, 9, 2, 8, 11),
    (13, 11, 7, 14, 12, 1, 3, 9, 5, 0, 15, 4, 8, 6, 2, 10),
    (6, 15, 14, 9, 11, 3, 0, 8, 12, 2, 13, 7, 1, 4, 10, 5),
    (10, 2, 8, 4, 7, 6, 1, 5, 15, 11, 9, 14, 3, 12, 13, 0),
)

# (a, b, c, d) column and diagonal steps of one round.
_STEPS = (
    (0, 4, 8, 12),
    (1, 5, 9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
    (0, 5, 10, 15),
    (1, 6, 11, 12),
    (2, 7, 8, 13),
    (3, 4, 9, 14),
)

_BLOCK_BITS = 512
_WORD_BITS = 32


def bytes_to_bits_le(data: bytes) -> List[bool]:
    """The bits of ``data``, least significant bit of each byte first."""
    return [bool((byte >> i) & 1) for byte in bytes(data) for i in range(8)]


def words_to_bytes(words: Iterable[int]) -> bytes:
    """Serialize 32-bit words little-endian."""
    return b"".join((word & _MASK).to_bytes(4, "little") for word in words)


def _rotr(value: int, amount: int) -> int:
    return ((value >> amount) | (value << (32 - amount))) & _MASK


def _mix(v: List[int], a: int, b: int, c: int, d: int, x: int, y: int) -> None:
    v[a] = (v[a] + v[b] + x) & _MASK
    v[d] = _rotr(v[d] ^ v[a], _R1)
    v[c] = (v[c] + v[d]) & _MASK
    v[b] = _rotr(v[b] ^ v[c], _R2)
    v[a] = (v[a] + v[b] + y) & _MASK
    v[d] = _rotr(v[d] ^ v[a], _R3)
    v[c] = (v[c] + v[d]) & _MASK
    v[b] = _rotr(v[b] ^ v[c], _R4)


def _compress(h: List[int], m: Sequence[int], t: int, final: bool) -> List[int]:
    v = [*h, *_IV]
    v[12] ^= t & _MASK
    v[13] ^= (t >> 32) & _MASK
    if final:
        v[14] ^= _MASK

    for sigma in _SIGMA:
        for step, (a, b, c, d) in enumerate(_STEPS):
            _mix(v, a, b, c, d, m[sigma[2 * step]], m[sigma[2 * step + 1]])

    return [hi ^ lo ^ hi8 for hi, lo, hi8 in zip(h, v[:8], v[8:])]


def _word_from_bits(bits: Sequence[bool]) -> int:
    return sum(1 << i for i, bit in enumerate(bits) if bit)


def _blocks(bits: Sequence[bool]) -> List[List[int]]:
    blocks = []
    for start in range(0, len(bits), _BLOCK_BITS):
        chunk = bits[start : start + _BLOCK_BITS]
        words = [
            _word_from_bits(chunk[w : w + _WORD_BITS])
            for w in range(0, len(chunk), _WORD_BITS)
        ]
        words.extend([0] * (16 - len(words)))
        blocks.append(words)
    if not blocks:
        blocks.append([0] * 16)
    return blocks


def evaluate_blake2s_with_parameters(
    input_bits: Sequence[bool], parameters: Sequence[int]
) -> List[int]:
    """BLAKE2s of ``input_bits`` with an explicit eight-word parameter block."""
    bits = [bool(bit) for bit in input_bits]
    if len(bits) % 8:
        raise ValueError("input length in bits must be a multiple of eight")
    params = list(parameters)
    if len(params) != 8:
        raise ValueError("parameter block must hold eight words")

    h = [iv ^ (p & _MASK) for iv, p in zip(_IV, params)]
    *leading, last = _blocks(bits)
    for i, block in enumerate(leading):
        h = _compress(h, block, (i + 1) * 64, False)
    return _compress(h, last, len(bits) // 8, True)


def evaluate_blake2s(input_bits: Sequence[bool]) -> List[int]:
    """Unkeyed BLAKE2s-256 of ``input_bits`` as eight state words."""
    parameters = [0x01010000 ^ 32, 0, 0, 0, 0, 0, 0, 0]
    return evaluate_blake2s_with_parameters(input_bits, parameters)


def blake2s_prf(seed: bytes, data: bytes) -> bytes:
    """BLAKE2s-256 of a 32-byte ``seed`` followed by ``data``."""
    seed = bytes(seed)
    if len(seed) != 32:
        raise PrfError(f"seed must be 32 bytes, got {len(seed)}")
    bits = bytes_to_bits_le(seed + bytes(data))
    return words_to_bytes(evaluate_blake2s(bits))