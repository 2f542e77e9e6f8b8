"""Moving public inputs between two prime fields as bit strings.

A proof over one field may be checked inside a circuit over another. The
public inputs, elements of the source field, are then turned into bits,
packed densely into elements of the target field, and unpacked back into
one bit string per source element on the other side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence

__all__ = [
    "PrimeField",
    "to_bits_le",
    "from_bits_be",
    "packing_capacity",
    "repack_input",
    "BooleanInput",
]


@dataclass(frozen=True)
class PrimeField:
    """The integers modulo a prime ``modulus``."""

    modulus: int

    def __post_init__(self) -> None:
        if self.modulus < 2:
            raise ValueError("field modulus must be at least two")

    def bit_size(self) -> int:
        """The number of bits needed to write the modulus."""
        return self.modulus.bit_length()

    def _check(self, value: int) -> int:
        if not 0 <= value < self.modulus:
            raise ValueError(f"{value} is not an element of the field modulo {self.modulus}")
        return value


def to_bits_le(value: int, bit_size: int) -> List[bool]:
    """The lowest ``bit_size`` bits of ``value``, least significant first."""
    if value < 0:
        raise ValueError("cannot take the bits of a negative number")
    if bit_size < 0:
        raise ValueError("bit size must not be negative")
    return [bool((value >> i) & 1) for i in range(bit_size)]


def from_bits_be(bits: Iterable[bool]) -> int:
    """The integer whose bits, most significant first, are ``bits``."""
    value = 0
    for bit in bits:
        value = (value << 1) | (1 if bit else 0)
    return value


def _from_bits_le(bits: Iterable[bool]) -> int:
    return sum(1 << i for i, bit in enumerate(bits) if bit)


def packing_capacity(source: PrimeField, target: PrimeField) -> int:
    """How many bits of ``source`` data fit in one ``target`` element.

    A whole ``target.bit_size()`` bits fit only when both fields have the
    same bit size and the target modulus is not smaller than the source
    modulus; otherwise one bit fewer.
    """
    if target.bit_size() == source.bit_size() and target.modulus >= source.modulus:
        return target.bit_size()
    return target.bit_size() - 1


def _chunks(items: Sequence[bool], size: int) -> Iterator[List[bool]]:
    if size <= 0:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def _source_bits_be(elements: Iterable[int], source: PrimeField) -> List[bool]:
    """Each element's bits, padded to the field's bit size, most significant first."""
    size = source.bit_size()
    bits: List[bool] = []
    for element in elements:
        bits.extend(reversed(to_bits_le(source._check(element), size)))
    return bits


def repack_input(
    elements: Iterable[int], source: PrimeField, target: PrimeField
) -> List[int]:
    """Pack ``source`` elements densely into ``target`` elements."""
    capacity = packing_capacity(source, target)
    bits = _source_bits_be(elements, source)
    return [target._check(from_bits_be(chunk)) for chunk in _chunks(bits, capacity)]


@dataclass
class BooleanInput:
    """Source-field elements held as little-endian bit strings."""

    bits: List[List[bool]] = field(default_factory=list)

    @classmethod
    def from_elements(cls, elements: Iterable[int], field: PrimeField) -> "BooleanInput":
        """Take each element's bits directly, padded to the field's bit size."""
        size = field.bit_size()
        return cls([to_bits_le(field._check(element), size) for element in elements])

    @classmethod
    def from_packed_input(
        cls, elements: Iterable[int], source: PrimeField, target: PrimeField
    ) -> "BooleanInput":
        """Pack ``source`` elements into ``target`` elements and unpack them
        into one bit string per source element."""
        capacity = packing_capacity(source, target)
        src_bits = _source_bits_be(elements, source)

        unpacked: List[bool] = []
        for chunk in _chunks(src_bits, capacity):
            packed = target._check(from_bits_be(chunk))
            element_bits = to_bits_le(packed, target.bit_size())[: len(chunk)]
            unpacked.extend(reversed(element_bits))

        return cls(
            [group[::-1] for group in _chunks(unpacked, source.bit_size())]
            if unpacked
            else []
        )

    @classmethod
    def from_field_elements(
        cls, elements: Iterable[int], source: PrimeField, target: PrimeField
    ) -> "BooleanInput":
        """Split ``target`` elements into bit strings sized for ``source``.

        This is the reverse direction of :func:`repack_input`: the bits of
        each ``target`` element, most significant first, are concatenated
        and regrouped by how many bits one ``source`` element can hold.
        """
        bits: List[bool] = []
        for element in elements:
            bits.extend(reversed(to_bits_le(target._check(element), target.bit_size())))
        capacity = packing_capacity(target, source)
        return cls([group[::-1] for group in _chunks(bits, capacity)] if bits else [])

    def to_elements(self) -> List[int]:
        """The integer each little-endian bit string stands for."""
        return [_from_bits_le(group) for group in self.bits]

    def __iter__(self) -> Iterator[List[bool]]:
        return iter(self.bits)