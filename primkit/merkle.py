"""Fixed-height binary Merkle trees with authentication paths."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple


class MerkleError(ValueError):
    """Raised when a tree cannot be built or a digest cannot be converted."""


def identity_converter(item: Any) -> Any:
    """Hand a leaf digest on as an inner-hash input, detached from the caller.

    Immutable digests are returned as they are; mutable ones are shallow
    copied so later changes to the original cannot alter the tree.
    """
    return copy.copy(item)


def byte_converter(item: Any) -> bytes:
    """Serialize a leaf digest to bytes for use as an inner-hash input.

    Integers are written little-endian with the minimal number of bytes
    (at least one), strings as UTF-8.
    """
    if isinstance(item, (bytes, bytearray, memoryview)):
        return bytes(item)
    if isinstance(item, bool):
        return bytes([int(item)])
    if isinstance(item, int):
        if item < 0:
            raise MerkleError("cannot serialize a negative integer digest")
        length = max(1, (item.bit_length() + 7) // 8)
        return item.to_bytes(length, "little")
    if isinstance(item, str):
        return item.encode("utf-8")
    if hasattr(item, "__bytes__"):
        return bytes(item)
    raise MerkleError(f"cannot serialize digest of type {type(item).__name__}")


@dataclass(frozen=True)
class MerkleConfig:
    """The hash functions a tree is built with.

    ``leaf_hash`` maps a leaf to a leaf digest, ``two_to_one_hash`` combines
    two converted leaf digests into an inner digest and ``compress`` combines
    two inner digests. ``leaf_inner_converter`` turns a leaf digest into an
    input for ``two_to_one_hash``.
    """

    leaf_hash: Callable[[Any], Any]
    two_to_one_hash: Callable[[Any, Any], Any]
    compress: Optional[Callable[[Any, Any], Any]] = None
    leaf_inner_converter: Callable[[Any], Any] = identity_converter
    leaf_digest_default: Any = b""

    def hash_leaf_pair(self, left: Any, right: Any) -> Any:
        return self.two_to_one_hash(
            self.leaf_inner_converter(left), self.leaf_inner_converter(right)
        )

    def compress_pair(self, left: Any, right: Any) -> Any:
        compress = self.compress if self.compress is not None else self.two_to_one_hash
        return compress(left, right)


def _select_left_right(index: int, computed: Any, sibling: Any) -> Tuple[Any, Any]:
    """Order a computed node and its sibling by the low bit of ``index``."""
    if index & 1 == 0:
        return computed, sibling
    return sibling, computed


@dataclass
class Path:
    """An authentication path for one leaf.

    ``auth_path`` holds the siblings of on-path inner nodes from the top
    layer down, excluding the root.
    """

    leaf_sibling_hash: Any
    auth_path: List[Any] = field(default_factory=list)
    leaf_index: int = 0

    def position_list(self) -> List[bool]:
        """The leaf index as big-endian bits, one per level below the root."""
        return [
            bool((self.leaf_index >> i) & 1)
            for i in reversed(range(len(self.auth_path) + 1))
        ]

    def verify(self, config: MerkleConfig, root_hash: Any, leaf: Any) -> bool:
        """Return True if ``leaf`` at ``leaf_index`` hashes up to ``root_hash``."""
        claimed = config.leaf_hash(leaf)
        left, right = _select_left_right(self.leaf_index, claimed, self.leaf_sibling_hash)
        current = config.hash_leaf_pair(left, right)

        index = self.leaf_index >> 1
        for sibling in reversed(self.auth_path):
            left, right = _select_left_right(index, current, sibling)
            current = config.compress_pair(left, right)
            index >>= 1

        return current == root_hash


def _tree_height(num_leaves: int) -> int:
    if num_leaves == 1:
        return 1
    return (num_leaves - 1).bit_length() + 1


def _parent(index: int) -> Optional[int]:
    return (index - 1) >> 1 if index > 0 else None


def _is_left_child(index: int) -> bool:
    return index % 2 == 1


def _sibling(index: int) -> Optional[int]:
    if index == 0:
        return None
    return index + 1 if _is_left_child(index) else index - 1


def _leaf_position_in_tree(index: int, height: int) -> int:
    return index + (1 << (height - 1)) - 1


class MerkleTree:
    """A Merkle tree over a power-of-two number (at least two) of leaves."""

    def __init__(
        self,
        config: MerkleConfig,
        leaf_nodes: List[Any],
        non_leaf_nodes: List[Any],
        height: int,
    ) -> None:
        self._config = config
        self._leaf_nodes = leaf_nodes
        self._non_leaf_nodes = non_leaf_nodes
        self._height = height

    @classmethod
    def blank(cls, config: MerkleConfig, height: int) -> "MerkleTree":
        """A tree of the given height whose leaf digests are all the default."""
        if height < 2:
            raise MerkleError("height must be at least two")
        digests = [config.leaf_digest_default] * (1 << (height - 1))
        return cls.from_leaf_digests(config, digests)

    @classmethod
    def from_leaves(cls, config: MerkleConfig, leaves: Iterable[Any]) -> "MerkleTree":
        """Hash each leaf and build the tree over the digests."""
        return cls.from_leaf_digests(config, [config.leaf_hash(leaf) for leaf in leaves])

    @classmethod
    def from_leaf_digests(
        cls, config: MerkleConfig, leaf_digests: Sequence[Any]
    ) -> "MerkleTree":
        """Build the tree over already-hashed leaves."""
        digests = list(leaf_digests)
        size = len(digests)
        if size < 2 or size & (size - 1):
            raise MerkleError("number of leaves should be a power of two and greater than one")

        level = [
            config.hash_leaf_pair(left, right)
            for left, right in zip(digests[0::2], digests[1::2])
        ]
        levels = [level]
        while len(level) > 1:
            level = [
                config.compress_pair(left, right)
                for left, right in zip(level[0::2], level[1::2])
            ]
            levels.append(level)

        non_leaf_nodes = [node for lvl in reversed(levels) for node in lvl]
        return cls(config, digests, non_leaf_nodes, _tree_height(size))

    def root(self) -> Any:
        """The root digest."""
        return self._non_leaf_nodes[0]

    def height(self) -> int:
        """The number of levels including leaves and root."""
        return self._height

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._leaf_nodes):
            raise IndexError("index out of range")

    def generate_proof(self, index: int) -> Path:
        """The authentication path from the leaf at ``index`` to the root."""
        self._check_index(index)
        sibling_hash = self._leaf_nodes[index ^ 1]

        path = []
        node = _parent(_leaf_position_in_tree(index, self._height))
        while node != 0:
            path.append(self._non_leaf_nodes[_sibling(node)])
            node = _parent(node)
        path.reverse()

        return Path(leaf_sibling_hash=sibling_hash, auth_path=path, leaf_index=index)

    def _updated_path(self, index: int, new_leaf: Any) -> Tuple[Any, List[Any]]:
        """New leaf digest and the recomputed inner nodes, root first."""
        config = self._config
        new_hash = config.leaf_hash(new_leaf)
        left, right = _select_left_right(index, new_hash, self._leaf_nodes[index ^ 1])

        bottom_to_top = [config.hash_leaf_pair(left, right)]
        node = _parent(_leaf_position_in_tree(index, self._height))
        while node != 0:
            sibling = self._non_leaf_nodes[_sibling(node)]
            if _is_left_child(node):
                combined = config.compress_pair(bottom_to_top[-1], sibling)
            else:
                combined = config.compress_pair(sibling, bottom_to_top[-1])
            bottom_to_top.append(combined)
            node = _parent(node)

        return new_hash, bottom_to_top[::-1]

    def _apply(self, index: int, leaf_hash: Any, top_to_bottom: List[Any]) -> None:
        self._leaf_nodes[index] = leaf_hash
        node = _leaf_position_in_tree(index, self._height)
        for digest in reversed(top_to_bottom):
            node = _parent(node)
            self._non_leaf_nodes[node] = digest

    def update(self, index: int, new_leaf: Any) -> None:
        """Replace the leaf at ``index`` and recompute the nodes above it."""
        self._check_index(index)
        leaf_hash, path = self._updated_path(index, new_leaf)
        self._apply(index, leaf_hash, path)

    def check_update(self, index: int, new_leaf: Any, asserted_new_root: Any) -> bool:
        """Update only if the resulting root equals ``asserted_new_root``."""
        self._check_index(index)
        leaf_hash, path = self._updated_path(index, new_leaf)
        if path[0] != asserted_new_root:
            return False
        self._apply(index, leaf_hash, path)
        return True