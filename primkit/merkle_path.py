"""Membership and update checks over a Merkle path with explicit branch bits.

A :class:`PathCircuit` holds a path as a list of branching decisions.
Unlike :class:`primkit.merkle.Path`, the decisions can be replaced
independently of the stored siblings, so a verifier can bind the path to a
leaf position it chooses before checking membership.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Sequence

from primkit.merkle import MerkleConfig, Path

__all__ = ["UnsatisfiedConstraint", "PathCircuit"]


class UnsatisfiedConstraint(ValueError):
    """Raised when a check that the path must satisfy does not hold."""


@dataclass
class PathCircuit:
    """A Merkle path described by branch bits and sibling digests.

    ``path[i]`` is False iff the i-th on-path inner node, from the top down,
    is a left child. ``auth_path[i]`` is that node's sibling.
    """

    path: List[bool] = field(default_factory=list)
    auth_path: List[Any] = field(default_factory=list)
    leaf_sibling: Any = None
    leaf_is_right_child: bool = False

    @classmethod
    def from_path(cls, path: Path) -> "PathCircuit":
        """Take the branch bits and siblings from an authentication path."""
        positions = path.position_list()
        return cls(
            path=positions[:-1],
            auth_path=list(path.auth_path),
            leaf_sibling=path.leaf_sibling_hash,
            leaf_is_right_child=path.leaf_index & 1 == 1,
        )

    def set_leaf_position(self, leaf_index: Sequence[bool]) -> None:
        """Replace the branch bits with a little-endian leaf index.

        Missing high bits are taken as zero; bits beyond the path length
        are dropped.
        """
        bits = [bool(bit) for bit in leaf_index]
        if not bits:
            raise ValueError("leaf index needs at least one bit")
        leaf_is_right_child, *rest = bits
        depth = len(self.auth_path)
        rest = (rest + [False] * depth)[:depth]
        self.path = rest[::-1]
        self.leaf_is_right_child = leaf_is_right_child

    def get_leaf_position(self) -> List[bool]:
        """The leaf index as little-endian bits."""
        return [self.leaf_is_right_child, *reversed(self.path)]

    def calculate_root(self, config: MerkleConfig, leaf: Any) -> Any:
        """The root reached by hashing ``leaf`` up along this path."""
        claimed = config.leaf_hash(leaf)
        if self.leaf_is_right_child:
            left, right = self.leaf_sibling, claimed
        else:
            left, right = claimed, self.leaf_sibling
        current = config.hash_leaf_pair(left, right)

        for bit, sibling in zip(reversed(self.path), reversed(self.auth_path)):
            if bit:
                current = config.compress_pair(sibling, current)
            else:
                current = config.compress_pair(current, sibling)
        return current

    def verify_membership(self, config: MerkleConfig, root: Any, leaf: Any) -> bool:
        """Return True if ``leaf`` on this path hashes up to ``root``."""
        return self.calculate_root(config, leaf) == root

    def update_leaf(
        self, config: MerkleConfig, old_root: Any, old_leaf: Any, new_leaf: Any
    ) -> Any:
        """Check ``old_leaf`` is a member under ``old_root``, then return the
        root after replacing it with ``new_leaf``."""
        if not self.verify_membership(config, old_root, old_leaf):
            raise UnsatisfiedConstraint("old leaf is not a member under the old root")
        return self.calculate_root(config, new_leaf)

    def update_and_check(
        self,
        config: MerkleConfig,
        old_root: Any,
        new_root: Any,
        old_leaf: Any,
        new_leaf: Any,
    ) -> bool:
        """Return True if replacing ``old_leaf`` by ``new_leaf`` gives ``new_root``."""
        return self.update_leaf(config, old_root, old_leaf, new_leaf) == new_root