# primkit

Building blocks for authenticated data structures and proof-system inputs,
written in plain Python with no runtime dependencies.

## Modules

### `primkit.merkle`

A fixed-height binary Merkle tree.

- `MerkleConfig` holds the hash functions: `leaf_hash` (leaf to leaf digest),
  `two_to_one_hash` (two converted leaf digests to an inner digest),
  `compress` (two inner digests to one; defaults to `two_to_one_hash`),
  `leaf_inner_converter` (leaf digest to `two_to_one_hash` input; defaults to
  `identity_converter`) and `leaf_digest_default` (the digest used by
  `MerkleTree.blank`, `b""` by default).
- `identity_converter` passes a digest on unchanged (shallow-copied);
  `byte_converter` turns bytes-like values, non-negative integers
  (little-endian, minimal length, at least one byte), strings (UTF-8) and
  objects with `__bytes__` into `bytes`.
- `MerkleTree.from_leaves`, `MerkleTree.from_leaf_digests` and
  `MerkleTree.blank` build a tree. The number of leaves must be a power of
  two and at least two (`blank` needs a height of at least two); otherwise
  `MerkleError` is raised.
- `root()`, `height()`, `generate_proof(index)`, `update(index, new_leaf)`
  and `check_update(index, new_leaf, asserted_new_root)`, which changes the
  tree only when the new root matches and returns whether it did. An index
  outside the tree raises `IndexError`.
- `Path` holds `leaf_sibling_hash`, `auth_path` (siblings from the top down,
  root excluded) and `leaf_index`. `verify(config, root_hash, leaf)` returns
  a bool; `position_list()` gives the leaf index as big-endian bits.

### `primkit.merkle_path`

`PathCircuit` describes a path by explicit branch bits and siblings.
`PathCircuit.from_path(path)` builds one from a `Path`. The branch bits can
be replaced with `set_leaf_position(bits)` (little-endian; missing high bits
count as zero, extra bits are dropped) and read back with
`get_leaf_position()`. `calculate_root`, `verify_membership`, `update_leaf`
and `update_and_check` recompute roots and check updates; `update_leaf`
raises `UnsatisfiedConstraint` when the old leaf is not a member under the
old root.

### `primkit.prf`

- `Prf`: abstract interface with `evaluate(seed, data)`.
- `Blake2sPrf`: BLAKE2s-256 of `seed || data`, both exactly 32 bytes.
- `Blake2sWithParameterBlock`: unkeyed BLAKE2s with an 8-byte `salt` and
  8-byte `personalization`; `evaluate(data)` returns a 32-byte digest.
  The `output_size` and `key_size` fields are stored but do not change the
  digest.
- Wrong-sized seeds, inputs, salts or personalizations raise `PrfError`.

### `primkit.blake2s`

BLAKE2s computed directly over a little-endian bit string whose length is a
multiple of eight.

- `evaluate_blake2s(bits)` returns the eight 32-bit state words of
  unkeyed BLAKE2s-256; `evaluate_blake2s_with_parameters(bits, parameters)`
  takes an explicit eight-word parameter block.
- `bytes_to_bits_le` and `words_to_bytes` convert to and from bytes.
- `blake2s_prf(seed, data)` is BLAKE2s-256 of a 32-byte seed followed by
  `data`, computed with the functions above.

### `primkit.field_input`

Moves public inputs between two prime fields.

- `PrimeField(modulus)` with `bit_size()`.
- `to_bits_le`, `from_bits_be` and `packing_capacity(source, target)`.
- `repack_input(elements, source, target)` packs source-field elements
  densely into target-field elements.
- `BooleanInput` holds one little-endian bit string per element:
  `from_elements`, `from_packed_input` (pack, then unpack again),
  `from_field_elements` (split target-field elements into source-sized bit
  strings), `to_elements()` and iteration over the bit strings.

## What the package does not do

It ships no hash functions for the tree beyond what the caller supplies in
`MerkleConfig`. `PathCircuit` and `BooleanInput` compute on plain Python
values: there is no constraint system, no constraint counting and no proof
generation or verification. Signature schemes are not included.

## Installing

```
pip install .
```

To install the test dependencies as well, use `pip install .[test]`. Then run
`pytest` to run the tests.

## Example

```python
from hashlib import sha256

from primkit.merkle import MerkleConfig, MerkleTree, identity_converter

config = MerkleConfig(
    leaf_hash=lambda leaf: sha256(leaf).digest(),
    two_to_one_hash=lambda left, right: sha256(left + right).digest(),
    leaf_inner_converter=identity_converter,
)

leaves = [bytes([i]) * 30 for i in range(4)]
tree = MerkleTree.from_leaves(config, leaves)
proof = tree.generate_proof(2)
assert proof.verify(config, tree.root(), leaves[2])

tree.update(3, b"\x07" * 30)
assert tree.generate_proof(3).verify(config, tree.root(), b"\x07" * 30)
```

```python
from primkit.prf import Blake2sPrf
from primkit.blake2s import blake2s_prf

seed, data = bytes(32), bytes(32)
assert Blake2sPrf().evaluate(seed, data) == blake2s_prf(seed, data)
```