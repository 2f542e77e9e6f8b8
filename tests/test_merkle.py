import hashlib
import random

import pytest

from primkit.merkle import (
    MerkleConfig,
    MerkleError,
    MerkleTree,
    Path,
    byte_converter,
    identity_converter,
)

P = 2**61 - 1


def _sha(prefix: bytes, *parts: bytes) -> bytes:
    h = hashlib.sha256(prefix)
    for part in parts:
        h.update(part)
    return h.digest()


def bytes_config() -> MerkleConfig:
    return MerkleConfig(
        leaf_hash=lambda leaf: int.from_bytes(_sha(b"\x00", leaf), "little"),
        two_to_one_hash=lambda a, b: _sha(b"\x01", a, b),
        compress=lambda a, b: _sha(b"\x02", a, b),
        leaf_inner_converter=byte_converter,
        leaf_digest_default=0,
    )


def _field_hash(values) -> int:
    data = b"".join(v.to_bytes(8, "little") for v in values)
    return int.from_bytes(hashlib.sha256(data).digest(), "little") % P


def field_config() -> MerkleConfig:
    return MerkleConfig(
        leaf_hash=lambda leaf: _field_hash(leaf),
        two_to_one_hash=lambda a, b: _field_hash([a, b]),
        leaf_inner_converter=identity_converter,
        leaf_digest_default=0,
    )


def _rand_bytes(rng, n=32):
    return bytes(rng.getrandbits(8) for _ in range(n))


def bytes_merkle_tree_test(leaves, update_query):
    config = bytes_config()
    leaves = list(leaves)
    tree = MerkleTree.from_leaves(config, leaves)
    root = tree.root()
    for i, leaf in enumerate(leaves):
        assert tree.generate_proof(i).verify(config, root, leaf)
    for i, value in update_query:
        tree.update(i, value)
        leaves[i] = value
    root = tree.root()
    for i, leaf in enumerate(leaves):
        assert tree.generate_proof(i).verify(config, root, leaf)


def test_bytes_good_root():
    rng = random.Random(1)
    leaves = [_rand_bytes(rng) for _ in range(2)]
    bytes_merkle_tree_test(leaves, [(0, _rand_bytes(rng)), (1, _rand_bytes(rng))])

    leaves = [_rand_bytes(rng) for _ in range(4)]
    bytes_merkle_tree_test(leaves, [(3, _rand_bytes(rng))])

    leaves = [_rand_bytes(rng) for _ in range(128)]
    bytes_merkle_tree_test(
        leaves, [(i, _rand_bytes(rng)) for i in (2, 3, 5, 111, 127)]
    )


def test_field_good_root():
    rng = random.Random(2)

    def rand_leaf():
        return [rng.randrange(P) for _ in range(3)]

    config = field_config()
    leaves = [rand_leaf() for _ in range(128)]
    tree = MerkleTree.from_leaves(config, leaves)
    root = tree.root()
    for i, leaf in enumerate(leaves):
        assert tree.generate_proof(i).verify(config, root, leaf)

    wrong_root = (root + 1) % P
    assert not tree.generate_proof(0).verify(config, wrong_root, leaves[0])

    for i in (2, 3, 5, 111, 127):
        value = rand_leaf()
        tree.update(i, value)
        leaves[i] = value
    root = tree.root()
    for i, leaf in enumerate(leaves):
        assert tree.generate_proof(i).verify(config, root, leaf)


def test_proof_fails_for_wrong_leaf():
    config = field_config()
    leaves = [[i, i + 1] for i in range(8)]
    tree = MerkleTree.from_leaves(config, leaves)
    proof = tree.generate_proof(4)
    assert not proof.verify(config, tree.root(), [99, 100])


def test_proof_shape():
    config = field_config()
    tree = MerkleTree.from_leaves(config, [[i] for i in range(16)])
    assert tree.height() == 5
    proof = tree.generate_proof(6)
    assert proof.leaf_index == 6
    assert len(proof.auth_path) == 3
    assert proof.leaf_sibling_hash == config.leaf_hash([7])


def test_two_leaf_root():
    config = field_config()
    tree = MerkleTree.from_leaves(config, [[1], [2]])
    assert tree.height() == 2
    assert tree.root() == _field_hash([_field_hash([1]), _field_hash([2])])
    assert tree.generate_proof(1).auth_path == []


def test_position_list():
    path = Path(leaf_sibling_hash=0, auth_path=[1, 2], leaf_index=5)
    assert path.position_list() == [True, False, True]
    path = Path(leaf_sibling_hash=0, auth_path=[1, 2, 3], leaf_index=2)
    assert path.position_list() == [False, False, True, False]


def test_blank_matches_default_digests():
    config = field_config()
    blank = MerkleTree.blank(config, 4)
    explicit = MerkleTree.from_leaf_digests(config, [0] * 8)
    assert blank.height() == 4
    assert blank.root() == explicit.root()


def test_blank_rejects_small_height():
    with pytest.raises(MerkleError):
        MerkleTree.blank(field_config(), 1)


@pytest.mark.parametrize("count", [0, 1, 3, 6])
def test_rejects_bad_leaf_count(count):
    with pytest.raises(MerkleError):
        MerkleTree.from_leaves(field_config(), [[i] for i in range(count)])


def test_out_of_range_index():
    tree = MerkleTree.from_leaves(field_config(), [[i] for i in range(4)])
    with pytest.raises(IndexError):
        tree.generate_proof(4)
    with pytest.raises(IndexError):
        tree.update(4, [1])
    with pytest.raises(IndexError):
        tree.check_update(-1, [1], 0)


def test_update_matches_rebuild():
    config = field_config()
    leaves = [[i] for i in range(8)]
    tree = MerkleTree.from_leaves(config, leaves)
    tree.update(5, [42])
    leaves[5] = [42]
    assert tree.root() == MerkleTree.from_leaves(config, leaves).root()


def test_check_update():
    config = field_config()
    leaves = [[i] for i in range(8)]
    tree = MerkleTree.from_leaves(config, leaves)
    old_root = tree.root()

    assert tree.check_update(3, [77], old_root) is False
    assert tree.root() == old_root

    leaves[3] = [77]
    expected = MerkleTree.from_leaves(config, leaves).root()
    assert tree.check_update(3, [77], expected) is True
    assert tree.root() == expected
    assert tree.generate_proof(3).verify(config, expected, [77])


def test_byte_converter():
    assert byte_converter(b"ab") == b"ab"
    assert byte_converter(0) == b"\x00"
    assert byte_converter(0x0102) == b"\x02\x01"
    assert byte_converter("hi") == b"hi"
    with pytest.raises(MerkleError):
        byte_converter(1.5)
    with pytest.raises(MerkleError):
        byte_converter(-1)