"""
Proof Builder Unit Tests
Tests for airdrop/proof/builder.py

Covers:
- Faucet path: address key found among 1000 leaves
- Bulk path: nonce recovery, tweaked and bare commitments, two-level branch
- Missing leaves and missing private keys
"""
import pytest

from airdrop.keys.airdrop_key import AirdropKey, KeyMode
from airdrop.merkle import create_root
from airdrop.proof import ExpectedRoots, ProofBuilder, build_bulk_proof, build_faucet_proof
from airdrop.schemas.errors import LeafNotFoundError, NonceNotFoundError, StateError
from airdrop.tree.leaves import flatten_leaves

from fixtures.common import (
    TEST_ADDRESS,
    InMemoryDatasets,
    committed_hash,
    make_bucket,
    make_credential,
    make_faucet_leaves,
    make_groups,
    make_hash,
)


class TestFaucetPath:
    def test_address_at_index_seven(self):
        leaves = make_faucet_leaves(TEST_ADDRESS, 1_000_000_000, position=7, total=1000)
        key = AirdropKey.from_address(TEST_ADDRESS, 1_000_000_000)

        proof = build_faucet_proof(key, leaves)

        assert proof.index == 7
        assert len(proof.proof) == 10
        assert proof.subindex is None
        assert proof.subproof is None
        assert proof.compute_root() == create_root(leaves)
        assert proof.verify(ExpectedRoots(faucet_root=create_root(leaves), faucet_leaves=1000))

    def test_wrong_value_is_not_found(self):
        leaves = make_faucet_leaves(TEST_ADDRESS, 1_000_000_000)
        key = AirdropKey.from_address(TEST_ADDRESS, 999)

        with pytest.raises(LeafNotFoundError):
            build_faucet_proof(key, leaves)

    def test_sponsor_flag_is_committed(self):
        leaves = make_faucet_leaves(TEST_ADDRESS, 5, sponsor=True)

        with pytest.raises(LeafNotFoundError):
            build_faucet_proof(AirdropKey.from_address(TEST_ADDRESS, 5), leaves)

        proof = build_faucet_proof(AirdropKey.from_address(TEST_ADDRESS, 5, sponsor=True), leaves)
        assert proof.index == 7


class TestBulkPath:
    @pytest.mark.parametrize("bare", [False, True])
    def test_two_level_proof(self, ed25519_credential, bare):
        nonce = make_hash("bulk-nonce")
        groups = make_groups(committed_hash(ed25519_credential, nonce, bare=bare))
        bucket = make_bucket(ed25519_credential, nonce)

        proof = build_bulk_proof(
            ed25519_credential.key, groups, bucket, ed25519_credential.private_key, bare=bare
        )

        assert proof.index == 3
        assert proof.subindex == 1
        assert len(proof.subproof) == 1
        assert proof.compute_root() == create_root(flatten_leaves(groups))
        assert proof.verify(ExpectedRoots(
            airdrop_root=create_root(flatten_leaves(groups)),
            airdrop_leaves=len(groups),
        ))

    def test_key_is_mutated(self, ed25519_credential):
        nonce = make_hash("bulk-nonce")
        groups = make_groups(committed_hash(ed25519_credential, nonce))
        key = ed25519_credential.key

        proof = build_bulk_proof(key, groups, make_bucket(ed25519_credential, nonce),
                                 ed25519_credential.private_key)

        assert key.mode == KeyMode.TWEAKED
        assert proof.get_key().hash() == key.hash()

    def test_tweak_mismatch_not_found(self, ed25519_credential):
        nonce = make_hash("bulk-nonce")
        # Tree holds the bare commitment, builder uses the tweaked one.
        groups = make_groups(committed_hash(ed25519_credential, nonce, bare=True))

        with pytest.raises(LeafNotFoundError):
            build_bulk_proof(ed25519_credential.key, groups,
                             make_bucket(ed25519_credential, nonce),
                             ed25519_credential.private_key)

    def test_no_nonce_for_key(self, ed25519_credential):
        stranger = make_credential("ed25519")
        bucket = make_bucket(stranger, make_hash("theirs"))

        with pytest.raises(NonceNotFoundError):
            build_bulk_proof(ed25519_credential.key, make_groups(make_hash("x")),
                             bucket, ed25519_credential.private_key)

    def test_p256_credential(self):
        credential = make_credential("p256")
        nonce = make_hash("p256-nonce")
        groups = make_groups(committed_hash(credential, nonce), group=0, position=2)

        proof = build_bulk_proof(credential.key, groups, make_bucket(credential, nonce),
                                 credential.private_key)

        assert (proof.index, proof.subindex) == (0, 2)
        assert proof.verify()


class TestProofBuilder:
    def test_address_reads_only_faucet(self):
        datasets = InMemoryDatasets(faucet_leaves=make_faucet_leaves(TEST_ADDRESS, 10))
        builder = ProofBuilder(datasets)

        proof = builder.create_proof(AirdropKey.from_address(TEST_ADDRESS, 10))

        assert proof.index == 7
        assert datasets.reads == ["faucet"]

    def test_derived_key_reads_its_bucket(self, ed25519_credential):
        nonce = make_hash("n")
        key = ed25519_credential.key
        bucket = key.bucket()
        datasets = InMemoryDatasets(
            groups=make_groups(committed_hash(ed25519_credential, nonce)),
            buckets={bucket: make_bucket(ed25519_credential, nonce)},
        )

        proof = ProofBuilder(datasets).create_proof(key, ed25519_credential.private_key)

        assert proof.has_subproof
        assert datasets.reads == ["tree", f"nonces/{bucket:03d}"]

    def test_derived_key_needs_private_key(self, ed25519_credential):
        datasets = InMemoryDatasets()

        with pytest.raises(StateError):
            ProofBuilder(datasets).create_proof(ed25519_credential.key)

        assert datasets.reads == []


class TestBulkTamper:
    @pytest.fixture
    def built(self, ed25519_credential):
        nonce = make_hash("tamper-nonce")
        groups = make_groups(committed_hash(ed25519_credential, nonce), group=1, position=3)
        proof = build_bulk_proof(ed25519_credential.key, groups,
                                 make_bucket(ed25519_credential, nonce),
                                 ed25519_credential.private_key)
        expected = ExpectedRoots(
            airdrop_root=create_root(flatten_leaves(groups)),
            airdrop_leaves=len(groups),
        )
        return proof, expected

    @pytest.mark.parametrize("field", ["proof", "subproof"])
    def test_flipped_sibling(self, built, field):
        proof, expected = built
        for i in range(len(getattr(proof, field))):
            tampered = proof.model_copy(deep=True)
            siblings = list(getattr(tampered, field))
            siblings[i] = bytes([siblings[i][0] ^ 0x80]) + siblings[i][1:]
            setattr(tampered, field, siblings)

            assert not tampered.verify(expected)

    def test_subindex_out_of_range(self, built):
        proof, expected = built
        proof.subindex = 1 << len(proof.subproof)
        assert not proof.verify(expected)

    def test_index_out_of_range(self, built):
        proof, expected = built
        proof.index = expected.airdrop_leaves
        assert not proof.verify(expected)
