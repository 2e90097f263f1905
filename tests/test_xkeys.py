"""
Tests for extended keys, using the BIP32 test vectors
"""
from secrets import randbelow, token_bytes

import pytest

import hdkeychain.wallet.xkeys as xkeys_module
from hdkeychain.core import XKEYS, DepthOverflow, HardenedDerivationNotSupported, InvalidChecksum, \
    InvalidChildKey, InvalidEncoding, InvalidKeyData, InvalidLength, InvalidMasterKey, InvalidSeedLength, \
    KeyDecodeError, UnknownVersion, VersionKindMismatch
from hdkeychain.data import encode_base58check
from hdkeychain.wallet import ChildNumber, DerivationPath, ExtendedKey, ExtendedPrivateKey, ExtendedPublicKey, \
    Network, new_master, parse_extended_key

# --- BIP32 TEST VECTORS --- #
VECTOR1 = (
    "000102030405060708090a0b0c0d0e0f",
    [
        ("m",
         "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi",
         "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8"),
        ("m/0'",
         "xprv9uHRZZhk6KAJC1avXpDAp4MDc3sQKNxDiPvvkX8Br5ngLNv1TxvUxt4cV1rGL5hj6KCesnDYUhd7oWgT11eZG7XnxHrnYeSvkzY7d2bhkJ7",
         "xpub68Gmy5EdvgibQVfPdqkBBCHxA5htiqg55crXYuXoQRKfDBFA1WEjWgP6LHhwBZeNK1VTsfTFUHCdrfp1bgwQ9xv5ski8PX9rL2dZXvgGDnw"),
        ("m/0'/1",
         "xprv9wTYmMFdV23N2TdNG573QoEsfRrWKQgWeibmLntzniatZvR9BmLnvSxqu53Kw1UmYPxLgboyZQaXwTCg8MSY3H2EU4pWcQDnRnrVA1xe8fs",
         "xpub6ASuArnXKPbfEwhqN6e3mwBcDTgzisQN1wXN9BJcM47sSikHjJf3UFHKkNAWbWMiGj7Wf5uMash7SyYq527Hqck2AxYysAA7xmALppuCkwQ"),
        ("m/0'/1/2'",
         "xprv9z4pot5VBttmtdRTWfWQmoH1taj2axGVzFqSb8C9xaxKymcFzXBDptWmT7FwuEzG3ryjH4ktypQSAewRiNMjANTtpgP4mLTj34bhnZX7UiM",
         "xpub6D4BDPcP2GT577Vvch3R8wDkScZWzQzMMUm3PWbmWvVJrZwQY4VUNgqFJPMM3No2dFDFGTsxxpG5uJh7n7epu4trkrX7x7DogT5Uv6fcLW5"),
        ("m/0'/1/2'/2",
         "xprvA2JDeKCSNNZky6uBCviVfJSKyQ1mDYahRjijr5idH2WwLsEd4Hsb2Tyh8RfQMuPh7f7RtyzTtdrbdqqsunu5Mm3wDvUAKRHSC34sJ7in334",
         "xpub6FHa3pjLCk84BayeJxFW2SP4XRrFd1JYnxeLeU8EqN3vDfZmbqBqaGJAyiLjTAwm6ZLRQUMv1ZACTj37sR62cfN7fe5JnJ7dh8zL4fiyLHV"),
        ("m/0'/1/2'/2/1000000000",
         "xprvA41z7zogVVwxVSgdKUHDy1SKmdb533PjDz7J6N6mV6uS3ze1ai8FHa8kmHScGpWmj4WggLyQjgPie1rFSruoUihUZREPSL39UNdE3BBDu76",
         "xpub6H1LXWLaKsWFhvm6RVpEL9P4KfRZSW7abD2ttkWP3SSQvnyA8FSVqNTEcYFgJS2UaFcxupHiYkro49S8yGasTvXEYBVPamhGW6cFJodrTHy"),
    ]
)

VECTOR2 = (
    "fffcf9f6f3f0edeae7e4e1dedbd8d5d2cfccc9c6c3c0bdbab7b4b1aeaba8a5a29f9c999693908d8a8784817e7b7875726f6c696663605d5a57"
    "54514e4b484542",
    [
        ("m",
         "xprv9s21ZrQH143K31xYSDQpPDxsXRTUcvj2iNHm5NUtrGiGG5e2DtALGdso3pGz6ssrdK4PFmM8NSpSBHNqPqm55Qn3LqFtT2emdEXVYsCzC2U",
         "xpub661MyMwAqRbcFW31YEwpkMuc5THy2PSt5bDMsktWQcFF8syAmRUapSCGu8ED9W6oDMSgv6Zz8idoc4a6mr8BDzTJY47LJhkJ8UB7WEGuduB"),
        ("m/0",
         "xprv9vHkqa6EV4sPZHYqZznhT2NPtPCjKuDKGY38FBWLvgaDx45zo9WQRUT3dKYnjwih2yJD9mkrocEZXo1ex8G81dwSM1fwqWpWkeS3v86pgKt",
         "xpub69H7F5d8KSRgmmdJg2KhpAK8SR3DjMwAdkxj3ZuxV27CprR9LgpeyGmXUbC6wb7ERfvrnKZjXoUmmDznezpbZb7ap6r1D3tgFxHmwMkQTPH"),
        ("m/0/2147483647'",
         "xprv9wSp6B7kry3Vj9m1zSnLvN3xH8RdsPP1Mh7fAaR7aRLcQMKTR2vidYEeEg2mUCTAwCd6vnxVrcjfy2kRgVsFawNzmjuHc2YmYRmagcEPdU9",
         "xpub6ASAVgeehLbnwdqV6UKMHVzgqAG8Gr6riv3Fxxpj8ksbH9ebxaEyBLZ85ySDhKiLDBrQSARLq1uNRts8RuJiHjaDMBU4Zn9h8LZNnBC5y4a"),
    ]
)

# Leading zeros in the private key
VECTOR3 = (
    "4b381541583be4423346c643850da4b320e46a87ae3d2a4e6da11eba819cd4acba45d239319ac14f863b8d5ab5a0d0c64d2e8a1e7d1457df"
    "2e5a3c51c73235be",
    [
        ("m",
         "xprv9s21ZrQH143K25QhxbucbDDuQ4naNntJRi4KUfWT7xo4EKsHt2QJDu7KXp1A3u7Bi1j8ph3EGsZ9Xvz9dGuVrtHHs7pXeTzjuxBrCmmhgC6",
         "xpub661MyMwAqRbcEZVB4dScxMAdx6d4nFc9nvyvH3v4gJL378CSRZiYmhRoP7mBy6gSPSCYk6SzXPTf3ND1cZAceL7SfJ1Z3GC8vBgp2epUt13"),
        ("m/0'",
         "xprv9uPDJpEQgRQfDcW7BkF7eTya6RPxXeJCqCJGHuCJ4GiRVLzkTXBAJMu2qaMWPrS7AANYqdq6vcBcBUdJCVVFceUvJFjaPdGZ2y9WACViL4L",
         "xpub68NZiKmJWnxxS6aaHmn81bvJeTESw724CRDs6HbuccFQN9Ku14VQrADWgqbhhTHBaohPX4CjNLf9fq9MYo6oDaPPLPxSb7gwQN3ih19Zm4Y"),
    ]
)

# BIP32 test vector 5: invalid extended keys
INVALID_KEY_DATA = [
    # pubkey version / prvkey mismatch
    "xpub661MyMwAqRbcEYS8w7XLSVeEsBXy79zSzH1J8vCdxAZningWLdN3zgtU6LBpB85b3D2yc8sfvZU521AAwdZafEz7mnzBBsz4wKY5fTtTQBm",
    # prvkey version / pubkey mismatch
    "xprv9s21ZrQH143K24Mfq5zL5MhWK9hUhhGbd45hLXo2Pq2oqzMMo63oStZzFGTQQD3dC4H2D5GBj7vWvSQaaBv5cxi9gafk7NF3pnBju6dwKvH",
    # invalid pubkey prefix 04
    "xpub661MyMwAqRbcEYS8w7XLSVeEsBXy79zSzH1J8vCdxAZningWLdN3zgtU6Txnt3siSujt9RCVYsx4qHZGc62TG4McvMGcAUjeuwZdduYEvFn",
    # invalid prvkey prefix 04
    "xprv9s21ZrQH143K24Mfq5zL5MhWK9hUhhGbd45hLXo2Pq2oqzMMo63oStZzFGpWnsj83BHtEy5Zt8CcDr1UiRXuWCmTQLxEK9vbz5gPstX92JQ",
    # invalid pubkey prefix 01
    "xpub661MyMwAqRbcEYS8w7XLSVeEsBXy79zSzH1J8vCdxAZningWLdN3zgtU6N8ZMMXctdiCjxTNq964yKkwrkBJJwpzZS4HS2fxvyYUA4q2Xe4",
    # invalid prvkey prefix 01
    "xprv9s21ZrQH143K24Mfq5zL5MhWK9hUhhGbd45hLXo2Pq2oqzMMo63oStZzFAzHGBP2UuGCqWLTAPLcMtD9y5gkZ6Eq3Rjuahrv17fEQ3Qen6J",
    # zero depth with non-zero parent fingerprint
    "xprv9s2SPatNQ9Vc6GTbVMFPFo7jsaZySyzk7L8n2uqKXJen3KUmvQNTuLh3fhZMBoG3G4ZW1N2kZuHEPY53qmbZzCHshoQnNf4GvELZfqTUrcv",
    "xpub661no6RGEX3uJkY4bNnPcw4URcQTrSibUZ4NqJEw5eBkv7ovTwgiT91XX27VbEXGENhYRCf7hyEbWrR3FewATdCEebj6znwMfQkhRYHRLpJ",
    # zero depth with non-zero index
    "xprv9s21ZrQH4r4TsiLvyLXqM9P7k1K3EYhA1kkD6xuquB5i39AU8KF42acDyL3qsDbU9NmZn6MsGSUYZEsuoePmjzsB3eFKSUEh3Gu1N3cqVUN",
    "xpub661MyMwAuDcm6CRQ5N4qiHKrJ39Xe1R1NyfouMKTTWcguwVcfrZJaNvhpebzGerh7gucBvzEQWRugZDuDXjNDRmXzSZe4c7mnTK97pTvGS8",
    # private key 0 not in 1..n-1
    "xprv9s21ZrQH143K24Mfq5zL5MhWK9hUhhGbd45hLXo2Pq2oqzMMo63oStZzF93Y5wvzdUayhgkkFoicQZcP3y52uPPxFnfoLZB21Teqt1VvEHx",
    # private key n not in 1..n-1
    "xprv9s21ZrQH143K24Mfq5zL5MhWK9hUhhGbd45hLXo2Pq2oqzMMo63oStZzFAzHGBP2UuGCqWLTAPLcMtD5SDKr24z3aiUvKr9bJpdrcLg1y3G",
    # invalid pubkey 020000000000000000000000000000000000000000000000000000000000000007
    "xpub661MyMwAqRbcEYS8w7XLSVeEsBXy79zSzH1J8vCdxAZningWLdN3zgtU6Q5JXayek4PRsn35jii4veMimro1xefsM58PgBMrvdYre8QyULY",
]

UNKNOWN_VERSIONS = [
    "DMwo58pR1QLEFihHiXPVykYB6fJmsTeHvyTp7hRThAtCX8CvYzgPcn8XnmdfHGMQzT7ayAmfo4z3gY5KfbrZWZ6St24UVf2Qgo6oujFktLHdHY4",
    "DMwo58pR1QLEFihHiXPVykYB6fJmsTeHvyTp7hRThAtCX8CvYzgPcn8XnmdfHPmHJiEDXkTiJTVV9rHEBUem2mwVbbNfvT2MTcAqj3nesx8uBf9",
]

# Vector 1 master key with its final character changed
BAD_CHECKSUM = \
    "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHL"

VECTOR1_MASTER_PUBKEY = "0339a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2"
VECTOR1_MASTER_IDENTIFIER = "3442193e1bb70916e914552172cd4e2dbc9df811"


@pytest.mark.parametrize("vector", [VECTOR1, VECTOR2, VECTOR3], ids=["vector1", "vector2", "vector3"])
def test_bip32_vectors(vector):
    """
    For each path in the test vector we derive from the master and compare the xprv and xpub strings
    """
    seed, chain = vector
    master = new_master(bytes.fromhex(seed))

    for path, known_xprv, known_xpub in chain:
        derived = master.derive_path(path)
        assert derived.to_string() == known_xprv, f"xprv mismatch at {path}"
        assert derived.to_extended_public_key().to_string() == known_xpub, f"xpub mismatch at {path}"
        assert derived.depth == len(DerivationPath.from_str(path))


def test_master_key_metadata(vector1_master):
    assert vector1_master.depth == 0
    assert vector1_master.parent_fingerprint == b'\x00' * 4
    assert vector1_master.child_number == ChildNumber(0)
    assert vector1_master.network is Network.BITCOIN
    assert vector1_master.public_key.hex() == VECTOR1_MASTER_PUBKEY
    assert vector1_master.identifier().hex() == VECTOR1_MASTER_IDENTIFIER
    assert vector1_master.fingerprint().hex() == VECTOR1_MASTER_IDENTIFIER[:8]

    # The child records the parent fingerprint
    child = vector1_master.derive_child(ChildNumber.harden(0))
    assert child.parent_fingerprint == vector1_master.fingerprint()


def test_extended_key_protocol(vector1_master):
    xpub = vector1_master.to_extended_public_key()
    assert isinstance(vector1_master, ExtendedKey)
    assert isinstance(xpub, ExtendedKey)
    assert vector1_master.is_private and not xpub.is_private
    assert vector1_master.fingerprint() == xpub.fingerprint()
    assert len(vector1_master.serialize()) == XKEYS.PAYLOAD_LENGTH
    assert len(xpub.serialize()) == XKEYS.PAYLOAD_LENGTH


def test_private_repr_hides_secret(vector1_master):
    displayed = repr(vector1_master)
    assert vector1_master.private_key.hex() not in displayed, "Private key leaked in repr"
    assert vector1_master.chain_code.hex() not in displayed


def test_key_recovery(random_master):
    """
    For random keys we verify recovery from the string and from the raw payload
    """
    xprv = random_master.derive_path(f"m/{randbelow(XKEYS.HARDENED_OFFSET)}'/{randbelow(XKEYS.HARDENED_OFFSET)}")
    xpub = xprv.to_extended_public_key()

    assert ExtendedPrivateKey.from_str(xprv.to_string()) == xprv, "Failed to recover xprv from string"
    assert ExtendedPrivateKey.from_bytes(xprv.serialize()) == xprv, "Failed to recover xprv from payload"
    assert ExtendedPublicKey.from_str(xpub.to_string()) == xpub, "Failed to recover xpub from string"
    assert ExtendedPublicKey.from_bytes(xpub.serialize()) == xpub, "Failed to recover xpub from payload"
    assert parse_extended_key(str(xprv)) == xprv
    assert parse_extended_key(str(xpub)) == xpub


def test_testnet_keys():
    master = new_master(token_bytes(32), Network.TESTNET)
    xprv_str = master.to_string()
    xpub_str = master.to_extended_public_key().to_string()

    assert xprv_str.startswith("tprv")
    assert xpub_str.startswith("tpub")
    assert parse_extended_key(xprv_str).network is Network.TESTNET
    assert ExtendedPublicKey.from_str(xpub_str).network is Network.TESTNET


def test_determinism(vector1_master):
    path = "m/44'/0'/0'/1/5"
    assert vector1_master.derive_path(path) == vector1_master.derive_path(path), "Derivation not deterministic"


def test_hardened_distinctness(vector1_master):
    normal = vector1_master.derive_child(ChildNumber.normal(3))
    hardened = vector1_master.derive_child(ChildNumber.harden(3))

    assert normal.chain_code != hardened.chain_code
    assert normal.private_key != hardened.private_key


def test_public_derivation_consistency(random_master):
    """
    For normal children, deriving privately then neutering equals neutering then deriving publicly
    """
    parent = random_master.derive_child(ChildNumber.harden(0))
    parent_xpub = parent.to_extended_public_key()

    for _ in range(3):
        child_number = ChildNumber.normal(randbelow(XKEYS.HARDENED_OFFSET))
        from_private = parent.derive_child(child_number).to_extended_public_key()
        from_public = parent_xpub.derive_child(child_number)
        assert from_private == from_public, f"Public derivation mismatch at index {child_number}"

    assert parent.derive_path("m/1/2").to_extended_public_key() == parent_xpub.derive_path("m/1/2")


def test_integer_child_numbers(vector1_master):
    """
    A raw int is the serialized child number, so values from 2^31 are hardened
    """
    assert vector1_master.derive_child(0x80000000) == vector1_master.derive_child(ChildNumber.harden(0))
    assert vector1_master.derive_child(1) == vector1_master.derive_child(ChildNumber.normal(1))


def test_empty_path_is_identity(vector1_master):
    assert vector1_master.derive_path("m") == vector1_master
    xpub = vector1_master.to_extended_public_key()
    assert xpub.derive_path(DerivationPath.root()) == xpub


def test_hardened_from_public(vector1_master):
    xpub = vector1_master.to_extended_public_key()

    with pytest.raises(HardenedDerivationNotSupported) as exc_info:
        xpub.derive_child(ChildNumber.harden(1))
    assert exc_info.value.hardened

    with pytest.raises(HardenedDerivationNotSupported) as exc_info:
        xpub.derive_path("m/0/1'")
    assert exc_info.value.position == 1
    assert exc_info.value.child_number == ChildNumber.harden(1)


def test_depth_overflow(vector1_master):
    deep_key = ExtendedPrivateKey(
        private_key=vector1_master.private_key,
        chain_code=vector1_master.chain_code,
        depth=XKEYS.MAX_DEPTH,
        parent_fingerprint=b'\x01\x02\x03\x04',
        child_number=ChildNumber.normal(1),
    )
    with pytest.raises(DepthOverflow):
        deep_key.derive_child(0)
    with pytest.raises(DepthOverflow):
        deep_key.to_extended_public_key().derive_child(0)

    with pytest.raises(InvalidKeyData):
        ExtendedPrivateKey(vector1_master.private_key, vector1_master.chain_code, XKEYS.MAX_DEPTH + 1,
                           b'\x01\x02\x03\x04', ChildNumber.normal(1))


def test_seed_length():
    for length in (XKEYS.MIN_SEED_BYTES, XKEYS.MAX_SEED_BYTES):
        assert new_master(token_bytes(length)).depth == 0

    for length in (0, XKEYS.MIN_SEED_BYTES - 1, XKEYS.MAX_SEED_BYTES + 1):
        with pytest.raises(InvalidSeedLength):
            new_master(token_bytes(length))


def test_invalid_master_key(monkeypatch):
    """
    A seed whose HMAC gives a zero scalar cannot be a master key
    """
    monkeypatch.setattr(xkeys_module, "hmac_sha512", lambda key, message: b'\x00' * 64)
    with pytest.raises(InvalidMasterKey):
        new_master(token_bytes(32))


def test_invalid_child_key(monkeypatch, vector1_master):
    """
    When IL is not below the curve order the step fails with InvalidChildKey, naming the index and its position
    """
    real_hmac = xkeys_module.hmac_sha512
    bad_index = ChildNumber.normal(7)

    def fake_hmac(key: bytes, message: bytes) -> bytes:
        if message.endswith(bad_index.to_bytes()):
            return b'\xff' * 64
        return real_hmac(key=key, message=message)

    monkeypatch.setattr(xkeys_module, "hmac_sha512", fake_hmac)

    with pytest.raises(InvalidChildKey) as exc_info:
        vector1_master.derive_path("m/0/7")
    assert exc_info.value.position == 1
    assert exc_info.value.child_number == bad_index
    assert not exc_info.value.hardened

    with pytest.raises(InvalidChildKey):
        vector1_master.to_extended_public_key().derive_child(bad_index)


@pytest.mark.parametrize("key_str", INVALID_KEY_DATA)
def test_invalid_key_data(key_str):
    with pytest.raises(InvalidKeyData):
        parse_extended_key(key_str)


@pytest.mark.parametrize("key_str", UNKNOWN_VERSIONS)
def test_unknown_version(key_str):
    with pytest.raises(UnknownVersion):
        parse_extended_key(key_str)


def test_decode_errors(vector1_master):
    xprv_str = vector1_master.to_string()
    xpub_str = vector1_master.to_extended_public_key().to_string()

    with pytest.raises(InvalidChecksum):
        parse_extended_key(BAD_CHECKSUM)

    with pytest.raises(VersionKindMismatch):
        ExtendedPublicKey.from_str(xprv_str)
    with pytest.raises(VersionKindMismatch):
        ExtendedPrivateKey.from_str(xpub_str)

    with pytest.raises(InvalidEncoding):
        parse_extended_key(xprv_str.replace(xprv_str[10], "0"))

    with pytest.raises(InvalidLength):
        ExtendedPrivateKey.from_bytes(vector1_master.serialize()[:-1])
    with pytest.raises(InvalidLength):
        ExtendedPrivateKey.from_bytes(vector1_master.serialize() + b'\x00')

    # Every decode failure shares a parent
    with pytest.raises(KeyDecodeError):
        parse_extended_key("")

    # Base58Check data shorter than its own checksum
    with pytest.raises(InvalidLength):
        parse_extended_key("1")


def test_kind_checked_before_key_data(vector1_master):
    """
    An xprv with a bad 0x00 prefix is reported as the wrong kind when a public key is requested
    """
    payload = bytearray(vector1_master.serialize())
    payload[45] = 0x01
    bad_xprv = encode_base58check(bytes(payload))

    with pytest.raises(VersionKindMismatch):
        ExtendedPublicKey.from_str(bad_xprv)
    with pytest.raises(InvalidKeyData):
        ExtendedPrivateKey.from_str(bad_xprv)
    with pytest.raises(InvalidKeyData):
        parse_extended_key(bad_xprv)
