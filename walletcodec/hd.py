"""
BIP32 hierarchical deterministic keys.

An ExtendedKey is an immutable value: every derivation returns a new key and
leaves its parent untouched. Serialized keys are the 78-byte BIP32 layout

    version(4) | depth(1) | parent fingerprint(4) | child index(4) |
    chain code(32) | 0x00 + private key(33) or compressed public key(33)

followed by a 4-byte double-SHA256 checksum and rendered as base58.
"""

import logging
import re
from dataclasses import dataclass, field, replace

import base58

from . import segwit
from .crypto import (
    CURVE_ORDER,
    add_points,
    compress_point,
    decompress_point,
    hash160,
    hash256,
    hmac_sha512,
    is_infinity,
    is_valid_scalar,
    parse256,
    point_from_priv,
    scalar_multiply_generator,
    ser32,
    ser256,
)
from .errors import (
    ChecksumMismatchError,
    HardenedDerivationError,
    InvalidCharacterError,
    InvalidIndexError,
    InvalidKeyError,
    InvalidLengthError,
    InvalidPathError,
    InvalidSeedLengthError,
    UnknownVersionError,
)
from .networks import MAIN, Network, from_version, get_network

log = logging.getLogger(__name__)

MASTER_HMAC_KEY = b"Bitcoin seed"
HARDENED = 0x80000000
MAX_INDEX = 0xFFFFFFFF
MAX_DEPTH = 0xFF
MIN_SEED_LENGTH = 16
MAX_SEED_LENGTH = 64
SERIALIZED_LENGTH = 78
CHECKSUM_LENGTH = 4

_PATH_COMPONENT = re.compile(r"^(\d+)(['hH]?)$")


def hardened(i: int) -> int:
    return i + HARDENED


def format_index(index: int) -> str:
    return f"{index - HARDENED}'" if index >= HARDENED else str(index)


def parse_path(path: str) -> list:
    """
    "m/84'/0'/0'/0/5" -> [0x80000054, 0x80000000, 0x80000000, 0, 5]

    The leading "m" is optional; hardened steps are marked with ', h or H.
    """
    parts = path.strip().split("/")
    if parts[0] in ("m", "M"):
        parts = parts[1:]
    if parts == [""]:
        parts = []
    indexes = []
    for part in parts:
        match = _PATH_COMPONENT.match(part)
        if not match:
            raise InvalidPathError(f"bad path component {part!r} in {path!r}")
        index = int(match.group(1))
        if index >= HARDENED:
            raise InvalidPathError(f"path index {index} too large in {path!r}")
        indexes.append(hardened(index) if match.group(2) else index)
    return indexes


@dataclass(frozen=True)
class ExtendedKey:
    network: Network
    depth: int
    parent_fingerprint: bytes
    child_index: int
    chain_code: bytes = field(repr=False)
    key: bytes = field(repr=False)
    private: bool

    def __post_init__(self):
        if not 0 <= self.depth <= MAX_DEPTH:
            raise InvalidLengthError(f"depth {self.depth} out of range")
        if len(self.parent_fingerprint) != 4:
            raise InvalidLengthError("parent fingerprint must be 4 bytes")
        if not 0 <= self.child_index <= MAX_INDEX:
            raise InvalidIndexError(f"child index {self.child_index} out of range")
        if len(self.chain_code) != 32:
            raise InvalidLengthError("chain code must be 32 bytes")
        if self.private:
            if len(self.key) != 32:
                raise InvalidLengthError("private key must be 32 bytes")
            if not is_valid_scalar(parse256(self.key)):
                raise InvalidKeyError("private key outside curve order")
        elif len(self.key) != 33:
            raise InvalidLengthError("public key must be 33 bytes")

    # -------------------------
    # Construction
    # -------------------------

    @classmethod
    def from_seed(cls, seed: bytes, network=MAIN) -> "ExtendedKey":
        if not MIN_SEED_LENGTH <= len(seed) <= MAX_SEED_LENGTH:
            raise InvalidSeedLengthError(
                f"seed must be {MIN_SEED_LENGTH}-{MAX_SEED_LENGTH} bytes, got {len(seed)}"
            )
        I = hmac_sha512(MASTER_HMAC_KEY, bytes(seed))
        Il, Ir = I[:32], I[32:]
        if not is_valid_scalar(parse256(Il)):
            raise InvalidKeyError("master key outside curve order, seed unusable")
        return cls(get_network(network), 0, b"\x00" * 4, 0, Ir, Il, True)

    @classmethod
    def from_mnemonic(cls, mnemonic, network=MAIN) -> "ExtendedKey":
        return cls.from_seed(mnemonic.to_seed(), network)

    # -------------------------
    # Properties
    # -------------------------

    @property
    def public_key(self) -> bytes:
        return point_from_priv(self.key) if self.private else self.key

    @property
    def identifier(self) -> bytes:
        return hash160(self.public_key)

    @property
    def fingerprint(self) -> bytes:
        return self.identifier[:4]

    @property
    def is_hardened(self) -> bool:
        return self.child_index >= HARDENED

    def neuter(self) -> "ExtendedKey":
        if not self.private:
            return self
        return replace(self, key=self.public_key, private=False)

    # -------------------------
    # Derivation
    # -------------------------

    def _ckd_priv(self, index: int):
        if index >= HARDENED:
            data = b"\x00" + self.key + ser32(index)
        else:
            data = self.public_key + ser32(index)
        I = hmac_sha512(self.chain_code, data)
        Il, Ir = I[:32], I[32:]
        il = parse256(Il)
        if il >= CURVE_ORDER:
            raise InvalidKeyError(f"derived tweak outside curve order at index {format_index(index)}")
        k = (il + parse256(self.key)) % CURVE_ORDER
        if k == 0:
            raise InvalidKeyError(f"derived zero key at index {format_index(index)}")
        return ser256(k), Ir

    def _ckd_pub(self, index: int):
        if index >= HARDENED:
            raise HardenedDerivationError(f"cannot derive hardened index {format_index(index)} from a public key")
        I = hmac_sha512(self.chain_code, self.key + ser32(index))
        Il, Ir = I[:32], I[32:]
        il = parse256(Il)
        if il >= CURVE_ORDER:
            raise InvalidKeyError(f"derived tweak outside curve order at index {format_index(index)}")
        point = add_points(scalar_multiply_generator(il), decompress_point(self.key))
        if is_infinity(point):
            raise InvalidKeyError(f"derived point at infinity at index {format_index(index)}")
        return compress_point(point), Ir

    def derive(self, index: int, hardened: bool = False) -> "ExtendedKey":
        """
        Derive the child at index (0..2**32-1; >= 2**31 is hardened).
        hardened=True adds 2**31 to an index below it.

        InvalidKeyError means this index yields no valid key; BIP32 callers
        move on to the next index.
        """
        if hardened:
            if not 0 <= index < HARDENED:
                raise InvalidIndexError(f"hardened index {index} out of range")
            index += HARDENED
        elif not 0 <= index <= MAX_INDEX:
            raise InvalidIndexError(f"child index {index} out of range")
        if self.depth >= MAX_DEPTH:
            raise InvalidKeyError("maximum derivation depth reached")

        if self.private:
            key, chain_code = self._ckd_priv(index)
        else:
            key, chain_code = self._ckd_pub(index)
        log.debug("derived child %s at depth %d", format_index(index), self.depth + 1)
        return ExtendedKey(
            self.network, self.depth + 1, self.fingerprint, index, chain_code, key, self.private
        )

    def derive_path(self, path: str) -> "ExtendedKey":
        """Derive along a path such as "m/84'/0'/0'/0/0", relative to this key."""
        key = self
        for index in parse_path(path):
            key = key.derive(index)
        return key

    # -------------------------
    # Serialization
    # -------------------------

    def to_raw(self, network=None) -> bytes:
        network = get_network(network) if network is not None else self.network
        keydata = b"\x00" + self.key if self.private else self.key
        return (
            network.version(self.private)
            + bytes([self.depth])
            + self.parent_fingerprint
            + ser32(self.child_index)
            + self.chain_code
            + keydata
        )

    def serialize(self, network=None) -> str:
        """
        Base58check text of this key. Passing a network other than the key's
        own writes that network's version bytes, so parsing the result yields
        the same key on the other network.
        """
        return base58.b58encode_check(self.to_raw(network)).decode()

    def __str__(self) -> str:
        return self.serialize()

    @classmethod
    def from_raw(cls, raw: bytes, network=None) -> "ExtendedKey":
        if len(raw) != SERIALIZED_LENGTH:
            raise InvalidLengthError(f"extended key must be {SERIALIZED_LENGTH} bytes, got {len(raw)}")
        found, private = from_version(raw[:4])
        if network is not None and get_network(network) != found:
            raise UnknownVersionError(f"version {raw[:4].hex()} is not a {get_network(network).name} key")

        depth = raw[4]
        parent_fingerprint = raw[5:9]
        child_index = int.from_bytes(raw[9:13], "big")
        chain_code = raw[13:45]
        keydata = raw[45:78]
        if depth == 0 and (parent_fingerprint != b"\x00" * 4 or child_index != 0):
            raise InvalidKeyError("master key with non-zero parent fingerprint or index")

        if private:
            if keydata[0] != 0:
                raise InvalidKeyError("private key field must start with 0x00")
            key = keydata[1:]
        else:
            decompress_point(keydata)
            key = keydata
        return cls(found, depth, parent_fingerprint, child_index, chain_code, key, private)

    @classmethod
    def parse(cls, text: str, network=None) -> "ExtendedKey":
        try:
            raw = base58.b58decode(text)
        except ValueError:
            raise InvalidCharacterError("extended key is not valid base58") from None
        if len(raw) != SERIALIZED_LENGTH + CHECKSUM_LENGTH:
            raise InvalidLengthError(
                f"extended key must decode to {SERIALIZED_LENGTH + CHECKSUM_LENGTH} bytes, got {len(raw)}"
            )
        payload, checksum = raw[:SERIALIZED_LENGTH], raw[SERIALIZED_LENGTH:]
        if hash256(payload)[:CHECKSUM_LENGTH] != checksum:
            raise ChecksumMismatchError("extended key checksum does not match")
        return cls.from_raw(payload, network)

    # -------------------------
    # Wallet helpers
    # -------------------------

    def to_wif(self) -> str:
        if not self.private:
            raise InvalidKeyError("public key has no WIF encoding")
        payload = bytes([self.network.wif_prefix]) + self.key + b"\x01"
        return base58.b58encode_check(payload).decode()

    def to_address(self) -> str:
        """P2WPKH (witness v0) address of this key on its network."""
        return segwit.encode_address(self.network.hrp, 0, hash160(self.public_key))
