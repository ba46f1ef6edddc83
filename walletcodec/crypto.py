"""Hash primitives and the secp256k1 operations key derivation needs."""

import hashlib
import hmac

from Crypto.Hash import RIPEMD160
from ecdsa import SECP256k1, SigningKey, VerifyingKey
from ecdsa.ellipticcurve import INFINITY
from ecdsa.errors import MalformedPointError

from .errors import InvalidKeyError

CURVE_ORDER = SECP256k1.order
GENERATOR = SECP256k1.generator


# -------------------------
# Hashes
# -------------------------

def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def hash256(data: bytes) -> bytes:
    return sha256(sha256(data))


def hash160(data: bytes) -> bytes:
    return RIPEMD160.new(sha256(data)).digest()


def hmac_sha512(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha512).digest()


def pbkdf2_sha512(password: bytes, salt: bytes, iterations: int, dklen: int = 64) -> bytes:
    return hashlib.pbkdf2_hmac("sha512", password, salt, iterations, dklen=dklen)


# -------------------------
# secp256k1
# -------------------------

def ser32(i: int) -> bytes:
    return i.to_bytes(4, "big")


def ser256(i: int) -> bytes:
    return i.to_bytes(32, "big")


def parse256(b: bytes) -> int:
    return int.from_bytes(b, "big")


def is_valid_scalar(k: int) -> bool:
    return 0 < k < CURVE_ORDER


def scalar_multiply_generator(k: int):
    return GENERATOR * k


def add_points(p1, p2):
    return p1 + p2


def is_infinity(point) -> bool:
    return point == INFINITY


def compress_point(point) -> bytes:
    if is_infinity(point):
        raise InvalidKeyError("point at infinity has no encoding")
    prefix = b"\x03" if point.y() & 1 else b"\x02"
    return prefix + ser256(point.x())


def decompress_point(data: bytes):
    """33-byte compressed encoding -> curve point."""
    if len(data) != 33 or data[0] not in (2, 3):
        raise InvalidKeyError("public key must be 33 bytes starting with 0x02 or 0x03")
    try:
        vk = VerifyingKey.from_string(data, curve=SECP256k1)
    except MalformedPointError as exc:
        raise InvalidKeyError(f"public key is not on secp256k1: {exc}") from None
    return vk.pubkey.point


def point_from_priv(priv_bytes: bytes) -> bytes:
    """32-byte private scalar -> 33-byte compressed public key."""
    sk = SigningKey.from_string(priv_bytes, curve=SECP256k1)
    return sk.get_verifying_key().to_string("compressed")
