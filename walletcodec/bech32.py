"""
Checksummed base-32 codec (BIP173, with the BIP350 constant as an option).

A string is <hrp> '1' <data><checksum>, where every data and checksum symbol
is a 5-bit value rendered through CHARSET. The checksum is a BCH code over
GF(32): running the polymod over the expanded hrp, the data and the six
checksum symbols yields the constant of the encoding in use.
"""

import enum
import logging

from .errors import (
    ChecksumMismatchError,
    InvalidCharacterError,
    InvalidLengthError,
    InvalidPaddingError,
)

log = logging.getLogger(__name__)

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHARSET_MAP = {c: i for i, c in enumerate(CHARSET)}

GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)

SEPARATOR = "1"
CHECKSUM_LENGTH = 6
MAX_LENGTH = 90
MAX_HRP_LENGTH = 83


class Encoding(enum.IntEnum):
    """Final xor constant of the checksum."""

    BECH32 = 1
    BECH32M = 0x2BC830A3


# -------------------------
# Checksum
# -------------------------

def polymod(values) -> int:
    chk = 1
    for v in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ v
        for i in range(5):
            if (top >> i) & 1:
                chk ^= GENERATOR[i]
    return chk


def hrp_expand(hrp: str) -> list:
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def create_checksum(hrp: str, data, encoding: Encoding = Encoding.BECH32) -> list:
    values = hrp_expand(hrp) + list(data)
    mod = polymod(values + [0] * CHECKSUM_LENGTH) ^ encoding
    return [(mod >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_LENGTH)]


def verify_checksum(hrp: str, data) -> Encoding | None:
    """Return the encoding whose constant the checksum matches, if any."""
    const = polymod(hrp_expand(hrp) + list(data))
    for encoding in Encoding:
        if const == encoding:
            return encoding
    return None


# -------------------------
# Encode / decode
# -------------------------

def _check_hrp(hrp: str) -> str:
    if not hrp or len(hrp) > MAX_HRP_LENGTH:
        raise InvalidLengthError(f"human-readable part must be 1-{MAX_HRP_LENGTH} characters")
    for ch in hrp:
        if not 33 <= ord(ch) <= 126:
            raise InvalidLengthError(f"human-readable part contains out-of-range character {ch!r}")
    if hrp.lower() != hrp and hrp.upper() != hrp:
        raise InvalidCharacterError("human-readable part mixes upper and lower case")
    return hrp


def encode(hrp: str, data, encoding: Encoding = Encoding.BECH32, *, limit: int = MAX_LENGTH) -> str:
    """
    hrp: human-readable part, all lowercase or all uppercase
    data: sequence of 5-bit values
    returns the checksummed string, uppercase if hrp was uppercase
    """
    _check_hrp(hrp)
    data = list(data)
    for v in data:
        if not 0 <= v < 32:
            raise InvalidCharacterError(f"data value {v} is not a 5-bit value")
    if len(hrp) + 1 + len(data) + CHECKSUM_LENGTH > limit:
        raise InvalidLengthError(f"encoded string would exceed {limit} characters")

    lower = hrp.lower()
    combined = data + create_checksum(lower, data, encoding)
    out = lower + SEPARATOR + "".join(CHARSET[d] for d in combined)
    return out.upper() if hrp != lower else out


def decode_with_encoding(bech: str, encoding: Encoding | None = None, *, limit: int = MAX_LENGTH):
    """
    Decode a checksummed string into (hrp, data, encoding).

    With encoding=None the checksum may match either constant and the matching
    one is reported; otherwise only the requested constant is accepted.
    The returned hrp is lowercase.
    """
    if len(bech) > limit:
        raise InvalidLengthError(f"string exceeds {limit} characters")
    for ch in bech:
        if not 33 <= ord(ch) <= 126:
            raise InvalidCharacterError(f"character {ch!r} out of range")
    if bech.lower() != bech and bech.upper() != bech:
        raise InvalidCharacterError("string mixes upper and lower case")

    bech = bech.lower()
    pos = bech.rfind(SEPARATOR)
    if pos < 1:
        raise InvalidLengthError("missing separator or empty human-readable part")
    if pos + 1 + CHECKSUM_LENGTH > len(bech):
        raise InvalidLengthError("data part shorter than checksum")

    hrp = bech[:pos]
    if len(hrp) > MAX_HRP_LENGTH:
        raise InvalidLengthError(f"human-readable part exceeds {MAX_HRP_LENGTH} characters")
    try:
        data = [CHARSET_MAP[c] for c in bech[pos + 1:]]
    except KeyError as exc:
        raise InvalidCharacterError(f"character {exc.args[0]!r} not in alphabet") from None

    found = verify_checksum(hrp, data)
    if found is None or (encoding is not None and found != encoding):
        raise ChecksumMismatchError(f"invalid checksum for {hrp!r} string")
    log.debug("decoded %s string with hrp %r (%d data symbols)", found.name, hrp, len(data) - CHECKSUM_LENGTH)
    return hrp, data[:-CHECKSUM_LENGTH], found


def decode(bech: str, encoding: Encoding | None = Encoding.BECH32, *, limit: int = MAX_LENGTH):
    """Decode into (hrp, data). Verifies against the base constant unless told otherwise."""
    hrp, data, _ = decode_with_encoding(bech, encoding, limit=limit)
    return hrp, data


# -------------------------
# Regrouping
# -------------------------

def convertbits(data, frombits: int, tobits: int, pad: bool = True) -> list:
    """
    Regroup a sequence of frombits-wide values into tobits-wide values.

    Without pad, leftover bits must number fewer than frombits and be zero,
    otherwise InvalidPaddingError is raised.
    """
    acc = 0
    bits = 0
    ret = []
    maxv = (1 << tobits) - 1
    max_acc = (1 << (frombits + tobits - 1)) - 1
    for value in data:
        if value < 0 or (value >> frombits):
            raise InvalidCharacterError(f"value {value} does not fit in {frombits} bits")
        acc = ((acc << frombits) | value) & max_acc
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            ret.append((acc >> bits) & maxv)
    if pad:
        if bits:
            ret.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits:
        raise InvalidPaddingError(f"{bits} leftover padding bits")
    elif (acc << (tobits - bits)) & maxv:
        raise InvalidPaddingError("non-zero padding bits")
    return ret
