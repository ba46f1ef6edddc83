"""
Segregated-witness addresses (BIP173).

An address packs (hrp, witness version, witness program): the version is the
first 5-bit symbol, the program follows regrouped from bytes into 5-bit
symbols.
"""

import logging
from dataclasses import dataclass, field

from . import bech32
from .bech32 import Encoding
from .errors import (
    InvalidLengthError,
    InvalidPrefixError,
    InvalidProgramLengthError,
    InvalidWitnessVersionError,
    UnknownNetworkError,
    WalletCodecError,
)
from .networks import NETWORKS, Network, get_network

log = logging.getLogger(__name__)

MAX_WITNESS_VERSION = 16
MIN_PROGRAM_LENGTH = 2
MAX_PROGRAM_LENGTH = 40
V0_PROGRAM_LENGTHS = (20, 32)  # P2WPKH, P2WSH


@dataclass(frozen=True)
class WitnessAddress:
    hrp: str
    version: int
    program: bytes

    def encode(self, encoding: Encoding = Encoding.BECH32) -> str:
        return encode_address(self.hrp, self.version, self.program, encoding)


def _check_program(version: int, program: bytes) -> None:
    if not 0 <= version <= MAX_WITNESS_VERSION:
        raise InvalidWitnessVersionError(f"witness version {version} out of range 0-{MAX_WITNESS_VERSION}")
    if not MIN_PROGRAM_LENGTH <= len(program) <= MAX_PROGRAM_LENGTH:
        raise InvalidProgramLengthError(f"witness program of {len(program)} bytes")
    if version == 0 and len(program) not in V0_PROGRAM_LENGTHS:
        raise InvalidProgramLengthError(f"version 0 witness program must be 20 or 32 bytes, got {len(program)}")


def encode_address(hrp: str, version: int, program: bytes, encoding: Encoding = Encoding.BECH32) -> str:
    program = bytes(program)
    _check_program(version, program)
    data = [version] + bech32.convertbits(program, 8, 5)
    return bech32.encode(hrp, data, encoding)


def decode_address(address: str, hrp: str | None = None, encoding: Encoding | None = Encoding.BECH32) -> WitnessAddress:
    """
    Decode and validate a witness address.

    hrp: expected prefix (case-insensitive); None accepts any
    encoding: required checksum constant; None accepts either
    """
    got_hrp, data = bech32.decode(address, encoding)
    if hrp is not None and got_hrp != hrp.lower():
        raise InvalidPrefixError(got_hrp, hrp.lower())
    if not data:
        raise InvalidLengthError("address carries no witness version")

    version = data[0]
    if version > MAX_WITNESS_VERSION:
        raise InvalidWitnessVersionError(f"witness version {version} out of range 0-{MAX_WITNESS_VERSION}")
    program = bytes(bech32.convertbits(data[1:], 5, 8, pad=False))
    _check_program(version, program)
    return WitnessAddress(got_hrp, version, program)


# -------------------------
# Lookup across networks
# -------------------------

@dataclass(frozen=True)
class AddressLookup:
    """Outcome of matching one address against several networks."""

    address: WitnessAddress | None = None
    network: Network | None = None
    failures: tuple = field(default=())

    @property
    def ok(self) -> bool:
        return self.address is not None

    def unwrap(self) -> WitnessAddress:
        if self.address is None:
            if not self.failures:
                raise UnknownNetworkError("no candidate networks")
            # every attempt shares the decode error, or each is a prefix mismatch
            raise self.failures[0][1]
        return self.address


def lookup(address: str, networks=None, encoding: Encoding | None = Encoding.BECH32) -> AddressLookup:
    """
    Match an address against candidate networks (default: all known).

    Returns the first network whose prefix matches along with the decoded
    address, or every (network name, error) pair when none does.
    """
    candidates = [get_network(n) for n in (networks if networks is not None else NETWORKS.values())]
    try:
        decoded = decode_address(address, None, encoding)
    except WalletCodecError as exc:
        return AddressLookup(failures=tuple((n.name, exc) for n in candidates))

    failures = []
    for network in candidates:
        if decoded.hrp == network.hrp:
            log.debug("address matched network %s", network.name)
            return AddressLookup(decoded, network, tuple(failures))
        failures.append((network.name, InvalidPrefixError(decoded.hrp, network.hrp)))
    return AddressLookup(failures=tuple(failures))
