"""Network parameters: address prefixes and key version bytes."""

from dataclasses import dataclass

from .errors import UnknownNetworkError, UnknownVersionError


@dataclass(frozen=True)
class Network:
    name: str
    hrp: str
    xprv: bytes
    xpub: bytes
    wif_prefix: int

    def version(self, private: bool) -> bytes:
        return self.xprv if private else self.xpub


MAIN = Network(
    name="main",
    hrp="bc",
    xprv=bytes.fromhex("0488ade4"),
    xpub=bytes.fromhex("0488b21e"),
    wif_prefix=0x80,
)

TESTNET = Network(
    name="testnet",
    hrp="tb",
    xprv=bytes.fromhex("04358394"),
    xpub=bytes.fromhex("043587cf"),
    wif_prefix=0xEF,
)

SIMNET = Network(
    name="simnet",
    hrp="sb",
    xprv=bytes.fromhex("0420b900"),
    xpub=bytes.fromhex("0420bd3a"),
    wif_prefix=0x64,
)

NETWORKS = {n.name: n for n in (MAIN, TESTNET, SIMNET)}


def get_network(network) -> Network:
    """Accept a Network or its name."""
    if isinstance(network, Network):
        return network
    try:
        return NETWORKS[network]
    except KeyError:
        raise UnknownNetworkError(f"unknown network {network!r}") from None


def from_hrp(hrp: str) -> Network:
    hrp = hrp.lower()
    for network in NETWORKS.values():
        if network.hrp == hrp:
            return network
    raise UnknownNetworkError(f"no network uses address prefix {hrp!r}")


def from_version(version: bytes):
    """Map 4 version bytes to (network, is_private)."""
    for network in NETWORKS.values():
        if version == network.xprv:
            return network, True
        if version == network.xpub:
            return network, False
    raise UnknownVersionError(f"unknown extended key version {version.hex()}")
