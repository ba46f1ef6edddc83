"""
walletcodec: bech32 witness addresses, BIP39 mnemonics and BIP32 key trees.

    >>> from walletcodec import Mnemonic, ExtendedKey
    >>> m = Mnemonic.from_entropy(bytes(16))
    >>> m.phrase.split()[-1]
    'about'
    >>> ExtendedKey.from_mnemonic(m).derive_path("m/84'/0'/0'/0/0").to_address()[:4]
    'bc1q'
"""

from .bech32 import Encoding
from .errors import (
    ChecksumMismatchError,
    HardenedDerivationError,
    InvalidCharacterError,
    InvalidIndexError,
    InvalidKeyError,
    InvalidLengthError,
    InvalidPaddingError,
    InvalidPathError,
    InvalidPhraseLengthError,
    InvalidPrefixError,
    InvalidProgramLengthError,
    InvalidSeedLengthError,
    InvalidWitnessVersionError,
    UnknownLanguageError,
    UnknownNetworkError,
    UnknownVersionError,
    UnknownWordError,
    WalletCodecError,
)
from .hd import HARDENED, ExtendedKey, hardened, parse_path
from .mnemonic import Mnemonic
from .networks import MAIN, NETWORKS, SIMNET, TESTNET, Network, get_network
from .segwit import AddressLookup, WitnessAddress, decode_address, encode_address, lookup

__version__ = "0.1.0"
