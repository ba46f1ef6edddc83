"""
Command-line front end.

    walletcodec generate --bits 128 --network testnet
    walletcodec restore --phrase "abandon ... about" --path "m/84'/0'/0'/0/3"
    walletcodec derive xprv9s21... "m/0'/1"
    walletcodec encode-address 0 751e76e8199196d454941c45d1b3a323f1433bd6
    walletcodec decode-address bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4
    walletcodec inspect xpub661M...

Run offline: generate and restore print secret material.
"""

import argparse
import logging
import sys

from . import __version__
from .hd import ExtendedKey, format_index
from .mnemonic import ENTROPY_BITS, Mnemonic
from .networks import NETWORKS, get_network
from .segwit import encode_address, lookup
from .wordlist import DEFAULT_LANGUAGE, languages

log = logging.getLogger(__name__)

DEFAULT_PATH = "m/84'/0'/0'/0/0"


def wallet_report(mnemonic: Mnemonic, network: str, path: str) -> dict:
    master = ExtendedKey.from_mnemonic(mnemonic, network)
    child = master.derive_path(path)
    return {
        "mnemonic": mnemonic.phrase,
        "language": mnemonic.language,
        "seed_hex": mnemonic.to_seed().hex(),
        "master_xprv": master.serialize(),
        "master_xpub": master.neuter().serialize(),
        "path": path,
        "child_xprv": child.serialize(),
        "child_xpub": child.neuter().serialize(),
        "child_pub_hex": child.public_key.hex(),
        "address": child.to_address(),
        "wif": child.to_wif(),
    }


def _print_report(out: dict) -> None:
    print("\n=== RESULT ===")
    print("Mnemonic:\n", out["mnemonic"])
    print("Language:", out["language"])
    print("\nSeed (hex):", out["seed_hex"])
    print("\nMaster xprv:", out["master_xprv"])
    print("Master xpub:", out["master_xpub"])
    print(f"\nPath {out['path']}:")
    print("Child xprv:", out["child_xprv"])
    print("Child xpub:", out["child_xpub"])
    print("Child pub (hex):", out["child_pub_hex"])
    print("Address:", out["address"])
    print("WIF (private key):", out["wif"])


def _print_key(key: ExtendedKey) -> None:
    print("Network:", key.network.name)
    print("Type:", "private" if key.private else "public")
    print("Depth:", key.depth)
    print("Parent fingerprint:", key.parent_fingerprint.hex())
    print("Child index:", format_index(key.child_index))
    print("Fingerprint:", key.fingerprint.hex())
    print("Chain code (hex):", key.chain_code.hex())
    print("Public key (hex):", key.public_key.hex())
    print("Address:", key.to_address())
    print("Serialized:", key.serialize())


# -------------------------
# Subcommands
# -------------------------

def cmd_generate(args) -> None:
    mnemonic = Mnemonic.generate(args.bits, args.language, args.passphrase)
    _print_report(wallet_report(mnemonic, args.network, args.path))


def cmd_restore(args) -> None:
    mnemonic = Mnemonic.from_phrase(args.phrase, args.language, args.passphrase)
    _print_report(wallet_report(mnemonic, args.network, args.path))


def cmd_derive(args) -> None:
    key = ExtendedKey.parse(args.key).derive_path(args.path)
    _print_key(key)


def cmd_inspect(args) -> None:
    _print_key(ExtendedKey.parse(args.key))


def cmd_encode_address(args) -> None:
    hrp = args.hrp or get_network(args.network).hrp
    print(encode_address(hrp, args.version, bytes.fromhex(args.program)))


def cmd_decode_address(args) -> None:
    result = lookup(args.address, args.network or None)
    decoded = result.unwrap()
    print("Network:", result.network.name)
    print("Prefix:", decoded.hrp)
    print("Witness version:", decoded.version)
    print("Witness program (hex):", decoded.program.hex())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="walletcodec",
        description="BIP39 mnemonics, BIP32 extended keys and bech32 witness addresses",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    def wallet_options(p):
        p.add_argument("--language", default=None, choices=languages(), help="Wordlist language")
        p.add_argument("--passphrase", default="", help="BIP39 passphrase (default empty)")
        p.add_argument("--network", default="main", choices=sorted(NETWORKS), help="Network (default main)")
        p.add_argument("--path", default=DEFAULT_PATH, help=f"Derivation path (default {DEFAULT_PATH})")

    p = sub.add_parser("generate", help="Generate a new mnemonic and derive keys from it")
    p.add_argument("--bits", type=int, default=256, choices=ENTROPY_BITS, help="Entropy bits. Default 256 -> 24 words")
    wallet_options(p)
    p.set_defaults(func=cmd_generate, language=DEFAULT_LANGUAGE)

    p = sub.add_parser("restore", help="Derive keys from an existing mnemonic")
    p.add_argument("--phrase", required=True, help="Mnemonic words, space separated")
    wallet_options(p)
    p.set_defaults(func=cmd_restore)

    p = sub.add_parser("derive", help="Derive a child of a serialized extended key")
    p.add_argument("key", help="xprv/xpub/tprv/tpub string")
    p.add_argument("path", help="Path relative to the key, e.g. 0/5 or m/0'/1")
    p.set_defaults(func=cmd_derive)

    p = sub.add_parser("inspect", help="Show the fields of a serialized extended key")
    p.add_argument("key")
    p.set_defaults(func=cmd_inspect)

    p = sub.add_parser("encode-address", help="Encode a witness program as an address")
    p.add_argument("version", type=int, help="Witness version 0-16")
    p.add_argument("program", help="Witness program (hex)")
    p.add_argument("--hrp", help="Address prefix (default: the network's)")
    p.add_argument("--network", default="main", choices=sorted(NETWORKS))
    p.set_defaults(func=cmd_encode_address)

    p = sub.add_parser("decode-address", help="Decode a witness address")
    p.add_argument("address")
    p.add_argument("--network", action="append", choices=sorted(NETWORKS), help="Candidate network (repeatable; default all)")
    p.set_defaults(func=cmd_decode_address)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    log.debug("running %s", args.command)
    try:
        args.func(args)
    except ValueError as exc:
        # WalletCodecError, or bad hex on the command line
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
