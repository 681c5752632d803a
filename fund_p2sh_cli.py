#!/usr/bin/env python3
"""
Fund P2SH CLI - Command line interface for fund-p2sh

Builds and signs a transaction that spends a P2PKH output and sends the funds
to a P2SH address. The signed transaction is printed as hex on stdout, ready
to be broadcast; diagnostics go to stderr.
"""

import argparse
import json
import logging
import sys

from fundp2sh.constants import SATOSHIS_PER_BITCOIN
from fundp2sh.errors import FundP2shError
from fundp2sh.funding import fund_p2sh
from fundp2sh.keys import P2shAddress
from fundp2sh.script import Script, create_multisig_redeem_script
from fundp2sh.setup import setup
from fundp2sh.transactions import Transaction

logger = logging.getLogger("fund_p2sh_cli")


def fund_transaction(args):
    """Create and sign the funding transaction"""
    try:
        tx = fund_p2sh(
            args.private_key,
            args.public_key,
            args.input_transaction,
            args.satoshis,
            args.destination,
        )
    except (ValueError, TypeError) as e:
        # FundP2shError is a ValueError; TypeError comes from a bad amount
        logger.error("Error creating transaction: %s", e)
        return 1

    print(tx.to_hex())
    return 0


def decode_transaction(args):
    """Decode a raw single input, single output transaction"""
    try:
        tx = Transaction.from_raw(args.hex)
        script_pubkey = Script.from_raw(tx.txout.script_pubkey)
    except FundP2shError as e:
        logger.error("Error decoding transaction: %s", e)
        return 1

    result = {
        "txid": tx.get_txid(),
        "version": int.from_bytes(tx.version, "little"),
        "locktime": int.from_bytes(tx.locktime, "little"),
        "input": {
            "txid": tx.txin.txid,
            "vout": tx.txin.txout_index,
            "script_sig": tx.txin.script_sig.hex(),
            "sequence": int.from_bytes(tx.txin.sequence, "little"),
        },
        "output": {
            "value": tx.txout.amount,
            "btc": tx.txout.amount / SATOSHIS_PER_BITCOIN,
            "script_pubkey": script_pubkey.to_hex(),
            "asm": script_pubkey.to_asm(),
            "type": script_pubkey.get_script_type(),
        },
        "size": tx.get_size(),
    }
    print(json.dumps(result, indent=2))
    return 0


def multisig_address(args):
    """Create an M-of-N multisig redeem script and its P2SH address"""
    try:
        redeem_script = create_multisig_redeem_script(args.required, args.public_keys)
        address = P2shAddress.from_script(redeem_script)
    except FundP2shError as e:
        logger.error("Error creating multisig script: %s", e)
        return 1

    result = {
        "address": address.to_string(),
        "redeem_script": redeem_script.to_hex(),
        "asm": redeem_script.to_asm(),
        "script_pubkey": address.to_script_pub_key().to_hex(),
    }
    print(json.dumps(result, indent=2))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description="Fund P2SH CLI - Create a signed P2PKH to P2SH transaction"
    )

    # Network options
    parser.add_argument(
        "--network",
        choices=["mainnet", "testnet", "regtest"],
        default="testnet",
        help="Bitcoin network to use",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log debug messages to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Fund command
    fund_parser = subparsers.add_parser(
        "fund", help="Create a signed transaction funding a P2SH address"
    )
    fund_parser.add_argument(
        "--private-key", required=True, help="WIF private key of the funds"
    )
    fund_parser.add_argument(
        "--public-key", required=True, help="P2PKH address that holds the funds"
    )
    fund_parser.add_argument(
        "--input-transaction",
        required=True,
        help="id of the transaction whose first output is spent",
    )
    fund_parser.add_argument(
        "--satoshis", required=True, type=int, help="amount to send in satoshis"
    )
    fund_parser.add_argument(
        "--destination", required=True, help="P2SH address to send the funds to"
    )

    # Decode transaction command
    decode_parser = subparsers.add_parser(
        "decode", help="Decode a raw single input, single output transaction"
    )
    decode_parser.add_argument("hex", help="Raw transaction in hexadecimal format")

    # Multisig command
    multisig_parser = subparsers.add_parser(
        "multisig", help="Create an M-of-N multisig P2SH address"
    )
    multisig_parser.add_argument(
        "required", type=int, help="Number of signatures required (M)"
    )
    multisig_parser.add_argument(
        "public_keys", nargs="+", help="Public keys in hex (SEC format)"
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    setup(args.network)

    # Execute the requested command
    if args.command == "fund":
        return fund_transaction(args)
    elif args.command == "decode":
        return decode_transaction(args)
    elif args.command == "multisig":
        return multisig_address(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
