# Copyright (C) 2018-2025 The fund-p2sh developers
#
# This file is part of fund-p2sh
#
# It is subject to the license terms in the LICENSE file found in the top-level
# directory of this distribution.
#
# No part of fund-p2sh, including this file, may be copied, modified,
# propagated, or distributed except according to the terms contained in the
# LICENSE file.

NETWORK_WIF_PREFIXES = {
    "mainnet": b"\x80",
    "testnet": b"\xef",
    "regtest": b"\xef",
}

NETWORK_P2PKH_PREFIXES = {
    "mainnet": b"\x00",
    "testnet": b"\x6f",
    "regtest": b"\x6f",
}

NETWORK_P2SH_PREFIXES = {
    "mainnet": b"\x05",
    "testnet": b"\xc4",
    "regtest": b"\xc4",
}


# Constants for address types
P2PKH_ADDRESS = "p2pkh"
P2SH_ADDRESS = "p2sh"


# Constants related to transaction signature types -- only SIGHASH_ALL is
# produced; it is serialized as 4 bytes for the digest and 1 byte in the
# script sig
SIGHASH_ALL = 0x01


# Fixed transaction fields. Only tx version 1 is created by the funding flow
DEFAULT_TX_VERSION = b"\x01\x00\x00\x00"
DEFAULT_TX_LOCKTIME = b"\x00\x00\x00\x00"
DEFAULT_TX_SEQUENCE = b"\xff\xff\xff\xff"

# the funding flow always spends the first output of the referenced tx
DEFAULT_TXOUT_INDEX = 0

# single input and single output
TX_INPUT_COUNT = 1
TX_OUTPUT_COUNT = 1


# Sizes
TXID_SIZE = 32
HASH160_SIZE = 20
PRIVATE_KEY_SIZE = 32

# every variable length field is prefixed by exactly one byte
MAX_LENGTH_PREFIXED_SIZE = 0xFF

MAX_SATOSHIS = 0xFFFFFFFFFFFFFFFF


# Monetary constants
SATOSHIS_PER_BITCOIN = 100000000
