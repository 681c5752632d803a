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

import hashlib

from Crypto.Hash import RIPEMD160

from fundp2sh.constants import MAX_LENGTH_PREFIXED_SIZE
from fundp2sh.errors import LengthOverflowError


def prepend_length_byte(data: bytes) -> bytes:
    """
    Returns the data prefixed with its length as a single byte.

    Only one input and one output are ever serialized so all variable length
    fields use a one byte length; anything longer than 255 bytes cannot be
    represented.
    """
    if len(data) > MAX_LENGTH_PREFIXED_SIZE:
        raise LengthOverflowError(
            "Data of %d bytes does not fit a one byte length prefix" % len(data)
        )
    return bytes([len(data)]) + data


def reverse_bytes(b: bytes) -> bytes:
    """
    Reverses the byte order, e.g. to convert a txid between display
    (big-endian) and internal (little-endian) order.
    """
    return b[::-1]


def hash256(b: bytes) -> bytes:
    """Returns SHA-256( SHA-256( b ) ) -- used for tx digests, txids and
    base58check checksums"""
    return hashlib.sha256(hashlib.sha256(b).digest()).digest()


def hash160(b: bytes) -> bytes:
    """Returns RIPEMD-160( SHA-256( b ) ) -- used for addresses"""
    return RIPEMD160.new(hashlib.sha256(b).digest()).digest()


#
# Basic conversions between bytes (b), hexadecimal (h) and integer (i)
# Some were trivial but included for consistency.
#
def b_to_h(b: bytes) -> str:
    """Converts bytes to hexadecimal string"""
    return b.hex()


def h_to_b(h: str) -> bytes:
    """Converts hexadecimal string to bytes"""
    return bytes.fromhex(h)


# to convert hashes and keys to ints we need byteorder BIG...
def b_to_i(b: bytes) -> int:
    """Converts a bytes to a number"""
    return int.from_bytes(b, byteorder="big")


def i_to_b32(i: int) -> bytes:
    """Converts a integer to bytes"""
    return i.to_bytes(32, byteorder="big")
