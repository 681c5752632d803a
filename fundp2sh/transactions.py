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

import logging
import re
import struct
from typing import Union

from fundp2sh.constants import (
    DEFAULT_TX_LOCKTIME,
    DEFAULT_TX_SEQUENCE,
    DEFAULT_TX_VERSION,
    DEFAULT_TXOUT_INDEX,
    MAX_SATOSHIS,
    TX_INPUT_COUNT,
    TX_OUTPUT_COUNT,
    TXID_SIZE,
)
from fundp2sh.errors import MalformedInputError
from fundp2sh.script import Script
from fundp2sh.utils import b_to_h, h_to_b, hash256, prepend_length_byte, reverse_bytes

logger = logging.getLogger(__name__)

HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def _script_to_bytes(script: Union[Script, bytes]) -> bytes:
    if isinstance(script, Script):
        return script.to_bytes()
    return bytes(script)


def txid_to_bytes(txid: str) -> bytes:
    """Decodes a txid hex string (as displayed by tools) into its 32 bytes

    Raises
    ------
    MalformedInputError
        if txid is not the hex encoding of exactly 32 bytes
    """
    if not isinstance(txid, str) or len(txid) != 2 * TXID_SIZE:
        raise MalformedInputError(
            f"Input transaction id must be {2 * TXID_SIZE} hex characters: {txid!r}"
        )

    # bytes.fromhex skips whitespace so the characters are checked first
    if not HEX_DIGITS.fullmatch(txid):
        raise MalformedInputError(f"Input transaction id is not hex: {txid!r}")

    return h_to_b(txid)


class TxInput:
    """Represents the transaction input, the UTXO being spent.

    Attributes
    ----------
    txid : str
        the transaction id as a hex string (as displayed by tools)
    txout_index : int
        the index of the UTXO that we want to spend
    script_sig : Script or bytes
        the script that satisfies the locking conditions (aka unlocking
        script); before signing it is temporarily the locking script of the
        UTXO
    sequence : bytes
        the input sequence

    Methods
    -------
    to_bytes()
        serializes TxInput to bytes
    copy()
        creates a copy of the object (classmethod)
    """

    def __init__(
        self,
        txid: str,
        txout_index: int = DEFAULT_TXOUT_INDEX,
        script_sig: Union[Script, bytes] = b"",
        sequence: bytes = DEFAULT_TX_SEQUENCE,
    ) -> None:
        """See TxInput description"""

        # expected in the format used for displaying Bitcoin hashes
        self.txid = txid
        self.txout_index = txout_index
        self.script_sig = script_sig
        self.sequence = sequence

    def to_bytes(self) -> bytes:
        """Serializes to bytes

        Raises
        ------
        MalformedInputError
            if the txid is not 32 bytes of hex
        LengthOverflowError
            if the script sig is longer than 255 bytes
        """

        # Hashes are displayed in reverse byte order than the one used inside
        # a transaction so we reverse the txid for the outpoint
        # - note that python's struct uses little-endian by default
        txid_bytes = reverse_bytes(txid_to_bytes(self.txid))
        txout_bytes = struct.pack("<L", self.txout_index)

        data = (
            txid_bytes
            + txout_bytes
            + prepend_length_byte(_script_to_bytes(self.script_sig))
            + self.sequence
        )
        return data

    def __str__(self) -> str:
        return str(
            {
                "txid": self.txid,
                "txout_index": self.txout_index,
                "script_sig": b_to_h(_script_to_bytes(self.script_sig)),
                "sequence": self.sequence.hex(),
            }
        )

    def __repr__(self) -> str:
        return self.__str__()

    @classmethod
    def copy(cls, txin: "TxInput") -> "TxInput":
        """Copy of TxInput"""

        return cls(txin.txid, txin.txout_index, txin.script_sig, txin.sequence)


class TxOutput:
    """Represents the transaction output, the funded destination

    Attributes
    ----------
    amount : int
        the value we want to send to this output in satoshis
    script_pubkey : Script or bytes
        the script that will lock this amount

    Methods
    -------
    to_bytes()
        serializes TxOutput to bytes
    copy()
        creates a copy of the object (classmethod)
    """

    def __init__(self, amount: int, script_pubkey: Union[Script, bytes]) -> None:
        """See TxOutput description"""

        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError("Amount needs to be in satoshis as an integer")

        self.amount = amount
        self.script_pubkey = script_pubkey

    def to_bytes(self) -> bytes:
        """Serializes to bytes

        Raises
        ------
        ValueError
            if the amount does not fit in 64 bits unsigned
        LengthOverflowError
            if the script pubkey is longer than 255 bytes
        """
        if self.amount < 0 or self.amount > MAX_SATOSHIS:
            raise ValueError(f"Amount must fit in 64 bits unsigned: {self.amount}")

        amount_bytes = struct.pack("<Q", self.amount)
        return amount_bytes + prepend_length_byte(_script_to_bytes(self.script_pubkey))

    def __str__(self) -> str:
        return str(
            {
                "amount": self.amount,
                "script_pubkey": b_to_h(_script_to_bytes(self.script_pubkey)),
            }
        )

    def __repr__(self) -> str:
        return self.__str__()

    @classmethod
    def copy(cls, txout: "TxOutput") -> "TxOutput":
        """Copy of TxOutput"""

        return cls(txout.amount, txout.script_pubkey)


class Transaction:
    """Represents a transaction with exactly one input and one output

    Attributes
    ----------
    txin : TxInput
        the input (UTXO) being spent
    txout : TxOutput
        the output being funded
    version : bytes
        The transaction version (4 bytes, little-endian)
    locktime : bytes
        The transaction's locktime parameter (4 bytes, little-endian)

    Methods
    -------
    to_bytes()
        Serializes Transaction to bytes
    to_hex()
        converts result of to_bytes to hexadecimal string
    serialize()
        converts result of to_bytes to hexadecimal string
    from_raw()
        Instantiates a Transaction from serialized raw data (staticmethod)
    get_txid()
        Calculates txid and returns it
    get_size()
        Calculates the tx size
    copy()
        creates a copy of the object (classmethod)
    """

    def __init__(
        self,
        txin: TxInput,
        txout: TxOutput,
        version: bytes = DEFAULT_TX_VERSION,
        locktime: bytes = DEFAULT_TX_LOCKTIME,
    ) -> None:
        """See Transaction description"""

        self.txin = txin
        self.txout = txout
        self.version = version
        self.locktime = locktime

    def to_bytes(self) -> bytes:
        """Serializes the transaction to bytes

        |  version | 01 | txin | 01 | txout | locktime
        """
        data = (
            self.version
            + bytes([TX_INPUT_COUNT])
            + self.txin.to_bytes()
            + bytes([TX_OUTPUT_COUNT])
            + self.txout.to_bytes()
            + self.locktime
        )
        return data

    def to_hex(self) -> str:
        """Serializes transaction to hex string"""
        return b_to_h(self.to_bytes())

    def serialize(self) -> str:
        """Alias for to_hex() - serializes transaction to hex string"""
        return self.to_hex()

    def get_txid(self) -> str:
        """Calculates the transaction id (txid) and returns it"""
        # double hash and convert to the display (reversed) byte order
        return b_to_h(reverse_bytes(hash256(self.to_bytes())))

    def get_size(self) -> int:
        """Calculates the transaction size in bytes"""
        return len(self.to_bytes())

    @staticmethod
    def from_raw(rawtx: Union[str, bytes]) -> "Transaction":
        """
        Imports a single input, single output Transaction from raw bytes or
        hexadecimal data.

        Raises
        ------
        MalformedInputError
            if the data is not hex, is truncated, has trailing data or does not
            have exactly one input and one output
        """
        if isinstance(rawtx, str):
            try:
                rawtx = h_to_b(rawtx)
            except ValueError as e:
                raise MalformedInputError(f"Raw transaction is not hex: {e}") from e

        try:
            version = rawtx[0:4]
            cursor = 4

            if rawtx[cursor] != TX_INPUT_COUNT:
                raise MalformedInputError(
                    f"Expected {TX_INPUT_COUNT} input, got {rawtx[cursor]}"
                )
            cursor += 1

            # outpoint: reversed txid and output index
            txid, txout_index = struct.unpack_from("<32sI", rawtx, cursor)
            cursor += 36

            script_sig_size = rawtx[cursor]
            cursor += 1
            script_sig = rawtx[cursor : cursor + script_sig_size]
            cursor += script_sig_size

            (sequence,) = struct.unpack_from("<4s", rawtx, cursor)
            cursor += 4

            if rawtx[cursor] != TX_OUTPUT_COUNT:
                raise MalformedInputError(
                    f"Expected {TX_OUTPUT_COUNT} output, got {rawtx[cursor]}"
                )
            cursor += 1

            (amount,) = struct.unpack_from("<Q", rawtx, cursor)
            cursor += 8

            script_pubkey_size = rawtx[cursor]
            cursor += 1
            script_pubkey = rawtx[cursor : cursor + script_pubkey_size]
            cursor += script_pubkey_size

            (locktime,) = struct.unpack_from("<4s", rawtx, cursor)
            cursor += 4
        except (IndexError, struct.error) as e:
            raise MalformedInputError("Raw transaction is truncated") from e

        if len(script_sig) != script_sig_size or len(script_pubkey) != script_pubkey_size:
            raise MalformedInputError("Raw transaction is truncated")
        if cursor != len(rawtx):
            raise MalformedInputError(
                f"Raw transaction has {len(rawtx) - cursor} unexpected trailing bytes"
            )

        return Transaction(
            TxInput(b_to_h(reverse_bytes(txid)), txout_index, script_sig, sequence),
            TxOutput(amount, script_pubkey),
            version=version,
            locktime=locktime,
        )

    def __str__(self) -> str:
        return str(
            {
                "txin": self.txin,
                "txout": self.txout,
                "locktime": self.locktime.hex(),
                "version": self.version.hex(),
            }
        )

    def __repr__(self) -> str:
        return self.__str__()

    @classmethod
    def copy(cls, tx: "Transaction") -> "Transaction":
        """Copy of Transaction"""

        return cls(
            TxInput.copy(tx.txin), TxOutput.copy(tx.txout), tx.version, tx.locktime
        )


def create_raw_transaction(
    input_txid: str,
    satoshis: int,
    script_sig: Union[Script, bytes],
    script_pubkey: Union[Script, bytes],
    version: bytes = DEFAULT_TX_VERSION,
) -> bytes:
    """Assembles the raw transaction that spends output 0 of input_txid and
    sends satoshis to script_pubkey

    script_sig is either the final unlocking script or, before signing, the
    locking script of the output being spent.
    """
    tx = Transaction(
        TxInput(input_txid, DEFAULT_TXOUT_INDEX, script_sig),
        TxOutput(satoshis, script_pubkey),
        version=version,
    )
    raw = tx.to_bytes()
    logger.debug("assembled raw transaction of %d bytes", len(raw))
    return raw
