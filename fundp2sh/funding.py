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
import struct
from typing import Union

from fundp2sh.constants import DEFAULT_TX_VERSION, SIGHASH_ALL
from fundp2sh.keys import P2pkhAddress, P2shAddress, PrivateKey
from fundp2sh.script import (
    Script,
    create_p2pkh_script_pub_key,
    create_p2sh_script_pub_key,
)
from fundp2sh.signing import sign_raw_transaction
from fundp2sh.transactions import Transaction, create_raw_transaction
from fundp2sh.utils import h_to_b, hash256

logger = logging.getLogger(__name__)


class UnsignedTransaction:
    """A funding transaction that has not been signed yet.

    Attributes
    ----------
    input_txid : str
        the id of the transaction whose output 0 is spent
    satoshis : int
        the amount sent to the destination
    spent_script_pubkey : Script or bytes
        the P2PKH locking script of the output being spent
    script_pubkey : Script or bytes
        the locking script of the destination
    version : bytes
        the transaction version (default 1)

    Methods
    -------
    to_bytes()
        the transaction with the spent locking script as script_sig
    for_signing()
        to_bytes() followed by the 4 byte sighash type
    get_transaction_digest()
        the double SHA-256 that is signed
    sign(private_key, compressed=False)
        returns the signed Transaction
    """

    def __init__(
        self,
        input_txid: str,
        satoshis: int,
        spent_script_pubkey: Union[Script, bytes],
        script_pubkey: Union[Script, bytes],
        version: bytes = DEFAULT_TX_VERSION,
    ) -> None:
        self.input_txid = input_txid
        self.satoshis = satoshis
        self.spent_script_pubkey = spent_script_pubkey
        self.script_pubkey = script_pubkey
        self.version = version

    def to_bytes(self) -> bytes:
        return create_raw_transaction(
            self.input_txid,
            self.satoshis,
            self.spent_script_pubkey,
            self.script_pubkey,
            version=self.version,
        )

    def for_signing(self, sighash: int = SIGHASH_ALL) -> bytes:
        # the sighash type is appended as 4 bytes here but as a single byte
        # after the signature in the script_sig
        return self.to_bytes() + struct.pack("<I", sighash)

    def get_transaction_digest(self) -> bytes:
        return hash256(self.for_signing())

    def sign(
        self, private_key: Union[str, PrivateKey], compressed: bool = False
    ) -> Transaction:
        """Signs the input and returns the final Transaction"""
        raw = sign_raw_transaction(
            self.for_signing(),
            private_key,
            self.script_pubkey,
            self.input_txid,
            self.satoshis,
            compressed=compressed,
            version=self.version,
        )
        return Transaction.from_raw(raw)


def fund_p2sh(
    private_key: str,
    public_key_address: str,
    input_txid: str,
    satoshis: int,
    destination: str,
) -> Transaction:
    """Spends output 0 of input_txid, locked to public_key_address, by sending
    satoshis to the P2SH destination address

    The public key derived from private_key is used uncompressed.

    Raises
    ------
    DecodeError
        if an address, the txid or the private key cannot be decoded
    FundP2shError
        for any other failure while building or signing the transaction
    """
    key = PrivateKey.from_wif(private_key)
    source = P2pkhAddress.from_address(public_key_address)
    target = P2shAddress.from_address(destination)

    derived = key.get_public_key().get_address(compressed=False)
    if derived != source:
        logger.warning(
            "private key corresponds to %s, not to the spent address %s",
            derived.to_string(),
            source.to_string(),
        )
        if key.compressed:
            logger.warning(
                "private key was given as compressed WIF but the uncompressed "
                "public key is used; funds at the compressed key's address %s "
                "cannot be spent by this transaction",
                key.get_public_key().get_address(compressed=True).to_string(),
            )

    unsigned = UnsignedTransaction(
        input_txid,
        satoshis,
        create_p2pkh_script_pub_key(h_to_b(source.to_hash160())),
        create_p2sh_script_pub_key(h_to_b(target.to_hash160())),
    )
    logger.debug("transaction digest %s", unsigned.get_transaction_digest().hex())

    tx = unsigned.sign(key)
    logger.info("signed transaction %s", tx.get_txid())
    return tx
