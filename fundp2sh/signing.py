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

"""Signs the single input of a funding transaction.

The signature is computed over the transaction assembled with the spent
output's locking script in place of the script_sig, followed by the 4 byte
sighash type. The final transaction is then assembled again with the
unlocking script that carries that signature.
"""

import logging
from typing import Union

from fundp2sh.constants import DEFAULT_TX_VERSION, SIGHASH_ALL
from fundp2sh.curve import Secp256k1Context, generate_nonce
from fundp2sh.errors import SigningError
from fundp2sh.keys import PrivateKey
from fundp2sh.script import Script
from fundp2sh.transactions import create_raw_transaction
from fundp2sh.utils import hash256, i_to_b32, prepend_length_byte

logger = logging.getLogger(__name__)


def _to_private_key(private_key: Union[str, PrivateKey]) -> PrivateKey:
    if isinstance(private_key, PrivateKey):
        return private_key
    return PrivateKey.from_wif(private_key)


def create_signature(
    raw_transaction: bytes,
    private_key: Union[str, PrivateKey],
    compressed: bool = False,
) -> tuple[bytes, bytes]:
    """Signs the double SHA-256 of raw_transaction

    raw_transaction must already end with the 4 byte sighash type.

    Parameters
    ----------
    raw_transaction : bytes
        the transaction bytes that are signed
    private_key : str or PrivateKey
        the signing key, WIF encoded if a string
    compressed : bool
        whether the returned public key is SEC compressed (default False)

    Returns
    -------
    tuple
        (DER signature without the sighash byte, SEC public key)

    Raises
    ------
    KeyDecodeError
        if the WIF cannot be decoded
    KeyDerivationError
        if the key is not a valid secp256k1 secret
    SigningError
        if signing fails or the signature does not verify
    """
    key = _to_private_key(private_key).to_bytes()
    digest = hash256(raw_transaction)

    with Secp256k1Context() as ctx:
        public_key = ctx.derive_public_key(key, compressed=compressed)
        logger.debug("derived public key %s", public_key.hex())

        signature = ctx.sign(digest, key, generate_nonce(key, digest))

        # make sure that signature complies with Low R standardness; retry
        # with extra entropy until the DER encoded R is 32 bytes
        attempt = 1
        while signature[3] == 33:
            nonce = generate_nonce(key, digest, extra_entropy=i_to_b32(attempt))
            signature = ctx.sign(digest, key, nonce)
            attempt += 1

        if not ctx.verify(digest, signature, public_key):
            raise SigningError("Signature does not verify against the public key")

    logger.debug("signed digest %s after %d attempt(s)", digest.hex(), attempt)
    return signature, public_key


def create_script_sig(
    signature: bytes, public_key: bytes, sighash: int = SIGHASH_ALL
) -> bytes:
    """Packages a signature and public key into a P2PKH unlocking script

    |  len(signature) + 1 | signature | sighash | len(public_key) | public_key
    """
    return prepend_length_byte(signature + bytes([sighash])) + prepend_length_byte(
        public_key
    )


def sign_raw_transaction(
    raw_transaction: bytes,
    private_key: Union[str, PrivateKey],
    script_pubkey: Union[Script, bytes],
    input_txid: str,
    satoshis: int,
    compressed: bool = False,
    version: bytes = DEFAULT_TX_VERSION,
) -> bytes:
    """Signs raw_transaction and returns the final serialized transaction

    raw_transaction is the pre-signing form, i.e. the transaction assembled
    with the spent locking script as script_sig followed by the sighash type.
    The returned transaction spends output 0 of input_txid and sends satoshis
    to script_pubkey.
    """
    signature, public_key = create_signature(raw_transaction, private_key, compressed)
    script_sig = create_script_sig(signature, public_key)
    logger.debug("script_sig is %d bytes", len(script_sig))

    return create_raw_transaction(
        input_txid, satoshis, script_sig, script_pubkey, version=version
    )
