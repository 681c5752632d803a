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

"""secp256k1 operations used when signing a funding transaction.

The curve is only usable inside a Secp256k1Context::

    with Secp256k1Context() as ctx:
        public_key = ctx.derive_public_key(private_key)
        signature = ctx.sign(digest, private_key, nonce)
        assert ctx.verify(digest, signature, public_key)

Leaving the ``with`` block, normally or through an exception, stops the
context and drops every signing key it loaded.
"""

import hashlib
import logging

from ecdsa import (  # type: ignore
    SigningKey,
    VerifyingKey,
    SECP256k1,
    BadSignatureError,
    BadDigestError,
    MalformedPointError,
)
from ecdsa.der import UnexpectedDER  # type: ignore
from ecdsa.ecdsa import RSZeroError  # type: ignore
from ecdsa.rfc6979 import generate_k  # type: ignore
from ecdsa.util import sigencode_der, sigdecode_der  # type: ignore

from fundp2sh.errors import KeyDerivationError, SigningError
from fundp2sh.utils import b_to_i

logger = logging.getLogger(__name__)


def generate_nonce(private_key: bytes, digest: bytes, extra_entropy: bytes = b"") -> int:
    """Returns the ECDSA nonce (k) for signing digest with private_key

    Nonces are derived deterministically as specified in RFC6979 so the same
    (key, digest) pair always gets the same nonce and distinct digests never
    share one. extra_entropy is mixed in to get a different nonce for the
    same digest, e.g. when looking for a low R value.
    """
    return generate_k(
        SECP256k1.order,
        b_to_i(private_key),
        hashlib.sha256,
        digest,
        extra_entropy=extra_entropy,
    )


def _sigencode_der_low_s(r: int, s: int, order: int) -> bytes:
    # make sure that signature complies with Low S standardness rule of
    # BIP62: https://github.com/bitcoin/bips/blob/master/bip-0062.mediawiki
    #
    # (r, order-s) is also a valid signature; only the low one is standard
    if s > order // 2:
        s = order - s
    return sigencode_der(r, s, order)


class Secp256k1Context:
    """A started secp256k1 context.

    Attributes
    ----------
    started : bool
        whether the context can currently be used

    Methods
    -------
    start()
        starts the context (also called when entering a with block)
    stop()
        stops the context and releases the loaded keys (also called when
        leaving a with block)
    derive_public_key(private_key, compressed=False)
        returns the SEC encoded public key of a 32 byte private key
    sign(digest, private_key, nonce)
        signs a 32 byte digest and returns the DER encoded signature
    verify(digest, signature, public_key)
        checks a DER encoded signature against a digest and public key
    """

    def __init__(self) -> None:
        self.started = False
        self._signing_keys: dict[bytes, SigningKey] = {}

    def start(self) -> "Secp256k1Context":
        if self.started:
            raise RuntimeError("secp256k1 context is already started")
        self.started = True
        logger.debug("secp256k1 context started")
        return self

    def stop(self) -> None:
        self._signing_keys.clear()
        if self.started:
            self.started = False
            logger.debug("secp256k1 context stopped")

    def __enter__(self) -> "Secp256k1Context":
        return self.start()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()

    def _ensure_started(self) -> None:
        if not self.started:
            raise RuntimeError("secp256k1 context is not started")

    def _signing_key(self, private_key: bytes) -> SigningKey:
        signing_key = self._signing_keys.get(private_key)
        if signing_key is None:
            try:
                signing_key = SigningKey.from_string(private_key, curve=SECP256k1)
            except MalformedPointError as e:
                raise KeyDerivationError(
                    f"Failed to convert private key to public key: {e}"
                ) from e
            self._signing_keys[private_key] = signing_key
        return signing_key

    def derive_public_key(self, private_key: bytes, compressed: bool = False) -> bytes:
        """Returns the public key in SEC format (65 bytes uncompressed or
        33 bytes compressed)

        Raises
        ------
        KeyDerivationError
            if private_key is not a valid secp256k1 secret
        """
        self._ensure_started()
        verifying_key = self._signing_key(private_key).get_verifying_key()
        encoding = "compressed" if compressed else "uncompressed"
        return verifying_key.to_string(encoding)

    def sign(self, digest: bytes, private_key: bytes, nonce: int) -> bytes:
        """Signs digest with private_key using nonce as k

        The returned signature is DER encoded with a low S value; it does not
        include the sighash byte.

        Raises
        ------
        SigningError
            if the nonce is invalid for this digest
        """
        self._ensure_started()
        signing_key = self._signing_key(private_key)
        try:
            return signing_key.sign_digest(
                digest, sigencode=_sigencode_der_low_s, k=nonce
            )
        except (RSZeroError, BadDigestError) as e:
            raise SigningError(f"Failed to sign transaction: {e}") from e

    def verify(self, digest: bytes, signature: bytes, public_key: bytes) -> bool:
        """Returns True if the DER signature is valid for digest and public_key"""
        self._ensure_started()
        try:
            verifying_key = VerifyingKey.from_string(public_key, curve=SECP256k1)
            return verifying_key.verify_digest(
                signature, digest, sigdecode=sigdecode_der
            )
        except (BadSignatureError, BadDigestError, MalformedPointError, UnexpectedDER):
            return False
