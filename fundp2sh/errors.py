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

"""Errors raised while building and signing a funding transaction.

All of them are fatal: the funding flow is single-shot and any failure aborts
the whole run. They subclass ValueError so that callers catching invalid
input the usual way keep working.
"""


class FundP2shError(ValueError):
    """Base class of all the library's errors"""


class DecodeError(FundP2shError):
    """Hex or base58check data could not be decoded"""


class MalformedInputError(DecodeError):
    """An input transaction id or a raw transaction is malformed"""


class KeyDecodeError(DecodeError):
    """A private key (WIF) could not be decoded"""


class ScriptBuildError(FundP2shError):
    """A script template was given a malformed hash"""


class KeyDerivationError(FundP2shError):
    """The public key could not be derived from the private key"""


class SigningError(FundP2shError):
    """Signing failed or the produced signature did not verify"""


class LengthOverflowError(FundP2shError):
    """A length-prefixed field does not fit in its one byte length prefix"""
