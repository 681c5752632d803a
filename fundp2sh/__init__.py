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

__version__ = "0.1.0"

from fundp2sh.setup import setup, get_network

from fundp2sh.errors import (
    FundP2shError,
    DecodeError,
    MalformedInputError,
    KeyDecodeError,
    ScriptBuildError,
    KeyDerivationError,
    SigningError,
    LengthOverflowError,
)

from fundp2sh.keys import (
    PrivateKey,
    PublicKey,
    Address,
    P2pkhAddress,
    P2shAddress,
)

from fundp2sh.script import Script

from fundp2sh.transactions import (
    Transaction,
    TxInput,
    TxOutput,
    create_raw_transaction,
)

from fundp2sh.signing import sign_raw_transaction

from fundp2sh.funding import UnsignedTransaction, fund_p2sh

__all__ = [
    'setup',
    'get_network',
    'FundP2shError',
    'DecodeError',
    'MalformedInputError',
    'KeyDecodeError',
    'ScriptBuildError',
    'KeyDerivationError',
    'SigningError',
    'LengthOverflowError',
    'PrivateKey',
    'PublicKey',
    'Address',
    'P2pkhAddress',
    'P2shAddress',
    'Script',
    'Transaction',
    'TxInput',
    'TxOutput',
    'create_raw_transaction',
    'sign_raw_transaction',
    'UnsignedTransaction',
    'fund_p2sh',
]
