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

logger = logging.getLogger(__name__)

NETWORK = "testnet"
networks = {"mainnet", "testnet", "regtest"}


def setup(network: str = "testnet") -> str:
    """Setup the library with the specified network.

    The network selects the version prefixes used when decoding and encoding
    private keys and addresses.

    Args:
        network: The network to use (mainnet, testnet, regtest)

    Raises:
        ValueError: if the network is not supported
    """
    global NETWORK
    if network not in networks:
        raise ValueError(f"Unsupported network: {network}")
    NETWORK = network
    logger.debug("network set to %s", NETWORK)
    return NETWORK

def get_network() -> str:
    global NETWORK
    return NETWORK

def is_mainnet() -> bool:
    global NETWORK
    if NETWORK == "mainnet":
        return True
    else:
        return False

def is_testnet() -> bool:
    global NETWORK
    if NETWORK == "testnet":
        return True
    else:
        return False

def is_regtest() -> bool:
    global NETWORK
    if NETWORK == "regtest":
        return True
    else:
        return False
