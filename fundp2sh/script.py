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

import struct
from typing import Any, Union

from fundp2sh.constants import HASH160_SIZE
from fundp2sh.errors import DecodeError, ScriptBuildError
from fundp2sh.utils import b_to_h, h_to_b, hash160


# Bitcoin's op codes used by the funding scripts. Complete list at:
# https://en.bitcoin.it/wiki/Script
OP_CODES = {
    # constants
    "OP_0": b"\x00",
    "OP_PUSHDATA1": b"\x4c",
    "OP_PUSHDATA2": b"\x4d",
    "OP_1": b"\x51",
    "OP_2": b"\x52",
    "OP_3": b"\x53",
    "OP_4": b"\x54",
    "OP_5": b"\x55",
    "OP_6": b"\x56",
    "OP_7": b"\x57",
    "OP_8": b"\x58",
    "OP_9": b"\x59",
    "OP_10": b"\x5a",
    "OP_11": b"\x5b",
    "OP_12": b"\x5c",
    "OP_13": b"\x5d",
    "OP_14": b"\x5e",
    "OP_15": b"\x5f",
    "OP_16": b"\x60",
    # flow control
    "OP_VERIFY": b"\x69",
    "OP_RETURN": b"\x6a",
    # stack
    "OP_DROP": b"\x75",
    "OP_DUP": b"\x76",
    # bitwise logic
    "OP_EQUAL": b"\x87",
    "OP_EQUALVERIFY": b"\x88",
    # crypto
    "OP_HASH160": b"\xa9",
    "OP_CHECKSIG": b"\xac",
    "OP_CHECKSIGVERIFY": b"\xad",
    "OP_CHECKMULTISIG": b"\xae",
    "OP_CHECKMULTISIGVERIFY": b"\xaf",
}

CODE_OPS = {code: op for op, code in OP_CODES.items()}


class Script:
    """Represents a script in Bitcoin

    A Script contains just a list of OP_CODES and data (hex strings) and also
    knows how to serialize into bytes

    Attributes
    ----------
    script : list
        the list with all the script OP_CODES and data

    Methods
    -------
    to_bytes()
        returns a serialized byte version of the script
    to_hex()
        returns a serialized version of the script in hex
    to_asm()
        returns the human readable form of the script
    get_script()
        returns the list of strings that makes up this script
    from_raw()
        parses a serialized script (staticmethod)
    to_p2sh_script_pub_key()
        converts script to p2sh scriptPubKey (locking script)
    is_p2pkh()
        checks if script is P2PKH (Pay-to-Public-Key-Hash)
    is_p2sh()
        checks if script is P2SH (Pay-to-Script-Hash)
    is_multisig()
        checks if script is a multisig script
    get_script_type()
        determines the type of script

    Raises
    ------
    ValueError
        If string data is too large or integer is negative
    ScriptBuildError
        If string data is not hex
    """

    def __init__(self, script: list[Any]):
        """See Script description"""
        self.script: list[Any] = script

    def _op_push_data(self, data: str) -> bytes:
        """Converts data to appropriate OP_PUSHDATA OP code including length"""
        try:
            data_bytes = h_to_b(data)
        except (ValueError, TypeError) as e:
            raise ScriptBuildError(f"Script data is not hex: {data!r}") from e

        if len(data_bytes) < 0x4C:
            return bytes([len(data_bytes)]) + data_bytes
        elif len(data_bytes) <= 0xFF:
            return b"\x4c" + bytes([len(data_bytes)]) + data_bytes
        elif len(data_bytes) <= 0xFFFF:
            return b"\x4d" + struct.pack("<H", len(data_bytes)) + data_bytes
        else:
            raise ValueError("Data too large. Cannot push into script")

    def to_bytes(self) -> bytes:
        """Converts the script to bytes"""
        script_bytes = b""
        for token in self.script:
            if isinstance(token, int):
                if token < 0 or token > 16:
                    raise ValueError("Only small integers (0-16) can be pushed.")
                script_bytes += OP_CODES["OP_" + str(token)]
            elif token in OP_CODES:
                script_bytes += OP_CODES[token]
            else:
                script_bytes += self._op_push_data(token)
        return script_bytes

    def to_hex(self) -> str:
        """Converts the script to hexadecimal"""
        return b_to_h(self.to_bytes())

    def to_asm(self) -> str:
        """Returns the script's op codes and data separated by spaces"""
        return " ".join(str(token) for token in self.script)

    @staticmethod
    def from_raw(scriptraw: Union[str, bytes]) -> "Script":
        """
        Imports a Script commands list from raw bytes or hexadecimal data

        Raises
        ------
        DecodeError
            if the data is truncated or contains an unknown op code
        """
        if isinstance(scriptraw, str):
            try:
                scriptraw = h_to_b(scriptraw)
            except ValueError as e:
                raise DecodeError(f"Invalid script hex: {e}") from e

        commands: list[Any] = []
        index = 0

        while index < len(scriptraw):
            byte = scriptraw[index]
            index += 1

            # direct pushes hold their length in the op code itself
            if 0x01 <= byte < 0x4C:
                size = byte
            elif byte == 0x4C:
                size = scriptraw[index] if index < len(scriptraw) else 0
                index += 1
            elif byte == 0x4D:
                size = int.from_bytes(scriptraw[index : index + 2], "little")
                index += 2
            elif bytes([byte]) in CODE_OPS:
                commands.append(CODE_OPS[bytes([byte])])
                continue
            else:
                raise DecodeError(f"Unknown op code 0x{byte:02x} in script")

            data = scriptraw[index : index + size]
            if len(data) != size or index > len(scriptraw):
                raise DecodeError("Script data push is truncated")
            commands.append(data.hex())
            index += size

        return Script(commands)

    def get_script(self) -> list[Any]:
        """Returns script as array of strings"""
        return self.script

    def to_p2sh_script_pub_key(self) -> "Script":
        """Converts script to p2sh scriptPubKey (locking script)"""
        return Script(["OP_HASH160", b_to_h(hash160(self.to_bytes())), "OP_EQUAL"])

    def _is_hash160_push(self, token: Any) -> bool:
        return isinstance(token, str) and len(token) == 2 * HASH160_SIZE

    def is_p2pkh(self) -> bool:
        """
        Check if script is P2PKH (Pay-to-Public-Key-Hash).

        P2PKH format: OP_DUP OP_HASH160 <20-byte-key-hash> OP_EQUALVERIFY OP_CHECKSIG
        """
        ops = self.script
        return (len(ops) == 5 and
                ops[0] == "OP_DUP" and
                ops[1] == "OP_HASH160" and
                self._is_hash160_push(ops[2]) and
                ops[3] == "OP_EQUALVERIFY" and
                ops[4] == "OP_CHECKSIG")

    def is_p2sh(self) -> bool:
        """
        Check if script is P2SH (Pay-to-Script-Hash).

        P2SH format: OP_HASH160 <20-byte-script-hash> OP_EQUAL
        """
        ops = self.script
        return (len(ops) == 3 and
                ops[0] == "OP_HASH160" and
                self._is_hash160_push(ops[1]) and
                ops[2] == "OP_EQUAL")

    def is_multisig(self) -> tuple[bool, Union[tuple[int, int], None]]:
        """
        Check if script is a multisig script.

        Multisig format: OP_M <pubkey1> ... <pubkeyN> OP_N OP_CHECKMULTISIG

        Returns:
            tuple: (bool, (M, N) if multisig, None otherwise)
        """
        ops = self.script
        if len(ops) < 4 or ops[-1] != "OP_CHECKMULTISIG":
            return False, None

        m = _small_int(ops[0])
        n = _small_int(ops[-2])
        if m is None or n is None:
            return False, None

        # M + N pubkeys + N + OP_CHECKMULTISIG
        if len(ops) == n + 3 and 1 <= m <= n:
            return True, (m, n)
        return False, None

    def get_script_type(self) -> str:
        """
        Determine the type of script.

        Returns:
            str: Script type ('p2pkh', 'p2sh', 'multisig', 'unknown')
        """
        if self.is_p2pkh():
            return "p2pkh"
        elif self.is_p2sh():
            return "p2sh"
        elif self.is_multisig()[0]:
            return "multisig"
        else:
            return "unknown"

    def __str__(self) -> str:
        return str(self.script)

    def __repr__(self) -> str:
        return self.__str__()

    def __eq__(self, _other: object) -> bool:
        if not isinstance(_other, Script):
            return False
        return self.script == _other.script


def _small_int(token: Any) -> Union[int, None]:
    """Returns the value of an OP_1 .. OP_16 token (or int), None otherwise"""
    if isinstance(token, int):
        return token
    if isinstance(token, str) and token.startswith("OP_") and token[3:].isdigit():
        return int(token[3:])
    return None


def _check_hash160(h: bytes, script_type: str) -> None:
    if not isinstance(h, bytes) or len(h) != HASH160_SIZE:
        raise ScriptBuildError(
            f"A {script_type} script requires a {HASH160_SIZE} byte hash"
        )


def create_p2pkh_script_pub_key(pubkey_hash: bytes) -> bytes:
    """Returns the P2PKH locking script for a public key hash

    OP_DUP OP_HASH160 <pubkey_hash> OP_EQUALVERIFY OP_CHECKSIG
    """
    _check_hash160(pubkey_hash, "P2PKH")
    return Script(
        ["OP_DUP", "OP_HASH160", b_to_h(pubkey_hash), "OP_EQUALVERIFY", "OP_CHECKSIG"]
    ).to_bytes()


def create_p2sh_script_pub_key(script_hash: bytes) -> bytes:
    """Returns the P2SH locking script for a redeem script hash

    OP_HASH160 <script_hash> OP_EQUAL
    """
    _check_hash160(script_hash, "P2SH")
    return Script(["OP_HASH160", b_to_h(script_hash), "OP_EQUAL"]).to_bytes()


def create_multisig_redeem_script(m: int, public_keys: list[str]) -> Script:
    """Returns an M-of-N multisig redeem script

    OP_M <pubkey1> ... <pubkeyN> OP_N OP_CHECKMULTISIG

    Public keys are SEC hex strings and are kept in the given order.
    """
    n = len(public_keys)
    if not 1 <= n <= 16:
        raise ScriptBuildError("A multisig script requires 1 to 16 public keys")
    if not 1 <= m <= n:
        raise ScriptBuildError(f"Invalid number of required signatures: {m} of {n}")
    for pk in public_keys:
        try:
            key_bytes = h_to_b(pk)
        except ValueError as e:
            raise ScriptBuildError(f"Invalid public key hex: {pk}") from e
        if len(key_bytes) not in (33, 65):
            raise ScriptBuildError(f"Invalid public key size: {len(key_bytes)}")

    return Script([m] + list(public_keys) + [n, "OP_CHECKMULTISIG"])
