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

import re
from abc import ABC, abstractmethod
from typing import Optional

from base58check import b58encode, b58decode  # type: ignore
from ecdsa import VerifyingKey, SECP256k1, MalformedPointError  # type: ignore

from fundp2sh.constants import (
    NETWORK_WIF_PREFIXES,
    NETWORK_P2PKH_PREFIXES,
    NETWORK_P2SH_PREFIXES,
    P2PKH_ADDRESS,
    P2SH_ADDRESS,
    HASH160_SIZE,
    PRIVATE_KEY_SIZE,
)
from fundp2sh.curve import Secp256k1Context
from fundp2sh.errors import DecodeError, KeyDecodeError
from fundp2sh.script import (
    Script,
    create_p2pkh_script_pub_key,
    create_p2sh_script_pub_key,
)
from fundp2sh.setup import get_network
from fundp2sh.utils import b_to_h, h_to_b, hash160, hash256, i_to_b32


BASE58_INVALID_CHARS = r"[^123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz]"


def b58check_encode(data: bytes) -> str:
    """Base58Check encodes data (version prefix + payload)

    |  Pseudocode:
    |      data_hash = SHA-256( SHA-256( data ) )
    |      checksum = (first 4 bytes of data_hash)
    |      encoded = Base58Encode( data + checksum )
    """
    checksum = hash256(data)[0:4]
    return b58encode(data + checksum).decode("utf-8")


def b58check_decode(encoded: str) -> bytes:
    """Base58Check decodes a string and returns the data (version prefix +
    payload) without the checksum

    Raises
    ------
    DecodeError
        if the string has non base58 characters or the checksum is wrong
    """
    if not encoded or re.search(BASE58_INVALID_CHARS, encoded):
        raise DecodeError("Invalid base58 string.")

    try:
        data_checksum = b58decode(encoded.encode("utf-8"))
    except ValueError as e:
        raise DecodeError(f"Invalid base58 string: {e}") from e

    if len(data_checksum) < 5:
        raise DecodeError("Base58Check data is too short.")

    data = data_checksum[:-4]
    checksum = data_checksum[-4:]
    if hash256(data)[0:4] != checksum:
        raise DecodeError("Checksum is wrong. Possible mistype?")

    return data


class PrivateKey:
    """Represents an ECDSA private key.

    Only the raw secret is kept; all curve operations are performed inside a
    Secp256k1Context.

    Attributes
    ----------
    key : bytes
        the raw key of 32 bytes
    compressed : bool
        whether the key was decoded from a WIFC (compressed) string; False
        for keys created from raw bytes or an exponent

    Methods
    -------
    from_wif(wif)
        creates an object from a WIF of WIFC format (string)
    from_bytes()
        creates an object from raw 32 bytes
    to_wif(compressed=True)
        returns as WIFC (compressed) or WIF format (string)
    to_bytes()
        returns the key's raw bytes
    get_public_key()
        returns the corresponding PublicKey object
    """

    def __init__(
        self,
        wif: Optional[str] = None,
        secret_exponent: Optional[int] = None,
        b: Optional[bytes] = None,
    ) -> None:
        """
        Parameters
        ----------
        wif : str, optional
            the key in WIF of WIFC format (default None)
        secret_exponent : int, optional
            used to create a specific key deterministically (default None)
        b : bytes, optional
            used to create a key from raw bytes

        Raises
        ------
        KeyDecodeError
            if the key cannot be decoded
        TypeError
            if no parameter is given
        """
        self.compressed = False
        if wif:
            self._from_wif(wif)
        elif b:
            self._from_bytes(b)
        elif secret_exponent:
            self._from_bytes(i_to_b32(secret_exponent))
        else:
            raise TypeError("A WIF, raw bytes or a secret exponent is required.")

    @classmethod
    def from_wif(cls, wif: str) -> "PrivateKey":
        """Creates key from WIFC or WIF format key"""

        return cls(wif=wif)

    @classmethod
    def from_bytes(cls, b: bytes) -> "PrivateKey":
        """Creates a key directly from 32 raw bytes"""

        return cls(b=b)

    def _from_bytes(self, b: bytes) -> None:
        if len(b) != PRIVATE_KEY_SIZE:
            raise KeyDecodeError("Invalid key length: must be exactly 32 bytes.")
        self.key = bytes(b)

    def _from_wif(self, wif: str) -> None:
        """Creates key from WIFC or WIF format key

        Check to_wif for the detailed process. From WIF is the reverse.

        Raises
        ------
        KeyDecodeError
            if the checksum is wrong, the key is not from the configured
            network or the key has the wrong size.
        """
        try:
            data = b58check_decode(wif)
        except DecodeError as e:
            raise KeyDecodeError(f"Invalid WIF private key: {e}") from e

        # get network prefix and check with current setup
        network_prefix = data[:1]
        if NETWORK_WIF_PREFIXES[get_network()] != network_prefix:
            raise KeyDecodeError("Using the wrong network!")

        # remove network prefix
        key_bytes = data[1:]

        # compressed keys are suffixed with 0x01
        if len(key_bytes) == PRIVATE_KEY_SIZE + 1 and key_bytes[-1] == 0x01:
            key_bytes = key_bytes[:-1]
            self.compressed = True

        self._from_bytes(key_bytes)

    def to_bytes(self) -> bytes:
        """Returns key's bytes"""

        return self.key

    def to_wif(self, compressed: bool = True) -> str:
        """Returns key in WIFC or WIF string

        |  Pseudocode:
        |      network_prefix = (1 byte version number)
        |      data = network_prefix + (32 bytes number/key) [ + 0x01 if compressed ]
        |      wif = Base58CheckEncode( data )
        """
        data = NETWORK_WIF_PREFIXES[get_network()] + self.key

        if compressed is True:
            data += b"\x01"

        return b58check_encode(data)

    def get_public_key(self) -> "PublicKey":
        """Returns the corresponding PublicKey

        Raises
        ------
        KeyDerivationError
            if the key is not a valid secp256k1 secret
        """
        with Secp256k1Context() as ctx:
            public_key = ctx.derive_public_key(self.key, compressed=False)
        return PublicKey(b_to_h(public_key))


class PublicKey:
    """Represents an ECDSA public key.

    Attributes
    ----------
    key : bytes
        the raw public key of 64 bytes (x, y coordinates of the ECDSA curve)

    Methods
    -------
    from_hex(hex_str)
        creates an object from a hex string in SEC format (classmethod)
    to_hex(compressed=True)
        returns the key as hex string (in SEC format - compressed by default)
    to_bytes()
        returns the key's raw bytes
    to_sec(compressed=True)
        returns the key in SEC format bytes
    to_hash160(compressed=True)
        returns the hash160 hex string of the public key
    get_address(compressed=True)
        returns the corresponding P2pkhAddress object
    """

    def __init__(self, hex_str: str) -> None:
        """
        Parameters
        ----------
        hex_str : str
            the public key in hex string, SEC format (compressed or not)

        Raises
        ------
        DecodeError
            If the hex string or the SEC encoding is invalid
        """
        try:
            key_bytes = h_to_b(hex_str.strip())
        except ValueError as e:
            raise DecodeError(f"Invalid public key hex: {e}") from e

        # ecdsa accepts both SEC forms and also computes y for compressed keys
        try:
            verifying_key = VerifyingKey.from_string(key_bytes, curve=SECP256k1)
        except MalformedPointError as e:
            raise DecodeError(f"Invalid public key: {e}") from e

        self.key = verifying_key.to_string()

    @classmethod
    def from_hex(cls, hex_str: str) -> "PublicKey":
        """Creates a public key from a hex string (SEC format)"""

        return cls(hex_str)

    def to_bytes(self) -> bytes:
        """Returns key's bytes"""

        return self.key

    def to_sec(self, compressed: bool = True) -> bytes:
        """Returns the key in SEC format"""

        if compressed:
            # check if y is even or odd (02 even, 03 odd)
            prefix = b"\x02" if self.key[-1] % 2 == 0 else b"\x03"
            return prefix + self.key[:32]

        # uncompressed starts with 04
        return b"\x04" + self.key

    def to_hex(self, compressed: bool = True) -> str:
        """Returns public key as a hex string (SEC format - compressed by
        default)"""

        return b_to_h(self.to_sec(compressed))

    def _to_hash160(self, compressed: bool = True) -> bytes:
        """Returns the RIPEMD( SHA256( ) ) of the public key in bytes"""

        return hash160(self.to_sec(compressed))

    def to_hash160(self, compressed: bool = True) -> str:
        """Returns the RIPEMD( SHA256( ) ) of the public key in hex"""

        return b_to_h(self._to_hash160(compressed))

    def get_address(self, compressed: bool = True) -> "P2pkhAddress":
        """Returns the corresponding P2PKH Address (default compressed)"""

        return P2pkhAddress(hash160=self.to_hash160(compressed))


class Address(ABC):
    """Represents a Bitcoin (base58check) address

    Attributes
    ----------
    hash160 : str
        the hash160 string representation of the address; hash160 represents
        two consequtive hashes of the public key or the redeem script, first
        a SHA-256 and then an RIPEMD-160

    Methods
    -------
    from_address(address)
        instantiates an object from address string encoding
    from_hash160(hash160_str)
        instantiates an object from a hash160 hex string
    to_string()
        returns the address's string encoding
    to_hash160()
        returns the address's hash160 hex string representation
    to_script_pub_key()
        returns the locking script that corresponds to this address

    Raises
    ------
    TypeError
        No parameters passed
    DecodeError
        If an invalid address or hash160 is provided.
    """

    @abstractmethod
    def __init__(
        self,
        address: Optional[str] = None,
        hash160: Optional[str] = None,
        script: Optional[Script] = None,
    ) -> None:
        if hash160:
            if self._is_hash160_valid(hash160):
                self.hash160 = hash160.lower()
            else:
                raise DecodeError("Invalid value for parameter hash160.")
        elif address:
            self.hash160 = self._address_to_hash160(address)
        elif script:
            if isinstance(script, Script):
                self.hash160 = b_to_h(hash160_of_script(script))
            else:
                raise TypeError("A Script class is required.")
        else:
            raise TypeError("A valid address or hash160 is required.")

    @classmethod
    def from_address(cls, address: str) -> "Address":
        """Creates an address object from an address string"""

        return cls(address=address)

    @classmethod
    def from_hash160(cls, hash160: str) -> "Address":
        """Creates an address object from a hash160 string"""

        return cls(hash160=hash160)

    @abstractmethod
    def _network_prefix(self) -> bytes:
        """The version byte of this address type for the configured network"""

    @abstractmethod
    def get_type(self) -> str:
        """Returns the type of address"""

    @abstractmethod
    def to_script_pub_key(self) -> Script:
        """Returns the locking script that corresponds to this address"""

    def _address_to_hash160(self, address: str) -> str:
        """Converts an address to it's hash160 equivalent

        Base58CheckDecode the address, check and remove the network prefix.
        """
        if len(address) < 26 or len(address) > 35:
            raise DecodeError("Invalid value for parameter address.")

        data = b58check_decode(address)
        network_prefix = data[:1]
        if network_prefix != self._network_prefix():
            raise DecodeError(
                f"Address {address} is not a {self.get_type()} address of "
                f"{get_network()}."
            )

        hash160_bytes = data[1:]
        if len(hash160_bytes) != HASH160_SIZE:
            raise DecodeError("Invalid value for parameter address.")
        return b_to_h(hash160_bytes)

    def _is_hash160_valid(self, hash160: str) -> bool:
        """Checks is a hash160 hex string is valid"""

        # check the size -- should be 20 bytes, 40 characters in hexadecimal string
        if len(hash160) != 2 * HASH160_SIZE:
            return False

        # check all (string) digits are hex
        try:
            int(hash160, 16)
            return True
        except ValueError:
            return False

    def to_hash160(self) -> str:
        """Returns as hash160 hex string"""

        return self.hash160

    def to_string(self) -> str:
        """Returns as address string

        |  Pseudocode:
        |      network_prefix = (1 byte version number)
        |      data = network_prefix + hash160_bytes
        |      address = Base58CheckEncode( data )
        """
        return b58check_encode(self._network_prefix() + h_to_b(self.hash160))

    def __str__(self) -> str:
        return self.to_string()

    def __eq__(self, _other: object) -> bool:
        if not isinstance(_other, Address):
            return False
        return self.get_type() == _other.get_type() and self.hash160 == _other.hash160


class P2pkhAddress(Address):
    """Encapsulates a P2PKH address.

    Check Address class for details
    """

    def __init__(
        self, address: Optional[str] = None, hash160: Optional[str] = None
    ) -> None:
        super().__init__(address=address, hash160=hash160)

    def _network_prefix(self) -> bytes:
        return NETWORK_P2PKH_PREFIXES[get_network()]

    def to_script_pub_key(self) -> Script:
        """Returns the scriptPubKey (P2PKH) that corresponds to this address"""
        return Script.from_raw(create_p2pkh_script_pub_key(h_to_b(self.hash160)))

    def get_type(self) -> str:
        """Returns the type of address"""
        return P2PKH_ADDRESS


class P2shAddress(Address):
    """Encapsulates a P2SH address.

    Check Address class for details; it can also be created from the redeem
    script.
    """

    def __init__(
        self,
        address: Optional[str] = None,
        hash160: Optional[str] = None,
        script: Optional[Script] = None,
    ) -> None:
        super().__init__(address=address, hash160=hash160, script=script)

    @classmethod
    def from_script(cls, script: Script) -> "P2shAddress":
        """Creates an address object from a redeem Script object"""

        return cls(script=script)

    def _network_prefix(self) -> bytes:
        return NETWORK_P2SH_PREFIXES[get_network()]

    def to_script_pub_key(self) -> Script:
        """Returns the scriptPubKey (P2SH) that corresponds to this address"""
        return Script.from_raw(create_p2sh_script_pub_key(h_to_b(self.hash160)))

    def get_type(self) -> str:
        """Returns the type of address"""
        return P2SH_ADDRESS


def hash160_of_script(script: Script) -> bytes:
    """RIPEMD160( SHA256( script ) ) - required for P2SH addresses"""
    return hash160(script.to_bytes())
