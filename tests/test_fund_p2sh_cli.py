#!/usr/bin/env python3
"""
Tests for the Fund P2SH CLI (fund-p2sh) tool
"""

import json
import unittest
from io import StringIO
from unittest.mock import patch

import fund_p2sh_cli
from fundp2sh.funding import fund_p2sh
from fundp2sh.keys import PrivateKey, P2shAddress
from fundp2sh.script import Script
from fundp2sh.setup import setup


class TestFundP2shCLI(unittest.TestCase):
    """Test cases for the Fund P2SH CLI"""

    def setUp(self):
        setup("testnet")
        self.wif = "cTALNpTpRbbxTCJ2A5Vq88UxT44w1PE2cYqiB3n4hRvzyCev1Wwo"
        self.txid = "76464c2b9e2af4d63ef38a77964b3b77e629dddefc5cb9eb1a3645b1608b790f"
        self.from_address = (
            PrivateKey(self.wif).get_public_key().get_address(compressed=False)
        ).to_string()
        self.public_keys = [
            "02d82c9860e36f15d7b72aa59e29347f951277c21cd4d34822acdeeadbcff8a546",
            "03a2fef1829e0742b89c218c51898d9e7cb9d51201ba2bf9d9e9214ebb6af32708",
        ]
        self.destination = P2shAddress.from_script(
            Script([self.public_keys[1], "OP_CHECKSIG"])
        ).to_string()
        self.signed_v2 = (
            "02000000010f798b60b145361aebb95cfcdedd29e6773b4b96778af33ed6f42a9e2b4c4676"
            "000000006a47304402206f4027d0a1720ea4cc68e1aa3cc2e0ca5996806971c0cd7d40d3aa"
            "4309d4761802206c5d9c0c26dec8edab91c1c3d64e46e4dd80d8da1787a9965ade2299b41c"
            "3803012102d82c9860e36f15d7b72aa59e29347f951277c21cd4d34822acdeeadbcff8a546"
            "ffffffff01405489000000000017a9142910fc0b1b7ab6c9789c5a67c22c5bcde5b9039087"
            "00000000"
        )

    def run_cli(self, *argv):
        with patch("sys.stdout", new_callable=StringIO) as stdout:
            status = fund_p2sh_cli.main(list(argv))
        return status, stdout.getvalue()

    def fund_args(self, destination=None):
        return [
            "fund",
            "--private-key", self.wif,
            "--public-key", self.from_address,
            "--input-transaction", self.txid,
            "--satoshis", "9000000",
            "--destination", destination or self.destination,
        ]

    def test_fund(self):
        status, output = self.run_cli("--network", "testnet", *self.fund_args())
        self.assertEqual(status, 0)
        expected = fund_p2sh(
            self.wif, self.from_address, self.txid, 9000000, self.destination
        )
        self.assertEqual(output.strip(), expected.to_hex())

    def test_fund_invalid_destination(self):
        with self.assertLogs("fund_p2sh_cli", level="ERROR") as cm:
            status, output = self.run_cli(*self.fund_args(self.from_address))
        self.assertEqual(status, 1)
        self.assertEqual(output, "")
        self.assertIn("Error creating transaction", cm.output[0])

    def test_fund_wrong_network(self):
        with self.assertLogs("fund_p2sh_cli", level="ERROR"):
            status, output = self.run_cli("--network", "mainnet", *self.fund_args())
        self.assertEqual(status, 1)
        self.assertEqual(output, "")

    def test_decode_transaction(self):
        status, output = self.run_cli("decode", self.signed_v2)
        self.assertEqual(status, 0)
        result = json.loads(output)

        self.assertEqual(result["version"], 2)
        self.assertEqual(result["locktime"], 0)
        self.assertEqual(result["input"]["txid"], self.txid)
        self.assertEqual(result["input"]["vout"], 0)
        self.assertEqual(result["input"]["sequence"], 0xFFFFFFFF)
        self.assertEqual(result["output"]["value"], 9000000)
        self.assertEqual(result["output"]["btc"], 0.09)
        self.assertEqual(result["output"]["type"], "p2sh")
        self.assertEqual(result["size"], len(self.signed_v2) // 2)

    def test_decode_malformed(self):
        with self.assertLogs("fund_p2sh_cli", level="ERROR"):
            status, output = self.run_cli("decode", self.signed_v2[:-2])
        self.assertEqual(status, 1)

    def test_multisig(self):
        status, output = self.run_cli("multisig", "1", *self.public_keys)
        self.assertEqual(status, 0)
        result = json.loads(output)

        redeem_script = Script.from_raw(result["redeem_script"])
        self.assertEqual(redeem_script.is_multisig(), (True, (1, 2)))
        self.assertEqual(
            result["script_pubkey"], redeem_script.to_p2sh_script_pub_key().to_hex()
        )
        self.assertEqual(
            P2shAddress.from_address(result["address"]),
            P2shAddress.from_script(redeem_script),
        )

    def test_multisig_invalid(self):
        with self.assertLogs("fund_p2sh_cli", level="ERROR"):
            status, output = self.run_cli("multisig", "3", *self.public_keys)
        self.assertEqual(status, 1)

    def test_no_command(self):
        status, _ = self.run_cli()
        self.assertEqual(status, 1)


if __name__ == "__main__":
    unittest.main()
