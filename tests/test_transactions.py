# Copyright (C) 2018-2025 The fund-p2sh developers
#
# This file is part of fund-p2sh
#
# It is subject to the license terms in the LICENSE file found in the top-level
# directory of this distribution.
#
# No part of fund-p2sh, including this file, may be copied,
# modified, propagated, or distributed except according to the terms contained
# in the LICENSE file.


import unittest

from fundp2sh.errors import LengthOverflowError, MalformedInputError
from fundp2sh.script import Script
from fundp2sh.transactions import (
    TxInput,
    TxOutput,
    Transaction,
    create_raw_transaction,
)
from fundp2sh.utils import b_to_h, h_to_b, hash256, reverse_bytes


class TestCreateRawTransaction(unittest.TestCase):
    maxDiff = None

    def setUp(self):
        self.txid = "76464c2b9e2af4d63ef38a77964b3b77e629dddefc5cb9eb1a3645b1608b790f"
        self.spent_script = h_to_b("76a914fd337ad3bf81e086d96a68e1f8d6a0a510f8c24a88ac")
        self.p2sh_script = h_to_b("a9142910fc0b1b7ab6c9789c5a67c22c5bcde5b9039087")
        self.amount = 9000000
        self.unsigned_result = (
            "01000000010f798b60b145361aebb95cfcdedd29e6773b4b96778af33ed6f42a9e2b4c4676"
            "000000001976a914fd337ad3bf81e086d96a68e1f8d6a0a510f8c24a88acffffffff0140"
            "5489000000000017a9142910fc0b1b7ab6c9789c5a67c22c5bcde5b903908700000000"
        )

    def test_unsigned_layout(self):
        raw = create_raw_transaction(
            self.txid, self.amount, self.spent_script, self.p2sh_script
        )
        self.assertEqual(b_to_h(raw), self.unsigned_result)

    def test_field_offsets(self):
        raw = create_raw_transaction(
            self.txid, self.amount, self.spent_script, self.p2sh_script
        )
        self.assertEqual(raw[0:4], b"\x01\x00\x00\x00")
        self.assertEqual(raw[4], 1)
        self.assertEqual(raw[5:37], reverse_bytes(h_to_b(self.txid)))
        self.assertEqual(raw[37:41], b"\x00\x00\x00\x00")
        self.assertEqual(raw[41], len(self.spent_script))
        end_of_script_sig = 42 + len(self.spent_script)
        self.assertEqual(raw[end_of_script_sig : end_of_script_sig + 4], b"\xff" * 4)
        self.assertEqual(raw[end_of_script_sig + 4], 1)
        self.assertEqual(raw[-4:], b"\x00\x00\x00\x00")
        self.assertEqual(
            len(raw), 4 + 1 + 32 + 4 + 1 + 25 + 4 + 1 + 8 + 1 + 23 + 4
        )

    def test_script_objects(self):
        raw = create_raw_transaction(
            self.txid,
            self.amount,
            Script.from_raw(self.spent_script),
            Script.from_raw(self.p2sh_script),
        )
        self.assertEqual(b_to_h(raw), self.unsigned_result)

    def test_deterministic(self):
        self.assertEqual(
            create_raw_transaction(
                self.txid, self.amount, self.spent_script, self.p2sh_script
            ),
            create_raw_transaction(
                self.txid, self.amount, self.spent_script, self.p2sh_script
            ),
        )

    def test_version(self):
        raw = create_raw_transaction(
            self.txid,
            self.amount,
            self.spent_script,
            self.p2sh_script,
            version=b"\x02\x00\x00\x00",
        )
        self.assertEqual(b_to_h(raw), "02" + self.unsigned_result[2:])

    def test_empty_script_sig(self):
        raw = create_raw_transaction(self.txid, self.amount, b"", self.p2sh_script)
        self.assertEqual(raw[41], 0)
        self.assertEqual(raw[42:46], b"\xff" * 4)

    def test_script_length_limit(self):
        raw = create_raw_transaction(
            self.txid, self.amount, b"\x51" * 255, self.p2sh_script
        )
        self.assertEqual(raw[41], 255)
        with self.assertRaises(LengthOverflowError):
            create_raw_transaction(
                self.txid, self.amount, b"\x51" * 256, self.p2sh_script
            )
        with self.assertRaises(LengthOverflowError):
            create_raw_transaction(
                self.txid, self.amount, self.spent_script, b"\x51" * 256
            )

    def test_amounts(self):
        raw = create_raw_transaction(
            self.txid, 0xFFFFFFFFFFFFFFFF, self.spent_script, self.p2sh_script
        )
        self.assertIn(b"\x01" + b"\xff" * 8 + b"\x17", raw)
        with self.assertRaises(ValueError):
            create_raw_transaction(self.txid, -1, self.spent_script, self.p2sh_script)
        with self.assertRaises(ValueError):
            create_raw_transaction(
                self.txid, 2**64, self.spent_script, self.p2sh_script
            )
        with self.assertRaises(TypeError):
            create_raw_transaction(
                self.txid, 0.09, self.spent_script, self.p2sh_script
            )

    def test_malformed_txid(self):
        with self.assertRaises(MalformedInputError):
            create_raw_transaction(
                self.txid[:-2], self.amount, self.spent_script, self.p2sh_script
            )
        with self.assertRaises(MalformedInputError):
            create_raw_transaction(
                "zz" * 32, self.amount, self.spent_script, self.p2sh_script
            )
        # hex pairs separated by spaces are not a txid
        spaced_txid = " ".join(
            self.txid[i : i + 2] for i in range(0, len(self.txid), 2)
        )
        with self.assertRaises(MalformedInputError):
            create_raw_transaction(
                spaced_txid, self.amount, self.spent_script, self.p2sh_script
            )
        with self.assertRaises(MalformedInputError):
            create_raw_transaction(
                " " + self.txid[1:], self.amount, self.spent_script, self.p2sh_script
            )


class TestTransaction(unittest.TestCase):
    maxDiff = None

    def setUp(self):
        self.txid = "76464c2b9e2af4d63ef38a77964b3b77e629dddefc5cb9eb1a3645b1608b790f"
        self.signed_result = (
            "02000000010f798b60b145361aebb95cfcdedd29e6773b4b96778af33ed6f42a9e2b4c4676"
            "000000006a47304402206f4027d0a1720ea4cc68e1aa3cc2e0ca5996806971c0cd7d40d3aa"
            "4309d4761802206c5d9c0c26dec8edab91c1c3d64e46e4dd80d8da1787a9965ade2299b41c"
            "3803012102d82c9860e36f15d7b72aa59e29347f951277c21cd4d34822acdeeadbcff8a546"
            "ffffffff01405489000000000017a9142910fc0b1b7ab6c9789c5a67c22c5bcde5b9039087"
            "00000000"
        )

    def test_from_raw(self):
        tx = Transaction.from_raw(self.signed_result)
        self.assertEqual(tx.version, b"\x02\x00\x00\x00")
        self.assertEqual(tx.txin.txid, self.txid)
        self.assertEqual(tx.txin.txout_index, 0)
        self.assertEqual(len(tx.txin.script_sig), 0x6A)
        self.assertEqual(tx.txin.sequence, b"\xff\xff\xff\xff")
        self.assertEqual(tx.txout.amount, 9000000)
        self.assertEqual(
            b_to_h(tx.txout.script_pubkey),
            "a9142910fc0b1b7ab6c9789c5a67c22c5bcde5b9039087",
        )
        self.assertEqual(tx.locktime, b"\x00\x00\x00\x00")

    def test_serialize(self):
        tx = Transaction.from_raw(h_to_b(self.signed_result))
        self.assertEqual(tx.to_hex(), self.signed_result)
        self.assertEqual(tx.serialize(), self.signed_result)
        self.assertEqual(tx.get_size(), len(self.signed_result) // 2)

    def test_get_txid(self):
        tx = Transaction.from_raw(self.signed_result)
        self.assertEqual(
            tx.get_txid(), b_to_h(hash256(h_to_b(self.signed_result))[::-1])
        )

    def test_copy(self):
        tx = Transaction.from_raw(self.signed_result)
        tx_copy = Transaction.copy(tx)
        tx_copy.txout.amount = 1
        self.assertEqual(tx.txout.amount, 9000000)
        self.assertNotEqual(tx_copy.to_hex(), tx.to_hex())

    def test_constructor(self):
        tx = Transaction(
            TxInput(self.txid, 0, h_to_b(self.signed_result[84:296])),
            TxOutput(
                9000000, h_to_b("a9142910fc0b1b7ab6c9789c5a67c22c5bcde5b9039087")
            ),
            version=b"\x02\x00\x00\x00",
        )
        self.assertEqual(tx.to_hex(), self.signed_result)

    def test_trailing_data(self):
        with self.assertRaises(MalformedInputError):
            Transaction.from_raw(self.signed_result + "00")

    def test_truncated(self):
        with self.assertRaises(MalformedInputError):
            Transaction.from_raw(self.signed_result[:-2])
        with self.assertRaises(MalformedInputError):
            Transaction.from_raw(self.signed_result[:100])
        with self.assertRaises(MalformedInputError):
            Transaction.from_raw("")

    def test_multiple_inputs(self):
        with self.assertRaises(MalformedInputError):
            Transaction.from_raw(self.signed_result[:8] + "02" + self.signed_result[10:])

    def test_not_hex(self):
        with self.assertRaises(MalformedInputError):
            Transaction.from_raw("not a transaction")

    def test_amount_type(self):
        with self.assertRaises(TypeError):
            TxOutput("9000000", b"")


if __name__ == "__main__":
    unittest.main()
