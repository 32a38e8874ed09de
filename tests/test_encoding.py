import unittest

from cpauth.constants import P, Q
from cpauth.encoding import bytes_to_int, hex_to_int, int_to_bytes, int_to_hex
from cpauth.exceptions import EncodingError


class TestByteEncoding(unittest.TestCase):
    def test_values_survive_round_trip(self) -> None:
        values = [0, 1, 7, 255, 256, 65535, Q, P - 1, 2**255, 2**256 - 1, 2**256]
        for value in values:
            with self.subTest(value=value):
                self.assertEqual(bytes_to_int(int_to_bytes(value)), value)
                self.assertEqual(hex_to_int(int_to_hex(value)), value)

    def test_big_endian_layout(self) -> None:
        self.assertEqual(int_to_bytes(0), b"\x00")
        self.assertEqual(int_to_bytes(256), b"\x01\x00")
        self.assertEqual(len(int_to_bytes(2**256 - 1)), 32)
        self.assertEqual(bytes_to_int(b"\x00\x00\x01"), 1)
        self.assertEqual(int_to_hex(4096), "1000")

    def test_negative_values_rejected(self) -> None:
        with self.assertRaises(EncodingError):
            int_to_bytes(-1)

    def test_invalid_hex_rejected(self) -> None:
        for text in ("zz", "abc", "0x10"):
            with self.subTest(text=text):
                with self.assertRaises(EncodingError):
                    hex_to_int(text, field="y1")

    def test_encoding_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            hex_to_int("not hex")


if __name__ == "__main__":
    unittest.main()
