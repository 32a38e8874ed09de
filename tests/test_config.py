import unittest

from cpauth.config import GroupParameters, load_parameters, load_settings
from cpauth.constants import DEFAULT_SERVER_URL, P, Q
from cpauth.exceptions import ConfigurationError


class TestLoadParameters(unittest.TestCase):
    def test_defaults_without_environment(self) -> None:
        self.assertEqual(load_parameters({}), GroupParameters.default())
        params = load_parameters({})
        self.assertEqual((params.bit_size, params.p, params.q, params.g, params.h), (256, P, Q, 4, 9))
        self.assertEqual(params.p, 2 * params.q + 1)

    def test_overrides_accept_decimal_and_hex(self) -> None:
        params = load_parameters(
            {"CPAUTH_P": "23", "CPAUTH_Q": "0xb", "CPAUTH_BIT_SIZE": "8", "CPAUTH_G": " 4 "}
        )
        self.assertEqual((params.bit_size, params.p, params.q, params.g), (8, 23, 11, 4))
        self.assertEqual(params.h, 9)

    def test_group_soundness_not_checked(self) -> None:
        params = load_parameters({"CPAUTH_P": "24", "CPAUTH_Q": "5"})
        self.assertEqual((params.p, params.q), (24, 5))

    def test_invalid_values_rejected(self) -> None:
        for value in ("abc", "-7", "0", ""):
            with self.subTest(value=value):
                with self.assertRaises(ConfigurationError):
                    load_parameters({"CPAUTH_P": value})

    def test_parameters_are_immutable(self) -> None:
        params = GroupParameters.default()
        with self.assertRaises(AttributeError):
            params.p = 5  # type: ignore[misc]


class TestLoadSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = load_settings({})
        self.assertIsNone(settings.challenge_ttl)
        self.assertEqual(settings.server_url, DEFAULT_SERVER_URL)

    def test_overrides(self) -> None:
        settings = load_settings(
            {"CPAUTH_CHALLENGE_TTL": "45", "CPAUTH_SERVER_URL": "https://auth.example:5001"}
        )
        self.assertEqual(settings.challenge_ttl, 45.0)
        self.assertEqual(settings.server_url, "https://auth.example:5001")

    def test_invalid_ttl(self) -> None:
        for value in ("soon", "0", "-1", "nan", "inf", "-inf"):
            with self.subTest(value=value):
                with self.assertRaises(ConfigurationError):
                    load_settings({"CPAUTH_CHALLENGE_TTL": value})


if __name__ == "__main__":
    unittest.main()
