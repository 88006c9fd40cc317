"""Tests for licence key generation and parsing."""

import dataclasses
import random
import re
import unittest
from datetime import date, timedelta

from aida64_keys.checksum import verify_checksum
from aida64_keys.edition import KeyEdition
from aida64_keys.errors import (
    InvalidChecksum,
    InvalidKeyError,
    InvalidLength,
    UnknownEdition,
)
from aida64_keys.license import License
from aida64_keys.symbols import ALPHABET

KNOWN_KEY = "  3BH41-94ZD6 4KDT5JD-PUY_TBSN9 "
KNOWN_KEY_BAD_CHECKSUM = "  3BH41-94ZD6 4KDT5JD-PUY_TBSN2 "

GROUPED_KEY = re.compile(r"^[A-Z0-9]{5}(-[A-Z0-9]{5}){4}$")


class TestParseKnownKey(unittest.TestCase):
    """Parse a known good key."""

    def test_parse_fields(self):
        licence = License.from_key(KNOWN_KEY)
        self.assertEqual(licence.edition, KeyEdition.EXTREME)
        self.assertEqual(licence.seats, 1)
        self.assertEqual(licence.purchase_date, date(2022, 11, 12))
        self.assertIsNone(licence.expiry)
        self.assertEqual(licence.maintenance_expiry, timedelta(days=3658))
        self.assertEqual((licence.salt1, licence.salt2, licence.salt3), (409, 72, 61))

    def test_parsed_key_is_valid(self):
        self.assertTrue(License.from_key(KNOWN_KEY).is_valid_key())

    def test_bad_checksum(self):
        with self.assertRaises(InvalidChecksum) as ctx:
            License.from_key(KNOWN_KEY_BAD_CHECKSUM)
        self.assertEqual(ctx.exception.found, ord("2"))
        self.assertLess(ctx.exception.expected, 0x9987)

    def test_short_key(self):
        with self.assertRaises(InvalidLength) as ctx:
            License.from_key("ABC")
        self.assertEqual(ctx.exception.expected, 25)
        self.assertEqual(ctx.exception.found, 3)

    def test_errors_are_value_errors(self):
        with self.assertRaises(ValueError):
            License.from_key("")
        with self.assertRaises(InvalidKeyError):
            License.from_key(KNOWN_KEY_BAD_CHECKSUM)

    def test_bytes_input(self):
        self.assertEqual(
            License.from_key(KNOWN_KEY.encode("ascii")),
            License.from_key(KNOWN_KEY),
        )


class TestSanitisation(unittest.TestCase):

    def test_separators_ignored(self):
        bare = "3BH4194ZD64KDT5JDPUYTBSN9"
        expected = License.from_key(bare)
        for noisy in (
            "3BH41-94ZD6-4KDT5-JDPUY-TBSN9",
            " 3 B H 4 1 9 4 Z D 6 4 K D T 5 J D P U Y T B S N 9 ",
            "3BH41.94ZD6/4KDT5\t\nJDPUY_TBSN9!",
            "3BH41\u00e994ZD6\u00fc4KDT5JDPUYTBSN9",
        ):
            self.assertEqual(License.from_key(noisy), expected)

    def test_surrogates_ignored(self):
        bare = "3BH4194ZD64KDT5JDPUYTBSN9"
        expected = License.from_key(bare)
        self.assertEqual(License.from_key("\udcff" + bare), expected)
        self.assertEqual(License.from_key("3BH41\ud80094ZD6-4KDT5JDPUYTBSN9\udcff"), expected)

    def test_surrogates_do_not_count_towards_length(self):
        with self.assertRaises(InvalidLength) as ctx:
            License.from_key("\udcffABC")
        self.assertEqual(ctx.exception.found, 3)

    def test_lowercase_counts_towards_length(self):
        with self.assertRaises(InvalidLength) as ctx:
            License.from_key("3BH4194ZD64KDT5JDPUYTBSN9x")
        self.assertEqual(ctx.exception.found, 26)

    def test_length_errors_report_alphanumeric_count(self):
        for text, found in (("", 0), ("----", 0), ("AB-CD", 4), ("D" * 24, 24), ("D" * 30, 30)):
            with self.assertRaises(InvalidLength) as ctx:
                License.from_key(text)
            self.assertEqual(ctx.exception.found, found)


class TestGenerate(unittest.TestCase):
    """Test key generation."""

    def setUp(self):
        self.rng = random.Random(1234)

    def test_raw_key_shape(self):
        for edition in KeyEdition:
            key = License.new(edition, self.rng).generate(self.rng)
            self.assertEqual(len(key), 25)
            self.assertTrue(all(symbol in ALPHABET for symbol in key))
            self.assertTrue(verify_checksum(key))

    def test_grouped_string(self):
        key = License.new(KeyEdition.BUSINESS).generate_string(True)
        self.assertEqual(len(key), 29)
        self.assertRegex(key, GROUPED_KEY)
        for pos in (5, 11, 17, 23):
            self.assertEqual(key[pos], "-")

    def test_plain_string(self):
        key = License.new(KeyEdition.BUSINESS).generate_string(False)
        self.assertEqual(len(key), 25)
        self.assertNotIn("-", key)

    def test_every_edition_round_trips(self):
        for edition in KeyEdition:
            licence = License.new(edition)
            self.assertTrue(licence.is_valid_key())
            parsed = License.from_key(licence.generate_string(True))
            self.assertEqual(parsed.edition, edition)

    def test_full_round_trip(self):
        for _ in range(200):
            licence = (
                License.new(self.rng.choice(list(KeyEdition)), self.rng)
                .with_seats(self.rng.randint(1, 797))
                .with_purchase_date(date(2004, 1, 1) + timedelta(days=self.rng.randint(0, 11000)))
                .with_maintenance_expiry(timedelta(days=self.rng.randint(1, 3658)))
            )
            self.assertEqual(License.from_key(licence.generate(self.rng)), licence)

    def test_same_licence_gives_different_keys(self):
        licence = License.new(KeyEdition.ENGINEER, self.rng)
        keys = {licence.generate_string(rng=self.rng) for _ in range(50)}
        self.assertGreater(len(keys), 40)
        for key in keys:
            self.assertEqual(License.from_key(key), licence)

    def test_license_expiry(self):
        licence = License.new(KeyEdition.EXTREME).with_license_expiry(timedelta(days=50))
        self.assertTrue(licence.is_valid_key())
        parsed = License.from_key(licence.generate())
        # the expiry field is written as a day count but read back as a packed date
        self.assertIsNotNone(parsed.expiry)
        self.assertNotEqual(parsed.expiry, timedelta(days=50))
        self.assertEqual(parsed.expiry_date, date(2003, 1, 18))

    def test_seats_clamped(self):
        licence = License.new(KeyEdition.BUSINESS).with_seats(1000)
        self.assertEqual(licence.seats, 797)
        self.assertEqual(License.from_key(licence.generate_string(True)).seats, 797)

    def test_late_purchase_year_wraps(self):
        licence = License.new(KeyEdition.BUSINESS).with_purchase_date(date(2099, 1, 1))
        self.assertTrue(licence.is_valid_key())
        parsed = License.from_key(licence.generate())
        self.assertEqual(parsed.purchase_date, date(2003, 1, 1))

    def test_unknown_edition(self):
        licence = dataclasses.replace(License(KeyEdition.BUSINESS), edition=_FakeEdition(7))
        with self.assertRaises(UnknownEdition):
            License.from_key(licence.generate())


class _FakeEdition:
    def __init__(self, value):
        self.value = value


class TestBuilder(unittest.TestCase):
    """Test the clamping with_* methods."""

    def setUp(self):
        self.licence = License.new(KeyEdition.BUSINESS, random.Random(5))

    def test_defaults(self):
        self.assertEqual(self.licence.seats, 1)
        self.assertIsNone(self.licence.expiry)
        self.assertEqual(self.licence.maintenance_expiry, timedelta(days=3658))
        self.assertTrue(100 <= self.licence.salt1 <= 988)
        self.assertTrue(0 <= self.licence.salt2 <= 99)
        self.assertTrue(0 <= self.licence.salt3 <= 99)

    def test_salt_ranges(self):
        rng = random.Random(99)
        for _ in range(500):
            licence = License.new(KeyEdition.EXTREME, rng)
            self.assertTrue(100 <= licence.salt1 <= 988)
            self.assertTrue(0 <= licence.salt2 <= 99)
            self.assertTrue(0 <= licence.salt3 <= 99)

    def test_builder_returns_new_record(self):
        changed = self.licence.with_seats(10)
        self.assertEqual(changed.seats, 10)
        self.assertEqual(self.licence.seats, 1)
        self.assertEqual(changed.salt1, self.licence.salt1)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            self.licence.seats = 3

    def test_with_edition(self):
        self.assertEqual(
            self.licence.with_edition(KeyEdition.NETWORK_AUDIT).edition,
            KeyEdition.NETWORK_AUDIT,
        )

    def test_seats(self):
        self.assertEqual(self.licence.with_seats(0).seats, 1)
        self.assertEqual(self.licence.with_seats(-5).seats, 1)
        self.assertEqual(self.licence.with_seats(797).seats, 797)
        self.assertEqual(self.licence.with_seats(798).seats, 797)

    def test_purchase_date(self):
        self.assertEqual(
            self.licence.with_purchase_date(date(1999, 6, 1)).purchase_date, date(2004, 1, 1)
        )
        self.assertEqual(
            self.licence.with_purchase_date(date(2150, 6, 1)).purchase_date, date(2099, 1, 1)
        )
        self.assertEqual(
            self.licence.with_purchase_date(date(2015, 6, 1)).purchase_date, date(2015, 6, 1)
        )

    def test_maintenance(self):
        self.assertEqual(
            self.licence.with_maintenance_expiry(timedelta(0)).maintenance_expiry,
            timedelta(days=1),
        )
        self.assertEqual(
            self.licence.with_maintenance_expiry(timedelta(days=5000)).maintenance_expiry,
            timedelta(days=3658),
        )

    def test_license_expiry_not_clamped(self):
        self.assertEqual(
            self.licence.with_license_expiry(timedelta(days=9000)).expiry,
            timedelta(days=9000),
        )
        self.assertIsNone(
            self.licence.with_license_expiry(timedelta(days=5)).with_license_expiry(None).expiry
        )


class TestIsValidKey(unittest.TestCase):
    """Test the in-range and not-expired predicate."""

    TODAY = date(2024, 6, 1)

    def _licence(self, **fields):
        fields.setdefault("purchase_date", date(2020, 1, 1))
        return License(KeyEdition.BUSINESS, **fields)

    def test_default_is_valid(self):
        self.assertTrue(self._licence().is_valid_key(self.TODAY))

    def test_seats(self):
        self.assertFalse(self._licence(seats=0).is_valid_key(self.TODAY))
        self.assertTrue(self._licence(seats=1).is_valid_key(self.TODAY))
        self.assertTrue(self._licence(seats=797).is_valid_key(self.TODAY))
        self.assertFalse(self._licence(seats=798).is_valid_key(self.TODAY))

    def test_purchase_date(self):
        self.assertTrue(self._licence(purchase_date=date(2004, 1, 1)).is_valid_key(self.TODAY))
        self.assertTrue(self._licence(purchase_date=date(2099, 1, 1)).is_valid_key(self.TODAY))
        self.assertFalse(self._licence(purchase_date=date(2003, 12, 31)).is_valid_key(self.TODAY))
        self.assertFalse(self._licence(purchase_date=date(2099, 1, 2)).is_valid_key(self.TODAY))

    def test_maintenance(self):
        self.assertTrue(
            self._licence(maintenance_expiry=timedelta(days=1)).is_valid_key(self.TODAY)
        )
        self.assertTrue(
            self._licence(maintenance_expiry=timedelta(days=3658)).is_valid_key(self.TODAY)
        )
        self.assertFalse(
            self._licence(maintenance_expiry=timedelta(days=3659)).is_valid_key(self.TODAY)
        )

    def test_salts(self):
        self.assertFalse(self._licence(salt1=98).is_valid_key(self.TODAY))
        self.assertTrue(self._licence(salt1=99).is_valid_key(self.TODAY))
        self.assertTrue(self._licence(salt1=989).is_valid_key(self.TODAY))
        self.assertFalse(self._licence(salt1=990).is_valid_key(self.TODAY))
        self.assertTrue(self._licence(salt2=100, salt3=100).is_valid_key(self.TODAY))
        self.assertFalse(self._licence(salt2=101).is_valid_key(self.TODAY))
        self.assertFalse(self._licence(salt3=101).is_valid_key(self.TODAY))

    def test_expiry(self):
        licence = self._licence(expiry=timedelta(days=10))
        self.assertTrue(licence.is_valid_key(date(2020, 1, 10)))
        self.assertFalse(licence.is_valid_key(date(2020, 1, 11)))
        self.assertFalse(licence.is_valid_key(date(2021, 1, 1)))
        self.assertTrue(licence.is_valid_key(date(2021, 1, 1), check_expiry=False))

    def test_is_expired(self):
        self.assertFalse(self._licence().is_expired(date(2090, 1, 1)))
        self.assertTrue(self._licence(expiry=timedelta(days=-3)).is_expired(date(2020, 1, 1)))


if __name__ == "__main__":
    unittest.main()
