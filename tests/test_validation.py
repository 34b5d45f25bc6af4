import unittest

from atmfjstc.lib.drs_archive.errors import DRSFormatInvalidError
from atmfjstc.lib.drs_archive.validation import matches_literal, validate_literal


class MatchesLiteralTest(unittest.TestCase):
    def test_exact(self):
        self.assertTrue(matches_literal(b'1.00', b'1.00'))

    def test_longer_candidate(self):
        self.assertTrue(matches_literal(b'tribe\x00\x00\x00\x00\x00\x00\x00', b'tribe'))

    def test_shorter_candidate(self):
        self.assertFalse(matches_literal(b'trib', b'tribe'))

    def test_mismatch(self):
        self.assertFalse(matches_literal(b'swbg\x00\x00\x00\x00\x00\x00\x00\x00', b'tribe'))

    def test_empty_literal(self):
        self.assertTrue(matches_literal(b'', b''))


class ValidateLiteralTest(unittest.TestCase):
    def test_ok(self):
        validate_literal(b'1.00', b'1.00', 'x.drs', 'version')

    def test_fail_names_source(self):
        with self.assertRaises(DRSFormatInvalidError) as cm:
            validate_literal(b'2.00', b'1.00', 'sounds.drs', 'version')

        self.assertEqual(cm.exception.source_name, 'sounds.drs')
        self.assertEqual(cm.exception.meaning, 'version')
        self.assertIn("'sounds.drs'", str(cm.exception))


if __name__ == '__main__':
    unittest.main()
