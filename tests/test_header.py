import struct
import unittest

from atmfjstc.lib.binary_utils.BinaryReader import BinaryReader, BinaryReaderFormatError

from atmfjstc.lib.drs_archive.errors import DRSFormatInvalidError, DRSIOError
from atmfjstc.lib.drs_archive.header import DRSVariant, decode_header, detect_variant

from drs_samples import build_archive, SAMPLE_TABLES, AOE_COPYRIGHT, SWBG_COPYRIGHT, VERSION, AOE_TYPE, SWBG_TYPE, \
    header_size, entries_start


def _reader(data: bytes) -> BinaryReader:
    return BinaryReader(data, big_endian=False)


class DetectVariantTest(unittest.TestCase):
    def test_aoe(self):
        reader = _reader(build_archive(SAMPLE_TABLES, DRSVariant.AOE))

        self.assertEqual(detect_variant(reader), DRSVariant.AOE)
        self.assertEqual(reader.tell(), 0)

    def test_swbg(self):
        reader = _reader(build_archive(SAMPLE_TABLES, DRSVariant.SWBG))

        self.assertEqual(detect_variant(reader), DRSVariant.SWBG)
        self.assertEqual(reader.tell(), 0)

    def test_unrecognized_falls_back_to_aoe(self):
        data = bytes(64) + b'tr1b' + bytes(16)

        self.assertEqual(detect_variant(_reader(data)), DRSVariant.AOE)

    def test_too_short_falls_back_to_aoe(self):
        self.assertEqual(detect_variant(_reader(bytes(10))), DRSVariant.AOE)


class DecodeHeaderTest(unittest.TestCase):
    def test_aoe(self):
        reader = _reader(build_archive(SAMPLE_TABLES, DRSVariant.AOE))

        header = decode_header(reader, 'graphics.drs')

        self.assertEqual(header.variant, DRSVariant.AOE)
        self.assertEqual(header.game_type, DRSVariant.AOE)
        self.assertEqual(header.copyright, AOE_COPYRIGHT)
        self.assertEqual(header.version_str, '1.00')
        self.assertEqual(header.type_str, 'tribe')
        self.assertEqual(header.table_count, 3)
        self.assertEqual(header.content_base_offset, entries_start(DRSVariant.AOE, 3) + 12 * 6)
        self.assertEqual(reader.tell(), header_size(DRSVariant.AOE))

    def test_swbg(self):
        reader = _reader(build_archive(SAMPLE_TABLES, DRSVariant.SWBG))

        header = decode_header(reader)

        self.assertEqual(header.variant, DRSVariant.SWBG)
        self.assertEqual(len(header.copyright), 60)
        self.assertEqual(header.copyright, SWBG_COPYRIGHT)
        self.assertEqual(header.type_str, 'swbg')
        self.assertEqual(reader.tell(), header_size(DRSVariant.SWBG))

    def test_swbg_discriminator_with_aoe_copyright(self):
        data = AOE_COPYRIGHT.ljust(60, b'\x00') + VERSION + SWBG_TYPE + struct.pack('<II', 0, 84)

        with self.assertRaises(DRSFormatInvalidError) as cm:
            decode_header(_reader(data), 'sounds.drs')

        self.assertEqual(cm.exception.meaning, 'copyright')
        self.assertEqual(cm.exception.source_name, 'sounds.drs')

    def test_wrong_version(self):
        data = AOE_COPYRIGHT + b'2.00' + AOE_TYPE + struct.pack('<II', 0, 64)

        with self.assertRaises(DRSFormatInvalidError) as cm:
            decode_header(_reader(data))

        self.assertEqual(cm.exception.meaning, 'version')

    def test_wrong_type(self):
        data = AOE_COPYRIGHT + VERSION + b'tribX'.ljust(12, b'\x00') + struct.pack('<II', 0, 64)

        with self.assertRaises(DRSFormatInvalidError) as cm:
            decode_header(_reader(data))

        self.assertEqual(cm.exception.meaning, 'archive type')

    def test_not_a_drs_file(self):
        with self.assertRaises(DRSFormatInvalidError):
            decode_header(_reader(b'PK\x03\x04' + bytes(100)))

    def test_truncated(self):
        with self.assertRaises(DRSIOError) as cm:
            decode_header(_reader(AOE_COPYRIGHT + VERSION), 'graphics.drs')

        self.assertIsInstance(cm.exception.__cause__, BinaryReaderFormatError)
        self.assertEqual(cm.exception.source_name, 'graphics.drs')

    def test_empty_archive(self):
        data = build_archive([], DRSVariant.AOE)

        self.assertEqual(len(data), 64)

        header = decode_header(_reader(data))

        self.assertEqual(header.variant, DRSVariant.AOE)
        self.assertEqual(header.table_count, 0)


if __name__ == '__main__':
    unittest.main()
