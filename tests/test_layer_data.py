"""
Unit tests for the layer payload codec.
"""

import base64
import gzip
import zlib

import pytest

from tmx_decoder.config import DecodeLimits
from tmx_decoder.errors import (LimitExceededError, PayloadDecodeError,
                                SizeMismatchError, UnsupportedEncodingError)
from tmx_decoder.layer_data import (check_tile_count, decode_layer_payload,
                                    encode_layer_payload)


class TestDecodeLayerPayload:
    """Test decode_layer_payload()."""

    def test_little_endian_words(self):
        text = base64.b64encode(bytes([1, 0, 0, 0, 2, 0, 0, 0, 3, 0, 0, 0, 4, 0, 0, 0]))
        assert decode_layer_payload(text.decode(), "base64", 4) == [1, 2, 3, 4]

    def test_high_bits_preserved(self, packed):
        # Tiled keeps flip flags in the top bits of the GID
        tiles = [0x80000001, 0x40000002, 0xFFFFFFFF, 0]
        assert decode_layer_payload(packed(tiles), "base64", 4) == tiles

    def test_whitespace_in_text_is_ignored(self, packed):
        text = packed([7, 8, 9])
        spaced = "\n    " + text[:5] + "\n  " + text[5:] + "\n"
        assert decode_layer_payload(spaced, "base64", 3) == [7, 8, 9]

    def test_returns_plain_ints(self, packed):
        tiles = decode_layer_payload(packed([5]), "base64", 1)
        assert type(tiles[0]) is int

    @pytest.mark.parametrize("encoding", ["csv", "BASE64", "", None])
    def test_unsupported_encoding(self, packed, encoding):
        with pytest.raises(UnsupportedEncodingError):
            decode_layer_payload(packed([1]), encoding, 1)

    def test_csv_text_is_never_read_as_base64(self):
        with pytest.raises(UnsupportedEncodingError) as exc_info:
            decode_layer_payload("1,2,3,4", "csv", 4)
        assert exc_info.value.encoding == "csv"

    def test_invalid_base64(self):
        with pytest.raises(PayloadDecodeError):
            decode_layer_payload("AQAA!AAA", "base64", 1)

    def test_bad_padding(self):
        with pytest.raises(PayloadDecodeError):
            decode_layer_payload("AQAAAA", "base64", 1)

    def test_non_ascii_text(self):
        with pytest.raises(PayloadDecodeError):
            decode_layer_payload("AQAAAAé=", "base64", 1)

    def test_length_not_multiple_of_four(self):
        text = base64.b64encode(b"\x01\x00\x00\x00\x02\x00").decode()
        with pytest.raises(PayloadDecodeError):
            decode_layer_payload(text, "base64", 1)

    def test_too_few_tiles(self, packed):
        with pytest.raises(SizeMismatchError) as exc_info:
            decode_layer_payload(packed(range(8)), "base64", 9)
        assert exc_info.value.expected == 9
        assert exc_info.value.actual == 8

    def test_too_many_tiles(self, packed):
        with pytest.raises(SizeMismatchError):
            decode_layer_payload(packed(range(10)), "base64", 9)

    def test_empty_text(self):
        with pytest.raises(SizeMismatchError):
            decode_layer_payload(None, "base64", 4)

    def test_empty_grid_with_empty_text(self):
        assert decode_layer_payload("", "base64", 0) == []

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            decode_layer_payload("", "base64", -1)


class TestCompression:
    """Test zlib/gzip compressed payloads."""

    def test_zlib(self):
        raw = bytes([1, 0, 0, 0, 2, 0, 0, 0])
        text = base64.b64encode(zlib.compress(raw)).decode()
        assert decode_layer_payload(text, "base64", 2, "zlib") == [1, 2]

    def test_gzip(self):
        raw = bytes([9, 0, 0, 0, 0, 1, 0, 0])
        text = base64.b64encode(gzip.compress(raw)).decode()
        assert decode_layer_payload(text, "base64", 2, "gzip") == [9, 256]

    def test_zstd_unsupported(self, packed):
        with pytest.raises(UnsupportedEncodingError) as exc_info:
            decode_layer_payload(packed([1]), "base64", 1, "zstd")
        assert exc_info.value.encoding == "zstd"

    def test_corrupt_stream(self):
        text = base64.b64encode(b"not zlib at all").decode()
        with pytest.raises(PayloadDecodeError):
            decode_layer_payload(text, "base64", 1, "zlib")

    def test_truncated_stream(self):
        compressed = zlib.compress(bytes(64))
        text = base64.b64encode(compressed[:-6]).decode()
        with pytest.raises(PayloadDecodeError):
            decode_layer_payload(text, "base64", 16, "zlib")

    def test_inflation_past_grid_is_stopped(self):
        # 4 MiB of zeros compresses to a few KiB but must not be inflated
        text = base64.b64encode(zlib.compress(bytes(4 * 1024 * 1024))).decode()
        with pytest.raises(PayloadDecodeError):
            decode_layer_payload(text, "base64", 4, "zlib")


class TestEncodeLayerPayload:
    """Test encode_layer_payload() against the decoder."""

    @pytest.mark.parametrize("compression", [None, "zlib", "gzip"])
    def test_roundtrip(self, compression):
        tiles = [0, 1, 2, 3, 0x7FFFFFFF, 0xFFFFFFFF, 42, 0, 17]
        text = encode_layer_payload(tiles, compression)
        assert decode_layer_payload(text, "base64", len(tiles), compression) == tiles

    def test_matches_reference_packing(self, packed):
        assert encode_layer_payload([1, 2, 3, 4]) == packed([1, 2, 3, 4])

    def test_rejects_values_outside_u32(self):
        with pytest.raises(ValueError):
            encode_layer_payload([1 << 32])
        with pytest.raises(ValueError):
            encode_layer_payload([-1])


class TestCheckTileCount:
    """Test the grid size guard."""

    def test_product(self):
        assert check_tile_count(30, 20) == 600

    def test_limit(self):
        with pytest.raises(LimitExceededError):
            check_tile_count(1000, 1000, DecodeLimits(max_layer_tiles=999_999))

    def test_huge_dimensions(self):
        with pytest.raises(LimitExceededError):
            check_tile_count(0xFFFFFFFF, 0xFFFFFFFF)
