"""Tests for the IP4P decoder.

Pure functions, no fixtures. The port field is checked over its whole
range; the IPv4 fields over a spread of values and their short forms.
"""

from __future__ import annotations

import ipaddress

import pytest

from ip4p_redirect.decoder import (
    DecodedEndpoint,
    DecodeError,
    DecodeErrorKind,
    decode,
    expand,
)


def _compressions(hextets: list[str]) -> list[str]:
    """Every single-'::' spelling of an 8-hextet address (one per zero run)."""
    spellings = []
    for start in range(len(hextets)):
        for end in range(start + 1, len(hextets) + 1):
            if all(h == "0" for h in hextets[start:end]):
                left = ":".join(hextets[:start])
                right = ":".join(hextets[end:])
                spellings.append(f"{left}::{right}")
    return spellings


class TestExpand:
    def test_expands_middle_elision(self):
        assert expand("2001::1bbc:10b0:201e") == "2001:0:0:0:0:1bbc:10b0:201e"

    def test_expands_leading_elision(self):
        assert expand("::1bbc:10b0:201e") == "0:0:0:0:0:1bbc:10b0:201e"

    def test_expands_trailing_elision(self):
        assert expand("2001:db8::") == "2001:db8:0:0:0:0:0:0"

    def test_all_zero_address(self):
        assert expand("::") == "0:0:0:0:0:0:0:0"

    def test_elision_of_nothing_is_accepted(self):
        assert expand("1:2:3:4::5:6:7:8") == "1:2:3:4:5:6:7:8"

    def test_no_elision_is_malformed(self):
        result = expand("2001:0:0:0:0:1bbc:10b0:201e")
        assert isinstance(result, DecodeError)
        assert result.kind == DecodeErrorKind.MALFORMED_ADDRESS

    def test_two_elisions_are_malformed(self):
        result = expand("2001::1::201e")
        assert isinstance(result, DecodeError)
        assert result.kind == DecodeErrorKind.MALFORMED_ADDRESS

    def test_too_many_hextets_are_malformed(self):
        result = expand("1:2:3:4:5::6:7:8:9")
        assert isinstance(result, DecodeError)
        assert result.kind == DecodeErrorKind.MALFORMED_ADDRESS

    @pytest.mark.parametrize("address", ["2001::1bbc:", ":2001::1bbc", "2001:::1bbc"])
    def test_stray_colon_is_malformed(self, address):
        result = expand(address)
        assert isinstance(result, DecodeError)
        assert result.kind == DecodeErrorKind.MALFORMED_ADDRESS

    @pytest.mark.parametrize(
        "full",
        [
            "2001:0:0:0:0:1bbc:10b0:201e",
            "0:0:0:0:0:0:0:0",
            "2001:db8:0:0:1:0:0:1",
            "0:0:1:0:0:0:0:1",
            "fe80:0:0:0:0:0:0:0",
            "1:0:2:0:3:0:4:0",
        ],
    )
    def test_every_compression_expands_to_the_same_value(self, full):
        hextets = full.split(":")
        spellings = _compressions(hextets)
        assert spellings
        for spelling in spellings:
            expanded = expand(spelling)
            assert not isinstance(expanded, DecodeError), spelling
            assert ipaddress.IPv6Address(expanded) == ipaddress.IPv6Address(full)
            recompressed = ipaddress.IPv6Address(expanded).compressed
            if "::" in recompressed:
                assert expand(recompressed) == expanded


class TestDecode:
    def test_documented_example(self):
        assert decode("2001::1bbc:10b0:201e") == DecodedEndpoint("16.176.32.30", 7100)

    def test_leading_elision(self):
        assert decode("::1bbc:10b0:201e") == DecodedEndpoint("16.176.32.30", 7100)

    def test_decoded_value_is_stable_across_compressions(self):
        for spelling in _compressions("2001:0:0:0:0:1bbc:10b0:201e".split(":")):
            assert decode(spelling) == DecodedEndpoint("16.176.32.30", 7100)

    def test_uppercase_hex(self):
        assert decode("2001::1BBC:10B0:201E") == DecodedEndpoint("16.176.32.30", 7100)

    def test_no_elision_is_malformed(self):
        result = decode("2001:0:0:0:0:1bbc:10b0:201e")
        assert isinstance(result, DecodeError)
        assert result.kind == DecodeErrorKind.MALFORMED_ADDRESS

    def test_endpoint_str(self):
        assert str(DecodedEndpoint("16.176.32.30", 7100)) == "16.176.32.30:7100"


class TestPort:
    def test_every_four_digit_port(self):
        for value in range(0x10000):
            xxxx = f"{value:04x}"
            result = decode(f"2001::{xxxx}:a00:1")
            assert isinstance(result, DecodedEndpoint), xxxx
            assert result.port == int(xxxx, 16)

    def test_ffff_is_the_largest_port(self):
        result = decode("2001::ffff:a00:1")
        assert result == DecodedEndpoint("10.0.0.1", 65535)

    def test_short_port_field(self):
        assert decode("2001::50:a00:1") == DecodedEndpoint("10.0.0.1", 80)

    @pytest.mark.parametrize("xxxx", ["10000", "fffff", "123456"])
    def test_overlong_port_is_invalid(self, xxxx):
        result = decode(f"::{xxxx}:a00:1")
        assert isinstance(result, DecodeError)
        assert result.kind == DecodeErrorKind.INVALID_PORT

    @pytest.mark.parametrize("xxxx", ["zzzz", "0x1f", "+1f", "1_f", "g"])
    def test_non_hex_port_is_invalid(self, xxxx):
        result = decode(f"2001::{xxxx}:a00:1")
        assert isinstance(result, DecodeError)
        assert result.kind == DecodeErrorKind.INVALID_PORT


class TestIPv4:
    @staticmethod
    def _expected(yyyy: str, zzzz: str) -> str:
        y, z = yyyy.rjust(4, "0"), zzzz.rjust(4, "0")
        return ".".join(str(int(part, 16)) for part in (y[:2], y[2:], z[:2], z[2:]))

    def test_spread_of_values_with_short_forms(self):
        values = list(range(0, 0x10000, 251)) + [0, 0xF, 0xFF, 0xFFF, 0xFFFF]
        for value in values:
            for yyyy in (f"{value:x}", f"{value:04x}"):
                zzzz = f"{0xFFFF - value:x}"
                result = decode(f"2001::1bbc:{yyyy}:{zzzz}")
                assert isinstance(result, DecodedEndpoint), (yyyy, zzzz)
                assert result.ipv4 == self._expected(yyyy, zzzz)

    def test_short_hextet_holds_low_order_bits(self):
        assert decode("::1bbc:f:f").ipv4 == "0.15.0.15"

    def test_zero_fields(self):
        assert decode("2001::1bbc:0:0") == DecodedEndpoint("0.0.0.0", 7100)

    def test_no_leading_zeros(self):
        assert decode("::1:a01:203").ipv4 == "10.1.2.3"

    def test_broadcast(self):
        assert decode("::1:ffff:ffff").ipv4 == "255.255.255.255"

    @pytest.mark.parametrize(
        "address",
        ["2001::1bbc:g0b0:201e", "2001::1bbc:10b0:20zz", "2001::1bbc:1.2:201e"],
    )
    def test_non_hex_octet_is_invalid(self, address):
        result = decode(address)
        assert isinstance(result, DecodeError)
        assert result.kind == DecodeErrorKind.INVALID_OCTET

    def test_overlong_octet_field_is_invalid(self):
        result = decode("2001::1bbc:10b00:201e")
        assert isinstance(result, DecodeError)
        assert result.kind == DecodeErrorKind.INVALID_OCTET

    def test_embedded_dotted_quad_is_rejected(self):
        result = decode("::ffff:1.2.3.4")
        assert isinstance(result, DecodeError)


class TestDecodeError:
    def test_str_names_the_kind(self):
        error = DecodeError(DecodeErrorKind.INVALID_PORT, "port field 'zz' is not hex")
        assert str(error) == "InvalidPort: port field 'zz' is not hex"
