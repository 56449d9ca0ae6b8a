"""The IP4P decoder — recover an IPv4 endpoint from an IPv6 address.

IP4P packs an IPv4 address and port into the low three hextets of an
IPv6 address:

    A:B:C:D:E:XXXX:YYYY:ZZZZ

XXXX is the port, YYYY holds IPv4 octets 1-2, ZZZZ holds octets 3-4.

Pure functions. Failures are returned as DecodeError values, never
raised, so callers can branch on the kind.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

HEXTETS = 8
MAX_PORT = 0xFFFF

_HEX = re.compile(r"[0-9a-fA-F]+")


class DecodeErrorKind(str, Enum):
    MALFORMED_ADDRESS = "MalformedAddress"
    INVALID_PORT = "InvalidPort"
    INVALID_OCTET = "InvalidOctet"


@dataclass(frozen=True)
class DecodeError:
    """Why an address could not be decoded."""

    kind: DecodeErrorKind
    reason: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.reason}"


@dataclass(frozen=True)
class DecodedEndpoint:
    """IPv4 address and port carried by an IP4P address."""

    ipv4: str
    port: int

    def __str__(self) -> str:
        return f"{self.ipv4}:{self.port}"


def _parse_hex(text: str) -> int | None:
    # int(text, 16) alone would accept "0x", signs, "_" and whitespace
    if not _HEX.fullmatch(text):
        return None
    return int(text, 16)


def _malformed(reason: str) -> DecodeError:
    return DecodeError(DecodeErrorKind.MALFORMED_ADDRESS, reason)


def expand(address: str) -> str | DecodeError:
    """Restore the zero hextets elided by a single ``::``.

    ``2001::1bbc:10b0:201e`` becomes ``2001:0:0:0:0:1bbc:10b0:201e``.
    """
    markers = address.count("::")
    if markers != 1:
        return _malformed(f"expected exactly one '::', found {markers}")

    left, right = address.split("::")
    left_hextets = left.split(":") if left else []
    right_hextets = right.split(":") if right else []
    if "" in left_hextets or "" in right_hextets:
        return _malformed("empty hextet")

    missing = HEXTETS - (len(left_hextets) + len(right_hextets))
    if missing < 0:
        return _malformed(
            f"{len(left_hextets) + len(right_hextets)} hextets around '::'"
        )

    hextets = left_hextets + ["0"] * missing + right_hextets
    if len(hextets) != HEXTETS:
        return _malformed(f"expanded to {len(hextets)} hextets")
    return ":".join(hextets)


def _octets(hextet: str, label: str) -> tuple[int, int] | DecodeError:
    if len(hextet) > 4:
        return DecodeError(
            DecodeErrorKind.INVALID_OCTET, f"{label} {hextet!r} longer than 4 digits"
        )
    padded = hextet.rjust(4, "0")
    high = _parse_hex(padded[:2])
    low = _parse_hex(padded[2:])
    if high is None or low is None:
        return DecodeError(DecodeErrorKind.INVALID_OCTET, f"{label} {hextet!r} is not hex")
    return high, low


def decode(address: str) -> DecodedEndpoint | DecodeError:
    """Decode an IP4P address into its IPv4 endpoint."""
    expanded = expand(address)
    if isinstance(expanded, DecodeError):
        return expanded

    hextets = expanded.split(":")
    if len(hextets) != HEXTETS:
        return _malformed(f"expected {HEXTETS} hextets, got {len(hextets)}")

    xxxx, yyyy, zzzz = hextets[5], hextets[6], hextets[7]

    port = _parse_hex(xxxx)
    if port is None:
        return DecodeError(DecodeErrorKind.INVALID_PORT, f"port field {xxxx!r} is not hex")
    if port > MAX_PORT:
        return DecodeError(DecodeErrorKind.INVALID_PORT, f"port {port} out of range")

    high = _octets(yyyy, "YYYY")
    if isinstance(high, DecodeError):
        return high
    low = _octets(zzzz, "ZZZZ")
    if isinstance(low, DecodeError):
        return low

    ipv4 = ".".join(str(octet) for octet in (*high, *low))
    return DecodedEndpoint(ipv4=ipv4, port=port)
