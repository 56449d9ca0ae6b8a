"""Redirect router — identifier in, HTTPS redirect target out.

Each call is an independent lookup → resolve → decode transaction.
One resolution attempt per request; failures come back as RouterError
values for the HTTP layer to classify.
"""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ip4p_redirect.decoder import DecodedEndpoint, DecodeError, decode
from ip4p_redirect.mappings import MappingTable
from ip4p_redirect.resolver import Resolver, ResolverError

logger = logging.getLogger("ip4p_redirect.router")

Decoder = Callable[[str], DecodedEndpoint | DecodeError]


class RouterErrorKind(str, Enum):
    BAD_REQUEST = "BadRequest"
    NOT_FOUND = "NotFound"
    RESOLUTION_FAILED = "ResolutionFailed"
    DECODE_FAILED = "DecodeFailed"


@dataclass(frozen=True)
class RouterError:
    kind: RouterErrorKind
    message: str
    cause: DecodeError | None = None

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.kind.value}: {self.message} ({self.cause})"
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class RedirectTarget:
    """Where to send the client with a permanent redirect."""

    url: str
    endpoint: DecodedEndpoint
    domain: str
    address: str


def _is_ipv4_mapped(address: str) -> bool:
    try:
        return ipaddress.IPv6Address(address).ipv4_mapped is not None
    except ValueError:
        return False


def select_ip4p_address(addresses: list[str]) -> str | None:
    """First IPv6-form result; IPv4 literals and IPv4-mapped addresses are skipped."""
    for address in addresses:
        if ":" in address and not _is_ipv4_mapped(address):
            return address
    return None


def canonical_ipv6(address: str) -> str:
    """Compressed text form, as a system resolver reports addresses.

    Text that does not parse as IPv6 is returned untouched so the
    decoder can classify it.
    """
    try:
        return ipaddress.IPv6Address(address).compressed
    except ValueError:
        return address


class Router:
    """Turns a path identifier into a redirect target or a classified error."""

    def __init__(
        self,
        mappings: MappingTable,
        resolver: Resolver,
        decoder: Decoder = decode,
    ) -> None:
        self.mappings = mappings
        self.resolver = resolver
        self.decoder = decoder

    def route(self, identifier: str) -> RedirectTarget | RouterError:
        if not identifier:
            return RouterError(RouterErrorKind.BAD_REQUEST, "identifier required")

        domain = self.mappings.lookup(identifier)
        if domain is None:
            return RouterError(RouterErrorKind.NOT_FOUND, "identifier not found")

        try:
            addresses = self.resolver(domain)
        except ResolverError as exc:
            logger.warning("Resolving %s for %s failed: %s", domain, identifier, exc)
            return RouterError(RouterErrorKind.RESOLUTION_FAILED, str(exc))

        address = select_ip4p_address(addresses)
        if address is None:
            logger.warning("No IPv6 address for %s (got %s)", domain, addresses)
            return RouterError(
                RouterErrorKind.RESOLUTION_FAILED, f"no AAAA record found for {domain}"
            )

        endpoint = self.decoder(canonical_ipv6(address))
        if isinstance(endpoint, DecodeError):
            logger.warning("Cannot decode %s from %s: %s", address, domain, endpoint)
            return RouterError(
                RouterErrorKind.DECODE_FAILED,
                f"failed to decode {address}",
                cause=endpoint,
            )

        url = f"https://{endpoint.ipv4}:{endpoint.port}"
        logger.info("Redirect %s -> %s (%s via %s)", identifier, endpoint, domain, address)
        return RedirectTarget(url=url, endpoint=endpoint, domain=domain, address=address)
