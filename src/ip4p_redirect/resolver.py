"""Domain resolution — the only blocking call on the request path.

Timeouts and retries are left to the platform resolver.
"""

from __future__ import annotations

import logging
import socket
from typing import Protocol

logger = logging.getLogger("ip4p_redirect.resolver")


class ResolverError(Exception):
    """Domain lookup failed."""


class Resolver(Protocol):
    def __call__(self, domain: str) -> list[str]: ...


class SystemResolver:
    """Host lookup through getaddrinfo, A and AAAA results in resolver order."""

    def __call__(self, domain: str) -> list[str]:
        try:
            infos = socket.getaddrinfo(domain, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
        except (OSError, UnicodeError) as exc:
            raise ResolverError(f"failed to resolve {domain}: {exc}") from exc

        addresses: list[str] = []
        for _family, _type, _proto, _canonname, sockaddr in infos:
            # IPv6 link-local results may carry a %scope suffix
            address = str(sockaddr[0]).split("%", 1)[0]
            if address not in addresses:
                addresses.append(address)
        logger.debug("Resolved %s to %s", domain, addresses)
        return addresses
