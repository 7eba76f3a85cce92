"""
Utilities for container keys and caller network addresses.
"""
import ipaddress
from typing import Optional

from ..errors import AddressUnresolvable

# Docker's short container id length
CONTAINER_KEY_LENGTH = 12


def container_key(container_id: str) -> str:
    """
    Returns the key a container is stored under in a snapshot.

    Both full ids and short ids (e.g. a container's hostname) map
    to the same key.
    """
    return container_id.strip()[:CONTAINER_KEY_LENGTH]


def normalize_address(address: str) -> str:
    """
    Returns the canonical text form of an IP address.
    IPv4-mapped IPv6 addresses are reduced to their IPv4 form.

    :raises ValueError: If ``address`` is not an IP address.
    """
    ip = ipaddress.ip_address(address.strip())
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return str(ip)


def same_address(a: str, b: str) -> bool:
    """
    Checks if two address strings denote the same IP. Unparseable
    values only match when they are textually equal.
    """
    if a == b:
        return True
    try:
        return normalize_address(a) == normalize_address(b)
    except ValueError:
        return False


def resolve_client_address(host: Optional[str]) -> str:
    """
    Determines the caller address from the remote host of a connection.

    :param host: Remote host as reported by the server, may be None.
    :return: Normalized IP address.
    :raises AddressUnresolvable: If no IP address can be derived.
    """
    if not host:
        raise AddressUnresolvable("Couldn't determine caller IP from request")
    try:
        return normalize_address(host)
    except ValueError as e:
        raise AddressUnresolvable(f"Caller address {host!r} is not an IP address") from e
