"""Public IP discovery and Cloudflare DNS record access."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import requests

IPV4_ADDRESS_URL = "https://api.ipify.org?format=json"
IPV6_ADDRESS_URL = "https://api64.ipify.org?format=json"
CF_BASE_URL = "https://api.cloudflare.com/client/v4/zones/"
REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class IPAddresses:
    """The public addresses of this host; ``None`` where one is unavailable."""

    ipv4: str | None = None
    ipv6: str | None = None


def _typed(data: Mapping[str, Any], key: str, kind: type) -> Any:
    value = data.get(key)
    valid = isinstance(value, kind)
    if kind is int and isinstance(value, bool):
        valid = False
    if not valid:
        raise ValueError(f"DNS record field {key!r} must be of type {kind.__name__}")
    return value


@dataclass(frozen=True)
class DNSRecord:
    """A DNS record as reported by Cloudflare."""

    id: str
    name: str
    content: str
    proxied: bool
    ttl: int

    @classmethod
    def from_dict(cls, data: Any) -> DNSRecord:
        """Build a record from one entry of a Cloudflare ``result`` array."""
        if not isinstance(data, Mapping):
            raise ValueError("DNS record must be a JSON object")
        return cls(
            id=_typed(data, "id", str),
            name=_typed(data, "name", str),
            content=_typed(data, "content", str),
            proxied=_typed(data, "proxied", bool),
            ttl=_typed(data, "ttl", int),
        )


class CloudflareAPIError(Exception):
    """Raised when Cloudflare reports a failed request."""

    def __init__(self, message: str, errors: Iterable[Any] = ()) -> None:
        super().__init__(message)
        self.errors = tuple(errors)


def _client(session: requests.Session | None) -> Any:
    return requests if session is None else session


def _auth_header(auth_key: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {auth_key}"}


def _describe_errors(errors: Iterable[Any]) -> str:
    parts = [
        f"[{error.get('code')}] {error.get('message')}"
        if isinstance(error, Mapping)
        else str(error)
        for error in errors
    ]
    return "; ".join(parts) or "request failed"


def _fetch_ip(http: Any, url: str) -> str | None:
    try:
        response = http.get(url, timeout=REQUEST_TIMEOUT)
    except requests.RequestException:
        return None
    payload = response.json()
    ip = payload.get("ip") if isinstance(payload, Mapping) else None
    if not isinstance(ip, str):
        raise ValueError(f"unexpected response from {url}: {payload!r}")
    return ip


def get_current_ip(session: requests.Session | None = None) -> IPAddresses:
    """Look up the public IPv4 and IPv6 addresses.

    An address whose service cannot be reached is left as ``None``; a reply
    that cannot be parsed raises.
    """
    http = _client(session)
    return IPAddresses(
        ipv4=_fetch_ip(http, IPV4_ADDRESS_URL),
        ipv6=_fetch_ip(http, IPV6_ADDRESS_URL),
    )


def get_record_ip(
    records: Iterable[str],
    zone: str,
    auth_key: str,
    record_type: str,
    session: requests.Session | None = None,
) -> list[DNSRecord]:
    """Return the zone's records of ``record_type`` whose names are in ``records``."""
    http = _client(session)
    response = http.get(
        f"{CF_BASE_URL}{zone}/dns_records",
        params={"type": record_type},
        headers=_auth_header(auth_key),
        timeout=REQUEST_TIMEOUT,
    )
    payload = response.json()
    if not isinstance(payload, Mapping) or not isinstance(payload.get("success"), bool):
        raise ValueError(f"unexpected response from Cloudflare: {payload!r}")
    if not payload["success"]:
        errors = payload.get("errors") or []
        raise CloudflareAPIError(_describe_errors(errors), errors)
    result = payload.get("result")
    if result is None:
        raise CloudflareAPIError("No records found!")
    if not isinstance(result, list):
        raise ValueError("Cloudflare result must be a list of records")
    wanted = set(records)
    return [record for record in map(DNSRecord.from_dict, result) if record.name in wanted]


def update_record(
    record: DNSRecord,
    zone_id: str,
    ip: str,
    auth_key: str,
    rec_type: str,
    session: requests.Session | None = None,
) -> None:
    """Point ``record`` at ``ip``, keeping its name, TTL and proxy setting."""
    http = _client(session)
    http.put(
        f"{CF_BASE_URL}{zone_id}/dns_records/{record.id}",
        headers=_auth_header(auth_key),
        json={
            "type": rec_type,
            "name": record.name,
            "content": ip,
            "ttl": record.ttl,
            "proxied": record.proxied,
        },
        timeout=REQUEST_TIMEOUT,
    )