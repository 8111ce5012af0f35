"""Command line entry point: keep Cloudflare records pointed at this host."""

from __future__ import annotations

import sys
import time
from collections.abc import Sequence

import requests

from cfdnsupdater.api import (
    DNSRecord,
    get_current_ip,
    get_record_ip,
    update_record,
)
from cfdnsupdater.config import DEFAULT_CONFIG_PATH, Config, ConfigError, load_config

VERSION = "1.1.0"


def parse_args(argv: Sequence[str] | None = None) -> str:
    """Return the config path chosen with ``-c``, or the default one.

    Unknown arguments are ignored and the last ``-c`` wins.
    """
    args = iter(sys.argv[1:] if argv is None else argv)
    config_path = None
    for arg in args:
        if arg == "-c":
            value = next(args, None)
            if value is not None:
                config_path = value
                print(f"Using custom config path: {config_path}")
    return config_path if config_path is not None else DEFAULT_CONFIG_PATH


def _sync_records(
    records: list[DNSRecord],
    ip: str | None,
    family: str,
    rec_type: str,
    zone_id: str,
    auth_key: str,
    session: requests.Session | None,
) -> None:
    if ip is None:
        print(f"No {family} address found, skipping {rec_type} records")
        return
    print(f"\nCurrent {family} address: {ip}")
    for record in records:
        if record.content == ip:
            print(f"Record {record.name} is up to date")
            continue
        print(f"Updating record {record.name} from {record.content} to {ip}", end="")
        try:
            update_record(record, zone_id, ip, auth_key, rec_type, session)
        except requests.RequestException as exc:
            print(f" - Error: {exc}")
        else:
            print(" - Record updated")


def check_and_update_ip(config: Config, session: requests.Session | None = None) -> None:
    """Update every configured record whose address differs from the current one."""
    print("Getting current IP addresses...")
    current = get_current_ip(session)
    for key in config.keys:
        print(f"Updating zones for key {key.auth_key}")
        for zone in key.zones:
            print(f"Updating records for zone {zone.zone_id}")
            a_records = get_record_ip(zone.a_records, zone.zone_id, key.auth_key, "A", session)
            aaaa_records = get_record_ip(
                zone.aaaa_records, zone.zone_id, key.auth_key, "AAAA", session
            )
            _sync_records(a_records, current.ipv4, "IPv4", "A", zone.zone_id, key.auth_key, session)
            _sync_records(
                aaaa_records, current.ipv6, "IPv6", "AAAA", zone.zone_id, key.auth_key, session
            )
            print("Done updating zone")
        print("Done updating keys zones")


def main(argv: Sequence[str] | None = None) -> int:
    """Load the configuration and update records until interrupted."""
    print(f"Cloudflare IP updater v{VERSION}")
    print("Loading config... ", end="")
    try:
        config = load_config(parse_args(argv))
    except ConfigError as exc:
        print(f"\nFailed to load config: {exc}", file=sys.stderr)
        return 1
    print("Loaded!")
    try:
        with requests.Session() as session:
            while True:
                try:
                    check_and_update_ip(config, session)
                except Exception as exc:  # keep the daemon running on any failure
                    print(f"\nError: {exc}")
                time.sleep(config.update_threshold)
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())