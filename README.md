# cfdnsupdater

A small dynamic-DNS daemon for Cloudflare. On each pass it looks up the
machine's current public IPv4 and IPv6 addresses. It then updates any
configured A and AAAA records that no longer match. It does this for every
API token and zone listed in a JSON config file, waits, and checks again.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Configuration

By default the updater reads `config.json` from the working directory.
The `-c` option points it at another file. Keys are PascalCase:

```json
{
  "UpdateThreshold": 300,
  "Keys": [
    {
      "AuthKey": "token",
      "Zones": [
        {
          "ZoneId": "0123456789abcdef0123456789abcdef",
          "ARecords": ["home.example.com"],
          "AaaaRecords": ["home.example.com"]
        }
      ]
    }
  ]
}
```

- `UpdateThreshold`: the number of seconds to wait between passes. It must be
  a non-negative integer.
- `AuthKey`: a Cloudflare API token with permission to edit DNS in the zones
  listed under it.
- `ZoneId`: the Cloudflare zone identifier.
- `ARecords` / `AaaaRecords`: the record names to keep pointed at the current
  IPv4 / IPv6 address.

Every field is required. If the file cannot be read, is not valid JSON, or
has a missing or wrongly typed field, the updater prints the reason and exits
with status 1.

## Usage

```
cfdnsupdater
cfdnsupdater -c /etc/cfdnsupdater/config.json
```

Arguments other than `-c <path>` are ignored. If `-c` is given more than
once, the last one wins. The updater runs until it is interrupted with
Ctrl-C, and then exits with status 0.

On each pass it:

1. Asks ipify for the public IPv4 address, then for the IPv6 address. If a
   lookup cannot reach the service, that address is treated as missing and
   the records of that family are skipped. If the reply cannot be understood,
   the pass fails.
2. Fetches the A and AAAA records of each configured zone and keeps only the
   names you listed.
3. Rewrites any kept record whose content differs from the current address.
   The record keeps its name, TTL and proxied setting.

If a pass fails, for example because Cloudflare reports an error while
records are being fetched, the error is printed. The next pass still runs
after the threshold. A network failure while one record is being rewritten
is printed next to that record, and the pass goes on with the rest.

Progress is written to standard output, and this includes each `AuthKey`.
Keep that in mind before you collect the output in shared logs.

## Library use

The building blocks can be imported directly:

```python
import requests
from cfdnsupdater.api import get_current_ip, get_record_ip, update_record
from cfdnsupdater.config import load_config
from cfdnsupdater.cli import check_and_update_ip

config = load_config("config.json")
with requests.Session() as session:
    check_and_update_ip(config, session)
```

- `cfdnsupdater.config`: `load_config(path)` returns a frozen `Config` made of
  `Key` and `Zone` objects. It raises `ConfigError` if the file is missing or
  malformed. Each class also has a `from_dict` constructor for data that has
  already been parsed.
- `cfdnsupdater.api`: `get_current_ip()` returns an `IPAddresses` object with
  `ipv4` and `ipv6` set, or `None` where a lookup could not be made.
  `get_record_ip(records, zone, auth_key, record_type)` returns a list of
  `DNSRecord` objects. It raises `CloudflareAPIError` when Cloudflare reports
  a failure or returns no result; the error's `errors` attribute holds what
  Cloudflare sent. `update_record(record, zone_id, ip, auth_key, rec_type)`
  sends the update.
- `cfdnsupdater.cli`: `check_and_update_ip(config)` runs one pass.
  `main(argv)` is the command itself.

Each API function takes an optional `session` (a `requests.Session`) to
reuse connections.

## Limitations

- `update_record` does not read Cloudflare's reply to the update. A rejected
  update is still reported as "Record updated"; only network failures are
  shown as errors.
- Records are only updated, never created. A listed name that does not exist
  in the zone is silently ignored.
- There is no built-in service or scheduler integration. The command is a
  plain foreground loop.