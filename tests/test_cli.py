import json
from unittest import mock

import pytest
import requests
import responses
from responses import matchers

from cfdnsupdater import api, cli
from cfdnsupdater.api import CloudflareAPIError
from cfdnsupdater.config import Config

RECORDS_URL = f"{api.CF_BASE_URL}zone-1/dns_records"

CONFIG_DATA = {
    "UpdateThreshold": 60,
    "Keys": [
        {
            "AuthKey": "token",
            "Zones": [
                {
                    "ZoneId": "zone-1",
                    "ARecords": ["a.example.com"],
                    "AaaaRecords": ["v6.example.com"],
                }
            ],
        }
    ],
}


def record_dict(record_id, name, content):
    return {"id": record_id, "name": name, "content": content, "proxied": False, "ttl": 1}


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def register_records(rsps, a_content, aaaa_content):
    rsps.add(
        responses.GET,
        RECORDS_URL,
        match=[matchers.query_param_matcher({"type": "A"})],
        json={"success": True, "result": [record_dict("r1", "a.example.com", a_content)]},
    )
    rsps.add(
        responses.GET,
        RECORDS_URL,
        match=[matchers.query_param_matcher({"type": "AAAA"})],
        json={"success": True, "result": [record_dict("r2", "v6.example.com", aaaa_content)]},
    )


def put_calls(rsps):
    return [call for call in rsps.calls if call.request.method == "PUT"]


@pytest.mark.parametrize(
    "argv, expected",
    [
        ([], "config.json"),
        (["-c", "custom.json"], "custom.json"),
        (["-v", "-c", "one.json", "-c", "two.json"], "two.json"),
        (["-c"], "config.json"),
    ],
)
def test_parse_args(argv, expected):
    assert cli.parse_args(argv) == expected


def test_updates_outdated_record_only(mocked, capsys):
    mocked.add(responses.GET, api.IPV4_ADDRESS_URL, json={"ip": "203.0.113.9"})
    mocked.add(responses.GET, api.IPV6_ADDRESS_URL, json={"ip": "2001:db8::1"})
    register_records(mocked, "203.0.113.1", "2001:db8::1")
    mocked.add(responses.PUT, f"{RECORDS_URL}/r1", json={"success": True})

    cli.check_and_update_ip(Config.from_dict(CONFIG_DATA), requests.Session())

    puts = put_calls(mocked)
    assert len(puts) == 1
    assert json.loads(puts[0].request.body)["content"] == "203.0.113.9"
    out = capsys.readouterr().out
    assert "Updating record a.example.com from 203.0.113.1 to 203.0.113.9 - Record updated" in out
    assert "Record v6.example.com is up to date" in out
    assert out.rstrip().endswith("Done updating keys zones")


def test_missing_ipv6_skips_aaaa(mocked, capsys):
    mocked.add(responses.GET, api.IPV4_ADDRESS_URL, json={"ip": "203.0.113.1"})
    mocked.add(responses.GET, api.IPV6_ADDRESS_URL, body=requests.ConnectionError("down"))
    register_records(mocked, "203.0.113.1", "2001:db8::1")

    cli.check_and_update_ip(Config.from_dict(CONFIG_DATA))

    assert put_calls(mocked) == []
    out = capsys.readouterr().out
    assert "No IPv6 address found, skipping AAAA records" in out
    assert "Record a.example.com is up to date" in out


def test_update_failure_is_reported(mocked, capsys):
    mocked.add(responses.GET, api.IPV4_ADDRESS_URL, json={"ip": "203.0.113.9"})
    mocked.add(responses.GET, api.IPV6_ADDRESS_URL, body=requests.ConnectionError("down"))
    register_records(mocked, "203.0.113.1", "2001:db8::1")
    mocked.add(responses.PUT, f"{RECORDS_URL}/r1", body=requests.ConnectionError("refused"))

    cli.check_and_update_ip(Config.from_dict(CONFIG_DATA))

    assert " - Error: refused" in capsys.readouterr().out


def test_record_lookup_failure_propagates(mocked):
    mocked.add(responses.GET, api.IPV4_ADDRESS_URL, json={"ip": "203.0.113.9"})
    mocked.add(responses.GET, api.IPV6_ADDRESS_URL, json={"ip": "2001:db8::1"})
    mocked.add(
        responses.GET,
        RECORDS_URL,
        json={"success": False, "errors": [{"code": 9109, "message": "denied"}]},
    )
    with pytest.raises(CloudflareAPIError, match="denied"):
        cli.check_and_update_ip(Config.from_dict(CONFIG_DATA))


def test_main_fails_on_missing_config(tmp_path, capsys):
    assert cli.main(["-c", str(tmp_path / "absent.json")]) == 1
    assert "Failed to load config" in capsys.readouterr().err


def test_main_runs_until_interrupted(tmp_path, mocked, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG_DATA), encoding="utf-8")
    mocked.add(responses.GET, api.IPV4_ADDRESS_URL, json={"ip": "203.0.113.1"})
    mocked.add(responses.GET, api.IPV6_ADDRESS_URL, json={"ip": "2001:db8::1"})
    register_records(mocked, "203.0.113.1", "2001:db8::1")

    with mock.patch("cfdnsupdater.cli.time.sleep", side_effect=KeyboardInterrupt) as sleep:
        assert cli.main(["-c", str(path)]) == 0

    sleep.assert_called_once_with(60)
    out = capsys.readouterr().out
    assert "Cloudflare IP updater v1.1.0" in out
    assert "Loaded!" in out
    assert "Record a.example.com is up to date" in out


def test_main_reports_cycle_errors(tmp_path, mocked, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG_DATA), encoding="utf-8")
    mocked.add(responses.GET, api.IPV4_ADDRESS_URL, body="not json")

    with mock.patch("cfdnsupdater.cli.time.sleep", side_effect=KeyboardInterrupt):
        assert cli.main(["-c", str(path)]) == 0

    assert "\nError: " in capsys.readouterr().out