"""Tests for xdcc_engine/dcc.py."""

import ipaddress

import pytest

from tests.fixtures.dcc_payloads import MALFORMED_PAYLOADS, VALID_PAYLOADS
from xdcc_engine.dcc import DccOffer, is_dcc_send, parse_dcc_send
from xdcc_engine.errors import DccParseError, ParseReason


@pytest.mark.parametrize(
    ("payload", "filename", "address", "port", "filesize", "known"), VALID_PAYLOADS
)
def test_parse_valid_payloads(payload, filename, address, port, filesize, known):
    offer = parse_dcc_send(payload)
    assert offer.filename == filename
    assert offer.address == ipaddress.ip_address(address)
    assert offer.port == port
    assert offer.filesize == filesize
    assert offer.filesize_known is known


@pytest.mark.parametrize(("payload", "reason"), MALFORMED_PAYLOADS)
def test_parse_malformed_payloads(payload, reason):
    with pytest.raises(DccParseError) as excinfo:
        parse_dcc_send(payload)
    assert excinfo.value.reason is ParseReason[reason]
    assert excinfo.value.payload == payload


def test_reference_example():
    offer = parse_dcc_send('DCC SEND "My File.bin" 3232235777 51413 104857600')
    assert offer == DccOffer(
        filename="My File.bin",
        address=ipaddress.IPv4Address("192.168.1.1"),
        port=51413,
        filesize=104857600,
    )
    assert offer.endpoint == ("192.168.1.1", 51413)
    assert offer.is_passive is False


def test_trailing_tokens_are_ignored():
    offer = parse_dcc_send("DCC SEND a.bin 3232235777 5000 10 T 12345")
    assert offer.filename == "a.bin"
    assert offer.filesize == 10


def test_passive_offer_flag():
    assert parse_dcc_send("DCC SEND a.bin 3232235777 0 10 42").is_passive


def test_quoted_filename_keeps_inner_spacing():
    offer = parse_dcc_send('DCC SEND "two  spaces .txt"   3232235777   5000   7')
    assert offer.filename == "two  spaces .txt"
    assert offer.port == 5000


def test_parse_error_message_mentions_token():
    with pytest.raises(DccParseError, match="non-numeric port: abc"):
        parse_dcc_send("DCC SEND a.bin 3232235777 abc 10")


def test_offer_is_immutable():
    offer = parse_dcc_send("DCC SEND a.bin 3232235777 5000 10")
    with pytest.raises(AttributeError):
        offer.port = 1  # type: ignore[misc]


def test_is_dcc_send():
    assert is_dcc_send("DCC SEND x 1 2 3")
    assert is_dcc_send("dcc Send x")
    assert not is_dcc_send("DCC ACCEPT x 1 2")
    assert not is_dcc_send("XDCC SEND 5")
    assert not is_dcc_send("")
