from __future__ import annotations

import base64

import requests
from solders.hash import Hash
from solders.instruction import CompiledInstruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from helpers import RAYDIUM, swap_base_in


class FakeResp:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


def _raw_tx() -> bytes:
    keys = [Pubkey.new_unique(), Pubkey.from_string(RAYDIUM)]
    msg = Message.new_with_compiled_instructions(
        1, 0, 1, keys, Hash.default(), [CompiledInstruction(1, swap_base_in(3, 2), bytes([0]))]
    )
    return bytes(VersionedTransaction.populate(msg, [Signature.default()]))


def _fetcher(**kw):
    from swap_indexer.chains.rpc import TransactionFetcher

    return TransactionFetcher(rpc_url="http://rpc.local", **kw)


def test_fetch_sends_expected_request_and_decodes(monkeypatch):
    calls = []
    raw = _raw_tx()

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResp({"result": {"slot": 5, "transaction": [base64.b64encode(raw).decode(), "base64"]}})

    monkeypatch.setattr("requests.post", fake_post)
    tx = _fetcher(timeout=7).fetch("sig1")

    assert tx is not None
    assert bytes(tx) == raw
    url, body, timeout = calls[0]
    assert url == "http://rpc.local"
    assert timeout == 7
    assert body["method"] == "getTransaction"
    assert body["params"] == [
        "sig1",
        {"encoding": "base64", "commitment": "confirmed", "maxSupportedTransactionVersion": 0},
    ]


def test_fetch_not_found_returns_none(monkeypatch):
    monkeypatch.setattr("requests.post", lambda url, json=None, timeout=None: FakeResp({"result": None}))
    assert _fetcher().fetch("missing") is None


def test_fetch_bad_base64_returns_none(monkeypatch):
    payload = {"result": {"transaction": ["@@not-base64@@", "base64"]}}
    monkeypatch.setattr("requests.post", lambda url, json=None, timeout=None: FakeResp(payload))
    assert _fetcher().fetch("sig") is None


def test_fetch_bad_wire_bytes_returns_none(monkeypatch):
    payload = {"result": {"transaction": [base64.b64encode(b"\x01\x02\x03").decode(), "base64"]}}
    monkeypatch.setattr("requests.post", lambda url, json=None, timeout=None: FakeResp(payload))
    assert _fetcher().fetch("sig") is None


def test_fetch_retries_then_succeeds(monkeypatch):
    raw = _raw_tx()
    attempts = {"n": 0}
    sleeps = []

    def flaky_post(url, json=None, timeout=None):
        attempts["n"] += 1
        if attempts["n"] == 1:
            raise requests.ConnectionError("reset")
        if attempts["n"] == 2:
            return FakeResp({}, status_code=503)
        return FakeResp({"result": {"transaction": [base64.b64encode(raw).decode(), "base64"]}})

    monkeypatch.setattr("requests.post", flaky_post)
    monkeypatch.setattr("time.sleep", lambda s: sleeps.append(s))

    assert _fetcher(retries=2, backoff=0.5).fetch("sig") is not None
    assert attempts["n"] == 3
    assert sleeps == [0.5, 1.0]


def test_fetch_gives_up_after_retries(monkeypatch):
    attempts = {"n": 0}

    def down(url, json=None, timeout=None):
        attempts["n"] += 1
        raise requests.Timeout("slow")

    monkeypatch.setattr("requests.post", down)
    monkeypatch.setattr("time.sleep", lambda s: None)
    assert _fetcher(retries=1).fetch("sig") is None
    assert attempts["n"] == 2


def test_fetch_rpc_error_returns_none(monkeypatch):
    payload = {"error": {"code": -32602, "message": "Invalid param"}}
    monkeypatch.setattr("requests.post", lambda url, json=None, timeout=None: FakeResp(payload))
    assert _fetcher().fetch("sig") is None


def test_fetch_non_object_result_returns_none(monkeypatch):
    for result in ("oops", [1, 2], 7):
        monkeypatch.setattr(
            "requests.post", lambda url, json=None, timeout=None, r=result: FakeResp({"result": r})
        )
        assert _fetcher().fetch("sig") is None
