"""HTTP tests for the journal API."""

import json
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from logbook.api import auth as auth_api


def _register(client, name="Alice", pin="1234", **extra):
    return client.post("/api/auth/register", json={"name": name, "pin": pin, **extra})


def _send_raw(client, url, body, method="post"):
    return client.request(method.upper(), url, content=body, headers={"Content-Type": "application/json"})


def _trade_payload(**overrides):
    payload = {
        "ticker": "es",
        "date_entry": "2024-03-01T14:30:00",
        "price_entry": 100,
        "price_stop": 95,
        "price_exit": 110,
        "contracts": 100,
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# 1. Auth
# ---------------------------------------------------------------------------

def test_health(client):
    assert client.get("/api/system/health").json() == {"status": "ok"}


def test_register_sets_session(client):
    resp = _register(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Alice"
    assert body["account_start"] == 10000.0
    assert "pin_hash" not in body

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["name"] == "Alice"


def test_register_rejects_duplicate_name_case_insensitive(client):
    _register(client)
    resp = _register(client, name="ALICE")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Name already taken"


def test_register_caps_trader_count(client):
    for name in ("Alice", "Bob", "Carol"):
        assert _register(client, name=name).status_code == 201
    resp = _register(client, name="Dave")
    assert resp.status_code == 400
    assert "Maximum 3" in resp.json()["detail"]


def test_register_waits_for_pending_registration(client):
    with ThreadPoolExecutor(max_workers=1) as pool:
        with auth_api._registration_lock:
            future = pool.submit(_register, client, "Alice")
            time.sleep(0.2)
            assert not future.done()
        assert future.result(timeout=10).status_code == 201


def test_register_rejects_infinite_account_start(client):
    body = '{"name": "Alice", "pin": "1234", "account_start": 1e309}'
    assert _send_raw(client, "/api/auth/register", body).status_code == 422


@pytest.mark.parametrize("pin", ["12", "123456789"])
def test_register_rejects_bad_pin(client, pin):
    assert _register(client, pin=pin).status_code == 422


def test_login_and_logout(client):
    _register(client)
    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401

    bad = client.post("/api/auth/login", json={"name": "alice", "pin": "9999"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid name or PIN"

    ok = client.post("/api/auth/login", json={"name": "alice", "pin": "1234"})
    assert ok.status_code == 200
    assert client.get("/api/auth/me").json()["name"] == "Alice"


def test_bearer_token_accepted(client):
    _register(client)
    token = client.cookies.get("trading-logbook-session")
    client.cookies.clear()

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


def test_protected_routes_require_session(client):
    assert client.get("/api/trades").status_code == 401
    assert client.get("/api/stats").status_code == 401
    assert client.post("/api/trades", json=_trade_payload()).status_code == 401


def test_garbage_token_rejected(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid or expired token"


# ---------------------------------------------------------------------------
# 2. Trades
# ---------------------------------------------------------------------------

def test_create_trade_returns_derived_fields(client):
    _register(client)
    resp = client.post("/api/trades", json=_trade_payload())
    assert resp.status_code == 201
    trade = resp.json()

    assert trade["ticker"] == "ES"
    assert trade["trade_number"] == 1
    assert trade["usd_at_risk"] == 500.0
    assert trade["planned_risk_usd"] == 50.0
    assert trade["pnl_usd"] == 1000.0
    assert trade["trade_r"] == 2.0
    assert trade["nett_r"] == 20.0
    assert trade["equity_after"] == 11000.0


def test_create_trade_validation(client):
    _register(client)
    assert client.post("/api/trades", json=_trade_payload(price_entry="abc")).status_code == 422
    assert client.post("/api/trades", json=_trade_payload(contracts=0)).status_code == 422


def test_create_trade_rejects_nan_literal(client):
    _register(client)
    body = json.dumps(_trade_payload()).replace('"price_entry": 100', '"price_entry": NaN')
    assert "NaN" in body

    resp = _send_raw(client, "/api/trades", body)
    assert resp.status_code == 422
    assert client.get("/api/trades").json() == []


def test_list_and_get_trades(client):
    _register(client)
    client.post("/api/trades", json=_trade_payload())
    client.post("/api/trades", json=_trade_payload(date_entry="2024-03-02T09:00:00"))
    trader_id = client.get("/api/auth/me").json()["id"]

    by_trader = client.get("/api/trades", params={"trader_id": trader_id}).json()
    assert [t["trade_number"] for t in by_trader] == [1, 2]

    newest_first = client.get("/api/trades").json()
    assert [t["trade_number"] for t in newest_first] == [2, 1]

    trade_id = by_trader[0]["id"]
    assert client.get(f"/api/trades/{trade_id}").json()["trade_number"] == 1
    assert client.get("/api/trades/9999").status_code == 404


def test_update_trade_only_touches_mutable_fields(client):
    _register(client)
    trade = client.post("/api/trades", json=_trade_payload(price_exit=None)).json()

    resp = client.put(
        f"/api/trades/{trade['id']}",
        json={"price_exit": 120, "analysed": True, "tags": "breakout", "price_tp": "1@130"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["price_exit"] == 120.0
    assert body["analysed"] is True
    assert body["tags"] == "breakout"
    assert body["price_tp"] is None
    assert body["pnl_usd"] is None


def test_update_trade_without_fields(client):
    _register(client)
    trade = client.post("/api/trades", json=_trade_payload()).json()
    assert client.put(f"/api/trades/{trade['id']}", json={}).status_code == 400


def test_update_trade_rejects_null_analysed(client):
    _register(client)
    trade = client.post("/api/trades", json=_trade_payload()).json()

    resp = client.put(f"/api/trades/{trade['id']}", json={"analysed": None})
    assert resp.status_code == 422
    assert client.get(f"/api/trades/{trade['id']}").json()["analysed"] is False


def test_update_trade_rejects_infinite_exit(client):
    _register(client)
    trade = client.post("/api/trades", json=_trade_payload(price_exit=None)).json()
    resp = _send_raw(client, f"/api/trades/{trade['id']}", '{"price_exit": Infinity}', method="put")
    assert resp.status_code == 422


def test_cannot_change_other_traders_trade(client):
    _register(client, name="Alice")
    trade = client.post("/api/trades", json=_trade_payload()).json()

    _register(client, name="Bob")
    assert client.put(f"/api/trades/{trade['id']}", json={"notes": "mine"}).status_code == 403
    assert client.delete(f"/api/trades/{trade['id']}").status_code == 403
    # Reading is shared
    assert client.get(f"/api/trades/{trade['id']}").status_code == 200


def test_delete_trade(client):
    _register(client)
    trade = client.post("/api/trades", json=_trade_payload()).json()

    assert client.delete(f"/api/trades/{trade['id']}").status_code == 204
    assert client.get(f"/api/trades/{trade['id']}").status_code == 404


# ---------------------------------------------------------------------------
# 3. Settings, stats, export
# ---------------------------------------------------------------------------

def test_update_settings(client):
    _register(client)
    resp = client.put("/api/traders/me", json={"stepsize_up": 20, "gamification_enabled": False})
    assert resp.status_code == 200
    assert resp.json()["stepsize_up"] == 20.0
    assert resp.json()["gamification_enabled"] is False

    traders = client.get("/api/traders").json()
    assert len(traders) == 1
    assert traders[0]["stepsize_up"] == 20.0


@pytest.mark.parametrize("payload", [{"base_risk_pct": 0}, {"account_start": None}])
def test_update_settings_rejects_invalid(client, payload):
    _register(client)
    assert client.put("/api/traders/me", json=payload).status_code == 422


def test_infinite_settings_rejected_and_trading_continues(client):
    _register(client)
    resp = _send_raw(client, "/api/traders/me", '{"stepsize_up": 1e309}', method="put")
    assert resp.status_code == 422
    assert client.get("/api/auth/me").json()["stepsize_up"] == 30.0

    assert client.post("/api/trades", json=_trade_payload()).status_code == 201
    assert client.get("/api/stats").status_code == 200


def test_stats(client):
    _register(client)
    client.post("/api/trades", json=_trade_payload())
    client.post("/api/trades", json=_trade_payload(price_exit=90))
    trader_id = client.get("/api/auth/me").json()["id"]

    stats = client.get("/api/stats").json()
    assert len(stats) == 1
    card = stats[0]
    assert card["trader"]["name"] == "Alice"
    assert card["stats"]["total_trades"] == 2
    assert card["stats"]["win_rate"] == 0.5
    assert card["level"]["level"] == 0
    assert card["current_equity"] == 10000.0
    assert card["unanalysed_count"] == 2

    assert client.get("/api/stats", params={"trader_id": 9999}).json() == []

    levels = client.get(f"/api/stats/{trader_id}/levels").json()
    assert [lvl["trade_number"] for lvl in levels] == [1, 2]

    equity = client.get(f"/api/stats/{trader_id}/equity").json()
    assert [p["equity"] for p in equity] == [11000.0, 10000.0]

    assert client.get("/api/stats/9999/levels").status_code == 404


def test_export_csv(client):
    _register(client)
    client.post("/api/trades", json=_trade_payload(notes="clean, textbook"))

    resp = client.get("/api/export")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "trading-logbook-" in resp.headers["content-disposition"]

    lines = resp.text.strip().split("\n")
    assert lines[0].startswith("Trader,Trade #,Ticker,Date Entry")
    assert lines[1].startswith("Alice,1,ES,")
    assert '"clean, textbook"' in lines[1]
    assert ",No," in lines[1]
