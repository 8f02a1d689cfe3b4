from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.testclient import TestClient

from tradejournal.api import deps
from tradejournal.api import trades as trades_api
from tradejournal.services.repository import ServiceResult
from tradejournal.services.trade_store import StoreRegistry, TradeStore

CSV_HEADER = "date,symbol,side,entry,exit,quantity,pnl,commission\n"


def _create_app(strict: bool = False, factory=None) -> FastAPI:
    app = FastAPI()
    registry = StoreRegistry(factory or (lambda user_id: TradeStore(strict=strict)))
    app.include_router(trades_api.router)
    app.dependency_overrides[deps.get_registry] = lambda: registry
    return app


def _trade_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "date": "2024-01-02",
        "symbol": "eurusd",
        "side": "long",
        "entry_price": 1.05,
        "exit_price": 1.06,
        "quantity": 1,
        "pnl": 100,
        "commission": 5,
        "tags": ["trend"],
    }
    payload.update(overrides)
    return payload


class _BrokenRepository:
    user_id = "broken"

    def __getattr__(self, name: str):
        return lambda *args, **kwargs: ServiceResult(error="database unavailable")


def test_trades_crud_flow() -> None:
    client = TestClient(_create_app())

    response = client.post("/trades/", json=_trade_payload())
    assert response.status_code == 201
    trade = response.json()
    assert trade["symbol"] == "EURUSD"
    assert trade["tags"] == ["TREND"]
    trade_id = trade["id"]

    response = client.post(
        "/trades/bulk",
        json=[_trade_payload(symbol="AAPL", date="2024-01-03"), _trade_payload(symbol="TSLA", pnl=-20)],
    )
    assert response.status_code == 201
    assert len(response.json()) == 2

    response = client.get("/trades/")
    assert [item["symbol"] for item in response.json()] == ["EURUSD", "AAPL", "TSLA"]

    response = client.get("/trades/", params={"date": "2024-01-02"})
    assert [item["symbol"] for item in response.json()] == ["EURUSD", "TSLA"]

    response = client.get("/trades/", params={"symbol": "aapl"})
    assert [item["symbol"] for item in response.json()] == ["AAPL"]

    response = client.patch(f"/trades/{trade_id}", json={"pnl": 150, "notes": "Held to target"})
    assert response.status_code == 200
    assert response.json()["pnl"] == 150
    assert response.json()["notes"] == "Held to target"

    response = client.patch(f"/trades/{trade_id}", json={"notes": None})
    assert response.json()["notes"] is None
    assert response.json()["pnl"] == 150

    response = client.delete(f"/trades/{trade_id}")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert len(client.get("/trades/").json()) == 2

    response = client.delete("/trades/")
    assert response.status_code == 200
    assert client.get("/trades/").json() == []


def test_create_trade_validation() -> None:
    client = TestClient(_create_app())

    assert client.post("/trades/", json=_trade_payload(side="sideways")).status_code == 422
    assert client.post("/trades/", json=_trade_payload(quantity=-1)).status_code == 422


def test_unknown_trade_ids() -> None:
    client = TestClient(_create_app())

    response = client.patch("/trades/missing", json={"pnl": 1})
    assert response.status_code == 200
    assert response.json() is None
    assert client.delete("/trades/missing").json() == {"status": "ok"}

    strict_client = TestClient(_create_app(strict=True))
    assert strict_client.patch("/trades/missing", json={"pnl": 1}).status_code == 404
    assert strict_client.delete("/trades/missing").status_code == 404


def test_users_are_isolated_by_header() -> None:
    client = TestClient(_create_app())

    client.post("/trades/", json=_trade_payload(), headers={"X-User-Id": "alice"})

    assert len(client.get("/trades/", headers={"X-User-Id": "alice"}).json()) == 1
    assert client.get("/trades/", headers={"X-User-Id": "bob"}).json() == []


def test_list_broker_formats() -> None:
    client = TestClient(_create_app())

    response = client.get("/trades/formats")
    assert response.status_code == 200
    formats = {item["id"]: item for item in response.json()}
    assert set(formats) == {"generic", "metatrader", "tradingview", "thinkorswim", "ibkr", "oanda"}
    assert formats["metatrader"]["name"] == "MetaTrader 4/5"


def test_import_csv_file() -> None:
    client = TestClient(_create_app())
    content = CSV_HEADER + "2024-01-02,EURUSD,long,1.05,1.06,1.0,100,5\n" + "not-a-date,EURUSD,long,1,1,1,1,0\n"

    response = client.post(
        "/trades/import",
        params={"broker_format": "metatrader"},
        files={"file": ("history.csv", content.encode("utf-8"), "text/csv")},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "count": 1,
        "errors": ['Row 3: Invalid date format "not-a-date"'],
    }
    assert [item["symbol"] for item in client.get("/trades/").json()] == ["EURUSD"]


def test_import_rejects_bad_uploads() -> None:
    client = TestClient(_create_app())

    response = client.post("/trades/import", files={"file": ("history.txt", b"date\n", "text/plain")})
    assert response.status_code == 400

    response = client.post(
        "/trades/import",
        params={"broker_format": "nope"},
        files={"file": ("history.csv", CSV_HEADER.encode("utf-8"), "text/csv")},
    )
    assert response.status_code == 400

    response = client.post("/trades/import", files={"file": ("history.csv", b"\xff\xfe\x00", "text/csv")})
    assert response.status_code == 400


def test_import_without_trades_reports_failure() -> None:
    client = TestClient(_create_app())

    response = client.post("/trades/import", files={"file": ("history.csv", CSV_HEADER.encode("utf-8"), "text/csv")})

    assert response.status_code == 200
    assert response.json() == {"success": False, "count": 0, "errors": ["No valid trades found in CSV"]}


def test_persistence_failures_map_to_bad_gateway() -> None:
    client = TestClient(_create_app(factory=lambda user_id: TradeStore(_BrokenRepository())))

    response = client.post("/trades/", json=_trade_payload())

    assert response.status_code == 502
    assert response.json()["detail"] == "database unavailable"
