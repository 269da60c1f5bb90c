"""Faction shortcuts: members, leave requests, recruitment codes and stats."""

from __future__ import annotations


def test_member_rank_change(client, auth_header, store) -> None:
    store.set("membrifactiune/42", {"name": "Ion", "rank": 1})

    resp = client.post("/api/members/42/rank", json={"rank": 5}, headers=auth_header)
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}
    assert store.get("membrifactiune/42") == {"name": "Ion", "rank": 5}

    resp = client.get("/api/members", headers=auth_header)
    assert resp.get_json() == {"42": {"name": "Ion", "rank": 5}}


def test_member_rank_requires_integer(client, auth_header) -> None:
    resp = client.post("/api/members/42/rank", json={"rank": "five"}, headers=auth_header)
    assert resp.status_code == 400


def test_players_listing(client, auth_header, store) -> None:
    store.set("jucatoriacc/p1", {"nick": "x"})
    resp = client.get("/api/players", headers=auth_header)
    assert resp.get_json() == {"p1": {"nick": "x"}}


def test_leave_request_round_trip(client, auth_header, store) -> None:
    body = {"discordId": "123", "startDate": "2025-01-01", "endDate": "2025-01-07"}
    assert client.post("/api/leave-requests", json=body, headers=auth_header).status_code == 200
    assert store.get("invoire/123") == {
        "Id": "123",
        "StartDate": "2025-01-01",
        "EndDate": "2025-01-07",
    }

    resp = client.get("/api/leave-requests/123", headers=auth_header)
    assert resp.get_json()["EndDate"] == "2025-01-07"

    resp = client.get("/api/leave-requests/999", headers=auth_header)
    assert resp.status_code == 200
    assert resp.get_json() is None


def test_codes_lifecycle(client, auth_header, store) -> None:
    assert client.get("/api/codes/JOIN1", headers=auth_header).get_json() == {"exists": False}

    resp = client.post("/api/codes", json={"code": "JOIN1"}, headers=auth_header)
    assert resp.status_code == 200
    assert store.get("Codes/JOIN1") == {"Code": "JOIN1"}
    assert client.get("/api/codes/JOIN1", headers=auth_header).get_json() == {"exists": True}

    assert client.delete("/api/codes/JOIN1", headers=auth_header).status_code == 200
    assert client.get("/api/codes/JOIN1", headers=auth_header).get_json() == {"exists": False}


def test_invalid_code_characters(client, auth_header) -> None:
    resp = client.post("/api/codes", json={"code": "a.b"}, headers=auth_header)
    assert resp.status_code == 400


def test_stats_and_version(client, auth_header, store) -> None:
    assert client.get("/api/stats", headers=auth_header).get_json() == {}

    store.set("stuff", {"Version": "1.0.0", "players": 12})
    assert client.get("/api/stats", headers=auth_header).get_json() == {
        "Version": "1.0.0",
        "players": 12,
    }
    assert client.get("/api/stats/version", headers=auth_header).get_json() == "1.0.0"
