from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from fmsquad.api import create_app
from fmsquad.config import ATTRIBUTE_CODES
from fmsquad.persistence import DB_PATH_ENV


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(DB_PATH_ENV, raising=False)
    app = create_app(tmp_path / "api.sqlite")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


def _row(*cells: str) -> str:
    return '<tr bgcolor="#EEEEEE">' + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>\n"


def _values() -> list[str]:
    return [str((index % 20) + 1) for index in range(len(ATTRIBUTE_CODES))]


def _sample_report() -> str:
    return (
        "<html><body><table>\n"
        "<tr><th>Name</th><th>Age</th><th>CA</th><th>PA</th><th>Position</th></tr>\n"
        + _row("Mylo Hall", "19", "95", "150", "M/AM (C)", *_values())
        + _row("Sam Keeper", "30", "120", "125", "GK", *_values())
        + _row("Short", "20")
        + "</table></body></html>"
    )


def _files(content: str, filename: str = "squad.html", content_type: str = "text/html") -> dict:
    return {"html": (filename, content, content_type)}


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_preview_does_not_store(client: AsyncClient):
    resp = await client.post("/preview", files=_files(_sample_report()))
    assert resp.status_code == 200
    payload = resp.json()
    assert [player["name"] for player in payload["players"]] == ["Mylo Hall", "Sam Keeper"]
    assert payload["players"][0]["positions"] == ["MC", "MCL", "MCR", "AMC", "AMCL", "AMCR"]
    assert payload["report"]["total_rows"] == 3
    assert payload["report"]["short_rows"] == [2]

    players = await client.get("/players")
    assert players.json() == []


@pytest.mark.anyio
async def test_import_html_stores_players(client: AsyncClient):
    resp = await client.post("/import-html", files=_files(_sample_report()))
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["total_players"] == 2
    assert payload["successful_imports"] == 2
    assert payload["failed_imports"] == 0
    assert payload["errors"] == []

    listing = await client.get("/players")
    assert listing.status_code == 200
    names = [player["name"] for player in listing.json()]
    assert names == ["Mylo Hall", "Sam Keeper"]

    player_id = payload["players"][1]["player_id"]
    detail = await client.get(f"/players/{player_id}")
    assert detail.status_code == 200
    body = detail.json()
    assert body["name"] == "Sam Keeper"
    assert body["current_ability"] == 120
    assert body["attributes"][0] == {"name": "Acceleration", "value": 1, "category": "physical"}
    assert len(body["attributes"]) == len(ATTRIBUTE_CODES)


@pytest.mark.anyio
async def test_import_html_twice_keeps_one_player(client: AsyncClient):
    for _ in range(2):
        resp = await client.post("/import-html", files=_files(_sample_report()))
        assert resp.status_code == 200

    listing = await client.get("/players")
    assert len(listing.json()) == 2
    player_id = listing.json()[0]["player_id"]
    detail = (await client.get(f"/players/{player_id}")).json()
    assert len(detail["snapshots"]) == 2
    assert detail["snapshot_id"] == detail["snapshots"][-1]["snapshot_id"]
    assert detail["snapshots"][0]["attributes"] == detail["attributes"]


@pytest.mark.anyio
async def test_import_html_rejects_other_files(client: AsyncClient):
    resp = await client.post(
        "/import-html",
        files=_files(_sample_report(), filename="squad.txt", content_type="text/plain"),
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only HTML files are allowed"


@pytest.mark.anyio
async def test_import_html_rejects_empty_upload(client: AsyncClient):
    resp = await client.post("/import-html", files=_files(""))
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_import_html_without_players(client: AsyncClient):
    resp = await client.post("/import-html", files=_files("<html><body>No squad</body></html>"))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No valid players found in HTML file"


@pytest.mark.anyio
async def test_import_html_rejects_large_upload(client: AsyncClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("fmsquad.api.MAX_UPLOAD_BYTES", 64)
    resp = await client.post("/import-html", files=_files(_sample_report()))
    assert resp.status_code == 413


@pytest.mark.anyio
async def test_missing_player_returns_404(client: AsyncClient):
    resp = await client.get("/players/999")
    assert resp.status_code == 404

    resp = await client.delete("/players/999")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_delete_player(client: AsyncClient):
    resp = await client.post("/import-html", files=_files(_sample_report()))
    player_id = resp.json()["players"][0]["player_id"]

    deleted = await client.delete(f"/players/{player_id}")
    assert deleted.status_code == 200
    assert deleted.json() == {"player_id": player_id, "deleted": True}

    missing = await client.get(f"/players/{player_id}")
    assert missing.status_code == 404


@pytest.mark.anyio
async def test_import_html_rejects_non_utf8_upload(client: AsyncClient):
    content = _sample_report().replace("Mylo Hall", "Mylo Häll").encode("latin-1")
    resp = await client.post("/import-html", files={"html": ("squad.html", content, "text/html")})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "HTML file is not valid UTF-8"


@pytest.mark.anyio
async def test_delete_snapshot(client: AsyncClient):
    for _ in range(2):
        await client.post("/import-html", files=_files(_sample_report()))
    player_id = (await client.get("/players")).json()[0]["player_id"]
    snapshots = (await client.get(f"/players/{player_id}")).json()["snapshots"]

    latest_id = snapshots[-1]["snapshot_id"]
    deleted = await client.delete(f"/snapshots/{latest_id}")
    assert deleted.status_code == 200
    assert deleted.json() == {"snapshot_id": latest_id, "deleted": True}

    detail = (await client.get(f"/players/{player_id}")).json()
    assert [snapshot["snapshot_id"] for snapshot in detail["snapshots"]] == [snapshots[0]["snapshot_id"]]
    assert detail["snapshot_id"] == snapshots[0]["snapshot_id"]

    missing = await client.delete(f"/snapshots/{latest_id}")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Snapshot not found"


@pytest.mark.anyio
async def test_squad_stats(client: AsyncClient):
    empty = await client.get("/squad/stats")
    assert empty.status_code == 200
    assert empty.json() == {"total_players": 0, "average_age": 0.0, "average_current_ability": 0}

    await client.post("/import-html", files=_files(_sample_report()))

    stats = (await client.get("/squad/stats")).json()
    assert stats == {"total_players": 2, "average_age": 24.5, "average_current_ability": 108}
