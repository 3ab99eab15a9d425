from datetime import datetime, timedelta, timezone

from campusnet.db.models import BandwidthLog, IntrusionAlert, WifiSession, Zone


class TestBandwidth:

    def test_overview_filters_by_zone(self, client, admin_headers, zone, db):
        other = Zone(name="Gym", location="Sports Hall")
        db.add(other)
        db.commit()
        base = datetime(2026, 4, 1, 9, 0, tzinfo=timezone.utc)
        db.add_all([
            BandwidthLog(zone_id=zone.id, download_mbps=100, upload_mbps=30, active_devices=12,
                         recorded_at=base),
            BandwidthLog(zone_id=zone.id, download_mbps=60, upload_mbps=10, active_devices=20,
                         recorded_at=base + timedelta(minutes=15)),
            BandwidthLog(zone_id=other.id, download_mbps=500, upload_mbps=200, active_devices=90,
                         recorded_at=base + timedelta(minutes=30)),
        ])
        db.commit()

        everything = client.get("/bandwidth", headers=admin_headers).json()
        assert len(everything["logs"]) == 3
        assert everything["logs"][0]["zone"] == {"name": "Gym"}
        assert everything["stats"]["peak_download"] == 500

        library = client.get("/bandwidth", params={"zone_id": zone.id}, headers=admin_headers).json()
        assert library["stats"] == {"avg_download": 80.0, "avg_upload": 20.0, "peak_download": 100.0,
                                    "peak_devices": 20}
        assert [p["time"] for p in library["chart"]] == ["09:00", "09:15"]

        all_zones = client.get("/bandwidth", params={"zone_id": "all"}, headers=admin_headers).json()
        assert len(all_zones["logs"]) == 3

    def test_add_log(self, client, admin_headers, zone):
        resp = client.post("/bandwidth", json={"zone_id": zone.id, "download_mbps": 75.5}, headers=admin_headers)
        assert resp.status_code == 201
        assert resp.json()["zone"] == {"name": "Library"}

    def test_sample_data_needs_zones(self, client, admin_headers):
        resp = client.post("/bandwidth/sample", headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Please add some zones first"

    def test_sample_data_one_log_per_zone(self, client, admin_headers, zone, db):
        db.add(Zone(name="Gym", location="Sports Hall"))
        db.commit()

        logs = client.post("/bandwidth/sample", headers=admin_headers).json()

        assert len(logs) == 2
        for log in logs:
            assert 50 <= log["download_mbps"] <= 150
            assert 20 <= log["upload_mbps"] <= 70
            assert 5 <= log["active_devices"] <= 34


class TestAlerts:

    def test_create_filter_and_resolve(self, client, admin_headers, device):
        first = client.post("/alerts", json={
            "alert_type": "Port scan", "device_id": device.id, "description": "Sequential SYN probes",
        }, headers=admin_headers)
        assert first.status_code == 201
        assert first.json()["severity"] == "medium"
        assert first.json()["device"]["mac_address"] == "AA:BB:CC:DD:EE:01"

        client.post("/alerts", json={"alert_type": "Rogue AP", "severity": "critical"}, headers=admin_headers)

        listing = client.get("/alerts", headers=admin_headers).json()
        assert listing["active_count"] == 2
        assert [a["alert_type"] for a in listing["alerts"]] == ["Rogue AP", "Port scan"]

        resolved = client.post(f"/alerts/{first.json()['id']}/resolve", headers=admin_headers).json()
        assert resolved["resolved"] is True

        active = client.get("/alerts", params={"status": "active"}, headers=admin_headers).json()
        assert [a["alert_type"] for a in active["alerts"]] == ["Rogue AP"]
        assert active["active_count"] == 1

        done = client.get("/alerts", params={"status": "resolved"}, headers=admin_headers).json()
        assert [a["alert_type"] for a in done["alerts"]] == ["Port scan"]

        by_mac = client.get("/alerts", params={"q": "aa:bb"}, headers=admin_headers).json()
        assert [a["alert_type"] for a in by_mac["alerts"]] == ["Port scan"]

    def test_resolve_missing(self, client, admin_headers):
        assert client.post("/alerts/missing/resolve", headers=admin_headers).status_code == 404


class TestSessionsApi:

    def test_connect_disconnect_roundtrip(self, client, admin_headers, network_user, device, zone):
        opened = client.post("/sessions/connect", json={
            "network_user_id": network_user.id, "device_id": device.id, "zone_id": zone.id,
        }, headers=admin_headers)
        assert opened.status_code == 201
        session = opened.json()
        assert session["is_active"] is True
        assert session["network_user"]["department"] == "Computer Science"
        assert session["device"]["mac_address"] == "AA:BB:CC:DD:EE:01"

        assert client.get(f"/devices/{device.id}", headers=admin_headers).json()["status"] == "online"
        active = client.get("/sessions/active", headers=admin_headers).json()
        assert [s["id"] for s in active] == [session["id"]]

        closed = client.post(f"/sessions/{session['id']}/disconnect",
                             json={"bytes_downloaded": 2048, "bytes_uploaded": 512},
                             headers=admin_headers).json()
        assert closed["is_active"] is False
        assert closed["bytes_downloaded"] == 2048
        assert closed["duration_minutes"] == 0

        assert client.get(f"/devices/{device.id}", headers=admin_headers).json()["status"] == "offline"
        assert client.get("/sessions/active", headers=admin_headers).json() == []

        again = client.post(f"/sessions/{session['id']}/disconnect", headers=admin_headers)
        assert again.status_code == 409

    def test_connect_unknown_user(self, client, admin_headers):
        resp = client.post("/sessions/connect", json={"network_user_id": "nobody"}, headers=admin_headers)
        assert resp.status_code == 404

    def test_search_and_per_user_listing(self, client, admin_headers, network_user, zone):
        client.post("/sessions/connect", json={"network_user_id": network_user.id, "zone_id": zone.id},
                    headers=admin_headers)

        assert len(client.get("/sessions", params={"q": "libr"}, headers=admin_headers).json()) == 1
        assert client.get("/sessions", params={"q": "gym"}, headers=admin_headers).json() == []
        assert len(client.get(f"/sessions/user/{network_user.id}", headers=admin_headers).json()) == 1
        assert client.get("/sessions/user/nobody", headers=admin_headers).status_code == 404

    def test_bandwidth_update(self, client, admin_headers, network_user):
        session = client.post("/sessions/connect", json={"network_user_id": network_user.id},
                              headers=admin_headers).json()

        resp = client.put(f"/sessions/{session['id']}/bandwidth",
                          json={"bytes_downloaded": 99, "bytes_uploaded": 1}, headers=admin_headers)

        assert resp.json()["bytes_downloaded"] == 99
        assert resp.json()["bytes_uploaded"] == 1


def test_usage_and_dashboard(client, admin_headers, network_user, device, db):
    now = datetime.now(timezone.utc)
    db.add_all([
        WifiSession(network_user_id=network_user.id, device_id=device.id, is_active=False,
                    connected_at=now - timedelta(days=1), duration_minutes=40,
                    bytes_downloaded=1024 ** 2, bytes_uploaded=1024),
        WifiSession(network_user_id=network_user.id, is_active=True,
                    connected_at=now - timedelta(minutes=20, seconds=30)),
        IntrusionAlert(alert_type="MAC spoofing", device_id=device.id),
        IntrusionAlert(alert_type="Old issue", resolved=True),
    ])
    device.status = "online"
    db.commit()

    usage = client.get("/usage", headers=admin_headers).json()
    [row] = usage["stats"]
    assert row["username"] == "jdoe"
    assert row["total_sessions"] == 2
    assert row["active_sessions"] == 1
    assert row["total_time_minutes"] in (60, 61)
    assert row["total_bytes_downloaded"] == 1024 ** 2
    assert usage["summary"]["users_online"] == 1
    assert usage["summary"]["total_downloaded_display"] == "1 MB"

    assert client.get("/usage", params={"q": "computer"}, headers=admin_headers).json()["stats"]
    assert client.get("/usage", params={"q": "history"}, headers=admin_headers).json()["stats"] == []

    dash = client.get("/dashboard", headers=admin_headers).json()
    assert dash["total_users"] == 1
    assert dash["total_devices"] == 1
    assert dash["online_devices"] == 1
    assert dash["total_zones"] == 1
    assert dash["unresolved_alerts"] == 1
    assert dash["active_sessions"] == 1
    assert dash["total_bytes_downloaded"] == 1024 ** 2
    assert [a["alert_type"] for a in dash["recent_alerts"]] == ["MAC spoofing"]
    assert dash["recent_devices"][0]["mac_address"] == "AA:BB:CC:DD:EE:01"


def test_simulator_status_and_admin_guard(client, admin_headers, user_headers):
    status = client.get("/simulator/status", headers=user_headers).json()
    assert status["running"] is False
    assert client.post("/simulator/start", headers=user_headers).status_code == 403
