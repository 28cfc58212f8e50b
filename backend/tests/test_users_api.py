"""Testes de ponta a ponta da API de usuários com logs de método."""
import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from aoplog.main import app, emitter


def _method_logs(caplog):
    return [record for record in caplog.records if record.getMessage() == "method_log"]


def test_health():
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_and_fetch_user_emits_controller_and_service_logs(caplog):
    # Cada camada marcada gera uma linha com localização e descrição.
    caplog.set_level("INFO", logger="aoplog.method")
    with TestClient(app) as client:
        created = client.post(
            "/users",
            json={"name": "Ana", "email": "ana@example.com"},
            headers={"X-Forwarded-For": "10.1.2.3", "X-Request-ID": "req-1"},
        )
        assert created.status_code == 201
        user_id = created.json()["id"]

        fetched = client.get(f"/users/{user_id}")
        assert fetched.status_code == 200
        assert fetched.json()["email"] == "ana@example.com"

    logs = [(r.location, r.method_name, r.description) for r in _method_logs(caplog)]
    assert ("service", "create_user", "create user") in logs
    assert ("controller", "create_user", "create user") in logs
    assert ("service", "get_user", "fetch user") in logs
    assert ("controller", "get_user", "fetch user") in logs

    controller_create = next(
        r for r in _method_logs(caplog) if r.location == "controller" and r.method_name == "create_user"
    )
    assert controller_create.class_name == "aoplog.api.users.UserController"
    assert controller_create.request_id == "req-1"
    assert '"ana@example.com"' in controller_create.arguments
    assert controller_create.elapsed_time >= 0


def test_async_list_users_is_drained_on_shutdown(caplog):
    caplog.set_level("INFO", logger="aoplog.method")
    with TestClient(app) as client:
        response = client.get("/users")
        assert response.status_code == 200
    assert emitter.health()["queued"] == 0
    logs = [(r.location, r.method_name) for r in _method_logs(caplog)]
    assert ("controller", "list_users") in logs
    assert ("service", "list_users") in logs


def test_missing_user_returns_404_and_still_logs(caplog):
    caplog.set_level("INFO", logger="aoplog.method")
    with TestClient(app) as client:
        response = client.get("/users/99999")
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"
    failed = [r for r in _method_logs(caplog) if r.location == "controller" and r.method_name == "get_user"]
    assert len(failed) == 1
    assert failed[0].result == "null"


def test_service_failure_is_wrapped_and_returns_500(caplog):
    caplog.set_level("INFO", logger="aoplog.method")
    with TestClient(app, raise_server_exceptions=False) as client:
        user_id = client.post("/users", json={"name": "Bia", "email": "bia@example.com"}).json()["id"]
        response = client.post(f"/users/{user_id}/score")
    assert response.status_code == 500
    assert response.json()["error"] == "Internal Server Error"
    scored = [r.location for r in _method_logs(caplog) if r.method_name == "recalculate_score"]
    assert scored == ["service", "controller"]
