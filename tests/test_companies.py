from __future__ import annotations


def _register(client, *, email: str, role: str = "employer", password: str = "SecretPass123") -> None:
    r = client.post("/auth/register", json={"email": email, "password": password, "role": role})
    assert r.status_code == 201


def _login(client, *, email: str, password: str = "SecretPass123") -> dict[str, str]:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


COMPANY = {
    "name": "Acme Robotics",
    "description": "Industrial robots",
    "industry": "Manufacturing",
    "size": "51-200",
    "headquarters": "Seoul",
    "technologies": ["Python", "ROS"],
}


def test_company_profile_lifecycle(client) -> None:
    _register(client, email="boss@example.com")
    boss = _login(client, email="boss@example.com")

    r = client.post("/api/company-profiles", json=COMPANY, headers=boss)
    assert r.status_code == 201
    company = r.json()
    assert company["technologies"] == ["Python", "ROS"]

    r = client.post("/api/company-profiles", json=COMPANY, headers=boss)
    assert r.status_code == 409

    r = client.get(f"/api/company-profiles/{company['id']}")
    assert r.status_code == 200
    assert r.json()["name"] == "Acme Robotics"

    r = client.put(f"/api/company-profiles/{company['id']}", json={"size": "201-500"}, headers=boss)
    assert r.status_code == 200
    assert r.json()["size"] == "201-500"

    r = client.get("/api/company-profiles/my/profiles", headers=boss)
    assert [c["id"] for c in r.json()] == [company["id"]]

    r = client.delete(f"/api/company-profiles/{company['id']}", headers=boss)
    assert r.status_code == 204

    r = client.get(f"/api/company-profiles/{company['id']}")
    assert r.status_code == 404

    r = client.get("/api/company-profiles")
    assert r.json()["total"] == 0


def test_only_owner_or_admin_edits(client) -> None:
    _register(client, email="boss@example.com")
    boss = _login(client, email="boss@example.com")
    _register(client, email="rival@example.com")
    rival = _login(client, email="rival@example.com")
    _register(client, email="admin@example.com", role="student")
    admin = _login(client, email="admin@example.com")

    company = client.post("/api/company-profiles", json=COMPANY, headers=boss).json()

    r = client.put(f"/api/company-profiles/{company['id']}", json={"name": "Mine"}, headers=rival)
    assert r.status_code == 403

    r = client.put(f"/api/company-profiles/{company['id']}", json={"industry": "Robotics"}, headers=admin)
    assert r.status_code == 200
    assert r.json()["industry"] == "Robotics"


def test_students_cannot_create_companies(client) -> None:
    _register(client, email="student@example.com", role="student")
    student = _login(client, email="student@example.com")
    r = client.post("/api/company-profiles", json=COMPANY, headers=student)
    assert r.status_code == 403


def test_company_search_filters(client) -> None:
    _register(client, email="boss@example.com")
    boss = _login(client, email="boss@example.com")
    client.post("/api/company-profiles", json=COMPANY, headers=boss)
    client.post(
        "/api/company-profiles",
        json={**COMPANY, "name": "Blue Bank", "industry": "Finance", "headquarters": "Busan"},
        headers=boss,
    )

    r = client.get("/api/search/companies", params={"industry": "fin"}, headers=boss)
    assert r.status_code == 200
    assert [c["name"] for c in r.json()["companies"]] == ["Blue Bank"]

    r = client.get("/api/company-profiles", params={"location": "seoul"})
    assert [c["name"] for c in r.json()["companies"]] == ["Acme Robotics"]
