from __future__ import annotations

import pytest

from careerlink.models.user import User
from careerlink.services import search_service
from careerlink.services.query_filters import json_list_clause
from careerlink.services.errors import ValidationError


def _register(client, *, email: str, role: str = "student", password: str = "SecretPass123", **extra) -> None:
    r = client.post("/auth/register", json={"email": email, "password": password, "role": role, **extra})
    assert r.status_code == 201


def _login(client, *, email: str, password: str = "SecretPass123") -> dict[str, str]:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def _recording_searchers(calls: list[str]) -> dict:
    def make(cat: str):
        def run(text: str, limit: int) -> list[dict]:
            calls.append(cat)
            return [{"category": cat, "text": text}]

        return run

    return {cat: make(cat) for cat in search_service.CATEGORIES}


@pytest.mark.parametrize("query", ["", "   ", None])
def test_empty_query_runs_no_searcher(query) -> None:
    calls: list[str] = []
    with pytest.raises(ValidationError):
        search_service.search(query, "all", searchers=_recording_searchers(calls))
    assert calls == []


def test_invalid_scope_and_limit() -> None:
    calls: list[str] = []
    with pytest.raises(ValidationError):
        search_service.search("python", "jobs", searchers=_recording_searchers(calls))
    with pytest.raises(ValidationError):
        search_service.search("python", "all", 0, searchers=_recording_searchers(calls))
    assert calls == []


def test_scope_selects_categories_and_keeps_every_key() -> None:
    calls: list[str] = []
    result = search_service.search("  python ", "users", 5, searchers=_recording_searchers(calls))

    assert sorted(calls) == ["alumni", "employers", "students"]
    assert result.query == "python"
    assert set(result.results) == set(search_service.CATEGORIES)
    assert result.results["companies"] == []
    assert result.results["programs"] == []
    assert result.total_results == 3


def test_failing_category_degrades_to_empty() -> None:
    calls: list[str] = []
    searchers = _recording_searchers(calls)

    def broken(text: str, limit: int) -> list[dict]:
        raise RuntimeError("collection offline")

    searchers["companies"] = broken

    result = search_service.search("python", "all", searchers=searchers)

    assert result.failed_categories == ["companies"]
    assert result.results["companies"] == []
    assert result.total_results == 4


def test_category_results_are_capped_at_limit() -> None:
    def many(text: str, limit: int) -> list[dict]:
        return [{"i": i} for i in range(limit + 5)]

    searchers = {cat: many for cat in search_service.CATEGORIES}
    result = search_service.search("x", "all", 2, searchers=searchers)
    assert all(len(items) == 2 for items in result.results.values())
    assert result.total_results == 10


def test_contains_pattern_escapes_wildcards() -> None:
    assert search_service.contains_pattern("50%_off") == "%50\\%\\_off%"


def test_unified_search_no_match(client) -> None:
    _register(client, email="student@example.com")
    headers = _login(client, email="student@example.com")

    r = client.get("/api/search/unified", params={"query": "xyz-no-match"}, headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["total_results"] == 0
    assert body["failed_categories"] == []
    assert body["results"] == {cat: [] for cat in search_service.CATEGORIES}


def test_unified_search_empty_query(client) -> None:
    _register(client, email="student@example.com")
    headers = _login(client, email="student@example.com")

    r = client.get("/api/search/unified", params={"query": "  "}, headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == "validation_error"


def test_unified_search_finds_users_and_programs(client) -> None:
    _register(client, email="ada@example.com", first_name="Ada", last_name="Lovelace")
    _register(client, email="mentor@example.com", role="alumni", first_name="Grace")
    mentor = _login(client, email="mentor@example.com")
    r = client.post(
        "/api/mentorship/programs",
        json={"title": "Lovelace Circle", "description": "Math mentoring", "duration_value": 4},
        headers=mentor,
    )
    assert r.status_code == 201

    r = client.get("/api/search/unified", params={"query": "lovelace"}, headers=mentor)
    assert r.status_code == 200
    body = r.json()
    assert [u["email"] for u in body["results"]["students"]] == ["ada@example.com"]
    assert [p["title"] for p in body["results"]["programs"]] == ["Lovelace Circle"]
    assert body["results"]["alumni"] == []
    assert body["total_results"] == 2


def test_search_users_by_role_with_skills(client) -> None:
    _register(client, email="py@example.com", skills=["Python", "SQL"])
    _register(client, email="js@example.com", skills=["JavaScript"])
    headers = _login(client, email="py@example.com")

    r = client.get("/api/search/users/student", params={"skills": "python, sql"}, headers=headers)
    assert r.status_code == 200
    assert [u["email"] for u in r.json()["users"]] == ["py@example.com"]

    r = client.get("/api/search/users/admin", headers=headers)
    assert r.status_code == 400


@pytest.mark.parametrize("text", ["", "café", 'c"s', "a,b", "[x]", "back\\slash", "tab\there"])
def test_json_list_clause_declines_unmatchable_text(text) -> None:
    assert json_list_clause(User.skills, text) is None


def test_json_list_clause_matches_serialized_items() -> None:
    clause = json_list_clause(User.skills, "c++", whole_item=True)
    assert clause is not None
    compiled = str(clause.compile(compile_kwargs={"literal_binds": True}))
    assert '%"c++"%' in compiled


def test_skill_filter_matches_whole_items_and_paginates(client) -> None:
    for i in range(3):
        _register(client, email=f"java{i}@example.com", skills=["Java", "Spring"])
    _register(client, email="js@example.com", skills=["JavaScript"])
    _register(client, email="cafe@example.com", skills=["Café", "Java"])
    headers = _login(client, email="js@example.com")

    r = client.get("/api/search/users/student", params={"skills": "JAVA", "limit": 2}, headers=headers)
    body = r.json()
    assert body["total"] == 4
    assert [u["email"] for u in body["users"]] == ["cafe@example.com", "java2@example.com"]

    r = client.get("/api/search/users/student", params={"skills": "java", "limit": 2, "page": 2}, headers=headers)
    assert [u["email"] for u in r.json()["users"]] == ["java1@example.com", "java0@example.com"]

    r = client.get("/api/search/users/student", params={"skills": "javascript"}, headers=headers)
    assert [u["email"] for u in r.json()["users"]] == ["js@example.com"]

    r = client.get("/api/search/users/student", params={"skills": "café, java"}, headers=headers)
    assert r.json()["total"] == 1
    assert [u["email"] for u in r.json()["users"]] == ["cafe@example.com"]
