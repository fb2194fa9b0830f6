"""
tests.test_graphql_api

End-to-end GraphQL scenarios over HTTP.

Responsibilities:
- Drive the full stack (FastAPI -> context -> compiled schema -> SQLite).
- Cover signup/login, ownership, sharing and the error codes callers see.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest
import pytest_asyncio

from sqlalchemy.exc import OperationalError

from snipshare.api.app import create_app
from snipshare.db.storage import Storage
from snipshare.services.snips import SnipService
from snipshare.settings import Settings

_NEW_USER = "mutation ($u: String!, $p: String!) { newUser(username: $u, password: $p) }"
_NEW_SNIP = """
mutation ($name: String!, $public: Boolean!) {
  newSnip(name: $name, public: $public) { id name public owner { username } }
}
"""
_SET_ROLE = """
mutation ($id: String!, $u: String!, $role: Role) {
  setUserRole(snipId: $id, username: $u, role: $role) { role user { username } }
}
"""
_READ_SNIP = "query ($id: String!) { snip(id: $id) { id name content tags } }"


class Api:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def run(
        self, query: str, variables: dict[str, Any] | None = None, *, token: str | None = None
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        r = await self.client.post(
            "/graphql", json={"query": query, "variables": variables}, headers=headers
        )
        assert r.status_code == 200
        return r.json()

    async def signup(self, username: str, password: str = "pw") -> str:
        body = await self.run(_NEW_USER, {"u": username, "p": password})
        assert "errors" not in body
        return body["data"]["newUser"]

    async def new_snip(self, token: str, name: str, public: bool = False) -> dict[str, Any]:
        body = await self.run(_NEW_SNIP, {"name": name, "public": public}, token=token)
        assert "errors" not in body
        return body["data"]["newSnip"]


def _codes(body: dict[str, Any]) -> list[str]:
    return [error["extensions"]["code"] for error in body.get("errors", [])]


@pytest_asyncio.fixture
async def api(settings: Settings) -> AsyncIterator[Api]:
    app = create_app(settings=settings)
    # httpx's ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield Api(client)


@pytest.mark.asyncio
async def test_signup_login_and_me(api: Api) -> None:
    token = await api.signup("alice", "s3cret")

    me = await api.run("{ me { username snips { id } } }", token=token)
    assert me == {"data": {"me": {"username": "alice", "snips": []}}}

    login = await api.run(
        'query { validate(username: "alice", password: "s3cret") }'
    )
    assert isinstance(login["data"]["validate"], str)

    bad = await api.run('query { validate(username: "alice", password: "wrong") }')
    assert bad["data"] == {"validate": None}
    assert _codes(bad) == ["INVALID_CREDENTIALS"]

    anonymous = await api.run("{ me { username } }")
    assert anonymous == {"data": {"me": None}}


@pytest.mark.asyncio
async def test_signup_is_for_anonymous_callers_only(api: Api) -> None:
    token = await api.signup("alice")

    body = await api.run(_NEW_USER, {"u": "again", "p": "pw"}, token=token)

    assert body["data"] == {"newUser": None}
    assert body["errors"][0]["message"] == "already authenticated"
    assert _codes(body) == ["ALREADY_AUTHENTICATED"]

    taken = await api.run(_NEW_USER, {"u": "alice", "p": "pw"})
    assert _codes(taken) == ["CONFLICT"]


@pytest.mark.asyncio
async def test_creating_snips_requires_authentication(api: Api) -> None:
    body = await api.run(_NEW_SNIP, {"name": "x", "public": False})

    assert body["data"] == {"newSnip": None}
    assert _codes(body) == ["NOT_AUTHENTICATED"]


@pytest.mark.asyncio
async def test_invalid_token_is_treated_as_anonymous(api: Api) -> None:
    body = await api.run(_NEW_SNIP, {"name": "x", "public": False}, token="garbage")

    assert _codes(body) == ["NOT_AUTHENTICATED"]


@pytest.mark.asyncio
async def test_owner_reads_and_strangers_are_denied(api: Api) -> None:
    alice = await api.signup("alice")
    mallory = await api.signup("mallory")
    snip = await api.new_snip(alice, "diary")
    assert snip["owner"] == {"username": "alice"}

    own = await api.run(_READ_SNIP, {"id": snip["id"]}, token=alice)
    assert own == {"data": {"snip": {"id": snip["id"], "name": "diary", "content": "", "tags": []}}}

    for token in (mallory, None):
        body = await api.run(_READ_SNIP, {"id": snip["id"]}, token=token)
        # `name` is non-null, so its denial nulls the whole snip.
        assert body["data"] == {"snip": None}
        assert set(_codes(body)) == {"INSUFFICIENT_ROLE"}


@pytest.mark.asyncio
async def test_public_snips_are_readable_by_anyone(api: Api) -> None:
    alice = await api.signup("alice")
    snip = await api.new_snip(alice, "readme", public=True)

    body = await api.run(_READ_SNIP, {"id": snip["id"]})

    assert body["data"]["snip"]["name"] == "readme"
    assert "errors" not in body


@pytest.mark.asyncio
async def test_sharing_follows_the_role_hierarchy(api: Api) -> None:
    alice = await api.signup("alice")
    bob = await api.signup("bob")
    snip = await api.new_snip(alice, "shared")
    update = """
    mutation ($id: String!) {
      updateSnip(snipId: $id, query: {content: "body", tags: ["py"]}) { content tags }
    }
    """

    granted = await api.run(
        _SET_ROLE, {"id": snip["id"], "u": "bob", "role": "READER"}, token=alice
    )
    assert granted == {"data": {"setUserRole": {"role": "READER", "user": {"username": "bob"}}}}

    read = await api.run(_READ_SNIP, {"id": snip["id"]}, token=bob)
    assert read["data"]["snip"]["name"] == "shared"

    denied = await api.run(update, {"id": snip["id"]}, token=bob)
    assert denied["data"] is None
    assert _codes(denied) == ["INSUFFICIENT_ROLE"]

    await api.run(_SET_ROLE, {"id": snip["id"], "u": "bob", "role": "EDITOR"}, token=alice)
    edited = await api.run(update, {"id": snip["id"]}, token=bob)
    assert edited == {"data": {"updateSnip": {"content": "body", "tags": ["py"]}}}

    # Editors cannot manage roles or delete.
    regrant = await api.run(
        _SET_ROLE, {"id": snip["id"], "u": "bob", "role": "READER"}, token=bob
    )
    assert _codes(regrant) == ["INSUFFICIENT_ROLE"]
    delete = await api.run(
        "mutation ($id: String!) { deleteSnip(snipId: $id) }", {"id": snip["id"]}, token=bob
    )
    assert _codes(delete) == ["INSUFFICIENT_ROLE"]

    members = await api.run(
        "query ($id: String!) { snip(id: $id) { users { role user { username } } } }",
        {"id": snip["id"]},
        token=bob,
    )
    assert members["data"]["snip"]["users"] == [
        {"role": "OWNER", "user": {"username": "alice"}},
        {"role": "EDITOR", "user": {"username": "bob"}},
    ]

    revoked = await api.run(_SET_ROLE, {"id": snip["id"], "u": "bob", "role": None}, token=alice)
    assert revoked == {"data": {"setUserRole": None}}
    after = await api.run(_READ_SNIP, {"id": snip["id"]}, token=bob)
    assert set(_codes(after)) == {"INSUFFICIENT_ROLE"}


@pytest.mark.asyncio
async def test_missing_and_forbidden_snips_look_the_same(api: Api) -> None:
    alice = await api.signup("alice")
    bob = await api.signup("bob")
    snip = await api.new_snip(alice, "private")
    delete = "mutation ($id: String!) { deleteSnip(snipId: $id) }"

    missing = await api.run(delete, {"id": "does-not-exist"}, token=bob)
    forbidden = await api.run(delete, {"id": snip["id"]}, token=bob)

    assert missing["errors"][0]["message"] == forbidden["errors"][0]["message"]
    assert _codes(missing) == _codes(forbidden) == ["INSUFFICIENT_ROLE"]


@pytest.mark.asyncio
async def test_owner_deletes_snip(api: Api) -> None:
    alice = await api.signup("alice")
    snip = await api.new_snip(alice, "temp")

    body = await api.run(
        "mutation ($id: String!) { deleteSnip(snipId: $id) }", {"id": snip["id"]}, token=alice
    )
    assert body == {"data": {"deleteSnip": snip["id"]}}

    me = await api.run("{ me { snips { id } } }", token=alice)
    assert me == {"data": {"me": {"snips": []}}}
    gone = await api.run(_READ_SNIP, {"id": snip["id"]}, token=alice)
    assert gone == {"data": {"snip": None}}


@pytest.mark.asyncio
async def test_search_lists_readable_snips(api: Api) -> None:
    alice = await api.signup("alice")
    bob = await api.signup("bob")
    await api.new_snip(alice, "a-private")
    await api.new_snip(alice, "a-public", public=True)
    await api.new_snip(bob, "b-private")
    query = "query ($q: SnipQuery!) { snips(query: $q) { name } }"

    body = await api.run(query, {"q": {}}, token=alice)
    assert sorted(s["name"] for s in body["data"]["snips"]) == ["a-private", "a-public"]

    anonymous = await api.run(query, {"q": {"public": True}})
    assert anonymous == {"data": {"snips": [{"name": "a-public"}]}}


@pytest.mark.asyncio
async def test_invalid_queries_are_reported(api: Api) -> None:
    body = await api.run("{ nope }")

    assert body["data"] is None
    assert _codes(body) == ["GRAPHQL_VALIDATION_FAILED"]


@pytest.mark.asyncio
async def test_legacy_authentication_header(api: Api) -> None:
    token = await api.signup("alice")

    r = await api.client.post(
        "/graphql", json={"query": "{ me { username } }"}, headers={"Authentication": token}
    )

    assert r.json() == {"data": {"me": {"username": "alice"}}}


@pytest.mark.asyncio
async def test_editor_gated_mutation_for_stranger_and_owner(api: Api) -> None:
    alice = await api.signup("alice")
    mallory = await api.signup("mallory")
    snip = await api.new_snip(alice, "draft")
    rename = """
    mutation ($id: String!) { updateSnip(snipId: $id, query: {name: "final"}) { name } }
    """

    stranger = await api.run(rename, {"id": snip["id"]}, token=mallory)
    assert stranger["errors"][0]["message"] == "insufficient role"

    owner = await api.run(rename, {"id": snip["id"]}, token=alice)
    assert owner == {"data": {"updateSnip": {"name": "final"}}}


@pytest.mark.asyncio
async def test_storage_failures_reach_callers_as_generic_errors(api: Api, monkeypatch) -> None:
    alice = await api.signup("alice")
    snip = await api.new_snip(alice, "notes")

    async def broken_find_by_id(self: Storage, entity_type: Any, id: Any) -> Any:
        async with self.session():
            raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Storage, "find_by_id", broken_find_by_id)

    body = await api.run(_READ_SNIP, {"id": snip["id"]}, token=alice)

    assert body["data"] == {"snip": None}
    assert [e["message"] for e in body["errors"]] == ["internal server error"]
    assert _codes(body) == ["STORAGE"]
    assert "disk I/O" not in str(body)


@pytest.mark.asyncio
async def test_unexpected_errors_are_hidden(api: Api, monkeypatch) -> None:
    async def broken_search(self: SnipService, *args: Any, **kwargs: Any) -> Any:
        raise RuntimeError("secret internals")

    monkeypatch.setattr(SnipService, "search", broken_search)

    body = await api.run("query { snips(query: {}) { name } }")

    # `snips` is non-null, so the failure nulls `data`.
    assert body["data"] is None
    assert [e["message"] for e in body["errors"]] == ["internal server error"]
    assert _codes(body) == ["INTERNAL"]


# --- Module Notes -----------------------------------------------------------
# Each test gets a fresh SQLite file through the `settings` fixture.
