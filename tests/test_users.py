import pytest


@pytest.mark.asyncio
async def test_create_then_get_returns_posted_fields(client):
    """POST /users then GET /users/{id} returns the same name/email."""
    payload = {"name": "Grace", "email": "grace@navy.mil"}

    # 1) Create
    resp = await client.post("/users", json=payload)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "User created successfully"
    assert body["data"]["affectedRows"] == 1
    user_id = body["data"]["insertId"]
    assert isinstance(user_id, int)

    # 2) Fetch
    resp_get = await client.get(f"/users/{user_id}")
    assert resp_get.status_code == 200
    data = resp_get.json()
    assert data["message"] == "User retrieved successfully"
    assert data["data"] == [{"id": user_id, **payload}]


@pytest.mark.asyncio
async def test_list_users_empty_then_populated(client):
    resp = await client.get("/users")
    assert resp.status_code == 200
    assert resp.json() == []

    await client.post("/users", json={"name": "Ada", "email": "ada@x.io"})
    await client.post("/users", json={"name": "Alan", "email": "alan@x.io"})

    resp = await client.get("/users")
    assert resp.status_code == 200
    names = sorted(u["name"] for u in resp.json())
    assert names == ["Ada", "Alan"]


@pytest.mark.asyncio
async def test_get_unknown_user_returns_404(client):
    resp = await client.get("/users/999")
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "PATCH", "DELETE"])
async def test_non_numeric_id_is_bad_request(client, method):
    """A non-integer id segment is a 400, not a silent 'not found'."""
    kwargs = {"json": {"name": "X"}} if method == "PATCH" else {}
    resp = await client.request(method, "/users/abc", **kwargs)
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid user id"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "segment",
    [
        "0_1",  # digit grouping
        "+1",
        "%201",  # leading space
        "1%20",
        "%E0%A5%A7",  # DEVANAGARI DIGIT ONE
        "1.0",
    ],
)
async def test_id_must_be_plain_ascii_integer(client, ada, segment):
    """Only one spelling of an id reaches the row."""
    assert ada == 1
    resp = await client.get(f"/users/{segment}")
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid user id"}


@pytest.mark.asyncio
@pytest.mark.parametrize("segment", ["2147483648", "-2147483649", "99999999999999999999999"])
async def test_id_outside_int_range_is_bad_request(client, segment):
    for method in ("GET", "PATCH", "DELETE"):
        kwargs = {"json": {"name": "X"}} if method == "PATCH" else {}
        resp = await client.request(method, f"/users/{segment}", **kwargs)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid user id"}


@pytest.mark.asyncio
async def test_id_at_int_bounds_is_a_plain_miss(client):
    for segment in ("2147483647", "-2147483648", "-1"):
        resp = await client.get(f"/users/{segment}")
        assert resp.status_code == 404


@pytest.mark.asyncio
async def test_patch_empty_body_is_rejected_and_row_unchanged(client, ada):
    resp = await client.patch(f"/users/{ada}", json={})
    assert resp.status_code == 400
    assert resp.json() == {"message": "No fields to update"}

    resp_get = await client.get(f"/users/{ada}")
    assert resp_get.json()["data"] == [{"id": ada, "name": "Ada", "email": "ada@x.io"}]


@pytest.mark.asyncio
async def test_patch_name_only_changes_name(client, ada):
    resp = await client.patch(f"/users/{ada}", json={"name": "Augusta"})
    assert resp.status_code == 200
    assert resp.json() == {"message": "User updated successfully"}

    resp_get = await client.get(f"/users/{ada}")
    assert resp_get.json()["data"] == [{"id": ada, "name": "Augusta", "email": "ada@x.io"}]


@pytest.mark.asyncio
async def test_patch_both_fields(client, ada):
    resp = await client.patch(f"/users/{ada}", json={"email": "ada@lovelace.uk", "name": "Ada L."})
    assert resp.status_code == 200

    resp_get = await client.get(f"/users/{ada}")
    assert resp_get.json()["data"] == [{"id": ada, "name": "Ada L.", "email": "ada@lovelace.uk"}]


@pytest.mark.asyncio
async def test_patch_unknown_user_returns_404(client):
    resp = await client.patch("/users/12345", json={"name": "X"})
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"id": 99},
        {"role": "admin"},
        {"name": "X", "email = email; DROP TABLE user; --": "boom"},
    ],
)
async def test_patch_rejects_columns_outside_allow_list(client, ada, body):
    """Only name/email are writable; nothing from the body reaches the SQL text."""
    resp = await client.patch(f"/users/{ada}", json=body)
    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Unknown field(s): ")

    # row untouched, table still there
    resp_get = await client.get(f"/users/{ada}")
    assert resp_get.status_code == 200
    assert resp_get.json()["data"][0]["name"] == "Ada"


@pytest.mark.asyncio
async def test_patch_non_object_body_is_bad_request(client, ada):
    resp = await client.patch(f"/users/{ada}", json=["name", "X"])
    assert resp.status_code == 400
    assert resp.json() == {"message": "Request body must be a JSON object"}


@pytest.mark.asyncio
async def test_delete_twice(client, ada):
    """First DELETE removes the row, the second finds nothing."""
    resp1 = await client.delete(f"/users/{ada}")
    assert resp1.status_code == 200
    assert resp1.json() == {"message": "User deleted successfully"}

    resp2 = await client.delete(f"/users/{ada}")
    assert resp2.status_code == 404
    assert resp2.json() == {"message": "User not found"}


@pytest.mark.asyncio
async def test_search_matches_substring(client, ada):
    await client.post("/users", json={"name": "Alan Turing", "email": "alan@x.io"})

    resp = await client.get("/users/search/Tur")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Users retrieved successfully"
    assert [u["name"] for u in body["data"]] == ["Alan Turing"]


@pytest.mark.asyncio
async def test_search_without_matches_is_empty_list_not_404(client, ada):
    resp = await client.get("/users/search/Zed")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Users retrieved successfully", "data": []}


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(client, ada):
    await client.post("/users", json={"name": "100% Real", "email": "real@x.io"})

    resp = await client.get("/users/search/%25")
    assert resp.status_code == 200
    assert [u["name"] for u in resp.json()["data"]] == ["100% Real"]


@pytest.mark.asyncio
async def test_search_space_matches_names_containing_a_space(client, ada):
    """A whitespace query is a normal search, not a missing parameter."""
    await client.post("/users", json={"name": "Ada Lovelace", "email": "lovelace@x.io"})

    resp = await client.get("/users/search/%20")
    assert resp.status_code == 200
    assert [u["name"] for u in resp.json()["data"]] == ["Ada Lovelace"]


@pytest.mark.asyncio
async def test_ada_lifecycle(client):
    """Create, find by search, delete, then the id is gone."""
    resp = await client.post("/users", json={"name": "Ada", "email": "ada@x.io"})
    assert resp.status_code == 201
    user_id = resp.json()["data"]["insertId"]

    resp_search = await client.get("/users/search/Ada")
    assert resp_search.status_code == 200
    assert {"id": user_id, "name": "Ada", "email": "ada@x.io"} in resp_search.json()["data"]

    resp_del = await client.delete(f"/users/{user_id}")
    assert resp_del.status_code == 200

    resp_get = await client.get(f"/users/{user_id}")
    assert resp_get.status_code == 404
