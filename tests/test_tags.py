"""Tests for the tag registry."""


async def create_tag(client, headers, name, **extra):
    return await client.post("/api/tags", json={"name": name, **extra}, headers=headers)


async def test_create_tag_normalizes_name(client, auth_headers):
    response = await create_tag(client, auth_headers, "  Music ")

    assert response.status_code == 201
    tag = response.json()["data"]
    assert tag["name"] == "music"
    assert tag["color"] == "#3B82F6"
    assert tag["usageCount"] == 0


async def test_duplicate_name_is_case_insensitive(client, auth_headers):
    first = (await create_tag(client, auth_headers, "Music")).json()["data"]
    response = await create_tag(client, auth_headers, "music")

    assert response.status_code == 409
    assert response.json()["data"]["id"] == first["id"]


async def test_same_name_for_different_users(client, auth_headers, other_headers):
    assert (await create_tag(client, auth_headers, "music")).status_code == 201
    assert (await create_tag(client, other_headers, "music")).status_code == 201


async def test_blank_name_and_bad_color(client, auth_headers):
    assert (await create_tag(client, auth_headers, "   ")).status_code == 400
    assert (await create_tag(client, auth_headers, "music", color="blue")).status_code == 400


async def test_list_tags(client, auth_headers, other_headers):
    for name in ("rock", "jazz", "music"):
        await create_tag(client, auth_headers, name)
    await create_tag(client, other_headers, "secret")

    body = (await client.get("/api/tags", headers=auth_headers)).json()
    assert [tag["name"] for tag in body["data"]] == ["jazz", "music", "rock"]
    assert body["pagination"]["total"] == 3

    searched = (await client.get("/api/tags", params={"search": "Us"}, headers=auth_headers)).json()
    assert [tag["name"] for tag in searched["data"]] == ["music"]


async def test_rename_conflict(client, auth_headers):
    await create_tag(client, auth_headers, "music")
    jazz = (await create_tag(client, auth_headers, "jazz")).json()["data"]

    response = await client.put(f"/api/tags/{jazz['id']}", json={"name": "MUSIC"}, headers=auth_headers)
    assert response.status_code == 409

    response = await client.put(
        f"/api/tags/{jazz['id']}", json={"name": "Smooth Jazz", "color": "#fff"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "smooth jazz"
    assert response.json()["data"]["color"] == "#fff"


async def test_delete_tag(client, auth_headers, other_headers):
    tag = (await create_tag(client, auth_headers, "music")).json()["data"]

    assert (await client.delete(f"/api/tags/{tag['id']}", headers=other_headers)).status_code == 404
    assert (await client.delete(f"/api/tags/{tag['id']}", headers=auth_headers)).status_code == 200
    assert (await client.get(f"/api/tags/{tag['id']}", headers=auth_headers)).status_code == 404


async def test_search_wildcards_match_literally(client, auth_headers):
    for name in ("music", "jazz_fusion", "100%"):
        await create_tag(client, auth_headers, name)

    underscore = (await client.get("/api/tags", params={"search": "_"}, headers=auth_headers)).json()
    assert [tag["name"] for tag in underscore["data"]] == ["jazz_fusion"]

    percent = (await client.get("/api/tags", params={"search": "%"}, headers=auth_headers)).json()
    assert [tag["name"] for tag in percent["data"]] == ["100%"]
