from app.core.security import create_access_token
from tests.conftest import auth
from tests.factories import full_profile, make_member, make_user_without_profile


async def test_health(client):
    r = await client.get("/api/health/")
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert r.headers["content-type"].startswith("application/json")


async def test_protected_routes_need_a_token(client):
    assert (await client.get("/api/discover/")).status_code == 401
    assert (await client.get("/api/matches/")).status_code == 401
    r = await client.get("/api/likes/sent/", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "invalid token"


async def test_token_in_query_string_is_accepted(client, db):
    ana = await make_member(db, first_name="Ana")
    r = await client.get(f"/api/users/me/?token={create_access_token(ana)}")
    assert r.status_code == 200
    assert r.json()["id"] == ana


async def test_me_and_profile(client, db):
    ana = await make_member(db, first_name="Ana", photos=2, prompts=1)
    nobody = await make_user_without_profile(db)

    me = (await client.get("/api/users/me/", headers=auth(ana))).json()
    assert me["has_profile"] is True
    assert (await client.get("/api/users/me/", headers=auth(nobody))).json()["has_profile"] is False

    prof = (await client.get("/api/profile/me/", headers=auth(ana))).json()
    assert prof["first_name"] == "Ana"
    assert [p["order"] for p in prof["photos"]] == [0, 1]
    assert prof["prompt_answers"][0]["prompt"]["text"].startswith("Dato curioso")

    assert (await client.get("/api/profile/me/", headers=auth(nobody))).status_code == 404


async def test_prompts_catalog(client, db):
    ana = await make_member(db, prompts=1)
    r = await client.get("/api/prompts/", headers=auth(ana))
    assert r.status_code == 200
    assert len(r.json()) == 1


async def test_discover_then_exhaust(client, db):
    ana = await make_member(db, first_name="Ana", interested_in=["male"])
    beto = await make_member(db, first_name="Beto", gender="male")

    r = await client.get("/api/discover/", headers=auth(ana))
    assert r.status_code == 200
    assert r.json()["user_id"] == beto

    r = await client.post("/api/likes/", json={"toUserId": beto}, headers=auth(ana))
    assert r.status_code == 201

    r = await client.get("/api/discover/", headers=auth(ana))
    assert r.json() == {"message": "No more profiles available"}


async def test_discover_without_profile_is_404(client, db):
    nobody = await make_user_without_profile(db)
    assert (await client.get("/api/discover/", headers=auth(nobody))).status_code == 404


async def test_like_errors(client, db):
    ana = await make_member(db, first_name="Ana")
    beto = await make_member(db, first_name="Beto", gender="male", photos=1)
    nobody = "00000000-0000-0000-0000-000000000000"

    r = await client.post("/api/likes/", json={"to_user_id": ana}, headers=auth(ana))
    assert r.status_code == 400

    r = await client.post("/api/likes/", json={"to_user_id": nobody}, headers=auth(ana))
    assert r.status_code == 404

    # PHOTO sin photo_id
    r = await client.post("/api/likes/", json={"to_user_id": beto, "type": "PHOTO"}, headers=auth(ana))
    assert r.status_code == 400

    r = await client.post("/api/likes/", json={"to_user_id": beto, "kind": "WINK"}, headers=auth(ana))
    assert r.status_code == 422

    assert (await client.post("/api/likes/", json={"to_user_id": beto}, headers=auth(ana))).status_code == 201
    r = await client.post("/api/likes/", json={"to_user_id": beto}, headers=auth(ana))
    assert r.status_code == 409


async def test_photo_like_with_comment(client, db):
    ana = await make_member(db, first_name="Ana")
    beto = await make_member(db, first_name="Beto", gender="male", photos=2)
    photo_id = (await full_profile(db, beto)).photos[1].id

    r = await client.post(
        "/api/likes/",
        json={"toUserId": beto, "type": "PHOTO", "photoId": photo_id, "comment": "  qué vista 🌄  "},
        headers=auth(ana),
    )
    assert r.status_code == 201
    like = r.json()["like"]
    assert like["kind"] == "PHOTO"
    assert like["photo"]["id"] == photo_id
    assert like["comment"] == "qué vista 🌄"

    received = (await client.get("/api/likes/received/", headers=auth(beto))).json()
    assert [lk["from_user"]["first_name"] for lk in received] == ["Ana"]


async def test_mutual_like_creates_match_once(client, db):
    ana = await make_member(db, first_name="Ana")
    beto = await make_member(db, first_name="Beto", gender="male")

    first = (await client.post("/api/likes/", json={"to_user_id": beto}, headers=auth(ana))).json()
    assert first["match"] is None and first["new_match"] is False

    second = (await client.post("/api/likes/", json={"to_user_id": ana}, headers=auth(beto))).json()
    assert second["new_match"] is True
    assert {second["match"]["user1_id"], second["match"]["user2_id"]} == {ana, beto}

    for uid, other in ((ana, beto), (beto, ana)):
        matches = (await client.get("/api/matches/", headers=auth(uid))).json()
        assert len(matches) == 1
        assert matches[0]["user_id"] == other
        assert matches[0]["last_message"] is None


async def test_delete_like(client, db):
    ana = await make_member(db, first_name="Ana")
    beto = await make_member(db, first_name="Beto", gender="male")
    like_id = (await client.post("/api/likes/", json={"to_user_id": beto}, headers=auth(ana))).json()["like"]["id"]

    # solo el autor puede borrarlo
    assert (await client.delete(f"/api/likes/{like_id}/", headers=auth(beto))).status_code == 404
    assert (await client.delete(f"/api/likes/{like_id}/", headers=auth(ana))).status_code == 204
    assert (await client.get("/api/likes/sent/", headers=auth(ana))).json() == []


async def _match(client, a, b) -> str:
    await client.post("/api/likes/", json={"to_user_id": b}, headers=auth(a))
    r = await client.post("/api/likes/", json={"to_user_id": a}, headers=auth(b))
    return r.json()["match"]["id"]


async def test_conversation_flow(client, db):
    ana = await make_member(db, first_name="Ana", photos=1)
    beto = await make_member(db, first_name="Beto", gender="male")
    match_id = await _match(client, ana, beto)

    r = await client.post("/api/messages/", json={"matchId": match_id, "content": " hola 👋 "}, headers=auth(ana))
    assert r.status_code == 201
    sent = r.json()
    assert sent["content"] == "hola 👋"
    assert sent["read"] is False
    assert sent["sender"]["first_name"] == "Ana"
    assert sent["sender"]["photo"] is not None

    await client.post("/api/messages/", json={"match_id": match_id, "content": "qué tal"}, headers=auth(beto))
    await client.post("/api/messages/", json={"match_id": match_id, "content": "bien"}, headers=auth(ana))

    history = (await client.get(f"/api/messages/{match_id}/", headers=auth(beto))).json()
    assert [m["content"] for m in history] == ["hola 👋", "qué tal", "bien"]

    r = await client.put(f"/api/messages/{match_id}/read/", headers=auth(beto))
    assert r.json() == {"match_id": match_id, "updated": 2}
    r = await client.put(f"/api/messages/{match_id}/read/", headers=auth(beto))
    assert r.json()["updated"] == 0

    matches = (await client.get("/api/matches/", headers=auth(ana))).json()
    assert matches[0]["last_message"]["content"] == "bien"


async def test_blank_or_oversized_message(client, db):
    ana = await make_member(db, first_name="Ana")
    beto = await make_member(db, first_name="Beto", gender="male")
    match_id = await _match(client, ana, beto)

    r = await client.post("/api/messages/", json={"match_id": match_id, "content": "   "}, headers=auth(ana))
    assert r.status_code == 400
    r = await client.post("/api/messages/", json={"match_id": match_id, "content": "x" * 1001}, headers=auth(ana))
    assert r.status_code == 422


async def test_outsider_gets_404_everywhere(client, db):
    ana = await make_member(db, first_name="Ana")
    beto = await make_member(db, first_name="Beto", gender="male")
    dani = await make_member(db, first_name="Dani")
    match_id = await _match(client, ana, beto)

    assert (await client.get(f"/api/messages/{match_id}/", headers=auth(dani))).status_code == 404
    r = await client.post("/api/messages/", json={"match_id": match_id, "content": "hey"}, headers=auth(dani))
    assert r.status_code == 404
    assert (await client.put(f"/api/messages/{match_id}/read/", headers=auth(dani))).status_code == 404
    assert (await client.delete(f"/api/matches/{match_id}/", headers=auth(dani))).status_code == 404


async def test_unmatch_removes_conversation(client, db):
    ana = await make_member(db, first_name="Ana")
    beto = await make_member(db, first_name="Beto", gender="male")
    match_id = await _match(client, ana, beto)
    await client.post("/api/messages/", json={"match_id": match_id, "content": "hola"}, headers=auth(ana))

    assert (await client.delete(f"/api/matches/{match_id}/", headers=auth(beto))).status_code == 204
    assert (await client.get("/api/matches/", headers=auth(ana))).json() == []
    assert (await client.get(f"/api/messages/{match_id}/", headers=auth(ana))).status_code == 404
