"""Follow endpoints — follow, unfollow and the following / followers lists.

Tests:
    - Follow returns 201 with the followee's name; the feed then sees them
    - Self-follow, duplicate follow and unknown targets are rejected
    - Unfollow removes the edge (204) and an absent edge is 404
    - Lists are newest-first and paginated
"""

FOLLOWS = "/api/v1/follows"


def auth(user) -> dict:
    return {"X-USER-ID": str(user.id)}


async def test_follow_user(client, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")

    res = await client.post(
        FOLLOWS, json={"following_user_id": bob.id}, headers=auth(alice),
    )

    assert res.status_code == 201
    body = res.json()
    assert body["following_user_id"] == bob.id
    assert body["following_user_name"] == "Bob"


async def test_followed_user_appears_in_feed(client, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    await seed.sleep(bob)

    await client.post(
        FOLLOWS, json={"following_user_id": bob.id}, headers=auth(alice),
    )
    feed = (await client.get(
        "/api/v1/following/sleep_records", headers=auth(alice),
    )).json()

    assert [r["user_id"] for r in feed["sleep_records"]] == [bob.id]


async def test_self_follow_rejected(client, seed):
    alice = await seed.user("Alice")

    res = await client.post(
        FOLLOWS, json={"following_user_id": alice.id}, headers=auth(alice),
    )

    assert res.status_code == 422
    assert res.json()["error"]["code"] == "SELF_FOLLOW_NOT_ALLOWED"


async def test_duplicate_follow_rejected(client, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    await seed.follow(alice, bob)

    res = await client.post(
        FOLLOWS, json={"following_user_id": bob.id}, headers=auth(alice),
    )

    assert res.status_code == 422
    assert res.json()["error"]["code"] == "DUPLICATE_FOLLOW"


async def test_follow_unknown_user(client, seed):
    alice = await seed.user("Alice")

    res = await client.post(
        FOLLOWS, json={"following_user_id": 999}, headers=auth(alice),
    )

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "USER_NOT_FOUND"


async def test_follow_body_validation(client, seed):
    alice = await seed.user("Alice")

    res = await client.post(
        FOLLOWS, json={"following_user_id": 0}, headers=auth(alice),
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_unfollow(client, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    await seed.follow(alice, bob)

    res = await client.delete(f"{FOLLOWS}/{bob.id}", headers=auth(alice))
    listing = (await client.get(FOLLOWS, headers=auth(alice))).json()

    assert res.status_code == 204
    assert listing["following"] == []


async def test_unfollow_without_edge(client, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")

    res = await client.delete(f"{FOLLOWS}/{bob.id}", headers=auth(alice))

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "FOLLOW_RELATIONSHIP_NOT_FOUND"


async def test_following_list_newest_first(client, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    carol = await seed.user("Carol")
    await seed.follow(alice, bob)
    await seed.follow(alice, carol)

    body = (await client.get(FOLLOWS, headers=auth(alice))).json()

    assert [u["name"] for u in body["following"]] == ["Carol", "Bob"]
    assert body["pagination"] == {
        "total_count": 2, "limit": 20, "offset": 0, "has_more": False,
    }


async def test_followers_list(client, seed):
    alice = await seed.user("Alice")
    bob = await seed.user("Bob")
    carol = await seed.user("Carol")
    await seed.follow(bob, alice)
    await seed.follow(carol, alice)

    body = (await client.get(
        "/api/v1/followers", params={"limit": 1}, headers=auth(alice),
    )).json()

    assert len(body["followers"]) == 1
    assert body["pagination"]["total_count"] == 2
    assert body["pagination"]["has_more"] is True


async def test_list_limit_bounds(client, seed):
    alice = await seed.user("Alice")

    res = await client.get(FOLLOWS, params={"limit": 0}, headers=auth(alice))

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_PAGINATION_LIMIT"
