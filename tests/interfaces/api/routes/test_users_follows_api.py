"""Tests for profiles, user search and follows."""


def test_profile_counts_activity(client, make_user):
    alice_id, alice = make_user("alice")
    bob_id, bob = make_user("bob")
    question = client.post(
        "/api/questions", json={"title": "Q", "content": "C"}, headers=alice
    ).json()
    client.post(f"/api/questions/{question['id']}/answers", json={"content": "A"}, headers=bob)
    client.post("/api/follow", json={"following_id": alice_id}, headers=bob)

    profile = client.get(f"/api/users/{alice_id}").json()

    assert profile["username"] == "alice"
    assert profile["questions_count"] == 1
    assert profile["answers_count"] == 0
    assert profile["follower_count"] == 1
    assert profile["following_count"] == 0
    assert "password" not in profile

    assert [q["id"] for q in client.get(f"/api/users/{alice_id}/questions").json()] == [
        question["id"]
    ]
    assert len(client.get(f"/api/users/{bob_id}/answers").json()) == 1
    assert client.get("/api/users/999").status_code == 404


def test_search_requires_two_characters(client, make_user):
    _, headers = make_user("alice")
    make_user("alina")
    make_user("bob")

    too_short = client.get("/api/users/search", params={"q": "a"}, headers=headers)
    assert too_short.status_code == 400

    found = client.get("/api/users/search", params={"q": "ali"}, headers=headers).json()
    assert sorted(user["username"] for user in found) == ["alice", "alina"]


def test_follow_lifecycle(client, make_user):
    alice_id, alice = make_user("alice")
    bob_id, bob = make_user("bob")

    assert client.post("/api/follow", json={"following_id": alice_id}, headers=alice).status_code == 400

    created = client.post("/api/follow", json={"following_id": bob_id}, headers=alice)
    assert created.status_code == 201
    assert created.json()["following_id"] == bob_id

    repeated = client.post("/api/follow", json={"following_id": bob_id}, headers=alice)
    assert repeated.status_code == 400
    assert repeated.json()["detail"] == "Already following this user"

    following = client.get("/api/user/following", headers=alice).json()
    assert [user["id"] for user in following] == [bob_id]

    assert client.delete(f"/api/follow/{bob_id}", headers=alice).status_code == 204
    assert client.delete(f"/api/follow/{bob_id}", headers=alice).status_code == 404
    assert client.get("/api/user/following", headers=alice).json() == []
    assert client.get("/api/user/following", headers=bob).json() == []
