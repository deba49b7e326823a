"""Tests for questions, answers, votes and tags."""


def _ask(client, headers, **overrides):
    payload = {"title": "How do I sort a dict?", "content": "By value.", "tags": ["python"]}
    payload.update(overrides)
    response = client.post("/api/questions", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_question_reuses_tags_case_insensitively(client, make_user):
    _, headers = make_user("alice")

    first = _ask(client, headers, tags=["Python", "dicts"])
    second = _ask(client, headers, title="Another", tags=["python"])

    assert [tag["name"] for tag in first["tags"]] == ["Python", "dicts"]
    assert second["tags"] == [first["tags"][0]]
    assert first["user"]["username"] == "alice"
    assert first["votes_count"] == 0
    assert first["answers_count"] == 0

    tags = client.get("/api/tags").json()
    assert sorted(tag["name"] for tag in tags) == ["Python", "dicts"]


def test_only_author_can_edit_or_delete_question(client, make_user):
    _, author = make_user("alice")
    _, stranger = make_user("bob")
    question = _ask(client, author)

    forbidden = client.patch(
        f"/api/questions/{question['id']}", json={"title": "Hijacked"}, headers=stranger
    )
    assert forbidden.status_code == 403

    updated = client.patch(
        f"/api/questions/{question['id']}", json={"title": "Sorting dicts"}, headers=author
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Sorting dicts"
    assert updated.json()["content"] == "By value."

    assert client.delete(f"/api/questions/{question['id']}", headers=stranger).status_code == 403
    assert client.delete(f"/api/questions/{question['id']}", headers=author).status_code == 204
    assert client.get(f"/api/questions/{question['id']}").status_code == 404


def test_answers_votes_and_solving(client, make_user):
    _, author = make_user("alice")
    _, helper = make_user("bob")
    _, voter = make_user("carol")
    question = _ask(client, author)

    first = client.post(
        f"/api/questions/{question['id']}/answers", json={"content": "Use sorted()"}, headers=helper
    ).json()
    second = client.post(
        f"/api/questions/{question['id']}/answers",
        json={"content": "Use operator.itemgetter"},
        headers=voter,
    ).json()

    vote = client.post("/api/votes", json={"answer_id": second["id"], "value": 1}, headers=author)
    assert vote.status_code == 200
    assert vote.json()["votes_count"] == 1

    answers = client.get(f"/api/questions/{question['id']}/answers").json()
    assert [answer["id"] for answer in answers] == [second["id"], first["id"]]

    not_author = client.post(
        f"/api/questions/{question['id']}/solve", json={"answer_id": first["id"]}, headers=helper
    )
    assert not_author.status_code == 403

    solved = client.post(
        f"/api/questions/{question['id']}/solve", json={"answer_id": first["id"]}, headers=author
    )
    assert solved.status_code == 200

    answers = client.get(f"/api/questions/{question['id']}/answers").json()
    assert answers[0]["id"] == first["id"]
    assert answers[0]["accepted"] is True
    assert client.get(f"/api/questions/{question['id']}").json()["solved"] is True


def test_solve_rejects_answer_from_another_question(client, make_user):
    _, author = make_user("alice")
    _, helper = make_user("bob")
    question = _ask(client, author)
    other = _ask(client, author, title="Other")
    answer = client.post(
        f"/api/questions/{other['id']}/answers", json={"content": "Elsewhere"}, headers=helper
    ).json()

    response = client.post(
        f"/api/questions/{question['id']}/solve", json={"answer_id": answer["id"]}, headers=author
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Failed to mark question as solved"


def test_revoting_replaces_the_value(client, make_user):
    _, author = make_user("alice")
    _, voter = make_user("bob")
    question = _ask(client, author)

    client.post("/api/votes", json={"question_id": question["id"], "value": 1}, headers=voter)
    response = client.post(
        "/api/votes", json={"question_id": question["id"], "value": -1}, headers=voter
    )

    assert response.json()["votes_count"] == -1
    assert client.get(f"/api/questions/{question['id']}").json()["votes_count"] == -1


def test_vote_validation(client, make_user):
    _, headers = make_user("alice")
    question = _ask(client, headers)

    bad_value = client.post(
        "/api/votes", json={"question_id": question["id"], "value": 2}, headers=headers
    )
    both_targets = client.post(
        "/api/votes",
        json={"question_id": question["id"], "answer_id": 1, "value": 1},
        headers=headers,
    )
    no_target = client.post("/api/votes", json={"value": 1}, headers=headers)
    missing = client.post("/api/votes", json={"question_id": 999, "value": 1}, headers=headers)

    assert bad_value.status_code == 400
    assert both_targets.status_code == 400
    assert no_target.status_code == 400
    assert missing.status_code == 404


def test_list_filters_and_sorting(client, make_user):
    _, author = make_user("alice")
    _, helper = make_user("bob")
    answered = _ask(client, author, title="Answered")
    unanswered = _ask(client, author, title="Unanswered")
    client.post(
        f"/api/questions/{answered['id']}/answers", json={"content": "Yes"}, headers=helper
    )
    client.post("/api/votes", json={"question_id": answered["id"], "value": 1}, headers=helper)

    newest = client.get("/api/questions").json()
    assert [q["id"] for q in newest] == [unanswered["id"], answered["id"]]

    by_votes = client.get("/api/questions", params={"sortBy": "votes"}).json()
    assert by_votes[0]["id"] == answered["id"]

    only_unanswered = client.get("/api/questions", params={"filter": "unanswered"}).json()
    assert [q["id"] for q in only_unanswered] == [unanswered["id"]]

    page = client.get("/api/questions", params={"limit": 1, "offset": 1}).json()
    assert [q["id"] for q in page] == [answered["id"]]
