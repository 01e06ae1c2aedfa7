"""API tests for the feed session and profile stats."""

from fastapi.testclient import TestClient

from tests.factories import seed_sync

HEADERS = {"X-User-Id": "u1"}


def _answer_for(item: dict) -> dict:
    if item["type"] == "question":
        return {"answer": item["correct_answer"]}
    return {"rating": "easy"}


class TestEmptyFeed:
    def test_open_shows_empty_state(self, client: TestClient):
        resp = client.post("/v1/feed", headers=HEADERS)

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "empty"
        assert body["current"] is None
        assert body["size"] == 0

    def test_item_operations_are_404(self, client: TestClient):
        client.post("/v1/feed", headers=HEADERS)

        current = client.get("/v1/feed/current", headers=HEADERS)
        assert current.status_code == 404
        assert current.json()["code"] == "empty_feed"
        assert (
            client.post("/v1/feed/answer", json={"answer": "x"}, headers=HEADERS).status_code
            == 404
        )
        assert client.post("/v1/feed/advance", headers=HEADERS).status_code == 404


class TestFeedSession:
    def test_open_composes_all_items(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=3, flashcards=2)

        body = client.post("/v1/feed", json={"xp": 40}, headers=HEADERS).json()

        assert body["status"] == "ready"
        assert body["size"] == 5
        assert body["position"] == 0
        assert body["xp"] == 40
        assert len(body["upcoming"]) == 3

    def test_reopening_without_body_keeps_session(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=3, flashcards=0)
        client.post("/v1/feed", headers=HEADERS)
        item = client.get("/v1/feed/current", headers=HEADERS).json()
        client.post("/v1/feed/answer", json=_answer_for(item), headers=HEADERS)

        again = client.post("/v1/feed", headers=HEADERS).json()

        assert (again["xp"], again["streak"], again["position"]) == (10, 1, 1)
        assert client.get("/v1/profile/stats", headers=HEADERS).json()["xp"] == 10

    def test_reopening_with_xp_starts_fresh_session(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=3, flashcards=0)
        client.post("/v1/feed", headers=HEADERS)
        item = client.get("/v1/feed/current", headers=HEADERS).json()
        client.post("/v1/feed/answer", json=_answer_for(item), headers=HEADERS)

        fresh = client.post("/v1/feed", json={"xp": 200}, headers=HEADERS).json()

        assert (fresh["xp"], fresh["streak"], fresh["position"]) == (200, 0, 0)

    def test_answering_builds_streak_and_wraps(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=2, flashcards=1)
        client.post("/v1/feed", headers=HEADERS)

        for n in range(1, 4):
            item = client.get("/v1/feed/current", headers=HEADERS).json()
            resp = client.post("/v1/feed/answer", json=_answer_for(item), headers=HEADERS)
            assert resp.status_code == 200
            outcome = resp.json()["outcome"]
            assert outcome["is_correct"] is True
            assert outcome["item_id"] == item["id"]
            assert (outcome["streak_after"], outcome["xp_after"]) == (n, 10 * n)

        assert resp.json()["state"]["position"] == 0

    def test_wrong_answer_resets_streak(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=2, flashcards=0)
        client.post("/v1/feed", headers=HEADERS)
        item = client.get("/v1/feed/current", headers=HEADERS).json()
        client.post("/v1/feed/answer", json=_answer_for(item), headers=HEADERS)

        resp = client.post("/v1/feed/answer", json={"answer": "Luck"}, headers=HEADERS)

        outcome = resp.json()["outcome"]
        assert outcome["is_correct"] is False
        assert outcome["correct_answer"] == "Small daily gains"
        assert (outcome["streak_after"], outcome["xp_after"]) == (0, 10)

    def test_answer_needs_exactly_one_field(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1")
        client.post("/v1/feed", headers=HEADERS)

        both = client.post(
            "/v1/feed/answer", json={"answer": "x", "rating": "easy"}, headers=HEADERS
        )
        neither = client.post("/v1/feed/answer", json={}, headers=HEADERS)
        bad_rating = client.post("/v1/feed/answer", json={"rating": "meh"}, headers=HEADERS)

        assert both.status_code == neither.status_code == bad_rating.status_code == 400

    def test_rating_a_question_is_400(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=2, flashcards=0)
        client.post("/v1/feed", headers=HEADERS)

        resp = client.post("/v1/feed/answer", json={"rating": "easy"}, headers=HEADERS)

        assert resp.status_code == 400
        assert client.get("/v1/feed", headers=HEADERS).json()["position"] == 0

    def test_advance_skips_without_scoring(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=1, flashcards=1)
        client.post("/v1/feed", headers=HEADERS)

        first = client.post("/v1/feed/advance", headers=HEADERS).json()
        second = client.post("/v1/feed/advance", headers=HEADERS).json()

        assert (first["position"], second["position"]) == (1, 0)
        assert second["streak"] == second["xp"] == 0

    def test_shuffle_keeps_score_and_rewinds(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=3, flashcards=0)
        client.post("/v1/feed", headers=HEADERS)
        item = client.get("/v1/feed/current", headers=HEADERS).json()
        client.post("/v1/feed/answer", json=_answer_for(item), headers=HEADERS)

        body = client.post("/v1/feed/shuffle", headers=HEADERS).json()

        assert body["position"] == 0
        assert (body["streak"], body["xp"]) == (1, 10)

    def test_sessions_are_per_user(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=2, flashcards=0)
        seed_sync(api_repo, "u2", questions=1, flashcards=1)

        mine = client.post("/v1/feed", headers=HEADERS).json()
        theirs = client.post("/v1/feed", headers={"X-User-Id": "u2"}).json()

        assert (mine["size"], theirs["size"]) == (2, 2)
        assert all(i["user_id"] == "u1" for i in [mine["current"], *mine["upcoming"]])

    def test_end_session(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1")
        client.post("/v1/feed", headers=HEADERS)

        assert client.delete("/v1/feed", headers=HEADERS).json() == {"ended": True}
        assert client.delete("/v1/feed", headers=HEADERS).json() == {"ended": False}


class TestProfileStats:
    def test_stats_without_session(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=3, flashcards=2)

        body = client.get("/v1/profile/stats", headers=HEADERS).json()

        assert body["xp"] == 0
        assert body["level"]["level"] == 1
        assert body["library"] == {
            "books": 0,
            "videos": 0,
            "questions": 3,
            "flashcards": 2,
        }

    def test_stats_follow_session(self, client: TestClient, api_repo):
        seed_sync(api_repo, "u1", questions=2, flashcards=0)
        client.post("/v1/feed", json={"xp": 95}, headers=HEADERS)
        item = client.get("/v1/feed/current", headers=HEADERS).json()
        client.post("/v1/feed/answer", json=_answer_for(item), headers=HEADERS)

        body = client.get("/v1/profile/stats", headers=HEADERS).json()

        assert (body["xp"], body["streak"]) == (105, 1)
        assert body["level"]["level"] == 2
        assert body["level"]["xp_to_next_level"] == 95
