"""HTTP tests for the extract, generate and quiz session routes."""

import pytest
from fastapi.testclient import TestClient

from main import app

from .conftest import KEY_TERMS, PROSE, STRICT_QUIZ, TAGGED_FLASHCARDS

SESSIONS = "/v1/quiz/sessions"


@pytest.fixture
def client(slow_transitions, clean_quiz_manager):
    with TestClient(app) as c:
        yield c


class TestHealth:
    def test_root(self, client) -> None:
        res = client.get("/")
        assert res.status_code == 200
        assert res.json()["status"] == "ok"


class TestExtract:
    """POST /v1/extract/{content_type}."""

    def test_quiz(self, client) -> None:
        res = client.post("/v1/extract/quiz", json={"text": STRICT_QUIZ})
        assert res.status_code == 200
        body = res.json()
        assert body["structured"] is True
        assert body["count"] == 2
        assert body["questions"][1]["correct"] == "C"
        assert body["raw"] is None

    def test_flashcards_deck(self, client) -> None:
        res = client.post(
            "/v1/extract/flashcards", json={"text": TAGGED_FLASHCARDS, "title": "Biology"}
        )
        deck = res.json()["deck"]
        assert deck["name"] == "Biology"
        assert [c["id"] for c in deck["cards"]] == ["card-1", "card-2"]
        assert deck["progress"] == 0

    def test_flashcards_default_deck_name(self, client) -> None:
        res = client.post("/v1/extract/flashcards", json={"text": TAGGED_FLASHCARDS})
        assert res.json()["deck"]["name"].startswith("Deck ")

    def test_key_terms(self, client) -> None:
        body = client.post("/v1/extract/keyTerms", json={"text": KEY_TERMS}).json()
        assert body["count"] == 2
        assert body["key_terms"]["formulas"] == "Rate = Distance / Time"

    def test_unstructured_returns_raw(self, client) -> None:
        """Nothing parses: no error, raw text comes back for display."""
        for content_type in ("quiz", "flashcards", "keyTerms"):
            res = client.post(f"/v1/extract/{content_type}", json={"text": PROSE})
            assert res.status_code == 200
            body = res.json()
            assert body["structured"] is False
            assert body["count"] == 0
            assert body["raw"] == PROSE

    def test_unknown_content_type(self, client) -> None:
        assert client.post("/v1/extract/essay", json={"text": "x"}).status_code == 422


class TestGenerate:
    """POST /v1/generate/{content_type}."""

    def test_mock_quiz(self, client, mock_generation) -> None:
        res = client.post("/v1/generate/quiz", json={"text": "AI notes", "num_questions": 3})
        assert res.status_code == 200
        body = res.json()
        assert body["is_mock"] is True
        assert body["count"] == 3
        assert body["content"].startswith("Q: ")

    def test_mock_key_terms(self, client, mock_generation) -> None:
        body = client.post("/v1/generate/keyTerms", json={"text": "AI notes"}).json()
        assert body["count"] == 5
        assert body["key_terms"]["formulas"].startswith("Sigmoid")

    def test_generation_failure(self, client, mock_generation) -> None:
        res = client.post("/v1/generate/quiz", json={"text": "  "})
        assert res.status_code == 502

    def test_num_questions_bounds(self, client) -> None:
        res = client.post("/v1/generate/quiz", json={"text": "x", "num_questions": 0})
        assert res.status_code == 422


class TestFlashcardProgress:
    """POST /v1/flashcards/mark and /v1/flashcards/reset."""

    def _deck(self, client) -> dict:
        res = client.post(
            "/v1/extract/flashcards", json={"text": TAGGED_FLASHCARDS, "title": "Biology"}
        )
        return res.json()["deck"]

    def test_mark_mastered(self, client) -> None:
        deck = self._deck(client)
        res = client.post("/v1/flashcards/mark", json={"deck": deck, "index": 0})
        assert res.status_code == 200
        body = res.json()
        assert body["cards"][0]["mastered"] is True
        assert body["progress"] == 50
        assert body["last_studied"] is not None

    def test_mark_out_of_range(self, client) -> None:
        deck = self._deck(client)
        res = client.post("/v1/flashcards/mark", json={"deck": deck, "index": 5})
        assert res.status_code == 422

    def test_reset(self, client) -> None:
        deck = self._deck(client)
        marked = client.post("/v1/flashcards/mark", json={"deck": deck, "index": 1}).json()
        body = client.post("/v1/flashcards/reset", json=marked).json()
        assert body["progress"] == 0
        assert not any(c["mastered"] for c in body["cards"])


class TestQuizSessions:
    """Session lifecycle over HTTP."""

    def _create(self, client) -> str:
        res = client.post(SESSIONS, json={"text": STRICT_QUIZ})
        assert res.status_code == 201
        return res.json()["session_id"]

    def test_full_attempt(self, client) -> None:
        sid = self._create(client)

        res = client.post(f"{SESSIONS}/{sid}/answer", json={"key": "B"})
        body = res.json()
        assert body["applied"] is True
        assert body["state"]["pending_transition"] is True
        assert body["state"]["current_index"] == 0

        state = client.post(f"{SESSIONS}/{sid}/advance").json()["state"]
        assert state["current_index"] == 1

        client.post(f"{SESSIONS}/{sid}/answer", json={"key": "C"})
        state = client.post(f"{SESSIONS}/{sid}/advance").json()["state"]
        assert state["phase"] == "results"
        assert state["score"] == 2
        assert state["summary"]["percentage"] == 100

        results = client.get("/v1/quiz/results").json()["results"]
        assert results[0]["score"] == 100
        assert results[0]["correct"] == 2

        assert client.post(f"{SESSIONS}/{sid}/review/enter").json()["state"]["phase"] == "reviewing"
        assert client.post(f"{SESSIONS}/{sid}/review/next").json()["state"]["review_index"] == 1
        assert client.post(f"{SESSIONS}/{sid}/review/next").json()["applied"] is False
        assert client.post(f"{SESSIONS}/{sid}/review/previous").json()["applied"] is True
        assert client.post(f"{SESSIONS}/{sid}/review/exit").json()["state"]["phase"] == "results"

        state = client.post(f"{SESSIONS}/{sid}/reset").json()["state"]
        assert state["phase"] == "answering"
        assert state["attempt"] == 2
        assert state["answers"] == {}

    def test_answer_is_recorded(self, client) -> None:
        sid = self._create(client)
        body = client.post(f"{SESSIONS}/{sid}/answer", json={"key": "B"}).json()
        assert body["applied"] is True
        assert body["state"]["answers"] == {"0": "B"}

    def test_guarded_actions_not_applied(self, client) -> None:
        sid = self._create(client)
        assert client.post(f"{SESSIONS}/{sid}/skip").json()["applied"] is False
        assert client.post(f"{SESSIONS}/{sid}/review/enter").json()["applied"] is False
        assert client.post(f"{SESSIONS}/{sid}/previous").json()["applied"] is False
        assert client.post(f"{SESSIONS}/{sid}/next").json()["applied"] is True

    def test_skip(self, client) -> None:
        sid = self._create(client)
        client.post(f"{SESSIONS}/{sid}/answer", json={"key": "A"})
        state = client.post(f"{SESSIONS}/{sid}/skip").json()["state"]
        assert state["phase"] == "results"
        assert state["score"] == 0

    def test_create_from_questions(self, client) -> None:
        question = {
            "question": "Pick B",
            "options": {"A": "a", "B": "b", "C": "c", "D": "d"},
            "correct": "b",
        }
        res = client.post(SESSIONS, json={"questions": [question]})
        assert res.status_code == 201
        assert res.json()["state"]["total"] == 1

    def test_unparseable_text(self, client) -> None:
        res = client.post(SESSIONS, json={"text": PROSE})
        assert res.status_code == 422
        assert res.json()["detail"]["raw"] == PROSE

    def test_empty_question_list(self, client) -> None:
        assert client.post(SESSIONS, json={"questions": []}).status_code == 422

    def test_text_or_questions_required(self, client) -> None:
        assert client.post(SESSIONS, json={}).status_code == 422

    def test_invalid_answer_key(self, client) -> None:
        sid = self._create(client)
        res = client.post(f"{SESSIONS}/{sid}/answer", json={"key": "E"})
        assert res.status_code == 422

    def test_get_and_delete(self, client) -> None:
        sid = self._create(client)
        assert client.get(f"{SESSIONS}/{sid}").json()["state"]["total"] == 2
        assert client.delete(f"{SESSIONS}/{sid}").status_code == 204
        assert client.get(f"{SESSIONS}/{sid}").status_code == 404
        assert client.delete(f"{SESSIONS}/{sid}").status_code == 404
        assert client.post(f"{SESSIONS}/{sid}/next").status_code == 404
