"""Tests for the Supabase repositories against a mocked PostgREST client."""

from datetime import date
from unittest.mock import MagicMock, call

import pytest

from conftest import BASE_TIME
from fitcore.core.errors import DatabaseError, InvalidLimit
from fitcore.core.pagination import (
    DistanceAscCursor,
    ScoreDescCursor,
    TimeDescCursor,
    decode_cursor,
)
from fitcore.infrastructure.database import (
    GymRepository,
    Repositories,
    SupabaseClient,
    build_repositories,
)
from fitcore.infrastructure.database.memory import MemoryGymRepository
from fitcore.infrastructure.database.repositories.exercises import exercise_from_row
from fitcore.infrastructure.database.repositories.keyset import time_desc_filter
from fitcore.models import ExerciseSetInput, SearchKind

TS = "2024-05-01T12:00:00+00:00"


def fake_supabase(rows=None, error=None):
    """Client stand-in whose table() and rpc() builders all chain to one query."""
    query = MagicMock(name="query")
    for method in ("select", "eq", "gte", "lt", "or_", "order", "limit", "insert"):
        getattr(query, method).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=rows)

    db = MagicMock(name="db")
    db.table.return_value = query
    db.rpc.return_value = query
    return MagicMock(client=db), db, query


def review_row(review_id: str, created_at: str = TS) -> dict:
    return {
        "id": review_id,
        "gym_id": "gym-a",
        "user_id": "user-1",
        "rating": 4,
        "comment": None,
        "created_at": created_at,
    }


class TestTimeDescFilter:
    """Test the PostgREST rendering of the created_at DESC keyset predicate."""

    def test_renders_or_filter(self):
        """Test timestamp and id are quoted inside the or() expression."""
        cursor = TimeDescCursor(created_at=BASE_TIME, id="r-9")

        assert time_desc_filter(cursor) == (
            f'created_at.lt."{TS}",and(created_at.eq."{TS}",id.lt."r-9")'
        )

    def test_escapes_quotes(self):
        """Test double quotes and backslashes in ids cannot end the value."""
        cursor = TimeDescCursor(created_at=BASE_TIME, id='a"b\\c')

        assert time_desc_filter(cursor).endswith('id.lt."a\\"b\\\\c")')

    def test_custom_column(self):
        """Test another timestamp column can be used."""
        cursor = TimeDescCursor(created_at=BASE_TIME, id="x")

        assert time_desc_filter(cursor, column="performed_at").startswith("performed_at.lt.")


class TestReviewRepository:
    """Test review listing queries."""

    def test_first_page_query(self):
        """Test filter, ordering and overfetch of the first page."""
        client, db, query = fake_supabase([review_row("r3"), review_row("r2"), review_row("r1")])
        repos = Repositories.supabase(client)

        page = repos.reviews.list_for_gym("gym-a", limit=2)

        db.table.assert_called_with("gym_reviews")
        query.eq.assert_called_with("gym_id", "gym-a")
        query.or_.assert_not_called()
        assert query.order.call_args_list == [call("created_at", desc=True), call("id", desc=True)]
        query.limit.assert_called_with(3)

        assert [r.id for r in page.items] == ["r3", "r2"]
        assert page.has_more is True
        assert decode_cursor(page.next_cursor, TimeDescCursor) == TimeDescCursor(
            created_at=BASE_TIME, id="r2"
        )

    def test_cursor_adds_keyset_filter(self):
        """Test a cursor becomes the or() keyset filter."""
        client, db, query = fake_supabase([review_row("r1")])
        cursor = TimeDescCursor(created_at=BASE_TIME, id="r2")

        page = Repositories.supabase(client).reviews.list_for_gym("gym-a", limit=2, cursor=cursor)

        query.or_.assert_called_once_with(time_desc_filter(cursor))
        assert [r.id for r in page.items] == ["r1"]
        assert page.has_more is False
        assert page.next_cursor is None

    def test_invalid_limit_before_query(self):
        """Test a zero limit never reaches the database."""
        client, db, query = fake_supabase([])

        with pytest.raises(InvalidLimit):
            Repositories.supabase(client).reviews.list_for_gym("gym-a", limit=0)

        db.table.assert_not_called()


class TestGymRepository:
    """Test gym lookups and the nearby function call."""

    def test_nearby_rpc_params(self):
        """Test radius in metres, cursor position and overfetch are passed."""
        row = {
            "id": "g-1",
            "name": "Iron Temple",
            "lat": 52.52,
            "lng": 13.40,
            "address": "",
            "distance_m": 120.5,
            "avg_rating": 4.5,
            "machines_count": 12,
            "price_from_cents": None,
        }
        client, db, query = fake_supabase([row])
        cursor = DistanceAscCursor(distance_m=80.0, id="g-0")

        page = Repositories.supabase(client).gyms.nearby(52.52, 13.40, 2.5, 10, cursor)

        db.rpc.assert_called_once_with(
            "gyms_nearby",
            {
                "p_lat": 52.52,
                "p_lng": 13.40,
                "p_radius_m": 2500.0,
                "p_after_distance": 80.0,
                "p_after_id": "g-0",
                "p_limit": 11,
            },
        )
        assert page.items[0].distance_m == 120.5
        assert page.items[0].machines_count == 12
        assert page.has_more is False

    def test_nearby_without_cursor(self):
        """Test the first page passes null keyset parameters."""
        client, db, query = fake_supabase([])

        page = Repositories.supabase(client).gyms.nearby(0, 0, 5, 20)

        params = db.rpc.call_args[0][1]
        assert params["p_after_distance"] is None
        assert params["p_after_id"] is None
        assert page.items == []

    def test_get(self):
        """Test a found row is parsed and a missing one is None."""
        client, db, query = fake_supabase(
            [{"id": "g-1", "name": "Iron Temple", "lat": 1.0, "lng": 2.0, "created_at": TS}]
        )
        repo = GymRepository(client)

        gym = repo.get("g-1")

        query.eq.assert_called_with("id", "g-1")
        assert gym.name == "Iron Temple"

        query.execute.return_value = MagicMock(data=[])
        assert repo.get("missing") is None


class TestSearchRepository:
    """Test the search function call."""

    def test_rpc_params_and_hits(self):
        """Test query, kind, mode, threshold and cursor are forwarded."""
        rows = [
            {"id": "m-1", "name": "Leg Press", "score": 1.0},
            {"id": "m-2", "name": "Leg Press Machine", "score": 0.8},
        ]
        client, db, query = fake_supabase(rows)
        cursor = ScoreDescCursor(score=1.0, id="m-0")

        page = Repositories.supabase(client).search.search(
            "leg press", SearchKind.MACHINE, 1, cursor, prefix=True
        )

        db.rpc.assert_called_once_with(
            "search_catalog",
            {
                "p_query": "leg press",
                "p_kind": "machine",
                "p_prefix": True,
                "p_threshold": 0.3,
                "p_after_score": 1.0,
                "p_after_id": "m-0",
                "p_limit": 2,
            },
        )
        assert [h.id for h in page.items] == ["m-1"]
        assert page.items[0].kind == SearchKind.MACHINE
        assert decode_cursor(page.next_cursor, ScoreDescCursor) == ScoreDescCursor(
            score=1.0, id="m-1"
        )


class TestCommentRepository:
    """Test comment writes and listing."""

    def test_create_inserts_row(self):
        """Test the inserted row matches the returned comment."""
        client, db, query = fake_supabase([])

        comment = Repositories.supabase(client).comments.create("v-1", "user-1", "Nice cue")

        db.table.assert_called_with("video_comments")
        inserted = query.insert.call_args[0][0]
        assert inserted["id"] == comment.id
        assert inserted["video_id"] == "v-1"
        assert inserted["text"] == "Nice cue"
        assert isinstance(inserted["created_at"], str)

    def test_list_by_video(self):
        """Test comments are filtered by video and ordered newest first."""
        rows = [
            {"id": "c2", "video_id": "v-1", "user_id": "u", "text": "b", "created_at": TS},
            {"id": "c1", "video_id": "v-1", "user_id": "u", "text": "a", "created_at": TS},
        ]
        client, db, query = fake_supabase(rows)

        page = Repositories.supabase(client).comments.list_by_video("v-1", limit=5)

        query.eq.assert_called_with("video_id", "v-1")
        query.limit.assert_called_with(6)
        assert [c.id for c in page.items] == ["c2", "c1"]


class TestExerciseRepository:
    """Test exercise writes, day windows and row flattening."""

    def test_create_calls_function(self):
        """Test exercise and numbered sets go to create_exercise in one call."""
        client, db, query = fake_supabase(None)
        sets = [ExerciseSetInput(reps=5, weight_kg=100), ExerciseSetInput(reps=3, rpe=9)]

        exercise = Repositories.supabase(client).exercises.create(
            "user-1", BASE_TIME, "Squat", sets, gym_id="g-1"
        )

        name, params = db.rpc.call_args[0]
        assert name == "create_exercise"
        assert params["p_exercise"]["id"] == exercise.id
        assert params["p_exercise"]["gym_id"] == "g-1"
        assert params["p_exercise"]["machine_id"] is None
        assert "sets" not in params["p_exercise"]
        assert [s["set_index"] for s in params["p_sets"]] == [1, 2]
        assert {s["exercise_id"] for s in params["p_sets"]} == {exercise.id}

    def test_list_by_day_window(self):
        """Test the UTC day bounds and user filter."""
        client, db, query = fake_supabase([])

        Repositories.supabase(client).exercises.list_by_day("user-1", date(2024, 5, 1), 20)

        query.eq.assert_called_with("user_id", "user-1")
        query.gte.assert_called_once_with("created_at", "2024-05-01T00:00:00+00:00")
        query.lt.assert_called_once_with("created_at", "2024-05-02T00:00:00+00:00")
        query.limit.assert_called_with(21)

    def test_row_flattening(self):
        """Test embedded names are lifted and sets sorted by index."""
        row = {
            "id": "e-1",
            "user_id": "user-1",
            "gym_id": "g-1",
            "machine_id": None,
            "name": "Squat",
            "created_at": TS,
            "gyms": {"name": "Iron Temple"},
            "machines": None,
            "exercise_sets": [
                {"id": "s2", "exercise_id": "e-1", "set_index": 2, "reps": 3},
                {"id": "s1", "exercise_id": "e-1", "set_index": 1, "reps": 5},
            ],
        }

        exercise = exercise_from_row(row)

        assert exercise.gym_name == "Iron Temple"
        assert exercise.machine_name is None
        assert [s.id for s in exercise.sets] == ["s1", "s2"]

    def test_get_for_user_scoped(self):
        """Test lookups filter on both id and owner."""
        client, db, query = fake_supabase([])

        result = Repositories.supabase(client).exercises.get_for_user("e-1", "user-1")

        assert result is None
        assert call("id", "e-1") in query.eq.call_args_list
        assert call("user_id", "user-1") in query.eq.call_args_list


class TestDatabaseErrors:
    """Test failures surface as DatabaseError."""

    def test_query_failure(self):
        """Test a PostgREST error is wrapped."""
        client, db, query = fake_supabase(error=RuntimeError("connection reset"))

        with pytest.raises(DatabaseError):
            Repositories.supabase(client).videos.list_by_machine("m-1", limit=5)

    def test_report_insert_failure(self):
        """Test a failed insert does not return a report."""
        client, db, query = fake_supabase(error=RuntimeError("violates check constraint"))

        with pytest.raises(DatabaseError):
            Repositories.supabase(client).reports.create("user-1", "video", "v-1", "spam")

    def test_unconfigured_client(self, monkeypatch):
        """Test missing credentials raise on first use, not at construction."""
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
        monkeypatch.setattr(SupabaseClient, "_instance", None)
        monkeypatch.setattr(SupabaseClient, "_client", None)

        repo = GymRepository()

        assert SupabaseClient().is_configured() is False
        with pytest.raises(DatabaseError):
            repo.get("g-1")


class TestBuildRepositories:
    """Test backend selection from configuration."""

    def test_memory_backend(self):
        """Test the test environment selects in-process tables."""
        assert isinstance(build_repositories().gyms, MemoryGymRepository)

    def test_supabase_backend(self, monkeypatch):
        """Test the default backend builds Supabase repositories lazily."""
        monkeypatch.setenv("DATABASE_BACKEND", "supabase")

        assert isinstance(build_repositories().gyms, GymRepository)

    def test_unknown_backend(self, monkeypatch):
        """Test an unknown backend fails at startup."""
        monkeypatch.setenv("DATABASE_BACKEND", "sqlite")

        with pytest.raises(ValueError):
            build_repositories()
