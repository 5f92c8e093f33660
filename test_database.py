"""
Persistence against an in-memory Supabase stand-in (see conftest.py).
Run: pytest test_database.py
"""
import logging
import re
from datetime import date, timedelta

import pytest

from learnory import config, db
from learnory.database import DatabaseClient
from learnory.engine import generate_mock_exam, mark_exam
from learnory.gamification import add_xp, new_game_profile
from learnory.planning import complete_task, generate_study_plan
from learnory.question_bank import QUESTION_BANK


@pytest.fixture
def database(fake_client):
    return DatabaseClient(client=fake_client)


@pytest.fixture
def plan():
    today = date(2026, 3, 2)
    profile = {
        "user_id": "user-1",
        "exam_type": "waec",
        "deadline": today + timedelta(days=5),
        "hours_per_day": 3,
        "subjects": ["Chemistry"],
        "weak_topics": ["Chemical Bonding"],
        "strength": "intermediate",
    }
    return generate_study_plan(profile, today=today)


# ============= Exam results =============

def test_save_exam_result(database, fake_client):
    questions = generate_mock_exam("mathematics")
    result = mark_exam({"math-001": "x = -2 or x = -3"}, questions, user_id="user-1")

    row_id = database.save_exam_result(result)

    assert row_id is not None
    stored = fake_client.tables["exam_results"][0]
    assert stored["id"] == row_id
    assert stored["score"] == 100
    assert stored["skipped"] == 1
    assert stored["strong_topics"] == ["Quadratic Equations"]


def test_recent_scores_oldest_first(database, fake_client):
    fake_client.tables["exam_results"] = [
        {"id": "a", "user_id": "user-1", "subject": "physics", "score": 55, "created_at": "2026-03-01T10:00:00"},
        {"id": "b", "user_id": "user-1", "subject": "physics", "score": 70, "created_at": "2026-03-03T10:00:00"},
        {"id": "c", "user_id": "user-2", "subject": "physics", "score": 99, "created_at": "2026-03-04T10:00:00"},
        {"id": "d", "user_id": "user-1", "subject": "chemistry", "score": 40, "created_at": "2026-03-05T10:00:00"},
    ]

    assert database.get_recent_scores("user-1", subject="physics") == [55.0, 70.0]
    assert [r["id"] for r in database.get_exam_results("user-1")] == ["d", "b", "a"]


# ============= Study plans =============

def test_study_plan_round_trip(database, fake_client, plan):
    assert database.save_study_plan(plan) is True

    loaded = database.get_study_plan(plan["plan_id"])
    assert loaded["plan_id"] == plan["plan_id"]
    assert loaded["total_days_available"] == 5
    assert loaded["strength"] == "intermediate"
    assert loaded["deadline"] == plan["deadline"].isoformat()
    assert loaded["schedule"][0]["date"] == "2026-03-02"
    assert "id" not in loaded


def test_update_schedule_after_completion(database, fake_client, plan):
    database.save_study_plan(plan)
    updated = complete_task(plan, 1, "task-1-2")

    assert database.update_study_plan_schedule(updated) is True

    stored = fake_client.tables["study_plans"][0]
    assert stored["status_percentage"] == updated["status_percentage"] > 0
    assert stored["schedule"][0]["tasks"][1]["completed"] is True


def test_missing_plan(database):
    assert database.get_study_plan("plan-missing") is None


# ============= Game profiles =============

def test_game_profile_upserts_by_user(database, fake_client):
    profile = new_game_profile("user-1")
    database.save_game_profile(profile)
    database.save_game_profile(add_xp(profile, 130))

    assert len(fake_client.tables["game_profiles"]) == 1
    loaded = database.get_game_profile("user-1")
    assert loaded["level"] == 2
    assert loaded["current_level_xp"] == 30


def test_unknown_game_profile(database):
    assert database.get_game_profile("nobody") is None


# ============= Question bank =============

def test_load_question_bank_groups_by_subject(database, fake_client):
    fake_client.tables["questions"] = QUESTION_BANK["mathematics"] + QUESTION_BANK["physics"]

    bank = database.load_question_bank()
    assert set(bank) == {"mathematics", "physics"}
    assert [q["id"] for q in generate_mock_exam("Physics", bank=bank)] == ["phys-001"]

    only_math = database.load_question_bank(subjects=["Mathematics"])
    assert set(only_math) == {"mathematics"}


# ============= Failure handling =============

def test_errors_are_logged_not_raised(broken_client, plan, caplog):
    database = DatabaseClient(client=broken_client)
    result = mark_exam({}, [])

    with caplog.at_level(logging.ERROR):
        assert database.save_exam_result(result) is None
        assert database.get_exam_results("user-1") == []
        assert database.get_recent_scores("user-1") == []
        assert database.save_study_plan(plan) is False
        assert database.get_study_plan(plan["plan_id"]) is None
        assert database.update_study_plan_schedule(plan) is False
        assert database.get_game_profile("user-1") is None
        assert database.save_game_profile(new_game_profile("user-1")) is False
        assert database.load_question_bank() == {}

    assert "Error saving exam result" in caplog.text


# ============= db helpers =============

def test_client_requires_credentials(monkeypatch):
    monkeypatch.setattr(config, "SUPABASE_URL", None)
    monkeypatch.setattr(config, "SUPABASE_KEY", None)
    with pytest.raises(ValueError):
        db.get_supabase_uncached()


def test_bulk_upsert_dedupes_and_chunks(fake_client):
    rows = [{"id": str(i % 5), "subject": "physics"} for i in range(8)]

    count = db.upsert_questions_bulk(fake_client, rows, chunk_size=2)

    assert count == 5
    upserts = [c for c in fake_client.calls if c[1] == "upsert"]
    assert [len(c[2]) for c in upserts] == [2, 2, 1]
    assert len(fake_client.tables["questions"]) == 5


def test_delete_by_source(fake_client):
    fake_client.tables["questions"] = [
        {"id": "1", "source": "batch-a"},
        {"id": "2", "source": "batch-b"},
    ]
    db.delete_questions_by_source(fake_client, "batch-a")
    assert [r["id"] for r in fake_client.tables["questions"]] == ["2"]


def test_questions_by_subject(fake_client):
    fake_client.tables["questions"] = QUESTION_BANK["mathematics"] + QUESTION_BANK["chemistry"]
    response = db.get_questions_by_subject(fake_client, "Chemistry")
    assert [q["id"] for q in response.data] == ["chem-001"]


def test_schema_declares_every_table(capsys):
    from learnory.init_db import SCHEMA_SQL, main, schema_statements

    tables = re.findall(r"CREATE TABLE IF NOT EXISTS (\w+)", SCHEMA_SQL)
    assert tables == ["questions", "exam_results", "study_plans", "game_profiles"]
    assert len(schema_statements()) == 8
    assert "strength VARCHAR(20)" in SCHEMA_SQL

    main()
    assert "CREATE TABLE IF NOT EXISTS study_plans" in capsys.readouterr().out
