"""
Database operations for Learnory.
Persists exam results, study plans and game profiles in Supabase, and loads question banks.
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from supabase import Client

from learnory.db import get_supabase

logger = logging.getLogger(__name__)


def _serialize(value):
    """Make dates/tuples JSON-friendly before handing rows to Supabase."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


class DatabaseClient:
    """Wrapper around a Supabase client with Learnory-specific operations."""

    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client or get_supabase()

    # ============= Exam results =============

    def save_exam_result(self, result: Dict) -> Optional[str]:
        """
        Insert a marked exam.

        Returns:
            Row id, or None if the insert failed
        """
        row = {
            "user_id": result.get("user_id"),
            "subject": result["subject"],
            "total_questions": result["total_questions"],
            "correct_answers": result["correct_answers"],
            "wrong_answers": result["wrong_answers"],
            "skipped": result["skipped"],
            "score": result["score"],
            "time_spent_minutes": result.get("time_spent_minutes", 0),
            "performance": result["performance"],
            "weak_topics": result["weak_topics"],
            "strong_topics": result["strong_topics"],
            "recommendations": result["recommendations"],
            "created_at": datetime.utcnow().isoformat(),
        }
        if result.get("exam_id"):
            row["id"] = result["exam_id"]
        try:
            response = self.client.table("exam_results").insert(_serialize(row)).execute()
            if response.data:
                return response.data[0]["id"]
            return None
        except Exception as e:
            logger.error(f"Error saving exam result: {e}")
            return None

    def get_exam_results(self, user_id: str, subject: Optional[str] = None, limit: int = 20) -> List[Dict]:
        """Fetch a user's exam results, newest first."""
        try:
            query = self.client.table("exam_results").select("*").eq("user_id", user_id)
            if subject:
                query = query.eq("subject", subject)
            response = query.order("created_at", desc=True).limit(limit).execute()
            return response.data if response.data else []
        except Exception as e:
            logger.error(f"Error fetching exam results: {e}")
            return []

    def get_recent_scores(self, user_id: str, subject: Optional[str] = None, limit: int = 10) -> List[float]:
        """Scores oldest to newest, as predict_final_score expects."""
        results = self.get_exam_results(user_id, subject=subject, limit=limit)
        return [float(r["score"]) for r in reversed(results)]

    # ============= Study plans =============

    def save_study_plan(self, plan: Dict) -> bool:
        row = {
            "id": plan["plan_id"],
            "user_id": plan.get("user_id"),
            "exam_type": plan.get("exam_type"),
            "strength": plan.get("strength"),
            "deadline": plan["deadline"],
            "total_days_available": plan["total_days_available"],
            "hours_per_day": plan["hours_per_day"],
            "subjects": plan["subjects"],
            "weak_topics": plan["weak_topics"],
            "schedule": plan["schedule"],
            "total_hours_required": plan["total_hours_required"],
            "status_percentage": plan["status_percentage"],
        }
        try:
            self.client.table("study_plans").upsert(_serialize(row), on_conflict="id").execute()
            return True
        except Exception as e:
            logger.error(f"Error saving study plan {plan['plan_id']}: {e}")
            return False

    def get_study_plan(self, plan_id: str) -> Optional[Dict]:
        """Fetch a stored plan, keyed back to plan_id."""
        try:
            response = self.client.table("study_plans").select("*").eq("id", plan_id).limit(1).execute()
            if not response.data:
                return None
            row = dict(response.data[0])
            row["plan_id"] = row.pop("id")
            return row
        except Exception as e:
            logger.error(f"Error fetching study plan {plan_id}: {e}")
            return None

    def update_study_plan_schedule(self, plan: Dict) -> bool:
        """Persist task completion changes (schedule + status_percentage)."""
        update_data = {
            "schedule": plan["schedule"],
            "status_percentage": plan["status_percentage"],
        }
        try:
            self.client.table("study_plans").update(_serialize(update_data)).eq("id", plan["plan_id"]).execute()
            return True
        except Exception as e:
            logger.error(f"Error updating study plan {plan['plan_id']}: {e}")
            return False

    # ============= Game profiles =============

    def get_game_profile(self, user_id: str) -> Optional[Dict]:
        try:
            response = self.client.table("game_profiles").select("*").eq("user_id", user_id).limit(1).execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.error(f"Error fetching game profile for {user_id}: {e}")
            return None

    def save_game_profile(self, profile: Dict) -> bool:
        try:
            self.client.table("game_profiles").upsert(_serialize(profile), on_conflict="user_id").execute()
            return True
        except Exception as e:
            logger.error(f"Error saving game profile for {profile.get('user_id')}: {e}")
            return False

    # ============= Question bank =============

    def load_question_bank(self, subjects: Optional[List[str]] = None, limit: int = 1000) -> Dict[str, List[Dict]]:
        """
        Load questions grouped by lower-case subject, the shape generate_mock_exam takes.
        """
        try:
            query = self.client.table("questions").select("*")
            if subjects:
                query = query.in_("subject", [s.lower() for s in subjects])
            response = query.limit(limit).execute()
            rows = response.data if response.data else []
        except Exception as e:
            logger.error(f"Error loading question bank: {e}")
            return {}

        bank: Dict[str, List[Dict]] = {}
        for row in rows:
            bank.setdefault((row.get("subject") or "general").lower(), []).append(row)
        logger.info(f"Loaded {len(rows)} questions across {len(bank)} subjects")
        return bank


# Singleton instance
_db_client: Optional[DatabaseClient] = None


def get_database() -> DatabaseClient:
    """Get or create database client singleton."""
    global _db_client
    if _db_client is None:
        _db_client = DatabaseClient()
    return _db_client
