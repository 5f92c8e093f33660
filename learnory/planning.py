"""
Personalized Study Planning: expands a learner profile into a day-by-day schedule
and reports pacing against actual progress.

Phases by position in the plan:
    foundation (<=20%)  -> weak-topic lessons and practice
    depth (<=60%)       -> advanced lessons, practice, quiz every 5th day
    consolidation (<=85%) -> mock exams and weak-area practice
    final_revision      -> revision and confidence-building mock exams
"""
import copy
import logging
import math
import random
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Union
from uuid import uuid4

from learnory.config import (
    CONSOLIDATION_END,
    DEPTH_END,
    FOUNDATION_END,
    QUIZ_EVERY_N_DAYS,
    SLIGHTLY_BEHIND_RATIO,
)

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def _to_datetime(value: Union[str, date, datetime]) -> datetime:
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def _align(deadline: datetime, today: datetime):
    # Naive values are local time; mixed pairs are compared as UTC instants
    if (deadline.tzinfo is None) != (today.tzinfo is None):
        return deadline.astimezone(timezone.utc), today.astimezone(timezone.utc)
    return deadline, today


def get_phase(day_number: int, total_days: int) -> str:
    if day_number <= total_days * FOUNDATION_END:
        return "foundation"
    if day_number <= total_days * DEPTH_END:
        return "depth"
    if day_number <= total_days * CONSOLIDATION_END:
        return "consolidation"
    return "final_revision"


def _task(day_number: int, n: int, subject: str, topic: str, activity: str,
          minutes: int, difficulty: str, priority: str) -> Dict:
    return {
        "task_id": f"task-{day_number}-{n}",
        "subject": subject,
        "topic": topic,
        "activity": activity,
        "duration_minutes": minutes,
        "difficulty": difficulty,
        "priority": priority,
        "completed": False,
    }


def generate_daily_tasks(
    day_number: int,
    total_days: int,
    subjects: List[str],
    weak_topics: List[str],
    hours_per_day: float,
    strength: Optional[str] = None,
    rng=None,
) -> List[Dict]:
    """Build one day's tasks from the phase template for that day."""
    rng = rng or random
    minutes_per_day = hours_per_day * 60

    def minutes(fraction: float) -> int:
        return int(math.floor(minutes_per_day * fraction))

    def weak_topic(fallback: str) -> str:
        return rng.choice(weak_topics) if weak_topics else fallback

    # Round-robin through subjects regardless of phase
    current_subject = subjects[(day_number - 1) % len(subjects)] if subjects else "General"
    phase = get_phase(day_number, total_days)

    if phase == "foundation":
        return [
            _task(day_number, 1, current_subject, weak_topic("General Revision"),
                  "lesson", minutes(0.5), "easy", "high"),
            _task(day_number, 2, current_subject, weak_topic("General Practice"),
                  "practice", minutes(0.5), "easy", "high"),
        ]

    if phase == "depth":
        tasks = [
            _task(day_number, 1, current_subject, f"Advanced Topics in {current_subject}",
                  "lesson", minutes(0.4), "medium", "high"),
            _task(day_number, 2, current_subject, f"Practice {current_subject}",
                  "practice", minutes(0.35), "medium", "high"),
        ]
        if day_number % QUIZ_EVERY_N_DAYS == 0:
            tasks.append(
                _task(day_number, 3, current_subject, f"Quiz: {current_subject}",
                      "quiz", minutes(0.25), "medium", "medium")
            )
        return tasks

    if phase == "consolidation":
        return [
            _task(day_number, 1, "General", "Mix of All Subjects",
                  "mockexam", minutes(0.7), "hard", "high"),
            _task(day_number, 2, current_subject, "Weak Area Focus",
                  "practice", minutes(0.3), "hard", "high"),
        ]

    return [
        _task(day_number, 1, "General", "Final Revision All Topics",
              "revision", minutes(0.6), "medium", "high"),
        _task(day_number, 2, "General", "Confidence Building",
              "mockexam", minutes(0.4), "medium", "medium"),
    ]


def generate_study_plan(profile: Dict, today: Optional[Union[date, datetime]] = None, rng=None) -> Dict:
    """
    Generate a personalized study plan running from today to the deadline.

    Args:
        profile: {user_id, exam_type, deadline, hours_per_day, subjects,
                  weak_topics, strength, hours_available?}
        today: Start of the plan (defaults to now)
        rng: Random source with a choice() method, for weak-topic selection

    Returns:
        StudyPlan dict with one DailyPlan per day
    """
    start = _to_datetime(today) if today is not None else datetime.now()
    deadline = _to_datetime(profile["deadline"])
    end, begin = _align(deadline, start)

    total_days = max(0, math.ceil((end - begin).total_seconds() / SECONDS_PER_DAY))
    subjects = list(profile.get("subjects") or [])
    weak_topics = list(profile.get("weak_topics") or [])
    hours_per_day = profile.get("hours_per_day") or 0
    strength = profile.get("strength")

    schedule = []
    for day in range(1, total_days + 1):
        tasks = generate_daily_tasks(day, total_days, subjects, weak_topics, hours_per_day, strength, rng)
        schedule.append({
            "date": (start + timedelta(days=day - 1)).date(),
            "day_number": day,
            "phase": get_phase(day, total_days),
            "tasks": tasks,
            "estimated_hours": sum(t["duration_minutes"] for t in tasks) / 60,
        })

    hours_available = profile.get("hours_available")
    plan = {
        "plan_id": f"plan-{uuid4()}",
        "user_id": profile.get("user_id"),
        "exam_type": profile.get("exam_type"),
        "deadline": deadline,
        "strength": strength,
        "total_days_available": total_days,
        "hours_per_day": hours_per_day,
        "subjects": subjects,
        "weak_topics": weak_topics,
        "schedule": schedule,
        "total_hours_required": (
            hours_available if hours_available is not None
            else sum(d["estimated_hours"] for d in schedule)
        ),
        "status_percentage": 0,
    }

    logger.info(
        f"Study plan {plan['plan_id']}: {total_days} days, {len(subjects)} subjects, "
        f"{plan['total_hours_required']:.1f}h required"
    )
    return plan


def get_pace_recommendation(plan: Dict, days_elapsed: float, hours_completed: float) -> Dict:
    """
    Compare hours studied against where the plan expects the learner to be.

    Returns:
        {status: on_track|slightly_behind|behind, recommendation, hours_needed_per_day}
    """
    total_hours = sum(day["estimated_hours"] for day in plan["schedule"])
    total_days = plan["total_days_available"]
    expected_hours = (days_elapsed / total_days * total_hours) if total_days > 0 else total_hours
    hours_remaining = total_hours - hours_completed
    days_remaining = total_days - days_elapsed

    if hours_completed >= expected_hours:
        return {
            "status": "on_track",
            "recommendation": f"Great! You're on track. Maintain {plan['hours_per_day']} hours/day to finish on time.",
            "hours_needed_per_day": plan["hours_per_day"],
        }

    if days_remaining <= 0:
        needed = math.ceil(hours_remaining)
        logger.debug(f"Plan {plan.get('plan_id')}: deadline reached with {hours_remaining:.1f}h outstanding")
        return {
            "status": "behind",
            "recommendation": f"The deadline has arrived with {needed} hours of planned study outstanding.",
            "hours_needed_per_day": needed,
        }

    required_per_day = hours_remaining / days_remaining
    if hours_completed > expected_hours * SLIGHTLY_BEHIND_RATIO:
        needed = math.ceil(required_per_day)
        return {
            "status": "slightly_behind",
            "recommendation": f"You're slightly behind. Increase to {needed} hours/day to stay on schedule.",
            "hours_needed_per_day": needed,
        }

    needed = math.ceil(required_per_day + 1)
    return {
        "status": "behind",
        "recommendation": f"You're behind schedule! Urgent: Increase to {needed} hours/day minimum.",
        "hours_needed_per_day": needed,
    }


def calculate_plan_progress(plan: Dict) -> float:
    """Completed task minutes as a percentage of all task minutes."""
    total = 0
    done = 0
    for day in plan["schedule"]:
        for task in day["tasks"]:
            total += task["duration_minutes"]
            if task["completed"]:
                done += task["duration_minutes"]
    return (done / total * 100) if total > 0 else 0.0


def complete_task(plan: Dict, day_number: int, task_id: str, completed: bool = True) -> Dict:
    """Return a copy of the plan with one task's completed flag set."""
    updated = copy.deepcopy(plan)
    for day in updated["schedule"]:
        if day["day_number"] != day_number:
            continue
        for task in day["tasks"]:
            if task["task_id"] == task_id:
                task["completed"] = completed
                updated["status_percentage"] = calculate_plan_progress(updated)
                return updated

    logger.warning(f"Task {task_id} not found on day {day_number} of plan {plan.get('plan_id')}")
    return updated
