"""
Gamification: XP, levels, badges, streaks and unlockable tools.
Every update returns a new profile dict; the one passed in is left untouched.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Optional

from learnory.config import (
    LEVEL_GROWTH,
    STARTING_LEVEL_XP,
    STREAK_GOLD,
    STREAK_PLATINUM,
    STREAK_SILVER,
    XP_REWARDS,
)

logger = logging.getLogger(__name__)

BADGE_DEFINITIONS: Dict[str, Dict] = {
    "math_wizard": {
        "id": "math_wizard",
        "name": "Math Wizard",
        "description": "Answered 100 math questions correctly",
        "icon": "🧙‍♂️",
        "category": "subject",
    },
    "physics_guru": {
        "id": "physics_guru",
        "name": "Physics Guru",
        "description": "Achieved 90%+ in physics exams",
        "icon": "⚛️",
        "category": "subject",
    },
    "week_warrior": {
        "id": "week_warrior",
        "name": "Week Warrior",
        "description": "Maintained a 7-day study streak",
        "icon": "⚔️",
        "category": "streak",
    },
    "month_master": {
        "id": "month_master",
        "name": "Month Master",
        "description": "Maintained a 30-day study streak",
        "icon": "👑",
        "category": "streak",
    },
    "perfect_student": {
        "id": "perfect_student",
        "name": "Perfect Student",
        "description": "Scored 100% on 5 quizzes",
        "icon": "⭐",
        "category": "achievement",
    },
    "consistency_king": {
        "id": "consistency_king",
        "name": "Consistency King",
        "description": "Studied every day for 14 days",
        "icon": "👶",
        "category": "achievement",
    },
}

UNLOCKABLE_TOOLS: Dict[str, Dict] = {
    "video_explanations": {"name": "Video Explanations", "unlocks_at": 500, "icon": "🎥"},
    "ai_voice_tutor": {"name": "AI Voice Tutor", "unlocks_at": 1000, "icon": "🎤"},
    "custom_exams": {"name": "Custom Exams", "unlocks_at": 200, "icon": "📝"},
    "offline_mode": {"name": "Offline Learning", "unlocks_at": 300, "icon": "📱"},
    "advanced_analytics": {"name": "Advanced Analytics", "unlocks_at": 750, "icon": "📊"},
}

# (minimum level, title), highest first
USER_TITLES = [
    (50, "Legendary Learner"),
    (40, "Master Scholar"),
    (30, "Expert Tutor"),
    (20, "Advanced Learner"),
    (10, "Dedicated Student"),
    (5, "Enthusiastic Learner"),
]
DEFAULT_TITLE = "Aspiring Scholar"


def new_game_profile(user_id: str) -> Dict:
    return {
        "user_id": user_id,
        "total_xp": 0,
        "level": 1,
        "current_level_xp": 0,
        "max_level_xp": STARTING_LEVEL_XP,
        "streak": 0,
        "streak_level": "bronze",
        "badges": [],
        "unlocked_tools": [],
        "total_questions_answered": 0,
        "perfect_quizzes": 0,
        "subject_mastery": {},
    }


def calculate_xp_reward(activity: str, multiplier: float = 1) -> float:
    """Base XP for the activity times multiplier. Unknown activities earn nothing."""
    return XP_REWARDS.get(activity, 0) * multiplier


def xp_for_interaction(interaction_type: str, performance: float) -> float:
    """
    XP for a tracked learning interaction.

    Questions and quizzes scale with performance (0-100); exams and lessons
    earn the flat reward.
    """
    if interaction_type == "question":
        return calculate_xp_reward("question_correct", performance / 100)
    if interaction_type == "quiz":
        return calculate_xp_reward("quiz_completed", performance / 100)
    if interaction_type == "exam":
        return calculate_xp_reward("exam_taken")
    if interaction_type == "lesson":
        return calculate_xp_reward("lesson_finished")
    return 0


def check_level_up(profile: Dict) -> Dict:
    """Level up as many times as the current XP allows, carrying surplus XP forward."""
    level = profile["level"]
    current = profile["current_level_xp"]
    maximum = profile["max_level_xp"]

    if maximum <= 0:
        logger.warning(f"Profile {profile.get('user_id')} has max_level_xp={maximum}; skipping level check")
        return dict(profile)

    while current >= maximum:
        level += 1
        current -= maximum
        maximum = max(1, math.floor(maximum * LEVEL_GROWTH))

    if level != profile["level"]:
        logger.info(f"User {profile.get('user_id')} levelled up: {profile['level']} -> {level}")

    return {**profile, "level": level, "current_level_xp": current, "max_level_xp": maximum}


def check_unlocked_tools(profile: Dict) -> List[str]:
    return [tool_id for tool_id, tool in UNLOCKABLE_TOOLS.items() if profile["total_xp"] >= tool["unlocks_at"]]


def get_unlockable_tools() -> Dict[str, Dict]:
    return {tool_id: dict(tool) for tool_id, tool in UNLOCKABLE_TOOLS.items()}


def add_xp(profile: Dict, amount: float) -> Dict:
    """Credit XP, then apply level-ups and tool unlocks."""
    updated = {
        **profile,
        "total_xp": profile["total_xp"] + amount,
        "current_level_xp": profile["current_level_xp"] + amount,
    }
    updated = check_level_up(updated)
    updated["unlocked_tools"] = check_unlocked_tools(updated)
    logger.debug(f"User {profile.get('user_id')}: +{amount} XP (total {updated['total_xp']})")
    return updated


def award_badge(user_id: str, profile: Dict, badge_type: str, now: Optional[datetime] = None) -> Dict:
    """
    Award a badge from the catalog.

    Returns:
        {badge, is_new, profile}. badge is None and the profile unchanged when
        the type is unknown or already held.
    """
    badge_def = BADGE_DEFINITIONS.get(badge_type)
    if badge_def is None:
        logger.warning(f"Unknown badge type '{badge_type}' for user {user_id}")
        return {"badge": None, "is_new": False, "profile": profile}

    if any(b["id"] == badge_type for b in profile["badges"]):
        return {"badge": None, "is_new": False, "profile": profile}

    unlocked_at = (now or datetime.now(timezone.utc)).isoformat()
    badge = {**badge_def, "unlocked_at": unlocked_at}
    logger.info(f"User {user_id} earned badge '{badge['name']}'")
    return {
        "badge": badge,
        "is_new": True,
        "profile": {**profile, "badges": profile["badges"] + [badge]},
    }


def streak_level_for(streak: int) -> str:
    if streak >= STREAK_PLATINUM:
        return "platinum"
    if streak >= STREAK_GOLD:
        return "gold"
    if streak >= STREAK_SILVER:
        return "silver"
    return "bronze"


def update_streak(profile: Dict, studied_today: bool) -> Dict:
    """Extend the streak on a study day; break it on a missed day."""
    if studied_today:
        streak = profile["streak"] + 1
        return {**profile, "streak": streak, "streak_level": streak_level_for(streak)}

    if profile["streak"] > 0:
        logger.info(f"User {profile.get('user_id')} broke a {profile['streak']}-day streak")
        return {**profile, "streak": 0, "streak_level": "bronze"}

    return dict(profile)


def get_user_title(profile: Dict) -> str:
    for min_level, title in USER_TITLES:
        if profile["level"] >= min_level:
            return title
    return DEFAULT_TITLE
