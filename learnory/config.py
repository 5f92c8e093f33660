"""Environment settings and tuning constants. No logic."""
import os

from dotenv import load_dotenv

load_dotenv()

# -----------------------------
# Environment
# -----------------------------
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
LOG_LEVEL = os.getenv("LEARNORY_LOG_LEVEL", "INFO").upper()

# -----------------------------
# Exam marking
# -----------------------------
WEAK_TOPIC_THRESHOLD = 60.0  # accuracy < 60 -> weak
STRONG_TOPIC_THRESHOLD = 80.0  # accuracy >= 80 -> strong
DEFAULT_MOCK_QUESTION_COUNT = 20
TOP_N_AREAS = 5

# Score brackets for the headline recommendation
EXCELLENT_SCORE = 90
GOOD_SCORE = 75
DECENT_SCORE = 60

# Prediction
DEFAULT_PREDICTION = 50
PREDICTION_SPREAD = 10

# -----------------------------
# Study planning
# -----------------------------
FOUNDATION_END = 0.2
DEPTH_END = 0.6
CONSOLIDATION_END = 0.85
QUIZ_EVERY_N_DAYS = 5
SLIGHTLY_BEHIND_RATIO = 0.8

# -----------------------------
# Gamification
# -----------------------------
XP_REWARDS = {
    "question_correct": 10,
    "quiz_completed": 50,
    "exam_taken": 100,
    "lesson_finished": 30,
    "perfect_score": 150,
}
STARTING_LEVEL_XP = 100
LEVEL_GROWTH = 1.2  # 20% more XP per level

STREAK_PLATINUM = 100
STREAK_GOLD = 30
STREAK_SILVER = 7
