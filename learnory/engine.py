"""
Mock Exam Engine: auto-marking, topic diagnostics, mock exam assembly and score prediction.
Pure functions over question/answer dicts. No I/O.
"""
import copy
import logging
import math
from typing import Dict, List, Optional, Union

from learnory.config import (
    DECENT_SCORE,
    DEFAULT_MOCK_QUESTION_COUNT,
    DEFAULT_PREDICTION,
    EXCELLENT_SCORE,
    GOOD_SCORE,
    PREDICTION_SPREAD,
    STRONG_TOPIC_THRESHOLD,
    TOP_N_AREAS,
    WEAK_TOPIC_THRESHOLD,
)
from learnory.question_bank import DIFFICULTIES, QUESTION_BANK

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _normalize(answer: str) -> str:
    return str(answer).strip().lower()


def _is_blank(answer) -> bool:
    return answer is None or not str(answer).strip()


def is_answer_correct(user_answer: str, correct_answer: Union[str, List[str]]) -> bool:
    """
    Case-insensitive comparison.

    Multi-answer questions (correct_answer is a list) expect a comma-separated
    answer and match when both sides hold the same set of options.
    """
    if isinstance(correct_answer, (list, tuple)):
        expected = {_normalize(a) for a in correct_answer if not _is_blank(a)}
        given = {_normalize(a) for a in str(user_answer).split(",") if a.strip()}
        return bool(expected) and given == expected
    return _normalize(user_answer) == _normalize(correct_answer)


def _accuracy(correct: int, total: int) -> float:
    return (correct / total * 100) if total > 0 else 0.0


def mark_exam(
    user_answers: Dict[str, str],
    questions: List[Dict],
    user_id: Optional[str] = None,
    exam_id: Optional[str] = None,
    time_spent_minutes: float = 0,
) -> Dict:
    """
    Auto-mark an exam attempt.

    Args:
        user_answers: {question_id: answer}. Missing or blank answers are skipped.
        questions: Question dicts (id, topic, difficulty, correct_answer, ...)
        user_id: Owner of the attempt, copied into the result
        exam_id: Caller-assigned id, copied into the result
        time_spent_minutes: Copied into the result

    Returns:
        ExamResult dict. Skipped questions take no part in score or topic accuracy.
    """
    correct_count = 0
    wrong_count = 0
    skipped_count = 0
    topic_performance: Dict[str, Dict[str, int]] = {}
    difficulty_performance = {d: {"correct": 0, "total": 0} for d in DIFFICULTIES}

    for q in questions:
        user_answer = user_answers.get(q["id"])
        if _is_blank(user_answer):
            skipped_count += 1
            continue

        topic = q.get("topic") or "General"
        stats = topic_performance.setdefault(topic, {"correct": 0, "total": 0})
        stats["total"] += 1

        difficulty = difficulty_performance.get(q.get("difficulty"))
        if difficulty is not None:
            difficulty["total"] += 1

        if is_answer_correct(user_answer, q.get("correct_answer", "")):
            correct_count += 1
            stats["correct"] += 1
            if difficulty is not None:
                difficulty["correct"] += 1
        else:
            wrong_count += 1

    weak_topics: List[str] = []
    strong_topics: List[str] = []
    for topic, stats in topic_performance.items():
        accuracy = _accuracy(stats["correct"], stats["total"])
        if accuracy < WEAK_TOPIC_THRESHOLD:
            weak_topics.append(topic)
        elif accuracy >= STRONG_TOPIC_THRESHOLD:
            strong_topics.append(topic)

    answered = len(questions) - skipped_count
    score = _accuracy(correct_count, answered)

    result = {
        "exam_id": exam_id,
        "user_id": user_id,
        "subject": questions[0].get("subject", "general") if questions else "general",
        "total_questions": len(questions),
        "correct_answers": correct_count,
        "wrong_answers": wrong_count,
        "skipped": skipped_count,
        "score": score,
        "time_spent_minutes": time_spent_minutes,
        "performance": {
            f"{d}_accuracy": _accuracy(s["correct"], s["total"])
            for d, s in difficulty_performance.items()
        },
        "weak_topics": weak_topics,
        "strong_topics": strong_topics,
        "recommendations": generate_recommendations(weak_topics, score),
    }

    logger.info(
        "Marked exam: %d/%d correct, %d skipped, score=%.1f, weak=%s",
        correct_count, answered, skipped_count, score, weak_topics,
    )
    return result


def generate_recommendations(weak_topics: List[str], score: float) -> List[str]:
    """Headline advice for the score bracket, then one line per weak topic."""
    if score >= EXCELLENT_SCORE:
        recommendations = ["Excellent performance! Maintain this standard and tackle advanced problems."]
    elif score >= GOOD_SCORE:
        recommendations = ["Good job! Focus on solidifying weak areas to reach 90%+"]
    elif score >= DECENT_SCORE:
        recommendations = ["Decent progress. Increase practice on weak topics to improve score."]
    else:
        recommendations = ["You need more practice. Revisit fundamentals and practice daily."]

    for topic in weak_topics:
        recommendations.append(f'Master "{topic}" - this is critical for your exam success')
    return recommendations


def generate_mock_exam(
    subject: str,
    difficulty: str = "medium",
    question_count: int = DEFAULT_MOCK_QUESTION_COUNT,
    bank: Optional[Dict[str, List[Dict]]] = None,
) -> List[Dict]:
    """
    Pick up to question_count questions for a subject, in bank order.

    difficulty is recorded for callers but does not filter the bank.
    """
    bank = QUESTION_BANK if bank is None else bank
    subject_questions = bank.get(subject.lower(), [])
    if not subject_questions:
        logger.warning(f"No questions in bank for subject '{subject}'")
    selected = [copy.deepcopy(q) for q in subject_questions[: max(0, question_count)]]
    logger.debug(f"Mock exam for {subject} ({difficulty}): {len(selected)} questions")
    return selected


def predict_final_score(current_mock_scores: List[float], days_until_exam: float) -> Dict:
    """
    Linear projection of mock scores to exam day.

    Projection = average + trend * (days_until_exam / 7), where trend is the
    per-attempt slope between first and last score. Clamped to 0-100.
    """
    if not current_mock_scores:
        return {
            "prediction": DEFAULT_PREDICTION,
            "range": (DEFAULT_PREDICTION - PREDICTION_SPREAD, DEFAULT_PREDICTION + PREDICTION_SPREAD),
        }

    n = len(current_mock_scores)
    average = sum(current_mock_scores) / n
    trend = (current_mock_scores[-1] - current_mock_scores[0]) / (n - 1) if n > 1 else 0

    projected = average + trend * (days_until_exam / 7)
    capped = min(100, max(0, projected))

    return {
        "prediction": _round_half_up(capped),
        "range": (
            max(0, _round_half_up(capped - PREDICTION_SPREAD)),
            min(100, _round_half_up(capped + PREDICTION_SPREAD)),
        ),
    }


def calculate_topic_statistics(user_answers: Dict[str, str], questions: List[Dict]) -> Dict:
    """
    Rank topics by lag factor for planning follow-up study.

    lag_factor = (100 - accuracy) * answered, so weak topics that came up
    often rank first.

    Returns:
        {weak_areas, strong_areas, all_topics}; areas are (topic, stats) pairs
    """
    lag_analysis = {}
    for q in questions:
        answer = user_answers.get(q["id"])
        if _is_blank(answer):
            continue
        topic = q.get("topic") or "General"
        stats = lag_analysis.setdefault(topic, {"total": 0, "correct": 0})
        stats["total"] += 1
        if is_answer_correct(answer, q.get("correct_answer", "")):
            stats["correct"] += 1

    for stats in lag_analysis.values():
        stats["accuracy_percent"] = _accuracy(stats["correct"], stats["total"])
        stats["lag_factor"] = (100 - stats["accuracy_percent"]) * stats["total"]

    # Sort by lag factor (highest first = weakest)
    sorted_lags = sorted(lag_analysis.items(), key=lambda x: x[1]["lag_factor"], reverse=True)

    return {
        "weak_areas": sorted_lags[:TOP_N_AREAS],
        "strong_areas": sorted_lags[-TOP_N_AREAS:] if len(sorted_lags) > TOP_N_AREAS else [],
        "all_topics": dict(sorted_lags),
    }
