"""
Command-line access to the marking and planning core.
Reads JSON files, prints JSON results.

Run: learnory mock mathematics --count 5
     learnory mark answers.json questions.json
     learnory predict 62 70 75 --days 14
     learnory plan profile.json --seed 7
     learnory pace plan.json --days-elapsed 5 --hours 8
"""
import argparse
import json
import logging
import random
import sys
from pathlib import Path

from learnory import config
from learnory.database import get_database
from learnory.engine import generate_mock_exam, mark_exam, predict_final_score
from learnory.planning import generate_study_plan, get_pace_recommendation

logger = logging.getLogger(__name__)


def _load_json(path: str):
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {path}: {e}")
        sys.exit(1)


def _emit(payload):
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def cmd_mock(args):
    _emit(generate_mock_exam(args.subject, difficulty=args.difficulty, question_count=args.count))


def cmd_mark(args):
    answers = _load_json(args.answers)
    questions = _load_json(args.questions)
    result = mark_exam(answers, questions, user_id=args.user_id)
    if args.save:
        result["id"] = get_database().save_exam_result(result)
        if result["id"] is None:
            logger.error("Exam result was not saved")
            sys.exit(1)
    _emit(result)


def cmd_predict(args):
    _emit(predict_final_score(args.scores, args.days))


def cmd_plan(args):
    profile = _load_json(args.profile)
    rng = random.Random(args.seed) if args.seed is not None else None
    plan = generate_study_plan(profile, rng=rng)
    if args.save and not get_database().save_study_plan(plan):
        logger.error("Study plan was not saved")
        sys.exit(1)
    _emit(plan)


def cmd_pace(args):
    plan = _load_json(args.plan)
    _emit(get_pace_recommendation(plan, args.days_elapsed, args.hours))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="learnory", description="Mock exam marking and study planning.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("mock", help="Assemble a mock exam from the built-in bank")
    p.add_argument("subject")
    p.add_argument("--difficulty", default="medium", choices=["easy", "medium", "hard"])
    p.add_argument("--count", type=int, default=config.DEFAULT_MOCK_QUESTION_COUNT)
    p.set_defaults(func=cmd_mock)

    p = sub.add_parser("mark", help="Mark answers against questions")
    p.add_argument("answers", help="JSON object {question_id: answer}")
    p.add_argument("questions", help="JSON list of questions")
    p.add_argument("--user-id", default=None)
    p.add_argument("--save", action="store_true", help="Store the result in Supabase")
    p.set_defaults(func=cmd_mark)

    p = sub.add_parser("predict", help="Project mock scores to exam day")
    p.add_argument("scores", type=float, nargs="*")
    p.add_argument("--days", type=float, required=True, help="Days until the exam")
    p.set_defaults(func=cmd_predict)

    p = sub.add_parser("plan", help="Generate a study plan from a profile")
    p.add_argument("profile", help="JSON profile (subjects, deadline, hours_per_day, weak_topics, ...)")
    p.add_argument("--seed", type=int, default=None, help="Seed for weak-topic selection")
    p.add_argument("--save", action="store_true", help="Store the plan in Supabase")
    p.set_defaults(func=cmd_plan)

    p = sub.add_parser("pace", help="Pacing feedback for a saved plan")
    p.add_argument("plan", help="JSON study plan")
    p.add_argument("--days-elapsed", type=float, required=True)
    p.add_argument("--hours", type=float, required=True, help="Hours completed so far")
    p.set_defaults(func=cmd_pace)

    return parser


def main(argv=None):
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s: %(message)s", stream=sys.stderr)
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
