"""Ingest a .jsonl question bank: normalise difficulty/type, bulk UPSERT into questions."""
import json
import argparse
import logging
from pathlib import Path
from uuid import uuid5, NAMESPACE_DNS

from learnory import config
from learnory.db import get_supabase_uncached, upsert_questions_bulk, delete_questions_by_source
from learnory.question_bank import DIFFICULTIES, QUESTION_TYPES

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "jsonl_import"

# difficulty_score (1-5) used when a line only carries a difficulty label
DIFFICULTY_SCORES = {"easy": 1, "medium": 3, "hard": 4}


def normalize_difficulty(raw) -> str:
    d = str(raw or "").strip().lower()
    return d if d in DIFFICULTIES else "medium"


def normalize_question_type(raw, options: list) -> str:
    t = str(raw or "").strip().lower()
    if t in QUESTION_TYPES:
        return t
    return "mcq" if options else "theory"


def parse_line(line: str, source: str = DEFAULT_SOURCE) -> dict | None:
    """Parse one JSONL line into a questions row. Returns None if invalid/skip."""
    line = line.strip()
    if not line:
        return None
    try:
        raw = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(raw, dict):
        return None

    text = raw.get("question_text") or raw.get("text") or ""
    if not all(isinstance(v, str) for v in (raw.get("subject") or "", text, raw.get("topic") or "", raw.get("explanation") or "")):
        return None
    subject = (raw.get("subject") or "").strip().lower()
    correct = raw.get("correct_answer")
    if not subject or not text.strip() or correct in (None, "", []):
        return None

    options = raw.get("options") or []
    if not isinstance(options, list):
        return None
    question_type = normalize_question_type(raw.get("question_type"), options)
    if question_type == "mcq" and len(options) < 2:
        return None

    difficulty = normalize_difficulty(raw.get("difficulty"))
    score = raw.get("difficulty_score")
    if not isinstance(score, int) or not 1 <= score <= 5:
        score = DIFFICULTY_SCORES[difficulty]

    uid = raw.get("id") or str(uuid5(NAMESPACE_DNS, f"{subject}:{text.strip()}"))
    return {
        "id": str(uid),
        "subject": subject,
        "topic": (raw.get("topic") or "").strip() or "General",
        "difficulty": difficulty,
        "question_type": question_type,
        "question_text": text.strip(),
        "options": options,
        "correct_answer": correct,
        "explanation": (raw.get("explanation") or "")[:50000],
        "difficulty_score": score,
        "source": source,
    }


def load_and_transform(path: Path, source: str = DEFAULT_SOURCE):
    """Read JSONL and return (rows, skipped_count)."""
    rows = []
    skipped = 0
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            row = parse_line(line, source=source)
            if row:
                rows.append(row)
            else:
                skipped += 1
    return rows, skipped


def run_import(jsonl_path: Path, chunk_size: int = 200, dry_run: bool = False,
               replace: bool = False, source: str = DEFAULT_SOURCE, client=None) -> int:
    if not jsonl_path.exists():
        raise FileNotFoundError(f"JSONL not found: {jsonl_path}")
    rows, skipped = load_and_transform(jsonl_path, source=source)
    if skipped:
        logger.warning("Skipped %d invalid lines in %s", skipped, jsonl_path)
    if dry_run:
        logger.info("Dry run: would upsert %d questions from %s", len(rows), jsonl_path)
        if rows:
            logger.info("Sample row: %s", rows[0])
        return len(rows)
    client = client or get_supabase_uncached()
    if replace:
        delete_questions_by_source(client, source)
        logger.info("Deleted existing '%s' questions", source)
    count = upsert_questions_bulk(client, rows, chunk_size=chunk_size)
    logger.info("Upserted %d questions from %s", count, jsonl_path)
    return count


def main(argv=None):
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Import a JSONL question bank into Supabase questions.")
    parser.add_argument("jsonl", help="Path to .jsonl")
    parser.add_argument("--chunk-size", type=int, default=200, help="Upsert chunk size (default 200)")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, do not upsert")
    parser.add_argument("--source", default=DEFAULT_SOURCE, help=f"Source tag stored on each row (default {DEFAULT_SOURCE})")
    parser.add_argument("--replace", action="store_true", help="Delete existing questions with this source, then upsert")
    args = parser.parse_args(argv)
    run_import(Path(args.jsonl), chunk_size=args.chunk_size, dry_run=args.dry_run,
               replace=args.replace, source=args.source)


if __name__ == "__main__":
    main()
