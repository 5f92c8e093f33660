"""
Built-in mock exam question bank, keyed by lower-case subject.
Supabase-backed banks have the same shape (see DatabaseClient.load_question_bank).
"""
from typing import Dict, List

QUESTION_BANK: Dict[str, List[Dict]] = {
    "mathematics": [
        {
            "id": "math-001",
            "subject": "mathematics",
            "topic": "Quadratic Equations",
            "difficulty": "medium",
            "question_type": "mcq",
            "question_text": "Solve the equation x² + 5x + 6 = 0",
            "options": ["x = -2 or x = -3", "x = 2 or x = 3", "x = 1 or x = -6", "x = -1 or x = 6"],
            "correct_answer": "x = -2 or x = -3",
            "explanation": "Using factorization: (x + 2)(x + 3) = 0, so x = -2 or x = -3",
            "difficulty_score": 2,
        },
        {
            "id": "math-002",
            "subject": "mathematics",
            "topic": "Algebra",
            "difficulty": "hard",
            "question_type": "theory",
            "question_text": "Prove that for any integer n, n² + n is always even",
            "options": [],
            "correct_answer": (
                "Case 1: If n is even, n = 2k, then n² + n = 4k² + 2k = 2(2k² + k), which is even.\n"
                "Case 2: If n is odd, n = 2k+1, then n² + n = (2k+1)² + (2k+1) = 4k² + 4k + 1 + 2k + 1 "
                "= 4k² + 6k + 2 = 2(2k² + 3k + 1), which is even."
            ),
            "explanation": "Proof by cases - covers both even and odd integers.",
            "difficulty_score": 4,
        },
    ],
    "physics": [
        {
            "id": "phys-001",
            "subject": "physics",
            "topic": "Motion",
            "difficulty": "medium",
            "question_type": "mcq",
            "question_text": "An object is thrown upward with velocity 20 m/s. What is its maximum height? (g = 10 m/s²)",
            "options": ["10 m", "20 m", "30 m", "40 m"],
            "correct_answer": "20 m",
            "explanation": "Using v² = u² - 2gs, at max height v = 0, so 0 = 400 - 2(10)s, giving s = 20 m",
            "difficulty_score": 3,
        },
    ],
    "chemistry": [
        {
            "id": "chem-001",
            "subject": "chemistry",
            "topic": "Chemical Bonding",
            "difficulty": "medium",
            "question_type": "mcq",
            "question_text": "Which of these molecules is non-polar?",
            "options": ["CO₂", "HCl", "H₂O", "NH₃"],
            "correct_answer": "CO₂",
            "explanation": "CO₂ is linear and symmetric, so dipoles cancel out. HCl, H₂O, NH₃ are all polar.",
            "difficulty_score": 2,
        },
    ],
}

DIFFICULTIES = ("easy", "medium", "hard")
QUESTION_TYPES = ("mcq", "theory", "essay")


def available_subjects() -> List[str]:
    return sorted(QUESTION_BANK.keys())
