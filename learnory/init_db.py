"""Print the Supabase schema for Learnory. Run it in the Supabase SQL Editor."""
from learnory import config

SCHEMA_SQL = """
-- Question bank
CREATE TABLE IF NOT EXISTS questions (
    id UUID PRIMARY KEY,
    subject VARCHAR(50) NOT NULL,
    topic VARCHAR(120),
    difficulty VARCHAR(10) NOT NULL CHECK (difficulty IN ('easy', 'medium', 'hard')),
    question_type VARCHAR(10) NOT NULL CHECK (question_type IN ('mcq', 'theory', 'essay')),
    question_text TEXT NOT NULL,
    options JSONB NOT NULL DEFAULT '[]',
    correct_answer JSONB NOT NULL,
    explanation TEXT,
    difficulty_score INT CHECK (difficulty_score BETWEEN 1 AND 5),
    source VARCHAR(50),
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- Marked exams
CREATE TABLE IF NOT EXISTS exam_results (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id VARCHAR NOT NULL,
    subject VARCHAR(50),
    total_questions INT NOT NULL,
    correct_answers INT NOT NULL,
    wrong_answers INT NOT NULL,
    skipped INT NOT NULL,
    score DECIMAL(5,2) NOT NULL,
    time_spent_minutes DECIMAL(7,2) DEFAULT 0,
    performance JSONB,
    weak_topics TEXT[],
    strong_topics TEXT[],
    recommendations TEXT[],
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- Study plans
CREATE TABLE IF NOT EXISTS study_plans (
    id VARCHAR PRIMARY KEY,
    user_id VARCHAR NOT NULL,
    exam_type VARCHAR(20),
    strength VARCHAR(20),
    deadline TIMESTAMPTZ,
    total_days_available INT NOT NULL,
    hours_per_day DECIMAL(4,2),
    subjects TEXT[] NOT NULL,
    weak_topics TEXT[],
    schedule JSONB,
    total_hours_required DECIMAL(7,2),
    status_percentage DECIMAL(5,2) DEFAULT 0,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- Gamification
CREATE TABLE IF NOT EXISTS game_profiles (
    user_id VARCHAR PRIMARY KEY,
    total_xp DECIMAL(10,2) DEFAULT 0,
    level INT DEFAULT 1,
    current_level_xp DECIMAL(10,2) DEFAULT 0,
    max_level_xp INT DEFAULT 100,
    streak INT DEFAULT 0,
    streak_level VARCHAR(10) DEFAULT 'bronze',
    badges JSONB DEFAULT '[]',
    unlocked_tools TEXT[] DEFAULT '{}',
    total_questions_answered INT DEFAULT 0,
    perfect_quizzes INT DEFAULT 0,
    subject_mastery JSONB DEFAULT '{}'
);

CREATE INDEX IF NOT EXISTS idx_questions_subject ON questions(subject);
CREATE INDEX IF NOT EXISTS idx_questions_source ON questions(source);
CREATE INDEX IF NOT EXISTS idx_exam_results_user_id ON exam_results(user_id);
CREATE INDEX IF NOT EXISTS idx_study_plans_user_id ON study_plans(user_id);
"""


def schema_statements() -> list[str]:
    return [s.strip() for s in SCHEMA_SQL.split(";") if s.strip()]


def main():
    print("Learnory Supabase schema")
    print(f"URL: {config.SUPABASE_URL or '(SUPABASE_URL not set)'}")
    print(f"{len(schema_statements())} statements\n")
    print("Note: the Supabase client cannot run DDL; paste this into the Supabase SQL Editor:")
    print(SCHEMA_SQL)


if __name__ == "__main__":
    main()
