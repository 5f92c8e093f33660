"""Supabase client factory and question-bank CRUD."""
import logging
from typing import Optional

from supabase import create_client, Client

from learnory import config

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def _env_client() -> Client:
    url = config.SUPABASE_URL
    key = config.SUPABASE_KEY
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(url, key)


def get_supabase() -> Client:
    """Shared client for the process."""
    global _client
    if _client is None:
        _client = _env_client()
    return _client


def get_supabase_uncached() -> Client:
    """Fresh client (for CLI/scripts that should not share state)."""
    return _env_client()


def upsert_questions_bulk(client: Client, rows: list[dict], chunk_size: int = 200) -> int:
    """Bulk upsert into questions. Rows must include 'id'. Dedupes by id so no chunk has duplicates (avoids Postgres ON CONFLICT error)."""
    n_before = len(rows)
    by_id = {r["id"]: r for r in rows}
    rows = list(by_id.values())
    if len(rows) < n_before:
        logger.info("Deduped questions by id: %d -> %d", n_before, len(rows))
    n_chunks = (len(rows) + chunk_size - 1) // chunk_size
    for i in range(0, len(rows), chunk_size):
        chunk = rows[i : i + chunk_size]
        chunk_num = i // chunk_size + 1
        logger.info("Upserting chunk %d/%d (%d rows)", chunk_num, n_chunks, len(chunk))
        client.table("questions").upsert(chunk, on_conflict="id").execute()
    return len(rows)


def get_questions_by_subject(client: Client, subject: str, limit: int | None = None):
    q = client.table("questions").select("*").eq("subject", subject.lower())
    if limit:
        q = q.limit(limit)
    return q.execute()


def delete_questions_by_source(client: Client, source: str):
    """Delete all questions with the given source (e.g. an import batch name)."""
    client.table("questions").delete().eq("source", source).execute()
