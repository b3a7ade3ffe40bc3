# app/services/reflection_services.py
import logging
from typing import Optional, Sequence

from google import genai
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import DASHBOARD_VIEW, revalidate_path
from app.core.config import settings
from app.models.database_models.journal_entry import JournalEntry
from app.models.database_models.user import User
from app.models.journal_models import (
    ReflectionGenerated,
    ReflectionOutcome,
    ReflectionRead,
    ReflectionSkipped,
    SkipReason,
)
from app.services.database.entry_database_services import get_recent_entries
from app.services.database.reflection_database_services import (
    get_reflection_for_week,
    insert_reflection_if_absent,
)
from app.services.llm.llm_utils import TextGenerationError, query_genai_api

logger = logging.getLogger(__name__)

REFLECTION_WINDOW = 7
BLANK_ANSWER = "(blank)"

SYSTEM_PROMPT = (
    "You are a calm narrative pattern detector. Identify recurring emotional themes, repeated words, "
    "or subtle tensions across the user's journal entries. Reflect patterns clearly and concisely. "
    "Do not give advice. Do not predict outcomes. Do not moralize. "
    "Keep tone grounded, observant, and spacious."
)

USER_INSTRUCTION = (
    "Here are the last seven entries. Write a 150-250 word reflection that follows the system instructions."
)

QUESTIONS = (
    "What stood out today?",
    "What felt subtly meaningful?",
    "What decision are you sensing but not acting on?",
)


def trim_to_max_words(text: str, max_words: int) -> str:
    words = text.strip().split()
    if len(words) <= max_words:
        return text.strip()
    return " ".join(words[:max_words])


def format_entry(entry: JournalEntry, position: int) -> str:
    answers = (entry.answer_1, entry.answer_2, entry.answer_3)
    lines = [f"Entry {position} ({entry.date.isoformat()}):"]
    lines.extend(f"- {question} {answer or BLANK_ANSWER}" for question, answer in zip(QUESTIONS, answers))
    return "\n".join(lines)


def build_reflection_prompt(entries: Sequence[JournalEntry]) -> str:
    """Renders entries (already in chronological order) into the user prompt."""
    entries_text = "\n\n".join(format_entry(entry, index) for index, entry in enumerate(entries, start=1))
    return f"{USER_INSTRUCTION}\n\n{entries_text}"


async def generate_weekly_reflection(
    db: AsyncSession,
    redis_client: Redis,
    user: User,
    llm_client: Optional[genai.Client],
) -> ReflectionOutcome:
    """
    Writes at most one reflection per user for the week anchored on the oldest of
    their most recent entries.

    Every precondition that is not met resolves to a ReflectionSkipped with the reason;
    only a successful insert touches the database and the dashboard cache.
    """
    if llm_client is None:
        logger.info("Skipping reflection for user %s: no Gemini API key configured.", user.id)
        return ReflectionSkipped(reason=SkipReason.NO_API_KEY)

    recent = await get_recent_entries(db, user.id, limit=REFLECTION_WINDOW)
    if not recent:
        logger.info("Skipping reflection for user %s: no entries.", user.id)
        return ReflectionSkipped(reason=SkipReason.NO_ENTRIES)

    ordered = list(reversed(recent))
    week_start = ordered[0].date

    if await get_reflection_for_week(db, user.id, week_start):
        logger.info("Reflection for user %s, week of %s already exists.", user.id, week_start)
        return ReflectionSkipped(reason=SkipReason.ALREADY_EXISTS)

    prompt = build_reflection_prompt(ordered)
    try:
        text = await query_genai_api(
            llm_client,
            prompt,
            model=settings.REFLECTION_MODEL,
            system_instruction=SYSTEM_PROMPT,
            max_output_tokens=settings.REFLECTION_MAX_OUTPUT_TOKENS,
        )
    except TextGenerationError:
        return ReflectionSkipped(reason=SkipReason.GENERATION_FAILED)

    if not text:
        logger.warning("Reflection generation returned no text for user %s.", user.id)
        return ReflectionSkipped(reason=SkipReason.EMPTY_RESPONSE)

    content = trim_to_max_words(text, settings.REFLECTION_MAX_WORDS)
    reflection = await insert_reflection_if_absent(db, user.id, week_start, content)
    if reflection is None:
        logger.info("Concurrent reflection for user %s, week of %s won the insert.", user.id, week_start)
        return ReflectionSkipped(reason=SkipReason.ALREADY_EXISTS)

    await revalidate_path(redis_client, DASHBOARD_VIEW, user.id)
    logger.debug("Saved reflection %s for user %s, week of %s.", reflection.id, user.id, week_start)
    return ReflectionGenerated(reflection=ReflectionRead.model_validate(reflection))
