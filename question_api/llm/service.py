"""The AI answer capability used by the question pipeline.

``answer_question`` never raises: a timeout or any provider failure turns into
the fixed apology answer so the question can still be stored.
"""

import asyncio
import logging

from question_api.config.settings import get_settings
from question_api.llm.client import Completion, LLMClient, get_llm_client, model_for, resolve_provider
from question_api.llm.prompts import EMPTY_ANSWER, FALLBACK_ANSWER, build_messages

logger = logging.getLogger(__name__)


async def answer_question(question: str, client: LLMClient | None = None, model: str | None = None) -> Completion:
    settings = get_settings()
    if client is None:
        provider = resolve_provider()
        model = model or model_for(provider)
    else:
        model = model or settings.AI_MODEL

    try:
        if client is None:
            client = get_llm_client(provider)
        result = await asyncio.wait_for(
            client.generate(build_messages(question), model),
            timeout=settings.AI_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        logger.error("AI provider timed out after %.0fs (model=%s)", settings.AI_TIMEOUT_SECONDS, model)
        return Completion(content=FALLBACK_ANSWER, model=model)
    except Exception:
        logger.exception("AI provider failed (model=%s)", model)
        return Completion(content=FALLBACK_ANSWER, model=model)

    if not result.content.strip():
        result.content = EMPTY_ANSWER

    logger.info(
        "AI question processed: model=%s tokens_used=%s question_length=%d answer_length=%d",
        result.model, result.tokens_used, len(question), len(result.content),
    )
    return result
