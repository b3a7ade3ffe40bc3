import logging
from typing import Optional

from google import genai
from google.genai import errors, types

logger = logging.getLogger(__name__)


class TextGenerationError(Exception):
    """Raised when the text-generation service cannot be reached or rejects the request."""


async def query_genai_api(
    client: genai.Client,
    prompt: str,
    model: str,
    system_instruction: Optional[str] = None,
    max_output_tokens: Optional[int] = None,
) -> Optional[str]:
    """
    Sends a single, non-streaming request to the Gemini API.

    Args:
        client: The configured genai.Client.
        prompt: User content for the request.
        model: Model identifier.
        system_instruction: Optional system instruction.
        max_output_tokens: Upper bound on generated tokens.

    Returns:
        The stripped generated text, or None when the response carries no text.
    """
    config = types.GenerateContentConfig(
        system_instruction=system_instruction,
        max_output_tokens=max_output_tokens,
    )
    try:
        response = await client.aio.models.generate_content(model=model, contents=prompt, config=config)
    except errors.APIError as e:
        logger.warning("Gemini API error (%s): %s", getattr(e, "code", "unknown"), e)
        raise TextGenerationError(str(e)) from e
    except Exception as e:
        logger.exception("Unexpected error querying %s: %s", model, e)
        raise TextGenerationError(str(e)) from e

    text = response.text
    if not text or not text.strip():
        return None
    return text.strip()
