"""
Assistant reply parser

The model is asked to answer with a single JSON object
``{"message": str, "actions": [...]}``. Anything that does not parse and
validate against that contract is treated as plain text with no actions;
intent is never guessed from free text.
"""

import json
import re
from pydantic import ValidationError as PydanticValidationError

from app.schemas.chat import AssistantReply
from app.core.logging_config import logger


# A reply wrapped in exactly one fenced code block
_FENCED_BLOCK = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _FENCED_BLOCK.match(stripped)
    return match.group(1) if match else stripped


def parse_assistant_reply(text: str) -> AssistantReply:
    """Strict parse; falls back to ``AssistantReply(message=text)``"""
    candidate = strip_code_fence(text or "")

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        logger.debug("[ResponseParser] Reply is plain text")
        return AssistantReply(message=(text or "").strip())

    try:
        return AssistantReply.model_validate(data)
    except PydanticValidationError as e:
        logger.warning(f"[ResponseParser] Reply JSON does not match the contract ({e.error_count()} errors), using as plain text")
        return AssistantReply(message=(text or "").strip())
