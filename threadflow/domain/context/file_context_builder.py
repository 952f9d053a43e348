from typing import List, Sequence
import json
import structlog

from threadflow.domain.models.conversation import ChatMessage, ImagePart, TextPart
from threadflow.domain.models.file_context import FileContext

logger = structlog.get_logger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"
SECTION_SEPARATOR = "\n\n---\n\n"


def image_mime_type(image_url: str) -> str:
    """Mime type of a data URL, or the PNG default for remote URLs"""
    if image_url.startswith("data:"):
        mime_type = image_url.split(";")[0].split(":", 1)[-1]
        return mime_type or DEFAULT_IMAGE_MIME_TYPE
    return DEFAULT_IMAGE_MIME_TYPE


def file_context_to_message(file_context: FileContext) -> ChatMessage:
    """Fold one file context into a user message"""

    image_url = file_context.image_url
    if image_url:
        caption = file_context.context_prompt or file_context.summary or "Image uploaded as context."
        return ChatMessage.user((
            TextPart(text=caption),
            ImagePart(image_ref=image_url, mime_type=image_mime_type(image_url))
        ))

    if file_context.full_text:
        text = file_context.full_text
    elif file_context.context_prompt:
        text = file_context.context_prompt
    elif file_context.summary:
        text = file_context.summary
    elif file_context.content:
        if isinstance(file_context.content, str):
            text = file_context.content
        else:
            text = json.dumps(file_context.content, indent=2)
    else:
        text = f"File context (ID: {file_context.file_id})"

    return ChatMessage.user(text)


def file_contexts_to_messages(file_contexts: Sequence[FileContext]) -> List[ChatMessage]:
    messages = [file_context_to_message(fc) for fc in file_contexts]
    if messages:
        logger.debug("Folded file contexts into messages", count=len(messages))
    return messages


def _summarize(file_context: FileContext) -> str:
    if file_context.context_prompt:
        return file_context.context_prompt
    if file_context.summary:
        return file_context.summary
    if file_context.full_text:
        return file_context.full_text
    if isinstance(file_context.content, dict) and file_context.content.get("url"):
        return file_context.content["url"]
    if isinstance(file_context.content, str):
        return file_context.content
    return file_context.file_id


def build_enhanced_prompt(prompt: str, file_contexts: Sequence[FileContext]) -> str:
    """Prefix the prompt with a readable summary of the attached files"""

    if not file_contexts:
        return prompt

    summary = SECTION_SEPARATOR.join(_summarize(fc) for fc in file_contexts)
    return (
        "Context from uploaded files:\n"
        + summary
        + SECTION_SEPARATOR
        + "User request:\n"
        + prompt
    )
