"""Tests for folding file and image contexts into messages."""

from threadflow.domain.context.file_context_builder import (
    build_enhanced_prompt, file_context_to_message, image_mime_type
)
from threadflow.domain.models.conversation import ImagePart, MessageRole, TextPart
from threadflow.domain.models.file_context import FileContext


class TestFileContextToMessage:

    def test_image_payload_becomes_multimodal_message(self):
        fc = FileContext(
            file_id="img-1",
            content={"type": "image", "image_url": "https://cdn.example.com/cat.png"},
            context_prompt="A cat"
        )

        message = file_context_to_message(fc)

        assert message.role == MessageRole.USER
        assert message.content == (
            TextPart(text="A cat"),
            ImagePart(image_ref="https://cdn.example.com/cat.png", mime_type="image/png"),
        )

    def test_image_mime_type_from_content_type(self):
        fc = FileContext(file_id="img-2", content={"type": "image/webp", "url": "data:image/webp;base64,AAA"})

        message = file_context_to_message(fc)

        assert message.content[0].text == "Image uploaded as context."
        assert message.content[1].mime_type == "image/webp"

    def test_image_without_url_falls_back_to_text(self):
        fc = FileContext(file_id="img-3", type="image", content={"type": "image"}, summary="broken upload")
        assert file_context_to_message(fc).content == "broken upload"

    def test_text_priority(self):
        assert file_context_to_message(
            FileContext(file_id="a", content={"full_text": "full"}, context_prompt="prompt")
        ).content == "full"
        assert file_context_to_message(
            FileContext(file_id="b", content="raw", context_prompt="prompt")
        ).content == "prompt"
        assert file_context_to_message(
            FileContext(file_id="c", content="raw", summary="sum")
        ).content == "sum"
        assert file_context_to_message(FileContext(file_id="d", content="raw")).content == "raw"
        assert file_context_to_message(FileContext(file_id="e")).content == "File context (ID: e)"

    def test_structured_content_is_serialized(self):
        message = file_context_to_message(FileContext(file_id="f", content={"rows": 3}))
        assert message.content == '{\n  "rows": 3\n}'


class TestEnhancedPrompt:

    def test_no_files_returns_prompt(self):
        assert build_enhanced_prompt("Do it", []) == "Do it"

    def test_summaries_are_joined(self):
        files = [
            FileContext(file_id="a", context_prompt="first"),
            FileContext(file_id="b", content="second"),
            FileContext(file_id="c"),
        ]

        prompt = build_enhanced_prompt("Do it", files)

        assert prompt == (
            "Context from uploaded files:\n"
            "first\n\n---\n\nsecond\n\n---\n\nc"
            "\n\n---\n\nUser request:\nDo it"
        )


def test_image_mime_type_defaults_to_png():
    assert image_mime_type("https://example.com/photo") == "image/png"
    assert image_mime_type("data:image/gif;base64,R0l") == "image/gif"
