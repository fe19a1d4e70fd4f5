"""Tests for the AI content assistant."""

from unittest.mock import patch

import pytest
from pydantic_ai.messages import ModelMessage, ModelResponse
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.test import TestModel

from sws_blog.core.errors import IntegrationNotConfiguredError, UpstreamServiceError, ValidationFailedError
from sws_blog.core.models.io.ai_content import (
    AIGeneratedContent,
    AIOptimizationFields,
    AvailableTag,
    CategorizationFields,
    ContentFields,
    GenerateContentRequest,
    SeoFields,
)
from sws_blog.server.core.config import AIConfig
from sws_blog.server.services.ai_content import MAX_CONTENT_CHARS, ContentAssistant, build_prompt, postprocess

TAGS = [AvailableTag(id="t1", name="SEO"), AvailableTag(id="t2", name="Django")]


def _generated(tag_ids=()) -> AIGeneratedContent:
    return AIGeneratedContent(
        seo=SeoFields(meta_title="Title", meta_description="Description", primary_keyword="fastapi"),
        content=ContentFields(subtitle="Sub", excerpt="Generated excerpt."),
        ai_optimization=AIOptimizationFields(ai_summary="Summary."),
        categorization=CategorizationFields(suggested_tag_ids=list(tag_ids)),
    )


def _request(**fields) -> GenerateContentRequest:
    data = dict(title="Why FastAPI", content="FastAPI is a web framework.", available_tags=TAGS)
    data.update(fields)
    return GenerateContentRequest(**data)


class TestBuildPrompt:
    def test_lists_tags_and_content(self):
        prompt = build_prompt(_request())

        assert prompt.startswith("Title: Why FastAPI")
        assert "- t1: SEO" in prompt
        assert "- t2: Django" in prompt
        assert prompt.endswith("FastAPI is a web framework.")

    def test_no_tags_and_existing_excerpt(self):
        prompt = build_prompt(_request(available_tags=[], existing_excerpt=" Already written. "))

        assert "Available tags: none" in prompt
        assert "The author already wrote this excerpt: Already written." in prompt

    def test_long_content_is_truncated(self):
        prompt = build_prompt(_request(content="x" * (MAX_CONTENT_CHARS + 100)))

        assert prompt.endswith("x" * MAX_CONTENT_CHARS)
        assert "x" * (MAX_CONTENT_CHARS + 1) not in prompt


class TestPostprocess:
    def test_unknown_and_duplicate_tags_are_dropped(self):
        output = postprocess(_generated(["t2", "made-up", "t2", "t1"]), _request())

        assert output.categorization.suggested_tag_ids == ["t2", "t1"]

    def test_existing_excerpt_wins(self):
        generated = _generated()

        output = postprocess(generated, _request(existing_excerpt="Mine."))

        assert output.content.excerpt == "Mine."
        assert generated.content.excerpt == "Generated excerpt."


class TestGenerate:
    async def test_generate_with_structured_output(self):
        custom = _generated(["t1", "nope"]).model_dump()
        assistant = ContentAssistant(AIConfig(model="test:content-model"), model=TestModel(custom_output_args=custom))

        output = await assistant.generate(_request())

        assert output.seo.primary_keyword == "fastapi"
        assert output.categorization.suggested_tag_ids == ["t1"]

    async def test_default_test_model_output_is_valid(self, content_assistant: ContentAssistant):
        output = await content_assistant.generate(_request())

        assert isinstance(output, AIGeneratedContent)
        assert set(output.categorization.suggested_tag_ids) <= {"t1", "t2"}

    async def test_successful_run_logs_token_usage(self, content_assistant: ContentAssistant):
        with patch("sws_blog.server.services.ai_content.log_llm_call") as mock_log:
            await content_assistant.generate(_request())

        mock_log.assert_called_once()
        model_name, tokens = mock_log.call_args.args
        assert model_name == content_assistant.config.model
        assert isinstance(tokens, int)
        assert tokens > 0

    async def test_blank_input_rejected(self, content_assistant: ContentAssistant):
        with pytest.raises(ValidationFailedError):
            await content_assistant.generate(_request(content="   "))

    async def test_model_failure_is_upstream_error(self):
        def fail(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
            raise RuntimeError("provider unavailable")

        assistant = ContentAssistant(AIConfig(model="test:content-model"), model=FunctionModel(fail))

        with pytest.raises(UpstreamServiceError, match="provider unavailable"):
            await assistant.generate(_request())

    async def test_missing_api_key(self):
        assistant = ContentAssistant(AIConfig(model="openai:gpt-4o", openai_api_key=None))

        with pytest.raises(IntegrationNotConfiguredError):
            await assistant.generate(_request())

    def test_test_provider_builds_without_key(self):
        assistant = ContentAssistant(AIConfig(model="test:content-model"))

        assert isinstance(assistant.agent.model, TestModel)
