"""
AI content assist.

Generates SEO fields, excerpts, FAQs and answer-engine summaries for a draft
post with a pydantic-ai agent whose structured output is
``AIGeneratedContent``. The agent is built lazily from ``AI_CONTENT_MODEL``.
"""

from __future__ import annotations

from typing import Optional

from pydantic_ai import Agent
from pydantic_ai.models import Model

from sws_blog.core.errors import IntegrationNotConfiguredError, UpstreamServiceError, ValidationFailedError
from sws_blog.core.logging_config import get_logger
from sws_blog.core.models.io.ai_content import AIGeneratedContent, GenerateContentRequest
from sws_blog.core.monitoring import log_llm_call
from sws_blog.server.core.config import AIConfig

logger = get_logger(__name__)

SYSTEM_PROMPT = """\
You are an SEO and content strategist for a software consultancy's blog.
Given a blog post title and body, produce metadata that helps the post rank in
search engines and be quoted accurately by AI answer engines.

Rules:
- meta_title is at most 60 characters; meta_description is at most 160 characters.
- secondary_keywords has 3 to 6 entries.
- excerpt is two sentences that make a reader want to continue.
- ai_summary is a neutral, factual 2-3 sentence summary.
- key_takeaways, questions_answered and definitive_statements each have 3 to 5 entries,
  and definitive_statements are self-contained factual claims taken from the post.
- faqs has 3 to 5 question/answer pairs answered by the post.
- entities lists notable tools, companies, people or concepts with a short type label.
- suggested_tag_ids may only contain ids from the available tags list; leave it empty when none fit.
"""

MAX_CONTENT_CHARS = 24000


def build_prompt(request: GenerateContentRequest) -> str:
    """User prompt for one generation request."""
    lines = [f"Title: {request.title.strip()}", ""]
    if request.available_tags:
        lines.append("Available tags (id: name):")
        lines.extend(f"- {tag.id}: {tag.name}" for tag in request.available_tags)
    else:
        lines.append("Available tags: none")
    if request.existing_excerpt:
        lines.extend(["", f"The author already wrote this excerpt: {request.existing_excerpt.strip()}"])
    lines.extend(["", "Post content (markdown):", request.content.strip()[:MAX_CONTENT_CHARS]])
    return "\n".join(lines)


class ContentAssistant:
    """Runs the content generation agent and post-processes its output.

    Args:
        config: AI settings (model identifier and provider keys)
        model: Explicit pydantic-ai model, used instead of building one from ``config``
    """

    def __init__(self, config: AIConfig, model: Optional[Model] = None) -> None:
        self.config = config
        self._model = model
        self._agent: Optional[Agent[None, AIGeneratedContent]] = None

    def _build_model(self) -> Model | str:
        provider = self.config.provider
        api_key = self.config.api_key
        model_name = self.config.model.split(":", 1)[-1]
        if provider in ("anthropic", "openai") and not api_key:
            raise IntegrationNotConfiguredError(f"AI provider '{provider}'")
        if provider == "anthropic":
            from pydantic_ai.models.anthropic import AnthropicModel
            from pydantic_ai.providers.anthropic import AnthropicProvider

            return AnthropicModel(model_name, provider=AnthropicProvider(api_key=api_key))
        if provider == "openai":
            from pydantic_ai.models.openai import OpenAIResponsesModel
            from pydantic_ai.providers.openai import OpenAIProvider

            return OpenAIResponsesModel(model_name, provider=OpenAIProvider(api_key=api_key))
        if provider == "test":
            from pydantic_ai.models.test import TestModel

            return TestModel()
        # Other providers read their key from the environment.
        return self.config.model

    @property
    def agent(self) -> Agent[None, AIGeneratedContent]:
        if self._agent is None:
            model = self._model or self._build_model()
            self._agent = Agent(model, output_type=AIGeneratedContent, system_prompt=SYSTEM_PROMPT)
            logger.debug(f"Content agent initialized with model {self.config.model}")
        return self._agent

    async def generate(self, request: GenerateContentRequest) -> AIGeneratedContent:
        """Generate content metadata for a post.

        Raises:
            ValidationFailedError: title or content is blank
            IntegrationNotConfiguredError: no API key for the configured provider
            UpstreamServiceError: the model call failed
        """
        if not request.title.strip() or not request.content.strip():
            raise ValidationFailedError("Title and content are required")

        agent = self.agent
        try:
            result = await agent.run(build_prompt(request))
        except Exception as e:
            logger.error(f"AI content generation failed: {e}", exc_info=True)
            log_llm_call(self.config.model, 0, succeeded=False)
            raise UpstreamServiceError(f"AI content generation failed: {e}") from e

        usage = result.usage
        log_llm_call(self.config.model, usage.total_tokens or 0)
        return postprocess(result.output, request)


def postprocess(generated: AIGeneratedContent, request: GenerateContentRequest) -> AIGeneratedContent:
    """Keep only known tag ids (deduplicated, in order) and preserve an existing excerpt."""
    allowed = {tag.id for tag in request.available_tags}
    tag_ids = [tag_id for tag_id in dict.fromkeys(generated.categorization.suggested_tag_ids) if tag_id in allowed]
    output = generated.model_copy(deep=True)
    output.categorization.suggested_tag_ids = tag_ids
    if request.existing_excerpt:
        output.content.excerpt = request.existing_excerpt
    return output
