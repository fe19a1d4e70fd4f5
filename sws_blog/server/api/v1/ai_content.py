"""
AI Content Assist Endpoint.

Drafts SEO, summary, FAQ and tag suggestions for a post being edited in the
admin. Suggestions are returned to the editor; nothing is saved here.
"""

from fastapi import APIRouter

from sws_blog.core.models.io.ai_content import AIGeneratedContent, GenerateContentRequest
from sws_blog.server.services.deps import ContentAssistantDep

router = APIRouter()


@router.post(
    "/generate",
    response_model=AIGeneratedContent,
    summary="Generate Post Metadata",
    responses={
        400: {"description": "Title or content missing"},
        502: {"description": "Model call failed"},
        503: {"description": "No API key configured for the AI provider"},
    },
)
async def generate_content(payload: GenerateContentRequest, assistant: ContentAssistantDep) -> AIGeneratedContent:
    """
    Generate post metadata with the configured model.

    Suggested tag ids are restricted to **available_tags**, and an
    **existing_excerpt** is kept as-is instead of being replaced.
    """
    return await assistant.generate(payload)
