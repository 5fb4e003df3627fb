"""
Google GenAI client adapter.

Adapts the google-genai async client to the LanguageClient capability
used by the gateway.
"""

from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types


class GeminiClient:
    """LanguageClient backed by google-genai.

    The API key is read from GOOGLE_API_KEY / GEMINI_API_KEY by google-genai
    unless given explicitly.
    """

    def __init__(self, api_key: Optional[str] = None, client: Optional[genai.Client] = None):
        self.client = client or genai.Client(api_key=api_key)

    async def generate_content(
        self,
        contents: Any,
        model: str,
        config: Dict[str, Any],
    ) -> types.GenerateContentResponse:
        """Generate content. Provider errors propagate unmodified."""
        return await self.client.aio.models.generate_content(
            model=model,
            contents=contents,
            config=types.GenerateContentConfig(**config),
        )

    async def embed_content(self, contents: List[str], model: str) -> Any:
        """Embed a list of strings and return the embeddings."""
        response = await self.client.aio.models.embed_content(
            model=model,
            contents=contents,
        )
        return response.embeddings
