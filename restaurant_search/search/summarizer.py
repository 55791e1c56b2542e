"""Optional LLM summary of the top search results.

Summaries are an enrichment: any failure, including rate limiting and
timeouts, degrades to a fixed fallback string and is never raised.
"""

import asyncio
from collections.abc import Sequence

from restaurant_search.config import SearchSettings, get_settings
from restaurant_search.exceptions import LLMError
from restaurant_search.llm.client import LLMClient
from restaurant_search.llm.prompts import SummaryPromptTemplate
from restaurant_search.logging_config import get_logger
from restaurant_search.observability.metrics import track_summary
from restaurant_search.search.models import SearchResult

logger = get_logger(__name__)


class Summarizer:
    """Summarizes ranked results with an LLM, falling back on failure."""

    def __init__(
        self,
        llm_client: LLMClient,
        settings: SearchSettings | None = None,
        prompt_template: SummaryPromptTemplate | None = None,
    ) -> None:
        """Initialize the summarizer.

        Args:
            llm_client: Client used for generation.
            settings: Supplies top-N, deadline and fallback text.
            prompt_template: Prompt template for summaries.
        """
        self._llm_client = llm_client
        self._settings = settings or get_settings().search
        self._prompt_template = prompt_template or SummaryPromptTemplate()

    @property
    def fallback(self) -> str:
        """Text returned when generation fails."""
        return self._settings.summary_fallback

    async def summarize(self, results: Sequence[SearchResult]) -> str:
        """Summarize the first ``summary_top_n`` results.

        Returns:
            The generated summary, the fallback text on failure, or an empty
            string when there is nothing to summarize.
        """
        if not results:
            track_summary("skipped")
            return ""

        top = results[: self._settings.summary_top_n]
        entries = [
            (str(r.metadata.get("name", r.id)), r.content)
            for r in top
        ]
        system_prompt, user_prompt = self._prompt_template.build_prompt(entries)

        try:
            async with asyncio.timeout(self._settings.summary_timeout):
                generation = await self._llm_client.generate_text(
                    prompt=user_prompt,
                    system_prompt=system_prompt,
                )
        except LLMError as e:
            logger.warning(
                "Summary generation failed, using fallback",
                extra={"error_code": e.code.value, "error": e.message},
            )
            track_summary("fallback")
            return self.fallback
        except TimeoutError:
            logger.warning(
                "Summary generation exceeded deadline, using fallback",
                extra={"timeout": self._settings.summary_timeout},
            )
            track_summary("fallback")
            return self.fallback

        if generation.is_empty:
            logger.warning("Summary generation returned no text, using fallback")
            track_summary("fallback")
            return self.fallback

        track_summary("generated")
        return generation.content.strip()
