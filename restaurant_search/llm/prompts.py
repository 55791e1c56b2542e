"""Prompt template for search result summaries."""

from collections.abc import Sequence


class SummaryPromptTemplate:
    """Fixed template turning the top search results into a summary prompt.

    Each result contributes its restaurant name and description.
    """

    DEFAULT_SYSTEM_PROMPT = """You are a friendly local food guide.

Rules:
- Only mention restaurants from the list you are given
- Write a single short paragraph (two to four sentences)
- Do not invent prices, ratings or locations"""

    DEFAULT_USER_TEMPLATE = """Summarize these restaurant matches for someone deciding where to eat:

{restaurants}

Summary:"""

    def __init__(
        self,
        system_prompt: str | None = None,
        user_template: str | None = None,
    ) -> None:
        """Initialize the summary prompt template.

        Args:
            system_prompt: Custom system prompt.
            user_template: Custom user template; must contain ``{restaurants}``.
        """
        self.system_prompt = system_prompt or self.DEFAULT_SYSTEM_PROMPT
        self.user_template = user_template or self.DEFAULT_USER_TEMPLATE

    def format_restaurants(self, entries: Sequence[tuple[str, str]]) -> str:
        """Render ``(name, content)`` pairs as a numbered list."""
        return "\n".join(
            f"{position}. {name}: {content}"
            for position, (name, content) in enumerate(entries, start=1)
        )

    def build_prompt(self, entries: Sequence[tuple[str, str]]) -> tuple[str, str]:
        """Build the (system_prompt, user_prompt) pair.

        Args:
            entries: ``(name, content)`` for each result, in ranked order.
        """
        user_prompt = self.user_template.format(
            restaurants=self.format_restaurants(entries)
        )
        return self.system_prompt, user_prompt
