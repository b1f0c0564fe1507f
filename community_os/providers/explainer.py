"""LLM explanations of search results.

The prompt restricts the model to the candidates it is given; nothing in the
code checks the reply for names outside that set.
"""

import json
import time
from typing import Any, Dict, Optional, Sequence

from community_os.domain.models import Profile
from community_os.logging import get_logger
from community_os.search.models import NO_RESULTS_EXPLANATION

from .base import BaseProvider
from .models import ExplanationResult

logger = get_logger(__name__, component="provider")

EMPTY_COMPLETION_EXPLANATION = "Found matching participants based on your query."

SYSTEM_PROMPT = """You are a helpful assistant that explains search results for a community networking platform at a tech hackathon. Your task is to explain why specific participants match a user's search query.

IMPORTANT CONSTRAINTS:
1. ONLY mention participants that are provided in the context below
2. DO NOT invent or hallucinate participant information
3. Base your explanation ONLY on the data provided
4. If a participant isn't in the context, do NOT mention them
5. Be concise and natural - 2-3 sentences maximum
6. Reference specific participant names when possible
7. Mention specific skills, interests, or attributes that match the query

Participant Schema:
- name: Full name
- skills: Array of technical/professional skills
- interests: Array of interests and hobbies
- bio: Short biography
- canHelp: What they can help others with
- needsHelp: What they need help with
- hasStartup: Whether they have a startup
- startupName: Startup name if applicable
- lookingFor: Array of things they're looking for

Generate a concise, helpful explanation that helps the user understand why these participants match their query."""


def candidate_context(profile: Profile) -> Dict[str, Any]:
    """The subset of a profile the explainer is allowed to see."""
    return {
        "name": profile.name,
        "skills": profile.skills + profile.parsed_skills,
        "interests": profile.interests,
        "bio": profile.bio,
        "canHelp": profile.can_help,
        "needsHelp": profile.needs_help,
        "hasStartup": profile.has_startup,
        "startupName": profile.startup_name or None,
        "lookingFor": profile.looking_for,
    }


class OpenAIExplainer(BaseProvider):
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        temperature: float = 0.3,
        max_tokens: int = 200,
        **kwargs,
    ) -> None:
        super().__init__(api_key, **kwargs)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def explain(self, query: str, matches: Sequence[Any]) -> ExplanationResult:
        """Explain why ``matches`` answer ``query``.

        Args:
            query: The user's query as submitted
            matches: Ranked search matches; each exposes a ``profile`` attribute

        Raises:
            ProviderError: On any API failure
        """
        start = time.perf_counter()

        if not matches:
            return ExplanationResult(
                explanation=NO_RESULTS_EXPLANATION,
                model=self.model,
                tokens_used=None,
                time_ms=int((time.perf_counter() - start) * 1000),
            )

        candidates = [candidate_context(match.profile) for match in matches]
        user_prompt = (
            f'User Query: "{query}"\n\n'
            f"Participants Found:\n{json.dumps(candidates, indent=2, ensure_ascii=False)}\n\n"
            "Generate a concise explanation (2-3 sentences) describing why these participants "
            "match the query. Reference specific participant names and mention the skills, "
            "interests, or attributes that match."
        )

        content, tokens_used = self._complete(
            self.model,
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(
            "Explanation generated",
            extra={
                "event": "provider.explanation.generated",
                "model": self.model,
                "candidates": len(candidates),
                "tokens_used": tokens_used,
                "duration_ms": elapsed_ms,
            },
        )

        return ExplanationResult(
            explanation=content or EMPTY_COMPLETION_EXPLANATION,
            model=self.model,
            tokens_used=tokens_used,
            time_ms=elapsed_ms,
        )
