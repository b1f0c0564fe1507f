"""Introduction messages for connecting two participants."""

from typing import List, Optional

from community_os.domain.models import Profile
from community_os.logging import get_logger

from .base import BaseProvider
from .models import IntroResult

logger = get_logger(__name__, component="provider")

SYSTEM_PROMPT = """You are a helpful assistant that generates professional, friendly introduction messages for connecting people at tech events.

IMPORTANT RULES:
1. ONLY use information provided about the participants. Do NOT invent or assume any facts.
2. Keep the message concise (2-4 sentences maximum)
3. Write in a friendly, professional tone suitable for Telegram or LinkedIn
4. Focus on concrete, specific details that would help the connection
5. DO NOT use emojis unless the user explicitly requests them
6. Make it clear why these two people should connect
7. If you don't have enough information, keep it simple and professional

Format:
- Start with a friendly greeting
- Mention what the source person does/is interested in (based on provided data)
- Mention what the target person/audience is interested in
- Suggest why they might want to connect
- Keep it natural and conversational"""


def describe_profile(profile: Profile) -> str:
    """Render a profile as labelled lines, omitting empty fields."""
    lines: List[str] = [f"Name: {profile.name}"]

    if profile.bio:
        lines.append(f"Bio: {profile.bio}")
    if profile.enhanced_bio:
        lines.append(f"Enhanced Bio: {profile.enhanced_bio}")
    skills = profile.skills + profile.parsed_skills
    if skills:
        lines.append(f"Skills: {', '.join(skills)}")
    if profile.interests:
        lines.append(f"Interests: {', '.join(profile.interests)}")
    if profile.can_help:
        lines.append(f"Can Help With: {profile.can_help}")
    if profile.needs_help:
        lines.append(f"Needs Help With: {profile.needs_help}")
    if profile.looking_for:
        lines.append(f"Looking For: {', '.join(profile.looking_for)}")
    if profile.has_startup:
        if profile.startup_name:
            lines.append(f"Startup: {profile.startup_name}")
        if profile.startup_stage:
            lines.append(f"Startup Stage: {profile.startup_stage}")
        if profile.startup_description:
            lines.append(f"Startup Description: {profile.startup_description}")
    if profile.ai_usage:
        lines.append(f"AI Usage: {profile.ai_usage}")

    return "\n".join(lines)


class OpenAIIntroGenerator(BaseProvider):
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 200,
        **kwargs,
    ) -> None:
        super().__init__(api_key, **kwargs)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def generate(
        self,
        source: Profile,
        target: Optional[Profile] = None,
        target_description: Optional[str] = None,
    ) -> IntroResult:
        """Write a short message introducing ``source`` to a person or audience.

        Args:
            source: The participant being introduced
            target: A specific participant to introduce them to
            target_description: Free-text audience, used when there is no target

        Raises:
            ValueError: If neither target nor target_description is given
            ProviderError: On any API failure
        """
        if target is None and not (target_description and target_description.strip()):
            raise ValueError("Either target or target_description must be provided")

        target_info = (
            describe_profile(target)
            if target is not None
            else f"Target Audience: {target_description.strip()}"
        )
        user_prompt = (
            "Generate an introduction message for connecting these people:\n\n"
            f"**Person being introduced:**\n{describe_profile(source)}\n\n"
            f"**Target person/audience:**\n{target_info}\n\n"
            "Generate a short, friendly intro message (2-4 sentences, no emojis) that the user "
            "can copy and paste into Telegram or another messaging platform."
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

        logger.info(
            "Intro message generated",
            extra={
                "event": "provider.intro.generated",
                "profile_id": source.id,
                "target_id": target.id if target is not None else None,
                "tokens_used": tokens_used,
            },
        )

        return IntroResult(
            message=content or f"Hi! I'd like to introduce you to {source.name}.",
            model=self.model,
            tokens_used=tokens_used,
        )
