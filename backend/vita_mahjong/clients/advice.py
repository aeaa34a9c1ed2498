"""Advice service client.

Asks an external text service for a one-line piece of mahjong wisdom. The
game treats the answer as decoration: any failure yields a fallback line in
the requested language.
"""
import asyncio
import logging
from typing import Dict, Optional

import aiohttp

from ..config import get_settings
from ..models.game_config import Language

logger = logging.getLogger(__name__)

ADVICE_PROMPT = "Give me wisdom."

SAGE_INSTRUCTIONS: Dict[Language, str] = {
    Language.UZ: (
        "Siz donishmand Mahjong ustasisiz. O'zbek tilida sabr, strategiya yoki "
        "kuzatish haqida bir gaplik maslahat bering. 15 so'zdan oshmasin."
    ),
    Language.RU: (
        "Вы мудрый мастер маджонга. Дайте короткий совет о терпении, стратегии "
        "или наблюдательности на русском языке. Не более 15 слов."
    ),
    Language.EN: (
        "You are a wise Mahjong master. Give one short sentence of advice about "
        "patience, strategy or observation in English, under 15 words."
    ),
}

DEFAULT_ADVICE: Dict[Language, str] = {
    Language.UZ: "Sabr yo'lni ochadi. Avval bo'sh toshlarni qidiring.",
    Language.RU: "Терпение открывает путь. Сначала ищите свободные фишки.",
    Language.EN: "Patience reveals the path. Look for the free tiles first.",
}

MISSING_KEY_ADVICE: Dict[Language, str] = {
    Language.UZ: "Donishmand bugun dam olmoqda (maslahat xizmati sozlanmagan).",
    Language.RU: "Мудрец сегодня отдыхает (сервис советов не настроен).",
    Language.EN: "The sage is resting today (advice service not configured).",
}


class AdviceClient:
    """Client for the advice text service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize advice client.

        Args:
            base_url: Endpoint accepting advice requests.
            api_key: Bearer credential for the service.
            timeout: Total request timeout in seconds.
        """
        settings = get_settings()
        self.base_url = (base_url or settings.advice_url or "").rstrip("/")
        self.api_key = api_key or settings.advice_api_key
        self.timeout = timeout if timeout is not None else settings.advice_timeout

    @property
    def is_configured(self) -> bool:
        """Check if client is properly configured."""
        return bool(self.base_url and self.api_key)

    async def get_advice(self, language: Language = Language.UZ) -> str:
        """
        Fetch a short advice line.

        Args:
            language: Language for the advice.

        Returns:
            Advice text; a fallback line on missing credentials or any error.
        """
        language = Language(language)

        if not self.is_configured:
            return MISSING_KEY_ADVICE[language]

        payload = {
            "prompt": ADVICE_PROMPT,
            "instruction": SAGE_INSTRUCTIONS[language],
            "language": language.value,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.base_url,
                    json=payload,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        logger.error(
                            "Advice service error %d: %s",
                            response.status, await response.text(),
                        )
                        return DEFAULT_ADVICE[language]

                    data = await response.json(content_type=None)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Advice service connection error: %s", e)
            return DEFAULT_ADVICE[language]
        except ValueError as e:
            logger.error("Advice service returned invalid JSON: %s", e)
            return DEFAULT_ADVICE[language]

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            return DEFAULT_ADVICE[language]
        return text.strip()


# Singleton instance
_advice_client: Optional[AdviceClient] = None


def get_advice_client() -> AdviceClient:
    """Get or create advice client singleton instance."""
    global _advice_client
    if _advice_client is None:
        _advice_client = AdviceClient()
    return _advice_client
