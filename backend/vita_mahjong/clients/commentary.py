"""Live commentary client.

The game pushes short event descriptions ("combo x3", "player won") to a
commentator over a websocket and never waits for an answer. Replies from
the commentator are handed to an optional callback. A failed or dropped
connection simply turns the commentator off.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Protocol

import aiohttp

from ..config import get_settings
from ..models.game_config import Language

logger = logging.getLogger(__name__)

COMMENTATOR_INSTRUCTIONS: Dict[Language, str] = {
    Language.UZ: (
        "Siz Vita Mahjong o'yinining quvnoq sharhlovchisisiz. Combo yoki "
        "g'alabada qisqa va xursand maqtang, yutqazganda dalda bering."
    ),
    Language.RU: (
        "Вы весёлый комментатор игры Vita Mahjong. Коротко и радостно хвалите "
        "за комбо и победу, подбодрите при проигрыше."
    ),
    Language.EN: (
        "You are an energetic commentator for Vita Mahjong. Praise combos and "
        "wins briefly and happily, and console the player after a loss."
    ),
}


class CommentarySink(Protocol):
    """Anything the game can push event descriptions into."""

    @property
    def is_live(self) -> bool:
        ...

    def send_event(self, text: str) -> None:
        ...


class NullCommentary:
    """Commentary sink used when live commentary is switched off."""

    @property
    def is_live(self) -> bool:
        return False

    def send_event(self, text: str) -> None:
        return None


class LiveCommentaryClient:
    """Websocket commentary session."""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        language: Language = Language.RU,
        on_message: Optional[Callable[[Any], None]] = None,
    ):
        settings = get_settings()
        self.url = url or settings.commentary_url
        self.api_key = api_key or settings.commentary_api_key
        self.language = Language(language)
        self.on_message = on_message

        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._queue: "asyncio.Queue[str]" = asyncio.Queue()
        self._sender: Optional[asyncio.Task] = None
        self._reader: Optional[asyncio.Task] = None
        self._connected = False
        self._closer: Optional[asyncio.Task] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.url)

    @property
    def is_live(self) -> bool:
        return self._connected

    def set_language(self, language: Language) -> None:
        self.language = Language(language)

    async def connect(self) -> bool:
        """
        Open the commentary session.

        Returns:
            True if connected; False if unconfigured or the connection failed.
        """
        if self._connected:
            return True
        if not self.is_configured:
            logger.info("Live commentary not configured; staying offline")
            return False

        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

        try:
            self._session = aiohttp.ClientSession()
            self._ws = await self._session.ws_connect(
                self.url,
                headers=headers,
                heartbeat=30,
            )
            await self._ws.send_json({
                "type": "setup",
                "language": self.language.value,
                "instruction": COMMENTATOR_INSTRUCTIONS[self.language],
            })
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Live commentary connection failed: %s", e)
            await self._cleanup()
            return False

        self._connected = True
        self._sender = asyncio.create_task(self._send_loop())
        self._reader = asyncio.create_task(self._read_loop())
        logger.info("Live commentary connected (%s)", self.language.value)
        return True

    async def disconnect(self) -> None:
        """Close the session. Safe to call when already closed."""
        await self._cleanup()

    async def wait_closed(self) -> None:
        """Wait until cleanup after a dropped connection has finished."""
        if self._closer is not None:
            await self._closer

    def send_event(self, text: str) -> None:
        """Queue an event description without waiting."""
        if not self._connected:
            return
        self._queue.put_nowait(text)

    async def _send_loop(self) -> None:
        try:
            while True:
                text = await self._queue.get()
                await self._ws.send_json({"type": "event", "text": text})
        except asyncio.CancelledError:
            raise
        except (aiohttp.ClientError, ConnectionError, RuntimeError) as e:
            logger.error("Live commentary send failed: %s", e)
            self._closer = asyncio.create_task(self._cleanup())

    async def _read_loop(self) -> None:
        try:
            async for msg in self._ws:
                if msg.type == aiohttp.WSMsgType.TEXT and self.on_message:
                    self.on_message(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    logger.error("Live commentary socket error: %s", self._ws.exception())
                    break
        except asyncio.CancelledError:
            raise
        except aiohttp.ClientError as e:
            logger.error("Live commentary receive failed: %s", e)
        logger.info("Live commentary closed")
        self._closer = asyncio.create_task(self._cleanup())

    async def _cleanup(self) -> None:
        self._connected = False
        current = asyncio.current_task()
        for task in (self._sender, self._reader):
            if task is not None and task is not current and not task.done():
                task.cancel()
        self._sender = None
        self._reader = None

        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        self._ws = None

        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

        # Drop events queued for the old connection
        self._queue = asyncio.Queue()
