"""Game session engine with dock-based pair matching.

Game rules:
1. Playable board tiles are selected and fly to a 4-slot dock
2. A landing tile that matches a tile already in the dock clears both
3. Matches within a 3-second window build a combo that multiplies score
4. The game is won when no visible tile remains anywhere
5. The game is lost when 4 tiles sit in the dock and the last one matched nothing
6. Undo, hint and shuffle are paid for with coins behind a confirmation gate

All state changes happen through the methods below, one at a time.
Timed effects (flight landing, hint highlight, combo popup) are queued in an
EventScheduler and fire when the session is advanced.
"""
import logging
import random
import time
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Deque, Dict, List, Optional, Set, Tuple

from ..clients.commentary import CommentarySink, NullCommentary
from ..models.game_config import (
    ActionKind,
    Difficulty,
    GameRules,
    GameStatus,
    Language,
    Theme,
)
from ..models.tile import Tile, TileLocation, board_sort_key
from .accessibility import check_match, find_hint_pair, is_playable
from .errors import InsufficientCoinsError
from .generator import BoardGenerator
from .scheduler import EventKind, EventScheduler, ScheduledEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardSnapshot:
    """Immutable copy of the tile set and dock order, used by undo."""
    tiles: Tuple[Tile, ...]
    dock_order: Tuple[str, ...]


@dataclass
class ComboPopup:
    """Transient combo indicator shown above a dock slot."""
    id: int
    count: int
    slot_index: int
    expires_at: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "count": self.count, "slot_index": self.slot_index}


@dataclass
class ArrivalResult:
    """Outcome of a tile landing in the dock."""
    tile_id: str
    matched_with: Optional[str] = None
    cleared_slots: List[int] = field(default_factory=list)
    combo: int = 0
    score_gained: int = 0
    status: GameStatus = GameStatus.PLAYING

    @property
    def matched(self) -> bool:
        return self.matched_with is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tile_id": self.tile_id,
            "matched_with": self.matched_with,
            "cleared_slots": self.cleared_slots,
            "combo": self.combo,
            "score_gained": self.score_gained,
            "status": self.status.value,
        }


@dataclass
class ActionOutcome:
    """Outcome of a confirmed costed action."""
    action: ActionKind
    applied: bool
    coins_spent: int = 0
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "applied": self.applied,
            "coins_spent": self.coins_spent,
            "message": self.message,
        }


class GameSession:
    """One player's game: live tiles, dock, score, coins and helpers."""

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.MEDIUM,
        level: int = 1,
        rules: Optional[GameRules] = None,
        generator: Optional[BoardGenerator] = None,
        clock: Optional[Callable[[], float]] = None,
        commentary: Optional[CommentarySink] = None,
        rng: Optional[random.Random] = None,
        session_id: str = "",
        auto_start: bool = True,
    ):
        self.session_id = session_id
        self.rules = rules or GameRules()
        self._rng = rng or random.Random()
        self._generator = generator or BoardGenerator(self._rng)
        self._clock = clock or time.monotonic
        self.commentary: CommentarySink = commentary or NullCommentary()

        self.difficulty = Difficulty(difficulty)
        self.theme = Theme.CLASSIC
        self.language = Language.RU
        self.level = level
        self.coins = self.rules.starting_coins
        self.score = 0
        self.paused = False

        self.tiles: List[Tile] = []
        self.dock_order: List[str] = []
        self.status = GameStatus.PLAYING
        self.history: Deque[BoardSnapshot] = deque(maxlen=self.rules.history_capacity)
        self.flying: Dict[str, float] = {}
        self.hinted: Set[str] = set()
        self.combo_popups: List[ComboPopup] = []
        self.combo_count = 0
        self.last_match_at: Optional[float] = None
        self.elapsed_seconds = 0
        self.pending_action: Optional[ActionKind] = None
        self.requested_count = 0

        self._scheduler = EventScheduler()
        self._shuffle_count = 0
        self._popup_seq = 0

        if auto_start:
            self.start(level)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, level: int = 1, difficulty: Optional[Difficulty] = None) -> None:
        """Deal a fresh board. Cancels flights, hints and pending timers."""
        if difficulty is not None:
            self.difficulty = Difficulty(difficulty)

        board = self._generator.generate(level, self.difficulty)
        self.load_tiles(board.tiles)
        self.requested_count = board.requested_count
        self.level = level
        if level == 1:
            self.score = 0

        logger.info(
            "Session %s started level %d (%s) with %d tiles",
            self.session_id, level, self.difficulty.value, len(self.tiles),
        )

    def load_tiles(self, tiles: List[Tile]) -> None:
        """Replace the live tile set and reset per-board state."""
        self.tiles = sorted(tiles, key=board_sort_key)
        self.dock_order = [t.id for t in self.tiles if t.in_dock]
        self.requested_count = len(self.tiles)
        self.status = GameStatus.PLAYING
        self.history.clear()
        self.flying.clear()
        self.hinted.clear()
        self.combo_popups.clear()
        self.combo_count = 0
        self.last_match_at = None
        self.elapsed_seconds = 0
        self.pending_action = None
        self._scheduler.clear()

    def restart(self) -> None:
        self.start(1)

    def retry_level(self) -> None:
        self.start(self.level)

    def next_level(self) -> bool:
        """Advance after a win, with a coin reward. Ignored otherwise."""
        if self.status != GameStatus.WON:
            return False
        self.coins += self.rules.next_level_coin_reward
        self.start(self.level + 1)
        return True

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_difficulty(self, difficulty: Difficulty) -> None:
        """Takes effect at the next start."""
        self.difficulty = Difficulty(difficulty)

    def set_theme(self, theme: Theme) -> None:
        self.theme = Theme(theme)

    def set_language(self, language: Language) -> None:
        self.language = Language(language)
        if hasattr(self.commentary, "set_language"):
            self.commentary.set_language(self.language)

    def set_paused(self, paused: bool) -> None:
        self.paused = bool(paused)

    def set_commentary(self, commentary: Optional[CommentarySink]) -> None:
        self.commentary = commentary or NullCommentary()

    async def close_commentary(self) -> None:
        """Disconnect live commentary, if any, and fall back to silence."""
        disconnect = getattr(self.commentary, "disconnect", None)
        if disconnect is not None:
            await disconnect()
        self.set_commentary(None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.PLAYING

    @property
    def hint_active(self) -> bool:
        return bool(self.hinted)

    def get_tile(self, tile_id: str) -> Optional[Tile]:
        for tile in self.tiles:
            if tile.id == tile_id:
                return tile
        return None

    def board_tiles(self) -> List[Tile]:
        return [t for t in self.tiles if t.on_board]

    def dock_tiles(self) -> List[Tile]:
        by_id = {t.id: t for t in self.tiles}
        return [by_id[i] for i in self.dock_order if i in by_id and by_id[i].in_dock]

    def visible_count(self) -> int:
        return sum(1 for t in self.tiles if t.is_visible)

    def can_select(self, tile: Tile) -> bool:
        """Whether selecting this tile would be accepted right now."""
        if self.is_over or self.pending_action is not None:
            return False
        if tile.id in self.flying or tile.location != TileLocation.BOARD:
            return False
        if len(self.dock_tiles()) + len(self.flying) >= self.rules.dock_capacity:
            return False
        return is_playable(tile, self.tiles)

    # ------------------------------------------------------------------
    # Player moves
    # ------------------------------------------------------------------

    def select(self, tile_id: str) -> bool:
        """
        Send a board tile towards the dock.

        Args:
            tile_id: Id of the tile the player picked.

        Returns:
            True if the tile is now in flight; False if the selection was
            ignored (unplayable, dock full, gate pending, game over).
        """
        tile = self.get_tile(tile_id)
        if tile is None or not self.can_select(tile):
            return False

        self._push_history()

        now = self.now()
        due = now + self.rules.flight_duration
        self.flying[tile_id] = due
        self.hinted.discard(tile_id)
        self._scheduler.schedule(due, EventKind.FLIGHT_LANDED, tile_id)
        return True

    def arrive(self, tile_id: str) -> Optional[ArrivalResult]:
        """Land an in-flight tile in the dock now. Ignored if not in flight."""
        return self._land(tile_id, self.now())

    def _land(self, tile_id: str, at: float) -> Optional[ArrivalResult]:
        if tile_id not in self.flying:
            return None

        del self.flying[tile_id]
        self._scheduler.cancel(EventKind.FLIGHT_LANDED, tile_id)

        index = self._index_of(tile_id)
        self.tiles[index] = replace(self.tiles[index], location=TileLocation.DOCK)
        self.dock_order.append(tile_id)
        self.hinted.discard(tile_id)

        result = ArrivalResult(tile_id=tile_id)
        dock = self.dock_tiles()
        landed = self.tiles[index]
        match = next((t for t in dock if check_match(t, landed)), None)

        if match is not None:
            result.cleared_slots = [self.dock_order.index(match.id), self.dock_order.index(tile_id)]
            self._clear_pair(landed.id, match.id)
            result.matched_with = match.id
            result.combo, result.score_gained = self._register_match(at, result.cleared_slots[0])

        self._check_terminal(matched=match is not None)
        result.status = self.status
        return result

    def _clear_pair(self, first_id: str, second_id: str) -> None:
        for tile_id in (first_id, second_id):
            index = self._index_of(tile_id)
            self.tiles[index] = replace(self.tiles[index], is_visible=False)
            self.dock_order.remove(tile_id)

    def _register_match(self, at: float, slot_index: int) -> Tuple[int, int]:
        """Update combo, score and coins for a match. Returns (combo, points)."""
        if self.last_match_at is not None and at - self.last_match_at < self.rules.combo_window:
            self.combo_count += 1
        else:
            self.combo_count = 1
        self.last_match_at = at

        points = self.rules.match_score * self.combo_count
        self.score += points
        self.coins += self.rules.match_coin_reward

        if self.combo_count > 1:
            self._popup_seq += 1
            popup = ComboPopup(
                id=self._popup_seq,
                count=self.combo_count,
                slot_index=slot_index,
                expires_at=at + self.rules.combo_popup_duration,
            )
            self.combo_popups.append(popup)
            self._scheduler.schedule(popup.expires_at, EventKind.COMBO_POPUP_EXPIRED, popup.id)
            self._notify(f"Player got a Combo x{self.combo_count}! Praise them!")

        return self.combo_count, points

    def _check_terminal(self, matched: bool) -> None:
        if self.visible_count() == 0:
            self.status = GameStatus.WON
            logger.info("Session %s won level %d", self.session_id, self.level)
            self._notify("Player won the level! Congratulate them enthusiastically!")
        elif not matched and len(self.dock_tiles()) >= self.rules.dock_capacity:
            self.status = GameStatus.LOST
            logger.info("Session %s lost level %d", self.session_id, self.level)
            self._notify("Player lost the game. Offer kind consolation.")

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def advance(self, now: Optional[float] = None) -> List[ScheduledEvent]:
        """Fire every scheduled event due at or before ``now``, in order."""
        now = self.now() if now is None else now
        fired: List[ScheduledEvent] = []

        while True:
            event = self._scheduler.pop_due(now)
            if event is None:
                break
            self._dispatch(event)
            fired.append(event)

        return fired

    def _dispatch(self, event: ScheduledEvent) -> None:
        if event.kind == EventKind.FLIGHT_LANDED:
            self._land(event.payload, event.due_at)
        elif event.kind == EventKind.HINT_EXPIRED:
            self.hinted.clear()
        elif event.kind == EventKind.COMBO_POPUP_EXPIRED:
            self.combo_popups = [p for p in self.combo_popups if p.id != event.payload]

    def tick(self) -> bool:
        """One second of game clock. Stops while over, paused or gated."""
        if self.is_over or self.paused or self.pending_action is not None:
            return False
        self.elapsed_seconds += 1
        return True

    def next_event_due(self) -> Optional[float]:
        return self._scheduler.next_due()

    # ------------------------------------------------------------------
    # Costed actions
    # ------------------------------------------------------------------

    def request_action(self, kind: ActionKind) -> bool:
        """
        Open the confirmation gate for a costed action.

        Returns:
            True if the gate opened; False if another request is pending.

        Raises:
            InsufficientCoinsError: If the balance cannot cover the cost.
        """
        kind = ActionKind(kind)
        if self.pending_action is not None:
            return False

        cost = self.rules.cost_of(kind)
        if self.coins < cost:
            raise InsufficientCoinsError(kind.value, cost, self.coins)

        self.pending_action = kind
        return True

    def cancel_action(self) -> bool:
        if self.pending_action is None:
            return False
        self.pending_action = None
        return True

    def confirm_action(self) -> Optional[ActionOutcome]:
        """Run the pending action; coins are charged only if it took effect."""
        if self.pending_action is None:
            return None

        kind = self.pending_action
        self.pending_action = None
        cost = self.rules.cost_of(kind)
        if self.coins < cost:
            raise InsufficientCoinsError(kind.value, cost, self.coins)

        if kind == ActionKind.UNDO:
            applied = self.undo()
            message = "" if applied else "Nothing to undo"
        elif kind == ActionKind.HINT:
            applied = self.hint() is not None
            message = "" if applied else "No hint available"
        else:
            applied = self.shuffle()
            message = "" if applied else "Nothing to shuffle"

        spent = cost if applied else 0
        self.coins -= spent
        return ActionOutcome(action=kind, applied=applied, coins_spent=spent, message=message)

    def shuffle(self) -> bool:
        """Permute faces among visible board tiles; positions stay put."""
        targets = [
            i for i, t in enumerate(self.tiles)
            if t.on_board and t.id not in self.flying
        ]
        if not targets:
            return False

        faces = [self.tiles[i].face for i in targets]
        self._rng.shuffle(faces)

        self._shuffle_count += 1
        for n, (index, face) in enumerate(zip(targets, faces)):
            self.tiles[index] = replace(
                self.tiles[index],
                id=f"tile-shuffled-{self._shuffle_count}-{n}",
                category=face.category,
                value=face.value,
            )
        self.tiles.sort(key=board_sort_key)

        self._clear_hint()
        penalty = self.rules.penalty_of(ActionKind.SHUFFLE)
        if self.score >= penalty:
            self.score -= penalty
        return True

    def undo(self) -> bool:
        """Restore the board as it was before the last selection."""
        if not self.history or self.status == GameStatus.WON:
            return False

        snapshot = self.history.pop()
        self.tiles = list(snapshot.tiles)
        self.dock_order = list(snapshot.dock_order)
        self.flying.clear()
        self._scheduler.cancel(EventKind.FLIGHT_LANDED)
        self._clear_hint()
        self.combo_count = 0
        self.status = GameStatus.PLAYING
        self.score = max(0, self.score - self.rules.penalty_of(ActionKind.UNDO))
        return True

    def hint(self) -> Optional[Tuple[Tile, Tile]]:
        """Highlight one playable matching pair for a few seconds."""
        if self.hint_active:
            return None

        pair = find_hint_pair(self.tiles, exclude_ids=self.flying.keys())
        if pair is None:
            return None

        self.hinted = {pair[0].id, pair[1].id}
        self._scheduler.schedule(
            self.now() + self.rules.hint_duration, EventKind.HINT_EXPIRED
        )
        self.score = max(0, self.score - self.rules.penalty_of(ActionKind.HINT))
        return pair

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def tile_view(self, tile: Tile) -> Dict[str, Any]:
        """Tile data plus transient flags for presentation."""
        data = tile.to_dict()
        data["is_hinted"] = tile.id in self.hinted
        data["is_flying"] = tile.id in self.flying
        data["is_playable"] = tile.id not in self.flying and is_playable(tile, self.tiles)
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Full presentation state."""
        return {
            "session_id": self.session_id,
            "level": self.level,
            "difficulty": self.difficulty.value,
            "theme": self.theme.value,
            "language": self.language.value,
            "status": self.status.value,
            "game_over": self.status == GameStatus.WON,
            "game_lost": self.status == GameStatus.LOST,
            "score": self.score,
            "coins": self.coins,
            "combo_count": self.combo_count,
            "elapsed_seconds": self.elapsed_seconds,
            "paused": self.paused,
            "pending_action": self.pending_action.value if self.pending_action else None,
            "hint_active": self.hint_active,
            "history_size": len(self.history),
            "requested_count": self.requested_count,
            "tiles": [self.tile_view(t) for t in self.tiles if t.is_visible],
            "dock": list(self.dock_order),
            "combo_popups": [p.to_dict() for p in self.combo_popups],
            "commentary_live": self.commentary.is_live,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def now(self) -> float:
        return self._clock()

    def _index_of(self, tile_id: str) -> int:
        for i, tile in enumerate(self.tiles):
            if tile.id == tile_id:
                return i
        raise KeyError(tile_id)

    def _push_history(self) -> None:
        self.history.append(BoardSnapshot(tuple(self.tiles), tuple(self.dock_order)))

    def _clear_hint(self) -> None:
        self.hinted.clear()
        self._scheduler.cancel(EventKind.HINT_EXPIRED)

    def _notify(self, text: str) -> None:
        if not self.commentary.is_live:
            return
        try:
            self.commentary.send_event(text)
        except Exception as e:
            logger.error("Commentary notification failed: %s", e)
