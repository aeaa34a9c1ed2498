"""Pydantic schemas for API request/response validation."""
from pydantic import BaseModel, Field
from typing import Dict, List, Any, Optional, Union

from .game_config import Difficulty, Language, Theme


class TileSchema(BaseModel):
    """A tile as exchanged with clients."""
    id: str = Field(..., description="Unique tile id")
    category: str = Field(..., description="Tile category (DOTS/BAMBOO/CHAR/WIND/DRAGON/FLOWER/SEASON)")
    value: Union[int, str] = Field(..., description="Tile value (1-9, wind/dragon code, flower/season number)")
    x: int = Field(..., description="Grid x (half-tile units)")
    y: int = Field(..., description="Grid y (half-tile units)")
    z: int = Field(..., ge=0, description="Layer, 0 is the bottom")
    is_visible: bool = Field(default=True, description="False once matched away")
    location: str = Field(default="board", description="board or dock")
    is_hinted: bool = Field(default=False, description="Highlighted by a hint")
    is_flying: bool = Field(default=False, description="On its way to the dock")
    is_playable: bool = Field(default=False, description="Can be selected now")


class ComboPopupSchema(BaseModel):
    """Combo indicator."""
    id: int
    count: int
    slot_index: int


class GameStateResponse(BaseModel):
    """Full presentation state of a game session."""
    session_id: str = Field(..., description="Session id")
    level: int = Field(..., ge=1, description="Current level")
    difficulty: Difficulty = Field(..., description="Difficulty")
    theme: Theme = Field(..., description="Theme")
    language: Language = Field(..., description="Language")
    status: str = Field(..., description="playing / won / lost")
    game_over: bool = Field(..., description="Board cleared")
    game_lost: bool = Field(..., description="Dock filled without a match")
    score: int = Field(..., ge=0, description="Score")
    coins: int = Field(..., ge=0, description="Coin balance")
    combo_count: int = Field(..., ge=0, description="Current combo")
    elapsed_seconds: int = Field(..., ge=0, description="Game clock")
    paused: bool = Field(default=False, description="Clock paused")
    pending_action: Optional[str] = Field(default=None, description="Action awaiting confirmation")
    hint_active: bool = Field(default=False, description="A hint is highlighted")
    history_size: int = Field(default=0, description="Undo steps available")
    requested_count: int = Field(default=0, description="Tiles requested at generation")
    tiles: List[TileSchema] = Field(default=[], description="Visible tiles")
    dock: List[str] = Field(default=[], description="Dock tile ids in slot order")
    combo_popups: List[ComboPopupSchema] = Field(default=[], description="Active combo popups")
    commentary_live: bool = Field(default=False, description="Live commentary connected")


class CreateGameRequest(BaseModel):
    """Request schema for starting a game."""
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM, description="Difficulty")
    level: int = Field(default=1, ge=1, description="Starting level")


class TileActionRequest(BaseModel):
    """Request schema for selecting or landing a tile."""
    tile_id: str = Field(..., description="Tile id")


class SelectResponse(BaseModel):
    """Response schema for tile selection."""
    accepted: bool = Field(..., description="False if the selection was ignored")
    state: GameStateResponse


class ArrivalResponse(BaseModel):
    """Response schema for a tile landing in the dock."""
    arrival: Optional[Dict[str, Any]] = Field(default=None, description="Landing outcome; null if ignored")
    state: GameStateResponse


class AdvanceRequest(BaseModel):
    """Request schema for advancing session time."""
    seconds: float = Field(default=0.0, ge=0, description="Extra seconds to look ahead")


class AdvanceResponse(BaseModel):
    """Response schema for advancing session time."""
    fired: List[str] = Field(default=[], description="Kinds of events fired")
    state: GameStateResponse


class ActionRequestResponse(BaseModel):
    """Response schema for opening the confirmation gate."""
    gate_opened: bool = Field(..., description="False if another action is pending")
    cost: int = Field(..., description="Coins the action will cost")
    state: GameStateResponse


class ActionConfirmResponse(BaseModel):
    """Response schema for confirming a pending action."""
    outcome: Optional[Dict[str, Any]] = Field(default=None, description="Null if nothing was pending")
    state: GameStateResponse


class SettingsRequest(BaseModel):
    """Request schema for session settings."""
    difficulty: Optional[Difficulty] = Field(default=None, description="Applies at next start")
    theme: Optional[Theme] = Field(default=None, description="Visual theme")
    language: Optional[Language] = Field(default=None, description="Advice/commentary language")
    paused: Optional[bool] = Field(default=None, description="Pause the game clock")


class CommentaryRequest(BaseModel):
    """Request schema for toggling live commentary."""
    enabled: bool = Field(..., description="Connect or disconnect")


class AdviceResponse(BaseModel):
    """Response schema for advice."""
    language: Language
    text: str


class GenerateRequest(BaseModel):
    """Request schema for board generation."""
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM, description="Difficulty")
    level: int = Field(default=1, ge=1, description="Level")


class GenerateResponse(BaseModel):
    """Response schema for board generation."""
    level: int
    difficulty: Difficulty
    requested_count: int = Field(..., description="Tiles requested for this level")
    placed_count: int = Field(..., description="Tiles actually placed")
    shortfall: bool = Field(..., description="Fewer tiles placed than requested")
    max_layer: int = Field(..., description="Highest layer used")
    generation_time_ms: int = Field(default=0, description="Generation time in milliseconds")
    tiles: List[TileSchema] = Field(default=[], description="Generated tiles")


class AnalyzeRequest(BaseModel):
    """Request schema for board analysis."""
    tiles: List[Dict[str, Any]] = Field(..., description="Tiles to analyze")


class AnalyzeResponse(BaseModel):
    """Response schema for board analysis."""
    playable_ids: List[str] = Field(default=[], description="Ids of playable tiles")
    hint_pair: Optional[List[str]] = Field(default=None, description="First playable matching pair")
    pairable: bool = Field(..., description="Visible tiles split fully into matching pairs")
    statistics: Dict[str, Any] = Field(..., description="Tile statistics")

