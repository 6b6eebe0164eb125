"""API routes for aura-quest

Every route dispatches a user intent into the progression engine of this
process; other views pick the change up through the sync bus.
"""
import logging
from fastapi import APIRouter, Request, Response, status

from aura_quest import config
from aura_quest.api.models import (
    AcceptResponse,
    GameStateResponse,
    HealthCheckResponse,
    JournalRequest,
    JournalResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    StateResponse,
    SuggestionsResponse,
    ToggleResponse,
)
from aura_quest.exceptions import QuestNotFoundError, SuggestionNotFoundError, ValidationError
from aura_quest.gamification.avatar import AVATAR_STYLES

logger = logging.getLogger(__name__)

router = APIRouter()


def _runtime(request: Request):
    return request.app.state.runtime


def _game_state(runtime, gained: int = 0) -> GameStateResponse:
    return GameStateResponse(**runtime.game.to_dict(), xp=runtime.engine.xp, gained=gained)


@router.get("/api/health", response_model=HealthCheckResponse)
async def health_check(request: Request):
    """Health check endpoint"""
    return HealthCheckResponse(status="ok", store_backend=_runtime(request).store.backend_name)


@router.get("/api/v1/state", response_model=StateResponse)
async def get_state(request: Request):
    """Current progression state, quests and pending suggestions"""
    return StateResponse(**_runtime(request).engine.snapshot())


@router.post("/api/v1/quests/{quest_id}/toggle", response_model=ToggleResponse)
async def toggle_quest(quest_id: int, request: Request):
    """Complete a quest, or reopen it if already completed"""
    engine = _runtime(request).engine
    quest = engine.toggle_quest_completion(quest_id)
    if quest is None:
        raise QuestNotFoundError(quest_id, operation="toggle_quest")

    return ToggleResponse(
        quest=quest,
        xp=engine.xp,
        level=engine.level,
        streak=engine.streak,
        progress_to_next_level=engine.progress_to_next_level(),
    )


@router.post("/api/v1/journal", response_model=JournalResponse)
async def submit_journal(body: JournalRequest, request: Request):
    """
    Submit a journal entry

    Blank entries leave the mood unchanged (changed=false).
    """
    engine = _runtime(request).engine
    mood = engine.submit_journal_entry(body.text)
    return JournalResponse(mood=engine.mood, changed=mood is not None)


@router.post("/api/v1/suggestions", response_model=SuggestionsResponse)
async def generate_suggestions(request: Request):
    """Replace pending suggestions with a new batch for the current mood"""
    engine = _runtime(request).engine
    suggestions = engine.generate_suggestions()
    return SuggestionsResponse(mood=engine.mood, suggestions=suggestions)


@router.post("/api/v1/suggestions/{suggestion_id}/accept", response_model=AcceptResponse)
async def accept_suggestion(suggestion_id: int, request: Request):
    """Turn a pending suggestion into a quest"""
    engine = _runtime(request).engine
    quest = engine.accept_suggestion_by_id(suggestion_id)
    if quest is None:
        raise SuggestionNotFoundError(suggestion_id, operation="accept_suggestion")

    return AcceptResponse(quest=quest, quests=engine.quests, suggestions=engine.suggestions)


@router.patch("/api/v1/profile", response_model=ProfileResponse)
async def update_profile(body: ProfileUpdateRequest, request: Request):
    """Update avatar style and/or display name"""
    engine = _runtime(request).engine

    if body.avatar_style is not None and not engine.set_avatar_style(body.avatar_style):
        raise ValidationError(
            f"must be one of {', '.join(AVATAR_STYLES)}",
            field="avatar_style",
            value=body.avatar_style,
            operation="update_profile",
        )
    if body.display_name is not None:
        engine.set_display_name(body.display_name)

    return ProfileResponse(
        avatar_style=engine.avatar_style,
        display_name=engine.display_name,
        avatar=engine.avatar(),
    )


@router.get("/api/v1/game", response_model=GameStateResponse)
async def get_game(request: Request):
    """Calm Collector state"""
    return _game_state(_runtime(request))


@router.post("/api/v1/game/gather", response_model=GameStateResponse)
async def gather_calm(request: Request):
    """Gather calm points"""
    runtime = _runtime(request)
    runtime.game.gather()
    return _game_state(runtime)


@router.post("/api/v1/game/relax", response_model=GameStateResponse)
async def relax(request: Request):
    """Convert calm points into XP"""
    runtime = _runtime(request)
    gained = runtime.game.relax()
    return _game_state(runtime, gained=gained)


@router.post("/api/v1/game/reset", response_model=GameStateResponse)
async def reset_game(request: Request):
    """Drop gathered calm and the combo"""
    runtime = _runtime(request)
    runtime.game.reset()
    return _game_state(runtime)


@router.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Exposes all application metrics in Prometheus text format.

    Returns:
        Metrics in Prometheus exposition format
    """
    if not config.ENABLE_METRICS:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
