"""API dependencies."""
from ..core.generator import get_generator, BoardGenerator
from ..core.session_store import get_session_store, SessionStore
from ..clients.advice import get_advice_client, AdviceClient


def get_board_generator() -> BoardGenerator:
    """Dependency for board generator."""
    return get_generator()


async def get_sessions() -> SessionStore:
    """Dependency for session store; sweeps idle sessions first."""
    store = get_session_store()
    await store.close_idle()
    return store


def get_advice() -> AdviceClient:
    """Dependency for advice client."""
    return get_advice_client()
