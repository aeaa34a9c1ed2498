"""External service clients package.

This package contains clients for the advice and live commentary services.
"""
from .advice import AdviceClient, get_advice_client
from .commentary import CommentarySink, LiveCommentaryClient, NullCommentary

__all__ = [
    "AdviceClient",
    "get_advice_client",
    "CommentarySink",
    "LiveCommentaryClient",
    "NullCommentary",
]
