"""Core view-state, filtering and service client for threadview."""

from threadview.core.client import (
    CommentServiceError,
    CommentsClient,
    DecodeFailure,
    RequestFailure,
)
from threadview.core.filtering import count_nodes, filter_forest
from threadview.core.models import CommentNode, Forest, NewComment
from threadview.core.session import CommentsSession, DisplayModel, ViewHost
from threadview.core.view_state import FetchRequest, ViewState

__all__ = [
    "CommentNode",
    "CommentServiceError",
    "CommentsClient",
    "CommentsSession",
    "DecodeFailure",
    "DisplayModel",
    "FetchRequest",
    "Forest",
    "NewComment",
    "RequestFailure",
    "ViewHost",
    "ViewState",
    "count_nodes",
    "filter_forest",
]
