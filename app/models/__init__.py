"""
SQLAlchemy Models for the content API
"""

from ..database import Base
from .user import User
from .post import Post, PostStatus
from .label import Label, PostLabel
from .user_post_reaction import UserPostReaction, ReactionType
from .favorite_post import FavoritePost
from .post_comment import PostComment
from .post_view import PostView
from .subscription import Subscription, ACTIVE_SUBSCRIPTION_STATUSES

# Export all models
__all__ = [
    "Base",
    "User",
    "Post",
    "PostStatus",
    "Label",
    "PostLabel",
    "UserPostReaction",
    "ReactionType",
    "FavoritePost",
    "PostComment",
    "PostView",
    "Subscription",
    "ACTIVE_SUBSCRIPTION_STATUSES",
]
