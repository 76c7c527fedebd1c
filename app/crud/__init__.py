"""CRUD operations package - exports singleton instances for all models."""

from .base import CRUDBase
from .user import crud_user
from .label import crud_label
from .post import crud_post
from .user_post_reaction import crud_user_post_reaction
from .favorite_post import crud_favorite_post
from .post_comment import crud_post_comment
from .post_view import crud_post_view
from .subscription import crud_subscription


__all__ = [
    # Base
    "CRUDBase",
    # CRUD instances
    "crud_user",
    "crud_label",
    "crud_post",
    "crud_user_post_reaction",
    "crud_favorite_post",
    "crud_post_comment",
    "crud_post_view",
    "crud_subscription",
]
