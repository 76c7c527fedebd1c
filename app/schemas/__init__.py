from .base import (
	CamelModel,
	Pagination,
)
from .user import (
	UserResponse,
	ProfileUpdate,
	ProfileResponse,
)
from .post import (
	PostFilter,
	PostCreate,
	PostUpdate,
	PostStatusUpdate,
	PostListItem,
	PostDetail,
	PostListResponse,
	PostDetailResponse,
	ReactionResponse,
	FavoriteResponse,
	LabelListResponse,
	AdminPostListItem,
	AdminPostDetail,
	AdminPostListResponse,
	AdminPostDetailResponse,
	PostMutationResponse,
	PostStatusResponse,
)
from .comment import (
	CommentCreate,
	CommentResponse,
	CommentListResponse,
	CommentCreateResponse,
)
from .metrics import (
	TopPostMetric,
	MetricsResponse,
)
from .subscription import SubscriptionStatus

__all__ = [
	# Base
	"CamelModel",
	"Pagination",
	# User
	"UserResponse",
	"ProfileUpdate",
	"ProfileResponse",
	# Post
	"PostFilter",
	"PostCreate",
	"PostUpdate",
	"PostStatusUpdate",
	"PostListItem",
	"PostDetail",
	"PostListResponse",
	"PostDetailResponse",
	"ReactionResponse",
	"FavoriteResponse",
	"LabelListResponse",
	"AdminPostListItem",
	"AdminPostDetail",
	"AdminPostListResponse",
	"AdminPostDetailResponse",
	"PostMutationResponse",
	"PostStatusResponse",
	# Comment
	"CommentCreate",
	"CommentResponse",
	"CommentListResponse",
	"CommentCreateResponse",
	# Metrics
	"TopPostMetric",
	"MetricsResponse",
	# Subscription
	"SubscriptionStatus",
]
