from .paper import PaperModel
from .user import UserModel
from .rating import RatingLogModel
from .bookmark import BookmarkModel
from .comment import CommentModel
from .suggestion import SuggestionModel

__all__ = [
    "PaperModel",
    "UserModel",
    "RatingLogModel",
    "BookmarkModel",
    "CommentModel",
    "SuggestionModel",
]
