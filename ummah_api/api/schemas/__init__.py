"""
Pydantic schemas for API request validation.

This package contains the request payload definitions used by the route
layer. Responses are the storage layer's records, returned as-is.
"""

# Re-export schemas for convenient imports.
from .community import CommunityCreate as CommunityCreate
from .community import EventCreate as EventCreate
from .community import Membership as Membership
from .content import CommentCreate as CommentCreate
from .content import DuaRequestCreate as DuaRequestCreate
from .content import PostCreate as PostCreate
from .content import TargetToggle as TargetToggle
from .moderation import BanCreate as BanCreate
from .moderation import ReportCreate as ReportCreate
from .moderation import ReportStatusUpdate as ReportStatusUpdate
from .user import UserCreate as UserCreate
from .user import UserUpdate as UserUpdate
