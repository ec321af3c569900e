"""Matching domain schemas"""

from pydantic import BaseModel


class LikeResponse(BaseModel):
    message: str
    matched: bool


class UnlikeResponse(BaseModel):
    message: str
    matchRemoved: bool
