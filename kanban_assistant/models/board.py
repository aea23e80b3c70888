"""Board models"""

from pydantic import BaseModel, Field


class BoardCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)


class JoinBoardRequest(BaseModel):
    invite_code: str = Field(..., min_length=1, max_length=20, alias="inviteCode")

    class Config:
        populate_by_name = True
