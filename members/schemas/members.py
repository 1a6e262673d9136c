from typing import Optional

from shared.schemas import CamelModel


class MemberResponse(CamelModel):
    id: int
    name: str
    email: str
    picture_url: Optional[str] = None


class MemberCreateRequest(CamelModel):
    name: str
    email: str
    picture_url: Optional[str] = None


class MemberUpdateRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    picture_url: Optional[str] = None
