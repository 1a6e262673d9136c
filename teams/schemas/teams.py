from typing import List, Optional

from members.schemas.members import MemberResponse
from shared.schemas import CamelModel


class TeamResponse(CamelModel):
    id: int
    name: str
    logo_url: Optional[str] = None
    members: List[MemberResponse] = []


class TeamCreateRequest(CamelModel):
    name: str
    logo_url: Optional[str] = None


class TeamUpdateRequest(CamelModel):
    name: Optional[str] = None
    logo_url: Optional[str] = None
