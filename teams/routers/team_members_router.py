from fastapi import APIRouter, Depends, Request

from sqlalchemy.orm import Session

from messaging.audit_publisher import run_async_audit, generate_log_payload
from services.membership import MembershipManager
from services.projections import TeamRoster
from shared.dependencies import get_db, get_store
from teams.schemas.teams import TeamResponse

responses_add_member = {
    200: {"description": "Member is in the team; the updated team is returned."},
    404: {"description": "The team or the member does not exist."}
}
responses_remove_member = {
    200: {"description": "Member is no longer in the team; the updated team is returned."},
    404: {"description": "The team does not exist."}
}

router = APIRouter(
    prefix="/teams",
    tags=["Team Members"]
)


def audit_roster_change(team_id: int, member_id: int, operation: str,
                        before: list[int], team: TeamRoster, request_object: Request):
    if before == team.member_ids:
        return

    run_async_audit(generate_log_payload(
        event_type="team.members.updated",
        entity_type="team_member",
        entity_id=f"{team_id}:{member_id}",
        operation_type=operation,
        request_object=request_object,
        old_data={"team_id": team_id, "member_ids": before},
        new_data={"team_id": team_id, "member_ids": team.member_ids}
    ))


@router.post("/{team_id}/members/{member_id}", response_model=TeamResponse, responses=responses_add_member)
@router.post("/{team_id}/assign/{member_id}", response_model=TeamResponse, include_in_schema=False)
async def add_member_to_team(team_id: int,
                             member_id: int,
                             request_object: Request,
                             db: Session = Depends(get_db)):
    """
    Add Member To Team

    Assigns a member to a team. Assigning a member that is already in the
    team succeeds without changing anything.

    **Example Response:**

    .. code-block:: json

       {
         "id": 10,
         "name": "Core",
         "logoUrl": null,
         "members": [
           {
             "id": 1,
             "name": "Alice",
             "email": "a@x.com",
             "pictureUrl": null
           }
         ]
       }
    """
    store = get_store(db)
    before = store.get_team(team_id).member_ids

    team = MembershipManager(store).assign(team_id, member_id)

    audit_roster_change(team_id, member_id, "UPDATE", before, team, request_object)
    return team


@router.delete("/{team_id}/members/{member_id}", response_model=TeamResponse, responses=responses_remove_member)
@router.delete("/{team_id}/remove/{member_id}", response_model=TeamResponse, include_in_schema=False)
async def remove_member_from_team(team_id: int,
                                  member_id: int,
                                  request_object: Request,
                                  db: Session = Depends(get_db)):
    """
    Remove Member From Team

    Removes a member from a team. Removing someone who is not in the team
    succeeds and returns the roster unchanged.
    """
    store = get_store(db)
    before = store.get_team(team_id).member_ids

    team = MembershipManager(store).remove(team_id, member_id)

    audit_roster_change(team_id, member_id, "UPDATE", before, team, request_object)
    return team
