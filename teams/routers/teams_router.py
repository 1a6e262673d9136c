from fastapi import APIRouter, Depends, Request, Response, status

from typing import List

from sqlalchemy.orm import Session

from messaging.audit_publisher import run_async_audit, generate_log_payload, model_to_dict
from services.projections import get_team_with_members, list_teams_with_members, project_team
from shared.dependencies import get_db, get_store
from teams.schemas.teams import TeamResponse, TeamCreateRequest, TeamUpdateRequest

import logging

logger = logging.getLogger(__name__)

responses_create_team = {
    201: {"description": "Team created with no members."},
    400: {"description": "The team name is empty."},
    409: {"description": "Another team already uses this name."}
}
responses_team_by_id = {
    404: {"description": "No team with the given id."}
}

router = APIRouter(
    prefix="/teams",
    tags=["Teams"]
)


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED,
             responses=responses_create_team)
@router.post("/", response_model=TeamResponse, status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
async def create_team(team_request: TeamCreateRequest,
                      request_object: Request,
                      db: Session = Depends(get_db)):
    """
    Create Team

    Creates an empty team.

    **Example Request Body:**

    .. code-block:: json

       {
         "name": "Core",
         "logoUrl": "https://cdn.example.com/core.svg"
       }

    **Example Response (201 Created):**

    .. code-block:: json

       {
         "id": 10,
         "name": "Core",
         "logoUrl": "https://cdn.example.com/core.svg",
         "members": []
       }
    """
    team = get_store(db).create_team(name=team_request.name, logo_url=team_request.logo_url)

    run_async_audit(generate_log_payload(
        event_type="teams.created",
        entity_type="team",
        entity_id=team.id,
        operation_type="CREATE",
        request_object=request_object,
        new_data=model_to_dict(team)
    ))

    return project_team(team)


@router.get("", response_model=List[TeamResponse])
@router.get("/", response_model=List[TeamResponse], include_in_schema=False)
async def list_teams(db: Session = Depends(get_db)):
    """
    List Teams

    Returns every team in creation order, each with its members resolved.
    """
    return list_teams_with_members(get_store(db))


@router.get("/{team_id}", response_model=TeamResponse, responses=responses_team_by_id)
@router.get("/{team_id}/", response_model=TeamResponse, include_in_schema=False)
async def get_team_by_id(team_id: int, db: Session = Depends(get_db)):
    """
    Get Team By Id

    Returns the team together with its members, in the order they were
    assigned.

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
    return get_team_with_members(get_store(db), team_id)


@router.put("/{team_id}", response_model=TeamResponse, responses=responses_team_by_id)
async def update_team_by_id(team_id: int,
                            team_request: TeamUpdateRequest,
                            request_object: Request,
                            db: Session = Depends(get_db)):
    """
    Update Team By Id

    Renames a team or changes its logo. The roster is not touched here.
    """
    store = get_store(db)
    old_data = model_to_dict(store.get_team(team_id))

    team = store.update_team(team_id, name=team_request.name, logo_url=team_request.logo_url)

    run_async_audit(generate_log_payload(
        event_type="teams.updated",
        entity_type="team",
        entity_id=team.id,
        operation_type="UPDATE",
        request_object=request_object,
        old_data=old_data,
        new_data=model_to_dict(team)
    ))

    return project_team(team)


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT, responses=responses_team_by_id)
@router.delete("/{team_id}/", status_code=status.HTTP_204_NO_CONTENT, include_in_schema=False)
async def delete_team_by_id(team_id: int,
                            request_object: Request,
                            db: Session = Depends(get_db)):
    """
    Delete Team By Id

    Deletes the team and all of its membership links. Feedback given to the
    team is kept.
    """
    team = get_store(db).delete_team(team_id)

    run_async_audit(generate_log_payload(
        event_type="teams.deleted",
        entity_type="team",
        entity_id=team_id,
        operation_type="DELETE",
        request_object=request_object,
        old_data=model_to_dict(team)
    ))

    return Response(status_code=status.HTTP_204_NO_CONTENT)
