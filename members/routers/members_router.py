from fastapi import APIRouter, Depends, Request, Response, status

from typing import List

from sqlalchemy.orm import Session

from members.schemas.members import MemberResponse, MemberCreateRequest, MemberUpdateRequest
from messaging.audit_publisher import run_async_audit, generate_log_payload, model_to_dict
from shared.dependencies import get_db, get_store

import logging

logger = logging.getLogger(__name__)

responses_create_member = {
    201: {"description": "Member created."},
    400: {"description": "Name is empty or the email is malformed."},
    409: {"description": "The email is already used by another member."}
}
responses_member_by_id = {
    404: {"description": "No member with the given id."}
}

router = APIRouter(
    prefix="/members",
    tags=["Members"]
)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED,
             responses=responses_create_member)
@router.post("/", response_model=MemberResponse, status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
async def create_member(member_request: MemberCreateRequest,
                        request_object: Request,
                        db: Session = Depends(get_db)):
    """
    Create Member

    Adds a new member to the coaching program.

    **Example Request Body:**

    .. code-block:: json

       {
         "name": "Alice",
         "email": "a@x.com",
         "pictureUrl": "https://cdn.example.com/alice.png"
       }

    **Example Response (201 Created):**

    .. code-block:: json

       {
         "id": 1,
         "name": "Alice",
         "email": "a@x.com",
         "pictureUrl": "https://cdn.example.com/alice.png"
       }
    """
    member = get_store(db).create_member(
        name=member_request.name,
        email=member_request.email,
        picture_url=member_request.picture_url,
    )

    run_async_audit(generate_log_payload(
        event_type="members.created",
        entity_type="member",
        entity_id=member.id,
        operation_type="CREATE",
        request_object=request_object,
        new_data=model_to_dict(member)
    ))

    return member


@router.get("", response_model=List[MemberResponse])
@router.get("/", response_model=List[MemberResponse], include_in_schema=False)
async def list_members(db: Session = Depends(get_db)):
    """
    List Members

    Returns every member in creation order.
    """
    return get_store(db).list_members()


@router.get("/{member_id}", response_model=MemberResponse, responses=responses_member_by_id)
async def get_member_by_id(member_id: int, db: Session = Depends(get_db)):
    """
    Get Member By Id
    """
    return get_store(db).get_member(member_id)


@router.put("/{member_id}", response_model=MemberResponse, responses=responses_member_by_id)
async def update_member_by_id(member_id: int,
                              member_request: MemberUpdateRequest,
                              request_object: Request,
                              db: Session = Depends(get_db)):
    """
    Update Member By Id

    Partially updates a member. Omitted fields keep their value; an empty
    ``pictureUrl`` clears the picture. A changed email must still be unique.
    """
    store = get_store(db)
    old_data = model_to_dict(store.get_member(member_id))

    member = store.update_member(
        member_id,
        name=member_request.name,
        email=member_request.email,
        picture_url=member_request.picture_url,
    )

    run_async_audit(generate_log_payload(
        event_type="members.updated",
        entity_type="member",
        entity_id=member.id,
        operation_type="UPDATE",
        request_object=request_object,
        old_data=old_data,
        new_data=model_to_dict(member)
    ))

    return member


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT, responses=responses_member_by_id)
async def delete_member_by_id(member_id: int,
                              request_object: Request,
                              db: Session = Depends(get_db)):
    """
    Delete Member By Id

    Removes the member from every team it belongs to and deletes it.
    Feedback about the member is kept and shows up with a fallback label.
    """
    member = get_store(db).delete_member(member_id)

    run_async_audit(generate_log_payload(
        event_type="members.deleted",
        entity_type="member",
        entity_id=member_id,
        operation_type="DELETE",
        request_object=request_object,
        old_data=model_to_dict(member)
    ))

    return Response(status_code=status.HTTP_204_NO_CONTENT)
