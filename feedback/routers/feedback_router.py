from fastapi import APIRouter, Depends, Query, Request, status

from typing import List, Optional

from sqlalchemy.orm import Session

from feedback.schemas.feedback import FeedbackCreateRequest, FeedbackResponse, FeedbackListItem
from messaging.audit_publisher import run_async_audit, generate_log_payload, model_to_dict
from services.feedback_service import FeedbackService
from services.projections import list_feedback_with_labels
from shared.dependencies import get_db, get_store
from shared.exceptions import ValidationFailed

responses_give_feedback = {
    201: {"description": "Feedback stored."},
    400: {"description": "Empty content or an unknown targetType."},
    404: {"description": "The member or team being targeted does not exist."}
}

router = APIRouter(
    prefix="/feedback",
    tags=["Feedback"]
)


@router.post("", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED,
             responses=responses_give_feedback)
@router.post("/", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
async def give_feedback(feedback_request: FeedbackCreateRequest,
                        request_object: Request,
                        db: Session = Depends(get_db)):
    """
    Give Feedback

    Records a feedback note on a member or a team. Feedback cannot be edited
    afterwards.

    **Example Request Body:**

    .. code-block:: json

       {
         "content": "Great work",
         "targetType": "member",
         "targetId": 1
       }

    **Example Response (201 Created):**

    .. code-block:: json

       {
         "id": 3,
         "content": "Great work",
         "targetType": "member",
         "targetId": 1,
         "createdAt": "2026-10-19T09:30:00.123456+00:00"
       }
    """
    feedback = FeedbackService(get_store(db)).create(
        content=feedback_request.content,
        target_type=feedback_request.target_type,
        target_id=feedback_request.target_id,
    )

    run_async_audit(generate_log_payload(
        event_type="feedback.created",
        entity_type="feedback",
        entity_id=feedback.id,
        operation_type="CREATE",
        request_object=request_object,
        new_data=model_to_dict(feedback)
    ))

    return feedback


@router.get("", response_model=List[FeedbackListItem])
@router.get("/", response_model=List[FeedbackListItem], include_in_schema=False)
async def list_feedback(target_type: Optional[str] = Query(None, alias="targetType",
                                                           description="member or team"),
                        target_id: Optional[str] = Query(None, alias="targetId"),
                        member_id: Optional[int] = Query(None, description="Shorthand for targetType=member"),
                        team_id: Optional[int] = Query(None, description="Shorthand for targetType=team"),
                        db: Session = Depends(get_db)):
    """
    List Feedback

    Lists feedback newest first, each entry with a ``targetLabel``: the
    member's "name (email)", the team's name, or "<type> id <id>" when the
    target has been deleted.

    - With ``targetType`` and ``targetId``: only feedback on that target.
    - With ``targetType`` alone: only feedback on that kind of target.
    - ``targetId`` without ``targetType`` is rejected.
    """
    # Empty query values (?targetType=&targetId=) mean "not given".
    target_type = target_type or None
    target_id = target_id or None

    shorthands = [(kind, value) for kind, value in (("member", member_id), ("team", team_id))
                  if value is not None]
    if shorthands:
        if len(shorthands) > 1 or target_type is not None or target_id is not None:
            raise ValidationFailed("Use either targetType/targetId, member_id or team_id, not several.")
        target_type, target_id = shorthands[0]

    store = get_store(db)
    entries = FeedbackService(store).list(target_type=target_type, target_id=target_id)
    return list_feedback_with_labels(store, entries)
