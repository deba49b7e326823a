"""Route for voting on questions and answers."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.application.use_cases.votes import cast_vote, count_votes
from app.domain.entities import User
from app.infrastructure.database import get_db
from app.interfaces.api.dependencies import get_current_user
from app.interfaces.api.routes_helpers import http_error
from app.interfaces.api.schemas import VoteCreate, VoteRead

router = APIRouter(prefix="/api", tags=["votes"])


@router.post("/votes", response_model=VoteRead)
def vote(
    payload: VoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create or replace the caller's vote and return the new vote sum."""

    try:
        saved = cast_vote(
            db,
            user_id=current_user.id,
            value=payload.value,
            question_id=payload.question_id,
            answer_id=payload.answer_id,
        )
    except ValueError as exc:
        raise http_error(exc) from exc

    total = count_votes(db, question_id=saved.question_id, answer_id=saved.answer_id)
    return VoteRead(
        id=saved.id,
        user_id=saved.user_id,
        value=saved.value,
        question_id=saved.question_id,
        answer_id=saved.answer_id,
        created_at=saved.created_at,
        votes_count=total,
    )
