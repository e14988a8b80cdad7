from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..auth.models import User
from ..config import settings
from ..database.base import get_db
from ..dependencies import get_current_user
from ..rate_limit import limiter
from .schemas import GenerateConversationStarterRequest, GenerateConversationStarterResponse
from .service import generate_starter

router = APIRouter(prefix="/conversation-starters", tags=["conversation_starters"])


@router.post("/generate")
@limiter.limit(settings.rate_limit_generate)
def generate_route(
    request: Request,
    body: GenerateConversationStarterRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    message = generate_starter(db, user.id, body)
    return GenerateConversationStarterResponse(message=message).model_dump()
