from fastapi import APIRouter, Depends

from formsapp.auth import get_session
from formsapp.models.leads import LeadScore, ScoreLeadRequest
from formsapp.models.users import Session
from formsapp.services import lead_scoring

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.post("/score")
def score_lead(request: ScoreLeadRequest, session: Session = Depends(get_session)) -> LeadScore:
    return lead_scoring.calculate_lead_score(request.lead, request.behavior)
