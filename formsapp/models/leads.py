from pydantic import BaseModel


class LeadData(BaseModel):
    company: str | None = None
    industry: str | None = None
    phone: str | None = None
    website: str | None = None
    number_of_employees: str | None = None  # bracket label, e.g. "50-99"
    annual_revenue: float | None = None


class BehaviorData(BaseModel):
    form_submissions: int = 0
    website_visits: int = 0
    demo_requested: bool = False


class LeadRouting(BaseModel):
    team: str
    rep: str
    sla: str
    priority: str


class LeadScore(BaseModel):
    score: int
    grade: str  # A, B, C or D
    priority: str  # Hot, Warm, Cold or Low
    breakdown: dict[str, int]
    recommendations: list[str]
    routing: LeadRouting


class ScoreLeadRequest(BaseModel):
    lead: LeadData
    behavior: BehaviorData = BehaviorData()
