"""Weighted lead scoring for submissions routed to the CRM."""

from formsapp.models.leads import BehaviorData, LeadData, LeadRouting, LeadScore

INDUSTRY_WEIGHTS = {
    "technology": 20,
    "finance": 18,
    "healthcare": 17,
    "manufacturing": 15,
    "education": 12,
    "retail": 10,
    "construction": 8,
    "agriculture": 6,
    "other": 5,
}

COMPANY_SIZE_WEIGHTS = {
    "1000+": 20,
    "500-999": 18,
    "250-499": 15,
    "100-249": 12,
    "50-99": 10,
    "10-49": 7,
    "1-9": 5,
}

# (minimum annual revenue, points), highest bracket first
REVENUE_BRACKETS = [
    (10_000_000, 20),
    (5_000_000, 17),
    (1_000_000, 14),
    (500_000, 10),
    (100_000, 7),
    (0, 3),
]

ENGAGEMENT_WEIGHTS = {
    "website_visits": 3,
    "demo_requests": 10,
    "multiple_form_submissions": 7,
}
BEHAVIOR_CAP = 20

GRADES = [(50, "A", "Hot"), (35, "B", "Warm"), (20, "C", "Cold")]

RECOMMENDATIONS = {
    "A": ["Contact immediately", "Assign to senior sales rep", "Schedule onboarding call", "Send welcome email"],
    "B": ["Contact within 24 hours", "Send follow-up email", "Add to nurturing sequence"],
    "C": ["Add to email nurturing campaign", "Send educational content", "Monitor engagement"],
    "D": ["Add to long-term nurturing", "Monitor for behavior changes"],
}


def _filled(value) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return value not in (None, 0)


def revenue_score(revenue: float | None) -> int:
    if not revenue:
        return 5
    for floor, points in REVENUE_BRACKETS:
        if revenue >= floor:
            return points
    return REVENUE_BRACKETS[-1][1]


def completion_score(lead: LeadData) -> int:
    required = [lead.company, lead.industry]
    optional = [lead.phone, lead.website, lead.number_of_employees, lead.annual_revenue]
    score = sum(map(_filled, required)) / len(required) * 5
    score += sum(map(_filled, optional)) / len(optional) * 5
    return round(score)


def behavior_score(behavior: BehaviorData) -> int:
    score = 0
    if behavior.form_submissions > 1:
        score += ENGAGEMENT_WEIGHTS["multiple_form_submissions"]
    if behavior.website_visits > 3:
        score += ENGAGEMENT_WEIGHTS["website_visits"]
    if behavior.demo_requested:
        score += ENGAGEMENT_WEIGHTS["demo_requests"]
    return min(score, BEHAVIOR_CAP)


def grade_for(score: int) -> tuple[str, str]:
    for floor, grade, priority in GRADES:
        if score >= floor:
            return grade, priority
    return "D", "Low"


def routing_for(score: int, lead: LeadData) -> LeadRouting:
    if score >= 50:
        if (lead.annual_revenue or 0) >= 5_000_000:
            return LeadRouting(team="Enterprise Sales", rep="Senior Account Executive", sla="1 hour", priority="Critical")
        return LeadRouting(team="Sales", rep="Account Executive", sla="4 hours", priority="High")
    if score >= 35:
        return LeadRouting(team="Sales", rep="Sales Development Rep", sla="24 hours", priority="Medium")
    return LeadRouting(team="Marketing", rep="Marketing Qualified Lead", sla="1 week", priority="Low")


def calculate_lead_score(lead: LeadData, behavior: BehaviorData | None = None) -> LeadScore:
    behavior = behavior or BehaviorData()
    breakdown = {
        "industry": INDUSTRY_WEIGHTS.get((lead.industry or "").lower(), 0),
        "company_size": COMPANY_SIZE_WEIGHTS.get(lead.number_of_employees or "", 0),
        "revenue": revenue_score(lead.annual_revenue),
        "completion": completion_score(lead),
        "behavior": behavior_score(behavior),
    }
    score = sum(breakdown.values())
    grade, priority = grade_for(score)
    return LeadScore(
        score=score,
        grade=grade,
        priority=priority,
        breakdown=breakdown,
        recommendations=RECOMMENDATIONS[grade],
        routing=routing_for(score, lead),
    )
