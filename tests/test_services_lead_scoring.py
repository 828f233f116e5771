from formsapp.models.leads import BehaviorData, LeadData
from formsapp.services import lead_scoring


class TestCalculateLeadScore:
    def test_hot_enterprise_lead(self):
        lead = LeadData(
            company="Acme", industry="Technology", phone="555", website="acme.io",
            number_of_employees="1000+", annual_revenue=20_000_000,
        )
        score = lead_scoring.calculate_lead_score(lead, BehaviorData(demo_requested=True))
        assert score.breakdown == {
            "industry": 20, "company_size": 20, "revenue": 20, "completion": 10, "behavior": 10,
        }
        assert score.score == 80
        assert (score.grade, score.priority) == ("A", "Hot")
        assert score.routing.team == "Enterprise Sales"
        assert score.recommendations[0] == "Contact immediately"

    def test_empty_lead(self):
        score = lead_scoring.calculate_lead_score(LeadData())
        assert score.breakdown["revenue"] == 5
        assert score.score == 5
        assert score.grade == "D"
        assert score.routing.team == "Marketing"


class TestPieces:
    def test_behavior_cap(self):
        behavior = BehaviorData(form_submissions=3, website_visits=10, demo_requested=True)
        assert lead_scoring.behavior_score(behavior) == 20

    def test_revenue_brackets(self):
        assert lead_scoring.revenue_score(50) == 3
        assert lead_scoring.revenue_score(1_000_000) == 14

    def test_grade_thresholds(self):
        assert lead_scoring.grade_for(50) == ("A", "Hot")
        assert lead_scoring.grade_for(35) == ("B", "Warm")
        assert lead_scoring.grade_for(20) == ("C", "Cold")
        assert lead_scoring.grade_for(19) == ("D", "Low")
