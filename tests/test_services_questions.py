import pytest

from formsapp.exceptions import UnsupportedQuestionTypeError
from formsapp.models.questions import AUXILIARY_FIELDS, Question, QuestionType
from formsapp.services import questions as questions_service
from conftest import make_question

DEFAULT_AUX = {
    "radio": {"options": ["", ""]},
    "checkbox": {"options": ["", ""]},
    "select": {"options": ["", ""]},
    "grid_radio": {"rows": [""], "columns": [""]},
    "grid_checkbox": {"rows": [""], "columns": [""]},
    "linear": {"min": 1, "max": 5},
    "rating": {"min": 1, "max": 5},
    "file": {"accept": "", "multiple": False},
}


class TestCreateDefault:
    @pytest.mark.parametrize("question_type", [t.value for t in QuestionType])
    def test_defaults(self, question_type):
        question = questions_service.create_default(question_type)
        assert question.type == question_type
        assert question.title == ""
        assert question.question_text == ""
        assert question.required is False
        assert question.show_in_table is True
        aux = {f: getattr(question, f) for f in AUXILIARY_FIELDS if getattr(question, f) is not None}
        assert aux == DEFAULT_AUX.get(question_type, {})

    def test_unknown_type(self):
        with pytest.raises(UnsupportedQuestionTypeError):
            questions_service.create_default("integer")


class TestChangeType:
    @pytest.mark.parametrize("new_type", [t.value for t in QuestionType])
    def test_keeps_identity_and_resets_aux(self, new_type):
        question = make_question(
            "grid_radio", "q9", rows=["a", "b"], columns=["x"], required=True, show_in_table=False,
            description="help",
        )
        changed = questions_service.change_type(question, new_type)
        assert changed.id == "q9"
        assert changed.title == question.title
        assert changed.question_text == question.question_text
        assert changed.description == "help"
        assert changed.required is True
        assert changed.show_in_table is False
        if new_type != "grid_radio":
            aux = {f: getattr(changed, f) for f in AUXILIARY_FIELDS if getattr(changed, f) is not None}
            assert aux == DEFAULT_AUX.get(new_type, {})

    def test_rows_do_not_leak_into_text(self):
        question = make_question("grid_checkbox", "q1", rows=["r"], columns=["c"])
        changed = questions_service.change_type(question, "text")
        assert changed.rows is None
        assert changed.columns is None

    def test_same_type_keeps_aux(self):
        question = make_question("radio", "q1", options=["Yes", "No"])
        assert questions_service.change_type(question, "radio").options == ["Yes", "No"]

    def test_returns_new_question(self):
        question = make_question("text", "q1")
        changed = questions_service.change_type(question, "radio")
        assert question.type == "text"
        assert changed is not question


class TestValidateLimits:
    def test_collects_every_violation(self):
        questions = [make_question("text", f"t{i}") for i in range(5)]
        questions += [make_question("checkbox", f"c{i}") for i in range(5)]
        result = questions_service.validate_limits(questions)
        assert result.is_valid is False
        assert result.errors == [
            "Maximum 4 questions allowed for type: text (currently 5)",
            "Maximum 4 questions allowed for type: checkbox (currently 5)",
        ]
        assert result.type_counts == {"text": 5, "checkbox": 5}

    def test_at_limit_is_valid(self):
        questions = [make_question("textarea", f"q{i}") for i in range(4)]
        assert questions_service.validate_limits(questions).is_valid is True

    def test_legacy_integer_tag_is_counted(self):
        questions = [Question(id=f"q{i}", type="integer", title="n", question_text="n") for i in range(5)]
        result = questions_service.validate_limits(questions)
        assert result.errors == ["Maximum 4 questions allowed for type: integer (currently 5)"]


class TestCanAdd:
    def test_radio_is_unlimited(self):
        questions = [make_question("radio", f"q{i}") for i in range(50)]
        assert questions_service.can_add(questions, "radio") is True

    def test_text_capped_at_four(self):
        questions = [make_question("text", f"q{i}") for i in range(4)]
        assert questions_service.can_add(questions[:3], "text") is True
        assert questions_service.can_add(questions, "text") is False


class TestListTypeInfos:
    def test_reports_counts_and_can_add(self):
        questions = [make_question("checkbox", f"q{i}") for i in range(4)]
        infos = {i.type: i for i in questions_service.list_type_infos(questions)}
        assert infos["checkbox"].current == 4
        assert infos["checkbox"].can_add is False
        assert infos["radio"].limit is None
        assert infos["radio"].can_add is True
        assert len(infos) == 12
