import pytest
from unittest.mock import MagicMock

from formsapp.exceptions import UnsupportedQuestionTypeError
from formsapp.models.questions import QuestionType
from formsapp.question_types import (
    QUESTION_TYPE_LIMITS,
    QUESTION_TYPE_REGISTRY,
    CheckboxRenderer,
    get_entry,
    resolve_builder_config,
    resolve_input_renderer,
)
from conftest import make_question


class TestRegistry:
    def test_every_question_type_is_registered(self):
        assert set(QUESTION_TYPE_REGISTRY) == {t.value for t in QuestionType}

    def test_limits(self):
        assert QUESTION_TYPE_REGISTRY["text"].limit == 4
        assert QUESTION_TYPE_REGISTRY["checkbox"].limit == 4
        assert QUESTION_TYPE_REGISTRY["radio"].limit is None
        assert QUESTION_TYPE_LIMITS["integer"] == 4

    def test_unknown_type_raises(self):
        with pytest.raises(UnsupportedQuestionTypeError, match="Unsupported question type: integer"):
            resolve_input_renderer("integer")

    @pytest.mark.parametrize("question_type", [["radio"], None, 3])
    def test_non_string_tag_raises(self, question_type):
        with pytest.raises(UnsupportedQuestionTypeError):
            get_entry(question_type)

    def test_accepts_enum_members(self):
        assert isinstance(resolve_input_renderer(QuestionType.CHECKBOX), CheckboxRenderer)

    @pytest.mark.parametrize("question_type", ["text", "textarea", "date", "time"])
    def test_plain_types_have_no_config(self, question_type):
        assert resolve_builder_config(question_type) is None


class TestRenderStrategies:
    def test_render_does_not_mutate_question(self):
        question = make_question("radio", "q1", options=["Yes", "No"])
        before = question.model_dump()
        resolve_input_renderer("radio").render(question, "Yes")
        assert question.model_dump() == before

    def test_radio_marks_selected_choice(self):
        question = make_question("radio", "q1", options=["Yes", "No"])
        view = resolve_input_renderer("radio").render(question, "No", disabled=True)
        assert view.control == "radio"
        assert [c.selected for c in view.choices] == [False, True]
        assert view.disabled is True

    def test_radio_rejects_unknown_option(self):
        question = make_question("radio", "q1", options=["Yes", "No"])
        with pytest.raises(ValueError):
            resolve_input_renderer("radio").handle_input(question, None, "Maybe", MagicMock())

    def test_checkbox_toggles_in_option_order(self):
        question = make_question("checkbox", "q1", options=["a", "b", "c"])
        renderer = resolve_input_renderer("checkbox")
        assert renderer.next_answer(question, ["c"], "a") == ["a", "c"]
        assert renderer.next_answer(question, ["a", "c"], "a") == ["c"]

    def test_handle_input_calls_set_answer(self):
        question = make_question("text", "q7")
        set_answer = MagicMock()
        resolve_input_renderer("text").handle_input(question, None, "hello", set_answer)
        set_answer.assert_called_once_with("q7", "hello")

    def test_scale_range_and_bounds(self):
        question = make_question("linear", "q1", min=0, max=3)
        renderer = resolve_input_renderer("linear")
        view = renderer.render(question, 0)
        assert [c.value for c in view.choices] == [0, 1, 2, 3]
        assert view.value == 0
        assert renderer.next_answer(question, None, 0) == 0
        with pytest.raises(ValueError):
            renderer.next_answer(question, None, 4)

    def test_scale_rejects_bool(self):
        question = make_question("rating", "q1")
        with pytest.raises(ValueError):
            resolve_input_renderer("rating").next_answer(question, None, True)

    def test_rating_renders_stars(self):
        view = resolve_input_renderer("rating").render(make_question("rating", "q1"))
        assert view.control == "stars"
        assert len(view.choices) == 5

    def test_grid_radio_sets_one_cell_per_row(self):
        question = make_question("grid_radio", "q1", rows=["r1", "r2"], columns=["c1", "c2"])
        renderer = resolve_input_renderer("grid_radio")
        answer = renderer.next_answer(question, None, {"row": 1, "column": "c2"})
        answer = renderer.next_answer(question, answer, {"row": 1, "column": "c1"})
        assert answer == {"1": "c1"}
        view = renderer.render(question, answer)
        assert [c.selected for c in view.rows[1].choices] == [True, False]

    def test_grid_rejects_unknown_row(self):
        question = make_question("grid_radio", "q1", rows=["r1"], columns=["c1"])
        with pytest.raises(ValueError):
            resolve_input_renderer("grid_radio").next_answer(question, None, {"row": 3, "column": "c1"})

    def test_grid_checkbox_toggles(self):
        question = make_question("grid_checkbox", "q1", rows=["r1"], columns=["c1", "c2"])
        renderer = resolve_input_renderer("grid_checkbox")
        answer = renderer.next_answer(question, {"0": ["c2"]}, {"row": 0, "column": "c1"})
        assert answer == {"0": ["c1", "c2"]}

    def test_file_single_and_multiple(self):
        renderer = resolve_input_renderer("file")
        single = make_question("file", "q1")
        multi = make_question("file", "q2", multiple=True)
        assert renderer.next_answer(single, None, ["a.pdf", "b.pdf"]) == "a.pdf"
        assert renderer.next_answer(multi, None, ["a.pdf", "b.pdf"]) == ["a.pdf", "b.pdf"]


class TestConfigStrategies:
    def test_options_editor(self):
        question = make_question("radio", "q1", options=["only"])
        view = resolve_builder_config("radio").configure(question)
        assert view.editors[0].field == "options"
        assert view.editors[0].can_remove is False

    def test_edit_forwards_change(self):
        question = make_question("file", "q1")
        on_change = MagicMock()
        resolve_builder_config("file").edit(question, "accept", ".pdf", on_change)
        on_change.assert_called_once_with("accept", ".pdf")

    def test_edit_rejects_foreign_field(self):
        question = make_question("rating", "q1")
        with pytest.raises(ValueError):
            resolve_builder_config("rating").edit(question, "options", ["a"], MagicMock())

    def test_linear_min_must_stay_below_max(self):
        question = make_question("linear", "q1", min=1, max=5)
        config = resolve_builder_config("linear")
        with pytest.raises(ValueError):
            config.edit(question, "min", 5, MagicMock())
        with pytest.raises(ValueError):
            config.edit(question, "max", 11, MagicMock())
