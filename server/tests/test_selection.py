"""
Roster filtering, selection and form validation tests.
"""
import pytest

from dashboard.schemas import ExamFormData, QuizFormData, Section, Standard, Student
from dashboard.services.form_validation import validate_form
from dashboard.services.selection import (
    SelectionError,
    filter_students,
    find_section,
    find_standard,
    resolve_selection,
)

from conftest import exam_form, mcq, quiz_form, short_answer

ROSTER = [
    Student(id="st1", first_name="Asha", last_name="Rao", email="asha@school.test"),
    Student(id="st2", first_name="Ben", last_name="Ortiz", email="ben.o@school.test"),
    Student(id="st3", first_name="Chen", last_name="Li", email="chen@mail.test"),
]


class TestFindStandardAndSection:

    def test_find_standard(self):
        standards = [Standard(id="g5", name="Grade 5"), Standard(id="g6", name="Grade 6")]

        assert find_standard(standards, "g6").name == "Grade 6"

    def test_unknown_standard(self):
        with pytest.raises(SelectionError):
            find_standard([], "g5")

    def test_section_must_belong_to_standard(self):
        standard = Standard(id="g5", name="Grade 5", sections=[Section(id="sA", name="A")])

        assert find_section(standard, "sA").name == "A"
        with pytest.raises(SelectionError, match="Grade 5"):
            find_section(standard, "sB")


class TestFilterStudents:

    def test_blank_search_keeps_everyone(self):
        assert filter_students(ROSTER, "  ") == ROSTER

    def test_matches_full_name_case_insensitively(self):
        assert [s.id for s in filter_students(ROSTER, "ASHA r")] == ["st1"]

    def test_matches_email(self):
        assert [s.id for s in filter_students(ROSTER, "mail.test")] == ["st3"]

    def test_no_match(self):
        assert filter_students(ROSTER, "zed") == []


class TestResolveSelection:

    def test_keeps_roster_order(self):
        chosen = resolve_selection(ROSTER, ["st3", "st1"])

        assert [s.id for s in chosen] == ["st1", "st3"]

    def test_select_all_uses_visible_roster(self):
        chosen = resolve_selection(ROSTER, [], select_all=True, search="school.test")

        assert [s.id for s in chosen] == ["st1", "st2"]

    def test_unknown_ids_rejected(self):
        with pytest.raises(SelectionError, match="st9"):
            resolve_selection(ROSTER, ["st1", "st9"])

    def test_empty_selection_rejected(self):
        with pytest.raises(SelectionError, match="at least one student"):
            resolve_selection(ROSTER, [])


class TestValidateForm:

    def test_valid_exam(self):
        form = ExamFormData.model_validate(exam_form(questions=[mcq(), short_answer("Why?", "Because")]))

        assert validate_form(form) is None

    def test_valid_quiz(self):
        assert validate_form(QuizFormData.model_validate(quiz_form())) is None

    def test_no_questions(self):
        form = ExamFormData.model_validate(exam_form(questions=[]))

        assert validate_form(form) == "Please add at least one question"

    def test_blank_question_text(self):
        form = ExamFormData.model_validate(exam_form(questions=[mcq(), mcq(text="   ")]))

        assert validate_form(form) == "Question 2 text is required"

    def test_mcq_without_options(self):
        question = mcq()
        question["options"] = []

        assert validate_form(ExamFormData.model_validate(exam_form(questions=[question]))) == (
            "Question 1 needs answer options"
        )

    def test_mcq_without_correct_option(self):
        question = mcq()
        question["options"][0]["isCorrect"] = False

        assert validate_form(ExamFormData.model_validate(exam_form(questions=[question]))) == (
            "Question 1 must have at least one correct answer"
        )

    def test_mcq_with_empty_option(self):
        question = mcq(wrong="")

        assert validate_form(ExamFormData.model_validate(exam_form(questions=[question]))) == (
            "Question 1 has empty options"
        )

    def test_open_ended_needs_answer(self):
        form = ExamFormData.model_validate(exam_form(questions=[short_answer("Why?", " ")]))

        assert validate_form(form) == "Question 1 must have a correct answer"
