from fastapi import APIRouter

from formsapp.models.questions import QuestionTypeInfo
from formsapp.services import questions as questions_service

router = APIRouter(prefix="/api/question-types", tags=["question-types"])


@router.get("")
def list_question_types() -> list[QuestionTypeInfo]:
    return questions_service.list_type_infos()
