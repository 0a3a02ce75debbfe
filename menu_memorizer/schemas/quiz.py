# menu_memorizer/schemas/quiz.py
from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class MultiSelectQuestion(BaseModel):
    """Question where every correct option has to be selected."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["multi-select"] = "multi-select"
    question: str
    correct_answers: List[str] = Field(..., alias="correctAnswers")
    options: List[str]


class SingleSelectQuestion(BaseModel):
    """Question with exactly one correct option."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["single-select"] = "single-select"
    question: str
    correct_answer: str = Field(..., alias="correctAnswer")
    options: List[str]


QuizQuestion = Union[MultiSelectQuestion, SingleSelectQuestion]
