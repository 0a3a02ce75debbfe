# menu_memorizer/api/v1/endpoints/quiz.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from menu_memorizer.api.v1.dependencies.services import get_quiz_service
from menu_memorizer.schemas.quiz import QuizQuestion
from menu_memorizer.services.quiz_service import QuizService
from menu_memorizer.exceptions.menu_exceptions import StoreError

router = APIRouter(prefix="/quiz", tags=["quiz"])


@router.get("", response_model=List[QuizQuestion])
async def get_quiz(service: QuizService = Depends(get_quiz_service)) -> List[QuizQuestion]:
    """
    Generate two questions per dish: its ingredients and its description.
    """
    try:
        return await service.generate_quiz()
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
