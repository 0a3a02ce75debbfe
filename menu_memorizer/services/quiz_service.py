# menu_memorizer/services/quiz_service.py
import logging
import random
from typing import AbstractSet, Hashable, Iterable, List, Optional, Sequence, TypeVar

from menu_memorizer.schemas.menu import Dish
from menu_memorizer.schemas.quiz import (
    MultiSelectQuestion,
    QuizQuestion,
    SingleSelectQuestion
)
from menu_memorizer.services.menu_store import MenuStore

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)

MULTI_SELECT_DISTRACTORS = 5
SINGLE_SELECT_DISTRACTORS = 3


def sample_distractors(
        pool: Iterable[T],
        exclude: AbstractSet[T],
        k: int,
        rng: Optional[random.Random] = None
) -> List[T]:
    """
    Pick up to k distinct elements of pool that are not in exclude.

    Every subset of the eligible candidates is equally likely. Repeated
    entries in pool count once. The caller's pool is never modified.

    Raises:
        ValueError: If k is negative
    """
    if k < 0:
        raise ValueError("k must not be negative")

    rng = rng or random.Random()
    candidates = [item for item in dict.fromkeys(pool) if item not in exclude]
    return rng.sample(candidates, min(k, len(candidates)))


def _shuffled(items: Sequence[str], rng: random.Random) -> List[str]:
    options = list(items)
    rng.shuffle(options)
    return options


def build_multi_select(
        prompt: str,
        correct: Iterable[str],
        distractor_pool: Iterable[str],
        rng: Optional[random.Random] = None,
        k: int = MULTI_SELECT_DISTRACTORS
) -> MultiSelectQuestion:
    """Question whose options are all correct answers plus up to k distractors."""
    rng = rng or random.Random()
    correct_answers = list(dict.fromkeys(correct))
    distractors = sample_distractors(distractor_pool, set(correct_answers), k, rng)
    return MultiSelectQuestion(
        question=prompt,
        correct_answers=correct_answers,
        options=_shuffled(correct_answers + distractors, rng)
    )


def build_single_select(
        prompt: str,
        correct_answer: str,
        distractor_pool: Iterable[str],
        rng: Optional[random.Random] = None,
        k: int = SINGLE_SELECT_DISTRACTORS
) -> SingleSelectQuestion:
    """Question with one correct answer plus up to k distractors."""
    rng = rng or random.Random()
    distractors = sample_distractors(distractor_pool, {correct_answer}, k, rng)
    return SingleSelectQuestion(
        question=prompt,
        correct_answer=correct_answer,
        options=_shuffled([correct_answer] + distractors, rng)
    )


def assemble_quiz(
        dishes: Sequence[Dish],
        rng: Optional[random.Random] = None,
        multi_select_k: int = MULTI_SELECT_DISTRACTORS,
        single_select_k: int = SINGLE_SELECT_DISTRACTORS
) -> List[QuizQuestion]:
    """
    Build an ingredient question and a description question for every dish.

    Ingredient distractors come from the ingredients of all dishes,
    including the dish itself; its own ingredients are excluded by the
    builder. Description distractors come from every other dish.
    """
    rng = rng or random.Random()
    all_ingredients = [name for dish in dishes for name in dish.ingredients]

    quiz: List[QuizQuestion] = []
    for dish in dishes:
        quiz.append(build_multi_select(
            f'Select all ingredients for "{dish.name}":',
            dish.ingredients,
            all_ingredients,
            rng,
            multi_select_k
        ))
        quiz.append(build_single_select(
            f'What is the correct description for "{dish.name}"?',
            dish.description,
            [other.description for other in dishes if other.id != dish.id],
            rng,
            single_select_k
        ))
    return quiz


class QuizService:
    """Generates self-quizzes from the current menu corpus."""

    def __init__(
            self,
            store: MenuStore,
            rng: Optional[random.Random] = None,
            multi_select_k: int = MULTI_SELECT_DISTRACTORS,
            single_select_k: int = SINGLE_SELECT_DISTRACTORS
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.multi_select_k = multi_select_k
        self.single_select_k = single_select_k

    async def generate_quiz(self) -> List[QuizQuestion]:
        dishes = await self.store.list_dishes_with_ingredients()
        quiz = assemble_quiz(dishes, self.rng, self.multi_select_k, self.single_select_k)
        logger.info(f"Generated quiz with {len(quiz)} questions for {len(dishes)} dishes")
        return quiz
