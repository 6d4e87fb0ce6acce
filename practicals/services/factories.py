import random
import uuid

from practicals.entities import Practical, Question, Session, StudentData


def generate_id() -> str:
    """
    Уникальный id для записи: 32 hex-символа uuid4.
    Если системного источника случайности нет — тот же uuid4, но из обычного random.
    """
    try:
        return uuid.uuid4().hex
    except NotImplementedError:
        return uuid.UUID(int=random.getrandbits(128), version=4).hex


def new_question(number: str) -> Question:
    return Question(id=generate_id(), number=number, question_text="", code="")


def new_practical(practical_no: str) -> Practical:
    """
    Новая практическая: пустые aim/conclusion, без скриншотов и с одним вопросом "1".
    """
    return Practical(
        practical_no=practical_no,
        aim="",
        questions=(new_question("1"),),
        outputs=(),
        conclusion="",
    )


def new_session() -> Session:
    return Session(student=StudentData(), practicals=(new_practical("1"),))
