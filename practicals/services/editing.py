from dataclasses import replace
from typing import Callable, Iterable, Tuple

from practicals.entities import MAX_OUTPUTS, Practical, Question, Session

from .factories import new_practical, new_question

STUDENT_FIELDS = {"name", "roll_no", "course"}
PRACTICAL_FIELDS = {"practical_no", "aim", "conclusion"}
QUESTION_FIELDS = {"number", "question_text", "code"}


def _check_field(field: str, allowed: set) -> None:
    if field not in allowed:
        raise ValueError(f"Unsupported field: {field}")


def _check_index(items: Tuple, index: int, what: str) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"{what} index out of range: {index}")


def _replace_at(items: Tuple, index: int, value) -> Tuple:
    return items[:index] + (value,) + items[index + 1:]


def _remove_at(items: Tuple, index: int) -> Tuple:
    return items[:index] + items[index + 1:]


def _with_practical(
    session: Session,
    p_idx: int,
    change: Callable[[Practical], Practical],
) -> Session:
    """
    Копирует только ветку practicals[p_idx]; остальные практические остаются теми же объектами.
    """
    _check_index(session.practicals, p_idx, "Practical")
    updated = change(session.practicals[p_idx])
    return replace(session, practicals=_replace_at(session.practicals, p_idx, updated))


# ======================= Студент =======================


def update_student(session: Session, field: str, value: str) -> Session:
    _check_field(field, STUDENT_FIELDS)
    return replace(session, student=replace(session.student, **{field: value}))


# ======================= Практические =======================


def update_practical(session: Session, p_idx: int, field: str, value: str) -> Session:
    _check_field(field, PRACTICAL_FIELDS)
    return _with_practical(session, p_idx, lambda p: replace(p, **{field: value}))


def add_practical(session: Session) -> Session:
    practical = new_practical(str(len(session.practicals) + 1))
    return replace(session, practicals=session.practicals + (practical,))


def remove_practical(session: Session, p_idx: int) -> Session:
    _check_index(session.practicals, p_idx, "Practical")
    return replace(session, practicals=_remove_at(session.practicals, p_idx))


# ======================= Вопросы =======================


def update_question(
    session: Session,
    p_idx: int,
    q_idx: int,
    field: str,
    value: str,
) -> Session:
    _check_field(field, QUESTION_FIELDS)

    def change(practical: Practical) -> Practical:
        _check_index(practical.questions, q_idx, "Question")
        question: Question = replace(practical.questions[q_idx], **{field: value})
        return replace(practical, questions=_replace_at(practical.questions, q_idx, question))

    return _with_practical(session, p_idx, change)


def add_question(session: Session, p_idx: int) -> Session:
    def change(practical: Practical) -> Practical:
        question = new_question(str(len(practical.questions) + 1))
        return replace(practical, questions=practical.questions + (question,))

    return _with_practical(session, p_idx, change)


def remove_question(session: Session, p_idx: int, q_idx: int) -> Session:
    def change(practical: Practical) -> Practical:
        _check_index(practical.questions, q_idx, "Question")
        return replace(practical, questions=_remove_at(practical.questions, q_idx))

    return _with_practical(session, p_idx, change)


# ======================= Скриншоты =======================


def append_outputs(outputs: Tuple[bytes, ...], blobs: Iterable[bytes]) -> Tuple[bytes, ...]:
    """
    Дописывает новые картинки и обрезает до MAX_OUTPUTS.
    Остаются первые три по порядку добавления, лишние новые отбрасываются.
    """
    return (tuple(outputs) + tuple(blobs))[:MAX_OUTPUTS]


def add_outputs(session: Session, p_idx: int, blobs: Iterable[bytes]) -> Session:
    blobs = tuple(blobs)
    return _with_practical(
        session,
        p_idx,
        lambda p: replace(p, outputs=append_outputs(p.outputs, blobs)),
    )


def remove_output(session: Session, p_idx: int, o_idx: int) -> Session:
    def change(practical: Practical) -> Practical:
        _check_index(practical.outputs, o_idx, "Output")
        return replace(practical, outputs=_remove_at(practical.outputs, o_idx))

    return _with_practical(session, p_idx, change)
