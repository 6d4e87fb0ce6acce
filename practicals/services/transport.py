"""
Плоская транспортная кодировка сессии (multipart-поля + бинарные части) и обратная сборка.

Ключи:
  name, rollNo, course
  practical_{p}_no | practical_{p}_aim | practical_{p}_conclusion
  practical_{p}_question_{q}_number | _questionText | _code
  practical_{p}_output_{o}  — бинарная часть (байты картинки)

Явных длин списков нет: при разборе перебираем ординалы 0, 1, 2, ...
до первого отсутствующего ключа.
"""
import logging
import re
from typing import Any, List, Mapping, Set, Tuple

from practicals.entities import Practical, Question, Session, StudentData

from .factories import generate_id

logger = logging.getLogger(__name__)

Fields = List[Tuple[str, str]]
Files = List[Tuple[str, bytes]]

STUDENT_KEYS = (
    ("name", "name"),
    ("rollNo", "roll_no"),
    ("course", "course"),
)
PRACTICAL_SUFFIXES = (
    ("no", "practical_no"),
    ("aim", "aim"),
    ("conclusion", "conclusion"),
)
QUESTION_SUFFIXES = (
    ("number", "number"),
    ("questionText", "question_text"),
    ("code", "code"),
)

_PRACTICAL_KEY_RE = re.compile(r"^practical_\d+_")


class StructuralDecodeError(ValueError):
    """Плоские поля не складываются в дерево (пропущен обязательный ключ или дыра в ординалах)."""


def practical_key(p: int, suffix: str) -> str:
    return f"practical_{p}_{suffix}"


def question_key(p: int, q: int, suffix: str) -> str:
    return f"practical_{p}_question_{q}_{suffix}"


def output_key(p: int, o: int) -> str:
    return f"practical_{p}_output_{o}"


# ======================= Flatten =======================


def flatten(session: Session) -> Tuple[Fields, Files]:
    """
    Раскладывает сессию в упорядоченные (ключ, значение) поля и (ключ, байты) части.
    id вопросов не передаются.
    """
    fields: Fields = []
    files: Files = []

    for key, attr in STUDENT_KEYS:
        fields.append((key, getattr(session.student, attr)))

    for p, practical in enumerate(session.practicals):
        for suffix, attr in PRACTICAL_SUFFIXES:
            fields.append((practical_key(p, suffix), getattr(practical, attr)))

        for q, question in enumerate(practical.questions):
            for suffix, attr in QUESTION_SUFFIXES:
                fields.append((question_key(p, q, suffix), getattr(question, attr)))

        for o, blob in enumerate(practical.outputs):
            files.append((output_key(p, o), blob))

    return fields, files


# ======================= Reconstruct =======================


def _read_part(part: Any) -> bytes:
    if isinstance(part, (bytes, bytearray, memoryview)):
        return bytes(part)
    # UploadedFile и прочие file-like: читаем целиком
    if hasattr(part, "seek"):
        part.seek(0)
    return part.read()


def _require(fields: Mapping[str, Any], key: str, consumed: Set[str]) -> str:
    if key not in fields:
        raise StructuralDecodeError(f"Missing required field '{key}'")
    consumed.add(key)
    value = fields[key]
    return "" if value is None else str(value)


def _group_exists(fields: Mapping[str, Any], keys: List[str]) -> bool:
    return any(k in fields for k in keys)


def _decode_questions(fields: Mapping[str, Any], p: int, consumed: Set[str]) -> Tuple[Question, ...]:
    questions: List[Question] = []
    q = 0
    while True:
        keys = [question_key(p, q, suffix) for suffix, _ in QUESTION_SUFFIXES]
        if not _group_exists(fields, keys):
            break
        values = {
            attr: _require(fields, key, consumed)
            for key, (_, attr) in zip(keys, QUESTION_SUFFIXES)
        }
        questions.append(Question(id=generate_id(), **values))
        q += 1
    return tuple(questions)


def _decode_outputs(files: Mapping[str, Any], p: int, consumed: Set[str]) -> Tuple[bytes, ...]:
    outputs: List[bytes] = []
    o = 0
    while output_key(p, o) in files:
        key = output_key(p, o)
        consumed.add(key)
        outputs.append(_read_part(files[key]))
        o += 1
    return tuple(outputs)


def _check_leftovers(mapping: Mapping[str, Any], consumed: Set[str]) -> None:
    leftovers = sorted(
        key for key in mapping
        if _PRACTICAL_KEY_RE.match(key) and key not in consumed
    )
    if leftovers:
        raise StructuralDecodeError(
            f"Fields out of ordinal sequence: {', '.join(leftovers)}"
        )


def reconstruct(fields: Mapping[str, Any], files: Mapping[str, Any]) -> Session:
    """
    Собирает Session из плоских полей и бинарных частей.

    fields/files — любые mapping'и с `in` и `[]` (QueryDict, MultiValueDict, dict).
    Если у найденного ординала нет обязательного соседнего поля
    или после перебора остались "лишние" practical_* ключи — StructuralDecodeError,
    никаких подстановок по умолчанию.
    """
    consumed: Set[str] = set()

    student = StudentData(**{
        attr: _require(fields, key, consumed) for key, attr in STUDENT_KEYS
    })

    practicals: List[Practical] = []
    p = 0
    while True:
        keys = [practical_key(p, suffix) for suffix, _ in PRACTICAL_SUFFIXES]
        if not _group_exists(fields, keys):
            break
        values = {
            attr: _require(fields, key, consumed)
            for key, (_, attr) in zip(keys, PRACTICAL_SUFFIXES)
        }
        practicals.append(
            Practical(
                questions=_decode_questions(fields, p, consumed),
                outputs=_decode_outputs(files, p, consumed),
                **values,
            )
        )
        p += 1

    _check_leftovers(fields, consumed)
    _check_leftovers(files, consumed)

    logger.debug(
        "Reconstructed session: %s practicals, %s images",
        len(practicals),
        sum(len(pr.outputs) for pr in practicals),
    )
    return Session(student=student, practicals=tuple(practicals))
