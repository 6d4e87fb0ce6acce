# practicals/entities.py
"""
Неизменяемые записи сессии редактирования: студент + упорядоченный список практических.

Все списки — кортежи, любое изменение делается через dataclasses.replace
(см. services/editing.py), поэтому одна и та же Practical никогда не меняется "на месте".
"""
from dataclasses import dataclass, field
from typing import Tuple

MAX_OUTPUTS = 3


@dataclass(frozen=True)
class StudentData:
    name: str = ""
    roll_no: str = ""
    course: str = ""


@dataclass(frozen=True)
class Question:
    # id нужен только UI и в сравнении не участвует
    id: str = field(compare=False)
    number: str = ""
    question_text: str = ""
    code: str = ""


@dataclass(frozen=True)
class Practical:
    practical_no: str = ""
    aim: str = ""
    questions: Tuple[Question, ...] = ()
    # сырые байты картинок (PNG), максимум MAX_OUTPUTS
    outputs: Tuple[bytes, ...] = ()
    conclusion: str = ""


@dataclass(frozen=True)
class Session:
    student: StudentData = field(default_factory=StudentData)
    practicals: Tuple[Practical, ...] = ()
