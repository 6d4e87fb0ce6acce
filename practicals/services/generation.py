import logging
from typing import Any, Mapping

from practicals.entities import Session, StudentData
from practicals.serializers import StudentDataSerializer

from .docx_export import build_document
from .packing import document_to_bytes, encode_document
from .transport import reconstruct

logger = logging.getLogger(__name__)


class GenerationFailed(Exception):
    """Не удалось собрать или сохранить DOCX (в т.ч. битая картинка)."""


class IncompleteStudentData(ValueError):
    """Имя, Roll no. или курс не заполнены — экспорт с пустой шапкой не делаем."""


def check_student_data(student: StudentData) -> None:
    """
    Те же правила, что и у API: все три поля обязательны и непустые.
    """
    serializer = StudentDataSerializer(
        data={"name": student.name, "rollNo": student.roll_no, "course": student.course}
    )
    if not serializer.is_valid():
        raise IncompleteStudentData(
            f"Student data is incomplete: {', '.join(sorted(serializer.errors))}"
        )


def build_docx(session: Session) -> bytes:
    """
    Собирает DOCX для сессии и возвращает байты файла.
    """
    try:
        doc = build_document(session)
        data = document_to_bytes(doc)
    except Exception as e:
        logger.exception(
            "Failed to build practicals DOCX (%s practicals)",
            len(session.practicals),
        )
        raise GenerationFailed("Document generation failed") from e

    logger.info(
        "Built practicals DOCX: %s practicals, %s bytes",
        len(session.practicals),
        len(data),
    )
    return data


def generate_document(session: Session) -> str:
    """
    DOCX в base64 — то, что уходит обратно клиенту.
    """
    return encode_document(build_docx(session))


def generate_from_transport(fields: Mapping[str, Any], files: Mapping[str, Any]) -> str:
    """
    Полный серверный путь: плоские поля -> Session -> DOCX -> base64.
    StructuralDecodeError пробрасывается как есть.
    """
    session = reconstruct(fields, files)
    return generate_document(session)
