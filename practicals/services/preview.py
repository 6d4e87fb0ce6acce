"""
Предпросмотр: та же структура, что в docx_export, но в виде словаря для HTML-шаблона.
Байт-в-байт совпадение с DOCX не требуется — только порядок и состав блоков.
"""
import base64
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from django.template.loader import render_to_string

from practicals.entities import Practical, Session

from .docx_export import split_code_lines

logger = logging.getLogger(__name__)

ImageRef = Callable[[bytes], str]

PREVIEW_TEMPLATE = "practicals/preview.html"


def data_uri(blob: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(blob).decode('ascii')}"


def _project_practical(practical: Practical, image_ref: ImageRef, page_break_after: bool) -> Dict[str, Any]:
    return {
        "heading": f"PRACTICAL No. {practical.practical_no}",
        "aim": practical.aim,
        "questions": [
            {
                "label": f"Question {q.number}:",
                "text": q.question_text,
                "code_lines": split_code_lines(q.code),
            }
            for q in practical.questions
        ],
        "outputs": [image_ref(blob) for blob in practical.outputs],
        "conclusion": practical.conclusion,
        "page_break_after": page_break_after,
    }


def project(session: Session, image_ref: ImageRef) -> Dict[str, Any]:
    student = session.student
    last = len(session.practicals) - 1
    return {
        "header": [student.name, f"Roll no. {student.roll_no}", student.course],
        "practicals": [
            _project_practical(p, image_ref, page_break_after=index < last)
            for index, p in enumerate(session.practicals)
        ],
    }


def render_preview(session: Session, image_ref: ImageRef = data_uri) -> str:
    return render_to_string(PREVIEW_TEMPLATE, {"preview": project(session, image_ref)})


# ======================= Временные ссылки на картинки =======================


class ImageRefRegistry:
    """
    Аналог object URL: create() выдаёт непрозрачную ссылку blob:<id>,
    revoke() её освобождает. Живые ссылки можно посмотреть через active_count.
    """

    def __init__(self):
        self._blobs: Dict[str, bytes] = {}

    def create(self, blob: bytes) -> str:
        ref = f"blob:{uuid.uuid4().hex}"
        self._blobs[ref] = blob
        return ref

    def resolve(self, ref: str) -> bytes:
        try:
            return self._blobs[ref]
        except KeyError:
            raise KeyError(f"Unknown or revoked image reference: {ref}")

    def revoke(self, ref: str) -> None:
        self._blobs.pop(ref, None)

    @property
    def active_count(self) -> int:
        return len(self._blobs)


class OutputRefs:
    """
    Ссылки на скриншоты одной практической.
    При смене списка картинок все старые ссылки освобождаются до создания новых;
    close() (или выход из with) освобождает всё, в том числе при ошибке.
    """

    def __init__(self, registry: ImageRefRegistry):
        self.registry = registry
        self._outputs: Optional[Tuple[bytes, ...]] = None
        self._refs: List[str] = []

    def sync(self, outputs: Sequence[bytes]) -> List[str]:
        outputs = tuple(outputs)
        if outputs == self._outputs:
            return list(self._refs)

        self.release()
        self._outputs = outputs
        self._refs = [self.registry.create(blob) for blob in outputs]
        return list(self._refs)

    def release(self) -> None:
        for ref in self._refs:
            self.registry.revoke(ref)
        self._refs = []
        self._outputs = None

    close = release

    @property
    def refs(self) -> List[str]:
        return list(self._refs)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
