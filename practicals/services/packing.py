import base64
import binascii
import io

from docx.document import Document

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DEFAULT_FILENAME = "practicals.docx"


def document_to_bytes(document: Document) -> bytes:
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


def encode_document(data: bytes) -> str:
    """Байты DOCX -> base64-строка для ответа клиенту."""
    return base64.b64encode(data).decode("ascii")


def decode_document(text: str) -> bytes:
    """
    base64-строка -> исходные байты DOCX.
    Мусор во входе — ValueError, ничего не "чиним".
    """
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid base64 document payload: {e}") from e
