import io

import docx
from docx.oxml.ns import qn
from PIL import Image


def make_png(color="white", size=(40, 20)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="PNG")
    return buf.getvalue()


def open_docx(data: bytes):
    return docx.Document(io.BytesIO(data))


def is_page_break(paragraph) -> bool:
    return any(br.get(qn("w:type")) == "page" for br in paragraph._p.iter(qn("w:br")))


def has_image(paragraph) -> bool:
    return any(True for _ in paragraph._p.iter(qn("pic:pic")))


def body_texts(document) -> list:
    return [p.text for p in document.paragraphs]
