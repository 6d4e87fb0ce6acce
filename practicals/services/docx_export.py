import io
from typing import Optional

from docx import Document as DocxDocument
from docx.document import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_BREAK
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Inches, Pt, Twips
from docx.text.paragraph import Paragraph
from docx.text.run import Run

from practicals.entities import Practical, Question, Session

BODY_FONT = "Times New Roman"
CODE_FONT = "Courier New"
FONT_SIZE = Pt(14)
PAGE_MARGIN = Inches(1)

# картинки всегда 600x400 px (96 dpi), без подгонки пропорций
EMU_PER_PIXEL = 9525
IMAGE_WIDTH = Emu(600 * EMU_PER_PIXEL)
IMAGE_HEIGHT = Emu(400 * EMU_PER_PIXEL)

SPACE_LARGE = Twips(400)
SPACE_SMALL = Twips(200)


def _set_font(run: Run, font_name: str) -> None:
    run.font.name = font_name
    # eastAsia / cs тоже, иначе Word подставит шрифт темы
    rPr = run._r.get_or_add_rPr()
    rFonts = rPr.find(qn("w:rFonts"))
    if rFonts is None:
        rFonts = OxmlElement("w:rFonts")
        rPr.insert(0, rFonts)
    rFonts.set(qn("w:eastAsia"), font_name)
    rFonts.set(qn("w:cs"), font_name)


def _add_run(
    para: Paragraph,
    text: str,
    *,
    bold: bool = False,
    underline: bool = False,
    font_name: str = BODY_FONT,
) -> Run:
    run = para.add_run(text)
    run.font.size = FONT_SIZE
    if bold:
        run.font.bold = True
    if underline:
        run.font.underline = True
    _set_font(run, font_name)
    return run


def _spacing(para: Paragraph, *, before: Optional[Twips] = None, after: Optional[Twips] = None) -> None:
    if before is not None:
        para.paragraph_format.space_before = before
    if after is not None:
        para.paragraph_format.space_after = after


def _add_label(doc: Document, text: str, *, underline: bool = True, before=None, after=SPACE_SMALL) -> Paragraph:
    para = doc.add_paragraph()
    _add_run(para, text, bold=True, underline=underline)
    _spacing(para, before=before, after=after)
    return para


def _add_text(doc: Document, text: str, *, after=None) -> Paragraph:
    para = doc.add_paragraph()
    _add_run(para, text)
    _spacing(para, after=after)
    return para


def split_code_lines(code: str) -> list:
    """
    Одна строка кода = один абзац, пустые строки сохраняем.
    CRLF из multipart-формы приводим к LF.
    """
    return (code or "").replace("\r\n", "\n").split("\n")


def _add_header(doc: Document, session: Session) -> None:
    section = doc.sections[0]
    header = section.header
    header.is_linked_to_previous = False

    student = session.student
    lines = [student.name, f"Roll no. {student.roll_no}", student.course]

    for i, line in enumerate(lines):
        para = header.paragraphs[0] if i == 0 else header.add_paragraph()
        para.alignment = WD_ALIGN_PARAGRAPH.RIGHT
        _add_run(para, line)


def _add_question(doc: Document, question: Question) -> None:
    _add_label(doc, f"Question {question.number}:")
    _add_text(doc, question.question_text, after=SPACE_SMALL)
    _add_label(doc, "Code:", underline=False)

    for line in split_code_lines(question.code):
        para = doc.add_paragraph()
        _add_run(para, line, font_name=CODE_FONT)


def _add_practical(doc: Document, practical: Practical) -> None:
    heading = doc.add_paragraph()
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _add_run(heading, "PRACTICAL No. ", bold=True, underline=True)
    _add_run(heading, practical.practical_no, bold=True, underline=True)
    _spacing(heading, after=SPACE_LARGE)

    aim = doc.add_paragraph()
    _add_run(aim, "AIM: ", bold=True, underline=True)
    _add_run(aim, practical.aim)
    _spacing(aim, after=SPACE_LARGE)

    for question in practical.questions:
        _add_question(doc, question)

    _add_label(doc, "OUTPUT:", before=SPACE_LARGE)
    for blob in practical.outputs:
        # формат не проверяем: битые байты — ошибка python-docx
        doc.add_paragraph().add_run().add_picture(
            io.BytesIO(blob),
            width=IMAGE_WIDTH,
            height=IMAGE_HEIGHT,
        )

    _add_label(doc, "CONCLUSION:", before=SPACE_LARGE)
    _add_text(doc, practical.conclusion)


def add_page_break(doc: Document) -> Paragraph:
    para = doc.add_paragraph()
    para.add_run().add_break(WD_BREAK.PAGE)
    return para


def build_document(session: Session) -> Document:
    """
    Собирает DOCX-модель по фиксированной вёрстке:
    шапка (имя / Roll no. / курс) справа на каждой странице, поля 1",
    затем практические по порядку, между ними — принудительный разрыв страницы
    (после последней разрыва нет).
    """
    doc = DocxDocument()

    section = doc.sections[0]
    section.top_margin = PAGE_MARGIN
    section.right_margin = PAGE_MARGIN
    section.bottom_margin = PAGE_MARGIN
    section.left_margin = PAGE_MARGIN

    _add_header(doc, session)

    last = len(session.practicals) - 1
    for index, practical in enumerate(session.practicals):
        _add_practical(doc, practical)
        if index < last:
            add_page_break(doc)

    return doc
