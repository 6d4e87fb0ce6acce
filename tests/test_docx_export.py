from dataclasses import replace

import pytest
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt, Twips

from practicals.entities import Question
from practicals.services.docx_export import (
    CODE_FONT,
    BODY_FONT,
    IMAGE_HEIGHT,
    IMAGE_WIDTH,
    build_document,
    split_code_lines,
)

from .utils import body_texts, has_image, is_page_break


def _with_code(session, code):
    practical = session.practicals[0]
    question = replace(practical.questions[0], code=code)
    return replace(session, practicals=(replace(practical, questions=(question,)),))


def _code_paragraphs(document):
    return [
        p for p in document.paragraphs
        if p.runs and p.runs[0].font.name == CODE_FONT
    ]


def test_single_practical_layout(sample_session):
    doc = build_document(sample_session)

    assert body_texts(doc) == [
        "PRACTICAL No. 1",
        "AIM: Test sort",
        "Question 1:",
        "Sort an array",
        "Code:",
        "for i in arr:",
        "  print(i)",
        "OUTPUT:",
        "",
        "CONCLUSION:",
        "Works",
    ]
    assert has_image(doc.paragraphs[8])
    assert not any(is_page_break(p) for p in doc.paragraphs)


def test_header_lines_are_right_aligned(sample_session):
    header = build_document(sample_session).sections[0].header

    assert [p.text for p in header.paragraphs] == ["Jane Doe", "Roll no. 42", "CS101"]
    assert all(p.alignment == WD_ALIGN_PARAGRAPH.RIGHT for p in header.paragraphs)
    assert all(r.font.name == BODY_FONT and r.font.size == Pt(14) for p in header.paragraphs for r in p.runs)


def test_page_margins_are_one_inch(sample_session):
    section = build_document(sample_session).sections[0]

    assert section.top_margin == Inches(1)
    assert section.right_margin == Inches(1)
    assert section.bottom_margin == Inches(1)
    assert section.left_margin == Inches(1)


def test_heading_and_label_styles(sample_session):
    paragraphs = build_document(sample_session).paragraphs
    heading, aim, q_label, q_text, code_label = paragraphs[:5]

    assert heading.alignment == WD_ALIGN_PARAGRAPH.CENTER
    assert all(r.bold and r.underline for r in heading.runs)
    assert heading.paragraph_format.space_after == Twips(400)

    label, text = aim.runs
    assert label.text == "AIM: " and label.bold and label.underline
    assert text.text == "Test sort" and not text.bold and not text.underline

    assert q_label.runs[0].bold and q_label.runs[0].underline
    assert not q_text.runs[0].bold
    assert code_label.runs[0].bold and not code_label.runs[0].underline

    output_label = paragraphs[7]
    assert output_label.paragraph_format.space_before == Twips(400)
    assert output_label.paragraph_format.space_after == Twips(200)


def test_prose_and_code_fonts(sample_session):
    doc = build_document(sample_session)

    code = _code_paragraphs(doc)
    assert [p.text for p in code] == ["for i in arr:", "  print(i)"]
    for p in doc.paragraphs:
        for run in p.runs:
            if run.text:
                assert run.font.size == Pt(14)
                assert run.font.name in (BODY_FONT, CODE_FONT)


def test_blank_code_lines_become_empty_paragraphs(sample_session):
    doc = build_document(_with_code(sample_session, "a\n\nb"))

    assert [p.text for p in _code_paragraphs(doc)] == ["a", "", "b"]


def test_crlf_is_split_like_lf():
    assert split_code_lines("a\r\n\r\nb") == ["a", "", "b"]
    assert split_code_lines("") == [""]


def test_images_use_fixed_box(multi_session):
    doc = build_document(multi_session)

    assert len(doc.inline_shapes) == 5
    for shape in doc.inline_shapes:
        assert shape.width == IMAGE_WIDTH
        assert shape.height == IMAGE_HEIGHT


def test_page_breaks_between_practicals_only(multi_session):
    doc = build_document(multi_session)
    paragraphs = doc.paragraphs
    texts = body_texts(doc)

    headings = [i for i, t in enumerate(texts) if t.startswith("PRACTICAL No. ")]
    breaks = [i for i, p in enumerate(paragraphs) if is_page_break(p)]

    assert len(headings) == 3
    assert len(breaks) == 2
    for b in breaks:
        assert texts[b - 2] == "CONCLUSION:"
        assert texts[b + 1].startswith("PRACTICAL No. ")
    assert not is_page_break(paragraphs[-1])
    assert texts[-1] == "Tree works"


def test_questions_keep_order_and_free_text_numbers(multi_session):
    texts = body_texts(build_document(multi_session))

    labels = [t for t in texts if t.startswith("Question ")]
    assert labels == ["Question 1:", "Question 2:", "Question 1:", "Question 1a:"]


def test_empty_session_has_header_only():
    from practicals.entities import Session, StudentData

    doc = build_document(Session(student=StudentData("A", "1", "C"), practicals=()))

    assert doc.paragraphs == []
    assert [p.text for p in doc.sections[0].header.paragraphs] == ["A", "Roll no. 1", "C"]


def test_bad_image_bytes_raise(sample_session):
    practical = replace(sample_session.practicals[0], outputs=(b"not an image",))
    session = replace(sample_session, practicals=(practical,))

    with pytest.raises(Exception):
        build_document(session)
