import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.http import QueryDict
from django.utils.datastructures import MultiValueDict

from practicals.entities import Session, StudentData
from practicals.services.transport import StructuralDecodeError, flatten, reconstruct


def _as_request_parts(fields, files):
    qd = QueryDict(mutable=True)
    for key, value in fields:
        qd.appendlist(key, value)
    uploads = MultiValueDict()
    for key, blob in files:
        uploads.appendlist(key, SimpleUploadedFile(f"{key}.png", blob, content_type="image/png"))
    return qd, uploads


def test_flatten_key_layout(multi_session):
    fields, files = flatten(multi_session)
    keys = [k for k, _ in fields]

    assert keys[:3] == ["name", "rollNo", "course"]
    assert keys[3:6] == ["practical_0_no", "practical_0_aim", "practical_0_conclusion"]
    assert "practical_0_question_1_questionText" in keys
    assert "practical_2_question_0_code" in keys
    assert [k for k, _ in files] == [
        "practical_0_output_0",
        "practical_0_output_1",
        "practical_2_output_0",
        "practical_2_output_1",
        "practical_2_output_2",
    ]
    assert not any(k.endswith("_id") for k in keys)


def test_round_trip_with_plain_dicts(multi_session):
    fields, files = flatten(multi_session)

    assert reconstruct(dict(fields), dict(files)) == multi_session


def test_round_trip_with_django_request_structures(multi_session):
    qd, uploads = _as_request_parts(*flatten(multi_session))

    restored = reconstruct(qd, uploads)

    assert restored == multi_session
    assert restored.practicals[2].outputs == multi_session.practicals[2].outputs


def test_reconstruct_assigns_fresh_question_ids(sample_session):
    fields, files = flatten(sample_session)

    restored = reconstruct(dict(fields), dict(files))

    assert restored.practicals[0].questions[0].id != "q-1"


def test_no_practicals_is_empty_list():
    restored = reconstruct({"name": "A", "rollNo": "1", "course": "C"}, {})

    assert restored == Session(student=StudentData("A", "1", "C"), practicals=())


def test_missing_no_with_aim_present_is_error(sample_session):
    fields, files = flatten(sample_session)
    data = dict(fields)
    del data["practical_0_no"]

    with pytest.raises(StructuralDecodeError, match="practical_0_no"):
        reconstruct(data, dict(files))


def test_missing_question_sibling_is_error(sample_session):
    fields, files = flatten(sample_session)
    data = dict(fields)
    del data["practical_0_question_0_code"]

    with pytest.raises(StructuralDecodeError, match="practical_0_question_0_code"):
        reconstruct(data, dict(files))


def test_missing_student_field_is_error(sample_session):
    fields, files = flatten(sample_session)
    data = dict(fields)
    del data["rollNo"]

    with pytest.raises(StructuralDecodeError, match="rollNo"):
        reconstruct(data, dict(files))


def test_gap_in_practical_ordinals_is_error(multi_session):
    fields, files = flatten(multi_session)
    data = {k: v for k, v in fields if not k.startswith("practical_1_")}

    with pytest.raises(StructuralDecodeError, match="practical_2_"):
        reconstruct(data, dict(files))


def test_gap_in_output_ordinals_is_error(multi_session):
    fields, files = flatten(multi_session)
    parts = {k: v for k, v in files if k != "practical_2_output_1"}

    with pytest.raises(StructuralDecodeError, match="practical_2_output_2"):
        reconstruct(dict(fields), parts)


def test_empty_strings_and_blank_lines_survive(png_factory):
    from practicals.entities import Practical, Question

    session = Session(
        student=StudentData("", "", ""),
        practicals=(
            Practical(
                practical_no="",
                aim="",
                questions=(Question(id="x", number="", question_text="", code="\n\n  x\n"),),
                outputs=(png_factory("white"),),
                conclusion="",
            ),
        ),
    )
    qd, uploads = _as_request_parts(*flatten(session))

    assert reconstruct(qd, uploads) == session
