import pytest

from practicals.entities import Practical, Question, Session, StudentData

from .utils import make_png


@pytest.fixture
def png_factory():
    """Factory for small real PNG images (different colors give different bytes)."""
    return make_png


@pytest.fixture
def sample_session(png_factory):
    """The single-practical session used across the end-to-end checks."""
    return Session(
        student=StudentData(name="Jane Doe", roll_no="42", course="CS101"),
        practicals=(
            Practical(
                practical_no="1",
                aim="Test sort",
                questions=(
                    Question(
                        id="q-1",
                        number="1",
                        question_text="Sort an array",
                        code="for i in arr:\n  print(i)",
                    ),
                ),
                outputs=(png_factory("red"),),
                conclusion="Works",
            ),
        ),
    )


@pytest.fixture
def multi_session(png_factory):
    """Three practicals with several questions and images."""
    return Session(
        student=StudentData(name="John Roe", roll_no="7", course="MCA"),
        practicals=(
            Practical(
                practical_no="1",
                aim="Stacks",
                questions=(
                    Question(id="a", number="1", question_text="Push", code="s.push(1)"),
                    Question(id="b", number="2", question_text="Pop", code="s.pop()\n\nprint(s)"),
                ),
                outputs=(png_factory("red"), png_factory("green")),
                conclusion="Stack works",
            ),
            Practical(
                practical_no="2",
                aim="Queues",
                questions=(Question(id="c", number="1", question_text="Enqueue", code=""),),
                outputs=(),
                conclusion="Queue works",
            ),
            Practical(
                practical_no="3",
                aim="Trees",
                questions=(Question(id="d", number="1a", question_text="Insert", code="t.insert(5)"),),
                outputs=(png_factory("blue"), png_factory("black"), png_factory("yellow")),
                conclusion="Tree works",
            ),
        ),
    )
