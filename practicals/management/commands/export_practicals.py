import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from practicals.entities import Practical, Question, Session, StudentData
from practicals.services.editing import append_outputs
from practicals.services.export import ExportFailed, HttpTransport, LocalTransport, PracticalsExporter
from practicals.services.factories import generate_id
from practicals.services.generation import IncompleteStudentData, check_student_data
from practicals.services.packing import DEFAULT_FILENAME


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _objects(data: dict, key: str, what: str) -> list:
    items = data.get(key) or []
    if not isinstance(items, list) or not all(isinstance(x, dict) for x in items):
        raise CommandError(f"'{key}' must be a list of {what} objects")
    return items


def load_session(path: Path) -> Session:
    """
    Читает описание сессии из JSON (ключи как во фронтовой форме).
    outputs — пути к картинкам относительно JSON-файла.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise CommandError(f"Cannot read session file {path}: {e}")

    if not isinstance(data, dict):
        raise CommandError(f"Session file {path} must contain a JSON object")

    base = path.parent
    practicals = []
    for p in _objects(data, "practicals", "practical"):
        questions = tuple(
            Question(
                id=generate_id(),
                number=_text(q, "number"),
                question_text=_text(q, "questionText"),
                code=_text(q, "code"),
            )
            for q in _objects(p, "questions", "question")
        )

        outputs = p.get("outputs") or []
        if not isinstance(outputs, list):
            raise CommandError("'outputs' must be a list of image paths")

        blobs = []
        for image in outputs:
            image_path = base / str(image)
            try:
                blobs.append(image_path.read_bytes())
            except OSError as e:
                raise CommandError(f"Cannot read output image {image_path}: {e}")

        practicals.append(
            Practical(
                practical_no=_text(p, "practicalNo"),
                aim=_text(p, "aim"),
                questions=questions,
                outputs=append_outputs((), blobs),
                conclusion=_text(p, "conclusion"),
            )
        )

    student = StudentData(
        name=_text(data, "name"),
        roll_no=_text(data, "rollNo"),
        course=_text(data, "course"),
    )
    return Session(student=student, practicals=tuple(practicals))


class Command(BaseCommand):
    help = "Export practicals from a JSON session file into a DOCX document."

    def add_arguments(self, parser):
        parser.add_argument("session_file", help="JSON file with student data and practicals")
        parser.add_argument("--output-dir", default=".", help="Where to save the document")
        parser.add_argument("--filename", default=DEFAULT_FILENAME)
        parser.add_argument(
            "--url",
            default=None,
            help="Document API endpoint; without it the document is built in-process",
        )

    def handle(self, *args, **options):
        session = load_session(Path(options["session_file"]))
        try:
            check_student_data(session.student)
        except IncompleteStudentData as e:
            raise CommandError(str(e))

        if options["url"]:
            transport = HttpTransport(url=options["url"])
        else:
            transport = LocalTransport()

        exporter = PracticalsExporter(transport)
        try:
            path = exporter.export(session, options["output_dir"], options["filename"])
        except ExportFailed as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(f"Saved {path}"))
