import logging

from django.http import HttpResponse
from rest_framework import generics, status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from drf_spectacular.utils import extend_schema, OpenApiResponse
from drf_spectacular.types import OpenApiTypes

from .serializers import PracticalsFormSerializer, StudentDataSerializer
from .services.generation import GenerationFailed, build_docx, generate_document
from .services.packing import DEFAULT_FILENAME, DOCX_MIME_TYPE
from .services.preview import render_preview
from .services.transport import StructuralDecodeError, reconstruct

logger = logging.getLogger(__name__)


class DocumentGenerationError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Document generation failed"
    default_code = "generation_failed"


FORM_DESCRIPTION = (
    "Тело — multipart/form-data с плоскими ключами:\n"
    "- `name`, `rollNo`, `course`;\n"
    "- `practical_{p}_no|aim|conclusion`;\n"
    "- `practical_{p}_question_{q}_number|questionText|code`;\n"
    "- `practical_{p}_output_{o}` — файл картинки (PNG).\n\n"
    "Ординалы p, q, o начинаются с 0 и идут без пропусков."
)


class PracticalsFormView(generics.GenericAPIView):
    """
    Общий разбор формы: сборка Session + (для экспорта) проверка данных студента.
    """

    parser_classes = (MultiPartParser, FormParser)
    serializer_class = StudentDataSerializer

    def get_session(self, request, *, validate_student: bool = True):
        # предпросмотр показывает форму в процессе заполнения — пустые поля допустимы
        if validate_student:
            serializer = self.get_serializer(data=request.POST)
            serializer.is_valid(raise_exception=True)

        try:
            return reconstruct(request.POST, request.FILES)
        except StructuralDecodeError as e:
            logger.warning("Rejected practicals form: %s", e)
            raise ValidationError({"detail": str(e)})


@extend_schema(
    tags=["Practicals"],
    summary="Сгенерировать DOCX и вернуть его в base64",
    description=FORM_DESCRIPTION + "\n\nОтвет — одна JSON-строка: base64 готового DOCX.",
    request={"multipart/form-data": PracticalsFormSerializer},
    responses={
        200: OpenApiResponse(description="base64 DOCX-файла", response=OpenApiTypes.STR),
        400: OpenApiResponse(description="Неполные данные студента или сломанная структура полей"),
        500: OpenApiResponse(description="Ошибка генерации документа"),
    },
)
class PracticalDocumentView(PracticalsFormView):
    def post(self, request, *args, **kwargs):
        session = self.get_session(request)

        try:
            encoded = generate_document(session)
        except GenerationFailed:
            raise DocumentGenerationError()

        return Response(encoded, status=status.HTTP_200_OK)


@extend_schema(
    tags=["Practicals"],
    summary="Сгенерировать DOCX и отдать файлом",
    description=FORM_DESCRIPTION,
    request={"multipart/form-data": PracticalsFormSerializer},
    responses={
        (200, DOCX_MIME_TYPE): OpenApiResponse(description="practicals.docx", response=OpenApiTypes.BINARY),
        400: OpenApiResponse(description="Неполные данные студента или сломанная структура полей"),
        500: OpenApiResponse(description="Ошибка генерации документа"),
    },
)
class PracticalDocumentDownloadView(PracticalsFormView):
    def post(self, request, *args, **kwargs):
        session = self.get_session(request)

        try:
            content = build_docx(session)
        except GenerationFailed:
            raise DocumentGenerationError()

        resp = HttpResponse(content, content_type=DOCX_MIME_TYPE)
        resp["Content-Disposition"] = f'attachment; filename="{DEFAULT_FILENAME}"'
        return resp


@extend_schema(
    tags=["Practicals"],
    summary="HTML-предпросмотр документа",
    description=FORM_DESCRIPTION + "\n\nКартинки встраиваются как data URI.",
    request={"multipart/form-data": PracticalsFormSerializer},
    responses={
        (200, "text/html"): OpenApiResponse(description="HTML-предпросмотр", response=OpenApiTypes.STR),
    },
)
class PracticalPreviewView(PracticalsFormView):
    def post(self, request, *args, **kwargs):
        session = self.get_session(request, validate_student=False)
        return HttpResponse(render_preview(session), content_type="text/html; charset=utf-8")
