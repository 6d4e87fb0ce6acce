"""
Клиентская сторона экспорта: flatten -> транспорт -> base64 -> файл practicals.docx.
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import requests
from django.conf import settings

from practicals.entities import Session

from .generation import check_student_data, generate_from_transport
from .packing import DEFAULT_FILENAME, decode_document
from .transport import Fields, Files, flatten

logger = logging.getLogger(__name__)


class ExportFailed(Exception):
    """Экспорт не удался (транспорт, разбор, генерация — для пользователя без разницы)."""


class ExportInProgress(ExportFailed):
    """Повторный вызов, пока предыдущий экспорт ещё идёт."""


class LocalTransport:
    """Вызывает генерацию в том же процессе, без HTTP."""

    def generate(self, fields: Fields, files: Files) -> str:
        return generate_from_transport(dict(fields), dict(files))


class HttpTransport:
    def __init__(self, url: Optional[str] = None, timeout: Optional[int] = None):
        self.url = url or settings.PRACTICALS_API_URL
        self.timeout = timeout or settings.PRACTICALS_HTTP_TIMEOUT

    def generate(self, fields: Fields, files: Files) -> str:
        multipart = [
            (key, (f"{key}.png", blob, "image/png"))
            for key, blob in files
        ]
        resp = requests.post(
            self.url,
            data=fields,
            files=multipart,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()


def save_download(data: bytes, directory: Union[str, Path], filename: str = DEFAULT_FILENAME) -> Path:
    """
    Пишет файл через временный файл в той же папке и атомарно переименовывает.
    Временный файл удаляется при любой ошибке.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / filename

    fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".practicals-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    return target


class PracticalsExporter:
    """
    Один экспорт за раз: is_generating — флаг "занято" для UI.
    Флаг снимается на любом выходе, ретраев нет.
    """

    def __init__(self, transport=None):
        self.transport = transport or LocalTransport()
        self.is_generating = False

    def export(
        self,
        session: Session,
        directory: Union[str, Path],
        filename: str = DEFAULT_FILENAME,
    ) -> Path:
        if self.is_generating:
            raise ExportInProgress("Export is already in progress")

        self.is_generating = True
        try:
            check_student_data(session.student)
            fields, files = flatten(session)
            encoded = self.transport.generate(fields, files)
            data = decode_document(encoded)
            path = save_download(data, directory, filename)
        except Exception as e:
            logger.exception("Error generating document")
            raise ExportFailed("Document generation failed") from e
        finally:
            self.is_generating = False

        logger.info("Saved practicals document to %s (%s bytes)", path, len(data))
        return path
