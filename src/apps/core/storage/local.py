"""
Local filesystem storage backend for development.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from django.conf import settings

from .document import DocumentStorage
from .schema import Collection


class LocalFileStorage(DocumentStorage):
    """
    Local filesystem storage backend.

    Each collection is one pretty-printed JSON array file, rewritten
    wholesale on every write.
    """

    kind = 'file'

    def __init__(self, base_path: Optional[str | Path] = None, read_only: bool = False):
        """
        Initialize local storage.

        Args:
            base_path: Directory holding the JSON files.
                      Defaults to settings.DATA_DIR
            read_only: Reject writes (managed host without a backend)
        """
        super().__init__(read_only=read_only)
        if base_path:
            self.base_path = Path(base_path)
        else:
            self.base_path = Path(getattr(settings, 'DATA_DIR', Path.cwd() / 'data'))

    def _get_full_path(self, collection: Collection) -> Path:
        return self.base_path / f'{collection.name}.json'

    def _load(self, collection: Collection) -> Optional[list]:
        file_path = self._get_full_path(collection)
        if not file_path.exists():
            return None

        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _dump(self, collection: Collection, records: list[dict]) -> None:
        file_path = self._get_full_path(collection)

        # Ensure parent directory exists
        file_path.parent.mkdir(parents=True, exist_ok=True)

        # Replace atomically: the file always holds a complete array
        fd, tmp_name = tempfile.mkstemp(dir=file_path.parent, prefix=f'.{file_path.name}.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def check(self) -> None:
        if self.base_path.exists() and not self.base_path.is_dir():
            raise NotADirectoryError(f'Data path is not a directory: {self.base_path}')
