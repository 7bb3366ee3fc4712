"""
Archive packager for per-student PDF bundles
Writes a zip archive incrementally and hands out the bytes as they are produced
"""

import io
import re
import zipfile
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models.records import Omission
from utils.errors import PackagingError
from utils.logger import get_logger

log = get_logger('archive')

_UNSAFE_NAME_CHARS = re.compile(r'[^A-Za-z0-9._-]')

MANIFEST_NAME = 'omitted.txt'


def entry_name_for(identifier, prefix='report_', extension='.pdf'):
    """Stable archive entry name for a student identifier"""
    return f"{prefix}{_UNSAFE_NAME_CHARS.sub('_', str(identifier))}{extension}"


@dataclass(frozen=True)
class NamedDocument:
    identifier: str
    content: Optional[bytes] = None
    error: Optional[str] = None


class _ChunkSink(io.RawIOBase):
    """Non-seekable write target; zipfile falls back to data descriptors"""

    def __init__(self):
        super().__init__()
        self._chunks = []

    def writable(self):
        return True

    def write(self, data):
        self._chunks.append(bytes(data))
        return len(data)

    def drain(self):
        data = b''.join(self._chunks)
        self._chunks = []
        return data


class ZipStreamWriter:
    """Sequenced archive writer: append named entries, then finalize"""

    def __init__(self, compression_level=9, date_time=None):
        self._sink = _ChunkSink()
        self._date_time = (date_time or datetime.now()).timetuple()[:6]
        self._names = set()
        self.compression_level = compression_level
        self.entry_names = []
        try:
            self._archive = zipfile.ZipFile(self._sink, 'w', zipfile.ZIP_DEFLATED,
                                            compresslevel=compression_level)
        except (OSError, ValueError) as e:
            raise PackagingError("Could not open archive stream", detail=str(e)) from e
        self.finalized = False

    def _unique(self, name):
        if name not in self._names:
            return name
        stem, dot, ext = name.rpartition('.')
        counter = 2
        while f"{stem}_{counter}{dot}{ext}" in self._names:
            counter += 1
        return f"{stem}_{counter}{dot}{ext}"

    def append(self, name, data):
        """Add one entry and return the archive bytes produced so far"""
        if self.finalized:
            raise PackagingError("Archive already finalized")
        name = self._unique(name)
        info = zipfile.ZipInfo(name, date_time=self._date_time)
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = 0o644 << 16
        try:
            self._archive.writestr(info, data, compresslevel=self.compression_level)
        except (OSError, ValueError, zipfile.BadZipFile) as e:
            raise PackagingError(f"Failed to write archive entry {name}", detail=str(e)) from e
        self._names.add(name)
        self.entry_names.append(name)
        return self._sink.drain()

    def finalize(self):
        """Write the central directory and return the remaining bytes"""
        if self.finalized:
            return b''
        try:
            self._archive.close()
        except (OSError, ValueError) as e:
            raise PackagingError("Failed to finalize archive", detail=str(e)) from e
        self.finalized = True
        return self._sink.drain()


class ArchivePackager:
    """Bundles per-student documents into one streamed zip archive"""

    def __init__(self, compression_level=9, date_time=None, omissions=None):
        self.compression_level = compression_level
        self.date_time = date_time
        self.omissions = omissions if omissions is not None else []
        self.entry_names = []

    def package_documents(self, documents):
        """Yield archive bytes incrementally for an iterable of NamedDocument.

        A document without content is recorded as an omission and skipped;
        skipped documents are listed in a trailing omitted.txt entry, one
        tab-separated identifier and reason per line. Entries keep the order
        of the input iterable.
        """
        writer = ZipStreamWriter(self.compression_level, self.date_time)
        self.entry_names = writer.entry_names
        skipped = []
        for document in documents:
            if document.content is None:
                reason = document.error or 'Document generation failed'
                log.warning("Omitting %s from archive: %s", document.identifier, reason)
                omission = Omission(document.identifier, reason)
                self.omissions.append(omission)
                skipped.append(omission)
                continue
            chunk = writer.append(entry_name_for(document.identifier), document.content)
            if chunk:
                yield chunk
        if skipped:
            manifest = ''.join(f"{o.identifier}\t{o.reason}\n" for o in skipped)
            chunk = writer.append(MANIFEST_NAME, manifest.encode('utf-8'))
            if chunk:
                yield chunk
        tail = writer.finalize()
        if tail:
            yield tail
