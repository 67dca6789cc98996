import os
from typing import BinaryIO


class StreamComparator:
    """Compares incoming remote chunks against a local file, one chunk at a time.

    The mismatch flag is sticky. A local file that runs out before a chunk is
    fully matched counts as a mismatch, not an I/O error; a short local file is
    exactly what this is meant to catch.
    """

    def __init__(self, local_file: BinaryIO):
        self._file = local_file
        self._file.seek(0)
        self._length = os.fstat(local_file.fileno()).st_size
        self.mismatch = False
        self.bytes_consumed = 0

    def consume(self, chunk: bytes) -> bool:
        """Match the next remote chunk; returns the current mismatch state."""
        self.bytes_consumed += len(chunk)
        local = self._file.read(len(chunk))
        if local != chunk:
            self.mismatch = True
        return self.mismatch

    @property
    def position(self) -> int:
        return self._file.tell()

    @property
    def length(self) -> int:
        return self._length

    def finish(self) -> bool:
        """Close out the comparison after the transfer completed.

        True only if every chunk matched and the whole local file was consumed.
        """
        if self.position != self._length:
            self.mismatch = True
        return not self.mismatch
