"""
Stream Decoder

Reassembles Ollama's newline-delimited JSON stream from transport chunks
whose boundaries have nothing to do with record boundaries.
"""

import codecs
import json
import logging
from typing import Iterable, Iterator, List, Optional, Union

from jester.core.models import GenerationRecord

logger = logging.getLogger(__name__)

RawChunk = Union[bytes, str]


class StreamDecoder:
    """
    Incremental decoder for one generation stream.

    Feed raw chunks in arrival order, then call finish() once the
    transport signals end-of-stream. Between calls the buffer holds at
    most one incomplete trailing line.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._text_decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        self._finished = False

    @property
    def pending(self) -> str:
        """Text received but not yet resolved into a complete line."""
        return self._buffer

    def feed(self, chunk: RawChunk) -> List[GenerationRecord]:
        """
        Append a chunk and return the records completed by it.

        Args:
            chunk: Raw bytes or text from the transport

        Returns:
            Records parsed from every complete line, in order
        """
        if self._finished:
            raise RuntimeError("StreamDecoder already finished")

        if isinstance(chunk, bytes):
            self._buffer += self._text_decoder.decode(chunk)
        else:
            self._buffer += chunk

        lines = self._buffer.split("\n")
        # Last piece may be the prefix of a line that has not arrived yet
        self._buffer = lines.pop()

        records: List[GenerationRecord] = []
        for line in lines:
            record = self._parse_line(line)
            if record is not None:
                records.append(record)
        return records

    def finish(self) -> List[GenerationRecord]:
        """
        Flush the buffer at end-of-stream.

        The server may send its final line without a trailing newline, so
        any leftover content gets one last parse attempt.
        """
        if self._finished:
            return []
        self._finished = True

        self._buffer += self._text_decoder.decode(b"", final=True)
        remainder, self._buffer = self._buffer, ""

        record = self._parse_line(remainder, final=True)
        return [record] if record is not None else []

    def _parse_line(self, line: str, final: bool = False) -> Optional[GenerationRecord]:
        if not line.strip():
            return None
        try:
            return GenerationRecord.from_dict(json.loads(line))
        except ValueError as e:
            what = "final JSON chunk" if final else "JSON chunk"
            logger.warning(f"Failed to parse {what}: {e} ({line[:80]!r})")
            return None


def iter_records(chunks: Iterable[RawChunk]) -> Iterator[GenerationRecord]:
    """
    Lazily decode a chunk source into GenerationRecords.

    Errors raised by the chunk source (network failures) propagate to
    the caller untouched.
    """
    decoder = StreamDecoder()
    for chunk in chunks:
        for record in decoder.feed(chunk):
            yield record
    for record in decoder.finish():
        yield record


def iter_fragments(chunks: Iterable[RawChunk]) -> Iterator[str]:
    """
    Lazily yield the non-empty response fragments of a stream.

    Stops after the record flagged done=true, or when the chunks run out.
    """
    for record in iter_records(chunks):
        if record.response:
            yield record.response
        if record.done:
            logger.debug(f"Generation done (model={record.model or 'unknown'})")
            return
