# based on https://github.com/sparkeditor/piece-table/blob/master/index.js
import bisect
import enum
import logging
from typing import *
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class PieceTableError(Exception):
    pass


class OutOfBounds(PieceTableError, IndexError):
    '''A position or range falls outside the document.'''

    def __init__(self, pos, length, size):
        super().__init__(f'out of bounds: [{pos}, {pos + length}) not within [0, {size}]')
        self.pos, self.length, self.size = pos, length, size


class StaleIterator(PieceTableError, RuntimeError):
    '''The table was edited while an iterator over it was still in use.'''


class BufferKind(enum.Enum):
    ORIGINAL = 'original'
    ADD = 'add'


@dataclass(frozen=True, repr=False)
class Piece:
    __slots__ = ('buffer', 'start', 'length', 'newline_count')
    buffer: BufferKind
    start: int
    length: int
    newline_count: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def __repr__(self):
        return f'Piece<{self.buffer.value} {self.start=} {self.length=} {self.newline_count=}>'


class _AddBuffer:
    '''Append-only text arena.

    Each append is kept as its own chunk so growing the buffer never copies
    what is already there. Offsets are global across chunks.'''

    __slots__ = ('_chunks', '_starts', '_length')

    def __init__(self):
        self._chunks: List[str] = []
        self._starts: List[int] = []
        self._length = 0

    def __len__(self):
        return self._length

    def append(self, s: str) -> int:
        start = self._length
        self._chunks.append(s)
        self._starts.append(start)
        self._length += len(s)
        return start

    def _spans(self, start, end):
        '''yields (chunk, lo, hi) triples covering [start, end)'''
        i = bisect.bisect_right(self._starts, start) - 1
        while start < end:
            chunk, base = self._chunks[i], self._starts[i]
            hi = min(end - base, len(chunk))
            yield chunk, start - base, hi
            start = base + hi
            i += 1

    def slice(self, start, end) -> str:
        return ''.join(chunk[lo:hi] for chunk, lo, hi in self._spans(start, end))

    def count(self, sub, start, end) -> int:
        return sum(chunk.count(sub, lo, hi) for chunk, lo, hi in self._spans(start, end))

    def find(self, sub, start, end) -> int:
        for chunk, lo, hi in self._spans(start, end):
            i = chunk.find(sub, lo, hi)
            if i != -1:
                return start + (i - lo)
            start += hi - lo
        return -1


class PieceTable:
    '''Text document stored as a sequence of pieces over two buffers.

    `original` is the text the table was created with and is never modified.
    Inserted text is appended to the add buffer. The document is the
    concatenation of the spans named by the pieces, in order.

    Positions are str indices (code points). Any edit invalidates iterators
    obtained from `pieces()` and `lines()`; using one afterwards raises
    StaleIterator.'''

    def __init__(self, original: str = '', *, newline: str = '\n'):
        if not isinstance(original, str):
            raise TypeError(f'expected str, got {type(original).__name__}')
        if not isinstance(newline, str) or len(newline) != 1:
            raise ValueError(f'newline must be a single character, got {newline!r}')
        self.original = original
        self.newline = newline
        self._add = _AddBuffer()
        self._table: List[Piece] = []
        if original:
            self._table.append(Piece(BufferKind.ORIGINAL, 0, len(original), original.count(newline)))
        self._length = len(original)
        self._generation = 0
        logger.debug('piece table created: %d chars, %d lines', self._length, self.lines_count())

    @classmethod
    def from_source(cls, source, **kwargs) -> 'PieceTable':
        '''build a table from a str or anything with a read() returning str'''
        if hasattr(source, 'read'):
            source = source.read()
        return cls(source, **kwargs)

    def _read(self, kind, start, end) -> str:
        if kind is BufferKind.ADD:
            return self._add.slice(start, end)
        return self.original[start:end]

    def _count_newlines(self, kind, start, end) -> int:
        if kind is BufferKind.ADD:
            return self._add.count(self.newline, start, end)
        return self.original.count(self.newline, start, end)

    def _find_newline(self, kind, start, end) -> int:
        if kind is BufferKind.ADD:
            return self._add.find(self.newline, start, end)
        return self.original.find(self.newline, start, end)

    def _check_range(self, pos, length):
        if pos < 0 or length < 0 or pos + length > self._length:
            raise OutOfBounds(pos, length, self._length)

    def _check_generation(self, generation):
        if generation != self._generation:
            raise StaleIterator('piece table was modified during iteration')

    def _piece_index(self, pos) -> Tuple[int, int]:
        '''returns the index of the piece holding `pos` and the offset into it.

        A position on a boundary belongs to the piece that starts there, and
        the end of the document maps to (len(pieces), 0).'''
        cur = 0
        for i, piece in enumerate(self._table):
            if pos < cur + piece.length:
                return i, pos - cur
            cur += piece.length
        return len(self._table), 0

    def _split(self, piece, offset) -> Tuple[Piece, Piece]:
        # only scan the shorter side, the other count follows from the cache
        if offset <= piece.length // 2:
            left_newlines = self._count_newlines(piece.buffer, piece.start, piece.start + offset)
        else:
            left_newlines = piece.newline_count - self._count_newlines(piece.buffer, piece.start + offset, piece.end)
        return (Piece(piece.buffer, piece.start, offset, left_newlines),
                Piece(piece.buffer, piece.start + offset, piece.length - offset,
                      piece.newline_count - left_newlines))

    def insert(self, pos, text):
        if not isinstance(text, str):
            raise TypeError(f'expected str, got {type(text).__name__}')
        self._check_range(pos, 0)
        if not text:
            return

        add_offset = self._add.append(text)
        new_piece = Piece(BufferKind.ADD, add_offset, len(text), text.count(self.newline))

        i, offset = self._piece_index(pos)
        if offset == 0:
            self._table.insert(i, new_piece)
        else:
            left, right = self._split(self._table[i], offset)
            self._table[i:i+1] = [left, new_piece, right]

        self._length += len(text)
        self._generation += 1

    def delete(self, pos, length):
        self._check_range(pos, length)
        if length == 0:
            return

        i, i_offset = self._piece_index(pos)
        j, j_offset = self._piece_index(pos + length)

        survivors = []
        if i_offset:
            survivors.append(self._split(self._table[i], i_offset)[0])
        if j_offset:
            survivors.append(self._split(self._table[j], j_offset)[1])
            j += 1

        self._table[i:j] = survivors
        self._length -= length
        self._generation += 1

    def compact(self) -> int:
        '''merges neighbouring pieces that continue each other in the same
        buffer. Returns the number of pieces removed.'''
        merged: List[Piece] = []
        for piece in self._table:
            prev = merged[-1] if merged else None
            if prev is not None and prev.buffer is piece.buffer and prev.end == piece.start:
                merged[-1] = Piece(prev.buffer, prev.start, prev.length + piece.length,
                                   prev.newline_count + piece.newline_count)
            else:
                merged.append(piece)

        removed = len(self._table) - len(merged)
        if removed:
            self._table = merged
            self._generation += 1
        logger.debug('compaction removed %d of %d pieces', removed, removed + len(merged))
        return removed

    def length(self) -> int:
        return self._length

    def content(self, pos, length) -> str:
        self._check_range(pos, length)
        end = pos + length
        parts = []
        cur = 0
        for piece in self._table:
            if cur >= end:
                break
            next_cur = cur + piece.length
            if next_cur > pos:
                lo = max(pos, cur) - cur
                hi = min(end, next_cur) - cur
                parts.append(self._read(piece.buffer, piece.start + lo, piece.start + hi))
            cur = next_cur
        return ''.join(parts)

    def as_str(self) -> str:
        return self.content(0, self._length)

    def lines_count(self) -> int:
        return 1 + sum(piece.newline_count for piece in self._table)

    def line_at(self, pos) -> int:
        '''returns the line number holding position `pos`'''
        self._check_range(pos, 0)
        line, cur = 0, 0
        for piece in self._table:
            if cur + piece.length >= pos:
                return line + self._count_newlines(piece.buffer, piece.start, piece.start + pos - cur)
            line += piece.newline_count
            cur += piece.length
        return line

    def line_start(self, n) -> int:
        '''returns the position of the first character of line `n`'''
        if n < 0 or n >= self.lines_count():
            raise OutOfBounds(n, 0, self.lines_count() - 1)
        if n == 0:
            return 0

        seen, cur = 0, 0
        for piece in self._table:
            if seen + piece.newline_count >= n:
                i = piece.start - 1
                for _ in range(n - seen):
                    i = self._find_newline(piece.buffer, i + 1, piece.end)
                return cur + (i - piece.start) + 1
            seen += piece.newline_count
            cur += piece.length
        raise AssertionError('newline counts out of sync with pieces')

    def pieces(self) -> Iterator[Piece]:
        return self._iter_pieces(self._generation)

    def _iter_pieces(self, generation):
        for i in range(len(self._table)):
            self._check_generation(generation)
            yield self._table[i]
        self._check_generation(generation)

    def lines(self) -> Iterator[str]:
        '''yields each line without its terminator. A trailing newline is
        followed by one last empty line.'''
        return self._iter_lines(self._generation)

    def _iter_lines(self, generation):
        parts = []
        for piece in self._iter_pieces(generation):
            lo = piece.start
            for _ in range(piece.newline_count):
                nl = self._find_newline(piece.buffer, lo, piece.end)
                parts.append(self._read(piece.buffer, lo, nl))
                line, parts = ''.join(parts), []
                yield line
                self._check_generation(generation)
                lo = nl + 1
            parts.append(self._read(piece.buffer, lo, piece.end))
        yield ''.join(parts)

    def __len__(self):
        return self._length

    def __str__(self):
        return self.as_str()

    def __repr__(self):
        return f'PieceTable<length={self._length} pieces={len(self._table)} lines={self.lines_count()}>'
