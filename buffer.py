from piece_table import PieceTable


class Buffer:
    '''Line and column addressing on top of a PieceTable.

    Lines are numbered from 0. A line's length includes its terminating
    newline when it has one.'''

    def __init__(self, s='', *, newline='\n'):
        self._buf = PieceTable(s, newline=newline)

    @property
    def table(self):
        return self._buf

    def as_str(self): return self._buf.as_str()

    def nlines(self):
        return self._buf.lines_count()

    def lines(self):
        return self._buf.lines()

    def line(self, pos):
        return self._buf.line_at(pos)

    def pos_for_line(self, n):
        return self._buf.line_start(n)

    def col(self, pos):
        return pos - self.pos_for_line(self.line(pos))

    def line_length(self, n):
        start = self.pos_for_line(n)
        if n+1 < self.nlines():
            return self.pos_for_line(n+1) - start
        else:
            return len(self._buf) - start

    def get_line(self, n):
        length = self.line_length(n)
        if n+1 < self.nlines():
            length -= 1
        return self._buf.content(self.pos_for_line(n), length)

    def insert(self, pos, val):
        self._buf.insert(pos, val)

    def delete(self, pos, length):
        self._buf.delete(pos, length)
