from buffer import Buffer
from piece_table import OutOfBounds
from hypothesis import given
import hypothesis.strategies as st
import unittest

class TestBuffer(unittest.TestCase):
    def test_line_and_col_with_one_char_line(self):
        b = Buffer('a\nb\nc')
        lines =    '00 11 2'.replace(' ', '')
        col   =    '01 01 0'.replace(' ', '')
        for i in range(len(lines)):
            self.assertEqual(int(lines[i]), b.line(i))
            self.assertEqual(int(col[i]), b.col(i))

    def test_line_and_col_with_variable_line_length(self):
        b = Buffer('abc\ndefgh\nij\n')
        lines =    '0000 111111 222'.replace(' ', '')
        col   =    '0123 012345 012'.replace(' ', '')
        for i in range(len(lines)):
            self.assertEqual(int(lines[i]), b.line(i))
            self.assertEqual(int(col[i]), b.col(i))

    def test_line_and_col_with_empty_line(self):
        b = Buffer('abc\n\ndefgh\n')
        lines =    '0000 1 222222'.replace(' ', '')
        col   =    '0123 0 012345'.replace(' ', '')
        for i in range(len(lines)):
            self.assertEqual(int(lines[i]), b.line(i))
            self.assertEqual(int(col[i]), b.col(i))

    def test_line_and_col_after_edits(self):
        b = Buffer('abc\ndefgh')
        b.insert(5, 'X\nY')
        b.delete(0, 2)
        # abc\nd + X\nY + efgh, minus "ab"
        self.assertEqual('c\ndX\nYefgh', b.as_str())
        lines =    '00 111 22222'.replace(' ', '')
        col   =    '01 012 01234'.replace(' ', '')
        for i in range(len(lines)):
            self.assertEqual(int(lines[i]), b.line(i))
            self.assertEqual(int(col[i]), b.col(i))

    def test_line_lengths_and_text(self):
        b = Buffer('abc\n\ndefgh\n')
        self.assertEqual(4, b.nlines())
        self.assertEqual([4, 1, 6, 0], [b.line_length(n) for n in range(b.nlines())])
        self.assertEqual(['abc', '', 'defgh', ''], [b.get_line(n) for n in range(b.nlines())])
        self.assertEqual([0, 4, 5, 11], [b.pos_for_line(n) for n in range(b.nlines())])
        self.assertEqual(['abc', '', 'defgh', ''], list(b.lines()))

    def test_empty_buffer(self):
        b = Buffer('')
        self.assertEqual(1, b.nlines())
        self.assertEqual(0, b.line(0))
        self.assertEqual(0, b.col(0))
        self.assertEqual(0, b.line_length(0))
        self.assertEqual('', b.get_line(0))

    def test_custom_newline(self):
        b = Buffer('ab;c', newline=';')
        self.assertEqual(2, b.nlines())
        self.assertEqual('c', b.get_line(1))
        self.assertEqual(['ab', 'c'], list(b.lines()))

    def test_bad_line_number(self):
        b = Buffer('a\nb')
        with self.assertRaises(OutOfBounds):
            b.pos_for_line(2)
        with self.assertRaises(OutOfBounds):
            b.get_line(-1)
        with self.assertRaises(OutOfBounds):
            b.line(4)

    @given(st.text(alphabet='ab\n', max_size=30), st.integers(min_value=1, max_value=5))
    def test_lines_match_split(self, s, chunk):
        b = Buffer('')
        # build the buffer out of several pieces
        for i in range(0, len(s), chunk):
            b.insert(i, s[i:i+chunk])
        expected = s.split('\n')
        self.assertEqual(len(expected), b.nlines())
        self.assertEqual(expected, [b.get_line(n) for n in range(b.nlines())])
        for pos in range(len(s) + 1):
            n = b.line(pos)
            self.assertEqual(s[:pos].count('\n'), n)
            self.assertEqual(pos - b.pos_for_line(n), b.col(pos))

if __name__ == '__main__':
    unittest.main()
