import io

from lexcore.formatter import format_index, format_line, write_index


class TestFormatter:
    def test_line_has_trailing_space(self):
        assert format_line("dog", [1, 0]) == "dog: 0 1 \n"

    def test_single_document(self):
        assert format_index({"hello": [0], "world": [0]}) == "hello: 0 \nworld: 0 \n"

    def test_terms_are_sorted(self):
        index = {"dog": [0, 1], "bird": [1], "cat": [0]}
        assert format_index(index) == "bird: 1 \ncat: 0 \ndog: 0 1 \n"

    def test_empty_index(self):
        assert format_index({}) == ""

    def test_write_index_matches_format_index(self):
        index = {"b": [2, 10], "a": [3]}
        buf = io.StringIO()
        write_index(index, buf)
        assert buf.getvalue() == format_index(index) == "a: 3 \nb: 2 10 \n"
