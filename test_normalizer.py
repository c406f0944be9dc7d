"""Tests for the HTML normalizer: clean_html, charset sniffing, document parsing."""

import pytest

from vidyapith_content.normalizer import (
    clean_html,
    collapse_whitespace,
    detect_charset,
    element_lines,
    element_text,
    parse_document,
    split_lines,
)


class TestCleanHtml:

    def test_documented_example(self):
        assert clean_html('<p>Hello <strong>world</strong>!</p><br>Next line') == 'Hello world!\nNext line'

    def test_break_runs_collapse_to_one_newline(self):
        """Any casing, self-closing or with attributes."""
        assert clean_html('a<br><BR/><br class="x" />b') == 'a\nb'
        assert clean_html('a<Br >b') == 'a\nb'

    def test_nbsp_and_zero_width_space(self):
        assert clean_html('a&nbsp;b') == 'a b'
        assert clean_html('ab\u200bc') == 'abc'

    def test_lines_trimmed_and_empty_lines_dropped(self):
        assert clean_html('  first  <br><br>   <br>  second ') == 'first\nsecond'

    def test_empty_input(self):
        assert clean_html('') == ''
        assert clean_html('<div></div>') == ''

    def test_script_and_style_text_dropped(self):
        html = '<p>visible</p><script>var hidden = 1;</script><style>p {}</style>'
        assert clean_html(html) == 'visible'

    def test_malformed_markup_degrades_to_text(self):
        assert clean_html('<div><p>unclosed <b>bold') == 'unclosed bold'

    @pytest.mark.parametrize("html", [
        '<p>Hello <strong>world</strong>!</p><br>Next line',
        'Tom &amp; Jerry<br>  second line  ',
        '<td>Vivekananda&nbsp;Vidyapith<br>20 Hinchman Avenue</td>',
    ])
    def test_idempotent(self, html):
        once = clean_html(html)
        assert clean_html(once) == once


class TestHelpers:

    def test_split_lines(self):
        assert split_lines('  a \n\n b  \n') == ['a', 'b']

    def test_collapse_whitespace(self):
        assert collapse_whitespace(' Vivekananda \n  Vidyapith ') == 'Vivekananda Vidyapith'

    def test_element_text_of_missing_element(self):
        assert element_text(None) == ''
        assert element_lines(None) == []

    def test_element_lines(self):
        doc = parse_document('<div id="x">one<br>two</div>')
        assert element_lines(doc.find(id='x')) == ['one', 'two']


class TestCharset:

    def test_default_utf8(self):
        assert detect_charset(b'<html><head></head></html>') == 'utf-8'

    def test_meta_charset(self):
        assert detect_charset(b'<meta charset="UTF-8">') == 'utf-8'

    def test_latin1_is_read_as_windows_1252(self):
        assert detect_charset(b'<meta charset="iso-8859-1">') == 'windows-1252'

    def test_http_equiv(self):
        raw = b'<meta http-equiv="Content-Type" content="text/html; charset=ISO-8859-1">'
        assert detect_charset(raw) == 'windows-1252'


class TestParseDocument:

    def test_declared_charset_used_for_bytes(self):
        raw = b'<meta charset="iso-8859-1"><p>\x93Arise\x94</p>'
        doc = parse_document(raw)
        assert element_text(doc.find('p')) == '\u201cArise\u201d'

    def test_undecodable_bytes_do_not_raise(self):
        doc = parse_document(b'<p>ok \xff\xfe</p>')
        assert element_text(doc.find('p')).startswith('ok')

    def test_comments_removed(self):
        doc = parse_document('<p>text<!-- hidden --></p>')
        assert element_text(doc.find('p')) == 'text'

    def test_null_bytes_stripped(self):
        doc = parse_document('<p>a\x00b</p>')
        assert element_text(doc.find('p')) == 'ab'
