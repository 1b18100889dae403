"""Tests for the filtering engine."""

from __future__ import annotations

import io
import time
import unittest
from concurrent.futures import ThreadPoolExecutor
from contextlib import redirect_stdout

from htmlfilter import AllowedAttributes, FilterResult, HtmlFilter, Whitelist, filter_html


def _filter(html: str, whitelist) -> str:
    return HtmlFilter(whitelist).filter(html).get_html()


class TestScenarios(unittest.TestCase):
    def test_allowed_tag_round_trips(self) -> None:
        assert _filter("<p>hi</p>", {"p": AllowedAttributes()}) == "<p>hi</p>"

    def test_script_and_body_are_removed(self) -> None:
        assert _filter("<script>alert(1)</script>ok", {"p": None}) == "ok"

    def test_disallowed_attribute_is_dropped(self) -> None:
        html = '<img src="x.png" onerror="bad()">'
        assert _filter(html, {"img": ["src"]}) == '<img src="x.png" />'

    def test_allowed_tag_inside_disallowed_ancestor_is_suppressed(self) -> None:
        assert _filter("<div><b>bold</b></div>text", {"b": None}) == "text"

    def test_bare_boolean_attribute(self) -> None:
        assert _filter("<input checked>", {"input": ["checked"]}) == '<input checked="checked" />'

    def test_comment_is_unwrapped(self) -> None:
        assert _filter("<!--note-->", {"p": None}) == "note"
        # Spaces inside the delimiters belong to the body and are kept: the
        # result is " note ", deliberately not the trimmed "note".
        assert _filter("<!-- note -->", {"p": None}) == " note "


class TestTransitions(unittest.TestCase):
    def test_disallowed_self_closing_tag_is_dropped_alone(self) -> None:
        assert _filter("<p>one<img src=x>two</p>", {"p": None}) == "<p>onetwo</p>"
        assert _filter("a<br>b", {"p": None}) == "ab"

    def test_self_closing_tag_inside_suppressed_subtree_does_not_push(self) -> None:
        assert _filter("<div>x<br>y</div>z", {"p": None}) == "z"

    def test_nested_suppression_tracks_depth(self) -> None:
        html = "<div><span><i>a</i></span>b</div>c"
        assert _filter(html, {"i": None, "span": None}) == "c"

    def test_close_tag_in_normal_state_is_emitted_lowercased(self) -> None:
        assert _filter("x</SPAN>", {"p": None}) == "x</span>"
        # Not checked against the whitelist.
        assert _filter("</script>", {"p": None}) == "</script>"

    def test_close_tag_name_is_not_trimmed(self) -> None:
        assert _filter("</P >", {"p": None}) == "</p >"

    def test_tag_names_are_lowercased(self) -> None:
        assert _filter("<P>x</P>", {"p": None}) == "<p>x</p>"

    def test_extra_close_tag_ends_suppression_early(self) -> None:
        # The stack counts depth only; a stray close tag pops the disallowed element.
        assert _filter("<div><br></b>leak</div>", {"b": None}) == "leak</div>"

    def test_mismatched_close_inside_suppression(self) -> None:
        assert _filter("<div><b></div>secret</b>after", {"b": None}) == "after"

    def test_unclosed_disallowed_element_swallows_rest(self) -> None:
        assert _filter("ok<div>hidden", {"p": None}) == "ok"


class TestAttributeFiltering(unittest.TestCase):
    def test_strip_all_attributes(self) -> None:
        assert _filter('<p class="x" id="y">t</p>', {"p": None}) == "<p>t</p>"

    def test_explicit_empty_set_behaves_like_strip_all(self) -> None:
        assert _filter('<p class="x" id="y">t</p>', {"p": []}) == "<p>t</p>"

    def test_order_follows_the_markup(self) -> None:
        html = '<a title="t" href="h" onclick="x">l</a>'
        assert _filter(html, {"a": ["href", "title"]}) == '<a title="t" href="h">l</a>'

    def test_attribute_names_match_exactly(self) -> None:
        assert _filter('<a HREF="h">l</a>', {"a": ["href"]}) == "<a>l</a>"

    def test_values_are_double_quoted(self) -> None:
        html = "<a title='say \"hi\"' href=/x>l</a>"
        expected = '<a title="say &quot;hi&quot;" href="/x">l</a>'
        assert _filter(html, {"a": ["href", "title"]}) == expected

    def test_boolean_value_is_normalized(self) -> None:
        html = '<option selected="no" value="1">x</option>'
        expected = '<option selected="selected" value="1">x</option>'
        assert _filter(html, {"option": ["selected", "value"]}) == expected

    def test_duplicate_attribute_keeps_last_value(self) -> None:
        html = '<a href="1" title="t" href="2">l</a>'
        assert _filter(html, {"a": ["href", "title"]}) == '<a href="2" title="t">l</a>'

    def test_values_are_not_validated(self) -> None:
        html = '<a href="javascript:alert(1)">x</a>'
        assert _filter(html, {"a": ["href"]}) == html


class TestPassThrough(unittest.TestCase):
    def test_disabled_whitelist_keeps_everything(self) -> None:
        html = "<div class=a data-x='1'><!--c--><br><script>s()</script></div>"
        result = HtmlFilter(None).filter(html)
        assert result.html == '<div class="a" data-x="1">c<br /><script>s()</script></div>'
        assert result.passes == 2

    def test_disabled_whitelist_normalizes_boolean_attributes(self) -> None:
        assert _filter("<input checked>", None) == '<input checked="checked" />'

    def test_text_is_not_entity_encoded(self) -> None:
        assert _filter("a &amp; b < c", None) == "a &amp; b < c"


class TestRescan(unittest.TestCase):
    def test_markup_formed_by_removal_is_filtered(self) -> None:
        html = "<<script></script>img src=x onerror=alert(1)>"
        result = HtmlFilter({"img": ["src"]}).filter(html)
        assert result.html == '<img src="x" />'
        assert result.passes == 2

    def test_markup_inside_comment_is_filtered(self) -> None:
        html = "<!--<script>alert(1)</script>-->ok"
        result = HtmlFilter({"p": None}).filter(html)
        assert result.html == "ok"
        assert result.passes == 3

    def test_deeply_nested_comments_stop_at_the_pass_limit(self) -> None:
        depth = 2000
        html = "<!--" * depth + "x" + "-->" * depth
        engine = HtmlFilter({"p": None})
        started = time.perf_counter()
        result = engine.filter(html)
        elapsed = time.perf_counter() - started
        left = depth - engine.max_passes
        assert result.passes == engine.max_passes == 8
        assert result.html == "!--" * left + "x" + "-->" * left
        assert elapsed < 1.0, elapsed
        again = engine.filter(result.html)
        assert again.html == result.html
        assert again.passes == 1

    def test_last_pass_drops_stray_less_than(self) -> None:
        html = "<<x></x>b>1 < 2"
        result = HtmlFilter({"b": None}).filter(html)
        assert result.html == "<b>1 < 2"
        assert result.passes == 2

        result = HtmlFilter({"b": None}, max_passes=2).filter(html)
        assert result.html == "<b>1  2"
        assert result.passes == 2

    def test_pass_limit_is_validated(self) -> None:
        for bad in (0, 1, "3", None):
            with self.assertRaises(ValueError):
                HtmlFilter({"p": None}, max_passes=bad)

    def test_unterminated_comments_filter_in_linear_time(self) -> None:
        html = "<!-- x" * 20000 + ">"
        started = time.perf_counter()
        result = HtmlFilter({"p": None}).filter(html)
        elapsed = time.perf_counter() - started
        assert result.html == html
        assert result.passes == 1
        assert elapsed < 1.0, elapsed

    def test_clean_input_needs_one_pass(self) -> None:
        result = HtmlFilter({"p": None, "img": ["src"]}).filter('<p id="x">a<img src="b" alt="c"></p>')
        assert result.html == '<p>a<img src="b" /></p>'
        assert result.passes == 1


class TestEngineApi(unittest.TestCase):
    def test_result_object(self) -> None:
        result = HtmlFilter({"p": None}).filter("<p>x</p>")
        assert isinstance(result, FilterResult)
        assert result.get_html() == "<p>x</p>"
        assert str(result) == "<p>x</p>"
        assert result.errors == []
        assert "passes=1" in repr(result)

    def test_none_input(self) -> None:
        assert HtmlFilter({"p": None}).filter(None).html == ""

    def test_non_string_input_raises(self) -> None:
        with self.assertRaises(TypeError):
            HtmlFilter({"p": None}).filter(b"<p>x</p>")

    def test_configure_replaces_whitelist(self) -> None:
        engine = HtmlFilter({"p": None})
        assert engine.filter("<b>x</b>").html == ""
        assert engine.configure({"b": None}) is engine
        assert engine.filter("<b>x</b>").html == "<b>x</b>"
        engine.configure(None)
        assert engine.filter("<script>x</script>").html == "<script>x</script>"

    def test_accepts_whitelist_instance(self) -> None:
        whitelist = Whitelist({"p": None})
        engine = HtmlFilter(whitelist)
        assert engine.whitelist is whitelist

    def test_calls_do_not_share_state(self) -> None:
        engine = HtmlFilter({"p": None})
        assert engine.filter("<p>a<div>unclosed").html == "<p>a"
        assert engine.filter("<p>b</p>").html == "<p>b</p>"

    def test_concurrent_calls(self) -> None:
        engine = HtmlFilter({"p": None, "b": None})
        inputs = [f"<p>{i}<div>x{i}</div><b>{i}</b></p>" for i in range(200)]
        expected = [f"<p>{i}<b>{i}</b></p>" for i in range(200)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda html: engine.filter(html).html, inputs))
        assert results == expected

    def test_custom_self_closing_table(self) -> None:
        engine = HtmlFilter({"p": None}, self_closing_tags={"widget"})
        assert engine.filter("<widget>a<p>b</p>").html == "a<p>b</p>"

        engine = HtmlFilter({"img": ["src"]}, self_closing_tags=[])
        assert engine.filter('<img src="a">').html == '<img src="a">'

    def test_custom_boolean_table(self) -> None:
        engine = HtmlFilter({"input": ["hidden"]}, boolean_attributes={"hidden"})
        assert engine.filter('<input hidden="0">').html == '<input hidden="hidden" />'

    def test_filter_html_uses_default_whitelist(self) -> None:
        html = '<p onclick="x">hi <a href="/a" target="_blank">a</a></p><script>x</script>'
        assert filter_html(html) == '<p>hi <a href="/a">a</a></p>'
        assert filter_html("<b>x</b>", {"i": None}) == ""

    def test_debug_trace(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            HtmlFilter({"p": None}, debug=True).filter("<div>x</div><br>")
        trace = out.getvalue()
        assert "suppress <div> depth=1" in trace
        assert "pops <div> depth=0" in trace
        assert "drop <br />" in trace
        assert "scanning output again" in trace

    def test_no_trace_without_debug(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            HtmlFilter({"p": None}).filter("<div>x</div>")
        assert out.getvalue() == ""


if __name__ == "__main__":
    unittest.main()
