import os

import pytest

from textgrep.core import file_search
from textgrep.core.errors import NotRegularFileError, PatternCompileError, StreamProcessingError
from textgrep.core.file_search import file_grep, should_use_stream_processing

FRUIT = "apple\nbanana\nApple pie\ngrape\n"

SAMPLE = (
    "Line 1: Hello world\n"
    "Line 2: This is a test\n"
    "Line 3: Another test line\n"
    "Line 4: No match here\n"
    "Line 5: Final test\n"
    "Line 6: End of file"
)


@pytest.fixture
def fruit_file(tmp_path):
    p = tmp_path / "fruit.txt"
    p.write_text(FRUIT, encoding="utf-8")
    return p


@pytest.fixture
def sample_file(tmp_path):
    p = tmp_path / "sample.txt"
    p.write_text(SAMPLE, encoding="utf-8")
    return p


def _lines(result):
    return [m.line_number for m in result.matches]


def test_case_insensitive_literal_search(fruit_file):
    res = file_grep(str(fruit_file), "apple")
    assert _lines(res) == [1, 3]
    assert [m.content for m in res.matches] == ["apple", "Apple pie"]
    assert res.match_count == 2
    assert res.truncated is False


def test_case_sensitive_literal_search(fruit_file):
    res = file_grep(str(fruit_file), "apple", {"case_sensitive": True})
    assert _lines(res) == [1]


def test_max_results_cap_sets_truncated(tmp_path):
    p = tmp_path / "three.txt"
    p.write_text("hit one\nhit two\nhit three\n", encoding="utf-8")
    res = file_grep(str(p), "hit", {"max_results": 1})
    assert res.match_count == 1
    assert _lines(res) == [1]
    assert res.truncated is True


def test_cap_reached_exactly_is_not_truncated(tmp_path):
    p = tmp_path / "exact.txt"
    p.write_text("hit\nmiss\nhit\nhit\nmiss\nmiss\n", encoding="utf-8")
    res = file_grep(str(p), "hit", {"max_results": 3})
    assert res.match_count == 3
    assert res.truncated is False


def test_single_late_match_at_cap_is_not_truncated(tmp_path):
    p = tmp_path / "late.txt"
    p.write_text("a\nb\nc\nd\nneedle\nf\n", encoding="utf-8")
    res = file_grep(str(p), "needle", {"max_results": 1})
    assert _lines(res) == [5]
    assert res.truncated is False


def test_sample_matches_and_offsets(sample_file):
    res = file_grep(str(sample_file), "test")
    assert _lines(res) == [2, 3, 5]
    assert res.matches[0].content == "Line 2: This is a test"
    assert res.matches[0].match_offset == 18
    assert res.matches[0].before_context is None
    assert res.matches[0].after_context is None


def test_context_lines(sample_file):
    res = file_grep(str(sample_file), "test", {"context_lines": 1})
    first = res.matches[0]
    assert first.before_context == ("Line 1: Hello world",)
    assert first.after_context == ("Line 3: Another test line",)


def test_context_on_first_and_last_line(tmp_path):
    p = tmp_path / "edges.txt"
    p.write_text("match top\nmiddle\nmatch bottom", encoding="utf-8")
    res = file_grep(str(p), "match", {"context_lines": 2})
    top, bottom = res.matches
    assert top.before_context == ()
    assert top.after_context == ("middle", "match bottom")
    assert bottom.before_context == ("match top", "middle")
    assert bottom.after_context == ()


def test_regex_search(sample_file):
    res = file_grep(str(sample_file), r"Line \d+:", {"use_regex": True})
    assert res.match_count == 6


def test_case_sensitive_no_match(sample_file):
    res = file_grep(str(sample_file), "Test", {"case_sensitive": True})
    assert res.match_count == 0
    assert res.matches == ()
    assert res.truncated is False


def test_sync_result_reports_total_lines(tmp_path):
    p = tmp_path / "abc.txt"
    p.write_text("a\nb\nc", encoding="utf-8")
    res = file_grep(str(p), "b")
    assert res.mode == "sync"
    assert res.total_lines == 3
    assert res.total_lines_processed is None
    assert res.file_size_bytes == 5


def test_trailing_newline_counts_as_empty_last_line(tmp_path):
    p = tmp_path / "nl.txt"
    p.write_text("a\nb\n", encoding="utf-8")
    assert file_grep(str(p), "a").total_lines == 3


def test_crlf_content_is_trimmed(tmp_path):
    p = tmp_path / "crlf.txt"
    p.write_bytes(b"foo\r\nbar\r\n")
    res = file_grep(str(p), "bar")
    assert res.matches[0].content == "bar"
    assert res.matches[0].line_number == 2


def test_invalid_utf8_is_replaced_not_raised(tmp_path):
    p = tmp_path / "bad.txt"
    p.write_bytes(b"ok \xff match\nplain\n")
    res = file_grep(str(p), "match")
    assert res.match_count == 1
    assert "�" in res.matches[0].content


def test_utf8_bom_is_dropped(tmp_path):
    p = tmp_path / "bom.txt"
    p.write_bytes(b"\xef\xbb\xbfhello\n")
    res = file_grep(str(p), "hello")
    assert res.matches[0].content == "hello"
    assert res.matches[0].match_offset == 0


def test_empty_file(tmp_path):
    p = tmp_path / "empty.txt"
    p.write_text("", encoding="utf-8")
    res = file_grep(str(p), "x")
    assert res.match_count == 0
    assert res.total_lines == 1


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="File not found"):
        file_grep(str(tmp_path / "nope.txt"), "x")


def test_directory_path_raises(tmp_path):
    with pytest.raises(IsADirectoryError, match="Path is a directory"):
        file_grep(str(tmp_path), "x")


def test_invalid_regex_raises(sample_file):
    with pytest.raises(PatternCompileError):
        file_grep(str(sample_file), "[unclosed", {"use_regex": True})


def test_accepts_path_objects(sample_file):
    res = file_grep(sample_file, "Hello")
    assert res.path == str(sample_file)
    assert res.match_count == 1


def test_repeated_search_is_identical(sample_file):
    opts = {"context_lines": 2, "use_regex": True, "regex_flags": "i"}
    assert file_grep(str(sample_file), "test", opts) == file_grep(str(sample_file), "test", opts)


def test_should_use_stream_processing():
    assert should_use_stream_processing(10) is False
    assert should_use_stream_processing(50 * 1024 * 1024) is False
    assert should_use_stream_processing(50 * 1024 * 1024 + 1) is True
    assert should_use_stream_processing(5, threshold=4) is True


def test_stream_mode_selected_above_threshold(sample_file):
    res = file_grep(str(sample_file), "test", stream_threshold=0)
    assert res.mode == "stream"
    assert res.total_lines_processed == 6
    assert res.total_lines is None
    assert _lines(res) == [2, 3, 5]


def test_stream_threshold_from_settings(sample_file, monkeypatch):
    monkeypatch.setattr(file_search.settings, "STREAM_THRESHOLD_BYTES", 1)
    assert file_grep(str(sample_file), "test").mode == "stream"


def test_stream_mode_respects_cap(tmp_path):
    p = tmp_path / "many.txt"
    p.write_text("".join(f"hit {i}\n" for i in range(20)), encoding="utf-8")
    res = file_grep(str(p), "hit", {"max_results": 5}, stream_threshold=0)
    assert res.match_count == 5
    assert _lines(res) == [1, 2, 3, 4, 5]
    assert res.truncated is True
    # the trailing newline yields a final empty line, as in sync mode
    assert res.total_lines_processed == 21


@pytest.mark.parametrize("ctx", [0, 1, 2, 3, 10])
@pytest.mark.parametrize("max_results", [1, 2, 100])
def test_stream_and_sync_produce_same_matches(tmp_path, ctx, max_results):
    text = (
        "alpha\nmatch one\n\n  spaced  \nmatch two\nmatch three\nbeta\n"
        "gamma\n\ndelta\nmatch four\nepsilon\nmatch five"
    )
    p = tmp_path / "mixed.txt"
    p.write_text(text, encoding="utf-8")
    opts = {"context_lines": ctx, "max_results": max_results}
    sync = file_grep(str(p), "match", opts)
    stream = file_grep(str(p), "match", opts, stream_threshold=0)
    assert sync.mode == "sync"
    assert stream.mode == "stream"
    assert stream.matches == sync.matches
    assert stream.truncated == sync.truncated


@pytest.mark.parametrize("pattern", [r"^$", r"^\s*$"])
@pytest.mark.parametrize("content", [b"", b"\n", b"a\n\nb\n", b"a\n  \nb", b"\n\n"])
def test_blank_line_matches_agree_across_modes(tmp_path, pattern, content):
    p = tmp_path / "blank.txt"
    p.write_bytes(content)
    opts = {"use_regex": True, "context_lines": 1}
    sync = file_grep(str(p), pattern, opts)
    stream = file_grep(str(p), pattern, opts, stream_threshold=0)
    assert stream.matches == sync.matches
    assert stream.total_lines_processed == sync.total_lines


def test_empty_line_after_trailing_newline_is_searched(tmp_path):
    p = tmp_path / "tail.txt"
    p.write_bytes(b"a\n\nb\n")
    for threshold in (None, 0):
        res = file_grep(str(p), "^$", {"use_regex": True}, stream_threshold=threshold)
        assert _lines(res) == [2, 4]


def test_inner_feff_kept_in_both_modes(tmp_path):
    p = tmp_path / "feff.txt"
    p.write_bytes(b"\xef\xbb\xbffirst hit\n\xef\xbb\xbfx hit\n")
    sync = file_grep(str(p), "hit")
    stream = file_grep(str(p), "hit", stream_threshold=0)
    assert [m.content for m in sync.matches] == ["first hit", "\ufeffx hit"]
    assert [m.match_offset for m in sync.matches] == [6, 3]
    assert stream.matches == sync.matches


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs unavailable")
def test_fifo_rejected_before_reading(tmp_path):
    fifo = tmp_path / "pipe.txt"
    os.mkfifo(fifo)
    with pytest.raises(NotRegularFileError, match="Not a regular file"):
        file_grep(str(fifo), "x")
    with pytest.raises(NotRegularFileError):
        file_grep(str(fifo), "x", stream_threshold=0)


def test_stream_failure_raises_stream_error(sample_file, monkeypatch):
    boom = OSError("disk went away")

    def _broken_stream(_path):
        yield "Line 1: test"
        raise boom

    monkeypatch.setattr(file_search, "read_file_stream", _broken_stream)
    with pytest.raises(StreamProcessingError) as exc_info:
        file_grep(str(sample_file), "test", stream_threshold=0)
    assert exc_info.value.__cause__ is boom
    assert exc_info.value.path == str(sample_file)
    assert "disk went away" in str(exc_info.value)


def test_matches_ordered_and_counted(tmp_path):
    p = tmp_path / "order.txt"
    p.write_text("\n".join("x" if i % 3 else "y" for i in range(60)), encoding="utf-8")
    for threshold in (None, 0):
        res = file_grep(str(p), "y", {"max_results": 7}, stream_threshold=threshold)
        numbers = _lines(res)
        assert numbers == sorted(set(numbers))
        assert res.match_count == len(res.matches) == 7
        assert all(1 <= n for n in numbers)


def test_result_dict_omits_unset_fields(sample_file):
    data = file_grep(str(sample_file), "Hello").to_result_dict()
    assert data["mode"] == "sync"
    assert "total_lines_processed" not in data
    assert "before_context" not in data["matches"][0]
