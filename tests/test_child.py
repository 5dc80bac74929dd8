import io

import pytest

from subprocess_test.child import run_child


def test_markers_surround_body_output(capsys):
    def body():
        print("body")
        return 42

    assert run_child("<B>", body) == 42
    assert capsys.readouterr().out == "<B>body\n<B>"


def test_trailing_marker_written_after_exception(capsys):
    def body():
        print("partial")
        raise ValueError("broken")

    with pytest.raises(ValueError, match="broken"):
        run_child("<B>", body)

    captured = capsys.readouterr()
    assert captured.out == "<B>partial\n<B>"
    assert "ValueError: broken" in captured.err


def test_explicit_stream():
    stream = io.StringIO()

    run_child("|", lambda: None, stream=stream)

    assert stream.getvalue() == "||"


def test_skip_propagates_without_traceback(capsys):
    def body():
        print("checking")
        pytest.skip("not here")

    with pytest.raises(pytest.skip.Exception):
        run_child("<B>", body)

    captured = capsys.readouterr()
    assert captured.out == "<B>checking\n<B>"
    assert captured.err == ""


def test_clean_exit_propagates_without_traceback(capsys):
    def body():
        raise SystemExit(0)

    with pytest.raises(SystemExit):
        run_child("<B>", body)

    assert capsys.readouterr().err == ""


def test_failing_exit_is_reported(capsys):
    def body():
        raise SystemExit(4)

    with pytest.raises(SystemExit):
        run_child("<B>", body)

    assert "SystemExit: 4" in capsys.readouterr().err
