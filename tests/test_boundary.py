import pytest

from subprocess_test import DEFAULT_OUTPUT_BOUNDARY, ProtocolError, effective_boundary, extract_payload


def test_default_boundary_is_a_line_of_equals():
    assert effective_boundary() == "\n" + "=" * 40 + "\n"
    assert effective_boundary(None) == DEFAULT_OUTPUT_BOUNDARY


def test_custom_boundary_occupies_its_own_line():
    assert effective_boundary("<><>") == "\n<><>\n"


def test_payload_between_markers():
    boundary = effective_boundary()
    captured = "collected 1 item\n" + boundary + "Foo\nBar\n" + boundary + "1 passed in 0.01s\n"

    assert extract_payload(captured, boundary) == "Foo\nBar\n"


def test_missing_trailing_marker_keeps_remainder():
    boundary = effective_boundary()
    captured = "noise" + boundary + "Banana\nMango\n"

    assert extract_payload(captured, boundary) == "Banana\nMango\n"


def test_payload_stops_at_marker_printed_by_body():
    boundary = effective_boundary("!!!!")
    body_output = "One\nTwo\n" + "\n!!!!\n\n" + "Three\n"
    captured = boundary + body_output + boundary + "footer\n"

    assert extract_payload(captured, boundary) == "One\nTwo\n"


def test_empty_payload():
    boundary = effective_boundary()

    assert extract_payload(boundary + boundary, boundary) == ""


def test_missing_leading_marker_is_a_protocol_error():
    with pytest.raises(ProtocolError, match="at least one boundary") as excinfo:
        extract_payload("ERROR: not found\n", effective_boundary())

    assert "ERROR: not found" in str(excinfo.value)


def test_other_boundary_is_not_recognised():
    captured = effective_boundary("xx") + "payload"

    with pytest.raises(ProtocolError):
        extract_payload(captured, effective_boundary("yy"))
