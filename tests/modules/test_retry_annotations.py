from batchgen.retry_annotations import (
    describe_exception,
    format_retry_failure,
    is_failure_annotation,
)


def test_format_retry_failure():
    message = format_retry_failure("image", 3, reason="timeout")
    assert message == "[generation failure] image failed after 2 retries (attempts=3; last error: timeout)"
    assert is_failure_annotation(message)


def test_format_retry_failure_defaults():
    message = format_retry_failure("", 0)
    assert message == (
        "[generation failure] generation failed after 0 retries "
        "(attempts=1; last error: no additional details)"
    )


def test_plain_text_is_not_an_annotation():
    assert not is_failure_annotation("Once upon a time")


def test_describe_exception():
    assert describe_exception(ValueError("bad input ")) == "ValueError: bad input"
    assert describe_exception(RuntimeError()) == "RuntimeError"
