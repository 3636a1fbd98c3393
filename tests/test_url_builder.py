# tests/test_url_builder.py
import pytest

from core.errors import InvalidArgumentError
from core.services.url_builder import build_push_url


def test_job_only():
    assert build_push_url("http://a:9091", "batch1") == "http://a:9091/job/batch1"


def test_job_and_instance_in_order():
    url = build_push_url("http://a:9091", "batch1", "worker-3")
    assert url == "http://a:9091/job/batch1/instance/worker-3"


@pytest.mark.parametrize("instance", [None, "", "   "])
def test_missing_instance_adds_no_segment(instance):
    assert build_push_url("http://a:9091", "batch1", instance) == "http://a:9091/job/batch1"


def test_trailing_slashes_are_stripped():
    assert build_push_url("https://gw.example.com/prefix//", "j") == "https://gw.example.com/prefix/job/j"


def test_reserved_characters_stay_inside_one_segment():
    url = build_push_url("http://a:9091", "etl/daily", "host a")
    assert url == "http://a:9091/job/etl%2Fdaily/instance/host%20a"


@pytest.mark.parametrize("endpoint", ["", "   "])
def test_empty_endpoint(endpoint):
    with pytest.raises(InvalidArgumentError) as exc_info:
        build_push_url(endpoint, "batch1")
    assert exc_info.value.param == "endpoint"


@pytest.mark.parametrize("job", ["", "  "])
def test_empty_job(job):
    with pytest.raises(InvalidArgumentError) as exc_info:
        build_push_url("http://a:9091", job)
    assert exc_info.value.param == "job"


@pytest.mark.parametrize(
    "endpoint",
    [
        "a:9091",
        "not a url",
        "/relative/path",
        "ftp://gw.example.com",
        "http://",
        "http://a:notaport",
    ],
)
def test_malformed_endpoint(endpoint):
    with pytest.raises(InvalidArgumentError) as exc_info:
        build_push_url(endpoint, "batch1")
    assert exc_info.value.param == "endpoint"
    assert exc_info.value.value == endpoint
