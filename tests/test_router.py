import pytest

from core.exceptions import InvalidRequest
from core.router import TargetResolver


@pytest.fixture()
def resolver():
    return TargetResolver()


@pytest.mark.parametrize(
    "path,query,expected",
    [
        ("/example.com/foo", "x=1", "https://example.com/foo?x=1"),
        ("/github.com/user/repo.git/info/refs", "service=git-upload-pack",
         "https://github.com/user/repo.git/info/refs?service=git-upload-pack"),
        ("/raw.githubusercontent.com/u/r/main/README.md", "",
         "https://raw.githubusercontent.com/u/r/main/README.md"),
        ("/example.com/a%20b/c", "q=a%2Fb&&z", "https://example.com/a%20b/c?q=a%2Fb&&z"),
        ("/example.com/dir/", "", "https://example.com/dir/"),
    ],
)
def test_resolve_builds_https_url(resolver, path, query, expected):
    assert resolver.resolve(path, query).url == expected


def test_bare_domain_has_empty_remainder(resolver):
    target = resolver.resolve("/example.com")

    assert target.domain == "example.com"
    assert target.remainder == ""
    assert target.url == "https://example.com/"


def test_query_with_leading_question_mark_is_not_doubled(resolver):
    assert resolver.resolve("/example.com/x", "?a=1").url == "https://example.com/x?a=1"


def test_only_one_leading_separator_is_stripped(resolver):
    target = resolver.resolve("//example.com/foo")

    assert target.domain == "example.com"
    assert target.remainder == "foo"


@pytest.mark.parametrize("path", ["", "/"])
def test_empty_path_is_rejected(resolver, path):
    with pytest.raises(InvalidRequest) as exc_info:
        resolver.resolve(path)

    assert exc_info.value.status_code == 400
    assert exc_info.value.payload() == {"error": "Invalid proxy URL format"}


@pytest.mark.parametrize("path", ["//", "///"])
def test_separator_only_path_is_rejected(resolver, path):
    with pytest.raises(InvalidRequest) as exc_info:
        resolver.resolve(path)

    assert exc_info.value.payload() == {"error": "Invalid path format"}


def test_domain_is_not_validated(resolver):
    assert resolver.resolve("/not a host/x").url == "https://not a host/x"
