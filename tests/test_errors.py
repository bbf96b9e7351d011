"""Tests for GitHub error classification and diagnostic messages."""

import pytest

from resource_library.services.errors import (
    MAX_BODY_CHARS,
    ErrorKind,
    RateLimitInfo,
    classify,
    describe,
)

EXHAUSTED = RateLimitInfo(limit="60", remaining="0", reset="1767225600")


class TestClassify:
    def test_403_with_zero_remaining_is_rate_limited(self) -> None:
        assert classify(403, EXHAUSTED, "") is ErrorKind.RATE_LIMITED

    def test_403_with_quota_left_is_generic(self) -> None:
        info = RateLimitInfo(limit="60", remaining="12")
        assert classify(403, info, "Resource not accessible") is ErrorKind.GENERIC

    def test_403_without_headers_is_generic(self) -> None:
        assert classify(403, None, "") is ErrorKind.GENERIC

    def test_409_is_empty_repo_or_missing_branch(self) -> None:
        assert classify(409, RateLimitInfo(), "") is ErrorKind.REPOSITORY_EMPTY_OR_BRANCH_MISSING

    def test_404_is_not_found(self) -> None:
        assert classify(404, RateLimitInfo(), "") is ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("status", [400, 401, 422, 500, 502])
    def test_other_statuses_are_generic(self, status: int) -> None:
        assert classify(status, RateLimitInfo(), "") is ErrorKind.GENERIC


class TestRateLimitInfo:
    def test_from_headers_is_case_insensitive(self) -> None:
        info = RateLimitInfo.from_headers(
            {"X-RateLimit-Limit": "60", "x-ratelimit-remaining": "0", "X-RATELIMIT-RESET": "0"}
        )
        assert info.limit == "60"
        assert info.remaining == "0"
        assert info.reset == "0"
        assert info.exhausted is True

    def test_missing_headers_are_none(self) -> None:
        info = RateLimitInfo.from_headers({})
        assert info == RateLimitInfo()
        assert info.exhausted is False
        assert info.summary() == ""

    def test_reset_at_is_iso_utc(self) -> None:
        assert EXHAUSTED.reset_at() == "2026-01-01T00:00:00+00:00"

    def test_reset_at_ignores_garbage(self) -> None:
        assert RateLimitInfo(reset="soon").reset_at() is None


class TestDescribe:
    def test_rate_limited_suggests_token_when_anonymous(self) -> None:
        msg = describe(ErrorKind.RATE_LIMITED, status=403, rate_limit=EXHAUSTED)
        assert "limit 60" in msg
        assert "token" in msg
        assert "wait" in msg

    def test_rate_limited_with_token_only_suggests_waiting(self) -> None:
        msg = describe(
            ErrorKind.RATE_LIMITED, status=403, rate_limit=EXHAUSTED, authenticated=True
        )
        assert "Configure a GitHub token" not in msg
        assert "Wait" in msg

    def test_not_found_lists_every_cause(self) -> None:
        msg = describe(ErrorKind.NOT_FOUND, status=404, context="tree")
        for cause in ("owner", "repository", "branch", "path", "private"):
            assert cause in msg

    def test_conflict_mentions_empty_repo(self) -> None:
        msg = describe(ErrorKind.REPOSITORY_EMPTY_OR_BRANCH_MISSING, status=409)
        assert "empty" in msg

    def test_generic_truncates_body(self) -> None:
        body = "x" * (MAX_BODY_CHARS + 50)
        msg = describe(ErrorKind.GENERIC, status=500, body=body)
        assert "500" in msg
        assert "x" * MAX_BODY_CHARS in msg
        assert "x" * (MAX_BODY_CHARS + 1) not in msg
