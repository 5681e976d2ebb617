"""Bitbucket REST API access."""

from bbcli.adapters.bitbucket import BitbucketAdapter
from bbcli.adapters.http import DEFAULT_BASE_URL, HttpClient, Response, classify_error

__all__ = ["BitbucketAdapter", "DEFAULT_BASE_URL", "HttpClient", "Response", "classify_error"]
