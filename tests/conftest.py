"""Shared fixtures for refererparser tests."""

import json

import pytest

from refererparser.dataset import load_referers
from refererparser.parser import Parser

SAMPLE_REFERERS = {
    "unknown": {
        "Google": {"domains": ["support.google.com"]},
    },
    "search": {
        "Google": {
            "parameters": ["q", "query"],
            "domains": ["google.com", "google.co.uk"],
        },
        "Google Images": {
            "parameters": ["q"],
            "domains": ["google.com/imgres"],
        },
        "Yahoo!": {
            "parameters": ["p"],
            "domains": ["search.yahoo.com"],
        },
    },
    "social": {
        "Facebook": {"domains": ["facebook.com", "m.facebook.com"]},
    },
    "email": {
        "Gmail": {"domains": ["mail.google.com"]},
    },
    "paid": {
        "Google": {"domains": ["www.google.com/aclk", "googleadservices.com"]},
    },
    "internal": {
        "Intranet": {"domains": ["intranet.example.com"]},
    },
}


@pytest.fixture
def sample_document() -> dict:
    return json.loads(json.dumps(SAMPLE_REFERERS))


@pytest.fixture
def sample_json() -> str:
    return json.dumps(SAMPLE_REFERERS)


@pytest.fixture
def parser(sample_document: dict) -> Parser:
    return Parser(load_referers(sample_document))
