"""Pytest fixtures for analyzer tests."""

import asyncio

import pytest


class FakeTransport:
    """Stands in for the analysis service; records every source it receives."""

    def __init__(self, payload=None, error=None) -> None:
        self.payload = payload
        self.error = error
        self.calls = []
        self.gate = None

    def hold(self) -> None:
        """Keep requests pending until release() is called."""
        self.gate = asyncio.Event()

    def release(self) -> None:
        self.gate.set()

    async def __call__(self, source: str) -> dict:
        self.calls.append(source)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload


class FakeResponse:
    """Minimal pyfetch FetchResponse."""

    def __init__(self, status: int = 200, body: str = "{}") -> None:
        self.status = status
        self.ok = 200 <= status < 300
        self.body = body

    async def string(self) -> str:
        return self.body


class FakeFetch:
    """Minimal pyfetch replacement."""

    def __init__(self, response=None, error=None, delay: float = 0) -> None:
        self.response = response or FakeResponse()
        self.error = error
        self.delay = delay
        self.calls = []

    async def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def flat_clean_payload() -> dict:
    """Service response for `x=1` with no errors (flat shape)."""
    return {
        "tokens": [
            {"type": "identifier", "value": "x", "line": 1},
            {"type": "symbol", "value": "=", "line": 1},
            {"type": "number", "value": "1", "line": 1},
        ],
        "lex_errors": None,
        "syn_errors": None,
        "sem_errors": [],
        "stats": {"total_tokens": 3, "identifiers": 1, "numbers": 1, "symbols": 1},
        "is_lex_valid": True,
        "is_syn_valid": True,
        "is_sem_valid": True,
    }


@pytest.fixture
def grouped_clean_payload() -> dict:
    """Same analysis as flat_clean_payload, grouped by category."""
    return {
        "identifiers": {"count": 1, "tokens": [{"value": "x", "line": 1}]},
        "symbols": {"count": 1, "tokens": [{"value": "=", "line": 1}]},
        "numbers": {"count": 1, "tokens": [{"value": "1", "line": 1}]},
        "errors": {"count": 0, "tokens": []},
    }


@pytest.fixture
def flat_lexical_error_payload() -> dict:
    """One lexical error on line 1 (flat shape)."""
    return {
        "tokens": [
            {"type": "identifier", "value": "x", "line": 1},
            {"type": "symbol", "value": "=", "line": 1},
        ],
        "lex_errors": [{"line": 1, "message": "unexpected character", "type": "lexical"}],
        "syn_errors": None,
        "sem_errors": None,
        "stats": {"total_tokens": 2, "identifiers": 1, "symbols": 1},
        "is_lex_valid": False,
        "is_syn_valid": False,
        "is_sem_valid": False,
    }


@pytest.fixture
def grouped_lexical_error_payload() -> dict:
    """Same analysis as flat_lexical_error_payload, grouped by category."""
    return {
        "identifiers": {"count": 1, "tokens": [{"value": "x", "line": 1}]},
        "symbols": {"count": 1, "tokens": [{"value": "=", "line": 1}]},
        "errors": {
            "count": 1,
            "tokens": [{"line": 1, "message": "unexpected character", "type": "lexical"}],
        },
    }


@pytest.fixture
def flat_syntactic_error_payload() -> dict:
    """Clean lexing, one syntax error."""
    return {
        "tokens": [
            {"type": "keyword", "value": "class", "line": 1},
            {"type": "symbol", "value": "{", "line": 1},
        ],
        "lex_errors": [],
        "syn_errors": [{"line": 1, "message": "Se esperaba nombre de clase", "type": "syntactic"}],
        "sem_errors": [],
        "stats": {"total_tokens": 2, "keywords": 1, "symbols": 1},
        "is_lex_valid": True,
        "is_syn_valid": False,
        "is_sem_valid": False,
    }


@pytest.fixture
def transport(flat_clean_payload) -> FakeTransport:
    return FakeTransport(payload=flat_clean_payload)
