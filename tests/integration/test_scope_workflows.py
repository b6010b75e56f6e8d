"""End-to-end workflows combining outcomes, scopes and sequence helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pytest

from castor import (
    Failure,
    ResultScope,
    Success,
    collect,
    map_unexpected_fault,
    map_values,
    run,
    run_catching,
    scoped,
)

pytestmark = pytest.mark.integration


class ParseError(Enum):
    MISSING = "missing"
    NOT_A_NUMBER = "not_a_number"
    OUT_OF_RANGE = "out_of_range"
    CRASHED = "crashed"


@dataclass(frozen=True)
class Endpoint:
    host: str
    port: int


def field(record: dict[str, str], key: str) -> Success[str] | Failure[str]:
    return Success(record[key]) if key in record else Failure(key)


def parse_port(raw: str) -> Success[int] | Failure[ParseError]:
    if not raw.isdigit():
        return Failure(ParseError.NOT_A_NUMBER)
    port = int(raw)
    if not 0 < port < 65536:
        return Failure(ParseError.OUT_OF_RANGE)
    return Success(port)


@scoped
def parse_endpoint(
    scope: ResultScope[Endpoint, ParseError], record: dict[str, str]
) -> Endpoint:
    # field() reports the missing key; map it into this scope's error type.
    host = scope.unwrap(field(record, "host").map_error(lambda _: ParseError.MISSING))
    raw_port = scope.unwrap(
        field(record, "port").map_error(lambda _: ParseError.MISSING)
    )
    return Endpoint(host, scope.unwrap(parse_port(raw_port)))


def test_records_parse_into_endpoints() -> None:
    outcome = parse_endpoint({"host": "db", "port": "5432"})

    assert outcome == Success(Endpoint("db", 5432))


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        ({"port": "80"}, ParseError.MISSING),
        ({"host": "db"}, ParseError.MISSING),
        ({"host": "db", "port": "http"}, ParseError.NOT_A_NUMBER),
        ({"host": "db", "port": "70000"}, ParseError.OUT_OF_RANGE),
    ],
)
def test_first_problem_wins(record: dict[str, str], expected: ParseError) -> None:
    assert parse_endpoint(record) == Failure(expected)


def test_batch_parse_collects_or_reports_first_failure() -> None:
    good = [{"host": "a", "port": "1"}, {"host": "b", "port": "2"}]
    bad = [*good, {"host": "c"}, {"host": "d", "port": "x"}]

    assert collect(parse_endpoint(r) for r in good) == Success(
        [Endpoint("a", 1), Endpoint("b", 2)]
    )
    assert collect(parse_endpoint(r) for r in bad) == Failure(ParseError.MISSING)


def test_nested_scopes_compose_outcomes() -> None:
    records = [{"host": "a", "port": "1"}, {"host": "b", "port": "0"}]

    def block(scope: ResultScope[list[str], ParseError]) -> list[str]:
        hosts = map_values([parse_endpoint(r) for r in records], lambda e: e.host)
        # The failing inner scope never disturbs this one until unwrapped.
        return scope.unwrap(collect(hosts))

    assert run(block) == Failure(ParseError.OUT_OF_RANGE)


def test_catching_scope_folds_crashes_into_domain_errors() -> None:
    def load(raw: dict[str, str] | None) -> Success[int] | Failure[ParseError]:
        def block(scope: ResultScope[int, ParseError]) -> int:
            endpoint = scope.unwrap(parse_endpoint(raw))  # type: ignore[arg-type]
            return endpoint.port

        return map_unexpected_fault(
            run_catching(block), lambda _: ParseError.CRASHED
        )

    assert load({"host": "a", "port": "8080"}) == Success(8080)
    assert load({"host": "a"}) == Failure(ParseError.MISSING)
    # None is not a mapping: field() raises TypeError underneath the scope.
    assert load(None) == Failure(ParseError.CRASHED)
