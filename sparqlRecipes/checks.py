from __future__ import annotations

"""Expected results for each recipe and the code that compares them."""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List

from sparqlRecipes import fixtures, recipes
from sparqlRecipes.config import RepositoryProfile
from sparqlRecipes.sparql import FusekiClient
from sparqlRecipes.utils.log_json import JsonLogger

_logger = JsonLogger("checks")


@dataclass(frozen=True)
class RecipeCheck:
    """One query and the column (or whole rows) it must return.

    ``expected`` is a list when ``ordered`` is set, a set of row tuples
    when ``whole_rows`` is set, and a set of cell values otherwise.
    """

    name: str
    query: str
    column: str | None
    expected: Any
    ordered: bool = False
    whole_rows: bool = False


@dataclass(frozen=True)
class CheckResult:
    name: str
    passed: bool
    expected: Any
    actual: Any


def build_checks(uri_for_pid: Callable[[str], str], profile: RepositoryProfile) -> List[RecipeCheck]:
    uri = uri_for_pid
    project_or_collection = (uri(fixtures.PID_PROJ1), uri(fixtures.PID_COL2))
    return [
        RecipeCheck(
            "1b",
            recipes.objects_with_text_datastream_query(profile),
            "object",
            [uri(fixtures.PID_103)],
            ordered=True,
        ),
        RecipeCheck(
            "1c",
            recipes.objects_with_pdf_datastream_query(profile),
            "object",
            {uri(fixtures.PID_101), uri(fixtures.PID_103)},
        ),
        RecipeCheck("2b-object", recipes.titled_objects_query(), "object", {uri(fixtures.PID_201)}),
        RecipeCheck("2b-title", recipes.titled_objects_query(), "title", {fixtures.TITLE}),
        RecipeCheck(
            "3e",
            recipes.collection_members_query(),
            None,
            {
                ("obj", "col"),
                (uri(fixtures.PID_OBJ1), uri(fixtures.PID_COL1)),
                (uri(fixtures.PID_OBJ2), uri(fixtures.PID_COL2)),
                (uri(fixtures.PID_OBJ3), uri(fixtures.PID_COL3)),
            },
            whole_rows=True,
        ),
        RecipeCheck(
            "3f",
            recipes.nested_collection_members_query(uri(fixtures.PID_COL1)),
            "obj",
            {uri(fixtures.PID_OBJ1), uri(fixtures.PID_OBJ2), uri(fixtures.PID_OBJ3)},
        ),
        RecipeCheck(
            "3h",
            recipes.project_or_collection_query(*project_or_collection),
            "obj",
            {uri(fixtures.PID_OBJ1), uri(fixtures.PID_OBJ2)},
        ),
        RecipeCheck(
            "count",
            recipes.count_project_or_collection_query(*project_or_collection),
            "count",
            ["2"],
            ordered=True,
        ),
    ]


def actual_for(fuseki: FusekiClient, check: RecipeCheck) -> Any:
    """Run the check's query and shape the result like ``check.expected``."""

    # Whole-row comparisons parse the raw body, trailing newline included.
    response = fuseki.select(check.query, strip=not check.whole_rows)
    if check.whole_rows:
        return {tuple(row) for row in response.rows}
    values = response.values(check.column or "")
    return values if check.ordered else set(values)


def run_check(fuseki: FusekiClient, check: RecipeCheck) -> CheckResult:
    actual = actual_for(fuseki, check)
    result = CheckResult(check.name, actual == check.expected, check.expected, actual)
    emit = _logger.info if result.passed else _logger.warning
    emit("check.result", name=check.name, passed=result.passed, expected=_display(check.expected), actual=_display(actual))
    return result


def run_checks(fuseki: FusekiClient, checks: Iterable[RecipeCheck]) -> List[CheckResult]:
    return [run_check(fuseki, check) for check in checks]


def _display(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


__all__ = ["CheckResult", "RecipeCheck", "actual_for", "build_checks", "run_check", "run_checks"]
