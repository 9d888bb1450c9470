"""
Pytest configuration and shared fixtures for wizjson tests.

Provides immutable test data fixtures: complete documents whose every prefix
must resolve, and prefix/expected-value pairs for the repair rules.
"""

import json
from dataclasses import dataclass
from typing import Any

import pytest


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str
    should_fail: bool = False
    expected_output: Any = None
    skip_reason: str = ""


PASS1 = """[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
    }
]"""

PASS2 = '[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]'

PASS3 = """{
    "JSON Test Pattern pass3": {
        "The outermost value": "must be an object or array.",
        "In this test": "It is an object."
    }
}"""

GENERATION = json.dumps(
    {
        "command": 'find . -name "*.log" -mtime +7 -exec rm {} \\;',
        "explanation": (
            "find . : search the current directory\n"
            '-name "*.log" : match log files\n'
            "-mtime +7 : modified more than 7 days ago\n"
            "-exec rm {} \\; : delete each match"
        ),
    },
    indent=2,
)


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides complete documents that must parse exactly like json.loads.

    Every non-empty prefix of these documents must also resolve to a value.
    """
    return [
        JsonTestCase(
            description="pass1.json - complex nested structure",
            input_data=PASS1,
            expected_output=json.loads(PASS1),
        ),
        JsonTestCase(
            description="pass2.json - deep nesting",
            input_data=PASS2,
            expected_output=json.loads(PASS2),
        ),
        JsonTestCase(
            description="pass3.json - simple object",
            input_data=PASS3,
            expected_output=json.loads(PASS3),
        ),
        JsonTestCase(
            description="generation - command with escapes",
            input_data=GENERATION,
            expected_output=json.loads(GENERATION),
        ),
        JsonTestCase(
            description="mixed containers",
            input_data='{"a": [{"b": [1, {"c": null}]}, [true, false]], "d": -0.5e+3}',
            expected_output={
                "a": [{"b": [1, {"c": None}]}, [True, False]],
                "d": -500.0,
            },
        ),
    ]


@pytest.fixture
def generation_document() -> str:
    """A pretty-printed command generation as a model would stream it."""
    return GENERATION


@pytest.fixture
def repair_cases() -> list[JsonTestCase]:
    """
    Provides prefixes with the value each must currently resolve to.

    Covers every trimming rule: open strings, dangling keys, partial
    literals and numbers, trailing commas and partial escapes.
    """
    return [
        JsonTestCase("empty buffer", "", expected_output={}),
        JsonTestCase("whitespace only", " \n\t ", expected_output={}),
        JsonTestCase("open object", "{", expected_output={}),
        JsonTestCase("open array", "[", expected_output=[]),
        JsonTestCase(
            "open string value", '{"a": "b', expected_output={"a": "b"}
        ),
        JsonTestCase(
            "complete string value", '{"a": "b"', expected_output={"a": "b"}
        ),
        JsonTestCase("partial key", '{"a": 1, "b', expected_output={"a": 1}),
        JsonTestCase(
            "key without colon", '{"a": 1, "b"', expected_output={"a": 1}
        ),
        JsonTestCase(
            "key without value", '{"a": 1, "b":', expected_output={"a": 1}
        ),
        JsonTestCase(
            "key with whitespace only",
            '{"a": 1, "b":  \n',
            expected_output={"a": 1},
        ),
        JsonTestCase("first key dangling", '{"a":', expected_output={}),
        JsonTestCase(
            "trailing comma in array", "[1,2,3,", expected_output=[1, 2, 3]
        ),
        JsonTestCase(
            "trailing comma in object",
            '{"a": 1, ',
            expected_output={"a": 1},
        ),
        JsonTestCase(
            "partial boolean in array", "[1,2,tr", expected_output=[1, 2]
        ),
        JsonTestCase(
            "partial null value", '{"a": 1, "b": nu', expected_output={"a": 1}
        ),
        JsonTestCase("partial false", "[fals", expected_output=[]),
        JsonTestCase("lone minus", "[1, -", expected_output=[1]),
        JsonTestCase("trailing dot", '{"n": 1.', expected_output={}),
        JsonTestCase("trailing exponent", "[2, 1e", expected_output=[2]),
        JsonTestCase("exponent sign", "[2, 1E+", expected_output=[2]),
        JsonTestCase("complete exponent", "[1e+5", expected_output=[1e5]),
        JsonTestCase("complete number", '{"n": -12.5', expected_output={"n": -12.5}),
        JsonTestCase(
            "nested open containers",
            '{"a": [1, {"b": tru',
            expected_output={"a": [1, {}]},
        ),
        JsonTestCase(
            "closed nested container",
            '{"a": {"x": 1}',
            expected_output={"a": {"x": 1}},
        ),
        JsonTestCase(
            "brackets inside strings",
            '{"a": "{[}]", "b": "x]',
            expected_output={"a": "{[}]", "b": "x]"},
        ),
        JsonTestCase(
            "escaped quote inside string",
            '{"a": "say \\"hi\\" now',
            expected_output={"a": 'say "hi" now'},
        ),
        JsonTestCase(
            "dangling backslash", '{"a": "x\\', expected_output={"a": "x"}
        ),
        JsonTestCase(
            "partial unicode escape",
            '["caf\\u00',
            expected_output=["caf"],
        ),
        JsonTestCase(
            "complete unicode escape",
            '["caf\\u00e9',
            expected_output=["café"],
        ),
        JsonTestCase(
            "partial key with escape",
            '{"a": 1, "b\\',
            expected_output={"a": 1},
        ),
        JsonTestCase("top-level open string", '"abc', expected_output="abc"),
        JsonTestCase("top-level number", "42", expected_output=42),
        JsonTestCase(
            "array of arrays",
            "[[1, 2], [3",
            expected_output=[[1, 2], [3]],
        ),
    ]
