"""
Test data generators for partial parsing benchmarks.

Creates generation documents shaped like model output and splits them into
the chunk streams a completion client would deliver:
- Different sizes (short command / long explanation)
- Different complexity levels (flat / structured explanation)
- Escape-heavy commands
"""

import json
import random
import string
from typing import Any

_COMMANDS = [
    "ls -la",
    "du -sh * | sort -h",
    "git log --oneline --graph --decorate",
    'find . -name "*.py" -exec grep -l "TODO" {} \\;',
    "tar -czvf backup.tar.gz ~/Documents",
    "ps aux | grep python | awk '{print $2}'",
]

# Typical model delta sizes in characters
_MIN_CHUNK = 1
_MAX_CHUNK = 8


def generate_test_data(data_type: str) -> str:
    """Generates a complete JSON document of the specified type."""
    generators = {
        "short_generation": _generate_short_generation,
        "long_generation": _generate_long_generation,
        "structured_explanation": _generate_structured_explanation,
        "escape_heavy": _generate_escape_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]()


def generate_chunks(document: str, seed: int = 0) -> list[str]:
    """Splits a document into randomly sized deltas, reproducibly."""
    rng = random.Random(seed)
    chunks = []
    pos = 0
    while pos < len(document):
        size = rng.randint(_MIN_CHUNK, _MAX_CHUNK)
        chunks.append(document[pos : pos + size])
        pos += size
    return chunks


def _generate_short_generation() -> str:
    """Generates a one-line command with a short explanation."""
    data = {
        "command": "ls -la",
        "explanation": "ls lists directory contents\n-la shows hidden files in long format",
    }
    return json.dumps(data)


def _generate_long_generation() -> str:
    """Generates a generation with a multi-paragraph explanation."""
    command = random.choice(_COMMANDS)
    lines = [
        f"{part}: {_random_sentence(random.randint(8, 20))}"
        for part in command.split()
    ]
    data = {"command": command, "explanation": "\n".join(lines * 5)}
    return json.dumps(data, indent=2)


def _generate_structured_explanation() -> str:
    """Generates an explanation the model returned as nested JSON."""
    data: dict[str, Any] = {
        "command": random.choice(_COMMANDS),
        "explanation": {
            "parts": [
                {
                    "token": _random_string(6),
                    "meaning": _random_sentence(10),
                    "optional": random.choice([True, False]),
                    "weight": round(random.uniform(0, 1), 3),
                }
                for _ in range(20)
            ],
            "warnings": [_random_sentence(6) for _ in range(3)],
            "destructive": False,
        },
    }
    return json.dumps(data)


def _generate_escape_heavy() -> str:
    """Generates commands full of quotes, backslashes and unicode."""
    data = {
        "command": " && ".join(_COMMANDS),
        "explanation": "\n".join(
            f'Step {i}: "quoted" \\path\\{_random_string(5)} → café'
            for i in range(50)
        ),
    }
    return json.dumps(data)


def _random_sentence(words: int) -> str:
    """Generates a sentence of random lowercase words."""
    return " ".join(
        _random_string(random.randint(2, 9)).lower() for _ in range(words)
    )


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
