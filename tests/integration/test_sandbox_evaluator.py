"""Integration tests: real child interpreters evaluating calls."""

import json
import sys

import pytest

from instantcode.config import SandboxConfig
from instantcode.frontend import parse_source
from instantcode.sandbox import FailureKind, SandboxEvaluator


def evaluate(source: str, call: str, **config):
    evaluator = SandboxEvaluator(SandboxConfig(**config))
    return evaluator.evaluate(parse_source(source).code, call)


def test_returns_the_sum() -> None:
    result = evaluate("def add(a: int, b: int) -> int:\n    return a + b\n", "add(-3, 4)")
    assert result.ok
    assert result.value == "1"
    assert result.duration > 0


def test_returns_templated_string() -> None:
    result = evaluate("def greet(name: str):\n    return f'Hello, {name}!'\n", "greet('foo bar')")
    assert json.loads(result.value) == "Hello, foo bar!"


def test_non_ascii_text_is_shown_as_written() -> None:
    result = evaluate("def f(s: str):\n    return s + '!'\n", "f('caf\u00e9')")
    assert result.value == '"caf\u00e9!"'
    assert result.render() == '"caf\u00e9!"'


def test_thrown_error_becomes_failure() -> None:
    result = evaluate("def k():\n    raise Exception('boom')\n", "k()")
    assert not result.ok
    assert result.kind is FailureKind.RUNTIME_THROW
    assert "boom" in result.error


def test_undefined_name_is_reported() -> None:
    result = evaluate("def f():\n    return missing + 1\n", "f()")
    assert result.error == "NameError: name 'missing' is not defined"


def test_malformed_call_is_compile_failure() -> None:
    result = evaluate("def f(): ...\n", "f(")
    assert result.kind is FailureKind.COMPILE_TIME_UNREACHABLE


def test_endless_loop_times_out() -> None:
    result = evaluate("def spin():\n    while True:\n        pass\n", "spin()", timeout_seconds=1.0)
    assert result.kind is FailureKind.RUNTIME_THROW
    assert result.error == "TimeoutError: evaluation exceeded 1s"


def test_each_evaluation_starts_fresh() -> None:
    source = "COUNTER = [0]\ndef bump():\n    COUNTER[0] += 1\n    return COUNTER[0]\n"
    evaluator = SandboxEvaluator()
    code = parse_source(source).code
    assert evaluator.evaluate(code, "bump()").value == "1"
    assert evaluator.evaluate(code, "bump()").value == "1"


def test_imports_are_stubbed() -> None:
    source = "import os\ndef f():\n    os.remove('precious.txt')\n    return 'done'\n"
    assert json.loads(evaluate(source, "f()").value) == "done"


def test_allowed_imports_work() -> None:
    source = "import math\ndef f(x):\n    return math.sqrt(x)\n"
    assert evaluate(source, "f(16)", allowed_imports=("math",)).value == "4.0"


def test_no_file_access() -> None:
    result = evaluate("def f():\n    return open('/etc/hostname').read()\n", "f()")
    assert result.error.startswith("NameError")


def test_environment_is_not_inherited(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INSTANTCODE_SECRET", "hunter2")
    source = "import os\ndef f():\n    return repr(os.environ)\n"
    result = evaluate(source, "f()", allowed_imports=("os",))
    assert "hunter2" not in result.value


def test_printed_output_is_captured() -> None:
    result = evaluate("def f():\n    print('side effect')\n    return None\n", "f()")
    assert result.value == "null"
    assert result.output == "side effect\n"


def test_unserializable_values_fall_back_to_repr() -> None:
    result = evaluate("class Box:\n    def __repr__(self):\n        return 'Box()'\ndef f():\n    return Box()\n", "f()")
    assert result.value == '"Box()"'


def test_async_functions_are_awaited() -> None:
    result = evaluate("async def f(x):\n    return [x, x]\n", "f(2)")
    assert result.value == "[2, 2]"


def test_generators_are_listed() -> None:
    result = evaluate("def gen(n):\n    yield from range(n)\n", "gen(3)")
    assert result.value == "[0, 1, 2]"


@pytest.mark.skipif(sys.platform != "linux", reason="address-space limits are enforced on Linux")
def test_memory_limit_stops_runaway_allocation() -> None:
    source = "def hog():\n    return len(bytearray(2 * 1024 ** 3))\n"
    result = evaluate(source, "hog()", memory_limit_mb=256)
    assert not result.ok
    assert "MemoryError" in result.error
