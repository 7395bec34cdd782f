"""Child-side runner for sandboxed evaluation.

This file runs as ``python -I -c <source>`` in a fresh interpreter. It reads
one JSON request from stdin, executes the module code and the call in a
namespace whose builtins lack file, eval and import access, and writes one
JSON response to the real stdout. It depends on the standard library only.
"""

import asyncio
import base64
import builtins
import inspect
import io
import itertools
import json
import marshal
import math
import sys

MAX_GENERATOR_ITEMS = 20

REMOVED_BUILTINS = (
    "open",
    "input",
    "exec",
    "eval",
    "compile",
    "breakpoint",
    "exit",
    "quit",
    "help",
    "copyright",
    "credits",
    "license",
)


class StubModule:
    """Inert stand-in for a module user code is not allowed to import."""

    def __init__(self, name="stub"):
        self._name = name

    def __getattr__(self, attr):
        if attr.startswith("__") and attr.endswith("__"):
            raise AttributeError(attr)
        return StubModule(f"{self._name}.{attr}")

    def __call__(self, *args, **kwargs):
        # bare decorators from stubbed modules leave the function usable
        if len(args) == 1 and not kwargs and callable(args[0]):
            return args[0]
        return StubModule(f"{self._name}()")

    def __getitem__(self, key):
        return self

    def __or__(self, other):
        return self

    def __ror__(self, other):
        return self

    def __mro_entries__(self, bases):
        return ()

    def __repr__(self):
        return f"<stub {self._name}>"


def make_import(allowed, real_import=builtins.__import__):
    """``__import__`` replacement that stubs every module not in ``allowed``."""
    allowed = frozenset(allowed)

    def guarded_import(name, globals=None, locals=None, fromlist=(), level=0):
        if level == 0 and name.partition(".")[0] in allowed:
            return real_import(name, globals, locals, fromlist, level)
        return StubModule(name)

    return guarded_import


def restricted_builtins(allowed):
    table = dict(vars(builtins))
    for name in REMOVED_BUILTINS:
        table.pop(name, None)
    table["__import__"] = make_import(allowed)
    return table


def describe(exc):
    message = str(exc)
    name = type(exc).__name__
    return f"{name}: {message}" if message else name


def serialize(value):
    """JSON text for ``value``, degrading to ``repr`` when JSON cannot express it."""
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError, OverflowError, RecursionError):
        pass
    # repr of user objects may raise anything
    try:
        return json.dumps(value, default=repr, ensure_ascii=False)
    except Exception:
        pass
    try:
        return repr(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__}>"


def materialize(value):
    if inspect.iscoroutine(value):
        value = asyncio.run(value)
    if inspect.isgenerator(value):
        value = list(itertools.islice(value, MAX_GENERATOR_ITEMS))
    return value


def apply_limits(memory_limit_mb, cpu_seconds):
    try:
        import resource
    except ImportError:
        return
    limits = []
    if memory_limit_mb:
        limits.append((resource.RLIMIT_AS, memory_limit_mb * 1024 * 1024))
    if cpu_seconds:
        limits.append((resource.RLIMIT_CPU, int(math.ceil(cpu_seconds))))
    for kind, soft in limits:
        _, hard = resource.getrlimit(kind)
        if hard != resource.RLIM_INFINITY:
            soft = min(soft, hard)
        try:
            resource.setrlimit(kind, (soft, hard))
        except (ValueError, OSError):
            pass


def evaluate(request):
    """Run the module code and the call; return a response dict."""
    try:
        call_code = compile(request["call"], "<call>", "eval")
    except SyntaxError as exc:
        return {"ok": False, "kind": "compile", "error": describe(exc)}

    namespace = {
        "__name__": "__sandbox__",
        "__builtins__": restricted_builtins(request.get("allowed_imports") or ()),
    }
    # sandbox boundary: nothing raised by user code escapes
    try:
        module_code = marshal.loads(base64.b64decode(request["code"]))
        exec(module_code, namespace)
        value = materialize(eval(call_code, namespace))
    except BaseException as exc:
        return {"ok": False, "kind": "runtime", "error": describe(exc)}
    return {"ok": True, "value": serialize(value)}


def main():
    request = json.loads(sys.stdin.read())
    apply_limits(request.get("memory_limit_mb"), request.get("cpu_seconds"))

    real_stdout = sys.stdout
    captured = io.StringIO()
    sys.stdout = sys.stderr = captured
    try:
        response = evaluate(request)
    finally:
        sys.stdout, sys.stderr = real_stdout, sys.__stderr__

    limit = request.get("max_output_chars", 4096)
    response["output"] = captured.getvalue()[:limit]
    real_stdout.write(json.dumps(response))
    real_stdout.flush()


if __name__ == "__main__":
    main()
