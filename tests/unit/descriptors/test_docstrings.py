"""Tests for docstring type extraction."""

import ast

from instantcode.descriptors import extract_doc_types, function_doc_types, parse_type_text


def unparsed(types: dict[str, ast.expr]) -> dict[str, str]:
    return {name: ast.unparse(node) for name, node in types.items()}


def test_sphinx_type_fields() -> None:
    doc = """Add things.

    :param a: first
    :type a: int
    :param list[str] b: inline type
    """
    assert unparsed(extract_doc_types(doc)) == {"a": "int", "b": "list[str]"}


def test_google_args_section() -> None:
    doc = """Greet someone.

    Args:
        name (str): Who to greet.
        times (int, optional): How often.
        *extra (str): Ignored by callers.

    Returns:
        str: The greeting.
    """
    assert unparsed(extract_doc_types(doc)) == {"name": "str", "times": "int", "extra": "str"}


def test_numpy_parameters_section() -> None:
    doc = """Scale values.

    Parameters
    ----------
    values : list of float
    factor : float, default 2.0
        Multiplier.

    Returns
    -------
    list
    """
    types = extract_doc_types(doc)
    assert set(types) == {"factor"}
    assert ast.unparse(types["factor"]) == "float"


def test_numpy_entries_stop_at_next_section() -> None:
    doc = """Parameters
    ----------
    x : int

    Returns
    -------
    y : str
    """
    assert unparsed(extract_doc_types(doc)) == {"x": "int"}


def test_sphinx_wins_over_google() -> None:
    doc = """:type x: str

    Args:
        x (int): conflicting
    """
    assert unparsed(extract_doc_types(doc)) == {"x": "str"}


def test_parse_type_text_cleanups() -> None:
    assert ast.unparse(parse_type_text(":class:`int` or `None`")) == "int | None"
    assert ast.unparse(parse_type_text("str, optional")) == "str"
    assert parse_type_text("a sequence of words (") is None
    assert parse_type_text("   ") is None


def test_no_docstring() -> None:
    assert extract_doc_types(None) == {}
    assert extract_doc_types("") == {}


def test_function_doc_types_reads_the_function_docstring() -> None:
    tree = ast.parse('def f(x):\n    """:type x: int"""\n    return x\n')
    function = tree.body[0]
    assert isinstance(function, ast.FunctionDef)
    assert unparsed(function_doc_types(function)) == {"x": "int"}
