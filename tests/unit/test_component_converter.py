"""
Unit tests for the React/JSX component converter.
"""
import textwrap

import pytest

from toon_intent.converters import component


def _convert(source: str) -> list[str]:
    return component.convert(textwrap.dedent(source).strip()).split("\n")


def test_login_component():
    source = "function Login({ user }) { return <button onClick={login}>Login {user.name}</button>; }"
    assert component.convert(source).split("\n") == [
        "COMPONENT Login",
        "  PROP user",
        "  RENDER BUTTON",
        "    EVENT onClick login",
        "    TEXT Login",
        "    DYNAMIC user.name",
    ]


def test_hooks_effects_and_children():
    lines = _convert("""
        import React, { useState, useEffect, useCallback } from 'react';

        function TestComponent() {
            const [count, setCount] = useState(0);
            const [data, setData] = useState(null);

            useEffect(() => {
                function fetchData() {
                    console.log('Fetching data...');
                }
                fetchData();
            }, []);

            useEffect(() => {
                document.title = `Count: ${count}`;
            }, [count]);

            const handleClick = useCallback(() => {
                setCount(count + 1);
            }, [count]);

            const message = "Hello World";

            return (
                <div className="container">
                    <h1>Counter: {count}</h1>
                    <p>{message}</p>
                    <button onClick={handleClick}>Increment</button>
                </div>
            );
        }

        export default TestComponent;
    """)
    assert lines == [
        "COMPONENT TestComponent",
        "  HOOK useState count 0",
        "  HOOK useState data null",
        "  HOOK useEffect []",
        "    FUNCTION fetchData",
        "    CALL fetchData()",
        "  HOOK useEffect [count]",
        "  HOOK useCallback handleClick [count]",
        "  VARIABLE message Hello World",
        "  RENDER DIV",
        "    CLASS container",
        "    CHILD",
        "      RENDER H1",
        "        TEXT Counter:",
        "        DYNAMIC count",
        "    CHILD",
        "      RENDER P",
        "        DYNAMIC message",
        "    CHILD",
        "      RENDER BUTTON",
        "        EVENT onClick handleClick",
        "        TEXT Increment",
    ]


def test_other_hooks_functions_and_variables():
    lines = _convert("""
        function Form({ onSubmit, initial = "" }) {
            const [value, setValue] = useState(initial);
            const inputRef = useRef(null);
            const theme = useContext(ThemeContext);
            const sorted = useMemo(() => sort(items), [items]);
            const total = items.length;
            const handleChange = (e) => setValue(e.target.value);
            function reset() {
                setValue("");
            }
            return <input ref={inputRef} value={value} onChange={handleChange} />;
        }
    """)
    assert lines == [
        "COMPONENT Form",
        "  PROP onSubmit",
        "  PROP initial",
        "  HOOK useState value initial",
        "  HOOK useRef inputRef",
        "  HOOK useContext theme",
        "  HOOK useMemo sorted [items]",
        "  VARIABLE total items.length",
        "  FUNCTION handleChange",
        "  FUNCTION reset",
        "  RENDER INPUT",
        "    PROP ref inputRef",
        "    PROP value value",
        "    EVENT onChange handleChange",
    ]


def test_arrow_component_with_expression_body():
    lines = _convert("const Card = (props) => <div className={props.tone}>{props.title}</div>;")
    assert lines == [
        "COMPONENT Card",
        "  PROP props",
        "  RENDER DIV",
        "    CLASS props.tone",
        "    DYNAMIC props.title",
    ]


def test_memo_wrapped_component():
    lines = _convert("const Badge = memo(({ label }) => <span>{label}</span>);")
    assert lines == [
        "COMPONENT Badge",
        "  PROP label",
        "  RENDER SPAN",
        "    DYNAMIC label",
    ]


def test_string_and_boolean_attributes():
    lines = _convert('const Field = () => <input type="text" disabled maxLength={10} />;')
    assert lines == [
        "COMPONENT Field",
        "  RENDER INPUT",
        "    PROP type text",
        "    PROP disabled true",
        "    PROP maxLength 10",
    ]


def test_unrecognized_expressions():
    lines = _convert("function Total({ a, b }) { return <b>{a + b}</b>; }")
    assert lines[-1] == "    DYNAMIC expression"


def test_hooks_in_nested_closures_are_ignored():
    lines = _convert("""
        function Outer() {
            const helper = () => {
                const [x, setX] = useState(1);
            };
            return null;
        }
    """)
    assert lines == ["COMPONENT Outer", "  FUNCTION helper"]


def test_markup_outside_components():
    assert _convert("render(<App />, root);") == ["RENDER APP"]


def test_lowercase_functions_are_not_components():
    assert _convert("function helper() { return 1; }") == ["COMPONENT (empty)"]


def test_invalid_source_yields_error_line():
    result = component.convert("function App() { return <div>; }")
    assert result.startswith("ERROR Invalid component source:")
    assert "\n" not in result


@pytest.mark.parametrize("text,expected", [
    ("function App() {}", True),
    ("const Button = () => null", True),
    ("import React from 'react'", True),
    ("import { h } from \"preact/hooks\"", True),
    ("<Modal open />", True),
    ("hello world", False),
    ('{"a": 1}', False),
    ("<div>x</div>", False),
])
def test_detect(text, expected):
    assert component.detect(text) is expected
