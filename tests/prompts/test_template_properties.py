"""
Property-based tests for prompt templates and input interpolation.
"""
import allure
import pytest
from hypothesis import given, settings, strategies as st, assume

from aika.constants import DEFAULT_PROMPTS
from aika.errors import UnknownPrompt
from aika.prompts import PASSTHROUGH, PromptLibrary, PromptTemplate, interpolate


MARKER = "{input}"

plain_text = st.text(min_size=0, max_size=100).filter(lambda s: MARKER not in s)


@st.composite
def template_strategy(draw):
    """Generate a template with zero or more markers between plain segments."""
    segments = draw(st.lists(plain_text, min_size=1, max_size=6))
    template = MARKER.join(segments)
    # Joining can create a marker across a segment boundary
    assume(template.count(MARKER) == len(segments) - 1)
    return template, segments


@allure.feature("Prompt Templates")
@allure.story("Every marker is replaced")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(data=template_strategy(), input_text=plain_text)
def test_every_marker_is_replaced(data, input_text: str):
    """
    For any template and input without markers, the result is the template
    with every marker replaced by the input.
    """
    template, segments = data

    result = interpolate(template, input_text)

    assert result == input_text.join(segments)


@allure.feature("Prompt Templates")
@allure.story("Interpolation is idempotent")
@allure.severity(allure.severity_level.NORMAL)
@settings(max_examples=100)
@given(data=template_strategy(), input_text=plain_text)
def test_interpolation_is_idempotent(data, input_text: str):
    """Reapplying interpolation to a result that holds no marker changes nothing."""
    template, _ = data

    once = interpolate(template, input_text)
    assume(MARKER not in once)

    assert interpolate(once, input_text) == once


@settings(max_examples=100)
@given(text=plain_text, input_text=st.text(max_size=50))
def test_template_without_marker_is_unchanged(text: str, input_text: str):
    assert interpolate(text, input_text) == text


def test_marker_inside_input_is_not_expanded():
    assert interpolate("A {input} B", "x {input} y") == "A x {input} y B"


def test_no_escaping_is_applied():
    assert interpolate("```\n{input}\n```", "`$HOME` {{braces}} \\n") == "```\n`$HOME` {{braces}} \\n\n```"


@pytest.mark.parametrize("template, expected", [
    ("{input}", "X"),
    ("{input}{input}", "XX"),
    ("pre {input} mid {input} post", "pre X mid X post"),
    ("{inpu}{input}t}", "{inpu}Xt}"),
    ("", ""),
])
def test_interpolate_examples(template, expected):
    assert interpolate(template, "X") == expected


@allure.feature("Prompt Templates")
@allure.story("Library lookup")
@allure.severity(allure.severity_level.CRITICAL)
def test_unknown_prompt_raises_with_available_names():
    library = PromptLibrary({"review": "Review {input}", "explain": "Explain {input}"})

    with pytest.raises(UnknownPrompt) as exc_info:
        library.get("summarize")

    assert exc_info.value.available == ["explain", "review"]
    assert "summarize" in str(exc_info.value)


def test_no_prompt_name_means_passthrough():
    library = PromptLibrary(DEFAULT_PROMPTS)

    assert library.get(None) is PASSTHROUGH
    assert library.render(None, "raw input") == "raw input"


def test_library_renders_named_template():
    library = PromptLibrary({"wrap": "<<{input}>>"})

    assert library.render("wrap", "body") == "<<body>>"
    assert "wrap" in library
    assert library.names() == ["wrap"]


def test_default_prompts_all_hold_a_marker():
    for name, text in DEFAULT_PROMPTS.items():
        assert PromptTemplate(name, text).has_marker, name
