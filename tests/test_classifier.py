"""Tests for question classification."""

import pytest

from nicodemos.query.classifier import (
    CLASSIFICATION_RULES,
    classify,
    is_exegetical,
    is_greeting,
    is_structural,
)
from nicodemos.query.models import QuestionCategory


@pytest.mark.parametrize(
    "question,expected",
    [
        ("Olá", QuestionCategory.GREETING),
        ("Bom dia, irmão!", QuestionCategory.GREETING),
        ("Shalom", QuestionCategory.GREETING),
        ("Explique João 3:16 no grego", QuestionCategory.EXEGETICAL),
        ("O que significa a palavra ágape?", QuestionCategory.EXEGETICAL),
        ("Qual a estrutura de Romanos?", QuestionCategory.STRUCTURAL),
        ("Me dê uma visão geral de Gênesis", QuestionCategory.STRUCTURAL),
        ("O que é oração?", QuestionCategory.SIMPLE),
        ("", QuestionCategory.SIMPLE),
    ],
)
def test_classify(question, expected):
    """Test classification of representative questions."""
    assert classify(question) == expected


def test_greeting_word_limit():
    """Test that long messages starting with a salutation are not greetings."""
    question = "Olá, qual a estrutura de Romanos?"

    assert not is_greeting(question)
    assert classify(question) == QuestionCategory.STRUCTURAL


def test_greeting_outranks_exegetical():
    """Test that rule order breaks ties."""
    question = "Oi, explique Mateus 5:3"

    assert is_greeting(question)
    assert is_exegetical(question)
    assert classify(question) == QuestionCategory.GREETING


def test_structural_outranks_exegetical():
    """Test that structural vocabulary wins over verse references."""
    question = "Qual o panorama de Romanos 1:1 a 8:39?"

    assert is_structural(question)
    assert classify(question) == QuestionCategory.STRUCTURAL


def test_salutation_must_be_a_whole_token():
    """Test that words merely starting like a salutation are not greetings."""
    assert not is_greeting("História de Israel")
    assert not is_greeting("Oito bem-aventuranças")


def test_rule_order():
    """Test that rules are evaluated greeting, structural, exegetical."""
    assert [category for _, category in CLASSIFICATION_RULES] == [
        QuestionCategory.GREETING,
        QuestionCategory.STRUCTURAL,
        QuestionCategory.EXEGETICAL,
    ]


def test_classify_is_deterministic():
    """Test that repeated classification gives the same category."""
    questions = ["Olá", "Explique Romanos 8:28", "Estrutura de Atos", "Quem foi Davi?"]

    assert [classify(q) for q in questions] == [classify(q) for q in questions]
