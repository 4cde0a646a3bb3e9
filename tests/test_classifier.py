from wikiguide.models import INTRODUCTION_TITLE, Section
from wikiguide.src.classifier import (
    SLOT_CHAR_LIMIT,
    classify_sections,
    is_culture,
    is_history,
    is_tourism,
    truncate,
)


def section(title, content="conteúdo", level=2):
    return Section(title=title, content=content, level=level)


def test_slots_filled_in_document_order():
    slots = classify_sections([
        section(INTRODUCTION_TITLE, "Resumo", level=1),
        section("História", "Fundada pelos fenícios."),
        section("Cultura", "Fado e azulejos."),
        section("Veja", "Torre de Belém."),
    ])
    assert slots.summary == "Resumo"
    assert slots.history == "Fundada pelos fenícios."
    assert slots.culture == "Fado e azulejos."
    assert slots.tourism == "Torre de Belém."


def test_first_match_wins():
    slots = classify_sections([
        section("História", "primeira"),
        section("História moderna", "segunda"),
    ])
    assert slots.history == "primeira"


def test_history_and_culture_are_exclusive():
    slots = classify_sections([
        section("Culture and Traditions", "Festas populares."),
        section("History", "Romans and Moors."),
    ])
    assert slots.culture == "Festas populares."
    assert slots.history == "Romans and Moors."


def test_section_fills_at_most_one_slot():
    # "Cultural history" matches both history and culture rules
    slots = classify_sections([section("Cultural history", "um só uso")])
    assert slots.history == "um só uso"
    assert slots.culture is None


def test_understand_is_not_history():
    assert not is_history("Understand: history")
    assert is_history("Histoire")
    slots = classify_sections([section("Compreenda a história", "visão geral")])
    assert slots.history is None


def test_culture_and_tourism_exclusions():
    assert not is_culture("Culture to see")
    assert is_tourism("See")
    assert not is_tourism("History to see")


def test_keywords_match_whole_words():
    assert not is_tourism("Redondezas")
    assert is_tourism("O que ver")


def test_slot_contents_are_truncated():
    long_text = "x" * (SLOT_CHAR_LIMIT + 200)
    slots = classify_sections([section("Cultura", long_text)])
    assert len(slots.culture) == SLOT_CHAR_LIMIT
    assert truncate("abc", 2) == "ab"


def test_empty_sections_are_skipped():
    slots = classify_sections([
        section(INTRODUCTION_TITLE, "", level=1),
        section("História", "   "),
        section("História antiga", "Lusitanos."),
    ])
    assert slots.summary is None
    assert slots.history == "Lusitanos."
