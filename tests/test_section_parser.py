"""
Tests for feedback section parsing and marker recognition.
"""

import pytest

from feedback_text_parser.models.feedback_data import Category, FeedbackEntry
from feedback_text_parser.services.section_parser import (
    BOLD,
    BRACKET,
    COLON,
    DOUBLE_HASH,
    SINGLE_HASH,
    FeedbackSectionParser,
    MarkerMatch,
    MarkerPattern,
    parse_feedback_sections,
    parse_feedback_text,
)
from feedback_text_parser.services.text_normalizer import normalize_text


SCENARIO_A = (
    "##Positive##\nGreat leadership.\n\n"
    "##Needs Improvement##\nTime management.\n\n"
    "##Observational##\nTakes notes."
)


def entries_as_pairs(result):
    return [(entry.category, entry.text) for entry in result]


# Documented scenarios

def test_three_double_hash_sections_in_order():
    result = parse_feedback_sections(normalize_text(SCENARIO_A))

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Great leadership."),
        (Category.NEEDS_IMPROVEMENT, "Time management."),
        (Category.OBSERVATIONAL, "Takes notes."),
    ]


def test_whitespace_only_input_gives_empty_result():
    result = parse_feedback_sections(normalize_text("   \n\n\t \n  "))

    assert len(result) == 0
    assert not result


def test_empty_section_is_dropped():
    result = parse_feedback_sections(normalize_text("##Positive##\n\n##Observational##\nSome note."))

    assert entries_as_pairs(result) == [(Category.OBSERVATIONAL, "Some note.")]


def test_single_hash_matches_double_hash():
    single = parse_feedback_sections("#Positive# Great presentation.")
    double = parse_feedback_sections("##Positive## Great presentation.")

    assert list(single) == list(double) == [FeedbackEntry(Category.POSITIVE, "Great presentation.")]


# General properties

@pytest.mark.parametrize("text", [
    "",
    "Just a paragraph with no structure at all.",
    "Score: 5 out of 10. Notes: arrived late.",
    "#teamwork and #culture matter [unclear] **bold** text",
])
def test_text_without_markers_gives_empty_result(text):
    assert len(parse_feedback_sections(text)) == 0


@pytest.mark.parametrize("label", ["POSITIVE", "positive", "Positive", "pOsItIvE"])
def test_labels_are_case_insensitive(label):
    result = parse_feedback_sections(f"##{label}## Clear speaker.")

    assert entries_as_pairs(result) == [(Category.POSITIVE, "Clear speaker.")]


def test_needs_improvement_tolerates_extra_inner_spaces():
    result = parse_feedback_sections("##needs   IMPROVEMENT## Be on time.")

    assert entries_as_pairs(result) == [(Category.NEEDS_IMPROVEMENT, "Be on time.")]


def test_entry_count_matches_non_empty_recognized_sections():
    text = normalize_text(
        "##Positive##\nA.\n##Observational##\n\n##Needs Improvement##\nB.\n##Positive##\nC.\n##Observational##"
    )
    result = parse_feedback_sections(text)

    assert len(result) == 3
    assert [entry.text for entry in result] == ["A.", "B.", "C."]


def test_order_follows_marker_position():
    result = parse_feedback_sections("##Observational## one ##Positive## two ##Observational## three")

    assert result.categories() == [Category.OBSERVATIONAL, Category.POSITIVE, Category.OBSERVATIONAL]
    assert [entry.text for entry in result] == ["one", "two", "three"]


def test_repeated_category_yields_separate_entries():
    result = parse_feedback_sections("##Positive## First. ##Positive## Second.")

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "First."),
        (Category.POSITIVE, "Second."),
    ]


def test_unknown_label_drops_its_whole_block():
    text = normalize_text(
        "##Positive##\nGood work.\n##Random##\nShould vanish.\n##Observational##\nNote."
    )
    result = parse_feedback_sections(text)

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Good work."),
        (Category.OBSERVATIONAL, "Note."),
    ]
    assert all("vanish" not in entry.text for entry in result)


@pytest.mark.parametrize("label", ["Section 2", "Other-notes", "Comments (optional)", "Q&A"])
def test_unknown_label_with_digits_or_punctuation_drops_its_block(label):
    result = parse_feedback_sections(f"##Positive## Good work. ##{label}## Should vanish. ##Observational## Note.")

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Good work."),
        (Category.OBSERVATIONAL, "Note."),
    ]


@pytest.mark.parametrize("text", [
    "###Positive### Great.",
    "####Positive#### Great.",
    "###Positive## Great.",
])
def test_longer_hash_runs_are_consumed_by_the_marker(text):
    result = parse_feedback_sections(text)

    assert entries_as_pairs(result) == [(Category.POSITIVE, "Great.")]


def test_text_before_first_marker_is_ignored():
    result = parse_feedback_sections("Student: Jane Doe ##Positive## Helpful.")

    assert entries_as_pairs(result) == [(Category.POSITIVE, "Helpful.")]


def test_trailing_marker_without_body_emits_nothing():
    result = parse_feedback_sections("##Positive## Good. ##Observational##")

    assert entries_as_pairs(result) == [(Category.POSITIVE, "Good.")]


def test_parse_feedback_text_normalizes_first():
    result = parse_feedback_text(SCENARIO_A)

    assert [entry.text for entry in result] == ["Great leadership.", "Time management.", "Takes notes."]


def test_multiline_body_is_joined_by_normalization():
    result = parse_feedback_text("##Positive##\nGreat\nleadership\nskills.")

    assert result[0].text == "Great leadership skills."


# Alternative notations

def test_alternative_paste_format():
    raw = (
        "#Positive#\nGreat presentation skills and confident speaking.\n\n"
        "[Needs Improvement]\nShould improve listening skills during group work.\n\n"
        "Observational: Often stays after class to discuss topics."
    )
    result = parse_feedback_text(raw)

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Great presentation skills and confident speaking."),
        (Category.NEEDS_IMPROVEMENT, "Should improve listening skills during group work."),
        (Category.OBSERVATIONAL, "Often stays after class to discuss topics."),
    ]


def test_bold_markers():
    result = parse_feedback_sections("**Positive** Great job. **Needs Improvement:** Be on time.")

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Great job."),
        (Category.NEEDS_IMPROVEMENT, "Be on time."),
    ]


def test_colon_markers():
    result = parse_feedback_sections("Positive: Clear speaker. observational: Asks questions.")

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Clear speaker."),
        (Category.OBSERVATIONAL, "Asks questions."),
    ]


def test_bracket_marker_with_colon():
    result = parse_feedback_sections("[Positive]: Helpful to peers.")

    assert entries_as_pairs(result) == [(Category.POSITIVE, "Helpful to peers.")]


def test_emphasis_around_double_hash_marker():
    result = parse_feedback_sections("**##Positive##** Great. ##**Observational**## Quiet.")

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Great."),
        (Category.OBSERVATIONAL, "Quiet."),
    ]


def test_mixed_notations_in_one_document():
    result = parse_feedback_sections("##Positive## A. [Needs Improvement] B. Observational: C.")

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "A."),
        (Category.NEEDS_IMPROVEMENT, "B."),
        (Category.OBSERVATIONAL, "C."),
    ]


def test_prose_brackets_and_hashtags_stay_in_body():
    result = parse_feedback_sections("#Positive# Loves #teamwork and #culture# events [unclear] mostly.")

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Loves #teamwork and #culture# events [unclear] mostly."),
    ]


def test_colon_marker_needs_word_boundary():
    result = parse_feedback_sections("##Observational## Nonpositive: stays in body.")

    assert entries_as_pairs(result) == [(Category.OBSERVATIONAL, "Nonpositive: stays in body.")]


@pytest.mark.parametrize("body", [
    "Results were positive: all tests passed.",
    "Peers found him observational: he notices details.",
    "The trend is positive : steady growth.",
])
def test_colon_label_inside_a_sentence_stays_in_body(body):
    result = parse_feedback_sections(f"##Observational## {body}")

    assert entries_as_pairs(result) == [(Category.OBSERVATIONAL, body)]


def test_colon_marker_after_sentence_end_opens_section():
    result = parse_feedback_sections("##Positive## Kind to peers! Needs improvement: Punctuality.")

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Kind to peers!"),
        (Category.NEEDS_IMPROVEMENT, "Punctuality."),
    ]


# Individual recognizers

def test_double_hash_search_reports_span_and_label():
    match = DOUBLE_HASH.search("xx ##Observational## y")

    assert match == MarkerMatch(notation="double_hash", label="Observational", start=3, end=20)


@pytest.mark.parametrize("text, label", [
    ("##Random##", "Random"),
    ("##Section 2##", "Section 2"),
    ("## Comments (optional) ##", "Comments (optional)"),
    ("###Positive###", "Positive"),
])
def test_double_hash_accepts_any_single_line_label(text, label):
    match = DOUBLE_HASH.search(text)

    assert match.label == label
    assert (match.start, match.end) == (0, len(text))


def test_single_hash_does_not_match_inside_double_hash():
    assert SINGLE_HASH.search("##Positive##") is None


def test_single_hash_only_accepts_known_labels():
    assert SINGLE_HASH.search("#culture# and more") is None
    assert SINGLE_HASH.search("see #Observational# here").start == 4


def test_bracket_search_keeps_raw_label():
    assert BRACKET.search("[ Needs  Improvement ]").label == "Needs  Improvement"


def test_bold_search_consumes_trailing_colon():
    match = BOLD.search("**Positive**: yes")

    assert match.end == len("**Positive**:")


def test_colon_search_respects_word_boundary():
    assert COLON.search("nonpositive: x") is None
    assert COLON.search("Done. Positive: x").label == "Positive"


def test_colon_search_only_at_start_or_after_sentence_end():
    assert COLON.search("Positive: x").start == 0
    assert COLON.search("results were positive: x") is None
    assert COLON.search("(Positive: x)") is None
    assert COLON.search("done; positive: x").label == "positive"


def test_search_starts_from_position():
    text = "##Positive## a ##Observational## b"

    assert DOUBLE_HASH.search(text, len("##Positive##")).label == "Observational"


# Parser configuration

def test_parser_limited_to_double_hash_ignores_other_notations():
    parser = FeedbackSectionParser(patterns=[DOUBLE_HASH])

    assert len(parser.parse("#Positive# Nice. [Observational] Quiet.")) == 0


def test_additional_notation_plugs_into_scan():
    angle = MarkerPattern("angle", r"<<\s*(?P<label>[A-Za-z ]+?)\s*>>")
    parser = FeedbackSectionParser(patterns=[DOUBLE_HASH, angle])

    result = parser.parse("<<Positive>> Nice. ##Observational## Note.")

    assert entries_as_pairs(result) == [
        (Category.POSITIVE, "Nice."),
        (Category.OBSERVATIONAL, "Note."),
    ]


def test_same_position_tie_goes_to_first_listed_pattern():
    text = "**Positive:** Nice"

    bold_first = FeedbackSectionParser(patterns=[BOLD, COLON]).find_markers(text)
    colon_first = FeedbackSectionParser(patterns=[COLON, BOLD]).find_markers(text)

    assert [m.notation for m in bold_first] == ["bold"]
    assert [m.notation for m in colon_first] == ["colon"]


def test_find_markers_returns_non_overlapping_spans_in_order():
    text = "##Positive## a #Needs Improvement# b [Observational] c"
    markers = FeedbackSectionParser().find_markers(text)

    assert [m.notation for m in markers] == ["double_hash", "single_hash", "bracket"]
    assert all(a.end <= b.start for a, b in zip(markers, markers[1:]))


def test_parser_requires_patterns():
    with pytest.raises(ValueError):
        FeedbackSectionParser(patterns=[])
