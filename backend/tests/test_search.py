from types import SimpleNamespace

from core.search import filter_rows, row_matches

FIELDS = ("name", "phone", "user.name")

ROWS = [
    {"name": "Ramesh Patel", "phone": "+919800000001", "user": None},
    {"name": None, "phone": "+919811111111", "user": {"name": "Suresh"}},
    SimpleNamespace(name="Site Office", phone=None, user=SimpleNamespace(name="Anil")),
]


def test_blank_term_keeps_every_row():
    assert filter_rows(ROWS, "", FIELDS) == ROWS
    assert filter_rows(ROWS, None, FIELDS) == ROWS


def test_term_is_matched_as_typed():
    assert filter_rows(ROWS, "patel ", FIELDS) == []
    assert filter_rows(ROWS, "   ", FIELDS) == []
    assert filter_rows(ROWS, "h p", FIELDS) == [ROWS[0]]


def test_match_is_case_insensitive_substring():
    assert filter_rows(ROWS, "PATEL", FIELDS) == [ROWS[0]]
    assert filter_rows(ROWS, "office", FIELDS) == [ROWS[2]]


def test_dotted_fields_reach_joined_rows():
    assert filter_rows(ROWS, "suresh", FIELDS) == [ROWS[1]]
    assert filter_rows(ROWS, "anil", FIELDS) == [ROWS[2]]


def test_shown_and_hidden_rows_partition_on_the_term():
    term = "9800"
    shown = filter_rows(ROWS, term, FIELDS)
    hidden = [r for r in ROWS if r not in shown]
    assert shown and hidden
    assert all(row_matches(r, term, FIELDS) for r in shown)
    assert not any(row_matches(r, term, FIELDS) for r in hidden)


def test_unsearched_fields_are_ignored():
    rows = [{"name": "Cement", "notes": "urgent"}]
    assert filter_rows(rows, "urgent", ("name",)) == []
