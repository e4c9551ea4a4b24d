from college_pool.logic.constants import MOST_SELECTIVE_INSTITUTIONS
from college_pool.logic.normalizer import normalize_identity, matches_any, search_variants


def test_acronym_resolves_to_full_name():
    assert normalize_identity("MIT") == "massachusetts institute of technology"
    assert normalize_identity("mit") == normalize_identity("Massachusetts Institute of Technology")


def test_parenthetical_suffix_is_stripped():
    assert normalize_identity("Massachusetts Institute of Technology (MIT)") == \
        "massachusetts institute of technology"


def test_hyphenated_campus_matches_acronym():
    assert normalize_identity("University of California-Los Angeles") == normalize_identity("UCLA")


def test_punctuation_and_ampersand():
    assert normalize_identity("Texas A&M University") == "texas a and m university"
    assert normalize_identity("St. John's College") == "st johns college"
    assert normalize_identity("  Smith   College ") == "smith college"


def test_leading_article_is_dropped():
    assert normalize_identity("The Ohio State University") == normalize_identity("Ohio State")


def test_custom_alias_table():
    aliases = {"big state": "big state university"}
    assert normalize_identity("Big State", aliases) == "big state university"
    # Defaults are not consulted when a table is passed
    assert normalize_identity("MIT", aliases) == "mit"


def test_matches_any_uses_aliases():
    assert matches_any("Harvard", MOST_SELECTIVE_INSTITUTIONS)
    assert matches_any("UPenn", MOST_SELECTIVE_INSTITUTIONS)
    assert not matches_any("Harvey Mudd College", MOST_SELECTIVE_INSTITUTIONS)


def test_search_variants_swaps_university_form():
    assert search_variants("University of Michigan") == ["University of Michigan", "Michigan University"]
    assert search_variants("Drake University") == ["Drake University", "University of Drake"]


def test_search_variants_expands_alias():
    variants = search_variants("MIT")
    assert variants[0] == "MIT"
    assert variants[1].lower() == "massachusetts institute of technology"
