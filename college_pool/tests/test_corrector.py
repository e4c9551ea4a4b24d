"""
Metadata correction: banding, region inference, testing policy, reference data.
"""

import pytest

from college_pool.logic.constants import SizeCategory
from college_pool.logic.contracts import ReferenceInstitution
from college_pool.logic.corrector import (
    size_category_for,
    infer_state,
    correct_candidate,
    correct_all,
)
from college_pool.logic.reference_data import build_reference_index


@pytest.mark.parametrize("enrollment,expected", [
    (1, SizeCategory.MICRO),
    (1999, SizeCategory.MICRO),
    (2000, SizeCategory.SMALL),
    (5000, SizeCategory.SMALL),
    (5001, SizeCategory.MEDIUM),
    (15000, SizeCategory.MEDIUM),
    (15001, SizeCategory.LARGE),
    (30000, SizeCategory.LARGE),
    (30001, SizeCategory.MEGA),
])
def test_size_banding_boundaries(enrollment, expected):
    assert size_category_for(enrollment) == expected


def test_unknown_enrollment_is_not_banded(make_candidate, config):
    assert size_category_for(0) is None
    assert size_category_for(-10) is None

    candidate = make_candidate("Acme Institute", size_category="Large", enrollment=0)
    assert correct_candidate(candidate, config).size_category == "Large"


def test_size_is_rederived_from_enrollment(make_candidate, config):
    candidate = make_candidate("University of Oregon", enrollment=19000, size_category="Small")
    assert correct_candidate(candidate, config).size_category == "Large"


@pytest.mark.parametrize("identity,state", [
    ("University of Oregon", "OR"),
    ("Ohio State", "OH"),
    ("Kansas State University", "KS"),
    ("West Virginia University", "WV"),
    ("Miami University", "OH"),
    ("University of Miami", "FL"),
    ("WashU", "MO"),
    ("University of Washington", "WA"),
    ("Duke University", "NC"),
])
def test_state_inference(identity, state, config):
    assert infer_state(identity, config) == state


@pytest.mark.parametrize("identity,state", [
    ("Cornell College", None),
    ("Georgetown College", None),
    ("Emory & Henry College", None),
    ("Boston Baptist College", None),
    ("Brigham Young University-Idaho", "ID"),
])
def test_curated_names_do_not_match_other_schools(identity, state, config):
    assert infer_state(identity, config) == state


def test_similar_name_keeps_its_own_region(make_candidate, config):
    candidate = make_candidate("Cornell College", region="Midwest")
    assert correct_candidate(candidate, config).region == "Midwest"


def test_region_unchanged_when_nothing_matches(make_candidate, config):
    candidate = make_candidate("Acme Institute", region="West")
    assert correct_candidate(candidate, config).region == "West"


def test_region_overrides_source(make_candidate, config):
    candidate = make_candidate("Boston University", region="West")
    assert correct_candidate(candidate, config).region == "Northeast"


def test_test_required_list_wins(make_candidate, config):
    candidate = make_candidate("Georgia Tech", testing_policy="optional")
    assert correct_candidate(candidate, config).testing_policy == "required"


def test_reference_entry_is_ground_truth(make_candidate, config):
    reference = ReferenceInstitution(
        name="Sample College", url="https://www.sample.edu", state="VT",
        enrollment=1500, admit_rate=0.6, testing_policy="blind",
    )
    index = build_reference_index([reference], config.name_aliases)
    candidate = make_candidate("Sample College", region="South", enrollment=9000, testing_policy="required")

    corrected = correct_candidate(candidate, config, index)

    assert corrected.enrollment == 1500
    assert corrected.size_category == "Micro"
    assert corrected.region == "Northeast"
    assert corrected.testing_policy == "blind"
    assert corrected.reference_url == "https://www.sample.edu"


def test_correction_is_idempotent(make_candidate, config):
    candidates = [
        make_candidate("UCLA", region="South", enrollment=32000, size_category="Small"),
        make_candidate("Georgia Tech", testing_policy="blind", enrollment=18000),
        make_candidate("Acme Institute"),
    ]
    once = correct_all(candidates, config)
    twice = correct_all(once, config)
    assert once == twice
    assert once[0].region == "West"
    assert once[0].size_category == "Mega"
