from college_pool.logic.constants import DISPLAY_BANDS
from college_pool.logic.display import fnv1a_32, display_value, normalize_display


def test_fnv1a_reference_vectors():
    assert fnv1a_32("") == 0x811C9DC5
    assert fnv1a_32("a") == 0xE40C292C
    assert fnv1a_32("foobar") == 0xBF9CF968


def test_in_band_probability_is_kept(make_candidate):
    shown = normalize_display([make_candidate("A College", tier="match", probability=55)])
    assert shown[0].display_probability == 55


def test_out_of_band_probability_is_replaced(make_candidate):
    pool = [
        make_candidate("A College", tier="reach", probability=50),
        make_candidate("B College", tier="safety", probability=40),
        make_candidate("C College", tier="match"),
    ]
    for candidate in normalize_display(pool):
        low, high = DISPLAY_BANDS[candidate.tier]
        assert low <= candidate.display_probability <= high


def test_display_value_is_deterministic():
    first = display_value("Reed College", "reach")
    assert first == display_value("Reed College", "reach")
    assert first == display_value("reed college", "reach")
    assert 1 <= first <= 29


def test_display_value_formula():
    key = "reed college"
    assert display_value("Reed College", "safety") == 80 + fnv1a_32(key) % 16
