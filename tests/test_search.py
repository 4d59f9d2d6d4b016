"""
Unit tests for autocomplete suggestions.
"""

from types import SimpleNamespace

from search import field_score, match_score, suggest


def spot(name, area=None, postcode=None):
    return SimpleNamespace(name=name, area=area, postcode=postcode)


CAFES = [
    spot("Clifton Coffee", area="Clifton", postcode="BS8 1AB"),
    spot("Full Court Press", area="Broadmead", postcode="BS1 3EN"),
    spot("Small Street Espresso", area="Old City", postcode="BS1 1DW"),
    spot("Hart's Bakery", area="Temple Meads"),
]


def test_empty_query_gives_nothing():
    assert suggest("", CAFES) == []
    assert suggest("   ", CAFES) == []
    assert suggest(None, CAFES) == []


def test_substring_of_name_matches():
    names = [c.name for c in suggest("court", CAFES)]
    assert names[0] == "Full Court Press"


def test_case_insensitive():
    assert suggest("ESPRESSO", CAFES)[0].name == "Small Street Espresso"


def test_area_and_postcode_match():
    assert [c.name for c in suggest("broadmead", CAFES)] == ["Full Court Press"]
    assert suggest("bs8", CAFES)[0].name == "Clifton Coffee"


def test_typo_still_matches():
    assert "Clifton Coffee" in [c.name for c in suggest("cliftn", CAFES)]


def test_unrelated_query_matches_nothing():
    assert suggest("zzzzzz", CAFES) == []


def test_exact_match_ranks_above_near_match():
    cafes = [spot("Brew Lab"), spot("Bristol Brew")]
    # "bristol" is a substring of the second, only close to nothing in the first
    assert suggest("bristol", cafes)[0].name == "Bristol Brew"


def test_results_capped_at_ten():
    cafes = [spot(f"Bean Scene {i}") for i in range(15)]
    results = suggest("bean", cafes)
    assert len(results) == 10
    # equal scores keep input order
    assert [c.name for c in results] == [f"Bean Scene {i}" for i in range(10)]


def test_match_score_ignores_missing_fields():
    assert match_score("anything", spot("")) == 0
    assert match_score("hart", spot("Hart's Bakery")) == 100


def test_short_field_inside_long_query_is_not_a_match():
    cafes = [spot("Bo", area="Totterdown"), spot("Pinkmans", area="Clifton")]
    assert suggest("bosco pizzeria on whiteladies road", cafes) == []
    assert suggest("small street espresso not in clifton", cafes) == []


def test_long_query_close_to_whole_name_still_matches():
    assert suggest("small street espresso bristol", CAFES)[0].name == "Small Street Espresso"


def test_field_score_direction():
    assert field_score("bo", "bosco") == 100
    assert field_score("bosco pizzeria", "bo") < 70
