from recipe_match.recommendation.filters import filter_recipes
from recipe_match.schema import FilterCriteria


def _ids(rows):
    return [r.id for r in rows]


def test_empty_criteria_is_identity(recipes):
    out = filter_recipes(recipes, FilterCriteria())
    assert out == recipes
    assert out is not recipes
    assert filter_recipes(recipes, None) == recipes


def test_blank_strings_are_no_constraint(recipes):
    assert filter_recipes(recipes, FilterCriteria(diet="  ", cuisine="")) == recipes


def test_difficulty_is_case_insensitive_and_requires_value(recipes):
    assert _ids(filter_recipes(recipes, FilterCriteria(difficulty="EASY"))) == [1]
    # recipe 5 has no difficulty and never matches a difficulty filter
    assert 5 not in _ids(filter_recipes(recipes, FilterCriteria(difficulty="medium")))


def test_cuisine_exact_match(recipes):
    assert _ids(filter_recipes(recipes, FilterCriteria(cuisine=" italian "))) == [1, 4]
    assert _ids(filter_recipes(recipes, FilterCriteria(cuisine="ital"))) == []


def test_max_time_requires_a_time(recipes):
    assert _ids(filter_recipes(recipes, FilterCriteria(max_time_minutes=25))) == [1, 2, 6]
    assert _ids(filter_recipes(recipes, FilterCriteria(max_time_minutes=0))) == []


def test_diet_matches_any_tag_case_insensitively(recipes):
    assert _ids(filter_recipes(recipes, FilterCriteria(diet="Vegetarian"))) == [1, 4, 5]


def test_all_set_fields_must_pass(recipes):
    criteria = FilterCriteria(diet="vegetarian", cuisine="italian", max_time_minutes=30)
    assert _ids(filter_recipes(recipes, criteria)) == [1]


def test_sequential_filters_equal_merged_filter(recipes):
    c1 = FilterCriteria(diet="vegetarian")
    c2 = FilterCriteria(max_time_minutes=30)
    sequential = filter_recipes(filter_recipes(recipes, c1), c2)
    assert sequential == filter_recipes(recipes, c1.merge(c2))
    assert _ids(sequential) == [1]


def test_merge_prefers_fields_set_on_other():
    merged = FilterCriteria(diet="vegan", max_time_minutes=10).merge(
        FilterCriteria(diet="vegetarian", cuisine="thai")
    )
    assert merged == FilterCriteria(diet="vegetarian", cuisine="thai", max_time_minutes=10)


def test_empty_candidates():
    assert filter_recipes([], FilterCriteria(diet="vegan")) == []
