from recipe_match.ingredients.caption_parser import CaptionParser
from recipe_match.ingredients.normalizer import IngredientNormalizer
from recipe_match.ingredients.synonyms import SynonymTable


def test_empty_input_yields_empty_list():
    parser = CaptionParser()
    assert parser.extract_ingredients("") == []
    assert parser.extract_ingredients("   \n\t") == []
    assert parser.extract_ingredients(None) == []


def test_noise_words_are_stripped():
    parser = CaptionParser()
    assert parser.extract_ingredients("a bowl of fresh chopped tomatoes and onions") == [
        "tomato",
        "onion",
    ]


def test_one_two_and_three_word_lookups_in_order():
    parser = CaptionParser()
    assert parser.extract_ingredients("grilled chicken with bell peppers and olive oil") == [
        "chicken",
        "bell pepper",
        "pepper",
        "olive oil",
        "oil",
    ]
    assert parser.extract_ingredients("hot chili sauce") == ["hot sauce", "chili", "sauce"]


def test_punctuation_and_case_are_ignored():
    parser = CaptionParser()
    assert parser.extract_ingredients("Tomatoes, BASIL & mozzarella!") == [
        "tomato",
        "basil",
        "mozzarella",
    ]


def test_duplicates_collapse_to_first_occurrence():
    parser = CaptionParser()
    assert parser.extract_ingredients("eggs, egg, tomato, tomatoes, eggs") == ["egg", "tomato"]


def test_unrecognised_words_are_dropped():
    parser = CaptionParser()
    assert parser.extract_ingredients("a delicious looking dragonfruit smoothie") == []


def test_noise_removal_is_substring_based():
    parser = CaptionParser()
    # "pasta " contains the noise entry "a ", so pasta is lost mid-sentence
    assert parser.extract_ingredients("pasta with tomato") == ["tomato"]
    # at the very end there is no trailing space, so it survives
    assert parser.extract_ingredients("tomato pasta") == ["tomato", "pasta"]


def test_parser_is_deterministic():
    parser = CaptionParser()
    text = "a plate of salmon, lemons, butter and fresh dill"
    assert parser.extract_ingredients(text) == parser.extract_ingredients(text)


def test_fixture_table_and_custom_noise(small_table):
    parser = CaptionParser(IngredientNormalizer(small_table))
    assert parser.extract_ingredients("spring onions on toast") == ["scallion"]
    assert parser.extract_ingredients("hot chili sauce") == ["chili sauce"]

    no_noise = CaptionParser(IngredientNormalizer(small_table), noise_words=[])
    assert no_noise.remove_noise("a bowl of tomatoes") == "a bowl of tomatoes"
    assert no_noise.extract_ingredients("a bowl of tomatoes") == ["tomato"]


def test_phrase_length_follows_table_and_is_capped_at_three():
    long_key = SynonymTable({"big red bell pepper": "capsicum"})
    assert long_key.max_phrase_words == 4
    assert CaptionParser(IngredientNormalizer(long_key)).extract_ingredients("big red bell pepper") == []

    # canonical names count towards the phrase length too
    short_variants = SynonymTable({"evoo": "olive oil"})
    assert short_variants.max_phrase_words == 2
    parser = CaptionParser(IngredientNormalizer(short_variants))
    assert parser.extract_ingredients("drizzle of olive oil") == ["olive oil"]
