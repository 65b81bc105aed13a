import json

from recipebox.ingest.jsonld import (
    find_recipe_object,
    iter_json_ld_blocks,
    parse_instructions,
    parse_json_ld,
)


def _page(*blocks: str) -> str:
    scripts = "".join(f'<script type="application/ld+json">{b}</script>' for b in blocks)
    return f"<html><head>{scripts}</head><body><h1>Page heading</h1></body></html>"


def test_minimal_recipe_uses_import_url_as_source():
    html = _page(json.dumps({"@type": "Recipe", "name": "X", "recipeIngredient": ["2 cups flour"]}))
    recipe = parse_json_ld(html, "https://example.com/r")
    assert recipe is not None
    assert recipe.source_url == "https://example.com/r"
    assert [i.model_dump() for i in recipe.ingredients] == [
        {"quantity": "2", "unit": "cups", "name": "flour"}
    ]


def test_page_url_wins_over_import_url():
    html = _page(json.dumps({"@type": "Recipe", "name": "X", "url": "https://site.test/canonical"}))
    recipe = parse_json_ld(html, "https://site.test/r?utm=1")
    assert recipe.source_url == "https://site.test/canonical"


def test_relative_page_url_and_image_resolve_against_import_url():
    data = {"@type": "Recipe", "name": "X", "url": "/recipes/x", "image": "/img/x.jpg"}
    recipe = parse_json_ld(_page(json.dumps(data)), "https://site.test/recipes/x?utm=1")
    assert recipe.source_url == "https://site.test/recipes/x"
    assert recipe.image_url == "https://site.test/img/x.jpg"


def test_full_field_mapping():
    data = {
        "@context": "https://schema.org",
        "@graph": [
            {"@type": "WebPage", "name": "Not a recipe"},
            {
                "@type": "Recipe",
                "name": "Lemon Chicken",
                "description": "Bright and quick.",
                "recipeCategory": ["Mains"],
                "prepTime": "PT15M",
                "cookTime": "PT30M",
                "totalTime": "PT1H",
                "recipeYield": ["4", "4 servings"],
                "image": [{"url": "/img/chicken.jpg"}],
                "recipeIngredient": ["1 lb chicken", "Salt to taste"],
                "recipeInstructions": [
                    {"@type": "HowToStep", "text": "Season the chicken."},
                    {
                        "@type": "HowToSection",
                        "itemListElement": [
                            {"@type": "HowToStep", "text": "Sear."},
                            {"@type": "HowToStep", "text": "Simmer."},
                        ],
                    },
                ],
                "keywords": "chicken, lemon, , weeknight",
            },
        ],
    }
    recipe = parse_json_ld(_page(json.dumps(data)), "https://cook.test/lemon-chicken")
    record = recipe.to_record()
    assert record["title"] == "Lemon Chicken"
    assert record["category"] == "Main Course"
    assert (record["prepTime"], record["cookTime"], record["additionalTime"]) == (15, 30, 15)
    assert record["servings"] == 4
    assert record["imageUrl"] == "https://cook.test/img/chicken.jpg"
    assert record["ingredients"][0] == {"quantity": "1", "unit": "lbs", "name": "chicken"}
    assert record["ingredients"][1] == {"quantity": "", "unit": "", "name": "Salt to taste"}
    assert record["instructions"] == ["Season the chicken.", "Sear. Simmer."]
    assert record["tags"] == ["chicken", "lemon", "weeknight"]


def test_inconsistent_total_time_does_not_go_negative():
    data = {"@type": "Recipe", "name": "X", "prepTime": "PT20M", "cookTime": "PT20M", "totalTime": "PT30M"}
    recipe = parse_json_ld(_page(json.dumps(data)))
    assert recipe.additional_time == 0


def test_malformed_block_is_skipped():
    good = json.dumps([{"@type": "Organization"}, {"@type": "Recipe", "name": "Second block"}])
    html = _page("{not json", good)
    blocks = list(iter_json_ld_blocks(html))
    assert [b.ok for b in blocks] == [False, True]
    assert parse_json_ld(html).title == "Second block"


def test_first_recipe_wins():
    html = _page(
        json.dumps({"@type": "Recipe", "name": "First"}),
        json.dumps({"@type": "Recipe", "name": "Second"}),
    )
    assert parse_json_ld(html).title == "First"


def test_no_recipe_returns_none():
    assert parse_json_ld(_page(json.dumps({"@type": "Article"}))) is None
    assert parse_json_ld("<html><body>nothing</body></html>") is None


def test_find_recipe_object_shapes():
    assert find_recipe_object({"@type": ["Recipe", "NewsArticle"], "name": "a"})["name"] == "a"
    assert find_recipe_object({"@graph": ["junk", {"@type": "Recipe", "name": "b"}]})["name"] == "b"
    # a @graph without a Recipe is not searched further
    assert find_recipe_object({"@graph": [], "@type": "Recipe"}) is None


def test_instruction_shapes():
    assert parse_instructions("Mix everything.") == ["Mix everything."]
    assert parse_instructions(["One", {"text": "Two"}, {}, 3]) == ["One", "Two"]
    assert parse_instructions(None) == []
