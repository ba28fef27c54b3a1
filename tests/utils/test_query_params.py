"""Query parameter parsing: include lists, page values, include trees."""

from catalog_jsonapi.utils.query_params import (
    build_include_tree,
    parse_query_params,
    query_pairs,
)


def test_query_pairs_from_string_keeps_order_and_blanks():
    pairs = query_pairs("?b=2&a=1&empty=")
    assert pairs == [("b", "2"), ("a", "1"), ("empty", "")]


def test_query_pairs_from_mapping_expands_sequences():
    pairs = query_pairs({"include": "entities", "tag": ["x", "y"], "skip": None})
    assert pairs == [("include", "entities"), ("tag", "x"), ("tag", "y")]


def test_query_pairs_ignores_unusable_values():
    assert query_pairs(None) == []
    assert query_pairs("") == []
    assert query_pairs(42) == []


def test_include_is_split_trimmed_and_deduplicated():
    params = parse_query_params([("include", " entities, video,,entities ")])
    assert params["include"] == ["entities", "video"]


def test_missing_include_is_empty():
    assert parse_query_params([])["include"] == []


def test_page_values_are_parsed_as_ints():
    params = parse_query_params([("page[limit]", "14"), ("page[offset]", "0")])
    assert params["page"] == {"limit": 14, "offset": 0}


def test_malformed_page_values_degrade_to_none():
    params = parse_query_params(
        [("page[limit]", "ten"), ("page[offset]", "-3"), ("page[size]", "5")]
    )
    assert params["page"] == {"limit": None, "offset": None}


def test_include_tree_nests_dotted_paths():
    tree = build_include_tree(["entities", "entities.author", "video"])
    assert tree == {"entities": {"author": {}}, "video": {}}
