import pytest

from quantity_taxonomy.queries import DEFAULT_DISCIPLINE, links_query, units_query


def test_links_query_defaults():
    q = links_query()
    assert "wd:Q107715" in q
    assert f"wd:{DEFAULT_DISCIPLINE}" in q
    assert 'wikibase:language "en"' in q
    assert "?item ?itemLabel ?linkTo" in q


def test_units_query_joins_with_comma_space():
    q = units_query("Q11379", language="de")
    assert "wd:Q11379" in q
    assert 'SEPARATOR = ", "' in q
    assert "AS ?units" in q and "AS ?concepts" in q
    assert '"[AUTO_LANGUAGE],de"' in q


def test_region_language_tags_are_accepted():
    assert '"pt-br"' in links_query(language="pt-br")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"language": 'en" } } #'},
        {"language": "e"},
        {"base": "Q1 } UNION {"},
        {"base": "P279"},
        {"base": "Q1\n"},
        {"discipline": "physics"},
    ],
)
def test_malformed_parameters_are_rejected(kwargs):
    with pytest.raises(ValueError):
        links_query(**kwargs)
    with pytest.raises(ValueError):
        units_query(**kwargs)
