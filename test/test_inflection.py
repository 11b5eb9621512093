"""
Test word transformations.
"""

from shapecraft.inflection import pluralize, strip_query_marker, underscore


def test_underscore():
    """
    Test conversion of camel-cased names.
    """
    assert underscore("Post") == "post"
    assert underscore("BlogPost") == "blog_post"
    assert underscore("DefaultUser") == "default_user"
    assert underscore("HTMLPage") == "html_page"
    assert underscore("already_snake") == "already_snake"


def test_pluralize():
    """
    Test regular plurals.
    """
    assert pluralize("comment") == "comments"
    assert pluralize("comments") == "comments"
    assert pluralize("author") == "authors"
    assert pluralize("category") == "categories"
    assert pluralize("box") == "boxes"
    assert pluralize("wolf") == "wolves"
    assert pluralize("blog_post") == "blog_posts"
    assert pluralize("") == ""


def test_pluralize_irregular():
    """
    Test irregular and uncountable words.
    """
    assert pluralize("person") == "people"
    assert pluralize("people") == "people"
    assert pluralize("child") == "children"
    assert pluralize("children") == "children"
    assert pluralize("sales_person") == "sales_people"
    assert pluralize("equipment") == "equipment"


def test_strip_query_marker():
    """
    Test removal of the query marker.
    """
    assert strip_query_marker("overdue?") == "overdue"
    assert strip_query_marker("overdue") == "overdue"
