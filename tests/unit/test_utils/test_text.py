import pytest

from schemashift.utils.text import slugify


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Add Users", "add-users"),
        ("  add__users  ", "add__users"),
        ("créer table", "creer-table"),
        ("drop!!table??", "drop-table"),
        ("--leading-and-trailing--", "leading-and-trailing"),
        ("", ""),
    ],
)
def test_slugify(value: str, expected: str) -> None:
    assert slugify(value) == expected


def test_slugify_custom_separator() -> None:
    assert slugify("add users table", separator="_") == "add_users_table"
