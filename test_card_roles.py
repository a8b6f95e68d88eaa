from card_roles import DEFAULT_ROLE_TABLE, CardRole, RoleTable


def test_default_roles() -> None:
    assert DEFAULT_ROLE_TABLE.has("Tinker", CardRole.IMPORTANT_CAST)
    assert DEFAULT_ROLE_TABLE.has("Tinker", CardRole.PAYOFF)
    assert DEFAULT_ROLE_TABLE.has("Force of Will", CardRole.INTERACTION)
    assert not DEFAULT_ROLE_TABLE.has("Force of Will", CardRole.IMPORTANT_CAST)
    assert DEFAULT_ROLE_TABLE.roles("Unknown Card") == frozenset()


def test_merged_adds_without_replacing() -> None:
    table = DEFAULT_ROLE_TABLE.merged({"Tinker": [CardRole.SELECTION], "Windfall": [CardRole.SELECTION]})
    assert table.has("Tinker", CardRole.PAYOFF)
    assert table.has("Tinker", CardRole.SELECTION)
    assert table.has("Windfall", CardRole.SELECTION)
    assert not DEFAULT_ROLE_TABLE.has("Windfall", CardRole.SELECTION)


def test_from_tag_lists_ignores_unknown_tags() -> None:
    table = RoleTable.from_tag_lists({"Windfall": ["Selection", "wheel"], "Null Rod": ["hate"]})
    assert table.roles("Windfall") == frozenset({CardRole.SELECTION})
    assert table.roles("Null Rod") == frozenset()
    assert table.names_with(CardRole.SELECTION) == {"Windfall"}
