import pytest

from presence_toolkit.errors import InvalidName, NameTaken


async def test_claim_binds_name_both_ways(registry):
    await registry.open("c1")
    result = await registry.claim("c1", "alice")

    assert result.name == "alice"
    assert result.previous is None
    assert await registry.resolve("alice") == "c1"
    assert await registry.identity_of("c1") == "alice"


async def test_claim_trims_whitespace(registry):
    await registry.open("c1")
    result = await registry.claim("c1", "  alice \n")

    assert result.name == "alice"
    assert await registry.resolve("alice") == "c1"


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
async def test_empty_name_is_rejected_without_state_change(registry, name):
    await registry.open("c1")
    await registry.claim("c1", "alice")

    with pytest.raises(InvalidName):
        await registry.claim("c1", name)

    assert await registry.identity_of("c1") == "alice"


async def test_name_held_by_another_connection_is_taken(registry):
    await registry.open("c1")
    await registry.open("c2")
    await registry.claim("c1", "alice")

    with pytest.raises(NameTaken):
        await registry.claim("c2", "alice")

    assert await registry.resolve("alice") == "c1"
    assert await registry.identity_of("c2") is None


async def test_failed_claim_keeps_previous_identity(registry):
    await registry.open("c1")
    await registry.open("c2")
    await registry.claim("c1", "alice")
    await registry.claim("c2", "bob")

    with pytest.raises(NameTaken):
        await registry.claim("c2", "alice")

    assert await registry.identity_of("c2") == "bob"
    assert await registry.resolve("bob") == "c2"


async def test_reclaiming_same_name_is_idempotent(registry):
    await registry.open("c1")
    await registry.claim("c1", "alice")
    result = await registry.claim("c1", "alice")

    assert result.previous == "alice"
    assert await registry.online_identities() == ["alice"]


async def test_renaming_frees_the_old_name(registry):
    await registry.open("c1")
    await registry.open("c2")
    await registry.claim("c1", "alice")
    result = await registry.claim("c1", "alicia")

    assert result.previous == "alice"
    assert await registry.resolve("alice") is None
    assert (await registry.claim("c2", "alice")).name == "alice"


async def test_names_are_case_sensitive(registry):
    await registry.open("c1")
    await registry.open("c2")
    await registry.claim("c1", "alice")
    await registry.claim("c2", "Alice")

    assert await registry.online_identities() == ["Alice", "alice"]


async def test_release_makes_name_immediately_claimable(registry):
    await registry.open("c1")
    await registry.claim("c1", "alice")

    assert await registry.release("c1") == "alice"
    assert await registry.resolve("alice") is None

    await registry.open("c2")
    assert (await registry.claim("c2", "alice")).name == "alice"


async def test_release_of_anonymous_or_unknown_connection(registry):
    await registry.open("c1")

    assert await registry.release("c1") is None
    assert await registry.release("c1") is None
    assert await registry.release("never-opened") is None


async def test_claim_on_released_connection_fails(registry):
    await registry.open("c1")
    await registry.release("c1")

    with pytest.raises(KeyError):
        await registry.claim("c1", "alice")
    assert await registry.resolve("alice") is None
