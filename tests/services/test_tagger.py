"""
Tests for HandleTagger: mention resolution against container membership.
"""

from parley.models.chat import ContainerRef


def test_tags_member_once(service, alice, bob, general):
    """Repeated mentions of the same member yield one tag."""
    ref = ContainerRef.channel(general)
    assert service.tagger.tagged_members(ref, "@bobjones @bobjones hi @bobjones") == [bob]


def test_ignores_non_members(service, alice, bob, carol, general):
    ref = ContainerRef.channel(general)
    assert service.tagger.tagged_members(ref, "hey @carolwhite") == []


def test_ignores_unknown_handles(service, alice, general):
    ref = ContainerRef.channel(general)
    assert service.tagger.tagged_members(ref, "@nobody @ @") == []


def test_handle_match_is_case_sensitive(service, alice, bob, general):
    ref = ContainerRef.channel(general)
    assert service.tagger.tagged_members(ref, "@BobJones") == []


def test_punctuation_is_part_of_the_token(service, alice, bob, general):
    ref = ContainerRef.channel(general)
    assert service.tagger.tagged_members(ref, "thanks @bobjones!") == []


def test_token_runs_to_whitespace_not_next_at(service, alice, bob, general):
    """Each "@" starts its own candidate, running to the next whitespace."""
    ref = ContainerRef.channel(general)
    assert service.tagger.tagged_members(ref, "thanks @bobjones@alicesmith") == [alice]
    assert service.tagger.tagged_members(ref, "hey @bobjones@x") == []


def test_order_of_first_mention(service, alice, bob, general):
    ref = ContainerRef.channel(general)
    assert service.tagger.tagged_members(ref, "@bobjones @alicesmith @bobjones") == [bob, alice]


def test_dm_membership(service, alice, bob, carol):
    dm_id = service.dms.create(alice, [bob])
    ref = ContainerRef.dm(dm_id)
    assert service.tagger.tagged_members(ref, "@bobjones @carolwhite") == [bob]


def test_excerpt_uses_configured_length(service):
    assert service.tagger.excerpt("hello @johnmate how is it going today?") == "hello @johnmate how "
