from hexbytes import HexBytes
from hypothesis import given
from hypothesis.strategies import lists, one_of, none, sampled_from, text
import pytest

from events_cache.filters import (
    AnyOf,
    EventFilter,
    Single,
    Wildcard,
    derive_key,
    flatten_topics,
)
from events_cache.filters.topic import topic_from_raw
from fixtures.general import ADDRESS, TRANSFER_TOPIC

HEX_DIGITS = "0123456789abcdef"


def identifiers():
    return text(HEX_DIGITS, min_size=1, max_size=8).map(lambda t: f"0x{t}")


def raw_topics():
    return lists(one_of(none(), identifiers(), lists(identifiers(), max_size=3)))


def test_topic_from_raw():
    assert topic_from_raw(None) == Wildcard()
    assert topic_from_raw("0xAB") == Single("0xab")
    assert topic_from_raw(["0x02", "0x01"]) == AnyOf(("0x02", "0x01"))
    assert topic_from_raw(("0x02", "0x01")) == AnyOf(("0x02", "0x01"))
    assert topic_from_raw({"0x02", "0x01"}) == AnyOf(("0x01", "0x02"))
    assert topic_from_raw(HexBytes("0x0a0b")) == Single("0x0a0b")
    assert topic_from_raw(b"\x0a\x0b") == Single("0x0a0b")
    assert topic_from_raw(Single("0x01")) == Single("0x01")
    with pytest.raises(TypeError):
        topic_from_raw(1)


def test_flatten_topics():
    assert flatten_topics(None) == []
    assert flatten_topics([]) == []
    assert flatten_topics([Wildcard(), Wildcard()]) == []
    assert flatten_topics(
        [Single("0x01"), Wildcard(), AnyOf(("0x03", "0x02")), Single("0x04")]
    ) == ["0x01", "0x03", "0x02", "0x04"]
    assert flatten_topics(["0x01", None, ["0x03", "0x02"]]) == ["0x01", "0x03", "0x02"]


def test_derive_key():
    assert (
        derive_key(1, ADDRESS, [Single("0x01"), None, AnyOf(("0x02", "0x03"))])
        == "1:0x6b175474e89094c44da98b954eedeac495271d0f:0x01.0x02.0x03"
    )
    assert derive_key("mainnet", None, None) == "mainnet::"


def test_derive_key_distinguishes_filters():
    keys = {
        derive_key(1, ADDRESS, [TRANSFER_TOPIC]),
        derive_key(2, ADDRESS, [TRANSFER_TOPIC]),
        derive_key(1, "0x5d3a536E4D6DbD6114cc1Ead35777bAB948E3643", [TRANSFER_TOPIC]),
        derive_key(1, ADDRESS, []),
        derive_key(1, ADDRESS, [TRANSFER_TOPIC, "0x01"]),
        derive_key(1, ADDRESS, [["0x01", "0x02"]]),
        derive_key(1, ADDRESS, [["0x02", "0x01"]]),
    }
    assert len(keys) == 7


def test_derive_key_same_filters():
    assert derive_key(1, ADDRESS, [TRANSFER_TOPIC]) == derive_key(
        "1", ADDRESS.lower(), [TRANSFER_TOPIC.upper().replace("0X", "0x")]
    )
    # wildcards contribute nothing
    assert derive_key(1, ADDRESS, [TRANSFER_TOPIC, None]) == derive_key(
        1, ADDRESS, [TRANSFER_TOPIC]
    )


@given(topics=raw_topics(), network=sampled_from(["1", "mainnet"]))
def test_derive_key_deterministic(topics, network):
    f1 = EventFilter(ADDRESS, topics)
    f2 = EventFilter(ADDRESS.lower(), [t for t in topics])
    assert f1 == f2
    assert f1.cache_key(network) == f2.cache_key(network)
    assert f1.cache_key(network).startswith(f"{network}:{ADDRESS.lower()}:")


def test_event_filter_from_params():
    f = EventFilter.from_params(
        {"address": ADDRESS, "topics": [TRANSFER_TOPIC, None, [ADDRESS, ADDRESS]]}
    )
    assert f.address == ADDRESS.lower()
    assert f.topics == [
        Single(TRANSFER_TOPIC),
        Wildcard(),
        AnyOf((ADDRESS.lower(), ADDRESS.lower())),
    ]
    assert f.flat_topics() == [TRANSFER_TOPIC, ADDRESS.lower(), ADDRESS.lower()]

    empty = EventFilter.from_params({})
    assert empty.address is None
    assert empty.topics == []

    with pytest.raises(TypeError):
        EventFilter.from_params({"address": [ADDRESS, ADDRESS]})


def test_tagged_topics_are_normalized():
    assert topic_from_raw(Single("0xAB")) == Single("0xab")
    assert topic_from_raw(AnyOf(("0xAB", b"\x0c"))) == AnyOf(("0xab", "0x0c"))
    assert EventFilter(ADDRESS, [Single("0xAB")]).cache_key(1) == EventFilter(
        ADDRESS, ["0xAB"]
    ).cache_key(1)
    assert EventFilter(ADDRESS, [AnyOf(("0xAB", "0xCD"))]).cache_key(1) == EventFilter(
        ADDRESS, [["0xab", "0xcd"]]
    ).cache_key(1)


def test_flattening_drops_slot_structure():
    assert derive_key(1, ADDRESS, [AnyOf(("0x01", "0x02"))]) == derive_key(
        1, ADDRESS, [Single("0x01"), Single("0x02")]
    )
