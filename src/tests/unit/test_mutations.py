from consistent_ring import HashRing

ABC_NODES = {
    "test": "a",
    "test1": "b",
    "test2": "b",
    "test3": "c",
    "test4": "c",
    "test5": "a",
    "aaaa": "b",
    "bbbb": "a",
}

ABC_RANGES = {
    "test": ["a", "b"],
    "test1": ["b", "c"],
    "test2": ["b", "a"],
    "test3": ["c", "a"],
    "test4": ["c", "b"],
    "test5": ["a", "c"],
    "aaaa": ["b", "a"],
    "bbbb": ["a", "b"],
}

AC_NODES = {
    "test": "a",
    "test1": "c",
    "test2": "a",
    "test3": "c",
    "test4": "c",
    "test5": "a",
    "aaaa": "a",
    "bbbb": "a",
}

WEIGHTED_NODES = {
    "test": "b",
    "test1": "b",
    "test2": "b",
    "test3": "c",
    "test4": "b",
    "test5": "b",
    "aaaa": "b",
    "bbbb": "a",
}

ABCD_RANGES = {
    "test": ["a", "b"],
    "test1": ["b", "d"],
    "test2": ["b", "d"],
    "test3": ["c", "d"],
    "test4": ["c", "b"],
    "test5": ["a", "d"],
    "aaaa": ["b", "a"],
    "bbbb": ["a", "b"],
}


def expect_nodes(ring, expected):
    for key, node in expected.items():
        assert ring.get_node(key) == node, key


def expect_ranges(ring, expected):
    for key, nodes in expected.items():
        assert ring.get_nodes(key, 2) == nodes, key


def test_remove_node():
    ring = HashRing(["a", "b", "c"]).remove_node("b")
    expect_nodes(ring, AC_NODES)
    assert ring.get_nodes("test", 2) == ["a", "c"]


def test_add_node():
    ring = HashRing(["a", "c"]).add_node("b")
    expect_nodes(ring, ABC_NODES)
    assert ring.weights == {"a": 1, "b": 1, "c": 1}


def test_add_existing_node_is_noop():
    ring = HashRing(["a", "c"]).add_node("b")
    assert ring.add_node("b") is ring
    expect_nodes(ring, ABC_NODES)
    expect_ranges(ring, ABC_RANGES)


def test_add_to_empty_ring():
    ring = HashRing([]).add_node("a")
    assert ring.size() == 1
    assert ring.get_node("test") == "a"


def test_add_several_nodes():
    ring = HashRing(["a", "b", "c"]).add_node("d")
    expect_nodes(ring, ABC_NODES)

    ring = ring.add_node("e")
    expect_nodes(ring, {**ABC_NODES, "bbbb": "e"})
    assert ring.get_nodes("test", 2) == ["a", "b"]

    ring = ring.add_node("f")
    expect_nodes(
        ring,
        {**ABC_NODES, "test2": "f", "test3": "f", "test5": "f", "bbbb": "e"},
    )
    assert ring.get_nodes("test", 2) == ["a", "b"]


def test_add_weighted_node():
    ring = HashRing(["a", "c"])
    assert ring.add_weighted_node("b", 0) is ring
    assert ring.add_weighted_node("b", -1) is ring
    ring = ring.add_weighted_node("b", 2)
    assert ring.add_weighted_node("b", 2) is ring

    expect_nodes(ring, WEIGHTED_NODES)
    assert ring.get_nodes("test", 2) == ["b", "a"]


def test_update_weighted_node():
    ring = HashRing(["a", "c"]).add_weighted_node("b", 1)
    ring = ring.update_weighted_node("b", 2)
    assert ring.update_weighted_node("b", 2) is ring
    assert ring.update_weighted_node("b", 0) is ring
    assert ring.update_weighted_node("d", 2) is ring

    expect_nodes(ring, WEIGHTED_NODES)
    assert ring.get_nodes("test", 2) == ["b", "a"]
    assert ring.weights == {"a": 1, "c": 1, "b": 2}


def test_remove_absent_node_is_noop():
    ring = HashRing(["a", "b", "c"])
    assert ring.remove_node("z") is ring


def test_remove_then_add_node():
    ring = HashRing(["a", "b", "c"])
    expect_nodes(ring, ABC_NODES)
    expect_ranges(ring, ABC_RANGES)

    ring = ring.remove_node("b")
    expect_nodes(ring, AC_NODES)
    expect_ranges(
        ring,
        {
            "test": ["a", "c"],
            "test1": ["c", "a"],
            "test2": ["a", "c"],
            "test3": ["c", "a"],
            "test4": ["c", "a"],
            "test5": ["a", "c"],
            "aaaa": ["a", "c"],
            "bbbb": ["a", "c"],
        },
    )

    ring = ring.add_node("b")
    expect_nodes(ring, ABC_NODES)
    expect_ranges(ring, ABC_RANGES)


def test_remove_then_add_weighted_node():
    weights = {"a": 1, "b": 2, "c": 1}
    ring = HashRing.with_weights(weights)
    assert ring.weights == weights
    expect_nodes(ring, WEIGHTED_NODES)
    expect_ranges(
        ring,
        {
            "test": ["b", "a"],
            "test1": ["b", "c"],
            "test2": ["b", "a"],
            "test3": ["c", "b"],
            "test4": ["b", "a"],
            "test5": ["b", "a"],
            "aaaa": ["b", "a"],
            "bbbb": ["a", "b"],
        },
    )

    ring = ring.remove_node("c")
    assert ring.weights == {"a": 1, "b": 2}
    expect_nodes(ring, {**WEIGHTED_NODES, "test3": "b"})
    expect_ranges(
        ring,
        {**{key: ["b", "a"] for key in WEIGHTED_NODES}, "bbbb": ["a", "b"]},
    )


def test_add_then_remove_nodes():
    ring = HashRing(["a", "b", "c"]).add_node("d")
    expect_nodes(ring, ABC_NODES)
    expect_ranges(ring, ABCD_RANGES)

    ring = ring.add_node("e")
    expect_nodes(ring, {**ABC_NODES, "bbbb": "e"})
    expect_ranges(
        ring,
        {
            **ABCD_RANGES,
            "test3": ["c", "e"],
            "test5": ["a", "e"],
            "aaaa": ["b", "e"],
            "bbbb": ["e", "a"],
        },
    )

    ring = ring.add_node("f")
    expect_nodes(
        ring,
        {**ABC_NODES, "test2": "f", "test3": "f", "test5": "f", "bbbb": "e"},
    )
    expect_ranges(
        ring,
        {
            **ABCD_RANGES,
            "test2": ["f", "b"],
            "test3": ["f", "c"],
            "test5": ["f", "a"],
            "aaaa": ["b", "e"],
            "bbbb": ["e", "f"],
        },
    )

    ring = ring.remove_node("e")
    expect_nodes(
        ring,
        {**ABC_NODES, "test2": "f", "test3": "f", "test5": "f", "bbbb": "f"},
    )
    expect_ranges(
        ring,
        {
            **ABCD_RANGES,
            "test2": ["f", "b"],
            "test3": ["f", "c"],
            "test5": ["f", "a"],
            "bbbb": ["f", "a"],
        },
    )

    ring = ring.remove_node("f")
    expect_nodes(ring, ABC_NODES)
    expect_ranges(ring, ABCD_RANGES)

    ring = ring.remove_node("d")
    expect_nodes(ring, ABC_NODES)
    expect_ranges(ring, ABC_RANGES)


def test_mutations_leave_original_ring_untouched():
    original = HashRing(["a", "b", "c"])
    before = {f"key-{i}": original.get_node(f"key-{i}") for i in range(500)}

    added = original.add_weighted_node("d", 3)
    removed = original.remove_node("a")
    updated = original.update_weighted_node("b", 4)

    assert added is not original
    assert removed is not original
    assert updated is not original
    assert original.nodes == ["a", "b", "c"]
    assert original.weights == {"a": 1, "b": 1, "c": 1}
    assert {key: original.get_node(key) for key in before} == before


def test_update_with_weights():
    ring = HashRing(["a", "b", "c"])
    assert ring.update_with_weights({"a": 1, "b": 1, "c": 1}) is ring
    assert ring.update_with_weights({"c": 1, "a": 1, "b": 1}) is ring
    # Non-positive weights are coerced before comparing
    assert ring.update_with_weights({"a": 0, "b": 1, "c": 1}) is ring

    weighted = ring.update_with_weights({"a": 1, "b": 2, "c": 1})
    assert weighted is not ring
    expect_nodes(weighted, WEIGHTED_NODES)

    shrunk = ring.update_with_weights({"a": 1, "c": 1})
    assert shrunk.size() == 2
    expect_nodes(shrunk, AC_NODES)

    grown = ring.update_with_weights({"a": 1, "b": 1, "c": 1, "d": 1})
    assert grown.size() == 4
    expect_ranges(grown, ABCD_RANGES)
