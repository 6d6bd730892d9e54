from notion_mirror.models.node import Node
from notion_mirror.services.article_lookup import count_nodes, find_by_id, iter_nodes


def _node(node_id, **kwargs):
    return Node.model_validate({"object": "block", "id": node_id, **kwargs})


def _forest():
    target = _node("X", type="paragraph", note="deep")
    rows = [
        _node("r0", children=[_node("r0-c")]),
        _node("r1", children=[target, _node("r1-c")]),
    ]
    return [
        _node("t0", children=[_node("t0-c", children=[_node("t0-cc")])]),
        _node("t1"),
        _node("t2", type="child_database", pages=rows),
    ]


def test_find_by_id_reaches_database_row_children():
    forest = _forest()
    found = find_by_id(forest, "X")
    assert found is forest[2].pages[1].children[0]
    assert found.note == "deep"


def test_find_by_id_absent_returns_none():
    assert find_by_id(_forest(), "missing") is None
    assert find_by_id([], "X") is None


def test_find_by_id_first_match_in_document_order():
    # the same id can appear twice when a node is reachable from two places
    first = _node("dup", children=[_node("only-in-first")])
    second = _node("dup")
    forest = [_node("a", children=[first]), _node("b", pages=[second])]
    assert find_by_id(forest, "dup") is first


def test_children_are_searched_before_pages():
    via_children = _node("same", source="children")
    via_pages = _node("same", source="pages")
    forest = [_node("a", pages=[via_pages], children=[via_children])]
    assert find_by_id(forest, "same").source == "children"


def test_iter_nodes_and_count():
    forest = _forest()
    ids = [n.id for n in iter_nodes(forest)]
    assert ids == ["t0", "t0-c", "t0-cc", "t1", "t2", "r0", "r0-c", "r1", "X", "r1-c"]
    assert count_nodes(forest) == 10
