from notion_mirror.services.sync.visited import VisitedSet


def test_mark_visited_is_check_and_set():
    visited = VisitedSet()
    assert visited.mark_visited("a") is True
    assert visited.mark_visited("a") is False
    assert visited.mark_visited("b") is True
    assert "a" in visited
    assert "c" not in visited
    assert len(visited) == 2


def test_instances_do_not_share_state():
    first = VisitedSet(["a"])
    second = VisitedSet()
    assert second.mark_visited("a") is True
    assert first.mark_visited("a") is False
