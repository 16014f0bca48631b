import pytest

from gnsslocutils.linked_list import LinkedList, LinkedListError, LinkedListStatus


def test_status_codes_match_format():
    with pytest.raises(LinkedListError) as info:
        LinkedList().remove()
    assert info.value.status == -4
    assert info.value.status is LinkedListStatus.UNAVAILABLE_RESOURCE


def test_add_and_remove_is_fifo():
    lst = LinkedList()
    for item in ("a", "b", "c"):
        lst.add(item)
    assert len(lst) == 3
    assert [lst.remove(), lst.remove(), lst.remove()] == ["a", "b", "c"]
    assert lst.empty()


def test_iteration_goes_head_to_tail():
    lst = LinkedList()
    for item in (1, 2, 3):
        lst.add(item)
    assert list(lst) == [3, 2, 1]


def test_add_none_rejected():
    lst = LinkedList()
    with pytest.raises(LinkedListError) as info:
        lst.add(None)
    assert info.value.status is LinkedListStatus.INVALID_PARAMETER
    assert lst.empty()


def test_remove_from_empty_list():
    with pytest.raises(LinkedListError) as info:
        LinkedList().remove()
    assert info.value.status is LinkedListStatus.UNAVAILABLE_RESOURCE


def test_flush_calls_dealloc_from_head():
    freed = []
    lst = LinkedList()
    lst.add("x", freed.append)
    lst.add("y")
    lst.add("z", freed.append)
    lst.flush()
    assert freed == ["z", "x"]
    assert lst.empty()
    assert len(lst) == 0


def test_search_finds_without_removing():
    lst = LinkedList()
    for item in (10, 20, 30):
        lst.add(item)
    found = lst.search(lambda want, have: want == have, 20)
    assert found == 20
    assert len(lst) == 3


def test_search_not_found_returns_none():
    lst = LinkedList()
    lst.add(5)
    assert lst.search(lambda want, have: want == have, 6) is None
    assert len(lst) == 1


def test_search_returns_first_from_head():
    lst = LinkedList()
    lst.add(("k", 1))
    lst.add(("k", 2))
    found = lst.search(lambda key, item: item[0] == key, "k")
    assert found == ("k", 2)


def test_search_remove_with_copy_out_keeps_data():
    freed = []
    lst = LinkedList()
    lst.add(1, freed.append)
    lst.add(2, freed.append)
    lst.add(3, freed.append)
    found = lst.search(lambda want, have: want == have, 2, remove_if_found=True)
    assert found == 2
    assert freed == []
    assert list(lst) == [3, 1]
    assert lst.remove() == 1
    assert lst.remove() == 3


def test_search_remove_without_copy_out_deallocs():
    freed = []
    lst = LinkedList()
    lst.add("a", freed.append)
    lst.add("b", freed.append)
    result = lst.search(
        lambda want, have: want == have, "a", remove_if_found=True, copy_out=False
    )
    assert result is None
    assert freed == ["a"]
    assert list(lst) == ["b"]


def test_search_requires_equal():
    lst = LinkedList()
    lst.add(1)
    with pytest.raises(LinkedListError) as info:
        lst.search(None, 1)
    assert info.value.status is LinkedListStatus.INVALID_HANDLE


def test_search_empty_list():
    with pytest.raises(LinkedListError) as info:
        LinkedList().search(lambda a, b: True, 1)
    assert info.value.status is LinkedListStatus.UNAVAILABLE_RESOURCE