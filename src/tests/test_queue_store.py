import asyncio
import random

import pytest

from core.interfaces import Track
from core.queue_store import QueueStore
from core.results import QueueErrorKind, QueueFailureReason


def make_tracks(count, locator="file-url-string"):
    return [Track(id=str(i), locator=locator) for i in range(count)]


async def ids(queue):
    return [track.id for track in await queue.snapshot()]


@pytest.mark.asyncio
async def test_set_all_and_get_track():
    items = make_tracks(1000)
    queue = QueueStore()

    result = await queue.set_all(items)

    assert result.ok
    assert len(result.items) == 1000
    assert await queue.count() == 1000
    assert (await queue.get_track(0)).id == items[0].id
    assert (await queue.get_track(499)).id == items[499].id
    assert (await queue.get_track(999)).id == items[-1].id


@pytest.mark.asyncio
async def test_set_all_copies_input_and_accepts_empty():
    items = make_tracks(3)
    queue = QueueStore()
    await queue.set_all(items)
    items.append(Track(id="x", locator="-"))

    assert await queue.count() == 3

    result = await queue.set_all([])
    assert result.items == []
    assert await queue.count() == 0


@pytest.mark.asyncio
async def test_get_track_out_of_range_is_none():
    queue = QueueStore(make_tracks(5))

    assert (await queue.get_track(4)).id == "4"
    assert await queue.get_track(5) is None
    assert await queue.get_track(-1) is None


@pytest.mark.asyncio
async def test_append():
    items = make_tracks(5)
    queue = QueueStore(items)
    new_track = Track(id="6", locator="--")

    result = await queue.append(new_track)

    assert result.ok
    assert result.item is new_track
    assert result.index == 5
    assert await queue.count() == 6
    assert (await queue.get_track(4)).id == items[4].id
    assert (await queue.get_track(5)).id == "6"


@pytest.mark.asyncio
async def test_prepend_shifts_every_index():
    items = make_tracks(5)
    queue = QueueStore(items)
    new_track = Track(id="6", locator="--")

    result = await queue.prepend(new_track)

    assert result.index == 0
    assert await ids(queue) == ["6", "0", "1", "2", "3", "4"]


@pytest.mark.asyncio
async def test_insert_after():
    items = make_tracks(10)
    queue = QueueStore(items)
    new_track = Track(id="11", locator="-")

    result = await queue.insert_after(new_track, items[3])

    assert result.ok
    assert result.index == 4
    assert result.item.id == "11"
    assert await queue.count() == 11
    assert (await queue.get_track(3)).id == items[3].id
    assert (await queue.get_track(4)).id == "11"
    assert (await queue.get_track(5)).id == items[4].id


@pytest.mark.asyncio
async def test_insert_after_last_item_becomes_last():
    items = make_tracks(20)
    queue = QueueStore(items)
    new_track = Track(id="234", locator="...")

    result = await queue.insert_after(new_track, items[19])

    assert result.index == 20
    assert (await queue.get_track(20)).id == "234"


@pytest.mark.asyncio
async def test_insert_after_missing_anchor():
    queue = QueueStore(make_tracks(3))

    result = await queue.insert_after(Track(id="new", locator="-"), Track(id="ghost", locator="-"))

    assert not result.ok
    assert result.reason is QueueFailureReason.ANCHOR_NOT_FOUND
    assert result.kind is QueueErrorKind.NOT_FOUND
    assert await ids(queue) == ["0", "1", "2"]


@pytest.mark.asyncio
async def test_lookup_uses_id_not_object_identity():
    queue = QueueStore(make_tracks(4))
    stale_copy = Track(id="2", locator="somewhere-else")

    result = await queue.remove(stale_copy)

    assert result.ok
    assert result.index == 2
    assert result.item.locator == "file-url-string"


@pytest.mark.asyncio
async def test_remove():
    items = make_tracks(5)
    queue = QueueStore(items)

    result = await queue.remove(items[3])

    assert result.ok
    assert result.item.id == "3"
    assert result.index == 3
    assert await queue.count() == 4
    # the item after the removed one moved up
    assert await ids(queue) == ["0", "1", "2", "4"]


@pytest.mark.asyncio
async def test_remove_missing_track():
    queue = QueueStore(make_tracks(2))

    result = await queue.remove(Track(id="nope", locator="-"))

    assert not result.ok
    assert result.reason is QueueFailureReason.NOT_FOUND
    assert await queue.count() == 2


@pytest.mark.asyncio
async def test_duplicate_ids_resolve_to_first_match():
    queue = QueueStore([Track(id="a", locator="1"), Track(id="b", locator="2"), Track(id="a", locator="3")])

    result = await queue.remove(Track(id="a", locator="?"))

    assert result.index == 0
    assert [t.locator for t in await queue.snapshot()] == ["2", "3"]


@pytest.mark.asyncio
async def test_reorder():
    items = make_tracks(1000)
    queue = QueueStore(items)

    result = await queue.reorder(items[3], after=items[10])

    assert result.ok
    assert result.previous_index == 3
    assert result.index == 10
    assert (await queue.get_track(10)).id == items[3].id
    # the item previously at 10 moved up by one
    assert (await queue.get_track(9)).id == items[10].id
    assert await queue.count() == 1000


@pytest.mark.asyncio
async def test_reorder_backwards():
    items = make_tracks(6)
    queue = QueueStore(items)

    result = await queue.reorder(items[4], after=items[0])

    assert result.index == 1
    assert result.previous_index == 4
    assert await ids(queue) == ["0", "4", "1", "2", "3", "5"]


@pytest.mark.asyncio
async def test_reorder_missing_source_leaves_queue_untouched():
    items = make_tracks(5)
    queue = QueueStore(items)

    result = await queue.reorder(Track(id="ghost", locator="-"), after=items[1])

    assert result.reason is QueueFailureReason.SOURCE_NOT_FOUND
    assert await ids(queue) == ["0", "1", "2", "3", "4"]


@pytest.mark.asyncio
async def test_reorder_missing_anchor_rolls_back():
    items = make_tracks(5)
    queue = QueueStore(items)
    before = await queue.snapshot()

    result = await queue.reorder(items[2], after=Track(id="ghost", locator="-"))

    assert not result.ok
    assert result.reason is QueueFailureReason.ANCHOR_NOT_FOUND
    assert await queue.snapshot() == before


@pytest.mark.asyncio
async def test_reorder_after_itself_rolls_back():
    # the anchor is looked up once the track is removed, so it cannot be found
    items = make_tracks(4)
    queue = QueueStore(items)

    result = await queue.reorder(items[1], after=items[1])

    assert result.reason is QueueFailureReason.ANCHOR_NOT_FOUND
    assert await ids(queue) == ["0", "1", "2", "3"]


@pytest.mark.asyncio
async def test_shuffle_tail_keeps_prefix():
    items = make_tracks(15)
    queue = QueueStore(items, rng=random.Random(7))

    result = await queue.shuffle_tail(items[9])

    assert result.ok
    assert result.pivot.id == "9"
    assert await queue.count() == 15
    assert len(result.shuffled_suffix) == 5
    assert [t.id for t in result.kept_prefix] == [str(i) for i in range(10)]
    assert sorted(t.id for t in result.shuffled_suffix) == sorted(str(i) for i in range(10, 15))
    assert result.all_items == result.kept_prefix + result.shuffled_suffix
    assert await queue.snapshot() == result.all_items


@pytest.mark.asyncio
async def test_shuffle_tail_changes_order():
    items = make_tracks(30)
    queue = QueueStore(items, rng=random.Random(1))

    result = await queue.shuffle_tail(items[2])

    assert [t.id for t in result.kept_prefix] == ["0", "1", "2"]
    # 27! orderings, a seeded shuffle will not return the identity
    assert [t.id for t in result.all_items] != [t.id for t in items]


@pytest.mark.asyncio
async def test_shuffle_tail_of_last_item_is_a_no_op():
    items = make_tracks(4)
    queue = QueueStore(items)

    result = await queue.shuffle_tail(items[3])

    assert result.shuffled_suffix == []
    assert await ids(queue) == ["0", "1", "2", "3"]


@pytest.mark.asyncio
async def test_shuffle_tail_missing_pivot():
    queue = QueueStore(make_tracks(4))

    result = await queue.shuffle_tail(Track(id="ghost", locator="-"))

    assert not result.ok
    assert result.reason is QueueFailureReason.PIVOT_NOT_FOUND
    assert result.kind is QueueErrorKind.OPERATION_FAILED


@pytest.mark.asyncio
async def test_index_of():
    queue = QueueStore(make_tracks(3))

    assert await queue.index_of(Track(id="2", locator="-")) == 2
    assert await queue.index_of(Track(id="9", locator="-")) is None


@pytest.mark.asyncio
async def test_concurrent_mutations_are_serialised():
    items = make_tracks(50)
    queue = QueueStore(items, rng=random.Random(3))
    extra = [Track(id=f"x{i}", locator="-") for i in range(20)]

    await asyncio.gather(
        *(queue.append(track) for track in extra[:10]),
        *(queue.prepend(track) for track in extra[10:]),
        *(queue.reorder(items[i], after=items[i + 20]) for i in range(10)),
        queue.shuffle_tail(items[40]),
        *(queue.remove(items[i]) for i in range(45, 50)),
    )

    final = await ids(queue)
    assert len(final) == 65
    assert len(set(final)) == 65
    assert await queue.count() == 65
