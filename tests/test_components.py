import pytest

from mmu import (
    AllocatorExhausted,
    FrameAllocator,
    InvalidInput,
    MMUConfig,
    PageOutOfRange,
    PageTable,
    TLB,
)


# -----------------------------
# Configuration
# -----------------------------

def test_config_defaults_match_classroom_setup():
    cfg = MMUConfig()
    assert (cfg.num_pages, cfg.num_frames, cfg.page_size, cfg.tlb_size) == (64, 16, 1024, 16)
    assert cfg.virtual_size == 64 * 1024
    assert cfg.physical_size == 16 * 1024


@pytest.mark.parametrize("kwargs", [
    {"num_pages": 0},
    {"num_frames": -1},
    {"page_size": 1.5},
    {"tlb_size": True},
])
def test_config_rejects_non_positive_or_non_integer(kwargs):
    with pytest.raises(InvalidInput):
        MMUConfig(**kwargs)


# -----------------------------
# Page table
# -----------------------------

def test_page_table_map_and_invalidate_resets_frame():
    pt = PageTable(4)
    pt.map(2, 3, now=7.0)
    entry = pt.lookup(2)
    assert (entry.valid, entry.frame_no, entry.timestamp) == (True, 3, 7.0)

    pt.invalidate(2)
    assert entry.valid is False
    assert entry.frame_no == -1


def test_page_table_out_of_range():
    pt = PageTable(4)
    with pytest.raises(PageOutOfRange):
        pt.lookup(4)
    with pytest.raises(IndexError):
        pt.map(10, 0, now=1.0)


def test_find_by_frame_ignores_invalid_entries():
    pt = PageTable(4)
    pt.map(1, 0, now=1.0)
    assert pt.find_by_frame(0).page_no == 1
    pt.invalidate(1)
    assert pt.find_by_frame(0) is None


# -----------------------------
# TLB
# -----------------------------

def test_tlb_evicts_oldest_inserted():
    tlb = TLB(2)
    assert tlb.insert(5, 0) is None
    assert tlb.insert(6, 1) is None
    evicted = tlb.insert(7, 2)
    assert evicted.page_no == 5
    assert len(tlb) == 2
    assert tlb.lookup(5) is None
    assert [e.page_no for e in tlb.entries] == [6, 7]


def test_tlb_lookup_does_not_reorder():
    tlb = TLB(2)
    tlb.insert(1, 10)
    tlb.insert(2, 20)
    assert tlb.lookup(1) == 10
    # 1 is still the oldest even after being looked up
    assert tlb.insert(3, 30).page_no == 1


def test_tlb_tolerates_duplicates_and_returns_earliest():
    tlb = TLB(4)
    tlb.insert(1, 10)
    tlb.insert(1, 20)
    assert len(tlb) == 2
    assert tlb.lookup(1) == 10


def test_tlb_invalidate_drops_every_copy():
    tlb = TLB(4)
    tlb.insert(1, 10)
    tlb.insert(2, 20)
    tlb.insert(1, 30)
    assert tlb.invalidate(1) == 2
    assert tlb.lookup(1) is None
    assert tlb.lookup(2) == 20


# -----------------------------
# Frame allocator
# -----------------------------

def test_allocate_direct_hands_out_frames_in_order():
    pt = PageTable(8)
    alloc = FrameAllocator(2, pt)
    assert alloc.allocate_direct(4, now=1.0) == 0
    assert alloc.allocate_direct(6, now=2.0) == 1
    assert alloc.frame_counter == 2
    assert not alloc.has_free_frame
    with pytest.raises(AllocatorExhausted):
        alloc.allocate_direct(7, now=3.0)


def test_evict_and_allocate_reuses_victim_frame():
    pt = PageTable(8)
    alloc = FrameAllocator(2, pt)
    alloc.allocate_direct(4, now=1.0)
    alloc.allocate_direct(6, now=2.0)

    victim, frame = alloc.evict_and_allocate(7, now=3.0)
    assert (victim, frame) == (4, 0)
    assert pt.lookup(4).valid is False
    assert pt.lookup(4).frame_no == -1
    assert pt.lookup(7).frame_no == 0
    assert pt.lookup(7).timestamp == 3.0
    assert list(alloc.occupied) == [6, 7]
    # frame counter never goes back down
    assert alloc.frame_counter == 2


def test_evict_with_nothing_resident_is_an_invariant_failure():
    alloc = FrameAllocator(1, PageTable(4))
    with pytest.raises(AllocatorExhausted):
        alloc.evict_and_allocate(0, now=1.0)
