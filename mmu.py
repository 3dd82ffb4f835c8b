# mmu.py

"""
Address translation engine: TLB, page table and FIFO page replacement.

The engine is a plain object owned by its caller. It renders nothing; the
UI reads its state through the snapshot accessors.
"""

import time
from collections import deque
from dataclasses import dataclass, replace
from typing import Callable, Deque, Dict, Iterable, List, Optional


# =============================================================================
# ERRORS
# =============================================================================

class MMUError(Exception):
    """Base class for every error raised by the translation engine."""


class InvalidInput(MMUError, ValueError):
    """Negative or non-integer address, page number or configuration value."""


class PageOutOfRange(MMUError, IndexError):
    """Page number is not covered by the page table."""


class AllocatorExhausted(MMUError, RuntimeError):
    """Eviction was requested while no page is resident."""


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class PageTableEntry:
    """
    One row of the page table.

    Attributes:
        page_no (int): Virtual page number this entry represents
        frame_no (int): Physical frame number, -1 when unmapped
        valid (bool): True while the page is resident
        timestamp (Optional[float]): When the page was last loaded
    """
    page_no: int
    frame_no: int = -1
    valid: bool = False
    timestamp: Optional[float] = None


@dataclass
class TLBEntry:
    page_no: int
    frame_no: int


@dataclass
class Frame:
    frame_no: int
    page_no: Optional[int] = None

    @property
    def occupied(self) -> bool:
        return self.page_no is not None


@dataclass(frozen=True)
class TranslationResult:
    physical_address: int
    tlb: str
    fault: bool


class TLBStatus:
    HIT = "TLB_HIT"
    MISS = "TLB_MISS"


class ReplacementPolicy:
    """
    Policy labels accepted by the batch simulation.

    Only FIFO (by fill order) is executed; other labels are recorded in the
    event log and otherwise ignored.
    """
    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "Optimal"

    ALL = (FIFO, LRU, OPTIMAL)


@dataclass(frozen=True)
class MMUConfig:
    """
    Fixed geometry of a simulator instance.

    Defaults reproduce the classroom setup: 64 pages of 1 KB, 16 frames and
    a 16-entry TLB.
    """
    num_pages: int = 64
    num_frames: int = 16
    page_size: int = 1024
    tlb_size: int = 16

    def __post_init__(self):
        for name in ("num_pages", "num_frames", "page_size", "tlb_size"):
            value = getattr(self, name)
            if not _is_int(value) or value <= 0:
                raise InvalidInput(f"{name} must be a positive integer, got {value!r}")

    @property
    def virtual_size(self) -> int:
        return self.num_pages * self.page_size

    @property
    def physical_size(self) -> int:
        return self.num_frames * self.page_size


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# SUB-MODELS
# =============================================================================

class PageTable:
    def __init__(self, num_pages: int):
        self.num_pages = num_pages
        self.entries: List[PageTableEntry] = [PageTableEntry(i) for i in range(num_pages)]

    def check(self, page_no: int):
        if not 0 <= page_no < self.num_pages:
            raise PageOutOfRange(
                f"Page {page_no} out of range (page table holds {self.num_pages} pages)"
            )

    def lookup(self, page_no: int) -> PageTableEntry:
        self.check(page_no)
        return self.entries[page_no]

    def map(self, page_no: int, frame_no: int, now: float):
        entry = self.lookup(page_no)
        entry.frame_no = frame_no
        entry.valid = True
        entry.timestamp = now

    def invalidate(self, page_no: int):
        entry = self.lookup(page_no)
        entry.valid = False
        entry.frame_no = -1

    def find_by_frame(self, frame_no: int) -> Optional[PageTableEntry]:
        # frame numbers are unique among valid entries
        for entry in self.entries:
            if entry.valid and entry.frame_no == frame_no:
                return entry
        return None

    def valid_count(self) -> int:
        return sum(1 for entry in self.entries if entry.valid)


class TLB:
    """
    Bounded FIFO cache of page -> frame translations.

    Inserting a page that is already cached adds a second entry; lookups
    return the earliest one.
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.entries: Deque[TLBEntry] = deque()

    def __len__(self):
        return len(self.entries)

    def lookup(self, page_no: int) -> Optional[int]:
        for entry in self.entries:
            if entry.page_no == page_no:
                return entry.frame_no
        return None

    def insert(self, page_no: int, frame_no: int) -> Optional[TLBEntry]:
        """Append a translation, returning the entry evicted to make room (if any)."""
        evicted = None
        if len(self.entries) >= self.capacity:
            evicted = self.entries.popleft()
        self.entries.append(TLBEntry(page_no, frame_no))
        return evicted

    def invalidate(self, page_no: int) -> int:
        kept = [entry for entry in self.entries if entry.page_no != page_no]
        dropped = len(self.entries) - len(kept)
        self.entries = deque(kept)
        return dropped


class FrameAllocator:
    """
    Hands out frames and picks FIFO victims once memory is full.

    ``frame_counter`` only grows: frames 0..num_frames-1 are each given out
    once by ``allocate_direct``, after which every fault goes through
    ``evict_and_allocate`` and reuses the victim's frame.
    """

    def __init__(self, num_frames: int, page_table: PageTable):
        self.num_frames = num_frames
        self.page_table = page_table
        self.occupied: Deque[int] = deque()
        self.frame_counter = 0

    @property
    def has_free_frame(self) -> bool:
        return self.frame_counter < self.num_frames

    def allocate_direct(self, page_no: int, now: float) -> int:
        if not self.has_free_frame:
            raise AllocatorExhausted("No free frame left for direct allocation")
        frame_no = self.frame_counter
        self.page_table.map(page_no, frame_no, now)
        self.occupied.append(page_no)
        self.frame_counter += 1
        return frame_no

    def evict_and_allocate(self, page_no: int, now: float):
        """
        Replace the longest-resident page with ``page_no``.

        Returns:
            Tuple[int, int]: (victim page number, reused frame number)

        Raises:
            AllocatorExhausted: If no page is resident (zero frames)
        """
        if not self.occupied:
            raise AllocatorExhausted("Eviction requested but no page is resident")

        victim_page = self.occupied.popleft()
        frame_no = self.page_table.lookup(victim_page).frame_no
        owner = self.page_table.find_by_frame(frame_no)
        if owner is None or owner.page_no != victim_page:
            raise AllocatorExhausted(
                f"Frame list out of sync: page {victim_page} does not own frame {frame_no}"
            )

        self.page_table.invalidate(victim_page)
        self.page_table.map(page_no, frame_no, now)
        self.occupied.append(page_no)
        return victim_page, frame_no


# =============================================================================
# MEMORY MANAGEMENT UNIT - Translation Orchestrator
# =============================================================================

class MemoryManagementUnit:
    """
    Translates logical addresses through a TLB, a page table and a FIFO
    page replacer.

    Attributes:
        config (MMUConfig): Fixed geometry of this instance
        page_table (PageTable): One entry per virtual page
        tlb (TLB): Translation cache consulted before the page table
        allocator (FrameAllocator): Frame bookkeeping and victim selection
        event_log (List[str]): One line per translation event
    """

    def __init__(self, config: Optional[MMUConfig] = None, clock: Callable[[], float] = time.time):
        self.config = config or MMUConfig()
        self.clock = clock
        self.reset()

    @property
    def num_pages(self) -> int:
        return self.config.num_pages

    @property
    def num_frames(self) -> int:
        return self.config.num_frames

    @property
    def page_size(self) -> int:
        return self.config.page_size

    def reset(self):
        """Drop every mapping, cached translation, counter and log line."""
        self.page_table = PageTable(self.config.num_pages)
        self.tlb = TLB(self.config.tlb_size)
        self.allocator = FrameAllocator(self.config.num_frames, self.page_table)
        self.tlb_hits = 0
        self.tlb_misses = 0
        self.faults = 0
        self.translations = 0
        self.event_log: List[str] = []

    # -----------------------------
    # Translation
    # -----------------------------
    def translate(self, logical_address: int) -> TranslationResult:
        """
        Translate a logical address through the TLB and the page table.

        Args:
            logical_address (int): Non-negative logical address

        Returns:
            TranslationResult: physical address, TLB outcome and whether a
            page fault was serviced

        Raises:
            InvalidInput: If the address is negative or not an integer
            PageOutOfRange: If the address lies beyond the last page
        """
        _require_address(logical_address)
        page_no, offset = divmod(logical_address, self.page_size)
        self.page_table.check(page_no)
        self.translations += 1

        frame_no = self.tlb.lookup(page_no)
        if frame_no is not None:
            self.tlb_hits += 1
            self.event_log.append(f"TLB HIT: Page {page_no} -> Frame {frame_no}")
            return TranslationResult(frame_no * self.page_size + offset, TLBStatus.HIT, False)

        self.tlb_misses += 1
        self.event_log.append(f"TLB MISS: Page {page_no}")
        fault = self._ensure_resident(page_no)
        frame_no = self.page_table.lookup(page_no).frame_no
        self._update_tlb(page_no, frame_no)
        return TranslationResult(frame_no * self.page_size + offset, TLBStatus.MISS, fault)

    def translate_two_level(self, logical_address: int, level_size1: int, level_size2: int) -> int:
        """
        Translate with a (p1, p2, d) split over the same flat page table.

        The TLB is neither read nor written by this path.
        """
        _require_address(logical_address)
        for name, value in (("level_size1", level_size1), ("level_size2", level_size2)):
            if not _is_int(value) or value <= 0:
                raise InvalidInput(f"{name} must be a positive integer, got {value!r}")

        span = level_size1 * level_size2
        p1 = logical_address // span
        p2, d = divmod(logical_address % span, level_size2)
        page_no = p1 * level_size1 + p2
        self.page_table.check(page_no)
        self.translations += 1

        self.event_log.append(f"2-Level: p1={p1} p2={p2} d={d} -> Page {page_no}")
        self._ensure_resident(page_no)
        return self.page_table.lookup(page_no).frame_no * level_size2 + d

    def simulate_batch(self, page_refs: Iterable[int], policy_label: str = ReplacementPolicy.FIFO) -> int:
        """
        Run a page reference string and count the faults it causes.

        The whole string is validated before any state changes. The policy
        label is only recorded: replacement is always FIFO by fill order.
        """
        refs = list(page_refs)
        for page_no in refs:
            _require_page(page_no)
            self.page_table.check(page_no)

        if policy_label != ReplacementPolicy.FIFO:
            self.event_log.append(f"Policy '{policy_label}' requested; FIFO replacement applied")

        faults = 0
        self.translations += len(refs)
        for page_no in refs:
            if self._ensure_resident(page_no):
                faults += 1

        self.event_log.append(f"Page Faults using {policy_label}: {faults}")
        return faults

    # -----------------------------
    # Helpers
    # -----------------------------
    def _ensure_resident(self, page_no: int) -> bool:
        """Service a page fault if needed; returns True when one occurred."""
        if self.page_table.lookup(page_no).valid:
            return False

        self.faults += 1
        self.event_log.append(f"Page Fault: Page {page_no} not in memory")
        now = self.clock()

        if self.allocator.has_free_frame:
            frame_no = self.allocator.allocate_direct(page_no, now)
            self.event_log.append(f"Loaded: Page {page_no} -> Frame {frame_no}")
            return True

        victim, frame_no = self.allocator.evict_and_allocate(page_no, now)
        self.event_log.append(f"Evicting: Page {victim} from Frame {frame_no}")
        if self.tlb.invalidate(victim):
            self.event_log.append(f"TLB: dropped stale entry for Page {victim}")
        self.event_log.append(f"Loaded: Page {page_no} -> Frame {frame_no} (replaced)")
        return True

    def _update_tlb(self, page_no: int, frame_no: int):
        evicted = self.tlb.insert(page_no, frame_no)
        if evicted is not None:
            self.event_log.append(f"TLB: evicted Page {evicted.page_no} (Frame {evicted.frame_no})")

    # -----------------------------
    # Read-only views
    # -----------------------------
    def snapshot_page_table(self) -> List[PageTableEntry]:
        return [replace(entry) for entry in self.page_table.entries]

    def snapshot_tlb(self) -> List[TLBEntry]:
        return [replace(entry) for entry in self.tlb.entries]

    def get_frame_table(self) -> List[Frame]:
        frames = [Frame(i) for i in range(self.num_frames)]
        for entry in self.page_table.entries:
            if entry.valid:
                frames[entry.frame_no].page_no = entry.page_no
        return frames

    def fifo_order(self) -> List[int]:
        """Resident pages, next victim first."""
        return list(self.allocator.occupied)

    def get_stats(self) -> Dict[str, float]:
        """
        Returns:
            Dict[str, float]: tlb_hits, tlb_misses, faults, translations,
            resident, tlb_hit_ratio and fault_rate
        """
        lookups = self.tlb_hits + self.tlb_misses
        tlb_hit_ratio = (self.tlb_hits / lookups) if lookups > 0 else 0.0
        fault_rate = (self.faults / self.translations) if self.translations > 0 else 0.0

        return {
            "tlb_hits": self.tlb_hits,
            "tlb_misses": self.tlb_misses,
            "faults": self.faults,
            "translations": self.translations,
            "resident": self.page_table.valid_count(),
            "tlb_hit_ratio": round(tlb_hit_ratio, 4),
            "fault_rate": round(fault_rate, 4),
        }


def _require_address(value):
    if not _is_int(value) or value < 0:
        raise InvalidInput(f"Logical address must be a non-negative integer, got {value!r}")


def _require_page(value):
    if not _is_int(value) or value < 0:
        raise InvalidInput(f"Page number must be a non-negative integer, got {value!r}")
