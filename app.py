"""
TLB & Paging Visualizer — Address Translation and Page Replacement

This application is an interactive front end for the translation engine in
``mmu.py``. It lets a student:
    - Translate logical addresses through the TLB and page table
    - Translate with a two-level (p1, p2, d) address split
    - Run a page reference string and count page faults
    - Inspect the frame table, TLB, page table and event trace

Built with Streamlit for the web interface and Plotly for visualizations.
The engine renders nothing itself; everything below reads its snapshots.
"""

# =============================================================================
# IMPORTS
# =============================================================================

import streamlit as st                       # Web application framework
import plotly.graph_objects as go            # Interactive plotting library

from mmu import MMUConfig, MMUError, MemoryManagementUnit, ReplacementPolicy, TLBStatus
from utils import get_color, parse_logical_address, parse_page_refs


# Configure the Streamlit page
st.set_page_config(page_title="TLB & Paging Visualizer", layout="wide")

# -----------------------------------------------------------------------------
# SIDEBAR NAVIGATION
# -----------------------------------------------------------------------------

page = st.sidebar.radio("Choose View", ["Simulator", "Concepts"], key="view")

st.title("TLB & Paging Visualizer — Address Translation & Replacement")

# =============================================================================
# CONCEPTS PAGE - Educational Content
# =============================================================================

if page == "Concepts":
    st.header("Operating System Concepts Used in This Project")
    st.markdown(
        """
        ### **1. Logical vs Physical Address**
        - A logical address is split into a **page number** and an **offset**:
          `page = address // page_size`, `offset = address % page_size`.
        - The physical address is `frame * page_size + offset`.

        ### **2. Translation Lookaside Buffer (TLB)**
        - A small cache of recent page → frame translations, checked first.
        - **TLB hit**: the page table is not consulted at all.
        - When full, the oldest inserted entry is evicted (FIFO).

        ### **3. Page Table**
        - One entry per virtual page: frame number, **valid bit**, load timestamp.
        - An invalid entry means the page is not in RAM → **page fault**.

        ### **4. Page Fault Handling**
        - While a never-used frame remains, the page gets the next one.
        - Otherwise the page resident longest is evicted (FIFO by load order)
          and the new page takes over its frame.

        ### **5. Two-Level Paging**
        - The address is split as (p1, p2, d); the page is `p1 * level1 + p2`.
        - This mode shares the page table but **bypasses the TLB**.

        ### **6. Replacement Algorithms**
        - The batch simulator accepts FIFO, LRU and Optimal labels, but always
          replaces in FIFO order. The chosen label is noted in the event log.
        """
    )
    st.stop()

# =============================================================================
# SIMULATOR PAGE - Main Interactive Interface
# =============================================================================

# -----------------------------------------------------------------------------
# SIDEBAR - Simulation Settings
# -----------------------------------------------------------------------------

st.sidebar.header("Simulation Settings")

num_pages = st.sidebar.number_input("Virtual pages", min_value=1, max_value=4096, value=64, key="num_pages")
num_frames = st.sidebar.number_input("Physical frames", min_value=1, max_value=1024, value=16, key="num_frames")
page_size = st.sidebar.selectbox(
    "Page size (bytes)",
    options=[256, 512, 1024, 2048, 4096],
    index=2,  # Default: 1KB
    key="page_size",
)
tlb_size = st.sidebar.number_input("TLB entries", min_value=1, max_value=256, value=16, key="tlb_size")

config = MMUConfig(int(num_pages), int(num_frames), int(page_size), int(tlb_size))

# -----------------------------------------------------------------------------
# SESSION STATE - Simulator Persistence
# -----------------------------------------------------------------------------

# One simulator per browser session; a new geometry starts a fresh one
if "mmu" not in st.session_state or st.session_state.mmu.config != config:
    st.session_state.mmu = MemoryManagementUnit(config)

mmu: MemoryManagementUnit = st.session_state.mmu

st.sidebar.caption(
    f"Virtual space: {config.virtual_size} B | Physical space: {config.physical_size} B"
)

if st.sidebar.button("Reset Simulation", key="reset"):
    mmu.reset()
    st.sidebar.success("Simulation reset")

st.sidebar.markdown("---")

# -----------------------------------------------------------------------------
# SIDEBAR - Two-Level Split
# -----------------------------------------------------------------------------

st.sidebar.header("Two-Level Paging")
level_size1 = st.sidebar.number_input("Level 1 size", min_value=1, value=4, key="level1")
level_size2 = st.sidebar.number_input("Level 2 size", min_value=1, value=256, key="level2")

# =============================================================================
# MAIN CONTENT AREA - Two Column Layout
# =============================================================================

col1, col2 = st.columns([1, 2])

# -----------------------------------------------------------------------------
# LEFT COLUMN - Controls and Event Log
# -----------------------------------------------------------------------------

with col1:
    st.subheader("Translate")
    address_input = st.text_input("Logical address", value="0", key="address")

    if st.button("Translate", key="translate"):
        try:
            result = mmu.translate(parse_logical_address(address_input))
            hit = "TLB HIT" if result.tlb == TLBStatus.HIT else "TLB MISS"
            fault = " + page fault" if result.fault else ""
            st.success(f"Physical Address: {result.physical_address} ({hit}{fault})")
        except MMUError as e:
            st.error(str(e))

    if st.button("Translate (2-Level)", key="translate_2level"):
        try:
            physical = mmu.translate_two_level(
                parse_logical_address(address_input), int(level_size1), int(level_size2)
            )
            st.success(f"Physical Address (2-Level): {physical}")
        except MMUError as e:
            st.error(str(e))

    st.subheader("Page Replacement")
    refs_input = st.text_input(
        "Page references (comma separated)", value="1,2,1,3", key="refs"
    )
    policy = st.selectbox("Algorithm", options=list(ReplacementPolicy.ALL), key="policy")

    if st.button("Run Sequence", key="run_batch"):
        try:
            faults = mmu.simulate_batch(parse_page_refs(refs_input), policy)
            st.success(f"Page Faults using {policy}: {faults}")
            if policy != ReplacementPolicy.FIFO:
                st.info("Replacement is always FIFO by load order; the label is recorded only.")
        except MMUError as e:
            st.error(str(e))

    # Most recent 20 events, newest first
    st.subheader("Event Log")
    for ev in mmu.event_log[-20:][::-1]:
        st.write(ev)

# -----------------------------------------------------------------------------
# RIGHT COLUMN - Visualizations
# -----------------------------------------------------------------------------

with col2:
    # ----- Physical Frames Visualization -----
    st.subheader("Physical Frames")
    frames = mmu.get_frame_table()

    fig = go.Figure()
    text = [f"F{f.frame_no}: " + (f"P{f.page_no}" if f.occupied else "Free") for f in frames]
    fig.add_trace(go.Bar(
        x=[f.frame_no for f in frames],
        y=[1] * len(frames),
        text=text,
        marker_color=[get_color(f.page_no) for f in frames],
        hovertext=text,
        hoverinfo='text'
    ))
    fig.update_layout(height=150, showlegend=False, yaxis=dict(showticklabels=False))
    st.plotly_chart(fig, use_container_width=True)

    # ----- TLB Display -----
    st.subheader(f"TLB ({len(mmu.tlb)}/{config.tlb_size}, oldest first)")
    tlb_rows = [{"page": e.page_no, "frame": e.frame_no} for e in mmu.snapshot_tlb()]
    if tlb_rows:
        st.table(tlb_rows)
    else:
        st.write("TLB empty")

    # ----- Page Table Display -----
    st.subheader("Page Table (snapshot)")
    show_all = st.checkbox("Show invalid entries", value=False, key="show_all")
    rows = [
        {
            "page": pte.page_no,
            "frame": pte.frame_no,
            "valid": pte.valid,
            "timestamp": pte.timestamp,
        }
        for pte in mmu.snapshot_page_table()
        if show_all or pte.valid
    ]
    if rows:
        st.table(rows)
    else:
        st.write("No page loaded yet")

    # ----- Statistics Display -----
    st.subheader("Statistics")
    stats = mmu.get_stats()

    m1, m2, m3 = st.columns(3)
    m1.metric("Translations", stats["translations"])
    m2.metric("Page Faults", stats["faults"])
    m3.metric("TLB Hit Ratio", stats["tlb_hit_ratio"])

    fig2 = go.Figure()
    fig2.add_trace(go.Bar(
        x=["TLB Hits", "TLB Misses", "Page Faults"],
        y=[stats["tlb_hits"], stats["tlb_misses"], stats["faults"]]
    ))
    fig2.update_layout(height=300, title="TLB Hits vs Misses vs Faults")
    st.plotly_chart(fig2, use_container_width=True)

    # ----- FIFO Queue Display -----
    st.subheader("Replacement Queue (next victim first)")
    st.write(mmu.fifo_order())

# =============================================================================
# FOOTER - Usage Tips and Examples
# =============================================================================

st.markdown("---")
st.markdown(
    "**Instructor examples**:\n"
    "1) FIFO eviction: 2 frames, 1KB pages. Translate 0, 1024, 2048, then 0 again "
    "(page 0 was evicted, so it faults).\n"
    "2) TLB eviction: 2 TLB entries. Translate 5120, 6144, 7168, then 5120 (TLB miss).\n"
    "3) Batch: 2 frames, references `1,2,1,3` → 3 faults."
)
