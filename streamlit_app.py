import streamlit as st
import pandas as pd
import gspread
from streamlit_sortables import sort_items

from running_order import (
    DiagnosticsHandler,
    ScheduleError,
    build_performer_set,
    build_variations,
    compare_variations,
    logger,
    position_warnings,
    score_schedule,
)
from running_order.config import DEFAULT_MAX_IN_ROW, DEFAULT_VARIATIONS, Settings
from running_order.errors import InvalidSettingError
from running_order.parsing import performances_from_frame, read_csv
from running_order.reports import best_row, comparison_frame, schedule_frame, summary
from running_order import sheets

st.set_page_config(
    page_title="Running Order Builder",
    page_icon="\U0001F3AD",
    layout="wide"
)

try:
    settings = Settings.from_env()
except InvalidSettingError as e:
    st.sidebar.error(f"Ignoring environment settings: {e}")
    settings = Settings()


@st.cache_resource
def get_spreadsheet():
    try:
        _, spreadsheet = sheets.get_gsheet_client(settings)
        return spreadsheet
    except Exception as e:
        st.sidebar.warning(f"Sheets not connected: {e}")
        return None


spreadsheet = get_spreadsheet()

for key, default in [('performances', []), ('results', []), ('tuned', {}), ('_last_diag', [])]:
    if key not in st.session_state:
        st.session_state[key] = default


def performances_table(performances):
    return pd.DataFrame([{
        'Performance': p.name,
        'Performers': ', '.join(p.performers),
        'Constraint': p.constraint,
        'Minimum Spacing': p.spacing,
    } for p in performances])


if spreadsheet:
    st.sidebar.success("Google Sheets: Connected")
else:
    st.sidebar.info("Running without Google Sheets")

with st.sidebar:
    st.header("Settings")
    max_in_row = st.number_input("Max in a row", min_value=1, max_value=10,
                                 value=settings.max_in_row or DEFAULT_MAX_IN_ROW)
    variations = st.number_input("Variations", min_value=1, max_value=20,
                                 value=settings.variations or DEFAULT_VARIATIONS)
    st.info("Each variation shuffles the unconstrained performances with its own seed, "
            "then picks the next performance greedily, by weighted draw, or from the top three.")
    st.divider()
    if st.button("GENERATE", type="primary", use_container_width=True):
        if not st.session_state.performances:
            st.warning("No performances loaded. Upload a CSV or load from Sheets first.")
        else:
            diag = DiagnosticsHandler()
            logger.addHandler(diag)
            try:
                with st.spinner("Building running orders..."):
                    st.session_state.results = build_variations(
                        st.session_state.performances, int(variations), int(max_in_row)
                    )
                st.session_state.tuned = {}
                st.session_state['_last_diag'] = diag.lines
                st.rerun()
            except ScheduleError as e:
                st.error(f"Could not build a running order: {e}")
            finally:
                logger.removeHandler(diag)
    if st.session_state.get('_last_diag'):
        with st.expander("Last run", expanded=False):
            for d in st.session_state['_last_diag']:
                st.text(d)

st.title("Running Order Builder")
tab1, tab2, tab3, tab4 = st.tabs(["Performances", "Variations", "Compare", "Fine Tune"])

with tab1:
    st.subheader("Load Performances")
    st.markdown(
        "**Columns** (header names are case-insensitive):\n"
        "- `Performance Name`\n"
        "- `Performers` — comma-separated; `ALL` means every performer\n"
        "- `Constraints` — `first`, `last` or blank\n"
        "- `Minimum Spacing` — performances between appearances, default 1"
    )
    uploaded = st.file_uploader("Choose CSV", type="csv")
    if uploaded and st.button("Import CSV", type="primary"):
        try:
            st.session_state.performances = performances_from_frame(read_csv(uploaded))
            st.session_state.results = []
            st.session_state.tuned = {}
            st.success(f"✅ {len(st.session_state.performances)} performances imported.")
        except ScheduleError as e:
            st.error(str(e))
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            st.error(f"Error reading file: {e}")
    if spreadsheet:
        sheet_name = st.text_input("Worksheet", value=settings.input_worksheet)
        if st.button("Load from Google Sheets"):
            try:
                st.session_state.performances = sheets.read_performances(spreadsheet, sheet_name)
                st.session_state.results = []
                st.session_state.tuned = {}
                st.success(f"✅ {len(st.session_state.performances)} performances loaded.")
            except gspread.WorksheetNotFound:
                st.error(f"No worksheet named {sheet_name}")
            except ScheduleError as e:
                st.error(str(e))
    st.divider()
    if st.session_state.performances:
        st.dataframe(performances_table(st.session_state.performances),
                     use_container_width=True, hide_index=True)
    else:
        st.info("No performances loaded yet.")

with tab2:
    results = st.session_state.results
    if not results:
        st.info("Press GENERATE to build variations.")
    else:
        vtabs = st.tabs([r.label for r in results])
        for vtab, result in zip(vtabs, results):
            with vtab:
                info = summary(result)
                c1, c2, c3 = st.columns(3)
                c1.metric("Strategy", result.strategy)
                c2.metric("Warnings", info['Warnings'])
                c3.metric("Violation Score", info['Violation Score'])
                df = schedule_frame(result)
                st.dataframe(
                    df.style.apply(lambda row: ['background-color: #ffcccc' if row['Warning'] else ''] * len(row), axis=1),
                    use_container_width=True, hide_index=True
                )
                d1, d2 = st.columns(2)
                with d1:
                    st.download_button("Download CSV", df.to_csv(index=False),
                                       f"{result.label.replace(' ', '_')}.csv", "text/csv",
                                       key=f"dl_{result.index}")
                with d2:
                    if spreadsheet and st.button("Write to Sheets", key=f"ws_{result.index}"):
                        try:
                            sheets.write_variation(spreadsheet, result)
                            st.success(f"Wrote {result.label}")
                        except gspread.exceptions.APIError as e:
                            st.error(f"Writing {result.label} failed: {e}")

with tab3:
    results = st.session_state.results
    if not results:
        st.info("Nothing to compare yet.")
    else:
        performer_set = build_performer_set(st.session_state.performances)
        by_label = {r.label: r.schedule for r in results}
        by_label.update(st.session_state.tuned)
        if spreadsheet and st.checkbox("Compare the orders saved in Sheets instead"):
            by_label = {label: sheets.read_schedule(spreadsheet, label, st.session_state.performances)
                        for label in by_label}
        rows = compare_variations(by_label, performer_set, int(max_in_row))
        cdf = comparison_frame(rows)
        cdf.insert(1, 'Label', [row.label for row in rows])
        st.dataframe(cdf, use_container_width=True, hide_index=True)
        best = best_row(rows)
        if best:
            st.success(f"Lowest violation score: {best.label} ({best.score})")
        skipped = [label for label in by_label if label not in {row.label for row in rows}]
        if skipped:
            st.warning(f"Skipped (no saved order found): {', '.join(skipped)}")
        if spreadsheet and st.button("Write comparison to Sheets"):
            try:
                sheets.write_comparison(spreadsheet, rows)
                st.success("Comparison written")
            except gspread.exceptions.APIError as e:
                st.error(f"Writing the comparison failed: {e}")

with tab4:
    results = st.session_state.results
    if not results:
        st.info("Generate variations first.")
    else:
        performer_set = build_performer_set(st.session_state.performances)
        label = st.selectbox("Start from", [r.label for r in results])
        tuned_label = f"{label} (tuned)"
        base = next(r.schedule for r in results if r.label == label)
        schedule = st.session_state.tuned.get(tuned_label, base)
        messages = position_warnings(schedule, performer_set)
        labels = [f"{chr(10060) if messages[i] else chr(9989)} {i+1}. {r.name}" for i, r in enumerate(schedule)]
        st.markdown("**Drag and drop to reorder performances:**")
        sorted_labels = sort_items(labels, direction='vertical')
        if sorted_labels != labels:
            label_to_perf = {l: schedule[i] for i, l in enumerate(labels)}
            st.session_state.tuned[tuned_label] = [label_to_perf[l] for l in sorted_labels]
            st.rerun()
        st.metric("Violation Score", score_schedule(schedule, performer_set, int(max_in_row)))
        for i, msg in enumerate(messages):
            if msg:
                st.write(f"❌ #{i+1} {schedule[i].name}: {msg}")
        if tuned_label in st.session_state.tuned and st.button("Reset"):
            del st.session_state.tuned[tuned_label]
            st.rerun()
