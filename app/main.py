"""
Streamlit Frontend for Finance Tracker

The page a user works with day to day: add and edit spending records,
search and sort them, watch the budget, and move data in and out as JSON.

DESIGN PRINCIPLES:
1. The page holds no business logic. Every action goes to TrackerSession.
2. Validation messages appear next to the form, one per field
3. A failed save is shown, never hidden
4. User text is escaped before it is put into HTML
"""

import html
from datetime import date

import streamlit as st

from finance_tracker.activity import configure_logging
from finance_tracker.config import get_settings
from finance_tracker.orchestrator import TrackerSession, create_app_components
from finance_tracker.search import SortDirection, SortField
from finance_tracker.validation import get_categories


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .success-box {
        padding: 16px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 16px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 16px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    mark {
        background-color: #ffe066;
        padding: 0 2px;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def init_logging():
    """Configure structured logging once per process."""
    configure_logging(get_settings())
    return True


def get_session() -> TrackerSession:
    """Get or create this browser session's tracker."""
    if "tracker" not in st.session_state:
        st.session_state.tracker = create_app_components()
    return st.session_state.tracker


def show_save_problem(tracker: TrackerSession):
    """Warn when the last save did not reach storage."""
    outcome = tracker.last_save
    if outcome is not None and not outcome.ok:
        st.markdown(f"""
        <div class="warning-box">
            <p>{html.escape(outcome.user_message)}</p>
        </div>
        """, unsafe_allow_html=True)


def main():
    """Main application entry point."""
    init_logging()
    tracker = get_session()

    # Sidebar navigation
    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🧾 Records", "📊 Dashboard", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Search tips:**
        - `coffee` finds any record mentioning coffee
        - `^Food$` matches the Food category exactly
        - `2024-01` finds everything from January 2024
        """
    )

    if tracker.corrupted_on_load:
        st.markdown("""
        <div class="error-box">
            <p>Saved data could not be read and was reset to defaults.</p>
        </div>
        """, unsafe_allow_html=True)

    show_save_problem(tracker)

    # Route to appropriate page
    if page == "🧾 Records":
        render_records_page(tracker)
    elif page == "📊 Dashboard":
        render_dashboard_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page(tracker)


def render_record_form(tracker: TrackerSession):
    """Add form, or edit form when a record is being edited."""
    editing_id = tracker.store.get_editing_id()
    editing = tracker.store.find_record(editing_id) if editing_id else None
    categories = get_categories()

    st.subheader("✏️ Edit Record" if editing else "➕ Add Record")

    errors = st.session_state.get("form_errors", {})

    with st.form("record_form", clear_on_submit=not editing):
        col1, col2 = st.columns(2)

        with col1:
            description = st.text_input(
                "Description *",
                value=editing.description if editing else "",
                max_chars=50,
            )
            if "description" in errors:
                st.error(errors["description"])

            amount = st.text_input(
                "Amount *",
                value=str(editing.amount) if editing else "",
                placeholder="e.g. 4.50",
            )
            if "amount" in errors:
                st.error(errors["amount"])

        with col2:
            category = st.selectbox(
                "Category *",
                options=categories,
                index=categories.index(editing.category.value) if editing else 0,
            )
            if "category" in errors:
                st.error(errors["category"])

            record_date = st.date_input(
                "Date *",
                value=editing.date if editing else date.today(),
            )
            if "date" in errors:
                st.error(errors["date"])

        submitted = st.form_submit_button(
            "💾 Save Changes" if editing else "➕ Add Record",
            type="primary",
        )

    if editing and st.button("Cancel Edit"):
        tracker.cancel_edit()
        st.session_state.form_errors = {}
        st.rerun()

    if submitted:
        outcome = tracker.submit({
            "description": description,
            "amount": amount,
            "category": category,
            "date": record_date.isoformat() if record_date else "",
        })
        if outcome.ok:
            st.session_state.form_errors = {}
            st.session_state.flash = "Record updated." if outcome.was_update else "Record added."
            st.rerun()
        else:
            st.session_state.form_errors = outcome.errors
            st.rerun()

    if "form" in errors:
        st.error(errors["form"])


def render_records_page(tracker: TrackerSession):
    """Render the records page."""
    st.title("🧾 Records")

    flash = st.session_state.pop("flash", None)
    if flash:
        st.success(flash)

    render_record_form(tracker)

    st.markdown("---")

    # Search and sort controls
    col1, col2, col3 = st.columns([3, 1, 1])

    with col1:
        term = st.text_input(
            "🔍 Search (regular expression)",
            value=tracker.search_term,
            placeholder="e.g. coffee|lunch",
        )
        if term != tracker.search_term:
            tracker.set_search(term)

    with col2:
        current = tracker.sort_state
        field = st.selectbox(
            "Sort by",
            options=list(SortField),
            index=list(SortField).index(current.field),
            format_func=lambda f: f.value.title(),
        )
        if field != current.field:
            tracker.sort_by(field)

    with col3:
        st.write("")
        st.write("")
        arrow = "⬆️ Ascending" if tracker.sort_state.direction == SortDirection.ASC else "⬇️ Descending"
        if st.button(arrow):
            tracker.sort_by(tracker.sort_state.field)
            st.rerun()

    state = tracker.view()

    if not state.pattern_valid:
        st.warning("That search pattern is not a valid regular expression.")

    st.caption(f"Showing {state.match_count} of {state.dashboard.total_count} records")

    if not state.rows:
        st.info("No records to show yet. Add one above or import a file from Settings.")
        return

    # Table
    header = st.columns([2, 4, 2, 2, 1, 1])
    for col, title in zip(header, ["Date", "Description", "Category", "Amount", "", ""]):
        col.markdown(f"**{title}**")

    for row in state.rows:
        cols = st.columns([2, 4, 2, 2, 1, 1])
        cols[0].markdown(row.date_html, unsafe_allow_html=True)
        cols[1].markdown(row.description_html, unsafe_allow_html=True)
        cols[2].markdown(row.category_html, unsafe_allow_html=True)
        cols[3].markdown(row.amount_html, unsafe_allow_html=True)

        record_id = row.record.id
        if cols[4].button("✏️", key=f"edit-{record_id}", help="Edit"):
            tracker.begin_edit(record_id)
            st.session_state.form_errors = {}
            st.rerun()
        if cols[5].button("🗑️", key=f"delete-{record_id}", help="Delete"):
            tracker.delete(record_id)
            st.session_state.flash = "Record deleted."
            st.rerun()


def render_dashboard_page(tracker: TrackerSession):
    """Render the dashboard page."""
    st.title("📊 Dashboard")

    summary = tracker.view().dashboard
    settings = summary.settings
    base = html.escape(settings.base_currency)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Spent", f"{summary.total_spent:,.2f} {settings.base_currency}")
    col2.metric("Records", summary.total_count)
    col3.metric(
        "Top Category",
        summary.top_category.value if summary.top_category else "-",
    )

    status = summary.budget_status
    if status.is_over_budget:
        st.markdown(f"""
        <div class="error-box">
            <h4>Over budget</h4>
            <p>You are {status.overage:,.2f} {base} over your cap of {status.budget_cap:,.2f} {base}.</p>
        </div>
        """, unsafe_allow_html=True)
    else:
        st.markdown(f"""
        <div class="success-box">
            <h4>Within budget</h4>
            <p>{status.remaining:,.2f} {base} left of your {status.budget_cap:,.2f} {base} cap.</p>
        </div>
        """, unsafe_allow_html=True)

    if summary.converted_totals:
        st.markdown("### Total in other currencies")
        cols = st.columns(len(summary.converted_totals))
        for col, converted in zip(cols, summary.converted_totals):
            col.metric(converted.code, f"{converted.total:,.2f}")

    st.markdown(f"### Last {get_settings().recent_days} days")
    recent = summary.last_7_days_records
    if not recent:
        st.info("Nothing recorded in this period.")
    else:
        st.dataframe(
            [
                {
                    "Date": record.date.isoformat(),
                    "Description": record.description,
                    "Category": record.category.value,
                    "Amount": float(record.amount),
                }
                for record in recent
            ],
            use_container_width=True,
        )


def render_settings_page(tracker: TrackerSession):
    """Render the settings page."""
    st.title("⚙️ Settings")

    settings = tracker.store.get_settings()

    # Budget
    st.markdown("### Budget")
    cap = st.text_input("Budget cap", value=str(settings.budget_cap))
    if st.button("Save Budget Cap"):
        outcome = tracker.update_budget_cap(cap)
        if outcome.ok:
            st.success("Budget cap saved.")
        else:
            st.error("Budget cap must be a number of 0 or more.")

    # Currencies
    st.markdown("### Currencies")
    col1, col2, col3 = st.columns(3)
    with col1:
        base_currency = st.text_input("Base currency", value=settings.base_currency, max_chars=3)
    with col2:
        code2 = st.text_input("Currency 2", value=settings.currency2.code, max_chars=3)
        rate2 = st.text_input("Rate 2", value=str(settings.currency2.rate))
    with col3:
        code3 = st.text_input("Currency 3", value=settings.currency3.code, max_chars=3)
        rate3 = st.text_input("Rate 3", value=str(settings.currency3.rate))

    if st.button("Save Currencies"):
        outcome = tracker.update_currencies(
            base_currency=base_currency,
            currency2={"code": code2, "rate": rate2},
            currency3={"code": code3, "rate": rate3},
        )
        if outcome.ok:
            st.success(f"Saved: {', '.join(sorted(outcome.changes))}")
        else:
            st.error("No valid currency changes. Rates must be positive numbers.")

    st.markdown("---")

    # Import / export
    st.markdown("### Import / Export")
    col1, col2 = st.columns(2)

    with col1:
        st.download_button(
            "📥 Export JSON",
            data=tracker.export_json(),
            file_name=tracker.export_filename(),
            mime="application/json",
        )

    with col2:
        uploaded = st.file_uploader("Import JSON", type=["json"])
        if uploaded is not None and st.button("📤 Import", type="primary"):
            outcome = tracker.import_json(uploaded.getvalue())
            if outcome.ok:
                st.success(outcome.message)
            else:
                st.error(outcome.message)
                if outcome.details:
                    with st.expander("Details"):
                        for line in outcome.details:
                            st.markdown(f"- {line}")

    st.markdown("---")

    # Storage
    st.markdown("### Storage")
    info = tracker.storage_info()
    if info.available:
        st.markdown(f"**Stored size:** {info.size_kb} KB")
        if info.last_updated:
            st.markdown(f"**Last saved:** {info.last_updated:%Y-%m-%d %H:%M:%S}")
    else:
        st.error("Storage is unavailable. Changes last only for this session.")

    if st.button("🗑️ Delete All Records"):
        tracker.clear_all()
        st.success("All records deleted.")


if __name__ == "__main__":
    main()
