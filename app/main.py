"""
Streamlit Frontend for Expense Tracker

This is the user interface for day-to-day expense tracking.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. The add button is only enabled for input that will be accepted
3. Clear error messages in simple language
4. Visual feedback for all operations
5. No hidden actions

The UI never talks to storage: every change goes through the flows,
which persist and audit it.
"""

import asyncio
from datetime import datetime, time

import streamlit as st

from expense_tracker.audit import create_correlation_id
from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.models.expense import (
    AVAILABLE_ICONS,
    ExpenseCandidate,
    ExpenseCategory,
)
from expense_tracker.orchestrator import (
    BudgetFlow,
    ExpenseFlow,
    create_app_components,
)
from expense_tracker.services.notifications import (
    LocalNotificationCenter,
    PermissionStatus,
    ReminderOutcome,
)


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    try:
        components = create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        components = create_app_components(use_storage=False)

    expense_flow = components[0]
    run_async(expense_flow.restore_reminders())
    return components


def format_money(amount: float) -> str:
    return f"{get_settings().app.currency_code} {amount:,.2f}"


def main():
    """Main application entry point."""
    expense_flow, budget_flow, notification_center = get_components()

    # Sidebar navigation
    st.sidebar.title("💸 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🧾 Expenses", "📊 Budget", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Add what you spent
        2. Set a monthly budget
        3. Watch your categories on the Budget page
        """
    )

    # Route to appropriate page
    if page == "🧾 Expenses":
        render_expenses_page(expense_flow)
    elif page == "📊 Budget":
        render_budget_page(budget_flow)
    elif page == "⚙️ Settings":
        render_settings_page(notification_center)


def render_add_form(expense_flow: ExpenseFlow):
    """Add-expense form. The button stays disabled until the input is valid."""
    st.subheader("➕ Add Expense")

    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Description", placeholder="e.g. Coffee")
        amount = st.text_input("Amount", placeholder="0.00")
    with col2:
        category = st.selectbox(
            "Category",
            options=list(ExpenseCategory),
            format_func=lambda c: c.display_name,
        )
        custom_label = ""
        if category == ExpenseCategory.OTHER:
            custom_label = st.text_input("Custom label", placeholder="e.g. Gifts")
        icon = st.selectbox(
            "Icon",
            options=[None] + AVAILABLE_ICONS,
            format_func=lambda i: "Category default" if i is None else i,
        )

    reminder_at = None
    if st.checkbox("Remind me"):
        col1, col2 = st.columns(2)
        with col1:
            reminder_date = st.date_input("Reminder date")
        with col2:
            reminder_time = st.time_input("Reminder time", value=time(9, 0))
        reminder_at = datetime.combine(reminder_date, reminder_time)

    candidate = ExpenseCandidate(
        name=name,
        amount=amount,
        category=category,
        custom_label=custom_label,
        reminder_at=reminder_at,
        icon=icon,
    )
    result, message = expense_flow.check_candidate(candidate)

    if (name or amount) and not result.can_submit:
        st.caption(message)

    if st.button("Add Expense", type="primary", disabled=not result.can_submit):
        record, outcome, message = run_async(
            expense_flow.add_expense(candidate, create_correlation_id())
        )
        if record is None:
            st.error(message)
        else:
            st.success(f"✅ {message}")
            if outcome == ReminderOutcome.PAST_DUE:
                st.info("The reminder time has already passed, so no reminder was set.")
            elif outcome == ReminderOutcome.FAILED:
                st.warning("The reminder could not be scheduled.")


def render_expenses_page(expense_flow: ExpenseFlow):
    """Render the expense list page."""
    st.title("🧾 Expenses")

    render_add_form(expense_flow)

    st.markdown("---")

    ledger = expense_flow.ledger
    records = ledger.items()

    st.markdown(f"""
    <div class="big-number">{format_money(ledger.total())}</div>
    <p>spent across {len(records)} expenses</p>
    """, unsafe_allow_html=True)

    if not records:
        st.info("📋 Your expenses will appear here once you add them.")
        return

    selected = []
    for index, record in enumerate(records):
        col1, col2, col3, col4 = st.columns([1, 4, 3, 2])
        with col1:
            if st.checkbox("Select", key=f"select_{record.id}", label_visibility="collapsed"):
                selected.append(index)
        with col2:
            st.markdown(f"**{record.name}**")
            if record.reminder_at:
                st.caption(f"⏰ {record.reminder_at:%Y-%m-%d %H:%M}")
        with col3:
            st.markdown(f"{record.display_type} · `{record.icon}`")
        with col4:
            st.markdown(format_money(record.amount))

    col1, col2 = st.columns(2)
    with col1:
        if st.button("🗑️ Delete Selected", disabled=not selected):
            removed = run_async(expense_flow.delete_expenses(selected))
            st.success(f"Deleted {len(removed)} expenses")
            st.rerun()
    with col2:
        if st.button("Reset All"):
            removed = run_async(expense_flow.reset())
            st.success(f"Cleared {len(removed)} expenses")
            st.rerun()


def render_budget_page(budget_flow: BudgetFlow):
    """Render the budget overview page."""
    st.title("📊 Budget")

    budget_config = budget_flow.budget_config
    new_budget = st.number_input(
        "Monthly budget",
        min_value=0.0,
        value=budget_config.total_budget,
        step=100.0,
    )
    if st.button("Save Budget", type="primary"):
        try:
            budget_flow.set_total_budget(new_budget)
            st.success("✅ Budget saved")
        except ValueError as e:
            st.error(str(e))

    overview = budget_flow.overview()

    st.markdown("---")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Spent", format_money(overview.total_spent))
    with col2:
        st.metric("Remaining", format_money(overview.remaining))
    with col3:
        st.metric("Days left", overview.days_left_in_month)

    st.progress(overview.overall_progress)

    if not budget_config.is_set:
        st.info("Set a monthly budget to see how each category is doing.")
    elif overview.is_over_budget:
        st.markdown("""
        <div class="error-box">
            <h4>⚠️ Budget used up</h4>
            <p>You have spent your whole monthly budget.</p>
        </div>
        """, unsafe_allow_html=True)

    st.markdown("### Categories")

    if not overview.categories:
        st.info("No expenses yet.")
        return

    for summary in overview.categories:
        st.markdown(f"**{summary.name}** · `{summary.icon}`")
        st.progress(summary.progress)
        if summary.is_over:
            st.caption(
                f"❌ {format_money(summary.spent)} of {format_money(summary.limit)}"
                f" (over by {format_money(summary.over_by)})"
            )
        else:
            st.caption(
                f"{format_money(summary.spent)} of {format_money(summary.limit)}"
                f" ({format_money(summary.remaining)} left)"
            )


def render_settings_page(notification_center: LocalNotificationCenter):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    settings = get_settings()
    status = validate_all_settings()

    for name, key in [("App settings", "app"), ("Google Sheets (Storage)", "google_sheets")]:
        if key not in status:
            continue
        if status[key]:
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    app_settings = settings.app
    st.markdown(f"- Storage backend: `{app_settings.storage_backend}`")
    st.markdown(f"- Category grouping: `{app_settings.category_grouping}`")
    if app_settings.has_entry_limit:
        st.markdown(f"- Per-entry limit: {format_money(app_settings.entry_limit)}")
    else:
        st.markdown("- Per-entry limit: none")

    st.markdown("---")
    st.markdown("### Reminders")

    allowed = st.toggle(
        "Allow reminders",
        value=notification_center.permission == PermissionStatus.GRANTED,
    )
    notification_center.set_permission(
        PermissionStatus.GRANTED if allowed else PermissionStatus.DENIED
    )

    for request in notification_center.pop_due(datetime.now()):
        st.warning(f"⏰ {request.title}: {request.body}")

    pending = notification_center.pending_reminders()
    if pending:
        for request in pending:
            st.markdown(f"- {request.fires_at:%Y-%m-%d %H:%M} · {request.title}")
    else:
        st.info("No reminders scheduled.")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
