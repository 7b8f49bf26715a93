"""
Streamlit Frontend for Finance Tracker

This is the user interface for recording income and expenses, setting
monthly budgets and looking at where the money went.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Clear error messages next to the form that caused them
3. Visual feedback for all operations
4. No hidden actions

The UI holds no logic of its own:
- Every number shown comes from ReportFlow / BudgetFlow
- Every change goes through TransactionFlow / BudgetFlow (validated and audited)
"""

from datetime import date

import streamlit as st

from finance_tracker.categories import (
    INCOME_CATEGORY,
    MONTHS,
    budget_categories,
    category_names,
)
from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.models.finance import (
    BudgetStatus,
    TransactionFilter,
    TransactionType,
)
from finance_tracker.orchestrator import (
    BudgetFlow,
    ReportFlow,
    TransactionFlow,
    ValidationFailedError,
    create_app_components,
)
from finance_tracker.reports import (
    format_currency,
    format_month_year,
    format_percentage,
    format_signed_amount,
)
from finance_tracker.services.storage import StorageError


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
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .category-dot {
        display: inline-block;
        width: 12px;
        height: 12px;
        border-radius: 50%;
        margin-right: 8px;
    }
</style>
""", unsafe_allow_html=True)

PENDING_WARNINGS_KEY = "pending_warnings"

STATUS_ICONS = {
    BudgetStatus.GOOD: "🟢",
    BudgetStatus.WARNING: "🟡",
    BudgetStatus.DANGER: "🔴",
}


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def currency(amount) -> str:
    return format_currency(amount, get_settings().app.currency_symbol)


def main():
    """Main application entry point."""
    try:
        transaction_flow, budget_flow, report_flow = get_components()
    except StorageError as e:
        st.error(f"Failed to load your data: {e}")
        st.stop()

    # Sidebar navigation
    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "💳 Transactions", "🎯 Budgets", "📊 Analytics", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Record income and expenses
        2. Set a budget per category for the month
        3. Check the dashboard to stay on track
        """
    )

    try:
        if page == "🏠 Dashboard":
            render_dashboard_page(report_flow)
        elif page == "💳 Transactions":
            render_transactions_page(transaction_flow)
        elif page == "🎯 Budgets":
            render_budgets_page(budget_flow)
        elif page == "📊 Analytics":
            render_analytics_page(report_flow)
        elif page == "⚙️ Settings":
            render_settings_page(report_flow)
    except StorageError as e:
        st.markdown(f"""
        <div class="error-box">
            <h4>❌ Storage Problem</h4>
            <p>{e}</p>
        </div>
        """, unsafe_allow_html=True)


def render_dashboard_page(report_flow: ReportFlow):
    """Render the monthly overview."""
    report = report_flow.dashboard()
    summary = report.summary

    st.title("🏠 Dashboard")
    st.markdown(f"Overview for **{format_month_year(summary.month, summary.year)}**")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Income", currency(summary.total_income))
    with col2:
        st.metric("Total Expenses", currency(summary.total_expenses))
    with col3:
        st.metric(
            "Net Balance",
            currency(summary.net_balance),
            delta="Surplus" if summary.is_surplus else "Deficit",
            delta_color="normal" if summary.is_surplus else "inverse",
        )
    with col4:
        top = summary.top_category
        st.metric(
            "Top Category",
            top.category if top else "None",
            delta=currency(top.amount) if top else None,
            delta_color="off",
        )

    st.markdown("---")
    st.subheader("Recent Transactions")

    if not summary.recent_transactions:
        st.info("No transactions yet. Use the 'Transactions' page to add your first one.")
        return

    symbol = get_settings().app.currency_symbol
    for t in summary.recent_transactions:
        col1, col2, col3 = st.columns([3, 2, 1])
        with col1:
            st.markdown(f"**{t.description}**  \n{t.category}")
        with col2:
            st.markdown(t.date.strftime("%d %b %Y"))
        with col3:
            st.markdown(format_signed_amount(t.amount, t.type, symbol))


def _transaction_form(key: str, defaults: dict) -> dict:
    """Form fields shared by the add and edit forms; returns raw values."""
    col1, col2 = st.columns(2)
    names = category_names()

    with col1:
        type_value = st.selectbox(
            "Type *",
            options=[TransactionType.EXPENSE, TransactionType.INCOME],
            index=0 if defaults.get("type", TransactionType.EXPENSE) == TransactionType.EXPENSE else 1,
            format_func=lambda x: x.value.title(),
            key=f"{key}_type",
        )
        amount = st.number_input(
            "Amount *",
            value=float(defaults.get("amount", 0.0)),
            min_value=0.0,
            step=0.01,
            format="%.2f",
            key=f"{key}_amount",
        )
        tx_date = st.date_input(
            "Date *",
            value=defaults.get("date", date.today()),
            key=f"{key}_date",
        )

    with col2:
        description = st.text_input(
            "Description *",
            value=defaults.get("description", ""),
            key=f"{key}_description",
        )
        current = defaults.get("category")
        category = st.selectbox(
            "Category *",
            options=[""] + names,
            index=names.index(current) + 1 if current in names else 0,
            format_func=lambda x: "Select a category" if not x else x,
            key=f"{key}_category",
        )

    return {
        "type": type_value,
        "amount": str(amount),
        "date": tx_date,
        "description": description,
        "category": category,
    }


def _show_rejection(error: ValidationFailedError):
    for field, message in error.result.errors_by_field().items():
        st.error(f"{field.title()}: {message}")


def _show_warnings(warnings: list[str]):
    if warnings:
        st.markdown(f"""
        <div class="warning-box">
            <h4>⚠️ Saved, but please verify</h4>
            <p>{"<br>".join(warnings)}</p>
        </div>
        """, unsafe_allow_html=True)


def queue_warnings(state, warnings: list[str]):
    """Keep warnings across st.rerun() so the next run can show them."""
    if warnings:
        state[PENDING_WARNINGS_KEY] = list(warnings)


def take_pending_warnings(state) -> list[str]:
    return state.pop(PENDING_WARNINGS_KEY, None) or []


def render_transactions_page(transaction_flow: TransactionFlow):
    """Render the transaction list with add, edit and delete."""
    st.title("💳 Transactions")
    st.markdown("Record and manage your income and expenses.")
    _show_warnings(take_pending_warnings(st.session_state))

    with st.expander("➕ Add Transaction", expanded=False):
        with st.form("add_transaction", clear_on_submit=True):
            raw = _transaction_form("add", {})
            submitted = st.form_submit_button("Add Transaction", type="primary")

        if submitted:
            try:
                transaction, result = transaction_flow.add_transaction(raw)
                st.success(f"✅ Added '{transaction.description}'")
                _show_warnings(result.warnings)
            except ValidationFailedError as e:
                _show_rejection(e)

    # Filters
    col1, col2, col3 = st.columns(3)

    with col1:
        search = st.text_input("Search", placeholder="Description or category")

    with col2:
        category_filter = st.selectbox(
            "Filter by Category",
            options=[None] + category_names(),
            format_func=lambda x: "All Categories" if x is None else x,
        )

    with col3:
        type_filter = st.selectbox(
            "Filter by Type",
            options=[None] + list(TransactionType),
            format_func=lambda x: "All Types" if x is None else x.value.title(),
        )

    st.markdown("---")

    criteria = TransactionFilter(search=search, category=category_filter, type=type_filter)
    transactions = transaction_flow.list_transactions(criteria)

    if not transactions:
        if criteria.is_active:
            st.info("No transactions match your filters.")
        else:
            st.info("📋 Your transactions will appear here once you add them.")
        return

    symbol = get_settings().app.currency_symbol
    for t in transactions:
        col1, col2, col3, col4 = st.columns([3, 2, 2, 1])
        with col1:
            st.markdown(f"**{t.description}**  \n{t.category}")
        with col2:
            st.markdown(t.date.strftime("%d %b %Y"))
        with col3:
            st.markdown(format_signed_amount(t.amount, t.type, symbol))
        with col4:
            if st.button("🗑️", key=f"delete_{t.id}", help="Delete"):
                transaction_flow.delete_transaction(t.id)
                st.rerun()

        with st.expander("✏️ Edit"):
            with st.form(f"edit_{t.id}"):
                raw = _transaction_form(f"edit_{t.id}", t.model_dump())
                saved = st.form_submit_button("Save Changes")
            if saved:
                try:
                    _, result = transaction_flow.update_transaction(t.id, raw)
                    queue_warnings(st.session_state, result.warnings)
                    st.rerun()
                except ValidationFailedError as e:
                    _show_rejection(e)


def render_budgets_page(budget_flow: BudgetFlow):
    """Render the budget overview and budget form."""
    st.title("🎯 Budgets")

    today = date.today()
    overview = budget_flow.overview(today)
    st.markdown(f"Budgets for **{format_month_year(overview.month, overview.year)}**")

    with st.expander("➕ Add Budget", expanded=not overview.has_budgets):
        with st.form("add_budget", clear_on_submit=True):
            col1, col2 = st.columns(2)
            with col1:
                category = st.selectbox(
                    "Category *",
                    options=[""] + [c.name for c in budget_categories()],
                    format_func=lambda x: "Select a category" if not x else x,
                )
                amount = st.number_input(
                    "Budget Amount *", min_value=0.0, step=0.01, format="%.2f"
                )
            with col2:
                month = st.selectbox("Month *", options=MONTHS, index=today.month - 1)
                year = st.number_input(
                    "Year *", min_value=1900, max_value=9999, value=today.year, step=1
                )
            submitted = st.form_submit_button("Add Budget", type="primary")

        if submitted:
            try:
                budget, result = budget_flow.add_budget({
                    "category": category,
                    "amount": str(amount),
                    "month": month,
                    "year": int(year),
                })
                st.success(f"✅ Added {budget.category} budget")
                _show_warnings(result.warnings)
            except ValidationFailedError as e:
                _show_rejection(e)

    st.markdown("---")

    if not overview.has_budgets:
        st.info("No budgets set for this month yet.")
    else:
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Total Budget", currency(overview.total_budget))
        with col2:
            st.metric("Total Spent", currency(overview.total_spent))
        with col3:
            st.metric("Remaining", currency(overview.remaining))

        for item in overview.items:
            budget = item.budget
            col1, col2 = st.columns([5, 1])
            with col1:
                st.markdown(
                    f"<span class='category-dot' style='background-color:{item.color}'></span>"
                    f"**{budget.category}** {STATUS_ICONS[item.status]}",
                    unsafe_allow_html=True,
                )
                st.progress(item.bar_percentage / 100)
                note = (
                    f"Over budget by {currency(-item.remaining)}"
                    if item.is_over_budget
                    else f"{currency(item.remaining)} remaining"
                )
                st.caption(
                    f"{currency(item.spent)} of {currency(budget.amount)} "
                    f"({format_percentage(item.percentage)}) - {note}"
                )
            with col2:
                if st.button("🗑️", key=f"delete_budget_{budget.id}", help="Delete"):
                    budget_flow.delete_budget(budget.id)
                    st.rerun()

    others = [
        b for b in budget_flow.list_budgets()
        if not (b.month_number == today.month and b.year == today.year)
    ]
    if others:
        with st.expander("📅 Other Months"):
            for b in others:
                col1, col2 = st.columns([5, 1])
                with col1:
                    st.markdown(
                        f"**{b.category}** - {format_month_year(b.month, b.year)}: "
                        f"{currency(b.amount)}"
                    )
                with col2:
                    if st.button("🗑️", key=f"delete_other_{b.id}", help="Delete"):
                        budget_flow.delete_budget(b.id)
                        st.rerun()


def render_analytics_page(report_flow: ReportFlow):
    """Render the charts."""
    st.title("📊 Analytics")
    report = report_flow.dashboard()

    st.subheader("Monthly Expenses")
    if report.monthly_expenses:
        st.bar_chart(
            [{"Month": m.month, "Expenses": float(m.amount)} for m in report.monthly_expenses],
            x="Month",
            y="Expenses",
        )
    else:
        st.info("No expenses recorded yet.")

    st.subheader("Expenses by Category")
    if report.has_expenses:
        st.bar_chart(
            [{"Category": c.category, "Amount": float(c.amount)} for c in report.category_expenses],
            x="Category",
            y="Amount",
        )
        for c in report.category_expenses:
            st.markdown(
                f"<span class='category-dot' style='background-color:{c.color}'></span>"
                f"{c.category}: {currency(c.amount)}",
                unsafe_allow_html=True,
            )
    else:
        st.info("No expenses recorded yet.")

    st.subheader("Budget vs Actual (this month)")
    if report.budget_comparison:
        st.bar_chart(
            [
                {"Category": row.category, "Budget": float(row.budget), "Actual": float(row.actual)}
                for row in report.budget_comparison
            ],
            x="Category",
            y=["Budget", "Actual"],
        )
    else:
        st.info("No budgets set for this month.")


def render_settings_page(report_flow: ReportFlow):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Storage", "storage"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if status.get("storage") and status.get("app"):
        settings = get_settings()
        st.markdown(f"""
        - **Storage backend:** {settings.storage.backend}
        - **Data directory:** `{settings.storage.data_dir}`
        - **Currency symbol:** {settings.app.currency_symbol}
        - **Budget thresholds:** {settings.app.budget_warning_percent:.0f}% / {settings.app.budget_danger_percent:.0f}%
        """)

    st.markdown("---")
    st.markdown("### Recent Activity")

    events = report_flow.recent_activity()
    if not events:
        st.info("No recorded activity yet.")
    for event in events:
        st.markdown(
            f"`{event.timestamp.strftime('%Y-%m-%d %H:%M')}` {event.description}"
        )

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables. "
        f"Budgets cannot be set for the {INCOME_CATEGORY} category."
    )


if __name__ == "__main__":
    main()
