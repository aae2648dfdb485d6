"""Streamlit finance tracker entry point."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
import importlib
import threading
import time

import streamlit as st
import altair as alt

from src.adapters.interface.streamlit.cashflow_sankey import (
    build_plotly_figure,
    build_sankey_model,
)
from src.application.ports.auth_provider import AuthProviderPort
from src.application.ports.transaction_store import TransactionStorePort
from src.application.use_cases.auth_session_controller import (
    AuthSessionController,
)
from src.application.use_cases.export_transactions import (
    EXPORT_FILENAME_FORMAT,
)
from src.application.use_cases.finance_sync import FinanceSyncController
from src.application.use_cases.preferences import PreferenceStore
from src.domain.constants import CURRENCY_SYMBOLS, DEFAULT_CATEGORIES
from src.domain.models.transactions import (
    CategoryAmount,
    Transaction,
    TransactionKind,
)
from src.domain.services.aggregation import compute_category_totals
from src.infrastructure.container import (
    build_auth_controller,
    build_auth_provider,
    build_database_adapter,
    build_finance_controller,
    build_identity_backend,
    build_preference_store,
    build_transaction_store,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import FinanceSettings

CONTEXT_KEY = "finance_context"
SESSION_IDLE_SECONDS = 30 * 60
CATEGORY_NAMES = [category.name for category in DEFAULT_CATEGORIES]
CATEGORY_COLORS = [category.color for category in DEFAULT_CATEGORIES]
KIND_LABELS = {
    TransactionKind.INCOME: "Income",
    TransactionKind.EXPENSE: "Expense",
}


@dataclass
class AppContext:
    """Per-session controllers kept in ``st.session_state``."""

    finance: FinanceSyncController
    auth: AuthSessionController
    preferences: PreferenceStore
    auth_provider: AuthProviderPort | None = None
    closed: bool = False

    def close(self) -> None:
        """Release the session's store listener and session mirror."""
        if self.closed:
            return
        self.closed = True
        self.finance.close()
        self.auth.close()
        if self.auth_provider is not None:
            self.auth_provider.close()


class SessionRegistry:
    """Session contexts attached to the shared transaction store.

    Browser sessions end without notice, so a context not seen for
    ``idle_seconds`` is closed and its store listener released. A session
    that comes back afterwards gets a fresh, signed-out context.
    """

    def __init__(
        self,
        idle_seconds: float = SESSION_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        logger=None,
    ) -> None:
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._logger = logger or get_app_logger()
        self._entries: dict[int, tuple[AppContext, float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def touch(self, context: AppContext) -> None:
        """Record that the context's session is active now."""
        with self._lock:
            self._entries[id(context)] = (context, self._clock())

    def close_idle(self) -> int:
        """Close contexts idle for too long and return how many closed."""
        now = self._clock()
        with self._lock:
            stale = [
                key
                for key, (_, seen) in self._entries.items()
                if now - seen > self._idle_seconds
            ]
            contexts = [self._entries.pop(key)[0] for key in stale]
        for context in contexts:
            context.close()
        if contexts:
            self._logger.info(f"Closed {len(contexts)} idle session(s)")
        return len(contexts)


@st.cache_resource(show_spinner=False)
def _shared_transaction_store() -> TransactionStorePort:
    """Transaction store shared by every browser session."""
    settings = FinanceSettings.from_env()
    return build_transaction_store(build_database_adapter(), settings)


@st.cache_resource(show_spinner=False)
def _session_registry() -> SessionRegistry:
    """Registry of the contexts listening on the shared store."""
    return SessionRegistry()


def _build_context() -> AppContext:
    """Wire a fresh set of controllers for one browser session."""
    settings = FinanceSettings.from_env()
    auth_provider = build_auth_provider(
        build_identity_backend(build_database_adapter(), settings)
    )
    return AppContext(
        finance=build_finance_controller(
            _shared_transaction_store(),
            auth_provider,
        ),
        auth=build_auth_controller(auth_provider),
        preferences=build_preference_store(settings),
        auth_provider=auth_provider,
    )


def _get_context() -> AppContext:
    """Return the session context, creating it on first use.

    Idle contexts of other sessions are closed first; a context closed that
    way is replaced when its session returns.
    """
    registry = _session_registry()
    registry.close_idle()
    context = st.session_state.get(CONTEXT_KEY)
    if context is None or context.closed:
        context = _build_context()
        st.session_state[CONTEXT_KEY] = context
    registry.touch(context)
    return context


def _check_altair_dependencies() -> tuple[bool, str | None]:
    """Check that the numpy/pandas imports Altair relies on are usable."""
    try:
        numpy = importlib.import_module("numpy")
        pandas = importlib.import_module("pandas")
    except ImportError as exc:
        return False, f"Chart dependencies unavailable: {exc}"
    if not hasattr(numpy, "ndarray"):
        return False, "Chart dependencies broken: numpy has no ndarray."
    if not hasattr(pandas, "Timestamp"):
        return False, "Chart dependencies broken: pandas has no Timestamp."
    return True, None


def _format_currency(value: Decimal, symbol: str) -> str:
    """Format currency values for display."""
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def _format_signed_amount(transaction: Transaction, symbol: str) -> str:
    """Format an amount with + for income and - for expenses."""
    sign = "+" if transaction.kind is TransactionKind.INCOME else "-"
    return f"{sign}{symbol}{transaction.amount:,.2f}"


def _format_timestamp(occurred_at: str) -> str:
    """Show stored timestamps as ``Mon DD, YYYY``, or unchanged."""
    try:
        parsed = datetime.strptime(occurred_at[:10], "%Y-%m-%d")
    except ValueError:
        return occurred_at
    return parsed.strftime("%b %d, %Y")


def _transactions_table(
    transactions: Sequence[Transaction],
    symbol: str,
) -> list[dict[str, str]]:
    """Build table rows for the transactions list."""
    return [
        {
            "Date": _format_timestamp(transaction.occurred_at),
            "Description": transaction.description,
            "Category": transaction.category,
            "Type": KIND_LABELS[transaction.kind],
            "Amount": _format_signed_amount(transaction, symbol),
        }
        for transaction in transactions
    ]


def _prepare_donut_chart_data(
    categories: Sequence[CategoryAmount],
    symbol: str,
    max_categories: int = 6,
) -> tuple[list[dict[str, str | float]], Decimal]:
    """Prepare donut chart data with a Top-N + Other grouping.

    Args:
        categories: Category totals sorted by amount descending.
        symbol: Currency symbol for labels.
        max_categories: Maximum categories to keep before grouping into Other.

    Returns:
        Tuple with Altair-ready chart data and the total amount.
    """
    top_items = list(categories[:max_categories])
    other_items = categories[max_categories:]
    other_amount = sum(
        (item.amount for item in other_items),
        start=Decimal("0"),
    )
    if other_items and other_amount != 0:
        top_items.append(
            CategoryAmount(category="Other", amount=other_amount)
        )
    total_amount = sum(
        (item.amount for item in categories),
        start=Decimal("0"),
    )
    data: list[dict[str, str | float]] = []
    for item in top_items:
        share = (
            (item.amount / total_amount) * Decimal("100")
            if total_amount
            else Decimal("0")
        )
        data.append(
            {
                "category": item.category,
                "amount": float(item.amount),
                "amount_label": _format_currency(item.amount, symbol),
                "share_label": f"{share:.1f}%",
            }
        )
    return data, total_amount


def _render_expense_chart(
    transactions: Sequence[Transaction],
    symbol: str,
    chart_size: int = 320,
) -> None:
    """Render a donut chart of expenses by category."""
    categories = compute_category_totals(
        transactions,
        TransactionKind.EXPENSE,
    )
    if not categories:
        st.info("No expenses to chart yet.")
        return
    ok, message = _check_altair_dependencies()
    if not ok:
        st.warning(message)
        return
    data, _total = _prepare_donut_chart_data(categories, symbol)

    hover = alt.selection_point(
        name="hover",
        fields=["category"],
        on="view:mouseover",
        clear="view:mouseout",
        empty=False,
    )
    base = alt.Chart(alt.Data(values=data)).mark_arc(
        innerRadius=chart_size * 0.4,
        cornerRadius=8,
        padAngle=0.02,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color(
            "category:N",
            scale=alt.Scale(range=CATEGORY_COLORS),
            legend=alt.Legend(orient="bottom", title=None, columns=3),
        ),
        opacity=alt.condition(hover, alt.value(1.0), alt.value(0.4)),
        order=alt.Order("amount:Q", sort="descending"),
        tooltip=[
            alt.Tooltip("category:N"),
            alt.Tooltip("amount_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    )
    hover_text = alt.Chart(alt.Data(values=data)).transform_filter(
        hover
    ).mark_text(
        align="center",
        baseline="middle",
        fontSize=16,
        fontWeight="bold",
    ).encode(text="amount_label:N")

    chart = alt.layer(base, hover_text).add_params(hover).properties(
        width=chart_size,
        height=chart_size,
    ).configure_view(stroke=None)
    st.subheader("Expenses by Category")
    st.altair_chart(chart, width="stretch")


def _render_cashflow(transactions: Sequence[Transaction]) -> None:
    """Render the income to expenses Sankey."""
    model = build_sankey_model(transactions, allow_negative_diff=True)
    if model.is_empty:
        st.info("Add transactions to see your cashflow.")
        return
    st.subheader("Cashflow")
    st.plotly_chart(build_plotly_figure(model), width="stretch")


def _render_login(auth: AuthSessionController) -> None:
    """Render sign in and sign up forms."""
    st.title("Finance Tracker")
    state = auth.view_state
    if state.error:
        st.error(state.error)
    sign_in_tab, sign_up_tab = st.tabs(["Sign in", "Create account"])
    with sign_in_tab:
        with st.form("sign_in"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Sign in"):
                auth.sign_in(email, password)
                st.rerun()
    with sign_up_tab:
        with st.form("sign_up"):
            display_name = st.text_input("Name")
            email = st.text_input("Email", key="sign_up_email")
            password = st.text_input(
                "Password",
                type="password",
                key="sign_up_password",
            )
            if st.form_submit_button("Create account"):
                auth.sign_up(email, password, display_name)
                st.rerun()


def _render_add_form(finance: FinanceSyncController) -> None:
    """Render the form adding a transaction."""
    with st.form("add_transaction", clear_on_submit=True):
        st.subheader("Add Transaction")
        amount = st.number_input("Amount", min_value=0.0, step=0.01)
        description = st.text_input("Description")
        category = st.selectbox("Category", CATEGORY_NAMES)
        kind = st.radio(
            "Type",
            list(TransactionKind),
            format_func=KIND_LABELS.get,
            horizontal=True,
        )
        if st.form_submit_button("Add"):
            finance.add_transaction(
                str(amount),
                description,
                category,
                kind,
            )
            st.rerun()


def _render_edit_form(
    finance: FinanceSyncController,
    transaction: Transaction,
) -> None:
    """Render the form editing the selected transaction."""
    with st.form("edit_transaction"):
        st.subheader("Edit Transaction")
        amount = st.number_input(
            "Amount",
            min_value=0.0,
            step=0.01,
            value=float(transaction.amount),
        )
        description = st.text_input(
            "Description",
            value=transaction.description,
        )
        category_index = (
            CATEGORY_NAMES.index(transaction.category)
            if transaction.category in CATEGORY_NAMES
            else len(CATEGORY_NAMES) - 1
        )
        category = st.selectbox(
            "Category",
            CATEGORY_NAMES,
            index=category_index,
        )
        kinds = list(TransactionKind)
        kind = st.radio(
            "Type",
            kinds,
            index=kinds.index(transaction.kind),
            format_func=KIND_LABELS.get,
            horizontal=True,
        )
        save_col, cancel_col = st.columns(2)
        if save_col.form_submit_button("Save"):
            finance.edit_transaction(
                transaction,
                str(amount),
                description,
                category,
                kind,
            )
            st.rerun()
        if cancel_col.form_submit_button("Cancel"):
            finance.set_transaction_to_edit(None)
            st.rerun()


def _render_transactions(
    finance: FinanceSyncController,
    symbol: str,
) -> None:
    """Render the transactions list with edit and delete actions."""
    transactions = finance.view_state.transactions
    st.subheader("Transactions")
    if not transactions:
        st.info("No transactions yet.")
        return
    st.dataframe(
        _transactions_table(transactions, symbol),
        width="stretch",
        hide_index=True,
    )
    for transaction in transactions:
        label_col, edit_col, delete_col = st.columns([6, 1, 1])
        label_col.write(
            f"{transaction.description or transaction.category} "
            f"({_format_signed_amount(transaction, symbol)})"
        )
        if edit_col.button("Edit", key=f"edit_{transaction.id}"):
            finance.set_transaction_to_edit(transaction)
            st.rerun()
        if delete_col.button("Delete", key=f"delete_{transaction.id}"):
            finance.delete_transaction(transaction)
            st.rerun()


def _render_settings(preferences: PreferenceStore) -> None:
    """Render the preferences controls in the sidebar."""
    st.sidebar.subheader("Settings")
    dark_theme = st.sidebar.toggle(
        "Dark theme",
        value=preferences.dark_theme.value,
    )
    if dark_theme != preferences.dark_theme.value:
        preferences.set_dark_theme(dark_theme)
    codes = list(CURRENCY_SYMBOLS)
    current = preferences.currency_code.value
    selected = st.sidebar.selectbox(
        "Currency",
        codes,
        index=codes.index(current) if current in codes else 0,
    )
    if selected != current:
        preferences.set_currency_code(selected)


def _apply_theme(dark_theme: bool) -> None:
    if dark_theme:
        st.markdown(
            "<style>.stApp {background-color: #0f1115; color: #e7ecf3;}"
            "</style>",
            unsafe_allow_html=True,
        )


def _render_dashboard(context: AppContext) -> None:
    """Render the signed-in view."""
    finance = context.finance
    symbol = context.preferences.currency_symbol()
    user = context.auth.view_state.user
    st.title("Finance Tracker")
    if user is not None:
        st.caption(f"Signed in as {user.display_name or user.email}")
    if st.sidebar.button("Sign out"):
        context.auth.sign_out()
        st.rerun()

    state = finance.view_state
    if state.error:
        st.error(state.error)
        retry_col, dismiss_col = st.columns(2)
        if retry_col.button("Retry"):
            finance.refresh()
            st.rerun()
        if dismiss_col.button("Dismiss"):
            finance.clear_error()
            st.rerun()
    if state.is_loading:
        st.info("Loading transactions...")

    balance_col, income_col, expenses_col = st.columns(3)
    balance_col.metric("Balance", _format_currency(state.balance, symbol))
    income_col.metric("Income", _format_currency(state.total_income, symbol))
    expenses_col.metric(
        "Expenses",
        _format_currency(state.total_expenses, symbol),
    )

    if state.transaction_being_edited is not None:
        _render_edit_form(finance, state.transaction_being_edited)
    else:
        _render_add_form(finance)

    chart_left, chart_right = st.columns(2)
    with chart_left:
        _render_expense_chart(state.transactions, symbol)
    with chart_right:
        _render_cashflow(state.transactions)

    _render_transactions(finance, symbol)
    if state.transactions:
        st.download_button(
            "Export CSV",
            data=finance.export_csv(),
            file_name=datetime.now().strftime(EXPORT_FILENAME_FORMAT),
            mime="text/csv",
        )


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Finance Tracker", layout="wide")
    context = _get_context()
    _render_settings(context.preferences)
    _apply_theme(context.preferences.dark_theme.value)
    if not context.auth.view_state.is_logged_in:
        _render_login(context.auth)
        return
    _render_dashboard(context)


if __name__ == "__main__":  # pragma: no cover
    main()
