import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import date
from uuid import uuid4

import streamlit as st
import pandas as pd
import numpy as np
import plotly.express as px

from engine import config
from engine.domain import Budget, Category, Expense
from engine.errors import EngineError
from engine.events import SnapshotFeed
from engine.filters import by_category, by_search, iter_expenses, sort_expenses, SORT_KEYS
from engine.formatting import format_currency, long_month_label, month_label, usage_label
from engine.months import current_month, month_options
from engine.services import ReportService
from engine.transforms import (
    add_budget,
    add_expense,
    delete_budget,
    delete_expense,
    expense_to_dict,
    load_seed,
)
from engine.validation import collect_errors, validate_budget, validate_expense

config.configure_logging()
logger = logging.getLogger("fintrack.app")

st.set_page_config(page_title="Finance Tracker", layout="wide")

if "feed" not in st.session_state:
    seed_expenses, seed_budgets = load_seed(str(config.SEED_PATH), config.USER_ID)
    st.session_state.feed = SnapshotFeed(seed_expenses, seed_budgets)

feed: SnapshotFeed = st.session_state.feed
snapshot = feed.snapshot
this_month = current_month(date.today())
money = lambda v: format_currency(v, config.CURRENCY)

st.sidebar.markdown("### 👤 Profile")
st.sidebar.caption(f"Signed in as {config.USER_ID}")

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "🧾 Expenses", "💰 Budget", "🗂 Categories", "📑 Reports"]
)

trend_months = config.TREND_MONTHS
if menu == "📑 Reports":
    trend_months = st.sidebar.selectbox(
        "Period",
        config.TREND_PERIODS,
        index=config.TREND_PERIODS.index(config.TREND_MONTHS),
        format_func=lambda n: f"Last {n} months",
    )

try:
    report = ReportService().build_snapshot(snapshot, this_month, trend_months)
except EngineError as e:
    logger.error(f"Could not build reports: {e}")
    st.error(f"Your data could not be summarized: {e}")
    problems = collect_errors(snapshot.expenses, snapshot.budgets)
    if problems:
        st.subheader("Data integrity report")
        st.dataframe(pd.DataFrame(problems)[["id", "field", "error", "message"]], use_container_width=True, hide_index=True)
    st.stop()

result = report["result"]


def totals_df(rows):
    return pd.DataFrame(
        [{"Category": str(r.category), "Total": r.total, "Budget": r.budget, "Used %": r.percentage} for r in rows],
        columns=["Category", "Total", "Budget", "Used %"],
    )


def category_pie(rows, title):
    df_cat = totals_df(rows)
    if df_cat.empty:
        st.info("No expense data available")
        return
    fig = px.pie(df_cat, values="Total", names="Category", title=title)
    fig.update_traces(hovertemplate="%{label}: " + config.CURRENCY + "%{value:,.2f}")
    st.plotly_chart(fig, use_container_width=True)


if menu == "🏠 Dashboard":
    st.title("Dashboard")
    summary = result["summary"]
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Monthly Expenses", money(summary.total_monthly_expense))
        st.caption(f"For {long_month_label(this_month)}")
    with k2:
        st.metric("Monthly Budget", money(summary.total_monthly_budget))
        st.caption(usage_label(summary.budget_usage_percent))
    with k3:
        st.metric("Average Daily Expense", money(summary.average_daily_expense))
        st.caption(f"Per day in {long_month_label(this_month).split()[0]}")
    with k4:
        st.metric("Total Expenses", money(summary.all_time_total))
        st.caption("All time")

    category_pie(result["month_categories"], "Expenses by Category")

elif menu == "🧾 Expenses":
    st.title("🧾 Expenses")

    with st.form("add_expense", clear_on_submit=True):
        st.subheader("➕ Add Expense")
        c1, c2, c3 = st.columns(3)
        amount = c1.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
        category = c2.selectbox("Category", list(Category), index=list(Category).index(Category.OTHER))
        spent_on = c3.date_input("Date", value=date.today())
        description = st.text_input("Description")
        if st.form_submit_button("Add"):
            expense = Expense(
                id=uuid4().hex,
                amount=amount,
                category=category,
                date=spent_on.isoformat(),
                user_id=config.USER_ID,
                description=description,
            )
            checked = validate_expense(expense)
            if checked.is_left():
                st.error(checked.get_error()["message"])
            else:
                feed.set_expenses(add_expense(snapshot.expenses, expense))
                st.success("Expense added successfully!")
                st.rerun()

    f1, f2, f3, f4 = st.columns([2, 2, 2, 1])
    search = f1.text_input("Search expenses")
    cat_filter = f2.selectbox("Category filter", ["All"] + [str(c) for c in Category])
    sort_key = f3.selectbox("Sort by", SORT_KEYS)
    descending = f4.checkbox("Descending", value=True)

    preds = [by_search(search)]
    if cat_filter != "All":
        preds.append(by_category(Category(cat_filter)))
    shown = sort_expenses(iter_expenses(snapshot.expenses, *preds), sort_key, descending)

    if not shown:
        st.info("No expenses match your filters" if search or cat_filter != "All"
                else "No expenses found. Add some expenses to get started!")
    else:
        df = pd.DataFrame([expense_to_dict(e) for e in shown])
        disp = df[["date", "category", "description", "amount"]].copy()
        disp["amount"] = disp["amount"].map(money)
        st.dataframe(disp, use_container_width=True, hide_index=True)
        st.download_button("⬇ Download CSV", df.to_csv(index=False), file_name="expenses.csv")

        to_delete = st.selectbox(
            "Delete expense",
            [e.id for e in shown],
            format_func=lambda eid: next(f"{e.date} {e.category} {money(e.amount)}" for e in shown if e.id == eid),
        )
        if st.button("🗑 Delete"):
            feed.set_expenses(delete_expense(snapshot.expenses, to_delete))
            st.success("Expense deleted successfully")
            st.rerun()

elif menu == "💰 Budget":
    st.title("💰 Budget")

    with st.form("add_budget", clear_on_submit=True):
        st.subheader("Set Budget")
        c1, c2, c3 = st.columns(3)
        amount = c1.number_input("Amount", min_value=0.0, step=10.0, format="%.2f")
        category = c2.selectbox("Category", list(Category), index=list(Category).index(Category.OTHER))
        month = c3.selectbox("Month", month_options(this_month, 0, 11), format_func=long_month_label)
        if st.form_submit_button("Save"):
            budget = Budget(id=uuid4().hex, category=category, amount=amount, month=month, user_id=config.USER_ID)
            checked = validate_budget(budget)
            if amount <= 0:
                st.error("Please enter a valid amount")
            elif checked.is_left():
                st.error(checked.get_error()["message"])
            else:
                feed.set_budgets(add_budget(snapshot.budgets, budget))
                st.success("Budget set successfully!")
                st.rerun()

    months = ("all",) + month_options(this_month, 6, 5)
    selected = st.selectbox(
        "Filter by month", months,
        format_func=lambda m: "All Months" if m == "all" else long_month_label(m),
    )
    rows = [r for r in result["budget_usage"] if selected == "all" or r.budget.month == selected]

    if not rows:
        st.info("No budgets set for this month" if selected != "all"
                else "No budgets found. Set some budgets to get started!")
    else:
        for r in rows:
            b = r.budget
            c1, c2, c3 = st.columns([3, 4, 1])
            c1.markdown(f"**{b.category}** · {long_month_label(b.month)}")
            c2.progress(float(np.clip(r.percentage / 100, 0, 1)),
                        text=f"{money(r.spent)} of {money(b.amount)}" + (" ⚠️" if r.over_budget else ""))
            if c3.button("🗑", key=f"del_{b.id}"):
                feed.set_budgets(delete_budget(snapshot.budgets, b.id))
                st.rerun()

elif menu == "🗂 Categories":
    st.title("🗂 Categories")
    st.caption(f"Spending by category for {long_month_label(this_month)}")
    stats = pd.DataFrame([{
        "Category": str(s.category),
        "Spent": s.total_spent,
        "Budget": s.budget_amount,
        "Used": s.percent_used / 100,
        "Over budget": s.over_budget,
        "Transactions": s.transaction_count,
        "All time": s.all_time_spent,
    } for s in result["category_stats"]])
    st.dataframe(
        stats,
        use_container_width=True,
        hide_index=True,
        column_config={"Used": st.column_config.ProgressColumn("Used", min_value=0.0, max_value=1.0)},
    )

elif menu == "📑 Reports":
    st.title("📑 Reports")
    st.caption("Visualize your spending patterns")

    trend = pd.DataFrame([{"Month": month_label(m.month), "Total": m.total} for m in result["trend"]])
    change = result["trend_change"]
    st.subheader("Monthly Expense Trend")
    if change is not None:
        st.metric("Last month vs previous", money(trend["Total"].iloc[-1]), delta=f"{change:.1f}%",
                  delta_color="inverse")
    fig_ts = px.line(trend, x="Month", y="Total", markers=True)
    fig_ts.update_yaxes(tickprefix=config.CURRENCY)
    st.plotly_chart(fig_ts, use_container_width=True)

    st.subheader("Category Breakdown")
    category_pie(result["all_time_categories"], "All time")

    st.subheader("Monthly Category Comparison")
    breakdown = totals_df(result["breakdown"])
    if breakdown.empty:
        st.info("No expenses this month")
    else:
        fig_bar = px.bar(breakdown, x="Category", y="Total")
        fig_bar.update_yaxes(tickprefix=config.CURRENCY)
        st.plotly_chart(fig_bar, use_container_width=True)
