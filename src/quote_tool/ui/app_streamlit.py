"""
Streamlit UI for the Quote Tool.

Features:
- Quote calculator with live recompute and shipping-mix hints
- Client harmonization against a target price or a second rate card
- Rate card overview
- Quote history with CSV export
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from quote_tool.config.settings import get_settings
from quote_tool.data.exports import breakdown_frame, comparison_frame, quotes_frame, to_csv
from quote_tool.engine import (
    QuoteEngine,
    UsageProfile,
    SizeMix,
    StorageUnits,
    ShippingModel,
    DiscountThresholds,
    PriceBasis,
    analyze_target_price,
    compare_schedules,
)
from quote_tool.engine.money import format_currency
from quote_tool.services.quote_history import QuoteHistoryService
from quote_tool.services.schedule_service import ScheduleService, ScheduleConflictError


st.set_page_config(
    page_title="Fulfillment Quote Tool",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    return get_settings()


settings = get_settings_cached()
schedule_service = ScheduleService(settings.schedules_path)
quote_history = QuoteHistoryService(settings.quotes_path)

try:
    schedules = schedule_service.list_schedules()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

if not schedules:
    st.warning("No rate cards available. Run scripts/build_all.py to seed the defaults.")
    st.stop()

schedule_labels = {f"{s.name} {s.version}": s for s in schedules}


def profile_form(prefix: str) -> UsageProfile:
    """Render the usage profile inputs and return the profile."""
    c1, c2 = st.columns(2)
    with c1:
        monthly_orders = st.number_input("Monthly Orders", min_value=0, value=1000, step=50, key=f"{prefix}_orders")
        units = st.number_input("Avg Units per Order", min_value=0.1, value=2.0, step=0.1, key=f"{prefix}_units")
    with c2:
        aov = st.number_input("Average Order Value ($)", min_value=0.0, value=45.0, step=1.0, key=f"{prefix}_aov")
        model_label = st.selectbox("Shipping Model", ["Standard Rates", "Customer Account"], key=f"{prefix}_model")

    st.markdown("##### Shipping Profile (%)")
    s1, s2, s3 = st.columns(3)
    small = s1.number_input("Small", min_value=0.0, max_value=100.0, value=60.0, key=f"{prefix}_small")
    medium = s2.number_input("Medium", min_value=0.0, max_value=100.0, value=30.0, key=f"{prefix}_medium")
    large = s3.number_input("Large", min_value=0.0, max_value=100.0, value=10.0, key=f"{prefix}_large")

    with st.expander("📦 Storage Profile"):
        t1, t2, t3, t4 = st.columns(4)
        storage = StorageUnits(
            small_units=int(t1.number_input("Small Units", min_value=0, value=0, key=f"{prefix}_su")),
            medium_units=int(t2.number_input("Medium Units", min_value=0, value=0, key=f"{prefix}_mu")),
            large_units=int(t3.number_input("Large Units", min_value=0, value=0, key=f"{prefix}_lu")),
            pallets=int(t4.number_input("Pallets", min_value=0, value=0, key=f"{prefix}_pal")),
        )

    return UsageProfile(
        monthly_orders=int(monthly_orders),
        average_units_per_order=float(units),
        average_order_value=float(aov),
        shipping_model=ShippingModel.STANDARD if model_label == "Standard Rates" else ShippingModel.CUSTOMER_ACCOUNT,
        shipping_size_mix=SizeMix(small=float(small), medium=float(medium), large=float(large)),
        storage=storage,
    )


# ============================================================================
# SIDEBAR
# ============================================================================
with st.sidebar:
    st.header("⚙️ Settings")
    include_storage = st.toggle("Include storage in monthly total", value=settings.include_storage)
    global_threshold = st.number_input(
        "Discount warning threshold (%)",
        min_value=0.0,
        value=float(settings.discount_thresholds.get('global', 20.0)),
        step=1.0,
    )
    st.divider()
    st.success(f"📋 **{len(schedules)} Rate Cards Loaded**")

engine = QuoteEngine(include_storage=include_storage)

st.title("Fulfillment Quote Tool")
st.caption(f"Quote Engine Active | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3, tab4 = st.tabs(["⚡ Quote Calculator", "🤝 Harmonization", "📋 Rate Cards", "🕑 Quote History"])


# ============================================================================
# TAB 1: QUOTE CALCULATOR
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.6, 1.4], gap="large")

    with col1:
        st.subheader("Client Scope")
        client_name = st.text_input("Client Name", placeholder="Prospect")
        selected_label = st.selectbox("Rate Card", list(schedule_labels), key="quote_rate_card")
        schedule = schedule_labels[selected_label]
        profile = profile_form("quote")

    with col2:
        st.subheader("Monthly Quote")
        breakdown = engine.assemble(schedule, profile)

        with st.container(border=True):
            m1, m2 = st.columns(2)
            m1.metric("Monthly Total", format_currency(breakdown.final_monthly_cost_cents))
            m2.metric("Per Order", format_currency(
                breakdown.fulfillment.selected_branch_cents + breakdown.shipping.blended_cost_per_order_cents
            ))

            for warning in breakdown.warnings:
                st.warning(warning)
            if breakdown.minimum_applied:
                st.info(f"Monthly minimum of {format_currency(breakdown.monthly_minimum_cents)} applied")

            frame = breakdown_frame(breakdown)
            st.dataframe(frame, use_container_width=True, hide_index=True)

            with st.expander("📊 Per-Order Detail"):
                st.caption(f"**AOV branch:** {format_currency(breakdown.fulfillment.aov_branch_cents)}")
                st.caption(f"**Base branch:** {format_currency(breakdown.fulfillment.base_branch_cents)}")
                st.caption(f"**Blended S&H:** {format_currency(breakdown.shipping.blended_cost_per_order_cents)}")

            b1, b2 = st.columns(2)
            with b1:
                st.download_button(
                    "📥 CSV",
                    data=to_csv(frame),
                    file_name=f"quote_{schedule.id}.csv",
                    mime="text/csv",
                    use_container_width=True
                )
            with b2:
                if st.button("💾 Save Quote", use_container_width=True):
                    quote_history.save_quote(schedule, profile, breakdown, client_name=client_name)
                    st.toast("Quote saved successfully")


# ============================================================================
# TAB 2: HARMONIZATION
# ============================================================================
with tab2:
    st.subheader("🤝 Client Harmonization")
    mode = st.radio("Analysis", ["Target monthly price", "Compare rate cards"], horizontal=True)
    thresholds = DiscountThresholds(global_percent=global_threshold)

    h1, h2 = st.columns([1.4, 1.6], gap="large")
    with h1:
        base_label = st.selectbox("Baseline Rate Card", list(schedule_labels), key="harm_base")
        if mode == "Target monthly price":
            target_dollars = st.number_input("Target Monthly Price ($)", min_value=0.0, value=7000.0, step=100.0)
            basis_label = st.radio(
                "Compare Against",
                ["Subtotal (before minimum)", "Final (after minimum)"],
                horizontal=True,
            )
        else:
            other_label = st.selectbox("Target Rate Card", list(schedule_labels), key="harm_target")
        harm_profile = profile_form("harm")

    with h2:
        if mode == "Target monthly price":
            result = analyze_target_price(
                schedule_labels[base_label],
                harm_profile,
                int(round(target_dollars * 100)),
                thresholds=thresholds,
                include_storage=include_storage,
                basis=PriceBasis.SUBTOTAL if basis_label.startswith("Subtotal") else PriceBasis.FINAL,
            )
        else:
            result = compare_schedules(
                schedule_labels[base_label],
                schedule_labels[other_label],
                harm_profile,
                thresholds=thresholds,
                include_storage=include_storage,
            )

        with st.container(border=True):
            m1, m2, m3 = st.columns(3)
            m1.metric("New Calculated Price", format_currency(result.new_price_cents))
            m2.metric("Difference", format_currency(result.delta_cents))
            m3.metric("Required Discount", f"{result.required_discount_percent:.2f}%")

            for warning in result.warnings:
                st.warning(warning)

            st.dataframe(comparison_frame(result), use_container_width=True, hide_index=True)

            if result.proposed_schedule is not None:
                with st.expander("📝 Proposed Rate Card"):
                    st.json(result.proposed_schedule.to_dict())
                    if st.button("💾 Save Proposed Rate Card"):
                        try:
                            schedule_service.create_schedule(result.proposed_schedule)
                            st.toast("Harmonized rate card saved successfully!")
                        except ScheduleConflictError as e:
                            st.error(str(e))


# ============================================================================
# TAB 3: RATE CARDS
# ============================================================================
with tab3:
    st.subheader("📋 Rate Cards")
    cards = pd.DataFrame([
        {
            'ID': s.id,
            'Name': s.name,
            'Version': s.version,
            'Monthly Minimum': s.monthly_minimum_cents / 100,
            'AOV %': s.prices.fulfillment.aov_percentage * 100,
            'Base Fee': s.prices.fulfillment.base_fee_cents / 100,
            'Per Add. Unit': s.prices.fulfillment.per_additional_unit_cents / 100,
            'Notes': s.version_notes or '',
        }
        for s in schedules
    ])
    st.dataframe(cards, use_container_width=True, hide_index=True)


# ============================================================================
# TAB 4: QUOTE HISTORY
# ============================================================================
with tab4:
    st.subheader("🕑 Quote History")
    records = quote_history.list_quotes()
    if records:
        history = quotes_frame(records)
        st.dataframe(history, use_container_width=True, hide_index=True)
        st.download_button(
            "📥 Export History",
            data=to_csv(history),
            file_name="quote_history.csv",
            mime="text/csv",
        )
    else:
        st.info("No quotes saved yet. Create your first quote to see it here.")
