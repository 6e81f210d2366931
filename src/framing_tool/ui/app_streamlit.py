"""
Streamlit UI for the framing order generator.

Features:
- Dimensions, readymade, moulding, mat, printing, mount, extras and labour inputs
- Live subtotal with pricing breakdown
- Multi-line order with discount, CSV export and Shopify order creation
- Debounced customer search
- Catalog browser and system info
"""
import streamlit as st
from datetime import datetime

from framing_tool.config.settings import get_settings
from framing_tool.data.catalog_loader import catalog_summary, catalog_to_frame
from framing_tool.engine import Category, MatType, PricingEngine, circumference
from framing_tool.engine import selection as transitions
from framing_tool.engine.models import DEFAULT_LENGTH, DEFAULT_WIDTH, CatalogProduct
from framing_tool.engine.numbers import format_money
from framing_tool.exceptions import FramingToolError
from framing_tool.logging_config import get_logger, setup_logging
from framing_tool.order import OrderAccumulator, OrderSubmitter
from framing_tool.services import DebouncedCustomerSearch, ShopifyClient
from framing_tool.services.shopify_client import load_session_catalog


st.set_page_config(
    page_title="Order Generator",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_settings_cached():
    """Get cached settings."""
    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        enable_file_logging=settings.log_dir is not None,
    )
    return settings


@st.cache_resource
def get_client():
    """Get cached Shopify client, or None when running from a catalog file."""
    settings = get_settings_cached()
    return ShopifyClient(settings) if settings.has_shop else None


@st.cache_resource
def get_engine():
    """Load the session catalog once and build the engine around it."""
    settings = get_settings_cached()
    return PricingEngine(load_session_catalog(settings, get_client()), settings)


logger = get_logger("ui")

try:
    settings = get_settings_cached()
    engine = get_engine()
    client = get_client()
except FramingToolError as e:
    st.error(f"System Error: {e}")
    st.stop()

catalog = engine.catalog


# ============================================================================
# SESSION STATE
# ============================================================================
if 'order' not in st.session_state:
    st.session_state.order = OrderAccumulator(currency=settings.currency)
if 'form_version' not in st.session_state:
    st.session_state.form_version = 0
if 'submitting' not in st.session_state:
    st.session_state.submitting = False
if 'last_result' not in st.session_state:
    st.session_state.last_result = None
if 'submission_error' not in st.session_state:
    st.session_state.submission_error = None
if 'customer_search' not in st.session_state and client is not None:
    st.session_state.customer_search = DebouncedCustomerSearch(
        client, delay=settings.search_debounce_ms / 1000
    )

if 'submitter' not in st.session_state and client is not None:
    st.session_state.submitter = OrderSubmitter(st.session_state.order, client)

order: OrderAccumulator = st.session_state.order
submitter = st.session_state.get('submitter')


def widget_key(name: str) -> str:
    """Form widget keys change after every commit/reset so widgets return to defaults."""
    return f"{name}_{st.session_state.form_version}"


def reset_form():
    st.session_state.form_version += 1


def request_submission():
    """Button callback: the order is sent on the next run, with Create Order disabled."""
    st.session_state.submitting = True


def option_select(selection, category: Category, product: CatalogProduct):
    """Dropdown for one product with an "n/a" entry; returns the updated selection."""
    prices = {o.option_title: o.price for o in product.options}
    choice = st.selectbox(
        product.title,
        options=["0"] + list(prices),
        format_func=lambda v: "n/a" if v == "0" else f"{v} - {format_money(prices[v])}",
        key=widget_key(f"{category.value}-{product.title}"),
    )
    return transitions.set_option(selection, category, product.title, choice)


# ============================================================================
# CUSTOM CSS & STYLING
# ============================================================================
st.markdown("""
    <style>
        .block-container {
            padding-top: 2rem;
            padding-bottom: 2rem;
        }
        h1 {
            font-family: 'Helvetica Neue', Helvetica, Arial, sans-serif;
            font-weight: 700;
        }
        .stMetric {
            background-color: #f0f2f6;
            padding: 10px;
            border-radius: 5px;
            border-left: 5px solid #ff4b4b;
        }
    </style>
""", unsafe_allow_html=True)


# ============================================================================
# SIDEBAR: Customer
# ============================================================================
with st.sidebar:
    st.header("👤 Customer")
    st.markdown("[Create new customer](shopify://admin/customers/new)")

    search = st.session_state.get('customer_search')
    if search is None:
        st.info("Customer search needs a Shopify connection.")
    else:
        st.text_input(
            "Search existing customer",
            key="customer_query",
            placeholder="Search",
            on_change=lambda: search.update(st.session_state.customer_query),
        )

        @st.fragment(run_every=1.0)
        def customer_results():
            if search.last_error:
                st.warning(search.last_error)
            for option in search.options:
                if st.button(option.label, key=f"customer_{option.customer.id}", use_container_width=True):
                    order.select_customer(search.select(option.value))
                    st.rerun(scope="app")

        customer_results()

    selected_customer = order.order.customer
    if selected_customer:
        with st.container(border=True):
            st.markdown("**Selected Customer:**")
            st.write(f"Name: {selected_customer.first_name} {selected_customer.last_name}")
            st.markdown(f"[customer info]({selected_customer.admin_url})")
            if st.button("Clear customer"):
                order.select_customer(None)
                if search is not None:
                    search.reset()
                st.rerun()


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Order Generator")
st.caption(f"Currency {settings.currency} | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3 = st.tabs(["🖼️ Order Builder", "📚 Catalog", "📊 System"])


# ============================================================================
# TAB 1: ORDER BUILDER
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.8, 1.2], gap="large")

    with col1:
        selection = transitions.reset_fields()

        # Dimensions
        with st.container(border=True):
            st.markdown("##### 📐 Dimensions")
            c1, c2 = st.columns(2)
            with c1:
                width = st.text_input("Width", value=DEFAULT_WIDTH, key=widget_key("width"))
            with c2:
                length = st.text_input("Length", value=DEFAULT_LENGTH, key=widget_key("length"))
            selection = transitions.set_dimension(selection, "width", width)
            selection = transitions.set_dimension(selection, "length", length)
            st.caption(f"Circumference: {circumference(selection):.2f}")

        # Readymade
        if catalog.readymade:
            with st.container(border=True):
                st.markdown("##### 🖼️ Readymade")
                for product in catalog.readymade:
                    selection = option_select(selection, Category.READYMADE, product)

        # Custom moulding
        with st.container(border=True):
            st.markdown("##### 🪵 Custom Moulding")
            c1, c2 = st.columns(2)
            with c1:
                unit_price = st.text_input("Moulding Unit Price ($)", value="0", key=widget_key("moulding"))
                selection = transitions.set_moulding_unit_price(selection, unit_price)
            with c2:
                for product in catalog.glass:
                    selection = option_select(selection, Category.GLASS, product)

        # Extras
        with st.container(border=True):
            st.markdown("##### ➕ Extras")
            mat_choice = st.radio(
                "Mat",
                options=[MatType.STOCK.value, MatType.CUSTOM.value],
                format_func=lambda m: "Stock Mat" if m == MatType.STOCK.value else "Custom Mat",
                horizontal=True,
                key=widget_key("mat_type"),
            )
            if MatType(mat_choice) is MatType.STOCK:
                for product in catalog.mat:
                    selection = option_select(selection, Category.MAT, product)
                selection = transitions.set_mat_type(selection, MatType.STOCK)
            else:
                selection = transitions.set_mat_type(selection, MatType.CUSTOM)
                mat_price = st.text_input("Custom Mat Price ($)", value="0", key=widget_key("custom_mat"))
                selection = transitions.set_custom_mat_price(selection, mat_price)

            for product in catalog.printing:
                selection = option_select(selection, Category.PRINTING, product)
            for product in catalog.mount:
                selection = option_select(selection, Category.MOUNT, product)

            if catalog.extras:
                extra_cols = st.columns(len(catalog.extras))
                for col, product in zip(extra_cols, catalog.extras):
                    with col:
                        st.markdown(f"**{product.title}**")
                        for option in product.options:
                            checked = st.checkbox(
                                f"{option.option_title} - {format_money(option.price)}",
                                key=widget_key(f"extras-{product.title}-{option.option_title}"),
                            )
                            selection = transitions.set_extra(selection, product.title, option.option_title, checked)

            c1, c2 = st.columns(2)
            with c1:
                hours = st.text_input("Labour (hours)", value="0", key=widget_key("labour"))
            with c2:
                rate = st.text_input("Labour Rate ($)", value="0", key=widget_key("labour_rate"))
            selection = transitions.set_labour_hours(selection, hours)
            selection = transitions.set_labour_rate(selection, rate)

        # Subtotal
        breakdown = engine.calculate(selection)
        with st.container(border=True):
            st.metric("Subtotal", format_money(breakdown.subtotal))
            with st.expander("📊 Pricing Breakdown"):
                st.text(breakdown.get_trace_text())

            b1, b2 = st.columns(2)
            with b1:
                if st.button("➕ Add to Order", type="primary", use_container_width=True):
                    order.add_line_item(selection, breakdown.subtotal)
                    st.session_state.last_result = None
                    reset_form()
                    st.rerun()
            with b2:
                if st.button("↺ Reset Fields", use_container_width=True):
                    reset_form()
                    st.rerun()

    with col2:
        st.subheader("Order Details")

        with st.container(border=True):
            if order.line_items:
                for i, item in enumerate(order.line_items):
                    r1, r2 = st.columns([5, 1])
                    r1.markdown(f"**{i + 1}.** {item.describe()}  \n{format_money(item.subtotal)}")
                    if r2.button("✕", key=f"remove_{i}"):
                        order.remove_line_item(i)
                        st.rerun()
                    st.divider()
            else:
                st.info("🛒 Order is empty")
                st.caption("Configure a frame and add it to the order.")

            st.metric("Total", format_money(order.total))

            discount = st.text_input("Discount ($)", value=order.order.discount, key=widget_key("discount"))
            if discount != order.order.discount:
                order.set_discount(discount)
            if order.order.show_adjusted_total:
                st.markdown(f"### Adjusted Total: {format_money(order.adjusted_total)}")

            if order.line_items:
                st.download_button(
                    "📥 CSV",
                    data=order.to_frame().to_csv(index=False),
                    file_name=f"order_{datetime.now().strftime('%Y%m%d_%H%M')}.csv",
                    mime="text/csv",
                    use_container_width=True
                )

                create_disabled = client is None or st.session_state.submitting
                st.button(
                    "Create Order",
                    type="primary",
                    use_container_width=True,
                    disabled=create_disabled,
                    on_click=request_submission,
                )

                # Runs on the rerun after the click, with the button above already disabled
                if st.session_state.submitting and submitter is not None:
                    with st.spinner("Creating order..."):
                        try:
                            result = submitter.submit()
                            st.session_state.last_result = result
                            st.session_state.submission_error = None
                            if result.success:
                                if search is not None:
                                    search.reset()
                                reset_form()
                        except FramingToolError as e:
                            logger.error(f"Order submission failed: {e}")
                            st.session_state.submission_error = f"Order submission failed: {e}"
                        finally:
                            st.session_state.submitting = False
                    st.rerun()

            if st.button("🗑️ Reset Order", use_container_width=True):
                order.reset_everything()
                st.session_state.last_result = None
                st.session_state.submission_error = None
                st.session_state.submitting = False
                if search is not None:
                    search.reset()
                reset_form()
                st.rerun()

        if st.session_state.submission_error:
            st.error(st.session_state.submission_error)
        result = st.session_state.last_result
        if result is not None:
            if result.success:
                st.success(f"Order {result.order_name or result.order_id} created")
            else:
                for error in result.user_errors:
                    field = ".".join(error.get("field") or [])
                    st.error(f"{field}: {error.get('message')}" if field else error.get("message"))


# ============================================================================
# TAB 2: CATALOG EXPLORER
# ============================================================================
with tab2:
    st.subheader("📚 Catalog")

    category_filter = st.selectbox(
        "Category",
        options=["ALL"] + [c.value for c in Category],
        label_visibility="collapsed",
    )
    catalog_display = catalog_to_frame(catalog, None if category_filter == "ALL" else category_filter)
    st.dataframe(catalog_display, use_container_width=True, hide_index=True, height=600)
    st.caption(f"Options: {len(catalog_display):,}")


# ============================================================================
# TAB 3: SYSTEM INFO
# ============================================================================
with tab3:
    st.header("System Status")

    summary = catalog_summary(catalog)
    cols = st.columns(len(summary))
    for col, (category, count) in zip(cols, summary.items()):
        col.metric(category.title(), count)

    st.divider()
    st.write(f"**Catalog source:** {settings.shop if settings.has_shop else settings.catalog_path}")
    st.write(f"**Moulding:** {settings.moulding_stick_length}-unit sticks"
             f"{' (minimum order)' if settings.moulding_min_order else ' (billed by perimeter)'}")
    st.write(f"**Customer search debounce:** {settings.search_debounce_ms} ms")

    if st.button("🔨 Reload Catalog", type="secondary"):
        get_engine.clear()
        st.toast("Catalog reloaded")
        st.rerun()
